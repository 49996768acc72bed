"""Sandbox session endpoints: create a time-boxed session, run its batch."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from trustscore.database.connection import get_session_factory
from trustscore.models import BatchResult
from trustscore.pipelines import create_sandbox_session, run_batch_scoring
from trustscore.pipelines.batch_scoring import SESSION_EXPIRED, SESSION_NOT_FOUND
from trustscore.services import get_redis_cache

# ── request / response schema ─────────────────────────────────────────────────


class SandboxSessionCreate(BaseModel):
    """Request to open a sandbox session."""

    industry: Optional[str] = None
    employer_id: Optional[str] = None
    ttl_minutes: Optional[int] = Field(default=None, ge=1, le=24 * 60)
    entity_ids: list[str] = Field(default_factory=list)


class SandboxSessionResponse(BaseModel):
    session_id: str
    expires_at: datetime


class BatchRunResponse(BaseModel):
    ok: bool
    error: Optional[str] = None
    succeeded: int
    failed: int
    skipped: int
    timed_out: bool


_ERROR_STATUS = {
    SESSION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    SESSION_EXPIRED: status.HTTP_409_CONFLICT,
}

router = APIRouter(prefix="/api/v1/sandbox")


@router.post(
    "/sessions",
    response_model=SandboxSessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Sandbox Session",
    tags=["Sandbox"],
)
def create_session(payload: SandboxSessionCreate):
    """Open a sandbox session and register the profiles it will score."""
    sandbox = create_sandbox_session(
        get_session_factory(),
        industry=payload.industry,
        employer_id=payload.employer_id,
        ttl_minutes=payload.ttl_minutes,
        entity_ids=payload.entity_ids,
    )
    return SandboxSessionResponse(session_id=sandbox.session_id, expires_at=sandbox.expires_at)


@router.post(
    "/sessions/{session_id}/run",
    response_model=BatchRunResponse,
    summary="Run Sandbox Batch",
    tags=["Sandbox"],
)
def run_session(session_id: str, tenant_id: Optional[str] = Query(default=None)):
    """Score every profile in the session.

    404 for an unknown session, 409 once it has expired. A time-budget stop
    still returns 200 with ``ok=false`` and the partial counts.
    """
    result: BatchResult = run_batch_scoring(
        get_session_factory(),
        session_id,
        tenant_id=tenant_id,
        cache=get_redis_cache(),
    )
    if not result.ok and not result.timed_out:
        code = _ERROR_STATUS.get(result.error, status.HTTP_400_BAD_REQUEST)
        raise HTTPException(status_code=code, detail=result.error)
    return result.to_dict()
