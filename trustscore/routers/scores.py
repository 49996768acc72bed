"""Production scoring endpoints."""
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from trustscore.database.connection import get_session_factory
from trustscore.models import ErrorResponse, Production, ScoreRecord, ScoreType, ScoringFailure
from trustscore.models.enums import EnvironmentName
from trustscore.pipelines import ScoringPipeline, build_pipeline
from trustscore.services import ScoreRepository, get_redis_cache

# ── response schema ───────────────────────────────────────────────────────────


class RiskScoreResponse(BaseModel):
    """Overall risk for one entity, with its audit trail."""

    overall: int
    components: dict[str, int]
    fraud_penalty: float
    confidence: int
    sufficient_data: bool
    model_version: str
    weights: dict[str, float]


class TeamFitResponse(BaseModel):
    alignment_score: int
    structural_score: int
    behavioral_score: Optional[int] = None
    tenure_ratio: float
    verified_ratio: float
    reference_ratio: float
    team_sample_size: int
    model_version: str


class HiringConfidenceResponse(BaseModel):
    composite_score: int
    alignment_score: float
    risk_score: float
    baseline_alignment: float
    model_version: str


class ProfileStrengthResponse(BaseModel):
    score: int
    components: dict[str, float]
    fraud_penalty: float
    model_version: str


def _pipeline() -> ScoringPipeline:
    return build_pipeline(get_session_factory(), Production(), get_redis_cache())


def _failure_response(failure: ScoringFailure) -> JSONResponse:
    """Fetch and write failures map to 502; the body names the failing stage."""
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=ErrorResponse(
            detail=failure.error,
            error_code="scoring_failed",
            stage=failure.stage,
        ).model_dump(),
    )


router = APIRouter(prefix="/api/v1/entities")


@router.post(
    "/{entity_id}/risk",
    response_model=RiskScoreResponse,
    responses={502: {"model": ErrorResponse}},
    summary="Compute Risk Score",
    tags=["Scores"],
)
def compute_risk(entity_id: str, tenant_id: Optional[str] = Query(default=None)):
    """Compute and persist the overall risk score.

    With a ``tenant_id`` the tenant's weight configuration is applied.
    """
    result = _pipeline().compute_and_persist_risk(entity_id, tenant_id)
    if isinstance(result, ScoringFailure):
        return _failure_response(result)
    return result.to_dict()


@router.post(
    "/{entity_id}/team-fit",
    response_model=Optional[TeamFitResponse],
    summary="Compute Team Fit",
    tags=["Scores"],
)
def compute_team_fit(entity_id: str, tenant_id: str = Query(..., min_length=1)):
    """Compute and persist team fit. ``null`` means not enough data to score."""
    result = _pipeline().compute_and_persist_team_fit(entity_id, tenant_id)
    return result.to_dict() if result is not None else None


@router.post(
    "/{entity_id}/hiring-confidence",
    response_model=HiringConfidenceResponse,
    responses={502: {"model": ErrorResponse}},
    summary="Compute Hiring Confidence",
    tags=["Scores"],
)
def compute_hiring_confidence(entity_id: str, tenant_id: Optional[str] = Query(default=None)):
    result = _pipeline().compute_and_persist_hiring_confidence(entity_id, tenant_id)
    if isinstance(result, ScoringFailure):
        return _failure_response(result)
    return result.to_dict()


@router.post(
    "/{entity_id}/profile-strength",
    response_model=ProfileStrengthResponse,
    responses={502: {"model": ErrorResponse}},
    summary="Compute Profile Strength",
    tags=["Scores"],
)
def compute_profile_strength(entity_id: str, version: str = Query(default="v1")):
    try:
        result = _pipeline().compute_and_persist_profile_strength(entity_id, version=version)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    if isinstance(result, ScoringFailure):
        return _failure_response(result)
    return result.to_dict()


@router.get(
    "/{entity_id}/scores/{score_type}",
    response_model=ScoreRecord,
    summary="Get Latest Score",
    tags=["Scores"],
)
def get_latest_score(
    entity_id: str,
    score_type: ScoreType,
    tenant_id: Optional[str] = Query(default=None),
    sandbox_session_id: Optional[str] = Query(default=None),
):
    """Latest stored score. Sandbox scores need their session id and expire with it."""
    target = EnvironmentName.SANDBOX if sandbox_session_id else EnvironmentName.PRODUCTION
    repository = ScoreRepository(get_session_factory(), target)
    record = repository.get_latest(
        entity_id,
        score_type,
        tenant_id=tenant_id,
        sandbox_session_id=sandbox_session_id,
    )
    if record is None:
        raise HTTPException(status_code=404, detail=f"No {score_type.value} score for {entity_id}")
    return record
