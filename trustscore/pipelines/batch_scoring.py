"""Sandbox session lifecycle and batch scoring.

A batch run scores every profile of a sandbox session through the same
``ScoringPipeline`` used in production, wired to the session's sandbox
namespace. Entities run with bounded parallelism; a failing entity is logged
and counted, never aborts the batch. No new entity starts once the time
budget is spent; entities still running after the budget plus a drain grace
period are abandoned and counted as failed. ``EnvironmentIsolationError``
always propagates.
"""
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from datetime import datetime, timedelta
from typing import Iterable, Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from trustscore.config import get_settings
from trustscore.database.base import new_id
from trustscore.database.orm import SandboxProfile, SandboxSession
from trustscore.models.score import BatchResult, Sandbox, ScoringFailure, as_utc, utcnow
from trustscore.pipelines.scoring_pipeline import ScoringPipeline, build_pipeline
from trustscore.services.baseline_resolver import normalize_industry_key
from trustscore.services.isolation import EnvironmentIsolationError, assert_sandbox
from trustscore.services.redis_cache import RedisCache

logger = structlog.get_logger(__name__)

SUCCEEDED = "succeeded"
FAILED = "failed"
SKIPPED = "skipped"

SESSION_NOT_FOUND = "Session not found"
SESSION_EXPIRED = "Session expired"
NO_PROFILES = "No profiles in session"
TIME_BUDGET_EXCEEDED = "Time budget exceeded"


class SessionNotFoundError(LookupError):
    """No sandbox session with the given id."""


def create_sandbox_session(
    session_factory: sessionmaker,
    industry: Optional[str] = None,
    employer_id: Optional[str] = None,
    ttl_minutes: Optional[int] = None,
    entity_ids: Iterable[str] = (),
    now: Optional[datetime] = None,
) -> Sandbox:
    """Create a time-boxed sandbox session and register its profiles."""
    ttl = ttl_minutes if ttl_minutes is not None else get_settings().sandbox_ttl_minutes
    created = now or utcnow()
    session_id = new_id()
    expires_at = created + timedelta(minutes=ttl)

    with session_factory() as db:
        db.add(SandboxSession(
            id=session_id,
            industry_key=normalize_industry_key(industry),
            employer_id=employer_id or None,
            created_at=created,
            expires_at=expires_at,
            is_sandbox=True,
        ))
        for entity_id in dict.fromkeys(entity_ids):
            db.add(SandboxProfile(sandbox_session_id=session_id, entity_id=entity_id, is_sandbox=True))
        db.commit()

    logger.info("sandbox_session_created", session_id=session_id, expires_at=expires_at.isoformat(),
                industry=normalize_industry_key(industry), employer_id=employer_id)
    return Sandbox(session_id=session_id, expires_at=expires_at)


def load_sandbox_session(session_factory: sessionmaker, session_id: str) -> Sandbox:
    """Return the session's Sandbox environment.

    Raises:
        SessionNotFoundError: If no sandbox session has this id.
    """
    with session_factory() as db:
        row = db.scalars(
            select(SandboxSession).where(
                SandboxSession.id == session_id,
                SandboxSession.is_sandbox.is_(True),
            )
        ).first()
    if row is None:
        raise SessionNotFoundError(session_id)
    return Sandbox(session_id=row.id, expires_at=as_utc(row.expires_at))


def _score_entity(pipeline: ScoringPipeline, entity_id: str, tenant_id: Optional[str]) -> str:
    """Score one profile. Exceptions other than isolation faults become FAILED."""
    log = logger.bind(entity_id=entity_id, environment=pipeline.environment.namespace)
    try:
        if pipeline.facts.behavioral_vector(entity_id) is None:
            log.info("batch_entity_skipped", reason="no behavioral vector")
            return SKIPPED
        risk = pipeline.compute_and_persist_risk(entity_id, tenant_id)
        if isinstance(risk, ScoringFailure):
            log.warning("batch_entity_failed", stage=risk.stage, error=risk.error)
            return FAILED
        pipeline.compute_and_persist_team_fit(entity_id, tenant_id)
        hiring = pipeline.compute_and_persist_hiring_confidence(entity_id, tenant_id)
        if isinstance(hiring, ScoringFailure):
            log.warning("batch_entity_failed", stage=hiring.stage, error=hiring.error)
            return FAILED
        return SUCCEEDED
    except EnvironmentIsolationError:
        raise
    except Exception as e:
        log.warning("batch_entity_failed", error=str(e), exc_info=True)
        return FAILED


def run_batch_scoring(
    session_factory: sessionmaker,
    session_id: str,
    tenant_id: Optional[str] = None,
    cache: Optional[RedisCache] = None,
    max_workers: Optional[int] = None,
    max_duration_seconds: Optional[float] = None,
    now: Optional[datetime] = None,
) -> BatchResult:
    """Score every profile in a sandbox session.

    Raises:
        EnvironmentIsolationError: On any attempted cross-environment write.
    """
    settings = get_settings()
    workers = max(1, max_workers or settings.batch_max_workers)
    budget = max_duration_seconds if max_duration_seconds is not None else settings.batch_max_duration_seconds
    log = logger.bind(session_id=session_id, tenant_id=tenant_id)

    try:
        with session_factory() as db:
            session = db.scalars(
                select(SandboxSession).where(
                    SandboxSession.id == session_id,
                    SandboxSession.is_sandbox.is_(True),
                )
            ).first()
            if session is None:
                return BatchResult(ok=False, error=SESSION_NOT_FOUND)
            environment = Sandbox(session_id=session.id, expires_at=as_utc(session.expires_at))
            if environment.is_expired(now):
                return BatchResult(ok=False, error=SESSION_EXPIRED)
            employer_id = tenant_id or session.employer_id or None
            entity_ids = list(db.scalars(
                select(SandboxProfile.entity_id).where(
                    SandboxProfile.sandbox_session_id == session_id,
                    SandboxProfile.is_sandbox.is_(True),
                )
            ).all())
    except SQLAlchemyError as e:
        log.error("batch_session_fetch_failed", error=str(e))
        return BatchResult(ok=False, error=str(e))

    if not entity_ids:
        return BatchResult(ok=False, error=NO_PROFILES)

    assert_sandbox(environment)
    pipeline = build_pipeline(session_factory, environment, cache)

    counts = {SUCCEEDED: 0, FAILED: 0, SKIPPED: 0}
    timed_out = False
    deadline = time.monotonic() + budget
    started = time.monotonic()

    def collect(done: Iterable[Future]) -> None:
        for fut in done:
            counts[fut.result()] += 1

    def remaining() -> float:
        return max(0.0, deadline - time.monotonic())

    executor = ThreadPoolExecutor(max_workers=workers)
    try:
        pending: set[Future] = set()
        for entity_id in entity_ids:
            if len(pending) >= workers:
                done, pending = wait(pending, timeout=remaining(), return_when=FIRST_COMPLETED)
                collect(done)
            if time.monotonic() >= deadline:
                timed_out = True
                break
            pending.add(executor.submit(_score_entity, pipeline, entity_id, employer_id))
        done, unfinished = wait(pending, timeout=remaining() + settings.batch_drain_grace_seconds)
        collect(done)
        if unfinished:
            timed_out = True
            counts[FAILED] += len(unfinished)
            log.warning("batch_entities_abandoned", count=len(unfinished))
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    result = BatchResult(
        ok=not timed_out,
        error=TIME_BUDGET_EXCEEDED if timed_out else None,
        succeeded=counts[SUCCEEDED],
        failed=counts[FAILED],
        skipped=counts[SKIPPED],
        timed_out=timed_out,
    )
    log.info("batch_scoring_completed", elapsed_s=round(time.monotonic() - started, 3),
             total=len(entity_ids), **result.to_dict())
    return result
