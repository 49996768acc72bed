"""Single-entity scoring pipeline.

One module for both environments: the production and sandbox callers differ
only in the repositories (and therefore the isolation target) they inject.
For each operation every signal is fetched before anything is computed;
fetch failures and write failures come back as typed results, isolation
violations raise.
"""
from datetime import date
from typing import Optional, Union

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from trustscore.models.enums import ScoreType
from trustscore.models.score import (
    Environment,
    HiringConfidenceResult,
    ProfileStrengthResult,
    RiskScoreResult,
    Sandbox,
    ScoreRecord,
    ScoringFailure,
    TeamFitResult,
)
from trustscore.scoring.behavioral import behavioral_alignment, behavioral_risk_score
from trustscore.scoring.confidence import calculate_confidence
from trustscore.scoring.hiring_confidence import calculate_hiring_confidence
from trustscore.scoring.profile_strength import calculate_profile_strength
from trustscore.scoring.risk_calculator import calculate_overall_risk, calculate_weighted_risk
from trustscore.scoring.team_fit_calculator import calculate_team_fit
from trustscore.services.baseline_resolver import BaselineResolver
from trustscore.services.facts_repository import FactsRepository
from trustscore.services.isolation import EnvironmentIsolationError, assert_sandbox
from trustscore.services.redis_cache import RedisCache
from trustscore.services.score_repository import ScoreRepository
from trustscore.services.signal_aggregator import aggregate_signals
from trustscore.services.weight_config import WeightConfigResolver

logger = structlog.get_logger(__name__)


class ScoringPipeline:
    """Compute and persist scores for one environment."""

    def __init__(
        self,
        facts: FactsRepository,
        scores: ScoreRepository,
        baselines: BaselineResolver,
        weights: WeightConfigResolver,
        as_of: Optional[date] = None,
    ) -> None:
        if scores.target != facts.environment.name:
            raise EnvironmentIsolationError(
                f"{facts.environment.name.value} facts wired to a {scores.target.value} score table"
            )
        self.facts = facts
        self.scores = scores
        self.baselines = baselines
        self.weights = weights
        self.as_of = as_of

    @property
    def environment(self) -> Environment:
        return self.facts.environment

    def _log(self, entity_id: str, tenant_id: Optional[str]):
        return logger.bind(
            entity_id=entity_id,
            tenant_id=tenant_id,
            environment=self.environment.namespace,
        )

    def _persist(self, record: ScoreRecord, log) -> Optional[ScoringFailure]:
        if isinstance(self.facts.environment, Sandbox) or record.sandbox_session_id:
            assert_sandbox(self.environment)
        result = self.scores.upsert(record)
        if not result.ok:
            log.error("score_persist_failed", score_type=record.score_type.value, error=result.error)
            return ScoringFailure(stage="persist", error=result.error or "write failed",
                                  entity_id=record.entity_id)
        return None

    def _signals(self, facts):
        return aggregate_signals(
            facts.jobs,
            facts.references,
            facts.disputes,
            facts.rehire_rows,
            facts.fraud_flags,
            as_of=self.as_of,
        )

    # ── operations ───────────────────────────────────────────────────────────

    def compute_and_persist_risk(
        self,
        entity_id: str,
        tenant_id: Optional[str] = None,
    ) -> Union[RiskScoreResult, ScoringFailure]:
        """Plain risk without a tenant; tenant-weighted risk with one."""
        log = self._log(entity_id, tenant_id)
        try:
            facts = self.facts.fetch_entity_facts(entity_id)
            config = None
            if tenant_id:
                industry = self.baselines.employer_industry(tenant_id)
                config = self.weights.resolve(tenant_id, industry)
        except SQLAlchemyError as e:
            log.error("risk_fetch_failed", error=str(e))
            return ScoringFailure(stage="fetch", error=str(e), entity_id=entity_id)

        signals = self._signals(facts)
        result = (
            calculate_weighted_risk(signals, config) if config is not None
            else calculate_overall_risk(signals)
        )
        record = ScoreRecord.for_environment(
            self.environment,
            entity_id=entity_id,
            tenant_id=tenant_id,
            score_type=ScoreType.RISK,
            value=result.overall,
            breakdown=result.breakdown(),
            model_version=result.model_version,
            confidence=result.confidence,
        )
        failure = self._persist(record, log)
        if failure is not None:
            return failure
        log.info("risk_persisted", overall=result.overall, model_version=result.model_version)
        return result

    def compute_and_persist_team_fit(
        self,
        entity_id: str,
        tenant_id: Optional[str],
    ) -> Optional[TeamFitResult]:
        """Team-fit against the tenant's workforce.

        Returns None ("no opinion", not a failure) when there is no tenant, a
        fetch or write fails, or the candidate has neither verified jobs nor a
        behavioral vector.
        """
        if not tenant_id:
            return None
        log = self._log(entity_id, tenant_id)
        try:
            facts = self.facts.fetch_entity_facts(entity_id)
            team_baseline = self.baselines.resolve_team_baseline(tenant_id)
        except SQLAlchemyError as e:
            log.warning("team_fit_fetch_failed", error=str(e))
            return None

        signals = self._signals(facts)
        if signals.verified_job_count == 0 and facts.vector is None:
            log.info("team_fit_insufficient_data")
            return None

        result = calculate_team_fit(signals, team_baseline, facts.vector)
        record = ScoreRecord.for_environment(
            self.environment,
            entity_id=entity_id,
            tenant_id=tenant_id,
            score_type=ScoreType.TEAM_FIT,
            value=result.alignment_score,
            breakdown=result.breakdown(),
            model_version=result.model_version,
            confidence=calculate_confidence(signals).confidence,
        )
        if self._persist(record, log) is not None:
            return None
        log.info("team_fit_persisted", alignment_score=result.alignment_score)
        return result

    def compute_and_persist_hiring_confidence(
        self,
        entity_id: str,
        tenant_id: Optional[str],
    ) -> Union[HiringConfidenceResult, ScoringFailure]:
        """Team alignment, behavioral risk and hybrid-baseline alignment combined."""
        log = self._log(entity_id, tenant_id)
        try:
            facts = self.facts.fetch_entity_facts(entity_id)
            team_baseline = self.baselines.resolve_team_baseline(tenant_id) if tenant_id else None
            industry = (
                self.baselines.employer_industry(tenant_id) if tenant_id else facts.industry_key
            )
            hybrid = self.baselines.resolve_hybrid_baseline(industry, tenant_id)
        except SQLAlchemyError as e:
            log.error("hiring_confidence_fetch_failed", error=str(e))
            return ScoringFailure(stage="fetch", error=str(e), entity_id=entity_id)

        signals = self._signals(facts)
        alignment = None
        if team_baseline is not None and (signals.verified_job_count > 0 or facts.vector is not None):
            alignment = calculate_team_fit(signals, team_baseline, facts.vector).alignment_score
        risk = baseline_alignment = None
        if facts.vector is not None:
            risk = behavioral_risk_score(facts.vector, hybrid)
            baseline_alignment = behavioral_alignment(facts.vector, hybrid)

        result = calculate_hiring_confidence(alignment, risk, baseline_alignment)
        record = ScoreRecord.for_environment(
            self.environment,
            entity_id=entity_id,
            tenant_id=tenant_id,
            score_type=ScoreType.HIRING_CONFIDENCE,
            value=result.composite_score,
            breakdown=result.breakdown(),
            model_version=result.model_version,
            confidence=calculate_confidence(signals).confidence,
        )
        failure = self._persist(record, log)
        if failure is not None:
            return failure
        log.info("hiring_confidence_persisted", composite_score=result.composite_score)
        return result

    def compute_and_persist_profile_strength(
        self,
        entity_id: str,
        version: str = "v1",
    ) -> Union[ProfileStrengthResult, ScoringFailure]:
        log = self._log(entity_id, None)
        try:
            facts = self.facts.fetch_entity_facts(entity_id)
        except SQLAlchemyError as e:
            log.error("profile_strength_fetch_failed", error=str(e))
            return ScoringFailure(stage="fetch", error=str(e), entity_id=entity_id)

        signals = self._signals(facts)
        result = calculate_profile_strength(signals, version=version)
        record = ScoreRecord.for_environment(
            self.environment,
            entity_id=entity_id,
            score_type=ScoreType.PROFILE_STRENGTH,
            value=result.score,
            breakdown=result.breakdown(),
            model_version=result.model_version,
            confidence=calculate_confidence(signals).confidence,
        )
        failure = self._persist(record, log)
        if failure is not None:
            return failure
        log.info("profile_strength_persisted", score=result.score)
        return result

    def get_latest_score(
        self,
        entity_id: str,
        score_type: ScoreType,
        tenant_id: Optional[str] = None,
    ) -> Optional[ScoreRecord]:
        session_id = self.environment.session_id if isinstance(self.environment, Sandbox) else None
        return self.scores.get_latest(entity_id, score_type, tenant_id=tenant_id,
                                      sandbox_session_id=session_id)


def build_pipeline(
    session_factory: sessionmaker,
    environment: Environment,
    cache: Optional[RedisCache] = None,
    as_of: Optional[date] = None,
) -> ScoringPipeline:
    """Wire repositories and resolvers for ``environment``."""
    facts = FactsRepository(session_factory, environment)
    return ScoringPipeline(
        facts=facts,
        scores=ScoreRepository(session_factory, environment.name),
        baselines=BaselineResolver(facts, cache),
        weights=WeightConfigResolver(facts, cache),
        as_of=as_of,
    )
