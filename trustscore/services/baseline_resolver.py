"""Baseline resolver: industry, hybrid and team baselines.

Hybrid blending
---------------
  employer row missing or sample = 0  →  employer_weight = 0      (pure industry)
  sample < 5                          →  employer_weight = 0.25
  otherwise                           →  employer_weight = min(0.7, sample / 100)

  industry_weight = 1 − employer_weight
  dim = clamp(round(employer_weight × employer.dim + industry_weight × industry.dim))

Lookups are cached per environment namespace for ``cache_ttl_baseline``
seconds. Recalculation rewrites the stored rows and invalidates the cache.
"""
import logging
from decimal import Decimal
from typing import Iterable, Optional

from trustscore.config import get_settings
from trustscore.database.orm import EmployerBaselineRow, IndustryBaselineRow
from trustscore.models.signals import DIMENSION_NAMES, Baseline, BehavioralVector
from trustscore.scoring.utils import to_decimal, to_score
from trustscore.services.facts_repository import FactsRepository
from trustscore.services.redis_cache import CacheKeys, RedisCache
from trustscore.services.signal_aggregator import tenure_months

logger = logging.getLogger(__name__)

BASELINE_MODEL_VERSION = "behavioral_baseline_v1"

EMPLOYER_SAMPLE_THRESHOLD = 5
MIN_EMPLOYER_WEIGHT = Decimal("0.25")
MAX_EMPLOYER_WEIGHT = Decimal("0.7")

MIN_INDUSTRY_SAMPLE = 50
MIN_EMPLOYER_SAMPLE = 5

# Structural defaults by industry (used when no baseline row exists)
INDUSTRY_DEFAULTS: dict[str, dict[str, float]] = {
    "corporate": {"avg_tenure_months": 24.0, "avg_verified_count": 1.0, "avg_reference_count": 0.0},
    "healthcare": {"avg_tenure_months": 30.0, "avg_verified_count": 1.0, "avg_reference_count": 0.0},
    "hospitality": {"avg_tenure_months": 14.0, "avg_verified_count": 1.0, "avg_reference_count": 0.0},
    "retail": {"avg_tenure_months": 16.0, "avg_verified_count": 1.0, "avg_reference_count": 0.0},
    "warehouse_logistics": {"avg_tenure_months": 18.0, "avg_verified_count": 1.0, "avg_reference_count": 0.0},
    "skilled_trades": {"avg_tenure_months": 28.0, "avg_verified_count": 1.0, "avg_reference_count": 0.0},
    "security": {"avg_tenure_months": 20.0, "avg_verified_count": 1.0, "avg_reference_count": 0.0},
}
_NEUTRAL_STRUCTURE = {"avg_tenure_months": 24.0, "avg_verified_count": 1.0, "avg_reference_count": 0.0}


def normalize_industry_key(value: Optional[str]) -> str:
    """Trimmed lowercase industry key; empty values fall back to ``default_industry``."""
    key = str(value).strip().lower() if value is not None else ""
    return key or get_settings().default_industry.strip().lower()


def default_industry_baseline(industry_key: str) -> Baseline:
    """Built-in baseline: neutral 50 dims plus the industry's structural defaults."""
    structure = INDUSTRY_DEFAULTS.get(industry_key, _NEUTRAL_STRUCTURE)
    return Baseline(industry_key=industry_key, sample_size=0, **structure)


def hybrid_weights(employer_sample: Optional[int]) -> tuple[Decimal, Decimal]:
    """(employer_weight, industry_weight); a missing or empty sample is pure industry."""
    sample = employer_sample or 0
    if sample <= 0:
        employer_weight = Decimal(0)
    elif sample < EMPLOYER_SAMPLE_THRESHOLD:
        employer_weight = MIN_EMPLOYER_WEIGHT
    else:
        employer_weight = min(MAX_EMPLOYER_WEIGHT, Decimal(sample) / Decimal(100))
    return employer_weight, Decimal(1) - employer_weight


def blend_baselines(
    industry: Baseline,
    employer: Optional[Baseline],
    employer_id: str,
) -> Baseline:
    """Weighted blend of an employer baseline into an industry baseline."""
    employer_weight, industry_weight = hybrid_weights(employer.sample_size if employer else 0)
    source = employer or industry

    def blend(name: str) -> int:
        return to_score(
            employer_weight * to_decimal(getattr(source, name))
            + industry_weight * to_decimal(getattr(industry, name))
        )

    return industry.model_copy(update={
        **{name: float(blend(name)) for name in DIMENSION_NAMES},
        "employer_id": employer_id,
        "sample_size": source.sample_size if employer else industry.sample_size,
        "employer_weight": float(employer_weight),
        "industry_weight": float(industry_weight),
    })


def aggregate_baseline(
    vectors: Iterable[BehavioralVector],
    industry_key: str,
    employer_id: Optional[str] = None,
) -> Optional[Baseline]:
    """Mean of each dimension over ``vectors``, or None when there are none."""
    vector_list = list(vectors)
    if not vector_list:
        return None
    n = Decimal(len(vector_list))
    dims = {
        name: float(to_score(sum(to_decimal(getattr(v, name)) for v in vector_list) / n))
        for name in DIMENSION_NAMES
    }
    return Baseline(
        industry_key=industry_key,
        employer_id=employer_id,
        sample_size=len(vector_list),
        **dims,
    )


def _baseline_from_row(row, industry_key: str, employer_id: Optional[str] = None) -> Baseline:
    defaults = INDUSTRY_DEFAULTS.get(industry_key, _NEUTRAL_STRUCTURE)
    return Baseline(
        industry_key=industry_key,
        employer_id=employer_id,
        avg_tenure_months=row.avg_tenure_months if row.avg_tenure_months is not None
        else defaults["avg_tenure_months"],
        avg_verified_count=row.avg_verified_count if row.avg_verified_count is not None
        else defaults["avg_verified_count"],
        avg_reference_count=row.avg_reference_count if row.avg_reference_count is not None
        else defaults["avg_reference_count"],
        sample_size=row.sample_size,
        **{name: getattr(row, name) for name in DIMENSION_NAMES},
    )


class BaselineResolver:
    """Resolve comparison baselines for one environment."""

    def __init__(
        self,
        facts: FactsRepository,
        cache: Optional[RedisCache] = None,
        ttl_seconds: Optional[int] = None,
    ):
        self.facts = facts
        self.cache = cache
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else get_settings().cache_ttl_baseline

    @property
    def namespace(self) -> str:
        return self.facts.environment.namespace

    def _cached(self, key: str, compute) -> Baseline:
        if self.cache is not None:
            hit = self.cache.get(key, Baseline)
            if hit is not None:
                return hit
        value = compute()
        if self.cache is not None:
            self.cache.set(key, value, self.ttl_seconds)
        return value

    # ── lookups ──────────────────────────────────────────────────────────────

    def resolve_industry_baseline(self, industry: Optional[str]) -> Baseline:
        key = normalize_industry_key(industry)

        def compute() -> Baseline:
            row = self.facts.industry_baseline_row(key)
            if row is None:
                return default_industry_baseline(key)
            return _baseline_from_row(row, key)

        return self._cached(CacheKeys.industry_baseline(self.namespace, key), compute)

    def _employer_baseline(self, employer_id: str, industry_key: str) -> Optional[Baseline]:
        row = self.facts.employer_baseline_row(employer_id)
        if row is None:
            return None
        return _baseline_from_row(row, industry_key, employer_id)

    def resolve_hybrid_baseline(self, industry: Optional[str], employer_id: Optional[str]) -> Baseline:
        """Industry baseline blended with the employer's; pure industry without an employer."""
        key = normalize_industry_key(industry)
        if not employer_id:
            return self.resolve_industry_baseline(key)

        def compute() -> Baseline:
            industry_baseline = self.resolve_industry_baseline(key)
            employer = self._employer_baseline(employer_id, key)
            return blend_baselines(industry_baseline, employer, employer_id)

        return self._cached(CacheKeys.hybrid_baseline(self.namespace, key, employer_id), compute)

    def employer_industry(self, employer_id: Optional[str]) -> str:
        if not employer_id:
            return normalize_industry_key(None)
        account = self.facts.employer_account(employer_id)
        return normalize_industry_key(account.industry_key if account is not None else None)

    def resolve_team_baseline(self, employer_id: str) -> Baseline:
        """Structural averages of the employer's verified workforce.

        Behavioral dims come from the employer's own baseline row when it has
        a sample, else from the industry baseline.
        """
        def compute() -> Baseline:
            industry_key = self.employer_industry(employer_id)
            industry_baseline = self.resolve_industry_baseline(industry_key)
            employer = self._employer_baseline(employer_id, industry_key)
            dims_source = employer if employer is not None and employer.sample_size > 0 else industry_baseline

            records = self.facts.employer_workforce(employer_id)
            members = {r.entity_id for r in records}
            if records:
                avg_tenure = sum(tenure_months(r.start_date, r.end_date) for r in records) / len(records)
                avg_verified = len(records) / len(members)
                avg_refs = self.facts.responded_reference_count(members) / len(members)
            else:
                avg_tenure = industry_baseline.avg_tenure_months
                avg_verified = 1.0
                avg_refs = 0.0

            return dims_source.model_copy(update={
                "industry_key": industry_key,
                "employer_id": employer_id,
                "avg_tenure_months": avg_tenure,
                "avg_verified_count": avg_verified,
                "avg_reference_count": avg_refs,
                "sample_size": len(members),
            })

        return self._cached(CacheKeys.team_baseline(self.namespace, employer_id), compute)

    # ── invalidation ─────────────────────────────────────────────────────────

    def invalidate_employer(self, employer_id: str) -> int:
        if self.cache is None:
            return 0
        return sum(self.cache.delete_pattern(p) for p in CacheKeys.employer_patterns(self.namespace, employer_id))

    def invalidate_industry(self, industry: Optional[str]) -> int:
        if self.cache is None:
            return 0
        key = normalize_industry_key(industry)
        return sum(self.cache.delete_pattern(p) for p in CacheKeys.industry_patterns(self.namespace, key))

    # ── recalculation ────────────────────────────────────────────────────────

    def _save(self, model, key_columns: tuple[str, ...], baseline: Baseline, **keys) -> None:
        values = {
            **keys,
            **baseline.dimensions(),
            "sample_size": baseline.sample_size,
            "model_version": BASELINE_MODEL_VERSION,
        }
        self.facts.save_baseline(model, key_columns, values)

    def recalculate_industry_baseline(self, industry: Optional[str]) -> Optional[Baseline]:
        """Rebuild the industry baseline from stored vectors; None below 50 samples."""
        key = normalize_industry_key(industry)
        vectors = self.facts.vectors_for_industry(key)
        if len(vectors) < MIN_INDUSTRY_SAMPLE:
            logger.info(f"Industry {key}: insufficient sample ({len(vectors)} < {MIN_INDUSTRY_SAMPLE})")
            return None
        baseline = aggregate_baseline(vectors, key)
        self._save(IndustryBaselineRow, ("industry_key",), baseline, industry_key=key)
        self.invalidate_industry(key)
        logger.info(f"Industry baseline recalculated: {key} (n={baseline.sample_size})")
        return baseline

    def recalculate_employer_baseline(self, employer_id: str) -> Optional[Baseline]:
        """Rebuild the employer baseline from its workforce; None below 5 samples."""
        industry_key = self.employer_industry(employer_id)
        vectors = self.facts.vectors_for_employer(employer_id)
        if len(vectors) < MIN_EMPLOYER_SAMPLE:
            logger.info(
                f"Employer {employer_id}: insufficient sample ({len(vectors)} < {MIN_EMPLOYER_SAMPLE})"
            )
            return None
        baseline = aggregate_baseline(vectors, industry_key, employer_id)
        self._save(
            EmployerBaselineRow,
            ("employer_id",),
            baseline,
            employer_id=employer_id,
            industry_key=industry_key,
        )
        self.invalidate_employer(employer_id)
        logger.info(f"Employer baseline recalculated: {employer_id} (n={baseline.sample_size})")
        return baseline
