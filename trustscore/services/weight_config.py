"""Weight configuration resolver for the config-weighted risk composite.

Fallback order (see ``choose_risk_model_config``):
  1. employer override: only if the account allows overrides AND an enabled
     override row exists
  2. industry preset (employer_id NULL, keyed by industry)
  3. built-in default, all weights 1

The result is always a fully populated ``RiskModelConfig``.
"""
import logging
from typing import Any, Optional

from trustscore.config import get_settings
from trustscore.models.signals import RiskModelConfig
from trustscore.services.baseline_resolver import normalize_industry_key
from trustscore.services.facts_repository import FactsRepository
from trustscore.services.redis_cache import CacheKeys, RedisCache

logger = logging.getLogger(__name__)

DEFAULT_RISK_MODEL_CONFIG = RiskModelConfig()

_WEIGHT_COLUMNS = {
    "tenure": "tenure_weight",
    "reference": "reference_weight",
    "rehire": "rehire_weight",
    "dispute": "dispute_weight",
    "gap": "gap_weight",
    "fraud": "fraud_weight",
}


def config_from_row(row: Any, override_enabled: bool) -> RiskModelConfig:
    """Stored weights; missing, non-numeric or non-positive ones fall back to 1."""
    return RiskModelConfig(
        override_enabled=override_enabled,
        **{name: getattr(row, column, None) for name, column in _WEIGHT_COLUMNS.items()},
    )


def choose_risk_model_config(
    override_allowed: bool,
    override_row: Optional[Any],
    preset_row: Optional[Any],
) -> RiskModelConfig:
    """Apply the fallback order to already-fetched inputs."""
    if override_allowed is True and override_row is not None and getattr(override_row, "override_enabled", False):
        return config_from_row(override_row, override_enabled=True)
    if preset_row is not None:
        return config_from_row(preset_row, override_enabled=False)
    return DEFAULT_RISK_MODEL_CONFIG


class WeightConfigResolver:
    """Fetch, choose and cache risk weights for one environment."""

    def __init__(
        self,
        facts: FactsRepository,
        cache: Optional[RedisCache] = None,
        ttl_seconds: Optional[int] = None,
    ):
        self.facts = facts
        self.cache = cache
        self.ttl_seconds = (
            ttl_seconds if ttl_seconds is not None else get_settings().cache_ttl_weight_config
        )

    def resolve(self, employer_id: Optional[str], industry: Optional[str]) -> RiskModelConfig:
        industry_key = normalize_industry_key(industry)
        key = CacheKeys.risk_weights(self.facts.environment.namespace, employer_id, industry_key)
        if self.cache is not None:
            hit = self.cache.get(key, RiskModelConfig)
            if hit is not None:
                return hit

        override_allowed = False
        override_row = None
        if employer_id:
            account = self.facts.employer_account(employer_id)
            override_allowed = bool(account is not None and account.risk_override_allowed)
            if override_allowed:
                override_row = self.facts.override_config_row(employer_id)
        preset_row = self.facts.industry_preset_row(industry_key)

        config = choose_risk_model_config(override_allowed, override_row, preset_row)
        logger.debug(
            f"Risk weights for employer={employer_id} industry={industry_key}: "
            f"override={config.override_enabled}"
        )
        if self.cache is not None:
            self.cache.set(key, config, self.ttl_seconds)
        return config

    def invalidate(self, employer_id: Optional[str], industry: Optional[str]) -> bool:
        if self.cache is None:
            return False
        key = CacheKeys.risk_weights(
            self.facts.environment.namespace, employer_id, normalize_industry_key(industry)
        )
        return self.cache.delete(key)
