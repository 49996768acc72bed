"""Services package - repositories, resolvers, cache and isolation guard."""
from .redis_cache import RedisCache, CacheKeys, get_redis_cache
from .isolation import EnvironmentIsolationError, assert_environment, assert_sandbox
from .facts_repository import EntityFacts, FactsRepository
from .baseline_resolver import BaselineResolver, normalize_industry_key
from .weight_config import WeightConfigResolver, choose_risk_model_config
from .score_repository import ScoreRepository

__all__ = [
    "RedisCache",
    "CacheKeys",
    "get_redis_cache",
    "EnvironmentIsolationError",
    "assert_environment",
    "assert_sandbox",
    "EntityFacts",
    "FactsRepository",
    "BaselineResolver",
    "normalize_industry_key",
    "WeightConfigResolver",
    "choose_risk_model_config",
    "ScoreRepository",
]
