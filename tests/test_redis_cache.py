"""Tests for the Redis cache service and key builders."""
from unittest.mock import MagicMock

import redis

from trustscore.models import Baseline, RiskModelConfig
from trustscore.services.redis_cache import CacheKeys, RedisCache


class TestRedisCache:
    """Tests for RedisCache against fakeredis."""

    def test_set_then_get_model(self, cache):
        cache.set("k", RiskModelConfig(tenure=2), ttl_seconds=30)
        assert cache.get("k", RiskModelConfig).tenure == 2

    def test_ttl_applied(self, cache, fake_redis):
        cache.set("k", RiskModelConfig(), ttl_seconds=30)
        assert 0 < fake_redis.ttl("k") <= 30

    def test_miss_returns_none(self, cache):
        assert cache.get("missing", Baseline) is None

    def test_corrupt_entry_is_a_miss(self, cache, fake_redis):
        fake_redis.set("k", "not json")
        assert cache.get("k", RiskModelConfig) is None

    def test_delete_pattern(self, cache):
        cache.set("production:baseline:industry:retail", Baseline(industry_key="retail"), 30)
        cache.set("production:baseline:industry:healthcare", Baseline(industry_key="healthcare"), 30)
        assert cache.delete_pattern("production:baseline:industry:*") == 2
        assert not cache.exists("production:baseline:industry:retail")

    def test_errors_are_swallowed(self):
        client = MagicMock()
        client.get.side_effect = redis.ConnectionError("down")
        client.setex.side_effect = redis.ConnectionError("down")
        client.ping.side_effect = redis.ConnectionError("down")
        cache = RedisCache(client=client)
        assert cache.get("k", Baseline) is None
        assert cache.set("k", Baseline(industry_key="retail"), 30) is False
        assert cache.health_check() == (False, "down")
        assert cache.connect() is False


class TestCacheKeys:
    """Keys never cross the production/sandbox boundary."""

    def test_namespaces_differ(self):
        assert CacheKeys.industry_baseline("production", "retail") != \
            CacheKeys.industry_baseline("sandbox:s1", "retail")

    def test_risk_weights_key_without_employer(self):
        assert CacheKeys.risk_weights("production", None, "retail") == \
            "production:config:risk_weights:-:retail"

    def test_employer_patterns_cover_hybrid_and_team(self):
        patterns = CacheKeys.employer_patterns("production", "EMP1")
        assert CacheKeys.team_baseline("production", "EMP1") in patterns
        assert "production:baseline:hybrid:*:EMP1" in patterns
