"""Redis caching service for resolver lookups."""
import logging
from typing import Optional, Type, TypeVar

import redis
from pydantic import BaseModel

from trustscore.config import get_settings

logger = logging.getLogger(__name__)
T = TypeVar("T", bound=BaseModel)


class RedisCache:
    """Redis caching service with Pydantic model support.

    Errors never reach the caller: a failed read is a miss and a failed write
    is logged and dropped. Pass ``client`` to inject a prepared connection
    (tests use fakeredis).
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        client: Optional[redis.Redis] = None,
    ):
        self.client = client or redis.Redis(
            host=host,
            port=port,
            db=db,
            decode_responses=True,
        )
        self._connected = False

    def connect(self) -> bool:
        """Test and establish connection."""
        try:
            self.client.ping()
            self._connected = True
            return True
        except redis.ConnectionError as e:
            logger.error(f"Redis connection failed: {e}")
            self._connected = False
            return False

    def health_check(self) -> tuple[bool, Optional[str]]:
        """Check if Redis connection is healthy."""
        try:
            self.client.ping()
            return True, None
        except redis.RedisError as e:
            return False, str(e)

    def get(self, key: str, model: Type[T]) -> Optional[T]:
        """Get cached item and deserialize to Pydantic model."""
        try:
            data = self.client.get(key)
            if data:
                return model.model_validate_json(data)
            return None
        except (redis.RedisError, ValueError) as e:
            logger.warning(f"Cache get error for {key}: {e}")
            return None

    def set(self, key: str, value: BaseModel, ttl_seconds: int) -> bool:
        """Cache Pydantic model with TTL."""
        try:
            self.client.setex(key, ttl_seconds, value.model_dump_json())
            return True
        except redis.RedisError as e:
            logger.warning(f"Cache set error for {key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        """Invalidate cache entry."""
        try:
            self.client.delete(key)
            return True
        except redis.RedisError as e:
            logger.warning(f"Cache delete error for {key}: {e}")
            return False

    def delete_pattern(self, pattern: str) -> int:
        """Invalidate all keys matching pattern."""
        try:
            count = 0
            for key in self.client.scan_iter(match=pattern):
                self.client.delete(key)
                count += 1
            return count
        except redis.RedisError as e:
            logger.warning(f"Cache delete pattern error for {pattern}: {e}")
            return 0

    def exists(self, key: str) -> bool:
        """Check if key exists in cache."""
        try:
            return bool(self.client.exists(key))
        except redis.RedisError:
            return False


class CacheKeys:
    """Cache key builders.

    Every key starts with the environment namespace (``production`` or
    ``sandbox:<session_id>``) so entries never cross that boundary.
    """
    NO_EMPLOYER = "-"

    @staticmethod
    def industry_baseline(namespace: str, industry: str) -> str:
        return f"{namespace}:baseline:industry:{industry}"

    @staticmethod
    def hybrid_baseline(namespace: str, industry: str, employer_id: str) -> str:
        return f"{namespace}:baseline:hybrid:{industry}:{employer_id}"

    @staticmethod
    def team_baseline(namespace: str, employer_id: str) -> str:
        return f"{namespace}:baseline:team:{employer_id}"

    @staticmethod
    def risk_weights(namespace: str, employer_id: Optional[str], industry: str) -> str:
        return f"{namespace}:config:risk_weights:{employer_id or CacheKeys.NO_EMPLOYER}:{industry}"

    @staticmethod
    def employer_patterns(namespace: str, employer_id: str) -> list[str]:
        """Patterns covering every entry resolved for ``employer_id``."""
        return [
            f"{namespace}:baseline:hybrid:*:{employer_id}",
            CacheKeys.team_baseline(namespace, employer_id),
            f"{namespace}:config:risk_weights:{employer_id}:*",
        ]

    @staticmethod
    def industry_patterns(namespace: str, industry: str) -> list[str]:
        """Patterns covering every entry resolved for ``industry``."""
        return [
            CacheKeys.industry_baseline(namespace, industry),
            f"{namespace}:baseline:hybrid:{industry}:*",
            f"{namespace}:config:risk_weights:*:{industry}",
        ]


# Singleton instance
_redis_cache: Optional[RedisCache] = None


def get_redis_cache() -> RedisCache:
    """Get or create Redis cache singleton."""
    global _redis_cache
    if _redis_cache is None:
        settings = get_settings()
        _redis_cache = RedisCache(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
        )
    return _redis_cache
