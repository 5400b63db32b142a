"""Score Cache Service - Redis caching for vehicles, rankings and cohort averages."""
import json
import logging
from typing import Optional, Any, Dict
from urllib.parse import urlparse

from redis import Redis

logger = logging.getLogger(__name__)

# 1 hour in seconds
DEFAULT_TTL_SECONDS = 60 * 60

STATS_KEY = "tanks:stats"
UPSTREAM_ALL_KEY = "wargaming:all_tanks"
LIST_KEY_PATTERN = "tanks:list:*"
RANKING_KEY_PATTERN = "ranking:*"


def vehicle_key(vehicle_id: int) -> str:
    return f"tank:{vehicle_id}"


def vehicle_list_key(filters: str) -> str:
    return f"tanks:list:{filters}"


def ranking_key(category: str) -> str:
    return f"ranking:{category}"


def tier_average_key(tier: int) -> str:
    return f"tier_average_{tier}"


def type_average_key(vehicle_type: str) -> str:
    return f"type_average_{vehicle_type}"


def upstream_vehicle_key(tank_id: int) -> str:
    return f"wargaming:tank:{tank_id}"


def _sanitize_url(url: str) -> str:
    """Remove credentials from URL for safe logging."""
    try:
        parsed = urlparse(url)
        if parsed.password:
            sanitized = parsed._replace(
                netloc=f"{parsed.username or ''}:*@{parsed.hostname}:{parsed.port or 6379}"
            )
            return sanitized.geturl()
        return url
    except Exception:
        return url


class ScoreCacheService:
    """
    JSON value cache backed by Redis.

    Every failure is logged and reported as a miss (get) or False
    (set/delete); callers fall back to recomputation or storage.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        password: Optional[str] = None,
        default_ttl_seconds: int = DEFAULT_TTL_SECONDS
    ):
        self.redis_url = redis_url
        self.default_ttl_seconds = default_ttl_seconds
        self._redis: Optional[Redis] = None
        self._available = False

        try:
            self._redis = Redis.from_url(
                redis_url,
                password=password,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5
            )
            self._redis.ping()
            self._available = True
            logger.info(f"Score cache connected to Redis at {_sanitize_url(redis_url)}")
        except Exception as e:
            logger.warning(f"Score cache Redis unavailable: {e}")
            self._redis = None
            self._available = False

    @property
    def is_available(self) -> bool:
        """Check if cache is available."""
        if not self._available or not self._redis:
            return False
        try:
            return self._redis.ping()
        except Exception:
            return False

    def get(self, key: str) -> Optional[Any]:
        """Get a cached value, or None on miss or failure."""
        if not self.is_available:
            return None

        try:
            data = self._redis.get(key)
            if data is None:
                logger.debug(f"Cache miss for {key}")
                return None
            logger.debug(f"Cache hit for {key}")
            return json.loads(data)
        except Exception as e:
            logger.warning(f"Error reading from score cache: {e}")
            return None

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        """Cache a JSON-serializable value with TTL."""
        if not self.is_available:
            return False

        try:
            ttl = ttl_seconds or self.default_ttl_seconds
            self._redis.setex(key, ttl, json.dumps(value, default=str))
            logger.debug(f"Cached {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.warning(f"Error writing to score cache: {e}")
            return False

    def delete(self, key: str) -> bool:
        """Remove a key from cache."""
        if not self.is_available:
            return False

        try:
            self._redis.delete(key)
            return True
        except Exception as e:
            logger.warning(f"Error deleting from score cache: {e}")
            return False

    def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern. Returns the number deleted."""
        if not self.is_available:
            return 0

        try:
            cursor = 0
            deleted = 0
            while True:
                cursor, keys = self._redis.scan(cursor=cursor, match=pattern, count=100)
                if keys:
                    self._redis.delete(*keys)
                    deleted += len(keys)
                if cursor == 0:
                    break
            logger.debug(f"Deleted {deleted} keys matching {pattern}")
            return deleted
        except Exception as e:
            logger.warning(f"Error deleting {pattern} from score cache: {e}")
            return 0

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        if not self.is_available:
            return {"available": False}

        try:
            info = self._redis.info()
            return {
                "available": True,
                "used_memory_human": info.get("used_memory_human", "unknown"),
                "keys": self._redis.dbsize(),
                "default_ttl_seconds": self.default_ttl_seconds
            }
        except Exception as e:
            logger.warning(f"Error getting cache stats: {e}")
            return {"available": False, "error": str(e)}


# Global instance for application use
_score_cache: Optional[ScoreCacheService] = None


def get_score_cache() -> Optional[ScoreCacheService]:
    """Get global score cache instance."""
    return _score_cache


def init_score_cache(
    redis_url: str,
    password: Optional[str] = None,
    default_ttl_seconds: int = DEFAULT_TTL_SECONDS
) -> ScoreCacheService:
    """Initialize global score cache."""
    global _score_cache
    _score_cache = ScoreCacheService(redis_url, password, default_ttl_seconds)
    return _score_cache
