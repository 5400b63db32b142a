"""Cache Module - Caching services."""
from core.cache.score_cache import (
    ScoreCacheService,
    get_score_cache,
    init_score_cache,
    DEFAULT_TTL_SECONDS,
    STATS_KEY,
    UPSTREAM_ALL_KEY,
    LIST_KEY_PATTERN,
    RANKING_KEY_PATTERN,
    vehicle_key,
    vehicle_list_key,
    ranking_key,
    tier_average_key,
    type_average_key,
    upstream_vehicle_key,
)

__all__ = [
    'ScoreCacheService',
    'get_score_cache',
    'init_score_cache',
    'DEFAULT_TTL_SECONDS',
    'STATS_KEY',
    'UPSTREAM_ALL_KEY',
    'LIST_KEY_PATTERN',
    'RANKING_KEY_PATTERN',
    'vehicle_key',
    'vehicle_list_key',
    'ranking_key',
    'tier_average_key',
    'type_average_key',
    'upstream_vehicle_key',
]
