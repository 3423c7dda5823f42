"""
缓存模块

提供 Redis 存储封装、交易所目录缓存与交易所类型映射构建。
"""

from .cache_config import CacheConfig
from .exchange_catalog import ExchangeCatalogCache
from .exchange_type_map import ExchangeTypeMapBuilder
from .redis_store import CacheResult, RedisStore, create_redis_store

__all__ = [
    "CacheConfig",
    "CacheResult",
    "RedisStore",
    "create_redis_store",
    "ExchangeCatalogCache",
    "ExchangeTypeMapBuilder",
]
