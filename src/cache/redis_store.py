"""
Redis 键值存储封装

持有一个长期存在的连接池，每次逻辑操作通过 connection() 获取并归还连接。
所有读写都返回 CacheResult，不向调用方抛出 Redis 异常：
缓存不可用时调用方据此回退到实时数据源。
"""

import contextlib
import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional

import redis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheResult:
    """缓存操作结果

    - ok=True, value 非 None: 命中 / 写入成功
    - ok=True, value 为 None: 未命中
    - ok=False: 操作失败，error 为异常对象
    """

    ok: bool
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def hit(self) -> bool:
        return self.ok and self.value is not None

    @classmethod
    def success(cls, value: Any = True) -> "CacheResult":
        return cls(ok=True, value=value)

    @classmethod
    def miss(cls) -> "CacheResult":
        return cls(ok=True, value=None)

    @classmethod
    def failure(cls, error: BaseException) -> "CacheResult":
        return cls(ok=False, error=error)


class RedisStore:
    """基于连接池的 Redis 存储"""

    def __init__(self, url: Optional[str], socket_timeout: float = 5.0):
        """
        初始化存储

        Args:
            url: Redis 连接地址，如 redis://localhost:6379/0
            socket_timeout: 套接字超时时间（秒）

        Raises:
            ValueError: 未提供 Redis 地址
        """
        if not url:
            raise ValueError("REDIS_URL 环境变量未设置")

        self.url = url
        # 连接池在首次使用时才真正建立连接
        self.pool = redis.ConnectionPool.from_url(
            url, socket_timeout=socket_timeout, decode_responses=True
        )

    @contextlib.contextmanager
    def connection(self) -> Iterator[redis.Redis]:
        """从连接池获取客户端，退出时归还连接"""
        client = redis.Redis(connection_pool=self.pool)
        try:
            yield client
        finally:
            client.close()

    def get(self, key: str) -> CacheResult:
        """读取键值，未命中时返回 CacheResult.miss()"""
        try:
            with self.connection() as client:
                value = client.get(key)
        except (redis.RedisError, OSError) as e:
            logger.error(f"Redis 读取失败 ({key}): {e}")
            return CacheResult.failure(e)

        if value is None:
            return CacheResult.miss()
        return CacheResult.success(value)

    def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> CacheResult:
        """写入键值并设置过期时间"""
        try:
            with self.connection() as client:
                client.setex(key, ttl_seconds, value)
        except (redis.RedisError, OSError) as e:
            logger.error(f"Redis 写入失败 ({key}): {e}")
            return CacheResult.failure(e)

        return CacheResult.success()

    def delete(self, key: str) -> CacheResult:
        """删除键"""
        try:
            with self.connection() as client:
                removed = client.delete(key)
        except (redis.RedisError, OSError) as e:
            logger.error(f"Redis 删除失败 ({key}): {e}")
            return CacheResult.failure(e)

        return CacheResult.success(removed)

    def close(self) -> None:
        """断开连接池中的全部连接"""
        self.pool.disconnect()


def create_redis_store(config=None) -> RedisStore:
    """
    根据配置创建 Redis 存储的便捷函数

    Args:
        config: CacheConfig 实例，默认从环境变量读取
    """
    from .cache_config import CacheConfig

    config = config or CacheConfig.from_env()
    return RedisStore(config.redis_url, socket_timeout=config.socket_timeout)
