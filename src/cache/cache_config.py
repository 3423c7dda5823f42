"""
缓存配置模块

独立管理 Redis 连接与交易所缓存的配置参数。
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_TTL_SECONDS = 24 * 60 * 60  # 24 小时


@dataclass
class CacheConfig:
    """交易所缓存配置"""

    # 连接配置
    redis_url: Optional[str] = None
    socket_timeout: float = 5.0

    # 缓存键
    catalog_key: str = "exchanges:all"
    type_map_key: str = "exchanges:type-map"

    # 过期时间
    ttl_seconds: int = DEFAULT_TTL_SECONDS

    @classmethod
    def from_env(cls) -> "CacheConfig":
        """从环境变量（含 .env 文件）读取配置"""
        ttl = os.getenv("EXCHANGE_CACHE_TTL")
        return cls(
            redis_url=os.getenv("REDIS_URL"),
            ttl_seconds=int(ttl) if ttl else DEFAULT_TTL_SECONDS,
        )
