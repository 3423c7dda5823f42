"""
交易所目录缓存

以固定键缓存完整交易所目录（默认 24 小时）。每次读取缓存时都会按 ID 去重，
并用当前规则表重新分类每一条记录：规则表在缓存有效期内可能更新，
缓存中保存的 centralized 结果不能延续旧规则的判定。
"""

import json
import logging
from typing import List, Optional

from ..classification.exchange_classifier import ExchangeClassifier
from ..downloaders.exchange_downloader import (
    Exchange,
    ExchangeDownloader,
    deduplicate_exchanges,
)
from .cache_config import CacheConfig

logger = logging.getLogger(__name__)


class ExchangeCatalogCache:
    """交易所目录缓存"""

    def __init__(
        self,
        store,
        downloader: ExchangeDownloader,
        classifier: Optional[ExchangeClassifier] = None,
        config: Optional[CacheConfig] = None,
    ):
        """
        Args:
            store: 提供 get / set_with_expiry / delete 的键值存储
            downloader: 缓存未命中时使用的交易所下载器
            classifier: 读取时重新分类使用的分类器
            config: 缓存配置
        """
        self.store = store
        self.downloader = downloader
        self.classifier = classifier or downloader.classifier
        self.config = config or CacheConfig()

    def _reclassify(self, exchange: Exchange) -> Exchange:
        # 忽略缓存里的 centralized，只沿用数据源原始字段作兜底
        exchange.centralized = self.classifier.classify(
            exchange.id, exchange.name, exchange.source_centralized
        )
        return exchange

    def _load_cached(self) -> Optional[List[Exchange]]:
        result = self.store.get(self.config.catalog_key)
        if not result.ok:
            logger.warning("读取交易所目录缓存失败，改为实时获取")
            return None
        if not result.hit:
            return None

        try:
            records = json.loads(result.value)
            if not isinstance(records, list):
                raise ValueError(f"期望列表，实际为 {type(records).__name__}")
            exchanges = [
                Exchange.from_dict(record)
                for record in records
                if isinstance(record, dict) and isinstance(record.get("id"), str) and record["id"]
            ]
            # 旧版本缓存可能含重复项
            exchanges = deduplicate_exchanges(exchanges, warn=False)
            exchanges = [self._reclassify(exchange) for exchange in exchanges]
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"交易所目录缓存内容无法解析，改为实时获取: {e}")
            return None

        logger.info(f"缓存命中: {len(exchanges)} 个交易所")
        return exchanges

    def get_catalog(self) -> List[Exchange]:
        """
        获取完整交易所目录

        Returns:
            去重、分类后的交易所列表（新获取时按名称升序），
            缓存与 API 都不可用时为空列表
        """
        cached = self._load_cached()
        if cached is not None:
            return cached

        exchanges = deduplicate_exchanges(self.downloader.fetch_all_exchanges())
        exchanges.sort(key=lambda exchange: exchange.name.casefold())

        if not exchanges:
            logger.warning("未获取到任何交易所，跳过缓存写入")
            return exchanges

        payload = json.dumps([exchange.to_dict() for exchange in exchanges])
        result = self.store.set_with_expiry(
            self.config.catalog_key, payload, self.config.ttl_seconds
        )
        if result.ok:
            logger.info(f"已缓存 {len(exchanges)} 个交易所")
        else:
            logger.warning("交易所目录缓存写入失败，下次请求将重新获取")

        return exchanges

    def invalidate(self) -> bool:
        """删除目录缓存，下次读取时重新获取"""
        return self.store.delete(self.config.catalog_key).ok
