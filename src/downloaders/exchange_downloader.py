"""
交易所目录下载器

分页拉取 CoinGecko /exchanges 全量交易所目录，逐条分类并按 ID 去重。

采用尽力而为策略：任一页失败时停止翻页并返回已获取的部分结果（第一页失败时为空列表），
不向调用方抛出异常。
"""

import logging
import time
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Iterable, List, Optional

import requests
from tqdm import tqdm

from ..api.coingecko import CoinGeckoAPI
from ..classification.exchange_classifier import ExchangeClassifier

logger = logging.getLogger(__name__)

# CoinGecko 每页最大数量
MAX_PER_PAGE = 250


@dataclass
class Exchange:
    """交易所数据类"""

    id: str
    name: str
    centralized: bool = True
    country: Optional[str] = None
    trust_score: Optional[float] = None
    trade_volume_24h_btc: Optional[float] = None
    year_established: Optional[int] = None
    image: Optional[str] = None
    url: Optional[str] = None
    # 数据源自带的 centralized 字段，重新分类时作为兜底
    source_centralized: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Exchange":
        """从缓存字典恢复，忽略未知字段，缺少名称时使用 ID"""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values["name"] = values.get("name") or values.get("id")
        return cls(**values)


def deduplicate_exchanges(
    exchanges: Iterable[Exchange], warn: bool = True
) -> List[Exchange]:
    """
    按 ID 去重，保留首次出现的记录

    Args:
        exchanges: 交易所序列
        warn: 是否对每个重复 ID 记录警告

    Returns:
        去重后的列表，保持原有顺序
    """
    unique: Dict[str, Exchange] = {}
    total = 0

    for exchange in exchanges:
        total += 1
        if exchange.id not in unique:
            unique[exchange.id] = exchange
        elif warn:
            logger.warning(f"发现重复的交易所 ID: {exchange.id}")

    if len(unique) != total:
        logger.info(f"去重: {total} -> {len(unique)} 个交易所")

    return list(unique.values())


class ExchangeDownloader:
    """交易所目录下载器"""

    def __init__(
        self,
        api: CoinGeckoAPI,
        classifier: Optional[ExchangeClassifier] = None,
        per_page: int = MAX_PER_PAGE,
        request_interval: float = 0.2,
        show_progress: bool = True,
    ):
        """
        初始化下载器

        Args:
            api: CoinGecko API 客户端实例
            classifier: 交易所分类器，默认使用内置规则表
            per_page: 每页数量
            request_interval: 翻页间隔（秒），用于规避 API 限流
            show_progress: 是否显示进度条
        """
        self.api = api
        self.classifier = classifier or ExchangeClassifier()
        self.per_page = per_page
        self.request_interval = request_interval
        self.show_progress = show_progress

    def _normalize_record(self, record: Dict[str, Any]) -> Optional[Exchange]:
        """将 API 原始记录转换为 Exchange，缺少 ID 时返回 None"""
        exchange_id = record.get("id")
        if not exchange_id:
            return None

        name = record.get("name") or exchange_id
        source_centralized = record.get("centralized")

        return Exchange(
            id=exchange_id,
            name=name,
            # 关键词判定优先于 API 自带字段
            centralized=self.classifier.classify(exchange_id, name, source_centralized),
            country=record.get("country"),
            trust_score=record.get("trust_score"),
            trade_volume_24h_btc=record.get("trade_volume_24h_btc"),
            year_established=record.get("year_established"),
            image=record.get("image"),
            url=record.get("url"),
            source_centralized=source_centralized,
        )

    def fetch_all_exchanges(self) -> List[Exchange]:
        """
        获取完整的交易所目录

        Returns:
            分类并去重后的交易所列表（保持 API 返回顺序），请求失败时为已获取的部分
        """
        logger.info("🚀 开始从 CoinGecko /exchanges 获取全部交易所")

        exchanges: List[Exchange] = []
        page = 1

        with tqdm(
            desc="获取交易所", unit="页", disable=not self.show_progress
        ) as pbar:
            while True:
                try:
                    page_data = self.api.get_exchanges(per_page=self.per_page, page=page)
                except requests.exceptions.RequestException as e:
                    logger.error(f"获取交易所第 {page} 页失败，返回已获取的部分数据: {e}")
                    break

                # 兼容返回单个对象的情况
                if isinstance(page_data, dict):
                    page_data = [page_data]
                page_data = page_data or []

                if not page_data:
                    break

                for record in page_data:
                    exchange = self._normalize_record(record)
                    if exchange is not None:
                        exchanges.append(exchange)

                pbar.update(1)
                pbar.set_postfix({"累计": len(exchanges)})
                logger.debug(
                    f"第 {page} 页: {len(page_data)} 个交易所 (累计 {len(exchanges)})"
                )

                # 不足一页即为最后一页
                if len(page_data) < self.per_page:
                    break

                page += 1
                if self.request_interval > 0:
                    time.sleep(self.request_interval)

        logger.info(f"共获取 {len(exchanges)} 个交易所")
        return deduplicate_exchanges(exchanges)


def create_exchange_downloader(
    api_key: Optional[str] = None,
    classifier: Optional[ExchangeClassifier] = None,
) -> ExchangeDownloader:
    """
    创建交易所下载器的便捷函数

    Example:
        >>> downloader = create_exchange_downloader()
        >>> exchanges = downloader.fetch_all_exchanges()
    """
    from ..api.coingecko import create_api_client

    return ExchangeDownloader(create_api_client(api_key), classifier)
