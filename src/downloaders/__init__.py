"""
数据获取工具集

- 交易所下载器：分页获取 CoinGecko 全量交易所目录
"""

from .exchange_downloader import (
    Exchange,
    ExchangeDownloader,
    create_exchange_downloader,
    deduplicate_exchanges,
)

__all__ = [
    "Exchange",
    "ExchangeDownloader",
    "create_exchange_downloader",
    "deduplicate_exchanges",
]
