#!/usr/bin/env python3
"""
交易所类型映射示例

演示如何组装缓存与构建器，并为一组交易所 ID 获取 CEX/DEX 分类。
需要可用的 REDIS_URL。
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.api.coingecko import create_api_client
from src.cache import (
    CacheConfig,
    ExchangeCatalogCache,
    ExchangeTypeMapBuilder,
    create_redis_store,
)
from src.classification import ExchangeClassifier
from src.downloaders import ExchangeDownloader


def main():
    config = CacheConfig.from_env()
    classifier = ExchangeClassifier()
    store = create_redis_store(config)
    catalog = ExchangeCatalogCache(
        store, ExchangeDownloader(create_api_client(), classifier), classifier, config
    )
    builder = ExchangeTypeMapBuilder(store, catalog, classifier, config)

    try:
        exchange_map = builder.build_map(["binance", "pancakeswap", "unknown-id-123"])
        for exchange_id in ["binance", "pancakeswap", "unknown-id-123"]:
            label = "CEX" if exchange_map[exchange_id] else "DEX"
            print(f"  {exchange_id}: {label}")
    finally:
        store.close()


if __name__ == "__main__":
    main()
