"""
ExchangeTypeMapBuilder 测试

覆盖点：
1. 冷缓存端到端：binance → CEX, pancakeswap → DEX, 未知 ID → 默认 CEX
2. 缓存已包含全部 ID 时直接返回，不读取交易所目录
3. 部分命中时读取目录、合并并回写
4. 关键词判定强制覆盖目录结果为 DEX，反方向不覆盖
5. 缓存读写失败、内容格式不符时的回退
6. API 不可用时仅按规则表分类
"""
import json
import os
import sys
import unittest
from unittest.mock import Mock

import requests

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from src.api.coingecko import CoinGeckoAPI  # noqa: E402
from src.cache.cache_config import CacheConfig  # noqa: E402
from src.cache.exchange_catalog import ExchangeCatalogCache  # noqa: E402
from src.cache.exchange_type_map import ExchangeTypeMapBuilder  # noqa: E402
from src.classification.exchange_classifier import ExchangeClassifier  # noqa: E402
from src.downloaders.exchange_downloader import (  # noqa: E402
    Exchange,
    ExchangeDownloader,
)
from tests.fakes import InMemoryStore  # noqa: E402

MAP_KEY = "exchanges:type-map"


class TestExchangeTypeMapBuilder(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryStore()
        self.config = CacheConfig()
        self.classifier = ExchangeClassifier()
        self.catalog = Mock(spec=ExchangeCatalogCache)
        self.catalog.get_catalog.return_value = []
        self.builder = ExchangeTypeMapBuilder(
            self.store, self.catalog, self.classifier, self.config
        )

    def cached_map(self):
        return dict(tuple(pair) for pair in json.loads(self.store.data[MAP_KEY]))

    def test_cold_cache_end_to_end(self):
        downloader = Mock(spec=ExchangeDownloader)
        downloader.fetch_all_exchanges.return_value = [
            Exchange("binance", "Binance", centralized=True),
            Exchange("pancakeswap", "PancakeSwap", centralized=False),
        ]
        catalog = ExchangeCatalogCache(self.store, downloader, self.classifier, self.config)
        builder = ExchangeTypeMapBuilder(self.store, catalog, self.classifier, self.config)

        result = builder.build_map(["binance", "pancakeswap", "unknown-id-123"])

        self.assertEqual(
            result, {"binance": True, "pancakeswap": False, "unknown-id-123": True}
        )
        self.assertEqual(self.cached_map(), result)
        self.assertEqual(self.store.ttls[MAP_KEY], 24 * 60 * 60)

    def test_fast_path_skips_catalog(self):
        self.store.data[MAP_KEY] = json.dumps([["a", True], ["b", False]])

        result = self.builder.build_map(["a", "b"])

        self.assertEqual(result, {"a": True, "b": False})
        self.assertEqual(self.catalog.get_catalog.call_count, 0)
        self.assertEqual(self.store.set_calls, [])

    def test_keyword_evidence_overrides_catalog(self):
        # 目录中被错误标记为 CEX 的交易所
        self.catalog.get_catalog.return_value = [Exchange("x", "Foo Swap", centralized=True)]

        result = self.builder.build_map(["x"])

        self.assertEqual(result, {"x": False})

    def test_catalog_name_is_used_for_request_ids(self):
        self.catalog.get_catalog.return_value = [Exchange("xyz", "XYZ Dex", centralized=True)]

        self.assertFalse(self.builder.build_map(["xyz"])["xyz"])

    def test_partial_hit_merges_and_persists(self):
        self.store.data[MAP_KEY] = json.dumps([["plainvenue", False], ["kraken", False]])
        self.catalog.get_catalog.return_value = [
            Exchange("kraken", "Kraken", centralized=True),
            Exchange("curve", "Curve", centralized=False),
        ]

        result = self.builder.build_map(["plainvenue", "binance"])

        self.catalog.get_catalog.assert_called_once()
        self.assertEqual(
            result,
            {"plainvenue": False, "kraken": True, "curve": False, "binance": True},
        )
        self.assertEqual(self.cached_map(), result)

    def test_no_override_towards_centralized(self):
        self.catalog.get_catalog.return_value = [
            Exchange("plainvenue", "Plain Venue", centralized=False)
        ]

        self.assertFalse(self.builder.build_map(["plainvenue"])["plainvenue"])

    def test_map_is_never_shrunk(self):
        self.store.data[MAP_KEY] = json.dumps([["old-venue", True]])

        result = self.builder.build_map(["new-venue"])

        self.assertIn("old-venue", result)
        self.assertIn("new-venue", self.cached_map())

    def test_read_failure_treated_as_miss(self):
        self.store.fail_get = True

        result = self.builder.build_map(["uniswap-v3"])

        self.assertEqual(result, {"uniswap-v3": False})
        self.catalog.get_catalog.assert_called_once()

    def test_corrupt_cached_map_treated_as_miss(self):
        self.store.data[MAP_KEY] = "not json"

        self.assertEqual(self.builder.build_map(["kraken"]), {"kraken": True})

    def test_write_failure_still_returns_map(self):
        self.store.fail_set = True

        result = self.builder.build_map(["binance"])

        self.assertEqual(result, {"binance": True})

    def test_non_list_cached_map_treated_as_miss(self):
        self.store.data[MAP_KEY] = json.dumps({"kraken": False})

        self.assertEqual(self.builder.build_map(["kraken"]), {"kraken": True})
        self.catalog.get_catalog.assert_called_once()

    def test_non_bool_cached_value_treated_as_miss(self):
        self.store.data[MAP_KEY] = json.dumps([["kraken", "false"]])

        self.assertEqual(self.builder.build_map(["kraken"]), {"kraken": True})
        self.catalog.get_catalog.assert_called_once()

    def test_api_down_on_cold_cache_uses_rules_only(self):
        api = Mock(spec=CoinGeckoAPI)
        api.get_exchanges.side_effect = requests.exceptions.ConnectionError("down")
        downloader = ExchangeDownloader(
            api, self.classifier, request_interval=0, show_progress=False
        )
        catalog = ExchangeCatalogCache(self.store, downloader, self.classifier, self.config)
        builder = ExchangeTypeMapBuilder(self.store, catalog, self.classifier, self.config)

        result = builder.build_map(["binance", "pancakeswap", "unknown-id-123"])

        self.assertEqual(
            result, {"binance": True, "pancakeswap": False, "unknown-id-123": True}
        )
        self.assertNotIn("exchanges:all", self.store.data)
        self.assertEqual(self.cached_map(), result)

    def test_api_down_keeps_cached_entries(self):
        self.store.data[MAP_KEY] = json.dumps([["uniswap_v3", False]])
        self.catalog.get_catalog.return_value = []

        result = self.builder.build_map(["uniswap_v3", "kraken"])

        self.assertEqual(result, {"uniswap_v3": False, "kraken": True})


if __name__ == '__main__':
    unittest.main(verbosity=2)
