"""
CoinGecko API 客户端测试

离线部分通过模拟 requests.Session 验证请求参数；
在线部分需要配置 COINGECKO_API_KEY，否则跳过。
"""

import os
import sys
import unittest
from unittest.mock import MagicMock, patch

import requests

# 添加项目根目录到Python路径
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from src.api.coingecko import CoinGeckoAPI, create_api_client  # noqa: E402


class TestCoinGeckoAPIOffline(unittest.TestCase):
    """不访问网络的客户端行为测试"""

    def test_pro_key_sets_header_and_base_url(self):
        api = CoinGeckoAPI(api_key="test-key")
        self.assertEqual(api.base_url, "https://pro-api.coingecko.com/api/v3")
        self.assertEqual(api.session.headers["x-cg-pro-api-key"], "test-key")

    def test_missing_key_uses_public_api(self):
        with patch.dict(os.environ, {"COINGECKO_API_KEY": ""}):
            api = create_api_client()
        self.assertIsNone(api.api_key or None)
        self.assertEqual(api.base_url, "https://api.coingecko.com/api/v3")
        self.assertNotIn("x-cg-pro-api-key", api.session.headers)

    def test_get_exchanges_request(self):
        api = CoinGeckoAPI(api_key="test-key")
        response = MagicMock()
        response.json.return_value = [{"id": "binance", "name": "Binance"}]
        api.session = MagicMock()
        api.session.get.return_value = response

        data = api.get_exchanges(per_page=250, page=3)

        self.assertEqual(data, [{"id": "binance", "name": "Binance"}])
        args, kwargs = api.session.get.call_args
        self.assertEqual(args[0], "https://pro-api.coingecko.com/api/v3/exchanges")
        self.assertEqual(kwargs["params"], {"per_page": 250, "page": 3})
        self.assertEqual(kwargs["timeout"], api.timeout)

    def test_get_coin_tickers_request(self):
        api = CoinGeckoAPI(api_key="test-key")
        response = MagicMock()
        response.json.return_value = {"name": "Bitcoin", "tickers": []}
        api.session = MagicMock()
        api.session.get.return_value = response

        api.get_coin_tickers("bitcoin", exchange_ids="binance", include_exchange_logo=True)

        args, kwargs = api.session.get.call_args
        self.assertTrue(args[0].endswith("/coins/bitcoin/tickers"))
        self.assertEqual(kwargs["params"]["include_exchange_logo"], "true")
        self.assertEqual(kwargs["params"]["exchange_ids"], "binance")
        self.assertEqual(kwargs["params"]["depth"], "false")

    def test_http_error_is_raised(self):
        api = CoinGeckoAPI(api_key="test-key")
        response = MagicMock()
        response.status_code = 429
        response.text = "rate limited"
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            "429 Too Many Requests", response=response
        )
        api.session = MagicMock()
        api.session.get.return_value = response

        with self.assertRaises(requests.exceptions.HTTPError):
            api.get_exchanges(page=1)


class TestCoinGeckoAPILive(unittest.TestCase):
    """测试真实 CoinGecko API"""

    @classmethod
    def setUpClass(cls):
        cls.api = CoinGeckoAPI()
        if not cls.api.api_key:
            raise unittest.SkipTest("API Key 未配置，跳过在线测试")

    def test_ping(self):
        data = self.api.ping()
        self.assertIsInstance(data, dict)
        self.assertIn("gecko_says", data)

    def test_get_exchanges_first_page(self):
        data = self.api.get_exchanges(per_page=10, page=1)
        self.assertIsInstance(data, list)
        self.assertGreater(len(data), 0)
        self.assertIn("id", data[0])
        self.assertIn("name", data[0])


if __name__ == "__main__":
    unittest.main()
