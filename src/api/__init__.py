"""
API 接口封装
"""

from .coingecko import CoinGeckoAPI, create_api_client

__all__ = ["CoinGeckoAPI", "create_api_client"]
