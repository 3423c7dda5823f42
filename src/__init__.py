"""
CoinGecko 交易所分类项目

主要模块:
- api: API接口封装
- classification: 交易所 CEX/DEX 分类
- downloaders: 交易所目录分页下载
- cache: Redis 缓存、交易所目录缓存与类型映射
- analysis: 目录汇总与币种上架分析
"""

__version__ = "2.0.0"

# 导入主要类和函数
from .api.coingecko import CoinGeckoAPI, create_api_client
from .classification.exchange_classifier import ExchangeClassifier, classify_exchange

__all__ = [
    "CoinGeckoAPI",
    "create_api_client",
    "ExchangeClassifier",
    "classify_exchange",
]
