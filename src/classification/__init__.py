"""
交易所分类模块

基于已知 CEX 白名单与 DEX 关键词判断交易所类型。

核心组件：
- ExchangeClassifier: 交易所分类器，规则表在构造时注入
- MatchRule: 命中的判定规则
- KNOWN_CEX / DEX_KEYWORDS: 默认规则表
"""

from .exchange_classifier import (
    DEX_KEYWORDS,
    KNOWN_CEX,
    ExchangeClassifier,
    MatchRule,
    classify_exchange,
)

__all__ = [
    "ExchangeClassifier",
    "MatchRule",
    "classify_exchange",
    "KNOWN_CEX",
    "DEX_KEYWORDS",
]
