"""
币种上架分析

根据币种在各交易所的交易行情，统计 CEX/DEX 上架数量、交易量分布、
信任评分分布、交易量前十的交易所以及主流 CEX 上架情况。
交易所类型来自 ExchangeTypeMapBuilder 构建的映射。
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from ..api.coingecko import CoinGeckoAPI
from ..cache.exchange_type_map import ExchangeTypeMapBuilder

logger = logging.getLogger(__name__)

MAJOR_CEX_EXCHANGES = (
    "binance", "coinbase", "kraken", "bitfinex", "bitstamp",
    "gemini", "okx", "huobi", "kucoin", "bybit",
)

TICKER_COLUMNS = [
    "identifier", "name", "volume", "trust_score", "is_stale", "is_anomaly", "centralized",
]


@dataclass
class ListingBreakdown:
    """上架分析结果"""

    coin_id: str
    name: Optional[str] = None
    total_listings: int = 0
    cex_count: int = 0
    dex_count: int = 0
    total_volume: float = 0.0
    cex_volume: float = 0.0
    dex_volume: float = 0.0
    cex_volume_percentage: float = 0.0
    dex_volume_percentage: float = 0.0
    trust_scores: Dict[str, int] = field(
        default_factory=lambda: {"green": 0, "yellow": 0, "red": 0}
    )
    top_exchanges: List[Dict[str, Any]] = field(default_factory=list)
    major_cex_listings: List[str] = field(default_factory=list)


def _percentage(part: float, total: float) -> float:
    if total <= 0:
        return 0.0
    return round(part / total * 100, 2)


def _tickers_frame(tickers: List[Dict[str, Any]], type_map: Dict[str, bool]) -> pd.DataFrame:
    rows = []
    for ticker in tickers:
        market = ticker.get("market") or {}
        identifier = market.get("identifier")
        volume = (ticker.get("converted_volume") or {}).get("usd") or 0
        rows.append(
            {
                "identifier": identifier,
                "name": market.get("name") or "Unknown",
                "volume": float(volume),
                "trust_score": ticker.get("trust_score") or "unknown",
                "is_stale": bool(ticker.get("is_stale", False)),
                "is_anomaly": bool(ticker.get("is_anomaly", False)),
                # 映射中没有的交易所按 CEX 处理
                "centralized": type_map.get(identifier, True) if identifier else True,
            }
        )
    return pd.DataFrame(rows, columns=TICKER_COLUMNS)


def breakdown_tickers(
    coin_id: str,
    tickers: List[Dict[str, Any]],
    type_map: Dict[str, bool],
    name: Optional[str] = None,
    top_n: int = 10,
) -> ListingBreakdown:
    """
    统计交易行情的 CEX/DEX 分布

    Args:
        coin_id: 币种ID
        tickers: CoinGecko /coins/{id}/tickers 返回的 tickers 列表
        type_map: 交易所 ID -> 是否中心化
        name: 币种名称
        top_n: 交易量排行保留的数量

    Returns:
        ListingBreakdown
    """
    df = _tickers_frame(tickers, type_map)
    result = ListingBreakdown(coin_id=coin_id, name=name, total_listings=len(df))
    if df.empty:
        return result

    cex = df[df["centralized"]]
    dex = df[~df["centralized"]]

    result.cex_count = len(cex)
    result.dex_count = len(dex)
    result.total_volume = float(df["volume"].sum())
    result.cex_volume = float(cex["volume"].sum())
    result.dex_volume = float(dex["volume"].sum())
    result.cex_volume_percentage = _percentage(result.cex_volume, result.total_volume)
    result.dex_volume_percentage = _percentage(result.dex_volume, result.total_volume)

    counts = df["trust_score"].value_counts()
    result.trust_scores = {
        score: int(counts.get(score, 0)) for score in ("green", "yellow", "red")
    }

    top = (
        df[df["volume"] > 0]
        .sort_values("volume", ascending=False, kind="stable")
        .head(top_n)
    )
    result.top_exchanges = [
        {
            "name": row.name,
            "volume": float(row.volume),
            "trust_score": row.trust_score,
            "is_stale": bool(row.is_stale),
            "is_anomaly": bool(row.is_anomaly),
        }
        for row in top.itertuples(index=False)
    ]

    majors = []
    for exchange_name in cex["name"]:
        lower = exchange_name.lower()
        if any(major in lower for major in MAJOR_CEX_EXCHANGES) and exchange_name not in majors:
            majors.append(exchange_name)
    result.major_cex_listings = majors

    return result


class ListingAnalyzer:
    """币种上架分析器"""

    def __init__(self, api: CoinGeckoAPI, type_map_builder: ExchangeTypeMapBuilder):
        self.api = api
        self.type_map_builder = type_map_builder

    def analyze(self, coin_id: str) -> ListingBreakdown:
        """
        获取币种交易行情并统计上架分布

        Args:
            coin_id: 币种ID，如 'bitcoin'

        Returns:
            ListingBreakdown

        Raises:
            requests.exceptions.RequestException: 交易行情获取失败
        """
        data = self.api.get_coin_tickers(
            coin_id, include_exchange_logo=True, order="trust_score_desc"
        )
        tickers = data.get("tickers") or []
        identifiers = {
            (ticker.get("market") or {}).get("identifier") for ticker in tickers
        }
        identifiers.discard(None)

        type_map = self.type_map_builder.build_map(sorted(identifiers))
        breakdown = breakdown_tickers(coin_id, tickers, type_map, name=data.get("name"))

        logger.info(
            f"📊 {coin_id}: {breakdown.total_listings} 个交易对 "
            f"(CEX {breakdown.cex_count}, DEX {breakdown.dex_count})"
        )
        return breakdown
