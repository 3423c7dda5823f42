"""
数据分析模块

提供交易所目录汇总导出与币种上架分布分析。
"""

from .exchange_summary import export_catalog_csv, summarize_catalog
from .listing_analysis import ListingAnalyzer, ListingBreakdown, breakdown_tickers

__all__ = [
    "summarize_catalog",
    "export_catalog_csv",
    "ListingAnalyzer",
    "ListingBreakdown",
    "breakdown_tickers",
]
