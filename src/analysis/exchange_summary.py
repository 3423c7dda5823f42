"""
交易所目录汇总与导出
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from ..downloaders.exchange_downloader import Exchange

logger = logging.getLogger(__name__)


def summarize_catalog(
    exchanges: List[Exchange], fetched_at: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    汇总交易所目录

    Args:
        exchanges: 交易所列表
        fetched_at: 获取时间，默认当前 UTC 时间

    Returns:
        包含 total / cex / dex / exchanges / fetched_at 的字典
    """
    fetched_at = fetched_at or datetime.now(timezone.utc)
    cex_count = sum(1 for exchange in exchanges if exchange.centralized)

    return {
        "total": len(exchanges),
        "cex": cex_count,
        "dex": len(exchanges) - cex_count,
        "exchanges": [exchange.to_dict() for exchange in exchanges],
        "fetched_at": fetched_at.isoformat(),
    }


def export_catalog_csv(
    exchanges: List[Exchange],
    output_path: str = "data/metadata/exchanges.csv",
) -> bool:
    """导出交易所目录到CSV

    Args:
        exchanges: 交易所列表
        output_path: 输出文件路径

    Returns:
        是否成功
    """
    try:
        df = pd.DataFrame([exchange.to_dict() for exchange in exchanges])

        # 确保输出目录存在
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        df.to_csv(output_file, index=False, encoding="utf-8-sig")
        logger.info(f"✅ 交易所目录已导出到: {output_path} (共 {len(df)} 个)")
        return True

    except OSError as e:
        logger.error(f"❌ 导出交易所目录失败: {e}")
        return False
