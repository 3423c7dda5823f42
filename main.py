#!/usr/bin/env python3
"""
交易所分类项目主入口文件

使用方式:
    python main.py                       # 显示交易所目录汇总（CEX/DEX 数量）
    python main.py --refresh             # 清除目录缓存后重新获取
    python main.py --token bitcoin       # 分析币种的 CEX/DEX 上架分布
    python main.py --export out.csv      # 导出交易所目录到CSV
    python main.py --test                # 运行单元测试

环境变量:
    COINGECKO_API_KEY   CoinGecko Pro API Key（可选）
    REDIS_URL           Redis 地址，如 redis://localhost:6379/0
    EXCHANGE_CACHE_TTL  缓存过期时间（秒），默认 86400

核心模块使用:
    from src.cache import ExchangeCatalogCache, ExchangeTypeMapBuilder
    from src.classification import ExchangeClassifier
"""

import argparse
import logging
import sys

import requests

from src.analysis.exchange_summary import export_catalog_csv, summarize_catalog
from src.analysis.listing_analysis import ListingAnalyzer
from src.api.coingecko import create_api_client
from src.cache import (
    CacheConfig,
    ExchangeCatalogCache,
    ExchangeTypeMapBuilder,
    create_redis_store,
)
from src.classification import ExchangeClassifier
from src.downloaders import ExchangeDownloader


def build_services():
    """组装 API 客户端、缓存与构建器"""
    config = CacheConfig.from_env()
    api = create_api_client()
    classifier = ExchangeClassifier()
    store = create_redis_store(config)
    catalog = ExchangeCatalogCache(
        store, ExchangeDownloader(api, classifier), classifier, config
    )
    type_map_builder = ExchangeTypeMapBuilder(store, catalog, classifier, config)
    return api, store, catalog, type_map_builder


def show_catalog_summary(catalog: ExchangeCatalogCache, export_path=None):
    """显示交易所目录汇总"""
    exchanges = catalog.get_catalog()
    if not exchanges:
        print("❌ 未能获取交易所目录（缓存与 API 均不可用）")
        return False

    summary = summarize_catalog(exchanges)

    print("🏦 交易所目录")
    print("=" * 50)
    print(f"总计: {summary['total']}")
    print(f"CEX:  {summary['cex']}")
    print(f"DEX:  {summary['dex']}")
    print(f"获取时间: {summary['fetched_at']}")

    if export_path:
        export_catalog_csv(exchanges, export_path)
    return True


def show_listing_breakdown(analyzer: ListingAnalyzer, coin_id: str):
    """显示币种上架分布"""
    result = analyzer.analyze(coin_id)

    print(f"📊 {result.name or coin_id} 上架分析")
    print("=" * 50)
    print(f"交易对总数: {result.total_listings}")
    print(f"  CEX: {result.cex_count}")
    print(f"  DEX: {result.dex_count}")
    print(f"24h 交易量: ${result.total_volume:,.0f}")
    print(f"  CEX: ${result.cex_volume:,.0f} ({result.cex_volume_percentage:.2f}%)")
    print(f"  DEX: ${result.dex_volume:,.0f} ({result.dex_volume_percentage:.2f}%)")
    print(
        "信任评分: "
        + ", ".join(f"{k}={v}" for k, v in result.trust_scores.items())
    )
    if result.major_cex_listings:
        print(f"主流 CEX: {', '.join(result.major_cex_listings)}")
    else:
        print("主流 CEX: 未上架")

    print("\n交易量前十:")
    for i, exchange in enumerate(result.top_exchanges, 1):
        print(
            f"{i}. {exchange['name']}: ${exchange['volume']:,.0f} "
            f"(信任: {exchange['trust_score']})"
        )


def run_tests():
    """运行所有单元测试"""
    print("🧪 运行所有单元测试...")
    import subprocess

    result = subprocess.run(
        [sys.executable, "-m", "unittest", "discover", "-s", "tests", "-t", "."],
        capture_output=True,
        text=True,
    )
    print(result.stdout)
    if result.stderr:
        print("--- 标准错误输出 ---\n", result.stderr)
    return result.returncode


def main():
    """项目主入口函数

    解析命令行参数并根据选项运行对应功能。
    """
    parser = argparse.ArgumentParser(description="CoinGecko 交易所分类")
    parser.add_argument("--test", action="store_true", help="运行单元测试")
    parser.add_argument("--token", help="分析指定币种的上架分布")
    parser.add_argument("--export", metavar="CSV", help="导出交易所目录到CSV")
    parser.add_argument("--refresh", action="store_true", help="清除目录缓存后重新获取")
    parser.add_argument("--verbose", action="store_true", help="输出调试日志")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.test:
        return run_tests()

    api, store, catalog, type_map_builder = build_services()
    try:
        if args.refresh:
            catalog.invalidate()
        if args.token:
            show_listing_breakdown(ListingAnalyzer(api, type_map_builder), args.token)
        else:
            if not show_catalog_summary(catalog, args.export):
                return 1
    except requests.exceptions.RequestException as e:
        print(f"❌ API 请求失败: {e}")
        return 1
    finally:
        store.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
