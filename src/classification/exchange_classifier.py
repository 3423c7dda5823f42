"""
交易所分类器

根据交易所 ID 与名称判断其为中心化交易所 (CEX) 还是去中心化交易所 (DEX)。

判定顺序（先命中者生效）：
1. 已知 CEX 白名单：ID 或名称等于/包含白名单条目 → CEX
2. DEX 关键词：ID 或名称包含任一关键词 → DEX
3. 兜底：使用数据源自带的 centralized 字段，缺失时默认为 CEX

CoinGecko 会把不少 DEX 标记为 centralized，因此关键词判定优先于数据源字段；
白名单先于关键词检查，避免名称中碰巧带有 "swap"、"v2" 等字样的知名 CEX 被误判。
"""

from enum import Enum
from typing import Iterable, Optional, Tuple


# 已知中心化交易所（即使名称包含 DEX 关键词也视为 CEX）
KNOWN_CEX: Tuple[str, ...] = (
    "binance", "coinbase", "kraken", "bitfinex", "bitstamp", "gemini",
    "okx", "okex", "huobi", "kucoin", "bybit", "gate", "mexc", "bitget",
    "crypto.com", "cryptocom", "ftx", "ftx.us", "coinbase pro", "coinbasepro",
    "bitmex", "deribit", "bitflyer", "upbit", "bithumb",
    "poloniex", "bittrex", "bitmart", "lbank", "hotbit", "bibox", "probit",
    "bitrue", "coinex", "whitebit", "bitforex", "zb.com", "zb", "digifinex",
)

# DEX 关键词：交易所 ID 或名称包含任一关键词即视为 DEX
DEX_KEYWORDS: Tuple[str, ...] = (
    # 通用术语
    "dex",
    "swap",
    # 主流 DEX 协议
    "uniswap",
    "pancakeswap",
    "sushiswap",
    "curve",
    "balancer",
    "1inch",
    "dodo",
    "kyberswap",
    "raydium",
    "orca",
    "serum",
    "jupiter",
    "cowswap",
    "matcha",
    "paraswap",
    "airswap",
    "bancor",
    "idex",
    "oasis",
    "augur",
    "gnosis",
    "radar",
    "etherdelta",
    "forkdelta",
    "traderjoe",
    "trader joe",
    "pangolin",
    "spookyswap",
    "spiritswap",
    "quickswap",
    "solarbeam",
    "beamswap",
    "stellaswap",
    "honeyswap",
    "levinswap",
    "ubeswap",
    "mobius",
    "elk",
    "shibaswap",
    "apeswap",
    "biswap",
    "babyswap",
    "mdex",
    "mooniswap",
    "swopfi",
    "defiswap",
    "fluid",
    "dexalot",
    # DeFi 协议
    "venus",
    "compound",
    "aave",
    "synthetix",
    "0x",
    "protocol",
    # 链上版本后缀
    "v2",
    "v3",
    "v4",
    "abstract",
)


class MatchRule(Enum):
    """命中的判定规则"""

    KNOWN_CEX = "known_cex"
    DEX_KEYWORD = "dex_keyword"
    NONE = "none"


class ExchangeClassifier:
    """交易所 CEX/DEX 分类器

    白名单和关键词表在构造时注入并以元组保存，运行期不可修改，
    因此同一组表对同一输入的判定结果始终一致。
    """

    def __init__(
        self,
        known_cex: Iterable[str] = KNOWN_CEX,
        dex_keywords: Iterable[str] = DEX_KEYWORDS,
    ):
        """
        初始化分类器

        Args:
            known_cex: 已知 CEX 名称/别名
            dex_keywords: DEX 关键词
        """
        self.known_cex = tuple(entry.lower() for entry in known_cex)
        self.dex_keywords = tuple(keyword.lower() for keyword in dex_keywords)

    @staticmethod
    def _normalize(value: Optional[str]) -> str:
        return (value or "").lower()

    def is_known_cex(self, exchange_id: Optional[str], name: Optional[str]) -> bool:
        """ID 或名称等于或包含任一白名单条目"""
        normalized_id = self._normalize(exchange_id)
        normalized_name = self._normalize(name)

        return any(
            normalized_id == cex
            or normalized_name == cex
            or cex in normalized_id
            or cex in normalized_name
            for cex in self.known_cex
        )

    def has_dex_keyword(self, exchange_id: Optional[str], name: Optional[str]) -> bool:
        """ID 或名称包含任一 DEX 关键词"""
        normalized_id = self._normalize(exchange_id)
        normalized_name = self._normalize(name)

        return any(
            keyword in normalized_id or keyword in normalized_name
            for keyword in self.dex_keywords
        )

    def match_rule(self, exchange_id: Optional[str], name: Optional[str]) -> MatchRule:
        """
        返回第一个命中的规则

        Args:
            exchange_id: 交易所 ID
            name: 交易所名称

        Returns:
            MatchRule.KNOWN_CEX / MatchRule.DEX_KEYWORD / MatchRule.NONE
        """
        if self.is_known_cex(exchange_id, name):
            return MatchRule.KNOWN_CEX
        if self.has_dex_keyword(exchange_id, name):
            return MatchRule.DEX_KEYWORD
        return MatchRule.NONE

    def classify(
        self,
        exchange_id: Optional[str],
        name: Optional[str],
        source_centralized: Optional[bool] = None,
    ) -> bool:
        """
        判断交易所是否为中心化交易所

        Args:
            exchange_id: 交易所 ID
            name: 交易所名称
            source_centralized: 数据源提供的 centralized 字段，仅作兜底

        Returns:
            True 表示 CEX，False 表示 DEX
        """
        rule = self.match_rule(exchange_id, name)

        if rule is MatchRule.KNOWN_CEX:
            return True
        if rule is MatchRule.DEX_KEYWORD:
            return False

        # 两个表都未命中：使用数据源字段，缺失时默认 CEX
        if source_centralized is None:
            return True
        return bool(source_centralized)


def classify_exchange(
    exchange_id: Optional[str],
    name: Optional[str],
    source_centralized: Optional[bool] = None,
) -> bool:
    """使用默认规则表分类单个交易所的便捷函数"""
    return _default_classifier.classify(exchange_id, name, source_centralized)


_default_classifier = ExchangeClassifier()
