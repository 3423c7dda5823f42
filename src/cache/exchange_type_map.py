"""
交易所类型映射构建器

构建 交易所 ID -> 是否中心化 的映射，并在多次请求间累积缓存：

1. 读取已缓存映射，若请求的 ID 全部存在则直接返回
2. 否则读取交易所目录，用目录分类覆盖已有条目
3. 对请求中的每个 ID 直接运行分类规则：
   - 命中已知 CEX → True
   - 命中 DEX 关键词 → 强制 False（覆盖目录结果）
   - 都未命中 → 仅在尚无条目时默认 True
4. 无论是否新增，都回写完整映射以刷新过期时间
"""

import json
import logging
from typing import Dict, Iterable, Optional

from ..classification.exchange_classifier import ExchangeClassifier, MatchRule
from .cache_config import CacheConfig
from .exchange_catalog import ExchangeCatalogCache

logger = logging.getLogger(__name__)


class ExchangeTypeMapBuilder:
    """交易所类型映射构建器"""

    def __init__(
        self,
        store,
        catalog: ExchangeCatalogCache,
        classifier: Optional[ExchangeClassifier] = None,
        config: Optional[CacheConfig] = None,
    ):
        self.store = store
        self.catalog = catalog
        self.classifier = classifier or catalog.classifier
        self.config = config or catalog.config

    def _load_cached_map(self) -> Optional[Dict[str, bool]]:
        result = self.store.get(self.config.type_map_key)
        if not result.ok:
            logger.warning("读取交易所类型映射缓存失败，按未命中处理")
            return None
        if not result.hit:
            return None

        try:
            pairs = json.loads(result.value)
            if not isinstance(pairs, list):
                raise ValueError(f"期望列表，实际为 {type(pairs).__name__}")

            exchange_map: Dict[str, bool] = {}
            for pair in pairs:
                if (
                    not isinstance(pair, list)
                    or len(pair) != 2
                    or not isinstance(pair[0], str)
                    or not isinstance(pair[1], bool)
                ):
                    raise ValueError(f"无效的映射条目: {pair!r}")
                exchange_map[pair[0]] = pair[1]
            return exchange_map
        except (TypeError, ValueError) as e:
            logger.error(f"交易所类型映射缓存内容无法解析: {e}")
            return None

    def _save_map(self, exchange_map: Dict[str, bool]) -> None:
        payload = json.dumps([[exchange_id, value] for exchange_id, value in exchange_map.items()])
        result = self.store.set_with_expiry(
            self.config.type_map_key, payload, self.config.ttl_seconds
        )
        if result.ok:
            logger.info(f"已缓存完整交易所类型映射 ({len(exchange_map)} 个交易所)")
        else:
            logger.warning("交易所类型映射缓存写入失败")

    def build_map(self, identifiers: Iterable[str]) -> Dict[str, bool]:
        """
        构建交易所类型映射

        Args:
            identifiers: 需要分类的交易所 ID（如某币种交易行情中的 market.identifier）

        Returns:
            Dict[str, bool]: 交易所 ID -> 是否中心化，包含缓存中已有的全部条目；
            交易所目录不可用时仅按规则表分类请求的 ID
        """
        requested = list(dict.fromkeys(i for i in identifiers if i))

        exchange_map = self._load_cached_map()
        if exchange_map is not None:
            logger.info(f"从缓存加载 {len(exchange_map)} 个交易所类型")
            missing = [i for i in requested if i not in exchange_map]
            if not missing:
                return exchange_map
            logger.info(f"缓存缺少 {len(missing)} 个交易所，重新构建映射...")
        else:
            exchange_map = {}

        names: Dict[str, str] = {}
        for exchange in self.catalog.get_catalog():
            if exchange.id and exchange.name:
                names[exchange.id] = exchange.name
                exchange_map[exchange.id] = exchange.centralized

        for exchange_id in requested:
            name = names.get(exchange_id, exchange_id)
            rule = self.classifier.match_rule(exchange_id, name)

            if rule is MatchRule.KNOWN_CEX:
                exchange_map[exchange_id] = True
            elif rule is MatchRule.DEX_KEYWORD:
                # 关键词判定优先于目录分类
                exchange_map[exchange_id] = False
                logger.debug(f"关键词判定 {exchange_id} ({name}) 为 DEX")
            else:
                exchange_map.setdefault(exchange_id, True)

        dex_count = sum(1 for value in exchange_map.values() if not value)
        logger.info(
            f"交易所类型映射构建完成: {len(exchange_map)} 个 "
            f"(DEX {dex_count}, CEX {len(exchange_map) - dex_count})"
        )

        self._save_map(exchange_map)
        return exchange_map
