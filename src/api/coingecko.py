"""
CoinGecko API 封装模块

提供交易所目录与币种交易行情查询，供交易所分类与上架分析使用。
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv

# 加载环境变量
load_dotenv()

logger = logging.getLogger(__name__)


class CoinGeckoAPI:
    """CoinGecko API 封装类，支持 Pro API Key"""

    def __init__(self, api_key: Optional[str] = None, timeout: float = 30.0):
        """
        初始化 CoinGecko API 客户端

        Args:
            api_key: CoinGecko Pro API Key，如果不提供则从环境变量获取
            timeout: 单次请求超时时间（秒）
        """
        self.api_key = api_key or os.getenv("COINGECKO_API_KEY")
        self.base_url = "https://pro-api.coingecko.com/api/v3"
        self.timeout = timeout
        self.session = requests.Session()

        if self.api_key:
            self.session.headers.update(
                {"x-cg-pro-api-key": self.api_key, "accept": "application/json"}
            )
        else:
            logger.warning("未找到 API Key，将使用免费接口（有限制）")
            self.base_url = "https://api.coingecko.com/api/v3"
            self.session.headers.update({"accept": "application/json"})

    def _make_request(self, endpoint: str, params: Optional[Dict] = None) -> Any:
        """
        发送 API 请求的通用方法

        Args:
            endpoint: API 端点
            params: 请求参数

        Returns:
            API 响应数据

        Raises:
            requests.exceptions.RequestException: 当 API 请求失败时抛出异常
        """
        url = f"{self.base_url}/{endpoint}"

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"API 请求失败: {e}")
            if hasattr(e, "response") and e.response is not None:
                logger.error(f"状态码: {e.response.status_code}")
                logger.debug(f"响应内容: {e.response.text}")
            raise

    # ===== 🔹 基础 API =====
    def ping(self) -> Dict[str, Any]:
        """
        检查 API 服务状态

        Returns:
            Dict[str, Any]: 形如 {"gecko_says": "(V3) To the Moon!"}
        """
        return self._make_request("ping")

    # ===== 🔹 交易所 API =====
    def get_exchanges(self, per_page: int = 100, page: int = 1) -> List[Dict[str, Any]]:
        """
        分页获取所有交易所（含交易量数据）

        官方文档: https://docs.coingecko.com/reference/exchanges

        Args:
            per_page (int, optional): 每页数量，最大 250，默认 100。
            page (int, optional): 页码，从 1 开始，默认 1。

        Returns:
            List[Dict[str, Any]]: 交易所列表，每个元素包含以下字段：
                - id (str): 交易所唯一标识符（如 'binance', 'uniswap_v3'）
                - name (str): 交易所名称
                - year_established (int, optional): 成立年份
                - country (str, optional): 所在国家
                - description (str): 描述
                - url (str): 官网地址
                - image (str): logo URL
                - has_trading_incentive (bool): 是否有交易激励
                - trust_score (int): 信任评分（1-10）
                - trust_score_rank (int): 信任评分排名
                - trade_volume_24h_btc (float): 24小时交易量（BTC 计价）

            **示例数据：**
                [
                    {
                        "id": "binance",
                        "name": "Binance",
                        "year_established": 2017,
                        "country": "Cayman Islands",
                        "trust_score": 10,
                        "trade_volume_24h_btc": 207319.13
                    }
                ]

        Note:
            - 返回数量少于 per_page 时表示已到最后一页
            - 部分响应包含 centralized 字段，但不少 DEX 会被错误标记为 centralized

        Raises:
            requests.exceptions.RequestException: 当 API 请求失败时抛出异常
        """
        endpoint = "exchanges"
        params = {"per_page": per_page, "page": page}

        logger.debug(f"正在获取交易所列表第 {page} 页 (每页 {per_page} 个)...")
        return self._make_request(endpoint, params)

    # ===== 🔹 币种 API =====
    def get_coin_tickers(
        self,
        coin_id: str,
        exchange_ids: Optional[str] = None,
        include_exchange_logo: bool = False,
        page: int = 1,
        order: str = "trust_score_desc",
        depth: bool = False,
    ) -> Dict[str, Any]:
        """
        根据ID获取硬币的交易行情数据

        官方文档: https://docs.coingecko.com/reference/coins-id-tickers

        Args:
            coin_id (str): 硬币的唯一标识符，如 'bitcoin', 'ethereum'。
            exchange_ids (str, optional): 指定交易所ID列表，用逗号分隔。
            include_exchange_logo (bool, optional): 是否包含交易所logo URL，默认为 False。
            page (int, optional): 页码，从 1 开始，默认为 1。
            order (str, optional): 排序方式，默认为 'trust_score_desc'。
            depth (bool, optional): 是否包含2%深度的买卖盘数据，默认为 False。

        Returns:
            Dict[str, Any]: 交易行情数据：
                - name (str): 硬币名称
                - tickers (List[Dict]): 交易行情列表，每个元素包含
                    - base / target (str): 交易对
                    - trust_score (str): 'green' / 'yellow' / 'red'
                    - is_anomaly / is_stale (bool): 异常或过期标记
                    - market (Dict): name、identifier、has_trading_incentive、logo
                    - converted_volume (Dict): btc、eth、usd 计价的交易量

        Raises:
            requests.exceptions.RequestException: 当 API 请求失败时抛出异常
        """
        endpoint = f"coins/{coin_id}/tickers"
        params = {
            "include_exchange_logo": str(include_exchange_logo).lower(),
            "page": page,
            "order": order,
            "depth": str(depth).lower(),
        }

        if exchange_ids:
            params["exchange_ids"] = exchange_ids

        logger.info(f"正在获取 {coin_id} 的交易行情数据...")
        return self._make_request(endpoint, params)


def create_api_client(api_key: Optional[str] = None) -> CoinGeckoAPI:
    """
    创建 CoinGecko API 客户端的便捷函数

    Args:
        api_key (str, optional): CoinGecko Pro API 密钥。
            如果不提供，将尝试从环境变量 COINGECKO_API_KEY 中获取。
            如果环境变量也不存在，将使用免费API（有限制）。

    Returns:
        CoinGeckoAPI: 已配置的 CoinGecko API 客户端实例。

    Example:
        >>> api = create_api_client()
        >>> first_page = api.get_exchanges(per_page=250, page=1)
    """
    return CoinGeckoAPI(api_key)
