"""Overpass API（OpenStreetMap）クライアント"""

from typing import Any, Optional

from ....shared.exceptions.errors import HTTPError, ParsingError, ProviderUnreachable
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

DEFAULT_OVERPASS_URL = "https://overpass-api.de/api/interpreter"

# node / way / relation の病院を半径内で検索し、way / relation は中心座標を返す
HOSPITAL_QUERY_TEMPLATE = """
[out:json][timeout:{query_timeout}];
(
  node["amenity"="hospital"](around:{radius},{lat},{lon});
  way["amenity"="hospital"](around:{radius},{lat},{lon});
  relation["amenity"="hospital"](around:{radius},{lat},{lon});
);
out center tags;
"""


class OverpassClient:
    """Overpass APIから病院の要素を取得するクライアント"""

    def __init__(
        self,
        http_client: Optional[HTTPClient] = None,
        api_url: str = DEFAULT_OVERPASS_URL,
        query_timeout: int = 180,
    ) -> None:
        """
        Args:
            http_client: HTTPクライアント（Noneの場合は新規作成）
            api_url: Overpass APIのエンドポイント
            query_timeout: Overpassクエリのサーバー側タイムアウト（秒）
        """
        self.http_client = http_client or HTTPClient()
        self.api_url = api_url
        self.query_timeout = query_timeout

        logger.info(f"OverpassClient initialized: {self.api_url}")

    def build_query(self, latitude: float, longitude: float, radius_m: int) -> str:
        """
        病院検索のOverpass QLを生成

        Args:
            latitude: 中心の緯度
            longitude: 中心の経度
            radius_m: 検索半径（メートル）

        Returns:
            str: Overpass QLクエリ
        """
        return HOSPITAL_QUERY_TEMPLATE.format(
            query_timeout=self.query_timeout,
            radius=int(radius_m),
            lat=latitude,
            lon=longitude,
        )

    def fetch_hospitals(
        self, latitude: float, longitude: float, radius_m: int
    ) -> list[dict[str, Any]]:
        """
        指定地点の周辺の病院要素を取得（1リクエスト）

        Args:
            latitude: 中心の緯度
            longitude: 中心の経度
            radius_m: 検索半径（メートル）

        Returns:
            list[dict[str, Any]]: Overpass APIの要素のリスト（結果なしの場合は空）

        Raises:
            ProviderUnreachable: 非2xxレスポンスまたは通信エラーの場合
            ParsingError: レスポンスがJSONとして解析できない場合
        """
        query = self.build_query(latitude, longitude, radius_m)

        logger.info(
            f"Fetching hospitals around ({latitude}, {longitude}) within {radius_m} m"
        )

        try:
            response = self.http_client.post(
                self.api_url,
                data=query.encode("utf-8"),
                headers={"Content-Type": "text/plain"},
            )
        except HTTPError as e:
            raise ProviderUnreachable(f"Overpass API error: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ParsingError(f"Invalid JSON from Overpass API: {e}") from e

        elements = payload.get("elements") if isinstance(payload, dict) else None
        if not isinstance(elements, list):
            logger.warning("Overpass response has no elements")
            return []

        logger.info(f"Fetched {len(elements)} elements from Overpass API")
        return elements
