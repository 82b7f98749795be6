"""HTTPクライアント"""

import time
from typing import Any, Optional, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions.errors import HTTPError
from ..logging.config import get_logger

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "HospitalFinderSync/1.0"

Body = Union[str, bytes, dict[str, Any]]


class HTTPClient:
    """
    requests.Sessionのラッパー

    - 全リクエストにタイムアウトとUser-Agentを付与
    - 非2xx・通信エラーは HTTPError に変換
    - 自動リトライはデフォルトで無効（max_retries=0）
    """

    def __init__(
        self,
        timeout: float = 60,
        max_retries: int = 0,
        backoff_factor: float = 0.5,
        status_forcelist: tuple[int, ...] = (429, 500, 502, 503, 504),
        user_agent: Optional[str] = None,
    ):
        """
        Args:
            timeout: リクエストタイムアウト（秒）
            max_retries: 最大リトライ回数（0で無効）
            backoff_factor: リトライ時のバックオフ係数
            status_forcelist: リトライ対象のステータスコード
            user_agent: User-Agentヘッダー
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.user_agent = user_agent or DEFAULT_USER_AGENT

        self.session = requests.Session()
        self.session.headers["User-Agent"] = self.user_agent

        adapter = HTTPAdapter(
            max_retries=Retry(
                total=max_retries,
                backoff_factor=backoff_factor,
                status_forcelist=status_forcelist,
                allowed_methods=frozenset({"GET", "POST"}),
                raise_on_status=False,
            )
        )
        for prefix in ("http://", "https://"):
            self.session.mount(prefix, adapter)

    def post(
        self,
        url: str,
        data: Optional[Body] = None,
        json: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> requests.Response:
        """
        POSTリクエスト

        Args:
            url: リクエストURL
            data: リクエストボディ（クエリ文字列・バイト列・フォームデータ）
            json: JSONボディ
            headers: 追加ヘッダー

        Returns:
            2xxのレスポンス

        Raises:
            HTTPError: 非2xxレスポンスまたは通信エラーの場合
        """
        return self._request("POST", url, data=data, json=json, headers=headers)

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        started = time.monotonic()

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise HTTPError(f"Failed to {method} {url}: {e}") from e

        logger.debug(
            f"{method} {url} -> {response.status_code} "
            f"({len(response.content)} bytes, {time.monotonic() - started:.2f}s)"
        )
        return response

    def close(self) -> None:
        """セッションをクローズ"""
        self.session.close()
        logger.debug("HTTP session closed")

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
