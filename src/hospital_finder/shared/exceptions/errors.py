"""カスタム例外定義"""
from typing import Optional


class HospitalFinderError(Exception):
    """病院検索・同期エンジンの基底例外"""

    pass


class HTTPError(HospitalFinderError):
    """HTTP関連のエラー"""

    pass


class ProviderUnreachable(HTTPError):
    """外部ジオデータプロバイダーに到達できない（非2xx・通信エラー）"""

    pass


class ParsingError(HospitalFinderError):
    """レスポンス解析エラー"""

    pass


class StorageError(HospitalFinderError):
    """ストレージ関連のエラー"""

    pass


class ConfigurationError(HospitalFinderError):
    """設定エラー"""

    pass


class LocationUnavailable(HospitalFinderError):
    """現在地を取得できない（拒否・非対応・タイムアウト）"""

    pass


class PartialReconcileFailure(HospitalFinderError):
    """
    一部のチャンクの書き込みに失敗（致命的ではない）

    Attributes:
        failed_chunks: 失敗したチャンクのインデックス（0始まり）
        messages: チャンクごとのエラーメッセージ
    """

    def __init__(
        self, failed_chunks: list[int], messages: Optional[list[str]] = None
    ) -> None:
        self.failed_chunks = list(failed_chunks)
        self.messages = list(messages or [])
        last = self.messages[-1] if self.messages else "unknown error"
        super().__init__(f"Store upsert error: {last}")


class BookingError(HospitalFinderError):
    """予約ワークフローの基底例外"""

    pass


class PoiCreateFailed(BookingError):
    """病院レコードの作成に失敗"""

    pass


class AuthRequired(BookingError):
    """認証ユーザーが存在しない"""

    pass


class BookingWriteFailed(BookingError):
    """予約レコードの書き込みに失敗"""

    pass
