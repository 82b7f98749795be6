"""同期機能のEnum定義"""
from enum import Enum


class SyncStatus(str, Enum):
    """同期実行のステータス"""

    IDLE = "idle"
    LOCATING = "locating"
    FETCHING = "fetching"
    RECONCILING = "reconciling"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """終了状態かどうか"""
        return self in (SyncStatus.DONE, SyncStatus.FAILED)
