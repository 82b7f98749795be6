"""同期機能のドメインモデル"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ...geolocation.domain.models import GeoLocation
from ...hospitals.domain.models import PointOfInterest
from .enums import SyncStatus


@dataclass
class SyncRunResult:
    """同期実行結果"""

    run_id: str  # 実行ID（ユニーク）
    started_at: datetime
    status: SyncStatus = SyncStatus.IDLE
    hospitals: list[PointOfInterest] = field(default_factory=list)
    origin: Optional[GeoLocation] = None  # 検索の中心（現在地）
    error: Optional[Exception] = None
    error_message: Optional[str] = None
    fetched_elements: int = 0
    failed_chunks: list[int] = field(default_factory=list)
    transitions: list[SyncStatus] = field(default_factory=list)
    completed_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None

    def set_error(self, error: Exception, message: Optional[str] = None) -> None:
        """エラーを記録（メッセージは直前のものを置き換える）"""
        self.error = error
        self.error_message = message or str(error)

    def to_dict(self) -> dict[str, Any]:
        """APIレスポンス用の辞書に変換"""
        return {
            "run_id": self.run_id,
            "status": self.status.value,
            "error": self.error_message,
            "origin": (
                {"latitude": self.origin.latitude, "longitude": self.origin.longitude}
                if self.origin
                else None
            ),
            "fetched_elements": self.fetched_elements,
            "failed_chunks": self.failed_chunks,
            "hospital_count": len(self.hospitals),
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
        }
