"""位置情報機能のドメインモデル"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ....shared.utils.datetime_utils import elapsed_seconds, now_utc


@dataclass
class GeoLocation:
    """地理的位置情報（現在地の測位結果）"""

    latitude: float  # 緯度
    longitude: float  # 経度
    accuracy_m: Optional[float] = None  # 精度（メートル）
    acquired_at: datetime = field(default_factory=now_utc)  # 測位日時

    def __repr__(self) -> str:
        return f"GeoLocation(lat={self.latitude}, lng={self.longitude})"

    def to_tuple(self) -> tuple[float, float]:
        """(緯度, 経度)のタプルとして返す"""
        return (self.latitude, self.longitude)

    def age_seconds(self, now: Optional[datetime] = None) -> float:
        """測位からの経過秒数"""
        return elapsed_seconds(self.acquired_at, now)
