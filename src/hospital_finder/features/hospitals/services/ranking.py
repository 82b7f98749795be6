"""現在地からの距離による病院の並べ替え"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional

from ...geolocation.domain.models import GeoLocation
from ...geolocation.services.coordinates import distance_km
from ..domain.models import PointOfInterest


@dataclass
class RankedHospital:
    """距離付きの病院"""

    hospital: PointOfInterest
    distance_km: Optional[float] = None

    @property
    def distance_label(self) -> Optional[str]:
        """表示用の距離（例: "12.3 km"）"""
        if self.distance_km is None:
            return None
        return format_distance(self.distance_km)

    def to_dict(self) -> dict[str, Any]:
        """APIレスポンス用の辞書に変換"""
        return {
            **self.hospital.to_dict(),
            "distance_km": self.distance_km,
            "distance_label": self.distance_label,
        }


def format_distance(km: float) -> str:
    """距離を小数点以下1桁で整形"""
    return f"{km:.1f} km"


def rank_by_distance(
    hospitals: Iterable[PointOfInterest], origin: Optional[GeoLocation]
) -> list[RankedHospital]:
    """
    現在地から近い順に並べ替え

    Args:
        hospitals: 病院オブジェクト
        origin: 現在地（Noneの場合は入力順のまま、距離なし）

    Returns:
        list[RankedHospital]: 距離の昇順に並んだ病院（同距離は入力順）
    """
    if origin is None:
        return [RankedHospital(hospital=hospital) for hospital in hospitals]

    ranked = [
        RankedHospital(
            hospital=hospital,
            distance_km=distance_km(
                origin.latitude, origin.longitude, hospital.latitude, hospital.longitude
            ),
        )
        for hospital in hospitals
    ]
    ranked.sort(key=lambda item: item.distance_km)
    return ranked
