"""病院（POI）機能のドメインモデル"""

from dataclasses import dataclass
from typing import Any, Optional

from ...geolocation.services.coordinates import coordinate_key

# 名称がない場合のデフォルト名
UNNAMED_HOSPITAL = "Unnamed Hospital"

DIRECTIONS_URL = "https://www.google.com/maps/dir/?api=1&destination={lat},{lon}"


@dataclass
class PointOfInterest:
    """
    病院情報（POI）

    同一性は座標（小数点以下6桁で丸めた緯度・経度）で判定する。
    id はストアが採番し、永続化されるまでは None。
    """

    # 位置情報（同一性キー）
    latitude: float  # 緯度
    longitude: float  # 経度

    name: str = UNNAMED_HOSPITAL  # 病院名

    # 詳細情報（Optional）
    address: Optional[str] = None  # 住所
    phone: Optional[str] = None  # 電話番号
    specialities: Optional[str] = None  # 診療科
    emergency_available: bool = False  # 救急対応

    # ストアが採番したID
    id: Optional[str] = None

    @property
    def key(self) -> str:
        """座標の同一性キー"""
        return coordinate_key(self.latitude, self.longitude)

    @property
    def is_persisted(self) -> bool:
        """永続化済みかどうか"""
        return self.id is not None

    @property
    def directions_url(self) -> str:
        """Google Mapsの経路案内URL"""
        return DIRECTIONS_URL.format(lat=self.latitude, lon=self.longitude)

    def to_firestore_dict(self) -> dict[str, Any]:
        """Firestore保存用の辞書に変換（idはドキュメントIDのため含めない）"""
        return {
            "name": self.name,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "phone": self.phone,
            "specialities": self.specialities,
            "emergency_available": self.emergency_available,
        }

    @classmethod
    def from_firestore_dict(cls, data: dict[str, Any]) -> "PointOfInterest":
        """Firestoreのデータ（idを含む）から病院オブジェクトを生成"""
        doc_id = data.get("id")
        return cls(
            id=str(doc_id) if doc_id is not None else None,
            name=data.get("name") or UNNAMED_HOSPITAL,
            address=data.get("address"),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            phone=data.get("phone"),
            specialities=data.get("specialities"),
            emergency_available=bool(data.get("emergency_available") or False),
        )

    def to_dict(self) -> dict[str, Any]:
        """APIレスポンス用の辞書に変換"""
        return {
            "id": self.id,
            "key": self.key,
            **self.to_firestore_dict(),
            "directions_url": self.directions_url,
        }
