"""病院リポジトリ"""
from typing import Optional

from ....shared.exceptions.errors import StorageError
from ....shared.logging.config import get_logger
from ...hospitals.domain.models import PointOfInterest
from ..clients.firestore_client import FirestoreClient
from .base import AbstractHospitalRepository

logger = get_logger(__name__)

# アップサートの競合キー
CONFLICT_FIELDS = ("latitude", "longitude")


class HospitalRepository(AbstractHospitalRepository):
    """病院データのリポジトリ"""

    COLLECTION_NAME = "hospitals"

    def __init__(
        self, firestore_client: FirestoreClient, collection_name: Optional[str] = None
    ) -> None:
        """
        HospitalRepositoryを初期化

        Args:
            firestore_client: Firestoreクライアント
            collection_name: コレクション名（Noneの場合はデフォルト）
        """
        self.client = firestore_client
        self.collection_name = collection_name or self.COLLECTION_NAME
        logger.info(f"HospitalRepository initialized: {self.collection_name}")

    def upsert_batch(self, hospitals: list[PointOfInterest]) -> list[PointOfInterest]:
        """
        病院をバッチでアップサート

        Args:
            hospitals: 病院オブジェクトのリスト（1チャンク分）

        Returns:
            list[PointOfInterest]: ストアに書き込まれた病院（IDつき）

        Raises:
            StorageError: 書き込みに失敗した場合
        """
        if not hospitals:
            return []

        rows = self.client.upsert_by_fields(
            self.collection_name,
            [hospital.to_firestore_dict() for hospital in hospitals],
            key_fields=CONFLICT_FIELDS,
        )
        return [PointOfInterest.from_firestore_dict(row) for row in rows]

    def find_id_by_coordinates(self, latitude: float, longitude: float) -> Optional[str]:
        """
        座標の完全一致で病院IDを検索

        Args:
            latitude: 緯度
            longitude: 経度

        Returns:
            Optional[str]: 病院ID（存在しない場合はNone）
        """
        docs = self.client.query_documents(
            self.collection_name,
            filters=[("latitude", "==", latitude), ("longitude", "==", longitude)],
            limit=1,
        )
        return docs[0]["id"] if docs else None

    def create(self, hospital: PointOfInterest) -> PointOfInterest:
        """
        病院を新規作成

        Args:
            hospital: 病院オブジェクト

        Returns:
            PointOfInterest: IDが採番された病院

        Raises:
            StorageError: 作成に失敗した場合
        """
        row = self.client.add_document(self.collection_name, hospital.to_firestore_dict())
        if not row.get("id"):
            raise StorageError("Hospital insert returned no id")

        logger.info(f"Hospital created: {row['id']} - {hospital.name}")
        return PointOfInterest.from_firestore_dict(row)
