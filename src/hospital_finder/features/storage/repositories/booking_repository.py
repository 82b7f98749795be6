"""予約リポジトリ"""
from typing import Optional

from ....shared.exceptions.errors import StorageError
from ....shared.logging.config import get_logger
from ...booking.domain.models import Booking
from ..clients.firestore_client import FirestoreClient
from .base import AbstractBookingRepository

logger = get_logger(__name__)


class BookingRepository(AbstractBookingRepository):
    """予約データのリポジトリ"""

    COLLECTION_NAME = "appointments"

    def __init__(
        self, firestore_client: FirestoreClient, collection_name: Optional[str] = None
    ) -> None:
        """
        BookingRepositoryを初期化

        Args:
            firestore_client: Firestoreクライアント
            collection_name: コレクション名（Noneの場合はデフォルト）
        """
        self.client = firestore_client
        self.collection_name = collection_name or self.COLLECTION_NAME
        logger.info(f"BookingRepository initialized: {self.collection_name}")

    def create(self, booking: Booking) -> Booking:
        """
        予約を新規作成

        Args:
            booking: 予約オブジェクト

        Returns:
            Booking: IDが採番された予約

        Raises:
            StorageError: 作成に失敗した場合
        """
        row = self.client.add_document(self.collection_name, booking.to_firestore_dict())
        if not row.get("id"):
            raise StorageError("Booking insert returned no id")

        logger.info(
            f"Booking created: {row['id']} (hospital={booking.poi_id}, status={booking.status.value})"
        )
        return Booking.from_firestore_dict(row)
