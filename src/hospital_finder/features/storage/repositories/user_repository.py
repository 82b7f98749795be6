"""ユーザー関連（プロフィール・アセスメント）リポジトリ"""
from typing import Optional

from ....shared.logging.config import get_logger
from ..clients.firestore_client import FirestoreClient
from .base import AbstractAssessmentRepository, AbstractProfileRepository

logger = get_logger(__name__)


class ProfileRepository(AbstractProfileRepository):
    """ユーザープロフィールのリポジトリ"""

    COLLECTION_NAME = "user_profiles"

    def __init__(
        self, firestore_client: FirestoreClient, collection_name: Optional[str] = None
    ) -> None:
        self.client = firestore_client
        self.collection_name = collection_name or self.COLLECTION_NAME

    def find_profile_id(self, user_id: str) -> Optional[str]:
        """
        認証ユーザーIDでプロフィールIDを検索

        Args:
            user_id: 認証ユーザーID

        Returns:
            Optional[str]: プロフィールID（存在しない場合はNone）
        """
        docs = self.client.query_documents(
            self.collection_name,
            filters=[("user_id", "==", user_id)],
            limit=1,
        )
        return docs[0]["id"] if docs else None


class AssessmentRepository(AbstractAssessmentRepository):
    """健康アセスメントのリポジトリ"""

    COLLECTION_NAME = "health_assessments"

    def __init__(
        self, firestore_client: FirestoreClient, collection_name: Optional[str] = None
    ) -> None:
        self.client = firestore_client
        self.collection_name = collection_name or self.COLLECTION_NAME

    def find_latest_assessment_id(self, user_id: str) -> Optional[str]:
        """
        ユーザーの最新のアセスメントIDを検索

        Args:
            user_id: 認証ユーザーID

        Returns:
            Optional[str]: アセスメントID（存在しない場合はNone）
        """
        docs = self.client.query_documents(
            self.collection_name,
            filters=[("user_id", "==", user_id)],
            order_by=("created_at", "DESCENDING"),
            limit=1,
        )
        return docs[0]["id"] if docs else None
