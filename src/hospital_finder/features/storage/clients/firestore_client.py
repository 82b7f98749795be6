"""Firestoreクライアント"""
import os
from typing import Any, Optional

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from ....shared.exceptions.errors import StorageError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

# Firestoreのバッチ書き込み上限
MAX_BATCH_SIZE = 500

Filter = tuple[str, str, Any]


class FirestoreClient:
    """Firestore操作クライアント"""

    def __init__(self, project_id: str, database_id: str = "(default)") -> None:
        """
        Firestoreクライアントを初期化

        Args:
            project_id: GCPプロジェクトID
            database_id: データベースID（デフォルトは"(default)"）
        """
        self.project_id = project_id
        self.database_id = database_id

        emulator_host = os.environ.get("FIRESTORE_EMULATOR_HOST")

        try:
            self.client = firestore.Client(project=project_id, database=database_id)

            if emulator_host:
                logger.info(
                    f"Firestore client initialized (EMULATOR MODE): "
                    f"host={emulator_host}, project={project_id}, database={database_id}"
                )
            else:
                logger.info(
                    f"Firestore client initialized: project={project_id}, database={database_id}"
                )
        except Exception as e:
            raise StorageError(f"Failed to initialize Firestore client: {e}") from e

    def get_collection(self, collection_path: str) -> firestore.CollectionReference:
        """
        コレクション参照を取得

        Args:
            collection_path: コレクションパス

        Returns:
            CollectionReference: コレクション参照
        """
        return self.client.collection(collection_path)

    def query_documents(
        self,
        collection_path: str,
        filters: Optional[list[Filter]] = None,
        order_by: Optional[tuple[str, str]] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """
        条件に一致するドキュメントを取得

        Args:
            collection_path: コレクションパス
            filters: フィルタ条件のリスト [(field, operator, value), ...]
            order_by: 並び順 (field, "ASCENDING" | "DESCENDING")
            limit: 取得件数の上限

        Returns:
            list[dict[str, Any]]: ドキュメントのリスト（"id"にドキュメントIDを格納）

        Example:
            >>> client.query_documents(
            ...     "health_assessments",
            ...     filters=[("user_id", "==", "u-1")],
            ...     order_by=("created_at", "DESCENDING"),
            ...     limit=1,
            ... )
        """
        try:
            query = self.get_collection(collection_path)

            if filters:
                for field, operator, value in filters:
                    query = query.where(filter=FieldFilter(field, operator, value))

            if order_by:
                field, direction = order_by
                query = query.order_by(field, direction=direction)

            if limit:
                query = query.limit(limit)

            return [self._snapshot_to_dict(doc) for doc in query.stream() if doc.exists]

        except Exception as e:
            raise StorageError(
                f"Failed to query documents from {collection_path}: {e}"
            ) from e

    def add_document(self, collection_path: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        ドキュメントを新規作成（IDは自動採番）

        Args:
            collection_path: コレクションパス
            data: ドキュメントデータ

        Returns:
            dict[str, Any]: 作成されたドキュメント（"id"を含む）
        """
        try:
            _, doc_ref = self.get_collection(collection_path).add(data)
            logger.info(f"Document {doc_ref.id} added to {collection_path}")
            return {**data, "id": doc_ref.id}

        except Exception as e:
            raise StorageError(f"Failed to add document to {collection_path}: {e}") from e

    def upsert_by_fields(
        self,
        collection_path: str,
        documents: list[dict[str, Any]],
        key_fields: tuple[str, ...],
    ) -> list[dict[str, Any]]:
        """
        キーフィールドの一致で既存ドキュメントを更新、なければ作成（1バッチ）

        書き込み後のドキュメントを読み直して返すため、
        新規作成分にも採番済みのIDが付与される。

        Args:
            collection_path: コレクションパス
            documents: 書き込むドキュメントのリスト（最大500件）
            key_fields: 競合判定に使うフィールド名（例: ("latitude", "longitude")）

        Returns:
            list[dict[str, Any]]: 書き込み後のドキュメント（"id"を含む）

        Raises:
            StorageError: 書き込みに失敗した場合
        """
        if len(documents) > MAX_BATCH_SIZE:
            raise ValueError(f"Batch size must be <= {MAX_BATCH_SIZE}")

        if not documents:
            return []

        collection = self.get_collection(collection_path)

        try:
            batch = self.client.batch()
            doc_refs = []

            for doc in documents:
                query = collection
                for field in key_fields:
                    query = query.where(filter=FieldFilter(field, "==", doc[field]))

                existing = list(query.limit(1).stream())

                if existing:
                    doc_ref = existing[0].reference
                    batch.set(doc_ref, doc, merge=True)
                else:
                    doc_ref = collection.document()
                    batch.set(doc_ref, doc)

                doc_refs.append(doc_ref)

            batch.commit()

            rows = [
                self._snapshot_to_dict(snapshot)
                for snapshot in self.client.get_all(doc_refs)
                if snapshot.exists
            ]
            logger.info(
                f"Upsert completed: {len(rows)} documents written to {collection_path}"
            )
            return rows

        except Exception as e:
            raise StorageError(f"Failed to upsert into {collection_path}: {e}") from e

    @staticmethod
    def _snapshot_to_dict(snapshot: Any) -> dict[str, Any]:
        """スナップショットをIDつきの辞書に変換"""
        data = snapshot.to_dict() or {}
        data["id"] = snapshot.id
        return data
