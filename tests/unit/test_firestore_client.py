"""Firestoreクライアント・リポジトリのテスト"""

from typing import Any
from unittest.mock import MagicMock

import pytest

from fakes import FakeFirestoreClient

from hospital_finder.features.hospitals.domain.models import UNNAMED_HOSPITAL, PointOfInterest
from hospital_finder.features.storage.clients.firestore_client import FirestoreClient
from hospital_finder.features.storage.repositories.hospital_repository import HospitalRepository
from hospital_finder.shared.exceptions.errors import StorageError


def _snapshot(doc_id: str, data: dict[str, Any]) -> MagicMock:
    snapshot = MagicMock()
    snapshot.id = doc_id
    snapshot.exists = True
    snapshot.to_dict.return_value = dict(data)
    return snapshot


@pytest.fixture
def client() -> FirestoreClient:
    """google-cloud-firestoreのClientをモックに差し替えたクライアント"""
    firestore_client = FirestoreClient.__new__(FirestoreClient)
    firestore_client.project_id = "test-project"
    firestore_client.database_id = "(default)"
    firestore_client.client = MagicMock()
    return firestore_client


def test_query_documents_applies_filters_order_and_limit(client: FirestoreClient) -> None:
    """フィルタ・並び順・件数制限を適用し、IDつきで返す"""
    query = client.client.collection.return_value
    query.where.return_value = query
    query.order_by.return_value = query
    query.limit.return_value = query
    query.stream.return_value = [_snapshot("a-1", {"user_id": "u-1"})]

    docs = client.query_documents(
        "health_assessments",
        filters=[("user_id", "==", "u-1")],
        order_by=("created_at", "DESCENDING"),
        limit=1,
    )

    assert docs == [{"user_id": "u-1", "id": "a-1"}]
    client.client.collection.assert_called_once_with("health_assessments")
    query.order_by.assert_called_once_with("created_at", direction="DESCENDING")
    query.limit.assert_called_once_with(1)


def test_query_documents_wraps_errors(client: FirestoreClient) -> None:
    """Firestoreの例外は StorageError に変換"""
    client.client.collection.return_value.stream.side_effect = RuntimeError("unavailable")

    with pytest.raises(StorageError, match="Failed to query documents from hospitals"):
        client.query_documents("hospitals")


def test_add_document_returns_id(client: FirestoreClient) -> None:
    """自動採番したIDを含めて返す"""
    doc_ref = MagicMock()
    doc_ref.id = "new-id"
    client.client.collection.return_value.add.return_value = (None, doc_ref)

    row = client.add_document("appointments", {"status": "pending"})

    assert row == {"status": "pending", "id": "new-id"}


def test_upsert_by_fields_updates_existing_and_creates_new(client: FirestoreClient) -> None:
    """一致するドキュメントはマージ更新、なければ新規作成"""
    collection = client.client.collection.return_value
    collection.where.return_value = collection

    existing = _snapshot("existing", {})
    collection.limit.return_value.stream.side_effect = [[existing], []]

    new_ref = MagicMock()
    collection.document.return_value = new_ref

    batch = client.client.batch.return_value
    client.client.get_all.return_value = [
        _snapshot("existing", {"latitude": 1.0, "longitude": 2.0, "name": "A"}),
        _snapshot("created", {"latitude": 3.0, "longitude": 4.0, "name": "B"}),
    ]

    rows = client.upsert_by_fields(
        "hospitals",
        [
            {"latitude": 1.0, "longitude": 2.0, "name": "A"},
            {"latitude": 3.0, "longitude": 4.0, "name": "B"},
        ],
        key_fields=("latitude", "longitude"),
    )

    assert [row["id"] for row in rows] == ["existing", "created"]
    batch.set.assert_any_call(
        existing.reference, {"latitude": 1.0, "longitude": 2.0, "name": "A"}, merge=True
    )
    batch.set.assert_any_call(new_ref, {"latitude": 3.0, "longitude": 4.0, "name": "B"})
    batch.commit.assert_called_once()
    client.client.get_all.assert_called_once_with([existing.reference, new_ref])


def test_upsert_by_fields_commit_error(client: FirestoreClient) -> None:
    """コミットの失敗は StorageError"""
    collection = client.client.collection.return_value
    collection.where.return_value = collection
    collection.limit.return_value.stream.return_value = []
    client.client.batch.return_value.commit.side_effect = RuntimeError("deadline exceeded")

    with pytest.raises(StorageError, match="Failed to upsert into hospitals"):
        client.upsert_by_fields(
            "hospitals", [{"latitude": 1.0, "longitude": 2.0}], ("latitude", "longitude")
        )


def test_upsert_by_fields_rejects_oversized_batch(client: FirestoreClient) -> None:
    """バッチ上限を超える件数はエラー"""
    documents = [{"latitude": float(i), "longitude": 1.0} for i in range(501)]

    with pytest.raises(ValueError):
        client.upsert_by_fields("hospitals", documents, ("latitude", "longitude"))


def test_hospital_repository_find_and_create(firestore: FakeFirestoreClient) -> None:
    """座標の完全一致で検索し、なければ作成"""
    repository = HospitalRepository(firestore, "poi")

    assert repository.find_id_by_coordinates(1.0, 2.0) is None

    created = repository.create(PointOfInterest(1.0, 2.0, name="A", emergency_available=True))

    assert created.is_persisted
    assert repository.find_id_by_coordinates(1.0, 2.0) == created.id
    assert firestore.collections["poi"][created.id]["emergency_available"] is True


def test_hospital_repository_upsert_batch_returns_persisted(firestore: FakeFirestoreClient) -> None:
    """アップサート結果はIDつきの病院"""
    repository = HospitalRepository(firestore)

    rows = repository.upsert_batch([PointOfInterest(1.0, 2.0), PointOfInterest(1.0, 2.0)])

    assert len(rows) == 2
    assert rows[0].id == rows[1].id
    assert repository.upsert_batch([]) == []


def test_point_of_interest_from_firestore_dict_defaults() -> None:
    """欠落したフィールドのデフォルト値"""
    hospital = PointOfInterest.from_firestore_dict(
        {"id": 42, "latitude": "1.5", "longitude": 2, "name": None}
    )

    assert hospital.id == "42"
    assert hospital.name == UNNAMED_HOSPITAL
    assert (hospital.latitude, hospital.longitude) == (1.5, 2.0)
    assert hospital.emergency_available is False
