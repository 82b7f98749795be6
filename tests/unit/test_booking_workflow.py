"""予約作成ワークフローのテスト"""

from datetime import datetime, timezone
from typing import Optional

import pytest

from fakes import FakeFirestoreClient

from hospital_finder.features.auth.providers.auth_context import (
    AbstractAuthContext,
    AuthUser,
    StaticAuthContext,
)
from hospital_finder.features.booking.domain.models import BookingDraftBook, BookingStatus
from hospital_finder.features.booking.services.booking_workflow import BookingWorkflow
from hospital_finder.features.hospitals.domain.models import PointOfInterest
from hospital_finder.features.storage.repositories.booking_repository import BookingRepository
from hospital_finder.features.storage.repositories.hospital_repository import HospitalRepository
from hospital_finder.features.storage.repositories.user_repository import (
    AssessmentRepository,
    ProfileRepository,
)
from hospital_finder.shared.exceptions.errors import (
    AuthRequired,
    BookingWriteFailed,
    PoiCreateFailed,
)


class BrokenAuthContext(AbstractAuthContext):
    """認証情報の取得に失敗するコンテキスト"""

    def get_current_user(self) -> Optional[AuthUser]:
        raise ConnectionError("auth service down")


@pytest.fixture
def drafts() -> BookingDraftBook:
    return BookingDraftBook()


@pytest.fixture
def hospital() -> PointOfInterest:
    return PointOfInterest(40.0, -73.0, name="General Hospital")


def _workflow(
    hospital_repository: HospitalRepository,
    profile_repository: ProfileRepository,
    assessment_repository: AssessmentRepository,
    booking_repository: BookingRepository,
    auth_context: AbstractAuthContext,
    drafts: Optional[BookingDraftBook] = None,
) -> BookingWorkflow:
    return BookingWorkflow(
        hospital_repository=hospital_repository,
        profile_repository=profile_repository,
        assessment_repository=assessment_repository,
        booking_repository=booking_repository,
        auth_context=auth_context,
        drafts=drafts,
    )


@pytest.fixture
def workflow(
    hospital_repository: HospitalRepository,
    profile_repository: ProfileRepository,
    assessment_repository: AssessmentRepository,
    booking_repository: BookingRepository,
    drafts: BookingDraftBook,
) -> BookingWorkflow:
    return _workflow(
        hospital_repository,
        profile_repository,
        assessment_repository,
        booking_repository,
        StaticAuthContext("user-1"),
        drafts,
    )


def test_create_booking_inserts_unpersisted_hospital_once(
    firestore: FakeFirestoreClient, workflow: BookingWorkflow, hospital: PointOfInterest
) -> None:
    """未永続化の病院は1回だけ挿入され、そのIDで予約される"""
    booking = workflow.create_booking(hospital, note="Fever since Monday")

    hospital_inserts = firestore.adds_to("hospitals")
    assert len(hospital_inserts) == 1
    assert hospital_inserts[0]["name"] == "General Hospital"

    hospital_id = next(iter(firestore.collections["hospitals"]))
    assert booking.poi_id == hospital_id
    assert booking.status == BookingStatus.PENDING
    assert booking.notes == "Fever since Monday"
    assert booking.id is not None

    stored = firestore.adds_to("appointments")[0]
    assert stored["status"] == "pending"
    assert stored["hospital_id"] == hospital_id


def test_create_booking_reuses_existing_hospital(
    firestore: FakeFirestoreClient, workflow: BookingWorkflow, hospital: PointOfInterest
) -> None:
    """座標が一致する病院があれば挿入しない"""
    firestore.seed("hospitals", {"latitude": 40.0, "longitude": -73.0, "name": "X"}, "h-1")

    booking = workflow.create_booking(hospital)

    assert firestore.adds_to("hospitals") == []
    assert booking.poi_id == "h-1"


def test_create_booking_without_user_aborts_before_writes(
    firestore: FakeFirestoreClient,
    hospital_repository: HospitalRepository,
    profile_repository: ProfileRepository,
    assessment_repository: AssessmentRepository,
    booking_repository: BookingRepository,
    drafts: BookingDraftBook,
    hospital: PointOfInterest,
) -> None:
    """未認証の場合は書き込み前に AuthRequired"""
    workflow = _workflow(
        hospital_repository,
        profile_repository,
        assessment_repository,
        booking_repository,
        StaticAuthContext(None),
        drafts,
    )

    with pytest.raises(AuthRequired, match="User not authenticated"):
        workflow.create_booking(hospital)

    assert firestore.add_calls == []
    assert not drafts.is_creating(hospital.key)


def test_create_booking_auth_fetch_error(
    firestore: FakeFirestoreClient,
    hospital_repository: HospitalRepository,
    profile_repository: ProfileRepository,
    assessment_repository: AssessmentRepository,
    booking_repository: BookingRepository,
    hospital: PointOfInterest,
) -> None:
    """認証情報の取得失敗も AuthRequired"""
    workflow = _workflow(
        hospital_repository,
        profile_repository,
        assessment_repository,
        booking_repository,
        BrokenAuthContext(),
    )

    with pytest.raises(AuthRequired, match="Auth fetch error: auth service down"):
        workflow.create_booking(hospital)

    assert firestore.add_calls == []


def test_create_booking_uses_profile_and_latest_assessment(
    firestore: FakeFirestoreClient, workflow: BookingWorkflow, hospital: PointOfInterest
) -> None:
    """プロフィールIDと最新のアセスメントIDを参照する"""
    firestore.seed("user_profiles", {"user_id": "user-1"}, "profile-1")
    firestore.seed("user_profiles", {"user_id": "user-2"}, "profile-2")
    firestore.seed(
        "health_assessments",
        {"user_id": "user-1", "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc)},
        "assessment-old",
    )
    firestore.seed(
        "health_assessments",
        {"user_id": "user-1", "created_at": datetime(2024, 6, 1, tzinfo=timezone.utc)},
        "assessment-new",
    )
    firestore.seed(
        "health_assessments",
        {"user_id": "user-2", "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc)},
        "assessment-other",
    )

    booking = workflow.create_booking(hospital)

    assert booking.user_ref == "profile-1"
    assert booking.assessment_ref == "assessment-new"


def test_create_booking_falls_back_without_profile_or_assessment(
    workflow: BookingWorkflow, hospital: PointOfInterest
) -> None:
    """プロフィールがなければユーザーID、アセスメントがなければNone"""
    booking = workflow.create_booking(hospital)

    assert booking.user_ref == "user-1"
    assert booking.assessment_ref is None


def test_create_booking_degrades_on_lookup_errors(
    firestore: FakeFirestoreClient, workflow: BookingWorkflow, hospital: PointOfInterest
) -> None:
    """プロフィール・アセスメントの検索失敗はフォールバックで続行"""
    firestore.fail("query_documents", "user_profiles")
    firestore.fail("query_documents", "health_assessments")

    booking = workflow.create_booking(hospital)

    assert booking.user_ref == "user-1"
    assert booking.assessment_ref is None


def test_create_booking_hospital_lookup_error_still_inserts(
    firestore: FakeFirestoreClient, workflow: BookingWorkflow, hospital: PointOfInterest
) -> None:
    """病院の検索に失敗した場合は新規作成に進む"""
    firestore.fail("query_documents", "hospitals")

    booking = workflow.create_booking(hospital)

    assert len(firestore.adds_to("hospitals")) == 1
    assert booking.poi_id


def test_create_booking_poi_create_failed(
    firestore: FakeFirestoreClient,
    workflow: BookingWorkflow,
    drafts: BookingDraftBook,
    hospital: PointOfInterest,
) -> None:
    """病院レコードの作成失敗は中断"""
    firestore.fail("add_document", "hospitals")
    drafts.set_note(hospital.key, "keep me")

    with pytest.raises(PoiCreateFailed, match="Failed to create hospital record"):
        workflow.create_booking(hospital)

    assert firestore.adds_to("appointments") == []
    assert drafts.get_note(hospital.key) == "keep me"


def test_create_booking_write_failed(
    firestore: FakeFirestoreClient,
    workflow: BookingWorkflow,
    drafts: BookingDraftBook,
    hospital: PointOfInterest,
) -> None:
    """予約の書き込み失敗は中断し、下書きは残る"""
    firestore.fail("add_document", "appointments")
    drafts.open(hospital.key)
    drafts.set_note(hospital.key, "keep me")

    with pytest.raises(BookingWriteFailed, match="Appointment insert error"):
        workflow.create_booking(hospital)

    assert drafts.get_note(hospital.key) == "keep me"
    assert drafts.get(hospital.key).is_open
    assert not drafts.is_creating(hospital.key)


def test_create_booking_clears_draft_on_success(
    firestore: FakeFirestoreClient,
    workflow: BookingWorkflow,
    drafts: BookingDraftBook,
    hospital: PointOfInterest,
) -> None:
    """成功時は下書きのメモを使い、削除して入力欄を閉じる"""
    drafts.open(hospital.key)
    drafts.set_note(hospital.key, "  from the draft  ")

    booking = workflow.create_booking(hospital)

    assert booking.notes == "from the draft"
    assert drafts.get_note(hospital.key) is None
    assert not drafts.get(hospital.key).is_open
    assert drafts.open_key is None
    assert not drafts.is_creating(hospital.key)


@pytest.mark.parametrize("note", ["", "   ", None])
def test_create_booking_blank_note_is_null(
    workflow: BookingWorkflow, hospital: PointOfInterest, note: Optional[str]
) -> None:
    """空のメモは None として保存"""
    booking = workflow.create_booking(hospital, note=note)

    assert booking.notes is None
