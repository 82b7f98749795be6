"""テスト共通のフィクスチャ"""

from unittest.mock import MagicMock

import pytest

from fakes import FakeFirestoreClient

from hospital_finder.application import HospitalFinderApp
from hospital_finder.features.storage.repositories.booking_repository import BookingRepository
from hospital_finder.features.storage.repositories.hospital_repository import HospitalRepository
from hospital_finder.features.storage.repositories.user_repository import (
    AssessmentRepository,
    ProfileRepository,
)
from hospital_finder.infrastructure.config.settings import Settings


@pytest.fixture
def firestore() -> FakeFirestoreClient:
    return FakeFirestoreClient()


@pytest.fixture
def hospital_repository(firestore: FakeFirestoreClient) -> HospitalRepository:
    return HospitalRepository(firestore)


@pytest.fixture
def profile_repository(firestore: FakeFirestoreClient) -> ProfileRepository:
    return ProfileRepository(firestore)


@pytest.fixture
def assessment_repository(firestore: FakeFirestoreClient) -> AssessmentRepository:
    return AssessmentRepository(firestore)


@pytest.fixture
def booking_repository(firestore: FakeFirestoreClient) -> BookingRepository:
    return BookingRepository(firestore)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        gcp_project_id="test-project",
        default_latitude=40.0,
        default_longitude=-73.0,
        current_user_id="user-1",
    )


@pytest.fixture
def overpass_http() -> MagicMock:
    """Overpass APIへのPOSTを模したHTTPクライアント（要素はテストで設定）"""
    http_client = MagicMock()
    http_client.post.return_value.json.return_value = {"elements": []}
    return http_client


@pytest.fixture
def finder(
    settings: Settings, firestore: FakeFirestoreClient, overpass_http: MagicMock
) -> HospitalFinderApp:
    return HospitalFinderApp(settings, firestore_client=firestore, http_client=overpass_http)
