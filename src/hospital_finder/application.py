"""アプリケーションの組み立て（依存性注入）"""

from typing import Optional

from .features.auth.providers.auth_context import AbstractAuthContext, StaticAuthContext
from .features.booking.domain.models import BookingDraftBook
from .features.booking.services.booking_workflow import BookingWorkflow
from .features.geolocation.domain.models import GeoLocation
from .features.geolocation.providers.base import AbstractLocationProvider
from .features.geolocation.providers.cache_location_provider import CacheLocationProvider
from .features.geolocation.providers.fixed_location_provider import FixedLocationProvider
from .features.hospitals.providers.overpass_client import OverpassClient
from .features.storage.clients.firestore_client import FirestoreClient
from .features.storage.repositories.booking_repository import BookingRepository
from .features.storage.repositories.hospital_repository import HospitalRepository
from .features.storage.repositories.user_repository import (
    AssessmentRepository,
    ProfileRepository,
)
from .features.sync.jobs.sync_orchestrator import SyncOrchestrator
from .features.sync.services.batch_reconciler import BatchReconciler
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import ConfigurationError, LocationUnavailable
from .shared.http.client import HTTPClient
from .shared.logging.config import get_logger

logger = get_logger(__name__)


class _UnconfiguredLocationProvider(AbstractLocationProvider):
    """現在地の取得手段がない場合のプロバイダー"""

    def get_current_position(self, timeout: float, maximum_age: float) -> GeoLocation:
        raise LocationUnavailable("Geolocation is not configured.")


class HospitalFinderApp:
    """
    病院検索アプリケーション

    各Featureを統合し、依存性注入を行う
    """

    def __init__(
        self,
        settings: Settings,
        firestore_client: Optional[FirestoreClient] = None,
        http_client: Optional[HTTPClient] = None,
        location_provider: Optional[AbstractLocationProvider] = None,
        show_progress: bool = False,
    ) -> None:
        """
        Args:
            settings: アプリケーション設定
            firestore_client: Firestoreクライアント（Noneの場合は設定から作成）
            http_client: HTTPクライアント（Noneの場合は設定から作成）
            location_provider: 現在地プロバイダー（Noneの場合は設定の固定座標）
            show_progress: 照合時にプログレスバーを表示するか
        """
        self.settings = settings

        self.firestore_client = firestore_client or FirestoreClient(
            project_id=settings.gcp_project_id,
            database_id=settings.firestore_database_id,
        )

        # リポジトリを初期化
        self.hospital_repository = HospitalRepository(
            self.firestore_client, settings.firestore_hospitals_collection
        )
        self.profile_repository = ProfileRepository(
            self.firestore_client, settings.firestore_profiles_collection
        )
        self.assessment_repository = AssessmentRepository(
            self.firestore_client, settings.firestore_assessments_collection
        )
        self.booking_repository = BookingRepository(
            self.firestore_client, settings.firestore_bookings_collection
        )

        self.http_client = http_client or HTTPClient(
            timeout=settings.http_timeout,
            user_agent=settings.http_user_agent,
        )
        self.overpass_client = OverpassClient(
            http_client=self.http_client,
            api_url=settings.overpass_api_url,
            query_timeout=settings.overpass_query_timeout,
        )

        self.location_provider = CacheLocationProvider(
            location_provider or self._create_location_provider()
        )

        self.reconciler = BatchReconciler(
            self.hospital_repository,
            chunk_size=settings.upsert_chunk_size,
            show_progress=show_progress,
        )
        self.sync_orchestrator = SyncOrchestrator(
            location_provider=self.location_provider,
            overpass_client=self.overpass_client,
            reconciler=self.reconciler,
            radius_m=settings.search_radius_m,
            location_timeout=settings.location_timeout,
            location_maximum_age=settings.location_maximum_age,
        )

        # 座標キーごとの予約下書き（UIのセッション単位）
        self.drafts = BookingDraftBook()

        logger.info("HospitalFinderApp initialized")

    def create_booking_workflow(
        self, auth_context: Optional[AbstractAuthContext] = None
    ) -> BookingWorkflow:
        """
        予約ワークフローを作成

        Args:
            auth_context: 認証コンテキスト（Noneの場合は設定のユーザーID）

        Returns:
            BookingWorkflow: 予約ワークフロー
        """
        return BookingWorkflow(
            hospital_repository=self.hospital_repository,
            profile_repository=self.profile_repository,
            assessment_repository=self.assessment_repository,
            booking_repository=self.booking_repository,
            auth_context=auth_context or StaticAuthContext(self.settings.current_user_id),
            drafts=self.drafts,
        )

    def close(self) -> None:
        """HTTPセッションをクローズ"""
        self.http_client.close()

    def _create_location_provider(self) -> AbstractLocationProvider:
        """設定の固定座標から現在地プロバイダーを作成"""
        if not self.settings.has_default_location:
            logger.info("No default location configured; sync requires an explicit origin")
            return _UnconfiguredLocationProvider()

        try:
            return FixedLocationProvider(
                self.settings.default_latitude, self.settings.default_longitude
            )
        except LocationUnavailable as e:
            raise ConfigurationError(f"Invalid default location: {e}") from e
