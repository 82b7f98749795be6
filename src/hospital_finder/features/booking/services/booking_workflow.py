"""予約作成ワークフロー"""

from typing import Optional

from ....shared.exceptions.errors import (
    AuthRequired,
    BookingWriteFailed,
    PoiCreateFailed,
)
from ....shared.logging.config import get_logger
from ...auth.providers.auth_context import AbstractAuthContext, AuthUser
from ...hospitals.domain.models import PointOfInterest
from ...storage.repositories.base import (
    AbstractAssessmentRepository,
    AbstractBookingRepository,
    AbstractHospitalRepository,
    AbstractProfileRepository,
)
from ..domain.models import Booking, BookingDraftBook, BookingStatus

logger = get_logger(__name__)


class BookingWorkflow:
    """
    選択された病院の予約を作成する逐次ワークフロー

    処理フロー:
    1. 認証ユーザーを取得（未認証なら書き込み前に中断）
    2. 病院IDを座標の完全一致で検索し、なければ作成
    3. プロフィールIDを取得（なければ認証ユーザーIDを使用）
    4. 最新のアセスメントIDを取得（なければNone）
    5. status="pending" で予約を作成
    6. 下書きのメモを削除し、入力欄を閉じる

    1, 2, 5 の失敗は中断してエラーを送出する。3, 4 の失敗はログのみで続行する。
    """

    def __init__(
        self,
        hospital_repository: AbstractHospitalRepository,
        profile_repository: AbstractProfileRepository,
        assessment_repository: AbstractAssessmentRepository,
        booking_repository: AbstractBookingRepository,
        auth_context: AbstractAuthContext,
        drafts: Optional[BookingDraftBook] = None,
    ) -> None:
        """
        Args:
            hospital_repository: 病院リポジトリ
            profile_repository: プロフィールリポジトリ
            assessment_repository: アセスメントリポジトリ
            booking_repository: 予約リポジトリ
            auth_context: 認証コンテキスト
            drafts: 予約下書き（Noneの場合は新規作成）
        """
        self.hospital_repository = hospital_repository
        self.profile_repository = profile_repository
        self.assessment_repository = assessment_repository
        self.booking_repository = booking_repository
        self.auth_context = auth_context
        self.drafts = drafts if drafts is not None else BookingDraftBook()

    def create_booking(
        self, hospital: PointOfInterest, note: Optional[str] = None
    ) -> Booking:
        """
        病院の予約を作成

        Args:
            hospital: 選択された病院（未永続化でもよい）
            note: メモ（Noneの場合は下書きのメモを使用）

        Returns:
            Booking: 作成された予約

        Raises:
            AuthRequired: 認証ユーザーが存在しない場合
            PoiCreateFailed: 病院レコードを作成できなかった場合
            BookingWriteFailed: 予約の書き込みに失敗した場合
        """
        key = hospital.key
        self.drafts.mark_creating(key, True)

        try:
            user = self._resolve_user()
            hospital_id = self._resolve_hospital_id(hospital)
            user_ref = self._resolve_user_ref(user)
            assessment_ref = self._resolve_latest_assessment(user)

            booking_note = note if note is not None else self.drafts.get_note(key)
            booking = Booking(
                user_ref=user_ref,
                poi_id=hospital_id,
                assessment_ref=assessment_ref,
                notes=(booking_note or "").strip() or None,
                status=BookingStatus.PENDING,
            )

            try:
                created = self.booking_repository.create(booking)
            except Exception as e:
                raise BookingWriteFailed(f"Appointment insert error: {e}") from e

            self.drafts.clear(key)

            logger.info(
                f"Appointment created (status: {created.status.value}): "
                f"booking={created.id}, hospital={hospital_id}"
            )
            return created

        except (AuthRequired, PoiCreateFailed, BookingWriteFailed) as e:
            logger.error(f"Error creating appointment for {key}: {e}")
            raise

        finally:
            self.drafts.mark_creating(key, False)

    def _resolve_user(self) -> AuthUser:
        """認証ユーザーを取得"""
        try:
            user = self.auth_context.get_current_user()
        except Exception as e:
            raise AuthRequired(f"Auth fetch error: {e}") from e

        if user is None:
            raise AuthRequired("User not authenticated")
        return user

    def _resolve_hospital_id(self, hospital: PointOfInterest) -> str:
        """病院IDを検索し、なければ作成（同時作成による重複は許容）"""
        hospital_id: Optional[str] = None

        try:
            hospital_id = self.hospital_repository.find_id_by_coordinates(
                hospital.latitude, hospital.longitude
            )
        except Exception as e:
            logger.warning(f"Hospital lookup failed, creating a new record: {e}")

        if hospital_id:
            return hospital_id

        try:
            created = self.hospital_repository.create(hospital)
        except Exception as e:
            raise PoiCreateFailed(f"Failed to create hospital record: {e}") from e

        if not created.id:
            raise PoiCreateFailed("Failed to create hospital record: no id returned")
        return created.id

    def _resolve_user_ref(self, user: AuthUser) -> str:
        """プロフィールIDを取得（なければ認証ユーザーID）"""
        try:
            profile_id = self.profile_repository.find_profile_id(user.id)
        except Exception as e:
            logger.warning(f"Profile lookup error: {e}")
            profile_id = None

        return profile_id or user.id

    def _resolve_latest_assessment(self, user: AuthUser) -> Optional[str]:
        """最新のアセスメントIDを取得"""
        try:
            return self.assessment_repository.find_latest_assessment_id(user.id)
        except Exception as e:
            logger.warning(f"Assessment lookup error: {e}")
            return None
