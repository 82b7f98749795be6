"""ストアの抽象インターフェース"""

from abc import ABC, abstractmethod
from typing import Optional

from ...booking.domain.models import Booking
from ...hospitals.domain.models import PointOfInterest


class AbstractHospitalRepository(ABC):
    """病院ストアの抽象基底クラス"""

    @abstractmethod
    def upsert_batch(self, hospitals: list[PointOfInterest]) -> list[PointOfInterest]:
        """
        (緯度, 経度)を競合キーとしてアップサートし、書き込み後の行を返す

        Raises:
            StorageError: 書き込みに失敗した場合
        """
        pass

    @abstractmethod
    def find_id_by_coordinates(self, latitude: float, longitude: float) -> Optional[str]:
        """座標の完全一致で病院IDを検索（存在しない場合はNone）"""
        pass

    @abstractmethod
    def create(self, hospital: PointOfInterest) -> PointOfInterest:
        """
        病院を新規作成（アップサートではなく挿入）

        Raises:
            StorageError: 作成に失敗した場合
        """
        pass


class AbstractProfileRepository(ABC):
    """ユーザープロフィールストアの抽象基底クラス"""

    @abstractmethod
    def find_profile_id(self, user_id: str) -> Optional[str]:
        """認証ユーザーIDに紐づくプロフィールIDを検索"""
        pass


class AbstractAssessmentRepository(ABC):
    """アセスメントストアの抽象基底クラス"""

    @abstractmethod
    def find_latest_assessment_id(self, user_id: str) -> Optional[str]:
        """ユーザーの最新（作成日時の降順で先頭）のアセスメントIDを検索"""
        pass


class AbstractBookingRepository(ABC):
    """予約ストアの抽象基底クラス"""

    @abstractmethod
    def create(self, booking: Booking) -> Booking:
        """
        予約を新規作成

        Raises:
            StorageError: 作成に失敗した場合
        """
        pass
