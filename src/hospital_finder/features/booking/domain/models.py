"""予約機能のドメインモデル"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ....shared.utils.datetime_utils import ensure_utc, now_utc


class BookingStatus(str, Enum):
    """予約ステータス（このエンジンは pending でのみ作成する）"""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


@dataclass
class Booking:
    """予約レコード"""

    user_ref: str  # プロフィールID（なければ認証ユーザーID）
    poi_id: str  # 病院ID
    assessment_ref: Optional[str] = None  # 直近のアセスメントID
    notes: Optional[str] = None  # メモ
    status: BookingStatus = BookingStatus.PENDING
    created_at: datetime = field(default_factory=now_utc)

    # ストアが採番したID
    id: Optional[str] = None

    def to_firestore_dict(self) -> dict[str, Any]:
        """Firestore保存用の辞書に変換"""
        return {
            "user_id": self.user_ref,
            "hospital_id": self.poi_id,
            "assessment_id": self.assessment_ref,
            "notes": self.notes,
            "status": self.status.value,
            "created_at": self.created_at,
        }

    @classmethod
    def from_firestore_dict(cls, data: dict[str, Any]) -> "Booking":
        """Firestoreのデータから予約オブジェクトを生成"""
        return cls(
            id=data.get("id"),
            user_ref=data["user_id"],
            poi_id=data["hospital_id"],
            assessment_ref=data.get("assessment_id"),
            notes=data.get("notes"),
            status=BookingStatus(data.get("status", BookingStatus.PENDING.value)),
            created_at=ensure_utc(data["created_at"]) if data.get("created_at") else now_utc(),
        )

    def to_dict(self) -> dict[str, Any]:
        """APIレスポンス用の辞書に変換"""
        return {
            "id": self.id,
            "user_ref": self.user_ref,
            "poi_id": self.poi_id,
            "assessment_ref": self.assessment_ref,
            "notes": self.notes,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class BookingDraft:
    """病院ごとの予約下書き（未永続化の病院にも使えるよう座標キーで管理）"""

    note: Optional[str] = None
    is_open: bool = False
    creating: bool = False


class BookingDraftBook:
    """
    座標キーごとの予約下書き

    メモ入力欄は同時に1件のみ開く。
    """

    def __init__(self) -> None:
        self.drafts: dict[str, BookingDraft] = {}
        self.open_key: Optional[str] = None

    def get(self, key: str) -> BookingDraft:
        """下書きを取得（なければ作成）"""
        return self.drafts.setdefault(key, BookingDraft())

    def open(self, key: str) -> None:
        """メモ入力欄を開く（他に開いている入力欄は閉じる）"""
        if self.open_key is not None and self.open_key != key:
            self.get(self.open_key).is_open = False
        self.get(key).is_open = True
        self.open_key = key

    def close(self, key: str) -> None:
        """メモ入力欄を閉じる"""
        if key in self.drafts:
            self.drafts[key].is_open = False
        if self.open_key == key:
            self.open_key = None

    def toggle(self, key: str) -> bool:
        """メモ入力欄の開閉を切り替え、開いた場合はTrueを返す"""
        if self.open_key == key:
            self.close(key)
            return False
        self.open(key)
        return True

    def set_note(self, key: str, note: Optional[str]) -> None:
        self.get(key).note = note

    def get_note(self, key: str) -> Optional[str]:
        draft = self.drafts.get(key)
        return draft.note if draft else None

    def mark_creating(self, key: str, creating: bool) -> None:
        self.get(key).creating = creating

    def is_creating(self, key: str) -> bool:
        draft = self.drafts.get(key)
        return bool(draft and draft.creating)

    def clear(self, key: str) -> None:
        """予約作成後に下書きのメモを削除し、入力欄を閉じる"""
        self.close(key)
        if key in self.drafts:
            self.drafts[key].note = None
