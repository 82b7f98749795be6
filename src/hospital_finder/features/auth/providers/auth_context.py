"""認証コンテキスト"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthUser:
    """認証済みユーザー"""

    id: str
    email: Optional[str] = None


class AbstractAuthContext(ABC):
    """認証コンテキストの抽象基底クラス"""

    @abstractmethod
    def get_current_user(self) -> Optional[AuthUser]:
        """
        現在のユーザーを取得

        Returns:
            Optional[AuthUser]: 認証済みユーザー（未認証の場合はNone）
        """
        pass


class StaticAuthContext(AbstractAuthContext):
    """固定のユーザーIDを返す認証コンテキスト（CLI・リクエストヘッダー用）"""

    def __init__(self, user_id: Optional[str]) -> None:
        self.user_id = user_id.strip() if user_id else None

    def get_current_user(self) -> Optional[AuthUser]:
        if not self.user_id:
            return None
        return AuthUser(id=self.user_id)
