"""位置情報プロバイダーの基底クラス"""

from abc import ABC, abstractmethod

from ..domain.models import GeoLocation


class AbstractLocationProvider(ABC):
    """現在地プロバイダーの抽象基底クラス"""

    @abstractmethod
    def get_current_position(self, timeout: float, maximum_age: float) -> GeoLocation:
        """
        現在地を1回取得

        Args:
            timeout: 取得のタイムアウト（秒）
            maximum_age: 許容するキャッシュ済み測位の経過時間（秒）

        Returns:
            GeoLocation: 現在地

        Raises:
            LocationUnavailable: 位置情報の取得が拒否された、または利用できない場合
        """
        pass
