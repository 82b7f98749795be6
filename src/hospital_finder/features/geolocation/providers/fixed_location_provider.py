"""固定座標を返す位置情報プロバイダー"""

from ....shared.exceptions.errors import LocationUnavailable
from ....shared.logging.config import get_logger
from ..domain.models import GeoLocation
from .base import AbstractLocationProvider

logger = get_logger(__name__)


class FixedLocationProvider(AbstractLocationProvider):
    """設定・引数で指定された座標を現在地として返す"""

    def __init__(self, latitude: float, longitude: float) -> None:
        """
        Args:
            latitude: 緯度
            longitude: 経度

        Raises:
            LocationUnavailable: 座標が範囲外の場合
        """
        if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
            raise LocationUnavailable(
                f"Invalid location: ({latitude}, {longitude})"
            )
        self.latitude = latitude
        self.longitude = longitude

    def get_current_position(self, timeout: float, maximum_age: float) -> GeoLocation:
        logger.debug(f"Using fixed location: ({self.latitude}, {self.longitude})")
        return GeoLocation(latitude=self.latitude, longitude=self.longitude)
