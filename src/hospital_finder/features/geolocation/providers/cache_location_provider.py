"""キャッシュ付き位置情報プロバイダー"""

from typing import Optional

from ....shared.logging.config import get_logger
from ..domain.models import GeoLocation
from .base import AbstractLocationProvider

logger = get_logger(__name__)


class CacheLocationProvider(AbstractLocationProvider):
    """
    キャッシュ付き位置情報プロバイダー

    直近の測位結果が maximum_age 以内であれば再利用し、
    測位の待ち時間を削減する
    """

    def __init__(self, provider: AbstractLocationProvider) -> None:
        """
        Args:
            provider: ベースとなる位置情報プロバイダー
        """
        self.provider = provider
        self.cached: Optional[GeoLocation] = None
        self.hit_count = 0
        self.miss_count = 0

    def get_current_position(self, timeout: float, maximum_age: float) -> GeoLocation:
        if self.cached is not None and self.cached.age_seconds() <= maximum_age:
            self.hit_count += 1
            logger.debug(f"Cache hit for location: {self.cached}")
            return self.cached

        self.miss_count += 1
        location = self.provider.get_current_position(timeout, maximum_age)
        self.cached = location
        return location

    def clear_cache(self) -> None:
        """キャッシュをクリア"""
        self.cached = None
        logger.info("Location cache cleared")
