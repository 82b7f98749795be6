"""Overpass APIの要素を病院（POI）に正規化するパーサー"""

import math
from collections.abc import Iterable, Iterator
from typing import Any, Optional

from ....shared.logging.config import get_logger
from ....shared.utils.text import first_present, join_present, normalize_text
from ..domain.models import UNNAMED_HOSPITAL, PointOfInterest

logger = get_logger(__name__)

# emergencyタグで「対応なし」を表す値
_FALSY_TAG_VALUES = {"no", "false", "0", "none"}


class OverpassElementParser:
    """
    Overpass APIの要素（node / way / relation）のパーサー

    node は lat/lon を直接持ち、way / relation は center に中心座標を持つ。
    座標が取得できない要素はスキップする（バッチ全体は中断しない）。
    """

    def __init__(self) -> None:
        self.skipped_count = 0

    def parse(self, element: dict[str, Any]) -> Optional[PointOfInterest]:
        """
        要素をパースして病院情報を抽出

        Args:
            element: Overpass APIの要素

        Returns:
            Optional[PointOfInterest]: 病院オブジェクト（座標が無効な場合はNone）
        """
        if not isinstance(element, dict):
            return None

        center = element.get("center")
        if not isinstance(center, dict):
            center = {}

        latitude = self._to_coordinate(self._first_not_none(element.get("lat"), center.get("lat")))
        longitude = self._to_coordinate(self._first_not_none(element.get("lon"), center.get("lon")))

        if latitude is None or longitude is None:
            return None

        tags = element.get("tags")
        if not isinstance(tags, dict):
            tags = {}

        return PointOfInterest(
            name=first_present(tags.get("name")) or UNNAMED_HOSPITAL,
            address=self._extract_address(tags),
            latitude=latitude,
            longitude=longitude,
            phone=self._extract_phone(tags),
            specialities=first_present(tags.get("speciality"), tags.get("healthcare")),
            emergency_available=self._is_truthy_tag(tags.get("emergency")),
        )

    def parse_all(self, elements: Iterable[dict[str, Any]]) -> Iterator[PointOfInterest]:
        """
        複数の要素を遅延的にパース

        Args:
            elements: Overpass APIの要素のリスト

        Yields:
            PointOfInterest: 有効な座標を持つ病院オブジェクト
        """
        for element in elements:
            hospital = self.parse(element)
            if hospital is None:
                self.skipped_count += 1
                logger.debug(f"Skipping element without usable coordinates: {element!r:.200}")
                continue
            yield hospital

    def _extract_address(self, tags: dict[str, Any]) -> Optional[str]:
        """住所を優先順に抽出（完全住所 → 通り・番地・市区町村 → 説明）"""
        return first_present(
            tags.get("addr:full"),
            join_present(
                [tags.get("addr:street"), tags.get("addr:housenumber"), tags.get("addr:city")]
            ),
            tags.get("description"),
        )

    def _extract_phone(self, tags: dict[str, Any]) -> Optional[str]:
        """電話番号を抽出（phone → contact.phone / contact:phone）"""
        contact = tags.get("contact")
        nested_phone = contact.get("phone") if isinstance(contact, dict) else None
        return first_present(tags.get("phone"), nested_phone, tags.get("contact:phone"))

    @staticmethod
    def _first_not_none(*values: Any) -> Any:
        for value in values:
            if value is not None:
                return value
        return None

    @staticmethod
    def _to_coordinate(value: Any) -> Optional[float]:
        """
        座標値をfloatに変換

        数値に変換できない値・ゼロ・NaN/無限大は無効（None）とする
        """
        if value is None or isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if number == 0.0 or not math.isfinite(number):
            return None
        return number

    @staticmethod
    def _is_truthy_tag(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        text = normalize_text(value)
        if not text:
            return False
        return text.lower() not in _FALSY_TAG_VALUES


def normalize_elements(elements: Iterable[dict[str, Any]]) -> Iterator[PointOfInterest]:
    """
    Overpass APIの要素を病院オブジェクトに正規化

    Args:
        elements: Overpass APIの要素のリスト

    Returns:
        Iterator[PointOfInterest]: idを持たない病院オブジェクトの遅延シーケンス
    """
    return OverpassElementParser().parse_all(elements)
