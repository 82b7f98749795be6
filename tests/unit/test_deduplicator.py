"""重複排除のテスト"""

from hospital_finder.features.hospitals.domain.models import PointOfInterest
from hospital_finder.features.hospitals.services.deduplicator import deduplicate


def test_deduplicate_last_wins() -> None:
    """同じ座標キーは入力順で最後のものを残す"""
    hospitals = [
        PointOfInterest(40.0, -73.0, name="A"),
        PointOfInterest(40.0000001, -73.0, name="B"),
    ]

    result = deduplicate(hospitals)

    assert len(result) == 1
    assert result[0].name == "B"


def test_deduplicate_keeps_distinct_keys_in_first_seen_order() -> None:
    """異なるキーは初出順を保持"""
    hospitals = [
        PointOfInterest(1.0, 1.0, name="A"),
        PointOfInterest(2.0, 2.0, name="B"),
        PointOfInterest(1.0, 1.0, name="A2"),
    ]

    result = deduplicate(hospitals)

    assert [hospital.name for hospital in result] == ["A2", "B"]


def test_deduplicate_empty() -> None:
    """空入力は空リスト"""
    assert deduplicate([]) == []
