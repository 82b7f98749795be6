"""距離順の並べ替えのテスト"""

import pytest

from hospital_finder.features.geolocation.domain.models import GeoLocation
from hospital_finder.features.hospitals.domain.models import PointOfInterest
from hospital_finder.features.hospitals.services.ranking import (
    format_distance,
    rank_by_distance,
)


def test_rank_by_distance_orders_nearest_first() -> None:
    """近い順に並ぶ"""
    hospitals = [
        PointOfInterest(41.0, -73.0, name="Far"),
        PointOfInterest(40.1, -73.0, name="Near"),
        PointOfInterest(40.5, -73.0, name="Middle"),
    ]

    ranked = rank_by_distance(hospitals, GeoLocation(40.0, -73.0))

    assert [item.hospital.name for item in ranked] == ["Near", "Middle", "Far"]
    assert ranked[0].distance_km == pytest.approx(11.12, abs=0.01)
    assert ranked[0].distance_label == "11.1 km"


def test_rank_by_distance_is_stable_for_ties() -> None:
    """同距離は入力順"""
    hospitals = [
        PointOfInterest(40.1, -73.0, name="First"),
        PointOfInterest(40.1, -73.0, name="Second"),
    ]

    ranked = rank_by_distance(hospitals, GeoLocation(40.0, -73.0))

    assert [item.hospital.name for item in ranked] == ["First", "Second"]


def test_rank_without_origin_keeps_order() -> None:
    """現在地がない場合は入力順、距離なし"""
    hospitals = [PointOfInterest(2.0, 2.0, name="B"), PointOfInterest(1.0, 1.0, name="A")]

    ranked = rank_by_distance(hospitals, None)

    assert [item.hospital.name for item in ranked] == ["B", "A"]
    assert ranked[0].distance_km is None
    assert ranked[0].distance_label is None


@pytest.mark.parametrize(
    "km,expected",
    [(0.0, "0.0 km"), (12.345, "12.3 km"), (49.96, "50.0 km")],
)
def test_format_distance(km: float, expected: str) -> None:
    """小数点以下1桁"""
    assert format_distance(km) == expected


def test_ranked_hospital_to_dict() -> None:
    """APIレスポンス用の辞書"""
    hospital = PointOfInterest(40.0, -73.0, name="A", id="h-1")

    data = rank_by_distance([hospital], GeoLocation(40.0, -73.0))[0].to_dict()

    assert data["id"] == "h-1"
    assert data["key"] == "40.000000|-73.000000"
    assert data["distance_label"] == "0.0 km"
    assert data["directions_url"] == (
        "https://www.google.com/maps/dir/?api=1&destination=40.0,-73.0"
    )
