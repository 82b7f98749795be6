"""座標の同一性キーと距離計算"""

import math

# 地球の半径（km）
EARTH_RADIUS_KM = 6371.0

# 同一性判定の精度（小数点以下の桁数、約0.11m）
COORDINATE_PRECISION = 6

KEY_SEPARATOR = "|"


def _format_coordinate(value: float) -> str:
    text = f"{float(value):.{COORDINATE_PRECISION}f}"
    # -0.000000 と 0.000000 を同一視
    return text.lstrip("-") if float(text) == 0.0 else text


def coordinate_key(latitude: float, longitude: float) -> str:
    """
    座標から正規化された同一性キーを生成

    小数点以下6桁で丸めるため、それ以下の差しかない座標は同じキーになる
    （重複排除の許容誤差）。

    Args:
        latitude: 緯度
        longitude: 経度

    Returns:
        str: "lat|lon" 形式のキー（例: "40.000000|-73.000000"）
    """
    return f"{_format_coordinate(latitude)}{KEY_SEPARATOR}{_format_coordinate(longitude)}"


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    2点間の大円距離をハバーサイン公式で計算

    Args:
        lat1: 地点1の緯度
        lon1: 地点1の経度
        lat2: 地点2の緯度
        lon2: 地点2の経度

    Returns:
        float: 距離（km）
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) * math.sin(d_lat / 2)
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2)
        * math.sin(d_lon / 2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
