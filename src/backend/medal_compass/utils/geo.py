# medal_compass/utils/geo.py
"""地理計算のユーティリティ．DBにもHTTPにも依存しない純粋関数のみを置く．"""
from math import radians, sin, cos, sqrt, atan2
from typing import NamedTuple

EARTH_RADIUS_M = 6371000.0   # 地球の半径（m）
METERS_PER_DEGREE_LAT = 111000.0 # 緯度1度あたりの距離（約111km）
MAX_ABS_LATITUDE = 89.9      # cos(lat)→0 による経度幅の発散を防ぐためのクランプ値
GPS_ACCURACY_THRESHOLD_M = 20.0


class BoundingBox(NamedTuple):
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, lat: float, lon: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Haversine公式で2点間の大円距離を計算する．

    Args:
        lat1, lon1: 地点1の緯度・経度（度）
        lat2, lon2: 地点2の緯度・経度（度）

    Returns:
        (float): 距離（m）
    """
    phi1, phi2 = radians(lat1), radians(lat2)
    delta_phi = radians(lat2 - lat1)
    delta_lambda = radians(lon2 - lon1)

    a = sin(delta_phi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(delta_lambda / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_M * c


def is_within_distance(lat1: float, lon1: float, lat2: float, lon2: float,
                       threshold_m: float) -> bool:
    return distance(lat1, lon1, lat2, lon2) <= threshold_m


def bounding_box(lat: float, lon: float, radius_m: float) -> BoundingBox:
    """
    中心座標と半径から，検索用の矩形範囲を計算する．

    真円ではなく正方形による近似なので，矩形の角は中心から radius_m より遠い．
    DBクエリの前段フィルタとして使うこと．矩形の辺を厳密な半径の境界として扱ってはいけない．

    Args:
        lat, lon: 中心の緯度・経度（度）
        radius_m: 半径（m）

    Returns:
        (BoundingBox): 矩形範囲
    """
    lat_delta = radius_m / METERS_PER_DEGREE_LAT

    # 経度方向の1度の長さは緯度によって縮む（子午線の収束）．
    # 極付近では cos(lat) が0に近づくため，緯度をクランプしてから割る．
    clamped_lat = max(-MAX_ABS_LATITUDE, min(MAX_ABS_LATITUDE, lat))
    lon_delta = radius_m / (METERS_PER_DEGREE_LAT * cos(radians(clamped_lat)))

    # 日付変更線（±180°）をまたぐ場合も経度は折り返さない．min_lon < -180 や max_lon > 180 になり，
    # 反対側（符号が逆の経度）にあるメダルは矩形に入らない．

    return BoundingBox(
        min_lat=lat - lat_delta,
        max_lat=lat + lat_delta,
        min_lon=lon - lon_delta,
        max_lon=lon + lon_delta,
    )


def is_accuracy_good_enough(accuracy_m: float | None,
                            threshold_m: float = GPS_ACCURACY_THRESHOLD_M) -> bool:
    """
    測位精度が十分かを判定する．精度が不明（None）の場合は不十分とみなす．
    """
    if accuracy_m is None:
        return False
    return accuracy_m <= threshold_m
