"""
Geometry primitives

Coordinate type, the two point-equality tests and the angle / cross-product
helpers used by the hull scan.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

DEFAULT_PRECISION = 6
CLOSE_TOLERANCE_DEG = 1e-6


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point, optionally carrying the OSM node it came from"""
    lat: float
    lon: float
    id: Optional[int] = None

    def to_pair(self) -> List[float]:
        """Get coordinate as [lat, lon]"""
        return [self.lat, self.lon]


Ring = List[Coordinate]


def endpoint_key(coord: Coordinate, precision: int = DEFAULT_PRECISION) -> str:
    """
    Quantized string key used to detect shared endpoints between ways.

    Both axes are rounded to `precision` decimals before formatting, so points
    that round to the same grid cell hash together.
    """
    # + 0.0 folds -0.0 into 0.0
    lat = round(coord.lat, precision) + 0.0
    lon = round(coord.lon, precision) + 0.0
    return f"{lat:.{precision}f},{lon:.{precision}f}"


def is_close_enough(
    a: Coordinate,
    b: Coordinate,
    tolerance: float = CLOSE_TOLERANCE_DEG
) -> bool:
    """Squared-distance closeness test in degrees (ring and hull closure)"""
    dlat = a.lat - b.lat
    dlon = a.lon - b.lon
    return (dlat * dlat + dlon * dlon) < (tolerance * tolerance)


def polar_angle(origin: Coordinate, point: Coordinate) -> float:
    """Angle of `point` seen from `origin`, as atan2(dlon, dlat)"""
    return math.atan2(point.lon - origin.lon, point.lat - origin.lat)


def cross(p1: Coordinate, p2: Coordinate, p3: Coordinate) -> float:
    """Cross product of p1->p2 and p1->p3 in (lat, lon) axes; > 0 is a left turn"""
    return (p2.lat - p1.lat) * (p3.lon - p1.lon) - (p2.lon - p1.lon) * (p3.lat - p1.lat)


def signed_area(ring: Sequence[Coordinate]) -> float:
    """Shoelace signed area with x = lon, y = lat (closing edge included)"""
    n = len(ring)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += ring[i].lon * ring[j].lat - ring[j].lon * ring[i].lat
    return area / 2.0


def bounding_box(coords: Sequence[Coordinate]):
    """(min_lat, max_lat, min_lon, max_lon) of a coordinate sequence, or None"""
    if not coords:
        return None
    lats = [c.lat for c in coords]
    lons = [c.lon for c in coords]
    return min(lats), max(lats), min(lons), max(lons)
