"""
Convex-hull fallback

Best-effort closed shape used when the stitcher cannot connect the ways.
"""

from typing import Iterable, List, Sequence

from .primitives import Coordinate, cross, polar_angle
from .way_index import WayCoordinates


def convex_hull(points: Sequence[Coordinate]) -> List[Coordinate]:
    """
    Graham scan over (lat, lon) points.

    The pivot is the lowest latitude (ties: lowest longitude); remaining points
    are ordered by atan2(dlon, dlat) from the pivot, then by distance, and
    popped while the last three do not make a strict left turn. Fewer than
    three points are returned unchanged.
    """
    if len(points) < 3:
        return list(points)

    unique: List[Coordinate] = []
    seen = set()
    for point in points:
        key = (point.lat, point.lon)
        if key not in seen:
            seen.add(key)
            unique.append(point)

    if len(unique) < 3:
        return unique

    pivot = min(unique, key=lambda p: (p.lat, p.lon))
    rest = [p for p in unique if p is not pivot]
    # Ties on angle: nearer first, so the scan keeps the farthest point
    rest.sort(key=lambda p: (polar_angle(pivot, p), (p.lat - pivot.lat) ** 2 + (p.lon - pivot.lon) ** 2))

    hull = [pivot]
    for point in rest:
        while len(hull) > 1 and cross(hull[-2], hull[-1], point) <= 0:
            hull.pop()
        hull.append(point)

    return hull


def fallback_polygon(ways: Iterable[WayCoordinates]) -> List[Coordinate]:
    """Hull over every coordinate of every way, ignoring connectivity"""
    all_coords: List[Coordinate] = []
    for way in ways:
        all_coords.extend(way.coords)
    return convex_hull(all_coords)
