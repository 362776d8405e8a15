"""
Interior centroid resolver

Picks a label point guaranteed to lie inside a simple ring: the area-weighted
centroid when it is inside, otherwise the first interior point found while
sliding from the centroid toward the ring's first vertex.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from loguru import logger

from ..errors import DegenerateRing, NoInteriorPointFound
from .primitives import Coordinate

DENOMINATOR_EPSILON = 1e-14


@dataclass(frozen=True)
class InteriorPoint:
    """Resolved center point and the branch that produced it"""
    lat: float
    lon: float
    method: str  # centroid | interpolated | degenerate | fallback


def point_in_polygon(lat: float, lon: float, ring: Sequence[Coordinate]) -> bool:
    """Ray-casting point-in-polygon test (odd crossing rule)"""
    n = len(ring)
    inside = False

    j = n - 1
    for i in range(n):
        yi, xi = ring[i].lat, ring[i].lon
        yj, xj = ring[j].lat, ring[j].lon

        if ((xi > lon) != (xj > lon)) and (
            lat < (yj - yi) * (lon - xi) / (xj - xi + DENOMINATOR_EPSILON) + yi
        ):
            inside = not inside
        j = i

    return inside


def area_centroid(ring: Sequence[Coordinate]):
    """
    Signed area and area-weighted centroid of a ring (x = lon, y = lat).

    Returns:
        Tuple of (area, centroid_lat, centroid_lon); the centroid is None when
        the area is exactly zero
    """
    area = 0.0
    cx = 0.0
    cy = 0.0
    n = len(ring)
    for i in range(n):
        j = (i + 1) % n
        x0, y0 = ring[i].lon, ring[i].lat
        x1, y1 = ring[j].lon, ring[j].lat

        a = x0 * y1 - x1 * y0
        area += a
        cx += (x0 + x1) * a
        cy += (y0 + y1) * a

    area *= 0.5
    if area == 0:
        return area, None, None

    return area, cy / (6 * area), cx / (6 * area)


def resolve_interior_point(
    ring: Sequence[Coordinate],
    steps: int = 20,
    start: float = 0.95,
    strict: bool = False,
    label: Optional[str] = None
) -> InteriorPoint:
    """
    Return a point inside `ring`.

    Args:
        ring: Closed ring
        steps: Number of interpolation steps from `start` down to 0
        start: First interpolation parameter
        strict: Raise instead of degrading to the first vertex
        label: Entity description used in log messages

    Raises:
        DegenerateRing: Empty ring, or zero area / < 3 points when strict
        NoInteriorPointFound: Interpolation exhausted when strict
    """
    if not ring:
        raise DegenerateRing("cannot resolve a center for an empty ring")

    first = ring[0]
    label = label or "ring"

    if len(ring) < 3:
        if strict:
            raise DegenerateRing(f"{label}: {len(ring)} point(s), need at least 3")
        logger.warning(f"{label}: only {len(ring)} point(s), using first vertex as center")
        return InteriorPoint(first.lat, first.lon, "degenerate")

    area, c_lat, c_lon = area_centroid(ring)
    if c_lat is None:
        if strict:
            raise DegenerateRing(f"{label}: zero area")
        logger.warning(f"{label}: zero area, using first vertex as center")
        return InteriorPoint(first.lat, first.lon, "degenerate")

    if point_in_polygon(c_lat, c_lon, ring):
        return InteriorPoint(c_lat, c_lon, "centroid")

    # Slide from the centroid toward the first vertex until inside
    for step in range(steps):
        t = start - step * start / (steps - 1) if steps > 1 else start
        test_lat = t * c_lat + (1 - t) * first.lat
        test_lon = t * c_lon + (1 - t) * first.lon
        if point_in_polygon(test_lat, test_lon, ring):
            logger.debug(f"{label}: centroid outside, interior point found at t={t:.2f}")
            return InteriorPoint(test_lat, test_lon, "interpolated")

    if strict:
        raise NoInteriorPointFound(f"{label}: no interior point after {steps} steps")
    logger.warning(f"{label}: no interior point found, using first vertex as center")
    return InteriorPoint(first.lat, first.lon, "fallback")
