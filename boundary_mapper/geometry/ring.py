"""
Ring closing and ring assembly

RingBuilder turns one administrative entity's ways into closed rings:
already-closed ways stay separate rings, the rest are stitched (with the
convex-hull fallback when stitching fails) and every ring is closed.
"""

from typing import List, Mapping, Optional, Sequence

from loguru import logger

from ..config import GeometryConfig
from ..errors import NoUsableWays, StitchIncomplete
from .hull import fallback_polygon
from .primitives import CLOSE_TOLERANCE_DEG, Coordinate, Ring, is_close_enough
from .stitcher import PathStitcher
from .way_index import Way, WayCoordinates, resolve_ways


def close_ring(coords: Sequence[Coordinate], tolerance: float = CLOSE_TOLERANCE_DEG) -> Ring:
    """Ensure ring is closed (first point == last point within tolerance)"""
    ring = list(coords)
    if not ring:
        return ring

    if not is_close_enough(ring[0], ring[-1], tolerance):
        ring.append(ring[0])

    return ring


def is_closed_way(way: WayCoordinates, tolerance: float = CLOSE_TOLERANCE_DEG) -> bool:
    """A way that already forms a ring on its own"""
    return len(way.coords) >= 4 and is_close_enough(way.coords[0], way.coords[-1], tolerance)


class RingBuilder:
    """Builds closed rings from ways and a node index"""

    def __init__(self, config: Optional[GeometryConfig] = None):
        self.config = config or GeometryConfig()
        self.stitcher = PathStitcher(precision=self.config.endpoint_precision)

    def build(
        self,
        ways: Sequence[Way],
        nodes: Mapping[int, Coordinate],
        label: str = ""
    ) -> List[Ring]:
        """
        Build closed rings for one entity.

        Args:
            ways: Ways as node reference lists
            nodes: Node id -> coordinate lookup
            label: Entity description used in log messages

        Returns:
            One or more closed rings

        Raises:
            NoUsableWays: If no way resolves to at least two coordinates
        """
        resolved = resolve_ways(ways, nodes)
        if not resolved:
            raise NoUsableWays(f"{label or 'entity'}: none of {len(ways)} way(s) resolved to 2+ coordinates")

        return self.build_from_coordinates(resolved, label)

    def build_from_coordinates(
        self,
        ways: Sequence[WayCoordinates],
        label: str = ""
    ) -> List[Ring]:
        """Build closed rings from already-resolved ways"""
        tolerance = self.config.close_tolerance_deg
        rings: List[Ring] = []
        open_ways: List[WayCoordinates] = []

        for way in ways:
            if self.config.split_closed_ways and is_closed_way(way, tolerance):
                logger.debug(f"{label}: way {way.id} is already closed ({len(way.coords)} points)")
                rings.append(list(way.coords))
            else:
                open_ways.append(way)

        if open_ways:
            path = self._stitch_or_fallback(open_ways, label)
            if path:
                rings.append(path)

        closed = [close_ring(ring, tolerance) for ring in rings if ring]
        logger.debug(f"{label}: built {len(closed)} ring(s) from {len(ways)} way(s)")
        return closed

    def _stitch_or_fallback(self, ways: Sequence[WayCoordinates], label: str) -> List[Coordinate]:
        try:
            result = self.stitcher.stitch(ways)
        except StitchIncomplete as e:
            logger.warning(f"{label}: could not build connected path ({e}), using convex hull fallback")
            return fallback_polygon(ways)

        if result.complete:
            return result.path

        if self.config.leftover_policy == "hull":
            logger.warning(
                f"{label}: {len(result.leftover_ways)} way(s) not connected, using convex hull fallback"
            )
            return fallback_polygon(ways)

        logger.warning(
            f"{label}: {len(result.leftover_ways)} way(s) not connected, appending them uncombined"
        )
        path = list(result.path)
        for way in result.leftover_ways:
            path.extend(way.coords)
        return path
