"""
Path stitcher

Greedily chains unordered ways tail-to-head into one continuous path,
reversing ways as needed, until no further connection exists.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

from loguru import logger

from ..errors import StitchIncomplete
from .primitives import Coordinate, DEFAULT_PRECISION, endpoint_key
from .way_index import Connection, EndpointIndex, WayCoordinates, build_endpoint_index


@dataclass
class StitchResult:
    """Outcome of one stitch walk"""
    path: List[Coordinate]
    used_way_ids: List[int] = field(default_factory=list)
    leftover_ways: List[WayCoordinates] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True when the walk consumed every input way"""
        return not self.leftover_ways


class PathStitcher:
    """
    Walks the endpoint index from a dangling endpoint (or any endpoint when
    every way sits on a loop), always taking the first unused way at the
    current endpoint.

    Start selection is deterministic: the lexicographically smallest key with
    exactly one connection, else the smallest key overall.
    """

    def __init__(self, precision: int = DEFAULT_PRECISION):
        self.precision = precision

    def stitch(self, ways: Sequence[WayCoordinates]) -> StitchResult:
        """
        Stitch ways into a single path.

        Args:
            ways: Resolved ways (each with at least two coordinates)

        Returns:
            StitchResult with the path and any ways the walk never reached

        Raises:
            StitchIncomplete: If there is no starting point or the walk makes
                no progress
        """
        index = build_endpoint_index(ways, self.precision)
        start = self._pick_start(index)
        if start is None:
            raise StitchIncomplete("no starting point found")

        used: Set[int] = set()
        used_order: List[int] = []
        path: List[Coordinate] = []
        last_coord: Optional[Coordinate] = None
        current = start

        while True:
            connection = self._next_connection(index, current, used)
            if connection is None:
                break

            used.add(connection.way_id)
            used_order.append(connection.way_id)

            coords = connection.coords
            if not connection.is_start:
                coords = list(reversed(coords))

            # Skip the last point: it is the first point of the next way
            path.extend(coords[:-1])
            last_coord = coords[-1]
            current = endpoint_key(last_coord, self.precision)

        if not used_order:
            raise StitchIncomplete(f"cannot connect ways from endpoint {start}")

        # An open chain ends away from its start; keep its terminal point
        if current != start and last_coord is not None:
            path.append(last_coord)

        leftover = [way for way in ways if way.id not in used]
        if leftover:
            logger.debug(f"Stitch walk used {len(used_order)} way(s), {len(leftover)} left over")

        return StitchResult(path=path, used_way_ids=used_order, leftover_ways=leftover)

    @staticmethod
    def _pick_start(index: EndpointIndex) -> Optional[str]:
        """Prefer a dangling endpoint (exactly one connection)"""
        if not index:
            return None
        dangling = [key for key, connections in index.items() if len(connections) == 1]
        if dangling:
            return min(dangling)
        return min(index)

    @staticmethod
    def _next_connection(
        index: EndpointIndex,
        key: str,
        used: Set[int]
    ) -> Optional[Connection]:
        """First connection at `key` whose way has not been walked yet"""
        for connection in index.get(key, []):
            if connection.way_id not in used:
                return connection
        return None
