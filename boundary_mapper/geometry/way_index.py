"""
Way-graph indexer

Resolves way node references into coordinates and builds the endpoint to way
adjacency index used by the path stitcher.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence

from loguru import logger

from .primitives import Coordinate, DEFAULT_PRECISION, endpoint_key


@dataclass(frozen=True)
class Way:
    """A directed OSM polyline given as node references"""
    id: int
    node_refs: Sequence[int]


@dataclass
class WayCoordinates:
    """A way after node-ID resolution"""
    id: int
    coords: List[Coordinate]


@dataclass
class Connection:
    """One endpoint of a way, as recorded in the endpoint index"""
    way_id: int
    is_start: bool
    coords: List[Coordinate]


EndpointIndex = Dict[str, List[Connection]]


def resolve_ways(
    ways: Iterable[Way],
    nodes: Mapping[int, Coordinate]
) -> List[WayCoordinates]:
    """
    Resolve each way's node references against the node index.

    Unknown references are skipped (the way keeps its resolvable subsequence).
    Ways left with fewer than two coordinates cannot take part in stitching
    and are dropped.
    """
    resolved = []
    for way in ways:
        coords = []
        for ref in way.node_refs:
            node = nodes.get(ref)
            if node is None:
                continue
            # Carry the node id for traceability
            coords.append(node if node.id == ref else Coordinate(node.lat, node.lon, ref))

        if len(coords) < 2:
            logger.debug(f"Dropping way {way.id}: {len(coords)} resolvable node(s)")
            continue

        if len(coords) < len(way.node_refs):
            logger.debug(f"Way {way.id}: resolved {len(coords)}/{len(way.node_refs)} nodes")

        resolved.append(WayCoordinates(id=way.id, coords=coords))

    return resolved


def build_endpoint_index(
    ways: Iterable[WayCoordinates],
    precision: int = DEFAULT_PRECISION
) -> EndpointIndex:
    """
    Map endpoint key -> connections touching that endpoint.

    Every way contributes a start record and an end record, including closed
    ways whose two records share one key.
    """
    index: EndpointIndex = {}
    for way in ways:
        if len(way.coords) < 2:
            continue

        start = endpoint_key(way.coords[0], precision)
        end = endpoint_key(way.coords[-1], precision)

        index.setdefault(start, []).append(
            Connection(way_id=way.id, is_start=True, coords=way.coords)
        )
        index.setdefault(end, []).append(
            Connection(way_id=way.id, is_start=False, coords=way.coords)
        )

    return index
