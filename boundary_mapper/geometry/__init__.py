"""
Boundary geometry core

Pure, synchronous reconstruction of administrative boundary rings:
- Primitives: Coordinate, endpoint keys, closeness test
- Way index: node resolution and endpoint adjacency
- Stitcher: greedy tail-to-head chaining of ways
- Hull: convex-hull fallback for disconnected ways
- Ring: ring closing and per-entity ring assembly
- Centroid: interior center point resolution
"""

from .primitives import Coordinate, Ring, endpoint_key, is_close_enough
from .way_index import Way, WayCoordinates, Connection, build_endpoint_index, resolve_ways
from .stitcher import PathStitcher, StitchResult
from .hull import convex_hull, fallback_polygon
from .ring import RingBuilder, close_ring
from .centroid import InteriorPoint, point_in_polygon, resolve_interior_point

__all__ = [
    "Coordinate",
    "Ring",
    "endpoint_key",
    "is_close_enough",
    "Way",
    "WayCoordinates",
    "Connection",
    "build_endpoint_index",
    "resolve_ways",
    "PathStitcher",
    "StitchResult",
    "convex_hull",
    "fallback_polygon",
    "RingBuilder",
    "close_ring",
    "InteriorPoint",
    "point_in_polygon",
    "resolve_interior_point",
]
