"""
Error taxonomy for boundary reconstruction

Only NoUsableWays aborts an entity. The geometry anomalies below it degrade to
deterministic fallbacks and are raised only by callers that ask for strict
behaviour.
"""


class BoundaryError(Exception):
    """Base class for all boundary-mapper errors"""


class NoUsableWays(BoundaryError):
    """No way resolved to at least two coordinates after node lookup"""


class StitchIncomplete(BoundaryError):
    """The path stitcher found no starting point or made no progress"""


class DegenerateRing(BoundaryError):
    """Ring has zero signed area (or too few points) for a centroid"""


class NoInteriorPointFound(BoundaryError):
    """Interpolation search toward the first vertex found no interior point"""


class OSMFetchError(BoundaryError, RuntimeError):
    """OSM API request failed after all retries"""


class OSMParseError(BoundaryError, ValueError):
    """OSM XML payload could not be decoded"""


class CodecError(BoundaryError, ValueError):
    """Coordinate payload could not be encoded or decoded"""
