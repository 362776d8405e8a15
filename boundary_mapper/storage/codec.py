"""
Coordinate serialization

JSON is the current format. The fixed-width little-endian binary encoding
(8 bytes latitude + 8 bytes longitude per point, base64) is kept for reading
and writing older stored boundaries.
"""

import base64
import binascii
import json
import struct
from typing import List, Sequence

from ..errors import CodecError
from ..geometry import Coordinate, Ring

_POINT = struct.Struct("<dd")


def encode_coordinates_json(coordinates: Sequence[Coordinate]) -> str:
    """Encode coordinates as a JSON array of {"id", "lat", "lon"} objects"""
    if not coordinates:
        return "[]"
    return json.dumps([{"id": c.id, "lat": c.lat, "lon": c.lon} for c in coordinates])


def decode_coordinates_json(text: str) -> List[Coordinate]:
    """Decode the output of encode_coordinates_json"""
    if not text or text == "[]":
        return []

    try:
        items = json.loads(text)
        return [Coordinate(lat=float(item["lat"]), lon=float(item["lon"]), id=item.get("id")) for item in items]
    except (json.JSONDecodeError, TypeError, KeyError, ValueError, AttributeError) as e:
        raise CodecError(f"failed to decode coordinate JSON: {e}") from e


def encode_ring_json(ring: Sequence[Coordinate]) -> str:
    """Encode one ring as an array of [lat, lon] pairs"""
    return json.dumps([[c.lat, c.lon] for c in ring])


def encode_rings_json(rings: Sequence[Ring]) -> str:
    """Encode rings as nested [lat, lon] arrays"""
    return json.dumps([[[c.lat, c.lon] for c in ring] for ring in rings])


def decode_rings_json(text: str) -> List[Ring]:
    """
    Decode nested [lat, lon] arrays.

    A single ring (array of pairs) is accepted as well as an array of rings.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CodecError(f"failed to decode ring JSON: {e}") from e

    if not isinstance(data, list):
        raise CodecError("ring JSON must be an array")
    if data and _is_pair(data[0]):
        data = [data]

    rings = []
    for ring in data:
        if not isinstance(ring, list) or not all(_is_pair(p) for p in ring):
            raise CodecError("ring must be an array of [lat, lon] pairs")
        rings.append([Coordinate(lat=float(p[0]), lon=float(p[1])) for p in ring])
    return rings


def encode_coordinates_binary(coordinates: Sequence[Coordinate]) -> str:
    """Legacy encoding: base64 of little-endian float64 (lat, lon) pairs"""
    if not coordinates:
        return ""
    payload = b"".join(_POINT.pack(c.lat, c.lon) for c in coordinates)
    return base64.b64encode(payload).decode("ascii")


def decode_coordinates_binary(text: str) -> List[Coordinate]:
    """Decode the legacy binary encoding; node ids are not stored"""
    if not text:
        return []

    try:
        payload = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CodecError(f"failed to decode base64 string: {e}") from e

    if len(payload) % _POINT.size != 0:
        raise CodecError(f"invalid binary data length {len(payload)}: expected multiple of {_POINT.size} bytes")

    return [Coordinate(lat=lat, lon=lon) for lat, lon in _POINT.iter_unpack(payload)]


def _is_pair(value) -> bool:
    return (
        isinstance(value, list)
        and len(value) == 2
        and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value)
    )
