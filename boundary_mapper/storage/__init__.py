"""
Boundary persistence

- Codec: JSON and legacy binary coordinate encodings
- BoundaryStore: JSON files per record and per ring
"""

from .codec import (
    encode_coordinates_json,
    decode_coordinates_json,
    encode_ring_json,
    encode_rings_json,
    decode_rings_json,
    encode_coordinates_binary,
    decode_coordinates_binary,
)
from .store import BoundaryStore

__all__ = [
    "encode_coordinates_json",
    "decode_coordinates_json",
    "encode_ring_json",
    "encode_rings_json",
    "decode_rings_json",
    "encode_coordinates_binary",
    "decode_coordinates_binary",
    "BoundaryStore",
]
