"""
Data collectors for Boundary Mapper

- OSMCollector: Administrative relations from the OpenStreetMap API
"""

from .osm import OSMCollector

__all__ = [
    "OSMCollector",
]
