"""
Commune lookup by coordinate

Bounding boxes narrow the candidates, shapely decides containment.
"""

from typing import Iterable, List, Optional, Tuple

from loguru import logger
from shapely.geometry import Point, Polygon

from ..models import CommuneRecord
from .names import short_admin_name, strip_accents


class CommuneLocator:
    """Finds the commune whose boundary contains a point"""

    def __init__(self, communes: Iterable[CommuneRecord]):
        self._entries: List[Tuple[CommuneRecord, List[Polygon]]] = []
        for commune in communes:
            polygons = [
                Polygon([(c.lon, c.lat) for c in ring])
                for ring in commune.rings
                if len(ring) >= 4
            ]
            if polygons:
                self._entries.append((commune, polygons))
            else:
                logger.debug(f"Commune {commune.osm_id} ({commune.name}) has no usable ring, not indexed")

    def __len__(self) -> int:
        return len(self._entries)

    def locate(self, lat: float, lon: float, province_name: Optional[str] = None) -> Optional[CommuneRecord]:
        """
        Commune containing (lat, lon)

        Args:
            lat: Latitude
            lon: Longitude
            province_name: Restrict to communes of this province (accent and
                prefix insensitive)

        Returns:
            The first matching commune, or None
        """
        wanted = _province_key(province_name) if province_name else None
        point = Point(lon, lat)

        for commune, polygons in self._entries:
            if wanted is not None and _province_key(commune.province_name) != wanted:
                continue
            if commune.bounds is not None and not commune.bounds.contains(lat, lon):
                continue
            if any(polygon.covers(point) for polygon in polygons):
                return commune

        return None


def _province_key(name: str) -> str:
    return strip_accents(short_admin_name(name)).lower()
