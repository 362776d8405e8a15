"""
OSM data models

Data classes for representing OSM nodes, ways and relations decoded from the
OSM API 0.6 XML format
"""

from typing import List, Dict, Optional, Tuple
from dataclasses import dataclass, field

from ...geometry import Coordinate, Way

# place values that mark a node as an administrative center
CENTER_PLACE_VALUES = {"suburb", "town", "village", "city", "hamlet", "neighbourhood"}


def _parse_level(value: str) -> int:
    """Integer level tag value, -1 when missing or malformed"""
    if not value:
        return -1
    try:
        return int(value)
    except ValueError:
        return -1


class TaggedElement:
    """Tag helpers shared by nodes, ways and relations"""
    tags: Dict[str, str]

    def get_tag(self, key: str) -> str:
        """Tag value by key, or empty string"""
        return self.tags.get(key, "")

    def get_name(self) -> str:
        """Name with fallback to name:vi then name:en"""
        return self.get_tag("name") or self.get_tag("name:vi") or self.get_tag("name:en")

    def get_admin_level(self) -> int:
        return _parse_level(self.get_tag("admin_level"))

    def get_capital_level(self) -> int:
        return _parse_level(self.get_tag("capital"))

    def is_administrative_boundary(self) -> bool:
        return self.get_tag("boundary") == "administrative" and self.get_tag("admin_level") != ""


@dataclass
class OSMNode(TaggedElement):
    """Represents an OSM node (point)"""
    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)
    version: int = 0
    timestamp: str = ""

    def to_coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lon=self.lon, id=self.id)

    def is_center_point(self) -> bool:
        """Node marks an administrative center (capital, place or population)"""
        if "capital" in self.tags or "population" in self.tags:
            return True
        return self.get_tag("place") in CENTER_PLACE_VALUES


@dataclass
class OSMWay(TaggedElement):
    """Represents an OSM way (line or polygon)"""
    id: int
    node_refs: List[int]
    tags: Dict[str, str] = field(default_factory=dict)
    version: int = 0
    timestamp: str = ""

    def to_way(self) -> Way:
        return Way(id=self.id, node_refs=tuple(self.node_refs))


@dataclass
class OSMMember:
    """Relation member reference"""
    type: str
    ref: int
    role: str = ""


@dataclass
class OSMRelation(TaggedElement):
    """Represents an OSM relation (grouping of nodes, ways and relations)"""
    id: int
    members: List[OSMMember]
    tags: Dict[str, str] = field(default_factory=dict)
    version: int = 0
    timestamp: str = ""

    def way_refs(self, roles: Optional[Tuple[str, ...]] = None) -> List[int]:
        """Referenced way ids, optionally restricted to member roles"""
        return [
            m.ref for m in self.members
            if m.type == "way" and (roles is None or m.role in roles)
        ]


@dataclass
class OSMDocument:
    """Decoded <osm> document"""
    version: str = ""
    generator: str = ""
    nodes: List[OSMNode] = field(default_factory=list)
    ways: List[OSMWay] = field(default_factory=list)
    relations: List[OSMRelation] = field(default_factory=list)

    def node_index(self) -> Dict[int, Coordinate]:
        """Node id -> coordinate lookup for ring building"""
        return {node.id: node.to_coordinate() for node in self.nodes}

    def way_index(self) -> Dict[int, OSMWay]:
        return {way.id: way for way in self.ways}

    def find_relation(self, relation_id: int) -> Optional[OSMRelation]:
        for relation in self.relations:
            if relation.id == relation_id:
                return relation
        return None

    def get_bounds(self) -> Optional[Tuple[float, float, float, float]]:
        """(min_lat, max_lat, min_lon, max_lon) over all nodes, or None"""
        if not self.nodes:
            return None
        lats = [n.lat for n in self.nodes]
        lons = [n.lon for n in self.nodes]
        return min(lats), max(lats), min(lons), max(lons)
