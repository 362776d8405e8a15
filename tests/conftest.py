import sys
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from boundary_mapper.geometry import Coordinate, WayCoordinates


def coords(*pairs: Tuple[float, float]) -> List[Coordinate]:
    """Coordinates from (lat, lon) pairs"""
    return [Coordinate(lat, lon) for lat, lon in pairs]


def way(way_id: int, *pairs: Tuple[float, float]) -> WayCoordinates:
    return WayCoordinates(id=way_id, coords=coords(*pairs))


def pairs(ring: Iterable[Coordinate]) -> List[Tuple[float, float]]:
    return [(c.lat, c.lon) for c in ring]


def node_index(points: Dict[int, Tuple[float, float]]) -> Dict[int, Coordinate]:
    return {node_id: Coordinate(lat, lon, node_id) for node_id, (lat, lon) in points.items()}


@pytest.fixture
def square_ways() -> List[WayCoordinates]:
    """Unit square (0,0)-(0,1)-(1,1)-(1,0) split into four ways"""
    return [
        way(1, (0, 0), (0, 1)),
        way(2, (0, 1), (1, 1)),
        way(3, (1, 1), (1, 0)),
        way(4, (1, 0), (0, 0)),
    ]


@pytest.fixture
def l_shape_ring() -> List[Coordinate]:
    return coords((0, 0), (0, 3), (1, 3), (1, 1), (3, 1), (3, 0), (0, 0))


SAMPLE_OSM_XML = """<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="openstreetmap-cgimap 2.0.1" copyright="OpenStreetMap and contributors">
 <node id="1" visible="true" version="3" lat="20.0000000" lon="105.0000000"/>
 <node id="2" visible="true" version="1" lat="20.0000000" lon="106.0000000"/>
 <node id="3" visible="true" version="1" lat="21.0000000" lon="106.0000000"/>
 <node id="4" visible="true" version="1" lat="21.0000000" lon="105.0000000"/>
 <node id="21" visible="true" version="1" lat="20.0000000" lon="105.0000000"/>
 <node id="22" visible="true" version="1" lat="20.0000000" lon="105.3000000"/>
 <node id="23" visible="true" version="1" lat="20.1000000" lon="105.3000000"/>
 <node id="24" visible="true" version="1" lat="20.1000000" lon="105.1000000"/>
 <node id="25" visible="true" version="1" lat="20.3000000" lon="105.1000000"/>
 <node id="26" visible="true" version="1" lat="20.3000000" lon="105.0000000"/>
 <node id="1000" visible="true" version="7" timestamp="2024-05-01T10:00:00Z" lat="20.2500000" lon="105.9750000">
  <tag k="capital" v="4"/>
  <tag k="place" v="city"/>
  <tag k="name" v="Ninh Bình"/>
  <tag k="name:en" v="Ninh Binh"/>
  <tag k="population" v="160166"/>
 </node>
 <node id="1001" visible="true" version="1" lat="20.0500000" lon="105.0500000">
  <tag k="place" v="village"/>
  <tag k="name" v="Làng Một"/>
 </node>
 <node id="bad" visible="true" version="1" lat="20.0" lon="105.0"/>
 <way id="10" visible="true" version="2">
  <nd ref="1"/>
  <nd ref="2"/>
  <nd ref="3"/>
  <tag k="boundary" v="administrative"/>
  <tag k="admin_level" v="4"/>
 </way>
 <way id="11" visible="true" version="2">
  <nd ref="3"/>
  <nd ref="4"/>
  <nd ref="1"/>
 </way>
 <way id="30" visible="true" version="1">
  <nd ref="21"/>
  <nd ref="22"/>
  <nd ref="23"/>
  <nd ref="24"/>
 </way>
 <way id="31" visible="true" version="1">
  <nd ref="21"/>
  <nd ref="26"/>
  <nd ref="25"/>
  <nd ref="24"/>
 </way>
 <way id="40" visible="true" version="1">
  <nd ref="900"/>
  <nd ref="901"/>
 </way>
 <relation id="100" visible="true" version="12">
  <member type="way" ref="10" role="outer"/>
  <member type="way" ref="11" role="outer"/>
  <member type="node" ref="1000" role="admin_centre"/>
  <tag k="type" v="boundary"/>
  <tag k="boundary" v="administrative"/>
  <tag k="admin_level" v="4"/>
  <tag k="capital" v="4"/>
  <tag k="name" v="Tỉnh Ninh Bình"/>
  <tag k="name:en" v="Ninh Binh Province"/>
 </relation>
 <relation id="200" visible="true" version="4">
  <member type="way" ref="30" role="outer"/>
  <member type="way" ref="31" role=""/>
  <tag k="type" v="boundary"/>
  <tag k="boundary" v="administrative"/>
  <tag k="admin_level" v="6"/>
  <tag k="name" v="Phường Đông Thành"/>
 </relation>
 <relation id="300" visible="true" version="1">
  <member type="way" ref="30" role="outer"/>
  <tag k="boundary" v="administrative"/>
  <tag k="admin_level" v="8"/>
  <tag k="name" v="Thôn Ba"/>
 </relation>
 <relation id="400" visible="true" version="1">
  <member type="way" ref="40" role="outer"/>
  <member type="way" ref="30" role="inner"/>
  <tag k="boundary" v="administrative"/>
  <tag k="admin_level" v="6"/>
  <tag k="name" v="Xã Thiếu Dữ Liệu"/>
 </relation>
 <relation id="500" visible="true" version="1">
  <member type="way" ref="10" role=""/>
  <tag k="type" v="route"/>
  <tag k="name" v="Tuyến Một"/>
 </relation>
</osm>
"""


@pytest.fixture
def sample_osm_xml() -> bytes:
    return SAMPLE_OSM_XML.encode("utf-8")
