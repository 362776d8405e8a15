"""
OSM response parser

Parses OSM API 0.6 XML documents into OSMNode, OSMWay and OSMRelation objects
"""

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Union

from loguru import logger

from ...errors import OSMParseError
from .models import OSMDocument, OSMMember, OSMNode, OSMRelation, OSMWay


def _tags(elem: ET.Element) -> Dict[str, str]:
    return {t.attrib["k"]: t.attrib.get("v", "") for t in elem.findall("tag") if "k" in t.attrib}


def _int_attr(elem: ET.Element, name: str, default: int = 0) -> int:
    try:
        return int(elem.attrib.get(name, default))
    except ValueError:
        return default


class OSMResponseParser:
    """Parses OSM XML payloads"""

    @staticmethod
    def parse(data: Union[bytes, str]) -> OSMDocument:
        """
        Parse an <osm> XML payload

        Elements missing their id (or a node missing lat/lon) are skipped.

        Args:
            data: Raw XML from the OSM API or an .osm file

        Returns:
            OSMDocument with nodes, ways and relations in document order

        Raises:
            OSMParseError: If the payload is not well-formed OSM XML
        """
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise OSMParseError(f"failed to decode OSM XML: {e}") from e

        if root.tag != "osm":
            raise OSMParseError(f"expected <osm> root element, got <{root.tag}>")

        document = OSMDocument(
            version=root.attrib.get("version", ""),
            generator=root.attrib.get("generator", ""),
        )

        for elem in root:
            try:
                if elem.tag == "node":
                    document.nodes.append(OSMNode(
                        id=int(elem.attrib["id"]),
                        lat=float(elem.attrib["lat"]),
                        lon=float(elem.attrib["lon"]),
                        tags=_tags(elem),
                        version=_int_attr(elem, "version"),
                        timestamp=elem.attrib.get("timestamp", ""),
                    ))
                elif elem.tag == "way":
                    document.ways.append(OSMWay(
                        id=int(elem.attrib["id"]),
                        node_refs=[int(nd.attrib["ref"]) for nd in elem.findall("nd")],
                        tags=_tags(elem),
                        version=_int_attr(elem, "version"),
                        timestamp=elem.attrib.get("timestamp", ""),
                    ))
                elif elem.tag == "relation":
                    document.relations.append(OSMRelation(
                        id=int(elem.attrib["id"]),
                        members=[
                            OSMMember(
                                type=m.attrib.get("type", ""),
                                ref=int(m.attrib["ref"]),
                                role=m.attrib.get("role", ""),
                            )
                            for m in elem.findall("member")
                        ],
                        tags=_tags(elem),
                        version=_int_attr(elem, "version"),
                        timestamp=elem.attrib.get("timestamp", ""),
                    ))
            except (KeyError, ValueError) as e:
                logger.debug(f"Skipping malformed <{elem.tag}> element: {e}")

        logger.debug(
            f"Parsed OSM document: {len(document.nodes)} nodes, "
            f"{len(document.ways)} ways, {len(document.relations)} relations"
        )
        return document

    @classmethod
    def parse_file(cls, path: Union[str, Path]) -> OSMDocument:
        """Parse an .osm XML file from disk"""
        with open(path, "rb") as f:
            return cls.parse(f.read())
