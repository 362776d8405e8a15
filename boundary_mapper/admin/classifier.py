"""
Administrative entity classification

Turns an OSM document into explicit province / commune records. Relations are
classified by admin_level, nodes by their capital tag.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from loguru import logger

from ..config import PipelineConfig, get_config
from ..collectors.osm.models import OSMDocument, OSMNode, OSMRelation
from ..geometry import Way
from ..models import AdministrativeCenter, AuditInfo, CenterPoint, CommuneRecord, ProvinceRecord
from .names import strip_accents

AdminRecordType = Union[ProvinceRecord, CommuneRecord]

# Members with an empty role are treated as outer, as OSM renderers do
OUTER_ROLES = ("outer", "")


@dataclass
class ClassifiedEntity:
    """A record plus the ways its rings will be built from"""
    record: AdminRecordType
    ways: List[Way] = field(default_factory=list)


class AdminClassifier:
    """Classifies administrative relations and capital nodes"""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or get_config()

    def classify(self, document: OSMDocument) -> List[ClassifiedEntity]:
        """
        Classify every administrative entity in the document

        Args:
            document: Parsed OSM document

        Returns:
            Classified entities in document order, relations first
        """
        entities = []
        ways_by_id = document.way_index()

        for relation in document.relations:
            if not relation.is_administrative_boundary():
                continue

            admin_level = relation.get_admin_level()
            record = self._make_record(relation, admin_level, source="relation")
            if record is None:
                logger.debug(f"Relation {relation.id} ({relation.get_name()}): admin_level={admin_level} not handled, skipped")
                continue

            ways = self._outer_ways(relation, ways_by_id)
            logger.info(
                f"Relation {relation.id}: {record.name} -> {record.kind} "
                f"(admin_level={admin_level}, {len(ways)} outer way(s))"
            )
            entities.append(ClassifiedEntity(record=record, ways=ways))

        for node in document.nodes:
            capital_level = node.get_capital_level()
            if capital_level <= 0:
                continue

            record = self._make_record(node, capital_level, source="node")
            if record is None:
                logger.debug(f"Node {node.id} ({node.get_name()}): capital={capital_level} not handled, skipped")
                continue

            record.center = CenterPoint(lat=node.lat, lon=node.lon, method="node")
            logger.info(f"Node {node.id}: {record.name} -> {record.kind} (capital={capital_level})")
            entities.append(ClassifiedEntity(record=record))

        return entities

    def center_points(self, document: OSMDocument) -> List[AdministrativeCenter]:
        """Nodes tagged as administrative centers"""
        return [self._to_center(node) for node in document.nodes if node.is_center_point()]

    @staticmethod
    def capital_stats(document: OSMDocument) -> Dict[int, int]:
        """Count of administrative relations per capital level"""
        counts = Counter(
            relation.get_capital_level()
            for relation in document.relations
            if relation.is_administrative_boundary() and relation.get_capital_level() > 0
        )
        return dict(counts)

    def _make_record(
        self,
        element: Union[OSMRelation, OSMNode],
        level: int,
        source: str
    ) -> Optional[AdminRecordType]:
        name = element.get_tag("name")
        fields = dict(
            osm_id=element.id,
            name=name,
            name_en=element.get_tag("name:en"),
            name_vi=element.get_tag("name:vi"),
            name_ascii=strip_accents(name),
            place=element.get_tag("place"),
            capital_level=element.get_capital_level(),
            source=source,
            audit=AuditInfo(created_by=self.config.audit_user),
        )

        if level == self.config.province_level:
            return ProvinceRecord(**fields)
        if level == self.config.commune_level:
            return CommuneRecord(**fields)
        return None

    @staticmethod
    def _outer_ways(relation: OSMRelation, ways_by_id) -> List[Way]:
        ways = []
        for ref in relation.way_refs(OUTER_ROLES):
            osm_way = ways_by_id.get(ref)
            if osm_way is None:
                logger.debug(f"Relation {relation.id}: way {ref} not in document")
                continue
            ways.append(osm_way.to_way())
        return ways

    def _to_center(self, node: OSMNode) -> AdministrativeCenter:
        tags = node.tags

        admin_level = node.get_admin_level()
        capital = tags.get("capital")
        population = None
        if "population" in tags:
            try:
                population = int(tags["population"])
            except ValueError:
                population = None

        # capital takes precedence over admin_level
        level = ""
        if capital is not None:
            level = {str(self.config.province_level): "province",
                     str(self.config.commune_level): "commune"}.get(capital, "")
        elif admin_level > 0:
            level = self.config.level_names.get(admin_level, "")

        return AdministrativeCenter(
            osm_id=node.id,
            lat=node.lat,
            lon=node.lon,
            name=node.get_tag("name"),
            official_name=node.get_tag("name:vi"),
            english_name=node.get_tag("name:en"),
            place=node.get_tag("place"),
            admin_level=admin_level if admin_level > 0 else None,
            capital=capital,
            level=level,
            population=population,
            iso3166_2=tags.get("ISO3166-2"),
            website=tags.get("contact:website"),
            country=self.config.country,
        )
