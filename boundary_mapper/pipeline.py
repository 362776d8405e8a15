"""
Main Pipeline Orchestrator for administrative boundary extraction

Steps per OSM relation:

  1. Fetch the relation with all members (OSM API, cached)
  2. Classify administrative entities (province = level 4, commune = level 6)
  3. Build closed rings from each entity's outer ways
  4. Resolve an interior center point per ring
  5. Compute bounds and audit info, persist records
"""

from typing import Iterable, List, Optional, Union

from loguru import logger

from .admin import AdminClassifier, ClassifiedEntity
from .admin.names import short_admin_name
from .collectors import OSMCollector
from .collectors.osm import OSMDocument
from .config import PipelineConfig, get_config
from .errors import NoUsableWays
from .geometry import Ring, RingBuilder, resolve_interior_point
from .geometry.primitives import bounding_box, signed_area
from .models import (
    Bounds, CenterPoint, CommuneRecord, CoordinateModel, DocumentInfo,
    ProcessingResult, ProvinceRecord,
)
from .storage import BoundaryStore

AdminRecordType = Union[ProvinceRecord, CommuneRecord]


class BoundaryPipeline:
    """
    Pipeline to extract province / commune boundaries from OSM relations

    Usage:
        pipeline = BoundaryPipeline()
        result = pipeline.run(relation_id=1903016)
        pipeline.save(result)
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        collector: Optional[OSMCollector] = None,
        store: Optional[BoundaryStore] = None
    ):
        self.config = config or get_config()
        self.collector = collector or OSMCollector(self.config.api, cache_dir=self.config.cache_dir)
        self.store = store or BoundaryStore(self.config.output_dir)
        self.classifier = AdminClassifier(self.config)
        self.ring_builder = RingBuilder(self.config.geometry)

    def run(self, relation_id: int) -> ProcessingResult:
        """
        Fetch and process one relation

        Raises:
            OSMFetchError: If the relation cannot be fetched
            OSMParseError: If the response is not valid OSM XML
        """
        logger.info(f"Processing relation {relation_id}")
        document = self.collector.fetch_relation(relation_id)
        relation = document.find_relation(relation_id)
        if relation is None:
            logger.warning(f"Relation {relation_id} is not in the fetched document")
        else:
            logger.info(f"Relation {relation_id}: {relation.get_name()} ({len(relation.members)} members)")

        result = self.process_document(document)
        result.relation_id = relation_id
        return result

    def process_document(self, document: OSMDocument) -> ProcessingResult:
        """Classify entities and build their boundaries"""
        result = ProcessingResult(info=self._document_info(document))
        result.center_points = self.classifier.center_points(document)
        result.capital_stats = self.classifier.capital_stats(document)

        nodes = document.node_index()
        entities = self.classifier.classify(document)

        province_name = ""
        for entity in entities:
            record = entity.record
            if record.source == "relation":
                try:
                    self._build_boundary(entity, nodes)
                except NoUsableWays as e:
                    logger.warning(f"Skipping {record.kind} {record.osm_id} ({record.name}): {e}")
                    result.skipped.append(record.osm_id)
                    continue

            if isinstance(record, ProvinceRecord):
                result.provinces.append(record)
                if record.source == "relation" and not province_name:
                    province_name = short_admin_name(record.name)
            else:
                result.communes.append(record)

        # Communes fetched with their province inherit its name
        if province_name:
            for commune in result.communes:
                if not commune.province_name:
                    commune.province_name = province_name

        logger.info(
            f"Processed document: {len(result.provinces)} province(s), "
            f"{len(result.communes)} commune(s), {len(result.skipped)} skipped"
        )
        return result

    def save(self, result: ProcessingResult) -> List[str]:
        """Persist every record and the processing summary"""
        written = []
        for record in result.records:
            if record.rings or record.center:
                written.extend(self.store.save_record(record))
        written.append(self.store.save_result(result))
        return written

    def recompute_centers(self, records: Iterable[AdminRecordType], force: bool = False) -> List[AdminRecordType]:
        """
        Fill in centers for records that have rings but no center

        Args:
            records: Stored records
            force: Recompute even when a center is present

        Returns:
            The records that were updated
        """
        updated = []
        for record in records:
            if not record.rings or (record.center is not None and not force):
                continue
            rings = [[c.to_coordinate() for c in ring] for ring in record.rings]
            self._apply_centers(record, rings)
            record.audit.touch(self.config.audit_user)
            logger.info(f"Updated center of {record.kind} {record.osm_id}: {record.center.lat:.6f}, {record.center.lon:.6f}")
            updated.append(record)
        return updated

    def _build_boundary(self, entity: ClassifiedEntity, nodes) -> None:
        record = entity.record
        label = f"{record.kind} {record.osm_id} ({record.name})"

        rings = self.ring_builder.build(entity.ways, nodes, label=label)
        record.rings = [[CoordinateModel.from_coordinate(c) for c in ring] for ring in rings]
        self._apply_centers(record, rings)

        box = bounding_box([c for ring in rings for c in ring])
        if box is not None:
            min_lat, max_lat, min_lon, max_lon = box
            record.bounds = Bounds(min_lat=min_lat, max_lat=max_lat, min_lon=min_lon, max_lon=max_lon)

        logger.info(f"{label}: {len(rings)} ring(s), center {record.center.lat:.6f}, {record.center.lon:.6f}")

    def _apply_centers(self, record: AdminRecordType, rings: List[Ring]) -> None:
        """One center per ring; the entity center comes from the largest ring"""
        geometry = self.config.geometry
        label = f"{record.kind} {record.osm_id}"

        centers = []
        for i, ring in enumerate(rings):
            point = resolve_interior_point(
                ring,
                steps=geometry.interior_search_steps,
                start=geometry.interior_search_start,
                label=f"{label} ring {i + 1}",
            )
            centers.append(CenterPoint(lat=point.lat, lon=point.lon, method=point.method))

        record.centers = centers
        if centers:
            largest = max(range(len(rings)), key=lambda i: abs(signed_area(rings[i])))
            record.center = centers[largest]

    @staticmethod
    def _document_info(document: OSMDocument) -> DocumentInfo:
        info = DocumentInfo(
            version=document.version,
            generator=document.generator,
            total_nodes=len(document.nodes),
            total_ways=len(document.ways),
            total_relations=len(document.relations),
        )
        box = document.get_bounds()
        if box is not None:
            min_lat, max_lat, min_lon, max_lon = box
            info.bounds = Bounds(min_lat=min_lat, max_lat=max_lat, min_lon=min_lon, max_lon=max_lon)
        return info
