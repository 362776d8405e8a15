"""
File-based boundary store

Layout under the output directory:
- {kind}s_{osm_id}.json: the full record
- {kind}s_{osm_id}_polygon.json (or _polygon_{n}.json with several rings):
  each ring as [[lat, lon], ...]
- relation_{id}_result.json: processing summary for a fetched relation
"""

import json
import os
from pathlib import Path
from typing import Iterator, List, Union

from loguru import logger

from ..models import CommuneRecord, ProcessingResult, ProvinceRecord, StoredRecord
from .codec import encode_ring_json

AdminRecordType = Union[ProvinceRecord, CommuneRecord]


class BoundaryStore:
    """Persists boundary records and their rings as JSON files"""

    def __init__(self, output_dir: str = "output"):
        self.output_dir = Path(output_dir)

    def save_record(self, record: AdminRecordType) -> List[str]:
        """
        Save a record and one polygon file per ring

        Returns:
            Paths written, polygon files first
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        written = []

        base = f"{record.kind}s_{record.osm_id}"
        rings = [[c.to_coordinate() for c in ring] for ring in record.rings]
        for i, ring in enumerate(rings, 1):
            suffix = "_polygon.json" if len(rings) == 1 else f"_polygon_{i}.json"
            polygon_path = self.output_dir / f"{base}{suffix}"
            polygon_path.write_text(encode_ring_json(ring), encoding="utf-8")
            written.append(str(polygon_path))

        record_path = self.output_dir / f"{base}.json"
        with open(record_path, "w", encoding="utf-8") as f:
            json.dump(record.model_dump(), f, indent=2, ensure_ascii=False)
        written.append(str(record_path))

        logger.info(f"Saved {record.kind} {record.osm_id} ({record.name}): {len(rings)} ring(s)")
        return written

    def save_result(self, result: ProcessingResult) -> str:
        """Save a processing summary (records are saved separately)"""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        name = f"relation_{result.relation_id}_result.json" if result.relation_id else "document_result.json"
        path = self.output_dir / name

        summary = result.model_dump(exclude={"provinces", "communes"})
        summary["provinces"] = [r.osm_id for r in result.provinces]
        summary["communes"] = [r.osm_id for r in result.communes]
        with open(path, "w", encoding="utf-8") as f:
            json.dump(summary, f, indent=2, ensure_ascii=False)

        logger.info(f"Saved processing result to {path}")
        return str(path)

    @staticmethod
    def load_record(path: Union[str, os.PathLike]) -> AdminRecordType:
        """Read a record file written by save_record"""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return StoredRecord(record=data).record

    def list_records(self) -> Iterator[AdminRecordType]:
        """Iterate every stored province and commune record"""
        if not self.output_dir.exists():
            return
        for pattern in ("provinces_*.json", "communes_*.json"):
            for path in sorted(self.output_dir.glob(pattern)):
                if "_polygon" in path.stem:
                    continue
                yield self.load_record(path)
