"""
Pydantic models for administrative boundary records
"""

from datetime import datetime
from typing import Annotated, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field

from .geometry import Coordinate


# ============================================================
# Geometry Types
# ============================================================

class CoordinateModel(BaseModel):
    lat: float
    lon: float
    id: Optional[int] = None  # OSM node id

    @classmethod
    def from_coordinate(cls, coord: Coordinate) -> "CoordinateModel":
        return cls(lat=coord.lat, lon=coord.lon, id=coord.id)

    def to_coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lon=self.lon, id=self.id)


class CenterPoint(BaseModel):
    lat: float
    lon: float
    method: Literal["centroid", "interpolated", "degenerate", "fallback", "node"] = "centroid"


class Bounds(BaseModel):
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, lat: float, lon: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon


# ============================================================
# Administrative Records
# ============================================================

class AuditInfo(BaseModel):
    created_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())
    created_by: str = ""
    updated_at: Optional[str] = None
    updated_by: Optional[str] = None

    def touch(self, user: str) -> None:
        self.updated_at = datetime.utcnow().isoformat()
        self.updated_by = user


class ProvinceRecord(BaseModel):
    """Province / centrally governed city (admin_level 4)"""
    admin_level: Literal[4] = 4
    osm_id: int
    name: str
    name_en: str = ""
    name_vi: str = ""
    name_ascii: str = ""
    place: str = ""
    capital_level: int = -1
    source: Literal["relation", "node"] = "relation"
    rings: List[List[CoordinateModel]] = Field(default_factory=list)
    centers: List[CenterPoint] = Field(default_factory=list)
    center: Optional[CenterPoint] = None
    bounds: Optional[Bounds] = None
    audit: AuditInfo = Field(default_factory=AuditInfo)

    @property
    def kind(self) -> str:
        return "province"


class CommuneRecord(BaseModel):
    """Commune / ward (admin_level 6)"""
    admin_level: Literal[6] = 6
    osm_id: int
    name: str
    name_en: str = ""
    name_vi: str = ""
    name_ascii: str = ""
    place: str = ""
    capital_level: int = -1
    source: Literal["relation", "node"] = "relation"
    province_name: str = ""
    rings: List[List[CoordinateModel]] = Field(default_factory=list)
    centers: List[CenterPoint] = Field(default_factory=list)
    center: Optional[CenterPoint] = None
    bounds: Optional[Bounds] = None
    audit: AuditInfo = Field(default_factory=AuditInfo)

    @property
    def kind(self) -> str:
        return "commune"


AdminRecord = Annotated[Union[ProvinceRecord, CommuneRecord], Field(discriminator="admin_level")]


class StoredRecord(BaseModel):
    """Envelope used to read a record back without knowing its level"""
    record: AdminRecord


# ============================================================
# Processing Result
# ============================================================

class AdministrativeCenter(BaseModel):
    """Node tagged as an administrative center"""
    osm_id: int
    lat: float
    lon: float
    name: str = ""
    official_name: str = ""  # name:vi
    english_name: str = ""  # name:en
    place: str = ""
    admin_level: Optional[int] = None
    capital: Optional[str] = None
    level: str = ""  # "province" or "commune" when capital/admin_level says so
    population: Optional[int] = None
    iso3166_2: Optional[str] = None
    website: Optional[str] = None
    country: str = "VN"


class DocumentInfo(BaseModel):
    version: str = ""
    generator: str = ""
    total_nodes: int = 0
    total_ways: int = 0
    total_relations: int = 0
    bounds: Optional[Bounds] = None


class ProcessingResult(BaseModel):
    """Everything extracted from one OSM document"""
    relation_id: Optional[int] = None
    info: DocumentInfo
    provinces: List[ProvinceRecord] = Field(default_factory=list)
    communes: List[CommuneRecord] = Field(default_factory=list)
    center_points: List[AdministrativeCenter] = Field(default_factory=list)
    capital_stats: Dict[int, int] = Field(default_factory=dict)
    skipped: List[int] = Field(default_factory=list)  # entities without usable ways
    processed_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())

    @property
    def records(self) -> List[Union[ProvinceRecord, CommuneRecord]]:
        return [*self.provinces, *self.communes]
