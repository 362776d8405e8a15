"""
End-to-end pipeline tests on a small hand-written OSM document
"""

import json

import pytest

from boundary_mapper.collectors import OSMCollector
from boundary_mapper.collectors.osm import OSMResponseParser
from boundary_mapper.config import GeometryConfig, PipelineConfig
from boundary_mapper.errors import OSMFetchError
from boundary_mapper.models import CommuneRecord, CoordinateModel, ProvinceRecord
from boundary_mapper.pipeline import BoundaryPipeline
from boundary_mapper.storage import BoundaryStore


@pytest.fixture
def document(sample_osm_xml):
    return OSMResponseParser.parse(sample_osm_xml)


@pytest.fixture
def collector(mocker, document):
    collector = mocker.Mock(spec=OSMCollector)
    collector.fetch_relation.return_value = document
    return collector


@pytest.fixture
def pipeline(tmp_path, collector):
    config = PipelineConfig(output_dir=str(tmp_path))
    return BoundaryPipeline(config, collector=collector)


def test_process_document_classifies_and_skips(pipeline, document):
    result = pipeline.process_document(document)

    assert [r.osm_id for r in result.provinces] == [100, 1000]
    assert [r.osm_id for r in result.communes] == [200]
    assert result.skipped == [400]
    assert result.capital_stats == {4: 1}
    assert {c.osm_id for c in result.center_points} == {1000, 1001}


def test_province_ring_and_centroid(pipeline, document):
    province = pipeline.process_document(document).provinces[0]

    assert len(province.rings) == 1
    assert [c.id for c in province.rings[0]] == [1, 2, 3, 4, 1]
    assert province.center.method == "centroid"
    assert province.center.lat == pytest.approx(20.5)
    assert province.center.lon == pytest.approx(105.5)
    assert (province.bounds.min_lat, province.bounds.max_lat) == (20.0, 21.0)
    assert (province.bounds.min_lon, province.bounds.max_lon) == (105.0, 106.0)


def test_commune_center_slides_inside(pipeline, document):
    commune = pipeline.process_document(document).communes[0]

    ring = commune.rings[0]
    assert len(ring) == 7
    assert ring[0] == ring[-1]
    assert commune.center.method == "interpolated"
    assert commune.center.lat == pytest.approx(20.099)
    assert commune.center.lon == pytest.approx(105.099)
    assert commune.centers == [commune.center]


def test_communes_inherit_province_name(pipeline, document):
    result = pipeline.process_document(document)
    assert result.communes[0].province_name == "Ninh Bình"


def test_capital_node_keeps_its_own_center(pipeline, document):
    node_record = pipeline.process_document(document).provinces[1]

    assert node_record.source == "node"
    assert node_record.rings == []
    assert node_record.center.method == "node"


def test_document_info(pipeline, document):
    info = pipeline.process_document(document).info

    assert info.version == "0.6"
    assert (info.total_nodes, info.total_ways, info.total_relations) == (12, 5, 5)
    assert info.bounds.max_lon == 106.0


def test_run_and_save(pipeline, collector, tmp_path):
    result = pipeline.run(100)
    written = pipeline.save(result)

    collector.fetch_relation.assert_called_once_with(100)
    assert result.relation_id == 100
    names = sorted(p.rsplit("/", 1)[-1] for p in written)
    assert names == sorted([
        "provinces_100_polygon.json",
        "provinces_100.json",
        "provinces_1000.json",
        "communes_200_polygon.json",
        "communes_200.json",
        "relation_100_result.json",
    ])

    summary = json.loads((tmp_path / "relation_100_result.json").read_text(encoding="utf-8"))
    assert summary["skipped"] == [400]
    assert summary["communes"] == [200]


def test_run_propagates_fetch_error(pipeline, collector):
    collector.fetch_relation.side_effect = OSMFetchError("down")
    with pytest.raises(OSMFetchError):
        pipeline.run(1)


def test_saved_records_load_back(pipeline, tmp_path):
    pipeline.save(pipeline.run(100))

    records = list(BoundaryStore(str(tmp_path)).list_records())
    assert [(type(r), r.osm_id) for r in records] == [
        (ProvinceRecord, 100), (ProvinceRecord, 1000), (CommuneRecord, 200),
    ]


def test_hull_policy_for_disconnected_ways(tmp_path, collector, document):
    # Way 11 no longer touches way 10
    document.way_index()[11].node_refs = [22, 23]
    config = PipelineConfig(output_dir=str(tmp_path), geometry=GeometryConfig(leftover_policy="hull"))

    province = BoundaryPipeline(config, collector=collector).process_document(document).provinces[0]

    ring = [(c.lat, c.lon) for c in province.rings[0]]
    assert ring[0] == ring[-1] == (20.0, 105.0)
    assert (21.0, 106.0) in ring
    assert set(ring) <= {(20.0, 105.0), (20.0, 106.0), (21.0, 106.0), (20.0, 105.3), (20.1, 105.3)}
    assert province.center.method == "centroid"


def test_recompute_centers(pipeline):
    square = [CoordinateModel(lat=lat, lon=lon) for lat, lon in [(0, 0), (0, 2), (2, 2), (2, 0), (0, 0)]]
    island = [CoordinateModel(lat=lat, lon=lon) for lat, lon in [(5, 5), (5, 6), (6, 6), (5, 5)]]
    missing = CommuneRecord(osm_id=1, name="Xã A", rings=[island, square])
    present = CommuneRecord(osm_id=2, name="Xã B", rings=[square], center={"lat": 9, "lon": 9})
    bare = CommuneRecord(osm_id=3, name="Xã C")

    updated = pipeline.recompute_centers([missing, present, bare])

    assert updated == [missing]
    assert len(missing.centers) == 2
    # largest ring wins
    assert (missing.center.lat, missing.center.lon) == (pytest.approx(1.0), pytest.approx(1.0))
    assert missing.audit.updated_by == "boundary-mapper"
    assert present.center.lat == 9


def test_recompute_centers_force(pipeline):
    square = [CoordinateModel(lat=lat, lon=lon) for lat, lon in [(0, 0), (0, 2), (2, 2), (2, 0), (0, 0)]]
    record = ProvinceRecord(osm_id=2, name="Tỉnh B", rings=[square], center={"lat": 9, "lon": 9})

    assert pipeline.recompute_centers([record], force=True) == [record]
    assert record.center.lat == pytest.approx(1.0)


def test_run_when_requested_relation_is_missing(pipeline, collector):
    result = pipeline.run(999)

    collector.fetch_relation.assert_called_once_with(999)
    assert result.relation_id == 999
    assert [r.osm_id for r in result.provinces] == [100, 1000]
