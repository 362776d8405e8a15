"""
Tests for configuration loading / validation and the command-line interface
"""

import json
import sys

import pytest
from loguru import logger

import cli
from boundary_mapper.config import GeometryConfig, PipelineConfig, load_config_from_env, validate_config


# ============================================================
# Configuration
# ============================================================

def test_default_config_is_valid():
    validate_config(PipelineConfig())


def test_validate_collects_every_error():
    config = PipelineConfig(output_dir="", commune_level=4)
    config.api.max_retries = 0
    config.geometry = GeometryConfig(leftover_policy="drop", interior_search_start=1.5)

    with pytest.raises(ValueError) as exc_info:
        validate_config(config)

    message = str(exc_info.value)
    assert message.startswith("Configuration validation failed:")
    for fragment in ("output_dir", "max_retries", "leftover_policy", "interior_search_start", "must differ"):
        assert fragment in message


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("OSM_API_URL", "http://localhost:3000/api/0.6")
    monkeypatch.setenv("BOUNDARY_OUTPUT_DIR", "/data/boundaries")
    monkeypatch.setenv("OSM_REQUEST_TIMEOUT", "5")
    monkeypatch.setenv("OSM_MAX_RETRIES", "7")

    config = load_config_from_env(env_path=str(tmp_path / "missing.env"))

    assert config.api.osm_api_url == "http://localhost:3000/api/0.6"
    assert config.output_dir == "/data/boundaries"
    assert config.api.request_timeout == 5
    assert config.api.max_retries == 7
    assert config.geometry.leftover_policy == "append"


def test_env_file_does_not_override_environment(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("OSM_USER_AGENT=FromFile/1.0\nBOUNDARY_CACHE_DIR=/tmp/osm-cache\n")
    monkeypatch.setenv("OSM_USER_AGENT", "FromShell/2.0")
    # Registered so the value loaded from the file is removed afterwards
    monkeypatch.setenv("BOUNDARY_CACHE_DIR", "")
    monkeypatch.delenv("BOUNDARY_CACHE_DIR")

    config = load_config_from_env(env_path=str(env_file))

    assert config.api.user_agent == "FromShell/2.0"
    assert config.cache_dir == "/tmp/osm-cache"


# ============================================================
# CLI
# ============================================================

@pytest.fixture
def run_cli(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    def run(*argv):
        monkeypatch.setattr(sys, "argv", ["cli.py", *argv])
        return cli.main()

    yield run
    logger.remove()


@pytest.fixture
def osm_file(tmp_path, sample_osm_xml):
    path = tmp_path / "relation.osm"
    path.write_bytes(sample_osm_xml)
    return path


def test_read_relation_ids(tmp_path):
    path = tmp_path / "id.txt"
    path.write_text("1903016\n\n  49915 \nabc\n")
    assert cli.read_relation_ids(str(path)) == [1903016, 49915]


def test_parse_command_writes_records(run_cli, osm_file, tmp_path, capsys):
    out = tmp_path / "out"

    assert run_cli("parse", "--input", str(osm_file), "--output", str(out), "--summary") == 0

    summary = json.loads(capsys.readouterr().out)
    assert [p["id"] for p in summary["provinces"]] == [100, 1000]
    assert [c["id"] for c in summary["communes"]] == [200]
    assert summary["skipped"] == [400]
    assert (out / "communes_200_polygon.json").exists()
    assert (out / "document_result.json").exists()


def test_parse_command_missing_input(run_cli, tmp_path):
    assert run_cli("parse", "--input", str(tmp_path / "nope.osm")) == 1


def test_locate_command(run_cli, osm_file, tmp_path, capsys):
    out = tmp_path / "out"
    run_cli("parse", "--input", str(osm_file), "--output", str(out))
    capsys.readouterr()

    assert run_cli("locate", "--lat", "20.05", "--lon", "105.05", "--output", str(out)) == 0
    found = json.loads(capsys.readouterr().out)
    assert found == {"osm_id": 200, "name": "Phường Đông Thành", "province_name": "Ninh Bình"}

    assert run_cli("locate", "--lat", "20.5", "--lon", "105.5", "--output", str(out)) == 1


def test_center_command(run_cli, tmp_path, capsys):
    polygon = tmp_path / "polygon.json"
    polygon.write_text("[[0, 0], [0, 2], [2, 2], [2, 0]]")

    assert run_cli("center", "--input", str(polygon)) == 0
    assert json.loads(capsys.readouterr().out) == [{"ring": 1, "lat": 1.0, "lon": 1.0, "method": "centroid"}]


def test_centers_command_fills_missing_centers(run_cli, osm_file, tmp_path):
    out = tmp_path / "out"
    run_cli("parse", "--input", str(osm_file), "--output", str(out))

    record_path = out / "communes_200.json"
    data = json.loads(record_path.read_text(encoding="utf-8"))
    data["center"] = None
    record_path.write_text(json.dumps(data), encoding="utf-8")

    assert run_cli("centers", "--output", str(out)) == 0

    data = json.loads(record_path.read_text(encoding="utf-8"))
    assert data["center"]["method"] == "interpolated"
    assert data["audit"]["updated_by"] == "boundary-mapper"


def test_process_command_continues_after_write_failure(run_cli, mocker, tmp_path):
    pipeline_cls = mocker.patch("cli.BoundaryPipeline")
    pipeline = pipeline_cls.return_value
    pipeline.run.return_value = mocker.Mock(provinces=[], communes=[])
    pipeline.save.side_effect = [OSError("No space left on device"), ["relation_2_result.json"]]

    code = run_cli("process", "--relation", "1", "--relation", "2", "--output", str(tmp_path / "out"))

    assert code == 1
    assert [call.args[0] for call in pipeline.run.call_args_list] == [1, 2]
    assert pipeline.save.call_count == 2


def test_process_command_without_ids(run_cli):
    assert run_cli("process") == 1


def test_no_command_prints_help(run_cli, capsys):
    assert run_cli() == 1
    assert "Boundary Mapper CLI" in capsys.readouterr().out
