#!/usr/bin/env python
"""
Command-line interface for Boundary Mapper

Usage:
    python cli.py process --relation 1903016 --output ./boundaries/
    python cli.py process --ids-file id.txt --output ./boundaries/
    python cli.py parse --input relation.osm --output ./boundaries/
    python cli.py center --input ./boundaries/communes_123_polygon.json
    python cli.py centers --output ./boundaries/
    python cli.py locate --lat 21.0285 --lon 105.8542 --output ./boundaries/
"""

import os
import sys
import json
import argparse
from typing import List

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from loguru import logger
from boundary_mapper.admin import CommuneLocator
from boundary_mapper.collectors.osm import OSMResponseParser
from boundary_mapper.config import load_config_from_env, validate_config
from boundary_mapper.errors import BoundaryError, OSMFetchError, OSMParseError
from boundary_mapper.geometry import close_ring, resolve_interior_point
from boundary_mapper.models import CommuneRecord
from boundary_mapper.pipeline import BoundaryPipeline
from boundary_mapper.storage import BoundaryStore, decode_rings_json


def setup_logging(verbose: bool = False):
    """Configure logging"""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{message}</cyan>",
        level=level
    )


def read_relation_ids(path: str) -> List[int]:
    """One relation id per line; blank and invalid lines are skipped"""
    ids = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                ids.append(int(line))
            except ValueError:
                logger.warning(f"Skipping invalid line: {line}")
    return ids


def build_config(args):
    config = load_config_from_env()
    if getattr(args, "output", None):
        config.output_dir = args.output
    if getattr(args, "cache", None):
        config.cache_dir = args.cache
    if getattr(args, "strict_leftovers", False):
        config.geometry.leftover_policy = "hull"
    validate_config(config)
    return config


def cmd_process(args):
    """Fetch and process relations from the OSM API"""
    setup_logging(args.verbose)

    relation_ids = list(args.relation or [])
    if args.ids_file:
        if not os.path.exists(args.ids_file):
            logger.error(f"Input file not found: {args.ids_file}")
            return 1
        relation_ids.extend(read_relation_ids(args.ids_file))

    if not relation_ids:
        logger.error("No relation ids given (use --relation or --ids-file)")
        return 1

    config = build_config(args)
    pipeline = BoundaryPipeline(config)

    success = 0
    failed = 0
    for i, relation_id in enumerate(relation_ids, 1):
        logger.info(f"[{i}/{len(relation_ids)}] relation {relation_id}")
        try:
            result = pipeline.run(relation_id)
            pipeline.save(result)
            logger.info(f"  ✓ {len(result.provinces)} province(s), {len(result.communes)} commune(s)")
            success += 1
        except (OSMFetchError, OSMParseError) as e:
            logger.error(f"  ✗ Failed: {e}")
            failed += 1
        except OSError as e:
            logger.error(f"  ✗ Failed to write output: {e}")
            failed += 1

    logger.info(f"Done: {success} succeeded, {failed} failed")
    return 0 if failed == 0 else 1


def cmd_parse(args):
    """Process a local OSM XML file"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    config = build_config(args)
    pipeline = BoundaryPipeline(config)

    try:
        document = OSMResponseParser.parse_file(args.input)
    except OSMParseError as e:
        logger.error(f"Failed to parse {args.input}: {e}")
        return 1

    result = pipeline.process_document(document)
    for path in pipeline.save(result):
        logger.info(f"✓ Written: {path}")

    if args.summary:
        summary = {
            "provinces": [{"id": r.osm_id, "name": r.name, "rings": len(r.rings),
                           "center": r.center.model_dump() if r.center else None} for r in result.provinces],
            "communes": [{"id": r.osm_id, "name": r.name, "rings": len(r.rings),
                          "center": r.center.model_dump() if r.center else None} for r in result.communes],
            "skipped": result.skipped,
        }
        print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


def cmd_center(args):
    """Print the interior center of a stored polygon file"""
    setup_logging(args.verbose)

    if not os.path.exists(args.input):
        logger.error(f"Input file not found: {args.input}")
        return 1

    with open(args.input, "r", encoding="utf-8") as f:
        text = f.read()

    try:
        rings = decode_rings_json(text)
    except BoundaryError as e:
        logger.error(f"Failed to read polygon: {e}")
        return 1

    centers = []
    for i, ring in enumerate(rings, 1):
        if not ring:
            continue
        point = resolve_interior_point(close_ring(ring), label=f"ring {i}")
        centers.append({"ring": i, "lat": point.lat, "lon": point.lon, "method": point.method})

    print(json.dumps(centers, indent=2))
    return 0


def cmd_centers(args):
    """Fill missing centers of stored records"""
    setup_logging(args.verbose)

    config = build_config(args)
    store = BoundaryStore(config.output_dir)
    pipeline = BoundaryPipeline(config, store=store)

    updated = pipeline.recompute_centers(store.list_records(), force=args.force)
    for record in updated:
        store.save_record(record)

    logger.info(f"Updated {len(updated)} record(s)")
    return 0


def cmd_locate(args):
    """Find the commune containing a coordinate"""
    setup_logging(args.verbose)

    config = build_config(args)
    store = BoundaryStore(config.output_dir)
    communes = [r for r in store.list_records() if isinstance(r, CommuneRecord)]
    locator = CommuneLocator(communes)
    logger.info(f"Indexed {len(locator)} commune(s) from {config.output_dir}")

    commune = locator.locate(args.lat, args.lon, province_name=args.province)
    if commune is None:
        logger.warning(f"No commune contains ({args.lat}, {args.lon})")
        return 1

    print(json.dumps({
        "osm_id": commune.osm_id,
        "name": commune.name,
        "province_name": commune.province_name,
    }, indent=2, ensure_ascii=False))
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Boundary Mapper CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Process relations from the OSM API:
    python cli.py process --relation 1903016 --output ./boundaries/

  Process relation ids listed in a file:
    python cli.py process --ids-file id.txt --cache ./cache/

  Process a downloaded .osm file:
    python cli.py parse --input relation.osm --summary
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Process command
    process_parser = subparsers.add_parser("process", help="Fetch and process relations")
    process_parser.add_argument("--relation", "-r", type=int, action="append", help="OSM relation id (repeatable)")
    process_parser.add_argument("--ids-file", help="File with one relation id per line")
    process_parser.add_argument("--output", "-o", help="Output directory")
    process_parser.add_argument("--cache", help="Cache directory for raw OSM XML")
    process_parser.add_argument("--strict-leftovers", action="store_true",
                                help="Use the convex hull when some ways cannot be connected")
    process_parser.set_defaults(func=cmd_process)

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Process a local OSM XML file")
    parse_parser.add_argument("--input", "-i", required=True, help="Input .osm file")
    parse_parser.add_argument("--output", "-o", help="Output directory")
    parse_parser.add_argument("--strict-leftovers", action="store_true",
                              help="Use the convex hull when some ways cannot be connected")
    parse_parser.add_argument("--summary", "-s", action="store_true", help="Print summary to stdout")
    parse_parser.set_defaults(func=cmd_parse)

    # Center command
    center_parser = subparsers.add_parser("center", help="Interior center of a polygon file")
    center_parser.add_argument("--input", "-i", required=True, help="Polygon JSON file ([[lat, lon], ...])")
    center_parser.set_defaults(func=cmd_center)

    # Centers command
    centers_parser = subparsers.add_parser("centers", help="Fill missing centers of stored records")
    centers_parser.add_argument("--output", "-o", help="Output directory holding the records")
    centers_parser.add_argument("--force", action="store_true", help="Recompute existing centers too")
    centers_parser.set_defaults(func=cmd_centers)

    # Locate command
    locate_parser = subparsers.add_parser("locate", help="Find the commune containing a coordinate")
    locate_parser.add_argument("--lat", type=float, required=True, help="Latitude")
    locate_parser.add_argument("--lon", type=float, required=True, help="Longitude")
    locate_parser.add_argument("--province", help="Restrict to this province")
    locate_parser.add_argument("--output", "-o", help="Output directory holding the records")
    locate_parser.set_defaults(func=cmd_locate)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
