"""
OpenStreetMap data collection module

Modular OSM data collector with separate components for:
- API client: OSM API 0.6 communication
- Models: Data structures (OSMNode, OSMWay, OSMRelation)
- Parser: XML response parsing
- Cache: Caching functionality
- Collector: Main orchestrator class
"""

from .models import OSMNode, OSMWay, OSMMember, OSMRelation, OSMDocument
from .parser import OSMResponseParser
from .api_client import OSMApiClient
from .collector import OSMCollector

__all__ = [
    "OSMNode",
    "OSMWay",
    "OSMMember",
    "OSMRelation",
    "OSMDocument",
    "OSMResponseParser",
    "OSMApiClient",
    "OSMCollector",
]
