"""
Main OSM Collector

Orchestrates fetching, caching and parsing of OSM relations
"""

from typing import Optional
from loguru import logger

from .api_client import OSMApiClient
from .cache import OSMCache
from .models import OSMDocument
from .parser import OSMResponseParser
from ...config import APIConfig


class OSMCollector:
    """
    Collect administrative relations from the OpenStreetMap API

    Supports caching raw XML to disk for debugging and reuse.
    """

    def __init__(
        self,
        api_config: Optional[APIConfig] = None,
        cache_dir: Optional[str] = None,
        api_client: Optional[OSMApiClient] = None
    ):
        self.api_client = api_client or OSMApiClient(api_config)
        self.cache = OSMCache(cache_dir)
        self.parser = OSMResponseParser()

    def fetch_relation(self, relation_id: int) -> OSMDocument:
        """
        Fetch a relation with all its members

        Args:
            relation_id: OSM relation id

        Returns:
            Parsed OSMDocument

        Raises:
            OSMFetchError: If the API request fails
            OSMParseError: If the response is not valid OSM XML
        """
        cache_path = self.cache.get_cache_path("relation", relation_id)
        if cache_path:
            cached = self.cache.load(cache_path)
            if cached:
                return self.parser.parse(cached)

        logger.info(f"Fetching relation {relation_id} from OSM API")
        data = self.api_client.fetch_relation_full(relation_id)

        # Parse before caching so a broken payload is never cached
        document = self.parser.parse(data)
        if cache_path:
            self.cache.save(cache_path, data)

        logger.info(
            f"Relation {relation_id}: OSM {document.version} ({document.generator}), "
            f"{len(document.nodes)} nodes, {len(document.ways)} ways, {len(document.relations)} relations"
        )
        return document
