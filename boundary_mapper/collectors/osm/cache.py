"""
OSM data caching

Handles caching of raw OSM API responses to disk
"""

import os
from typing import Optional
from loguru import logger


class OSMCache:
    """Handles caching of OSM XML to disk"""

    def __init__(self, cache_dir: Optional[str] = None):
        self.cache_dir = cache_dir

    def get_cache_path(self, kind: str, element_id: int) -> Optional[str]:
        """Get cache file path for an OSM element fetch"""
        if not self.cache_dir:
            return None
        return os.path.join(self.cache_dir, f"osm_{kind}_{element_id}.xml")

    def load(self, cache_path: str) -> Optional[bytes]:
        """Load OSM XML from cache if exists"""
        if os.path.exists(cache_path):
            try:
                with open(cache_path, "rb") as f:
                    data = f.read()
                logger.info(f"Loaded OSM data from cache: {cache_path}")
                return data
            except OSError as e:
                logger.warning(f"Failed to load cache {cache_path}: {e}")
        return None

    def save(self, cache_path: str, data: bytes):
        """Save OSM XML to cache"""
        if not self.cache_dir:
            return
        try:
            os.makedirs(os.path.dirname(cache_path), exist_ok=True)
            with open(cache_path, "wb") as f:
                f.write(data)
            logger.info(f"Saved OSM data to cache: {cache_path}")
        except OSError as e:
            logger.warning(f"Failed to save cache {cache_path}: {e}")
