"""
OSM API client

Handles communication with the OSM API 0.6 including:
- Rate limiting
- Retry logic
- Error handling
"""

import time
import requests
from typing import Optional
from loguru import logger

from ...config import APIConfig
from ...errors import OSMFetchError


class OSMApiClient:
    """Client for the OSM editing API (XML)"""

    def __init__(self, api_config: Optional[APIConfig] = None, session: Optional[requests.Session] = None):
        self.config = api_config or APIConfig()
        self.base_url = self.config.osm_api_url.rstrip("/")
        self.timeout = self.config.request_timeout
        self.session = session or requests.Session()
        self._last_request_time = 0.0
        self._min_request_interval = 1.0

    def _rate_limit(self):
        """Ensure we don't exceed rate limits"""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_request_interval:
            time.sleep(self._min_request_interval - elapsed)
        self._last_request_time = time.time()

    def fetch_relation_full(self, relation_id: int) -> bytes:
        """Relation with all member nodes, ways and sub-relations"""
        return self._get(f"{self.base_url}/relation/{relation_id}/full")

    def _get(self, url: str) -> bytes:
        """
        GET an OSM API URL with retry logic

        Args:
            url: Full API URL

        Returns:
            Raw XML response body

        Raises:
            OSMFetchError: If the request fails after all retries
        """
        self._rate_limit()

        headers = {"User-Agent": self.config.user_agent}
        max_retries = self.config.max_retries
        retry_delay = self.config.retry_delay

        for attempt in range(max_retries):
            try:
                response = self.session.get(url, headers=headers, timeout=self.timeout)
                response.raise_for_status()
                return response.content
            except requests.exceptions.Timeout:
                wait_time = retry_delay * (attempt + 1)
                logger.warning(f"OSM API timeout (attempt {attempt + 1}/{max_retries}). Retrying in {wait_time}s...")
                if attempt < max_retries - 1:
                    time.sleep(wait_time)
                else:
                    logger.error(f"OSM API failed: timeout after {max_retries} attempts")
                    raise OSMFetchError(f"OSM API timeout after {max_retries} attempts: {url}")
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status in [429, 504] and attempt < max_retries - 1:
                    wait_time = retry_delay * (attempt + 1)
                    logger.warning(f"OSM API {status} (attempt {attempt + 1}/{max_retries}). Retrying in {wait_time}s...")
                    time.sleep(wait_time)
                else:
                    logger.error(f"OSM API failed: HTTP {status} for {url}")
                    raise OSMFetchError(f"OSM API HTTP error {status}: {url}") from e
            except requests.exceptions.RequestException as e:
                logger.warning(f"OSM API request failed (attempt {attempt + 1}): {e}")
                if attempt < max_retries - 1:
                    time.sleep(retry_delay * (attempt + 1))
                else:
                    logger.error(f"OSM API failed: request exception after {max_retries} attempts: {e}")
                    raise OSMFetchError(f"OSM API request failed after {max_retries} attempts: {e}") from e

        raise OSMFetchError(f"OSM API request not attempted: {url}")
