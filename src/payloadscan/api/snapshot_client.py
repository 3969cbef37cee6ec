"""
Snapshot Client - Fetches symbol snapshots published over HTTP.

Features:
- Optional Basic authentication
- File cache with 1-hour TTL, keyed by URL
- Force refresh to bypass the cache
"""

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from requests.auth import HTTPBasicAuth

from payloadscan.config import SnapshotSourceConfig

logger = logging.getLogger(__name__)


class SnapshotClient:
    """
    Downloads snapshot documents, e.g. ones published by a CI build

    Usage:
    ```python
    client = SnapshotClient(SnapshotSourceConfig(username="ci", password="secret"))
    document = client.fetch("https://ci.example.com/artifacts/symbols.json")
    ```
    """

    # Cache TTL in seconds (1 hour)
    CACHE_TTL = 3600

    def __init__(self, config: Optional[SnapshotSourceConfig] = None):
        """
        Initialize client

        Args:
            config: Credentials, timeout and cache directory
        """
        self.config = config or SnapshotSourceConfig()
        self.timeout = self.config.timeout
        self.cache_dir = Path(self.config.cache_dir)

        self.session = requests.Session()
        if self.config.credentials:
            username, password = self.config.credentials
            self.session.auth = HTTPBasicAuth(username, password)

    def fetch(self, url: str, force_refresh: bool = False) -> Dict[str, Any]:
        """
        Fetch a snapshot document, using the file cache when fresh

        Args:
            url: Snapshot URL
            force_refresh: Bypass the file cache

        Returns:
            Parsed JSON document

        Raises:
            RuntimeError: If the snapshot cannot be downloaded
        """
        if not force_refresh:
            cached = self._try_load_file_cache(url)
            if cached is not None:
                logger.info(f"Loaded snapshot {url} from file cache")
                return cached

        try:
            logger.debug(f"Fetching snapshot: {url}")
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            document = response.json()
        except requests.exceptions.RequestException as e:
            raise RuntimeError(f"Could not fetch snapshot from {url}: {e}") from e
        except json.JSONDecodeError as e:
            raise RuntimeError(f"Invalid JSON from {url}: {e}") from e

        self._save_file_cache(url, document)
        logger.info(f"Fetched snapshot from {url}")
        return document

    def _try_load_file_cache(self, url: str) -> Optional[Dict[str, Any]]:
        """Try to load a cached snapshot"""
        cache_file = self._get_cache_file_path(url)
        if not cache_file.exists():
            return None

        if time.time() - cache_file.stat().st_mtime > self.CACHE_TTL:
            logger.debug(f"Cache file expired: {cache_file}")
            return None

        try:
            with open(cache_file, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Error loading cache file: {e}")
            return None

    def _save_file_cache(self, url: str, document: Dict[str, Any]) -> None:
        """Save snapshot to the file cache"""
        cache_file = self._get_cache_file_path(url)
        try:
            cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(cache_file, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            logger.debug(f"Saved snapshot to cache file: {cache_file}")
        except OSError as e:
            logger.warning(f"Error saving cache file: {e}")

    def _get_cache_file_path(self, url: str) -> Path:
        """Cache file path based on the URL"""
        url_hash = hashlib.md5(url.encode()).hexdigest()[:8]
        return self.cache_dir / f"snapshot_{url_hash}.json"
