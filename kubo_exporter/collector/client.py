# kubo_exporter/collector/client.py - Kubo stats API client
"""
HTTP client for the Kubo management API statistics endpoints.
Each call issues a fresh POST and decodes the body into a typed record.
"""

import json
import logging
from typing import Any, Dict, Optional

import requests

from kubo_exporter.collector.exceptions import DecodeError, TransportError
from kubo_exporter.collector.stats import BandwidthStats, BitswapStats, RepoStats


BW_URI = "/api/v0/stats/bw"
REPO_URI = "/api/v0/stats/repo"
BSWAP_URI = "/api/v0/stats/bitswap"


class StatsClient:
    """
    Client for the /api/v0/stats endpoints of a single daemon.

    Holds no connection state; every request opens its own connection.
    """

    def __init__(self, host: str, port: int, timeout: Optional[float] = None):
        """
        Initialize the stats client.

        Args:
            host: Address of the IPFS node
            port: Port of the management API
            timeout: Request timeout in seconds (None waits indefinitely)
        """
        self.host = host
        self.port = port
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    @property
    def base_url(self) -> str:
        host = f"[{self.host}]" if ':' in self.host else self.host
        return f"http://{host}:{self.port}"

    def fetch(self, path: str) -> Dict[str, Any]:
        """
        POST to a stats endpoint and decode the JSON body.

        The HTTP status is only logged; whether the call succeeded is decided
        by the body.

        Args:
            path: Endpoint path (e.g., BW_URI)

        Returns:
            Decoded JSON document

        Raises:
            TransportError: If the request could not be completed
            DecodeError: If the body is not valid JSON
        """
        url = f"{self.base_url}{path}"

        try:
            response = requests.post(url, timeout=self.timeout)
            body = response.text
        except requests.RequestException as e:
            raise TransportError(f"POST {url} failed: {e}") from e

        self.logger.debug(f"{path} call result: {response.status_code}")
        self.logger.debug(f"Body: {body}")

        try:
            return json.loads(body)
        except (ValueError, RecursionError) as e:
            raise DecodeError(f"{url} returned invalid JSON (HTTP {response.status_code}): {e}") from e

    def bandwidth(self) -> BandwidthStats:
        stats = BandwidthStats.from_dict(self.fetch(BW_URI))
        self.logger.debug(f"Bandwidth: {stats}")
        return stats

    def repo(self) -> RepoStats:
        stats = RepoStats.from_dict(self.fetch(REPO_URI))
        self.logger.debug(f"Repo: {stats}")
        return stats

    def bitswap(self) -> BitswapStats:
        stats = BitswapStats.from_dict(self.fetch(BSWAP_URI))
        self.logger.debug(f"Bitswap: {stats}")
        return stats
