# kubo_exporter/utils/helpers.py - Helper functions
"""
General utility and helper functions.
"""

import logging
from typing import List, Tuple

from kubo_exporter.collector.client import StatsClient
from kubo_exporter.collector.exceptions import StatsError


logger = logging.getLogger(__name__)


def format_bytes(bytes_count: float) -> str:
    """
    Format bytes into human-readable string.

    Args:
        bytes_count: Number of bytes

    Returns:
        Formatted string (e.g., "1.5 MB")
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if bytes_count < 1024.0:
            return f"{bytes_count:.1f} {unit}"
        bytes_count /= 1024.0

    return f"{bytes_count:.1f} PB"


def query_endpoints(client: StatsClient) -> List[Tuple[str, bool, str]]:
    """
    Call each stats endpoint once and summarize the outcome.

    Args:
        client: Client for the upstream daemon

    Returns:
        List of (endpoint name, passed, detail) tuples
    """
    checks = [
        ("bandwidth", client.bandwidth,
         lambda s: f"in {format_bytes(s.total_in)}, out {format_bytes(s.total_out)}"),
        ("repo", client.repo,
         lambda s: f"{format_bytes(s.repo_size)} used, {s.num_objects} objects, version {s.version}"),
        ("bitswap", client.bitswap,
         lambda s: f"{len(s.peers)} peers, {s.blocks_received} blocks received"),
    ]

    results = []
    for name, fetch, describe in checks:
        try:
            results.append((name, True, describe(fetch())))
        except StatsError as e:
            logger.debug(f"{name} check failed: {e}")
            results.append((name, False, str(e)))

    return results


def check_upstream(client: StatsClient) -> bool:
    """
    Check that every stats endpoint of the daemon answers with a valid record.

    Returns:
        True if all endpoints passed, False otherwise
    """
    all_passed = True

    print(f"Checking {client.base_url}...")
    for name, passed, detail in query_endpoints(client):
        status = "✓" if passed else "✗"
        print(f"  {status} {name}: {detail}")

        if not passed:
            all_passed = False

    return all_passed
