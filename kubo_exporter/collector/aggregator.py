# kubo_exporter/collector/aggregator.py - Scrape orchestration
"""
Gathers all three statistics records and renders them into one
exposition-format body.
"""

from concurrent.futures import ThreadPoolExecutor
import logging
import time

from kubo_exporter.collector.client import StatsClient
from kubo_exporter.exporters.prometheus import render_bandwidth, render_bitswap, render_repo


class MetricsAggregator:
    """
    Runs one full scrape per call to gather().

    A scrape is all-or-nothing: the first fetch or decode error aborts it and
    propagates as a StatsError, so no partial body is ever returned.
    """

    def __init__(self, client: StatsClient, version_label: str = 'path', parallel: bool = False):
        """
        Initialize the aggregator.

        Args:
            client: Client for the upstream daemon
            version_label: Label key for the repo version metric
            parallel: Fetch the three endpoints concurrently
        """
        self.client = client
        self.version_label = version_label
        self.parallel = parallel
        self.logger = logging.getLogger(__name__)

    def gather(self) -> str:
        """
        Fetch bandwidth, repo and bitswap stats and render them in that order.

        Returns:
            Concatenated exposition text

        Raises:
            StatsError: If any fetch or decode fails
        """
        start_time = time.time()

        if self.parallel:
            bw_stats, repo_stats, bs_stats = self._fetch_parallel()
        else:
            bw_stats = self.client.bandwidth()
            repo_stats = self.client.repo()
            bs_stats = self.client.bitswap()

        body = (
            render_bandwidth(bw_stats)
            + render_repo(repo_stats, version_label=self.version_label)
            + render_bitswap(bs_stats)
        )

        self.logger.debug(f"Scrape completed in {(time.time() - start_time) * 1000:.1f}ms")
        return body

    def _fetch_parallel(self):
        """
        Fan the three fetches out and join on all of them.

        Results are collected in catalog order, so when several fetches fail
        the error raised is the same one a sequential scrape would raise.
        """
        fetches = (self.client.bandwidth, self.client.repo, self.client.bitswap)

        with ThreadPoolExecutor(max_workers=len(fetches)) as executor:
            futures = [executor.submit(fetch) for fetch in fetches]
            return tuple(future.result() for future in futures)
