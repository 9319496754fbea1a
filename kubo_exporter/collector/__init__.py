# kubo_exporter/collector/__init__.py - Statistics collection module
"""
Collector module for pulling statistics from the Kubo management API.

This module provides:
- stats.py: Typed statistics records and their JSON decoders
- client.py: HTTP client for the /api/v0/stats endpoints
- aggregator.py: Scrape orchestration across the three endpoints
- exceptions.py: Fetch and decode errors
"""
