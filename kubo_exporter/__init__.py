# kubo_exporter/__init__.py - Kubo IPFS Prometheus exporter
"""
Prometheus exporter for the statistics API of a Kubo IPFS daemon.
"""

__version__ = "0.1.0"
