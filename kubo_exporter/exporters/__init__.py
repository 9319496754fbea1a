# kubo_exporter/exporters/__init__.py - Exporters module
"""
Exporters for publishing daemon statistics to Prometheus.

This module provides:
- prometheus.py: Exposition format rendering
- http_handler.py: Basic-auth protected scrape endpoint
"""
