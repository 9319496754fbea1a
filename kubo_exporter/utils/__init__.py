# kubo_exporter/utils/__init__.py - Utilities module
"""
Utility functions and helpers.

This module provides:
- config.py: Configuration resolution
- logger.py: Logging setup
- helpers.py: Upstream checks and formatting helpers
"""
