# kubo_exporter/collector/exceptions.py - Collection errors
"""
Errors raised while fetching and decoding daemon statistics.
"""


class StatsError(RuntimeError):
    """Base error for a failed statistics fetch."""


class TransportError(StatsError):
    """The daemon could not be reached or the request did not complete."""


class DecodeError(StatsError):
    """The response body is not valid JSON or does not match the record shape."""
