# kubo_exporter/collector/stats.py - Typed statistics records
"""
Structured representations of the statistics returned by the Kubo stats API.

The daemon serializes its records with PascalCase keys (``TotalIn``,
``RepoSize``, ...). Each record is decoded strictly: a missing key or a value
of the wrong type fails the whole record.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Tuple

from kubo_exporter.collector.exceptions import DecodeError


def _counter(wire: Optional[str] = None):
    """Field that must decode to a non-negative number."""
    metadata = {'non_negative': True}
    if wire:
        metadata['wire'] = wire
    return field(metadata=metadata)


def wire_name(name: str) -> str:
    """
    Convert a snake_case field name to the daemon's PascalCase key.

    Args:
        name: Field name (e.g., 'total_in')

    Returns:
        Wire key (e.g., 'TotalIn')
    """
    return ''.join(part.capitalize() for part in name.split('_'))


def _decode_value(key: str, value: Any, expected: Any) -> Any:
    if expected is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(f"{key}: expected integer, got {type(value).__name__}")
        return value

    if expected is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DecodeError(f"{key}: expected number, got {type(value).__name__}")
        try:
            return float(value)
        except OverflowError as e:
            raise DecodeError(f"{key}: number out of range") from e

    if expected is str:
        if not isinstance(value, str):
            raise DecodeError(f"{key}: expected string, got {type(value).__name__}")
        return value

    # Tuple[str, ...]; the daemon sends null for an empty list
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise DecodeError(f"{key}: expected list of strings")
    return tuple(value)


def decode_record(cls, payload: Dict[str, Any]):
    """
    Decode a JSON object into one of the statistics dataclasses.

    Args:
        cls: Record class (BandwidthStats, RepoStats or BitswapStats)
        payload: Decoded JSON document

    Returns:
        Populated record instance

    Raises:
        DecodeError: If the payload is not an object, a key is missing,
            or a value has the wrong type or sign
    """
    if not isinstance(payload, dict):
        raise DecodeError(f"{cls.__name__}: expected JSON object, got {type(payload).__name__}")

    values = {}
    for f in fields(cls):
        key = f.metadata.get('wire', wire_name(f.name))
        if key not in payload:
            raise DecodeError(f"{cls.__name__}: missing field {key}")

        value = _decode_value(key, payload[key], f.type)
        if f.metadata.get('non_negative') and value < 0:
            raise DecodeError(f"{cls.__name__}: {key} must not be negative, got {value}")
        values[f.name] = value

    return cls(**values)


@dataclass(frozen=True)
class BandwidthStats:
    """
    Bandwidth totals and rates from /api/v0/stats/bw.
    """
    total_in: int = _counter()
    total_out: int = _counter()
    rate_in: float = _counter()
    rate_out: float = _counter()

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'BandwidthStats':
        return decode_record(cls, payload)


@dataclass(frozen=True)
class RepoStats:
    """
    Repository usage from /api/v0/stats/repo.

    ``storage_max`` is passed through as reported; the daemon may report a
    zero or very large value when no limit is configured.
    """
    repo_size: float
    num_objects: int = _counter()
    storage_max: float
    repo_path: str
    version: str

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'RepoStats':
        return decode_record(cls, payload)


@dataclass(frozen=True)
class BitswapStats:
    """
    Bitswap exchange counters from /api/v0/stats/bitswap.
    """
    blocks_received: int = _counter()
    blocks_sent: int = _counter()
    data_received: int = _counter()
    data_sent: int = _counter()
    dup_blocks_received: int = _counter(wire='DupBlksReceived')
    dup_data_received: int = _counter()
    messages_received: int = _counter()
    peers: Tuple[str, ...]
    provide_buf_len: int

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> 'BitswapStats':
        return decode_record(cls, payload)
