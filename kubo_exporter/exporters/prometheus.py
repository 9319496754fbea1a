# kubo_exporter/exporters/prometheus.py - Prometheus exposition rendering
"""
Renders statistics records as Prometheus text exposition format.

Every sample is emitted with its own HELP and TYPE preamble. String facts
(repo path, repo version) are exposed as a sample with value 1 carrying the
string as a label value.
"""

from enum import Enum
import re
from typing import Mapping, Optional, Union

from prometheus_client.utils import floatToGoString

from kubo_exporter.collector.stats import BandwidthStats, BitswapStats, RepoStats


METRIC_NAME_RE = re.compile(r'^[a-zA-Z_:][a-zA-Z0-9_:]*$')
LABEL_NAME_RE = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')

# Version of the text format written below
CONTENT_TYPE = 'text/plain; version=0.0.4; charset=utf-8'


class MetricType(str, Enum):
    COUNTER = 'counter'
    GAUGE = 'gauge'


# (metric name, type, help, record attribute)
BANDWIDTH_METRICS = (
    ('kubo_ipfs_total_in_bytes', MetricType.COUNTER, 'Total number of bytes received', 'total_in'),
    ('kubo_ipfs_total_out_bytes', MetricType.COUNTER, 'Total number of bytes sent', 'total_out'),
    ('kubo_ipfs_rate_in_bytes', MetricType.GAUGE, 'Total rate incoming in bytes', 'rate_in'),
    ('kubo_ipfs_rate_out_bytes', MetricType.GAUGE, 'Total rate outgoing in bytes', 'rate_out'),
)

REPO_METRICS = (
    ('kubo_ipfs_repo_size_in_bytes', MetricType.COUNTER, 'Total capacity used by IPFS repository', 'repo_size'),
    ('kubo_ipfs_repo_num_objects', MetricType.GAUGE, 'Number of objects currently persisted in IPFS repo', 'num_objects'),
    ('kubo_ipfs_repo_storage_max_bytes', MetricType.COUNTER, 'Total number of bytes allowed in IPFS repository', 'storage_max'),
)

BITSWAP_METRICS = (
    ('kubo_ipfs_bitswap_messages_received', MetricType.COUNTER, 'Total number of bitswap messages received', 'messages_received'),
    ('kubo_ipfs_bitswap_data_received', MetricType.COUNTER, 'Total number of bitswap bytes received', 'data_received'),
    ('kubo_ipfs_bitswap_data_sent', MetricType.COUNTER, 'Total number of bitswap bytes sent', 'data_sent'),
    ('kubo_ipfs_bitswap_blocks_received', MetricType.COUNTER, 'Total number of bitswap blocks received', 'blocks_received'),
    ('kubo_ipfs_bitswap_blocks_sent', MetricType.COUNTER, 'Total number of bitswap blocks sent', 'blocks_sent'),
)


def escape_label_value(value: str) -> str:
    return value.replace('\\', r'\\').replace('\n', r'\n').replace('"', r'\"')


def escape_help(text: str) -> str:
    return text.replace('\\', r'\\').replace('\n', r'\n')


def format_value(value: Union[int, float]) -> str:
    """
    Format a sample value the way Prometheus parses it.

    Integers are written as plain decimals; floats use Go-style formatting
    (``1.5``, ``+Inf``, ``NaN``).
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Metric value must be a number, got {type(value).__name__}")

    if isinstance(value, int):
        return str(value)
    return floatToGoString(value)


def render_metric(
    name: str,
    kind: Union[MetricType, str],
    help_text: str,
    value: Union[int, float],
    labels: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Render one metric with a single sample.

    Args:
        name: Metric name
        kind: 'counter' or 'gauge'
        help_text: HELP line text
        value: Sample value
        labels: Label names and values, rendered in the given order

    Returns:
        HELP, TYPE and sample lines, newline terminated
    """
    kind = MetricType(kind)

    if not METRIC_NAME_RE.match(name):
        raise ValueError(f"Invalid metric name: {name!r}")

    sample = name
    if labels:
        pairs = []
        for label, label_value in labels.items():
            if not LABEL_NAME_RE.match(label):
                raise ValueError(f"Invalid label name: {label!r}")
            pairs.append(f'{label}="{escape_label_value(str(label_value))}"')
        sample += '{' + ','.join(pairs) + '}'

    return (
        f"# HELP {name} {escape_help(help_text)}\n"
        f"# TYPE {name} {kind.value}\n"
        f"{sample} {format_value(value)}\n"
    )


def render_info(name: str, help_text: str, label: str, text: str) -> str:
    """
    Render a string fact as a counter with value 1 and the string as a label.
    """
    return render_metric(name, MetricType.COUNTER, help_text, 1, {label: text})


def _render_catalog(catalog, stats) -> str:
    return ''.join(
        render_metric(name, kind, help_text, getattr(stats, attribute))
        for name, kind, help_text, attribute in catalog
    )


def render_bandwidth(stats: BandwidthStats) -> str:
    return _render_catalog(BANDWIDTH_METRICS, stats)


def render_repo(stats: RepoStats, version_label: str = 'path') -> str:
    """
    Render repository metrics.

    Args:
        stats: Repository statistics
        version_label: Label key for kubo_ipfs_repo_version. Defaults to
            'path', the key existing dashboards query on.

    Returns:
        Exposition text for all repository metrics
    """
    return (
        _render_catalog(REPO_METRICS, stats)
        + render_info('kubo_ipfs_repo_path', 'Path to Kubo IPFS repo', 'path', stats.repo_path)
        + render_info('kubo_ipfs_repo_version', 'IPFS repository version', version_label, stats.version)
    )


def render_bitswap(stats: BitswapStats) -> str:
    return _render_catalog(BITSWAP_METRICS, stats)
