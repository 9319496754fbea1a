# tests/test_prometheus.py - Tests for exposition rendering
"""
Unit tests for the Prometheus renderer.
"""

import pytest
from kubo_exporter.collector.stats import BandwidthStats, BitswapStats, RepoStats
from kubo_exporter.exporters.prometheus import (
    MetricType,
    format_value,
    render_bandwidth,
    render_bitswap,
    render_info,
    render_metric,
    render_repo,
)


def metric_names(text):
    return [line.split()[2] for line in text.splitlines() if line.startswith("# TYPE")]


class TestRenderMetric:
    """Test cases for render_metric"""

    def test_render(self):
        text = render_metric("kubo_ipfs_total_in_bytes", "counter", "Total number of bytes received", 100)

        assert text == (
            "# HELP kubo_ipfs_total_in_bytes Total number of bytes received\n"
            "# TYPE kubo_ipfs_total_in_bytes counter\n"
            "kubo_ipfs_total_in_bytes 100\n"
        )

    def test_render_with_labels(self):
        text = render_metric("m", MetricType.GAUGE, "help", 2, {"a": "x", "b": "y"})
        assert text.splitlines()[2] == 'm{a="x",b="y"} 2'

    def test_idempotent(self):
        """Test that identical inputs render identical output"""
        args = ("kubo_ipfs_rate_in_bytes", "gauge", "Total rate incoming in bytes", 1.5)
        assert render_metric(*args) == render_metric(*args)

    def test_counter_and_gauge_differ_only_in_type(self):
        counter = render_metric("m", "counter", "help", 3).splitlines()
        gauge = render_metric("m", "gauge", "help", 3).splitlines()

        assert counter[0] == gauge[0]
        assert counter[2] == gauge[2]
        assert counter[1] == "# TYPE m counter"
        assert gauge[1] == "# TYPE m gauge"

    def test_label_value_escaping(self):
        text = render_metric("m", "counter", "help", 1, {"path": 'C:\\ipfs "repo"\nx'})
        assert text.splitlines()[2] == 'm{path="C:\\\\ipfs \\"repo\\"\\nx"} 1'

    def test_help_escaping(self):
        text = render_metric("m", "counter", "line one\nline two", 1)
        assert text.splitlines()[0] == "# HELP m line one\\nline two"

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            render_metric("m", "histogram", "help", 1)

    def test_invalid_names(self):
        with pytest.raises(ValueError):
            render_metric("kubo-ipfs", "counter", "help", 1)
        with pytest.raises(ValueError):
            render_metric("m", "counter", "help", 1, {"bad-label": "x"})


class TestFormatValue:
    """Test cases for sample value formatting"""

    def test_values(self):
        assert format_value(100) == "100"
        assert format_value(0) == "0"
        assert format_value(1.5) == "1.5"
        assert format_value(0.5) == "0.5"
        assert format_value(float("inf")) == "+Inf"
        assert format_value(float("nan")) == "NaN"

    def test_rejects_non_numbers(self):
        with pytest.raises(TypeError):
            format_value(True)
        with pytest.raises(TypeError):
            format_value("1")


class TestRecordRendering:
    """Test cases for the metric catalog"""

    def test_bandwidth(self):
        """Test the four bandwidth metrics and their values"""
        stats = BandwidthStats(total_in=100, total_out=50, rate_in=1.5, rate_out=0.5)
        text = render_bandwidth(stats)
        lines = text.splitlines()

        assert len(lines) == 12
        assert lines[0::3] == [
            "# HELP kubo_ipfs_total_in_bytes Total number of bytes received",
            "# HELP kubo_ipfs_total_out_bytes Total number of bytes sent",
            "# HELP kubo_ipfs_rate_in_bytes Total rate incoming in bytes",
            "# HELP kubo_ipfs_rate_out_bytes Total rate outgoing in bytes",
        ]
        assert lines[1::3] == [
            "# TYPE kubo_ipfs_total_in_bytes counter",
            "# TYPE kubo_ipfs_total_out_bytes counter",
            "# TYPE kubo_ipfs_rate_in_bytes gauge",
            "# TYPE kubo_ipfs_rate_out_bytes gauge",
        ]
        assert lines[2::3] == [
            "kubo_ipfs_total_in_bytes 100",
            "kubo_ipfs_total_out_bytes 50",
            "kubo_ipfs_rate_in_bytes 1.5",
            "kubo_ipfs_rate_out_bytes 0.5",
        ]

    def test_repo(self):
        """Test that string facts render as value 1 with a label"""
        stats = RepoStats(repo_size=2048.0, num_objects=12, storage_max=10000.0,
                          repo_path="/home/ipfs/.ipfs", version="fs-repo@15")
        text = render_repo(stats)

        assert metric_names(text) == [
            "kubo_ipfs_repo_size_in_bytes",
            "kubo_ipfs_repo_num_objects",
            "kubo_ipfs_repo_storage_max_bytes",
            "kubo_ipfs_repo_path",
            "kubo_ipfs_repo_version",
        ]
        assert "# TYPE kubo_ipfs_repo_num_objects gauge\n" in text
        assert "kubo_ipfs_repo_size_in_bytes 2048.0\n" in text
        assert "kubo_ipfs_repo_num_objects 12\n" in text
        assert "kubo_ipfs_repo_storage_max_bytes 10000.0\n" in text
        assert 'kubo_ipfs_repo_path{path="/home/ipfs/.ipfs"} 1\n' in text
        assert 'kubo_ipfs_repo_version{path="fs-repo@15"} 1\n' in text

    def test_repo_version_label(self):
        stats = RepoStats(repo_size=0.0, num_objects=0, storage_max=0.0,
                          repo_path="/data", version="15")
        text = render_repo(stats, version_label="version")

        assert 'kubo_ipfs_repo_version{version="15"} 1\n' in text
        assert 'kubo_ipfs_repo_path{path="/data"} 1\n' in text

    def test_render_info(self):
        assert render_info("m", "help", "path", "/x") == render_metric("m", "counter", "help", 1, {"path": "/x"})

    def test_bitswap(self):
        stats = BitswapStats(blocks_received=7, blocks_sent=3, data_received=4096, data_sent=1024,
                             dup_blocks_received=1, dup_data_received=256, messages_received=42,
                             peers=("12D3KooWA",), provide_buf_len=0)
        text = render_bitswap(stats)

        assert metric_names(text) == [
            "kubo_ipfs_bitswap_messages_received",
            "kubo_ipfs_bitswap_data_received",
            "kubo_ipfs_bitswap_data_sent",
            "kubo_ipfs_bitswap_blocks_received",
            "kubo_ipfs_bitswap_blocks_sent",
        ]
        assert text.count("# TYPE") == text.count("counter\n") == 5
        assert "kubo_ipfs_bitswap_messages_received 42\n" in text
        assert "kubo_ipfs_bitswap_data_received 4096\n" in text
        assert "kubo_ipfs_bitswap_data_sent 1024\n" in text
        assert "kubo_ipfs_bitswap_blocks_received 7\n" in text
        assert "kubo_ipfs_bitswap_blocks_sent 3\n" in text
        assert "12D3KooWA" not in text
