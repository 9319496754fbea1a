# kubo_exporter/cli.py - Command-line interface
"""
Command-line interface for the Kubo IPFS Prometheus exporter.
"""

import logging
import sys

import click

from kubo_exporter import __version__
from kubo_exporter.collector.aggregator import MetricsAggregator
from kubo_exporter.collector.client import StatsClient
from kubo_exporter.collector.exceptions import StatsError
from kubo_exporter.utils.config import ConfigError, load_config
from kubo_exporter.utils.helpers import check_upstream
from kubo_exporter.utils.logger import setup_logging


logger = logging.getLogger(__name__)


# No click defaults: unset options fall through to the config file
UPSTREAM_OPTIONS = [
    click.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False),
                 help='YAML configuration file'),
    click.option('-i', '--ipfs-ip', metavar='IP', help='IP address of IPFS node [default: 127.0.0.1]'),
    click.option('-o', '--ipfs-port', type=int, metavar='PORT',
                 help='Port number of IPFS management API port [default: 5001]'),
    click.option('--timeout', type=float, help='Upstream request timeout in seconds'),
    click.option('--parallel/--sequential', default=None,
                 help='Fetch the three stats endpoints concurrently or one by one [default: sequential]'),
    click.option('--version-label', 'repo_version_label', metavar='LABEL',
                 help='Label key on kubo_ipfs_repo_version [default: path]'),
]


def upstream_options(func):
    """Options shared by every command that talks to the daemon."""
    for option in reversed(UPSTREAM_OPTIONS):
        func = option(func)
    return func


def _load(config_file, require_secret, **overrides):
    try:
        return load_config(config_file, require_secret=require_secret, **overrides)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _build_aggregator(config) -> MetricsAggregator:
    client = StatsClient(config.ipfs_ip, config.ipfs_port, timeout=config.timeout)
    return MetricsAggregator(client, version_label=config.repo_version_label, parallel=config.parallel)


@click.group()
@click.version_option(__version__, prog_name='kubo-exporter')
@click.option('--log-level', default='INFO', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']))
@click.option('--log-file', type=click.Path(dir_okay=False), help='Log file path')
@click.pass_context
def cli(ctx, log_level, log_file):
    """
    Kubo IPFS Prometheus exporter

    Polls the stats API of an IPFS node and serves the results in Prometheus
    exposition format.
    """
    ctx.ensure_object(dict)

    setup_logging(level=log_level, log_file=log_file)

    ctx.obj['log_level'] = log_level
    ctx.obj['log_file'] = log_file


@cli.command()
@upstream_options
@click.option('-l', '--listen-ip', metavar='IP', help='Listen address [default: 127.0.0.1]')
@click.option('-p', '--listen-port', type=int, metavar='PORT', help='Listen port [default: 9200]')
@click.option('-s', '--secret', metavar='SECRET', envvar='KUBO_EXPORTER_SECRET',
              help='Authentication password. Prefer KUBO_EXPORTER_SECRET or the config file.')
def serve(config_file, **overrides):
    """
    Serve metrics over HTTP.

    Example:
        kubo-exporter serve --secret hunter2
        kubo-exporter serve -i 10.0.0.5 -o 5001 -l 0.0.0.0 -p 9200 --config exporter.yaml
    """
    from kubo_exporter.exporters.http_handler import create_server

    config = _load(config_file, True, **overrides)
    aggregator = _build_aggregator(config)

    try:
        server = create_server(config, aggregator)
    except OSError as e:
        click.echo(f"Error: cannot listen on {config.listen_address}: {e}", err=True)
        sys.exit(1)

    logger.info(f"Polling IPFS node at {aggregator.client.base_url}")
    host, port = server.server_address[:2]
    logger.info(f"Metrics server running on http://{host}:{port}/metrics")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        server.server_close()


@cli.command()
@upstream_options
def scrape(config_file, **overrides):
    """
    Run a single scrape and print the metrics.

    Example:
        kubo-exporter scrape -i 127.0.0.1 -o 5001
    """
    config = _load(config_file, False, **overrides)
    aggregator = _build_aggregator(config)

    try:
        metrics = aggregator.gather()
    except StatsError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(metrics, nl=False)


@cli.command()
@upstream_options
def check(config_file, **overrides):
    """
    Check that the IPFS node answers all stats endpoints.

    Example:
        kubo-exporter check -i 127.0.0.1 -o 5001
    """
    config = _load(config_file, False, **overrides)
    client = StatsClient(config.ipfs_ip, config.ipfs_port, timeout=config.timeout)

    if check_upstream(client):
        click.echo("\n✓ IPFS node is reachable")
        sys.exit(0)
    else:
        click.echo("\n✗ Some stats endpoints failed")
        sys.exit(1)


if __name__ == '__main__':
    cli(obj={})
