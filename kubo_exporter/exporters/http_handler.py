# kubo_exporter/exporters/http_handler.py - Scrape endpoint
"""
HTTP endpoint that serves the aggregated metrics to Prometheus.
Every request must authenticate with HTTP Basic auth; only the password is
checked against the configured secret.
"""

import base64
import binascii
import hmac
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import ipaddress
import logging
import socket
from typing import Optional

from kubo_exporter import __version__
from kubo_exporter.collector.aggregator import MetricsAggregator
from kubo_exporter.collector.exceptions import StatsError
from kubo_exporter.exporters.prometheus import CONTENT_TYPE
from kubo_exporter.utils.config import ConfigError, ExporterConfig


logger = logging.getLogger(__name__)

METRICS_PATHS = ('/', '/metrics')
REALM = 'kubo-exporter'


def check_basic_auth(header: Optional[str], secret: str) -> bool:
    """
    Verify a Basic Authorization header against the shared secret.

    Args:
        header: Value of the Authorization header, if any
        secret: Expected password; the username is ignored

    Returns:
        True if the header carries the secret as its password
    """
    if not header:
        return False

    scheme, _, encoded = header.partition(' ')
    if scheme.lower() != 'basic':
        return False

    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError):
        return False

    _, separator, password = decoded.partition(':')
    if not separator:
        return False

    return hmac.compare_digest(password.encode('utf-8'), secret.encode('utf-8'))


class MetricsHandler(BaseHTTPRequestHandler):

    server_version = f"kubo-exporter/{__version__}"

    def __init__(self, aggregator: MetricsAggregator, secret: str, *args, **kwargs):
        self.aggregator = aggregator
        self.secret = secret
        super().__init__(*args, **kwargs)

    def do_GET(self):
        if not check_basic_auth(self.headers.get('Authorization'), self.secret):
            logger.warning(f"Rejected unauthenticated request from {self.client_address[0]}")
            self._send_text(401, "Unauthorized\n", headers={
                'WWW-Authenticate': f'Basic realm="{REALM}"',
            })
            return

        if self.path.split('?', 1)[0] not in METRICS_PATHS:
            self._send_text(404, "Not Found\n")
            return

        try:
            metrics = self.aggregator.gather()
        except StatsError as e:
            logger.error(f"Scrape failed: {e}")
            self._send_text(500, f"Failed to gather metrics: {e}\n")
            return

        self._send_text(200, metrics, content_type=CONTENT_TYPE)

    def _send_text(self, status: int, text: str, content_type: str = 'text/plain; charset=utf-8', headers=None):
        body = text.encode('utf-8')

        self.send_response(status)
        self.send_header('Content-Type', content_type)
        self.send_header('Content-Length', str(len(body)))
        for name, value in (headers or {}).items():
            self.send_header(name, value)
        self.end_headers()

        self.wfile.write(body)

    def log_message(self, format, *args):
        """Route access logs through logging at DEBUG level"""
        logger.debug(f"{self.address_string()} - {format % args}")


class ExporterServerV6(ThreadingHTTPServer):
    address_family = socket.AF_INET6


def create_server(config: ExporterConfig, aggregator: MetricsAggregator) -> ThreadingHTTPServer:
    """
    Bind the scrape endpoint.

    Args:
        config: Exporter configuration (listen address and secret)
        aggregator: Aggregator invoked for each authenticated scrape

    Returns:
        Bound server; call serve_forever() to start handling requests

    Raises:
        ConfigError: If no secret is configured
        OSError: If the listen address cannot be bound
    """
    if not config.secret:
        raise ConfigError("A secret is required to serve metrics")

    def handler(*args, **kwargs):
        return MetricsHandler(aggregator, config.secret, *args, **kwargs)

    if ipaddress.ip_address(config.listen_ip).version == 6:
        server_class = ExporterServerV6
    else:
        server_class = ThreadingHTTPServer

    server = server_class((config.listen_ip, config.listen_port), handler)
    logger.debug(f"Bind address: {config.listen_address}")
    return server
