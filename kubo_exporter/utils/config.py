# kubo_exporter/utils/config.py - Configuration management
"""
Configuration for the exporter.

Settings are resolved once at startup from built-in defaults, an optional
YAML file and command-line overrides, then frozen into an ExporterConfig
that is handed to the components that need it.
"""

from dataclasses import dataclass
import ipaddress
import logging
from pathlib import Path
import re
from typing import Any, Dict, Optional

import yaml


logger = logging.getLogger(__name__)

LABEL_NAME_RE = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')


class ConfigError(ValueError):
    """Invalid or incomplete exporter configuration."""


DEFAULT_CONFIG = {
    'ipfs_ip': '127.0.0.1',
    'ipfs_port': 5001,
    'listen_ip': '127.0.0.1',
    'listen_port': 9200,
    'secret': None,
    'timeout': None,
    'parallel': False,
    'repo_version_label': 'path',
}


@dataclass(frozen=True)
class ExporterConfig:
    """
    Immutable exporter settings.

    Attributes:
        ipfs_ip: Address of the IPFS node
        ipfs_port: Port of the management API
        listen_ip: Address the exporter binds to
        listen_port: Port the exporter binds to
        secret: Basic-auth password required on every scrape
        timeout: Upstream request timeout in seconds, None for no timeout
        parallel: Fetch the three stats endpoints concurrently
        repo_version_label: Label key on kubo_ipfs_repo_version
    """
    ipfs_ip: str = DEFAULT_CONFIG['ipfs_ip']
    ipfs_port: int = DEFAULT_CONFIG['ipfs_port']
    listen_ip: str = DEFAULT_CONFIG['listen_ip']
    listen_port: int = DEFAULT_CONFIG['listen_port']
    secret: Optional[str] = None
    timeout: Optional[float] = None
    parallel: bool = False
    repo_version_label: str = DEFAULT_CONFIG['repo_version_label']

    def __post_init__(self):
        if not self.ipfs_ip:
            raise ConfigError("ipfs_ip must not be empty")

        # listen_port 0 binds an ephemeral port
        for name, lowest in (('ipfs_port', 1), ('listen_port', 0)):
            port = getattr(self, name)
            if isinstance(port, bool) or not isinstance(port, int) or not lowest <= port < 65536:
                raise ConfigError(f"{name} must be between {lowest} and 65535, got {port!r}")

        try:
            ipaddress.ip_address(self.listen_ip)
        except ValueError as e:
            raise ConfigError(f"Invalid listen address {self.listen_ip!r}") from e

        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")

        if not LABEL_NAME_RE.match(self.repo_version_label):
            raise ConfigError(f"Invalid label name: {self.repo_version_label!r}")

    @property
    def listen_address(self) -> str:
        if ipaddress.ip_address(self.listen_ip).version == 6:
            return f"[{self.listen_ip}]:{self.listen_port}"
        return f"{self.listen_ip}:{self.listen_port}"


def load_config_file(config_file: str) -> Dict[str, Any]:
    """
    Read the ``exporter`` section of a YAML configuration file.

    Args:
        config_file: Path to YAML file

    Returns:
        Settings found in the file

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    config_path = Path(config_file)

    try:
        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config file {config_file}: {e}") from e

    section = loaded.get('exporter', {}) if isinstance(loaded, dict) else None
    if not isinstance(section, dict):
        raise ConfigError(f"{config_file}: 'exporter' must be a mapping")

    unknown = set(section) - set(DEFAULT_CONFIG)
    if unknown:
        logger.warning(f"Ignoring unknown config keys in {config_file}: {', '.join(sorted(unknown))}")

    logger.info(f"Loaded configuration from {config_file}")
    return {key: value for key, value in section.items() if key in DEFAULT_CONFIG}


def _coerce(settings: Dict[str, Any]) -> Dict[str, Any]:
    coerced = dict(settings)

    try:
        for key in ('ipfs_port', 'listen_port'):
            if isinstance(coerced[key], str):
                coerced[key] = int(coerced[key])
        if coerced['timeout'] is not None:
            coerced['timeout'] = float(coerced['timeout'])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid numeric setting: {e}") from e

    for key in ('ipfs_ip', 'listen_ip', 'secret', 'repo_version_label'):
        if coerced[key] is not None:
            coerced[key] = str(coerced[key])

    if not isinstance(coerced['parallel'], bool):
        raise ConfigError(f"parallel must be true or false, got {coerced['parallel']!r}")
    return coerced


def load_config(config_file: Optional[str] = None, require_secret: bool = True, **overrides) -> ExporterConfig:
    """
    Resolve the exporter configuration.

    Precedence, highest first: overrides that are not None, the config file,
    DEFAULT_CONFIG.

    Args:
        config_file: Optional path to YAML configuration file
        require_secret: Fail when no secret is configured
        **overrides: Individual settings, typically from the command line

    Returns:
        Validated configuration

    Raises:
        ConfigError: If a setting is invalid or the secret is missing
    """
    settings = dict(DEFAULT_CONFIG)

    if config_file:
        settings.update(load_config_file(config_file))

    for key, value in overrides.items():
        if key not in DEFAULT_CONFIG:
            raise ConfigError(f"Unknown setting: {key}")
        if value is not None:
            settings[key] = value

    if require_secret and not settings['secret']:
        raise ConfigError("A secret is required (--secret, KUBO_EXPORTER_SECRET or the config file)")

    return ExporterConfig(**_coerce(settings))
