# kubo_exporter/utils/logger.py - Logging setup
"""
Logging configuration for the exporter.

Logs go to stderr so that ``kubo-exporter scrape`` can write metrics to
stdout. Level names are colored only when stderr is a terminal.
"""

import logging
import sys
from typing import List, Optional
from colorama import Fore, Style


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Libraries whose DEBUG output buries the exporter's own traces
NOISY_LOGGERS = ('urllib3',)


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors the level name of each line.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def formatMessage(self, record):
        color = self.LEVEL_COLORS.get(record.levelno)
        if not color:
            return super().formatMessage(record)

        values = dict(record.__dict__, levelname=f"{color}{record.levelname}{Style.RESET_ALL}")
        return self._style._fmt % values


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    console = logging.StreamHandler(sys.stderr)
    if sys.stderr.isatty():
        console.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    else:
        console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    handlers = [console]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handlers.append(file_handler)

    return handlers


def setup_logging(level: str = 'INFO', log_file: Optional[str] = None):
    """
    Replace the root logger's handlers with console and optional file output.

    Args:
        level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
        log_file: Optional log file path
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=numeric_level, handlers=_build_handlers(log_file), force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING)

    logging.debug(f"Logging initialized at {level} level")
