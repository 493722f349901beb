import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

import colorlog

# Transport libraries that log every request at INFO
NOISY_LOGGERS = ('httpx', 'httpcore', 'hpack')


def _is_own_handler(handler: logging.Handler) -> bool:
    # Handlers installed by other tools (test runners, basicConfig) don't count
    return isinstance(handler.formatter, colorlog.ColoredFormatter)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure coloured console logging and an optional rotating log file.

    Library modules only create loggers; applications call this once. The
    level comes from ``level`` or SUBWIRE_LOG_LEVEL, the file from
    SUBWIRE_LOG_FILE. Once its console handler is on the root logger,
    calling it again only updates the level.
    """
    log_level = (level or os.getenv('SUBWIRE_LOG_LEVEL', 'INFO')).upper()
    log_file = os.getenv('SUBWIRE_LOG_FILE')
    max_bytes = int(os.getenv('LOG_FILE_MAX_BYTES', '10485760'))  # 10 MB
    backup_count = int(os.getenv('LOG_FILE_BACKUP_COUNT', '5'))

    root = logging.getLogger()
    root.setLevel(log_level)

    # Request URLs carry credentials; keep httpx quiet unless debugging
    transport_level = logging.DEBUG if log_level == 'DEBUG' else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)

    if any(_is_own_handler(h) for h in root.handlers):
        return

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(colorlog.ColoredFormatter(
        "%(log_color)s%(levelname)s:%(name)s:%(message)s",
        log_colors={
            'DEBUG': 'bold_blue',
            'INFO': 'bold_green',
            'WARNING': 'bold_yellow',
            'ERROR': 'bold_red',
            'CRITICAL': 'bold_purple'
        }
    ))
    root.addHandler(console_handler)

    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s - (%(filename)s:%(lineno)d)'
        ))
        root.addHandler(file_handler)
