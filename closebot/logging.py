"""Root logger setup for the bot process.

Configured from config.yaml (logging.level, logging.format) or env
(LOGGING_LEVEL, LOGGING_FORMAT). Only DEBUG, INFO, WARNING and ERROR are
accepted; anything else means INFO. Below DEBUG the requests/urllib3
connection chatter is held at WARNING so one command logs one line.
"""

import logging

from closebot.config import LoggingConfig

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# HTTP client loggers that log every request at DEBUG/INFO
HTTP_LOGGERS = ("urllib3", "requests")


def _resolve_level(level: str) -> int:
    return LEVELS.get(level.upper().strip(), logging.INFO)


def setup_logging(config: LoggingConfig) -> int:
    """Apply level and format to the root logger; return the level used."""
    level = _resolve_level(config.level)
    logging.basicConfig(level=level, format=config.format or DEFAULT_FORMAT, force=True)
    http_level = logging.NOTSET if level == logging.DEBUG else logging.WARNING
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)
    return level
