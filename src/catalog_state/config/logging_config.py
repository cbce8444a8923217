# src/catalog_state/config/logging_config.py

"""Per-run logging for the catalog engine, CLI and terminal browser.

Every process writes one ``logs/run_YYYYMMDD_HHMMSS.log`` file at DEBUG
level.  The stderr console only shows ``CATALOG_CONSOLE_LOG_LEVEL`` and up
(WARNING by default) so it never mixes into the CLI's JSON on stdout.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from catalog_state.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | "
    "%(message)s"
)
_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _active_log_file(logger: logging.Logger) -> Path | None:
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging() -> Path:
    """Attach the run's file and console handlers to ``catalog_state``.

    Calling it again is a no-op that returns the file already in use.
    """
    package_logger = logging.getLogger("catalog_state")
    package_logger.setLevel(logging.DEBUG)

    existing = _active_log_file(package_logger)
    if existing is not None:
        return existing

    Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = Settings.LOGS_DIR / f"run_{stamp}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, _DATE_FORMAT))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(
        logging.getLevelName(Settings.CONSOLE_LOG_LEVEL)
        if Settings.CONSOLE_LOG_LEVEL in logging.getLevelNamesMapping()
        else logging.WARNING
    )
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    package_logger.addHandler(file_handler)
    package_logger.addHandler(console_handler)
    package_logger.info("Run log opened at %s", log_file)

    return log_file
