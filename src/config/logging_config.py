# src/config/logging_config.py

"""Per-run logging for ml_afiliados.

Every launch writes to its own ``logs/run_<timestamp>.log`` file and all
``ml_afiliados.*`` loggers share it.  The console only sees warnings, and
the TUI disables the console handler entirely because stderr output would
tear the Textual screen.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

PROJECT_LOGGER = "ml_afiliados"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that flood the DEBUG file otherwise
_NOISY_LOGGERS: tuple[str, ...] = ("curl_cffi", "httpx", "asyncio")


def setup_logging(console: bool = True) -> Path:
    """Attach file (DEBUG) and optional console (WARNING) handlers.

    Repeated calls keep the handlers installed by the first one and
    return the file that is already being written.

    Returns:
        Path of the log file for this run.
    """
    project_logger = logging.getLogger(PROJECT_LOGGER)
    project_logger.setLevel(logging.DEBUG)
    for handler in project_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)

    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )
    project_logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(
            logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
        )
        project_logger.addHandler(console_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    project_logger.info("Logging to %s", log_file)
    return log_file
