# promo_publisher/config/logging_config.py

"""Per-run timestamped logging for the promo publisher service.

Every process start (scheduler service or a one-shot ``--once`` run)
writes to its own file under ``logs/`` named after the start time, e.g.
``logs/run_20260214_153045.log``.  All ``promo_publisher.*`` loggers
share that handler, so one file holds the fetch, filter, copy and
publish trail of every scheduled run in that process.

The console only shows warnings and errors unless the caller asks for
more (``--verbose`` on the CLI).
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from promo_publisher.config.settings import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log every HTTP round-trip at INFO
_NOISY_LOGGERS: tuple[str, ...] = ("openai", "httpx", "httpcore")


def setup_logging(
    console_level: int = logging.WARNING,
    logs_dir: Path | None = None,
) -> Path:
    """Initialise the ``promo_publisher`` logger for this process.

    Args:
        console_level: Minimum level echoed to stderr.
        logs_dir: Directory for the run log (defaults to ``Settings.LOGS_DIR``).

    Returns:
        The path of the log file created for this run.
    """
    root_logger = logging.getLogger("promo_publisher")
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, --once after import) keep the first handlers
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)

    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = target_dir / f"run_{timestamp}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info("Logging initialised, log file: %s", log_file)
    return log_file
