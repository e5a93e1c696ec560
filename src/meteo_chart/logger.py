# Project: meteo-chart
# Owner: GreenUnicorn
"""
logger.py — Logging configuration: console plus an append-only log file.

Modules log through logging.getLogger(__name__); setup_logger() attaches
the handlers to the package logger once, from the dashboard.
"""

import logging
from pathlib import Path

LOGGER_NAME = "meteo_chart"
DEFAULT_LOG_PATH = Path("logs/meteo_chart.log")


def setup_logger(log_file: Path = DEFAULT_LOG_PATH, log_level: str = "INFO") -> logging.Logger:
    """Configure the package logger with console and file handlers.

    Calling it again replaces the previous handlers (Streamlit re-runs the
    script on every interaction).

    Args:
        log_file: Destination log file; its directory is created if needed.
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.

    Returns:
        The configured 'meteo_chart' logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter(
        fmt="[meteo] %(levelname)s %(message)s",
    ))
    logger.addHandler(console_handler)

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot open log file %s: %s", log_file, e)
    else:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
