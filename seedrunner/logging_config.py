"""
Structured logging configuration for the runner.

Provides JSON-formatted logs whose trace_id is the runner's seed chain, so
every line of a run carries what is needed to reproduce it. Failure records
additionally carry the failing candidate's seed_chain.

Environment Variables:
    SEEDRUNNER_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    SEEDRUNNER_LOG_FORMAT: Log format (json, text) - default: json

Usage:
    from seedrunner.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id="[1F:A3]")
    logger.warning("Candidate failed", extra={"seed_chain": "[1F:A3:5]"})
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        # Per-call extras (suite, candidates, seed_chain) are appended as keys.
        return jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    return logging.Formatter(
        "%(asctime)s %(levelname)-7s %(name)s [seed=%(trace_id)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure root logger with structured logging.

    Arguments take precedence over the environment:
    - SEEDRUNNER_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    - SEEDRUNNER_LOG_FORMAT: json, text (default: json)
    """
    level_name = (level or os.getenv("SEEDRUNNER_LOG_LEVEL", "INFO")).upper()
    fmt = (log_format or os.getenv("SEEDRUNNER_LOG_FORMAT", "json")).lower()
    resolved = LEVELS.get(level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(_formatter(fmt))
    handler.addFilter(TraceIDFilter())
    root_logger.addHandler(handler)


class SeedLoggerAdapter(logging.LoggerAdapter):
    """
    LoggerAdapter that keeps per-call extra fields.

    The stock adapter replaces a call's extra with its own, which would
    drop fields such as the failing candidate's seed_chain. Here the
    adapter's fields are the defaults and the call's fields win.
    """

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(name: str, trace_id: Optional[str] = None) -> SeedLoggerAdapter:
    """
    Get a logger with optional trace_id for correlation.

    Args:
        name: Logger name (typically __name__)
        trace_id: Seed chain of the run (e.g. "[1F:A3]")

    Returns:
        SeedLoggerAdapter with trace_id in extra fields
    """
    logger = logging.getLogger(name)
    return SeedLoggerAdapter(logger, {"trace_id": trace_id or "N/A"})


class TraceIDFilter(logging.Filter):
    """
    Logging filter that adds trace_id to all log records.

    Ensures all logs have a trace_id field, even if not set via LoggerAdapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True
