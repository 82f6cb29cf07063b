"""Logging utilities for hacksubmit runs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

_LOGGER_NAME = "hacksubmit"

# Client libraries whose records are routed through our handlers in verbose mode.
_VERBOSE_LIBRARIES = ("openai", "httpx")


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the hacksubmit hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def _build_handlers(level: int, log_file: Path | None) -> List[logging.Handler]:
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[hacksubmit] %(levelname)s %(message)s"))
    handlers: List[logging.Handler] = [stream_handler]

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        handlers.append(file_handler)
    return handlers


def _install(logger: logging.Logger, level: int, handlers: List[logging.Handler]) -> None:
    logger.setLevel(level)
    logger.propagate = False
    # Reset handlers so repeated invocations in one process don't duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure console output (and an optional full-detail log file) for a run.

    In verbose mode the OpenAI and HTTP client loggers share the same
    handlers, so request-level details appear next to pipeline messages.
    """
    level = logging.DEBUG if verbose else logging.INFO
    handlers = _build_handlers(level, log_file)

    logger = logging.getLogger(_LOGGER_NAME)
    _install(logger, level, handlers)

    for name in _VERBOSE_LIBRARIES:
        library_logger = logging.getLogger(name)
        if verbose:
            _install(library_logger, logging.DEBUG, handlers)
        else:
            _install(library_logger, logging.WARNING, [])
            library_logger.propagate = True

    return logger


__all__ = ["configure_logging", "get_logger"]
