"""
Logging configuration for the Swift OAS generation pipeline.

Usage in generator modules:
    from swift_oas_generator.gen_logging import get_logger
    logger = get_logger(__name__)

The root logger name is "swift_oas_gen". Log levels are controlled by the CLI.
"""

import logging
import sys

_LOGGER_NAME = "swift_oas_gen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a child logger under the swift_oas_gen hierarchy.

    Args:
        name: Module __name__, or None for the root swift_oas_gen logger.

    Returns:
        logging.Logger instance
    """
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    # "swift_oas_generator.parser.resolver" -> "swift_oas_gen.resolver"
    short = name.rsplit(".", 1)[-1]
    return logging.getLogger(f"{_LOGGER_NAME}.{short}")


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Configure the swift_oas_gen logger hierarchy.

    Levels:
        --verbose / -v  -> DEBUG   (resolution and builder detail)
        (default)       -> INFO    (one line per generated service)
        --quiet / -q    -> WARNING (warnings and errors only)
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root_logger = logging.getLogger(_LOGGER_NAME)
    root_logger.setLevel(level)

    # Avoid duplicate handlers when called multiple times
    if root_logger.handlers:
        for handler in root_logger.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_MessageFormatter())
    root_logger.addHandler(handler)

    root_logger.propagate = False


class _MessageFormatter(logging.Formatter):
    """Minimal formatter: emit the message as-is."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()
