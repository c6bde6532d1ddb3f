"""Process-wide logging configuration.

Call setup_logging() once at startup, before the first log record is
emitted. Modules log through ``logging.getLogger(__name__)``.
"""

from __future__ import annotations

import logging
import sys


class _ThirdPartyNoiseFilter(logging.Filter):
    """Keep our own records, and only warnings or worse from libraries."""

    _OWN_PREFIXES = ("api", "core", "patterns", "verticals")

    def filter(self, record: logging.LogRecord) -> bool:
        root_name = record.name.split(".", 1)[0]
        if root_name in self._OWN_PREFIXES:
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str | int = logging.INFO) -> None:
    """Install a single stderr handler on the root logger.

    Pre-existing root handlers are removed so repeated calls (tests,
    reloads) do not duplicate output.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.addFilter(_ThirdPartyNoiseFilter())
    root.addHandler(handler)

    logging.captureWarnings(True)
