from __future__ import annotations

import logging
import os
import time

from rich.logging import RichHandler


LOG_LEVEL_ENV = "BASIC_FITS_LOG_LEVEL"
_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def resolve_level(level: str | None = None) -> str:
    """Level resolution (first match wins): argument, env var, ``"INFO"``.

    Unknown names fall back to INFO.
    """

    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")

    level = str(level).upper().strip()
    if level not in _LEVELS:
        level = "INFO"
    return level


def setup_logging(level: str | None = None) -> None:
    """Configure concise console logging through RichHandler.

    Safe to call multiple times. The library itself never calls this, only
    entry points do.
    """

    level = resolve_level(level)

    # Avoid duplicated handlers on re-init.
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%H:%M:%S]",
        handlers=[
            RichHandler(
                rich_tracebacks=True,
                tracebacks_show_locals=False,
                show_path=False,
                show_time=True,
                omit_repeated_times=False,
            )
        ],
    )


class timer:
    """Lightweight context timer for logs.

    Example:
        with timer("decode m31.fits"):
            ...
    """

    def __init__(self, name: str, logger: logging.Logger | None = None):
        self.name = name
        self.logger = logger or logging.getLogger("basic_fits")
        self.t0 = 0.0
        self.elapsed = 0.0

    def __enter__(self):
        self.t0 = time.perf_counter()
        self.logger.debug("▶ %s…", self.name)
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.t0
        if exc is None:
            self.logger.debug("✓ %s (%.3f s)", self.name, self.elapsed)
            return False
        self.logger.error("✗ %s FAILED (%.3f s): %s", self.name, self.elapsed, exc)
        return False
