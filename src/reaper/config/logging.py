"""Root logger setup for the reaper CLI."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for a single run.

    ``level`` is INFO for normal runs and DEBUG when per-host tracing is wanted.
    ``force`` replaces handlers that are already installed, e.g. under pytest.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    # one line per request drowns the per-host decisions
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
