from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the package logger.

    Calling it twice (e.g. one app per test) does not duplicate handlers.
    """

    pkg_logger = logging.getLogger("gv_classroom")
    pkg_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if not any(getattr(h, "_gv_classroom", False) for h in pkg_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._gv_classroom = True
        pkg_logger.addHandler(handler)
