from __future__ import annotations

import logging
import sys
from typing import Optional

from hookline_common.settings import get_settings


def setup_logging(name: str = "hookline", level: Optional[str] = None) -> logging.Logger:
    """Return a logger writing key=value lines to stderr, configured once per name."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel((level or get_settings().log_level).upper())
    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(h)
    logger.propagate = False
    return logger
