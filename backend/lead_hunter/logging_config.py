"""Logging setup shared by scripts and the API process."""

import logging
from typing import Optional

from lead_hunter.config import settings


def configure_logging(level: Optional[str] = None):
    """Configure root logging once, defaulting to settings.LOG_LEVEL."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
