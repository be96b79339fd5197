"""Logging setup for the travel-desk client."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .config import ObservabilityConfig, get_config

_LOGGING_CONFIGURED = False


def configure_logging(config: Optional[ObservabilityConfig] = None) -> None:
    """Configure logging once per process.

    Safe to call multiple times; only the first call has an effect.
    """
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    config = config or get_config().observability
    logging.basicConfig(
        level=getattr(logging, config.level.upper(), logging.INFO),
        format=config.format,
        stream=sys.stdout,
    )

    _LOGGING_CONFIGURED = True
