"""
Logging setup for the CrashIQ CLI and tools.

Library modules only create module-level loggers (logging.getLogger(__name__));
handlers are configured once, here, by the entry point.

Usage:
    from crashiq.logging_config import configure_logging

    configure_logging("INFO")
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_level: str | None = None) -> None:
    """
    Configure stdlib logging for the application.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR. If None, use CRASHIQ_LOG_LEVEL
                   (default WARNING so console reports stay readable).
    """
    level_str = log_level or os.getenv("CRASHIQ_LOG_LEVEL", "WARNING")
    level = getattr(logging, level_str.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
