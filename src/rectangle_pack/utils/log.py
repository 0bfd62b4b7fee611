"""
Logging setup shared by the command-line scripts.

Library modules only create module-level loggers; configuring handlers and
levels is left to the entry point:

    from rectangle_pack.utils.log import setup_logging
    setup_logging("DEBUG")
"""

from __future__ import annotations

from typing import Union

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Union[str, int] = "INFO") -> None:
    """
    Configure the root logger with a single stream handler.

    Calling it again replaces the previous configuration.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


__all__ = ["LOG_FORMAT", "setup_logging"]
