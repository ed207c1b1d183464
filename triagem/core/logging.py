"""Logging setup for the triage API.

Services log event names (``candidate_assigned``, ``list_candidates_failed``
...) with their context in ``extra``; this module routes them to stdout in
a pipe-separated line format.  Call ``setup_logging()`` once at startup.
"""

import logging
import sys

from triagem.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Per-request HTTP chatter from the Supabase client and the ASGI server
_QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "hpack", "uvicorn.access")


def setup_logging(level: str | None = None) -> None:
    """Install one stdout handler on the root logger.

    *level* overrides ``settings.LOG_LEVEL``.  Calling this again replaces
    the handler instead of adding a second one.
    """
    name = (level or settings.LOG_LEVEL).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, name, logging.INFO))

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    root.handlers.clear()
    root.addHandler(handler)

    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
