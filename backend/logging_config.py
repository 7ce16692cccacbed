"""Logging setup shared by the API and the projection engine."""

import logging
from typing import Union

LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LOGGING_CONFIGURED = False


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Attach a single stream handler to the ``backend`` logger.

    Safe to call more than once (e.g. one app per test); later calls only
    adjust the level.
    """
    global _LOGGING_CONFIGURED

    root = logging.getLogger("backend")
    root.setLevel(level)

    if _LOGGING_CONFIGURED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
    root.propagate = False
    _LOGGING_CONFIGURED = True
