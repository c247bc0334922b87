"""Loggers for the catalog service, all children of the "catalog" logger."""
import logging
import os
import sys

_ROOT = "catalog"
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_root() -> None:
    base = logging.getLogger(_ROOT)
    if base.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    base.addHandler(handler)
    # read at first use so a .env loaded by catalog.config applies
    base.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    # uvicorn installs its own root handlers
    base.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return the ``catalog.<name>`` logger, installing the stdout handler on first call."""
    _configure_root()
    return logging.getLogger(f"{_ROOT}.{name}")
