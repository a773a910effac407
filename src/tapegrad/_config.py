"""
Environment-driven configuration for tapegrad.

Settings are read once, when the package is imported:

- ``TAPEGRAD_DEBUG``: opt-in debug logging of tape recording and of every
  backward step. Default OFF; any value other than ``0``, the empty string
  or ``false`` turns it on.
- ``TAPEGRAD_DEFAULT_DTYPE``: element dtype used when converting Python
  numbers and nested lists to tensors. Must name a NumPy floating dtype.
  Defaults to ``float32``.
"""

from __future__ import annotations

import logging
import os

import numpy as np

_FALSY = ("0", "", "false", "False", "FALSE")

PACKAGE_LOGGER_NAME = "tapegrad"


def _env_flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default) not in _FALSY


def _env_float_dtype(name: str, default: str = "float32") -> np.dtype:
    raw = os.environ.get(name, default) or default
    try:
        dt = np.dtype(raw)
    except TypeError as e:
        raise ValueError(f"{name}={raw!r} is not a valid NumPy dtype") from e
    if dt.kind != "f":
        raise ValueError(f"{name} must be a floating dtype, got {dt}")
    return dt


DEBUG: bool = _env_flag("TAPEGRAD_DEBUG")
DEFAULT_DTYPE: np.dtype = _env_float_dtype("TAPEGRAD_DEFAULT_DTYPE")


def configure_logging(debug: bool = DEBUG) -> None:
    """
    Attach a debug stream handler to the package logger when `debug` is set.

    Library code never installs handlers otherwise; applications configure
    logging themselves.
    """
    if not debug:
        return
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if any(getattr(h, "_tapegrad_debug", False) for h in logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
    )
    handler._tapegrad_debug = True
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
