"""
Configuration & Constants
=========================
This module serves as the central registry for global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (tolerances, dtypes, supported
   dimensions) scattered throughout the code.
2. Environment: It resolves settings that may be overridden from the
   environment (e.g. the log level) in one place.

Exports:
    COORDINATE_TOLERANCE (float): Absolute tolerance for comparing node coordinates.
    SUPPORTED_DIMENSIONS (tuple[int, ...]): Image dimensions the rectilinear mesher handles.
    COORDINATE_DTYPE, INDEX_DTYPE: NumPy dtypes used for node and connectivity arrays.
    LOG_LEVEL_ENV_VAR (str): Name of the environment variable holding the log level.
"""
import logging
import os

import numpy as np

# Global Constants
COORDINATE_TOLERANCE: float = 1e-4
SUPPORTED_DIMENSIONS: tuple[int, ...] = (2, 3)

COORDINATE_DTYPE = np.float64
INDEX_DTYPE = np.int64

LOG_LEVEL_ENV_VAR: str = "IMAGEFEM_LOG_LEVEL"


def get_log_level(default: int = logging.INFO) -> int:
    """
    Resolve the logging level from the environment.

    Args:
        default: Level used when the variable is unset or holds an unknown name.

    Returns:
        A level understood by :mod:`logging` (e.g. ``logging.DEBUG``).
    """
    level_name = os.getenv(LOG_LEVEL_ENV_VAR, "").strip().upper()
    if not level_name:
        return default

    level = logging.getLevelName(level_name)
    if isinstance(level, int):
        return level
    return default
