"""
Utility Functions for Road Quality Analysis

This module provides helper functions for data conversion, rounding, and
unit conversion used throughout the dashboard engine.
"""

import numpy as np
from typing import Optional
from . import constants


def safe_float(value) -> float:
    """
    Safely convert a value to float, returning NaN on failure.

    Booleans are rejected so that ``True`` never passes as a speed or distance.

    Args:
        value: Value to convert (string, number, etc.).

    Returns:
        Float value, or np.nan if conversion fails.
    """
    if isinstance(value, bool):
        return np.nan
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return np.nan


def safe_int(value) -> Optional[int]:
    """
    Convert a value to int only if it represents a whole number.

    Args:
        value: Value to convert (int, integral float, numeric string).

    Returns:
        Integer value, or None if the value is not a whole number.
    """
    number = safe_float(value)
    if not np.isfinite(number) or not float(number).is_integer():
        return None
    return int(number)


def is_non_negative(value: float) -> bool:
    """Return True for finite values >= 0."""
    return bool(np.isfinite(value)) and value >= 0


def round_float(value, digits: int = 3) -> Optional[float]:
    """
    Round a float value, handling None, NaN, and Inf.

    Args:
        value: Value to round.
        digits: Number of decimal places. Default 3.

    Returns:
        Rounded float, or None if value is None, NaN, or Inf.
    """
    if value is None or (isinstance(value, float) and (np.isnan(value) or np.isinf(value))):
        return None
    return round(float(value), digits)


def kmh_to_mps(speed_kmh: float) -> float:
    """Convert a speed from km/h to m/s."""
    return speed_kmh / constants.KMH_PER_MPS


def meters_to_km(distance_m: float) -> float:
    return distance_m / 1000.0
