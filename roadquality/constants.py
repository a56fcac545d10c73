"""
Constants for Road Quality Analysis

This module defines the paths, class tables and velocity profiles used
throughout the road quality dashboard.
"""

import os
from pathlib import Path

# Road data folder is one level up from roadquality/ unless overridden
DATA_DIR = Path(os.environ.get("ROAD_QUALITY_DATA_DIR") or Path(__file__).parent.parent / "Road Data")
DEFAULT_DATA_FILE = DATA_DIR / "road_quality.json"

# Placeholder used when a raw row carries no date or road name
UNKNOWN_DATE = "N/A"
UNKNOWN_ROAD = "N/A"

# Pavement condition classes, 1 (worst) to 5 (best)
PCI_CLASSES = (1, 2, 3, 4, 5)

CLASS_COLORS = {
    1: "#d7191c",  # Red
    2: "#fdae61",  # Orange
    3: "#ffff00",  # Yellow
    4: "#a6d96a",  # Light green
    5: "#1a9641",  # Green
}

# 1 m/s == 3.6 km/h
KMH_PER_MPS = 3.6

UNIT_KMH = "kmh"
UNIT_MPS = "mps"

# Velocity threshold ladders in km/h, the unit of the stored velocities.
# Thresholds ascend; bin_classes maps each bin (lowest speed first) to a
# pavement class.
VELOCITY_PROFILE_TABLES = {
    "urban": {
        "unit": UNIT_KMH,
        "thresholds": (2.78, 5.56, 8.34, 10.0),
        "bin_classes": (5, 4, 3, 2, 1),
    },
    "coarse": {
        "unit": UNIT_KMH,
        "thresholds": (2.5, 5.0, 7.5),
        "bin_classes": (2, 3, 4, 5),
    },
}
DEFAULT_VELOCITY_PROFILE = "urban"
