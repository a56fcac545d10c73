"""
Score Classification for Road Quality Analysis

This module maps a segment's stored pavement score or measured velocity to a
pavement class (1-5) and display color, under one of two scoring modes:

- prediction: the stored PCI score is the class
- velocity: the class is read off a configurable threshold ladder
"""

import bisect
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple
from . import constants
from . import utils


class ScoringMode(str, Enum):
    PREDICTION = "prediction"
    VELOCITY = "velocity"


class ErrorKind(str, Enum):
    INVALID_SCORE = "InvalidScore"
    INVALID_VELOCITY = "InvalidVelocity"


class ClassificationError(ValueError):
    """Raised when a segment cannot be classified."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


@dataclass(frozen=True)
class Classification:
    class_id: int
    color: str


@dataclass(frozen=True)
class VelocityProfile:
    """
    Threshold ladder for velocity-based classification.

    ``thresholds`` are ascending cut points in ``unit``. They split the speed
    axis into ``len(thresholds) + 1`` bins, each lower-inclusive and
    upper-exclusive, with the top bin open-ended. ``bin_classes[i]`` is the
    pavement class of bin ``i`` (slowest bin first), so the direction of the
    speed/quality relation is part of the profile.
    """

    name: str
    thresholds: Tuple[float, ...]
    bin_classes: Tuple[int, ...]
    unit: str = constants.UNIT_MPS

    def __post_init__(self):
        if self.unit not in (constants.UNIT_KMH, constants.UNIT_MPS):
            raise ValueError(f"Unknown velocity unit: {self.unit}")
        if not self.thresholds:
            raise ValueError("Velocity profile needs at least one threshold")
        if any(b <= a for a, b in zip(self.thresholds, self.thresholds[1:])):
            raise ValueError(f"Thresholds must be strictly ascending: {self.thresholds}")
        if len(self.bin_classes) != len(self.thresholds) + 1:
            raise ValueError(
                f"Profile {self.name!r} has {len(self.thresholds)} thresholds "
                f"but {len(self.bin_classes)} bin classes"
            )
        if any(c not in constants.PCI_CLASSES for c in self.bin_classes):
            raise ValueError(f"Bin classes must be within {constants.PCI_CLASSES}")

    @classmethod
    def from_table(cls, name: str, table: Dict) -> "VelocityProfile":
        return cls(
            name=name,
            thresholds=tuple(float(t) for t in table["thresholds"]),
            bin_classes=tuple(int(c) for c in table["bin_classes"]),
            unit=table.get("unit", constants.UNIT_MPS),
        )

    def from_kmh(self, velocity_kmh: float) -> float:
        """Express a km/h velocity in this profile's unit."""
        if self.unit == constants.UNIT_MPS:
            return utils.kmh_to_mps(velocity_kmh)
        return velocity_kmh


VELOCITY_PROFILES: Dict[str, VelocityProfile] = {
    name: VelocityProfile.from_table(name, table)
    for name, table in constants.VELOCITY_PROFILE_TABLES.items()
}
URBAN_PROFILE = VELOCITY_PROFILES["urban"]
COARSE_PROFILE = VELOCITY_PROFILES["coarse"]
DEFAULT_PROFILE = VELOCITY_PROFILES[constants.DEFAULT_VELOCITY_PROFILE]


def get_profile(name: str) -> VelocityProfile:
    """
    Look up a known velocity profile by name.

    Raises:
        ValueError: If no profile has that name.
    """
    try:
        return VELOCITY_PROFILES[name]
    except KeyError:
        raise ValueError(f"Unknown velocity profile: {name}") from None


def class_color(class_id: int) -> str:
    """
    Return the display color of a pavement class.

    Raises:
        ClassificationError: If class_id is not one of the five classes.
    """
    if (isinstance(class_id, bool) or not isinstance(class_id, numbers.Integral)
            or class_id not in constants.CLASS_COLORS):
        raise ClassificationError(ErrorKind.INVALID_SCORE, f"PCI score out of range: {class_id!r}")
    return constants.CLASS_COLORS[class_id]


def classify_velocity(velocity: float, profile: VelocityProfile = DEFAULT_PROFILE) -> int:
    """
    Bin a velocity with a profile's threshold ladder.

    Args:
        velocity: Speed expressed in the profile's unit.
        profile: Threshold ladder and bin-to-class table.

    Returns:
        Pavement class of the bin the velocity falls into.

    Raises:
        ClassificationError: If the velocity is negative or not a number.
    """
    if not utils.is_non_negative(utils.safe_float(velocity)):
        raise ClassificationError(ErrorKind.INVALID_VELOCITY, f"Invalid velocity: {velocity!r}")

    # bisect_right puts a value equal to a threshold in the bin above it
    bin_index = bisect.bisect_right(profile.thresholds, velocity)
    return profile.bin_classes[bin_index]


def classify(mode: ScoringMode, pci_score: int, velocity_kmh: float,
             profile: Optional[VelocityProfile] = None) -> Classification:
    """
    Assign a pavement class and display color to one segment.

    Args:
        mode: Scoring mode to apply.
        pci_score: Stored pavement condition score (1-5).
        velocity_kmh: Average measured velocity in km/h.
        profile: Velocity profile for velocity mode. Defaults to DEFAULT_PROFILE.

    Returns:
        Classification with class_id and color.

    Raises:
        ClassificationError: InvalidScore if the score is outside 1-5 in
        prediction mode, InvalidVelocity if the velocity is negative.
    """
    if not utils.is_non_negative(utils.safe_float(velocity_kmh)):
        raise ClassificationError(ErrorKind.INVALID_VELOCITY, f"Invalid velocity: {velocity_kmh!r}")

    mode = ScoringMode(mode)
    if mode is ScoringMode.PREDICTION:
        return Classification(class_id=pci_score, color=class_color(pci_score))

    profile = profile or DEFAULT_PROFILE
    class_id = classify_velocity(profile.from_kmh(velocity_kmh), profile)
    return Classification(class_id=class_id, color=class_color(class_id))
