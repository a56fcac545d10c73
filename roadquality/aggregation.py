"""
Statistics Aggregation for Road Quality Analysis

This module computes the statistics tables of the dashboard:

- per-user class buckets: segment count, distance and mean velocity for each
  of the five pavement classes of one user
- selected-road summaries: the segments of the roads a user has selected,
  listed per road and summarized per pavement class
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Iterable, List, Optional, Sequence
import pandas as pd
from . import classifier
from . import constants
from . import utils
from .normalizer import SegmentRecord, make_road_key

SELECTED_ROW_COLUMNS = ["username", "road_name", "pci_score", "avg_velocity_kmh", "distance_m"]


@dataclass
class ClassBucket:
    """Running totals for one pavement class of one user."""

    class_id: int
    segment_count: int = 0
    total_distance_km: float = 0.0
    mean_velocity_kmh: float = 0.0

    def add(self, velocity_kmh: float, distance_m: float) -> None:
        """
        Fold one segment into the bucket.

        The mean is updated with the count from before this segment:
        ``new = (old * n + v) / (n + 1)``.
        """
        old_count = self.segment_count
        self.mean_velocity_kmh = (self.mean_velocity_kmh * old_count + velocity_kmh) / (old_count + 1)
        self.segment_count = old_count + 1
        self.total_distance_km += utils.meters_to_km(distance_m)

    def to_row(self, user_name: str) -> Dict:
        return {
            "username": user_name,
            "class_id": self.class_id,
            "color": constants.CLASS_COLORS[self.class_id],
            "segment_count": self.segment_count,
            "total_distance_km": utils.round_float(self.total_distance_km, 3),
            "mean_velocity_kmh": utils.round_float(self.mean_velocity_kmh, 2),
        }


def segment_class(record: SegmentRecord, mode: classifier.ScoringMode,
                  profile: Optional[classifier.VelocityProfile] = None) -> int:
    """Return the pavement class of a record under the given scoring mode."""
    if classifier.ScoringMode(mode) is classifier.ScoringMode.PREDICTION:
        return record.pci_score
    return classifier.classify(mode, record.pci_score, record.avg_velocity_kmh, profile).class_id


def build_class_buckets(records: Iterable[SegmentRecord], user_name: str,
                        mode: classifier.ScoringMode = classifier.ScoringMode.PREDICTION,
                        profile: Optional[classifier.VelocityProfile] = None) -> List[ClassBucket]:
    """
    Fold one user's segments into five class buckets.

    Args:
        records: All segment records of the session.
        user_name: User whose segments are aggregated.
        mode: Scoring mode deciding each segment's class. Prediction mode uses
              the stored PCI score.
        profile: Velocity profile for velocity mode.

    Returns:
        List of five ClassBucket, classes 1 to 5 in order. Classes without
        segments keep zero counts.
    """
    buckets = OrderedDict((class_id, ClassBucket(class_id)) for class_id in constants.PCI_CLASSES)

    for record in records:
        if record.user_name != user_name:
            continue
        buckets[segment_class(record, mode, profile)].add(record.avg_velocity_kmh, record.distance_m)

    return list(buckets.values())


def build_user_class_tables(records: Sequence[SegmentRecord], users: Iterable[str],
                            mode: classifier.ScoringMode = classifier.ScoringMode.PREDICTION,
                            profile: Optional[classifier.VelocityProfile] = None) -> Dict[str, List[Dict]]:
    """
    Build the class bucket table (five rows) of every given user.

    Returns:
        Dictionary mapping user name to its list of bucket rows, users in
        sorted order.
    """
    return {
        user: [bucket.to_row(user) for bucket in build_class_buckets(records, user, mode, profile)]
        for user in sorted(users)
    }


def selected_road_rows(records: Iterable[SegmentRecord], selected_roads: AbstractSet[str]) -> List[Dict]:
    """
    List the segments of the selected roads as flat rows.

    Args:
        records: All segment records of the session.
        selected_roads: Set of selected road keys.

    Returns:
        List of row dictionaries (username, road_name, pci_score,
        avg_velocity_kmh, distance_m) in record order.
    """
    return [
        {
            "username": record.user_name,
            "road_name": record.road_name,
            "pci_score": record.pci_score,
            "avg_velocity_kmh": record.avg_velocity_kmh,
            "distance_m": record.distance_m,
        }
        for record in records
        if record.road_key in selected_roads
    ]


@dataclass
class SelectedRoadSummary:
    """Per-road and per-class view of the selected roads' segments."""

    rows: List[Dict] = field(default_factory=list)
    per_road: Dict[str, List[Dict]] = field(default_factory=dict)
    by_class: List[Dict] = field(default_factory=list)

    @property
    def no_data(self) -> bool:
        return not self.rows

    def to_dict(self) -> Dict:
        return {
            "no_data": self.no_data,
            "per_road": self.per_road,
            "by_class": self.by_class,
        }


def summarize_by_class(rows: List[Dict]) -> List[Dict]:
    """
    Group segment rows by PCI score.

    Args:
        rows: Rows produced by selected_road_rows().

    Returns:
        One summary row per PCI score present, ascending: segment_count,
        total_distance_km, mean_velocity_kmh and mean_velocity_mps.
    """
    if not rows:
        return []

    df = pd.DataFrame(rows, columns=SELECTED_ROW_COLUMNS)
    grouped = df.groupby("pci_score", sort=True).agg(
        segment_count=("avg_velocity_kmh", "size"),
        velocity_sum_kmh=("avg_velocity_kmh", "sum"),
        distance_sum_m=("distance_m", "sum"),
    )

    summary = []
    for pci_score, group in grouped.iterrows():
        count = int(group["segment_count"])
        mean_kmh = float(group["velocity_sum_kmh"]) / count
        summary.append({
            "pci_score": int(pci_score),
            "color": constants.CLASS_COLORS[int(pci_score)],
            "segment_count": count,
            "total_distance_km": utils.round_float(utils.meters_to_km(float(group["distance_sum_m"])), 3),
            "mean_velocity_kmh": utils.round_float(mean_kmh, 2),
            "mean_velocity_mps": utils.round_float(utils.kmh_to_mps(mean_kmh), 2),
        })

    return summary


def summarize_selected_roads(records: Sequence[SegmentRecord],
                             selected_roads: AbstractSet[str]) -> SelectedRoadSummary:
    """
    Summarize the segments of the selected roads.

    Args:
        records: All segment records of the session.
        selected_roads: Set of selected road keys.

    Returns:
        SelectedRoadSummary. ``no_data`` is True when the selection is empty
        or matches no segment.
    """
    rows = selected_road_rows(records, selected_roads)
    if not rows:
        return SelectedRoadSummary()

    per_road: Dict[str, List[Dict]] = OrderedDict()
    for row in rows:
        key = make_road_key(row["username"], row["road_name"])
        per_road.setdefault(key, []).append(row)

    return SelectedRoadSummary(
        rows=rows,
        per_road=dict(per_road),
        by_class=summarize_by_class(rows),
    )
