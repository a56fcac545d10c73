"""
Record Normalization for Road Quality Analysis

This module adapts the raw road quality dump into canonical segment records.
Two raw layouts are supported:

- flat rows: ``[user, pci, velocity_kmh, polyline, distance_m]``
- structured roads: ``{"userName", "roadName", "date", "segments": [...]}``

The layout of each entry is resolved once into a ``RawShape`` tag and handed to
the matching adapter. Nothing downstream of this module branches on layout.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
from . import constants
from . import utils

logger = logging.getLogger(__name__)

Coordinate = Tuple[float, float]


class MalformedEntry(ValueError):
    """Raised by an adapter when a raw entry cannot be normalized."""


class RawShape(Enum):
    FLAT = "flat"
    STRUCTURED = "structured"


def make_road_key(user_name: str, road_name: str) -> str:
    """
    Build the composite identifier of a user/road pair.

    Args:
        user_name: Name of the user who recorded the road.
        road_name: Name of the road.

    Returns:
        String of the form ``"<user>-<road>"``.
    """
    return f"{user_name}-{road_name}"


@dataclass(frozen=True)
class SegmentRecord:
    """One classified road segment as recorded by one user."""

    user_name: str
    road_name: str
    date: Optional[str]
    pci_score: int
    avg_velocity_kmh: float
    distance_m: float
    coordinates: Tuple[Coordinate, ...]

    @property
    def road_key(self) -> str:
        return make_road_key(self.user_name, self.road_name)


def detect_shape(entry) -> Optional[RawShape]:
    """
    Identify which raw layout an entry uses.

    Args:
        entry: One item of the raw dump.

    Returns:
        The matching RawShape, or None if the entry matches no known layout.
    """
    if isinstance(entry, Mapping):
        if isinstance(entry.get("segments"), Sequence) and not isinstance(entry.get("segments"), str):
            return RawShape.STRUCTURED
        return None
    if isinstance(entry, (list, tuple)) and len(entry) == 5:
        return RawShape.FLAT
    return None


def parse_coordinates(raw) -> Tuple[Coordinate, ...]:
    """
    Parse a polyline into a tuple of (lat, lon) pairs.

    Points may be ``[lat, lon]`` sequences or ``{"lat": .., "lon": ..}`` mappings.

    Raises:
        MalformedEntry: If the polyline or any point is not usable.
    """
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise MalformedEntry("coordinates must be a sequence of points")

    points = []
    for point in raw:
        if isinstance(point, Mapping):
            lat = utils.safe_float(point.get("lat"))
            lon = utils.safe_float(point.get("lon", point.get("lng")))
        elif isinstance(point, Sequence) and not isinstance(point, str) and len(point) >= 2:
            lat = utils.safe_float(point[0])
            lon = utils.safe_float(point[1])
        else:
            raise MalformedEntry(f"unusable coordinate point: {point!r}")

        if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
            raise MalformedEntry(f"coordinate out of range: {point!r}")
        points.append((lat, lon))

    return tuple(points)


def build_segment_record(user_name, road_name, date, pci, velocity, distance, coordinates) -> SegmentRecord:
    """
    Validate raw field values and build a SegmentRecord.

    Raises:
        MalformedEntry: If any field fails validation.
    """
    if not isinstance(user_name, str) or not user_name.strip():
        raise MalformedEntry("missing user name")
    if not isinstance(road_name, str) or not road_name.strip():
        raise MalformedEntry("missing road name")

    pci_score = utils.safe_int(pci)
    if pci_score not in constants.PCI_CLASSES:
        raise MalformedEntry(f"pci score out of range: {pci!r}")

    velocity_kmh = utils.safe_float(velocity)
    if not utils.is_non_negative(velocity_kmh):
        raise MalformedEntry(f"invalid velocity: {velocity!r}")

    distance_m = utils.safe_float(distance)
    if not utils.is_non_negative(distance_m):
        raise MalformedEntry(f"invalid distance: {distance!r}")

    if date is not None and not isinstance(date, str):
        date = str(date)

    return SegmentRecord(
        user_name=user_name,
        road_name=road_name,
        date=date or None,
        pci_score=pci_score,
        avg_velocity_kmh=velocity_kmh,
        distance_m=distance_m,
        coordinates=parse_coordinates(coordinates),
    )


def adapt_flat(entry: Sequence, index: int) -> List[SegmentRecord]:
    """Adapt a flat ``[user, pci, velocity, polyline, distance]`` row."""
    user_name, pci, velocity, polyline, distance = entry
    return [
        build_segment_record(user_name, constants.UNKNOWN_ROAD, None, pci, velocity, distance, polyline)
    ]


def adapt_structured(entry: Mapping, index: int) -> List[SegmentRecord]:
    """
    Adapt a structured road entry, expanding its segment list.

    A malformed segment is skipped on its own; the road's other segments are kept.
    """
    user_name = entry.get("userName")
    road_name = entry.get("roadName")
    date = entry.get("date")

    records = []
    for seg_idx, segment in enumerate(entry["segments"]):
        try:
            if not isinstance(segment, Mapping):
                raise MalformedEntry("segment is not an object")
            records.append(build_segment_record(
                user_name,
                road_name,
                date,
                segment.get("pci_score"),
                segment.get("avg_velocity"),
                segment.get("distance"),
                segment.get("coordinates"),
            ))
        except MalformedEntry as exc:
            logger.warning("Skipping segment %d of entry %d: %s", seg_idx, index, exc)

    return records


Adapter = Callable[[object, int], List[SegmentRecord]]

DEFAULT_ADAPTERS: Dict[RawShape, Adapter] = {
    RawShape.FLAT: adapt_flat,
    RawShape.STRUCTURED: adapt_structured,
}


def normalize_entries(entries: Iterable, adapters: Optional[Mapping[RawShape, Adapter]] = None,
                      detector: Callable[[object], Optional[RawShape]] = detect_shape) -> List[SegmentRecord]:
    """
    Normalize a raw dump into a flat list of segment records.

    Each entry is tagged with its layout by ``detector`` and passed to the
    adapter registered for that layout. Entries with an unknown layout or that
    an adapter rejects are logged and skipped; the rest of the batch is kept in
    its original order. Adapters signal a bad entry with MalformedEntry;
    KeyError, TypeError and other ValueErrors raised by an adapter skip the
    entry the same way.

    Args:
        entries: Iterable of raw entries in any supported layout.
        adapters: Optional mapping of RawShape to adapter function. Defaults to
                  DEFAULT_ADAPTERS.
        detector: Function resolving an entry to its RawShape.

    Returns:
        List of SegmentRecord, one per leaf segment.
    """
    adapters = DEFAULT_ADAPTERS if adapters is None else adapters
    records: List[SegmentRecord] = []
    skipped = 0

    for index, entry in enumerate(entries):
        shape = detector(entry)
        adapter = adapters.get(shape) if shape is not None else None
        if adapter is None:
            logger.warning("Skipping entry %d: unrecognized layout", index)
            skipped += 1
            continue

        try:
            records.extend(adapter(entry, index))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping entry %d: %s", index, exc)
            skipped += 1

    if skipped:
        logger.info("Normalized %d segments, skipped %d entries", len(records), skipped)

    return records
