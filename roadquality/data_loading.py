"""
Data Loading for Road Quality Analysis

This module reads the raw road quality dump from disk and normalizes it into
an immutable snapshot of segment records. A dump that cannot be read leaves
an empty snapshot carrying the error message, so every dashboard view can
still render its empty state.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple
from . import constants
from . import normalizer
from .normalizer import SegmentRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoadDataSnapshot:
    records: Tuple[SegmentRecord, ...] = ()
    source: Optional[str] = None
    error: Optional[str] = None

    @property
    def users(self) -> List[str]:
        """Distinct user names in first-seen order."""
        return list(dict.fromkeys(record.user_name for record in self.records))


def load_raw_dump(file_path: Path = constants.DEFAULT_DATA_FILE) -> List:
    """
    Read the raw dump file.

    The file holds either a JSON list of raw entries or an object whose
    ``"data"`` member is that list.

    Args:
        file_path: Path to the JSON dump. Defaults to DEFAULT_DATA_FILE.

    Returns:
        List of raw entries, not yet normalized.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not JSON or has no entry list.
    """
    with Path(file_path).open("r", encoding="utf-8") as file:
        payload = json.load(file)

    if isinstance(payload, dict):
        payload = payload.get("data")
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of road entries in {file_path}")

    return payload


def load_snapshot(file_path: Path = constants.DEFAULT_DATA_FILE) -> RoadDataSnapshot:
    """
    Load and normalize the dump into a snapshot.

    Args:
        file_path: Path to the JSON dump. Defaults to DEFAULT_DATA_FILE.

    Returns:
        RoadDataSnapshot. On failure its records are empty and ``error``
        describes what went wrong.
    """
    try:
        raw_entries = load_raw_dump(file_path)
    except (OSError, ValueError) as exc:
        logger.error("Failed to load road data from %s: %s", file_path, exc)
        return RoadDataSnapshot(source=str(file_path), error=str(exc))

    records = normalizer.normalize_entries(raw_entries)
    logger.info("Loaded %d segments from %s", len(records), file_path)
    return RoadDataSnapshot(records=tuple(records), source=str(file_path))
