"""
Road Directory for Road Quality Analysis

This module builds the list of user/road combinations shown next to the map:
one entry per road key of the selected users, optionally sorted by date, road
name or user name and filtered by a case-insensitive search.
"""

from dataclasses import dataclass
from enum import Enum
from operator import attrgetter
from typing import AbstractSet, Iterable, List, Optional
import pandas as pd
from . import constants
from .normalizer import SegmentRecord, make_road_key


class SortKey(str, Enum):
    DATE = "date"
    ROAD_NAME = "roadName"
    USER_NAME = "userName"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SearchField(str, Enum):
    NAME = "name"
    ROAD_NAME = "roadName"

    @classmethod
    def parse(cls, value: str) -> "SearchField":
        """Accept the user-name aliases used by the frontend."""
        if value in ("userName", "user_name"):
            return cls.NAME
        if value == "road_name":
            return cls.ROAD_NAME
        return cls(value)


@dataclass(frozen=True)
class DirectoryEntry:
    date: str
    road_name: str
    user_name: str

    @property
    def road_key(self) -> str:
        return make_road_key(self.user_name, self.road_name)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "road_name": self.road_name,
            "user_name": self.user_name,
            "road_key": self.road_key,
        }


@dataclass(frozen=True)
class SortSpec:
    key: SortKey
    direction: SortDirection = SortDirection.ASC

    def __post_init__(self):
        object.__setattr__(self, "key", SortKey(self.key))
        object.__setattr__(self, "direction", SortDirection(self.direction))

    def toggled(self, key: SortKey) -> "SortSpec":
        """
        Return the spec after the user picks ``key`` as sort column.

        Picking the current key flips the direction; picking a new key sorts
        ascending by it.
        """
        key = SortKey(key)
        if key is self.key:
            flipped = SortDirection.DESC if self.direction is SortDirection.ASC else SortDirection.ASC
            return SortSpec(key, flipped)
        return SortSpec(key, SortDirection.ASC)


@dataclass(frozen=True)
class SearchSpec:
    field: SearchField = SearchField.NAME
    query: str = ""

    def __post_init__(self):
        object.__setattr__(self, "field", SearchField.parse(self.field))


def build_directory(records: Iterable[SegmentRecord], selected_users: AbstractSet[str]) -> List[DirectoryEntry]:
    """
    Build one directory entry per road of the selected users.

    Args:
        records: All segment records of the session.
        selected_users: Users whose roads are listed.

    Returns:
        List of DirectoryEntry in first-seen order. When a road key appears in
        several records, the first record's date is kept ("N/A" if it has none).
    """
    entries = {}

    for record in records:
        if record.user_name not in selected_users:
            continue
        if record.road_key in entries:
            continue
        entries[record.road_key] = DirectoryEntry(
            date=record.date or constants.UNKNOWN_DATE,
            road_name=record.road_name,
            user_name=record.user_name,
        )

    return list(entries.values())


def _date_sort_key(entry: DirectoryEntry):
    parsed = pd.to_datetime(entry.date, errors="coerce", utc=True)
    # Unparseable dates sort after every real date
    if pd.isna(parsed):
        return (1, 0)
    return (0, parsed.value)


def sort_entries(entries: List[DirectoryEntry], sort_spec: Optional[SortSpec]) -> List[DirectoryEntry]:
    """
    Sort directory entries.

    Dates are compared as calendar times; road and user names are compared as
    plain strings. The sort is stable in both directions, so entries with
    equal keys keep their relative order.

    Args:
        entries: Directory entries to sort.
        sort_spec: Sort column and direction. None keeps the input order.

    Returns:
        New sorted list.
    """
    if sort_spec is None:
        return list(entries)

    if sort_spec.key is SortKey.DATE:
        key_fn = _date_sort_key
    elif sort_spec.key is SortKey.ROAD_NAME:
        key_fn = attrgetter("road_name")
    else:
        key_fn = attrgetter("user_name")

    return sorted(entries, key=key_fn, reverse=sort_spec.direction is SortDirection.DESC)


def filter_entries(entries: List[DirectoryEntry], search_spec: Optional[SearchSpec]) -> List[DirectoryEntry]:
    """
    Keep the entries whose searched field contains the query, ignoring case.

    An empty query keeps every entry. Relative order is never changed.
    """
    if search_spec is None or not search_spec.query:
        return list(entries)

    query = search_spec.query.casefold()
    if search_spec.field is SearchField.NAME:
        return [entry for entry in entries if query in entry.user_name.casefold()]
    return [entry for entry in entries if query in entry.road_name.casefold()]


def directory_view(records: Iterable[SegmentRecord], selected_users: AbstractSet[str],
                   sort_spec: Optional[SortSpec] = None,
                   search_spec: Optional[SearchSpec] = None) -> List[DirectoryEntry]:
    """Build, sort, then filter the directory."""
    entries = build_directory(records, selected_users)
    entries = sort_entries(entries, sort_spec)
    return filter_entries(entries, search_spec)
