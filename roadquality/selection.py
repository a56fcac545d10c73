"""
Dashboard State for Road Quality Analysis

This module holds the user-controlled state of one dashboard session: which
users and roads are selected, how the road directory is sorted and searched,
and which scoring mode colors the map. Engine functions never read this store
directly; they are handed a snapshot.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Set
from . import classifier
from .directory import SearchField, SearchSpec, SortKey, SortSpec


@dataclass(frozen=True)
class SelectionSnapshot:
    selected_users: FrozenSet[str]
    selected_roads: FrozenSet[str]


@dataclass
class SelectionState:
    """
    Selected users and selected roads, toggled independently.

    ``selected_users`` decides which segments are drawn and which roads the
    directory lists; ``selected_roads`` (road keys) decides which roads feed
    the detailed statistics tables.
    """

    selected_users: Set[str] = field(default_factory=set)
    selected_roads: Set[str] = field(default_factory=set)

    def toggle_user(self, user_name: str) -> bool:
        """Flip a user's membership. Returns True if the user is now selected."""
        return _toggle(self.selected_users, user_name)

    def toggle_road(self, road_key: str) -> bool:
        """Flip a road key's membership. Returns True if the road is now selected."""
        return _toggle(self.selected_roads, road_key)

    def snapshot(self) -> SelectionSnapshot:
        return SelectionSnapshot(frozenset(self.selected_users), frozenset(self.selected_roads))


def _toggle(members: Set[str], item: str) -> bool:
    if item in members:
        members.discard(item)
        return False
    members.add(item)
    return True


@dataclass
class DashboardState:
    """All mutable state of one dashboard session."""

    selection: SelectionState = field(default_factory=SelectionState)
    sort_spec: Optional[SortSpec] = None
    search_spec: SearchSpec = field(default_factory=SearchSpec)
    mode: classifier.ScoringMode = classifier.ScoringMode.PREDICTION
    profile: classifier.VelocityProfile = classifier.DEFAULT_PROFILE

    def toggle_sort(self, key: SortKey) -> SortSpec:
        key = SortKey(key)
        if self.sort_spec is None:
            self.sort_spec = SortSpec(key)
        else:
            self.sort_spec = self.sort_spec.toggled(key)
        return self.sort_spec

    def set_search(self, search_field: str, query: str) -> SearchSpec:
        self.search_spec = SearchSpec(SearchField.parse(search_field), query or "")
        return self.search_spec

    def set_mode(self, mode: str, profile_name: Optional[str] = None) -> None:
        mode = classifier.ScoringMode(mode)
        if profile_name is not None:
            self.profile = classifier.get_profile(profile_name)
        self.mode = mode

    def to_dict(self) -> Dict:
        return {
            "selected_users": sorted(self.selection.selected_users),
            "selected_roads": sorted(self.selection.selected_roads),
            "sort": None if self.sort_spec is None else {
                "key": self.sort_spec.key.value,
                "direction": self.sort_spec.direction.value,
            },
            "search": {"field": self.search_spec.field.value, "query": self.search_spec.query},
            "mode": self.mode.value,
            "profile": self.profile.name,
        }
