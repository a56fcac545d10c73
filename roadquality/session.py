"""
Dashboard Builder for Road Quality Analysis

This module combines the engine's views into the payload the dashboard
renders. Every view is recomputed from the record snapshot and a snapshot of
the dashboard state; nothing is cached between calls.
"""

from typing import Dict
from . import aggregation
from . import directory
from . import rendering
from .data_loading import RoadDataSnapshot
from .selection import DashboardState


def build_directory_rows(snapshot: RoadDataSnapshot, state: DashboardState) -> list:
    """Directory view for the state's selected users, sort and search."""
    selected = state.selection.snapshot()
    entries = directory.directory_view(
        snapshot.records,
        selected.selected_users,
        state.sort_spec,
        state.search_spec,
    )
    return [entry.to_dict() for entry in entries]


def build_dashboard_payload(snapshot: RoadDataSnapshot, state: DashboardState) -> Dict:
    """
    Build the complete dashboard payload.

    Steps:
    1. Classifies and styles the selected users' segments for the map
    2. Builds the class bucket table of each selected user
    3. Builds the sorted and filtered road directory
    4. Summarizes the selected roads

    Args:
        snapshot: Loaded road data.
        state: Current dashboard state.

    Returns:
        Dictionary containing:
        - users: all user names in the data
        - state: the dashboard state
        - segments: GeoJSON FeatureCollection of visible segments
        - class_buckets: user name -> five class bucket rows
        - directory: directory entry rows
        - selected_roads: selected-road summary
        - error: snapshot load error, or None

    Raises:
        ClassificationError: If a visible segment cannot be classified.
    """
    selected = state.selection.snapshot()

    styles = rendering.build_segment_styles(
        snapshot.records, selected.selected_users, state.mode, state.profile
    )
    class_buckets = aggregation.build_user_class_tables(
        snapshot.records, selected.selected_users, state.mode, state.profile
    )
    summary = aggregation.summarize_selected_roads(snapshot.records, selected.selected_roads)

    return {
        "users": snapshot.users,
        "state": state.to_dict(),
        "segments": rendering.segments_to_geojson(styles),
        "class_buckets": class_buckets,
        "directory": build_directory_rows(snapshot, state),
        "selected_roads": summary.to_dict(),
        "error": snapshot.error,
    }
