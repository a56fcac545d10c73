"""
FastAPI Web Application for Road Quality Analysis

This module provides a REST API for the road quality dashboard: it serves the
classified map segments, statistics tables and road directory, and holds the
selection, sort, search and scoring-mode state of the dashboard session.
"""

import logging
from typing import Dict, Optional
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import PlainTextResponse
from roadquality import analyze_road_data as ard

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ============================================================================
# APPLICATION SETUP
# ============================================================================

app = FastAPI()

DATA_FILE = ard.DEFAULT_DATA_FILE


# ============================================================================
# SNAPSHOT LOADING & SESSION STATE
# ============================================================================

# Cache for loaded snapshots (data file path -> snapshot)
snapshot_cache: Dict[str, ard.RoadDataSnapshot] = {}

# Selection, sort, search and scoring mode of the dashboard session
dashboard_state = ard.DashboardState()


def load_road_data() -> ard.RoadDataSnapshot:
    """
    Load the road data snapshot, reading the dump only once per file.

    A dump that fails to load yields an empty snapshot with its error set,
    which is cached like any other so the views render their empty state.

    Returns:
        RoadDataSnapshot for DATA_FILE.
    """
    key = str(DATA_FILE)

    # Check cache first
    if key not in snapshot_cache:
        logger.info("Loading road data from %s", DATA_FILE)
        snapshot_cache[key] = ard.load_snapshot(DATA_FILE)

    return snapshot_cache[key]


def bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(exc))


# ============================================================================
# API ROUTES - STATE
# ============================================================================

@app.get("/api/users")
def get_users():
    """
    Get the user names present in the road data.

    Returns:
        List of user names in first-seen order.
    """
    return load_road_data().users


@app.get("/api/state")
def get_state():
    """Get the current selection, sort, search and scoring mode."""
    return dashboard_state.to_dict()


@app.post("/api/selection/users/{user_name}")
def toggle_user(user_name: str):
    """
    Toggle a user on or off the map and directory.

    Args:
        user_name: User to toggle.

    Returns:
        Dictionary with the user name and whether it is now selected.
    """
    selected = dashboard_state.selection.toggle_user(user_name)
    return {"user_name": user_name, "selected": selected}


@app.post("/api/selection/roads/{road_key:path}")
def toggle_road(road_key: str):
    """
    Toggle a road (``<user>-<road>``) in or out of the statistics tables.

    Args:
        road_key: Road key to toggle.

    Returns:
        Dictionary with the road key and whether it is now selected.
    """
    selected = dashboard_state.selection.toggle_road(road_key)
    return {"road_key": road_key, "selected": selected}


@app.post("/api/directory/sort/{key}")
def toggle_sort(key: str):
    """
    Sort the directory by a column, flipping direction if it is already the
    sort column.

    Args:
        key: One of date, roadName, userName.

    Raises:
        HTTPException: If the key is unknown (status 400).
    """
    try:
        sort_spec = dashboard_state.toggle_sort(key)
    except ValueError as exc:
        raise bad_request(exc) from exc
    return {"key": sort_spec.key.value, "direction": sort_spec.direction.value}


@app.post("/api/directory/search")
def set_search(field: str = Query("name", description="name or roadName"),
               query: str = Query("", description="Case-insensitive substring")):
    """
    Set the directory search.

    Raises:
        HTTPException: If the field is unknown (status 400).
    """
    try:
        search_spec = dashboard_state.set_search(field, query)
    except ValueError as exc:
        raise bad_request(exc) from exc
    return {"field": search_spec.field.value, "query": search_spec.query}


@app.post("/api/mode/{mode}")
def set_mode(mode: str, profile: Optional[str] = Query(None, description="Velocity profile name")):
    """
    Switch the scoring mode used to color segments.

    Args:
        mode: prediction or velocity.
        profile: Optional velocity profile name (urban, coarse).

    Raises:
        HTTPException: If the mode or profile is unknown (status 400).
    """
    try:
        dashboard_state.set_mode(mode, profile)
    except ValueError as exc:
        raise bad_request(exc) from exc
    return {"mode": dashboard_state.mode.value, "profile": dashboard_state.profile.name}


# ============================================================================
# API ROUTES - DATA RETRIEVAL
# ============================================================================

@app.get("/api/directory")
def get_directory():
    """
    Get the road directory of the selected users, sorted and filtered by the
    current sort and search.

    Returns:
        List of directory entry dictionaries.
    """
    return ard.build_directory_rows(load_road_data(), dashboard_state)


@app.get("/api/segments")
def get_segments():
    """
    Get the classified segments of the selected users.

    Returns:
        GeoJSON FeatureCollection with class, color and tooltip per segment.

    Raises:
        HTTPException: If a segment cannot be classified (status 422).
    """
    snapshot = load_road_data()
    selected = dashboard_state.selection.snapshot()
    try:
        styles = ard.build_segment_styles(
            snapshot.records, selected.selected_users, dashboard_state.mode, dashboard_state.profile
        )
    except ard.ClassificationError as exc:
        raise HTTPException(status_code=422, detail=f"{exc.kind.value}: {exc}") from exc
    return ard.segments_to_geojson(styles)


@app.get("/api/stats/classes")
def get_class_stats():
    """
    Get the five class buckets of each selected user.

    Returns:
        Dictionary mapping user name to its bucket rows.
    """
    snapshot = load_road_data()
    selected = dashboard_state.selection.snapshot()
    try:
        return ard.build_user_class_tables(
            snapshot.records, selected.selected_users, dashboard_state.mode, dashboard_state.profile
        )
    except ard.ClassificationError as exc:
        raise HTTPException(status_code=422, detail=f"{exc.kind.value}: {exc}") from exc


@app.get("/api/stats/selected")
def get_selected_stats():
    """
    Get the per-road and per-class summary of the selected roads.

    Returns:
        Dictionary with no_data, per_road and by_class.
    """
    selected = dashboard_state.selection.snapshot()
    return ard.summarize_selected_roads(load_road_data().records, selected.selected_roads).to_dict()


@app.get("/api/dashboard")
def get_dashboard():
    """
    Get the complete dashboard payload.

    Returns:
        Dictionary with users, state, segments, class_buckets, directory,
        selected_roads and error.
    """
    try:
        return ard.build_dashboard_payload(load_road_data(), dashboard_state)
    except ard.ClassificationError as exc:
        raise HTTPException(status_code=422, detail=f"{exc.kind.value}: {exc}") from exc


# ============================================================================
# API ROUTES - EXPORT
# ============================================================================

@app.get("/api/export/{table}")
def export_table(table: str):
    """
    Export a statistics table as CSV.

    Args:
        table: ``classes`` for the class bucket tables of the selected users,
               ``selected`` for the per-class summary of the selected roads.

    Returns:
        PlainTextResponse: CSV file with Content-Disposition header
        for download. Filename: {table}.csv

    Raises:
        HTTPException: If the table is unknown (status 404).
    """
    if table == "classes":
        body = ard.export_class_buckets_csv(get_class_stats())
    elif table == "selected":
        selected = dashboard_state.selection.snapshot()
        summary = ard.summarize_selected_roads(load_road_data().records, selected.selected_roads)
        body = ard.export_selected_summary_csv(summary)
    else:
        raise HTTPException(status_code=404, detail=f"Unknown table: {table}")

    headers = {"Content-Disposition": f"attachment; filename={table}.csv"}
    return PlainTextResponse(
        body,
        media_type="text/csv",
        headers=headers
    )


# ============================================================================
# RUN INSTRUCTIONS
# ============================================================================
# Run with: uvicorn app:app --reload
