"""
Export Functions for Road Quality Analysis

This module exports the dashboard's statistics tables to CSV for external
analysis.
"""

import csv
import io
from typing import Dict, List
from .aggregation import SelectedRoadSummary

CLASS_BUCKET_COLUMNS = [
    "username",
    "class_id",
    "segment_count",
    "total_distance_km",
    "mean_velocity_kmh",
]

SELECTED_SUMMARY_COLUMNS = [
    "pci_score",
    "segment_count",
    "total_distance_km",
    "mean_velocity_kmh",
    "mean_velocity_mps",
]


def export_class_buckets_csv(tables: Dict[str, List[Dict]]) -> str:
    """
    Export per-user class bucket tables to CSV format.

    Args:
        tables: Output of build_user_class_tables().

    Returns:
        CSV string with one row per user and class.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CLASS_BUCKET_COLUMNS)

    for rows in tables.values():
        for row in rows:
            writer.writerow([row.get(column) for column in CLASS_BUCKET_COLUMNS])

    return buffer.getvalue()


def export_selected_summary_csv(summary: SelectedRoadSummary) -> str:
    """
    Export the per-class summary of the selected roads to CSV format.

    Args:
        summary: Output of summarize_selected_roads().

    Returns:
        CSV string with one row per PCI score. Only the header is written
        when the selection has no data.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(SELECTED_SUMMARY_COLUMNS)

    for row in summary.by_class:
        writer.writerow([row.get(column) for column in SELECTED_SUMMARY_COLUMNS])

    return buffer.getvalue()
