"""
Map Output for Road Quality Analysis

This module converts classified segments into the styles and GeoJSON the map
frontend draws: one colored LineString per visible segment, with a tooltip
describing it.
"""

from typing import AbstractSet, Dict, Iterable, List, Optional
from . import classifier
from . import utils
from .normalizer import SegmentRecord


def build_tooltip(record: SegmentRecord, class_id: int) -> str:
    """
    Format the hover text of a segment.

    Velocity is shown in km/h and distance in km, both with two decimals.
    """
    return (
        f"User: {record.user_name}<br>"
        f"Road: {record.road_name}<br>"
        f"Class: {class_id}<br>"
        f"Velocity: {record.avg_velocity_kmh:.2f} km/h<br>"
        f"Distance: {utils.meters_to_km(record.distance_m):.2f} km"
    )


def build_segment_styles(records: Iterable[SegmentRecord], selected_users: AbstractSet[str],
                         mode: classifier.ScoringMode = classifier.ScoringMode.PREDICTION,
                         profile: Optional[classifier.VelocityProfile] = None) -> List[Dict]:
    """
    Classify every segment of the selected users for drawing.

    Args:
        records: All segment records of the session.
        selected_users: Users whose segments are visible.
        mode: Scoring mode used to color segments.
        profile: Velocity profile for velocity mode.

    Returns:
        List of dictionaries with road_key, class_id, color, tooltip and
        coordinates ((lat, lon) pairs), in record order.

    Raises:
        ClassificationError: If a segment cannot be classified.
    """
    styles = []

    for record in records:
        if record.user_name not in selected_users:
            continue
        result = classifier.classify(mode, record.pci_score, record.avg_velocity_kmh, profile)
        styles.append({
            "road_key": record.road_key,
            "class_id": result.class_id,
            "color": result.color,
            "tooltip": build_tooltip(record, result.class_id),
            "coordinates": [list(point) for point in record.coordinates],
        })

    return styles


def segments_to_geojson(styles: List[Dict]) -> Dict:
    """
    Convert segment styles to a GeoJSON FeatureCollection.

    Segments with fewer than two points cannot form a line and are left out.

    Args:
        styles: Output of build_segment_styles().

    Returns:
        GeoJSON FeatureCollection of LineString features with class_id,
        color, tooltip and road_key properties.
    """
    features = []

    for style in styles:
        coordinates = [[lon, lat] for lat, lon in style["coordinates"]]
        if len(coordinates) < 2:
            continue
        features.append({
            "type": "Feature",
            "geometry": {
                "type": "LineString",
                "coordinates": coordinates,
            },
            "properties": {
                "road_key": style["road_key"],
                "class_id": style["class_id"],
                "color": style["color"],
                "tooltip": style["tooltip"],
            },
        })

    return {
        "type": "FeatureCollection",
        "features": features,
    }
