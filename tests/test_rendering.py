import pytest

from conftest import make_record
from roadquality.classifier import URBAN_PROFILE, ClassificationError, ScoringMode
from roadquality.rendering import build_segment_styles, build_tooltip, segments_to_geojson


def test_tooltip_format():
    record = make_record("u1", "Main", 4, 23.456, 1234.0)
    assert build_tooltip(record, 4) == (
        "User: u1<br>Road: Main<br>Class: 4<br>Velocity: 23.46 km/h<br>Distance: 1.23 km"
    )


def test_styles_only_for_selected_users(records):
    styles = build_segment_styles(records, {"u2"})

    assert [s["road_key"] for s in styles] == ["u2-Main", "u2-Pine"]
    assert styles[0]["class_id"] == 2
    assert styles[0]["color"] == "#fdae61"


def test_styles_follow_scoring_mode(records):
    styles = build_segment_styles(records, {"u1"}, ScoringMode.VELOCITY, URBAN_PROFILE)
    # 10, 30 and 20 km/h all reach the open top bin
    assert [s["class_id"] for s in styles] == [1, 1, 1]

    slow = [make_record("u1", "Main", 5, 4.0)]
    assert build_segment_styles(slow, {"u1"}, ScoringMode.VELOCITY, URBAN_PROFILE)[0]["class_id"] == 4


def test_styles_surface_classification_errors():
    record = make_record(velocity_kmh=-3.0)
    with pytest.raises(ClassificationError):
        build_segment_styles([record], {"u1"})


def test_geojson_uses_lon_lat_and_skips_points():
    records = [
        make_record("u1", "Main", coordinates=((46.0, 14.5), (46.1, 14.6))),
        make_record("u1", "Dot", coordinates=((46.0, 14.5),)),
    ]
    geojson = segments_to_geojson(build_segment_styles(records, {"u1"}))

    assert geojson["type"] == "FeatureCollection"
    assert len(geojson["features"]) == 1
    feature = geojson["features"][0]
    assert feature["geometry"]["coordinates"] == [[14.5, 46.0], [14.6, 46.1]]
    assert feature["properties"]["road_key"] == "u1-Main"


def test_no_selected_users_renders_empty_collection(records):
    assert segments_to_geojson(build_segment_styles(records, set())) == {
        "type": "FeatureCollection",
        "features": [],
    }
