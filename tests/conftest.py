import json

import pytest

from roadquality.normalizer import SegmentRecord


def make_record(user="u1", road="r1", pci=3, velocity_kmh=20.0, distance_m=500.0, date=None,
                coordinates=((46.0, 14.5), (46.001, 14.501))):
    return SegmentRecord(
        user_name=user,
        road_name=road,
        date=date,
        pci_score=pci,
        avg_velocity_kmh=velocity_kmh,
        distance_m=distance_m,
        coordinates=tuple(coordinates),
    )


@pytest.fixture
def records():
    return [
        make_record("u1", "Main", 1, 10.0, 1000.0, "2024-03-02"),
        make_record("u1", "Main", 5, 30.0, 500.0, "2024-03-05"),
        make_record("u1", "Oak", 3, 20.0, 250.0, "2024-01-15"),
        make_record("u2", "Main", 2, 40.0, 2000.0, "2023-12-31"),
        make_record("u2", "Pine", 2, 20.0, 1000.0, None),
    ]


@pytest.fixture
def raw_dump():
    return [
        ["u1", 4, 25.5, [[46.05, 14.50], [46.06, 14.51]], 120.0],
        {
            "userName": "u2",
            "roadName": "Main",
            "date": "2024-03-02",
            "segments": [
                {"pci_score": 2, "avg_velocity": 15.0, "distance": 300.0,
                 "coordinates": [[46.0, 14.5], [46.001, 14.501]]},
                {"pci_score": 5, "avg_velocity": 42.0, "distance": 800.0,
                 "coordinates": [{"lat": 46.002, "lon": 14.502}, {"lat": 46.003, "lon": 14.503}]},
            ],
        },
        {"unexpected": True},
    ]


@pytest.fixture
def dump_file(tmp_path, raw_dump):
    path = tmp_path / "road_quality.json"
    path.write_text(json.dumps(raw_dump), encoding="utf-8")
    return path
