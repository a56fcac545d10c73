import pytest

from roadquality import constants
from roadquality.classifier import (
    COARSE_PROFILE,
    URBAN_PROFILE,
    ClassificationError,
    ErrorKind,
    ScoringMode,
    VelocityProfile,
    class_color,
    classify,
    classify_velocity,
    get_profile,
)


@pytest.mark.parametrize("pci", [1, 2, 3, 4, 5])
def test_prediction_mode_uses_stored_score(pci):
    result = classify(ScoringMode.PREDICTION, pci, 12.0)
    assert result.class_id == pci
    assert result.color == constants.CLASS_COLORS[pci]


def test_class_colors_are_a_bijection():
    assert set(constants.CLASS_COLORS) == set(constants.PCI_CLASSES)
    assert len(set(constants.CLASS_COLORS.values())) == len(constants.PCI_CLASSES)


@pytest.mark.parametrize("pci", [0, 6, -1, 3.5, None, True])
def test_prediction_mode_rejects_invalid_score(pci):
    with pytest.raises(ClassificationError) as excinfo:
        classify(ScoringMode.PREDICTION, pci, 12.0)
    assert excinfo.value.kind is ErrorKind.INVALID_SCORE


@pytest.mark.parametrize("velocity, expected", [(0, 5), (2.78, 4), (9.99, 2), (10, 1), (50, 1)])
def test_urban_profile_bins(velocity, expected):
    assert classify_velocity(velocity, URBAN_PROFILE) == expected


@pytest.mark.parametrize("velocity, expected", [(0, 2), (2.5, 3), (4.99, 3), (5, 4), (10, 5)])
def test_coarse_profile_bins(velocity, expected):
    assert classify_velocity(velocity, COARSE_PROFILE) == expected


@pytest.mark.parametrize("velocity_kmh, expected", [(0, 5), (2.78, 4), (9.99, 2), (10, 1)])
def test_velocity_mode_with_urban_profile(velocity_kmh, expected):
    result = classify(ScoringMode.VELOCITY, 3, velocity_kmh, URBAN_PROFILE)
    assert result.class_id == expected
    assert result.color == constants.CLASS_COLORS[expected]


@pytest.mark.parametrize("velocity_kmh, expected", [(0, 2), (2.5, 3), (4.99, 3), (5, 4), (10, 5)])
def test_velocity_mode_with_coarse_profile(velocity_kmh, expected):
    assert classify(ScoringMode.VELOCITY, 3, velocity_kmh, COARSE_PROFILE).class_id == expected


def test_velocity_mode_converts_kmh_to_mps_profile():
    profile = VelocityProfile("mps", (2.5, 5.0), (1, 3, 5), unit=constants.UNIT_MPS)

    # 40 km/h is about 11.1 m/s, inside the open top bin
    assert classify(ScoringMode.VELOCITY, 3, 40.0, profile).class_id == 5
    # 10 km/h is about 2.78 m/s, middle bin
    assert classify(ScoringMode.VELOCITY, 3, 10.0, profile).class_id == 3


def test_velocity_mode_ignores_stored_score():
    assert classify(ScoringMode.VELOCITY, 1, 0.0, URBAN_PROFILE).class_id == 5


def test_kmh_profile_compares_directly():
    profile = VelocityProfile("kmh", (10.0, 20.0), (1, 3, 5), unit=constants.UNIT_KMH)
    assert classify(ScoringMode.VELOCITY, 3, 15.0, profile).class_id == 3


@pytest.mark.parametrize("mode", [ScoringMode.PREDICTION, ScoringMode.VELOCITY])
def test_negative_velocity_is_rejected(mode):
    with pytest.raises(ClassificationError) as excinfo:
        classify(mode, 3, -0.1, URBAN_PROFILE)
    assert excinfo.value.kind is ErrorKind.INVALID_VELOCITY


def test_classification_error_is_a_value_error():
    with pytest.raises(ValueError):
        class_color(9)


def test_mode_accepts_plain_strings():
    assert classify("velocity", 3, 0.0, COARSE_PROFILE).class_id == 2


@pytest.mark.parametrize("thresholds, classes", [
    ((5.0, 2.0), (1, 2, 3)),
    ((1.0, 1.0), (1, 2, 3)),
    ((1.0, 2.0), (1, 2)),
    ((1.0, 2.0), (1, 2, 7)),
    ((), (1,)),
])
def test_invalid_profiles_are_rejected(thresholds, classes):
    with pytest.raises(ValueError):
        VelocityProfile("bad", thresholds, classes)


def test_get_profile():
    assert get_profile("coarse") is COARSE_PROFILE
    with pytest.raises(ValueError):
        get_profile("missing")
