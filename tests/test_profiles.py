import dataclasses

import pytest

from impairnet.emulation.errors import InvalidProfileError, InvalidSpeedPatternError
from impairnet.emulation.profiles import (
    SPEED_PATTERNS,
    STANDARD_MODELS,
    DeploymentScenario,
    SeverityProfile,
    get_impairment_model,
    get_speed_pattern,
    occurrence_likelihood,
    resolve_profile,
)


def test_speed_pattern_catalog_has_every_combination():
    assert len(SPEED_PATTERNS) == 168
    assert sorted(SPEED_PATTERNS) == list(range(1, 169))
    assert all(p.pattern_id == i for i, p in SPEED_PATTERNS.items())


def test_first_speed_pattern():
    pattern = get_speed_pattern(1)
    assert pattern.side_a_lan_bit_rate == 4_000_000
    assert pattern.side_a_access_link_bit_rate_ab == 128_000
    assert pattern.side_a_access_link_bit_rate_ba == 768_000
    assert pattern.side_b_lan_bit_rate == 4_000_000
    assert pattern.side_a_lan_multiple_access is False
    assert pattern.likelihood == pytest.approx(0.36)


@pytest.mark.parametrize("pattern_id", [0, 169, -1, True, "1", 1.0, None])
def test_invalid_speed_pattern_is_rejected(pattern_id):
    with pytest.raises(InvalidSpeedPatternError):
        get_speed_pattern(pattern_id)


def test_speed_pattern_error_is_a_value_error():
    with pytest.raises(ValueError):
        get_speed_pattern(500)


@pytest.mark.parametrize(
    "selector, expected",
    [
        (SeverityProfile.C, SeverityProfile.C),
        ("a", SeverityProfile.A),
        ("H", SeverityProfile.H),
        (" no_impairment ", SeverityProfile.NO_IMPAIRMENT),
        (0, SeverityProfile.NO_IMPAIRMENT),
        (8, SeverityProfile.H),
    ],
)
def test_resolve_profile(selector, expected):
    assert resolve_profile(selector) is expected


@pytest.mark.parametrize("selector", ["z", "", 9, -1, True, None, 2.0])
def test_invalid_profile_is_rejected(selector):
    with pytest.raises(InvalidProfileError):
        resolve_profile(selector)


def test_every_profile_has_a_model():
    assert set(STANDARD_MODELS) == set(SeverityProfile)


def test_no_impairment_model_is_clean():
    model = get_impairment_model("no_impairment")
    for segment in (
        model.side_a_lan,
        model.side_a_access_link,
        model.side_b_access_link,
        model.side_b_lan,
    ):
        assert segment.percentage_occupancy == 0.0
        assert segment.max_jitter == 0.0
    assert model.core.max_jitter == 0.0
    assert model.core.prob_packet_loss == 0.0
    assert model.core.route_flap_interval == 0.0
    assert model.core.link_failure_interval == 0.0


def test_severity_increases_core_delay():
    delays = [
        get_impairment_model(p).core.base_regional_delay
        for p in SeverityProfile
        if p is not SeverityProfile.NO_IMPAIRMENT
    ]
    assert delays == sorted(delays)


def test_catalog_entries_are_immutable():
    model = get_impairment_model(SeverityProfile.A)
    with pytest.raises(dataclasses.FrozenInstanceError):
        model.core.max_jitter = 1.0
    with pytest.raises(dataclasses.FrozenInstanceError):
        get_speed_pattern(1).likelihood = 50.0


def test_occurrence_likelihood():
    likelihood = occurrence_likelihood("a", 1, DeploymentScenario.A)
    assert likelihood == pytest.approx(50 * 0.36 / 100)
    assert occurrence_likelihood("no_impairment", 1, DeploymentScenario.B) == 0.0
