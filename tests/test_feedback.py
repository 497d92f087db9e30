import pytest

from surf_report.const import ADJUSTABLE_FACTORS, FACTOR_WEIGHTS
from surf_report.feedback import clamp_multipliers, reweight
from surf_report.scoring import score

from .conftest import make_observation, make_spot

BREAKDOWN = {
    "wave_height": 100,
    "wave_period": 0,
    "swell_quality": 0,
    "wind_speed": 0,
    "wind_direction": 0,
    "wave_direction": 0,
    "confidence": 0,
}


def test_identity_multipliers_reproduce_score(spot):
    obs = make_observation(wind_speed=18, wind_direction="NE", wave_period=9)
    result = score(obs, spot, source_count=2)
    assert reweight(result.breakdown) == (result.overall, result.rating)
    assert reweight(result.breakdown, {k: 1.0 for k in FACTOR_WEIGHTS}) == (result.overall, result.rating)


def test_identity_with_spot_weight_overrides():
    spot = make_spot(id="ocean_beach_sf", weights=(("wave_height", 0.15), ("wave_period", 0.25)))
    obs = make_observation(wave_height_avg=2.0, wave_period=9, wind_speed=18, wind_direction="W")
    result = score(obs, spot, source_count=2)
    assert reweight(result.breakdown, base_weights=result.weights) == (result.overall, result.rating)


def test_identity_with_caller_weights(spot):
    obs = make_observation(wave_height_avg=2.0, wave_period=9, wind_speed=18, wind_direction="W")
    result = score(obs, spot, source_count=2, weights={"wind_speed": 0.5, "confidence": 0.0})
    assert reweight(result.breakdown, None, result.weights) == (result.overall, result.rating)


def test_multiplier_shifts_emphasis():
    assert reweight(BREAKDOWN) == (20, "FLAT")
    # 0.4 / 1.2 of the total weight
    assert reweight(BREAKDOWN, {"wave_height": 2.0}) == (33, "POOR")


def test_zero_base_weights_return_none():
    assert reweight(BREAKDOWN, None, {k: 0.0 for k in FACTOR_WEIGHTS}) is None


def test_multipliers_cannot_remove_a_factor():
    # every adjustable factor floors at 0.2x: 0.04 / 0.24 of the total weight
    assert reweight(BREAKDOWN, {k: 0 for k in ADJUSTABLE_FACTORS}) == (17, "FLAT")


def test_confidence_multiplier_is_ignored():
    breakdown = dict(BREAKDOWN, wave_height=0, confidence=100)
    # wave_height floors at 0.2x: 0.05 / 0.84 of the total weight
    assert reweight(breakdown, {"wave_height": 0.0, "confidence": 0.0}) == (6, "FLAT")


def test_clamp_multipliers():
    clamped = clamp_multipliers(
        {"wave_height": 10, "wind_speed": "abc", "swell_quality": -1, "wave_period": None, "confidence": 2.0}
    )
    assert clamped["wave_height"] == 2.5
    assert clamped["wind_speed"] == 1.0
    assert clamped["swell_quality"] == 0.2
    assert clamped["wave_period"] == 1.0
    assert clamped["wind_direction"] == 1.0
    assert set(clamped) == set(ADJUSTABLE_FACTORS)


def test_custom_base_weights():
    base = {"wave_height": 1.0, "confidence": 1.0}
    breakdown = {"wave_height": 80, "confidence": 40}
    assert reweight(breakdown, None, base) == (60, "FAIR_TO_GOOD")
    # (80 * 2.5 + 40) / 3.5
    assert reweight(breakdown, {"wave_height": 2.5}, base) == (69, "FAIR_TO_GOOD")
    assert reweight(breakdown, None, {"wave_height": 0.0, "confidence": 0.0}) is None
