"""
Surf quality scoring.

score() turns a reconciled Observation into a 0-100 Score for a SpotProfile:

  - six independent 0-100 sub-scores, each from its own nonlinear curve:
      wave_height, wave_period, swell_quality, wind_speed, wind_direction, wave_direction
  - a confidence sub-score from the number of corroborating sources
  - a weighted sum over the integer breakdown (FACTOR_WEIGHTS, normalized),
    clamped to [0, 100] and forced to 0 when there are no rideable waves
  - a rating tier from RATING_TIERS and a templated, deterministic explanation

All functions are pure; nothing here touches the network or shared state.
"""
from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Mapping, Optional

from .const import (
    COMPASS_NEIGHBOURS,
    CONFIDENCE_BY_SOURCES,
    CONFIDENCE_MAX,
    CONFIDENCE_MAX_SOURCES,
    DIRECTION_ADJACENT_SCORE,
    DIRECTION_MATCH_SCORE,
    DIRECTION_OTHER_SCORE,
    DIRECTION_UNKNOWN_SCORE,
    FACTOR_CONFIDENCE,
    FACTOR_SWELL_QUALITY,
    FACTOR_WAVE_DIRECTION,
    FACTOR_WAVE_HEIGHT,
    FACTOR_WAVE_PERIOD,
    FACTOR_WEIGHTS,
    FACTOR_WIND_DIRECTION,
    FACTOR_WIND_SPEED,
    FLAT_THRESHOLD_M,
    GUST_ABSOLUTE_PENALTIES,
    GUST_RATIO_PENALTIES,
    HEIGHT_BAND_FLOOR,
    HEIGHT_BELOW_MIN_EXPONENT,
    HEIGHT_OVERSIZE_SLOPE,
    PERIOD_AT_MAX,
    PERIOD_AT_MIN,
    PERIOD_BELOW_MIN_EXPONENT,
    PERIOD_PLATEAU_FLOOR,
    RATING_TIERS,
    SWELL_BASE_SCORE,
    SWELL_GOOD_HEIGHT_M,
    SWELL_TINY_HEIGHT_M,
    WIND_BLOWN_OUT_SLOPE,
    WIND_LIGHT_KMH,
    WIND_MODERATE_KMH,
    WIND_SCORE_AT_MODERATE,
    WIND_SCORE_AT_STRONG,
    WIND_SPEED_UNKNOWN_SCORE,
    WIND_STRONG_KMH,
)
from .exceptions import MissingDataError
from .models import Band, Conditions, Score, SpotProfile

_LOGGER = logging.getLogger(__name__)


def _clamp_0_100(x: float) -> float:
    return max(0.0, min(100.0, float(x)))


def _ramp(value: float, start: float, end: float, score_start: float, score_end: float) -> float:
    """Linear interpolation of value across [start, end]."""
    if end <= start:
        return score_end
    return score_start + (score_end - score_start) * ((value - start) / (end - start))


# ---- Sub-score curves ----

def score_wave_height(height: Optional[float], band: Band) -> float:
    """Score wave height (0-100) against the spot's min/ideal/max band."""
    if height is None or height <= FLAT_THRESHOLD_M:
        return 0.0
    if height < band.min:
        span = max(band.min - FLAT_THRESHOLD_M, 1e-6)
        ratio = (height - FLAT_THRESHOLD_M) / span
        return _clamp_0_100(HEIGHT_BAND_FLOOR * ratio ** HEIGHT_BELOW_MIN_EXPONENT)
    if height <= band.ideal:
        return _ramp(height, band.min, band.ideal, HEIGHT_BAND_FLOOR, 100.0)
    if height <= band.max:
        return _ramp(height, band.ideal, band.max, 100.0, HEIGHT_BAND_FLOOR)
    # oversize: steeper decline, hazardous well before double the band max
    over = (height - band.max) / max(band.max, 1e-6)
    return _clamp_0_100(HEIGHT_BAND_FLOOR - HEIGHT_OVERSIZE_SLOPE * over)


def score_wave_period(period: Optional[float], band: Band) -> float:
    """Score wave period (0-100). Long period is never penalized much."""
    if period is None or period <= 0:
        return 0.0
    if period < band.min:
        ratio = period / max(band.min, 1e-6)
        return _clamp_0_100(PERIOD_AT_MIN * ratio ** PERIOD_BELOW_MIN_EXPONENT)
    if period <= band.ideal:
        return _ramp(period, band.min, band.ideal, PERIOD_AT_MIN, 100.0)
    if period <= band.max:
        return _ramp(period, band.ideal, band.max, 100.0, PERIOD_AT_MAX)
    return max(PERIOD_PLATEAU_FLOOR, PERIOD_AT_MAX - 0.5 * (period - band.max))


def score_direction(direction: Optional[str], preferred: FrozenSet[str]) -> float:
    """Score a compass direction against a preferred set (one-hop adjacency)."""
    if not direction:
        return DIRECTION_UNKNOWN_SCORE
    if direction in preferred:
        return DIRECTION_MATCH_SCORE
    if any(n in preferred for n in COMPASS_NEIGHBOURS.get(direction, ())):
        return DIRECTION_ADJACENT_SCORE
    return DIRECTION_OTHER_SCORE


def score_swell_quality(conditions: Conditions, spot: SpotProfile) -> float:
    """Score groundswell quality; falls back to wave period when no swell data exists."""
    score = SWELL_BASE_SCORE
    swell = conditions.swell
    if swell is not None and swell.height is not None:
        good_lo, good_hi = SWELL_GOOD_HEIGHT_M
        if good_lo <= swell.height <= good_hi:
            score += 10.0
        elif swell.height < SWELL_TINY_HEIGHT_M:
            score -= 15.0

        period = swell.period if swell.period is not None else conditions.wave_period
        if period is not None:
            if period >= 13:
                score += 30.0  # groundswell
            elif period >= 10:
                score += 20.0
            elif period >= 8:
                score += 5.0
            elif period >= 6:
                score -= 10.0
            else:
                score -= 25.0  # short-period wind swell

        if swell.direction:
            if swell.direction in spot.best_swell:
                score += 10.0
            elif any(n in spot.best_swell for n in COMPASS_NEIGHBOURS.get(swell.direction, ())):
                score += 5.0
    else:
        # weaker proxy: general wave period only
        period = conditions.wave_period
        if period is not None:
            if period >= 12:
                score += 25.0
            elif period >= 9:
                score += 12.0
            elif period < 7:
                score -= 20.0
    return _clamp_0_100(score)


def score_wind_speed(speed: Optional[float], gusts: Optional[float] = None) -> float:
    """Score wind speed in km/h (0-100) with gust-ratio and absolute gust penalties."""
    if speed is None:
        return WIND_SPEED_UNKNOWN_SCORE
    speed = max(0.0, float(speed))
    if speed <= WIND_LIGHT_KMH:
        score = 100.0
    elif speed <= WIND_MODERATE_KMH:
        score = _ramp(speed, WIND_LIGHT_KMH, WIND_MODERATE_KMH, 100.0, WIND_SCORE_AT_MODERATE)
    elif speed <= WIND_STRONG_KMH:
        score = _ramp(speed, WIND_MODERATE_KMH, WIND_STRONG_KMH, WIND_SCORE_AT_MODERATE, WIND_SCORE_AT_STRONG)
    else:
        score = WIND_SCORE_AT_STRONG - WIND_BLOWN_OUT_SLOPE * (speed - WIND_STRONG_KMH)

    if gusts is not None:
        if speed >= 1.0:
            ratio = float(gusts) / speed
            for threshold, penalty in GUST_RATIO_PENALTIES:
                if ratio > threshold:
                    score -= penalty
                    break
        for threshold, penalty in GUST_ABSOLUTE_PENALTIES:
            if gusts > threshold:
                score -= penalty
                break
    return _clamp_0_100(score)


def score_confidence(source_count: int) -> float:
    """Step function of corroborating source count, capped at CONFIDENCE_MAX_SOURCES."""
    count = max(0, int(source_count))
    if count >= CONFIDENCE_MAX_SOURCES:
        return CONFIDENCE_MAX
    return CONFIDENCE_BY_SOURCES.get(count, 0.0)


# ---- Weights and tiers ----

def resolve_weights(spot: Optional[SpotProfile] = None, weights: Optional[Mapping[str, float]] = None) -> Dict[str, float]:
    """FACTOR_WEIGHTS with spot and caller overrides applied, normalized to sum 1.0.

    Raises ValueError when the overrides leave every factor at zero.
    """
    resolved = dict(FACTOR_WEIGHTS)
    overrides = {}
    if spot is not None:
        overrides.update(spot.weight_overrides())
    if weights:
        overrides.update(weights)
    for k, v in overrides.items():
        if k not in resolved:
            _LOGGER.debug("Ignoring weight for unknown factor %r", k)
            continue
        try:
            resolved[k] = max(0.0, float(v))
        except (TypeError, ValueError):
            _LOGGER.debug("Ignoring non-numeric weight %r for %s", v, k)
    total = sum(resolved.values())
    if total <= 0:
        _LOGGER.error("Factor weights sum to zero: %s", resolved)
        raise ValueError("Factor weights must not all be zero")
    return {k: v / total for k, v in resolved.items()}


def weighted_sum(breakdown: Mapping[str, float], weights: Mapping[str, float]) -> float:
    """Weighted sum of breakdown values; weights are used as given."""
    return sum(float(w) * float(breakdown.get(k, 0.0)) for k, w in weights.items())


def get_rating(score: float) -> str:
    """Map an overall score to its rating tier."""
    for minimum, label in RATING_TIERS:
        if score >= minimum:
            return label
    return RATING_TIERS[-1][1]


# ---- Explanation ----

def _size_phrase(height: float) -> str:
    if height < 0.3:
        return "Ankle-high"
    if height < 0.6:
        return "Knee-to-waist high"
    if height < 1.0:
        return "Waist-to-chest high"
    if height < 1.5:
        return "Chest-to-head high"
    if height < 2.0:
        return "Head-high"
    if height < 2.5:
        return "Overhead"
    return "Double-overhead"


def _swell_phrase(swell_score: int, period: Optional[float]) -> str:
    if swell_score >= 80:
        phrase = "clean groundswell"
    elif swell_score >= 60:
        phrase = "decent swell"
    elif swell_score >= 40:
        phrase = "mixed swell"
    else:
        phrase = "weak wind swell"
    if period is not None:
        phrase += f" at {int(round(period))}s"
    return phrase


def _wind_phrase(conditions: Conditions, speed_score: int, dir_score: int) -> str:
    if conditions.wind_speed is None:
        return "unknown wind"
    if speed_score >= 90:
        strength = "light"
    elif speed_score >= 60:
        strength = "moderate"
    elif speed_score >= 30:
        strength = "strong"
    else:
        strength = "blown-out"
    if conditions.wind_direction is None:
        return f"{strength} wind"
    if dir_score >= DIRECTION_MATCH_SCORE:
        orientation = "offshore"
    elif dir_score >= DIRECTION_ADJACENT_SCORE:
        orientation = "cross-shore"
    else:
        orientation = "onshore"
    return f"{strength} {orientation} wind"


def build_explanation(conditions: Conditions, spot: SpotProfile, breakdown: Mapping[str, int]) -> str:
    """Deterministic narrative assembled from templated fragments."""
    height = conditions.wave_height_avg
    if height is None:
        return "No wave data available."
    if height <= FLAT_THRESHOLD_M:
        return "Flat - no rideable waves."

    period = conditions.swell.period if conditions.swell and conditions.swell.period is not None else conditions.wave_period
    text = "{size} waves ({height:.1f}m) with {swell} and {wind}.".format(
        size=_size_phrase(height),
        height=height,
        swell=_swell_phrase(breakdown[FACTOR_SWELL_QUALITY], period),
        wind=_wind_phrase(conditions, breakdown[FACTOR_WIND_SPEED], breakdown[FACTOR_WIND_DIRECTION]),
    )
    if height < spot.wave_height.min:
        text += " Small for this spot."
    elif height > spot.wave_height.max:
        text += " Bigger than this spot handles well."
    return text


# ---- Entry point ----

def score(
    observation: Conditions,
    spot: SpotProfile,
    source_count: int,
    weights: Optional[Mapping[str, float]] = None,
) -> Score:
    """Score an observation for a spot. Raises MissingDataError on malformed input."""
    if not isinstance(observation, Conditions):
        raise MissingDataError(f"Expected an Observation, got {type(observation).__name__}")
    if not isinstance(spot, SpotProfile):
        raise MissingDataError(f"Expected a SpotProfile, got {type(spot).__name__}")

    wave_dir = None
    if observation.swell is not None and observation.swell.direction:
        wave_dir = observation.swell.direction
    else:
        wave_dir = observation.wave_direction

    components = {
        FACTOR_WAVE_HEIGHT: score_wave_height(observation.wave_height_avg, spot.wave_height),
        FACTOR_WAVE_PERIOD: score_wave_period(observation.wave_period, spot.wave_period),
        FACTOR_SWELL_QUALITY: score_swell_quality(observation, spot),
        FACTOR_WIND_SPEED: score_wind_speed(observation.wind_speed, observation.wind_gusts),
        FACTOR_WIND_DIRECTION: score_direction(observation.wind_direction, spot.offshore_wind),
        FACTOR_WAVE_DIRECTION: score_direction(wave_dir, spot.best_swell),
        FACTOR_CONFIDENCE: score_confidence(source_count),
    }
    breakdown = {k: int(round(v)) for k, v in components.items()}

    resolved = resolve_weights(spot, weights)
    overall = int(round(_clamp_0_100(weighted_sum(breakdown, resolved))))

    height = observation.wave_height_avg
    if height is None or height <= FLAT_THRESHOLD_M:
        overall = 0

    result = Score(
        overall=overall,
        rating=get_rating(overall),
        breakdown=breakdown,
        explanation=build_explanation(observation, spot, breakdown),
        weights=resolved,
    )
    _LOGGER.debug("Scored %s: %d (%s) breakdown=%s", spot.id, result.overall, result.rating, breakdown)
    return result
