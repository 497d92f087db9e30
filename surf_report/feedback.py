"""Recompute an overall score from a stored breakdown and per-factor multipliers."""
from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Tuple

from .const import ADJUSTABLE_FACTORS, DEFAULT_MULTIPLIER, FACTOR_WEIGHTS, MULTIPLIER_RANGE
from .scoring import get_rating, weighted_sum

_LOGGER = logging.getLogger(__name__)


def clamp_multipliers(multipliers: Optional[Mapping[str, object]], factors=None) -> Dict[str, float]:
    """Multiplier per adjustable factor, clamped to MULTIPLIER_RANGE; missing or non-numeric -> 1.0."""
    lo, hi = MULTIPLIER_RANGE
    raw = multipliers or {}
    out: Dict[str, float] = {}
    for factor in factors if factors is not None else ADJUSTABLE_FACTORS:
        value = raw.get(factor, DEFAULT_MULTIPLIER)
        try:
            f = float(value)
        except (TypeError, ValueError):
            _LOGGER.debug("Non-numeric multiplier %r for %s, using %s", value, factor, DEFAULT_MULTIPLIER)
            f = DEFAULT_MULTIPLIER
        if f != f:  # NaN
            f = DEFAULT_MULTIPLIER
        out[factor] = max(lo, min(hi, f))
    return out


def reweight(
    breakdown: Mapping[str, float],
    multipliers: Optional[Mapping[str, object]] = None,
    base_weights: Optional[Mapping[str, float]] = None,
) -> Optional[Tuple[int, str]]:
    """Return (overall, rating) for breakdown under multiplied, renormalized weights.

    base_weights should be the weights the breakdown was scored with
    (Score.weights); FACTOR_WEIGHTS is used when omitted. Only the adjustable
    factors take a multiplier. Returns None when the weights sum to zero.
    """
    base = dict(base_weights if base_weights is not None else FACTOR_WEIGHTS)
    mults = clamp_multipliers(multipliers, [k for k in base if k in ADJUSTABLE_FACTORS])

    adjusted = {k: max(0.0, float(w)) * mults.get(k, DEFAULT_MULTIPLIER) for k, w in base.items()}
    total = sum(adjusted.values())
    if total <= 0:
        _LOGGER.warning("Factor weights sum to zero; cannot reweight")
        return None
    normalized = {k: v / total for k, v in adjusted.items()}

    overall = int(round(max(0.0, min(100.0, weighted_sum(breakdown, normalized)))))
    rating = get_rating(overall)
    _LOGGER.debug("Reweighted breakdown with %s -> %d (%s)", mults, overall, rating)
    return overall, rating
