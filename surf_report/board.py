"""
Surfboard recommendation from current conditions.

A wave height x period matrix picks the board; strong onshore wind bumps the
pick one tier towards more volume. With a rider's weight and skill level an
approximate volume (litres) is added.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .const import COMPASS_NEIGHBOURS
from .models import Conditions, SpotProfile

_LOGGER = logging.getLogger(__name__)

BOARD_TYPES = {
    "sup": ("SUP / Foil", "Barely any waves - SUP or foil if you want water time"),
    "longboard": ("Longboard", "Small and mellow - grab the log and cruise"),
    "fish": ("Fish", "Fun little waves - your fish will fly on these"),
    "midlength": ("Mid-length", "All-round conditions - a mid-length is the sweet spot"),
    "shortboard": ("Shortboard", "Proper waves! Time for the shortboard"),
    "any": ("Any board", "Perfect conditions - ride whatever makes you happy"),
    "stepup": ("Step-up", "Getting serious - paddle out on something with extra length"),
    "gun": ("Gun", "Big day. Bring the gun and respect the ocean"),
}

# Most volume first; bump_up() moves one step left
BOARD_ORDER = ("sup", "longboard", "fish", "midlength", "any", "shortboard", "stepup", "gun")

# height range -> period range -> board
MATRIX = {
    "tiny": {"short": "sup", "medium": "sup", "long": "longboard"},
    "small": {"short": "longboard", "medium": "longboard", "long": "fish"},
    "smallmed": {"short": "fish", "medium": "midlength", "long": "shortboard"},
    "medium": {"short": "midlength", "medium": "any", "long": "shortboard"},
    "large": {"short": "midlength", "medium": "shortboard", "long": "stepup"},
    "xl": {"short": "stepup", "medium": "stepup", "long": "gun"},
}

SKILL_MULTIPLIERS = {
    "beginner": 0.62,
    "intermediate": 0.50,
    "advanced": 0.41,
    "expert": 0.36,
}

STRONG_ONSHORE_KMH = 25.0
# used when no spot is supplied
DEFAULT_ONSHORE = frozenset({"W", "NW", "SW", "N"})


def height_range(height: float) -> str:
    if height < 0.3:
        return "tiny"
    if height < 0.6:
        return "small"
    if height < 1.0:
        return "smallmed"
    if height < 1.5:
        return "medium"
    if height < 2.5:
        return "large"
    return "xl"


def period_range(period: float) -> str:
    if period < 8:
        return "short"
    if period < 13:
        return "medium"
    return "long"


def bump_up(board: str) -> str:
    idx = BOARD_ORDER.index(board)
    return BOARD_ORDER[max(0, idx - 1)]


def is_onshore(direction: Optional[str], spot: Optional[SpotProfile] = None) -> bool:
    """True when the wind blows onshore: neither offshore nor one hop from it for the spot."""
    if not direction:
        return False
    if spot is None:
        return direction in DEFAULT_ONSHORE
    if direction in spot.offshore_wind:
        return False
    return not any(n in spot.offshore_wind for n in COMPASS_NEIGHBOURS.get(direction, ()))


def _strong_onshore(conditions: Conditions, spot: Optional[SpotProfile]) -> bool:
    speed = conditions.wind_speed or 0.0
    return speed > STRONG_ONSHORE_KMH and is_onshore(conditions.wind_direction, spot)


def recommend_board(conditions: Conditions, spot: Optional[SpotProfile] = None) -> Dict[str, Any]:
    height = conditions.wave_height_avg or 0.0
    swell_period = conditions.swell.period if conditions.swell is not None else None
    period = swell_period or conditions.wave_period or 0.0

    h_range, p_range = height_range(height), period_range(period)
    board = MATRIX[h_range][p_range]

    if _strong_onshore(conditions, spot):
        board = bump_up(board)
        _LOGGER.debug(
            "Strong onshore %s %s km/h, bumped board to %s",
            conditions.wind_direction,
            conditions.wind_speed,
            board,
        )

    name, reason = BOARD_TYPES[board]
    _LOGGER.debug("Board for %.1fm (%s) / %ss (%s): %s", height, h_range, period, p_range, name)
    return {"board_type": board, "board_name": name, "reason": reason}


def recommend_board_personalized(
    conditions: Conditions,
    weight_kg: Optional[float] = None,
    skill_level: Optional[str] = None,
    spot: Optional[SpotProfile] = None,
) -> Dict[str, Any]:
    """recommend_board() plus a volume estimate when both weight and skill are given."""
    board = recommend_board(conditions, spot)
    if not weight_kg or not skill_level:
        return board

    multiplier = SKILL_MULTIPLIERS.get(str(skill_level).lower(), SKILL_MULTIPLIERS["intermediate"])
    volume = float(weight_kg) * multiplier

    height = conditions.wave_height_avg or 0.0
    if height < 0.6:
        volume += 2
    elif height > 2.0:
        volume -= 1
    if _strong_onshore(conditions, spot):
        volume += 1

    volume = round(volume, 1)
    board["volume"] = {
        "recommended": volume,
        "range": [round(volume - 2, 1), round(volume + 2, 1)],
    }
    _LOGGER.debug("Personalized volume for %skg %s: %.1fL", weight_kg, skill_level, volume)
    return board
