"""Unit conversion helper utilities shared by the provider adapters.

All numeric functions attempt to coerce to float and return None on failure.
Canonical units used by the pipeline:
- wave / swell height: meters (m)
- wind and gust speed: kilometers/hour (km/h)
- temperature: Celsius (°C)
- periods: seconds (s)
- directions: 8-point compass labels
"""
from typing import Any, Optional
import logging
import math

from .const import CLOUD_COVER_LABELS, COMPASS_POINTS

_LOGGER = logging.getLogger(__name__)


def _to_float(v: Any) -> Optional[float]:
    try:
        if v is None:
            return None
        f = float(v)
    except (TypeError, ValueError):
        return None
    if math.isnan(f):
        return None
    return f


# ---- Speed ----

def m_s_to_kmh(v: Any) -> Optional[float]:
    """Convert m/s to km/h."""
    f = _to_float(v)
    if f is None:
        return None
    return f * 3.6


def mph_to_kmh(v: Any) -> Optional[float]:
    """Convert mph to km/h."""
    f = _to_float(v)
    if f is None:
        return None
    return f * 1.609344


def knots_to_kmh(v: Any) -> Optional[float]:
    """Convert knots to km/h."""
    f = _to_float(v)
    if f is None:
        return None
    return f * 1.852


def speed_to_kmh(v: Any, unit_hint: Optional[str]) -> Optional[float]:
    """Convert a speed with a provider unit hint into km/h.

    Unknown or missing hints are assumed to already be km/h.
    """
    f = _to_float(v)
    if f is None:
        return None
    u = str(unit_hint or "km/h").strip().lower()
    if u in ("m/s", "mps", "m s-1"):
        return m_s_to_kmh(f)
    if u in ("mph", "mi/h"):
        return mph_to_kmh(f)
    if u in ("kn", "kt", "knots"):
        return knots_to_kmh(f)
    return f


# ---- Rounding to canonical precision ----

def round_m(v: Any) -> Optional[float]:
    """Round a length to one decimal (canonical metre precision)."""
    f = _to_float(v)
    if f is None:
        return None
    return round(f, 1)


def round_int(v: Any) -> Optional[int]:
    """Round to the nearest integer (canonical precision for km/h, °C, s)."""
    f = _to_float(v)
    if f is None:
        return None
    return int(round(f))


# ---- Direction ----

def degrees_to_compass(deg: Any) -> Optional[str]:
    """Convert a bearing in degrees into one of the eight compass points."""
    f = _to_float(deg)
    if f is None:
        return None
    idx = int(round((f % 360.0) / 45.0)) % 8
    return COMPASS_POINTS[idx]


def normalize_compass(value: Any) -> Optional[str]:
    """Return an 8-point compass label for a label or bearing, or None."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return degrees_to_compass(value)
    label = str(value).strip().upper()
    if label in COMPASS_POINTS:
        return label
    # 16-point labels collapse to their dominant 8-point neighbour ("NNE" -> "N")
    if len(label) == 3 and label[1:] in COMPASS_POINTS:
        return label[0] if label[0] in COMPASS_POINTS else label[1:]
    _LOGGER.debug("Unrecognised compass label %r", value)
    return None


# ---- Cloud ----

def cloud_cover_label(percent: Any) -> Optional[str]:
    """Map cloud cover percent (0..100) to a label."""
    f = _to_float(percent)
    if f is None:
        return None
    for upper, label in CLOUD_COVER_LABELS:
        if f < upper:
            return label
    return CLOUD_COVER_LABELS[-1][1]
