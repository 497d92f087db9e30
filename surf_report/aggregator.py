"""
Reconcile per-source readings into one consensus observation.

Rules applied per field:
  - numeric scalars: arithmetic mean of the readings that supplied a value,
    rounded to canonical precision (one decimal for metres, integer otherwise).
    Identical inputs pass through untouched.
  - directions and cloud label: mode, ties go to the first value encountered.
  - wave height range (when any source reports one): derived from the final
    average (avg +/- half-width), never averaged independently, so min can
    never exceed max.
  - plausibility cap: combined wave height is capped at swell height x 1.4.

The same rules are applied per forecast hour by reconcile_timeline().
Everything here is pure and order independent (mean and mode are commutative
apart from the documented tie-break).
"""
from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from .const import SWELL_CAP_MULTIPLIER, WAVE_RANGE_HALF_WIDTH_M
from .models import Conditions, HourlyEntry, HourlyReading, Observation, Reading, Swell
from .unit_helpers import round_int, round_m

_LOGGER = logging.getLogger(__name__)


def _present(values: Iterable[Any]) -> List[Any]:
    return [v for v in values if v is not None]


def _mean(values: Sequence[float]) -> Optional[float]:
    """Unrounded mean; identical inputs pass through untouched."""
    if not values:
        return None
    first = values[0]
    if all(v == first for v in values):
        return first
    return sum(values) / len(values)


def _reduce_numeric(values: Sequence[float], rounder: Callable[[Any], Any]) -> Optional[float]:
    """Mean of the supplied values at canonical precision; None when nothing was supplied."""
    if not values:
        return None
    first = values[0]
    if all(v == first for v in values):
        return first
    return rounder(sum(values) / len(values))


def _mode(values: Sequence[str]) -> Optional[str]:
    """Most frequent value; ties resolved by first appearance."""
    if not values:
        return None
    counts: Dict[str, int] = {}
    for v in values:
        counts[v] = counts.get(v, 0) + 1
    best = None
    best_count = 0
    # dicts keep insertion order, so this walks values in first-seen order
    for v, c in counts.items():
        if c > best_count:
            best, best_count = v, c
    return best


def _height_of(c: Conditions) -> Optional[float]:
    if c.wave_height_avg is not None:
        return c.wave_height_avg
    if c.wave_height_min is not None and c.wave_height_max is not None:
        return (c.wave_height_min + c.wave_height_max) / 2.0
    return None


def _reconcile_swell(items: Sequence[Conditions]) -> Optional[Swell]:
    swells = [c.swell for c in items if c.swell is not None and c.swell.height is not None]
    if not swells:
        return None
    return Swell(
        height=_reduce_numeric(_present(s.height for s in swells), round_m),
        period=_reduce_numeric(_present(s.period for s in swells), round_int),
        direction=_mode(_present(s.direction for s in swells)),
    )


def reconcile(readings: Sequence[Conditions]) -> Observation:
    """Merge readings (or any conditions records) into one Observation.

    Always returns an Observation; fields nobody supplied stay None.
    """
    items = list(readings)
    obs = Observation()
    if not items:
        return obs

    swell = _reconcile_swell(items)
    obs.swell = swell

    heights = _present(_height_of(c) for c in items)
    avg = _mean(heights)
    capped = False
    # the cap applies to the naive mean, before rounding
    if avg is not None and swell is not None and swell.height is not None:
        cap = swell.height * SWELL_CAP_MULTIPLIER
        if avg > cap:
            _LOGGER.debug("Capping wave height %.3fm to %.3fm (swell %.2fm)", avg, cap, swell.height)
            avg = cap
            capped = True
    if avg is not None and not capped:
        avg = _reduce_numeric(heights, round_m)
    obs.wave_height_avg = avg

    has_range = any(c.wave_height_min is not None or c.wave_height_max is not None for c in items)
    if avg is not None and has_range:
        ranges = []
        for c in items:
            if c.wave_height_min is not None and c.wave_height_max is not None:
                rng = (c.wave_height_min, c.wave_height_max)
                if rng not in ranges:
                    ranges.append(rng)
        if not capped and len(ranges) == 1 and ranges[0][0] <= avg <= ranges[0][1]:
            # a single agreed range cannot invert; keep it as supplied
            obs.wave_height_min, obs.wave_height_max = ranges[0]
        else:
            obs.wave_height_min = round(max(0.0, avg - WAVE_RANGE_HALF_WIDTH_M), 1)
            obs.wave_height_max = round(avg + WAVE_RANGE_HALF_WIDTH_M, 1)

    obs.wave_period = _reduce_numeric(_present(c.wave_period for c in items), round_int)
    obs.wave_direction = _mode(_present(c.wave_direction for c in items))
    obs.wind_speed = _reduce_numeric(_present(c.wind_speed for c in items), round_int)
    obs.wind_direction = _mode(_present(c.wind_direction for c in items))
    obs.wind_gusts = _reduce_numeric(_present(c.wind_gusts for c in items), round_int)
    obs.air_temp = _reduce_numeric(_present(c.air_temp for c in items), round_int)
    obs.water_temp = _reduce_numeric(_present(c.water_temp for c in items), round_int)
    obs.cloud_cover = _mode(_present(c.cloud_cover for c in items))
    return obs


def hour_key(ts: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Truncate a timestamp to its hour (minutes and below discarded).

    Aware timestamps are first converted to tz so sources reporting in
    different zones (UTC vs. a half-hour local offset) land on the same hour.
    """
    if tz is not None and ts.tzinfo is not None:
        ts = ts.astimezone(tz)
    return ts.replace(minute=0, second=0, microsecond=0)


def reconcile_timeline(readings: Sequence[Reading]) -> List[HourlyEntry]:
    """Merge every reading's hourly sequence into one timeline, one entry per hour.

    Entries from different sources for the same hour are reconciled with the
    same rules as reconcile(); the result is sorted by ascending hour.
    """
    groups: Dict[datetime, List[HourlyReading]] = {}
    # hours are truncated in the zone of the first aware timestamp seen
    ref_tz = None
    for reading in readings:
        for hourly in reading.hourly or ():
            if hourly.time is None:
                continue
            if ref_tz is None and hourly.time.tzinfo is not None:
                ref_tz = hourly.time.tzinfo
            groups.setdefault(hour_key(hourly.time, ref_tz), []).append(hourly)

    timeline = [HourlyEntry(time=k, observation=reconcile(v)) for k, v in groups.items()]
    timeline.sort(key=lambda e: e.time)
    _LOGGER.debug("Reconciled %d hourly entries from %d readings", len(timeline), len(readings))
    return timeline
