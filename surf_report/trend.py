"""
Short-term trend analysis over the reconciled hourly timeline.

The timeline is sliced into fixed named blocks (TREND_BLOCKS) for today and
tomorrow; each block is reduced with the aggregator and scored with the same
scorer used for current conditions. The result names the best upcoming
window, a direction tag relative to the current score, and a short message.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence

from .aggregator import reconcile
from .const import (
    TREND_BLOCKS,
    TREND_DECLINING,
    TREND_IMPROVING,
    TREND_MIN_ENTRIES,
    TREND_SOURCE_COUNT,
    TREND_STABLE,
    TREND_THRESHOLD,
)
from .exceptions import MissingDataError
from .models import HourlyEntry, SpotProfile, TrendBlock, TrendResult
from .scoring import score

_LOGGER = logging.getLogger(__name__)


def _local_time(ts: datetime, now: datetime) -> datetime:
    """Express an entry timestamp in now's frame so day and hour compare directly."""
    if ts.tzinfo is not None and now.tzinfo is not None:
        return ts.astimezone(now.tzinfo)
    if ts.tzinfo is not None:
        return ts.replace(tzinfo=None)
    return ts


def _block_entries(timeline: Sequence[HourlyEntry], now: datetime, day: date, start: int, end: int) -> List[HourlyEntry]:
    out = []
    for entry in timeline:
        local = _local_time(entry.time, now)
        if local.date() == day and start <= local.hour < end:
            out.append(entry)
    return out


def _direction(mean_score: float, current_score: float) -> str:
    diff = mean_score - current_score
    if diff > TREND_THRESHOLD:
        return TREND_IMPROVING
    if diff < -TREND_THRESHOLD:
        return TREND_DECLINING
    return TREND_STABLE


def _reasons(best: TrendBlock, first: TrendBlock, spot: SpotProfile) -> List[str]:
    """Name what differs between the first upcoming block and the best one."""
    reasons = []
    b, f = best.conditions, first.conditions

    if b.wind_speed is not None and f.wind_speed is not None and b.wind_speed < f.wind_speed - 5:
        reasons.append("wind should ease")

    if b.wind_direction and f.wind_direction and b.wind_direction != f.wind_direction:
        if b.wind_direction in spot.offshore_wind:
            reasons.append(f"wind shifting {b.wind_direction} (offshore)")
        else:
            reasons.append(f"wind shifting to {b.wind_direction}")

    if b.wave_height_avg is not None and f.wave_height_avg is not None and b.wave_height_avg > f.wave_height_avg + 0.2:
        reasons.append("swell building")

    if b.wave_period is not None and b.wave_period > (f.wave_period or 0) + 2:
        reasons.append("swell period increasing")
    return reasons


def trend_message(current_score: int, best: TrendBlock, blocks: Sequence[TrendBlock], trend: str, spot: SpotProfile) -> str:
    diff = best.score - current_score
    if diff <= 3:
        if trend == TREND_DECLINING:
            return "Conditions are expected to decline - best to go now."
        return "Conditions look stable for the next hours."

    when = best.label.lower()
    if diff >= 5:
        reasons = _reasons(best, blocks[0], spot)
        text = " and ".join(reasons) if reasons else "conditions improving"
        return f"{text[0].upper()}{text[1:]} {when} - expect {best.rating} ({best.score}/100)."

    return f"Slight improvement expected {when} - {best.rating} ({best.score}/100)."


def analyze_trend(
    timeline: Sequence[HourlyEntry],
    spot: SpotProfile,
    current_score: int,
    now: Optional[datetime] = None,
) -> Optional[TrendResult]:
    """Score the upcoming blocks of the timeline and compare them with current_score.

    Returns None when the timeline has fewer than TREND_MIN_ENTRIES entries or
    no block has data; insufficient data is never an error.
    """
    entries = list(timeline or ())
    if len(entries) < TREND_MIN_ENTRIES:
        _LOGGER.warning("Not enough hourly data for trend analysis (%d entries)", len(entries))
        return None

    if now is None:
        now = datetime.now(entries[0].time.tzinfo)
    today = now.date()

    blocks: List[TrendBlock] = []
    for label, day_offset, start, end in TREND_BLOCKS:
        if day_offset == 0 and end <= now.hour:
            continue
        day = today + timedelta(days=day_offset)
        matched = _block_entries(entries, now, day, start, end)
        if not matched:
            continue

        conditions = reconcile([e.observation for e in matched])
        try:
            result = score(conditions, spot, TREND_SOURCE_COUNT)
        except MissingDataError as exc:
            _LOGGER.debug("Could not score block %r: %s", label, exc)
            continue
        blocks.append(
            TrendBlock(
                label=label,
                score=result.overall,
                rating=result.rating,
                conditions=conditions,
                breakdown=result.breakdown,
            )
        )

    if not blocks:
        _LOGGER.warning("No scoreable trend blocks for %s", spot.id)
        return None

    best = blocks[0]
    for block in blocks[1:]:
        if block.score > best.score:
            best = block

    mean_score = sum(b.score for b in blocks) / len(blocks)
    trend = _direction(mean_score, current_score)
    message = trend_message(current_score, best, blocks, trend, spot)

    _LOGGER.info(
        "Trend for %s: %s | best %s (%d) | current %d",
        spot.id,
        trend,
        best.label,
        best.score,
        current_score,
    )
    return TrendResult(trend=trend, best_window=best, message=message, blocks=blocks)
