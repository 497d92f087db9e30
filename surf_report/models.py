"""
Record types shared by the Surf Report pipeline.

Every provider fills a partially populated record; absent values are None and
are excluded from reconciliation rather than treated as zero. Canonical units:
metres, km/h, degrees Celsius and seconds. Directions are 8-point compass
labels ("N", "NE", ...).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Optional, Tuple


def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if dt is not None else None


@dataclass
class Swell:
    """Groundswell component, distinct from the combined sea state."""

    height: Optional[float] = None
    period: Optional[float] = None
    direction: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"height": self.height, "period": self.period, "direction": self.direction}


@dataclass
class Conditions:
    """Conditions fields common to readings and observations."""

    wave_height_min: Optional[float] = None
    wave_height_max: Optional[float] = None
    wave_height_avg: Optional[float] = None
    wave_period: Optional[float] = None
    wave_direction: Optional[str] = None
    swell: Optional[Swell] = None
    wind_speed: Optional[float] = None
    wind_direction: Optional[str] = None
    wind_gusts: Optional[float] = None
    air_temp: Optional[float] = None
    water_temp: Optional[float] = None
    cloud_cover: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "waves": {
                "height": {
                    "min": self.wave_height_min,
                    "max": self.wave_height_max,
                    "avg": self.wave_height_avg,
                },
                "period": self.wave_period,
                "direction": self.wave_direction,
                "swell": self.swell.to_dict() if self.swell is not None else None,
            },
            "wind": {
                "speed": self.wind_speed,
                "direction": self.wind_direction,
                "gusts": self.wind_gusts,
            },
            "weather": {
                "air_temp": self.air_temp,
                "water_temp": self.water_temp,
                "cloud_cover": self.cloud_cover,
            },
        }


@dataclass
class Observation(Conditions):
    """Reconciled best estimate across all sources (no provenance)."""


@dataclass
class HourlyReading(Conditions):
    """One provider's conditions for a single forecast hour."""

    time: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        out = super().to_dict()
        out["time"] = _iso(self.time)
        return out


@dataclass
class Reading(Conditions):
    """One provider's normalized snapshot plus provenance and optional hourly forecast."""

    source: str = "unknown"
    retrieved_at: Optional[datetime] = None
    url: Optional[str] = None
    hourly: List[HourlyReading] = field(default_factory=list)

    def provenance(self) -> Dict[str, Any]:
        return {
            "name": self.source,
            "status": "success",
            "timestamp": _iso(self.retrieved_at),
            "url": self.url,
            "hourly_entries": len(self.hourly),
        }


@dataclass
class HourlyEntry:
    """One reconciled hour of the merged forecast timeline."""

    time: datetime
    observation: Observation

    def to_dict(self) -> Dict[str, Any]:
        out = self.observation.to_dict()
        out["time"] = _iso(self.time)
        return out


@dataclass(frozen=True)
class Band:
    """Min / ideal / max band for a scalar condition."""

    min: float
    ideal: float
    max: float

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "ideal": self.ideal, "max": self.max}


@dataclass(frozen=True)
class SpotProfile:
    """Static per-location configuration; immutable at request time."""

    id: str
    name: str
    wave_height: Band
    wave_period: Band
    offshore_wind: FrozenSet[str]
    best_swell: FrozenSet[str]
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    country: str = ""
    description: str = ""
    timezone: str = "auto"
    weights: Optional[Tuple[Tuple[str, float], ...]] = None

    def weight_overrides(self) -> Dict[str, float]:
        return dict(self.weights or ())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "country": self.country,
            "location": {"lat": self.latitude, "lon": self.longitude},
            "description": self.description,
            "optimal": {
                "wave_height": self.wave_height.to_dict(),
                "wave_period": self.wave_period.to_dict(),
                "wind_direction": sorted(self.offshore_wind),
                "wave_direction": sorted(self.best_swell),
            },
        }


@dataclass
class Score:
    """Overall score, rating tier, per-factor breakdown and explanation."""

    overall: int
    rating: str
    breakdown: Dict[str, int]
    explanation: str = ""
    # normalized factor weights the overall was computed with
    weights: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall,
            "rating": self.rating,
            "breakdown": dict(self.breakdown),
            "weights": dict(self.weights),
            "explanation": self.explanation,
        }


@dataclass
class TrendBlock:
    """A scored time block of the forecast window."""

    label: str
    score: int
    rating: str
    conditions: Observation
    breakdown: Dict[str, int] = field(default_factory=dict)

    def summary(self) -> Dict[str, Any]:
        return {"label": self.label, "score": self.score, "rating": self.rating}


@dataclass
class TrendResult:
    """Trend direction, best upcoming window and narrative."""

    trend: str
    best_window: TrendBlock
    message: str
    blocks: List[TrendBlock] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trend": self.trend,
            "best_window": self.best_window.summary(),
            "message": self.message,
            "blocks": [b.summary() for b in self.blocks],
        }


@dataclass
class FetchResult:
    """Settled outcome of one orchestrated fetch."""

    readings: List[Reading] = field(default_factory=list)
    succeeded: int = 0
    failed: int = 0
    empty: int = 0
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        return self.succeeded + self.failed + self.empty

    def to_dict(self) -> Dict[str, Any]:
        return {
            "succeeded": self.succeeded,
            "failed": self.failed,
            "empty": self.empty,
            "errors": dict(self.errors),
        }


@dataclass
class AggregateResult:
    """Reconciled current conditions plus hourly timeline for one location."""

    observation: Observation
    timeline: List[HourlyEntry]
    source_count: int
    fetch: FetchResult
