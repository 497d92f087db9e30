"""
Pipeline facade: fetch -> reconcile -> score -> trend for a registered spot.

SurfReportService wires a SpotLoader, a SourceOrchestrator and a
ConditionsCache together. Reconciled results are cached per location id so
repeated reports within the TTL do not hit the providers again.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import aiohttp

from . import aggregator, feedback, scoring, trend
from .board import recommend_board_personalized
from .cache import ConditionsCache
from .exceptions import AllSourcesFailed, InvalidProfile
from .models import AggregateResult, Conditions, HourlyEntry, Score, SpotProfile, TrendResult
from .orchestrator import SourceOrchestrator
from .providers import ProviderAdapter
from .providers.met_no import MetNoAdapter
from .providers.open_meteo import OpenMeteoForecastAdapter, OpenMeteoMarineAdapter
from .spot_loader import SpotLoader

_LOGGER = logging.getLogger(__name__)

SpotRef = Union[str, SpotProfile]


def default_adapters(session: Optional[aiohttp.ClientSession] = None) -> List[ProviderAdapter]:
    """The bundled JSON API adapters sharing one aiohttp session."""
    return [
        OpenMeteoMarineAdapter(session),
        OpenMeteoForecastAdapter(session),
        MetNoAdapter(session),
    ]


class SurfReportService:
    def __init__(
        self,
        spots: SpotLoader,
        adapters: Optional[Iterable[ProviderAdapter]] = None,
        cache: Optional[ConditionsCache] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.spots = spots
        self.orchestrator = SourceOrchestrator(adapters if adapters is not None else default_adapters(session))
        self.cache = cache if cache is not None else ConditionsCache()

    def _spot(self, spot: SpotRef) -> SpotProfile:
        if isinstance(spot, SpotProfile):
            return spot
        return self.spots.get_spot(spot)

    async def _aggregate(self, spot: SpotProfile, refresh: bool) -> Tuple[AggregateResult, bool]:
        if not refresh:
            cached = self.cache.get(spot.id)
            if cached is not None:
                return cached, True

        fetched = await self.orchestrator.fetch(spot)
        result = AggregateResult(
            observation=aggregator.reconcile(fetched.readings),
            timeline=aggregator.reconcile_timeline(fetched.readings),
            source_count=len(fetched.readings),
            fetch=fetched,
        )
        self.cache.put(spot.id, result)
        return result, False

    async def fetch_and_aggregate(self, location_id: str, refresh: bool = False) -> AggregateResult:
        """Reconciled observation and hourly timeline for a location.

        Raises InvalidProfile for an unknown id (before any fetch) and
        AllSourcesFailed when no provider returned data.
        """
        spot = self.spots.get_spot(location_id)
        result, _ = await self._aggregate(spot, refresh)
        return result

    def score(
        self,
        observation: Conditions,
        spot: SpotRef,
        source_count: int,
        weights: Optional[Mapping[str, float]] = None,
    ) -> Score:
        return scoring.score(observation, self._spot(spot), source_count, weights)

    def analyze_trend(
        self,
        timeline: Sequence[HourlyEntry],
        spot: SpotRef,
        current_score: int,
        now: Optional[datetime] = None,
    ) -> Optional[TrendResult]:
        return trend.analyze_trend(timeline, self._spot(spot), current_score, now)

    def reweight(
        self,
        breakdown: Mapping[str, float],
        multipliers: Optional[Mapping[str, object]] = None,
        base_weights: Optional[Mapping[str, float]] = None,
        spot: Optional[SpotRef] = None,
        weights: Optional[Mapping[str, float]] = None,
    ) -> Optional[Tuple[int, str]]:
        """Reweight a stored breakdown.

        Without base_weights the weights are resolved from spot and weights
        exactly as score() resolved them, so identity multipliers reproduce
        the stored overall score.
        """
        if base_weights is None:
            base_weights = scoring.resolve_weights(self._spot(spot) if spot is not None else None, weights)
        return feedback.reweight(breakdown, multipliers, base_weights)

    async def report(
        self,
        location_id: str,
        now: Optional[datetime] = None,
        refresh: bool = False,
        weights: Optional[Mapping[str, float]] = None,
        rider_weight_kg: Optional[float] = None,
        skill_level: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Full JSON-ready report: spot, score, conditions, trend, board, sources and cache state."""
        spot = self.spots.get_spot(location_id)
        result, cached = await self._aggregate(spot, refresh)

        current = scoring.score(result.observation, spot, result.source_count, weights)
        if now is None and result.timeline:
            now = datetime.now(result.timeline[0].time.tzinfo)
        elif now is None:
            now = datetime.now()

        outlook = trend.analyze_trend(result.timeline, spot, current.overall, now)

        board = recommend_board_personalized(result.observation, rider_weight_kg, skill_level, spot)

        _LOGGER.info(
            "Report for %s: %d (%s) from %d sources, cached=%s",
            spot.id,
            current.overall,
            current.rating,
            result.source_count,
            cached,
        )
        return {
            "spot": spot.to_dict(),
            "timestamp": now.isoformat(),
            "score": current.to_dict(),
            "conditions": result.observation.to_dict(),
            "trend": outlook.to_dict() if outlook is not None else None,
            "board": board,
            "sources": {
                "count": result.source_count,
                "fetch": result.fetch.to_dict(),
                "providers": [r.provenance() for r in result.fetch.readings],
            },
            "cached": cached,
            "cache_age": self.cache.age(spot.id) if cached else 0,
        }

    async def report_many(
        self,
        location_ids: Sequence[str],
        now: Optional[datetime] = None,
        refresh: bool = False,
    ) -> Dict[str, Any]:
        """Report several spots concurrently and name the best-scoring one.

        Unknown ids and spots whose sources all failed are listed under errors.
        """
        outcomes = await asyncio.gather(
            *(self.report(loc, now=now, refresh=refresh) for loc in location_ids),
            return_exceptions=True,
        )
        reports: List[Dict[str, Any]] = []
        errors: Dict[str, str] = {}
        for loc, outcome in zip(location_ids, outcomes):
            if isinstance(outcome, (InvalidProfile, AllSourcesFailed)):
                errors[loc] = str(outcome)
                _LOGGER.warning("Skipping %s: %s", loc, outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                reports.append(outcome)

        best = None
        for r in reports:
            if best is None or r["score"]["overall"] > best["score"]["overall"]:
                best = r
        return {
            "spots": reports,
            "best_spot": best["spot"]["id"] if best is not None else None,
            "errors": errors,
        }
