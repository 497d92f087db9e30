"""
Provider adapters: one per upstream source, each normalizing its payload into a Reading.

Contract for every adapter:
  - fetch(spot) returns a Reading in canonical units (m, km/h, °C, s, 8-point
    compass), or None when the source has nothing usable for the spot.
  - transport or payload failures raise AdapterFailure (or any exception);
    the orchestrator records them and carries on with the other sources.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import aiohttp
import async_timeout

from ..const import PROVIDER_REQUEST_TIMEOUT
from ..exceptions import AdapterFailure
from ..models import Reading, SpotProfile

_LOGGER = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_time(value: Any, utc_offset_seconds: Optional[int] = None) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values take the given UTC offset (Open-Meteo style)."""
    if not value:
        return None
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        ts = datetime.fromisoformat(text)
    except ValueError:
        _LOGGER.debug("Unparseable timestamp %r", value)
        return None
    if ts.tzinfo is None and utc_offset_seconds is not None:
        ts = ts.replace(tzinfo=timezone(timedelta(seconds=int(utc_offset_seconds))))
    return ts


def nearest_index(times: List[Optional[datetime]], now: datetime) -> Optional[int]:
    """Index of the timestamp closest to now (the current-hour slot of an hourly array)."""
    best = None
    best_diff = None
    for i, ts in enumerate(times):
        if ts is None:
            continue
        if ts.tzinfo is None and now.tzinfo is not None:
            ref = now.replace(tzinfo=None)
        elif ts.tzinfo is not None and now.tzinfo is None:
            ref = now.replace(tzinfo=ts.tzinfo)
        else:
            ref = now
        diff = abs((ts - ref).total_seconds())
        if best_diff is None or diff < best_diff:
            best, best_diff = i, diff
    return best


class ProviderAdapter(ABC):
    """Abstract base class for all condition sources."""

    name: str = "unknown"

    @abstractmethod
    async def fetch(self, spot: SpotProfile) -> Optional[Reading]:
        """Fetch and normalize current conditions (plus optional hourly forecast) for spot."""
        ...


class JsonApiAdapter(ProviderAdapter):
    """Base for adapters backed by a JSON HTTP API.

    session: shared aiohttp.ClientSession; when omitted a short-lived session is
    opened per request. base_url is injectable so tests can point at a local server.
    """

    base_url: str = ""
    headers: Dict[str, str] = {}

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        base_url: Optional[str] = None,
        timeout: float = PROVIDER_REQUEST_TIMEOUT,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session = session
        if base_url is not None:
            self.base_url = base_url
        self.timeout = timeout
        self._clock = clock

    async def _request(self, session: aiohttp.ClientSession, params: Dict[str, Any]) -> Any:
        async with async_timeout.timeout(self.timeout):
            async with session.get(self.base_url, params=params, headers=self.headers) as resp:
                resp.raise_for_status()
                return await resp.json(content_type=None)

    async def get_json(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """GET base_url with params; raise AdapterFailure on any transport, HTTP or shape error."""
        try:
            if self._session is not None:
                payload = await self._request(self._session, params)
            else:
                async with aiohttp.ClientSession() as session:
                    payload = await self._request(session, params)
        except Exception as exc:
            _LOGGER.exception("%s request failed for %s", self.name, self.base_url)
            raise AdapterFailure(self.name, f"request failed: {exc!r}") from exc

        if not isinstance(payload, dict):
            _LOGGER.error("%s returned unexpected payload shape: %s", self.name, type(payload).__name__)
            raise AdapterFailure(self.name, "unexpected payload shape")
        return payload

    @staticmethod
    def has_coordinates(spot: SpotProfile) -> bool:
        return spot.latitude is not None and spot.longitude is not None


__all__ = [
    "ProviderAdapter",
    "JsonApiAdapter",
    "parse_time",
    "nearest_index",
    "utc_now",
]
