"""
MET Norway locationforecast adapter (wind, gusts, air temperature, cloud cover).

Wind arrives in m/s and is converted to km/h. The API terms require an
identifying User-Agent on every request.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..const import MET_NO_BASE, MET_NO_USER_AGENT
from ..models import HourlyReading, Reading, SpotProfile
from ..unit_helpers import cloud_cover_label, degrees_to_compass, m_s_to_kmh, round_int
from . import JsonApiAdapter, nearest_index, parse_time

_LOGGER = logging.getLogger(__name__)

# hourly steps are published for roughly the first two days
MET_NO_HOURLY_LIMIT = 48


def _details(entry: Dict[str, Any]) -> Dict[str, Any]:
    data = entry.get("data") or {}
    return (data.get("instant") or {}).get("details") or {}


def _gust(entry: Dict[str, Any]) -> Any:
    data = entry.get("data") or {}
    instant = (data.get("instant") or {}).get("details") or {}
    if instant.get("wind_speed_of_gust") is not None:
        return instant["wind_speed_of_gust"]
    return ((data.get("next_1_hours") or {}).get("details") or {}).get("wind_speed_of_gust")


class MetNoAdapter(JsonApiAdapter):
    name = "met_no"
    base_url = MET_NO_BASE
    headers = {"User-Agent": MET_NO_USER_AGENT}

    @staticmethod
    def _fields(entry: Dict[str, Any]) -> Dict[str, Any]:
        details = _details(entry)
        return {
            "wind_speed": round_int(m_s_to_kmh(details.get("wind_speed"))),
            "wind_direction": degrees_to_compass(details.get("wind_from_direction")),
            "wind_gusts": round_int(m_s_to_kmh(_gust(entry))),
            "air_temp": round_int(details.get("air_temperature")),
            "cloud_cover": cloud_cover_label(details.get("cloud_area_fraction")),
        }

    async def fetch(self, spot: SpotProfile) -> Optional[Reading]:
        if not self.has_coordinates(spot):
            _LOGGER.debug("%s: spot %s has no coordinates", self.name, spot.id)
            return None

        # MET asks clients to truncate coordinates to four decimals
        params = {"lat": f"{spot.latitude:.4f}", "lon": f"{spot.longitude:.4f}"}
        payload = await self.get_json(params)

        timeseries = (payload.get("properties") or {}).get("timeseries")
        if not isinstance(timeseries, list) or not timeseries:
            _LOGGER.warning("%s: no timeseries for %s", self.name, spot.id)
            return None

        entries = [e for e in timeseries if isinstance(e, dict)]
        times = [parse_time(e.get("time")) for e in entries]
        now = self._clock()
        idx = nearest_index(times, now)
        if idx is None:
            _LOGGER.warning("%s: timeseries for %s has no valid timestamps", self.name, spot.id)
            return None

        current = self._fields(entries[idx])
        if all(v is None for v in current.values()):
            _LOGGER.warning("%s: current entry for %s has no usable fields", self.name, spot.id)
            return None

        series: List[HourlyReading] = []
        for entry, ts in zip(entries, times):
            if ts is None:
                continue
            if len(series) >= MET_NO_HOURLY_LIMIT:
                break
            series.append(HourlyReading(time=ts, **self._fields(entry)))

        _LOGGER.debug(
            "%s: %s wind %s km/h %s, %d hourly entries",
            self.name,
            spot.id,
            current["wind_speed"],
            current["wind_direction"],
            len(series),
        )
        return Reading(source=self.name, retrieved_at=now, url=self.base_url, hourly=series, **current)
