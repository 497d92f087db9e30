"""
Open-Meteo adapters.

- OpenMeteoMarineAdapter: wave height / period / direction, swell and sea
  surface temperature from the marine endpoint, plus the hourly sea state.
- OpenMeteoForecastAdapter: wind, gusts, air temperature and cloud cover from
  the forecast endpoint, plus hourly wind.

Both request timestamps in the spot's timezone and attach the payload's
utc_offset_seconds so every datetime they emit is timezone-aware.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..const import OM_BASE, OM_MARINE_BASE, PROVIDER_FORECAST_DAYS
from ..models import HourlyReading, Reading, SpotProfile, Swell
from ..unit_helpers import (
    cloud_cover_label,
    degrees_to_compass,
    round_int,
    round_m,
    speed_to_kmh,
)
from . import JsonApiAdapter, nearest_index, parse_time

_LOGGER = logging.getLogger(__name__)

OM_MARINE_PARAMS_HOURLY = ",".join(
    [
        "wave_height",
        "wave_period",
        "wave_direction",
        "swell_wave_height",
        "swell_wave_period",
        "swell_wave_direction",
        "sea_surface_temperature",
    ]
)

OM_WIND_PARAMS = ",".join(
    [
        "wind_speed_10m",
        "wind_direction_10m",
        "wind_gusts_10m",
    ]
)

OM_PARAMS_CURRENT = ",".join([OM_WIND_PARAMS, "temperature_2m", "cloud_cover"])


def _column(hourly: Dict[str, Any], key: str, i: int) -> Any:
    values = hourly.get(key)
    if not isinstance(values, list) or i >= len(values):
        return None
    return values[i]


def _times(hourly: Dict[str, Any], offset: Optional[int]) -> List[Any]:
    raw = hourly.get("time")
    if not isinstance(raw, list):
        return []
    return [parse_time(t, offset) for t in raw]


class _OpenMeteoAdapter(JsonApiAdapter):
    def _params(self, spot: SpotProfile) -> Dict[str, Any]:
        return {
            "latitude": f"{spot.latitude:.4f}",
            "longitude": f"{spot.longitude:.4f}",
            "timezone": spot.timezone or "auto",
            "forecast_days": PROVIDER_FORECAST_DAYS,
        }


class OpenMeteoMarineAdapter(_OpenMeteoAdapter):
    name = "open_meteo_marine"
    base_url = OM_MARINE_BASE

    @staticmethod
    def _sea_state(hourly: Dict[str, Any], i: int) -> Dict[str, Any]:
        swell = None
        swell_height = round_m(_column(hourly, "swell_wave_height", i))
        if swell_height is not None:
            swell = Swell(
                height=swell_height,
                period=round_int(_column(hourly, "swell_wave_period", i)),
                direction=degrees_to_compass(_column(hourly, "swell_wave_direction", i)),
            )
        return {
            "wave_height_avg": round_m(_column(hourly, "wave_height", i)),
            "wave_period": round_int(_column(hourly, "wave_period", i)),
            "wave_direction": degrees_to_compass(_column(hourly, "wave_direction", i)),
            "swell": swell,
            "water_temp": round_int(_column(hourly, "sea_surface_temperature", i)),
        }

    async def fetch(self, spot: SpotProfile) -> Optional[Reading]:
        if not self.has_coordinates(spot):
            _LOGGER.debug("%s: spot %s has no coordinates", self.name, spot.id)
            return None

        params = self._params(spot)
        params["hourly"] = OM_MARINE_PARAMS_HOURLY
        payload = await self.get_json(params)

        hourly = payload.get("hourly")
        if not isinstance(hourly, dict):
            _LOGGER.warning("%s: payload for %s has no hourly data", self.name, spot.id)
            return None
        times = _times(hourly, payload.get("utc_offset_seconds"))
        now = self._clock()
        idx = nearest_index(times, now)
        if idx is None:
            _LOGGER.warning("%s: empty hourly series for %s", self.name, spot.id)
            return None

        current = self._sea_state(hourly, idx)
        if current["wave_height_avg"] is None and current["swell"] is None:
            _LOGGER.warning("%s: no wave data for %s", self.name, spot.id)
            return None

        series = [
            HourlyReading(time=ts, **self._sea_state(hourly, i))
            for i, ts in enumerate(times)
            if ts is not None
        ]
        _LOGGER.debug(
            "%s: %s wave %sm @ %ss, %d hourly entries",
            self.name,
            spot.id,
            current["wave_height_avg"],
            current["wave_period"],
            len(series),
        )
        return Reading(source=self.name, retrieved_at=now, url=self.base_url, hourly=series, **current)


class OpenMeteoForecastAdapter(_OpenMeteoAdapter):
    name = "open_meteo_forecast"
    base_url = OM_BASE

    @staticmethod
    def _wind(block: Dict[str, Any], i: Optional[int], unit: Optional[str]) -> Dict[str, Any]:
        def pick(key: str) -> Any:
            return block.get(key) if i is None else _column(block, key, i)

        return {
            "wind_speed": round_int(speed_to_kmh(pick("wind_speed_10m"), unit)),
            "wind_direction": degrees_to_compass(pick("wind_direction_10m")),
            "wind_gusts": round_int(speed_to_kmh(pick("wind_gusts_10m"), unit)),
        }

    async def fetch(self, spot: SpotProfile) -> Optional[Reading]:
        if not self.has_coordinates(spot):
            _LOGGER.debug("%s: spot %s has no coordinates", self.name, spot.id)
            return None

        params = self._params(spot)
        params.update({"current": OM_PARAMS_CURRENT, "hourly": OM_WIND_PARAMS, "wind_speed_unit": "kmh"})
        payload = await self.get_json(params)

        current = payload.get("current")
        if not isinstance(current, dict):
            _LOGGER.warning("%s: no current data for %s", self.name, spot.id)
            return None
        current_unit = (payload.get("current_units") or {}).get("wind_speed_10m")

        fields = self._wind(current, None, current_unit)
        fields["air_temp"] = round_int(current.get("temperature_2m"))
        fields["cloud_cover"] = cloud_cover_label(current.get("cloud_cover"))
        if all(v is None for v in fields.values()):
            _LOGGER.warning("%s: current block for %s has no usable fields", self.name, spot.id)
            return None

        series: List[HourlyReading] = []
        hourly = payload.get("hourly")
        if isinstance(hourly, dict):
            offset = payload.get("utc_offset_seconds")
            hourly_unit = (payload.get("hourly_units") or {}).get("wind_speed_10m")
            for i, ts in enumerate(_times(hourly, offset)):
                if ts is None:
                    continue
                series.append(HourlyReading(time=ts, **self._wind(hourly, i, hourly_unit)))

        _LOGGER.debug(
            "%s: %s wind %s km/h %s, %d hourly entries",
            self.name,
            spot.id,
            fields["wind_speed"],
            fields["wind_direction"],
            len(series),
        )
        return Reading(
            source=self.name,
            retrieved_at=parse_time(current.get("time"), payload.get("utc_offset_seconds")) or self._clock(),
            url=self.base_url,
            hourly=series,
            **fields,
        )
