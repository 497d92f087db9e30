"""Spot profile registry loaded from the packaged spots.json (strict, no fallbacks)."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, Dict, List, Optional

from .const import FACTOR_WEIGHTS
from .exceptions import InvalidProfile
from .models import Band, SpotProfile
from .unit_helpers import _to_float, normalize_compass

_LOGGER = logging.getLogger(__name__)

DEFAULT_SPOTS_PATH = os.path.join(os.path.dirname(__file__), "spots.json")


def _band(raw: Any, what: str, spot_id: str) -> Band:
    if not isinstance(raw, dict):
        raise RuntimeError(f"Invalid spot {spot_id}: '{what}' must be an object")
    values = [_to_float(raw.get(k)) for k in ("min", "ideal", "max")]
    if any(v is None for v in values):
        raise RuntimeError(f"Invalid spot {spot_id}: '{what}' needs numeric min, ideal and max")
    lo, ideal, hi = values
    if not (0 <= lo <= ideal <= hi):
        raise RuntimeError(f"Invalid spot {spot_id}: '{what}' must satisfy 0 <= min <= ideal <= max")
    return Band(lo, ideal, hi)


def _directions(raw: Any, what: str, spot_id: str) -> frozenset:
    if not isinstance(raw, list) or not raw:
        raise RuntimeError(f"Invalid spot {spot_id}: '{what}' must be a non-empty list")
    out = set()
    for label in raw:
        d = normalize_compass(label)
        if d is None:
            raise RuntimeError(f"Invalid spot {spot_id}: unknown direction {label!r} in '{what}'")
        out.add(d)
    return frozenset(out)


def _weights(raw: Any, spot_id: str):
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise RuntimeError(f"Invalid spot {spot_id}: 'weights' must be an object")
    pairs = []
    for k, v in raw.items():
        if k not in FACTOR_WEIGHTS:
            raise RuntimeError(f"Invalid spot {spot_id}: unknown weight factor {k!r}")
        f = _to_float(v)
        if f is None or f < 0:
            raise RuntimeError(f"Invalid spot {spot_id}: weight for {k!r} must be a non-negative number")
        pairs.append((k, f))
    merged = dict(FACTOR_WEIGHTS, **dict(pairs))
    if sum(merged.values()) <= 0:
        raise RuntimeError(f"Invalid spot {spot_id}: weights leave every factor at zero")
    return tuple(sorted(pairs))


def build_profile(spot_id: str, data: Dict[str, Any]) -> SpotProfile:
    """Validate a raw JSON spot object and build its SpotProfile. Raises RuntimeError."""
    if not isinstance(data, dict):
        raise RuntimeError(f"Invalid spot {spot_id}: not an object")
    location = data.get("location") or {}
    return SpotProfile(
        id=spot_id,
        name=str(data.get("name") or spot_id),
        wave_height=_band(data.get("wave_height"), "wave_height", spot_id),
        wave_period=_band(data.get("wave_period"), "wave_period", spot_id),
        offshore_wind=_directions(data.get("offshore_wind"), "offshore_wind", spot_id),
        best_swell=_directions(data.get("best_swell"), "best_swell", spot_id),
        latitude=_to_float(location.get("lat")),
        longitude=_to_float(location.get("lon")),
        country=str(data.get("country") or ""),
        description=str(data.get("description") or ""),
        timezone=str(data.get("timezone") or "auto"),
        weights=_weights(data.get("weights"), spot_id),
    )


class SpotLoader:
    """Load and look up spot profiles.

    Strict behaviour: any load or validation error raises RuntimeError;
    an unknown id raises InvalidProfile.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path or DEFAULT_SPOTS_PATH
        self._spots: Optional[Dict[str, SpotProfile]] = None
        self._default: Optional[Dict[str, Any]] = None

    def _read_file(self) -> Dict[str, Any]:
        with open(self.path, "r", encoding="utf-8") as fp:
            return json.load(fp)

    def load(self) -> None:
        try:
            raw = self._read_file()
        except FileNotFoundError as exc:
            _LOGGER.exception("Spot file not found at %s", self.path)
            raise RuntimeError(f"{os.path.basename(self.path)} missing") from exc
        except (OSError, ValueError) as exc:
            _LOGGER.exception("Failed to read spot file %s: %s", self.path, exc)
            raise RuntimeError(f"Failed to read {os.path.basename(self.path)}") from exc
        self._apply(raw)

    async def async_load(self) -> None:
        """load() without blocking the event loop."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self.load)

    def _apply(self, raw: Any) -> None:
        if not isinstance(raw, dict):
            _LOGGER.error("Spot file root element is not a JSON object")
            raise RuntimeError("Invalid spot file: root not an object")
        if not isinstance(raw.get("spots"), dict):
            _LOGGER.error("Spot file missing required 'spots' object")
            raise RuntimeError("Invalid spot file: missing 'spots'")

        default = raw.get("default_profile")
        if default is not None and not isinstance(default, dict):
            raise RuntimeError("Invalid spot file: 'default_profile' must be an object if present")

        spots = {sid: build_profile(sid, sdata) for sid, sdata in raw["spots"].items()}
        _LOGGER.info("Loaded spot file version %s with %d spots", raw.get("version", "unknown"), len(spots))
        self._spots = spots
        self._default = default

    def _ensure_loaded(self) -> Dict[str, SpotProfile]:
        if self._spots is None:
            _LOGGER.error("SpotLoader used before spots were loaded")
            raise RuntimeError("Spot profiles not loaded")
        return self._spots

    def get_spot(self, spot_id: str) -> SpotProfile:
        spots = self._ensure_loaded()
        try:
            return spots[spot_id]
        except KeyError:
            raise InvalidProfile(spot_id) from None

    def has_spot(self, spot_id: str) -> bool:
        return spot_id in self._ensure_loaded()

    def get_all_spots(self) -> List[SpotProfile]:
        return list(self._ensure_loaded().values())

    def register_spot(
        self,
        spot_id: str,
        lat: float,
        lon: float,
        name: Optional[str] = None,
        country: str = "",
    ) -> SpotProfile:
        """Return an existing spot, or create one at lat/lon from the default profile (in memory only)."""
        spots = self._ensure_loaded()
        if spot_id in spots:
            return spots[spot_id]
        if self._default is None:
            raise RuntimeError("Spot file has no 'default_profile'; cannot register new spots")
        data = dict(self._default)
        data.update(
            {
                "name": name or spot_id,
                "country": country,
                "location": {"lat": lat, "lon": lon},
                "description": "User-discovered spot",
            }
        )
        profile = build_profile(spot_id, data)
        spots[spot_id] = profile
        _LOGGER.info("Registered spot %s at %.4f,%.4f", spot_id, lat, lon)
        return profile
