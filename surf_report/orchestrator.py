"""Concurrent multi-source fetch that tolerates partial failure."""
from __future__ import annotations

import asyncio
import logging
from typing import Dict, Iterable, List

from .exceptions import AllSourcesFailed
from .models import FetchResult, Reading, SpotProfile
from .providers import ProviderAdapter

_LOGGER = logging.getLogger(__name__)


def _unique_labels(adapters: List[ProviderAdapter]) -> List[str]:
    """Adapter names, suffixed with "#n" when a name repeats."""
    labels: List[str] = []
    seen: Dict[str, int] = {}
    for adapter in adapters:
        name = getattr(adapter, "name", type(adapter).__name__)
        seen[name] = seen.get(name, 0) + 1
        if seen[name] > 1:
            _LOGGER.warning("Duplicate source name %s; reporting it as %s#%d", name, name, seen[name])
            name = f"{name}#{seen[name]}"
        labels.append(name)
    return labels


class SourceOrchestrator:
    """Run every adapter once, concurrently, and collect whatever succeeded.

    One adapter's failure (exception, timeout, cancellation) never affects the
    others. Adapters own their timeouts; no retries happen here.
    """

    def __init__(self, adapters: Iterable[ProviderAdapter]) -> None:
        self.adapters: List[ProviderAdapter] = list(adapters)
        self.labels: List[str] = _unique_labels(self.adapters)

    async def fetch(self, spot: SpotProfile) -> FetchResult:
        """Return the settled FetchResult; raise AllSourcesFailed when no reading came back."""
        outcomes = await asyncio.gather(
            *(adapter.fetch(spot) for adapter in self.adapters),
            return_exceptions=True,
        )

        result = FetchResult()
        for name, outcome in zip(self.labels, outcomes):
            if isinstance(outcome, BaseException):
                result.failed += 1
                result.errors[name] = str(outcome) or type(outcome).__name__
                _LOGGER.warning("Source %s failed for %s: %r", name, spot.id, outcome)
            elif outcome is None:
                result.empty += 1
                _LOGGER.debug("Source %s returned no data for %s", name, spot.id)
            elif isinstance(outcome, Reading):
                result.succeeded += 1
                result.readings.append(outcome)
            else:
                result.failed += 1
                result.errors[name] = f"unexpected result type {type(outcome).__name__}"
                _LOGGER.warning("Source %s returned %s for %s", name, type(outcome).__name__, spot.id)

        _LOGGER.info(
            "Fetched %s: %d succeeded, %d failed, %d empty",
            spot.id,
            result.succeeded,
            result.failed,
            result.empty,
        )
        if not result.readings:
            _LOGGER.error("All %d sources failed for %s", len(self.adapters), spot.id)
            raise AllSourcesFailed(spot.id, result)
        return result
