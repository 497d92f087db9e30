"""Exception types raised by Surf Report."""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .models import FetchResult


class SurfReportError(Exception):
    """Base class for all Surf Report errors."""


class AllSourcesFailed(SurfReportError):
    """Raised when no provider adapter produced a reading for a location."""

    def __init__(self, location_id: str, result: Optional["FetchResult"] = None) -> None:
        self.location_id = location_id
        self.result = result
        if result is not None:
            msg = (
                f"All data sources failed for {location_id} "
                f"(failed={result.failed}, empty={result.empty})"
            )
        else:
            msg = f"All data sources failed for {location_id}"
        super().__init__(msg)


class AdapterFailure(SurfReportError):
    """Raised by a provider adapter on transport or payload failure."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"{source}: {message}")


class InvalidProfile(SurfReportError, KeyError):
    """Raised when no spot profile exists for a location id."""

    def __init__(self, location_id: str) -> None:
        self.location_id = location_id
        super().__init__(f"Invalid spot ID: {location_id}")

    def __str__(self) -> str:
        return self.args[0]


class MissingDataError(SurfReportError, ValueError):
    """Raised when required inputs for scoring are missing or malformed."""
