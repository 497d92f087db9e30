"""Surf Report: multi-source surf conditions, scoring and short-term trend."""
from __future__ import annotations

import logging

from .aggregator import reconcile, reconcile_timeline
from .board import recommend_board, recommend_board_personalized
from .cache import ConditionsCache
from .exceptions import (
    AdapterFailure,
    AllSourcesFailed,
    InvalidProfile,
    MissingDataError,
    SurfReportError,
)
from .feedback import reweight
from .models import (
    AggregateResult,
    Band,
    FetchResult,
    HourlyEntry,
    HourlyReading,
    Observation,
    Reading,
    Score,
    SpotProfile,
    Swell,
    TrendBlock,
    TrendResult,
)
from .orchestrator import SourceOrchestrator
from .providers import ProviderAdapter
from .scoring import get_rating, score
from .service import SurfReportService, default_adapters
from .spot_loader import SpotLoader
from .trend import analyze_trend

_LOGGER = logging.getLogger(__name__)
_LOGGER.addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "AdapterFailure",
    "AggregateResult",
    "AllSourcesFailed",
    "Band",
    "ConditionsCache",
    "FetchResult",
    "HourlyEntry",
    "HourlyReading",
    "InvalidProfile",
    "MissingDataError",
    "Observation",
    "ProviderAdapter",
    "Reading",
    "Score",
    "SourceOrchestrator",
    "SpotLoader",
    "SpotProfile",
    "SurfReportError",
    "SurfReportService",
    "Swell",
    "TrendBlock",
    "TrendResult",
    "analyze_trend",
    "default_adapters",
    "get_rating",
    "recommend_board",
    "recommend_board_personalized",
    "reconcile",
    "reconcile_timeline",
    "reweight",
    "score",
]
