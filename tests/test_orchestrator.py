import asyncio

import pytest

from surf_report.exceptions import AdapterFailure, AllSourcesFailed
from surf_report.orchestrator import SourceOrchestrator
from surf_report.providers import ProviderAdapter

from .conftest import make_reading


class StaticAdapter(ProviderAdapter):
    def __init__(self, name, result=None, error=None, delay=0.0):
        self.name = name
        self.result = result
        self.error = error
        self.delay = delay
        self.calls = 0

    async def fetch(self, spot):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.mark.asyncio
async def test_partial_failure_is_tolerated(spot):
    adapters = [
        StaticAdapter("good", make_reading(source="good")),
        StaticAdapter("broken", error=AdapterFailure("broken", "HTTP 500")),
        StaticAdapter("empty"),
    ]
    result = await SourceOrchestrator(adapters).fetch(spot)
    assert [r.source for r in result.readings] == ["good"]
    assert (result.succeeded, result.failed, result.empty) == (1, 1, 1)
    assert result.attempted == 3
    assert result.errors == {"broken": "broken: HTTP 500"}
    assert all(a.calls == 1 for a in adapters)


@pytest.mark.asyncio
async def test_failure_does_not_cancel_slow_sibling(spot):
    slow = StaticAdapter("slow", make_reading(source="slow"), delay=0.05)
    fast_fail = StaticAdapter("fast", error=RuntimeError("boom"))
    result = await SourceOrchestrator([fast_fail, slow]).fetch(spot)
    assert [r.source for r in result.readings] == ["slow"]
    assert result.errors["fast"] == "boom"


@pytest.mark.asyncio
async def test_timeouts_and_cancellation_count_as_failures(spot):
    adapters = [
        StaticAdapter("timeout", error=asyncio.TimeoutError()),
        StaticAdapter("cancelled", error=asyncio.CancelledError()),
        StaticAdapter("good", make_reading()),
    ]
    result = await SourceOrchestrator(adapters).fetch(spot)
    assert result.succeeded == 1
    assert result.failed == 2
    assert result.errors["timeout"] == "TimeoutError"
    assert result.errors["cancelled"] == "CancelledError"


@pytest.mark.asyncio
async def test_no_data_raises_all_sources_failed(spot):
    adapters = [StaticAdapter("a"), StaticAdapter("b", error=RuntimeError("down"))]
    with pytest.raises(AllSourcesFailed) as excinfo:
        await SourceOrchestrator(adapters).fetch(spot)
    err = excinfo.value
    assert err.location_id == spot.id
    assert err.result.failed == 1
    assert err.result.empty == 1
    assert "failed=1, empty=1" in str(err)


@pytest.mark.asyncio
async def test_no_adapters_raises(spot):
    with pytest.raises(AllSourcesFailed):
        await SourceOrchestrator([]).fetch(spot)


@pytest.mark.asyncio
async def test_duplicate_source_names_keep_every_error(spot):
    adapters = [
        StaticAdapter("mirror", error=RuntimeError("first down")),
        StaticAdapter("mirror", error=RuntimeError("second down")),
        StaticAdapter("good", make_reading(source="good")),
    ]
    orchestrator = SourceOrchestrator(adapters)
    assert orchestrator.labels == ["mirror", "mirror#2", "good"]
    result = await orchestrator.fetch(spot)
    assert result.failed == 2
    assert result.errors == {"mirror": "first down", "mirror#2": "second down"}
