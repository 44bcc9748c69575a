"""Pytest fixtures shared across the chart option and pipeline tests."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest


class RecordingFetcher:
    """Async fetcher double that records queries and serves canned payloads."""

    def __init__(self, payloads: dict[tuple[str, ...], Any] | None = None, *, error: Exception | None = None):
        self.payloads = payloads or {}
        self.error = error
        self.queries: list[Any] = []

    async def __call__(self, query):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.payloads.get(query.stat)


def daily_payload(*, start: datetime, values: Sequence[float]) -> list[dict[str, Any]]:
    """Return a raw daily series payload starting at `start`."""

    return [{"x": (start + timedelta(days=idx)).isoformat(), "y": value} for idx, value in enumerate(values)]


def hourly_payload(*, day: datetime, values: Sequence[float]) -> list[dict[str, Any]]:
    """Return a raw hourly series payload for `day`."""

    return [{"x": (day + timedelta(hours=idx)).isoformat(), "y": value} for idx, value in enumerate(values)]


@pytest.fixture
def chart_cache(settings):
    """Return the chart data cache, cleared before and after the test."""

    from django.core.cache import caches

    cache = caches[settings.CHART_DATA_CACHE_ALIAS]
    cache.clear()
    yield cache
    cache.clear()


@pytest.fixture
def world_payloads() -> dict[tuple[str, ...], Any]:
    """Return canned fetcher payloads keyed by requested statistics."""

    start = datetime(2021, 3, 1, tzinfo=timezone.utc)
    confirmed = daily_payload(start=start, values=[float(10 + idx) for idx in range(40)])
    deceased = daily_payload(start=start, values=[float(idx % 3) for idx in range(40)])
    return {
        ("confirmed",): confirmed,
        ("deceased",): deceased,
        ("confirmed", "deceased"): {"confirmed": confirmed, "deceased": deceased},
    }


@pytest.fixture
def fetcher(world_payloads) -> RecordingFetcher:
    """Return a recording fetcher serving the world payloads."""

    return RecordingFetcher(world_payloads)


@pytest.fixture
def data_source(chart_cache, fetcher):
    """Return a CachedChartData backed by the recording fetcher."""

    from core.charting.data_source import CachedChartData

    return CachedChartData(fetcher)


@pytest.fixture
def live_payload() -> dict[str, Any]:
    """Return a raw live snapshot payload."""

    day = datetime(2021, 3, 15, tzinfo=timezone.utc)
    return {
        "hourlyLive": {
            "today": hourly_payload(day=day, values=[5, 12, 20]),
            "yesterday": hourly_payload(day=day - timedelta(days=1), values=[4, 9, 15, 22]),
            "weekAgo": hourly_payload(day=day - timedelta(days=7), values=[3, 7]),
            "twoWeeksAgo": hourly_payload(day=day - timedelta(days=14), values=[1]),
            "monthAgo": [],
        }
    }


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no Django cache access.
    - `integration`: tests touching the Django cache or async data sources.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
