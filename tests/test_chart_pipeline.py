"""Tests for the world chart data pipeline branches."""

from __future__ import annotations

import asyncio

import pytest

from core.charting.assembler import MUTED_COLOR, PRIMARY_COLOR
from core.charting.data_source import CachedChartData, ChartQuery
from core.charting.errors import FetchFailure, InvalidStatistic
from core.charting.pipeline import EXPANDED_QUERY, get_chart_data, select_branch
from core.charting.schema import ResolvedChartOptions

pytestmark = pytest.mark.integration

DAILY = ResolvedChartOptions(type="daily", range="oneMonth")
LIVE_YESTERDAY = ResolvedChartOptions(type="live", compare="yesterday")


def test_branch_dispatch_covers_every_mode_statistic_and_type() -> None:
    """Branches are keyed by mode, statistic and type."""

    assert select_branch("confirmed", DAILY, "EXPANDED") == "expanded"
    assert select_branch("confirmed", LIVE_YESTERDAY, "EXPANDED") == "expanded"
    assert select_branch("confirmed", LIVE_YESTERDAY, "COMPACT") == "live_comparison"
    assert select_branch("confirmed", DAILY, "COMPACT") == "single_series"
    assert select_branch("deceased", ResolvedChartOptions(type="live"), "COMPACT") == "single_series"

    with pytest.raises(InvalidStatistic):
        select_branch("recovered", DAILY, "COMPACT")
    with pytest.raises(ValueError):
        select_branch("confirmed", DAILY, "FULLSCREEN")  # type: ignore[arg-type]


def test_expanded_mode_emits_one_bundle_per_statistic_with_shared_axes(data_source, fetcher) -> None:
    """EXPANDED fetches all statistics once and shares axis objects across bundles."""

    bundles = asyncio.run(get_chart_data("deceased", DAILY, "EXPANDED", data_source=data_source))

    assert fetcher.queries == [EXPANDED_QUERY]
    assert EXPANDED_QUERY == ChartQuery(
        stat=("confirmed", "deceased"), api_name="all", range="oneMonth", is_compressed=True, is_single=False
    )
    assert len(bundles) == 2
    assert all(len(bundle.data_set) == 1 for bundle in bundles)
    assert bundles[0].x_axis is bundles[1].x_axis
    assert bundles[0].y_axis is bundles[1].y_axis
    assert bundles[0].y_axis.right.id == "deceased"
    assert [bundle.data_set[0].config.stat_label for bundle in bundles] == ["Confirmed", "Deceased"]


def test_expanded_mode_transforms_with_the_resolved_options(data_source) -> None:
    """The fixed one-month fetch is still bucketed by the selected type and range."""

    options = ResolvedChartOptions(type="weekly", range="oneWeek")

    bundles = asyncio.run(get_chart_data("confirmed", options, "EXPANDED", data_source=data_source))

    confirmed = bundles[0].data_set[0]
    assert confirmed.config.type == "weekly"
    assert sum(point.y for point in confirmed.data) == sum(float(10 + idx) for idx in range(33, 40))


def test_compact_default_fetches_one_series(data_source, fetcher) -> None:
    """COMPACT non-live charts fetch the statistic for its range and return one series."""

    bundles = asyncio.run(get_chart_data("deceased", DAILY, "COMPACT", data_source=data_source))

    assert fetcher.queries == [ChartQuery(stat=("deceased",), range="oneMonth")]
    assert len(bundles) == 1
    assert len(bundles[0].data_set) == 1
    series = bundles[0].data_set[0]
    assert len(series.data) == 30
    assert series.config.chart_kind == "bar"
    assert series.config.stat_label is None


def test_live_comparison_reads_the_snapshot_without_fetching(data_source, fetcher, live_payload) -> None:
    """Live comparison overlays the reference point and today, reference first."""

    bundles = asyncio.run(
        get_chart_data("confirmed", LIVE_YESTERDAY, "COMPACT", data_source=data_source, live_snapshot=live_payload)
    )

    assert fetcher.queries == []
    assert len(bundles) == 1
    compared, today = bundles[0].data_set
    assert [point.y for point in compared.data] == [4.0, 9.0, 15.0, 22.0]
    assert [point.y for point in today.data] == [5.0, 12.0, 20.0]
    assert (compared.config.color, compared.config.tooltip_label) == (MUTED_COLOR, "Yesterday")
    assert (today.config.color, today.config.tooltip_label) == (PRIMARY_COLOR, "Today")
    assert all(series.config.chart_kind == "line" and series.config.show_points for series in (compared, today))
    assert bundles[0].warnings == ()


def test_live_comparison_with_missing_reference_yields_empty_series(data_source, live_payload) -> None:
    """A compare key absent from the snapshot is a soft failure, not an exception."""

    del live_payload["hourlyLive"]["weekAgo"]
    options = ResolvedChartOptions(type="live", compare="weekAgo")

    bundles = asyncio.run(
        get_chart_data("confirmed", options, "COMPACT", data_source=data_source, live_snapshot=live_payload)
    )

    compared, today = bundles[0].data_set
    assert compared.data == ()
    assert len(today.data) == 3
    assert bundles[0].warnings


def test_live_comparison_requires_a_snapshot(data_source) -> None:
    """The live branch cannot run without the pre-fetched snapshot."""

    with pytest.raises(ValueError):
        asyncio.run(get_chart_data("confirmed", LIVE_YESTERDAY, "COMPACT", data_source=data_source))


def test_malformed_live_snapshot_only_affects_the_live_branch(data_source, live_payload) -> None:
    """Branches that never read the snapshot ignore a malformed entry in it."""

    live_payload["hourlyLive"]["monthAgo"] = [{"x": "garbage", "y": 1}]

    compact = asyncio.run(
        get_chart_data("deceased", DAILY, "COMPACT", data_source=data_source, live_snapshot=live_payload)
    )
    expanded = asyncio.run(
        get_chart_data("deceased", DAILY, "EXPANDED", data_source=data_source, live_snapshot=live_payload)
    )

    assert len(compact) == 1
    assert len(compact[0].data_set) == 1
    assert len(expanded) == 2
    with pytest.raises(ValueError, match="Malformed sample timestamp"):
        asyncio.run(
            get_chart_data("confirmed", LIVE_YESTERDAY, "COMPACT", data_source=data_source, live_snapshot=live_payload)
        )


def test_repeated_calls_are_identical_and_fetch_once(data_source, fetcher) -> None:
    """Identical invocations return equal bundles and hit the fetcher once."""

    first = asyncio.run(get_chart_data("confirmed", DAILY, "COMPACT", data_source=data_source))
    second = asyncio.run(get_chart_data("confirmed", DAILY, "COMPACT", data_source=data_source))

    assert first == second
    assert len(fetcher.queries) == 1


def test_fetch_failures_propagate_unmodified(chart_cache) -> None:
    """The pipeline does not catch data source failures."""

    error = FetchFailure("upstream unavailable")

    async def failing(query: ChartQuery):
        raise error

    with pytest.raises(FetchFailure) as excinfo:
        asyncio.run(get_chart_data("deceased", DAILY, "COMPACT", data_source=CachedChartData(failing)))
    assert excinfo.value is error


def test_labels_follow_the_injected_translation(data_source, live_payload) -> None:
    """Tooltip labels come from the label lookup passed to the pipeline."""

    bundles = asyncio.run(
        get_chart_data(
            "confirmed",
            LIVE_YESTERDAY,
            "COMPACT",
            data_source=data_source,
            live_snapshot=live_payload,
            translate=str.upper,
        )
    )

    assert [series.config.tooltip_label for series in bundles[0].data_set] == ["YESTERDAY", "TODAY"]
