"""Tests for series assembly, axis defaults, and renderer payload encoding."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from analysis.dto import ChartPoint
from core.charting.assembler import (
    MUTED_COLOR,
    PRIMARY_COLOR,
    assemble,
    default_series_config,
    default_x_axis,
    default_y_axis,
    encode_bundles,
)
from core.charting.schema import ResolvedChartOptions, SeriesBundle

pytestmark = pytest.mark.unit


def test_default_series_config_uses_bars_for_daily_and_lines_for_live() -> None:
    """The default chart kind follows the chart type."""

    daily = default_series_config(ResolvedChartOptions(type="daily", range="oneMonth"))
    live = default_series_config(ResolvedChartOptions(type="live", compare="yesterday"))

    assert (daily.chart_kind, daily.color, daily.show_points) == ("bar", PRIMARY_COLOR, False)
    assert live.chart_kind == "line"
    assert live.range is None


def test_default_series_config_applies_overrides() -> None:
    """Explicit styling wins over the defaults."""

    config = default_series_config(
        ResolvedChartOptions(type="daily", range="oneWeek"),
        color=MUTED_COLOR,
        tooltip_label="Yesterday",
        chart_kind="line",
        show_points=True,
        stat_label="Confirmed",
    )

    assert config.color == MUTED_COLOR
    assert config.chart_kind == "line"
    assert config.show_points is True
    assert config.tooltip_label == "Yesterday"
    assert config.stat_label == "Confirmed"


def test_axes_follow_the_resolved_options() -> None:
    """Axis descriptors carry tick formatting and the statistic they scale."""

    options = ResolvedChartOptions(type="live", compare="weekAgo")

    x_axis = default_x_axis(options)
    y_axis = default_y_axis(options, right="confirmed")

    assert x_axis.tick_format == "%H:%M"
    assert x_axis.range is None
    assert y_axis.right is not None and y_axis.right.id == "confirmed"
    assert y_axis.left is None


def test_assemble_turns_missing_samples_into_an_empty_series() -> None:
    """A None sample set is assembled as an empty series."""

    config = default_series_config(ResolvedChartOptions(type="daily", range="all"))

    assert assemble(None, config).data == ()


def test_encode_bundles_emits_renderer_payload() -> None:
    """Bundles encode to the dataSet/xAxis/yAxis payload."""

    options = ResolvedChartOptions(type="daily", range="oneWeek")
    point = ChartPoint(x=datetime(2021, 3, 1, tzinfo=timezone.utc), y=2.0)
    bundle = SeriesBundle(
        data_set=(assemble([point], default_series_config(options, stat_label="Confirmed")),),
        x_axis=default_x_axis(options),
        y_axis=default_y_axis(options, right="confirmed"),
    )

    payload = encode_bundles([bundle])

    assert payload == [
        {
            "dataSet": [
                {
                    "data": [{"x": "2021-03-01T00:00:00+00:00", "y": 2.0}],
                    "config": {
                        "type": "daily",
                        "range": "oneWeek",
                        "color": PRIMARY_COLOR,
                        "chartType": "bar",
                        "showPoints": False,
                        "statLabel": "Confirmed",
                    },
                }
            ],
            "xAxis": {"type": "daily", "range": "oneWeek", "tickFormat": "%m/%d", "maxTicks": 7},
            "yAxis": {"type": "daily", "left": None, "right": {"id": "confirmed", "visible": True}},
            "warnings": [],
        }
    ]
