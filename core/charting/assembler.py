"""Series assembly and renderer payload encoding.

The assembler pairs transformed samples with per-series styling and builds
the axis descriptors shared by a chart panel. Everything here is pure and
synchronous.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypedDict

from analysis.dto import ChartPoint

from .sample_codec import encode_series
from .schema import (
    ChartKind,
    ChartXAxis,
    ChartYAxis,
    DataSeries,
    ResolvedChartOptions,
    SeriesBundle,
    SeriesConfig,
    YAxisSide,
)

PRIMARY_COLOR = "#3B82F6"
MUTED_COLOR = "#9CA3AF"

LINE_CHART_TYPES = frozenset({"live", "accumulated"})

X_TICK_FORMATS: dict[str, str] = {
    "live": "%H:%M",
    "daily": "%m/%d",
    "weekly": "%m/%d",
    "monthly": "%Y/%m",
    "accumulated": "%m/%d",
}

MAX_X_TICKS: dict[str | None, int] = {
    None: 8,
    "oneWeek": 7,
    "oneMonth": 10,
    "threeMonths": 12,
    "all": 12,
}


class SeriesConfigPayload(TypedDict, total=False):
    """Renderer payload for a series config."""

    type: str
    range: str | None
    color: str
    chartType: str
    showPoints: bool
    tooltipLabel: str
    statLabel: str


class DataSeriesPayload(TypedDict):
    """Renderer payload for one data series."""

    data: list[dict[str, object]]
    config: SeriesConfigPayload


class BundlePayload(TypedDict):
    """Renderer payload for one chart panel."""

    dataSet: list[DataSeriesPayload]
    xAxis: dict[str, object]
    yAxis: dict[str, object]
    warnings: list[str]


def default_series_config(
    options: ResolvedChartOptions,
    *,
    color: str | None = None,
    tooltip_label: str | None = None,
    chart_kind: ChartKind | None = None,
    show_points: bool = False,
    stat_label: str | None = None,
) -> SeriesConfig:
    """Return a series config with defaults derived from the options.

    Args:
        options: Resolved options the series was transformed for.
        color: Optional color override. Defaults to the primary color.
        tooltip_label: Optional tooltip label.
        chart_kind: Optional rendering kind. Defaults to a line for live and
            cumulative charts, bars otherwise.
        show_points: Whether to draw point markers.
        stat_label: Optional localized statistic label.

    Returns:
        SeriesConfig for the assembler.
    """

    if chart_kind is None:
        chart_kind = "line" if options.type in LINE_CHART_TYPES else "bar"
    return SeriesConfig(
        type=options.type,
        range=options.range,
        color=color or PRIMARY_COLOR,
        chart_kind=chart_kind,
        show_points=show_points,
        tooltip_label=tooltip_label,
        stat_label=stat_label,
    )


def default_x_axis(options: ResolvedChartOptions) -> ChartXAxis:
    """Return the x-axis descriptor for the resolved options."""

    return ChartXAxis(
        type=options.type,
        range=options.range,
        tick_format=X_TICK_FORMATS.get(options.type, "%m/%d"),
        max_ticks=MAX_X_TICKS.get(options.range, 10),
    )


def default_y_axis(
    options: ResolvedChartOptions,
    *,
    right: str | None = None,
    left: str | None = None,
) -> ChartYAxis:
    """Return the y-axis descriptor keyed to the statistics it scales.

    Args:
        options: Resolved options.
        right: Statistic id scaled by the right-hand axis.
        left: Statistic id scaled by the left-hand axis.
    """

    return ChartYAxis(
        type=options.type,
        left=YAxisSide(id=left) if left else None,
        right=YAxisSide(id=right) if right else None,
    )


def assemble(samples: Iterable[ChartPoint] | None, config: SeriesConfig) -> DataSeries:
    """Pair samples with their config. Missing samples become an empty series."""

    return DataSeries(data=tuple(samples or ()), config=config)


def encode_bundles(bundles: Iterable[SeriesBundle]) -> list[BundlePayload]:
    """Encode bundles into the JSON payload consumed by the renderer."""

    return [
        {
            "dataSet": [
                {"data": encode_series(series.data), "config": _encode_config(series.config)}
                for series in bundle.data_set
            ],
            "xAxis": {
                "type": bundle.x_axis.type,
                "range": bundle.x_axis.range,
                "tickFormat": bundle.x_axis.tick_format,
                "maxTicks": bundle.x_axis.max_ticks,
            },
            "yAxis": {
                "type": bundle.y_axis.type,
                "left": _encode_side(bundle.y_axis.left),
                "right": _encode_side(bundle.y_axis.right),
            },
            "warnings": list(bundle.warnings),
        }
        for bundle in bundles
    ]


def _encode_config(config: SeriesConfig) -> SeriesConfigPayload:
    """Encode a series config, omitting unset labels."""

    payload: SeriesConfigPayload = {
        "type": config.type,
        "range": config.range,
        "color": config.color,
        "chartType": config.chart_kind,
        "showPoints": config.show_points,
    }
    if config.tooltip_label is not None:
        payload["tooltipLabel"] = config.tooltip_label
    if config.stat_label is not None:
        payload["statLabel"] = config.stat_label
    return payload


def _encode_side(side: YAxisSide | None) -> dict[str, object] | None:
    if side is None:
        return None
    return {"id": side.id, "visible": side.visible}
