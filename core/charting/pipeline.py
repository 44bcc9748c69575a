"""Chart data pipeline for the world chart section.

`get_chart_data` turns a statistic, its resolved options and a display mode
into renderable `SeriesBundle` values. Branch selection is an explicit
dispatch keyed by `(mode, statistic, type)`:

- EXPANDED: one cached fetch of every statistic over one month, one bundle
  per statistic in the payload.
- COMPACT live comparison (`confirmed` + `live`): no fetch; overlays the
  selected past reference point and today from the live snapshot.
- COMPACT single series: one cached fetch of the statistic for its range.

Data source failures propagate unmodified. Stale results from superseded
selections are discarded by the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import Any, Callable, Literal

from django.utils.translation import gettext

from analysis.transforms import transform_chart_data

from .assembler import MUTED_COLOR, PRIMARY_COLOR, assemble, default_series_config, default_x_axis, default_y_axis
from .configs import COMPARE_LABELS, STAT_LABELS, TODAY_LABEL
from .data_source import CachedChartData, ChartQuery
from .errors import InvalidStatistic
from .options import Translate
from .sample_codec import LiveSnapshot, decode_live_snapshot
from .schema import SUPPORTED_STATISTICS, ChartMode, DataSeries, ResolvedChartOptions, SeriesBundle

logger = logging.getLogger(__name__)

ChartBranch = Literal["expanded", "live_comparison", "single_series"]

CHART_MODES: tuple[ChartMode, ...] = ("COMPACT", "EXPANDED")

LIVE_COMPARISON_KEYS: frozenset[tuple[str, str]] = frozenset({("confirmed", "live")})

EXPANDED_QUERY = ChartQuery(
    stat=tuple(SUPPORTED_STATISTICS),
    api_name="all",
    range="oneMonth",
    is_compressed=True,
    is_single=False,
)


@dataclass(frozen=True, slots=True)
class ChartRequest:
    """Inputs shared by every pipeline branch."""

    statistic: str
    options: ResolvedChartOptions
    data_source: CachedChartData
    live_snapshot: LiveSnapshot | Mapping[str, Any] | None
    translate: Translate


def select_branch(statistic: str, options: ResolvedChartOptions, mode: ChartMode) -> ChartBranch:
    """Return the pipeline branch for a `(mode, statistic, type)` triple.

    Raises:
        InvalidStatistic: When `statistic` is not supported.
        ValueError: When `mode` is not a supported mode.
    """

    if statistic not in SUPPORTED_STATISTICS:
        raise InvalidStatistic(statistic, supported=SUPPORTED_STATISTICS)
    if mode not in CHART_MODES:
        raise ValueError(f"Unsupported chart mode: {mode!r}.")
    if mode == "EXPANDED":
        return "expanded"
    if (statistic, options.type) in LIVE_COMPARISON_KEYS:
        return "live_comparison"
    return "single_series"


async def get_chart_data(
    statistic: str,
    options: ResolvedChartOptions,
    mode: ChartMode,
    *,
    data_source: CachedChartData,
    live_snapshot: LiveSnapshot | Mapping[str, Any] | None = None,
    translate: Translate = gettext,
) -> tuple[SeriesBundle, ...]:
    """Produce renderable chart panels for a statistic.

    Args:
        statistic: Primary statistic selected by the user.
        options: Options resolved against the statistic's schema.
        mode: "COMPACT" for a single panel, "EXPANDED" for one per statistic.
        data_source: Cache-backed raw sample source.
        live_snapshot: Pre-fetched live data, decoded or raw. Only the live
            comparison branch reads it, and raw payloads are decoded there.
        translate: Label lookup.

    Returns:
        One bundle in COMPACT mode, one per payload statistic in EXPANDED mode.
    """

    branch = select_branch(statistic, options, mode)
    logger.debug("Chart data branch=%s statistic=%s options=%s", branch, statistic, options.as_dict())

    request = ChartRequest(
        statistic=statistic,
        options=options,
        data_source=data_source,
        live_snapshot=live_snapshot,
        translate=translate,
    )
    return await BRANCHES[branch](request)


async def _expanded_bundles(request: ChartRequest) -> tuple[SeriesBundle, ...]:
    """Fetch every statistic for one month and emit one panel each."""

    options = request.options
    data = await request.data_source.fetch(EXPANDED_QUERY)
    if not isinstance(data, Mapping):
        raise ValueError("Expanded chart data must be keyed by statistic.")

    x_axis = default_x_axis(options)
    y_axis = default_y_axis(options, right=request.statistic)

    bundles: list[SeriesBundle] = []
    for key, samples in data.items():
        label = STAT_LABELS.get(key)
        config = default_series_config(options, stat_label=request.translate(label) if label else key)
        transformed = transform_chart_data(samples, type=options.type, range=options.range)
        bundles.append(SeriesBundle(data_set=(assemble(transformed, config),), x_axis=x_axis, y_axis=y_axis))
    return tuple(bundles)


async def _live_comparison_bundles(request: ChartRequest) -> tuple[SeriesBundle, ...]:
    """Overlay the selected past reference point and today, without fetching."""

    snapshot = request.live_snapshot
    if snapshot is None:
        raise ValueError("The live comparison chart requires a live snapshot.")
    if not isinstance(snapshot, LiveSnapshot):
        snapshot = decode_live_snapshot(snapshot)

    options = request.options
    warnings: list[str] = []
    compared = snapshot.series(options.compare)
    if compared is None:
        logger.warning("Live snapshot has no data for compare=%r", options.compare)
        warnings.append(f"No live data for comparison point {options.compare!r}.")
    today = snapshot.series("today")
    if today is None:
        logger.warning("Live snapshot has no data for today")
        warnings.append("No live data for today.")

    compare_label = COMPARE_LABELS.get(options.compare or "")
    data_set = (
        assemble(
            compared,
            default_series_config(
                options,
                color=MUTED_COLOR,
                tooltip_label=request.translate(compare_label) if compare_label else options.compare,
                chart_kind="line",
                show_points=True,
            ),
        ),
        assemble(
            today,
            default_series_config(
                options,
                color=PRIMARY_COLOR,
                tooltip_label=request.translate(TODAY_LABEL),
                chart_kind="line",
                show_points=True,
            ),
        ),
    )
    return (_single_bundle(request, data_set, warnings=tuple(warnings)),)


async def _single_series_bundles(request: ChartRequest) -> tuple[SeriesBundle, ...]:
    """Fetch one statistic for its range and wrap it in one panel."""

    options = request.options
    data = await request.data_source.fetch(ChartQuery(stat=(request.statistic,), range=options.range))
    transformed = transform_chart_data(data, type=options.type, range=options.range)  # type: ignore[arg-type]
    return (_single_bundle(request, (assemble(transformed, default_series_config(options)),)),)


def _single_bundle(
    request: ChartRequest,
    data_set: tuple[DataSeries, ...],
    *,
    warnings: tuple[str, ...] = (),
) -> SeriesBundle:
    """Wrap COMPACT series in a panel with default axes."""

    return SeriesBundle(
        data_set=data_set,
        x_axis=default_x_axis(request.options),
        y_axis=default_y_axis(request.options, right=request.statistic),
        warnings=warnings,
    )


BRANCHES: dict[ChartBranch, Callable[[ChartRequest], Awaitable[tuple[SeriesBundle, ...]]]] = {
    "expanded": _expanded_bundles,
    "live_comparison": _live_comparison_bundles,
    "single_series": _single_series_bundles,
}
