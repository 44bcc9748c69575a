"""Range filtering and bucketing helpers for chart sample series.

The chart pipeline fetches raw daily samples and reshapes them according to
the selected chart type and range. All helpers are deterministic, never
mutate their inputs, and return samples ordered by timestamp.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta
from itertools import accumulate
from typing import Callable

from .dto import ChartPoint, ChartRangeOptionValue, ChartTypeOptionValue, SampleSeries

RANGE_WINDOWS: dict[str, timedelta | None] = {
    "oneWeek": timedelta(days=7),
    "oneMonth": timedelta(days=30),
    "threeMonths": timedelta(days=90),
    "all": None,
}


def transform_chart_data(
    samples: Iterable[ChartPoint] | None,
    *,
    type: ChartTypeOptionValue,
    range: ChartRangeOptionValue | None,
    now: datetime | None = None,
) -> SampleSeries:
    """Filter and bucket raw samples for a chart type and range.

    Args:
        samples: Raw samples, in any order. None is treated as empty.
        type: Chart type selecting the bucketing strategy.
        range: Optional range limiting how far back samples are kept.
        now: Optional reference time for the range window. Defaults to the
            newest sample's timestamp.

    Returns:
        Transformed samples ordered by timestamp.

    Raises:
        ValueError: When `type` or `range` is not a supported value.
    """

    ordered = tuple(sorted(samples or (), key=lambda point: point.x))
    filtered = filter_by_range(ordered, range=range, now=now)

    if type in ("daily", "live"):
        return filtered
    if type == "weekly":
        return bucket_sum(filtered, bucket=week_start)
    if type == "monthly":
        return bucket_sum(filtered, bucket=month_start)
    if type == "accumulated":
        return cumulative(filtered)
    raise ValueError(f"Unsupported chart type: {type!r}")


def filter_by_range(
    samples: Sequence[ChartPoint],
    *,
    range: ChartRangeOptionValue | None,
    now: datetime | None = None,
) -> SampleSeries:
    """Keep samples within the range window ending at `now`.

    Args:
        samples: Samples ordered by timestamp.
        range: Range option value, or None to keep every sample.
        now: Window end. Defaults to the newest sample's timestamp.

    Returns:
        Samples whose timestamp falls within `[now - window, now]`.
    """

    if range is None:
        return tuple(samples)
    if range not in RANGE_WINDOWS:
        raise ValueError(f"Unsupported chart range: {range!r}")
    window = RANGE_WINDOWS[range]
    if window is None or not samples:
        return tuple(samples)

    end = now if now is not None else samples[-1].x
    start = end - window
    return tuple(point for point in samples if start < point.x <= end)


def bucket_sum(
    samples: Iterable[ChartPoint],
    *,
    bucket: Callable[[datetime], datetime],
) -> SampleSeries:
    """Sum sample values per bucket.

    Args:
        samples: Samples ordered by timestamp.
        bucket: Callable mapping a timestamp to its bucket start.

    Returns:
        One sample per bucket, stamped at the bucket start.
    """

    totals: dict[datetime, float] = {}
    for point in samples:
        key = bucket(point.x)
        totals[key] = totals.get(key, 0.0) + point.y
    return tuple(ChartPoint(x=key, y=value) for key, value in sorted(totals.items()))


def cumulative(samples: Sequence[ChartPoint]) -> SampleSeries:
    """Return the running total of a series."""

    running = accumulate(point.y for point in samples)
    return tuple(ChartPoint(x=point.x, y=total) for point, total in zip(samples, running))


def week_start(value: datetime) -> datetime:
    """Return Monday 00:00 of the ISO week containing `value`."""

    day = value.replace(hour=0, minute=0, second=0, microsecond=0)
    return day - timedelta(days=day.weekday())


def month_start(value: datetime) -> datetime:
    """Return the first day of the month containing `value`."""

    return value.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
