"""Encoding/decoding helpers for raw chart sample payloads.

Fetchers return JSON-shaped payloads so they can be stored in any Django
cache backend. A series is a list of `{"x": <iso datetime>, "y": <number>}`
objects (`[x, y]` pairs are accepted too); a multi-statistic payload maps
statistic keys to series; the live snapshot nests series under `hourlyLive`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, cast

from analysis.dto import ChartPoint, SampleSeries, SampleSeriesByStat


@dataclass(frozen=True, slots=True)
class LiveSnapshot:
    """Pre-fetched hourly live samples keyed by relative time offset.

    Args:
        hourly_live: Series keyed by "today", "yesterday", "weekAgo", ...
    """

    hourly_live: Mapping[str, SampleSeries] = field(default_factory=dict)

    def series(self, key: str | None) -> SampleSeries | None:
        """Return the series for `key`, or None when the snapshot lacks it."""

        if key is None:
            return None
        return self.hourly_live.get(key)


def decode_series(payload: object) -> SampleSeries:
    """Decode a raw series payload into ordered chart points.

    Args:
        payload: List of point objects or `[x, y]` pairs. None decodes to an
            empty series.

    Returns:
        Chart points in payload order.

    Raises:
        ValueError: When the payload is not a list or a point is malformed.
    """

    if payload is None:
        return ()
    if not isinstance(payload, (list, tuple)):
        raise ValueError(f"Expected a list of samples, got {type(payload).__name__}.")
    return tuple(_decode_point(raw) for raw in payload)


def decode_series_by_stat(payload: object) -> SampleSeriesByStat:
    """Decode a `{stat: series}` payload, keeping payload key order."""

    if not isinstance(payload, Mapping):
        raise ValueError(f"Expected a mapping of statistic series, got {type(payload).__name__}.")
    return {str(key): decode_series(value) for key, value in payload.items()}


def decode_live_snapshot(payload: Mapping[str, Any] | None) -> LiveSnapshot:
    """Decode a live payload shaped `{"hourlyLive": {"today": [...], ...}}`.

    Unknown offset keys are kept; missing ones are simply absent.
    """

    hourly = cast(Mapping[str, Any], (payload or {}).get("hourlyLive") or {})
    return LiveSnapshot(hourly_live={str(key): decode_series(value) for key, value in hourly.items()})


def encode_series(series: SampleSeries | None) -> list[dict[str, Any]]:
    """Encode chart points into a JSON-serializable list."""

    return [{"x": point.x.isoformat(), "y": point.y} for point in series or ()]


def _decode_point(raw: object) -> ChartPoint:
    """Decode a single point object or pair."""

    if isinstance(raw, Mapping):
        x, y = raw.get("x"), raw.get("y")
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        x, y = raw
    else:
        raise ValueError(f"Malformed sample: {raw!r}")
    return ChartPoint(x=_parse_datetime(x), y=_parse_float(y))


def _parse_datetime(value: object) -> datetime:
    """Parse an ISO timestamp (or pass through a datetime)."""

    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as exc:
        raise ValueError(f"Malformed sample timestamp: {value!r}") from exc


def _parse_float(value: object) -> float:
    """Parse a numeric sample value."""

    if isinstance(value, bool) or value is None:
        raise ValueError(f"Malformed sample value: {value!r}")
    try:
        return float(cast(Any, value))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Malformed sample value: {value!r}") from exc
