"""Cache-backed retrieval of raw chart samples.

Queries are memoized by value in a Django cache alias with no timeout, so
repeated identical requests within a process do not re-issue network I/O.
The cache stores the raw JSON payload returned by the fetcher; samples are
decoded on every read.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable
from dataclasses import asdict, dataclass
from hashlib import sha256
from typing import Any, Callable

from django.conf import settings
from django.core.cache import caches

from analysis.dto import SampleSeries, SampleSeriesByStat

from .sample_codec import decode_series, decode_series_by_stat

logger = logging.getLogger(__name__)

CACHE_KEY_VERSION = "v1"

_MISSING = object()


@dataclass(frozen=True, slots=True)
class ChartQuery:
    """A raw-sample query, compared and cached by value.

    Args:
        stat: Statistic keys requested.
        range: Optional range option value.
        api_name: Optional upstream endpoint name ("all" for combined data).
        is_compressed: Whether the compressed representation is requested.
        is_single: Whether a single series is expected. Defaults to True when
            exactly one statistic is requested.
    """

    stat: tuple[str, ...]
    range: str | None = None
    api_name: str | None = None
    is_compressed: bool | None = None
    is_single: bool | None = None

    @property
    def expects_single(self) -> bool:
        if self.is_single is not None:
            return self.is_single
        return len(self.stat) == 1

    def cache_key(self, *, namespace: str = "world") -> str:
        """Return a content-based cache key for the query."""

        dumped = json.dumps(asdict(self), sort_keys=True, default=str)
        digest = sha256(dumped.encode("utf-8")).hexdigest()
        return f"chart:{namespace}:{CACHE_KEY_VERSION}:{digest}"


ChartFetcher = Callable[[ChartQuery], Awaitable[Any]]


class CachedChartData:
    """Memoizing chart data source backed by a Django cache alias.

    Args:
        fetcher: Async callable returning the raw payload for a query. Its
            exceptions propagate to the caller and nothing is cached.
        cache_alias: Django cache alias. Defaults to
            `settings.CHART_DATA_CACHE_ALIAS`.
        namespace: Key namespace separating independent chart sections.
    """

    def __init__(self, fetcher: ChartFetcher, *, cache_alias: str | None = None, namespace: str = "world"):
        self.fetcher = fetcher
        self.cache_alias = cache_alias or settings.CHART_DATA_CACHE_ALIAS
        self.namespace = namespace
        self.fetch_count = 0
        self._keys: set[str] = set()

    @property
    def cache(self):
        return caches[self.cache_alias]

    async def fetch(self, query: ChartQuery) -> SampleSeries | SampleSeriesByStat:
        """Return decoded samples for `query`, fetching on a cache miss.

        A payload is stored only after it decodes, so a malformed response is
        fetched again on the next call.

        Args:
            query: Query describing the requested statistic(s) and range.

        Returns:
            A single series for single-stat queries, otherwise a mapping of
            statistic key to series.
        """

        key = query.cache_key(namespace=self.namespace)
        payload = await self.cache.aget(key, _MISSING)
        if payload is not _MISSING:
            logger.debug("Chart data cache hit: %s", query)
            return _decode(query, payload)

        logger.debug("Chart data cache miss: %s", query)
        self.fetch_count += 1
        payload = await self.fetcher(query)
        decoded = _decode(query, payload)
        await self.cache.aset(key, payload, timeout=None)
        self._keys.add(key)
        return decoded

    async def clear(self) -> None:
        """Drop the entries this instance has stored.

        Clearing is instance-local: entries written under the same alias and
        namespace by another `CachedChartData` stay in the cache and are still
        served to this instance on the next fetch.
        """

        if self._keys:
            await self.cache.adelete_many(list(self._keys))
        self._keys.clear()


def _decode(query: ChartQuery, payload: object) -> SampleSeries | SampleSeriesByStat:
    if query.expects_single:
        return decode_series(payload)
    return decode_series_by_stat(payload)
