"""Tests for project settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from django.conf import settings

pytestmark = pytest.mark.unit


def test_locale_paths_point_at_existing_directories() -> None:
    """Every configured locale directory exists in the repository."""

    missing = [str(path) for path in getattr(settings, "LOCALE_PATHS", []) if not Path(path).is_dir()]

    assert missing == []


def test_chart_cache_alias_is_configured_without_expiry() -> None:
    """The chart data alias is declared in CACHES and never expires entries."""

    alias = settings.CACHES[settings.CHART_DATA_CACHE_ALIAS]

    assert alias["TIMEOUT"] is None
