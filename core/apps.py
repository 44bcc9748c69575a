"""App configuration for the core Django app."""

from __future__ import annotations

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the `core` app (world chart options and data)."""

    name = "core"
    verbose_name = "World charts"
