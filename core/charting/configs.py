"""Built-in option schemas for the world chart section."""

from __future__ import annotations

from typing import Final

from django.utils.translation import gettext, gettext_noop

from .errors import InvalidStatistic
from .options import Translate, chart_range_options, chart_type_options, create_chart_options, option_choices
from .schema import (
    DISABLED,
    SUPPORTED_STATISTICS,
    ChartOptionSchema,
    OverrideRule,
    StatisticOptionSchema,
)

STAT_LABELS: Final[dict[str, str]] = {
    "confirmed": gettext_noop("Confirmed"),
    "deceased": gettext_noop("Deceased"),
}

COMPARE_LABELS: Final[dict[str, str]] = {
    "yesterday": gettext_noop("Yesterday"),
    "weekAgo": gettext_noop("1 week ago"),
    "twoWeeksAgo": gettext_noop("2 weeks ago"),
    "monthAgo": gettext_noop("1 month ago"),
}

TODAY_LABEL: Final[str] = gettext_noop("Today")

LIVE_COMPARE_CHOICES: Final[tuple[str, ...]] = ("yesterday", "weekAgo")


def build_chart_options(translate: Translate = gettext) -> ChartOptionSchema:
    """Build the option schemas for every world statistic.

    Args:
        translate: Label lookup. Defaults to the active Django translation.

    Returns:
        Validated ChartOptionSchema keyed by statistic.
    """

    return create_chart_options(
        (
            StatisticOptionSchema(
                statistic="confirmed",
                label=translate(STAT_LABELS["confirmed"]),
                options={
                    "type": chart_type_options(omit=("accumulated",), translate=translate),
                    "range": chart_range_options(translate=translate),
                    "compare": DISABLED,
                },
                overrides=(
                    OverrideRule(
                        trigger_key="type",
                        trigger_value="live",
                        patch={
                            "compare": option_choices(
                                LIVE_COMPARE_CHOICES, labels=COMPARE_LABELS, translate=translate
                            ),
                            "range": DISABLED,
                        },
                    ),
                ),
            ),
            StatisticOptionSchema(
                statistic="deceased",
                label=translate(STAT_LABELS["deceased"]),
                options={
                    "type": chart_type_options(omit=("live", "accumulated"), translate=translate),
                    "range": chart_range_options(translate=translate),
                },
            ),
        )
    )


def build_option_schema(statistic: str, translate: Translate = gettext) -> StatisticOptionSchema:
    """Return the option schema for one statistic.

    Args:
        statistic: Statistic tag.
        translate: Label lookup.

    Returns:
        StatisticOptionSchema with labels attached.

    Raises:
        InvalidStatistic: When `statistic` is not supported.
    """

    if statistic not in SUPPORTED_STATISTICS:
        raise InvalidStatistic(statistic, supported=SUPPORTED_STATISTICS)
    return build_chart_options(translate).for_statistic(statistic)
