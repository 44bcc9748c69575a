"""Option schema construction and selection resolution.

Schemas are pure functions of the active label lookup, so they are rebuilt
whenever the language changes. A raw selection (for example a query string)
is resolved against the schema as overridden by the selected `type`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Callable

from django.utils.translation import gettext, gettext_noop

from analysis.dto import CHART_RANGE_VALUES, CHART_TYPE_VALUES

from .errors import InvalidOptionValue
from .schema import (
    ChartOptionSchema,
    EnabledOption,
    OptionChoice,
    OptionSetting,
    ResolvedChartOptions,
    StatisticOptionSchema,
)
from .validator import validate_statistic_options_many

logger = logging.getLogger(__name__)

Translate = Callable[[str], str]

CHART_TYPE_LABELS: dict[str, str] = {
    "live": gettext_noop("Live"),
    "daily": gettext_noop("Daily"),
    "weekly": gettext_noop("Weekly"),
    "monthly": gettext_noop("Monthly"),
    "accumulated": gettext_noop("Cumulative"),
}

CHART_RANGE_LABELS: dict[str, str] = {
    "oneWeek": gettext_noop("1 week"),
    "oneMonth": gettext_noop("1 month"),
    "threeMonths": gettext_noop("3 months"),
    "all": gettext_noop("All"),
}


def option_choices(
    values: Iterable[str],
    *,
    labels: Mapping[str, str],
    omit: Iterable[str] = (),
    default: str | None = None,
    translate: Translate = gettext,
) -> EnabledOption:
    """Build an enabled option from a value list and its label table.

    Args:
        values: All variants, in display order.
        labels: Untranslated label per value.
        omit: Values excluded from the choices.
        default: Preferred default. Falls back to the first remaining value
            when omitted or not provided.
        translate: Label lookup.

    Returns:
        EnabledOption with translated labels.
    """

    omitted = set(omit)
    choices = tuple(
        OptionChoice(value=value, label=translate(labels[value])) for value in values if value not in omitted
    )
    if not choices:
        raise ValueError("An enabled option must keep at least one choice.")
    remaining = [choice.value for choice in choices]
    return EnabledOption(choices=choices, default=default if default in remaining else remaining[0])


def chart_type_options(
    *,
    omit: Iterable[str] = (),
    default: str = "daily",
    translate: Translate = gettext,
) -> EnabledOption:
    """Return the chart type option with every variant except `omit`."""

    return option_choices(
        CHART_TYPE_VALUES, labels=CHART_TYPE_LABELS, omit=omit, default=default, translate=translate
    )


def chart_range_options(
    *,
    omit: Iterable[str] = (),
    default: str = "oneMonth",
    translate: Translate = gettext,
) -> EnabledOption:
    """Return the range option with every variant except `omit`."""

    return option_choices(
        CHART_RANGE_VALUES, labels=CHART_RANGE_LABELS, omit=omit, default=default, translate=translate
    )


def create_chart_options(definitions: Iterable[StatisticOptionSchema]) -> ChartOptionSchema:
    """Validate per-statistic schemas and index them by statistic.

    Args:
        definitions: One schema per statistic.

    Returns:
        ChartOptionSchema keyed by statistic, in declaration order.

    Raises:
        ValueError: When a schema is invalid or a statistic is declared twice.
    """

    schemas = tuple(definitions)
    validate_statistic_options_many(schemas)

    indexed: dict[str, StatisticOptionSchema] = {}
    for schema in schemas:
        if schema.statistic in indexed:
            raise ValueError(f"Duplicate option schema for statistic {schema.statistic!r}.")
        indexed[schema.statistic] = schema
    return ChartOptionSchema(statistics=indexed)


def resolve_option_selection(
    schema: StatisticOptionSchema,
    selection: Mapping[str, Any] | None = None,
) -> ResolvedChartOptions:
    """Resolve a raw selection against a statistic's option schema.

    `type` is resolved first against the base options; every other key is
    then resolved against the options as overridden by that type. Keys that
    the override disables are dropped, missing enabled keys take their
    default, and blank values count as missing.

    Args:
        schema: Option schema for the selected statistic.
        selection: Raw selected values keyed by option key.

    Returns:
        ResolvedChartOptions for the pipeline.

    Raises:
        InvalidOptionValue: When a value is not one of an enabled key's choices.
    """

    raw = {key: value for key, value in (selection or {}).items() if value not in (None, "")}

    type_setting = schema.options["type"]
    selected_type = _resolve_value("type", type_setting, raw.get("type"))

    resolved: dict[str, str | None] = {"type": selected_type}
    for key, setting in schema.resolved_options(selected_type).items():
        if key == "type":
            continue
        if not isinstance(setting, EnabledOption):
            if key in raw:
                logger.debug("Dropping %s=%r: disabled for %s type=%s", key, raw[key], schema.statistic, selected_type)
            continue
        resolved[key] = _resolve_value(key, setting, raw.get(key))

    return ResolvedChartOptions(
        type=resolved["type"],  # type: ignore[arg-type]
        range=resolved.get("range"),  # type: ignore[arg-type]
        compare=resolved.get("compare"),  # type: ignore[arg-type]
    )


def _resolve_value(key: str, setting: OptionSetting, value: object) -> str:
    """Return the selected value for an enabled key, or its default."""

    if not isinstance(setting, EnabledOption):
        raise InvalidOptionValue(key, value, allowed=())
    if value is None:
        return setting.default
    if value not in setting.values:
        raise InvalidOptionValue(key, value, allowed=setting.values)
    return str(value)


def encode_option_schema(schema: StatisticOptionSchema, *, selected_type: str | None = None) -> dict[str, Any]:
    """Encode a statistic's resolved option schema into a JSON-friendly dict.

    Args:
        schema: Option schema to encode.
        selected_type: Selected type used to apply overrides.

    Returns:
        Payload with enabled keys as `{"default", "choices"}` and disabled keys
        as None.
    """

    options: dict[str, Any] = {}
    for key, setting in schema.resolved_options(selected_type).items():
        if not isinstance(setting, EnabledOption):
            options[key] = None
            continue
        options[key] = {
            "default": setting.default,
            "choices": [{"value": choice.value, "label": choice.label} for choice in setting.choices],
        }
    return {"statistic": schema.statistic, "label": schema.label, "options": options}
