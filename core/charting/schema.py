"""Schema types for declarative chart options and chart payloads.

The world chart widget is driven by option schemas instead of hard-coded
branching: each statistic declares which display options are legal, their
defaults, and which options change when `type` takes a particular value. The
pipeline consumes resolved options and produces `SeriesBundle` values that
the renderer draws without further interpretation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, TypeAlias

from analysis.dto import ChartRangeOptionValue, ChartTypeOptionValue, SampleSeries

from .errors import InvalidStatistic

Statistic = Literal["confirmed", "deceased"]

SUPPORTED_STATISTICS: tuple[Statistic, ...] = ("confirmed", "deceased")

ChartCompareOptionValue = Literal["yesterday", "weekAgo", "twoWeeksAgo", "monthAgo"]

ChartMode = Literal["COMPACT", "EXPANDED"]

ChartKind = Literal["line", "bar"]


@dataclass(frozen=True, slots=True)
class OptionChoice:
    """A selectable option value and its display label."""

    value: str
    label: str


@dataclass(frozen=True, slots=True)
class EnabledOption:
    """An option key that is applicable, with its choices and default.

    Args:
        choices: Ordered, non-empty selectable values.
        default: Value selected when the user has not chosen one.
    """

    choices: tuple[OptionChoice, ...]
    default: str

    @property
    def values(self) -> tuple[str, ...]:
        return tuple(choice.value for choice in self.choices)

    def label_for(self, value: str) -> str | None:
        for choice in self.choices:
            if choice.value == value:
                return choice.label
        return None


@dataclass(frozen=True, slots=True)
class DisabledOption:
    """An option key that is present but inapplicable."""


DISABLED = DisabledOption()

OptionSetting: TypeAlias = EnabledOption | DisabledOption


@dataclass(frozen=True, slots=True)
class OverrideRule:
    """A conditional patch applied when a trigger option has a given value.

    Patched keys fully replace the base setting; a `DISABLED` patch makes the
    key inapplicable. Rules are applied in declaration order, so later rules
    win on conflicting keys.

    Args:
        trigger_key: Option key whose selected value is compared.
        trigger_value: Value that activates the patch.
        patch: Replacement settings keyed by option key.
    """

    trigger_key: str
    trigger_value: str
    patch: Mapping[str, OptionSetting]

    def matches(self, selection: Mapping[str, str | None]) -> bool:
        return selection.get(self.trigger_key) == self.trigger_value

    def apply(self, options: Mapping[str, OptionSetting]) -> dict[str, OptionSetting]:
        merged = dict(options)
        merged.update(self.patch)
        return merged


@dataclass(frozen=True, slots=True)
class StatisticOptionSchema:
    """Declared display options for one statistic.

    Args:
        statistic: Statistic tag this schema belongs to.
        label: Localized statistic label.
        options: Base option settings keyed by option key.
        overrides: Ordered override rules.
    """

    statistic: Statistic
    label: str
    options: Mapping[str, OptionSetting]
    overrides: tuple[OverrideRule, ...] = ()

    def resolved_options(self, selected_type: str | None = None) -> dict[str, OptionSetting]:
        """Return the option settings with matching overrides applied.

        Args:
            selected_type: Currently selected chart type. Defaults to the
                schema's default type.

        Returns:
            Option settings keyed by option key, in base declaration order.
        """

        selection = {"type": selected_type if selected_type is not None else self.default_type}
        resolved: dict[str, OptionSetting] = dict(self.options)
        for rule in self.overrides:
            if rule.matches(selection):
                resolved = rule.apply(resolved)
        return resolved

    @property
    def default_type(self) -> str | None:
        setting = self.options.get("type")
        if isinstance(setting, EnabledOption):
            return setting.default
        return None


@dataclass(frozen=True, slots=True)
class ChartOptionSchema:
    """Option schemas for every supported statistic."""

    statistics: Mapping[str, StatisticOptionSchema]

    def for_statistic(self, statistic: str) -> StatisticOptionSchema:
        schema = self.statistics.get(statistic)
        if schema is None:
            raise InvalidStatistic(statistic, supported=tuple(self.statistics))
        return schema


@dataclass(frozen=True, slots=True)
class ResolvedChartOptions:
    """The concrete option values currently selected for a chart.

    Args:
        type: Selected chart type.
        range: Selected range, or None when range is inapplicable.
        compare: Selected live comparison point, or None when inapplicable.
    """

    type: ChartTypeOptionValue
    range: ChartRangeOptionValue | None = None
    compare: ChartCompareOptionValue | None = None

    def as_dict(self) -> dict[str, str]:
        """Return only the keys that carry a value."""

        raw = {"type": self.type, "range": self.range, "compare": self.compare}
        return {key: value for key, value in raw.items() if value is not None}


@dataclass(frozen=True, slots=True)
class SeriesConfig:
    """Visual and semantic configuration for one data series.

    Args:
        type: Chart type the series was transformed for.
        range: Range the series was transformed for.
        color: Line/bar color.
        chart_kind: Rendering kind.
        show_points: Whether point markers are drawn.
        tooltip_label: Optional tooltip label.
        stat_label: Optional localized statistic label.
    """

    type: ChartTypeOptionValue
    range: ChartRangeOptionValue | None
    color: str
    chart_kind: ChartKind
    show_points: bool = False
    tooltip_label: str | None = None
    stat_label: str | None = None


@dataclass(frozen=True, slots=True)
class DataSeries:
    """Transformed samples paired with their series config."""

    data: SampleSeries
    config: SeriesConfig


@dataclass(frozen=True, slots=True)
class ChartXAxis:
    """X-axis descriptor computed from the resolved options.

    Args:
        type: Chart type driving the tick granularity.
        range: Range driving the tick density.
        tick_format: strftime format for tick labels.
        max_ticks: Upper bound on rendered ticks.
    """

    type: ChartTypeOptionValue
    range: ChartRangeOptionValue | None
    tick_format: str
    max_ticks: int


@dataclass(frozen=True, slots=True)
class YAxisSide:
    """One side of the y-axis, keyed to the statistic it scales."""

    id: str
    visible: bool = True


@dataclass(frozen=True, slots=True)
class ChartYAxis:
    """Y-axis descriptor with optional left/right sides."""

    type: ChartTypeOptionValue
    left: YAxisSide | None = None
    right: YAxisSide | None = None


@dataclass(frozen=True, slots=True)
class SeriesBundle:
    """One renderable chart panel."""

    data_set: tuple[DataSeries, ...]
    x_axis: ChartXAxis
    y_axis: ChartYAxis
    warnings: tuple[str, ...] = ()
