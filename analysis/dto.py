"""DTO types shared by the chart transforms.

DTOs are plain data containers used to transport samples between the data
source, the transforms and the chart assembler. They intentionally avoid any
Django dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

ChartTypeOptionValue = Literal["live", "daily", "weekly", "monthly", "accumulated"]
ChartRangeOptionValue = Literal["oneWeek", "oneMonth", "threeMonths", "all"]

CHART_TYPE_VALUES: tuple[ChartTypeOptionValue, ...] = ("live", "daily", "weekly", "monthly", "accumulated")
CHART_RANGE_VALUES: tuple[ChartRangeOptionValue, ...] = ("oneWeek", "oneMonth", "threeMonths", "all")


@dataclass(frozen=True, slots=True)
class ChartPoint:
    """A single time-series sample.

    Attributes:
        x: Sample timestamp.
        y: Sample value.
    """

    x: datetime
    y: float


SampleSeries = tuple[ChartPoint, ...]
SampleSeriesByStat = Mapping[str, SampleSeries]
