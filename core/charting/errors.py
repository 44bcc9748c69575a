"""Exceptions raised by the chart option resolver and data pipeline."""

from __future__ import annotations


class ChartOptionError(ValueError):
    """Base class for invalid chart option requests."""


class InvalidStatistic(ChartOptionError):
    """Raised when a schema or chart is requested for an unsupported statistic."""

    def __init__(self, statistic: object, *, supported: tuple[str, ...] = ()):
        self.statistic = statistic
        self.supported = supported
        message = f"Unsupported statistic: {statistic!r}."
        if supported:
            message += f" Expected one of {list(supported)}."
        super().__init__(message)


class InvalidOptionValue(ChartOptionError):
    """Raised when a selected option value is not one of the enabled choices."""

    def __init__(self, key: str, value: object, *, allowed: tuple[str, ...]):
        self.key = key
        self.value = value
        self.allowed = allowed
        super().__init__(f"Option {key}={value!r} is not allowed; expected one of {list(allowed)}.")


class FetchFailure(RuntimeError):
    """Raised by chart data fetchers when raw samples cannot be retrieved.

    The pipeline never catches this; callers own the error state.
    """
