"""Pure analysis package for worldstats.

This package contains deterministic, testable computations that operate on
in-memory inputs and return DTOs. It must not import Django or perform any
I/O.
"""

from .transforms import transform_chart_data

__all__ = ["transform_chart_data"]
