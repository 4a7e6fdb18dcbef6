"""
City Prosperity Index engine.

Standardizes raw urban indicator inputs to 0-100 scores and aggregates them
through the Dimension -> Sub-Dimension -> Indicator hierarchy.
"""

from cpi_engine.aggregator import Absent, CompositeResult, aggregate
from cpi_engine.banding import band
from cpi_engine.errors import CPIError, StoreError, UnknownIndicatorError, ValidationError
from cpi_engine.hierarchy import CPI_HIERARCHY
from cpi_engine.indicators import INDICATORS, get_indicator
from cpi_engine.standardizer import IndicatorResult, standardize

__all__ = [
    "Absent",
    "CompositeResult",
    "aggregate",
    "band",
    "CPIError",
    "StoreError",
    "UnknownIndicatorError",
    "ValidationError",
    "CPI_HIERARCHY",
    "INDICATORS",
    "get_indicator",
    "IndicatorResult",
    "standardize",
]
