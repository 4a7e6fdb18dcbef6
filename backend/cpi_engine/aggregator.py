"""
Aggregator - rolls standardized indicator scores up the CPI hierarchy.

Each level is the arithmetic mean of its present children. A level with no
present children is Absent ("no data"), which is distinct from a score of 0
and is left out of the level above. Nothing is cached; every call recomputes
from the record it is given.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from cpi_engine.banding import band, band_for
from cpi_engine.hierarchy import CPI_HIERARCHY, Dimension, Hierarchy, SubDimension
from cpi_engine.indicators import INDICATORS
from cpi_engine.records import standardized_score

logger = logging.getLogger(__name__)

NO_DATA = "no data"


@dataclass(frozen=True)
class Absent:
    """A level (or indicator) with nothing recorded."""

    key: str
    name: str = ""

    @property
    def status(self) -> str:
        return NO_DATA


@dataclass(frozen=True)
class IndicatorScore:
    key: str
    standardized: float
    comment: str


@dataclass(frozen=True)
class SubDimensionResult:
    key: str
    name: str
    average: float
    comment: str
    indicators: Tuple[Union[IndicatorScore, Absent], ...]


@dataclass(frozen=True)
class DimensionResult:
    key: str
    name: str
    average: float
    comment: str
    sub_dimensions: Tuple[Union[SubDimensionResult, Absent], ...]


@dataclass(frozen=True)
class IndexResult:
    average: float
    comment: str


@dataclass(frozen=True)
class CompositeResult:
    """Aggregated view of one city record."""

    index: Union[IndexResult, Absent]
    dimensions: Tuple[Union[DimensionResult, Absent], ...]

    def dimension(self, key: str) -> Union[DimensionResult, Absent]:
        for dimension in self.dimensions:
            if dimension.key == key:
                return dimension
        raise KeyError(key)

    def sub_dimension(self, key: str) -> Union[SubDimensionResult, Absent]:
        for dimension in self.dimensions:
            if isinstance(dimension, Absent):
                continue
            for sub_dimension in dimension.sub_dimensions:
                if sub_dimension.key == key:
                    return sub_dimension
        # every sub-dimension of an absent dimension is absent too
        return Absent(key)

    def present_dimensions(self) -> List[DimensionResult]:
        return [d for d in self.dimensions if not isinstance(d, Absent)]


def mean(values: Sequence[float]) -> Optional[float]:
    """Arithmetic mean, or None for an empty sequence."""
    if not values:
        return None
    return sum(values) / len(values)


def _indicator(record: Mapping[str, Any], key: str) -> Union[IndicatorScore, Absent]:
    score = standardized_score(record, key)
    if score is None:
        return Absent(key)
    definition = INDICATORS.get(key)
    banding = definition.banding if definition else "default"
    return IndicatorScore(key=key, standardized=score, comment=band_for(score, banding))


def aggregate_sub_dimension(
    record: Mapping[str, Any], sub_dimension: SubDimension
) -> Union[SubDimensionResult, Absent]:
    indicators = tuple(_indicator(record, key) for key in sub_dimension.indicators)
    average = mean([i.standardized for i in indicators if isinstance(i, IndicatorScore)])
    if average is None:
        return Absent(sub_dimension.key, sub_dimension.name)
    return SubDimensionResult(
        key=sub_dimension.key,
        name=sub_dimension.name,
        average=average,
        comment=band(average),
        indicators=indicators,
    )


def aggregate_dimension(
    record: Mapping[str, Any], dimension: Dimension
) -> Union[DimensionResult, Absent]:
    sub_dimensions = tuple(aggregate_sub_dimension(record, s) for s in dimension.sub_dimensions)
    average = mean([s.average for s in sub_dimensions if isinstance(s, SubDimensionResult)])
    if average is None:
        return Absent(dimension.key, dimension.name)
    return DimensionResult(
        key=dimension.key,
        name=dimension.name,
        average=average,
        comment=band(average),
        sub_dimensions=sub_dimensions,
    )


def aggregate(
    record: Optional[Mapping[str, Any]], hierarchy: Hierarchy = CPI_HIERARCHY
) -> CompositeResult:
    """
    Compute the composite view of a city record.

    A missing record (None) aggregates to an index and dimensions that are
    all Absent. A stored `cpi` field, if any, is ignored; the index is always
    the mean of the present dimension averages.
    """
    record = record or {}
    dimensions = tuple(aggregate_dimension(record, d) for d in hierarchy.dimensions)
    average = mean([d.average for d in dimensions if isinstance(d, DimensionResult)])
    if average is None:
        index: Union[IndexResult, Absent] = Absent("cpi", "City Prosperity Index")
    else:
        index = IndexResult(average=average, comment=band(average))

    present = sum(1 for d in dimensions if isinstance(d, DimensionResult))
    logger.debug(f"Aggregated {present}/{len(dimensions)} dimensions, index = {average}")
    return CompositeResult(index=index, dimensions=dimensions)
