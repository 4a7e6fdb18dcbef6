"""
Indicator Standardizer.

One generic evaluator over the declarative indicator table: validate the
inputs, derive the raw value, map it through the indicator's shape, clamp,
and band. Pure apart from debug logging.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from cpi_engine import shapes
from cpi_engine.banding import band_for
from cpi_engine.errors import ValidationError
from cpi_engine.indicators import get_indicator
from cpi_engine.records import result_fields
from cpi_engine.validation import validate_inputs

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 2


@dataclass(frozen=True)
class IndicatorResult:
    """Outcome of standardizing one indicator for one city."""

    key: str
    raw: float
    standardized: float
    comment: str

    def to_record_fields(self) -> Dict[str, Any]:
        return result_fields(self.key, self.raw, self.standardized, self.comment)


def standardize(
    key: str,
    inputs: Mapping[str, Any],
    precision: Optional[int] = DEFAULT_PRECISION,
) -> IndicatorResult:
    """
    Standardize raw inputs for one indicator.

    Args:
        key: Indicator key, e.g. "co2_emissions"
        inputs: Raw input values by name
        precision: Decimal places the score is rounded to (None keeps full precision)

    Raises:
        UnknownIndicatorError: no indicator is registered under `key`
        ValidationError: an input is missing, non-numeric or out of domain
    """
    definition = get_indicator(key)
    values = validate_inputs(definition, inputs)

    try:
        raw = definition.raw(values)
        measured = definition.measured(raw, values)
        params = definition.params_for(values)
    except (ZeroDivisionError, OverflowError) as exc:
        raise ValidationError(key, f"inputs do not produce a defined value ({exc})") from exc

    if isinstance(raw, complex) or isinstance(measured, complex):
        raise ValidationError(key, "inputs do not produce a real value")
    if not (math.isfinite(raw) and math.isfinite(measured)):
        raise ValidationError(key, "inputs do not produce a finite value")

    score = shapes.clamp(shapes.evaluate(definition.shape, measured, **params))
    if precision is not None:
        score = round(score, precision)
    comment = band_for(score, definition.banding)

    logger.debug(f"Standardized {key}: raw={raw} score={score} ({comment})")
    return IndicatorResult(key=key, raw=raw, standardized=score, comment=comment)
