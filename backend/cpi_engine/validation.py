"""
Input validation for indicator forms.

Every rule here runs before any formula arithmetic. Failures raise
ValidationError naming the offending input.
"""

import math
from typing import Any, Dict, List, Mapping

from cpi_engine.errors import ValidationError
from cpi_engine.indicators import (
    MATRIX,
    NUMBER,
    SELECTION,
    SERIES,
    IndicatorDefinition,
    InputField,
)


def _to_number(field: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValidationError(field, "must be a number") from None
    if not isinstance(value, (int, float)):
        raise ValidationError(field, "must be a number")
    value = float(value)
    if not math.isfinite(value):
        raise ValidationError(field, "must be a finite number")
    return value


def _check_bounds(field: InputField, value: float) -> None:
    if value < 0:
        raise ValidationError(field.name, "must not be negative")
    if field.positive and value == 0:
        raise ValidationError(field.name, "must be greater than zero")


def _to_list(field: InputField, value: Any) -> List[Any]:
    # forms submit series as comma-separated text
    if isinstance(value, str):
        value = [part for part in value.split(",") if part.strip()]
    if not isinstance(value, (list, tuple)):
        raise ValidationError(field.name, "must be a list")
    if len(value) < field.min_length:
        raise ValidationError(field.name, f"must contain at least {field.min_length} entries")
    return list(value)


def _series(field: InputField, value: Any) -> List[float]:
    numbers = []
    for item in _to_list(field, value):
        number = _to_number(field.name, item)
        _check_bounds(field, number)
        numbers.append(number)
    return numbers


def _matrix(field: InputField, value: Any) -> List[List[float]]:
    rows = []
    for row in _to_list(field, value):
        cell = InputField(name=field.name, label=field.label, kind=SERIES)
        rows.append(_series(cell, row))
    return rows


def _selection(field: InputField, value: Any) -> List[str]:
    selected = _to_list(field, value)
    seen = set()
    for item in selected:
        if item not in field.choices:
            raise ValidationError(field.name, f"'{item}' is not a recognised option")
        if item in seen:
            raise ValidationError(field.name, f"'{item}' is selected more than once")
        seen.add(item)
    return selected


def validate_inputs(definition: IndicatorDefinition, inputs: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Check and normalize the raw inputs for one indicator.

    Returns a new mapping with numbers as floats and lists as lists of floats
    (or option strings for selections). Unknown input names are rejected.
    """
    if not isinstance(inputs, Mapping):
        raise ValidationError("inputs", "must be a mapping of input names to values")

    expected = set(definition.input_names)
    for name in inputs:
        if name not in expected:
            raise ValidationError(name, f"is not an input of {definition.key}")

    values: Dict[str, Any] = {}
    for field in definition.inputs:
        if field.name not in inputs or inputs[field.name] is None:
            raise ValidationError(field.name, "is required")
        value = inputs[field.name]

        if field.kind == NUMBER:
            number = _to_number(field.name, value)
            _check_bounds(field, number)
            values[field.name] = number
        elif field.kind == SERIES:
            values[field.name] = _series(field, value)
        elif field.kind == MATRIX:
            values[field.name] = _matrix(field, value)
        elif field.kind == SELECTION:
            values[field.name] = _selection(field, value)
        else:
            raise ValueError(f"Unknown input kind '{field.kind}'")

    for check in definition.checks:
        check(values)

    return values
