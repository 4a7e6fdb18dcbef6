"""
City record field naming and merge helpers.

A city record is a flat mapping. For every indicator key it may carry
`{key}` (raw value), `{key}_standardized` and `{key}_comment`.
"""

import math
from typing import Any, Dict, Mapping, Optional

from cpi_engine.errors import ValidationError
from cpi_engine.hierarchy import CPI_HIERARCHY, Hierarchy

STANDARDIZED_SUFFIX = "_standardized"
COMMENT_SUFFIX = "_comment"


def standardized_field(key: str) -> str:
    return f"{key}{STANDARDIZED_SUFFIX}"


def comment_field(key: str) -> str:
    return f"{key}{COMMENT_SUFFIX}"


def result_fields(key: str, raw: float, standardized: float, comment: str) -> Dict[str, Any]:
    """The three fields an indicator result contributes to a record."""
    return {
        key: raw,
        standardized_field(key): standardized,
        comment_field(key): comment,
    }


def record_field_names(hierarchy: Hierarchy = CPI_HIERARCHY) -> frozenset:
    """Every field name a record may carry for the given hierarchy."""
    names = set()
    for key in hierarchy.indicator_keys():
        names.update((key, standardized_field(key), comment_field(key)))
    return frozenset(names)


def normalize_fields(fields: Mapping[str, Any], hierarchy: Hierarchy = CPI_HIERARCHY) -> Dict[str, Any]:
    """
    Validate a batch of raw record fields before they are merged.

    Names must be known record fields; standardized values must be numbers in
    [0, 100] or None, comments strings or None.
    """
    allowed = record_field_names(hierarchy)
    normalized: Dict[str, Any] = {}
    for name, value in fields.items():
        if name not in allowed:
            raise ValidationError(name, "is not a known record field")
        if value is None:
            normalized[name] = None
        elif name.endswith(COMMENT_SUFFIX):
            if not isinstance(value, str):
                raise ValidationError(name, "must be a string")
            normalized[name] = value
        else:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(name, "must be a number")
            if not math.isfinite(value):
                raise ValidationError(name, "must be a finite number")
            if name.endswith(STANDARDIZED_SUFFIX) and not 0 <= value <= 100:
                raise ValidationError(name, "must lie between 0 and 100")
            normalized[name] = float(value)
    return normalized


def merge_fields(existing: Optional[Mapping[str, Any]], updates: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge updates into a record's fields; the update wins per key."""
    merged = dict(existing or {})
    merged.update(updates)
    return merged


def standardized_score(record: Mapping[str, Any], key: str) -> Optional[float]:
    """
    The standardized score recorded for an indicator, or None when absent.

    None, NaN and non-numeric values count as absent; 0 is a present score.
    """
    value = record.get(standardized_field(key))
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)

