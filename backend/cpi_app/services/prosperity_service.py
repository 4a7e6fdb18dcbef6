"""
Prosperity Service - the operations the HTTP layer exposes.

Standardizes submissions, merges the results into the city's record through
the RecordStore, and recomputes aggregated views on read. Validation always
happens before the store is touched; store failures propagate unchanged.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from cpi_app.services.record_store import CityKey, CityRecord, RecordStore, SavedComparison
from cpi_engine.aggregator import Absent, CompositeResult, aggregate
from cpi_engine.errors import ValidationError
from cpi_engine.hierarchy import CPI_HIERARCHY
from cpi_engine.logger import CalculationLogger, setup_logging
from cpi_engine.records import normalize_fields
from cpi_engine.standardizer import DEFAULT_PRECISION, IndicatorResult, standardize

logger = logging.getLogger(__name__)

# Differences smaller than this are reported as equal when comparing cities
EQUAL_TOLERANCE = 0.01


def _require_city(city: str, country: str) -> Tuple[str, str]:
    city = (city or "").strip()
    country = (country or "").strip()
    if not city:
        raise ValidationError("city", "is required")
    if not country:
        raise ValidationError("country", "is required")
    return city, country


def parse_city_keys(raw: str) -> List[CityKey]:
    """
    Parse "city:country,city:country" into (city, country) pairs.

    Raises ValidationError for an entry without both parts.
    """
    keys = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        city, sep, country = entry.partition(":")
        if not sep:
            raise ValidationError("cities", f"'{entry}' must look like city:country")
        keys.append(_require_city(city, country))
    if not keys:
        raise ValidationError("cities", "at least one city is required")
    return keys


class ProsperityService:
    """
    Service class tying the engine to a record store.
    """

    def __init__(
        self,
        store: RecordStore,
        precision: int = DEFAULT_PRECISION,
        calculation_log_dir: str = "",
    ):
        self.store = store
        self.precision = precision
        self.calculation_log_dir = calculation_log_dir

    def _calculation_log(self, city: str, country: str) -> Optional[CalculationLogger]:
        """The city's calculation log, or None when none is configured."""
        if not self.calculation_log_dir:
            return None
        return setup_logging(self.calculation_log_dir, city, country)

    def preview_indicator(self, key: str, raw_inputs: Mapping[str, Any]) -> IndicatorResult:
        """Standardize without saving anything."""
        return standardize(key, raw_inputs, self.precision)

    async def submit_indicator(
        self,
        city: str,
        country: str,
        key: str,
        raw_inputs: Mapping[str, Any],
        user_id: str,
        city_name: Optional[str] = None,
    ) -> IndicatorResult:
        """
        Standardize one indicator and merge its three fields into the city record.

        Raises:
            ValidationError: bad city key or indicator inputs (nothing is stored)
            StoreError: the record could not be saved
        """
        city, country = _require_city(city, country)

        calculation_log = self._calculation_log(city, country)
        try:
            result = standardize(key, raw_inputs, self.precision)
        except ValidationError as exc:
            if calculation_log:
                calculation_log.rejected(key, exc.field, exc.message)
            raise
        if calculation_log:
            calculation_log.calculation(key, result.raw, result.standardized, result.comment)

        await self.store.merge(user_id, city, country, result.to_record_fields(), city_name)
        logger.info(f"Saved {key} for {city}, {country}: {result.standardized} ({result.comment})")
        return result

    async def submit_record_fields(
        self,
        user_id: str,
        city: str,
        country: str,
        fields: Mapping[str, Any],
        city_name: Optional[str] = None,
    ) -> CityRecord:
        """Merge already-computed record fields, e.g. an imported history."""
        city, country = _require_city(city, country)
        normalized = normalize_fields(fields)
        return await self.store.merge(user_id, city, country, normalized, city_name)

    async def get_aggregated_view(self, city: str, country: str, user_id: str) -> CompositeResult:
        """Aggregate the current record; a city with no record is all "no data"."""
        city, country = _require_city(city, country)
        record = await self.store.fetch(user_id, city, country)
        result = aggregate(record.fields if record else None)

        calculation_log = self._calculation_log(city, country)
        if calculation_log:
            calculation_log.aggregation(
                city, country, len(result.present_dimensions()), len(result.dimensions), _average(result.index)
            )
        return result

    async def list_cities(self, user_id: str) -> List[CityRecord]:
        return await self.store.list_for_user(user_id)

    async def compare_cities(self, user_id: str, keys: Sequence[CityKey]) -> List[CityRecord]:
        """Fetch several records unmodified, in request order."""
        keys = [_require_city(city, country) for city, country in keys]
        return await self.store.fetch_many(user_id, keys)

    async def get_record(self, record_id: int) -> Optional[CityRecord]:
        return await self.store.get(record_id)

    async def delete_record(self, user_id: str, record_id: int) -> bool:
        """Delete one of the user's records. False when missing or owned by someone else."""
        record = await self.store.get(record_id)
        if record is None or record.user_id != user_id:
            return False
        deleted = await self.store.delete(record_id)
        if deleted:
            logger.info(f"Deleted record {record_id} ({record.city}, {record.country})")
        return deleted

    async def list_comparisons(self, user_id: str) -> List[SavedComparison]:
        return await self.store.list_comparisons(user_id)

    async def save_comparison(
        self, user_id: str, name: str, keys: Sequence[CityKey]
    ) -> SavedComparison:
        name = (name or "").strip()
        if not name:
            raise ValidationError("name", "is required")
        if not keys:
            raise ValidationError("cities", "at least one city is required")
        cities = [
            {"city": city, "country": country}
            for city, country in (_require_city(c, k) for c, k in keys)
        ]
        return await self.store.save_comparison(user_id, name, cities)

    async def delete_comparison(self, user_id: str, comparison_id: int) -> bool:
        return await self.store.delete_comparison(user_id, comparison_id)


# ----- Comparison helpers -----


def _average(level: Union[Absent, Any]) -> Optional[float]:
    if isinstance(level, Absent):
        return None
    return level.average


def delta(base: Optional[float], other: Optional[float]) -> Dict[str, Any]:
    """Signed difference other - base, with near-equal values reported as "Equal"."""
    if base is None or other is None:
        return {"base": base, "other": other, "difference": None, "trend": "no data"}
    difference = other - base
    if abs(difference) < EQUAL_TOLERANCE:
        trend = "Equal"
    elif difference > 0:
        trend = "Higher"
    else:
        trend = "Lower"
    return {"base": base, "other": other, "difference": difference, "trend": trend}


def score_deltas(base: CompositeResult, other: CompositeResult) -> Dict[str, Dict[str, Any]]:
    """
    Per-level differences between two aggregated views.

    Keys are "cpi", each dimension key, and each sub-dimension key.
    """
    deltas = {"cpi": delta(_average(base.index), _average(other.index))}
    for dimension in CPI_HIERARCHY.dimensions:
        deltas[dimension.key] = delta(
            _average(base.dimension(dimension.key)),
            _average(other.dimension(dimension.key)),
        )
        for sub_dimension in dimension.sub_dimensions:
            deltas[sub_dimension.key] = delta(
                _average(base.sub_dimension(sub_dimension.key)),
                _average(other.sub_dimension(sub_dimension.key)),
            )
    return deltas
