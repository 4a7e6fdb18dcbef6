"""
Record Store - persistence of city records and saved comparisons.

The engine only depends on the RecordStore interface. SqlAlchemyRecordStore
implements it over the calculation_history and city_comparisons tables.
Database failures surface as StoreError. Merges lock the record they update
so concurrent writers to one city apply one after the other.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cpi_app.models.calculation import CalculationHistory, CityComparison
from cpi_engine.errors import StoreError
from cpi_engine.records import merge_fields

logger = logging.getLogger(__name__)

CityKey = Tuple[str, str]  # (city, country)


@dataclass
class CityRecord:
    """A stored city record, detached from the database session."""

    id: int
    user_id: str
    city: str
    country: str
    city_name: Optional[str] = None
    fields: Dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model: CalculationHistory) -> "CityRecord":
        return cls(
            id=model.id,
            user_id=model.user_id,
            city=model.city,
            country=model.country,
            city_name=model.city_name,
            fields=dict(model.fields or {}),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


@dataclass
class SavedComparison:
    id: int
    user_id: str
    name: str
    cities: List[Dict[str, str]]
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model: CityComparison) -> "SavedComparison":
        return cls(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            cities=list(model.cities or []),
            created_at=model.created_at,
        )


class RecordStore(ABC):
    """Keyed record service the prosperity service talks to."""

    @abstractmethod
    async def fetch(self, user_id: str, city: str, country: str) -> Optional[CityRecord]:
        """Return the user's record for a city, or None."""

    @abstractmethod
    async def get(self, record_id: int) -> Optional[CityRecord]:
        """Return a record by id regardless of owner, or None."""

    @abstractmethod
    async def merge(
        self,
        user_id: str,
        city: str,
        country: str,
        fields: Dict[str, Any],
        city_name: Optional[str] = None,
    ) -> CityRecord:
        """Upsert a city record, merging fields key by key (last write wins)."""

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[CityRecord]:
        """All of a user's records, most recently updated first."""

    @abstractmethod
    async def fetch_many(self, user_id: str, keys: Sequence[CityKey]) -> List[CityRecord]:
        """The user's records for the given cities, in request order; misses are skipped."""

    @abstractmethod
    async def delete(self, record_id: int) -> bool:
        """Delete a record by id. Returns False when it did not exist."""

    @abstractmethod
    async def list_comparisons(self, user_id: str) -> List[SavedComparison]:
        """The user's saved comparisons, newest first."""

    @abstractmethod
    async def save_comparison(
        self, user_id: str, name: str, cities: List[Dict[str, str]]
    ) -> SavedComparison:
        """Store a named comparison."""

    @abstractmethod
    async def delete_comparison(self, user_id: str, comparison_id: int) -> bool:
        """Delete one of the user's comparisons. Returns False when not found."""


@asynccontextmanager
async def _store_errors(action: str):
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Record store failed to {action}: {e}")
        raise StoreError(f"Record store failed to {action}") from e


class SqlAlchemyRecordStore(RecordStore):
    """RecordStore backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _find(
        self, user_id: str, city: str, country: str, for_update: bool = False
    ) -> Optional[CalculationHistory]:
        query = select(CalculationHistory).where(
            CalculationHistory.user_id == user_id,
            CalculationHistory.city == city,
            CalculationHistory.country == country,
        )
        if for_update:
            # row lock (ignored by SQLite, whose transactions already hold the write lock)
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def _create(
        self,
        user_id: str,
        city: str,
        country: str,
        fields: Dict[str, Any],
        city_name: Optional[str],
    ) -> Optional[CalculationHistory]:
        """Insert a new record, or return None if another writer created it first."""
        model = CalculationHistory(
            user_id=user_id,
            city=city,
            country=country,
            city_name=city_name,
            fields=merge_fields(None, fields),
        )
        try:
            async with self.session.begin_nested():
                self.session.add(model)
                await self.session.flush()
        except IntegrityError:
            logger.info(f"Record for {city}, {country} (user {user_id}) was created concurrently")
            return None
        logger.info(f"Created record for {city}, {country} (user {user_id})")
        return model

    async def fetch(self, user_id: str, city: str, country: str) -> Optional[CityRecord]:
        async with _store_errors("fetch a city record"):
            model = await self._find(user_id, city, country)
        return CityRecord.from_model(model) if model else None

    async def get(self, record_id: int) -> Optional[CityRecord]:
        async with _store_errors("fetch a record"):
            model = await self.session.get(CalculationHistory, record_id)
        return CityRecord.from_model(model) if model else None

    async def merge(
        self,
        user_id: str,
        city: str,
        country: str,
        fields: Dict[str, Any],
        city_name: Optional[str] = None,
    ) -> CityRecord:
        async with _store_errors("save a city record"):
            model = await self._find(user_id, city, country, for_update=True)
            if model is None:
                model = await self._create(user_id, city, country, fields, city_name)
                if model is not None:
                    await self.session.refresh(model)
                    return CityRecord.from_model(model)
                model = await self._find(user_id, city, country, for_update=True)
                if model is None:
                    raise StoreError(f"Record for {city}, {country} vanished while saving")

            # a new dict so the JSON column is flagged as changed
            model.fields = merge_fields(model.fields, fields)
            model.updated_at = datetime.utcnow()
            if city_name:
                model.city_name = city_name
            await self.session.flush()
            await self.session.refresh(model)
        return CityRecord.from_model(model)

    async def list_for_user(self, user_id: str) -> List[CityRecord]:
        async with _store_errors("list city records"):
            result = await self.session.execute(
                select(CalculationHistory)
                .where(CalculationHistory.user_id == user_id)
                .order_by(CalculationHistory.updated_at.desc(), CalculationHistory.id.desc())
            )
            models = result.scalars().all()
        return [CityRecord.from_model(m) for m in models]

    async def fetch_many(self, user_id: str, keys: Sequence[CityKey]) -> List[CityRecord]:
        records = []
        for city, country in keys:
            record = await self.fetch(user_id, city, country)
            if record is not None:
                records.append(record)
        return records

    async def delete(self, record_id: int) -> bool:
        async with _store_errors("delete a record"):
            result = await self.session.execute(
                delete(CalculationHistory).where(CalculationHistory.id == record_id)
            )
            await self.session.flush()
        return result.rowcount > 0

    async def list_comparisons(self, user_id: str) -> List[SavedComparison]:
        async with _store_errors("list comparisons"):
            result = await self.session.execute(
                select(CityComparison)
                .where(CityComparison.user_id == user_id)
                .order_by(CityComparison.created_at.desc(), CityComparison.id.desc())
            )
            models = result.scalars().all()
        return [SavedComparison.from_model(m) for m in models]

    async def save_comparison(
        self, user_id: str, name: str, cities: List[Dict[str, str]]
    ) -> SavedComparison:
        async with _store_errors("save a comparison"):
            model = CityComparison(user_id=user_id, name=name, cities=list(cities))
            self.session.add(model)
            await self.session.flush()
            await self.session.refresh(model)
        return SavedComparison.from_model(model)

    async def delete_comparison(self, user_id: str, comparison_id: int) -> bool:
        async with _store_errors("delete a comparison"):
            result = await self.session.execute(
                delete(CityComparison).where(
                    CityComparison.id == comparison_id,
                    CityComparison.user_id == user_id,
                )
            )
            await self.session.flush()
        return result.rowcount > 0
