"""
Tests for the SQLAlchemy record store, each against its own database.

Most tests share one session on an in-memory database; the concurrency tests
use a database file so each writer gets its own connection.
"""

import asyncio

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.pool import StaticPool

from cpi_app.database import Base, create_engine_for
from cpi_app.models import calculation  # noqa: F401
from cpi_app.services.record_store import SqlAlchemyRecordStore
from cpi_engine.errors import StoreError

MEMORY_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def store():
    engine = create_engine_for(MEMORY_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    maker = async_sessionmaker(engine, expire_on_commit=False)
    async with maker() as session:
        yield SqlAlchemyRecordStore(session)
    await engine.dispose()


@pytest_asyncio.fixture
async def broken_store():
    # no tables created
    engine = create_engine_for(MEMORY_URL, poolclass=StaticPool)
    maker = async_sessionmaker(engine, expire_on_commit=False)
    async with maker() as session:
        yield SqlAlchemyRecordStore(session)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'records.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


async def merge_and_commit(session_maker, city, country, fields):
    """One request's worth of work: merge in a fresh session, then commit."""
    async with session_maker() as session:
        record = await SqlAlchemyRecordStore(session).merge("alice", city, country, fields)
        await session.commit()
    return record


async def fetch_fields(session_maker, city, country):
    async with session_maker() as session:
        record = await SqlAlchemyRecordStore(session).fetch("alice", city, country)
    return record.fields


class LateRecordStore(SqlAlchemyRecordStore):
    """Misses the record on its first lookup, as if another writer created it just after."""

    def __init__(self, session):
        super().__init__(session)
        self.lookups = 0

    async def _find(self, *args, **kwargs):
        self.lookups += 1
        if self.lookups == 1:
            return None
        return await super()._find(*args, **kwargs)


# =============================================================================
# CITY RECORDS
# =============================================================================

class TestMerge:

    @pytest.mark.asyncio
    async def test_creates_record(self, store):
        record = await store.merge("alice", "nairobi", "kenya", {"co2_emissions": 1.5}, "Nairobi")
        assert record.id is not None
        assert record.fields == {"co2_emissions": 1.5}
        assert record.city_name == "Nairobi"

    @pytest.mark.asyncio
    async def test_merges_field_by_field(self, store):
        await store.merge("alice", "nairobi", "kenya", {"a": 1, "b": 2})
        record = await store.merge("alice", "nairobi", "kenya", {"b": 3, "c": 4})
        assert record.fields == {"a": 1, "b": 3, "c": 4}

    @pytest.mark.asyncio
    async def test_one_record_per_city_and_user(self, store):
        first = await store.merge("alice", "nairobi", "kenya", {"a": 1})
        second = await store.merge("alice", "nairobi", "kenya", {"b": 2})
        other_user = await store.merge("bob", "nairobi", "kenya", {"a": 9})
        assert first.id == second.id
        assert other_user.id != first.id
        assert (await store.fetch("alice", "nairobi", "kenya")).fields == {"a": 1, "b": 2}

    @pytest.mark.asyncio
    async def test_keeps_city_name_when_not_given(self, store):
        await store.merge("alice", "nairobi", "kenya", {}, "Nairobi")
        record = await store.merge("alice", "nairobi", "kenya", {"a": 1})
        assert record.city_name == "Nairobi"


class TestConcurrentWriters:

    @pytest.mark.asyncio
    async def test_parallel_indicators_for_one_city_both_kept(self, session_maker):
        await merge_and_commit(session_maker, "nairobi", "kenya", {"seed": 1.0})

        await asyncio.gather(
            merge_and_commit(session_maker, "nairobi", "kenya", {"co2_emissions_standardized": 40.0}),
            merge_and_commit(session_maker, "nairobi", "kenya", {"pm25_concentration_standardized": 70.0}),
        )

        fields = await fetch_fields(session_maker, "nairobi", "kenya")
        assert fields == {
            "seed": 1.0,
            "co2_emissions_standardized": 40.0,
            "pm25_concentration_standardized": 70.0,
        }

    @pytest.mark.asyncio
    async def test_many_parallel_writers(self, session_maker):
        writes = [
            merge_and_commit(session_maker, "nairobi", "kenya", {f"indicator_{i}": float(i)})
            for i in range(8)
        ]
        await asyncio.gather(*writes)

        fields = await fetch_fields(session_maker, "nairobi", "kenya")
        assert fields == {f"indicator_{i}": float(i) for i in range(8)}

    @pytest.mark.asyncio
    async def test_parallel_first_submissions_create_one_record(self, session_maker):
        first, second = await asyncio.gather(
            merge_and_commit(session_maker, "lagos", "nigeria", {"co2_emissions": 1.5}),
            merge_and_commit(session_maker, "lagos", "nigeria", {"pm25_concentration": 12.0}),
        )

        assert first.id == second.id
        fields = await fetch_fields(session_maker, "lagos", "nigeria")
        assert fields == {"co2_emissions": 1.5, "pm25_concentration": 12.0}

    @pytest.mark.asyncio
    async def test_insert_conflict_merges_into_existing_record(self, store):
        existing = await store.merge("alice", "lagos", "nigeria", {"co2_emissions": 1.5}, "Lagos")

        late = LateRecordStore(store.session)
        record = await late.merge("alice", "lagos", "nigeria", {"pm25_concentration": 12.0})

        assert late.lookups == 2
        assert record.id == existing.id
        assert record.fields == {"co2_emissions": 1.5, "pm25_concentration": 12.0}
        assert record.city_name == "Lagos"
        assert len(await store.list_for_user("alice")) == 1


class TestReads:

    @pytest.mark.asyncio
    async def test_fetch_missing(self, store):
        assert await store.fetch("alice", "lima", "peru") is None

    @pytest.mark.asyncio
    async def test_get_by_id(self, store):
        created = await store.merge("alice", "lima", "peru", {"a": 1})
        assert (await store.get(created.id)).city == "lima"
        assert await store.get(created.id + 100) is None

    @pytest.mark.asyncio
    async def test_list_for_user(self, store):
        await store.merge("alice", "lima", "peru", {})
        await store.merge("alice", "quito", "ecuador", {})
        await store.merge("bob", "bogota", "colombia", {})
        cities = [r.city for r in await store.list_for_user("alice")]
        assert cities == ["quito", "lima"]

    @pytest.mark.asyncio
    async def test_fetch_many_keeps_request_order(self, store):
        await store.merge("alice", "lima", "peru", {})
        await store.merge("alice", "quito", "ecuador", {})
        records = await store.fetch_many(
            "alice", [("quito", "ecuador"), ("atlantis", "nowhere"), ("lima", "peru")]
        )
        assert [r.city for r in records] == ["quito", "lima"]


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete(self, store):
        created = await store.merge("alice", "lima", "peru", {})
        assert await store.delete(created.id) is True
        assert await store.fetch("alice", "lima", "peru") is None

    @pytest.mark.asyncio
    async def test_delete_missing(self, store):
        assert await store.delete(12345) is False


# =============================================================================
# SAVED COMPARISONS
# =============================================================================

class TestComparisons:

    @pytest.mark.asyncio
    async def test_save_and_list(self, store):
        cities = [{"city": "lima", "country": "peru"}, {"city": "quito", "country": "ecuador"}]
        saved = await store.save_comparison("alice", "Andes", cities)
        assert saved.cities == cities
        listed = await store.list_comparisons("alice")
        assert [c.name for c in listed] == ["Andes"]
        assert await store.list_comparisons("bob") == []

    @pytest.mark.asyncio
    async def test_delete_only_own(self, store):
        saved = await store.save_comparison("alice", "Andes", [{"city": "lima", "country": "peru"}])
        assert await store.delete_comparison("bob", saved.id) is False
        assert await store.delete_comparison("alice", saved.id) is True
        assert await store.list_comparisons("alice") == []


# =============================================================================
# FAILURES
# =============================================================================

class TestStoreErrors:

    @pytest.mark.asyncio
    async def test_read_failure(self, broken_store):
        with pytest.raises(StoreError):
            await broken_store.fetch("alice", "lima", "peru")

    @pytest.mark.asyncio
    async def test_write_failure(self, broken_store):
        with pytest.raises(StoreError):
            await broken_store.merge("alice", "lima", "peru", {"a": 1})
