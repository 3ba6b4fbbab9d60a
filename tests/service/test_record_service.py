# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for MapperBinding and RecordService."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from pydantic import BaseModel
from sqlalchemy import String
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from dynaquery.config.properties.query import QueryProperties
from dynaquery.data.parser import DirectiveParser
from dynaquery.data.relational.repository import DynamicRepository
from dynaquery.kernel.exceptions import ConflictError, NotFoundError
from dynaquery.service.binding import MapperBinding, RecordBinding
from dynaquery.service.record_service import RecordService

# ---------------------------------------------------------------------------
# Records and data types
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class Customer(Base):
    __tablename__ = "service_customers"

    id: Mapped[int] = mapped_column(primary_key=True)
    full_name: Mapped[str] = mapped_column(String(100))
    city: Mapped[str | None] = mapped_column(String(50))
    tier: Mapped[int] = mapped_column(default=1)


class CustomerData(BaseModel):
    id: int | None = None
    name: str
    city: str | None = None
    tier: int = 1


@dataclass
class CustomerSummary:
    id: int
    full_name: str


def _binding() -> MapperBinding[Customer, CustomerData]:
    return MapperBinding(Customer, CustomerData, field_map={"full_name": "name"})


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        session.add_all(
            [
                Customer(id=1, full_name="Ada Smith", city="Oslo", tier=2),
                Customer(id=2, full_name="Ben Stone", city="Rome", tier=1),
                Customer(id=3, full_name="Cy Smith", city="Oslo", tier=3),
            ]
        )
        await session.flush()
        yield session


@pytest.fixture
def service(session: AsyncSession) -> RecordService[Customer, CustomerData]:
    return RecordService(DynamicRepository(session), _binding())


# ---------------------------------------------------------------------------
# MapperBinding
# ---------------------------------------------------------------------------


class TestMapperBinding:
    def test_is_a_record_binding(self):
        binding = _binding()
        assert isinstance(binding, RecordBinding)
        assert binding.entity_type() is Customer
        assert binding.data_type() is CustomerData

    def test_from_entity_renames_fields(self):
        data = _binding().from_entity(Customer(id=5, full_name="Dee", city="Lima", tier=2))
        assert data == CustomerData(id=5, name="Dee", city="Lima", tier=2)

    def test_to_entity_renames_fields(self):
        entity = _binding().to_entity(CustomerData(name="Eve", city="Kyiv"))
        assert entity.full_name == "Eve"
        assert entity.city == "Kyiv"
        assert entity.id is None

    def test_dataclass_target_ignores_extra_fields(self):
        binding = MapperBinding(Customer, CustomerSummary)
        summary = binding.from_entity(Customer(id=7, full_name="Fay", city="Oslo", tier=1))
        assert summary == CustomerSummary(id=7, full_name="Fay")

    def test_exclude(self):
        binding = MapperBinding(Customer, CustomerData, field_map={"full_name": "name"}, exclude={"city"})
        entity = binding.to_entity(CustomerData(name="Gus", city="Oslo"))
        assert entity.city is None

    def test_update_entity_keeps_primary_key(self):
        entity = Customer(id=9, full_name="Old", city=None, tier=1)
        _binding().update_entity(CustomerData(id=99, name="New", city="Rome", tier=4), entity)
        assert entity.id == 9
        assert entity.full_name == "New"
        assert entity.tier == 4


# ---------------------------------------------------------------------------
# RecordService
# ---------------------------------------------------------------------------


class TestOnFilter:
    @pytest.mark.asyncio
    async def test_filters_sorts_and_maps(self, service: RecordService):
        page = await service.on_filter({"city": "Oslo", "sort": "tier,desc"})
        assert [c.name for c in page.items] == ["Cy Smith", "Ada Smith"]
        assert page.total == 2
        assert all(isinstance(c, CustomerData) for c in page.items)

    @pytest.mark.asyncio
    async def test_keyword_and_paging(self, service: RecordService):
        page = await service.on_filter({"keyword": "smith", "sort": "id", "page": "2", "size": "1"})
        assert [c.id for c in page.items] == [3]
        assert page.total == 2
        assert page.total_pages == 2

    @pytest.mark.asyncio
    async def test_unknown_parameters_are_ignored(self, service: RecordService):
        page = await service.on_filter({"nickname": "x", "tier[gte]": "abc"})
        assert page.total == 3

    @pytest.mark.asyncio
    async def test_custom_parser(self, session: AsyncSession):
        parser = DirectiveParser(QueryProperties(sort_key="order", default_page_size=1))
        service = RecordService(DynamicRepository(session), _binding(), parser)
        page = await service.on_filter({"order": "id,desc"})
        assert [c.id for c in page.items] == [3]
        assert page.size == 1


class TestCrud:
    @pytest.mark.asyncio
    async def test_on_find(self, service: RecordService):
        found = await service.on_find("2")
        assert found == CustomerData(id=2, name="Ben Stone", city="Rome", tier=1)
        assert await service.on_find(42) is None

    @pytest.mark.asyncio
    async def test_on_create_returns_key(self, service: RecordService):
        key = await service.on_create(CustomerData(name="Dan Ray", city="Lima"))
        assert key == 4
        assert (await service.on_find(key)).name == "Dan Ray"

    @pytest.mark.asyncio
    async def test_on_create_conflict(self, service: RecordService):
        with pytest.raises(ConflictError) as info:
            await service.on_create(CustomerData(id=1, name="Dup"))
        assert info.value.code == "CONFLICT"

    @pytest.mark.asyncio
    async def test_on_update(self, service: RecordService):
        updated = await service.on_update(1, CustomerData(name="Ada Jones", city="Bern", tier=5))
        assert updated == CustomerData(id=1, name="Ada Jones", city="Bern", tier=5)
        assert (await service.on_find(1)).city == "Bern"

    @pytest.mark.asyncio
    async def test_on_update_missing(self, service: RecordService):
        with pytest.raises(NotFoundError):
            await service.on_update(42, CustomerData(name="Nobody"))

    @pytest.mark.asyncio
    async def test_on_delete(self, service: RecordService):
        await service.on_delete(2)
        assert await service.on_find(2) is None
        with pytest.raises(NotFoundError):
            await service.on_delete(2)

    @pytest.mark.asyncio
    async def test_record_type(self, service: RecordService):
        assert service.record_type is Customer
