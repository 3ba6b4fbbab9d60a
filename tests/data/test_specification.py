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
"""Tests for Specification and FilterOperator: composable WHERE clauses."""

from __future__ import annotations

import pytest
from sqlalchemy import String, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from dynaquery.data.relational.filter import FilterOperator
from dynaquery.data.relational.specification import Specification, all_of, any_of

# ---------------------------------------------------------------------------
# Test entity
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "spec_users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    role: Mapped[str] = mapped_column(String(50), default="user")
    age: Mapped[int] = mapped_column(default=25)
    bio: Mapped[str | None] = mapped_column(String(200), default=None)


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
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def seeded_session(session_factory):
    """Seed the database with a known set of users."""
    async with session_factory() as session:
        session.add_all(
            [
                User(name="Alice", role="admin", age=30),
                User(name="Bob", role="user", age=25),
                User(name="Charlie", role="admin", age=40),
                User(name="Diana", role="user", age=22, bio="50%_off"),
            ]
        )
        await session.flush()
        yield session


async def _names(session: AsyncSession, spec: Specification[User]) -> list[str]:
    """Apply *spec* and return sorted list of matching user names."""
    stmt = spec.to_predicate(User, select(User))
    result = await session.execute(stmt)
    return sorted(u.name for u in result.scalars().all())


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


class TestSpecification:
    @pytest.mark.asyncio
    async def test_single_clause(self, seeded_session: AsyncSession):
        spec: Specification[User] = Specification(lambda root: root.role == "admin")
        assert await _names(seeded_session, spec) == ["Alice", "Charlie"]

    @pytest.mark.asyncio
    async def test_and(self, seeded_session: AsyncSession):
        spec = FilterOperator.eq("role", "admin") & FilterOperator.gt("age", 35)
        assert await _names(seeded_session, spec) == ["Charlie"]

    @pytest.mark.asyncio
    async def test_or(self, seeded_session: AsyncSession):
        spec = FilterOperator.eq("name", "Bob") | FilterOperator.eq("name", "Diana")
        assert await _names(seeded_session, spec) == ["Bob", "Diana"]

    @pytest.mark.asyncio
    async def test_not(self, seeded_session: AsyncSession):
        spec = ~FilterOperator.eq("role", "admin")
        assert await _names(seeded_session, spec) == ["Bob", "Diana"]

    @pytest.mark.asyncio
    async def test_not_only_negates_its_operand(self, seeded_session: AsyncSession):
        spec = FilterOperator.eq("role", "user") & ~FilterOperator.eq("name", "Bob")
        assert await _names(seeded_session, spec) == ["Diana"]

    @pytest.mark.asyncio
    async def test_all_matches_everything(self, seeded_session: AsyncSession):
        assert await _names(seeded_session, Specification.all()) == ["Alice", "Bob", "Charlie", "Diana"]

    def test_all_has_no_clause(self):
        assert Specification.all().to_clause(User) is None
        stmt = select(User)
        assert Specification.all().to_predicate(User, stmt) is stmt

    @pytest.mark.asyncio
    async def test_unrestricted_is_neutral_under_and(self, seeded_session: AsyncSession):
        spec = Specification.all() & FilterOperator.eq("name", "Bob")
        assert await _names(seeded_session, spec) == ["Bob"]

    def test_unrestricted_absorbs_or(self):
        spec = FilterOperator.eq("name", "Bob") | Specification.all()
        assert spec.to_clause(User) is None

    def test_unrestricted_stays_unrestricted_under_not(self):
        assert (~Specification.all()).to_clause(User) is None


class TestAllOfAnyOf:
    @pytest.mark.asyncio
    async def test_all_of(self, seeded_session: AsyncSession):
        spec = all_of([FilterOperator.gte("age", 25), FilterOperator.lte("age", 30)])
        assert await _names(seeded_session, spec) == ["Alice", "Bob"]

    @pytest.mark.asyncio
    async def test_any_of(self, seeded_session: AsyncSession):
        spec = any_of([FilterOperator.lt("age", 23), FilterOperator.gt("age", 35)])
        assert await _names(seeded_session, spec) == ["Charlie", "Diana"]

    def test_empty_lists_are_unrestricted(self):
        assert all_of([]).to_clause(User) is None
        assert any_of([]).to_clause(User) is None


# ---------------------------------------------------------------------------
# FilterOperator
# ---------------------------------------------------------------------------


class TestFilterOperator:
    @pytest.mark.asyncio
    async def test_comparisons(self, seeded_session: AsyncSession):
        assert await _names(seeded_session, FilterOperator.gt("age", 30)) == ["Charlie"]
        assert await _names(seeded_session, FilterOperator.gte("age", 30)) == ["Alice", "Charlie"]
        assert await _names(seeded_session, FilterOperator.lt("age", 25)) == ["Diana"]
        assert await _names(seeded_session, FilterOperator.lte("age", 25)) == ["Bob", "Diana"]

    @pytest.mark.asyncio
    async def test_like_uses_pattern_verbatim(self, seeded_session: AsyncSession):
        assert await _names(seeded_session, FilterOperator.like("name", "%li%")) == ["Alice", "Charlie"]
        assert await _names(seeded_session, FilterOperator.like("name", "li")) == []

    @pytest.mark.asyncio
    async def test_lower_like_escapes(self, seeded_session: AsyncSession):
        assert await _names(seeded_session, FilterOperator.lower_like("bio", "%50\\%\\_%")) == ["Diana"]
        assert await _names(seeded_session, FilterOperator.lower_like("bio", "%0\\_o%")) == []

    @pytest.mark.asyncio
    async def test_in_list(self, seeded_session: AsyncSession):
        assert await _names(seeded_session, FilterOperator.in_list("age", [22, 40])) == ["Charlie", "Diana"]

    @pytest.mark.asyncio
    async def test_is_null(self, seeded_session: AsyncSession):
        assert await _names(seeded_session, FilterOperator.is_null("bio")) == ["Alice", "Bob", "Charlie"]

    @pytest.mark.asyncio
    async def test_between_is_inclusive(self, seeded_session: AsyncSession):
        assert await _names(seeded_session, FilterOperator.between("age", 25, 30)) == ["Alice", "Bob"]
