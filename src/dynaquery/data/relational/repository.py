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
"""Generic dynamic repository built on SQLAlchemy 2.0.

:class:`DynamicRepository` is record-type agnostic: every operation takes
the mapped class (or an instance) as an argument, so a single repository
bound to one ``AsyncSession`` serves every record type of a request.

Usage::

    async with unit_of_work(session_factory) as session:
        repo = DynamicRepository(session)
        directives = DirectiveSet.of(
            FilterDirective("name", Operator.EQUAL, ("Smith",)),
            SortDirective.asc("id"),
        )
        page = await repo.find_page(Person, directives)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from sqlalchemy import ColumnElement, Select, and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dynaquery.config.properties.query import QueryProperties
from dynaquery.data.coercion import coerce
from dynaquery.data.directive import DirectiveSet, SortDirective
from dynaquery.data.page import Page
from dynaquery.data.relational.predicate import PredicateBuilder
from dynaquery.data.relational.schema import SchemaGuard, basic_attributes, identity_of, primary_key_attributes
from dynaquery.data.relational.specification import Specification
from dynaquery.kernel.exceptions import NotFoundError, ValueCoercionError

T = TypeVar("T")

logger = structlog.get_logger("dynaquery.data")


class DynamicRepository:
    """Directive-driven find/count plus key-based persistence for any record type.

    Args:
        session: The unit-of-work session. May be assigned later via
            :attr:`session`; operations fail until one is set.
        properties: Query configuration (keyword ``unaccent_function``).
    """

    def __init__(self, session: AsyncSession | None = None, properties: QueryProperties | None = None) -> None:
        self.session = session
        self._properties = properties or QueryProperties()

    @property
    def properties(self) -> QueryProperties:
        return self._properties

    def _require_session(self) -> AsyncSession:
        if self.session is None:
            raise RuntimeError("No AsyncSession configured: open a unit_of_work and pass its session")
        return self.session

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def primary_key(self, entity: Any) -> Any:
        """Primary-key value of *entity* (tuple for composite keys)."""
        return identity_of(entity)

    @staticmethod
    def _coerce_key(model: type, key: Any) -> Any:
        """Coerce a raw key (e.g. a path segment) to the primary-key types."""
        names = primary_key_attributes(model)
        types = basic_attributes(model)
        if len(names) == 1:
            return coerce(types[names[0]], key)
        if not isinstance(key, (tuple, list)) or len(key) != len(names):
            raise ValueCoercionError(tuple, key)
        return tuple(coerce(types[name], value) for name, value in zip(names, key, strict=True))

    @staticmethod
    def _key_clause(model: type, key: Any) -> ColumnElement[bool]:
        names = primary_key_attributes(model)
        values = (key,) if len(names) == 1 else tuple(key)
        return and_(*(getattr(model, name) == value for name, value in zip(names, values, strict=True)))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_by_key(self, model: type[T], key: Any) -> T | None:
        """Find a record by primary key; ``None`` when absent."""
        session = self._require_session()
        try:
            key = self._coerce_key(model, key)
        except ValueCoercionError:
            return None
        return await session.get(model, key)

    async def get_by_key(self, model: type[T], key: Any) -> T:
        """Find a record by primary key.

        Raises:
            NotFoundError: If no record has that key.
        """
        entity = await self.find_by_key(model, key)
        if entity is None:
            raise NotFoundError(model, key)
        return entity

    async def find_by_predicate(
        self,
        model: type[T],
        predicate: Specification[T] | Callable[[type[T]], ColumnElement[bool]],
    ) -> list[T]:
        """Find all records matching a caller-supplied predicate."""
        session = self._require_session()
        spec = predicate if isinstance(predicate, Specification) else Specification(predicate)
        stmt = spec.to_predicate(model, select(model))
        result = await session.execute(stmt)
        return list(result.scalars().all())

    def _filtered(self, model: type[T], directives: DirectiveSet) -> tuple[DirectiveSet, Select[Any]]:
        guarded = SchemaGuard.filter(model, directives)
        spec = PredicateBuilder(model, self._properties.unaccent_function).build_all(guarded)
        stmt = spec.to_predicate(model, select(model))
        if guarded.distinct:
            stmt = stmt.distinct()
        return guarded, stmt

    @staticmethod
    def _apply_sort(model: type, stmt: Select[Any], sorts: tuple[SortDirective, ...]) -> Select[Any]:
        for sort in sorts:
            column = getattr(model, sort.name)
            stmt = stmt.order_by(column.asc() if sort.ascending else column.desc())
        # Primary key last so OFFSET/LIMIT windows are stable between pages.
        sorted_names = {sort.name for sort in sorts}
        for name in primary_key_attributes(model):
            if name not in sorted_names:
                stmt = stmt.order_by(getattr(model, name).asc())
        return stmt

    async def find(self, model: type[T], directives: DirectiveSet) -> list[T]:
        """Find one page of records matching *directives*.

        Unsafe and uncoercible directives are dropped.  Sorts apply in the
        order given, followed by the primary key as a tiebreak; the page
        window comes from the paging directive.
        """
        session = self._require_session()
        guarded, stmt = self._filtered(model, directives)
        stmt = self._apply_sort(model, stmt, guarded.sorts)
        stmt = stmt.offset(guarded.start_offset).limit(guarded.page_size)
        result = await session.execute(stmt)
        items = list(result.scalars().all())
        logger.debug("dynamic_find", record_type=model.__name__, rows=len(items), page=guarded.page_number)
        return items

    async def count(self, model: type[T], directives: DirectiveSet | None = None) -> int:
        """Count records matching *directives* (all records when omitted)."""
        session = self._require_session()
        if directives is None:
            stmt = select(func.count()).select_from(model)
        else:
            _, filtered = self._filtered(model, directives)
            stmt = select(func.count()).select_from(filtered.subquery())
        result = await session.execute(stmt)
        return result.scalar_one()

    async def find_page(self, model: type[T], directives: DirectiveSet) -> Page[T]:
        """Find one page of records together with the total match count."""
        items = await self.find(model, directives)
        total = await self.count(model, directives)
        return Page(items=items, total=total, page=directives.page_number, size=directives.page_size)

    async def contains(self, entity: Any) -> bool:
        """Whether a record with *entity*'s primary key exists in the store.

        Independent of whether *entity* itself is tracked by the session.
        """
        session = self._require_session()
        model = type(entity)
        key = identity_of(entity)
        if key is None:
            return False
        stmt = select(func.count()).select_from(model).where(self._key_clause(model, key))
        result = await session.execute(stmt)
        return result.scalar_one() > 0

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def save(self, entity: T) -> T:
        """Merge *entity* when the session tracks it, insert it otherwise.

        Returns the managed instance, which may differ from *entity*.
        """
        session = self._require_session()
        if entity in session:
            managed = await session.merge(entity)
        else:
            session.add(entity)
            managed = entity
        await session.flush()
        logger.debug("dynamic_save", record_type=type(entity).__name__, key=identity_of(managed))
        return managed

    async def remove(self, entity: Any) -> None:
        """Delete the stored record with *entity*'s primary key.

        Raises:
            NotFoundError: If no such record exists.
        """
        await self.remove_by_key(type(entity), identity_of(entity))

    async def remove_by_key(self, model: type, key: Any) -> None:
        """Delete the record with primary key *key*.

        Raises:
            NotFoundError: If no such record exists; nothing is deleted.
        """
        session = self._require_session()
        entity = await self.find_by_key(model, key) if key is not None else None
        if entity is None:
            raise NotFoundError(model, key)
        await session.delete(entity)
        await session.flush()
        logger.debug("dynamic_remove", record_type=model.__name__, key=key)
