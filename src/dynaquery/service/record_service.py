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
"""Record service: list/find/create/update/delete for one bound record type.

The service is what an endpoint layer talks to.  It is constructed with its
collaborators (repository, binding, parser) for each request; it never looks
them up from global state.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from dynaquery.data.page import Page
from dynaquery.data.parser import DirectiveParser
from dynaquery.data.relational.repository import DynamicRepository
from dynaquery.kernel.exceptions import ConflictError
from dynaquery.service.binding import RecordBinding

E = TypeVar("E")
D = TypeVar("D")


class RecordService(Generic[E, D]):
    """CRUD operations for the record type of *binding*."""

    def __init__(
        self,
        repository: DynamicRepository,
        binding: RecordBinding[E, D],
        parser: DirectiveParser | None = None,
    ) -> None:
        self._repository = repository
        self._binding = binding
        self._parser = parser or DirectiveParser()

    @property
    def record_type(self) -> type[E]:
        return self._binding.entity_type()

    async def on_filter(self, params: Mapping[str, str | Sequence[str]]) -> Page[D]:
        """One page of data objects matching the request parameters."""
        directives = self._parser.parse(params)
        page = await self._repository.find_page(self.record_type, directives)
        return page.map(self._binding.from_entity)

    async def on_find(self, key: Any) -> D | None:
        entity = await self._repository.find_by_key(self.record_type, key)
        return None if entity is None else self._binding.from_entity(entity)

    async def on_create(self, data: D) -> Any:
        """Insert a new record and return its primary key.

        Raises:
            ConflictError: If a record with the same key already exists.
        """
        entity = self._binding.to_entity(data)
        if await self._repository.contains(entity):
            raise ConflictError(self.record_type, self._repository.primary_key(entity))
        entity = await self._repository.save(entity)
        return self._repository.primary_key(entity)

    async def on_update(self, key: Any, data: D) -> D:
        """Overwrite the record with *key* from *data*.

        Raises:
            NotFoundError: If no record has that key.
        """
        entity = await self._repository.get_by_key(self.record_type, key)
        self._binding.update_entity(data, entity)
        entity = await self._repository.save(entity)
        return self._binding.from_entity(entity)

    async def on_delete(self, key: Any) -> None:
        """Delete the record with *key*.

        Raises:
            NotFoundError: If no record has that key.
        """
        await self._repository.remove_by_key(self.record_type, key)
