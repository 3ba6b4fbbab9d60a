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
"""Unit-of-work helpers: scoped session and transaction acquisition.

The repository never opens sessions itself.  The calling layer acquires one
per request with :func:`unit_of_work` (or the :func:`reactive_transactional`
decorator), which commits on success, rolls back on any exception and always
closes the session.
"""

from __future__ import annotations

import functools
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

F = TypeVar("F", bound=Callable[..., Any])


@asynccontextmanager
async def unit_of_work(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Open a session, begin a transaction and yield the session.

    Usage::

        async with unit_of_work(session_factory) as session:
            repo = DynamicRepository(session)
            await repo.save(Person(name="Smith"))
    """
    async with session_factory() as session, session.begin():
        yield session


def reactive_transactional(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[F], F]:
    """Decorator for declarative async transaction management.

    Wraps an async function in a unit of work. The decorated function
    receives the AsyncSession as its first argument. On success the
    transaction is committed; on exception it is rolled back and the
    exception re-raised.

    Usage:
        @reactive_transactional(session_factory)
        async def create_person(session: AsyncSession, name: str) -> Person:
            return await DynamicRepository(session).save(Person(name=name))
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            async with unit_of_work(session_factory) as session:
                return await func(session, *args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
