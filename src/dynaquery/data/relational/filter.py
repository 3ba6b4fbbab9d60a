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
"""Column-level filter primitives.

Each static method of :class:`FilterOperator` returns a
:class:`~dynaquery.data.relational.specification.Specification` applying a
single predicate to one named attribute.  The predicate builder assembles
directive semantics from these; callers can use them directly for
hand-written predicates::

    spec = FilterOperator.gte("age", 18) & FilterOperator.lt("age", 65)
    adults = await repo.find_by_predicate(Person, spec)
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func

from dynaquery.data.relational.specification import Specification


class FilterOperator:
    """Single-attribute predicate factories."""

    @staticmethod
    def eq(field: str, value: Any) -> Specification[Any]:
        """Equal to."""
        return Specification(lambda root, _f=field, _v=value: getattr(root, _f) == _v)

    @staticmethod
    def gt(field: str, value: Any) -> Specification[Any]:
        """Greater than."""
        return Specification(lambda root, _f=field, _v=value: getattr(root, _f) > _v)

    @staticmethod
    def gte(field: str, value: Any) -> Specification[Any]:
        """Greater than or equal."""
        return Specification(lambda root, _f=field, _v=value: getattr(root, _f) >= _v)

    @staticmethod
    def lt(field: str, value: Any) -> Specification[Any]:
        """Less than."""
        return Specification(lambda root, _f=field, _v=value: getattr(root, _f) < _v)

    @staticmethod
    def lte(field: str, value: Any) -> Specification[Any]:
        """Less than or equal."""
        return Specification(lambda root, _f=field, _v=value: getattr(root, _f) <= _v)

    @staticmethod
    def like(field: str, pattern: str) -> Specification[Any]:
        """SQL LIKE pattern match, pattern used verbatim."""
        return Specification(lambda root, _f=field, _p=pattern: getattr(root, _f).like(_p))

    @staticmethod
    def lower_like(field: str, pattern: str, unaccent: str | None = None) -> Specification[Any]:
        """``lower(field) LIKE pattern`` with ``\\`` as escape character.

        When *unaccent* names a SQL function (e.g. PostgreSQL ``unaccent``),
        the column is passed through it before lowering.
        """

        def clause(root: type[Any]) -> Any:
            column = getattr(root, field)
            if unaccent:
                column = getattr(func, unaccent)(column)
            return func.lower(column).like(pattern, escape="\\")

        return Specification(clause)

    @staticmethod
    def in_list(field: str, values: list[Any]) -> Specification[Any]:
        """Value is in list."""
        return Specification(lambda root, _f=field, _v=values: getattr(root, _f).in_(_v))

    @staticmethod
    def is_null(field: str) -> Specification[Any]:
        """Value is NULL."""
        return Specification(lambda root, _f=field: getattr(root, _f).is_(None))

    @staticmethod
    def between(field: str, low: Any, high: Any) -> Specification[Any]:
        """Value is between *low* and *high* (inclusive)."""
        return Specification(lambda root, _f=field, _lo=low, _hi=high: getattr(root, _f).between(_lo, _hi))
