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
"""SQLAlchemy specifications: composable WHERE clauses over mapped classes.

A :class:`Specification` wraps a callable that receives the mapped class
(``root``) and returns a boolean ``ColumnElement``, or ``None`` for "no
restriction".  Combining with ``&``, ``|`` and ``~`` builds a new clause
tree; nothing touches a statement until :meth:`Specification.to_predicate`.

Example::

    adult = Specification(lambda root: root.age >= 18)
    smith = Specification(lambda root: root.name == "Smith")

    stmt = (adult & ~smith).to_predicate(Person, select(Person))
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from sqlalchemy import ColumnElement, Select, and_, not_, or_

from dynaquery.data.specification import Specification as SpecificationBase

T = TypeVar("T")

ClauseFactory = Callable[[type[Any]], "ColumnElement[bool] | None"]


class Specification(SpecificationBase[T, Select[Any]]):
    """Composable predicate producing a SQLAlchemy boolean clause.

    * ``spec_a & spec_b``: both predicates must match (AND).
    * ``spec_a | spec_b``: either predicate may match (OR).
    * ``~spec_a``: negated predicate (NOT).

    An unrestricted specification (clause ``None``) is neutral under ``&``,
    absorbing under ``|`` and stays unrestricted under ``~``.
    """

    def __init__(self, clause: ClauseFactory) -> None:
        self._clause = clause

    @classmethod
    def all(cls) -> Specification[T]:
        """Match every record."""
        return cls(lambda root: None)

    def to_clause(self, root: type[T]) -> ColumnElement[bool] | None:
        """Build the boolean clause for *root*, ``None`` when unrestricted."""
        return self._clause(root)

    def to_predicate(self, root: type[T], query: Select[Any]) -> Select[Any]:
        """Apply this specification's clause to *query*."""
        clause = self._clause(root)
        if clause is None:
            return query
        return query.where(clause)

    # ------------------------------------------------------------------
    # Combinators
    # ------------------------------------------------------------------

    def __and__(self, other: Specification[T]) -> Specification[T]:  # type: ignore[override]
        left, right = self._clause, other._clause

        def and_clause(root: type[Any]) -> ColumnElement[bool] | None:
            clauses = [c for c in (left(root), right(root)) if c is not None]
            if not clauses:
                return None
            return clauses[0] if len(clauses) == 1 else and_(*clauses)

        return Specification(and_clause)

    def __or__(self, other: Specification[T]) -> Specification[T]:  # type: ignore[override]
        left, right = self._clause, other._clause

        def or_clause(root: type[Any]) -> ColumnElement[bool] | None:
            left_clause, right_clause = left(root), right(root)
            if left_clause is None or right_clause is None:
                return None
            return or_(left_clause, right_clause)

        return Specification(or_clause)

    def __invert__(self) -> Specification[T]:
        pred = self._clause

        def not_clause(root: type[Any]) -> ColumnElement[bool] | None:
            clause = pred(root)
            if clause is None:
                return None
            return not_(clause)

        return Specification(not_clause)


def all_of(specs: list[Specification[Any]]) -> Specification[Any]:
    """AND-combine *specs*; an empty list matches everything."""
    result: Specification[Any] = Specification.all()
    for spec in specs:
        result = result & spec
    return result


def any_of(specs: list[Specification[Any]]) -> Specification[Any]:
    """OR-combine *specs*; an empty list matches everything."""
    if not specs:
        return Specification.all()
    result = specs[0]
    for spec in specs[1:]:
        result = result | spec
    return result
