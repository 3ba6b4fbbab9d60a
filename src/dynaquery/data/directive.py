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
"""Directive model: request-supplied filter, sort, keyword and paging intent.

A :class:`DirectiveSet` is built fresh for every request, consumed once by
:class:`~dynaquery.data.relational.repository.DynamicRepository` and then
discarded.  Every directive is a frozen dataclass, so sets can be shared
between a ``find`` and its ``count`` without copying.

Example::

    directives = DirectiveSet.of(
        FilterDirective("name", Operator.EQUAL, ("Smith",)),
        SortDirective.desc("age"),
        PagingDirective(page=2, size=10),
    )
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Literal

from dynaquery.data.page import start_offset

DEFAULT_PAGE_SIZE = 20


class Operator(enum.Enum):
    """Filter operators understood by the predicate builder."""

    EQUAL = "eq"
    NOT_EQUAL = "ne"
    LIKE = "like"
    NOT_LIKE = "nlike"
    GREATER_THAN = "gt"
    GREATER_THAN_OR_EQUAL = "gte"
    LESS_THAN = "lt"
    LESS_THAN_OR_EQUAL = "lte"
    IN = "in"
    NOT_IN = "nin"
    BETWEEN = "between"
    NOT_BETWEEN = "nbetween"

    @property
    def is_between(self) -> bool:
        return self in (Operator.BETWEEN, Operator.NOT_BETWEEN)


@dataclass(frozen=True)
class FilterDirective:
    """Restrict one attribute with an operator and zero or more raw values."""

    name: str
    operator: Operator = Operator.EQUAL
    values: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))
        if self.operator.is_between and len(self.values) != 2:
            raise ValueError(f"{self.operator.name} requires exactly 2 values, got {len(self.values)}")

    @property
    def between(self) -> tuple[str, str]:
        """The (low, high) pair of a BETWEEN / NOT_BETWEEN directive."""
        if not self.operator.is_between:
            raise ValueError(f"{self.operator.name} has no between pair")
        return self.values[0], self.values[1]


@dataclass(frozen=True)
class SortDirective:
    """Order results by one attribute."""

    name: str
    direction: Literal["asc", "desc"] = "asc"

    def __post_init__(self) -> None:
        if self.direction not in ("asc", "desc"):
            raise ValueError(f"direction must be 'asc' or 'desc', got {self.direction!r}")

    @staticmethod
    def asc(name: str) -> SortDirective:
        return SortDirective(name=name, direction="asc")

    @staticmethod
    def desc(name: str) -> SortDirective:
        return SortDirective(name=name, direction="desc")

    @property
    def ascending(self) -> bool:
        return self.direction == "asc"


@dataclass(frozen=True)
class PagingDirective:
    """Page number (1-based), page size and the distinct flag."""

    page: int = 1
    size: int = DEFAULT_PAGE_SIZE
    distinct: bool = False

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.size < 1:
            raise ValueError(f"size must be >= 1, got {self.size}")

    @property
    def offset(self) -> int:
        return start_offset(self.page, self.size)


@dataclass(frozen=True)
class KeywordDirective:
    """Free-text search across every string attribute of a record type."""

    value: str


Directive = FilterDirective | SortDirective | PagingDirective | KeywordDirective


@dataclass(frozen=True)
class DirectiveSet:
    """All directives extracted from one request.

    Filters, sorts and keywords keep the order they were given in; sort order
    is significant, filter and keyword order is not.  When several paging
    directives are supplied the last one wins.
    """

    filters: tuple[FilterDirective, ...] = ()
    sorts: tuple[SortDirective, ...] = ()
    keywords: tuple[KeywordDirective, ...] = ()
    paging: PagingDirective = field(default_factory=PagingDirective)

    @classmethod
    def of(cls, *directives: Directive) -> DirectiveSet:
        filters: list[FilterDirective] = []
        sorts: list[SortDirective] = []
        keywords: list[KeywordDirective] = []
        paging = PagingDirective()
        for directive in directives:
            if isinstance(directive, FilterDirective):
                filters.append(directive)
            elif isinstance(directive, SortDirective):
                sorts.append(directive)
            elif isinstance(directive, KeywordDirective):
                keywords.append(directive)
            elif isinstance(directive, PagingDirective):
                paging = directive
            else:
                raise TypeError(f"Not a directive: {directive!r}")
        return cls(tuple(filters), tuple(sorts), tuple(keywords), paging)

    @classmethod
    def empty(cls) -> DirectiveSet:
        return cls()

    def __iter__(self):
        yield from self.filters
        yield from self.sorts
        yield from self.keywords
        yield self.paging

    @property
    def page_number(self) -> int:
        return self.paging.page

    @property
    def page_size(self) -> int:
        return self.paging.size

    @property
    def distinct(self) -> bool:
        return self.paging.distinct

    @property
    def start_offset(self) -> int:
        return self.paging.offset

    def replace(
        self,
        *,
        filters: tuple[FilterDirective, ...] | None = None,
        sorts: tuple[SortDirective, ...] | None = None,
    ) -> DirectiveSet:
        """Return a copy with the given filter and/or sort directives."""
        return DirectiveSet(
            filters=self.filters if filters is None else filters,
            sorts=self.sorts if sorts is None else sorts,
            keywords=self.keywords,
            paging=self.paging,
        )
