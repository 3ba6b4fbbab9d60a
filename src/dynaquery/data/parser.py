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
"""Request parameters to directive set.

Parameters arrive as a mapping of key to one or more raw strings, the way
web frameworks expose query strings.  Reserved keys (configured through
:class:`~dynaquery.config.properties.query.QueryProperties`) control sort,
paging, distinct and keyword search; every other key is an attribute filter:

=========================  ===========================================
``name=Smith``             EQUAL
``age[gte]=18``            GREATER_THAN_OR_EQUAL
``age[between]=18,30``     BETWEEN (exactly two values)
``status[in]=A&status[in]=B``  IN, values from repeated keys
``sort=age,desc``          sort directive, repeated keys keep order
``page=2&size=10``         paging
``distinct=true``          distinct results
``keyword=smith``          search every string attribute
=========================  ===========================================

Malformed parameters never fail the parse; they are dropped or fall back to
their defaults.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping, Sequence

from dynaquery.config.properties.query import QueryProperties
from dynaquery.data.coercion import coerce
from dynaquery.data.directive import (
    DirectiveSet,
    FilterDirective,
    KeywordDirective,
    Operator,
    PagingDirective,
    SortDirective,
)
from dynaquery.kernel.exceptions import ValueCoercionError

_logger = logging.getLogger(__name__)

_FILTER_KEY_RE = re.compile(r"^(?P<name>[^\[\]]+)(?:\[(?P<op>[a-z]+)\])?$")

_OPERATORS: dict[str, Operator] = {op.value: op for op in Operator}


def _as_list(value: str | Sequence[str]) -> list[str]:
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _split(raw_values: Iterable[str]) -> list[str]:
    """Flatten comma-separated lists and discard blank entries."""
    return [part.strip() for raw in raw_values for part in raw.split(",") if part.strip()]


class DirectiveParser:
    """Parses request parameters into a :class:`DirectiveSet`."""

    def __init__(self, properties: QueryProperties | None = None) -> None:
        self._properties = properties or QueryProperties()

    @property
    def properties(self) -> QueryProperties:
        return self._properties

    def parse(self, params: Mapping[str, str | Sequence[str]]) -> DirectiveSet:
        props = self._properties
        reserved = {props.sort_key, props.page_key, props.size_key, props.distinct_key, props.keyword_key}

        filters: list[FilterDirective] = []
        for key, value in params.items():
            if key in reserved:
                continue
            directive = self._parse_filter(key, _as_list(value))
            if directive is not None:
                filters.append(directive)

        sorts = self._parse_sorts(_as_list(params.get(props.sort_key, [])))
        keywords = tuple(
            KeywordDirective(v.strip()) for v in _as_list(params.get(props.keyword_key, [])) if v.strip()
        )
        return DirectiveSet(
            filters=tuple(filters),
            sorts=sorts,
            keywords=keywords,
            paging=self._parse_paging(params),
        )

    def _parse_filter(self, key: str, raw_values: list[str]) -> FilterDirective | None:
        match = _FILTER_KEY_RE.match(key)
        if match is None:
            _logger.debug("Ignoring malformed filter key %r", key)
            return None
        operator = _OPERATORS.get(match.group("op") or Operator.EQUAL.value)
        if operator is None:
            _logger.debug("Ignoring unknown operator in filter key %r", key)
            return None
        # LIKE patterns may legitimately contain commas.
        if operator in (Operator.LIKE, Operator.NOT_LIKE):
            values = [v for v in raw_values if v.strip()]
        else:
            values = _split(raw_values)
        try:
            return FilterDirective(match.group("name"), operator, tuple(values))
        except ValueError as exc:
            _logger.debug("Ignoring filter %r: %s", key, exc)
            return None

    def _parse_sorts(self, raw_values: list[str]) -> tuple[SortDirective, ...]:
        sorts: list[SortDirective] = []
        for raw in raw_values:
            name, _, direction = raw.partition(",")
            name, direction = name.strip(), (direction.strip().lower() or "asc")
            if not name:
                continue
            try:
                sorts.append(SortDirective(name, direction))  # type: ignore[arg-type]
            except ValueError as exc:
                _logger.debug("Ignoring sort %r: %s", raw, exc)
        return tuple(sorts)

    def _parse_paging(self, params: Mapping[str, str | Sequence[str]]) -> PagingDirective:
        props = self._properties
        page = self._positive_int(params.get(props.page_key), 1)
        size = min(self._positive_int(params.get(props.size_key), props.default_page_size), props.max_page_size)
        distinct = False
        raw_distinct = params.get(props.distinct_key)
        if raw_distinct is not None:
            try:
                distinct = bool(coerce(bool, _as_list(raw_distinct)[-1]))
            except (ValueCoercionError, IndexError):
                distinct = False
        return PagingDirective(page=page, size=size, distinct=distinct)

    @staticmethod
    def _positive_int(raw: str | Sequence[str] | None, default: int) -> int:
        if raw is None:
            return default
        values = _as_list(raw)
        if not values:
            return default
        try:
            value = int(values[-1].strip())
        except ValueError:
            return default
        return value if value >= 1 else default
