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
"""Directive to predicate translation.

:class:`PredicateBuilder` turns one :class:`FilterDirective` or
:class:`KeywordDirective` into a :class:`Specification` for a given record
type.  Raw values are coerced to the attribute's python type first; a value
that does not coerce makes the whole directive unusable and it is dropped.

Multi-valued comparisons (EQUAL, LIKE, GREATER/LESS variants) OR their
values together and fall back to ``IS NULL`` when there are no values.
NOT_* operators are the negation of their positive counterpart, so
NOT_EQUAL without values means ``IS NOT NULL``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, assert_never

from dynaquery.data.coercion import coerce, coerce_many, strip_accents
from dynaquery.data.directive import DirectiveSet, FilterDirective, KeywordDirective, Operator
from dynaquery.data.relational.filter import FilterOperator
from dynaquery.data.relational.schema import basic_attributes, string_attributes
from dynaquery.data.relational.specification import Specification, all_of, any_of
from dynaquery.kernel.exceptions import ValueCoercionError

_logger = logging.getLogger(__name__)

_LIKE_ESCAPES = str.maketrans({"\\": "\\\\", "%": "\\%", "_": "\\_"})


def _contains_pattern(text: str) -> str:
    return "%" + text.translate(_LIKE_ESCAPES) + "%"


class PredicateBuilder:
    """Builds specifications from directives for one record type.

    Args:
        model: The mapped record type.
        unaccent_function: Optional SQL function applied to columns in
            keyword search so stored accents are ignored too.
    """

    def __init__(self, model: type, unaccent_function: str | None = None) -> None:
        self._model = model
        self._types = basic_attributes(model)
        self._unaccent = unaccent_function

    def build(self, directive: FilterDirective | KeywordDirective) -> Specification[Any] | None:
        """Translate one directive; ``None`` when it must be dropped."""
        if isinstance(directive, KeywordDirective):
            return self.keyword(directive.value)
        if directive.name not in self._types:
            return None
        try:
            return self._build_filter(directive)
        except ValueCoercionError as exc:
            _logger.debug(
                "Dropped %s filter on %s.%s: %s",
                directive.operator.name,
                self._model.__name__,
                directive.name,
                exc,
            )
            return None

    def build_all(self, directives: DirectiveSet) -> Specification[Any]:
        """AND of every usable directive; filters on one attribute are ORed."""
        groups: dict[str, list[Specification[Any]]] = {}
        for directive in directives.filters:
            spec = self.build(directive)
            if spec is not None:
                groups.setdefault(directive.name, []).append(spec)
        specs = [any_of(group) for group in groups.values()]
        specs.extend(self.keyword(k.value) for k in directives.keywords)
        return all_of(specs)

    def _build_filter(self, directive: FilterDirective) -> Specification[Any]:
        name = directive.name
        python_type = self._types[name]
        match directive.operator:
            case Operator.EQUAL:
                return self._any_value(name, coerce_many(python_type, directive.values), FilterOperator.eq)
            case Operator.NOT_EQUAL:
                return ~self._any_value(name, coerce_many(python_type, directive.values), FilterOperator.eq)
            case Operator.LIKE:
                return self._any_value(name, coerce_many(str, directive.values), FilterOperator.like)
            case Operator.NOT_LIKE:
                return ~self._any_value(name, coerce_many(str, directive.values), FilterOperator.like)
            case Operator.GREATER_THAN:
                return self._any_value(name, coerce_many(python_type, directive.values), FilterOperator.gt)
            case Operator.GREATER_THAN_OR_EQUAL:
                return self._any_value(name, coerce_many(python_type, directive.values), FilterOperator.gte)
            case Operator.LESS_THAN:
                return self._any_value(name, coerce_many(python_type, directive.values), FilterOperator.lt)
            case Operator.LESS_THAN_OR_EQUAL:
                return self._any_value(name, coerce_many(python_type, directive.values), FilterOperator.lte)
            case Operator.IN:
                return FilterOperator.in_list(name, coerce_many(python_type, directive.values))
            case Operator.NOT_IN:
                return ~FilterOperator.in_list(name, coerce_many(python_type, directive.values))
            case Operator.BETWEEN:
                return self._between(name, python_type, directive)
            case Operator.NOT_BETWEEN:
                return ~self._between(name, python_type, directive)
            case _:
                assert_never(directive.operator)

    @staticmethod
    def _any_value(
        name: str,
        values: list[Any],
        factory: Callable[[str, Any], Specification[Any]],
    ) -> Specification[Any]:
        if not values:
            return FilterOperator.is_null(name)
        return any_of([factory(name, value) for value in values])

    @staticmethod
    def _between(name: str, python_type: type | None, directive: FilterDirective) -> Specification[Any]:
        low, high = directive.between
        return FilterOperator.between(name, coerce(python_type, low), coerce(python_type, high))

    def keyword(self, value: str) -> Specification[Any]:
        """Case- and accent-insensitive substring match over every string attribute.

        Without an unaccent function stored values keep their accents, so the
        keyword's lowered form is tried next to its accent-stripped form.
        A record type without string attributes is not restricted at all.
        """
        names = string_attributes(self._model)
        lowered = value.lower()
        forms = [strip_accents(lowered)]
        if self._unaccent is None and lowered != forms[0]:
            forms.append(lowered)
        return any_of(
            [
                FilterOperator.lower_like(name, _contains_pattern(form), self._unaccent)
                for name in names
                for form in forms
            ]
        )
