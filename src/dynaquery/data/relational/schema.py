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
"""Schema introspection and the directive safety filter.

Only *basic* attributes (mapped columns of the record's own table) may be
filtered or sorted on.  Relationships, composites, synonyms, hybrid and plain
Python properties, and column properties backed by SQL expressions are never
queryable, so request directives cannot traverse object graphs or trigger
computed fields.  Directives naming anything else are dropped, not rejected.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Column, inspect
from sqlalchemy.orm import ColumnProperty, Mapper

from dynaquery.data.directive import DirectiveSet
from dynaquery.kernel.exceptions import SchemaError

_logger = logging.getLogger(__name__)


def _mapper(model: type) -> Mapper[Any]:
    mapper = inspect(model, raiseerr=False)
    if not isinstance(mapper, Mapper):
        raise SchemaError(
            f"{getattr(model, '__name__', model)!s} is not a mapped record type",
            code="NOT_MAPPED",
            context={"record_type": getattr(model, "__name__", str(model))},
        )
    return mapper


def _python_type(prop: ColumnProperty[Any]) -> type | None:
    try:
        return prop.columns[0].type.python_type
    except NotImplementedError:
        return None


def _is_basic(prop: Any) -> bool:
    # Joined-inheritance keys map one attribute to a column per table.
    return isinstance(prop, ColumnProperty) and all(isinstance(column, Column) for column in prop.columns)


def basic_attributes(model: type) -> dict[str, type | None]:
    """Queryable attribute names of *model* mapped to their python types."""
    return {prop.key: _python_type(prop) for prop in _mapper(model).column_attrs if _is_basic(prop)}


def is_queryable(model: type, name: str) -> bool:
    """Whether *name* is a basic attribute of *model*."""
    prop = _mapper(model).attrs.get(name)
    return prop is not None and _is_basic(prop)


def attribute_type(model: type, name: str) -> type | None:
    """Declared python type of a basic attribute (``None`` if unknown)."""
    prop = _mapper(model).attrs.get(name)
    if prop is None or not _is_basic(prop):
        raise SchemaError(f"{model.__name__}.{name} is not a basic attribute", code="NOT_BASIC")
    return _python_type(prop)


def string_attributes(model: type) -> list[str]:
    """Basic attributes declared with a ``str`` python type."""
    return [name for name, python_type in basic_attributes(model).items() if python_type is str]


def primary_key_attributes(model: type) -> list[str]:
    """Attribute names making up the primary key of *model*.

    Raises:
        SchemaError: If *model* is not mapped or declares no primary key.
    """
    mapper = _mapper(model)
    names = [mapper.get_property_by_column(column).key for column in mapper.primary_key]
    if not names:
        raise SchemaError(
            f"No primary key attribute found in {model.__name__}",
            code="NO_PRIMARY_KEY",
            context={"record_type": model.__name__},
        )
    return names


def identity_of(entity: Any) -> Any:
    """Primary-key value of *entity*.

    A scalar for single-column keys, a tuple for composite keys, ``None``
    when any key attribute is still unset.
    """
    model = type(entity)
    names = primary_key_attributes(model)
    values = tuple(getattr(entity, name) for name in names)
    if any(value is None for value in values):
        return None
    return values[0] if len(values) == 1 else values


class SchemaGuard:
    """Drops filter and sort directives that name non-queryable attributes."""

    @staticmethod
    def filter(model: type, directives: DirectiveSet) -> DirectiveSet:
        basic = basic_attributes(model)
        filters = tuple(f for f in directives.filters if f.name in basic)
        sorts = tuple(s for s in directives.sorts if s.name in basic)
        dropped = (len(directives.filters) - len(filters)) + (len(directives.sorts) - len(sorts))
        if dropped:
            _logger.debug("Dropped %d directive(s) on non-queryable attributes of %s", dropped, model.__name__)
        return directives.replace(filters=filters, sorts=sorts)
