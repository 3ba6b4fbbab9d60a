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
"""Record bindings: conversion between stored records and data objects.

A :class:`RecordBinding` names its record and data types explicitly and
converts in both directions.  :class:`MapperBinding` covers the common case
by matching field names between dataclasses, Pydantic models and mapped
classes.

Example::

    binding = MapperBinding(PersonEntity, PersonData)
    data = binding.from_entity(entity)

    # Renamed fields, keyed source name -> destination name
    binding = MapperBinding(PersonEntity, PersonData, field_map={"full_name": "name"})
"""

from __future__ import annotations

import dataclasses
from typing import Any, Generic, Protocol, TypeVar, get_type_hints, runtime_checkable

from pydantic import BaseModel
from sqlalchemy import inspect
from sqlalchemy.orm import Mapper

from dynaquery.data.relational.schema import basic_attributes, primary_key_attributes

E = TypeVar("E")
D = TypeVar("D")


@runtime_checkable
class RecordBinding(Protocol[E, D]):
    """Explicit record-type / data-type pairing with conversions."""

    def entity_type(self) -> type[E]: ...

    def data_type(self) -> type[D]: ...

    def to_entity(self, data: D) -> E: ...

    def from_entity(self, entity: E) -> D: ...

    def update_entity(self, data: D, entity: E) -> None: ...


def _is_mapped(cls: type) -> bool:
    return isinstance(inspect(cls, raiseerr=False), Mapper)


def _field_names(cls: type) -> list[str]:
    if dataclasses.is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls)]
    if issubclass(cls, BaseModel):
        return list(cls.model_fields)
    if _is_mapped(cls):
        return list(basic_attributes(cls))
    return list(get_type_hints(cls))


def _extract_fields(obj: Any) -> dict[str, Any]:
    cls = type(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    if isinstance(obj, BaseModel):
        return {name: getattr(obj, name) for name in cls.model_fields}
    if _is_mapped(cls):
        return {name: getattr(obj, name) for name in basic_attributes(cls)}
    return dict(vars(obj))


class MapperBinding(Generic[E, D]):
    """Field-name matching binding.

    Args:
        entity_type: The mapped record type.
        data_type: The data type (dataclass, Pydantic model, plain class).
        field_map: Renamed fields, ``{entity_field: data_field}``.
        exclude: Fields never copied in either direction.
    """

    def __init__(
        self,
        entity_type: type[E],
        data_type: type[D],
        *,
        field_map: dict[str, str] | None = None,
        exclude: set[str] | None = None,
    ) -> None:
        self._entity_type = entity_type
        self._data_type = data_type
        self._to_data = dict(field_map or {})
        self._to_entity = {v: k for k, v in self._to_data.items()}
        self._exclude = set(exclude or ())

    def entity_type(self) -> type[E]:
        return self._entity_type

    def data_type(self) -> type[D]:
        return self._data_type

    def _copy(self, source: Any, dest_fields: list[str], names: dict[str, str]) -> dict[str, Any]:
        source_data = _extract_fields(source)
        kwargs: dict[str, Any] = {}
        for source_field, value in source_data.items():
            dest_field = names.get(source_field, source_field)
            if dest_field in dest_fields and dest_field not in self._exclude:
                kwargs[dest_field] = value
        return kwargs

    def to_entity(self, data: D) -> E:
        kwargs = self._copy(data, _field_names(self._entity_type), self._to_entity)
        return self._entity_type(**kwargs)

    def from_entity(self, entity: E) -> D:
        kwargs = self._copy(entity, _field_names(self._data_type), self._to_data)
        return self._data_type(**kwargs)

    def update_entity(self, data: D, entity: E) -> None:
        """Copy data fields onto *entity*, leaving its primary key untouched."""
        protected = set(primary_key_attributes(self._entity_type))
        for name, value in self._copy(data, _field_names(self._entity_type), self._to_entity).items():
            if name not in protected:
                setattr(entity, name, value)
