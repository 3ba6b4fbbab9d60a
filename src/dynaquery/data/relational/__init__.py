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
"""dynaquery Data Relational: SQLAlchemy implementation of the dynamic query engine."""

from dynaquery.data.relational.filter import FilterOperator
from dynaquery.data.relational.predicate import PredicateBuilder
from dynaquery.data.relational.repository import DynamicRepository
from dynaquery.data.relational.schema import (
    SchemaGuard,
    attribute_type,
    basic_attributes,
    identity_of,
    is_queryable,
    primary_key_attributes,
    string_attributes,
)
from dynaquery.data.relational.specification import Specification, all_of, any_of
from dynaquery.data.relational.transactional import reactive_transactional, unit_of_work

__all__ = [
    "DynamicRepository",
    "FilterOperator",
    "PredicateBuilder",
    "SchemaGuard",
    "Specification",
    "all_of",
    "any_of",
    "attribute_type",
    "basic_attributes",
    "identity_of",
    "is_queryable",
    "primary_key_attributes",
    "reactive_transactional",
    "string_attributes",
    "unit_of_work",
]
