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
"""dynaquery: directive-driven generic data access for SQLAlchemy.

Untyped request parameters become filter, sort, keyword and paging
directives; the engine checks them against each record type's schema,
coerces their values and runs one query per request.

Example::

    parser = DirectiveParser()
    directives = parser.parse({"name[like]": "Sm%", "sort": "age,desc", "page": "2"})

    async with unit_of_work(session_factory) as session:
        page = await DynamicRepository(session).find_page(Person, directives)
"""

from dynaquery.core.application import DynaQueryApplication
from dynaquery.core.config import Config, config_properties
from dynaquery.data import (
    DirectiveParser,
    DirectiveSet,
    DynamicRepository,
    FilterDirective,
    FilterOperator,
    KeywordDirective,
    Operator,
    Page,
    PagingDirective,
    PredicateBuilder,
    SchemaGuard,
    SortDirective,
    Specification,
    reactive_transactional,
    unit_of_work,
)
from dynaquery.kernel.exceptions import (
    ConflictError,
    DynaQueryException,
    NotFoundError,
    SchemaError,
    StoreError,
    ValueCoercionError,
)
from dynaquery.service import MapperBinding, RecordBinding, RecordService

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConflictError",
    "DirectiveParser",
    "DirectiveSet",
    "DynaQueryApplication",
    "DynaQueryException",
    "DynamicRepository",
    "FilterDirective",
    "FilterOperator",
    "KeywordDirective",
    "MapperBinding",
    "NotFoundError",
    "Operator",
    "Page",
    "PagingDirective",
    "PredicateBuilder",
    "RecordBinding",
    "RecordService",
    "SchemaError",
    "SchemaGuard",
    "SortDirective",
    "Specification",
    "StoreError",
    "ValueCoercionError",
    "config_properties",
    "reactive_transactional",
    "unit_of_work",
]
