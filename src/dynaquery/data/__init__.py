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
"""dynaquery Data: directive model, coercion, paging and the relational engine.

Backend-neutral types (directives, coercion, Page, the Specification port)
live at this level; the SQLAlchemy engine lives in
``dynaquery.data.relational`` and its main entry points are re-exported here.
"""

from dynaquery.data.coercion import coerce, coerce_many, strip_accents
from dynaquery.data.directive import (
    DEFAULT_PAGE_SIZE,
    Directive,
    DirectiveSet,
    FilterDirective,
    KeywordDirective,
    Operator,
    PagingDirective,
    SortDirective,
)
from dynaquery.data.page import Page, page_count, start_offset
from dynaquery.data.parser import DirectiveParser
from dynaquery.data.relational import (
    DynamicRepository,
    FilterOperator,
    PredicateBuilder,
    SchemaGuard,
    Specification,
    reactive_transactional,
    unit_of_work,
)

__all__ = [
    # Directives
    "DEFAULT_PAGE_SIZE",
    "Directive",
    "DirectiveParser",
    "DirectiveSet",
    "FilterDirective",
    "KeywordDirective",
    "Operator",
    "PagingDirective",
    "SortDirective",
    # Coercion
    "coerce",
    "coerce_many",
    "strip_accents",
    # Paging
    "Page",
    "page_count",
    "start_offset",
    # Relational engine
    "DynamicRepository",
    "FilterOperator",
    "PredicateBuilder",
    "SchemaGuard",
    "Specification",
    "reactive_transactional",
    "unit_of_work",
]
