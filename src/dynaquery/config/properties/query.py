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
"""Dynamic query configuration properties."""

from __future__ import annotations

from dataclasses import dataclass

from dynaquery.core.config import config_properties


@config_properties(prefix="dynaquery.query")
@dataclass(frozen=True)
class QueryProperties:
    """Configuration for directive parsing and paging (dynaquery.query.*).

    The ``*_key`` fields name the reserved request parameters; every other
    parameter is read as an attribute filter.
    """

    default_page_size: int = 20
    max_page_size: int = 1000
    sort_key: str = "sort"
    page_key: str = "page"
    size_key: str = "size"
    distinct_key: str = "distinct"
    keyword_key: str = "keyword"
    unaccent_function: str | None = None
