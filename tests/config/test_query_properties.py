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
"""Tests for typed query and logging properties."""

from __future__ import annotations

import pytest

from dynaquery.config.properties import LoggingProperties, QueryProperties
from dynaquery.core.config import Config


class TestQueryProperties:
    def test_defaults(self):
        props = QueryProperties()
        assert props.default_page_size == 20
        assert props.max_page_size == 1000
        assert props.sort_key == "sort"
        assert props.keyword_key == "keyword"
        assert props.unaccent_function is None

    def test_bind_from_config(self):
        config = Config({"dynaquery": {"query": {"default_page_size": 10, "page_key": "p"}}})
        props = config.bind(QueryProperties)
        assert props.default_page_size == 10
        assert props.page_key == "p"
        assert props.size_key == "size"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DYNAQUERY_QUERY_MAX_PAGE_SIZE", "50")
        assert Config({}).bind(QueryProperties).max_page_size == 50

    def test_frozen(self):
        props = QueryProperties()
        with pytest.raises(AttributeError):
            props.sort_key = "order"  # type: ignore[misc]


class TestLoggingProperties:
    def test_defaults(self):
        props = LoggingProperties()
        assert props.format == "console"
        assert props.level == {"root": "INFO"}

    def test_bind_from_config(self):
        config = Config({"dynaquery": {"logging": {"format": "json", "level": {"root": "DEBUG"}}}})
        props = config.bind(LoggingProperties)
        assert props.format == "json"
        assert props.level == {"root": "DEBUG"}
