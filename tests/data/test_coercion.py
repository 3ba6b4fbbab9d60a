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
"""Tests for raw value coercion."""

from __future__ import annotations

import enum
import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal

import pytest

from dynaquery.data.coercion import coerce, coerce_many, strip_accents
from dynaquery.kernel.exceptions import ValueCoercionError


class Color(enum.Enum):
    RED = "r"
    GREEN = "g"


class TestCoerce:
    def test_string_passes_through(self) -> None:
        assert coerce(str, "Smith") == "Smith"

    def test_unknown_type_passes_through(self) -> None:
        assert coerce(None, "x") == "x"
        assert coerce(bytes, "x") == "x"

    def test_int(self) -> None:
        assert coerce(int, " 42 ") == 42

    def test_float_and_decimal_accept_comma(self) -> None:
        assert coerce(float, "1,5") == 1.5
        assert coerce(Decimal, "2,25") == Decimal("2.25")

    @pytest.mark.parametrize(("raw", "expected"), [("true", True), ("YES", True), ("0", False), ("off", False)])
    def test_bool(self, raw: str, expected: bool) -> None:
        assert coerce(bool, raw) is expected

    def test_date_and_truncated_timestamp(self) -> None:
        assert coerce(date, "2024-03-01") == date(2024, 3, 1)
        assert coerce(date, "2024-03-01T10:00:00") == date(2024, 3, 1)

    def test_datetime(self) -> None:
        assert coerce(datetime, "2024-03-01") == datetime(2024, 3, 1)
        assert coerce(datetime, "2024-03-01T10:30:00Z") == datetime(2024, 3, 1, 10, 30, tzinfo=timezone.utc)

    def test_time(self) -> None:
        assert coerce(time, "08:15") == time(8, 15)

    def test_uuid(self) -> None:
        value = uuid.uuid4()
        assert coerce(uuid.UUID, str(value)) == value

    def test_enum_by_name_then_value(self) -> None:
        assert coerce(Color, "RED") is Color.RED
        assert coerce(Color, "g") is Color.GREEN

    def test_already_typed_value_is_kept(self) -> None:
        assert coerce(int, 7) == 7

    @pytest.mark.parametrize(
        ("target", "raw"),
        [
            (int, "abc"),
            (int, ""),
            (float, "1.2.3"),
            (Decimal, "ten"),
            (bool, "maybe"),
            (date, "2024-13-01"),
            (datetime, "yesterday"),
            (uuid.UUID, "not-a-uuid"),
            (Color, "BLUE"),
        ],
    )
    def test_failures_raise_value_coercion_error(self, target: type, raw: str) -> None:
        with pytest.raises(ValueCoercionError) as info:
            coerce(target, raw)
        assert info.value.context["value"] == raw


class TestCoerceMany:
    def test_coerces_each_value(self) -> None:
        assert coerce_many(int, ["1", "2"]) == [1, 2]

    def test_empty(self) -> None:
        assert coerce_many(int, []) == []

    def test_one_bad_value_fails_all(self) -> None:
        with pytest.raises(ValueCoercionError):
            coerce_many(int, ["1", "x"])


class TestStripAccents:
    def test_removes_diacritics(self) -> None:
        assert strip_accents("Élodie Müller façade") == "Elodie Muller facade"

    def test_plain_text_unchanged(self) -> None:
        assert strip_accents("smith") == "smith"
