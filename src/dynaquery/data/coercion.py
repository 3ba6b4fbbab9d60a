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
"""Raw text to native value coercion for filter directives.

Request parameters always arrive as strings; comparisons against a typed
column need the column's own python type.  :func:`coerce` converts one raw
value, :func:`coerce_many` a sequence.  Every failure is reported as
:class:`~dynaquery.kernel.exceptions.ValueCoercionError`, so callers have a
single exception to catch when they drop an unusable directive.
"""

from __future__ import annotations

import enum
import unicodedata
import uuid
from collections.abc import Callable, Iterable
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

from dynaquery.kernel.exceptions import ValueCoercionError

_TRUE_TEXT = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_TEXT = frozenset({"0", "false", "no", "n", "off"})


def strip_accents(text: str) -> str:
    """Remove diacritics: ``"Élodie"`` -> ``"Elodie"``."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _to_bool(raw: str) -> bool:
    text = raw.strip().lower()
    if text in _TRUE_TEXT:
        return True
    if text in _FALSE_TEXT:
        return False
    raise ValueError(raw)


def _to_int(raw: str) -> int:
    return int(raw.strip())


def _to_float(raw: str) -> float:
    return float(raw.strip().replace(",", "."))


def _to_decimal(raw: str) -> Decimal:
    try:
        return Decimal(raw.strip().replace(",", "."))
    except InvalidOperation as exc:
        raise ValueError(raw) from exc


def _to_date(raw: str) -> date:
    text = raw.strip()
    # Full timestamps are accepted and truncated to their date part.
    if "T" in text or " " in text:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    return date.fromisoformat(text)


def _to_datetime(raw: str) -> datetime:
    text = raw.strip()
    if len(text) == 10 and "T" not in text and " " not in text:
        return datetime.combine(date.fromisoformat(text), time.min)
    return datetime.fromisoformat(text.replace("Z", "+00:00"))


def _to_time(raw: str) -> time:
    return time.fromisoformat(raw.strip())


def _to_uuid(raw: str) -> uuid.UUID:
    return uuid.UUID(raw.strip())


_PARSERS: dict[type, Callable[[str], Any]] = {
    bool: _to_bool,
    int: _to_int,
    float: _to_float,
    Decimal: _to_decimal,
    datetime: _to_datetime,
    date: _to_date,
    time: _to_time,
    uuid.UUID: _to_uuid,
}


def _to_enum(enum_type: type[enum.Enum], raw: str) -> enum.Enum:
    text = raw.strip()
    try:
        return enum_type[text]
    except KeyError:
        pass
    for member in enum_type:
        if str(member.value) == text:
            return member
    raise ValueError(raw)


def coerce(target_type: type | None, raw: Any) -> Any:
    """Convert *raw* into *target_type*.

    ``None`` or unsupported target types pass the value through unchanged,
    as do values that already have the target type.

    Raises:
        ValueCoercionError: If *raw* cannot be parsed as *target_type*.
    """
    if target_type is None or raw is None:
        return raw
    if isinstance(raw, target_type) and not (target_type is int and isinstance(raw, bool)):
        return raw
    if target_type is str:
        return str(raw)

    text = str(raw)
    try:
        if isinstance(target_type, type) and issubclass(target_type, enum.Enum):
            return _to_enum(target_type, text)
        parser = _PARSERS.get(target_type)
        if parser is None:
            return raw
        return parser(text)
    except (ValueError, TypeError, ArithmeticError) as exc:
        raise ValueCoercionError(target_type, raw) from exc


def coerce_many(target_type: type | None, raws: Iterable[Any]) -> list[Any]:
    """Convert every value in *raws*; fails on the first uncoercible one."""
    return [coerce(target_type, raw) for raw in raws]
