# Copyright 2025 TIER IV, inc.
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

import operator
from datetime import datetime
from typing import Any, Callable, Optional

from ..models.options import ValidationOptions
from ..models.violation import RuleResult
from ..utils.coercion import as_utc, coerce_date, is_numeric_string
from ..utils.common import assert_
from .base import Schema, type_rule, violation


def _bound(limit: Any, method: str) -> datetime:
    coerced = coerce_date(limit)
    assert_(coerced.ok, f"In date.{method}(limit), limit must be a date, a timestamp in milliseconds or a date string")
    return as_utc(coerced.value)


def _compare(name: str, compare: Callable[[datetime, datetime], bool]):
    def method(self: "DateSchema", limit: Any) -> "DateSchema":
        bound = _bound(limit, name)

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            if isinstance(value, datetime) and compare(as_utc(value), bound):
                return None
            return violation(f"date.{name}", options, value=value, limit=bound.isoformat())

        return self._add_rule(name, _test, limit=bound)

    method.__name__ = name
    return method


def _from_iso(value: Any) -> Any:
    # Timestamps are not ISO strings
    if isinstance(value, (int, float)) or (isinstance(value, str) and is_numeric_string(value)):
        return value
    return coerce_date(value).value


class DateSchema(Schema):
    """Dates are held as ``datetime``; naive values are compared as UTC."""

    type_name = "date"

    def __init__(self) -> None:
        super().__init__()
        self._rules = (type_rule("date.base", lambda value: isinstance(value, datetime)),)

    def _converter(self) -> Optional[Callable[[Any], Any]]:
        if self._flags.get("format") == "iso":
            return _from_iso
        return lambda value: coerce_date(value).value

    min = _compare("min", operator.ge)
    max = _compare("max", operator.le)
    greater = _compare("greater", operator.gt)
    less = _compare("less", operator.lt)

    def iso(self) -> "DateSchema":
        """Accept only ISO 8601 strings, dates and datetimes; timestamps fail ``date.isoDate``."""
        obj = self._set_flag("format", "iso")
        obj._rules = (type_rule("date.isoDate", lambda value: isinstance(value, datetime)),) + self._rules[1:]
        return obj
