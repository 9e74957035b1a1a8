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

import math
from typing import Any, Callable, Optional

from ..models.options import ValidationOptions
from ..models.violation import RuleResult
from ..utils.coercion import coerce_number, is_number, is_numeric_string
from ..utils.common import assert_, is_int
from .base import Schema, type_rule, violation


def _numeric(value: Any) -> Optional[float]:
    # Rules also see numeric strings when conversions are skipped
    coerced = coerce_number(value)
    if coerced.ok and is_number(coerced.value):
        return coerced.value
    return None


class NumberSchema(Schema):
    type_name = "number"

    def __init__(self) -> None:
        super().__init__()
        self._rules = (
            type_rule("number.base", lambda value: is_number(value) or is_numeric_string(value)),
        )

    def _converter(self) -> Optional[Callable[[Any], Any]]:
        return lambda value: coerce_number(value).value

    def min(self, limit: int) -> "NumberSchema":
        assert_(is_int(limit), "In number.min(n), n must be an integer")

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            number = _numeric(value)
            # NaN passes here; max() below does not let it through
            if number is not None and (math.isnan(number) or number >= limit):
                return None
            return violation("number.min", options, value=value, limit=limit)

        return self._add_rule("min", _test, limit=limit)

    def max(self, limit: int) -> "NumberSchema":
        assert_(is_int(limit), "In number.max(n), n must be an integer")

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            number = _numeric(value)
            if number is not None and number <= limit:
                return None
            return violation("number.max", options, value=value, limit=limit)

        return self._add_rule("max", _test, limit=limit)

    def greater(self, limit: float) -> "NumberSchema":
        assert_(is_number(limit) and math.isfinite(limit), "In number.greater(n), n must be a finite number")

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            number = _numeric(value)
            if number is not None and number > limit:
                return None
            return violation("number.greater", options, value=value, limit=limit)

        return self._add_rule("greater", _test, limit=limit)

    def less(self, limit: float) -> "NumberSchema":
        assert_(is_number(limit) and math.isfinite(limit), "In number.less(n), n must be a finite number")

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            number = _numeric(value)
            if number is not None and number < limit:
                return None
            return violation("number.less", options, value=value, limit=limit)

        return self._add_rule("less", _test, limit=limit)

    def integer(self) -> "NumberSchema":
        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            number = _numeric(value)
            if number is not None and (is_int(number) or (isinstance(number, float) and number.is_integer())):
                return None
            return violation("number.integer", options, value=value)

        return self._add_rule("integer", _test)
