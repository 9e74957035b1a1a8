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

from typing import Any, Callable, Optional, Tuple

from ..models.options import ValidationOptions
from ..models.violation import RuleResult
from ..utils.coercion import coerce_array
from ..utils.common import assert_, is_int
from .base import Schema, type_rule, violation


def _compare(name: str, compare: Callable[[int, int], bool]):
    def method(self: "ArraySchema", limit: int) -> "ArraySchema":
        assert_(is_int(limit) and limit >= 0, f"In array.{name}(n), n must be a non-negative integer")

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            if isinstance(value, list) and compare(len(value), limit):
                return None
            return violation(f"array.{name}", options, value=value, limit=limit)

        return self._add_rule(name, _test, limit=limit)

    method.__name__ = name
    method.__doc__ = f"Check the array length against ``n`` ({name})."
    return method


def _matches(schema: Schema, item: Any, options: ValidationOptions) -> bool:
    return schema._run(item, options) is None


class ArraySchema(Schema):
    type_name = "array"

    def __init__(self) -> None:
        super().__init__()
        self._rules = (type_rule("array.base", lambda value: isinstance(value, list)),)

    def _converter(self) -> Optional[Callable[[Any], Any]]:
        return lambda value: coerce_array(value).value

    def empty_ok(self) -> "ArraySchema":
        return self.allow("")._with_modifier("emptyOk")

    def includes(self, *schemas: Schema) -> "ArraySchema":
        """Every element must satisfy at least one of *schemas*."""
        allowed = _check_schemas(schemas, "includes")

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            if not isinstance(value, list):
                return None
            for pos, item in enumerate(value):
                item_options = options.for_item(pos)
                if not any(_matches(schema, item, item_options) for schema in allowed):
                    return violation("array.includes", options, value=item, pos=pos)
            return None

        return self._add_rule("includes", _test, types=[schema.type_name for schema in allowed])

    def excludes(self, *schemas: Schema) -> "ArraySchema":
        """No element may satisfy any of *schemas*."""
        forbidden = _check_schemas(schemas, "excludes")

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            if not isinstance(value, list):
                return None
            for pos, item in enumerate(value):
                item_options = options.for_item(pos)
                if any(_matches(schema, item, item_options) for schema in forbidden):
                    return violation("array.excludes", options, value=item, pos=pos)
            return None

        return self._add_rule("excludes", _test, types=[schema.type_name for schema in forbidden])

    min = _compare("min", lambda length, limit: length >= limit)
    max = _compare("max", lambda length, limit: length <= limit)
    length = _compare("length", lambda length, limit: length == limit)


def _check_schemas(schemas: Tuple[Schema, ...], method: str) -> Tuple[Schema, ...]:
    assert_(len(schemas) > 0, f"array.{method}() requires at least one schema")
    for schema in schemas:
        assert_(isinstance(schema, Schema), f"array.{method}() arguments must be schemas, got {schema!r}")
    return tuple(schemas)
