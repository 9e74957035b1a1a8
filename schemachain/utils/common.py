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

"""Small helpers shared by the schema types."""

from typing import Any, Mapping, Optional

from ..exceptions import SchemaDefinitionError


class _Undefined:
    """Marker for a value that was never supplied (a missing field)."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo) -> "_Undefined":
        return self

    def __reduce__(self):
        return (_Undefined, ())


UNDEFINED = _Undefined()


def is_absent(value: Any) -> bool:
    """True for the two "no value" markers: UNDEFINED and None."""
    return value is UNDEFINED or value is None


def is_empty(value: Any) -> bool:
    # Peer checks also treat the empty string as missing
    return is_absent(value) or (isinstance(value, str) and value == "")


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def assert_(condition: Any, message: str) -> None:
    """Raise SchemaDefinitionError with *message* when *condition* is falsy."""
    if not condition:
        raise SchemaDefinitionError(message)


def reach(data: Mapping[str, Any], dotted: str) -> Any:
    """Walk a nested mapping along a dotted path; None when any step is missing."""
    current: Any = data
    for part in dotted.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return None
        current = current[part]
    return current
