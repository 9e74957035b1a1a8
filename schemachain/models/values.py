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

"""Duplicate-free value container keyed by structural fingerprint."""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Dict, Hashable, Iterable, Iterator, List, Optional, Set, Tuple

from ..exceptions import SchemaDefinitionError
from ..utils.common import UNDEFINED
from ..utils.coercion import as_utc


Fingerprint = Hashable
Token = Tuple[Any, ...]


def _scalar_token(value: Any) -> Optional[Token]:
    if value is UNDEFINED:
        return ("undefined",)
    if value is None:
        return ("null",)
    if isinstance(value, bool):
        return ("boolean", value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return ("number", "NaN")
        return ("number", value)
    if isinstance(value, str):
        return ("string", value)
    if isinstance(value, datetime):
        return ("date", as_utc(value).timestamp())
    if isinstance(value, date):
        return ("day", value.toordinal())
    return None


def fingerprint(value: Any) -> Optional[Fingerprint]:
    """Build a hashable structural key for *value*.

    Supported shapes: UNDEFINED, None, bool, int/float, str, date/datetime,
    list/tuple and mappings with string keys. Structurally equal values share
    a key. Anything else, including self-containing containers, returns None.

    The key is a flat tuple of tokens written in pre-order, with containers
    prefixed by their length and mapping entries sorted by name. Nesting depth
    is bounded by memory, not by the interpreter's recursion limit.
    """
    tokens: List[Token] = []
    active: Set[int] = set()
    pending: List[Tuple[str, Any]] = [("value", value)]

    while pending:
        kind, item = pending.pop()
        if kind == "token":
            tokens.append(item)
            continue
        if kind == "leave":
            active.discard(item)
            continue

        token = _scalar_token(item)
        if token is not None:
            tokens.append(token)
            continue

        if isinstance(item, (list, tuple, Mapping)):
            if id(item) in active:
                return None
            active.add(id(item))
            pending.append(("leave", id(item)))
        else:
            return None

        if isinstance(item, (list, tuple)):
            tokens.append(("list", len(item)))
            pending.extend(("value", element) for element in reversed(item))
            continue

        names = list(item.keys())
        if not all(isinstance(name, str) for name in names):
            return None
        tokens.append(("map", len(names)))
        for name in sorted(names, reverse=True):
            pending.append(("value", item[name]))
            pending.append(("token", ("key", name)))

    return tuple(tokens)


def render(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    return str(value)


class ValueSet:
    """Insertion-ordered set of values compared by structure.

    Backed by a single ``fingerprint -> value`` dict, so positions never need
    to be tracked separately from membership.
    """

    def __init__(self, values: Iterable[Any] = ()):
        self._items: Dict[Fingerprint, Any] = {}
        for value in values:
            self.add(value)

    @staticmethod
    def key(value: Any) -> Optional[Fingerprint]:
        return fingerprint(value)

    def add(self, value: Any) -> "ValueSet":
        key = fingerprint(value)
        if key is None:
            raise SchemaDefinitionError(
                f"Unsupported value of type '{type(value).__name__}' cannot be stored in a value set"
            )
        # First insertion wins
        self._items.setdefault(key, value)
        return self

    def remove(self, value: Any) -> "ValueSet":
        key = fingerprint(value)
        if key is not None:
            self._items.pop(key, None)
        return self

    def has(self, value: Any) -> bool:
        key = fingerprint(value)
        return key is not None and key in self._items

    def values(self) -> List[Any]:
        return list(self._items.values())

    def copy(self) -> "ValueSet":
        clone = ValueSet()
        clone._items = dict(self._items)
        return clone

    def __contains__(self, value: Any) -> bool:
        return self.has(value)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __str__(self) -> str:
        return ", ".join(render(value) for value in self._items.values())

    def __repr__(self) -> str:
        return f"ValueSet([{', '.join(repr(v) for v in self._items.values())}])"
