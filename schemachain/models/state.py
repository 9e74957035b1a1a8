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

"""Per-request validation state.

Peer rules (with/without/xor) only ever read the parent object, so they get a
read-only view of it. ``rename`` and ``save_conversions`` are the only writers
and go through :class:`ParentWriter`.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, MutableMapping, Optional

from ..utils.common import UNDEFINED


class SiblingView:
    """Read-only lookup of the other fields on the parent object."""

    def __init__(self, parent: MutableMapping[str, Any]):
        self._fields: Mapping[str, Any] = MappingProxyType(parent)

    def has(self, name: str) -> bool:
        return name in self._fields

    def get(self, name: str) -> Any:
        return self._fields.get(name, UNDEFINED)


class ParentWriter:
    """Write channel onto the parent object."""

    def __init__(self, parent: MutableMapping[str, Any]):
        self._parent = parent

    def set(self, name: str, value: Any) -> None:
        self._parent[name] = value

    def delete(self, name: str) -> None:
        self._parent.pop(name, None)


class ValidationState:
    """Parent context plus rename bookkeeping for one top-level validate() call."""

    def __init__(self, parent: Optional[MutableMapping[str, Any]] = None):
        self._parent = parent
        self.renamed: Dict[str, int] = {}

    @property
    def has_parent(self) -> bool:
        return self._parent is not None

    @property
    def siblings(self) -> Optional[SiblingView]:
        if self._parent is None:
            return None
        return SiblingView(self._parent)

    @property
    def writer(self) -> Optional[ParentWriter]:
        if self._parent is None:
            return None
        return ParentWriter(self._parent)

    def record_rename(self, target: str) -> None:
        self.renamed[target] = self.renamed.get(target, 0) + 1

    def __repr__(self) -> str:
        return f"ValidationState(has_parent={self.has_parent}, renamed={self.renamed})"
