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

"""Validation options and their JSON Schema check."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Union

import jsonschema

from ..config import engine_config
from ..exceptions import OptionsError
from .json_schema_loader import load_schema
from .state import ValidationState


@dataclass
class ValidationOptions:
    """Settings for one validate() call.

    A fresh instance is built per top-level call and handed by reference to
    nested validations (array items get a derived copy with their own key).
    """

    key: Optional[str] = None
    key_path: Optional[str] = None
    early_abort: bool = True
    state: ValidationState = field(default_factory=ValidationState)
    skip_functions: bool = False
    skip_conversions: bool = False
    save_conversions: bool = False
    strip_extra_keys: bool = False
    allow_extra_keys: bool = False
    language_path: str = field(default_factory=lambda: engine_config.language_path)

    @property
    def path(self) -> str:
        """Dotted path used in violations."""
        if self.key_path:
            return self.key_path
        return self.key or ""

    def for_item(self, index: int) -> "ValidationOptions":
        """Options for validating element *index* of the current value."""
        base = self.path
        return dataclasses.replace(
            self,
            key=str(index),
            key_path=f"{base}.{index}" if base else str(index),
            state=ValidationState(),
        )

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "ValidationOptions":
        """Merge user options over the defaults after checking them."""
        if not options:
            return cls()

        issues = check_options(options)
        if issues:
            raise OptionsError("Invalid validation options:\n" + "\n".join(f"  - {issue}" for issue in issues))

        settings = dict(options)
        if settings.get("state") is None:
            settings.pop("state", None)
        return cls(**settings)


OptionsLike = Union[None, Mapping[str, Any], ValidationOptions]


def check_options(options: Mapping[str, Any]) -> List[str]:
    """Return human-readable problems with *options* (empty when valid)."""
    if not isinstance(options, Mapping):
        return [f"options must be a mapping, got {type(options).__name__}"]

    validator = jsonschema.Draft7Validator(load_schema("options"))
    issues: List[str] = []
    for error in sorted(validator.iter_errors(dict(options)), key=lambda e: list(e.absolute_path)):
        location = "/" + "/".join(str(p) for p in error.absolute_path) if error.absolute_path else "/"
        issues.append(f"{location}: {error.message}")

    state = options.get("state")
    if state is not None and not isinstance(state, ValidationState):
        issues.append(f"/state: expected ValidationState, got {type(state).__name__}")
    return issues


def resolve_options(options: OptionsLike) -> ValidationOptions:
    if isinstance(options, ValidationOptions):
        return options
    if options is not None and not isinstance(options, Mapping):
        raise OptionsError(f"options must be a mapping or ValidationOptions, got {type(options).__name__}")
    return ValidationOptions.from_mapping(options)
