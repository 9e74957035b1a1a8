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

"""Violation formatting.

Turns the raw violation list produced by a schema into a
:class:`ValidationFailure`, rendering each violation through a YAML message
bundle whose entries are Jinja2 templates.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set

import yaml
from jinja2 import Environment, Template

from .config import engine_config
from .exceptions import LanguageBundleError, SchemaChainError
from .models.options import ValidationOptions
from .models.violation import Violation
from .utils.common import UNDEFINED, reach

logger = logging.getLogger(__name__)


_BUNDLE_CACHE: Dict[Path, Dict[str, Any]] = {}
_TEMPLATE_CACHE: Dict[str, Template] = {}

_environment = Environment(autoescape=False, keep_trailing_newline=False)


class ValidationFailure(SchemaChainError):
    """Formatted result of a failed validation.

    Returned by ``Schema.validate``; callers decide whether to raise it.
    """

    def __init__(self, message: str, details: List[Dict[str, Any]], value: Any, violations: Sequence[Violation]):
        super().__init__(message)
        self.message = message
        self.details = details
        self.value = value
        self.violations = list(violations)

    @property
    def types(self) -> List[str]:
        return [violation.type for violation in self.violations]

    def annotate(self) -> str:
        """Readable report: the offending value followed by numbered messages."""
        try:
            rendered = json.dumps(self.value, indent=2, default=str)
        except (TypeError, ValueError):
            rendered = repr(self.value)
        except RecursionError:
            rendered = f"<{type(self.value).__name__} nested too deeply to render>"
        lines = [rendered]
        for index, detail in enumerate(self.details, start=1):
            where = f" (path={detail['path']})" if detail["path"] else ""
            lines.append(f"[{index}] {detail['message']}{where}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"ValidationFailure({self.message!r})"


def load_language(language_path: str) -> Dict[str, Any]:
    """Load a YAML message bundle.

    Raises:
        LanguageBundleError: If the file is missing, unreadable or not a mapping.
    """
    path = Path(language_path)

    if engine_config.cache_enabled and path in _BUNDLE_CACHE:
        return _BUNDLE_CACHE[path]

    if not path.is_file():
        raise LanguageBundleError(f"Message bundle not found: {path}")

    logger.debug(f"Loading message bundle: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            bundle = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise LanguageBundleError(f"Error parsing message bundle {path}: {e}") from e

    if bundle is None:
        bundle = {}
    if not isinstance(bundle, dict):
        raise LanguageBundleError(f"Message bundle must be a mapping: {path}")

    if engine_config.cache_enabled:
        _BUNDLE_CACHE[path] = bundle
    return bundle


def clear_cache() -> None:
    """Clear bundle and template caches. Useful for testing."""
    _BUNDLE_CACHE.clear()
    _TEMPLATE_CACHE.clear()


class _Leave:
    __slots__ = ("ident",)

    def __init__(self, ident: int):
        self.ident = ident


def _stringify_scalar(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if hasattr(value, "pattern") and hasattr(value, "flags"):
        return value.pattern
    return str(value)


def stringify(value: Any) -> str:
    """Render a context value; sequences flatten into a comma-joined list."""
    parts: List[str] = []
    pending: List[Any] = [value]
    active: Set[int] = set()
    while pending:
        item = pending.pop()
        if isinstance(item, _Leave):
            active.discard(item.ident)
            continue
        if not isinstance(item, (list, tuple)):
            parts.append(_stringify_scalar(item))
            continue
        if id(item) in active:
            parts.append("[Circular]")
            continue
        active.add(id(item))
        pending.append(_Leave(id(item)))
        pending.extend(reversed(item))
    return ", ".join(parts)


def _template(source: str) -> Template:
    template = _TEMPLATE_CACHE.get(source)
    if template is None:
        template = _environment.from_string(source)
        _TEMPLATE_CACHE[source] = template
    return template


def render_message(violation: Violation, bundle: Dict[str, Any]) -> str:
    """Render one violation; unknown codes fall back to the bare type code."""
    source = reach(bundle, violation.type)
    if not isinstance(source, str):
        return violation.type

    variables = {name: stringify(item) for name, item in violation.context.items()}
    if not violation.context.get("key"):
        variables["key"] = "value"
    return _template(source).render(**variables)


def process(violations: Optional[Sequence[Violation]], value: Any, options: ValidationOptions) -> Optional[ValidationFailure]:
    """Build a ValidationFailure from *violations*, or None when there are none."""
    if not violations:
        return None

    bundle = load_language(options.language_path)

    details: List[Dict[str, Any]] = []
    for violation in violations:
        details.append(
            {
                "message": render_message(violation, bundle),
                "type": violation.type,
                "path": violation.path,
                "context": dict(violation.context),
            }
        )

    message = ". ".join(detail["message"] for detail in details)
    return ValidationFailure(message, details, value, violations)
