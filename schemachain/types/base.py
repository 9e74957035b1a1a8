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

"""Generic schema pipeline shared by every type.

A schema owns an allowed and a rejected :class:`ValueSet`, an ordered tuple of
rules and an ordered tuple of mutators. Builder methods never modify the
schema they are called on: they return a derived schema that shares the
untouched parts with its source.

Validation runs three phases over the value:

1. convert  - optional type-specific coercion (skipped with ``skip_conversions``)
2. check    - allowed set, rejected set, ``allow_only``, then the rules in order
3. mutate   - post-validation side effects such as ``rename``
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from .. import errors
from ..models.options import OptionsLike, ValidationOptions, resolve_options
from ..models.state import SiblingView
from ..models.values import ValueSet
from ..models.violation import RuleResult, Violation, flatten
from ..utils.common import UNDEFINED, assert_, is_absent, is_empty

logger = logging.getLogger(__name__)

RuleTest = Callable[[Any, ValidationOptions], RuleResult]
SchemaT = TypeVar("SchemaT", bound="Schema")


@dataclass(frozen=True)
class Rule:
    name: str
    test: RuleTest
    args: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Mutator:
    name: str
    apply: RuleTest
    args: Dict[str, Any] = field(default_factory=dict)


def violation(code: str, options: ValidationOptions, **context: Any) -> Violation:
    """Create a violation for the field currently described by *options*."""
    context.setdefault("key", options.key)
    return Violation(type=code, context=context, path=options.path)


def type_rule(code: str, predicate: Callable[[Any], bool]) -> Rule:
    """Base type check. Absent values pass; presence is the sets' business."""

    def _test(value: Any, options: ValidationOptions) -> RuleResult:
        if is_absent(value) or predicate(value):
            return None
        return violation(code, options, value=value)

    return Rule("base", _test)


def _first_missing_peer(siblings: SiblingView, peers: Sequence[str]) -> Optional[str]:
    for peer in peers:
        if is_empty(siblings.get(peer)):
            return peer
    return None


def _check_peers(peers: Sequence[str], method: str) -> None:
    assert_(len(peers) > 0, f"{method}() requires at least one peer")
    for peer in peers:
        assert_(isinstance(peer, str) and peer, f"{method}() peers must be non-empty strings, got {peer!r}")


class Schema:
    """Base of every type schema."""

    type_name = "any"

    def __init__(self) -> None:
        self._rules: Tuple[Rule, ...] = ()
        self._mutators: Tuple[Mutator, ...] = ()
        self._valids = ValueSet([UNDEFINED])
        self._invalids = ValueSet([None])
        self._modifiers: FrozenSet[str] = frozenset()
        self._allow_only = False
        self._flags: Dict[str, Any] = {}
        self._description: Optional[str] = None
        self._notes: Tuple[str, ...] = ()
        self._tags: Tuple[str, ...] = ()

    # ---- derivation ----------------------------------------------------

    def _clone(self: SchemaT) -> SchemaT:
        obj = copy.copy(self)
        obj._flags = dict(self._flags)
        return obj

    def _move(self: SchemaT, allow: Iterable[Any] = (), deny: Iterable[Any] = ()) -> SchemaT:
        obj = self._clone()
        obj._valids = self._valids.copy()
        obj._invalids = self._invalids.copy()
        for value in allow:
            obj._invalids.remove(value)
            obj._valids.add(value)
        for value in deny:
            obj._valids.remove(value)
            obj._invalids.add(value)
        return obj

    def _add_rule(self: SchemaT, name: str, test: RuleTest, /, **args: Any) -> SchemaT:
        obj = self._clone()
        obj._rules = self._rules + (Rule(name, test, args),)
        return obj

    def _add_mutator(self: SchemaT, name: str, apply: RuleTest, **args: Any) -> SchemaT:
        obj = self._clone()
        obj._mutators = self._mutators + (Mutator(name, apply, args),)
        return obj

    def _with_modifier(self: SchemaT, modifier: str) -> SchemaT:
        obj = self._clone()
        obj._modifiers = self._modifiers | {modifier}
        return obj

    def _set_flag(self: SchemaT, name: str, value: Any) -> SchemaT:
        obj = self._clone()
        obj._flags[name] = value
        return obj

    # ---- membership ----------------------------------------------------

    def allow(self: SchemaT, *values: Any) -> SchemaT:
        assert_(len(values) > 0, "allow() requires at least one value")
        return self._move(allow=values)

    def deny(self: SchemaT, *values: Any) -> SchemaT:
        assert_(len(values) > 0, "deny() requires at least one value")
        return self._move(deny=values)

    def valid(self: SchemaT, *values: Any) -> SchemaT:
        assert_(len(values) > 0, "valid() requires at least one value")
        obj = self._move(allow=values)
        obj._allow_only = True
        return obj

    def invalid(self: SchemaT, *values: Any) -> SchemaT:
        assert_(len(values) > 0, "invalid() requires at least one value")
        return self._move(deny=values)

    def required(self: SchemaT) -> SchemaT:
        obj = self._move(deny=(UNDEFINED,))
        obj._modifiers = self._modifiers | {"required"}
        return obj

    def optional(self: SchemaT) -> SchemaT:
        obj = self._move(allow=(UNDEFINED,))
        obj._modifiers = self._modifiers - {"required"}
        return obj

    def null_ok(self: SchemaT) -> SchemaT:
        return self._move(allow=(None,))._with_modifier("nullOk")

    def empty(self: SchemaT) -> SchemaT:
        return self._move(allow=(None,))._with_modifier("empty")

    # ---- peers -----------------------------------------------------------

    def with_(self: SchemaT, *peers: str) -> SchemaT:
        """Require every peer to be present and non-empty on the parent object."""
        _check_peers(peers, "with_")
        names = tuple(peers)

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            siblings = options.state.siblings
            if siblings is None:
                return violation("base.with.parent", options, value=value)
            missing = _first_missing_peer(siblings, names)
            if missing is not None:
                return violation("base.with.peer", options, value=value, peer=missing)
            return None

        return self._add_rule("with", _test, peers=list(names))

    def without(self: SchemaT, *peers: str) -> SchemaT:
        """Negation of with_(): fails only when every peer is present.

        A required field delegates to xor().
        """
        _check_peers(peers, "without")
        if "required" in self._modifiers:
            return self.xor(*peers)
        names = tuple(peers)

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            siblings = options.state.siblings
            if siblings is None or _first_missing_peer(siblings, names) is not None:
                return None
            return violation("base.without", options, value=value, peers=list(names))

        return self._add_rule("without", _test, peers=list(names))

    def xor(self: SchemaT, *peers: str) -> SchemaT:
        """Exactly one of (this field, all peers) must be present."""
        _check_peers(peers, "xor")
        names = tuple(peers)

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            siblings = options.state.siblings
            peers_present = siblings is not None and _first_missing_peer(siblings, names) is None
            if (not is_empty(value)) != peers_present:
                return None
            return violation("base.without", options, value=value, peers=list(names))

        # Blank values must reach the xor rule instead of being settled by the sets
        obj = self._add_rule("xor", _test, peers=list(names))
        obj._valids = obj._valids.copy()
        obj._invalids = obj._invalids.copy()
        for blank in (UNDEFINED, None, ""):
            obj._valids.remove(blank)
            obj._invalids.remove(blank)
        return obj

    def rename(
        self: SchemaT,
        to: str,
        delete_orig: bool = False,
        allow_mult: bool = False,
        allow_overwrite: bool = False,
    ) -> SchemaT:
        """Copy the field to *to* on the parent object after validation succeeds."""
        assert_(isinstance(to, str) and to, f"rename() target must be a non-empty string, got {to!r}")
        for name, flag in (("delete_orig", delete_orig), ("allow_mult", allow_mult), ("allow_overwrite", allow_overwrite)):
            assert_(isinstance(flag, bool), f"rename() option '{name}' must be a boolean")

        def _apply(value: Any, options: ValidationOptions) -> RuleResult:
            state = options.state
            siblings = state.siblings
            writer = state.writer
            if siblings is None or writer is None or not options.key:
                return violation("base.rename.parent", options, value=value, to=to)
            if not allow_mult and to in state.renamed:
                return violation("base.rename.allowMult", options, value=value, to=to)
            if not allow_overwrite and siblings.has(to):
                return violation("base.rename.allowOverwrite", options, value=value, to=to)

            source = siblings.get(options.key)
            writer.set(to, value if source is UNDEFINED else source)
            if delete_orig:
                writer.delete(options.key)
            state.record_rename(to)
            return None

        return self._add_mutator(
            "rename",
            _apply,
            to=to,
            delete_orig=delete_orig,
            allow_mult=allow_mult,
            allow_overwrite=allow_overwrite,
        )

    # ---- metadata --------------------------------------------------------

    def description(self: SchemaT, text: str) -> SchemaT:
        assert_(isinstance(text, str), "Validator description must be a string")
        obj = self._clone()
        obj._description = text
        return obj

    def notes(self: SchemaT, notes: Union[str, Sequence[str]]) -> SchemaT:
        assert_(
            isinstance(notes, str) or (isinstance(notes, (list, tuple)) and all(isinstance(n, str) for n in notes)),
            "Validator notes must be a string or a list of strings",
        )
        obj = self._clone()
        obj._notes = (notes,) if isinstance(notes, str) else tuple(notes)
        return obj

    def tags(self: SchemaT, tags: Sequence[str]) -> SchemaT:
        assert_(
            isinstance(tags, (list, tuple)) and all(isinstance(t, str) for t in tags),
            "Validator tags must be a list of strings",
        )
        obj = self._clone()
        obj._tags = tuple(tags)
        return obj

    @property
    def modifiers(self) -> FrozenSet[str]:
        return self._modifiers

    def describe(self) -> Dict[str, Any]:
        """Plain-data description of the schema."""
        description: Dict[str, Any] = {
            "type": self.type_name,
            "modifiers": sorted(self._modifiers),
            "allow_only": self._allow_only,
            "valids": self._valids.values(),
            "invalids": self._invalids.values(),
            "rules": [{"name": rule.name, "args": dict(rule.args)} for rule in self._rules],
        }
        if self._mutators:
            description["mutators"] = [{"name": m.name, "args": dict(m.args)} for m in self._mutators]
        if self._flags:
            description["flags"] = dict(self._flags)
        if self._description is not None:
            description["description"] = self._description
        if self._notes:
            description["notes"] = list(self._notes)
        if self._tags:
            description["tags"] = list(self._tags)
        return description

    # ---- validation ------------------------------------------------------

    def _converter(self) -> Optional[Callable[[Any], Any]]:
        """Type-specific value conversion, None when the type converts nothing."""
        return None

    def validate(self, value: Any, options: OptionsLike = None) -> Optional["errors.ValidationFailure"]:
        """Validate *value*; returns None or a formatted ValidationFailure."""
        settings = resolve_options(options)
        violations = self._run(value, settings)
        if violations:
            logger.debug(
                f"{self.type_name} validation of '{settings.path or 'value'}' "
                f"produced {len(violations)} violation(s)"
            )
        return errors.process(violations, value, settings)

    def _run(self, value: Any, options: ValidationOptions) -> Optional[List[Violation]]:
        """Raw pipeline: the violation list, or None."""
        if options.skip_functions and callable(value):
            return None

        converter = None if options.skip_conversions else self._converter()
        if converter is not None:
            value = converter(value)
            writer = options.state.writer
            if options.save_conversions and writer is not None and options.key:
                writer.set(options.key, value)

        violations = self._check(value, options)

        for mutator in self._mutators:
            if options.early_abort and violations:
                break
            violations.extend(flatten(mutator.apply(value, options)))

        return violations or None

    def _check(self, value: Any, options: ValidationOptions) -> List[Violation]:
        violations: List[Violation] = []

        if self._valids.has(value):
            return violations

        if self._invalids.has(value):
            shown = "empty" if isinstance(value, str) and value == "" else value
            violations.append(violation("base.invalid", options, value=shown))
            if options.early_abort:
                return violations

        if self._allow_only:
            violations.append(
                violation(
                    "base.validate.allowOnly",
                    options,
                    value=str(self._valids),
                    valids=self._valids.values(),
                )
            )
            if options.early_abort:
                return violations

        for rule in self._rules:
            violations.extend(flatten(rule.test(value, options)))
            if options.early_abort and violations:
                break

        return violations

    def __repr__(self) -> str:
        names = ", ".join(rule.name for rule in self._rules)
        return f"<{type(self).__name__} rules=[{names}]>"
