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

"""String schema and its format rules."""

import codecs
import ipaddress
import re
from typing import Any, Callable, Iterable, List, Optional, Pattern, Sequence, Tuple, Union

from email_validator import EmailNotValidError, validate_email

from ..exceptions import SchemaDefinitionError
from ..models.options import ValidationOptions
from ..models.violation import RuleResult
from ..utils.common import assert_, is_int
from .base import Schema, type_rule, violation
from .uri import (
    CIDR_PRESENCES,
    DEFAULT_URI_REGEX,
    GRAMMAR,
    IP_VERSIONS,
    SchemeSpec,
    create_ip_regex,
    create_uri_regex,
    scheme_pattern,
)

_ALPHANUM_RE = re.compile(r"[a-zA-Z0-9]+")
_TOKEN_RE = re.compile(r"\w+", re.ASCII)
_HEX_RE = re.compile(r"[a-fA-F0-9]+")
_GUID_RE = re.compile(
    r"[\[{]?[0-9A-F]{8}-?[0-9A-F]{4}-?[0-9A-F]{4}-?[0-9A-F]{4}-?[0-9A-F]{12}[\]}]?",
    re.IGNORECASE,
)
_HOSTNAME_RE = re.compile(
    r"(?:(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9\-]*[a-zA-Z0-9])\.)*"
    r"(?:[A-Za-z0-9]|[A-Za-z0-9][A-Za-z0-9\-]*[A-Za-z0-9])"
)
_IPV6_RE = re.compile(GRAMMAR["ipv6address"])
_ISO_DATE_RE = re.compile(
    r"(?:[-+]\d{2})?(?:\d{4}(?!\d{2}\b))"
    r"(?:(-?)(?:(?:0[1-9]|1[0-2])(?:\1(?:[12]\d|0[1-9]|3[01]))?"
    r"|W(?:[0-4]\d|5[0-2])(?:-?[1-7])?"
    r"|(?:00[1-9]|0[1-9]\d|[12]\d{2}|3(?:[0-5]\d|6[1-6])))"
    r"(?![T]$|[T][\d]+Z$)"
    r"(?:[T\s](?:(?:(?:[01]\d|2[0-3])(?:(:?)[0-5]\d)?|24:?00)(?:[.,]\d+(?!:))?)"
    r"(?:\2[0-5]\d(?:[.,]\d+)?)?"
    r"(?:[Z]|(?:[+-])(?:[01]\d|2[0-3])(?::?[0-5]\d)?)?)?)?",
    re.ASCII,
)

_EMAIL_OPTIONS = frozenset({"tld_whitelist", "min_domain_atoms"})
_HOSTNAME_MAX_LENGTH = 255


def _measure(value: str, encoding: Optional[str]) -> Optional[int]:
    if not encoding:
        return len(value)
    try:
        return len(value.encode(encoding))
    except UnicodeEncodeError:
        return None


def _check_encoding(encoding: Optional[str], method: str) -> None:
    if encoding is None:
        return
    try:
        codecs.lookup(encoding)
    except (LookupError, TypeError) as err:
        raise SchemaDefinitionError(f"In string.{method}(n, encoding), invalid encoding: {encoding!r}") from err


def _compare(name: str, compare: Callable[[int, int], bool]):
    def method(self: "StringSchema", limit: int, encoding: Optional[str] = None) -> "StringSchema":
        assert_(is_int(limit) and limit >= 0, f"In string.{name}(n), n must be a non-negative integer")
        _check_encoding(encoding, name)

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            measured = _measure(value, encoding) if isinstance(value, str) else None
            if measured is not None and compare(measured, limit):
                return None
            return violation(f"string.{name}", options, value=value, limit=limit, encoding=encoding)

        return self._add_rule(name, _test, limit=limit, encoding=encoding)

    method.__name__ = name
    return method


def _truncate(value: str, limit: int, encoding: Optional[str]) -> str:
    if not encoding:
        return value[:limit]
    measured = _measure(value, encoding)
    # Unencodable values are left for the max rule to reject
    while measured is not None and measured > limit:
        value = value[:-1]
        measured = _measure(value, encoding)
    return value


def _pattern_rule(code: str, pattern: Pattern[str]):
    def _test(value: Any, options: ValidationOptions) -> RuleResult:
        if isinstance(value, str) and pattern.fullmatch(value):
            return None
        return violation(code, options, value=value)

    return _test


def _is_hostname(value: str) -> bool:
    if len(value) <= _HOSTNAME_MAX_LENGTH and _HOSTNAME_RE.fullmatch(value):
        return True
    if _IPV6_RE.fullmatch(value):
        try:
            ipaddress.IPv6Address(value)
        except ValueError:
            return False
        return True
    return False


class StringSchema(Schema):
    """Strings; the empty string is rejected unless ``empty_ok()`` is used."""

    type_name = "string"

    def __init__(self) -> None:
        super().__init__()
        self._invalids.add("")
        self._rules = (type_rule("string.base", lambda value: isinstance(value, str)),)

    def _converter(self) -> Optional[Callable[[Any], Any]]:
        case = self._flags.get("case")
        trim = self._flags.get("trim", False)
        replacements = self._flags.get("replacements", ())
        limit = self._truncate_limit()
        if case is None and not trim and not replacements and limit is None:
            return None

        def _normalize(value: Any) -> Any:
            if not isinstance(value, str):
                return value
            if trim:
                value = value.strip()
            if case == "lower":
                value = value.lower()
            elif case == "upper":
                value = value.upper()
            for pattern, replacement in replacements:
                value = pattern.sub(replacement, value)
            if limit is not None:
                value = _truncate(value, *limit)
            return value

        return _normalize

    def _truncate_limit(self) -> Optional[Tuple[int, Optional[str]]]:
        if not self._flags.get("truncate", False):
            return None
        for rule in reversed(self._rules):
            if rule.name == "max":
                return rule.args["limit"], rule.args["encoding"]
        return None

    def empty_ok(self) -> "StringSchema":
        return self.allow("")._with_modifier("emptyOk")

    min = _compare("min", lambda length, limit: length >= limit)
    max = _compare("max", lambda length, limit: length <= limit)
    length = _compare("length", lambda length, limit: length == limit)

    def regex(self, pattern: Union[str, Pattern[str]], name: Optional[str] = None) -> "StringSchema":
        """Search *pattern* anywhere in the value; anchor it to match the whole string."""
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as err:
                raise SchemaDefinitionError(f"string.regex() got an invalid pattern: {err}") from err
        assert_(isinstance(pattern, re.Pattern), "string.regex() pattern must be a string or a compiled pattern")
        assert_(name is None or isinstance(name, str), "string.regex() name must be a string")
        compiled = pattern

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            if isinstance(value, str) and compiled.search(value):
                return None
            if name is None:
                return violation("string.regex", options, value=value, pattern=compiled.pattern)
            return violation("string.regex", options, value=value, pattern=compiled.pattern, name=name)

        return self._add_rule("regex", _test, pattern=compiled.pattern, name=name)

    def alphanum(self) -> "StringSchema":
        return self._add_rule("alphanum", _pattern_rule("string.alphanum", _ALPHANUM_RE))

    def token(self) -> "StringSchema":
        return self._add_rule("token", _pattern_rule("string.token", _TOKEN_RE))

    def email(self, **options: Any) -> "StringSchema":
        """Syntactic email check.

        Args:
            tld_whitelist: Iterable of accepted top-level domains.
            min_domain_atoms: Minimum number of dot-separated domain parts.
        """
        unknown = set(options) - _EMAIL_OPTIONS
        assert_(not unknown, f"string.email() got unknown options: {', '.join(sorted(unknown))}")

        whitelist = options.get("tld_whitelist")
        if whitelist is not None:
            assert_(
                not isinstance(whitelist, str) and isinstance(whitelist, Iterable),
                "tld_whitelist must be an iterable of strings",
            )
            whitelist = list(whitelist)
            assert_(all(isinstance(tld, str) for tld in whitelist), "tld_whitelist must be an iterable of strings")
            whitelist = frozenset(tld.lower() for tld in whitelist)
        min_atoms = options.get("min_domain_atoms")
        if min_atoms is not None:
            assert_(is_int(min_atoms) and min_atoms > 0, "min_domain_atoms must be a positive integer")

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            if not isinstance(value, str):
                return violation("string.email", options, value=value)
            try:
                domain = validate_email(value, check_deliverability=False).domain
            except EmailNotValidError:
                return violation("string.email", options, value=value)
            atoms = domain.lower().split(".")
            if whitelist is not None and atoms[-1] not in whitelist:
                return violation("string.email", options, value=value)
            if min_atoms is not None and len(atoms) < min_atoms:
                return violation("string.email", options, value=value)
            return None

        return self._add_rule(
            "email",
            _test,
            tld_whitelist=sorted(whitelist) if whitelist is not None else None,
            min_domain_atoms=min_atoms,
        )

    def uri(
        self,
        scheme: Optional[Union[SchemeSpec, Sequence[SchemeSpec]]] = None,
        allow_relative: bool = False,
    ) -> "StringSchema":
        assert_(isinstance(allow_relative, bool), "string.uri() allow_relative must be a boolean")
        custom = None
        if scheme is not None:
            try:
                custom = scheme_pattern(scheme)
            except (TypeError, ValueError) as err:
                raise SchemaDefinitionError(str(err)) from err

        if custom is None and not allow_relative:
            compiled = DEFAULT_URI_REGEX
        else:
            compiled = create_uri_regex(custom, allow_relative)

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            if isinstance(value, str) and compiled.fullmatch(value):
                return None
            if custom is not None:
                return violation("string.uriCustomScheme", options, value=value, scheme=custom)
            return violation("string.uri", options, value=value)

        return self._add_rule("uri", _test, scheme=custom, allow_relative=allow_relative)

    def iso_date(self) -> "StringSchema":
        return self._add_rule("isoDate", _pattern_rule("string.isoDate", _ISO_DATE_RE))

    def guid(self) -> "StringSchema":
        return self._add_rule("guid", _pattern_rule("string.guid", _GUID_RE))

    def hex(self) -> "StringSchema":
        return self._add_rule("hex", _pattern_rule("string.hex", _HEX_RE))

    def hostname(self) -> "StringSchema":
        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            if isinstance(value, str) and _is_hostname(value):
                return None
            return violation("string.hostname", options, value=value)

        return self._add_rule("hostname", _test)

    def ip(self, version: Optional[Union[str, Sequence[str]]] = None, cidr: str = "optional") -> "StringSchema":
        """IP address check.

        Args:
            version: One of ``ipv4``, ``ipv6`` and ``ipvfuture``, or a list of them.
                Every version is accepted when omitted.
            cidr: Whether a CIDR prefix length is ``required``, ``optional`` or
                ``forbidden``.
        """
        assert_(isinstance(cidr, str), "string.ip() cidr must be a string")
        cidr = cidr.lower()
        assert_(cidr in CIDR_PRESENCES, f"string.ip() cidr must be one of {', '.join(CIDR_PRESENCES)}")

        versions: Optional[Tuple[str, ...]] = None
        if version is not None:
            assert_(
                isinstance(version, (str, list, tuple)),
                "string.ip() version must be a string or a list of strings",
            )
            requested = [version] if isinstance(version, str) else list(version)
            assert_(len(requested) >= 1, "string.ip() version must have at least 1 version specified")
            checked: List[str] = []
            for position, item in enumerate(requested):
                assert_(isinstance(item, str), f"string.ip() version at position {position} must be a string")
                item = item.lower()
                assert_(
                    item in IP_VERSIONS,
                    f"string.ip() version at position {position} must be one of {', '.join(IP_VERSIONS)}",
                )
                if item not in checked:
                    checked.append(item)
            versions = tuple(checked)

        compiled = create_ip_regex(versions or IP_VERSIONS, cidr)

        def _test(value: Any, options: ValidationOptions) -> RuleResult:
            if isinstance(value, str) and compiled.fullmatch(value):
                return None
            if versions is not None:
                return violation("string.ipVersion", options, value=value, cidr=cidr, version=list(versions))
            return violation("string.ip", options, value=value, cidr=cidr)

        return self._add_rule("ip", _test, version=list(versions) if versions else None, cidr=cidr)

    def lowercase(self) -> "StringSchema":
        return self._set_flag("case", "lower")

    def uppercase(self) -> "StringSchema":
        return self._set_flag("case", "upper")

    def trim(self) -> "StringSchema":
        return self._set_flag("trim", True)

    def replace(self, pattern: Union[str, Pattern[str]], replacement: str) -> "StringSchema":
        """Replace every match of *pattern* during conversion.

        A string pattern and its replacement are used literally. With a
        compiled pattern, *replacement* follows ``re.sub`` syntax and can refer
        to groups.
        """
        assert_(isinstance(replacement, str), "string.replace() replacement must be a string")
        if isinstance(pattern, str):
            assert_(pattern != "", "string.replace() pattern must not be empty")
            pattern = re.compile(re.escape(pattern))
            replacement = replacement.replace("\\", "\\\\")
        assert_(
            isinstance(pattern, re.Pattern) and isinstance(pattern.pattern, str),
            "string.replace() pattern must be a string or a compiled pattern",
        )
        try:
            # Same groups plus an empty branch, so the template is parsed now.
            # The newline closes a trailing comment under re.VERBOSE.
            re.compile(f"{pattern.pattern}\n|", pattern.flags).sub(replacement, "")
        except re.error as err:
            raise SchemaDefinitionError(f"string.replace() got an invalid replacement: {err}") from err
        return self._set_flag("replacements", self._flags.get("replacements", ()) + ((pattern, replacement),))

    def truncate(self, enabled: bool = True) -> "StringSchema":
        """Cut values down to the ``max()`` limit during conversion."""
        assert_(isinstance(enabled, bool), "string.truncate() enabled must be a boolean")
        return self._set_flag("truncate", enabled)
