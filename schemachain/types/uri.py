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

"""RFC 3986 URI grammar assembled into a single regular expression.

Fragments are built bottom-up and named after the ABNF rules they implement
(https://tools.ietf.org/html/rfc3986#appendix-A). Character-class fragments
(``*_CHARS``) are meant to be placed inside ``[...]``; every other fragment is
a self-contained group.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Dict, Optional, Pattern, Sequence, Union


SchemeSpec = Union[str, Pattern[str]]

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+\-.]*$")


def generate() -> Dict[str, str]:
    """Return the named grammar fragments."""
    g: Dict[str, str] = {}

    # ---- characters ---------------------------------------------------------
    g["DIGIT_CHARS"] = "0-9"
    g["HEXDIG_CHARS"] = g["DIGIT_CHARS"] + "A-Fa-f"
    g["ALPHA_CHARS"] = "a-zA-Z"
    g["UNRESERVED_CHARS"] = g["ALPHA_CHARS"] + g["DIGIT_CHARS"] + r"\-._~"
    g["SUB_DELIMS_CHARS"] = r"!$&'()*+,;="

    g["hexdig"] = f"[{g['HEXDIG_CHARS']}]"
    g["pct_encoded"] = f"%{g['hexdig']}{{2}}"
    g["pchar"] = f"(?:[{g['UNRESERVED_CHARS']}{g['SUB_DELIMS_CHARS']}:@]|{g['pct_encoded']})"

    # ---- paths --------------------------------------------------------------
    g["segment"] = f"{g['pchar']}*"
    g["segment_nz"] = f"{g['pchar']}+"
    g["segment_nz_nc"] = f"(?:[{g['UNRESERVED_CHARS']}{g['SUB_DELIMS_CHARS']}@]|{g['pct_encoded']})+"
    g["path_abempty"] = f"(?:/{g['segment']})*"
    g["path_absolute"] = f"/(?:{g['segment_nz']}{g['path_abempty']})?"
    g["path_rootless"] = f"{g['segment_nz']}{g['path_abempty']}"
    g["path_noscheme"] = f"{g['segment_nz_nc']}{g['path_abempty']}"
    g["path_empty"] = ""

    # ---- IP literals --------------------------------------------------------
    g["dec_octet"] = "(?:25[0-5]|2[0-4][0-9]|1[0-9]{2}|[1-9][0-9]|[0-9])"
    g["ipv4address"] = f"(?:{g['dec_octet']}\\.){{3}}{g['dec_octet']}"

    h16 = f"{g['hexdig']}{{1,4}}"
    ls32 = f"(?:{h16}:{h16}|{g['ipv4address']})"
    g["h16"] = h16
    g["ls32"] = ls32

    ipv6_forms: Sequence[str] = (
        f"(?:{h16}:){{6}}{ls32}",
        f"::(?:{h16}:){{5}}{ls32}",
        f"(?:{h16})?::(?:{h16}:){{4}}{ls32}",
        f"(?:(?:{h16}:){{0,1}}{h16})?::(?:{h16}:){{3}}{ls32}",
        f"(?:(?:{h16}:){{0,2}}{h16})?::(?:{h16}:){{2}}{ls32}",
        f"(?:(?:{h16}:){{0,3}}{h16})?::{h16}:{ls32}",
        f"(?:(?:{h16}:){{0,4}}{h16})?::{ls32}",
        f"(?:(?:{h16}:){{0,5}}{h16})?::{h16}",
        f"(?:(?:{h16}:){{0,6}}{h16})?::",
    )
    g["ipv6address"] = "(?:" + "|".join(ipv6_forms) + ")"
    g["ipvfuture"] = f"v{g['hexdig']}+\\.[{g['UNRESERVED_CHARS']}{g['SUB_DELIMS_CHARS']}:]+"
    g["ip_literal"] = f"\\[(?:{g['ipv6address']}|{g['ipvfuture']})\\]"
    g["ipv4_cidr"] = "(?:3[0-2]|[12]?[0-9])"
    g["ipv6_cidr"] = "(?:0{0,2}[0-9]|0?[1-9][0-9]|1[01][0-9]|12[0-8])"

    # ---- authority ----------------------------------------------------------
    g["reg_name"] = f"(?:[{g['UNRESERVED_CHARS']}{g['SUB_DELIMS_CHARS']}]|{g['pct_encoded']}){{0,255}}"
    g["host"] = f"(?:{g['ip_literal']}|{g['ipv4address']}|{g['reg_name']})"
    g["port"] = f"[{g['DIGIT_CHARS']}]*"
    g["userinfo"] = f"(?:[{g['UNRESERVED_CHARS']}{g['SUB_DELIMS_CHARS']}:]|{g['pct_encoded']})*"
    g["authority"] = f"(?:{g['userinfo']}@)?{g['host']}(?::{g['port']})?"

    # ---- composites ---------------------------------------------------------
    g["scheme"] = "[a-zA-Z][a-zA-Z0-9+\\-.]*"
    g["hier_part"] = (
        f"(?://{g['authority']}{g['path_abempty']}"
        f"|{g['path_absolute']}|{g['path_rootless']}|{g['path_empty']})"
    )
    g["relative_part"] = (
        f"(?://{g['authority']}{g['path_abempty']}"
        f"|{g['path_absolute']}|{g['path_noscheme']}|{g['path_empty']})"
    )
    g["query"] = f"(?:{g['pchar']}|[/?])*"
    g["fragment"] = f"(?:{g['pchar']}|[/?])*"
    return g


GRAMMAR = generate()


def scheme_pattern(schemes: Union[SchemeSpec, Sequence[SchemeSpec]]) -> str:
    """Alternation of the given schemes: strings are escaped, patterns used as-is.

    Raises:
        ValueError: If no scheme is given or a string is not a valid scheme name.
        TypeError: If an entry is neither a string nor a compiled pattern.
    """
    if isinstance(schemes, (str, re.Pattern)):
        schemes = [schemes]
    if not schemes:
        raise ValueError("scheme must have at least 1 scheme specified")

    alternatives = []
    for position, scheme in enumerate(schemes):
        if isinstance(scheme, re.Pattern):
            alternatives.append(scheme.pattern)
        elif isinstance(scheme, str):
            if not _SCHEME_RE.match(scheme):
                raise ValueError(f"scheme at position {position} must be a valid scheme")
            alternatives.append(re.escape(scheme))
        else:
            raise TypeError(f"scheme at position {position} must be a compiled pattern or a string")
    return "|".join(alternatives)


@lru_cache(maxsize=64)
def create_uri_regex(custom_scheme: Optional[str] = None, allow_relative: bool = False) -> Pattern[str]:
    """Compile the full grammar, optionally restricting the scheme.

    The result is meant for ``fullmatch``.
    """
    scheme = f"(?:{custom_scheme})" if custom_scheme else GRAMMAR["scheme"]
    absolute = f"(?:{scheme}:{GRAMMAR['hier_part']})"
    prefix = f"(?:{absolute}|{GRAMMAR['relative_part']})" if allow_relative else absolute
    return re.compile(f"{prefix}(?:\\?{GRAMMAR['query']})?(?:#{GRAMMAR['fragment']})?")


DEFAULT_URI_REGEX = create_uri_regex()


IP_VERSIONS = ("ipv4", "ipv6", "ipvfuture")
CIDR_PRESENCES = ("required", "optional", "forbidden")

_IP_ADDRESS = {"ipv4": "ipv4address", "ipv6": "ipv6address", "ipvfuture": "ipvfuture"}
_IP_CIDR = {"ipv4": "ipv4_cidr", "ipv6": "ipv6_cidr", "ipvfuture": "ipv6_cidr"}


def _cidr_suffix(version: str, cidr: str) -> str:
    prefix = f"/{GRAMMAR[_IP_CIDR[version]]}"
    if cidr == "required":
        return prefix
    if cidr == "optional":
        return f"(?:{prefix})?"
    return ""


@lru_cache(maxsize=64)
def create_ip_regex(versions: Sequence[str] = IP_VERSIONS, cidr: str = "optional") -> Pattern[str]:
    """Compile an alternation of the given IP versions, each with its CIDR suffix.

    *versions* must be a tuple so the result can be cached. Meant for ``fullmatch``.
    """
    parts = [f"{GRAMMAR[_IP_ADDRESS[version]]}{_cidr_suffix(version, cidr)}" for version in versions]
    return re.compile("(?:" + "|".join(parts) + ")")
