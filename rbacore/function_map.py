"""Matching functions available to matcher expressions."""

from __future__ import annotations

import ipaddress
import re
from collections.abc import Callable, Iterator

MatchFn = Callable[[str, str], bool]

_MAT_B = re.compile(r":[^/]+")
_MAT_P = re.compile(r"\{[^/]+\}")
_NETMASK = re.compile(r"\+?[0-9]+")


def key_match(key1: str, key2: str) -> bool:
    """Whether ``key1`` matches ``key2``, where ``key2`` may end in ``*``.

    For example ``/foo/bar`` matches ``/foo/*``.
    """
    i = key2.find("*")
    if i < 0:
        return key1 == key2
    if len(key1) > i:
        return key1[:i] == key2[:i]
    return key1 == key2[:i]


def _expand_path_pattern(key2: str, marker: str, placeholder: re.Pattern[str]) -> str:
    if "/*" in key2:
        key2 = key2.replace("/*", "/.*")
    while marker in key2:
        key2 = placeholder.sub("[^/]+", key2, count=1)
    return f"^{key2}$"


def key_match2(key1: str, key2: str) -> bool:
    """Like :func:`key_match`, and ``/:name`` segments match any one segment.

    For example ``/resource1`` matches ``/:resource``.
    """
    return regex_match(key1, _expand_path_pattern(key2, "/:", _MAT_B))


def key_match3(key1: str, key2: str) -> bool:
    """Like :func:`key_match`, and ``/{name}`` segments match any one segment.

    For example ``/resource1`` matches ``/{resource}``.
    """
    return regex_match(key1, _expand_path_pattern(key2, "/{", _MAT_P))


def regex_match(key1: str, key2: str) -> bool:
    """Whether the regular expression ``key2`` matches anywhere in ``key1``."""
    return re.search(key2, key1) is not None


def _ipv6_to_ipv4(addr: ipaddress.IPv6Address) -> ipaddress.IPv4Address | None:
    mapped = addr.ipv4_mapped
    if mapped is not None:
        return mapped
    if addr.packed[:12] == bytes(12):
        return ipaddress.IPv4Address(int(addr) & 0xFFFFFFFF)
    return None


def ip_match(key1: str, key2: str) -> bool:
    """Whether address ``key1`` equals ``key2`` or lies in the CIDR ``key2``.

    For example ``192.168.2.123`` matches ``192.168.2.0/24``. Raises
    ``ValueError`` when either argument is not a valid address or network.
    """
    addr_part, sep, mask_part = key2.partition("/")
    try:
        addr1 = ipaddress.ip_address(key1)
        addr2 = ipaddress.ip_address(addr_part)
    except ValueError:
        raise ValueError(f"invalid argument {key1} {key2}") from None

    if sep:
        if not _NETMASK.fullmatch(mask_part) or int(mask_part) > 255:
            raise ValueError(f"invalid netmask {mask_part}")
        try:
            network = ipaddress.ip_network(f"{addr2}/{int(mask_part)}", strict=False)
        except ValueError as err:
            raise ValueError(f"invalid ip network {err}") from None
        return addr1 in network

    if isinstance(addr1, ipaddress.IPv4Address) and isinstance(addr2, ipaddress.IPv6Address):
        as_v4 = _ipv6_to_ipv4(addr2)
        if as_v4 is not None:
            return as_v4 == addr1
    return addr1 == addr2


def _glob_class(pattern: str, start: int) -> tuple[str, int]:
    """Translate a ``[...]`` class starting just after ``[``."""
    i = start
    negated = False
    if i < len(pattern) and pattern[i] in "!^":
        negated = True
        i += 1
    items: list[str] = []
    first = True
    while i < len(pattern):
        c = pattern[i]
        if c == "]" and not first:
            body = "".join(items)
            return f"[{'^' if negated else ''}{body}]", i + 1
        first = False
        if i + 2 < len(pattern) and pattern[i + 1] == "-" and pattern[i + 2] != "]":
            lo, hi = c, pattern[i + 2]
            if lo > hi:
                raise ValueError(f"invalid range {lo}-{hi} in glob {pattern!r}")
            items.append(f"{re.escape(lo)}-{re.escape(hi)}")
            i += 3
        else:
            items.append(re.escape(c))
            i += 1
    raise ValueError(f"unclosed character class in glob {pattern!r}")


def _glob_to_regex(pattern: str) -> str:
    out: list[str] = []
    n = len(pattern)
    i = 0
    in_alternates = False
    while i < n:
        c = pattern[i]
        if c == "\\":
            if i + 1 >= n:
                raise ValueError(f"dangling escape in glob {pattern!r}")
            out.append(re.escape(pattern[i + 1]))
            i += 2
        elif c == "?":
            out.append("[^/]")
            i += 1
        elif c == "*":
            if i + 1 < n and pattern[i + 1] == "*":
                after = i + 2
                at_start = i == 0 or pattern[i - 1] == "/"
                at_end = after == n or pattern[after] == "/"
                if not (at_start and at_end):
                    out.append("[^/]*")
                elif i == 0 and after == n:
                    out.append(".*")
                elif after == n:
                    out.append(".*")
                else:
                    out.append("(?:.*/)?")
                    after += 1
                i = after
            else:
                out.append("[^/]*")
                i += 1
        elif c == "[":
            translated, i = _glob_class(pattern, i + 1)
            out.append(translated)
        elif c == "{":
            if in_alternates:
                raise ValueError(f"nested alternates in glob {pattern!r}")
            in_alternates = True
            out.append("(?:")
            i += 1
        elif c == "}" and in_alternates:
            in_alternates = False
            out.append(")")
            i += 1
        elif c == "," and in_alternates:
            out.append("|")
            i += 1
        else:
            out.append(re.escape(c))
            i += 1
    if in_alternates:
        raise ValueError(f"unclosed alternates in glob {pattern!r}")
    return "".join(out)


def glob_match(key1: str, key2: str) -> bool:
    """Whether ``key1`` matches the glob ``key2``; ``*`` never crosses ``/``.

    Raises ``ValueError`` for a malformed glob.
    """
    regex = re.compile(_glob_to_regex(key2), re.DOTALL)
    return regex.fullmatch(key1) is not None


class FunctionMap:
    """Named two-argument matching functions, keyed by matcher name."""

    def __init__(self) -> None:
        self._functions: dict[str, MatchFn] = {
            "keyMatch": key_match,
            "keyMatch2": key_match2,
            "keyMatch3": key_match3,
            "regexMatch": regex_match,
            "globMatch": glob_match,
            "ipMatch": ip_match,
        }

    def add_function(self, fname: str, f: MatchFn) -> None:
        """Register ``f`` under ``fname``, replacing any earlier entry."""
        self._functions[fname] = f

    def get_functions(self) -> Iterator[tuple[str, MatchFn]]:
        """Iterate over ``(name, function)`` pairs."""
        return iter(self._functions.items())

    def __getitem__(self, fname: str) -> MatchFn:
        return self._functions[fname]

    def __contains__(self, fname: object) -> bool:
        return fname in self._functions

    def __len__(self) -> int:
        return len(self._functions)