"""Version requirement matching for installed packages.

Installed version strings only need to be well formed: a leading digit
followed by letters, digits, dots, dashes or plus signs. Strings that
``packaging`` cannot order (``1.0.foo``) still load and can be matched
exactly, but never satisfy an ordering or pessimistic constraint.
"""

from __future__ import annotations

import operator
import re
from dataclasses import dataclass
from typing import Any, Callable

from packaging.version import InvalidVersion, Version

from pluck.core.errors import UserError

_VERSION = r"[0-9][0-9A-Za-z.\-+]*"
_WELL_FORMED = re.compile(rf"^{_VERSION}$")
_CONSTRAINT = re.compile(rf"^\s*(=|!=|>=|<=|>|<|~>)?\s*({_VERSION})\s*$")

_ANY = ((">=", "0"),)

_OPS: dict[str, Callable[[Version, Version], bool]] = {
    "=": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}


def parse_version(text: str) -> Version:
    """Parse a version string, raising UserError when it is malformed."""
    try:
        return Version(text)
    except InvalidVersion as e:
        raise UserError(f"Malformed version '{text}'", context={"version": text}) from e


def check_version(text: str) -> str:
    """Return ``text`` if it is a well-formed version string.

    Raises:
        UserError: If it is not.
    """
    if not _WELL_FORMED.match(text):
        raise UserError(f"Malformed version '{text}'", context={"version": text})
    return text


def _orderable(text: str) -> Version | None:
    try:
        return Version(text)
    except InvalidVersion:
        return None


def version_key(text: str) -> tuple[int, Any]:
    """Sort key: unorderable versions first, by text, then ordered versions."""
    version = _orderable(text)
    if version is None:
        return (0, text)
    return (1, version)


def _bump(version: Version) -> Version:
    """Upper bound for a pessimistic constraint: 1.2.3 -> 1.3, 1.2 -> 2, 1 -> 2."""
    segments = list(version.release)
    if len(segments) > 1:
        segments.pop()
    segments[-1] += 1
    return Version(".".join(str(s) for s in segments))


@dataclass(frozen=True)
class Requirement:
    """A conjunction of (operator, version) constraints."""

    constraints: tuple[tuple[str, str], ...] = _ANY

    @classmethod
    def parse(cls, text: str | None) -> Requirement:
        """Parse ``"~> 1.2, != 1.2.5"`` style text; blank means any version."""
        if text is None or not text.strip():
            return cls()

        constraints = []
        for part in text.split(","):
            match = _CONSTRAINT.match(part)
            if match is None:
                raise UserError(f"Illformed requirement '{text}'", context={"requirement": text})
            op, version = match.group(1) or "=", match.group(2)
            if op not in ("=", "!="):
                parse_version(version)
            constraints.append((op, version))

        return cls(tuple(constraints))

    def satisfied_by(self, version: str) -> bool:
        """Check whether ``version`` meets every constraint.

        Equality falls back to comparing the text when either side cannot
        be parsed as a version.
        """
        if self.constraints == _ANY:
            return True

        candidate = _orderable(version)
        for op, bound in self.constraints:
            limit = _orderable(bound)
            if op in ("=", "!="):
                if candidate is not None and limit is not None:
                    equal = candidate == limit
                else:
                    equal = version == bound
                if equal != (op == "="):
                    return False
            elif candidate is None or limit is None:
                return False
            elif op == "~>":
                if not (limit <= candidate < _bump(limit)):
                    return False
            elif not _OPS[op](candidate, limit):
                return False
        return True

    def __str__(self) -> str:
        return ", ".join(f"{op} {version}" for op, version in self.constraints)
