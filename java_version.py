"""
java_version.py
===============
Comparable Java version value used for range queries.

Understands the formats found in ``release`` files and ``java -version``
output:

  17              → 17.0.0
  17.0.9          → 17.0.9
  1.8.0_392       → 8.0.392   (legacy 1.x scheme)
  21.0.2+13       → 21.0.2+13
  22-ea           → 22.0.0-ea
  11.0.21+9-LTS   → 11.0.21+9-LTS

Range bounds compare only the fields they spell out: a bound of ``17`` (or
``"17"``) admits every 17.x release, ``"17.0"`` every 17.0.x, and so on.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Optional, Tuple, Union

# Digit groups are length-capped so a crafted release file cannot trip int()
_VERSION_RE = re.compile(
    r"^(?P<major>\d{1,9})"
    r"(?:\.(?P<minor>\d{1,9}))?"
    r"(?:\.(?P<patch>\d{1,9}))?"
    r"(?:\.\d{1,9})*"
    r"(?:_(?P<update>\d{1,9}))?"
    r"(?:-(?P<suffix>[A-Za-z0-9.\-]+?))?"
    r"(?:\+(?P<build>\d{1,9}))?"
    r"(?:-(?P<tail>[A-Za-z0-9.\-]+))?$"
)

PRE_RELEASE_TAGS = ("ea", "internal", "alpha", "beta", "rc", "snapshot")

# Number of ordering-key fields a fully specified version pins
FULL_DEPTH = 6


def is_pre_release(suffix: str) -> bool:
    """True for early-access style tags (``ea``, ``internal``, ``rc1``…), not vendor tags like ``LTS``."""
    return suffix.lower().startswith(PRE_RELEASE_TAGS)


@total_ordering
@dataclass(frozen=True)
class JavaVersion:
    """A totally ordered Java version.

    Ordering is numeric on ``(major, minor, patch, build)``. When the numbers
    tie, a pre-release (``22-ea``) sorts before the release (``22``); vendor
    tags such as ``LTS`` rank with the release and only break the tie as
    strings.
    """

    major: int
    minor: int = 0
    patch: int = 0
    build: int = 0
    suffix: str = field(default="")

    # ── Construction ───────────────────────────

    @classmethod
    def from_major(cls, major: int) -> "JavaVersion":
        return cls(major=major)

    @classmethod
    def _parse_with_depth(cls, text: Optional[str]) -> Optional[Tuple["JavaVersion", int]]:
        if text is None:
            return None
        value = text.strip().strip('"').strip()
        match = _VERSION_RE.match(value)
        if not match:
            return None

        major = int(match.group("major"))
        minor = int(match.group("minor") or 0)
        patch = int(match.group("patch") or 0)
        if match.group("update"):
            patch = int(match.group("update"))
        build = int(match.group("build") or 0)
        suffix = match.group("suffix") or match.group("tail") or ""

        depth = 1
        legacy = major == 1 and match.group("minor") is not None
        if legacy:
            # 1.8.0_392 is Java 8
            major, minor = minor, 0
        elif match.group("minor") is not None:
            depth = 2
        if match.group("patch") is not None or match.group("update") is not None:
            depth = 3
        if match.group("build") is not None:
            depth = 4
        if suffix:
            depth = FULL_DEPTH

        version = cls(major=major, minor=minor, patch=patch, build=build, suffix=suffix)
        return version, depth

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["JavaVersion"]:
        """Parse a version string, returning None when it is not one."""
        parsed = cls._parse_with_depth(text)
        return parsed[0] if parsed else None

    @classmethod
    def coerce_bound(cls, value: Union["JavaVersion", int, str]) -> Tuple["JavaVersion", int]:
        """
        Turn a caller-supplied range bound into ``(version, depth)`` or raise.

        ``depth`` is how many leading ordering fields the bound pins: 1 for a
        bare major (``17`` / ``"17"``), up to ``FULL_DEPTH`` for a
        ``JavaVersion`` or a string with a suffix.
        """
        if isinstance(value, JavaVersion):
            return value, FULL_DEPTH
        if isinstance(value, bool):
            raise TypeError(f"Not a Java version: {value!r}")
        if isinstance(value, int):
            if value < 1:
                raise ValueError(f"Java major version must be positive: {value}")
            return cls.from_major(value), 1
        if isinstance(value, str):
            parsed = cls._parse_with_depth(value)
            if parsed is None:
                raise ValueError(f"Unparsable Java version: {value!r}")
            return parsed
        raise TypeError(f"Not a Java version: {value!r}")

    @classmethod
    def coerce(cls, value: Union["JavaVersion", int, str]) -> "JavaVersion":
        """Turn a caller-supplied bound into a JavaVersion or raise."""
        return cls.coerce_bound(value)[0]

    # ── Ordering ───────────────────────────────

    def _key(self) -> Tuple[int, int, int, int, int, str]:
        return (
            self.major,
            self.minor,
            self.patch,
            self.build,
            0 if is_pre_release(self.suffix) else 1,
            self.suffix,
        )

    def prefix(self, depth: int) -> tuple:
        """The first ``depth`` fields of the ordering key."""
        return self._key()[:depth]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JavaVersion):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "JavaVersion") -> bool:
        if not isinstance(other, JavaVersion):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.build:
            text += f"+{self.build}"
        if self.suffix:
            text += f"-{self.suffix}"
        return text
