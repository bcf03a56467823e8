"""
jdk.py
======
Immutable descriptor for one discovered JDK installation.

A ``JDK`` names the installation root (never the ``java`` executable), a
display name, a comparable ``JavaVersion`` and the vendor ``Brand``. When no
brand is given it is detected from the ``release`` file first and from the
name / path second.
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple

from java_version import JavaVersion

if TYPE_CHECKING:
    from jdk_cli import JDKCLI


def executable_name(tool: str = "java", system: Optional[str] = None) -> str:
    """Return the platform file name for a JDK tool (``java.exe`` on Windows)."""
    system = system or platform.system()
    return f"{tool}.exe" if system == "Windows" else tool


# ──────────────────────────────────────────────
#  Brand
# ──────────────────────────────────────────────

class Brand(Enum):
    """Known JDK distributions, each with a key and lookup aliases."""

    ORACLE = ("oracle",)
    ADOPTIUM = ("temurin", "adoptopenjdk", "adoptium", "eclipse")
    AZUL = ("zulu", "azul")
    CORRETTO = ("corretto", "amazon")
    BELL_SOFT = ("liberica", "bellsoft")
    GRAAL = ("graalvm", "graal")
    SAP = ("sapmachine", "sap")
    RED_HAT = ("redhat", "red hat", "rhel")
    MICROSOFT = ("microsoft",)
    IBM = ("ibm", "semeru")
    UNKNOWN = ("java",)

    @property
    def key(self) -> str:
        return self.value[0]

    @property
    def aliases(self) -> Tuple[str, ...]:
        return self.value[1:]

    def _matches(self, haystack: str) -> bool:
        if not haystack:
            return False
        return any(word in haystack for word in self.value)

    @classmethod
    def detect(
        cls,
        name: str,
        path: str | Path,
        release: Optional[Mapping[str, str]] = None,
    ) -> "Brand":
        """Guess the brand from release properties, then from name and path."""
        release = release or {}
        implementor = release.get("IMPLEMENTOR", "").lower()
        vendor = release.get("VENDOR", "").lower()

        for brand in cls:
            if brand is cls.UNKNOWN:
                continue
            if brand._matches(implementor) or brand._matches(vendor):
                return brand

        name_lower = (name or "").lower()
        path_lower = os.path.abspath(str(path)).lower()
        for brand in cls:
            if brand is cls.UNKNOWN:
                continue
            if brand._matches(name_lower) or brand._matches(path_lower):
                return brand

        return cls.UNKNOWN


# ──────────────────────────────────────────────
#  JDK Descriptor
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class JDK:
    """A JDK installation found on disk."""

    path: Path
    name: str
    version: JavaVersion
    brand: Optional[Brand] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))
        if self.brand is None:
            from jdk_utils import read_release_properties

            detected = Brand.detect(self.name, self.path, read_release_properties(self.path))
            object.__setattr__(self, "brand", detected)

    def executable_path(self, tool: str) -> Path:
        """Return the path of a tool inside ``bin/``, or beside the root."""
        candidate = self.path / "bin" / tool
        if candidate.exists():
            return candidate
        return self.path / tool

    @property
    def cli(self) -> "JDKCLI":
        """Command builders bound to this JDK."""
        from jdk_cli import JDKCLI

        return JDKCLI(self)

    def with_path(self, path: Path) -> "JDK":
        """Return a copy pointing at another (canonical) path."""
        return JDK(path=path, name=self.name, version=self.version, brand=self.brand)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": str(self.path),
            "name": self.name,
            "version": str(self.version),
            "major": self.version.major,
            "brand": self.brand.name if self.brand else Brand.UNKNOWN.name,
        }

    def __str__(self) -> str:
        brand = self.brand.name.lower() if self.brand else "unknown"
        return f"{self.name} ({brand}, {self.version}) at {self.path}"
