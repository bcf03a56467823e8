"""
jdk_utils.py
============
Probing of individual filesystem paths for a usable JDK.

Given anything a user or the environment may point at (a JDK root, its
``bin`` directory, the ``java`` launcher itself, a macOS bundle) the prober
resolves the installation root, reads its version and returns a ``JDK``.
A candidate that does not pan out never raises; the caller gets a
``ProbeResult`` carrying the reason it was skipped.

Version sources, in order:
  1. ``JAVA_VERSION`` in the ``release`` file
  2. the first quoted token of ``java -version``
"""

from __future__ import annotations

import logging
import os
import platform
import re
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Mapping, Optional

from java_version import JavaVersion
from jdk import JDK, executable_name

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 5.0

_QUOTED_RE = re.compile(r'"([^"]+)"')


# ──────────────────────────────────────────────
#  Probe Result
# ──────────────────────────────────────────────

class SkipReason(Enum):
    """Why a candidate did not produce a JDK."""

    INVALID_PATH = "invalid-path"
    MISSING = "missing"
    NOT_A_JDK = "not-a-jdk"
    UNKNOWN_VERSION = "unknown-version"
    EXCLUDED = "excluded"
    LISTING_FAILED = "listing-failed"
    PROBE_FAILED = "probe-failed"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of probing one path: a JDK, or the reason there is none."""

    source_path: str
    jdk: Optional[JDK] = None
    reason: Optional[SkipReason] = None

    @property
    def ok(self) -> bool:
        return self.jdk is not None

    @classmethod
    def found(cls, source_path: str, jdk: JDK) -> "ProbeResult":
        return cls(source_path=source_path, jdk=jdk)

    @classmethod
    def skipped(cls, source_path: str, reason: SkipReason) -> "ProbeResult":
        return cls(source_path=source_path, reason=reason)


# ──────────────────────────────────────────────
#  Helpers
# ──────────────────────────────────────────────

def strip_quotes(value: Optional[str]) -> Optional[str]:
    """Remove one pair of surrounding double quotes."""
    if value is None:
        return None
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def read_release_properties(java_home: str | Path) -> Dict[str, str]:
    """
    Parse ``<java_home>/release`` into a dict.

    The file is a Java properties file of ``KEY="value"`` lines. Unreadable
    or missing files give an empty dict.
    """
    release = Path(java_home) / "release"
    props: Dict[str, str] = {}
    if not release.is_file():
        return props
    try:
        content = release.read_text(encoding="utf-8", errors="ignore")
    except OSError as exc:
        logger.debug("Could not read %s: %s", release, exc)
        return props

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith(("#", "!")) or "=" not in line:
            continue
        key, value = line.split("=", 1)
        props[key.strip()] = strip_quotes(value.strip()) or ""
    return props


def version_from_release(java_home: str | Path) -> Optional[JavaVersion]:
    return JavaVersion.parse(read_release_properties(java_home).get("JAVA_VERSION"))


def version_from_process(
    java_exe: str | Path, timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> Optional[JavaVersion]:
    """Run ``java -version`` and parse the first quoted version token."""
    try:
        result = subprocess.run(
            [str(java_exe), "-version"],
            capture_output=True, text=True, timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("java -version failed for %s: %s", java_exe, exc)
        return None

    output = (result.stderr or "") + (result.stdout or "")
    for line in output.splitlines():
        match = _QUOTED_RE.search(line)
        if not match:
            continue
        version = JavaVersion.parse(match.group(1))
        if version is not None:
            return version
    return None


def read_java_version(
    java_home: Path,
    system: Optional[str] = None,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> Optional[JavaVersion]:
    version = version_from_release(java_home)
    if version is not None:
        return version
    return version_from_process(java_home / "bin" / executable_name("java", system), timeout)


# ──────────────────────────────────────────────
#  Java Home Resolution
# ──────────────────────────────────────────────

def _maybe_real_path(candidate: Path) -> Path:
    try:
        return candidate.resolve(strict=True)
    except (OSError, RuntimeError):
        return candidate


def _is_mac_system_stub(home: Path, system: str) -> bool:
    return system == "Darwin" and os.path.normpath(os.path.abspath(home)) == "/usr"


def _mac_java_home(exe_name: str, timeout: float) -> Optional[Path]:
    """Ask ``/usr/libexec/java_home`` for the default JDK on macOS."""
    try:
        result = subprocess.run(
            ["/usr/libexec/java_home"],
            capture_output=True, text=True, timeout=timeout,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("/usr/libexec/java_home failed: %s", exc)
        return None

    lines = (result.stdout or "").strip().splitlines()
    if not lines or not lines[0].strip():
        return None
    home = Path(lines[0].strip())
    return home if is_executable(home / "bin" / exe_name) else None


def resolve_java_home(
    candidate: str | Path,
    system: Optional[str] = None,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> Optional[Path]:
    """
    Resolve any JDK-ish path to its installation root.

    Accepts a JDK root, a ``jre`` layout, a macOS bundle, a ``bin``
    directory or the launcher executable. Returns None when the path does
    not lead to an executable ``java``.
    """
    system = system or platform.system()
    exe = executable_name("java", system)
    resolved = _maybe_real_path(Path(candidate))

    if resolved.is_dir():
        if is_executable(resolved / "bin" / exe):
            if _is_mac_system_stub(resolved, system):
                return _mac_java_home(exe, timeout)
            return resolved
        if is_executable(resolved / "jre" / "bin" / exe):
            return resolved
        mac_home = resolved / "Contents" / "Home"
        if is_executable(mac_home / "bin" / exe):
            return mac_home
        if resolved.name.lower() == "bin":
            parent = resolved.parent
            if _is_mac_system_stub(parent, system):
                return _mac_java_home(exe, timeout)
            if is_executable(parent / "bin" / exe):
                return parent
        return None

    parent = resolved.parent
    if parent == resolved:
        return None

    if parent.name.lower() == "bin":
        home = parent.parent
        if home.name.lower() == "jre" and is_executable(home / "bin" / exe):
            # <jdk>/jre/bin/java belongs to the enclosing JDK
            return home.parent
        if home.name == "Home" and home.parent.name == "Contents":
            return home
        if _is_mac_system_stub(home, system):
            return _mac_java_home(exe, timeout)
        if is_executable(home / "bin" / exe):
            return home

    return None


def find_java_on_path(
    env: Optional[Mapping[str, str]] = None,
    system: Optional[str] = None,
) -> Optional[Path]:
    """Return the first executable ``java`` on PATH, or None."""
    env = os.environ if env is None else env
    path_env = env.get("PATH")
    if not path_env:
        return None

    exe = executable_name("java", system)
    separator = ";" if (system or platform.system()) == "Windows" else os.pathsep
    for raw in path_env.split(separator):
        entry = strip_quotes(raw.strip())
        if not entry:
            continue
        java_path = Path(entry) / exe
        if is_executable(java_path):
            return java_path.absolute()
    return None


# ──────────────────────────────────────────────
#  Prober
# ──────────────────────────────────────────────

class ExecutableProber:
    """Turns raw filesystem paths into JDK descriptors."""

    def __init__(
        self,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
        system: Optional[str] = None,
    ) -> None:
        self.timeout = timeout
        self.system = system or platform.system()

    def probe(self, java_home_or_exe: str | Path) -> ProbeResult:
        source = str(java_home_or_exe)
        try:
            path = Path(source)
            exists = path.exists()
        except (OSError, ValueError):
            return ProbeResult.skipped(source, SkipReason.INVALID_PATH)
        if not source or not exists:
            return ProbeResult.skipped(source, SkipReason.MISSING)

        home = resolve_java_home(path, self.system, self.timeout)
        if home is None:
            logger.debug("Not a JDK: %s", source)
            return ProbeResult.skipped(source, SkipReason.NOT_A_JDK)

        version = read_java_version(home, self.system, self.timeout)
        if version is None:
            logger.debug("Could not determine Java version for %s", home)
            return ProbeResult.skipped(source, SkipReason.UNKNOWN_VERSION)

        name = home.name or str(home)
        # macOS bundles resolve to Contents/Home; name them after the bundle
        if home.name == "Home" and home.parent.name == "Contents":
            name = home.parent.parent.name
        return ProbeResult.found(source, JDK(path=home.absolute(), name=name, version=version))

    __call__ = probe


def create_jdk_from_any_path(
    java_home_or_exe: str | Path,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> Optional[JDK]:
    """Probe a single path and return the JDK, or None."""
    return ExecutableProber(timeout=timeout).probe(java_home_or_exe).jdk
