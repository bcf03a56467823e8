"""
jdk_paths.py
============
Per-platform candidate directories that commonly hold JDK installations.

Each provider returns an insertion-ordered, duplicate-free list of normalized
absolute paths. Nothing here checks whether the directories exist (apart from
Windows drive roots); the scanner does that.

Platforms:
  Windows  – Program Files / Program Files (x86) vendor folders on drives C..Z
  macOS    – JavaVirtualMachines (system + user), Homebrew (ARM + Intel)
  Linux    – /usr/lib/jvm, /usr/java, /opt/java, /opt/jdk
  All      – SDKMAN, asdf, ~/.jdks, Gradle toolchains, configured extras
"""

from __future__ import annotations

import os
import platform
import string
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Type

from jdk_dedup import normalize_path

# ──────────────────────────────────────────────
#  Constants
# ──────────────────────────────────────────────

WIN_JDK_PATHS: List[str] = [
    "{drive}:\\Program Files\\Java",
    "{drive}:\\Program Files (x86)\\Java",
    "{drive}:\\Program Files\\Eclipse Adoptium",
    "{drive}:\\Program Files (x86)\\Eclipse Adoptium",
    "{drive}:\\Program Files\\Azul",
    "{drive}:\\Program Files (x86)\\Azul",
    "{drive}:\\Program Files\\Zulu",
    "{drive}:\\Program Files (x86)\\Zulu",
    "{drive}:\\Program Files\\Amazon Corretto",
    "{drive}:\\Program Files (x86)\\Amazon Corretto",
    "{drive}:\\Program Files\\BellSoft",
    "{drive}:\\Program Files\\GraalVM",
]

LINUX_JDK_PATHS: List[str] = [
    "/usr/lib/jvm",
    "/usr/java",
    "/opt/java",
    "/opt/jdk",
]

MAC_SYSTEM_JVM_DIR = "/Library/Java/JavaVirtualMachines"
HOMEBREW_PREFIXES: List[str] = [
    "/opt/homebrew/opt",  # Apple Silicon
    "/usr/local/opt",     # Intel
]


class _OrderedPathSet:
    """Keeps the first occurrence of each normalized path."""

    def __init__(self) -> None:
        self._paths: Dict[str, Path] = {}

    def add(self, path: str | Path) -> None:
        normalized = normalize_path(path)
        self._paths.setdefault(str(normalized), normalized)

    def extend(self, paths: Iterable[str | Path]) -> None:
        for path in paths:
            self.add(path)

    def to_list(self) -> List[Path]:
        return list(self._paths.values())


# ──────────────────────────────────────────────
#  Providers
# ──────────────────────────────────────────────

class CandidateDirectoryProvider:
    """
    Base provider: only the user-level manager caches and configured extras.

    Args:
        env:          Environment mapping (defaults to ``os.environ``)
        home:         User home directory (defaults to ``Path.home()``)
        extra_paths:  Additional scan directories from the settings
    """

    system = ""

    def __init__(
        self,
        env: Optional[Mapping[str, str]] = None,
        home: Optional[str | Path] = None,
        extra_paths: Iterable[str | Path] = (),
    ) -> None:
        self.env = os.environ if env is None else env
        self.home = Path(home) if home is not None else self._default_home()
        self.extra_paths = list(extra_paths)

    @staticmethod
    def _default_home() -> Optional[Path]:
        try:
            return Path.home()
        except (KeyError, RuntimeError):
            return None

    def platform_directories(self) -> List[str | Path]:
        return []

    def user_directories(self) -> List[str | Path]:
        dirs: List[str | Path] = []
        if self.home is not None and str(self.home).strip():
            dirs.extend([
                self.home / ".sdkman" / "candidates" / "java",
                self.home / ".asdf" / "installs" / "java",
                self.home / ".jdks",
                self.home / ".gradle" / "jdks",
            ])

        gradle_user_home = self.env.get("GRADLE_USER_HOME", "")
        if gradle_user_home.strip():
            dirs.append(Path(gradle_user_home) / "jdks")
        return dirs

    def candidate_directories(self) -> List[Path]:
        candidates = _OrderedPathSet()
        candidates.extend(self.platform_directories())
        candidates.extend(self.user_directories())
        candidates.extend(self.extra_paths)
        return candidates.to_list()


class WindowsPathProvider(CandidateDirectoryProvider):
    system = "Windows"

    def __init__(
        self,
        *args,
        drive_exists: Optional[Callable[[str], bool]] = None,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.drive_exists = drive_exists or (lambda drive: os.path.exists(f"{drive}:\\"))

    def platform_directories(self) -> List[str | Path]:
        # A and B are floppy drives
        drives = [d for d in string.ascii_uppercase[2:] if self.drive_exists(d)]
        return [
            template.replace("{drive}", drive)
            for template in WIN_JDK_PATHS
            for drive in drives
        ]


class MacPathProvider(CandidateDirectoryProvider):
    system = "Darwin"

    def platform_directories(self) -> List[str | Path]:
        dirs: List[str | Path] = [MAC_SYSTEM_JVM_DIR]
        if self.home is not None and str(self.home).strip():
            dirs.append(self.home / "Library" / "Java" / "JavaVirtualMachines")
        dirs.extend(HOMEBREW_PREFIXES)
        return dirs


class LinuxPathProvider(CandidateDirectoryProvider):
    system = "Linux"

    def platform_directories(self) -> List[str | Path]:
        return list(LINUX_JDK_PATHS)


_PROVIDERS: Dict[str, Type[CandidateDirectoryProvider]] = {
    "Windows": WindowsPathProvider,
    "Darwin": MacPathProvider,
    "Linux": LinuxPathProvider,
}


def provider_for_system(
    system: Optional[str] = None, **kwargs,
) -> CandidateDirectoryProvider:
    """Return the provider for ``platform.system()`` (or the given name)."""
    system = system or platform.system()
    return _PROVIDERS.get(system, CandidateDirectoryProvider)(**kwargs)
