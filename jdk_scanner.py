"""
jdk_scanner.py
==============
Best-effort walk over every place a JDK may live.

Order of discovery (later duplicates lose to earlier ones during dedup):
  1. JAVA_HOME
  2. JDK_HOME
  3. first ``java`` on PATH
  4. immediate subdirectories of each candidate directory
  5. manually configured JDK paths

Every probed candidate becomes a ``ScanOutcome``. Nothing in here raises for a
single bad candidate: probe failures become skip reasons and directory
listing failures are reported to a ``WarningSink`` and skipped.
"""

from __future__ import annotations

import logging
import os
import platform
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from jdk import JDK, executable_name
from jdk_dedup import is_excluded
from jdk_utils import ExecutableProber, ProbeResult, SkipReason, find_java_on_path, is_executable

logger = logging.getLogger(__name__)


class ScanSource(Enum):
    """Where a candidate came from, in priority order."""

    JAVA_HOME = "JAVA_HOME"
    JDK_HOME = "JDK_HOME"
    PATH = "PATH"
    DIRECTORY = "directory"
    MANUAL = "manual"


# ──────────────────────────────────────────────
#  Warning Sink
# ──────────────────────────────────────────────

class WarningSink:
    """Receives non-fatal scan problems. The base sink drops them."""

    def warn(self, message: str, path: Path, error: Optional[BaseException] = None) -> None:
        pass


class LoggingWarningSink(WarningSink):
    def warn(self, message: str, path: Path, error: Optional[BaseException] = None) -> None:
        logger.warning("%s: %s (%s)", message, path, error)


class CollectingWarningSink(WarningSink):
    """Keeps warnings in memory; handy for diagnostics output."""

    def __init__(self) -> None:
        self.warnings: List[tuple] = []

    def warn(self, message: str, path: Path, error: Optional[BaseException] = None) -> None:
        self.warnings.append((message, path, error))


# ──────────────────────────────────────────────
#  Outcomes
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class ScanOutcome:
    """One probed candidate: a JDK or a skip reason."""

    source: ScanSource
    candidate: str
    jdk: Optional[JDK] = None
    reason: Optional[SkipReason] = None

    @property
    def ok(self) -> bool:
        return self.jdk is not None


@dataclass
class ScanReport:
    """All outcomes of one scan, in discovery order."""

    outcomes: List[ScanOutcome] = field(default_factory=list)

    @property
    def found(self) -> List[JDK]:
        return [o.jdk for o in self.outcomes if o.jdk is not None]

    @property
    def skipped(self) -> List[ScanOutcome]:
        return [o for o in self.outcomes if o.jdk is None]


# ──────────────────────────────────────────────
#  Scanner
# ──────────────────────────────────────────────

class Scanner:
    """
    Probes explicit sources and candidate directories.

    Args:
        prober:    Callable turning a path into a ``ProbeResult``
        warnings:  Sink for listing failures (logs by default)
        system:    ``platform.system()`` override, for the launcher layout
    """

    def __init__(
        self,
        prober: Optional[Callable[[str | Path], ProbeResult]] = None,
        warnings: Optional[WarningSink] = None,
        system: Optional[str] = None,
    ) -> None:
        self.system = system or platform.system()
        self.prober = prober or ExecutableProber(system=self.system)
        self.warnings = warnings or LoggingWarningSink()
        self._exe = executable_name("java", self.system)

    def scan(
        self,
        candidate_directories: Iterable[Path],
        exclusions: Sequence[Path] = (),
        manual_paths: Iterable[str | Path] = (),
        env: Optional[Mapping[str, str]] = None,
    ) -> ScanReport:
        env = os.environ if env is None else env
        report = ScanReport()

        # 1. Explicit single-point sources
        for source in (ScanSource.JAVA_HOME, ScanSource.JDK_HOME):
            value = env.get(source.value, "")
            if value:
                self._probe(report, source, value, exclusions)

        java_on_path = find_java_on_path(env, self.system)
        if java_on_path is not None:
            self._probe(report, ScanSource.PATH, java_on_path, exclusions)

        # 2. Common installation directories
        for directory in candidate_directories:
            self._scan_directory(report, Path(directory), exclusions)

        # 3. User-provided JDKs
        for manual in manual_paths:
            self._probe(report, ScanSource.MANUAL, manual, exclusions)

        logger.debug(
            "Scan finished: %d found, %d skipped",
            len(report.found), len(report.skipped),
        )
        return report

    def _scan_directory(
        self, report: ScanReport, directory: Path, exclusions: Sequence[Path],
    ) -> None:
        if is_excluded(directory, exclusions):
            logger.debug("Skipping excluded directory %s", directory)
            return
        if not directory.is_dir():
            return

        try:
            entries = sorted(entry for entry in directory.iterdir() if entry.is_dir())
        except OSError as exc:
            self.warnings.warn("Failed to read JDKs from directory", directory, exc)
            report.outcomes.append(ScanOutcome(
                source=ScanSource.DIRECTORY,
                candidate=str(directory),
                reason=SkipReason.LISTING_FAILED,
            ))
            return

        for entry in entries:
            if is_excluded(entry, exclusions):
                report.outcomes.append(ScanOutcome(
                    source=ScanSource.DIRECTORY,
                    candidate=str(entry),
                    reason=SkipReason.EXCLUDED,
                ))
                continue
            self._probe(report, ScanSource.DIRECTORY, self.launcher_for(entry), exclusions)

    def launcher_for(self, entry: Path) -> Path:
        """Expected launcher location for an installation directory."""
        flat = entry / "bin" / self._exe
        if self.system == "Darwin":
            # Bundle layout first; SDKMAN / asdf / Gradle installs are flat
            bundle = entry / "Contents" / "Home" / "bin" / self._exe
            return bundle if is_executable(bundle) else flat
        return flat

    def _probe(
        self,
        report: ScanReport,
        source: ScanSource,
        candidate: str | Path,
        exclusions: Sequence[Path],
    ) -> None:
        try:
            result: ProbeResult = self.prober(candidate)
        except Exception as exc:
            self.warnings.warn("Failed to probe JDK candidate", Path(candidate), exc)
            report.outcomes.append(ScanOutcome(
                source=source, candidate=str(candidate), reason=SkipReason.PROBE_FAILED,
            ))
            return

        if result.jdk is None:
            report.outcomes.append(ScanOutcome(
                source=source, candidate=str(candidate), reason=result.reason,
            ))
            return

        if is_excluded(result.jdk.path, exclusions):
            logger.debug("Excluded JDK at %s (%s)", result.jdk.path, source.value)
            report.outcomes.append(ScanOutcome(
                source=source, candidate=str(candidate), reason=SkipReason.EXCLUDED,
            ))
            return

        report.outcomes.append(ScanOutcome(source=source, candidate=str(candidate), jdk=result.jdk))
