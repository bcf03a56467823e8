"""
jdk_manager.py
==============
In-memory registry of discovered JDKs.

Capabilities:
  - ``refresh()`` re-runs provider → scanner → dedup and swaps in a new snapshot
  - ``get_available_jdks()`` returns the current snapshot (a tuple)
  - ``get_jdks_in_version_range(min, max)`` filters one snapshot, bounds inclusive

Readers never lock. A refresh builds the complete new tuple first and then
replaces the reference in one assignment, so a reader sees the old snapshot
or the new one, never a mix. Refreshes serialize on a writer lock.
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Tuple, Union

from java_version import JavaVersion
from jdk import JDK
from jdk_dedup import canonical_path, deduplicate, expand_exclusions, normalize_path
from jdk_paths import CandidateDirectoryProvider, provider_for_system
from jdk_scanner import ScanReport, Scanner, WarningSink
from jdk_settings import Settings
from jdk_utils import ExecutableProber

logger = logging.getLogger(__name__)

VersionBound = Union[JavaVersion, int, str, None]


class JDKRegistry:
    """
    Process-wide JDK cache, constructed explicitly and passed around.

    Args:
        settings:          Source of exclusions / extra paths (in-memory defaults if None)
        provider_factory:  Builds the candidate-directory provider from the
                           configured extra scan paths (defaults to the current OS)
        scanner:           Scanner to use (a default one is built per refresh
                           with the configured probe timeout)
        warnings:          Sink for listing failures
        env:               Environment mapping (defaults to ``os.environ``)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        provider_factory: Optional[Callable[[List[Path]], CandidateDirectoryProvider]] = None,
        scanner: Optional[Scanner] = None,
        warnings: Optional[WarningSink] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.settings = settings or Settings(None)
        self._provider_factory = provider_factory or (
            lambda extra: provider_for_system(env=env, extra_paths=extra)
        )
        self._scanner = scanner
        self._warnings = warnings
        self._env = env
        self._snapshot: Tuple[JDK, ...] = ()
        self._last_report: Optional[ScanReport] = None
        self._write_lock = threading.Lock()

    # ================================================================
    #  REFRESH
    # ================================================================

    def refresh(self) -> Tuple[JDK, ...]:
        """Rediscover all JDKs and replace the snapshot. Blocks on I/O."""
        with self._write_lock:
            exclusions = expand_exclusions(self.settings.excluded_scan_paths())
            manual_paths = self.settings.additional_jdks()
            provider = self._provider_factory(self.settings.additional_scan_paths())
            scanner = self._scanner or Scanner(
                prober=ExecutableProber(timeout=self.settings.probe_timeout),
                warnings=self._warnings,
            )

            report = scanner.scan(
                provider.candidate_directories(),
                exclusions=exclusions,
                manual_paths=manual_paths,
                env=self._env if self._env is not None else os.environ,
            )
            snapshot = tuple(deduplicate(report.found, exclusions))

            self._snapshot = snapshot
            self._last_report = report

        for jdk in snapshot:
            logger.debug(
                "Detected JDK: %s (brand: %s, version: %s, path: %s)",
                jdk.name, jdk.brand.name if jdk.brand else "?", jdk.version, jdk.path,
            )
        logger.info("Total detected: %d JDK installations", len(snapshot))
        return snapshot

    # ================================================================
    #  QUERIES
    # ================================================================

    def snapshot(self) -> Tuple[JDK, ...]:
        return self._snapshot

    def get_available_jdks(self) -> Tuple[JDK, ...]:
        """Current snapshot; empty before the first refresh."""
        return self._snapshot

    def by_version_range(
        self,
        min_version: VersionBound = None,
        max_version: VersionBound = None,
    ) -> List[JDK]:
        """
        JDKs with ``min_version <= version <= max_version``.

        Either bound may be omitted. Bounds may be ``JavaVersion`` objects,
        major version ints or version strings; anything else raises
        ``TypeError`` / ``ValueError``. A bound only compares the fields it
        spells out, so ``max_version=17`` keeps 17.0.9.
        """
        low = JavaVersion.coerce_bound(min_version) if min_version is not None else None
        high = JavaVersion.coerce_bound(max_version) if max_version is not None else None

        def within(version: JavaVersion) -> bool:
            if low is not None and version.prefix(low[1]) < low[0].prefix(low[1]):
                return False
            if high is not None and version.prefix(high[1]) > high[0].prefix(high[1]):
                return False
            return True

        snapshot = self._snapshot
        return [jdk for jdk in snapshot if within(jdk.version)]

    get_jdks_in_version_range = by_version_range

    def newest(
        self,
        min_version: VersionBound = None,
        max_version: VersionBound = None,
    ) -> Optional[JDK]:
        """Highest-versioned JDK in range (first-seen wins on ties)."""
        best: Optional[JDK] = None
        for jdk in self.by_version_range(min_version, max_version):
            if best is None or jdk.version > best.version:
                best = jdk
        return best

    def find_by_path(self, path: str | Path) -> Optional[JDK]:
        wanted = canonical_path(Path(path)) or normalize_path(path)
        for jdk in self._snapshot:
            if jdk.path == wanted:
                return jdk
        return None

    @property
    def last_report(self) -> Optional[ScanReport]:
        """Scan outcomes of the latest refresh, for diagnostics."""
        return self._last_report
