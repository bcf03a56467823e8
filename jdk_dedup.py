"""
jdk_dedup.py
============
Path normalization, the exclusion policy and first-seen-wins merging.

Two descriptors whose paths canonicalize to the same real directory are the
same installation; only the first one (in discovery order) is kept.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence

if TYPE_CHECKING:
    from jdk import JDK

logger = logging.getLogger(__name__)


def normalize_path(path: str | Path) -> Path:
    """Absolute path with ``.`` / ``..`` removed; symlinks are left alone."""
    return Path(os.path.normpath(os.path.abspath(os.path.expanduser(str(path)))))


def normalize_paths(paths: Optional[Iterable[str | Path]]) -> List[Path]:
    """Normalize a list of paths, dropping blanks and repeats."""
    result: List[Path] = []
    seen: set = set()
    for raw in paths or ():
        if raw is None or not str(raw).strip():
            continue
        normalized = normalize_path(str(raw).strip())
        if normalized not in seen:
            seen.add(normalized)
            result.append(normalized)
    return result


def expand_exclusions(paths: Optional[Iterable[str | Path]]) -> List[Path]:
    """Normalized exclusions plus the real path of each one that resolves."""
    expanded = normalize_paths(paths)
    for path in list(expanded):
        real = canonical_path(path)
        if real is not None and real not in expanded:
            expanded.append(real)
    return expanded


def is_excluded(candidate: Optional[str | Path], exclusions: Sequence[Path]) -> bool:
    """True if the candidate equals, or lives under, an excluded path."""
    if candidate is None or not exclusions:
        return False
    normalized = normalize_path(candidate)
    for excluded in exclusions:
        if excluded is None:
            continue
        if normalized == excluded or excluded in normalized.parents:
            return True
    return False


def canonical_path(path: Path) -> Optional[Path]:
    """Real path of an existing file or directory, or None if it can't be resolved."""
    try:
        return path.resolve(strict=True)
    except (OSError, ValueError, RuntimeError) as exc:
        logger.debug("Cannot canonicalize %s: %s", path, exc)
        return None


def deduplicate(jdks: Iterable["JDK"], exclusions: Sequence[Path]) -> List["JDK"]:
    """
    Merge raw discovery results into a unique-by-location list.

    Args:
        jdks:        Descriptors in discovery order (may contain duplicates)
        exclusions:  Normalized excluded paths

    Returns:
        Descriptors keyed by canonical path, first occurrence kept, in
        first-seen order.
    """
    unique: Dict[str, "JDK"] = {}
    for jdk in jdks:
        real = canonical_path(jdk.path)
        if real is None:
            # Dangling or platform-invalid: fall back to the known path
            key_path = jdk.path
            candidate = jdk
        else:
            key_path = real
            candidate = jdk if real == jdk.path else jdk.with_path(real)

        if is_excluded(key_path, exclusions) or is_excluded(jdk.path, exclusions):
            logger.debug("Excluded JDK at %s", key_path)
            continue

        key = str(key_path)
        if key in unique:
            logger.debug("Duplicate JDK at %s ignored (already found)", key)
            continue
        unique[key] = candidate

    return list(unique.values())
