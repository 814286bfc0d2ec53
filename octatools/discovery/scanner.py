"""Recursive scanner for Octatrack Sets and Projects under one root.

A scan runs in two passes over the same depth-bounded walk:

1. collect every Set and claim its canonical path;
2. report Project directories that are not inside any claimed Set as
   standalone.

Set claims are complete before any Project is labelled, so the outcome does
not depend on the order directories are visited in.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from octatools.core.constants import FIRST_BANK_FILE_NAMES, PROJECT_FILE_NAMES
from octatools.core.models import OctatrackProject, OctatrackSet
from octatools.discovery.classifier import (
    has_valid_audio_pool,
    is_audio_pool_name,
    is_project,
    is_set,
    is_system_path,
)
from octatools.utils.config import DEFAULT_SCAN_DEPTH
from octatools.utils.file_utils import canonical_path, is_within, list_subdirs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanClaims:
    """Sets found by the first pass and the canonical paths they claim."""

    sets: tuple[OctatrackSet, ...] = ()
    claimed: frozenset[Path] = field(default_factory=frozenset)

    def owns(self, path: Path) -> bool:
        return any(is_within(path, claimed) for claimed in self.claimed)


def walk_directories(
    root: Path,
    max_depth: int = DEFAULT_SCAN_DEPTH,
    prefixes: list[str] | None = None,
) -> Iterator[Path]:
    """Yield ``root`` and its subdirectories down to ``max_depth`` levels.

    System paths are neither yielded nor entered. A directory reached twice
    (through a symlink) is visited once.
    """
    visited: set[Path] = set()
    stack: list[tuple[Path, int]] = [(root, 0)]

    while stack:
        directory, depth = stack.pop()
        if is_system_path(directory, prefixes):
            continue
        canonical = canonical_path(directory)
        if canonical in visited:
            continue
        visited.add(canonical)

        yield directory

        if depth < max_depth:
            # reversed so the walk visits children in name order
            for child in reversed(list_subdirs(directory)):
                stack.append((child, depth + 1))


def make_project(path: Path) -> OctatrackProject:
    path = canonical_path(path)
    return OctatrackProject(
        name=path.name,
        path=path,
        has_project_file=any((path / n).is_file() for n in PROJECT_FILE_NAMES),
        has_banks=any((path / n).is_file() for n in FIRST_BANK_FILE_NAMES),
    )


def _collect_set_projects(
    directory: Path,
    depth_left: int,
    prefixes: list[str] | None = None,
) -> list[OctatrackProject]:
    projects: list[OctatrackProject] = []
    for child in list_subdirs(directory):
        if is_audio_pool_name(child.name):
            continue
        # a nested Set owns its own projects
        if is_set(child, prefixes):
            continue
        if is_project(child):
            projects.append(make_project(child))
        elif depth_left > 1:
            projects.extend(_collect_set_projects(child, depth_left - 1, prefixes))
    return projects


def make_set(
    path: Path,
    max_depth: int = DEFAULT_SCAN_DEPTH,
    prefixes: list[str] | None = None,
) -> OctatrackSet:
    path = canonical_path(path)
    return OctatrackSet(
        name=path.name,
        path=path,
        has_audio_pool=has_valid_audio_pool(path),
        projects=tuple(_collect_set_projects(path, max_depth, prefixes)),
    )


def collect_sets(
    root: Path,
    max_depth: int = DEFAULT_SCAN_DEPTH,
    prefixes: list[str] | None = None,
) -> ScanClaims:
    """First pass: every Set under ``root``, keyed by canonical path."""
    sets: list[OctatrackSet] = []
    claimed: set[Path] = set()

    for directory in walk_directories(root, max_depth, prefixes):
        if not is_set(directory, prefixes):
            continue
        canonical = canonical_path(directory)
        if canonical in claimed:
            continue
        claimed.add(canonical)
        sets.append(make_set(canonical, max_depth, prefixes))

    return ScanClaims(sets=tuple(sets), claimed=frozenset(claimed))


def collect_standalone_projects(
    root: Path,
    claims: ScanClaims,
    max_depth: int = DEFAULT_SCAN_DEPTH,
    prefixes: list[str] | None = None,
) -> list[OctatrackProject]:
    """Second pass: Projects not inside any Set claimed by ``claims``."""
    projects: list[OctatrackProject] = []
    seen: set[Path] = set()

    for directory in walk_directories(root, max_depth, prefixes):
        if not is_project(directory):
            continue
        canonical = canonical_path(directory)
        if canonical in seen or claims.owns(canonical):
            continue
        seen.add(canonical)
        projects.append(make_project(canonical))

    return projects


def scan_for_sets(
    root: Path,
    max_depth: int = DEFAULT_SCAN_DEPTH,
    prefixes: list[str] | None = None,
) -> tuple[list[OctatrackSet], list[OctatrackProject]]:
    """Scan one root for Sets and standalone Projects.

    A missing, unreadable or non-directory root gives empty results.
    """
    root = Path(root)
    try:
        if not root.is_dir():
            logger.debug("Skipping scan root %s: not a directory", root)
            return [], []
    except OSError as e:
        logger.debug("Skipping scan root %s: %s", root, e)
        return [], []

    claims = collect_sets(root, max_depth, prefixes)
    standalone = collect_standalone_projects(root, claims, max_depth, prefixes)
    logger.debug(
        "Scanned %s: %d sets, %d standalone projects",
        root, len(claims.sets), len(standalone),
    )
    return list(claims.sets), standalone
