"""Device discovery: scan mounted volumes and home folders for Octatrack data.

Results of several scan roots are merged into Locations, one per parent
directory of the Sets found, and tagged with the kind of storage they came
from.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import psutil

from octatools.core.constants import BOOT_MOUNT_PREFIXES
from octatools.core.models import (
    DeviceType,
    OctatrackLocation,
    OctatrackProject,
    OctatrackSet,
    ScanResult,
)
from octatools.discovery.classifier import is_system_path
from octatools.discovery.scanner import scan_for_sets
from octatools.utils.config import (
    DEFAULT_SCAN_DEPTH,
    HOME_SCAN_FOLDERS,
    OCTATRACK_FOLDER_NAMES,
)
from octatools.utils.file_utils import canonical_path, is_within

logger = logging.getLogger(__name__)

DEFAULT_LOCATION_NAME = "Local Copy"


def dedupe_projects(projects: list[OctatrackProject]) -> list[OctatrackProject]:
    """Drop repeated Projects by path, keeping the first."""
    seen: set[Path] = set()
    result: list[OctatrackProject] = []
    for project in projects:
        if project.path in seen:
            continue
        seen.add(project.path)
        result.append(project)
    return result


def drop_claimed_projects(
    projects: list[OctatrackProject],
    locations: list[OctatrackLocation],
) -> list[OctatrackProject]:
    """Drop Projects that lie inside a Set of ``locations``.

    One scan root can sit inside a Set found from another root, so its
    Projects show up as standalone there.
    """
    set_paths = [s.path for loc in locations for s in loc.sets]
    return [
        project for project in projects
        if not any(is_within(project.path, set_path) for set_path in set_paths)
    ]


def group_sets_by_parent(
    sets: list[OctatrackSet],
    standalone_projects: list[OctatrackProject],
    device_type: DeviceType = DeviceType.LOCAL_COPY,
) -> tuple[list[OctatrackLocation], list[OctatrackProject]]:
    """Group Sets into one Location per parent directory.

    Sets are deduplicated by path (first occurrence wins), standalone
    Projects likewise.
    """
    by_parent: dict[Path, list[OctatrackSet]] = {}
    seen: set[Path] = set()
    for octa_set in sets:
        if octa_set.path in seen:
            continue
        seen.add(octa_set.path)
        by_parent.setdefault(octa_set.path.parent, []).append(octa_set)

    locations = [
        OctatrackLocation(
            name=parent.name or DEFAULT_LOCATION_NAME,
            path=parent,
            device_type=device_type,
            sets=tuple(parent_sets),
        )
        for parent, parent_sets in by_parent.items()
    ]
    return locations, dedupe_projects(standalone_projects)


def merge_locations(
    existing: list[OctatrackLocation],
    new: list[OctatrackLocation],
) -> list[OctatrackLocation]:
    """Merge ``new`` into ``existing`` by Location path.

    A colliding Location keeps its name and device type and gains the new
    Sets it does not already hold.
    """
    merged: dict[Path, OctatrackLocation] = {loc.path: loc for loc in existing}
    for location in new:
        current = merged.get(location.path)
        if current is None:
            merged[location.path] = location
            continue
        known = {s.path for s in current.sets}
        extra = tuple(s for s in location.sets if s.path not in known)
        merged[location.path] = OctatrackLocation(
            name=current.name,
            path=current.path,
            device_type=current.device_type,
            sets=current.sets + extra,
        )
    return list(merged.values())


def scan_roots(
    roots: list[Path],
    device_type: DeviceType,
    max_depth: int = DEFAULT_SCAN_DEPTH,
    prefixes: list[str] | None = None,
) -> tuple[list[OctatrackLocation], list[OctatrackProject]]:
    """Scan several roots and group everything found under ``device_type``."""
    sets: list[OctatrackSet] = []
    standalone: list[OctatrackProject] = []
    for root in roots:
        root_sets, root_projects = scan_for_sets(root, max_depth, prefixes)
        sets.extend(root_sets)
        standalone.extend(root_projects)
    return group_sets_by_parent(sets, standalone, device_type)


def scan_directory(root: Path, max_depth: int = DEFAULT_SCAN_DEPTH) -> ScanResult:
    """Scan one user-chosen folder; everything found is a local copy."""
    locations, standalone = scan_roots([Path(root)], DeviceType.LOCAL_COPY, max_depth)
    return ScanResult(locations=tuple(locations), standalone_projects=tuple(standalone))


# ── Root enumeration ─────────────────────────────────────────────────────


def _is_excluded_mount(mount: Path, home: Path, prefixes: list[str] | None) -> bool:
    """Root, boot, system and home-holding mounts are never scanned as media."""
    if str(mount) == "/":
        return True
    if is_system_path(mount, prefixes) or is_system_path(mount, BOOT_MOUNT_PREFIXES):
        return True
    # home is scanned on its own; a mount holding it would count it twice
    return is_within(home, mount)


def list_volume_mounts(
    home: Path | None = None,
    prefixes: list[str] | None = None,
) -> list[Path]:
    """Mount points of volumes that may hold a CF card's contents."""
    home = canonical_path(home or Path.home())
    try:
        partitions = psutil.disk_partitions(all=False)
    except OSError as e:
        logger.warning("Could not list mounted volumes: %s", e)
        return []

    mounts: list[Path] = []
    for partition in partitions:
        if not partition.mountpoint:
            continue
        mount = Path(partition.mountpoint)
        if _is_excluded_mount(mount, home, prefixes):
            logger.debug("Skipping mount point %s", mount)
            continue
        if mount not in mounts:
            mounts.append(mount)
    return mounts


def home_scan_roots(home: Path | None = None) -> list[Path]:
    """Existing conventional home folders, each physical folder listed once."""
    home = home or Path.home()
    candidates = [home / name for name in HOME_SCAN_FOLDERS]
    candidates += [home / name for name in OCTATRACK_FOLDER_NAMES]
    candidates += [
        home / folder / name
        for folder in HOME_SCAN_FOLDERS
        for name in OCTATRACK_FOLDER_NAMES
    ]

    roots: list[Path] = []
    seen: set[tuple[int, int]] = set()
    for candidate in candidates:
        try:
            if not candidate.is_dir():
                continue
            stat = os.stat(candidate)
        except OSError:
            continue
        # case-insensitive filesystems report Octatrack/octatrack as one folder
        key = (stat.st_dev, stat.st_ino)
        if key in seen:
            continue
        seen.add(key)
        roots.append(candidate)
    return roots


def discover_devices(
    home: Path | None = None,
    max_depth: int = DEFAULT_SCAN_DEPTH,
    prefixes: list[str] | None = None,
) -> ScanResult:
    """Find Octatrack Sets on mounted volumes and in the user's home folders.

    Volumes are tagged as CF cards, home folders as local copies. A Location
    found by both passes keeps the volume tag and gains the Sets of the home
    pass.
    """
    home = home or Path.home()

    volume_locations, volume_projects = scan_roots(
        list_volume_mounts(home, prefixes), DeviceType.COMPACT_FLASH, max_depth, prefixes
    )
    home_locations, home_projects = scan_roots(
        home_scan_roots(home), DeviceType.LOCAL_COPY, max_depth, prefixes
    )

    locations = merge_locations(volume_locations, home_locations)
    standalone = drop_claimed_projects(
        dedupe_projects(volume_projects + home_projects), locations
    )
    logger.info(
        "Discovered %d locations and %d standalone projects",
        len(locations), len(standalone),
    )
    return ScanResult(locations=tuple(locations), standalone_projects=tuple(standalone))
