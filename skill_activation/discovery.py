"""Find SKILL.md files and map them to skill names."""

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Set

SKILL_FILE_NAME = "skill.md"
DEFAULT_ACTIVE_MARKER = "cache"


def default_content_roots(project_dir: Optional[str],
                          home: Optional[Path] = None,
                          extra: Iterable[Path] = ()) -> List[Path]:
    """Directories scanned for SKILL.md, in traversal order."""
    home = home if home is not None else Path.home()
    roots = []
    if project_dir:
        roots.append(Path(project_dir) / ".claude" / "skills")
    roots.append(home / ".claude" / "skills")
    roots.append(home / ".claude" / "plugins")
    roots.extend(extra)
    return roots


def iter_skill_files(root: Path, log: logging.Logger) -> Iterator[Path]:
    """
    Yield SKILL.md files under root, depth first, in sorted order.

    Uses an explicit stack instead of recursion. Directories or entries
    that cannot be read are skipped. Symlinked directories are followed;
    a directory whose real path was already walked is not entered again.
    """
    stack = [root]
    visited: Set[str] = set()
    while stack:
        directory = stack.pop()
        real = os.path.realpath(directory)
        if real in visited:
            log.debug("skipping already walked directory %s", directory)
            continue
        visited.add(real)
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            log.debug("skipping unreadable directory %s: %s", directory, e)
            continue

        subdirs = []
        for entry in entries:
            try:
                if entry.is_dir():
                    subdirs.append(Path(entry.path))
                elif entry.is_file() and entry.name.lower() == SKILL_FILE_NAME:
                    yield Path(entry.path)
            except OSError as e:
                log.debug("skipping %s: %s", entry.path, e)
        # Reversed so the alphabetically first directory is popped first
        stack.extend(reversed(subdirs))


def existing_roots(roots: Iterable[Path]) -> List[Path]:
    """Roots that are readable directories."""
    found = []
    for root in roots:
        try:
            if root.is_dir():
                found.append(root)
        except OSError:
            continue
    return found


def is_active(path: Path, root: Path, marker: str) -> bool:
    """True if a directory between root and the skill dir is the marker."""
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        parts = path.parts
    return marker in parts[:-2]


def discover_skill_sources(roots: Iterable[Path], log: logging.Logger,
                           active_marker: str = DEFAULT_ACTIVE_MARKER
                           ) -> Dict[str, Path]:
    """
    Map skill name (parent directory of SKILL.md) to its file.

    The first file found for a name wins, unless a later one lives under
    the active marker segment and the kept one does not.

    Args:
        roots: Directories to scan, in priority order; missing ones are
            ignored
        log: Debug logger
        active_marker: Path segment marking installed plugin content

    Returns:
        Dict of skill name -> SKILL.md path
    """
    sources: Dict[str, Path] = {}
    active: Set[str] = set()
    for root in existing_roots(roots):
        for skill_file in iter_skill_files(root, log):
            name = skill_file.parent.name
            current = sources.get(name)
            skill_active = is_active(skill_file, root, active_marker)
            if current is None:
                sources[name] = skill_file
                if skill_active:
                    active.add(name)
            elif skill_active and name not in active:
                log.debug("skill %s: preferring %s over %s", name,
                          skill_file, current)
                sources[name] = skill_file
                active.add(name)
    log.debug("discovered %d skill sources", len(sources))
    return sources
