"""Project path helpers."""

from pathlib import Path
from typing import Iterable, List, Optional

import structlog

from skillsbar.models.ids import normalize_path

logger = structlog.get_logger(__name__)


def list_visible_children(directory: Path) -> List[Path]:
    """List child directories, skipping dot-directories and unreadable entries."""
    try:
        entries = [d for d in directory.iterdir() if not d.name.startswith(".")]
    except OSError:
        return []

    children = []
    for entry in entries:
        try:
            if entry.is_dir():
                children.append(entry)
        except OSError as e:
            logger.warning("Skipping unreadable entry", path=str(entry), error=str(e))
    return sorted(children, key=lambda d: d.name)


def expand_recursive_paths(recursive_paths: Iterable[Path]) -> List[Path]:
    """Expand parent folders (e.g. ``~/code``) to their immediate subfolders.

    Missing or unreadable parents are skipped.
    """
    expanded: List[Path] = []
    for parent in recursive_paths:
        expanded.extend(list_visible_children(parent.expanduser()))
    return expanded


def subfolder_count(parent: Path) -> int:
    return len(list_visible_children(parent.expanduser()))


def covered_by_recursive(
    folder: Path, recursive_paths: Iterable[Path]
) -> Optional[Path]:
    """The recursive parent that already covers ``folder``, if any."""
    folder_path = Path(normalize_path(folder))
    for recursive_path in recursive_paths:
        if folder_path.parent == Path(normalize_path(recursive_path)):
            return recursive_path
    return None


def combine_project_paths(
    project_paths: Iterable[Path], recursive_paths: Iterable[Path] = ()
) -> List[Path]:
    """Direct and expanded project paths, normalized, deduplicated and sorted."""
    combined = {
        normalize_path(path)
        for path in [*project_paths, *expand_recursive_paths(recursive_paths)]
    }
    return [Path(path) for path in sorted(combined)]
