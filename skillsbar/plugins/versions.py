"""Plugin version directory selection.

Version directories under ``plugins/cache/<marketplace>/<plugin>/`` are named
either by semver tag or by commit hash. Semver wins when the highest-sorting
name looks like one; otherwise the most recently modified directory is used.
"""

import re
from functools import cmp_to_key
from pathlib import Path
from typing import List, Optional

import structlog

logger = structlog.get_logger(__name__)

MANIFEST_DIR = ".claude-plugin"
MANIFEST_FILES = ("plugin.json", "marketplace.json")

_SEMVER_PREFIX = re.compile(r"^\d+\.\d+\.\d+")
_LEADING_DIGITS = re.compile(r"^\d*")


def _numeric_components(version: str) -> List[int]:
    components = []
    for segment in version.split("."):
        digits = _LEADING_DIGITS.match(segment).group()  # type: ignore[union-attr]
        components.append(int(digits) if digits else 0)
    return components


def compare_semver(a: str, b: str) -> int:
    """Component-wise numeric comparison; returns -1, 0 or 1.

    Each segment is truncated to its leading digits and missing trailing
    components count as zero, so ``1.2`` == ``1.2.0`` and ``2.0.0-beta`` == ``2.0.0``.
    """
    left, right = _numeric_components(a), _numeric_components(b)
    width = max(len(left), len(right))
    left += [0] * (width - len(left))
    right += [0] * (width - len(right))
    return (left > right) - (left < right)


def looks_like_semver(name: str) -> bool:
    return bool(_SEMVER_PREFIX.match(name))


def _mtime(path: Path) -> float:
    try:
        return path.stat().st_mtime
    except OSError:
        return 0.0


def find_latest_version(plugin_dir: Path) -> Optional[Path]:
    """Pick the version directory to scan for a plugin.

    Args:
        plugin_dir: ``plugins/cache/<marketplace>/<plugin>``

    Returns:
        The chosen version directory, or None if there are none
    """
    try:
        children = [c for c in plugin_dir.iterdir() if not c.name.startswith(".")]
    except OSError as e:
        logger.debug("Cannot list plugin versions", path=str(plugin_dir), error=str(e))
        return None

    versions = []
    for child in children:
        try:
            if child.is_dir():
                versions.append(child)
        except OSError as e:
            logger.warning("Skipping unreadable version", path=str(child), error=str(e))

    if not versions:
        return None
    if len(versions) == 1:
        return versions[0]

    # Pre-sorting by name keeps equal versions (1.0.0 vs 1.0.0-beta) deterministic
    ordered = sorted(
        sorted(versions, key=lambda path: path.name),
        key=cmp_to_key(lambda a, b: compare_semver(a.name, b.name)),
        reverse=True,
    )
    if looks_like_semver(ordered[0].name):
        return ordered[0]

    # Commit-hash directories: newest on disk, name breaks ties
    return max(versions, key=lambda path: (_mtime(path), path.name))


def has_plugin_manifest(version_dir: Path) -> bool:
    """True if the directory contains ``.claude-plugin/plugin.json`` or ``marketplace.json``."""
    manifest_dir = version_dir / MANIFEST_DIR
    return any((manifest_dir / name).is_file() for name in MANIFEST_FILES)
