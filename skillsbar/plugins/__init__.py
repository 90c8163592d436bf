"""Plugin install resolution and version selection."""

from .resolution import (
    EnablementCache,
    PluginIndex,
    ResolvedInstall,
    load_plugin_index,
    resolve_installs,
)
from .versions import (
    compare_semver,
    find_latest_version,
    has_plugin_manifest,
    looks_like_semver,
)

__all__ = [
    "EnablementCache",
    "PluginIndex",
    "ResolvedInstall",
    "compare_semver",
    "find_latest_version",
    "has_plugin_manifest",
    "load_plugin_index",
    "looks_like_semver",
    "resolve_installs",
]
