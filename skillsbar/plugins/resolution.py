"""Plugin resolution: which installed plugin versions are enabled, and where.

Each install entry in ``installed_plugins.json`` is resolved against the
settings file of the scope that installed it:

- ``user``: ``~/.claude/settings.json``
- ``project``: ``<project>/.claude/settings.json``
- ``local``: ``<project>/.claude/settings.local.json``

Project and local settings are read lazily and cached for one discovery
pass. Nothing here is shared between passes.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import structlog

from skillsbar.config.claude_files import (
    InstallEntry,
    InstalledPluginsManifest,
    read_enabled_plugins,
    read_installed_plugins,
    read_marketplace_repos,
)
from skillsbar.models.agent import Agent
from skillsbar.models.skill import PluginScope

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ResolvedInstall:
    """An install entry with its effective enablement and provenance."""

    plugin_key: str
    plugin_name: str
    marketplace_name: str
    scope: PluginScope
    install_path: str
    is_enabled: bool
    project_path: Optional[str] = None
    last_updated: Optional[datetime] = None
    marketplace_repo: Optional[str] = None


class EnablementCache:
    """Project and local ``enabledPlugins`` maps, read once per project."""

    def __init__(self, agent: Agent) -> None:
        self._agent = agent
        self._maps: Dict[tuple[PluginScope, str], Dict[str, bool]] = {}

    def for_project(self, scope: PluginScope, project_path: str) -> Dict[str, bool]:
        cache_key = (scope, project_path)
        if cache_key in self._maps:
            return self._maps[cache_key]

        root = Path(project_path)
        if scope is PluginScope.LOCAL:
            settings_json = self._agent.project_local_settings_path(root)
        else:
            settings_json = self._agent.project_settings_path(root)

        enabled = read_enabled_plugins(settings_json)
        self._maps[cache_key] = enabled
        return enabled

    def __len__(self) -> int:
        return len(self._maps)


def enablement_map_for(
    entry: InstallEntry,
    global_enabled: Dict[str, bool],
    settings_cache: EnablementCache,
) -> Dict[str, bool]:
    """The enabledPlugins map that governs one install entry."""
    if entry.scope is PluginScope.USER:
        return global_enabled
    if entry.project_path is None:
        logger.debug(
            "Project-scoped install without projectPath",
            plugin=entry.plugin_key,
            scope=entry.scope.value,
        )
        return {}
    return settings_cache.for_project(entry.scope, entry.project_path)


def resolve_installs(
    manifest: InstalledPluginsManifest,
    global_enabled: Dict[str, bool],
    marketplace_repos: Dict[str, str],
    settings_cache: EnablementCache,
) -> Dict[str, List[ResolvedInstall]]:
    """Resolve every install entry, grouped by normalized install path.

    A key missing from the governing map counts as enabled. Entries sharing
    an install path (same version installed at several scopes) are kept as
    separate installs.
    """
    resolved: Dict[str, List[ResolvedInstall]] = {}

    for entry in manifest.entries():
        enabled_map = enablement_map_for(entry, global_enabled, settings_cache)
        install = ResolvedInstall(
            plugin_key=entry.plugin_key,
            plugin_name=entry.plugin_name,
            marketplace_name=entry.marketplace_name,
            scope=entry.scope,
            install_path=entry.install_path,
            is_enabled=enabled_map.get(entry.plugin_key, True),
            project_path=entry.project_path,
            last_updated=entry.last_updated,
            marketplace_repo=marketplace_repos.get(entry.marketplace_name),
        )
        resolved.setdefault(entry.install_path, []).append(install)

    return resolved


@dataclass
class PluginIndex:
    """Everything a plugin scanner needs for one discovery pass."""

    global_enabled: Dict[str, bool] = field(default_factory=dict)
    marketplace_repos: Dict[str, str] = field(default_factory=dict)
    installs: Dict[str, List[ResolvedInstall]] = field(default_factory=dict)

    def installs_at(self, install_path: str) -> List[ResolvedInstall]:
        return self.installs.get(install_path, [])

    def all_installs(self) -> List[ResolvedInstall]:
        return [
            install
            for install_path in sorted(self.installs)
            for install in self.installs[install_path]
        ]


def load_plugin_index(agent: Agent, home: Path) -> PluginIndex:
    """Read the plugin manifests for an agent and resolve every install.

    Args:
        agent: Agent whose config directory holds the plugin files
        home: Home directory containing the agent's config directory

    Returns:
        PluginIndex (empty when the agent has no plugin support)
    """
    installed_plugins_json = agent.installed_plugins_path(home)
    known_marketplaces_json = agent.known_marketplaces_path(home)
    if installed_plugins_json is None or known_marketplaces_json is None:
        return PluginIndex()

    global_enabled = read_enabled_plugins(agent.settings_path(home))
    marketplace_repos = read_marketplace_repos(known_marketplaces_json)
    manifest = read_installed_plugins(installed_plugins_json)

    installs = resolve_installs(
        manifest,
        global_enabled,
        marketplace_repos,
        EnablementCache(agent),
    )

    logger.debug(
        "Resolved plugin installs",
        agent=agent.id,
        installs=sum(len(group) for group in installs.values()),
    )

    return PluginIndex(
        global_enabled=global_enabled,
        marketplace_repos=marketplace_repos,
        installs=installs,
    )
