"""Typed readers for the JSON files Claude Code keeps on disk.

- ``settings.json`` / ``settings.local.json``: ``enabledPlugins`` map
- ``plugins/installed_plugins.json``: install entries per plugin key
- ``plugins/known_marketplaces.json``: marketplace name -> source repo
- ``~/.claude.json`` and ``.mcp.json``: MCP servers (decoded by
  ``skillsbar.parsers.mcp_config``)

A missing file is a normal state and reads as empty. Malformed files are
logged at warning level and also read as empty.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import structlog

from skillsbar.models.ids import normalize_path
from skillsbar.models.skill import PluginScope
from skillsbar.parsers.mcp_config import (
    GlobalClaudeConfig,
    MCPServerEntry,
    parse_global_config,
    parse_mcp_json,
)

logger = structlog.get_logger(__name__)


def file_exists(path: Path) -> bool:
    """``path.is_file()``, treating a failed stat as a missing file."""
    try:
        return path.is_file()
    except OSError as e:
        logger.warning("Cannot stat file", path=str(path), error=str(e))
        return False


def read_json_file(path: Path) -> Optional[Any]:
    """Load a JSON document, or None if absent or unreadable."""
    if not file_exists(path):
        logger.debug("Config file not found", path=str(path))
        return None

    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        logger.warning("Failed to read JSON file", path=str(path), error=str(e))
        return None


def split_plugin_key(plugin_key: str) -> tuple[str, str]:
    """Split ``"plugin@marketplace"`` on the first ``@``.

    >>> split_plugin_key("superpowers@claude-plugins-official")
    ('superpowers', 'claude-plugins-official')
    >>> split_plugin_key("standalone")
    ('standalone', '')
    """
    plugin_name, _, marketplace_name = plugin_key.partition("@")
    return plugin_name, marketplace_name


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.debug("Unparseable plugin timestamp", value=value)
        return None


def parse_enabled_plugins(data: Any) -> Dict[str, bool]:
    if not isinstance(data, dict):
        return {}
    enabled = data.get("enabledPlugins")
    if not isinstance(enabled, dict):
        return {}
    return {key: value for key, value in enabled.items() if isinstance(value, bool)}


def read_enabled_plugins(settings_json: Path) -> Dict[str, bool]:
    """Read the enabledPlugins map from a settings file.

    Args:
        settings_json: ``settings.json`` or ``settings.local.json``

    Returns:
        Dict mapping plugin keys to enabled status (empty if unavailable)
    """
    return parse_enabled_plugins(read_json_file(settings_json))


@dataclass(frozen=True)
class InstallEntry:
    """One install of a plugin, as recorded in installed_plugins.json."""

    plugin_key: str
    scope: PluginScope
    install_path: str
    project_path: Optional[str] = None
    version: Optional[str] = None
    last_updated: Optional[datetime] = None

    @property
    def plugin_name(self) -> str:
        return split_plugin_key(self.plugin_key)[0]

    @property
    def marketplace_name(self) -> str:
        return split_plugin_key(self.plugin_key)[1]


@dataclass(frozen=True)
class InstalledPluginsManifest:
    version: Optional[int] = None
    plugins: Dict[str, List[InstallEntry]] = field(default_factory=dict)

    def entries(self) -> Iterator[InstallEntry]:
        for plugin_key in sorted(self.plugins):
            yield from self.plugins[plugin_key]


def _parse_install_entry(plugin_key: str, raw: Any) -> Optional[InstallEntry]:
    if not isinstance(raw, dict):
        logger.warning("Skipping malformed install entry", plugin=plugin_key)
        return None

    install_path = raw.get("installPath")
    if not isinstance(install_path, str) or not install_path:
        logger.warning("Install entry has no installPath", plugin=plugin_key)
        return None

    try:
        scope = PluginScope(raw.get("scope", PluginScope.USER.value))
    except ValueError:
        logger.warning(
            "Skipping install entry with unknown scope",
            plugin=plugin_key,
            scope=raw.get("scope"),
        )
        return None

    project_path = raw.get("projectPath")
    version = raw.get("version")

    return InstallEntry(
        plugin_key=plugin_key,
        scope=scope,
        install_path=normalize_path(install_path),
        project_path=(
            normalize_path(project_path)
            if isinstance(project_path, str) and project_path
            else None
        ),
        version=version if isinstance(version, str) else None,
        last_updated=parse_timestamp(raw.get("lastUpdated")),
    )


def parse_installed_plugins(data: Any) -> InstalledPluginsManifest:
    if not isinstance(data, dict):
        return InstalledPluginsManifest()

    raw_plugins = data.get("plugins")
    if not isinstance(raw_plugins, dict):
        return InstalledPluginsManifest()

    plugins: Dict[str, List[InstallEntry]] = {}
    for plugin_key, installations in raw_plugins.items():
        # Version 1 manifests store a single install object per key
        if isinstance(installations, dict):
            installations = [installations]
        if not isinstance(installations, list):
            logger.warning("Skipping malformed plugin installs", plugin=plugin_key)
            continue

        entries = [
            entry
            for entry in (_parse_install_entry(plugin_key, raw) for raw in installations)
            if entry is not None
        ]
        if entries:
            plugins[plugin_key] = entries

    version = data.get("version")
    return InstalledPluginsManifest(
        version=version if isinstance(version, int) else None,
        plugins=plugins,
    )


def read_installed_plugins(plugins_json: Path) -> InstalledPluginsManifest:
    return parse_installed_plugins(read_json_file(plugins_json))


def parse_marketplace_repos(data: Any) -> Dict[str, str]:
    """Map marketplace name to its source repo (``owner/name`` or URL)."""
    if not isinstance(data, dict):
        return {}

    repos: Dict[str, str] = {}
    for name, raw in data.items():
        if not isinstance(raw, dict):
            continue
        source = raw.get("source")
        if not isinstance(source, dict):
            continue
        repo = source.get("repo") or source.get("url")
        if isinstance(repo, str) and repo:
            repos[name] = repo
    return repos


def read_marketplace_repos(known_marketplaces_json: Path) -> Dict[str, str]:
    return parse_marketplace_repos(read_json_file(known_marketplaces_json))


def read_global_config(claude_json: Path) -> Optional[GlobalClaudeConfig]:
    """Read ``~/.claude.json``; None when the file does not exist."""
    if not file_exists(claude_json):
        logger.debug("Global Claude config not found", path=str(claude_json))
        return None
    data = read_json_file(claude_json)
    if data is None:
        return GlobalClaudeConfig()
    return parse_global_config(data)


def read_mcp_json(mcp_json: Path) -> Dict[str, MCPServerEntry]:
    data = read_json_file(mcp_json)
    if data is None:
        return {}
    return parse_mcp_json(data)
