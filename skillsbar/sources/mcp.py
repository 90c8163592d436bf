"""MCP server scanners.

- Global: ``~/.claude.json`` top-level ``mcpServers``
- Project: ``~/.claude.json`` ``projects[<path>].mcpServers``, then
  ``<project>/.mcp.json`` for names not already registered there
- Built-in: servers Claude Code creates at runtime (``claude-in-chrome``)
- Plugin: ``<installPath>/.mcp.json`` of every installed plugin
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional

import structlog

from skillsbar.config.claude_files import file_exists, read_global_config, read_mcp_json
from skillsbar.models.agent import Agent
from skillsbar.models.ids import make_record_id, normalize_path
from skillsbar.models.mcp_server import MCPServer, MCPSource, MCPTransport
from skillsbar.models.skill import PluginScope
from skillsbar.parsers.mcp_config import MCPServerEntry
from skillsbar.plugins.resolution import PluginIndex, ResolvedInstall, load_plugin_index

logger = structlog.get_logger(__name__)

MCP_JSON = ".mcp.json"

CLAUDE_IN_CHROME = "claude-in-chrome"
CLAUDE_IN_CHROME_COMMAND = "claude"
CLAUDE_IN_CHROME_ARGS = ("--claude-in-chrome-mcp",)


def make_mcp_id(
    source: MCPSource,
    name: str,
    project_root: Optional[str] = None,
    install: Optional[ResolvedInstall] = None,
) -> str:
    root = normalize_path(project_root) if project_root else None
    if install is None:
        return make_record_id("mcp", source.value, root, name)
    return make_record_id(
        "mcp",
        source.value,
        root,
        "plugin",
        install.marketplace_name,
        install.plugin_name,
        install.scope.value,
        name,
    )


def _make_server(
    entry: MCPServerEntry,
    source: MCPSource,
    path: Path,
    project_root: Optional[str] = None,
    is_enabled: bool = True,
    install: Optional[ResolvedInstall] = None,
) -> MCPServer:
    root = Path(normalize_path(project_root)) if project_root else None
    return MCPServer(
        id=make_mcp_id(source, entry.name, project_root, install),
        name=entry.name,
        transport=entry.transport,
        source=source,
        url=entry.url,
        command=entry.command,
        args=list(entry.args),
        env_keys=list(entry.env_keys),
        header_keys=list(entry.header_keys),
        path=path,
        project_root=root,
        project_name=root.name if root else None,
        plugin_name=install.plugin_name if install else None,
        marketplace_name=install.marketplace_name if install else None,
        marketplace_repo=install.marketplace_repo if install else None,
        plugin_scope=install.scope if install else None,
        is_enabled=is_enabled,
    )


def discover_global_mcp_servers(agent: Agent, home: Path) -> List[MCPServer]:
    config_path = agent.global_config_path(home)
    config = read_global_config(config_path)
    if config is None:
        return []

    servers = [
        _make_server(entry, MCPSource.GLOBAL, config_path)
        for entry in config.mcp_servers.values()
    ]
    logger.debug("Discovered global MCP servers", count=len(servers))
    return servers


def discover_project_mcp_servers(
    agent: Agent, home: Path, project_paths: Iterable[Path]
) -> List[MCPServer]:
    """Project MCP servers for each project path.

    Servers registered for the project in ``~/.claude.json`` win; a
    ``.mcp.json`` server is added only when its id is not already present.
    """
    config_path = agent.global_config_path(home)
    config = read_global_config(config_path)

    servers: List[MCPServer] = []
    seen_ids = set()

    for project_path in project_paths:
        project_root = normalize_path(project_path)
        project_config = config.project(project_root) if config else None

        if project_config is not None:
            for entry in project_config.mcp_servers.values():
                server = _make_server(
                    entry,
                    MCPSource.PROJECT,
                    config_path,
                    project_root=project_root,
                    is_enabled=entry.name not in project_config.disabled_mcp_servers,
                )
                if server.id not in seen_ids:
                    seen_ids.add(server.id)
                    servers.append(server)

        mcp_json = Path(project_root) / MCP_JSON
        if not file_exists(mcp_json):
            continue

        disabled = project_config.disabled_mcpjson_servers if project_config else frozenset()
        for entry in read_mcp_json(mcp_json).values():
            server = _make_server(
                entry,
                MCPSource.PROJECT,
                mcp_json,
                project_root=project_root,
                is_enabled=entry.name not in disabled,
            )
            if server.id in seen_ids:
                logger.debug(
                    "Skipping .mcp.json server already registered for project",
                    server=entry.name,
                    project=project_root,
                )
                continue
            seen_ids.add(server.id)
            servers.append(server)

    logger.debug("Discovered project MCP servers", count=len(servers))
    return servers


def discover_built_in_mcp_servers(agent: Agent, home: Path) -> List[MCPServer]:
    """Built-in servers; only reported when ``~/.claude.json`` exists."""
    config = read_global_config(agent.global_config_path(home))
    if config is None:
        return []

    return [
        MCPServer(
            id=make_record_id("mcp", MCPSource.BUILT_IN.value, CLAUDE_IN_CHROME),
            name=CLAUDE_IN_CHROME,
            transport=MCPTransport.STDIO,
            source=MCPSource.BUILT_IN,
            command=CLAUDE_IN_CHROME_COMMAND,
            args=list(CLAUDE_IN_CHROME_ARGS),
            is_enabled=config.claude_in_chrome_default_enabled,
        )
    ]


def discover_plugin_mcp_servers(
    agent: Agent,
    home: Path,
    *,
    include_global: bool,
    include_project: bool,
    project_paths: Iterable[Path] = (),
    index: Optional[PluginIndex] = None,
) -> List[MCPServer]:
    """MCP servers shipped by installed plugins.

    User-scope installs are reported as global servers. Project and local
    installs are reported as project servers, and only for the requested
    project paths.
    """
    if agent.plugins_path(home) is None:
        return []

    if index is None:
        index = load_plugin_index(agent, home)

    requested = {normalize_path(p) for p in project_paths}
    servers: List[MCPServer] = []

    for install in index.all_installs():
        if install.scope is PluginScope.USER:
            if not include_global:
                continue
            source = MCPSource.GLOBAL
        else:
            if not include_project or install.project_path not in requested:
                continue
            source = MCPSource.PROJECT

        mcp_json = Path(install.install_path) / MCP_JSON
        if not file_exists(mcp_json):
            continue

        entries: Dict[str, MCPServerEntry] = read_mcp_json(mcp_json)
        for entry in entries.values():
            servers.append(
                _make_server(
                    entry,
                    source,
                    mcp_json,
                    project_root=install.project_path,
                    is_enabled=install.is_enabled,
                    install=install,
                )
            )

    logger.debug("Discovered plugin MCP servers", agent=agent.id, count=len(servers))
    return servers
