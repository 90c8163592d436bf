"""Decoders for MCP server configuration.

Two file shapes carry MCP servers:
- ``~/.claude.json``: top-level ``mcpServers`` plus ``projects[<path>]`` blocks
  with their own ``mcpServers`` and disable lists
- ``.mcp.json`` (project root or plugin install): ``{"mcpServers": {...}}``,
  or for plugins sometimes the bare ``{name: entry}`` map

Only key names of ``env`` and ``headers`` survive decoding.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional

import structlog

from skillsbar.models.ids import normalize_path
from skillsbar.models.mcp_server import MCPTransport

logger = structlog.get_logger(__name__)

_EXPLICIT_TRANSPORTS = {t.value: t for t in MCPTransport}


@dataclass(frozen=True)
class MCPServerEntry:
    """One decoded server declaration, secrets already stripped."""

    name: str
    transport: MCPTransport
    url: Optional[str] = None
    command: Optional[str] = None
    args: List[str] = field(default_factory=list)
    env_keys: List[str] = field(default_factory=list)
    header_keys: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProjectMCPConfig:
    """The ``projects[<path>]`` block of ``~/.claude.json``."""

    mcp_servers: Dict[str, MCPServerEntry] = field(default_factory=dict)
    disabled_mcp_servers: FrozenSet[str] = frozenset()
    disabled_mcpjson_servers: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class GlobalClaudeConfig:
    """The parts of ``~/.claude.json`` that describe MCP servers."""

    mcp_servers: Dict[str, MCPServerEntry] = field(default_factory=dict)
    # Keyed by normalized absolute project path
    projects: Dict[str, ProjectMCPConfig] = field(default_factory=dict)
    claude_in_chrome_default_enabled: bool = False

    def project(self, project_root: str) -> Optional[ProjectMCPConfig]:
        return self.projects.get(normalize_path(project_root))


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _key_names(value: Any) -> List[str]:
    if not isinstance(value, dict):
        return []
    return sorted(str(key) for key in value)


def _string_set(value: Any) -> FrozenSet[str]:
    if not isinstance(value, list):
        return frozenset()
    return frozenset(item for item in value if isinstance(item, str))


def resolve_transport(raw: Dict[str, Any]) -> Optional[MCPTransport]:
    """Explicit ``type`` first, then ``command`` => stdio, then ``url`` => http."""
    explicit = raw.get("type")
    if isinstance(explicit, str) and explicit.lower() in _EXPLICIT_TRANSPORTS:
        return _EXPLICIT_TRANSPORTS[explicit.lower()]
    if _optional_str(raw.get("command")):
        return MCPTransport.STDIO
    if _optional_str(raw.get("url")):
        return MCPTransport.HTTP
    return None


def parse_server_entry(name: str, raw: Any) -> Optional[MCPServerEntry]:
    """Decode one server; None (with a warning) when it cannot be used."""
    if not isinstance(raw, dict):
        logger.warning("Skipping malformed MCP server entry", server=name)
        return None

    transport = resolve_transport(raw)
    if transport is None:
        logger.warning(
            "Skipping MCP server without type, command or url", server=name
        )
        return None

    raw_args = raw.get("args")
    args = (
        [arg for arg in raw_args if isinstance(arg, str)]
        if isinstance(raw_args, list)
        else []
    )

    return MCPServerEntry(
        name=name,
        transport=transport,
        url=_optional_str(raw.get("url")),
        command=_optional_str(raw.get("command")),
        args=args,
        env_keys=_key_names(raw.get("env")),
        header_keys=_key_names(raw.get("headers")),
    )


def parse_server_map(raw: Any) -> Dict[str, MCPServerEntry]:
    """Decode a ``{name: entry}`` map, dropping unusable entries."""
    if not isinstance(raw, dict):
        return {}

    servers: Dict[str, MCPServerEntry] = {}
    for name in sorted(raw):
        entry = parse_server_entry(str(name), raw[name])
        if entry is not None:
            servers[entry.name] = entry
    return servers


def parse_project_config(raw: Any) -> ProjectMCPConfig:
    if not isinstance(raw, dict):
        return ProjectMCPConfig()
    return ProjectMCPConfig(
        mcp_servers=parse_server_map(raw.get("mcpServers")),
        disabled_mcp_servers=_string_set(raw.get("disabledMcpServers")),
        disabled_mcpjson_servers=_string_set(raw.get("disabledMcpjsonServers")),
    )


def parse_global_config(data: Any) -> GlobalClaudeConfig:
    """Decode a parsed ``~/.claude.json`` document.

    Args:
        data: Result of ``json.loads`` on the file

    Returns:
        GlobalClaudeConfig; a non-object document yields an empty config
    """
    if not isinstance(data, dict):
        logger.warning("Global Claude config is not a JSON object")
        return GlobalClaudeConfig()

    projects: Dict[str, ProjectMCPConfig] = {}
    raw_projects = data.get("projects")
    if isinstance(raw_projects, dict):
        for project_path, raw_project in raw_projects.items():
            projects[normalize_path(project_path)] = parse_project_config(raw_project)

    return GlobalClaudeConfig(
        mcp_servers=parse_server_map(data.get("mcpServers")),
        projects=projects,
        claude_in_chrome_default_enabled=data.get("claudeInChromeDefaultEnabled")
        is True,
    )


def parse_mcp_json(data: Any) -> Dict[str, MCPServerEntry]:
    """Decode a ``.mcp.json`` document (wrapped or bare server map)."""
    if not isinstance(data, dict):
        logger.warning(".mcp.json is not a JSON object")
        return {}
    if isinstance(data.get("mcpServers"), dict):
        return parse_server_map(data["mcpServers"])
    return parse_server_map(data)
