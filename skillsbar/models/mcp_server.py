"""MCP server records.

Only the key names of ``env`` and ``headers`` are kept; their values are
secrets and never reach a record.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .skill import PluginScope


class MCPTransport(str, Enum):
    HTTP = "http"
    SSE = "sse"
    STDIO = "stdio"

    @property
    def display_name(self) -> str:
        return "stdio" if self is MCPTransport.STDIO else self.value.upper()


class MCPSource(str, Enum):
    """Where an MCP server configuration came from."""

    GLOBAL = "global"
    PROJECT = "project"
    BUILT_IN = "builtIn"

    @property
    def display_name(self) -> str:
        return {"global": "Global", "project": "Project", "builtIn": "Built-in"}[
            self.value
        ]

    @property
    def sort_order(self) -> int:
        """Project first, then global, then built-in."""
        return {"project": 0, "global": 1, "builtIn": 2}[self.value]


@dataclass(frozen=True, eq=False)
class MCPServer:
    """A configured MCP server."""

    id: str
    name: str
    transport: MCPTransport
    source: MCPSource
    url: Optional[str] = None
    command: Optional[str] = None
    args: List[str] = field(default_factory=list)
    env_keys: List[str] = field(default_factory=list)
    header_keys: List[str] = field(default_factory=list)
    # Config file that declared the server (None for built-ins)
    path: Optional[Path] = None
    project_root: Optional[Path] = None
    project_name: Optional[str] = None
    plugin_name: Optional[str] = None
    marketplace_name: Optional[str] = None
    marketplace_repo: Optional[str] = None
    plugin_scope: Optional[PluginScope] = None
    is_enabled: bool = True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MCPServer):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def command_line(self) -> str:
        """Command plus arguments, for display."""
        return " ".join([self.command or "", *self.args]).strip()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "transport": self.transport.value,
            "source": self.source.value,
            "isEnabled": self.is_enabled,
        }
        if self.url:
            data["url"] = self.url
        if self.command:
            data["command"] = self.command
        if self.args:
            data["args"] = list(self.args)
        if self.env_keys:
            data["envKeys"] = list(self.env_keys)
        if self.header_keys:
            data["headerKeys"] = list(self.header_keys)
        if self.path:
            data["path"] = str(self.path)
        if self.project_name:
            data["projectName"] = self.project_name
        if self.project_root:
            data["projectRoot"] = str(self.project_root)
        if self.plugin_name:
            data["pluginName"] = self.plugin_name
        if self.marketplace_name:
            data["marketplaceName"] = self.marketplace_name
        if self.marketplace_repo:
            data["marketplaceRepo"] = self.marketplace_repo
        if self.plugin_scope:
            data["pluginScope"] = self.plugin_scope.value
        return data
