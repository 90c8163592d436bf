"""MCP server discovery coordinator."""

from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import List, Optional

import structlog

from skillsbar.discovery.fanout import ScannerTask, fan_out
from skillsbar.models.agent import Agent, default_agent
from skillsbar.models.mcp_server import MCPServer
from skillsbar.sources.mcp import (
    discover_built_in_mcp_servers,
    discover_global_mcp_servers,
    discover_plugin_mcp_servers,
    discover_project_mcp_servers,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MCPDiscoveryOptions:
    include_global: bool = True
    include_project: bool = True
    include_built_in: bool = True
    include_plugins: bool = True
    project_paths: tuple[Path, ...] = ()


class MCPDiscovery:
    """Discovers MCP servers configured for an agent (Claude Code by default)."""

    def __init__(
        self,
        home: Optional[Path] = None,
        agent: Optional[Agent] = None,
        scanner_timeout: Optional[float] = None,
    ) -> None:
        self.home = home or Path.home()
        self.agent = agent or default_agent()
        self.scanner_timeout = scanner_timeout

    def build_tasks(self, options: MCPDiscoveryOptions) -> List[ScannerTask]:
        agent, home = self.agent, self.home
        tasks: List[ScannerTask] = []

        if options.include_global:
            tasks.append(
                ScannerTask(
                    "global-mcp", partial(discover_global_mcp_servers, agent, home)
                )
            )
        if options.include_built_in:
            tasks.append(
                ScannerTask(
                    "built-in-mcp", partial(discover_built_in_mcp_servers, agent, home)
                )
            )
        if options.include_plugins:
            # Plugin-only requests still show user-scope installs
            plugin_user_scope = options.include_global or not options.include_project
            tasks.append(
                ScannerTask(
                    "plugin-mcp",
                    partial(
                        discover_plugin_mcp_servers,
                        agent,
                        home,
                        include_global=plugin_user_scope,
                        include_project=options.include_project,
                        project_paths=options.project_paths,
                    ),
                )
            )
        if options.include_project:
            for project_path in options.project_paths:
                tasks.append(
                    ScannerTask(
                        f"project-mcp:{project_path}",
                        partial(discover_project_mcp_servers, agent, home, [project_path]),
                    )
                )

        return tasks

    async def discover_all(
        self, options: Optional[MCPDiscoveryOptions] = None
    ) -> List[MCPServer]:
        """Discover MCP servers, ordered project, global, built-in and then by name."""
        options = options or MCPDiscoveryOptions()
        logger.info(
            "Discovering MCP servers",
            include_global=options.include_global,
            include_project=options.include_project,
            include_built_in=options.include_built_in,
            include_plugins=options.include_plugins,
            projects=len(options.project_paths),
        )

        servers = await fan_out(
            self.build_tasks(options), timeout=self.scanner_timeout, kind="mcp"
        )

        logger.info(
            "MCP discovery complete",
            total=len(servers),
            enabled=sum(1 for server in servers if server.is_enabled),
        )
        return servers
