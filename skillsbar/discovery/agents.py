"""Agent profile discovery coordinator."""

from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import List, Optional

import structlog

from skillsbar.discovery.fanout import ScannerTask, fan_out
from skillsbar.models.agent import Agent, default_agent
from skillsbar.models.agent_profile import AgentProfile
from skillsbar.sources.agents import (
    discover_global_agent_profiles,
    discover_plugin_agent_profiles,
    discover_project_agent_profiles,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AgentsDiscoveryOptions:
    include_global: bool = True
    include_plugins: bool = True
    include_project: bool = True
    project_paths: tuple[Path, ...] = ()


class AgentsDiscovery:
    """Discovers agent profiles from agents directories and plugins."""

    def __init__(
        self,
        home: Optional[Path] = None,
        agent: Optional[Agent] = None,
        scanner_timeout: Optional[float] = None,
    ) -> None:
        self.home = home or Path.home()
        self.agent = agent or default_agent()
        self.scanner_timeout = scanner_timeout

    def build_tasks(self, options: AgentsDiscoveryOptions) -> List[ScannerTask]:
        agent, home = self.agent, self.home
        tasks: List[ScannerTask] = []

        if options.include_global:
            tasks.append(
                ScannerTask(
                    "global-agents", partial(discover_global_agent_profiles, agent, home)
                )
            )
        if options.include_plugins:
            # Plugin-only requests still show user-scope installs
            plugin_user_scope = options.include_global or not options.include_project
            tasks.append(
                ScannerTask(
                    "plugin-agents",
                    partial(
                        discover_plugin_agent_profiles,
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
                        f"project-agents:{project_path}",
                        partial(discover_project_agent_profiles, agent, project_path),
                    )
                )

        return tasks

    async def discover_all(
        self, options: Optional[AgentsDiscoveryOptions] = None
    ) -> List[AgentProfile]:
        options = options or AgentsDiscoveryOptions()
        logger.info(
            "Discovering agent profiles",
            include_global=options.include_global,
            include_plugins=options.include_plugins,
            include_project=options.include_project,
            projects=len(options.project_paths),
        )

        profiles = await fan_out(
            self.build_tasks(options), timeout=self.scanner_timeout, kind="agent"
        )

        logger.info("Agent profile discovery complete", total=len(profiles))
        return profiles
