"""Skills discovery coordinator."""

from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import structlog

from skillsbar.discovery.fanout import ScannerTask, fan_out
from skillsbar.models.agent import Agent, default_agent
from skillsbar.models.skill import Skill
from skillsbar.sources.skills import (
    discover_global_skills,
    discover_plugin_skills,
    discover_project_skills,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SkillsDiscoveryOptions:
    """Which scopes to scan."""

    include_global: bool = True
    include_plugins: bool = True
    include_project: bool = True
    project_paths: tuple[Path, ...] = ()


class SkillsDiscovery:
    """Discovers skills for a set of agents across all scopes.

    Each call to ``discover_all`` builds its own scanner tasks and plugin
    caches; nothing is shared between calls.
    """

    def __init__(
        self,
        home: Optional[Path] = None,
        agents: Optional[Iterable[Agent]] = None,
        scanner_timeout: Optional[float] = None,
    ) -> None:
        self.home = home or Path.home()
        self.agents: Sequence[Agent] = (
            list(agents) if agents is not None else [default_agent()]
        )
        self.scanner_timeout = scanner_timeout

    def build_tasks(self, options: SkillsDiscoveryOptions) -> List[ScannerTask]:
        # Snapshot the agent list so it cannot change mid-pass
        agents = tuple(self.agents)
        tasks: List[ScannerTask] = []

        for agent in agents:
            if options.include_global:
                tasks.append(
                    ScannerTask(
                        f"{agent.id}:global-skills",
                        partial(discover_global_skills, agent, self.home),
                    )
                )
            if options.include_plugins and agent.supports_plugins:
                tasks.append(
                    ScannerTask(
                        f"{agent.id}:plugin-skills",
                        partial(discover_plugin_skills, agent, self.home),
                    )
                )
            if options.include_project:
                for project_path in options.project_paths:
                    tasks.append(
                        ScannerTask(
                            f"{agent.id}:project-skills:{project_path}",
                            partial(discover_project_skills, agent, project_path),
                        )
                    )

        return tasks

    async def discover_all(
        self, options: Optional[SkillsDiscoveryOptions] = None
    ) -> List[Skill]:
        """Discover skills from every requested scope.

        Returns:
            Skills deduplicated by id, ordered project, plugin, global and
            then by name
        """
        options = options or SkillsDiscoveryOptions()
        logger.info(
            "Discovering skills",
            agents=[agent.id for agent in self.agents],
            include_global=options.include_global,
            include_plugins=options.include_plugins,
            include_project=options.include_project,
            projects=len(options.project_paths),
        )

        skills = await fan_out(
            self.build_tasks(options), timeout=self.scanner_timeout, kind="skill"
        )

        logger.info(
            "Skill discovery complete",
            total=len(skills),
            enabled=sum(1 for skill in skills if skill.is_enabled),
        )
        return skills
