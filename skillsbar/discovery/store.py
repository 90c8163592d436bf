"""Discovery session: runs the coordinators and publishes immutable snapshots.

A refresh requested while another is running is dropped (``refresh`` returns
None); the running one is never cancelled.
"""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Dict, List, Optional

import structlog

from skillsbar.config.settings import Settings
from skillsbar.discovery.agents import AgentsDiscovery, AgentsDiscoveryOptions
from skillsbar.discovery.mcp import MCPDiscovery, MCPDiscoveryOptions
from skillsbar.discovery.paths import combine_project_paths
from skillsbar.discovery.skills import SkillsDiscovery, SkillsDiscoveryOptions
from skillsbar.models.agent_profile import AgentProfile
from skillsbar.models.mcp_server import MCPServer, MCPSource
from skillsbar.models.skill import Skill, SkillSource

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Result of one refresh."""

    skills: tuple[Skill, ...] = ()
    mcp_servers: tuple[MCPServer, ...] = ()
    agent_profiles: tuple[AgentProfile, ...] = ()
    project_paths: tuple[Path, ...] = ()
    refreshed_at: Optional[datetime] = None

    def skills_by_source(self) -> Dict[SkillSource, List[Skill]]:
        """Skills grouped by source, groups in display order."""
        grouped: Dict[SkillSource, List[Skill]] = {}
        for source in sorted(SkillSource, key=lambda s: s.sort_order):
            members = [skill for skill in self.skills if skill.source is source]
            if members:
                grouped[source] = members
        return grouped

    def mcp_servers_by_source(self) -> Dict[MCPSource, List[MCPServer]]:
        grouped: Dict[MCPSource, List[MCPServer]] = {}
        for source in sorted(MCPSource, key=lambda s: s.sort_order):
            members = [server for server in self.mcp_servers if server.source is source]
            if members:
                grouped[source] = members
        return grouped

    def skill(self, skill_id: str) -> Optional[Skill]:
        return next((skill for skill in self.skills if skill.id == skill_id), None)

    def search(self, query: str) -> List[Skill]:
        """Skills whose name or description contains ``query`` (case-insensitive)."""
        needle = query.strip().casefold()
        if not needle:
            return list(self.skills)
        return [
            skill
            for skill in self.skills
            if needle in skill.name.casefold() or needle in skill.description.casefold()
        ]

    def user_invocable_skills(self) -> List[Skill]:
        return [skill for skill in self.skills if skill.is_user_invocable]

    @property
    def skill_count(self) -> int:
        return len(self.skills)

    @property
    def enabled_skill_count(self) -> int:
        return sum(1 for skill in self.skills if skill.is_enabled)

    @property
    def mcp_server_count(self) -> int:
        return len(self.mcp_servers)

    @property
    def enabled_mcp_server_count(self) -> int:
        return sum(1 for server in self.mcp_servers if server.is_enabled)

    @property
    def agent_profile_count(self) -> int:
        return len(self.agent_profiles)


class SkillsStore:
    """Holds the latest snapshot and guards against overlapping refreshes."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._snapshot = Snapshot()
        self._refreshing = False

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def is_refreshing(self) -> bool:
        return self._refreshing

    def project_paths(self) -> List[Path]:
        """Configured project paths plus expanded recursive folders."""
        return combine_project_paths(
            self.settings.project_paths, self.settings.recursive_project_paths
        )

    def add_project_path(self, path: Path, recursive: bool = False) -> bool:
        """Add a project path to settings; takes effect on the next refresh."""
        return self.settings.add_project_path(path, recursive=recursive)

    def remove_project_path(self, path: Path) -> bool:
        return self.settings.remove_project_path(path)

    def _skills_options(self, project_paths: tuple[Path, ...]) -> SkillsDiscoveryOptions:
        return SkillsDiscoveryOptions(
            include_global=self.settings.show_global_skills,
            include_plugins=self.settings.show_plugin_skills,
            include_project=self.settings.show_project_skills,
            project_paths=project_paths,
        )

    def _mcp_options(self, project_paths: tuple[Path, ...]) -> MCPDiscoveryOptions:
        return MCPDiscoveryOptions(
            include_global=self.settings.show_global_mcps,
            include_project=self.settings.show_project_mcps,
            include_built_in=self.settings.show_builtin_mcps,
            include_plugins=self.settings.show_plugin_mcps,
            project_paths=project_paths,
        )

    def _agents_options(self, project_paths: tuple[Path, ...]) -> AgentsDiscoveryOptions:
        return AgentsDiscoveryOptions(
            include_global=self.settings.show_global_skills,
            include_plugins=self.settings.show_plugin_skills,
            include_project=self.settings.show_project_skills,
            project_paths=project_paths,
        )

    async def refresh(self) -> Optional[Snapshot]:
        """Run a full discovery pass.

        Returns:
            The new snapshot, or None if a refresh was already in flight
        """
        if self._refreshing:
            logger.debug("Refresh already in progress, dropping request")
            return None

        self._refreshing = True
        try:
            settings = self.settings
            project_paths = tuple(self.project_paths())
            timeout = settings.scanner_timeout

            skills, mcp_servers, agent_profiles = await asyncio.gather(
                SkillsDiscovery(
                    settings.home, settings.agents(), timeout
                ).discover_all(self._skills_options(project_paths)),
                MCPDiscovery(settings.home, scanner_timeout=timeout).discover_all(
                    self._mcp_options(project_paths)
                ),
                AgentsDiscovery(settings.home, scanner_timeout=timeout).discover_all(
                    self._agents_options(project_paths)
                ),
            )

            self._snapshot = Snapshot(
                skills=tuple(skills),
                mcp_servers=tuple(mcp_servers),
                agent_profiles=tuple(agent_profiles),
                project_paths=project_paths,
                refreshed_at=datetime.now(UTC),
            )
            logger.info(
                "Refresh complete",
                skills=self._snapshot.skill_count,
                mcp_servers=self._snapshot.mcp_server_count,
                agent_profiles=self._snapshot.agent_profile_count,
            )
            return self._snapshot
        finally:
            self._refreshing = False
