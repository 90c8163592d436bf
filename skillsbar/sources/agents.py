"""Agent profile scanners.

Agent profiles are markdown files directly inside an ``agents/`` directory:
``~/.claude/agents/*.md``, ``<project>/.claude/agents/*.md`` and
``<installPath>/agents/*.md`` for installed plugins.
"""

from pathlib import Path
from typing import Iterable, List, Optional

import structlog

from skillsbar.models.agent import Agent
from skillsbar.models.agent_profile import AgentProfile
from skillsbar.models.ids import make_record_id, normalize_path
from skillsbar.models.skill import PluginScope, SkillSource
from skillsbar.parsers.frontmatter import parse_agent_file
from skillsbar.plugins.resolution import PluginIndex, ResolvedInstall, load_plugin_index

logger = structlog.get_logger(__name__)


def make_agent_profile_id(
    source: SkillSource,
    agent_file: Path,
    project_root: Optional[str] = None,
    install: Optional[ResolvedInstall] = None,
) -> str:
    root = normalize_path(project_root) if project_root else None
    if install is None:
        return make_record_id("agent", source.value, root, agent_file.name)
    return make_record_id(
        "agent",
        source.value,
        "plugin",
        install.marketplace_name,
        install.plugin_name,
        install.scope.value,
        root,
        agent_file.name,
    )


def scan_agents_dir(
    agents_dir: Path,
    source: SkillSource,
    *,
    project_root: Optional[str] = None,
    install: Optional[ResolvedInstall] = None,
) -> List[AgentProfile]:
    """Parse every ``*.md`` file directly inside an agents directory.

    Args:
        agents_dir: The ``agents/`` directory
        source: Source bucket for the profiles
        project_root: Owning project, if any
        install: Plugin install the directory belongs to, if any

    Returns:
        Profiles; unreadable files are skipped with a warning
    """
    try:
        if not agents_dir.is_dir():
            logger.debug("Agents directory not found", path=str(agents_dir))
            return []
        candidates = sorted(
            f for f in agents_dir.glob("*.md") if not f.name.startswith(".")
        )
    except OSError as e:
        logger.warning(
            "Failed to read agents directory", path=str(agents_dir), error=str(e)
        )
        return []

    root = Path(normalize_path(project_root)) if project_root else None
    profiles: List[AgentProfile] = []

    for agent_file in candidates:
        try:
            if not agent_file.is_file():
                continue
            parsed = parse_agent_file(agent_file)
        except OSError as e:
            logger.warning(
                "Failed to read agent profile", path=str(agent_file), error=str(e)
            )
            continue

        profiles.append(
            AgentProfile(
                id=make_agent_profile_id(source, agent_file, project_root, install),
                name=parsed.name,
                description=parsed.description,
                source=source,
                path=agent_file,
                model=parsed.model,
                tools=list(parsed.tools),
                plugin_name=install.plugin_name if install else None,
                marketplace_name=install.marketplace_name if install else None,
                marketplace_repo=install.marketplace_repo if install else None,
                project_root=root,
                plugin_scope=install.scope if install else None,
                is_enabled=install.is_enabled if install else True,
            )
        )

    return profiles


def discover_global_agent_profiles(agent: Agent, home: Path) -> List[AgentProfile]:
    return scan_agents_dir(agent.global_agents_path(home), SkillSource.GLOBAL)


def discover_project_agent_profiles(
    agent: Agent, project_root: Path
) -> List[AgentProfile]:
    return scan_agents_dir(
        agent.project_agents_path(project_root),
        SkillSource.PROJECT,
        project_root=str(project_root),
    )


def discover_plugin_agent_profiles(
    agent: Agent,
    home: Path,
    *,
    include_global: bool,
    include_project: bool,
    project_paths: Iterable[Path] = (),
    index: Optional[PluginIndex] = None,
) -> List[AgentProfile]:
    """Agent profiles shipped by installed plugins.

    User-scope installs count as global; project and local installs count as
    project profiles and are only reported for the requested project paths.
    """
    if agent.plugins_path(home) is None:
        return []

    if index is None:
        index = load_plugin_index(agent, home)

    requested = {normalize_path(p) for p in project_paths}
    profiles: List[AgentProfile] = []

    for install in index.all_installs():
        if install.scope is PluginScope.USER:
            if not include_global:
                continue
            source = SkillSource.GLOBAL
        else:
            if not include_project or install.project_path not in requested:
                continue
            source = SkillSource.PROJECT

        profiles.extend(
            scan_agents_dir(
                Path(install.install_path) / "agents",
                source,
                project_root=install.project_path,
                install=install,
            )
        )

    logger.debug("Discovered plugin agent profiles", agent=agent.id, count=len(profiles))
    return profiles
