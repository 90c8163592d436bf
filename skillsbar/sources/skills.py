"""Skill scanners.

- Global skills: ``~/<config_dir>/skills/<name>/SKILL.md``
- Project skills: ``<project>/<config_dir>/skills/<name>/SKILL.md``
- Plugin skills: ``~/<config_dir>/plugins/cache/<marketplace>/<plugin>/<version>/skills/``

Every scanner returns an empty list rather than raising; one unreadable
skill never hides its siblings.
"""

from pathlib import Path
from typing import List, Optional

import structlog

from skillsbar.models.agent import Agent
from skillsbar.models.ids import make_record_id, normalize_path
from skillsbar.models.skill import PluginScope, Skill, SkillSource
from skillsbar.parsers.frontmatter import parse_skill_file
from skillsbar.plugins.resolution import PluginIndex, load_plugin_index
from skillsbar.plugins.versions import find_latest_version, has_plugin_manifest

logger = structlog.get_logger(__name__)


def make_skill_id(
    agent: Agent,
    source: SkillSource,
    skill_dir: Path,
    plugin_name: Optional[str] = None,
    marketplace_name: Optional[str] = None,
    project_root: Optional[str] = None,
    plugin_scope: Optional[PluginScope] = None,
) -> str:
    return make_record_id(
        agent.id,
        source.value,
        marketplace_name,
        plugin_name,
        plugin_scope.value if plugin_scope else None,
        normalize_path(project_root) if project_root else None,
        skill_dir.name,
    )


def _visible_dirs(directory: Path) -> List[Path]:
    """Non-hidden subdirectories, sorted by name.

    Listing the directory itself may raise; an entry that cannot be
    stat'ed is skipped with a warning.
    """
    dirs = []
    for entry in directory.iterdir():
        if entry.name.startswith("."):
            continue
        try:
            if entry.is_dir():
                dirs.append(entry)
        except OSError as e:
            logger.warning("Skipping unreadable entry", path=str(entry), error=str(e))
    return sorted(dirs, key=lambda d: d.name)


def _plugin_skills_dir(plugin_dir: Path, plugin_key: str) -> Optional[Path]:
    """The ``skills/`` directory of a plugin's latest version, if it has one."""
    version_dir = find_latest_version(plugin_dir)
    if version_dir is None:
        logger.debug("No version directory for plugin", plugin=plugin_key)
        return None

    if not has_plugin_manifest(version_dir):
        logger.debug(
            "Plugin version missing manifest",
            plugin=plugin_key,
            version=version_dir.name,
        )
        return None

    skills_dir = version_dir / "skills"
    if not skills_dir.is_dir():
        logger.debug(
            "Plugin has no skills directory",
            plugin=plugin_key,
            version=version_dir.name,
        )
        return None

    return skills_dir


def scan_skills_dir(
    skills_dir: Path,
    agent: Agent,
    source: SkillSource,
    *,
    plugin_name: Optional[str] = None,
    marketplace_name: Optional[str] = None,
    marketplace_repo: Optional[str] = None,
    project_root: Optional[str] = None,
    plugin_scope: Optional[PluginScope] = None,
    is_enabled: bool = True,
) -> List[Skill]:
    """Scan direct children of a skills directory for skill files.

    Args:
        skills_dir: Directory containing skill subdirectories
        agent: Agent the skills belong to (decides the skill file name)
        source: Source bucket for discovered skills
        plugin_name: Owning plugin, for plugin skills
        marketplace_name: Plugin's marketplace, for plugin skills
        marketplace_repo: Marketplace source repo, if known
        project_root: Project the skills belong to (project skills and
            project/local plugin installs)
        plugin_scope: Scope the plugin was installed at
        is_enabled: Enablement to stamp on every skill

    Returns:
        List of discovered skills
    """
    skills: List[Skill] = []

    try:
        candidates = _visible_dirs(skills_dir)
    except OSError as e:
        if skills_dir.exists():
            logger.warning(
                "Failed to read skills directory", path=str(skills_dir), error=str(e)
            )
        else:
            logger.debug("Skills directory not found", path=str(skills_dir))
        return skills

    root = Path(normalize_path(project_root)) if project_root else None

    for skill_dir in candidates:
        skill_file = skill_dir / agent.skill_file_name

        try:
            if not skill_file.is_file():
                continue
            parsed = parse_skill_file(skill_file)
        except OSError as e:
            logger.warning(
                "Failed to read skill file", path=str(skill_file), error=str(e)
            )
            continue

        skills.append(
            Skill(
                id=make_skill_id(
                    agent,
                    source,
                    skill_dir,
                    plugin_name=plugin_name,
                    marketplace_name=marketplace_name,
                    project_root=project_root,
                    plugin_scope=plugin_scope,
                ),
                name=parsed.name,
                description=parsed.description,
                agent_id=agent.id,
                source=source,
                path=skill_dir,
                skill_file_name=agent.skill_file_name,
                plugin_name=plugin_name,
                marketplace_name=marketplace_name,
                marketplace_repo=marketplace_repo,
                project_root=root,
                plugin_scope=plugin_scope,
                metadata=parsed.metadata,
                is_enabled=is_enabled,
            )
        )

    logger.debug(
        "Scanned skills directory",
        path=str(skills_dir),
        source=source.value,
        count=len(skills),
    )
    return skills


def discover_global_skills(agent: Agent, home: Path) -> List[Skill]:
    return scan_skills_dir(agent.global_skills_path(home), agent, SkillSource.GLOBAL)


def discover_project_skills(agent: Agent, project_root: Path) -> List[Skill]:
    return scan_skills_dir(
        agent.project_skills_path(project_root),
        agent,
        SkillSource.PROJECT,
        project_root=str(project_root),
    )


def discover_plugin_skills(
    agent: Agent,
    home: Path,
    index: Optional[PluginIndex] = None,
) -> List[Skill]:
    """Discover skills from every cached plugin, enabled or not.

    Each plugin directory contributes its latest version. When
    installed_plugins.json has entries for that version, one set of skills is
    produced per install (scope, project and enablement come from the
    install). Otherwise enablement comes from the user settings map, where a
    plugin that is not listed counts as disabled.

    Args:
        agent: Agent whose plugin cache to scan
        home: Home directory
        index: Pre-resolved plugin index (read from disk when omitted)

    Returns:
        Skills from all plugins; disabled plugins yield ``is_enabled=False``
    """
    cache_path = agent.plugins_cache_path(home)
    if cache_path is None:
        logger.debug("Agent does not support plugins", agent=agent.id)
        return []
    if not cache_path.is_dir():
        logger.debug("Plugins cache directory not found", path=str(cache_path))
        return []

    if index is None:
        index = load_plugin_index(agent, home)

    skills: List[Skill] = []

    try:
        marketplaces = _visible_dirs(cache_path)
    except OSError as e:
        logger.warning("Failed to list plugins cache", path=str(cache_path), error=str(e))
        return []

    for marketplace_dir in marketplaces:
        marketplace_name = marketplace_dir.name
        marketplace_repo = index.marketplace_repos.get(marketplace_name)

        try:
            plugin_dirs = _visible_dirs(marketplace_dir)
        except OSError as e:
            logger.warning(
                "Failed to list marketplace directory",
                marketplace=marketplace_name,
                error=str(e),
            )
            continue

        for plugin_dir in plugin_dirs:
            plugin_name = plugin_dir.name
            plugin_key = f"{plugin_name}@{marketplace_name}"

            try:
                skills_dir = _plugin_skills_dir(plugin_dir, plugin_key)
            except OSError as e:
                logger.warning(
                    "Failed to read plugin directory", plugin=plugin_key, error=str(e)
                )
                continue
            if skills_dir is None:
                continue

            installs = index.installs_at(normalize_path(skills_dir.parent))
            if installs:
                for install in installs:
                    skills.extend(
                        scan_skills_dir(
                            skills_dir,
                            agent,
                            SkillSource.PLUGIN,
                            plugin_name=plugin_name,
                            marketplace_name=marketplace_name,
                            marketplace_repo=marketplace_repo,
                            project_root=install.project_path,
                            plugin_scope=install.scope,
                            is_enabled=install.is_enabled,
                        )
                    )
            else:
                skills.extend(
                    scan_skills_dir(
                        skills_dir,
                        agent,
                        SkillSource.PLUGIN,
                        plugin_name=plugin_name,
                        marketplace_name=marketplace_name,
                        marketplace_repo=marketplace_repo,
                        is_enabled=index.global_enabled.get(plugin_key, False),
                    )
                )

    logger.debug("Discovered plugin skills", agent=agent.id, count=len(skills))
    return skills
