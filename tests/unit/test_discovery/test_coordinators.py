"""Tests for the skills, MCP and agent profile coordinators."""

from pathlib import Path

import pytest

from skillsbar.discovery.agents import AgentsDiscovery, AgentsDiscoveryOptions
from skillsbar.discovery.mcp import MCPDiscovery, MCPDiscoveryOptions
from skillsbar.discovery.skills import SkillsDiscovery, SkillsDiscoveryOptions
from skillsbar.models.agent import CLAUDE_CODE, get_agent
from skillsbar.models.ids import record_sort_key
from skillsbar.models.mcp_server import MCPSource
from skillsbar.models.skill import SkillSource


@pytest.fixture
def populated_home(fake_home, project: Path):
    fake_home.add_global_skill("zeta", description="global z")
    fake_home.add_global_skill("alpha", description="global a")
    fake_home.add_project_skill(project, "beta", description="project b")
    plugin = fake_home.add_plugin(
        "m",
        "tool",
        skills=["gamma"],
        agents={"helper.md": "Helps."},
        mcp={"plug": {"command": "plug"}},
    )
    fake_home.install("tool@m", plugin)
    fake_home.add_agent_file(fake_home.claude_dir / "agents", "global.md", "Global.")
    fake_home.write_claude_json(
        {
            "mcpServers": {"g": {"command": "g"}},
            "projects": {str(project): {"mcpServers": {"p": {"command": "p"}}}},
        }
    )
    return fake_home


class TestSkillsDiscovery:
    """Test SkillsDiscovery."""

    @pytest.mark.asyncio
    async def test_all_scopes_in_order(self, populated_home, project: Path) -> None:
        discovery = SkillsDiscovery(populated_home.root, [CLAUDE_CODE])

        skills = await discovery.discover_all(
            SkillsDiscoveryOptions(project_paths=(project,))
        )

        assert [(s.source, s.name) for s in skills] == [
            (SkillSource.PROJECT, "beta"),
            (SkillSource.PLUGIN, "gamma"),
            (SkillSource.GLOBAL, "alpha"),
            (SkillSource.GLOBAL, "zeta"),
        ]
        assert skills == sorted(skills, key=record_sort_key)
        assert len({s.id for s in skills}) == len(skills)

    @pytest.mark.asyncio
    async def test_repeated_runs_are_identical(self, populated_home, project: Path) -> None:
        discovery = SkillsDiscovery(populated_home.root, [CLAUDE_CODE])
        options = SkillsDiscoveryOptions(project_paths=(project,))

        first = await discovery.discover_all(options)
        second = await discovery.discover_all(options)

        assert [s.to_dict() for s in first] == [s.to_dict() for s in second]

    @pytest.mark.asyncio
    async def test_scopes_can_be_disabled(self, populated_home, project: Path) -> None:
        discovery = SkillsDiscovery(populated_home.root, [CLAUDE_CODE])

        skills = await discovery.discover_all(
            SkillsDiscoveryOptions(
                include_global=False,
                include_plugins=True,
                include_project=False,
                project_paths=(project,),
            )
        )

        assert [s.name for s in skills] == ["gamma"]

    def test_no_plugin_task_without_plugin_support(self, tmp_path: Path) -> None:
        cursor = get_agent("cursor")
        assert cursor is not None

        tasks = SkillsDiscovery(tmp_path, [cursor]).build_tasks(SkillsDiscoveryOptions())

        assert [t.name for t in tasks] == ["cursor:global-skills"]

    @pytest.mark.asyncio
    async def test_empty_home(self, fake_home) -> None:
        assert await SkillsDiscovery(fake_home.root).discover_all() == []


class TestMCPDiscovery:
    @pytest.mark.asyncio
    async def test_all_sources(self, populated_home, project: Path) -> None:
        servers = await MCPDiscovery(populated_home.root).discover_all(
            MCPDiscoveryOptions(project_paths=(project,))
        )

        assert [(s.source, s.name) for s in servers] == [
            (MCPSource.PROJECT, "p"),
            (MCPSource.GLOBAL, "g"),
            (MCPSource.GLOBAL, "plug"),
            (MCPSource.BUILT_IN, "claude-in-chrome"),
        ]

    @pytest.mark.asyncio
    async def test_plugins_only_still_shows_user_installs(self, populated_home) -> None:
        servers = await MCPDiscovery(populated_home.root).discover_all(
            MCPDiscoveryOptions(
                include_global=False,
                include_project=False,
                include_built_in=False,
                include_plugins=True,
            )
        )

        assert [s.name for s in servers] == ["plug"]


class TestAgentsDiscovery:
    @pytest.mark.asyncio
    async def test_global_and_plugin_profiles(self, populated_home) -> None:
        profiles = await AgentsDiscovery(populated_home.root).discover_all(
            AgentsDiscoveryOptions()
        )

        assert sorted(p.name for p in profiles) == ["global", "helper"]
        assert all(p.source == SkillSource.GLOBAL for p in profiles)
