"""Tests for the CLI entry point."""

import json
import locale
import logging
from pathlib import Path
from typing import Iterator, List

import pytest
import structlog

from skillsbar.cli.render import (
    render_agents_text,
    render_mcps_text,
    render_skills_text,
    shorten_marketplace,
    truncate,
)
from skillsbar.main import configure_locale, main
from skillsbar.models.mcp_server import MCPServer, MCPSource, MCPTransport
from skillsbar.models.skill import Skill, SkillSource


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("SKILLSBAR_CONFIG", "SKILLSBAR_HOME", "SKILLSBAR_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    yield
    # main() binds the root handler to the captured stderr
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


def _argv(fake_home, *args: str) -> List[str]:
    return [
        *args,
        "--home",
        str(fake_home.root),
        "--config-file",
        str(fake_home.root / "no-config.yaml"),
    ]


class TestMain:
    """Test main() exit codes and output streams."""

    @pytest.mark.asyncio
    async def test_list_json(self, fake_home, capsys: pytest.CaptureFixture[str]) -> None:
        fake_home.add_global_skill("deploy", description="Ship it")

        code = await main(_argv(fake_home, "list", "--json-only"))

        captured = capsys.readouterr()
        assert code == 0
        payload = json.loads(captured.out)
        assert [skill["name"] for skill in payload] == ["deploy"]
        assert payload[0]["source"] == "global"
        assert captured.err == ""

    @pytest.mark.asyncio
    async def test_default_command_text(
        self, fake_home, capsys: pytest.CaptureFixture[str]
    ) -> None:
        fake_home.add_global_skill("deploy", description="Ship it")

        code = await main(_argv(fake_home))

        out = capsys.readouterr().out
        assert code == 0
        assert "Global Skills (1):" in out
        assert "Total: 1 skills (1 enabled)" in out

    @pytest.mark.asyncio
    async def test_unknown_agent(self, fake_home, capsys: pytest.CaptureFixture[str]) -> None:
        code = await main(_argv(fake_home, "list", "--agent", "x"))

        captured = capsys.readouterr()
        assert code == 1
        assert "Error: Unknown agent: x" in captured.err
        assert captured.out == ""

    @pytest.mark.asyncio
    async def test_error_as_json(self, fake_home, capsys: pytest.CaptureFixture[str]) -> None:
        code = await main(_argv(fake_home, "list", "--agent", "x", "--json-only"))

        captured = capsys.readouterr()
        assert code == 1
        assert json.loads(captured.err) == {"error": "Unknown agent: x"}

    @pytest.mark.asyncio
    async def test_invalid_config_file(
        self, fake_home, capsys: pytest.CaptureFixture[str]
    ) -> None:
        config = fake_home.root / "config.yaml"
        config.write_text("scanner_timeout: -1\n")

        code = await main(
            ["list", "--home", str(fake_home.root), "--config-file", str(config)]
        )

        assert code == 1
        assert "scanner_timeout" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_mcps_json(self, fake_home, capsys: pytest.CaptureFixture[str]) -> None:
        fake_home.write_claude_json(
            {"mcpServers": {"gh": {"command": "gh", "env": {"TOKEN": "secret-value"}}}}
        )

        code = await main(_argv(fake_home, "mcps", "--global", "--json"))

        out = capsys.readouterr().out
        assert code == 0
        assert json.loads(out) == [
            {
                "id": "mcp:global:gh",
                "name": "gh",
                "transport": "stdio",
                "source": "global",
                "isEnabled": True,
                "command": "gh",
                "envKeys": ["TOKEN"],
                "path": str(fake_home.root / ".claude.json"),
            }
        ]
        assert "secret-value" not in out

    @pytest.mark.asyncio
    async def test_agents_json(self, fake_home, capsys: pytest.CaptureFixture[str]) -> None:
        code = await main(_argv(fake_home, "agents", "--json"))

        agents = json.loads(capsys.readouterr().out)
        assert code == 0
        assert agents[0]["id"] == "claude"
        assert agents[0]["status"] == "active"


class TestConfigureLocale:
    def test_collation_follows_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []
        monkeypatch.setattr(
            locale, "setlocale", lambda category, value=None: calls.append((category, value))
        )

        configure_locale()

        assert calls == [(locale.LC_COLLATE, "")]

    def test_unsupported_locale_is_tolerated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def unsupported(category, value=None):
            raise locale.Error("unsupported locale setting")

        monkeypatch.setattr(locale, "setlocale", unsupported)

        configure_locale()


class TestRender:
    def test_shorten_marketplace(self) -> None:
        assert shorten_marketplace("claude-plugins-official") == "official"
        assert shorten_marketplace("claude-code-plugins") == "cc-plugins"
        assert shorten_marketplace("acme-marketplace") == "acme"

    def test_truncate(self) -> None:
        assert truncate("abc", 5) == "abc"
        assert truncate("abcdef", 3) == "abc..."

    def test_empty_outputs(self) -> None:
        assert render_skills_text([]) == "No skills found."
        assert render_mcps_text([]) == "No MCP servers found."

    def test_plugin_skill_label(self) -> None:
        skill = Skill(
            id="id",
            name="brainstorm",
            description="",
            agent_id="claude",
            source=SkillSource.PLUGIN,
            path=Path("/p"),
            marketplace_name="claude-plugins-official",
            is_enabled=False,
        )

        text = render_skills_text([skill])

        assert "○ brainstorm @official" in text
        assert "Total: 1 skills (0 enabled)" in text

    def test_project_mcps_grouped_by_project(self) -> None:
        servers = [
            MCPServer(
                id=f"mcp:project:{project}:db",
                name="db",
                transport=MCPTransport.HTTP,
                source=MCPSource.PROJECT,
                url="https://db",
                project_name=project,
            )
            for project in ("web", "api")
        ]

        text = render_mcps_text(servers)

        assert text.index("Project MCPs: api (1):") < text.index("Project MCPs: web (1):")
        assert "[HTTP]" in text

    def test_agents_text(self) -> None:
        text = render_agents_text()

        assert text.startswith("Supported Agents:")
        assert "Claude Code (claude)" in text
        assert "Coming Soon:" in text
