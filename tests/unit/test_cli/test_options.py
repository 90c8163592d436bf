"""Tests for CLI argument parsing and option translation."""

from pathlib import Path

import pytest

from skillsbar.cli.options import (
    OutputPreferences,
    effective_argv,
    mcp_options,
    parse_args,
    profiles_options,
    resolve_agents,
    skills_options,
)
from skillsbar.config.settings import Settings
from skillsbar.exceptions import UnknownAgentError


class TestEffectiveArgv:
    def test_default_command(self) -> None:
        assert effective_argv([]) == ["list"]
        assert effective_argv(["--json"]) == ["list", "--json"]

    def test_explicit_command_and_top_level_flags(self) -> None:
        assert effective_argv(["mcps", "--json"]) == ["mcps", "--json"]
        assert effective_argv(["--version"]) == ["--version"]
        assert effective_argv(["-h"]) == ["-h"]


class TestParseArgs:
    """Test the parser."""

    def test_list_flags(self, tmp_path: Path) -> None:
        args = parse_args(
            ["--agent", "claude", "--global", "--project", str(tmp_path), "--json"]
        )

        assert args.command == "list"
        assert args.agent == "claude"
        assert args.global_scope is True
        assert args.plugins is False
        assert args.project == [tmp_path]
        assert OutputPreferences.from_args(args).json_output is True

    def test_format_json_and_json_only(self) -> None:
        by_format = OutputPreferences.from_args(parse_args(["mcps", "--format", "json"]))
        only = OutputPreferences.from_args(parse_args(["profiles", "--json-only"]))

        assert by_format == OutputPreferences(json_output=True, json_only=False)
        assert only == OutputPreferences(json_output=True, json_only=True)

    def test_unknown_command_exits(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["frobnicate"])

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "skillsbar 1.0.0" in capsys.readouterr().out


class TestOptionTranslation:
    def test_no_filters_use_settings(self, tmp_path: Path) -> None:
        settings = Settings(
            project_paths=[tmp_path], show_plugin_skills=False, show_builtin_mcps=False
        )

        skills = skills_options(parse_args(["list"]), settings)
        mcps = mcp_options(parse_args(["mcps"]), settings)
        profiles = profiles_options(parse_args(["profiles"]), settings)

        assert skills.include_plugins is False
        assert skills.include_global is True
        assert skills.project_paths == (tmp_path,)
        assert mcps.include_built_in is False
        assert mcps.project_paths == (tmp_path,)
        assert profiles.project_paths == (tmp_path,)

    def test_filters_select_only_named_scopes(self, tmp_path: Path) -> None:
        settings = Settings(project_paths=[tmp_path / "configured"])

        skills = skills_options(parse_args(["list", "--plugins"]), settings)
        mcps = mcp_options(
            parse_args(["mcps", "--project", str(tmp_path / "cli")]), settings
        )

        assert (skills.include_global, skills.include_plugins, skills.include_project) == (
            False,
            True,
            False,
        )
        assert mcps.include_project is True
        assert mcps.include_global is False
        assert mcps.include_built_in is False
        assert mcps.project_paths == (tmp_path / "cli",)


class TestResolveAgents:
    def test_default_is_settings(self) -> None:
        agents = resolve_agents(parse_args(["list"]), Settings())

        assert [a.id for a in agents] == ["claude"]

    def test_unknown_agent(self) -> None:
        with pytest.raises(UnknownAgentError, match="Unknown agent: nope"):
            resolve_agents(parse_args(["list", "--agent", "nope"]), Settings())
