"""Command-line parsing and translation into discovery options."""

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from skillsbar import __version__
from skillsbar.config.settings import Settings
from skillsbar.discovery.agents import AgentsDiscoveryOptions
from skillsbar.discovery.mcp import MCPDiscoveryOptions
from skillsbar.discovery.paths import combine_project_paths
from skillsbar.discovery.skills import SkillsDiscoveryOptions
from skillsbar.exceptions import UnknownAgentError
from skillsbar.models.agent import Agent, get_agent

COMMANDS = ("list", "mcps", "profiles", "agents")
DEFAULT_COMMAND = "list"
_TOP_LEVEL_FLAGS = ("-h", "--help", "-V", "--version")

EPILOG = """\
examples:
  skillsbar list
  skillsbar list --agent claude
  skillsbar list --project /path/to/project
  skillsbar list --json
  skillsbar agents
  skillsbar mcps --project /path/to/project
  skillsbar profiles --plugins
"""


@dataclass(frozen=True)
class OutputPreferences:
    json_output: bool = False
    # Suppress everything except the JSON document
    json_only: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "OutputPreferences":
        json_only = bool(getattr(args, "json_only", False))
        json_output = (
            json_only
            or bool(getattr(args, "json_output", False))
            or getattr(args, "format", "text") == "json"
        )
        return cls(json_output=json_output, json_only=json_only)


def effective_argv(argv: Sequence[str]) -> List[str]:
    """Insert the default command when none is given."""
    if not argv:
        return [DEFAULT_COMMAND]
    if argv[0] in _TOP_LEVEL_FLAGS:
        return list(argv)
    if argv[0].startswith("-"):
        return [DEFAULT_COMMAND, *argv]
    return list(argv)


def _common_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--json", dest="json_output", action="store_true", help="Output as JSON"
    )
    common.add_argument(
        "--json-only",
        action="store_true",
        help="Output JSON only (suppress log output)",
    )
    common.add_argument(
        "--format", choices=("text", "json"), default="text", help="Output format"
    )
    common.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    common.add_argument("--config-file", type=Path, help="Path to settings file")
    common.add_argument("--home", type=Path, help="Home directory to scan")
    return common


def _add_project_option(parser: argparse.ArgumentParser, what: str) -> None:
    parser.add_argument(
        "--project",
        action="append",
        type=Path,
        metavar="PATH",
        help=f"Include project {what} from PATH (repeatable)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skillsbar",
        description="Discover skills, MCP servers and agent profiles for AI coding agents",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"skillsbar {__version__}"
    )

    common = _common_options()
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    list_parser = subparsers.add_parser(
        "list", parents=[common], help="List discovered skills (default)"
    )
    list_parser.add_argument("--agent", help='Filter by agent id (e.g. "claude")')
    list_parser.add_argument(
        "--global", dest="global_scope", action="store_true", help="Include global skills"
    )
    list_parser.add_argument(
        "--plugins", action="store_true", help="Include plugin skills"
    )
    _add_project_option(list_parser, "skills")

    mcps_parser = subparsers.add_parser(
        "mcps", parents=[common], help="List discovered MCP servers"
    )
    mcps_parser.add_argument(
        "--global", dest="global_scope", action="store_true", help="Include global MCPs"
    )
    mcps_parser.add_argument(
        "--builtin", action="store_true", help="Include built-in MCPs"
    )
    mcps_parser.add_argument(
        "--plugins", action="store_true", help="Include plugin-provided MCPs"
    )
    _add_project_option(mcps_parser, "MCPs")

    profiles_parser = subparsers.add_parser(
        "profiles", parents=[common], help="List agent profiles"
    )
    profiles_parser.add_argument(
        "--global",
        dest="global_scope",
        action="store_true",
        help="Include global agent profiles",
    )
    profiles_parser.add_argument(
        "--plugins", action="store_true", help="Include plugin agent profiles"
    )
    _add_project_option(profiles_parser, "agent profiles")

    subparsers.add_parser("agents", parents=[common], help="List supported agents")

    return parser


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    return build_parser().parse_args(effective_argv(argv))


def _explicit_projects(args: argparse.Namespace) -> List[Path]:
    return combine_project_paths(getattr(args, "project", None) or [])


def _configured_projects(settings: Settings) -> tuple[Path, ...]:
    return tuple(
        combine_project_paths(settings.project_paths, settings.recursive_project_paths)
    )


def resolve_agents(args: argparse.Namespace, settings: Settings) -> List[Agent]:
    """``--agent`` if given, else the agents enabled in settings.

    Raises:
        UnknownAgentError: if ``--agent`` names no known agent
    """
    agent_id: Optional[str] = getattr(args, "agent", None)
    if agent_id is None:
        return settings.agents()
    agent = get_agent(agent_id)
    if agent is None:
        raise UnknownAgentError(agent_id)
    return [agent]


def skills_options(args: argparse.Namespace, settings: Settings) -> SkillsDiscoveryOptions:
    """With any of --global/--plugins/--project only those scopes are scanned."""
    projects = _explicit_projects(args)
    if args.global_scope or args.plugins or projects:
        return SkillsDiscoveryOptions(
            include_global=args.global_scope,
            include_plugins=args.plugins,
            include_project=bool(projects),
            project_paths=tuple(projects),
        )
    return SkillsDiscoveryOptions(
        include_global=settings.show_global_skills,
        include_plugins=settings.show_plugin_skills,
        include_project=settings.show_project_skills,
        project_paths=_configured_projects(settings),
    )


def mcp_options(args: argparse.Namespace, settings: Settings) -> MCPDiscoveryOptions:
    projects = _explicit_projects(args)
    if args.global_scope or args.builtin or args.plugins or projects:
        return MCPDiscoveryOptions(
            include_global=args.global_scope,
            include_project=bool(projects),
            include_built_in=args.builtin,
            include_plugins=args.plugins,
            project_paths=tuple(projects),
        )
    return MCPDiscoveryOptions(
        include_global=settings.show_global_mcps,
        include_project=settings.show_project_mcps,
        include_built_in=settings.show_builtin_mcps,
        include_plugins=settings.show_plugin_mcps,
        project_paths=_configured_projects(settings),
    )


def profiles_options(
    args: argparse.Namespace, settings: Settings
) -> AgentsDiscoveryOptions:
    projects = _explicit_projects(args)
    if args.global_scope or args.plugins or projects:
        return AgentsDiscoveryOptions(
            include_global=args.global_scope,
            include_plugins=args.plugins,
            include_project=bool(projects),
            project_paths=tuple(projects),
        )
    return AgentsDiscoveryOptions(project_paths=_configured_projects(settings))
