"""Main entry point for the skillsbar CLI."""

import argparse
import asyncio
import locale
import logging
import sys
from typing import Any, List, Optional, Sequence

import structlog

from skillsbar import __version__
from skillsbar.cli.options import (
    OutputPreferences,
    mcp_options,
    parse_args,
    profiles_options,
    resolve_agents,
    skills_options,
)
from skillsbar.cli.render import (
    records_to_json,
    render_agents_json,
    render_agents_text,
    render_json,
    render_mcps_text,
    render_profiles_text,
    render_skills_text,
)
from skillsbar.config.settings import Settings, load_config
from skillsbar.discovery.agents import AgentsDiscovery
from skillsbar.discovery.mcp import MCPDiscovery
from skillsbar.discovery.skills import SkillsDiscovery
from skillsbar.exceptions import SkillsBarError


def setup_logging(
    verbose: bool = False, json_output: bool = False, quiet: bool = False
) -> None:
    """Configure structured logging.

    Routes ALL log output (structlog and stdlib) through the same
    processor chain. Logs go to stderr so stdout carries only command
    output: JSON lines alongside ``--json``, coloured console otherwise.
    """
    if quiet:
        level = logging.CRITICAL + 1
    else:
        level = logging.DEBUG if verbose else logging.ERROR

    shared_processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    # Rendering happens once, in the handler's formatter
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def configure_locale() -> None:
    """Adopt the user's collation order for name sorting."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        structlog.get_logger().debug("Keeping C collation", error=str(e))


def load_settings(args: argparse.Namespace) -> Settings:
    settings = load_config(config_file=args.config_file)
    if args.home is not None:
        settings.home = args.home.expanduser()
    return settings


async def execute(args: argparse.Namespace, settings: Settings) -> str:
    """Run the selected command and return its rendered output."""
    as_json = OutputPreferences.from_args(args).json_output
    timeout = settings.scanner_timeout

    if args.command == "agents":
        return render_agents_json() if as_json else render_agents_text()

    if args.command == "mcps":
        servers = await MCPDiscovery(settings.home, scanner_timeout=timeout).discover_all(
            mcp_options(args, settings)
        )
        return records_to_json(servers) if as_json else render_mcps_text(servers)

    if args.command == "profiles":
        profiles = await AgentsDiscovery(
            settings.home, scanner_timeout=timeout
        ).discover_all(profiles_options(args, settings))
        return records_to_json(profiles) if as_json else render_profiles_text(profiles)

    agents = resolve_agents(args, settings)
    skills = await SkillsDiscovery(settings.home, agents, timeout).discover_all(
        skills_options(args, settings)
    )
    return records_to_json(skills) if as_json else render_skills_text(skills)


def emit_error(message: str, output: OutputPreferences) -> None:
    if output.json_output:
        print(render_json({"error": message}), file=sys.stderr)
    else:
        print(f"Error: {message}", file=sys.stderr)


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main application entry point; returns the process exit code."""
    argv = list(sys.argv[1:] if argv is None else argv)
    args = parse_args(argv)
    output = OutputPreferences.from_args(args)
    setup_logging(
        verbose=args.verbose, json_output=output.json_output, quiet=output.json_only
    )

    logger = structlog.get_logger()
    logger.debug("Starting skillsbar", version=__version__, command=args.command)

    try:
        settings = load_settings(args)
        if settings.debug and not args.verbose and not output.json_only:
            setup_logging(verbose=True, json_output=output.json_output)

        print(await execute(args, settings))
        return 0

    except SkillsBarError as e:
        logger.debug("Command failed", error=str(e))
        emit_error(str(e), output)
        return 1
    except Exception as e:
        logger.exception("Unexpected error", error=str(e))
        emit_error(str(e), output)
        return 1


def run() -> None:
    """Synchronous entry point for the console script."""
    configure_locale()
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
