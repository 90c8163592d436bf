"""Command-line surface: argument parsing and output rendering."""

from .options import (
    OutputPreferences,
    build_parser,
    effective_argv,
    mcp_options,
    parse_args,
    profiles_options,
    resolve_agents,
    skills_options,
)
from .render import (
    records_to_json,
    render_agents_json,
    render_agents_text,
    render_json,
    render_mcps_text,
    render_profiles_text,
    render_skills_text,
    shorten_marketplace,
)

__all__ = [
    "OutputPreferences",
    "build_parser",
    "effective_argv",
    "mcp_options",
    "parse_args",
    "profiles_options",
    "records_to_json",
    "render_agents_json",
    "render_agents_text",
    "render_json",
    "render_mcps_text",
    "render_profiles_text",
    "render_skills_text",
    "resolve_agents",
    "shorten_marketplace",
    "skills_options",
]
