"""Text and JSON rendering for CLI output.

Renderers return strings; printing is left to the caller.
"""

import json
from typing import Any, Dict, Iterable, List, Sequence

from skillsbar.models.agent import ALL_AGENTS, Agent, planned_agents, supported_agents
from skillsbar.models.agent_profile import AgentProfile
from skillsbar.models.mcp_server import MCPServer, MCPSource, MCPTransport
from skillsbar.models.skill import Skill, SkillSource

ENABLED_MARK = "✓"
DISABLED_MARK = "○"
RULE = "-" * 50
DESCRIPTION_WIDTH = 55
COMMAND_WIDTH = 60

MARKETPLACE_SHORT_NAMES = {
    "claude-plugins-official": "official",
    "claude-code-plugins": "cc-plugins",
}


def truncate(text: str, width: int) -> str:
    return text[:width] + "..." if len(text) > width else text


def shorten_marketplace(name: str) -> str:
    """``claude-plugins-official`` -> ``official``, drop ``-marketplace``."""
    return MARKETPLACE_SHORT_NAMES.get(name, name.replace("-marketplace", ""))


def _mark(enabled: bool) -> str:
    return ENABLED_MARK if enabled else DISABLED_MARK


def _marketplace_label(record: Any) -> str:
    # Prefer the repo (user/repo) over the internal marketplace name
    if record.marketplace_repo:
        return f" @{record.marketplace_repo}"
    if record.marketplace_name:
        return f" @{shorten_marketplace(record.marketplace_name)}"
    return ""


def render_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def records_to_json(records: Iterable[Any]) -> str:
    return render_json([record.to_dict() for record in records])


def agent_to_dict(agent: Agent) -> Dict[str, Any]:
    return {
        "id": agent.id,
        "displayName": agent.display_name,
        "tagline": agent.tagline,
        "configDir": agent.config_dir_name,
        "supportsPlugins": agent.supports_plugins,
        "status": agent.status.value,
        "websiteURL": agent.website_url or "",
    }


def render_agents_json() -> str:
    return render_json([agent_to_dict(agent) for agent in ALL_AGENTS])


def render_agents_text() -> str:
    lines: List[str] = ["Supported Agents:", ""]
    for agent in supported_agents():
        lines.append(f"  {ENABLED_MARK} {agent.display_name} ({agent.id})")
        if agent.tagline:
            lines.append(f"    {agent.tagline}")
        lines.append(f"    Config: {agent.config_dir_name}/")
        lines.append(f"    Plugins: {'yes' if agent.supports_plugins else 'no'}")
        lines.append("")

    planned = planned_agents()
    if planned:
        lines.extend(["Coming Soon:", ""])
        for agent in planned:
            lines.append(f"  {DISABLED_MARK} {agent.display_name} ({agent.id})")
            if agent.tagline:
                lines.append(f"    {agent.tagline}")
        lines.append("")

    return "\n".join(lines)


def render_skills_text(skills: Sequence[Skill]) -> str:
    if not skills:
        return "No skills found."

    lines: List[str] = []
    for source in sorted(SkillSource, key=lambda s: s.sort_order):
        group = [skill for skill in skills if skill.source is source]
        if not group:
            continue
        lines.append(f"{source.display_name} Skills ({len(group)}):")
        lines.append(RULE)
        for skill in group:
            lines.append(f"  {_mark(skill.is_enabled)} {skill.name}{_marketplace_label(skill)}")
            if skill.description:
                lines.append(f"    {truncate(skill.description, DESCRIPTION_WIDTH)}")
        lines.append("")

    enabled = sum(1 for skill in skills if skill.is_enabled)
    lines.append(f"Total: {len(skills)} skills ({enabled} enabled)")
    return "\n".join(lines)


def _server_lines(server: MCPServer) -> List[str]:
    lines = [f"  {_mark(server.is_enabled)} {server.name} [{server.transport.display_name}]"]
    if server.transport is MCPTransport.STDIO:
        lines.append(f"    {truncate(server.command_line, COMMAND_WIDTH)}")
    elif server.url:
        lines.append(f"    {server.url}")
    return lines


def render_mcps_text(servers: Sequence[MCPServer]) -> str:
    if not servers:
        return "No MCP servers found."

    lines: List[str] = []
    for source in sorted(MCPSource, key=lambda s: s.sort_order):
        group = [server for server in servers if server.source is source]
        if not group:
            continue

        if source is MCPSource.PROJECT:
            by_project: Dict[str, List[MCPServer]] = {}
            for server in group:
                by_project.setdefault(server.project_name or "Unknown", []).append(server)
            for project_name in sorted(by_project):
                members = by_project[project_name]
                lines.append(f"Project MCPs: {project_name} ({len(members)}):")
                lines.append(RULE)
                for server in members:
                    lines.extend(_server_lines(server))
                lines.append("")
        elif source is MCPSource.BUILT_IN:
            lines.append("Built-in MCPs (always available):")
            lines.append(RULE)
            lines.append("  Runtime MCPs managed by Claude Code.")
            lines.append("  Status reflects default config, not live connections.")
            lines.append("")
            for server in group:
                lines.extend(_server_lines(server))
            lines.append("")
        else:
            lines.append(f"{source.display_name} MCPs ({len(group)}):")
            lines.append(RULE)
            for server in group:
                lines.extend(_server_lines(server))
            lines.append("")

    enabled = sum(1 for server in servers if server.is_enabled)
    lines.append(f"Total: {len(servers)} MCP servers ({enabled} enabled)")
    return "\n".join(lines)


def render_profiles_text(profiles: Sequence[AgentProfile]) -> str:
    if not profiles:
        return "No agent profiles found."

    lines: List[str] = []
    for source in sorted(SkillSource, key=lambda s: s.sort_order):
        group = [profile for profile in profiles if profile.source is source]
        if not group:
            continue
        lines.append(f"{source.display_name} Agent Profiles ({len(group)}):")
        lines.append(RULE)
        for profile in group:
            label = profile.name
            if profile.plugin_name:
                label = f"{profile.plugin_name}/{label}{_marketplace_label(profile)}"
            if profile.model:
                label += f" [{profile.model}]"
            lines.append(f"  {_mark(profile.is_enabled)} {label}")
            if profile.description:
                lines.append(f"    {truncate(profile.description, DESCRIPTION_WIDTH)}")
        lines.append("")

    enabled = sum(1 for profile in profiles if profile.is_enabled)
    lines.append(f"Total: {len(profiles)} agent profiles ({enabled} enabled)")
    return "\n".join(lines)
