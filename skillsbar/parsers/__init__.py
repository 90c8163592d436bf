"""Parsers for skill/agent markdown and MCP configuration."""

from .frontmatter import (
    AgentParseResult,
    SkillParseResult,
    extract_description,
    parse_agent_file,
    parse_agent_md,
    parse_bool,
    parse_skill_file,
    parse_skill_md,
    parse_string_array,
)
from .mcp_config import (
    GlobalClaudeConfig,
    MCPServerEntry,
    ProjectMCPConfig,
    parse_global_config,
    parse_mcp_json,
)

__all__ = [
    "AgentParseResult",
    "GlobalClaudeConfig",
    "MCPServerEntry",
    "ProjectMCPConfig",
    "SkillParseResult",
    "extract_description",
    "parse_agent_file",
    "parse_agent_md",
    "parse_bool",
    "parse_global_config",
    "parse_mcp_json",
    "parse_skill_file",
    "parse_skill_md",
    "parse_string_array",
]
