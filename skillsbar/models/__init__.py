"""Data model: agents and the three capability record kinds."""

from .agent import (
    ALL_AGENTS,
    CLAUDE_CODE,
    Agent,
    AgentStatus,
    beta_agents,
    default_agent,
    get_agent,
    get_agent_by_config_dir,
    planned_agents,
    supported_agents,
)
from .agent_profile import AgentProfile
from .ids import make_record_id, normalize_path, record_sort_key
from .mcp_server import MCPServer, MCPSource, MCPTransport
from .skill import PluginScope, Skill, SkillMetadata, SkillSource

__all__ = [
    # Agents
    "ALL_AGENTS",
    "CLAUDE_CODE",
    "Agent",
    "AgentStatus",
    "beta_agents",
    "default_agent",
    "get_agent",
    "get_agent_by_config_dir",
    "planned_agents",
    "supported_agents",
    # Records
    "AgentProfile",
    "MCPServer",
    "MCPSource",
    "MCPTransport",
    "PluginScope",
    "Skill",
    "SkillMetadata",
    "SkillSource",
    # Identity and ordering
    "make_record_id",
    "normalize_path",
    "record_sort_key",
]
