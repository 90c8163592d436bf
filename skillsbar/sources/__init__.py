"""Source scanners, one per record kind and scope."""

from .agents import (
    discover_global_agent_profiles,
    discover_plugin_agent_profiles,
    discover_project_agent_profiles,
)
from .mcp import (
    discover_built_in_mcp_servers,
    discover_global_mcp_servers,
    discover_plugin_mcp_servers,
    discover_project_mcp_servers,
)
from .skills import (
    discover_global_skills,
    discover_plugin_skills,
    discover_project_skills,
    scan_skills_dir,
)

__all__ = [
    "discover_built_in_mcp_servers",
    "discover_global_agent_profiles",
    "discover_global_mcp_servers",
    "discover_global_skills",
    "discover_plugin_agent_profiles",
    "discover_plugin_mcp_servers",
    "discover_plugin_skills",
    "discover_project_agent_profiles",
    "discover_project_mcp_servers",
    "discover_project_skills",
    "scan_skills_dir",
]
