"""Discovery coordinators and the refresh session."""

from .agents import AgentsDiscovery, AgentsDiscoveryOptions
from .fanout import ScannerTask, fan_out, merge_records
from .mcp import MCPDiscovery, MCPDiscoveryOptions
from .paths import combine_project_paths, expand_recursive_paths
from .skills import SkillsDiscovery, SkillsDiscoveryOptions
from .store import SkillsStore, Snapshot

__all__ = [
    "AgentsDiscovery",
    "AgentsDiscoveryOptions",
    "MCPDiscovery",
    "MCPDiscoveryOptions",
    "ScannerTask",
    "SkillsDiscovery",
    "SkillsDiscoveryOptions",
    "SkillsStore",
    "Snapshot",
    "combine_project_paths",
    "expand_recursive_paths",
    "fan_out",
    "merge_records",
]
