"""SkillsBar: discover skills, agent profiles and MCP servers for AI coding agents."""

__version__ = "1.0.0"
