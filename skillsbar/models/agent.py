"""AI coding agents and where each keeps its configuration on disk.

Path accessors take the home directory explicitly so discovery can run
against any root (tests use a temporary home).
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class AgentStatus(str, Enum):
    """Support status of an agent."""

    ACTIVE = "active"
    BETA = "beta"
    COMING_SOON = "coming_soon"


@dataclass(frozen=True)
class Agent:
    """An AI coding agent with a config directory under the user's home."""

    id: str
    display_name: str
    config_dir_name: str
    supports_plugins: bool
    tagline: str = ""
    skill_file_name: str = "SKILL.md"
    status: AgentStatus = AgentStatus.COMING_SOON
    website_url: Optional[str] = None

    # Global scope

    def config_dir(self, home: Path) -> Path:
        return home / self.config_dir_name

    def global_skills_path(self, home: Path) -> Path:
        """~/<config_dir>/skills"""
        return self.config_dir(home) / "skills"

    def global_agents_path(self, home: Path) -> Path:
        """~/<config_dir>/agents"""
        return self.config_dir(home) / "agents"

    def settings_path(self, home: Path) -> Path:
        """~/<config_dir>/settings.json (holds enabledPlugins)."""
        return self.config_dir(home) / "settings.json"

    def global_config_path(self, home: Path) -> Path:
        """~/<config_dir>.json, e.g. ~/.claude.json (holds mcpServers)."""
        return home / f"{self.config_dir_name}.json"

    # Plugins

    def plugins_path(self, home: Path) -> Optional[Path]:
        if not self.supports_plugins:
            return None
        return self.config_dir(home) / "plugins"

    def plugins_cache_path(self, home: Path) -> Optional[Path]:
        plugins = self.plugins_path(home)
        return plugins / "cache" if plugins else None

    def installed_plugins_path(self, home: Path) -> Optional[Path]:
        plugins = self.plugins_path(home)
        return plugins / "installed_plugins.json" if plugins else None

    def known_marketplaces_path(self, home: Path) -> Optional[Path]:
        plugins = self.plugins_path(home)
        return plugins / "known_marketplaces.json" if plugins else None

    # Project scope

    def project_skills_path(self, project_root: Path) -> Path:
        return project_root / self.config_dir_name / "skills"

    def project_agents_path(self, project_root: Path) -> Path:
        return project_root / self.config_dir_name / "agents"

    def project_settings_path(self, project_root: Path) -> Path:
        return project_root / self.config_dir_name / "settings.json"

    def project_local_settings_path(self, project_root: Path) -> Path:
        return project_root / self.config_dir_name / "settings.local.json"


CLAUDE_CODE = Agent(
    id="claude",
    display_name="Claude Code",
    tagline="Anthropic's agentic coding CLI",
    config_dir_name=".claude",
    supports_plugins=True,
    status=AgentStatus.ACTIVE,
    website_url="https://claude.ai/code",
)

# Active first, then planned agents alphabetically
ALL_AGENTS: tuple[Agent, ...] = (
    CLAUDE_CODE,
    Agent(
        id="aider",
        display_name="Aider",
        tagline="AI pair programming in your terminal",
        config_dir_name=".aider",
        supports_plugins=False,
        website_url="https://aider.chat",
    ),
    Agent(
        id="cline",
        display_name="Cline",
        tagline="Autonomous coding agent for VS Code",
        config_dir_name=".cline",
        supports_plugins=False,
        website_url="https://cline.bot",
    ),
    Agent(
        id="codex",
        display_name="Codex CLI",
        tagline="OpenAI's coding assistant",
        config_dir_name=".codex",
        supports_plugins=False,
        website_url="https://openai.com/codex",
    ),
    Agent(
        id="copilot",
        display_name="GitHub Copilot",
        tagline="Your AI pair programmer",
        config_dir_name=".github-copilot",
        supports_plugins=False,
        skill_file_name="copilot-instructions.md",
        website_url="https://github.com/features/copilot",
    ),
    Agent(
        id="cursor",
        display_name="Cursor",
        tagline="The AI-first code editor",
        config_dir_name=".cursor",
        supports_plugins=False,
        website_url="https://cursor.sh",
    ),
    Agent(
        id="gemini",
        display_name="Gemini CLI",
        tagline="Google's AI coding assistant",
        config_dir_name=".gemini",
        supports_plugins=False,
        website_url="https://ai.google.dev",
    ),
    Agent(
        id="opencode",
        display_name="OpenCode",
        tagline="Open-source AI coding agent",
        config_dir_name=".opencode",
        supports_plugins=False,
        website_url="https://opencode.ai",
    ),
    Agent(
        id="windsurf",
        display_name="Windsurf",
        tagline="Next-gen agentic IDE by Codeium",
        config_dir_name=".windsurf",
        supports_plugins=False,
        website_url="https://windsurf.com",
    ),
)


def supported_agents() -> list[Agent]:
    """Agents with full support."""
    return [a for a in ALL_AGENTS if a.status == AgentStatus.ACTIVE]


def beta_agents() -> list[Agent]:
    return [a for a in ALL_AGENTS if a.status == AgentStatus.BETA]


def planned_agents() -> list[Agent]:
    return [a for a in ALL_AGENTS if a.status == AgentStatus.COMING_SOON]


def get_agent(agent_id: str) -> Optional[Agent]:
    """Find an agent by id."""
    for agent in ALL_AGENTS:
        if agent.id == agent_id:
            return agent
    return None


def get_agent_by_config_dir(config_dir_name: str) -> Optional[Agent]:
    for agent in ALL_AGENTS:
        if agent.config_dir_name == config_dir_name:
            return agent
    return None


def default_agent() -> Agent:
    """Claude Code, or the first registered agent if nothing is active."""
    supported = supported_agents()
    return supported[0] if supported else ALL_AGENTS[0]
