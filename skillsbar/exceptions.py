"""Exceptions raised outside the discovery core.

Discovery itself never raises; these cover user-facing configuration and
CLI argument errors.
"""


class SkillsBarError(Exception):
    """Base exception for skillsbar."""


class ConfigurationError(SkillsBarError):
    """Invalid or unreadable application configuration."""


class UnknownAgentError(SkillsBarError):
    """An agent id that is not in the registry."""

    def __init__(self, agent_id: str) -> None:
        super().__init__(f"Unknown agent: {agent_id}")
        self.agent_id = agent_id
