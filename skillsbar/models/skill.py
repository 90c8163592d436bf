"""Skill records and their metadata.

Using frozen dataclasses; two skills are the same entity when their ids match.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class SkillSource(str, Enum):
    """Where a skill (or agent profile) was found."""

    GLOBAL = "global"
    PLUGIN = "plugin"
    PROJECT = "project"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def sort_order(self) -> int:
        """Project first, then plugin, then global."""
        return {"project": 0, "plugin": 1, "global": 2}[self.value]


class PluginScope(str, Enum):
    """Scope a plugin was installed at."""

    USER = "user"
    PROJECT = "project"
    LOCAL = "local"


@dataclass(frozen=True)
class SkillMetadata:
    """Optional fields from SKILL.md frontmatter."""

    license: Optional[str] = None
    compatibility: Optional[str] = None
    # Everything under the `metadata:` object (author, version, ...)
    custom_metadata: Optional[Dict[str, str]] = None
    allowed_tools: Optional[List[str]] = None
    argument_hint: Optional[str] = None
    disable_model_invocation: bool = False
    user_invocable: bool = True

    @property
    def author(self) -> Optional[str]:
        return (self.custom_metadata or {}).get("author")

    @property
    def version(self) -> Optional[str]:
        return (self.custom_metadata or {}).get("version")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "userInvocable": self.user_invocable,
            "disableModelInvocation": self.disable_model_invocation,
        }
        if self.license:
            data["license"] = self.license
        if self.compatibility:
            data["compatibility"] = self.compatibility
        if self.custom_metadata:
            data["metadata"] = dict(self.custom_metadata)
        if self.allowed_tools:
            data["allowedTools"] = list(self.allowed_tools)
        if self.argument_hint:
            data["argumentHint"] = self.argument_hint
        return data


@dataclass(frozen=True, eq=False)
class Skill:
    """A skill directory containing a SKILL.md file."""

    id: str
    name: str
    description: str
    agent_id: str
    source: SkillSource
    path: Path
    skill_file_name: str = "SKILL.md"
    plugin_name: Optional[str] = None
    marketplace_name: Optional[str] = None
    marketplace_repo: Optional[str] = None
    project_root: Optional[Path] = None
    plugin_scope: Optional[PluginScope] = None
    metadata: SkillMetadata = field(default_factory=SkillMetadata)
    # Always True for global and project skills
    is_enabled: bool = True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Skill):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def skill_file_path(self) -> Path:
        return self.path / self.skill_file_name

    @property
    def is_user_invocable(self) -> bool:
        return self.metadata.user_invocable

    @property
    def display_label(self) -> str:
        if self.plugin_name:
            return f"{self.plugin_name}/{self.name}"
        return self.name

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON payload used by the CLI."""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "agent": self.agent_id,
            "source": self.source.value,
            "path": str(self.path),
            "userInvocable": self.is_user_invocable,
            "isEnabled": self.is_enabled,
        }
        if self.plugin_name:
            data["pluginName"] = self.plugin_name
        if self.marketplace_name:
            data["marketplaceName"] = self.marketplace_name
        if self.marketplace_repo:
            data["marketplaceRepo"] = self.marketplace_repo
        if self.plugin_scope:
            data["pluginScope"] = self.plugin_scope.value
        if self.project_root:
            data["projectRoot"] = str(self.project_root)
        return data
