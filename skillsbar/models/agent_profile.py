"""Agent profile records (markdown files under an ``agents/`` directory)."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .skill import PluginScope, SkillSource


@dataclass(frozen=True, eq=False)
class AgentProfile:
    """A subagent definition, e.g. ``agents/code-reviewer.md``."""

    id: str
    name: str
    description: str
    source: SkillSource
    path: Path
    model: Optional[str] = None
    tools: List[str] = field(default_factory=list)
    plugin_name: Optional[str] = None
    marketplace_name: Optional[str] = None
    marketplace_repo: Optional[str] = None
    project_root: Optional[Path] = None
    plugin_scope: Optional[PluginScope] = None
    is_enabled: bool = True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AgentProfile):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "source": self.source.value,
            "path": str(self.path),
            "isEnabled": self.is_enabled,
        }
        if self.model:
            data["model"] = self.model
        if self.tools:
            data["tools"] = list(self.tools)
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
