"""Shared fixtures: a throwaway home directory laid out like ~/.claude."""

import errno
import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

import pytest


def skill_md(name: str, description: str = "", extra: str = "", body: str = "") -> str:
    lines = ["---", f"name: {name}"]
    if description:
        lines.append(f"description: {description}")
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    lines.append(body)
    return "\n".join(lines) + "\n"


class FakeHome:
    """Builder for a fake home directory with Claude Code files."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.claude_dir = root / ".claude"
        self.claude_dir.mkdir(parents=True, exist_ok=True)
        self._installs: Dict[str, list] = {}

    @property
    def plugins_dir(self) -> Path:
        return self.claude_dir / "plugins"

    def write_json(self, path: Path, data: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data))
        return path

    def add_skill(
        self,
        skills_dir: Path,
        dir_name: str,
        name: Optional[str] = None,
        description: str = "",
        extra: str = "",
        content: Optional[str] = None,
    ) -> Path:
        skill_dir = skills_dir / dir_name
        skill_dir.mkdir(parents=True, exist_ok=True)
        if content is None:
            content = skill_md(name or dir_name, description, extra)
        (skill_dir / "SKILL.md").write_text(content)
        return skill_dir

    def add_global_skill(self, dir_name: str, **kwargs: Any) -> Path:
        return self.add_skill(self.claude_dir / "skills", dir_name, **kwargs)

    def add_project_skill(self, project: Path, dir_name: str, **kwargs: Any) -> Path:
        return self.add_skill(project / ".claude" / "skills", dir_name, **kwargs)

    def add_agent_file(self, agents_dir: Path, file_name: str, content: str) -> Path:
        agents_dir.mkdir(parents=True, exist_ok=True)
        path = agents_dir / file_name
        path.write_text(content)
        return path

    def add_plugin(
        self,
        marketplace: str,
        plugin: str,
        version: str = "1.0.0",
        skills: Iterable[str] = (),
        agents: Optional[Dict[str, str]] = None,
        mcp: Optional[Dict[str, Any]] = None,
        manifest: bool = True,
    ) -> Path:
        version_dir = self.plugins_dir / "cache" / marketplace / plugin / version
        version_dir.mkdir(parents=True, exist_ok=True)
        if manifest:
            self.write_json(
                version_dir / ".claude-plugin" / "plugin.json", {"name": plugin}
            )
        for skill in skills:
            self.add_skill(version_dir / "skills", skill, description=f"{skill} skill")
        for file_name, content in (agents or {}).items():
            self.add_agent_file(version_dir / "agents", file_name, content)
        if mcp is not None:
            self.write_json(version_dir / ".mcp.json", mcp)
        return version_dir

    def install(
        self,
        plugin_key: str,
        install_path: Path,
        scope: str = "user",
        project_path: Optional[Path] = None,
        last_updated: Optional[str] = None,
    ) -> None:
        entry: Dict[str, Any] = {"scope": scope, "installPath": str(install_path)}
        if project_path is not None:
            entry["projectPath"] = str(project_path)
        if last_updated is not None:
            entry["lastUpdated"] = last_updated
        self._installs.setdefault(plugin_key, []).append(entry)
        self.write_json(
            self.plugins_dir / "installed_plugins.json",
            {"version": 2, "plugins": self._installs},
        )

    def enable_plugins(self, enabled: Dict[str, bool]) -> Path:
        return self.write_json(
            self.claude_dir / "settings.json", {"enabledPlugins": enabled}
        )

    def enable_project_plugins(
        self, project: Path, enabled: Dict[str, bool], local: bool = False
    ) -> Path:
        name = "settings.local.json" if local else "settings.json"
        return self.write_json(
            project / ".claude" / name, {"enabledPlugins": enabled}
        )

    def add_marketplace(self, name: str, repo: str) -> Path:
        path = self.plugins_dir / "known_marketplaces.json"
        data = json.loads(path.read_text()) if path.exists() else {}
        data[name] = {"source": {"source": "github", "repo": repo}}
        return self.write_json(path, data)

    def write_claude_json(self, data: Dict[str, Any]) -> Path:
        return self.write_json(self.root / ".claude.json", data)


@pytest.fixture
def fake_home(tmp_path: Path) -> FakeHome:
    return FakeHome(tmp_path / "home")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    path = tmp_path / "work" / "proj"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def deny_access(monkeypatch: pytest.MonkeyPatch) -> Callable[[Path], None]:
    """Make stat calls on a path (and anything under it) fail with EACCES."""
    denied: List[Path] = []

    def blocked(path: Path) -> bool:
        return any(path == target or target in path.parents for target in denied)

    def wrap(original: Callable[..., Any]) -> Callable[..., Any]:
        def guarded(self: Path, *args: Any, **kwargs: Any) -> Any:
            if blocked(self):
                raise PermissionError(errno.EACCES, "Permission denied", str(self))
            return original(self, *args, **kwargs)

        return guarded

    for name in ("stat", "is_file", "is_dir"):
        monkeypatch.setattr(Path, name, wrap(getattr(Path, name)))

    return denied.append
