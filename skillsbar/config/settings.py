"""Application settings.

Precedence: ``SKILLSBAR_*`` env vars > config.yaml > defaults

Settings live in a YAML file (default ``~/.config/skillsbar/config.yaml``,
or ``$SKILLSBAR_CONFIG``). A missing file means defaults.

Example::

    home: ~/
    project_paths:
      - ~/code/my-app
    recursive_project_paths:
      - ~/code
    enabled_agents: [claude]
    show_builtin_mcps: false
    scanner_timeout: 10
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import structlog
import yaml  # type: ignore[import-untyped]
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from skillsbar.exceptions import ConfigurationError
from skillsbar.models.agent import Agent, get_agent, supported_agents

logger = structlog.get_logger(__name__)

ENV_PREFIX = "SKILLSBAR_"
CONFIG_ENV_VAR = "SKILLSBAR_CONFIG"

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "skillsbar" / "config.yaml"


def _default_agent_ids() -> List[str]:
    return [agent.id for agent in supported_agents()]


class Settings(BaseSettings):
    """User preferences for discovery and display."""

    home: Path = Field(
        default_factory=Path.home, description="Home directory to scan"
    )
    project_paths: List[Path] = Field(default_factory=list)
    recursive_project_paths: List[Path] = Field(
        default_factory=list,
        description="Each immediate non-hidden subdirectory becomes a project path",
    )
    enabled_agents: List[str] = Field(default_factory=_default_agent_ids)

    show_global_skills: bool = True
    show_plugin_skills: bool = True
    show_project_skills: bool = True
    show_global_mcps: bool = True
    show_project_mcps: bool = True
    show_builtin_mcps: bool = True
    show_plugin_mcps: bool = True

    scanner_timeout: Optional[float] = Field(
        default=None, description="Per-scanner timeout in seconds (None waits)"
    )
    debug: bool = False

    # Where the settings were loaded from; save() writes back here
    config_file: Optional[Path] = Field(default=None, exclude=True)

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")

    @field_validator("home", mode="after")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("project_paths", "recursive_project_paths", mode="after")
    @classmethod
    def _expand_paths(cls, value: List[Path]) -> List[Path]:
        return [path.expanduser() for path in value]

    @field_validator("enabled_agents", mode="after")
    @classmethod
    def _known_agents(cls, value: List[str]) -> List[str]:
        unknown = [agent_id for agent_id in value if get_agent(agent_id) is None]
        if unknown:
            raise ValueError(f"unknown agent(s): {', '.join(unknown)}")
        return value

    @field_validator("scanner_timeout", mode="before")
    @classmethod
    def _positive_timeout(cls, value: Any) -> Any:
        if value is None:
            return value
        if isinstance(value, bool):
            raise ValueError("must be a number of seconds")
        if isinstance(value, (int, float)) and value <= 0:
            raise ValueError("must be positive")
        return value

    def agents(self) -> List[Agent]:
        """Enabled agents, in configuration order."""
        result = []
        for agent_id in self.enabled_agents:
            agent = get_agent(agent_id)
            if agent is not None:
                result.append(agent)
        return result

    def add_project_path(self, path: Path, recursive: bool = False) -> bool:
        """Add a project path; returns False if it was already present."""
        target = self.recursive_project_paths if recursive else self.project_paths
        path = path.expanduser()
        if path in target:
            return False
        target.append(path)
        return True

    def remove_project_path(self, path: Path) -> bool:
        path = path.expanduser()
        removed = False
        for target in (self.project_paths, self.recursive_project_paths):
            if path in target:
                target.remove(path)
                removed = True
        return removed

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    def save(self, path: Optional[Path] = None) -> Path:
        """Write settings as YAML.

        Args:
            path: Destination (default: the file they were loaded from)

        Returns:
            The path written
        """
        destination = path or self.config_file or resolve_config_path()
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(
            yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)
        )
        logger.info("Settings saved", path=str(destination))
        return destination


def resolve_config_path(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """Explicit path, else ``$SKILLSBAR_CONFIG``, else the default location."""
    env = os.environ if environ is None else environ
    if config_file is not None:
        return config_file.expanduser()
    if env.get(CONFIG_ENV_VAR):
        return Path(env[CONFIG_ENV_VAR]).expanduser()
    return DEFAULT_CONFIG_PATH


def _load_yaml_config(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        logger.debug("No settings file, using defaults", path=str(path))
        return {}

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (yaml.YAMLError, OSError) as e:
        raise ConfigurationError(f"Cannot read settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a mapping")

    logger.debug("Settings loaded", path=str(path))
    return data


def _format_validation_error(error: ValidationError) -> str:
    problems = []
    for detail in error.errors():
        field = ".".join(str(part) for part in detail["loc"]) or "settings"
        problems.append(f"'{field}': {detail['msg']}")
    return "Invalid settings: " + "; ".join(problems)


def load_config(config_file: Optional[Path] = None) -> Settings:
    """Load settings from YAML with ``SKILLSBAR_*`` environment overrides.

    Args:
        config_file: Explicit settings file (``--config-file``)

    Returns:
        Settings

    Raises:
        ConfigurationError: if the file or an override is invalid
    """
    path = resolve_config_path(config_file)
    yaml_config = _load_yaml_config(path)

    known = set(Settings.model_fields) - {"config_file"}
    unknown = sorted(str(key) for key in yaml_config if key not in known)
    if unknown:
        logger.warning("Ignoring unknown settings", keys=unknown)

    # File values are fallbacks: a set env var always wins
    values = {
        key: value
        for key, value in yaml_config.items()
        if key in known
        and value is not None
        and os.environ.get(f"{ENV_PREFIX}{key.upper()}") is None
    }

    try:
        settings = Settings(**values)
    except ValidationError as e:
        raise ConfigurationError(_format_validation_error(e)) from e

    settings.config_file = path
    return settings
