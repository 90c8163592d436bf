"""Configuration: application settings and Claude Code's own JSON files."""

from .settings import Settings, load_config, resolve_config_path

__all__ = ["Settings", "load_config", "resolve_config_path"]
