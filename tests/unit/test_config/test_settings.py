"""Tests for YAML settings loading and saving."""

from pathlib import Path
from typing import Iterator

import pytest
from pydantic import ValidationError

from skillsbar.config.settings import (
    CONFIG_ENV_VAR,
    Settings,
    load_config,
    resolve_config_path,
)
from skillsbar.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        CONFIG_ENV_VAR,
        "SKILLSBAR_HOME",
        "SKILLSBAR_DEBUG",
        "SKILLSBAR_SCANNER_TIMEOUT",
        "SKILLSBAR_SHOW_BUILTIN_MCPS",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


def _write(path: Path, text: str) -> Path:
    path.write_text(text)
    return path


def _dump(settings: Settings) -> dict:
    return settings.model_dump(exclude={"config_file"})


class TestLoadConfig:
    """Test load_config."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        settings = load_config(tmp_path / "absent.yaml")

        assert settings.enabled_agents == ["claude"]
        assert settings.show_builtin_mcps is True
        assert settings.scanner_timeout is None
        assert settings.config_file == tmp_path / "absent.yaml"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        settings = load_config(_write(tmp_path / "c.yaml", ""))

        assert settings.project_paths == []

    def test_values_are_loaded(self, tmp_path: Path) -> None:
        config = _write(
            tmp_path / "c.yaml",
            "home: /srv/home\n"
            "project_paths:\n  - /work/a\n"
            "recursive_project_paths: [/work]\n"
            "show_builtin_mcps: false\n"
            "scanner_timeout: 5\n",
        )

        settings = load_config(config)

        assert settings.home == Path("/srv/home")
        assert settings.project_paths == [Path("/work/a")]
        assert settings.recursive_project_paths == [Path("/work")]
        assert settings.show_builtin_mcps is False
        assert settings.scanner_timeout == 5.0

    def test_env_overrides_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config = _write(
            tmp_path / "c.yaml", "home: /from/file\nshow_builtin_mcps: true\n"
        )
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config))
        monkeypatch.setenv("SKILLSBAR_HOME", "/from/env")
        monkeypatch.setenv("SKILLSBAR_DEBUG", "yes")
        monkeypatch.setenv("SKILLSBAR_SHOW_BUILTIN_MCPS", "false")
        monkeypatch.setenv("SKILLSBAR_SCANNER_TIMEOUT", "2.5")

        settings = load_config()

        assert settings.home == Path("/from/env")
        assert settings.debug is True
        assert settings.show_builtin_mcps is False
        assert settings.scanner_timeout == 2.5
        assert settings.config_file == config

    def test_home_is_expanded(self, tmp_path: Path) -> None:
        settings = load_config(_write(tmp_path / "c.yaml", "project_paths: [~/code]\n"))

        assert settings.project_paths == [Path.home() / "code"]

    @pytest.mark.parametrize(
        "text",
        [
            "home: [unclosed\n",
            "- just\n- a list\n",
            "show_global_skills: maybe\n",
            "project_paths: /not/a/list\n",
            "enabled_agents: [claude, nonsense]\n",
            "scanner_timeout: 0\n",
            "scanner_timeout: true\n",
        ],
    )
    def test_invalid_files_raise(self, tmp_path: Path, text: str) -> None:
        with pytest.raises(ConfigurationError):
            load_config(_write(tmp_path / "c.yaml", text))

    def test_error_names_the_field(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="scanner_timeout"):
            load_config(_write(tmp_path / "c.yaml", "scanner_timeout: -1\n"))

    def test_bad_env_value_raises(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SKILLSBAR_DEBUG", "sometimes")

        with pytest.raises(ConfigurationError, match="debug"):
            load_config(tmp_path / "absent.yaml")

    def test_unknown_keys_are_ignored(self, tmp_path: Path) -> None:
        settings = load_config(
            _write(tmp_path / "c.yaml", "colour: blue\nconfig_file: /elsewhere\n")
        )

        assert _dump(settings) == _dump(Settings(home=settings.home))
        assert settings.config_file == tmp_path / "c.yaml"


class TestResolveConfigPath:
    def test_precedence(self, tmp_path: Path) -> None:
        explicit = tmp_path / "explicit.yaml"
        env = {CONFIG_ENV_VAR: str(tmp_path / "env.yaml")}

        assert resolve_config_path(explicit, env) == explicit
        assert resolve_config_path(None, env) == tmp_path / "env.yaml"
        assert resolve_config_path(None, {}).name == "config.yaml"


class TestSettings:
    def test_save_round_trip(self, tmp_path: Path) -> None:
        settings = Settings(home=tmp_path, scanner_timeout=2.5)
        settings.add_project_path(tmp_path / "a")
        settings.add_project_path(tmp_path / "tree", recursive=True)

        path = settings.save(tmp_path / "out" / "config.yaml")
        loaded = load_config(path)

        assert _dump(loaded) == _dump(settings)
        assert "config_file" not in path.read_text()

    def test_validators_reject_direct_construction(self) -> None:
        with pytest.raises(ValidationError):
            Settings(enabled_agents=["nonsense"])
        with pytest.raises(ValidationError):
            Settings(scanner_timeout=-3)

    def test_add_and_remove_project_path(self, tmp_path: Path) -> None:
        settings = Settings()

        assert settings.add_project_path(tmp_path) is True
        assert settings.add_project_path(tmp_path) is False
        assert settings.remove_project_path(tmp_path) is True
        assert settings.remove_project_path(tmp_path) is False

    def test_agents_resolves_ids(self) -> None:
        settings = Settings(enabled_agents=["claude"])

        assert [a.id for a in settings.agents()] == ["claude"]
