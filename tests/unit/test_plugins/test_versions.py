"""Tests for plugin version directory selection."""

import os
from pathlib import Path

from skillsbar.plugins.versions import (
    compare_semver,
    find_latest_version,
    has_plugin_manifest,
    looks_like_semver,
)


def _make_versions(plugin_dir: Path, *names: str) -> None:
    for name in names:
        (plugin_dir / name).mkdir(parents=True)


class TestCompareSemver:
    def test_numeric_not_lexicographic(self) -> None:
        assert compare_semver("1.10.0", "1.9.0") == 1
        assert compare_semver("1.9.0", "1.10.0") == -1

    def test_missing_components_are_zero(self) -> None:
        assert compare_semver("1.2", "1.2.0") == 0

    def test_suffixes_are_ignored(self) -> None:
        assert compare_semver("2.0.0-beta", "2.0.0") == 0
        assert compare_semver("2.0.1-rc1", "2.0.0") == 1

    def test_looks_like_semver(self) -> None:
        assert looks_like_semver("1.0.0")
        assert looks_like_semver("10.2.3-beta")
        assert not looks_like_semver("1.0")
        assert not looks_like_semver("abc123")


class TestFindLatestVersion:
    """Test find_latest_version."""

    def test_no_versions(self, tmp_path: Path) -> None:
        assert find_latest_version(tmp_path) is None
        assert find_latest_version(tmp_path / "absent") is None

    def test_single_directory_is_returned(self, tmp_path: Path) -> None:
        _make_versions(tmp_path, "deadbeef")

        assert find_latest_version(tmp_path) == tmp_path / "deadbeef"

    def test_highest_semver(self, tmp_path: Path) -> None:
        _make_versions(tmp_path, "1.2.0", "1.10.0", "1.9.9", ".hidden")

        assert find_latest_version(tmp_path) == tmp_path / "1.10.0"

    def test_semver_beats_older_hash(self, tmp_path: Path) -> None:
        _make_versions(tmp_path, "abc123", "1.0.0")
        os.utime(tmp_path / "abc123", (1_000_000, 1_000_000))
        os.utime(tmp_path / "1.0.0", (2_000_000, 2_000_000))

        assert find_latest_version(tmp_path) == tmp_path / "1.0.0"

    def test_hashes_pick_most_recent(self, tmp_path: Path) -> None:
        _make_versions(tmp_path, "aaa111", "bbb222", "ccc333")
        os.utime(tmp_path / "aaa111", (1_000_000, 3_000_000))
        os.utime(tmp_path / "bbb222", (1_000_000, 2_000_000))
        os.utime(tmp_path / "ccc333", (1_000_000, 1_000_000))

        assert find_latest_version(tmp_path) == tmp_path / "aaa111"

    def test_equal_versions_are_deterministic(self, tmp_path: Path) -> None:
        _make_versions(tmp_path, "1.0.0-beta", "1.0.0")

        first = find_latest_version(tmp_path)

        assert first == find_latest_version(tmp_path)
        assert first == tmp_path / "1.0.0"


class TestHasPluginManifest:
    def test_plugin_json(self, tmp_path: Path) -> None:
        (tmp_path / ".claude-plugin").mkdir()
        (tmp_path / ".claude-plugin" / "plugin.json").write_text("{}")

        assert has_plugin_manifest(tmp_path)

    def test_marketplace_json(self, tmp_path: Path) -> None:
        (tmp_path / ".claude-plugin").mkdir()
        (tmp_path / ".claude-plugin" / "marketplace.json").write_text("{}")

        assert has_plugin_manifest(tmp_path)

    def test_missing(self, tmp_path: Path) -> None:
        assert not has_plugin_manifest(tmp_path)
