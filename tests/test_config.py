"""Tests for loading project configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from dotnet_bumper.config import BumperConfiguration, find_configuration, load_configuration
from dotnet_bumper.errors import ConfigurationError


class TestLoadConfiguration:
    def test_defaults_without_file(self, project: Path) -> None:
        config = load_configuration(project)
        assert config == BumperConfiguration()
        assert config.exclude == []
        assert config.disabled_upgraders == []
        assert config.resolve_digests is True

    def test_json_file(self, project: Path, write_file) -> None:
        write_file(
            ".dotnet-bumper.json",
            '{"exclude": ["samples/**"], "disabledUpgraders": ["vscode"], "resolveDigests": false}',
        )

        config = load_configuration(project)

        assert config.exclude == ["samples/**"]
        assert config.disabled_upgraders == ["vscode"]
        assert config.resolve_digests is False

    def test_yaml_file(self, project: Path, write_file) -> None:
        write_file(
            ".dotnet-bumper.yml",
            "# upgrade settings\nexclude:\n  - ' legacy/* '\n  - ''\ndisabled_upgraders: [dockerfile]\n",
        )

        config = load_configuration(project)

        assert config.exclude == ["legacy/*"]
        assert config.disabled_upgraders == ["dockerfile"]

    def test_json_with_bom(self, project: Path, write_file) -> None:
        write_file(".dotnet-bumper.json", b'\xef\xbb\xbf{"exclude": ["a"]}')
        assert load_configuration(project).exclude == ["a"]

    def test_empty_yaml_uses_defaults(self, project: Path, write_file) -> None:
        write_file(".dotnet-bumper.yaml", "")
        assert load_configuration(project) == BumperConfiguration()

    def test_json_takes_precedence(self, project: Path, write_file) -> None:
        json_path = write_file(".dotnet-bumper.json", "{}")
        write_file(".dotnet-bumper.yml", "exclude: [x]\n")

        assert find_configuration(project) == json_path
        assert load_configuration(project).exclude == []

    def test_explicit_path(self, project: Path, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("exclude: [docs/*]\n", encoding="utf-8")

        assert load_configuration(project, path).exclude == ["docs/*"]

    def test_missing_explicit_path(self, project: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_configuration(project, project / "missing.json")

    @pytest.mark.parametrize(
        ("name", "content"),
        [
            (".dotnet-bumper.json", "{ invalid"),
            (".dotnet-bumper.yml", "exclude: [a\n"),
        ],
    )
    def test_unparseable_file(self, project: Path, write_file, name: str, content: str) -> None:
        write_file(name, content)

        with pytest.raises(ConfigurationError, match="valid JSON or YAML"):
            load_configuration(project)

    @pytest.mark.parametrize(
        "content",
        ['{"unknown": true}', '{"exclude": "not-a-list"}', "[1, 2]"],
    )
    def test_invalid_settings(self, project: Path, write_file, content: str) -> None:
        write_file(".dotnet-bumper.json", content)

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_configuration(project)
