from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from dotnet_bumper import __version__
from dotnet_bumper.cli import app
from dotnet_bumper.errors import UpgradeCancelled

runner = CliRunner()


def invoke(*args: str):
    return runner.invoke(app, list(args))


def test_version() -> None:
    result = invoke("--version")
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_upgrade_writes_files(sample_project: Path) -> None:
    result = invoke("upgrade", str(sample_project), "--channel", "8.0", "--no-digests")

    assert result.exit_code == 0, result.output
    assert "net8.0" in (sample_project / "src/App/App.csproj").read_text(encoding="utf-8")
    assert '"version": "8.0.100"' in (sample_project / "global.json").read_text(encoding="utf-8")


def test_sdk_version_option(sample_project: Path) -> None:
    result = invoke(
        "upgrade", str(sample_project), "-c", "8.0", "--sdk-version", "8.0.303", "--no-digests"
    )

    assert result.exit_code == 0, result.output
    assert '"version": "8.0.303"' in (sample_project / "global.json").read_text(encoding="utf-8")


def test_dry_run_json(sample_project: Path, sample_files) -> None:
    result = invoke(
        "upgrade", str(sample_project), "--channel", "8.0", "--dry-run", "--json", "--no-digests"
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["channel"] == "8.0"
    assert data["dry_run"] is True
    assert "Update target framework to `net8.0`" in data["changelog"]
    for relative, content in sample_files.items():
        assert (sample_project / relative).read_text(encoding="utf-8") == content


def test_nothing_to_upgrade(project: Path) -> None:
    result = invoke("upgrade", str(project), "--channel", "8.0", "--no-digests")

    assert result.exit_code == 0
    assert "Nothing to upgrade." in result.stdout


def test_invalid_channel(project: Path) -> None:
    result = invoke("upgrade", str(project), "--channel", "eight")

    assert result.exit_code == 2
    assert "Invalid channel" in result.stdout


def test_invalid_configuration(project: Path, write_file) -> None:
    write_file(".dotnet-bumper.json", '{"unknown": 1}')

    result = invoke("upgrade", str(project), "--channel", "8.0")

    assert result.exit_code == 2


def test_write_failure_exits_with_error(sample_project: Path) -> None:
    with patch("dotnet_bumper.upgrade.runner.write_document", side_effect=OSError("read-only")):
        result = invoke("upgrade", str(sample_project), "--channel", "8.0", "--no-digests")

    assert result.exit_code == 1


def test_cancelled_run(sample_project: Path) -> None:
    with patch("dotnet_bumper.cli.main.UpgradeRunner.run", side_effect=UpgradeCancelled()):
        result = invoke("upgrade", str(sample_project), "--channel", "8.0", "--no-digests")

    assert result.exit_code == 130
    assert "cancelled" in result.stdout


def test_registry_client_used_unless_disabled(sample_project: Path) -> None:
    with patch("dotnet_bumper.cli.main.ContainerRegistryClient") as client:
        invoke("upgrade", str(sample_project), "--channel", "8.0", "--dry-run")
        assert client.call_count == 1

        invoke("upgrade", str(sample_project), "--channel", "8.0", "--dry-run", "--no-digests")
        assert client.call_count == 1
