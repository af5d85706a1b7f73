from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator

import pytest

from dotnet_bumper.upgrade import UpgraderRegistry
from dotnet_bumper.versioning import UpgradeChannel

PROJECT_FILE = """<Project Sdk="Microsoft.NET.Sdk">

  <PropertyGroup>
    <TargetFramework>net6.0</TargetFramework>
    <RuntimeIdentifier>win10-x64</RuntimeIdentifier>
    <ContainerBaseImage>mcr.microsoft.com/dotnet/runtime:6.0</ContainerBaseImage>
  </PropertyGroup>

</Project>
"""

GLOBAL_JSON = """{
  "sdk": {
    "version": "6.0.100",
    "rollForward": "latestMajor"
  }
}
"""

WORKFLOW = """name: build
on: push
jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
      - uses: actions/setup-dotnet@v4
        with:
          dotnet-version: '6.0.x' # SDK
      - run: dotnet test
"""

DOCKERFILE = """FROM mcr.microsoft.com/dotnet/sdk:6.0 AS build
WORKDIR /src
FROM mcr.microsoft.com/dotnet/aspnet:6.0-bullseye-slim
"""

LAMBDA_TOOLS_DEFAULTS = """{
  "profile": "",
  "region": "eu-west-1",
  "framework": "net6.0",
  "function-runtime": "dotnet6",
  "template": "serverless.template"
}
"""

SAM_TEMPLATE = """{
  "AWSTemplateFormatVersion": "2010-09-09",
  "Transform": "AWS::Serverless-2016-10-31",
  "Resources": {
    "Function": {
      "Type": "AWS::Serverless::Function",
      "Properties": {
        "Runtime": "dotnet6",
        "Handler": "App::App.Function::Handler"
      }
    }
  }
}
"""

SERVERLESS = """service: app
provider:
  name: aws
  runtime: dotnet6
functions:
  hello:
    handler: App::App.Handler::Run
    runtime: dotnet6
"""

LAUNCH_JSON = """{
  // Use IntelliSense to learn about possible attributes.
  "version": "0.2.0",
  "configurations": [
    {
      "name": ".NET Core Launch",
      "type": "coreclr",
      "program": "${workspaceFolder}/bin/Debug/net6.0/App.dll",
      "cwd": "${workspaceFolder}"
    }
  ]
}
"""

PROJECT_FILES = {
    "src/App/App.csproj": PROJECT_FILE,
    "global.json": GLOBAL_JSON,
    ".github/workflows/build.yml": WORKFLOW,
    "src/App/Dockerfile": DOCKERFILE,
    "src/App/aws-lambda-tools-defaults.json": LAMBDA_TOOLS_DEFAULTS,
    "src/App/serverless.template": SAM_TEMPLATE,
    "serverless.yml": SERVERLESS,
    ".vscode/launch.json": LAUNCH_JSON,
}


@pytest.fixture()
def channel() -> UpgradeChannel:
    """.NET 8 LTS in active support, SDK feature band 100."""
    return UpgradeChannel.parse("8.0", "8.0.108")


@pytest.fixture()
def sts_channel() -> UpgradeChannel:
    return UpgradeChannel.parse("9.0", "9.0.100", release_type="sts")


@pytest.fixture()
def project(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture()
def write_file(project: Path) -> Callable[..., Path]:
    """Write a file under the project root, creating parent directories."""

    def _write(relative: str, content: str | bytes) -> Path:
        path = project / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
        return path

    return _write


@pytest.fixture()
def isolated_registry() -> Iterator[type[UpgraderRegistry]]:
    """Empty the upgrader registry for a test and restore it afterwards."""
    saved = dict(UpgraderRegistry._upgraders)
    UpgraderRegistry.clear()
    try:
        yield UpgraderRegistry
    finally:
        UpgraderRegistry.clear()
        UpgraderRegistry._upgraders.update(saved)


@pytest.fixture()
def sample_project(project: Path, write_file: Callable[..., Path]) -> Path:
    """A project touching every built-in upgrader."""
    for relative, content in PROJECT_FILES.items():
        write_file(relative, content)
    return project


@pytest.fixture()
def sample_files() -> dict[str, str]:
    return dict(PROJECT_FILES)
