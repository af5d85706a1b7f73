"""Project configuration in ``.dotnet-bumper.json``, ``.yml`` or ``.yaml``."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from dotnet_bumper.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (
    ".dotnet-bumper.json",
    ".dotnet-bumper.yml",
    ".dotnet-bumper.yaml",
)


class BumperConfiguration(BaseModel):
    """User settings for an upgrade run."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns, relative to the project root, of files to leave alone",
    )
    disabled_upgraders: list[str] = Field(
        default_factory=list,
        alias="disabledUpgraders",
        description="Ids of upgraders that should not run",
    )
    resolve_digests: bool = Field(
        default=True,
        alias="resolveDigests",
        description="Re-pin container image digests after changing a tag",
    )

    @field_validator("exclude", "disabled_upgraders")
    @classmethod
    def _strip_entries(cls, values: list[str]) -> list[str]:
        return [value.strip() for value in values if value.strip()]


def find_configuration(project_path: Path) -> Path | None:
    """Return the first configuration file present in *project_path*."""
    for name in CONFIG_FILE_NAMES:
        candidate = project_path / name
        if candidate.is_file():
            return candidate
    return None


def _read(path: Path) -> Any:
    text = path.read_text(encoding="utf-8-sig")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    yaml = YAML(typ="safe")
    return yaml.load(text)


def load_configuration(project_path: Path, config_path: Path | None = None) -> BumperConfiguration:
    """Load the configuration for *project_path*.

    An explicit *config_path* must exist. Without one, the project root is
    searched and defaults are used when no file is found.

    Raises:
        FileNotFoundError: If *config_path* is given but does not exist.
        ConfigurationError: If the file cannot be parsed or is invalid.
    """
    if config_path is not None:
        if not config_path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        path = config_path
    else:
        path = find_configuration(project_path)
        if path is None:
            return BumperConfiguration()

    try:
        data = _read(path)
    except (OSError, ValueError, YAMLError) as exc:
        raise ConfigurationError(
            f"The configuration file '{path}' could not be loaded. Is the file valid JSON or YAML? {exc}"
        ) from exc

    if data is None:
        data = {}
    try:
        configuration = BumperConfiguration.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in '{path}': {exc}") from exc

    logger.debug("Loaded configuration from %s", path)
    return configuration
