"""Upgrader: ``Runtime`` properties in AWS SAM and CloudFormation templates.

Templates are found by name and through the ``template`` property of
``aws-lambda-tools-defaults.json``. A file only counts as a template when
its root has ``AWSTemplateFormatVersion``. Build output in ``.aws-sam`` is
never touched.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from dotnet_bumper.documents import (
    DocumentLocator,
    JsonLocator,
    ScalarSite,
    TokenSelector,
    YamlLocator,
    load_document,
)
from dotnet_bumper.versioning import TokenKind, UpgradeChannel

from ..registry import UpgraderRegistry
from .aws_lambda_tools import LAMBDA_TOOLS_DEFAULTS
from .base import EXCLUDED_DIRECTORIES, BaseUpgrader, match_any

logger = logging.getLogger(__name__)

UPGRADER_ID = "aws-sam-template"
UPGRADER_DESCRIPTION = "Update AWS SAM template Lambda runtimes"

TEMPLATE_MARKER = "AWSTemplateFormatVersion"
SAM_BUILD_DIRECTORY = ".aws-sam"


def is_function_runtime(site: ScalarSite) -> bool:
    return site.key == "Runtime" and TEMPLATE_MARKER in site.root


def referenced_templates(defaults_path: Path) -> list[Path]:
    """Templates named by the ``template`` property of a Lambda Tools defaults file."""
    document = load_document(defaults_path, JsonLocator())
    if not document:
        return []
    templates: list[Path] = []
    for site in document.scalars():
        if site.path == ("template",) and site.value:
            templates.append((defaults_path.parent / site.value).resolve())
    return templates


@UpgraderRegistry.register
class AwsSamTemplateUpgrader(BaseUpgrader):
    upgrader_id = UPGRADER_ID
    description = UPGRADER_DESCRIPTION
    patterns = ("*.yml", "*.yaml", "*.template", "*.json")
    priority = 80
    file_format = "yaml"
    excluded_directories = EXCLUDED_DIRECTORIES | {SAM_BUILD_DIRECTORY}

    def find_files(self, project_path: Path, exclude: list[str] | None = None) -> list[Path]:
        found = set(super().find_files(project_path, exclude))
        root = project_path.resolve()
        for defaults in [p for p in found if p.name == LAMBDA_TOOLS_DEFAULTS]:
            for template in referenced_templates(defaults):
                if not template.is_file() or not template.is_relative_to(root):
                    logger.debug("Ignoring template %s referenced by %s", template, defaults)
                    continue
                relative = template.relative_to(root)
                if SAM_BUILD_DIRECTORY in relative.parts:
                    continue
                if exclude and match_any(PurePosixPath(relative.as_posix()), exclude):
                    continue
                found.add(project_path / relative)
        return sorted(found)

    def locator_for(self, path: Path, text: str) -> DocumentLocator:
        if path.suffix.lower() == ".json" or text.lstrip().startswith("{"):
            return JsonLocator()
        return YamlLocator()

    def is_relevant(self, text: str) -> bool:
        return TEMPLATE_MARKER in text

    def selectors(self, channel: UpgradeChannel) -> list[TokenSelector]:
        return [TokenSelector("runtime", TokenKind.MANAGED_RUNTIME, is_function_runtime)]

    def changelog_entry(self, channel: UpgradeChannel) -> str:
        return f"Update AWS SAM template Lambda runtime to `{channel.managed_runtime}`"
