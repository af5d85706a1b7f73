"""Built-in upgraders. Importing this package registers them."""

from __future__ import annotations

from . import (  # noqa: F401
    aws_lambda_tools,
    aws_sam_template,
    container_base_image,
    dockerfile,
    github_actions,
    global_json,
    runtime_identifier,
    serverless,
    target_framework,
    visual_studio_components,
    vscode,
)
from .base import BaseUpgrader, UpgradeContext

__all__ = ["BaseUpgrader", "UpgradeContext"]
