"""Upgrade engine: decisions, upgraders and the runner that drives them."""

from __future__ import annotations

from .decision import (
    Decision,
    DecisionEngine,
    Replace,
    Unchanged,
    Unsupported,
    UpgradePolicy,
    decide,
)
from .log_context import Diagnostic, UpgradeLog
from .registry import UpgraderRegistry
from .result import CategoryResult, FileOutcome, ProcessingResult, RunReport, Stage
from .runner import UpgradeRunner

__all__ = [
    "CategoryResult",
    "Decision",
    "DecisionEngine",
    "Diagnostic",
    "FileOutcome",
    "ProcessingResult",
    "Replace",
    "RunReport",
    "Stage",
    "Unchanged",
    "Unsupported",
    "UpgradeLog",
    "UpgradePolicy",
    "UpgradeRunner",
    "UpgraderRegistry",
    "decide",
]
