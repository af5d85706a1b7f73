"""Version grammars understood by the upgrade engine."""

from .grammar import compare, format_upgraded, is_at_least, parse
from .models import (
    Ordering,
    ParseFailure,
    ReleaseType,
    SupportPhase,
    TokenKind,
    UpgradeChannel,
    VersionToken,
)

__all__ = [
    "Ordering",
    "ParseFailure",
    "ReleaseType",
    "SupportPhase",
    "TokenKind",
    "UpgradeChannel",
    "VersionToken",
    "compare",
    "format_upgraded",
    "is_at_least",
    "parse",
]
