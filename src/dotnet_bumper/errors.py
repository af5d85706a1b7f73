"""Exception hierarchy for dotnet-bumper."""

from __future__ import annotations


class BumperError(Exception):
    """Base exception for dotnet-bumper errors."""


class ConfigurationError(BumperError, RuntimeError):
    """Raised when a configuration file cannot be loaded or is invalid."""


class UpgradeCancelled(BumperError):
    """Raised at a suspension point once cancellation has been requested."""

    def __init__(self, message: str = "Upgrade cancelled"):
        super().__init__(message)


class EditOrderError(BumperError, ValueError):
    """Edits passed to a single patch pass are unsorted or overlap.

    This is a programming error in the caller and is never recovered from.
    """


class AmbiguousCandidateError(BumperError, AssertionError):
    """Two selectors of equal specificity claimed overlapping spans."""

    def __init__(self, path: str, first: str, second: str):
        self.path = path
        super().__init__(
            f"Selectors '{first}' and '{second}' matched overlapping spans in {path}"
        )
