"""Runs registered upgraders over a project for one upgrade channel."""

from __future__ import annotations

import logging
from pathlib import Path

from dotnet_bumper.cancellation import CancellationToken
from dotnet_bumper.config import BumperConfiguration
from dotnet_bumper.container_registry import ContainerRegistryClient
from dotnet_bumper.documents import (
    Candidate,
    DocumentParseFailure,
    EditSpan,
    apply_edits,
    find_candidates,
    parse_text,
    read_document,
    write_document,
)
from dotnet_bumper.versioning import UpgradeChannel

from . import upgraders  # noqa: F401  (registers the built-in upgraders)
from .decision import DecisionEngine, Replace, Unsupported, UpgradePolicy
from .log_context import UpgradeLog
from .registry import UpgraderRegistry
from .result import CategoryResult, FileOutcome, ProcessingResult, RunReport, Stage
from .upgraders.base import BaseUpgrader, UpgradeContext

logger = logging.getLogger(__name__)


_SEPARATORS = ", \t\r\n"


def _describe(text: str, edit: EditSpan) -> str:
    original = edit.span.slice(text)
    if original:
        return f"{original} -> {edit.replacement}"
    return f"added {edit.replacement.lstrip(_SEPARATORS)}"


class UpgradeRunner:
    """Applies every enabled upgrader to a project, one file at a time.

    Upgraders run in priority order and each sees the files as left by the
    ones before it. A failure in one file never stops the others; the worst
    outcome of a category is its result.
    """

    def __init__(
        self,
        project_path: Path,
        channel: UpgradeChannel,
        policy: UpgradePolicy | None = None,
        dry_run: bool = False,
        config: BumperConfiguration | None = None,
        digests: ContainerRegistryClient | None = None,
        cancellation: CancellationToken | None = None,
        log: UpgradeLog | None = None,
    ):
        self.context = UpgradeContext(
            project_path=project_path,
            channel=channel,
            policy=policy or UpgradePolicy(),
            dry_run=dry_run,
            config=config or BumperConfiguration(),
            digests=digests,
            cancellation=cancellation or CancellationToken(),
            log=log or UpgradeLog(),
        )

    @property
    def log(self) -> UpgradeLog:
        return self.context.log

    def run(self) -> RunReport:
        """Run all enabled upgraders and return the combined report.

        Raises:
            UpgradeCancelled: If cancellation was requested. Files already
                written stay written.
        """
        context = self.context
        report = RunReport(channel=str(context.channel), dry_run=context.dry_run)
        disabled = set(context.config.disabled_upgraders)

        upgraders_to_run = UpgraderRegistry.get_enabled(disabled)
        logger.debug(
            "Upgrading %s to .NET %s with %d upgrader(s)",
            context.project_path,
            context.channel,
            len(upgraders_to_run),
        )

        for upgrader in upgraders_to_run:
            context.cancellation.raise_if_cancelled()
            report.categories.append(self.run_upgrader(upgrader))

        report.changelog = list(self.log.changelog)
        report.warnings = [str(w) for w in self.log.warnings]
        return report

    def run_upgrader(self, upgrader: BaseUpgrader) -> CategoryResult:
        """Process every file of one upgrader's category."""
        context = self.context
        category = CategoryResult(upgrader.upgrader_id, upgrader.description)

        can_apply, reason = upgrader.can_apply(context)
        if not can_apply:
            logger.debug("Skipping %s: %s", upgrader.upgrader_id, reason)
            category.skipped = reason
            return category

        engine = DecisionEngine(context.channel, context.policy)
        files = upgrader.find_files(context.project_path, context.config.exclude)
        logger.debug("%s: %d file(s) found", upgrader.upgrader_id, len(files))

        for path in files:
            context.cancellation.raise_if_cancelled()
            category.add(self.process_file(upgrader, engine, path))

        if category.changed_files:
            category.changelog = upgrader.changelog_entry(context.channel)
            self.log.add_changelog(category.changelog)
        return category

    def process_file(
        self, upgrader: BaseUpgrader, engine: DecisionEngine, path: Path
    ) -> FileOutcome:
        """Discover, parse, locate, decide, patch and write one file."""
        context = self.context
        relative = self._relative(path)

        try:
            text, metadata = read_document(path)
        except (OSError, UnicodeDecodeError) as exc:
            message = f"Unable to read file: {exc}"
            self.log.warn(message, relative)
            return FileOutcome(relative, ProcessingResult.WARNING, Stage.PARSE, messages=[message])

        if not upgrader.is_relevant(text):
            return FileOutcome(relative, ProcessingResult.NONE, Stage.DISCOVER)

        document = parse_text(path, text, metadata, upgrader.locator_for(path, text))
        if isinstance(document, DocumentParseFailure):
            self.log.warn(document.reason, relative)
            return FileOutcome(
                relative, ProcessingResult.WARNING, Stage.PARSE, messages=[document.reason]
            )

        candidates = find_candidates(document, upgrader.selectors(context.channel))
        if not candidates:
            return FileOutcome(relative, ProcessingResult.NONE, Stage.LOCATE)

        result = ProcessingResult.NONE
        messages: list[str] = []
        replacements: list[tuple[Candidate, str]] = []
        for candidate in candidates:
            decision = engine.decide(candidate.token)
            if isinstance(decision, Unsupported):
                result = result.max(ProcessingResult.WARNING)
                messages.append(decision.reason)
                if engine.should_warn():
                    self.log.warn(decision.reason, relative)
            elif isinstance(decision, Replace):
                replacement = upgrader.finalize(path, candidate, decision.text, context)
                replacements.append((candidate, replacement))

        edits = upgrader.plan_edits(document, replacements) if replacements else []
        messages.extend(_describe(document.text, edit) for edit in edits)

        if not edits:
            return FileOutcome(relative, result, Stage.NO_CHANGE, messages=messages)

        updated = apply_edits(document.text, edits)
        if updated == document.text:
            return FileOutcome(relative, result, Stage.NO_CHANGE, messages=messages)

        result = result.max(ProcessingResult.SUCCESS)
        if context.dry_run:
            logger.debug("Would update %s with %d edit(s)", relative, len(edits))
            return FileOutcome(relative, result, Stage.PATCH, True, len(edits), messages)

        context.cancellation.raise_if_cancelled()
        try:
            write_document(path, updated, document.metadata)
        except (OSError, UnicodeEncodeError) as exc:
            message = f"Failed to write file: {exc}"
            self.log.error(message, relative)
            return FileOutcome(
                relative, ProcessingResult.ERROR, Stage.WRITE, False, len(edits), messages + [message]
            )

        logger.debug("Updated %s with %d edit(s)", relative, len(edits))
        return FileOutcome(relative, result, Stage.WRITE, True, len(edits), messages)

    def _relative(self, path: Path) -> Path:
        try:
            return path.relative_to(self.context.project_path)
        except ValueError:
            return path
