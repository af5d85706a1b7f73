"""Command line interface for dotnet-bumper."""

from __future__ import annotations

import json
import logging
import signal
from contextlib import ExitStack
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from dotnet_bumper import __version__
from dotnet_bumper.cancellation import CancellationToken
from dotnet_bumper.config import load_configuration
from dotnet_bumper.container_registry import ContainerRegistryClient, DigestCache
from dotnet_bumper.errors import ConfigurationError, UpgradeCancelled
from dotnet_bumper.upgrade import ProcessingResult, RunReport, UpgradeRunner
from dotnet_bumper.versioning import ReleaseType, UpgradeChannel

console = Console()

app = typer.Typer(
    name="dotnet-bumper",
    help="Upgrade the .NET version used across a project's files",
    add_completion=False,
    no_args_is_help=True,
)

RESULT_STYLES = {
    ProcessingResult.NONE: "dim",
    ProcessingResult.SUCCESS: "green",
    ProcessingResult.WARNING: "yellow",
    ProcessingResult.ERROR: "red",
}


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"dotnet-bumper {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Upgrade .NET projects to a newer release channel."""


def _print_report(report: RunReport) -> None:
    mode = "[yellow]dry run[/yellow] " if report.dry_run else ""
    table = Table(title=f"Upgrade to .NET {report.channel}", header_style="bold cyan")
    table.add_column("Upgrader", style="bright_white")
    table.add_column("Description", style="dim")
    table.add_column("Files", justify="right")
    table.add_column("Changed", justify="right", style="cyan")
    table.add_column("Result")

    for category in report.categories:
        style = RESULT_STYLES[category.result]
        result = category.result.name.lower() if category.skipped is None else "skipped"
        table.add_row(
            category.upgrader_id,
            category.description,
            str(len(category.files)),
            str(len(category.changed_files)),
            f"[{style}]{result}[/{style}]",
        )
    console.print(table)

    for warning in report.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")

    if report.changelog:
        changes = "\n".join(f"- {line}" for line in report.changelog)
        title = "Changes that would be made" if report.dry_run else "Changes"
        console.print(Panel(changes, title=title, border_style="green"))
    else:
        console.print(f"{mode}[green]Nothing to upgrade.[/green]")


@app.command()
def upgrade(
    project: Path = typer.Argument(
        Path("."),
        help="Path of the project to upgrade",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
    channel: str = typer.Option(..., "--channel", "-c", help="Target release channel, e.g. 8.0"),
    sdk_version: Optional[str] = typer.Option(
        None, "--sdk-version", help="SDK version of the channel (defaults to MAJOR.MINOR.100)"
    ),
    release_type: ReleaseType = typer.Option(
        ReleaseType.LTS, "--release-type", help="Release type of the channel"
    ),
    support_phase: str = typer.Option(
        "active", "--support-phase", help="Support phase of the channel"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview changes without writing files"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed progress"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Configuration file (defaults to .dotnet-bumper.json|yml|yaml)"
    ),
    no_digests: bool = typer.Option(
        False, "--no-digests", help="Do not re-pin container image digests"
    ),
) -> None:
    """Upgrade the .NET version used in PROJECT to a release channel.

    Examples:
        dotnet-bumper upgrade . --channel 8.0 --sdk-version 8.0.100
        dotnet-bumper upgrade src --channel 9.0 --release-type sts --dry-run
    """
    _configure_logging(verbose)

    try:
        target = UpgradeChannel.parse(
            channel,
            sdk_version or f"{channel.strip()}.100",
            release_type=release_type,
            support_phase=support_phase,
        )
    except ValueError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(2)

    try:
        config = load_configuration(project, config_path)
    except (FileNotFoundError, ConfigurationError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(2)

    cancellation = CancellationToken()
    original_sigint = signal.getsignal(signal.SIGINT)

    def signal_handler(sig, frame):
        console.print("\n[yellow]Cancelling after the current file...[/yellow]")
        cancellation.cancel()

    signal.signal(signal.SIGINT, signal_handler)
    try:
        with ExitStack() as stack:
            digests = None
            if config.resolve_digests and not no_digests:
                digests = stack.enter_context(
                    ContainerRegistryClient(DigestCache(), cancellation=cancellation)
                )
            runner = UpgradeRunner(
                project,
                target,
                dry_run=dry_run,
                config=config,
                digests=digests,
                cancellation=cancellation,
            )
            report = runner.run()
    except UpgradeCancelled:
        console.print("[yellow]Upgrade cancelled.[/yellow]")
        raise typer.Exit(130)
    finally:
        signal.signal(signal.SIGINT, original_sigint)

    if json_output:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _print_report(report)

    if report.result == ProcessingResult.ERROR:
        raise typer.Exit(1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
