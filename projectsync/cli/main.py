"""
Main CLI entry point for projectsync.
"""

# Standard library imports
import asyncio
from pathlib import Path
from typing import Optional

# Third-party imports
import typer
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

# Local imports
from projectsync.config import ConfigError, Settings, load_settings
from projectsync.errors import FetchFailure, SyncFailure
from projectsync.fs import LocalFileSystem
from projectsync.models import Policy, SyncReport
from projectsync.sync.policy import get_project_ids_from_zip, sync_with_policy
from projectsync.utils.logging import configure_logging
from projectsync.utils.rich_console import get_console, print_table

console = get_console()

app = typer.Typer(
    help="projectsync - Course project file synchronizer\n\nFetches the projects archive and writes its files into a project directory.",
    no_args_is_help=True,
)

RootOption = typer.Option(Path("."), "--root", "-r", help="Directory backing the project filesystem")
UrlOption = typer.Option(None, "--url", "-u", help="Primary archive location (URL or path)")
BasePathOption = typer.Option(None, "--base-path", help="Directory project files are written under")
FallbackOption = typer.Option(None, "--fallback/--no-fallback", help="Allow the fallback archive location")
AppUrlOption = typer.Option(None, "--app-url", help="Deployment address used to derive the fallback")


def _settings(url: str | None, base_path: str | None, app_url: str | None) -> Settings:
    try:
        settings = load_settings(zip_url=url, base_path=base_path, app_url=app_url)
    except ConfigError as error:
        print_table(["Error"], [[str(error)]], title="Configuration Error")
        raise typer.Exit(1)
    configure_logging(settings.log_level, settings.debug, settings.log_file)
    return settings


def _report_failure(error: SyncFailure) -> None:
    rows = [["Error", error.message]]
    if isinstance(error, FetchFailure):
        rows.append(["Primary", error.primary_location])
        if error.fallback_attempted:
            rows.append(["Fallback", error.fallback_location])
    print_table(["Field", "Value"], rows, title="Synchronization Failed")


def _run_policy(
    policy: Policy,
    root: Path,
    url: str | None,
    base_path: str | None,
    fallback: bool | None,
    app_url: str | None,
) -> None:
    settings = _settings(url, base_path, app_url)
    fs = LocalFileSystem(root)

    overrides = {} if fallback is None else {"use_fallback": fallback}
    progress = Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    )
    with progress:
        task = progress.add_task(policy.description, total=None)

        def on_progress(done: int, total: int) -> None:
            progress.update(task, completed=done, total=total)

        options = settings.options(on_progress=on_progress, **overrides)
        try:
            report = asyncio.run(
                sync_with_policy(fs, policy, settings.zip_url, options, settings.fetcher())
            )
        except SyncFailure as error:
            progress.stop()
            _report_failure(error)
            raise typer.Exit(1)

    _print_report(policy, report, fs)


def _print_report(policy: Policy, report: SyncReport, fs: LocalFileSystem) -> None:
    print_table(
        ["Status", "Value"],
        [
            ["Policy", policy.metadata.name],
            ["Source", report.source.value if report.source else "(none)"],
            ["Root", str(fs.root)],
            ["Entries", report.total],
            ["Written", len(report.written)],
            ["Kept", len(report.skipped)],
            ["Ignored", len(report.ignored)],
        ],
        title="Project Synchronization",
    )


@app.command()
def create(
    root: Path = RootOption,
    url: Optional[str] = UrlOption,
    base_path: Optional[str] = BasePathOption,
    fallback: Optional[bool] = FallbackOption,
    app_url: Optional[str] = AppUrlOption,
):
    """Create missing project files, preserving files that already exist."""
    _run_policy(Policy.create, root, url, base_path, fallback, app_url)


@app.command()
def reset(
    root: Path = RootOption,
    url: Optional[str] = UrlOption,
    base_path: Optional[str] = BasePathOption,
    fallback: Optional[bool] = FallbackOption,
    app_url: Optional[str] = AppUrlOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Overwrite without confirmation"),
):
    """Reset all project files from the archive, overwriting local edits."""
    if not yes:
        typer.confirm("This overwrites every project file. Continue?", abort=True)
    _run_policy(Policy.reset, root, url, base_path, fallback, app_url)


@app.command()
def projects(
    url: Optional[str] = UrlOption,
    fallback: Optional[bool] = FallbackOption,
    app_url: Optional[str] = AppUrlOption,
):
    """List the project ids contained in the archive."""
    settings = _settings(url, None, app_url)
    allow_fallback = settings.use_fallback if fallback is None else fallback
    try:
        ids = asyncio.run(
            get_project_ids_from_zip(settings.zip_url, settings.fetcher(), allow_fallback)
        )
    except SyncFailure as error:
        _report_failure(error)
        raise typer.Exit(1)

    if not ids:
        print_table(["Info"], [["No projects found"]], title="Archive Projects")
        return
    print_table(["#", "Project"], [[index + 1, pid] for index, pid in enumerate(ids)], title="Archive Projects")


@app.command()
def version():
    """Show the projectsync version."""
    from projectsync import __version__

    typer.echo(f"projectsync version: {__version__}")
