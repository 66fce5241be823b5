"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import time
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from bbb_dl import __version__
from bbb_dl.core import DownloadManager, RecordingSession
from bbb_dl.exceptions import BbbDlError, TransportError
from bbb_dl.media import Downloader
from bbb_dl.storage.config_manager import ConfigManager

from .formatters import format_error_with_suggestions, print_config, print_summary_panel
from .progress_manager import ProgressManager

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("bbb_dl")

app = typer.Typer(
    name="bbb-dl",
    help=(
        "Download a BigBlueButton recording and turn it into a Shotcut (MLT)"
        " project. Use 'bbb-dl <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "bbb-dl"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
    show_config: bool = typer.Option(
        False, "--show-config", help="Display the effective configuration."
    ),
):
    """BigBlueButton Downloader CLI"""
    if version:
        console.print(f"[bold]bbb-dl[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("bbb_dl").setLevel(log_level)

    if show_config:
        try:
            config_data = ConfigManager(CONFIG_FILE).get_config_as_dict()
        except BbbDlError as e:
            console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
            raise typer.Exit(code=1) from e
        print_config(CONFIG_FILE, config_data)
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing config without asking."
    ),
):
    """Write a configuration file with the default settings."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    try:
        ConfigManager(CONFIG_FILE).save_new_config()
    except BbbDlError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(f"[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")


@app.command(name="download")
def download_command(
    url: str = typer.Argument(
        ...,
        help=(
            "Playback URL of a BigBlueButton meeting in the form of"
            " https://<website>/playback/presentation/2.3/<meeting-id>"
        ),
    ),
    outdir: str | None = typer.Option(
        None, "-d", "--outdir", help="Specify output directory."
    ),
    conflict: str | None = typer.Option(
        None,
        "--conflict",
        help=(
            "What to do with existing files: make_unique, overwrite, skip,"
            " skip_unless_smaller."
        ),
    ),
    retries: int | None = typer.Option(
        None, "--retries", help="Retries per file after a network failure."
    ),
    retry_delay: float | None = typer.Option(
        None, "--retry-delay", help="Seconds to wait between retries."
    ),
    notes: bool | None = typer.Option(
        None, "--notes/--no-notes", help="Export the shared notes as notes.txt."
    ),
    no_progress: bool = typer.Option(
        False, "--no-progress", help="Do not show progress bars."
    ),
):
    """Download a BigBlueButton recording."""
    cli_options = {
        key: value
        for key, value in {
            "output_dir": outdir,
            "conflict_policy": conflict,
            "max_retries": retries,
            "retry_delay": retry_delay,
            "export_notes": notes,
        }.items()
        if value is not None
    }
    failures: list[TransportError] = []

    async def _download_async():
        log.info("Started downloader!")
        async with ProgressManager(
            console=console, enabled=not no_progress
        ) as progress_manager:
            config = ConfigManager(CONFIG_FILE).load_config(cli_options)
            async with Downloader(
                conflict_policy=config.conflict_policy,
                max_retries=config.max_retries,
                retry_delay=config.retry_delay,
                progress=progress_manager,
                on_error=failures.append,
                connect_timeout=config.connect_timeout,
                read_timeout=config.read_timeout,
            ) as downloader:
                manager = DownloadManager(downloader)
                session = RecordingSession(config, manager)
                start_time = time.monotonic()
                result = await session.run(url)
                duration = time.monotonic() - start_time

        if failures:
            log.warning(f"[yellow]{len(failures)} file(s) could not be downloaded:[/yellow]")
            for failure in failures:
                log.warning(f"  [dim]{escape(failure.url)}[/dim]")
        print_summary_panel(manager.stats, duration, result)

    try:
        asyncio.run(_download_async())
    except BbbDlError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e
