"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from bbb_dl.core.session import SessionResult
from bbb_dl.models.stats import DownloadStats
from bbb_dl.models.timeline import track_duration
from bbb_dl.utils.formatting import format_duration, format_size


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "InvalidPlaybackUrlError": [
            "• Copy the URL from the browser while the recording is playing.",
            "• Only the 2.3 presentation format is supported.",
            "• The URL must end in a 40-character hex id, a dash and 13 digits.",
        ],
        "MissingRequiredAssetError": [
            "• The recording may still be processing on the server.",
            "• The server may not publish this asset; check the playback page.",
            "• Check the warnings above for files that failed to download.",
        ],
        "MetadataParseError": [
            "• The server returned a document that is not valid XML.",
            "• Run the command with -vv for detailed logs.",
        ],
        "OutputWriteError": [
            "• Check that the output folder is writable.",
            "• A folder named after the meeting may already exist; use --outdir.",
        ],
        "ConfigurationError": [
            "• Fix the value in your config file or run `bbb-dl init --force`.",
        ],
        "ClientResponseError": [
            "• A network connection issue occurred.",
            "• The BigBlueButton server might be temporarily unavailable.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the effective configuration."""
    console = Console()
    content = "\n".join(f"{key} = {value}" for key, value in config_data.items())
    console.print(
        Panel(
            content,
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_summary_panel(
    stats: DownloadStats, duration_s: float, result: SessionResult | None = None
):
    """Displays the final summary of a download session."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=18)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row(
        "✓ Downloaded:", f"[bold green]{stats.files_downloaded}[/bold green]"
    )
    if stats.files_skipped > 0:
        stats_table.add_row("○ Skipped:", f"[yellow]{stats.files_skipped}[/yellow]")
    if stats.files_failed > 0:
        stats_table.add_row("✗ Failed:", f"[bold red]{stats.files_failed}[/bold red]")

    stats_table.add_row("", "")
    stats_table.add_row(
        "Total Size:", f"[cyan]{format_size(stats.total_size_downloaded)}[/cyan]"
    )
    avg_speed = stats.total_size_downloaded / duration_s if duration_s > 0 else 0
    stats_table.add_row(
        "Avg. Speed:", f"[magenta]{format_size(int(avg_speed))}/s[/magenta]"
    )
    stats_table.add_row("Time Elapsed:", f"[blue]{format_duration(duration_s)}[/blue]")

    if result:
        stats_table.add_row("", "")
        stats_table.add_row("Meeting:", escape(result.metadata.meeting_name))
        stats_table.add_row(
            "Duration:",
            format_duration(result.metadata.duration_ms / 1000),
        )
        for track in result.timeline.tracks:
            stats_table.add_row(
                f"{track.name}:",
                f"{len(track.entries)} entries, "
                f"{format_duration(track_duration(track) / 1000)}",
            )
        stats_table.add_row("Project File:", f"[dim]{result.project_file}[/dim]")

    border_color = "green" if stats.files_failed == 0 else "yellow"
    console.print(
        Panel(
            stats_table,
            title="📥 [bold]Download Summary[/bold]",
            border_style=border_color,
            expand=False,
        )
    )
