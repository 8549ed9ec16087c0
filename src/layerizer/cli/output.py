"""Rich console output helpers for the CLI.

Progress bars, layer summaries and formatted status messages.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

console = Console()

SYM_STEP = "▸"
SYM_OK = "✓"
SYM_ERR = "✗"
SYM_DOT = "·"


def create_progress() -> Progress:
    """Create a rich progress bar for region processing."""
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    console.print(f"\n[bold]Layerizer[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    console.print(f"\n{SYM_STEP} {message}")


def print_slice_info(path: str, layer_count: int, region_count: int) -> None:
    """Print slice file information.

    Args:
        path: Path to the slice file
        layer_count: Number of layers in the file
        region_count: Number of layer regions across all layers
    """
    # Text keeps paths with markup characters intact
    line = Text("  ")
    line.append(path)
    console.print(line)
    console.print(f"  {layer_count:,} layers {SYM_DOT} {region_count:,} layer regions")


def print_processing_info(workers: int, is_auto: bool = False) -> None:
    auto_suffix = " (auto)" if is_auto else ""
    console.print(f"  {workers} workers{auto_suffix} {SYM_DOT} Ctrl+C to cancel")


def print_layer_table(rows: list[tuple[int, int, int, int]]) -> None:
    """Print a per-layer breakdown of raw loops.

    Args:
        rows: (layer id, regions, loops, points) per layer
    """
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Layer", justify="right")
    table.add_column("Regions", justify="right")
    table.add_column("Loops", justify="right")
    table.add_column("Points", justify="right")
    for layer_id, regions, loops, points in rows:
        table.add_row(str(layer_id), str(regions), str(loops), f"{points:,}")
    console.print(table)


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    output_path: str,
    total_time_s: float,
    processed: int,
    perimeters: int,
    gap_fills: int,
    bridges: int,
    errors: int,
    avg_time_ms: float | None = None,
    min_time_ms: float | None = None,
    max_time_ms: float | None = None,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to the result file
        total_time_s: Total processing time in seconds
        processed: Number of layer regions processed
        perimeters: Total perimeter loops generated
        gap_fills: Total gap fill paths generated
        bridges: Number of bridges detected
        errors: Number of errors encountered
        avg_time_ms: Average time per region in milliseconds
        min_time_ms: Minimum time per region in milliseconds
        max_time_ms: Maximum time per region in milliseconds
    """
    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {_format_time(total_time_s)}")

    line = Text("  ")
    line.append(output_path, style="bold")
    console.print(line)

    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {processed} regions {SYM_DOT} {perimeters} perimeters {SYM_DOT} "
        f"{gap_fills} gap fills {SYM_DOT} {bridges} bridges {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}]"
    )

    if avg_time_ms is not None:
        timing_str = f"{avg_time_ms:.1f}ms avg"
        if min_time_ms is not None and max_time_ms is not None:
            timing_str += f" ({min_time_ms:.1f}–{max_time_ms:.1f}ms range)"
        console.print(f"  {timing_str}")


def print_errors(errors: list[tuple[str, str]], limit: int = 10) -> None:
    """Print failed layer regions.

    Args:
        errors: (label, message) pairs
        limit: Maximum number of errors to show
    """
    for _, message in errors[:limit]:
        console.print(f"  [red]{SYM_ERR}[/red] {message}")
    if len(errors) > limit:
        console.print(f"  ... +{len(errors) - limit} more")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_notice() -> None:
    console.print(f"\n{SYM_DOT} Cancelling... waiting for in-progress regions")


def print_cancellation_summary(processed: int, cancelled: int) -> None:
    """Print cancellation summary.

    Args:
        processed: Number of regions processed before cancellation
        cancelled: Number of pending tasks that were cancelled
    """
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print(f"  {processed} regions completed {SYM_DOT} {cancelled} tasks cancelled")
    console.print("  No output file created")
