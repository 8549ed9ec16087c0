"""CLI application entry point for layerizer.

This module provides the main CLI interface using Typer.
"""

import os
from pathlib import Path
from typing import Annotated

import typer

from layerizer import __version__
from layerizer.cli.output import (
    SYM_OK,
    console,
    create_progress,
    print_cancellation_notice,
    print_cancellation_summary,
    print_error,
    print_errors,
    print_header,
    print_layer_table,
    print_processing_info,
    print_slice_info,
    print_step,
    print_success,
)
from layerizer.config import (
    FlowConfig,
    LayerizerSettings,
    LoggingConfig,
    ProcessingConfig,
    SlicingConfig,
)
from layerizer.core import SliceProcessor
from layerizer.exceptions import LayerizerError, SliceLoadError, SliceSaveError
from layerizer.io import ResultWriter, SliceReader

app = typer.Typer(
    name="layerizer",
    help="Turn sliced layer contours into perimeters, gap fill and classified fill surfaces.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Layerizer[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def layerize(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Path to input JSON slice file",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-layers.json)",
        ),
    ] = None,
    perimeters: Annotated[
        int,
        typer.Option(
            "--perimeters",
            "-p",
            help="Number of perimeter loops per island",
            min=0,
            max=50,
        ),
    ] = 3,
    fill_density: Annotated[
        float,
        typer.Option(
            "--fill-density",
            "-d",
            help="Sparse infill density (0-1)",
            min=0.0,
            max=1.0,
        ),
    ] = 0.4,
    solid_infill_below_area: Annotated[
        float,
        typer.Option(
            "--solid-infill-below-area",
            help="Force solid infill for internal regions below this area (mm²)",
            min=0.0,
        ),
    ] = 70.0,
    extrusion_width: Annotated[
        float,
        typer.Option(
            "--extrusion-width",
            "-w",
            help="Default extrusion width in mm",
            min=0.01,
        ),
    ] = 0.5,
    external_perimeters_first: Annotated[
        bool,
        typer.Option(
            "--external-perimeters-first",
            help="Print external perimeters before internal ones",
        ),
    ] = False,
    thin_walls: Annotated[
        bool,
        typer.Option(
            "--thin-walls/--no-thin-walls",
            help="Detect walls too thin for a perimeter loop",
        ),
    ] = True,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto, 1 = in-process)",
            min=1,
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Load and summarize the slice file without processing it",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Generate perimeters, gap fill and fill surfaces for every layer of a slice file.

    Example:
        layerizer part.json

    This will create part-layers.json with ordered perimeter loops, gap fill
    paths and classified fill surfaces for each layer region.
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not input_file.exists():
        print_error(
            f"Input file not found: {input_file}",
            details=f"The file '{input_file}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_file.is_file():
        print_error(
            f"Input path is not a file: {input_file}",
            details="Please provide a path to a JSON slice file.",
        )
        raise typer.Exit(code=1)

    if not quiet:
        print_header(__version__)

    settings = LayerizerSettings(
        slicing=SlicingConfig(
            perimeters=perimeters,
            fill_density=fill_density,
            solid_infill_below_area=solid_infill_below_area,
            external_perimeters_first=external_perimeters_first,
            thin_walls=thin_walls,
        ),
        flow=FlowConfig(extrusion_width=extrusion_width),
        processing=ProcessingConfig(max_workers=workers),
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "WARNING",
        ),
    )

    try:
        if not quiet:
            print_step("Loading slices")

        reader = SliceReader(input_file, settings.flow)
        reader.load()
        region_count = reader.region_count

        if not quiet:
            print_slice_info(str(input_file), reader.layer_count, region_count)

        if dry_run:
            _handle_dry_run(reader, quiet, verbose)
            raise typer.Exit(code=0)

        if region_count == 0:
            if not quiet:
                console.print("\nNo layer regions found. Nothing to process.")
            raise typer.Exit(code=0)

        if not quiet:
            actual_workers = workers if workers else os.cpu_count() or 1
            print_step("Processing")
            print_processing_info(actual_workers, is_auto=(workers is None))

        output_path = output or ResultWriter.get_output_path(input_file)
        processor = SliceProcessor(settings)
        stats = None

        try:
            if not quiet:
                with create_progress() as progress:
                    task_id = progress.add_task(
                        f"Processing {region_count} regions",
                        total=region_count,
                    )

                    def update_progress(completed: int, *_: object) -> None:
                        progress.update(task_id, completed=completed)

                    stats = processor.process(
                        input_path=input_file,
                        output_path=output_path,
                        max_workers=workers,
                        progress_callback=update_progress,
                    )
            else:
                stats = processor.process(
                    input_path=input_file,
                    output_path=output_path,
                    max_workers=workers,
                )
        except KeyboardInterrupt:
            if not quiet:
                print_cancellation_notice()
                print_cancellation_summary(
                    processed=stats.processed_count if stats else 0,
                    cancelled=stats.cancelled_count if stats else 0,
                )
            raise typer.Exit(code=130) from None

        if not quiet:
            print_success(
                output_path=str(output_path),
                total_time_s=stats.duration_seconds,
                processed=stats.processed_count,
                perimeters=stats.perimeter_count,
                gap_fills=stats.gap_fill_count,
                bridges=stats.bridge_count,
                errors=stats.error_count,
                avg_time_ms=stats.avg_region_time_ms,
                min_time_ms=stats.min_region_time_ms,
                max_time_ms=stats.max_region_time_ms,
            )
            if stats.errors:
                print_errors(stats.errors)

    except SliceLoadError as e:
        print_error(f"Could not load slices: {e.reason}")
        raise typer.Exit(code=1)
    except SliceSaveError as e:
        print_error(f"Could not save results: {e.reason}")
        raise typer.Exit(code=1)
    except LayerizerError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _handle_dry_run(reader: SliceReader, quiet: bool, verbose: bool) -> None:
    """Handle --dry-run mode.

    Args:
        reader: Loaded slice reader
        quiet: Suppress output
        verbose: Show the per-layer table
    """
    if quiet:
        return

    rows = []
    for layer in reader.iter_layers():
        loops = [loop for region in layer.regions for loop in region.raw_loops]
        rows.append((layer.id, len(layer.regions), len(loops), sum(len(loop) for loop in loops)))

    console.print("\n[bold]Analysis[/bold]\n")
    console.print(f"  Layers                {reader.layer_count}")
    console.print(f"  Layer regions         {reader.region_count}")
    console.print(f"  Raw loops             {sum(row[2] for row in rows)}")

    if verbose and rows:
        console.print("\n[bold]Layers[/bold]")
        print_layer_table(rows)

    console.print(f"\n[bold green]{SYM_OK} Dry run complete[/bold green] - nothing written")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
