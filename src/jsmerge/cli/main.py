"""jsmerge CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from ..core import DebugTap, FileSink, merge
from ..core.planner import plan_inputs, total_size
from ..discovery import expand_patterns, format_bytes, json_files_in_directory
from ..errors import InputFileError, NoInputFilesError
from ..settings import MergeSettings, load_settings
from .progress import SpinnerReporter


def _collect_inputs(inputs, directory, pattern):
    files = []
    if directory:
        files.extend(json_files_in_directory(directory, pattern))
    files.extend(expand_patterns(inputs))
    return files


def _print_debug(tap: DebugTap) -> None:
    click.echo("\nDebug Information:", err=True)
    click.echo(f"First {tap.keep} lines: {tap.first_lines}", err=True)
    click.echo(f"Last {tap.keep} lines: {tap.last_lines}", err=True)
    click.echo(f"Total lines: {tap.line_count}", err=True)


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("output", type=click.Path(dir_okay=False))
@click.argument("inputs", nargs=-1)
@click.option(
    "--dir",
    "directory",
    type=click.Path(file_okay=False),
    help="Merge the files in this directory matching --pattern.",
)
@click.option(
    "--pattern",
    default="*.json",
    show_default=True,
    help="Glob used with --dir.",
)
@click.option(
    "--boundary",
    type=click.Choice(["depth", "line"]),
    default=None,
    help="Record boundary detection (default: $JSMERGE_BOUNDARY or depth).",
)
@click.option(
    "--chunk-size",
    type=int,
    default=None,
    help="Read chunk size in bytes, clamped to 64 KiB..1 MiB.",
)
@click.option("-q", "--quiet", is_flag=True, help="No progress or summary.")
@click.option("--debug", is_flag=True, help="Show first/last output lines.")
@click.option("-v", "--verbose", is_flag=True, help="Log merge details to stderr.")
def cli(
    output, inputs, directory, pattern, boundary, chunk_size, quiet, debug, verbose
):
    """Merge NDJSON files into a single JSON array written to OUTPUT.

    INPUTS may be file paths or glob patterns ("data/*.json", "**/*.json").
    Files are merged in the order given; each pattern's matches are sorted.

    Examples:
        jsmerge output.json file1.json file2.json
        jsmerge output.json --dir ./data
        jsmerge output.json --dir ./data --pattern "*.ndjson"
        jsmerge output.json "data/**/*.json"

    If the merge fails part way, OUTPUT is left without its closing
    bracket. Every record in it is complete; append "]" to salvage it.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )

    if not inputs and not directory:
        raise click.UsageError("Provide input files or --dir <directory>")

    started = False
    try:
        settings: MergeSettings = load_settings(
            boundary=boundary, chunk_size=chunk_size
        )
        input_files = _collect_inputs(inputs, directory, pattern)
        if not input_files:
            click.echo("Error: No JSON files found to merge", err=True)
            sys.exit(1)

        planned = plan_inputs(input_files)
        if not quiet:
            click.echo(
                f"Found {len(planned)} files to merge "
                f"({format_bytes(total_size(planned))} total)"
            )

        reporter = None if quiet else SpinnerReporter(settings.progress_interval)
        taps = []

        def sink_factory(path: Path, s: MergeSettings):
            sink = FileSink(path, buffer_size=s.output_buffer_size)
            if not debug:
                return sink
            tap = DebugTap(sink)
            taps.append(tap)
            return tap

        started = True
        try:
            result = merge(
                planned,
                output,
                reporter,
                settings=settings,
                sink_factory=sink_factory,
            )
        finally:
            if reporter is not None:
                reporter.finish()
            if taps:
                _print_debug(taps[0])

        if not quiet:
            click.echo(
                f"Merged {result.records_emitted} records from "
                f"{result.files_merged} files into {result.output_path} "
                f"in {result.elapsed_seconds:.2f}s"
            )

    except KeyboardInterrupt:
        click.echo("Interrupted: output left without closing bracket", err=True)
        sys.exit(130)
    except (InputFileError, NoInputFilesError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        if started and Path(output).exists():
            click.echo(
                f"Output '{output}' is incomplete (no closing bracket)", err=True
            )
        sys.exit(1)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
