"""Command-line interface for stlconvert."""

import glob
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import STLConvertSettings, get_settings
from .converter import convert, read_mesh
from .detect import detect
from .errors import STLConvertError
from .models import ConversionResult

console = Console()

GLOB_CHARS = "*?["


def configure_logging(level: str) -> None:
    """Send loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, format="<level>{level: <8}</level> | {message}", level=level)


def verbose_option(command):
    """Accept --verbose on a subcommand; it raises logging to DEBUG."""
    def apply(ctx, param, value):
        if value:
            configure_logging("DEBUG")
        return value
    return click.option('--verbose', '-v', is_flag=True, expose_value=False, callback=apply, help='Enable verbose output')(command)


def expand_patterns(patterns: Tuple[str, ...]) -> Tuple[List[Path], List[str]]:
    """
    Expand paths and wildcard patterns in argument order.

    Returns the matched files and the patterns that matched nothing.
    """
    paths: List[Path] = []
    unmatched: List[str] = []
    for pattern in patterns:
        # A real file wins over wildcard interpretation, e.g. "part[1].stl"
        if any(c in pattern for c in GLOB_CHARS) and not Path(pattern).is_file():
            matches = sorted(glob.glob(pattern, recursive=True))
            if not matches:
                unmatched.append(pattern)
            paths.extend(Path(m) for m in matches if Path(m).is_file())
        else:
            paths.append(Path(pattern))
    return paths, unmatched


def convert_file(path: Path, settings: STLConvertSettings, output_dir: Optional[Path] = None) -> Tuple[Path, ConversionResult]:
    """Convert one file next to itself (or under output_dir) and return the output path."""
    with open(path, "rb") as source:
        encoding = detect(source)
        out_path = settings.output_path(path, encoding.opposite, output_dir)
        console.print(
            f"{escape(str(path))} is in {encoding.value.upper()} format, "
            f"converting to {encoding.opposite.value.upper()}: {escape(str(out_path))}",
            soft_wrap=True,
        )
        out_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(out_path, "wb") as target:
                result = convert(source, target)
        except Exception:
            # Never leave a partial conversion behind
            out_path.unlink(missing_ok=True)
            raise
    return out_path, result


def _fail(table: Table, name: str, error: Exception) -> None:
    logger.error(f"Failed to convert {name}: {error}")
    console.print(f"[red]Error: {escape(name)}: {escape(str(error))}[/red]")
    table.add_row(escape(name), "-", "-", "-", "[red]failed[/red]")


@click.group()
@click.version_option(package_name="stlconvert")
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
def cli(verbose: bool):
    """stlconvert: convert STL files between ASCII and binary encoding."""
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.get_log_level())


@cli.command(name="convert")
@verbose_option
@click.argument('patterns', nargs=-1)
@click.option('--output-dir', type=click.Path(file_okay=False, path_type=Path), help='Base folder for output (default: next to each input)')
def convert_command(patterns: Tuple[str, ...], output_dir: Optional[Path]):
    """Convert STL files to the opposite encoding.

    PATTERNS are file names or wildcards such as "*.stl". ASCII files are
    written to output-binary/binary-<name>, binary files to
    output-ascii/ascii-<name>.
    """
    if not patterns:
        console.print("Usage: stlconvert convert [stl filename(s)]")
        return

    settings = get_settings()
    paths, unmatched = expand_patterns(patterns)

    table = Table(title="STL Conversion Summary")
    table.add_column("File", style="cyan")
    table.add_column("From")
    table.add_column("Output")
    table.add_column("Triangles", justify="right")
    table.add_column("Status")

    failures = 0
    for pattern in unmatched:
        failures += 1
        _fail(table, pattern, FileNotFoundError("no files match this pattern"))

    for path in paths:
        try:
            out_path, result = convert_file(path, settings, output_dir)
        except (STLConvertError, OSError) as e:
            failures += 1
            _fail(table, str(path), e)
            continue
        table.add_row(
            escape(str(path)),
            result.source_encoding.value,
            escape(str(out_path)),
            f"{result.triangle_count:,}",
            "[green]ok[/green]",
        )

    console.print(table)
    if failures:
        console.print(f"[red]{failures} file(s) failed[/red]")
        sys.exit(1)


@cli.command(name="detect")
@verbose_option
@click.argument('patterns', nargs=-1, required=True)
def detect_command(patterns: Tuple[str, ...]):
    """Print the detected encoding of STL files."""
    paths, unmatched = expand_patterns(patterns)
    failures = len(unmatched)
    for pattern in unmatched:
        console.print(f"[red]{escape(pattern)}: no files match[/red]")

    for path in paths:
        try:
            with open(path, "rb") as stream:
                encoding = detect(stream)
        except (STLConvertError, OSError) as e:
            failures += 1
            console.print(f"[red]{escape(str(path))}: {escape(str(e))}[/red]")
            continue
        console.print(f"{escape(str(path))}: {encoding.value}")

    if failures:
        sys.exit(1)


@cli.command(name="info")
@verbose_option
@click.argument('patterns', nargs=-1, required=True)
def info_command(patterns: Tuple[str, ...]):
    """Show encoding, triangle count and bounding box of STL files."""
    paths, unmatched = expand_patterns(patterns)
    failures = len(unmatched)
    for pattern in unmatched:
        console.print(f"[red]{escape(pattern)}: no files match[/red]")

    table = Table(title="STL Files")
    table.add_column("File", style="cyan")
    table.add_column("Encoding")
    table.add_column("Triangles", justify="right")
    table.add_column("Min")
    table.add_column("Max")

    for path in paths:
        try:
            with open(path, "rb") as stream:
                encoding = detect(stream)
                mesh = read_mesh(stream, encoding)
        except (STLConvertError, OSError) as e:
            failures += 1
            console.print(f"[red]{escape(str(path))}: {escape(str(e))}[/red]")
            continue

        bounds = mesh.bounds()
        if bounds is None:
            low = high = "-"
        else:
            low = " ".join(f"{v:.3f}" for v in bounds[0])
            high = " ".join(f"{v:.3f}" for v in bounds[1])
        table.add_row(escape(str(path)), encoding.value, f"{len(mesh):,}", low, high)

    console.print(table)
    if failures:
        sys.exit(1)


def main():
    """Main entry point for the CLI."""
    cli()

if __name__ == "__main__":
    main()
