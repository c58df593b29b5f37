"""Command-line interface for meshdecode."""

import warnings
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from meshdecode.core import Config, MeshDecodeError, ParseWarning
from meshdecode.decoders import SUPPORTED_FORMATS, sniff_stl
from meshdecode.processing import MeshLoader, summarize
from meshdecode.utils import setup_logging

app = typer.Typer(
    name="meshdecode",
    help="Decode STL and PLY triangle meshes",
    add_completion=False,
)
console = Console()


def _load_config(config: Optional[Path], verbose: bool) -> Config:
    cfg = Config.from_toml(config) if config else Config()
    level = "DEBUG" if verbose else "WARNING"
    setup_logging(cfg.logging.model_copy(update={"level": level}))
    return cfg


def _format_vector(values) -> str:
    return ", ".join(f"{v:.3f}" for v in values)


@app.command()
def inspect(
    mesh_files: List[Path] = typer.Argument(
        ...,
        exists=True,
        help="STL or PLY files to inspect",
    ),
    strict: Optional[bool] = typer.Option(
        None,
        "--strict/--lenient",
        help="Reject malformed PLY rows instead of repairing them",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        help="Configuration file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
) -> None:
    """Decode mesh files and display their contents."""
    cfg = _load_config(config, verbose)
    decoder_config = cfg.decoder
    if strict is not None:
        decoder_config = decoder_config.model_copy(update={"strict_ply": strict})
    loader = MeshLoader(cfg.loader, decoder_config)

    failed = 0
    for mesh_file in mesh_files:
        try:
            with warnings.catch_warnings():
                # Reported below from MeshBuffer.warnings
                warnings.simplefilter("ignore", ParseWarning)
                mesh = loader.load(mesh_file)
        except MeshDecodeError as e:
            failed += 1
            console.print(f"[red]Error ({e.kind}): {escape(str(e))}[/red]")
            continue

        summary = summarize(mesh)
        table = Table(title=mesh_file.name, show_header=False)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="white")

        table.add_row("Format", summary.format)
        table.add_row("Vertices", f"{summary.vertex_count:,}")
        table.add_row("Triangles", f"{summary.triangle_count:,}")
        table.add_row("Normals", "yes" if summary.has_normals else "no")
        table.add_row("Colors", "yes" if summary.has_colors else "no")
        if summary.bounds_min is not None:
            table.add_row(
                "Bounding Box",
                escape(
                    f"[{_format_vector(summary.bounds_min)}] to "
                    f"[{_format_vector(summary.bounds_max)}]"
                ),
            )
            width, height, depth = summary.extents
            table.add_row("Size", f"W {width:.2f} | H {height:.2f} | D {depth:.2f}")
        console.print(table)

        for message in summary.warnings:
            console.print(f"  ⚠️  {escape(message)}", style="yellow")

    if failed:
        raise typer.Exit(1)


@app.command()
def sniff(
    stl_file: Path = typer.Argument(
        ...,
        exists=True,
        help="STL file to classify",
    ),
) -> None:
    """Report whether an STL file is ASCII or binary."""
    try:
        fmt = sniff_stl(stl_file.read_bytes())
    except MeshDecodeError as e:
        console.print(f"[red]Error ({e.kind}): {escape(str(e))}[/red]")
        raise typer.Exit(1)
    console.print(fmt.value)


@app.command()
def info() -> None:
    """Display information about meshdecode."""
    from meshdecode import __version__

    console.print("\n[cyan]meshdecode[/cyan] - STL/PLY mesh decoder")
    console.print(f"Version: {__version__}")
    console.print(f"\nSupported formats: {', '.join(SUPPORTED_FORMATS)}")
    console.print("  • STL binary and ASCII (auto-detected)")
    console.print("  • PLY ASCII with optional vertex colors")


def main() -> None:
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
