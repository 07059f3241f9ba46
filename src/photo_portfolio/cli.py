"""
CLI for the photo portfolio builder.

Commands:
- build: Validate the catalog, resize images and generate HTML
- images: Resize images only
- html: Generate HTML only
- clean: Remove build artifacts
- info: Show configuration and catalog status
"""

import shutil
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import Settings, settings
from .errors import CatalogError, MissingImageError, SchemaError
from .logging import setup_logging

app = typer.Typer(
    name="photo-portfolio",
    help="Static site generator for photography portfolios",
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Photo Portfolio - build a static photography site from a CSV catalog."""
    log_level = "DEBUG" if verbose else settings.log_level
    setup_logging(level=log_level, json_output=settings.log_json, log_file=settings.log_file)
    logger.debug("CLI initialized with log level: {}", log_level)


def _effective_settings(
    originals: Path | None,
    resized: Path | None,
    build_dir: Path | None,
) -> Settings:
    """Apply command-line directory overrides on top of the loaded settings."""
    overrides = {}
    if originals is not None:
        overrides["originals_dir"] = str(originals)
    if resized is not None:
        overrides["resized_dir"] = str(resized)
    if build_dir is not None:
        overrides["build_dir"] = str(build_dir)
    return settings.model_copy(update=overrides)


def _report_catalog_error(error: Exception) -> None:
    logger.error("Catalog validation failed: {}", error)
    console.print(f"[red]Error: {error}[/]")
    if isinstance(error, SchemaError) and error.expected is not None:
        console.print("Fix the header row of the metadata file and try again.")
    elif isinstance(error, MissingImageError):
        console.print(f"[red]{len(error.missing)} image(s) missing; nothing was built.[/]")


def _run(
    effective: Settings,
    images: bool,
    html: bool,
    workers: int | None = None,
    strict: bool = False,
) -> None:
    from .pipeline import run_build

    try:
        report = run_build(effective, images=images, html=html, workers=workers)
    except (CatalogError, FileNotFoundError) as e:
        _report_catalog_error(e)
        raise typer.Exit(1) from e

    table = Table(title="Build Summary")
    table.add_column("Step", style="cyan")
    table.add_column("Result", style="green")
    table.add_column("Time", style="magenta")

    table.add_row("Catalog", f"{report.records} records", _seconds(report, "Catalog validation"))

    if report.derivatives is not None:
        d = report.derivatives
        result = f"{d.processed} images: {d.created} created, {d.skipped} up to date"
        if d.errors:
            result += f", [red]{d.errors} errors[/]"
        table.add_row("Images", result, _seconds(report, "Image resizing"))

    if report.site is not None:
        table.add_row("HTML", f"{report.site.total} pages", _seconds(report, "HTML generation"))

    console.print(table)

    if report.derivatives is not None and report.derivatives.failures:
        console.print("[red]Derivative failures:[/]")
        for failure in report.derivatives.failures:
            console.print(f"  [red]{failure.source.name} ({failure.tier}): {failure.error}[/]")

    if report.site is not None:
        for filename, labels in report.site.slug_collisions.items():
            console.print(f"[yellow]Warning: {', '.join(labels)} share {filename}[/]")
        console.print(f"\n[bold green]Site ready in {effective.build_path}/[/]")
        console.print(f"Preview: cd {effective.build_path} && python3 -m http.server 8000")

    if strict and not report.ok:
        raise typer.Exit(1)


def _seconds(report, step: str) -> str:
    elapsed = report.timings.get(step)
    return f"{elapsed:.1f}s" if elapsed is not None else "-"


ORIGINALS_OPTION = typer.Option(None, "--originals", "-o", help="Source image directory")
RESIZED_OPTION = typer.Option(None, "--resized", "-r", help="Derivative output directory")
BUILD_OPTION = typer.Option(None, "--build-dir", "-b", help="Site output directory")


@app.command()
def build(
    originals: Path | None = ORIGINALS_OPTION,
    resized: Path | None = RESIZED_OPTION,
    build_dir: Path | None = BUILD_OPTION,
    workers: int | None = typer.Option(None, "--workers", "-w", help="Resize thread count"),
    strict: bool = typer.Option(False, "--strict", help="Exit non-zero if any image failed"),
):
    """Run a full build: resize images and generate HTML."""
    logger.info("Starting full build")
    console.print("[bold blue]Photography Portfolio Build[/]")
    _run(_effective_settings(originals, resized, build_dir), True, True, workers, strict)


@app.command()
def images(
    originals: Path | None = ORIGINALS_OPTION,
    resized: Path | None = RESIZED_OPTION,
    workers: int | None = typer.Option(None, "--workers", "-w", help="Resize thread count"),
    strict: bool = typer.Option(False, "--strict", help="Exit non-zero if any image failed"),
):
    """Resize images only."""
    logger.info("Resizing images only")
    console.print("[bold blue]Resizing Images Only[/]")
    _run(_effective_settings(originals, resized, None), True, False, workers, strict)


@app.command()
def html(
    originals: Path | None = ORIGINALS_OPTION,
    build_dir: Path | None = BUILD_OPTION,
):
    """Generate HTML only."""
    logger.info("Generating HTML only")
    console.print("[bold blue]Generating HTML Only[/]")
    _run(_effective_settings(originals, None, build_dir), False, True)


@app.command()
def clean(
    resized: Path | None = RESIZED_OPTION,
    build_dir: Path | None = BUILD_OPTION,
):
    """Remove the build directory and all resized images."""
    effective = _effective_settings(None, resized, build_dir)
    for path in (effective.build_path, effective.resized_path):
        if path.exists():
            logger.info("Removing {}", path)
            shutil.rmtree(path)
    console.print("[green]Clean complete[/]")


@app.command()
def info(
    originals: Path | None = ORIGINALS_OPTION,
):
    """Show configuration and catalog status."""
    from .catalog import build_index
    from .images import discover_sources
    from .pipeline import load

    effective = _effective_settings(originals, None, None)
    logger.debug("Displaying configuration and status")
    console.print("[bold blue]Photo Portfolio Configuration[/]")

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Site Title", effective.site_title)
    table.add_row("Originals Directory", effective.originals_dir)
    table.add_row("Metadata File", str(effective.metadata_path))
    table.add_row("Resized Directory", effective.resized_dir)
    table.add_row("Build Directory", effective.build_dir)
    table.add_row("Image Quality", str(effective.image_quality))
    table.add_row("Resize Workers", str(effective.derivative_workers))
    table.add_row("Cache Strategy", effective.cache_strategy)

    console.print(table)

    console.print("\n[bold]Source Images[/]")
    sources = discover_sources(effective.originals_path)
    console.print(f"JPEG files: {len(sources)}")

    console.print("\n[bold]Catalog Status[/]")
    try:
        catalog = load(effective)
    except (CatalogError, FileNotFoundError) as e:
        logger.error("Error loading catalog: {}", e)
        console.print(f"[red]Error loading catalog: {e}[/]")
        return

    index = build_index(catalog)
    console.print(f"Records: {len(catalog)}")
    console.print(f"Categories: {', '.join(index.category_labels(sort=True)) or 'none'}")
    console.print(f"Tags: {len(index.tags)}")


if __name__ == "__main__":
    app()
