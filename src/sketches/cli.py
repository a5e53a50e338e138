"""Sketches CLI entry point."""

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from sketches.checksum import crc32_file, format_checksum
from sketches.config import SketchConfig, load_config
from sketches.errors import SketchError
from sketches.loader import NoopLoader, PythonLoader
from sketches.sketch import Sketch
from sketches.watcher import ReloadRecord, ReloadStatus, SketchWatcher

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
    )


def get_config(ctx: click.Context) -> SketchConfig:
    config: SketchConfig = ctx.obj["config"]
    return config


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose logging")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: ./sketches.toml)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """Sketches - live-reloadable source files."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)

    try:
        ctx.obj["config"] = load_config(config_path)
    except SketchError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1) from e


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def checksum(path: Path) -> None:
    """Print the CRC-32 of a sketch file."""
    console.print(format_checksum(crc32_file(path)))


@cli.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--full", is_flag=True, help="Show the whole file")
@click.option("--id", "sketch_id", default="1", help="Sketch ID shown in the header")
@click.option("--name", help="Sketch name (default: file name)")
@click.pass_context
def show(ctx: click.Context, path: Path, full: bool, sketch_id: str, name: str | None) -> None:
    """Preview a sketch file without loading it."""
    sketch = Sketch(sketch_id, name=name, path=path, config=get_config(ctx), loader=NoopLoader())
    console.print(sketch.render(verbose=full), end="", markup=False, highlight=False)


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--editor", "-e", help="Editor command (default: $EDITOR)")
@click.option("--terminal", "-t", help="Terminal command to run the editor in")
@click.option("--background", "-b", is_flag=True, help="Do not wait for the editor")
@click.pass_context
def edit(
    ctx: click.Context,
    path: Path,
    editor: str | None,
    terminal: str | None,
    background: bool,
) -> None:
    """Open a sketch in the editor and reload it afterwards."""
    config = get_config(ctx)
    if editor:
        config.editor = editor
    if terminal:
        config.terminal = terminal
    if background:
        config.background = True

    path.touch(exist_ok=True)
    sketch = Sketch(path.stem, path=path, config=config, loader=NoopLoader())
    sketch.loader = PythonLoader()

    try:
        status = sketch.edit()
    except SketchError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1) from e
    except Exception as e:
        console.print(f"[red]Reloading {sketch.path} failed: {type(e).__name__}: {e}[/red]")
        raise SystemExit(1) from e

    if status is None:
        console.print(f"[green]Editor started for {sketch.path}[/green]")
    elif status != 0:
        console.print(f"[yellow]Editor exited with status {status}[/yellow]")
    else:
        console.print(f"[green]✓[/green] {sketch.name} checksum {format_checksum(sketch.checksum)}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--poll-interval", type=float, help="Seconds between checks")
@click.pass_context
def watch(ctx: click.Context, path: Path, poll_interval: float | None) -> None:
    """Load a sketch and reload it whenever it changes."""
    sketch = Sketch(path.stem, path=path, config=get_config(ctx), loader=NoopLoader())
    sketch.loader = PythonLoader()
    watcher = SketchWatcher(sketch, poll_interval=poll_interval)

    try:
        sketch.reload()
    except Exception as e:
        console.print(f"[red]Initial load failed: {type(e).__name__}: {e}[/red]")

    def report(record: ReloadRecord) -> None:
        stamp = record.timestamp.strftime("%H:%M:%S")
        if record.status == ReloadStatus.SUCCESS:
            console.print(f"[green]✓[/green] {stamp} reloaded {sketch.name}")
        else:
            console.print(f"[red]✗[/red] {stamp} {record.status.value}: {record.error_message or sketch.name}")

    console.print(f"[bold green]Watching {sketch.path}[/bold green] (Ctrl-C to stop)")

    try:
        asyncio.run(watcher.watch_loop(report))
    except KeyboardInterrupt:
        console.print("\n[yellow]Watcher stopped[/yellow]")


@cli.command()
@click.argument("source", type=click.Path(path_type=Path))
@click.argument("destination", type=click.Path(path_type=Path))
@click.pass_context
def save(ctx: click.Context, source: Path, destination: Path) -> None:
    """Copy a sketch file to DESTINATION."""
    sketch = Sketch(source.stem, path=source, config=get_config(ctx), loader=NoopLoader())

    if sketch.save(destination):
        console.print(f"[green]✓[/green] Saved {sketch.path} to {destination}")
    else:
        console.print(f"[red]✗[/red] Nothing saved from {sketch.path}")
        raise SystemExit(1)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
