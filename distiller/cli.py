"""distiller CLI — the main entry point."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from distiller import __version__

console = Console()
err_console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__)
def main():
    """distiller — compact, structure-preserving views of source code.

    Parses source files into a language-agnostic tree, strips what the
    reader does not need (non-public members, bodies, comments, imports)
    and prints what is left.
    """


# ── Distill ──────────────────────────────────────────────────────────


@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--strip",
    "strip_options",
    multiple=True,
    help="What to remove: non-public, implementation, comments, imports (comma-separated or repeated)",
)
@click.option("--filter-imports/--no-filter-imports", default=None, help="Remove unused imports before parsing")
@click.option("--format", "output_format", default=None, type=click.Choice(["text", "json"]))
@click.option("--workers", "-w", default=None, type=click.IntRange(min=1), help="Files processed in parallel")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True), help="YAML config file")
@click.option("--output", "-o", default=None, type=click.Path(dir_okay=False), help="Write output to a file")
@click.option("--verbose", "-v", count=True, help="Repeat for more detail")
def distill(
    paths: tuple[Path, ...],
    strip_options: tuple[str, ...],
    filter_imports: bool | None,
    output_format: str | None,
    workers: int | None,
    config_path: str | None,
    output: str | None,
    verbose: int,
):
    """Distill source files or directories.

    Directories are scanned recursively for known source file types.
    """
    from distiller.config import load_config
    from distiller.errors import ConfigError
    from distiller.log import setup_logging
    from distiller.processor import ProcessOptions, process_batch
    from distiller.stripper import StripPolicy
    from distiller.utils.file_scanner import expand_paths

    setup_logging(verbose, err_console)

    try:
        config = load_config(config_path)
        policy = StripPolicy.from_strings(strip_options) if strip_options else config.policy
    except (ConfigError, ValueError) as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise SystemExit(2)

    options = ProcessOptions(
        policy=policy,
        filter_unused_imports=config.filter_unused_imports if filter_imports is None else filter_imports,
        verbosity=verbose,
        output_format=output_format or config.format,
    )

    files = expand_paths(list(paths), config.exclude)
    if not files:
        err_console.print("[yellow]No source files found.[/]")
        return

    result = process_batch(files, options, workers=workers or config.workers)

    rendered = result.render(options.output_format)
    if output:
        Path(output).write_text(rendered)
        err_console.print(f"[green]Wrote[/] {len(result.files)} file(s) to {output}")
    elif rendered:
        click.echo(rendered)

    for failure in result.failures:
        err_console.print(f"  [yellow]![/] {failure.path}: {failure.error}")

    if not result.ok:
        err_console.print("[red]No files could be processed.[/]")
        raise SystemExit(1)


# ── Imports ──────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--language", "-l", default=None, help="Language tag (default: from the file extension)")
@click.option("--print-code", is_flag=True, help="Print the filtered source instead of a summary")
@click.option("--verbose", "-v", count=True, help="Repeat for more detail")
def imports(file: Path, language: str | None, print_code: bool, verbose: int):
    """Find unused imports in FILE with the text-level analyzer.

    Works for every language with an import filter, with or without a
    parser backend.
    """
    from distiller.importfilter import default_registry
    from distiller.log import setup_logging
    from distiller.utils.file_scanner import classify_file

    setup_logging(verbose, err_console)

    language = language or classify_file(file)
    registry = default_registry()
    if not language or language not in registry:
        err_console.print(f"[red]No import filter for:[/] {language or file.suffix or file.name}")
        raise SystemExit(1)

    code = file.read_text(errors="replace")
    result = registry.filter_imports(code, language, verbose)

    if result.error:
        err_console.print(f"[yellow]Import filter failed, nothing removed:[/] {result.error}")

    if print_code:
        click.echo(result.code, nl=False)
        return

    if not result.removed:
        console.print(f"[green]No unused imports in[/] {file}")
        return

    table = Table(title=f"Unused imports in {file.name} ({len(result.removed)} found)")
    table.add_column("#", style="dim", width=3)
    table.add_column("Statement", style="cyan")
    for i, text in enumerate(result.removed):
        table.add_row(str(i + 1), text.strip())
    console.print(table)


# ── Languages ────────────────────────────────────────────────────────


@main.command()
def languages():
    """List languages with a parser backend and/or an import filter."""
    from distiller.backends import default_backends
    from distiller.importfilter import default_registry

    backends = default_backends()
    filters = default_registry()

    table = Table(title="Supported languages")
    table.add_column("Language", style="cyan")
    table.add_column("Backend", justify="center")
    table.add_column("Import filter", justify="center")

    for language in sorted(set(backends.languages()) | set(filters.languages())):
        table.add_row(
            language,
            "[green]v[/]" if language in backends else "[dim]-[/]",
            "[green]v[/]" if language in filters else "[dim]-[/]",
        )
    console.print(table)


if __name__ == "__main__":
    main()
