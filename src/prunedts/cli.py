"""prunedts CLI - trim declaration rollups to their public API."""

import tempfile
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from prunedts import __version__
from prunedts.config import (
    default_config,
    get_base_extractor_config,
    get_batch_excludes,
    get_package_scope,
    get_report_folder,
    load_pyproject_config,
    resolve_config,
    save_config,
)
from prunedts.errors import ParseError, PrunedtsError
from prunedts.exclusion import FileExcluder, find_declaration_files
from prunedts.extractor import ApiReportPipeline, PackagePaths
from prunedts.models.results import PruneResults
from prunedts.output.json_writer import load_results, write_batch_results, write_results
from prunedts.output.tree import build_dropped_tree, build_summary_table, display_tree
from prunedts.paths import ensure_prunedts_dir, get_config_path, get_results_path
from prunedts.pipeline import Settings, prune_file

app = typer.Typer(
    name="prunedts",
    help="Trim TypeScript declaration rollups down to their public API",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

# Unresolved references printed before the list is cut short
MAX_WARNINGS = 10


def version_callback(value: bool) -> None:
    if value:
        console.print(f"prunedts version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Trim TypeScript declaration rollups down to their public API."""


def _load_settings(config: Optional[Path]) -> tuple[dict, Settings]:
    config_data = resolve_config(Path.cwd(), config)
    return config_data, Settings.from_config(config_data)


def _default_results_path(results: Optional[Path]) -> Path:
    if results is not None:
        return results
    ensure_prunedts_dir(Path.cwd())
    return get_results_path(Path.cwd())


def _print_unresolved(results: PruneResults) -> None:
    for item in results.unresolved[:MAX_WARNINGS]:
        console.print(
            f"[yellow]Warning:[/] unresolved reference [bold]{item.name}[/] "
            f"in {item.statement} (line {item.line})"
        )
    remaining = len(results.unresolved) - MAX_WARNINGS
    if remaining > 0:
        console.print(f"[yellow]... and {remaining} more unresolved references[/]")


def _fail(error: Exception) -> NoReturn:
    if isinstance(error, ParseError):
        console.print(f"[red]Parse error:[/] {error}")
    else:
        console.print(f"[red]Error:[/] {error}")
    raise typer.Exit(1)


@app.command()
def init(
    path: Path = typer.Argument(
        Path("."),
        help="Project root receiving .prunedts/config.json",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing config file",
    ),
) -> None:
    """Write a config file holding the default settings."""
    path = path.resolve()
    output = get_config_path(path)
    if output.exists() and not force:
        console.print(f"[red]Config file already exists:[/] {output}")
        console.print("Use [bold]--force[/] to overwrite it.")
        raise typer.Exit(1)

    try:
        # JSON settings override pyproject.toml, so its values are copied in
        config_data = default_config()
        config_data.update(load_pyproject_config(path))
        ensure_prunedts_dir(path)
        save_config(config_data, output)
    except (PrunedtsError, OSError) as e:
        _fail(e)

    console.print(f"[green]Configuration saved to:[/] {output}")


@app.command()
def prune(
    input_path: Path = typer.Argument(..., help="Rollup .d.ts to prune"),
    output_path: Path = typer.Argument(..., help="Where to write the public .d.ts"),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: .prunedts/config.json)",
    ),
    results: Optional[Path] = typer.Option(
        None,
        "--results",
        "-r",
        help="Path for results JSON output (default: .prunedts/results.json)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show every dropped declaration",
    ),
) -> None:
    """Prune a declaration rollup to its public surface."""
    try:
        _, settings = _load_settings(config)
        run_results = prune_file(input_path, output_path, settings)
        results_path = _default_results_path(results)
        write_results(run_results, results_path)
    except (PrunedtsError, OSError) as e:
        _fail(e)

    _print_unresolved(run_results)
    console.print(f"[green]Results saved to:[/] {results_path}")

    data = run_results.to_dict()
    display_tree(build_dropped_tree(data) if verbose else build_summary_table(data))


@app.command()
def generate(
    package: str = typer.Option(
        ...,
        "--package",
        "-p",
        help='Package name (e.g. "database" or "firestore-lite")',
    ),
    package_root: Path = typer.Option(..., "--package-root", help="Root path of the package"),
    typescript_dts: Path = typer.Option(
        ...,
        "--typescript-dts",
        help="The .d.ts file the TypeScript compiler generates",
    ),
    rollup_dts: Path = typer.Option(
        ...,
        "--rollup-dts",
        help="Bundled .d.ts with all public and private types",
    ),
    untrimmed_rollup_dts: Path = typer.Option(
        ...,
        "--untrimmed-rollup-dts",
        help="Bundled .d.ts that also keeps exports marked as internal",
    ),
    public_dts: Path = typer.Option(
        ...,
        "--public-dts",
        help="Output file for the customer-facing .d.ts",
    ),
    report_folder: Optional[Path] = typer.Option(
        None,
        "--report-folder",
        help="Folder for <package>.api.md (default: common/api-review)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: .prunedts/config.json)",
    ),
) -> None:
    """Run the rollup, prune and API report passes for one package."""
    console.print(Panel.fit("[bold blue]prunedts - API Report[/]"))

    paths = PackagePaths.resolve(
        package_name=package,
        package_root=package_root,
        typescript_dts=typescript_dts,
        rollup_dts=rollup_dts,
        untrimmed_rollup_dts=untrimmed_rollup_dts,
        public_dts=public_dts,
    )
    try:
        config_data, settings = _load_settings(config)
        folder = report_folder.resolve() if report_folder else get_report_folder(config_data, Path.cwd())
        with tempfile.TemporaryDirectory(prefix="prunedts-") as scratch:
            pipeline = ApiReportPipeline(
                paths,
                scratch_dir=Path(scratch),
                report_folder=folder,
                settings=settings,
                base_config=get_base_extractor_config(config_data, Path.cwd()),
                package_scope=get_package_scope(config_data),
            )
            run = pipeline.run()
    except (PrunedtsError, OSError) as e:
        _fail(e)

    _print_unresolved(run.results)
    console.print(f"\n[green]Public declarations:[/] {paths.public_dts}")
    console.print(f"[green]API report:[/] {run.report_path}")


@app.command()
def batch(
    directory: Path = typer.Argument(..., help="Directory to search for .d.ts files"),
    output_dir: Path = typer.Option(
        ...,
        "--output-dir",
        "-o",
        help="Directory receiving the pruned files (mirrors the input layout)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: .prunedts/config.json)",
    ),
    results: Optional[Path] = typer.Option(
        None,
        "--results",
        "-r",
        help="Path for results JSON output (default: .prunedts/results.json)",
    ),
    include_ignored: bool = typer.Option(
        False,
        "--include-ignored",
        help="Include files normally excluded by .gitignore and config",
    ),
) -> None:
    """Prune every declaration file under a directory."""
    directory = directory.resolve()
    output_dir = output_dir.resolve()

    try:
        config_data, settings = _load_settings(config)
    except (PrunedtsError, OSError) as e:
        _fail(e)

    excluder = FileExcluder(
        directory,
        include_ignored=include_ignored,
        extra_excludes=get_batch_excludes(config_data),
    )
    files = [f for f in find_declaration_files(directory, excluder) if not f.is_relative_to(output_dir)]
    if not files:
        console.print(f"[yellow]No .d.ts files found under[/] {directory}")
        return

    table = Table(title=f"Pruned {len(files)} files", show_header=True, header_style="bold")
    table.add_column("File")
    table.add_column("Kept", justify="right")
    table.add_column("Dropped", justify="right")
    table.add_column("Status")

    all_results: list[PruneResults] = []
    failures = 0
    for file_path in files:
        rel_path = file_path.relative_to(directory)
        try:
            file_results = prune_file(file_path, output_dir / rel_path, settings, quiet=True)
        except (PrunedtsError, OSError) as e:
            failures += 1
            table.add_row(str(rel_path), "-", "-", f"[red]{e}[/]")
            continue
        all_results.append(file_results)
        summary = file_results.summary
        table.add_row(str(rel_path), str(summary.statements_out), str(summary.dropped), "[green]ok[/]")

    console.print(table)

    results_path = _default_results_path(results)
    write_batch_results(all_results, results_path)
    console.print(f"[green]Results saved to:[/] {results_path}")

    if failures:
        console.print(f"[red]{failures} file(s) failed[/]")
        raise typer.Exit(1)


@app.command()
def show(
    results_path: Optional[Path] = typer.Argument(
        None,
        help="Path to results file (default: .prunedts/results.json)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show full tree view",
    ),
) -> None:
    """Display results from a previous run."""
    if results_path is None:
        results_path = get_results_path(Path.cwd())

    if not results_path.exists():
        console.print(f"[red]Results file not found:[/] {results_path}")
        raise typer.Exit(1)

    data = load_results(results_path)
    entries = data.get("files", [data])
    for entry in entries:
        display_tree(build_dropped_tree(entry) if verbose else build_summary_table(entry))


if __name__ == "__main__":
    app()
