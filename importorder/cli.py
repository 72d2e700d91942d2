"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from importorder import __version__
from importorder.core.config import FormatterConfig, get_app_config, init_app_config
from importorder.errors import InvalidOrderSpec
from importorder.format_results import FormatResults
from importorder.order_spec import parse_import_order_file_content
from importorder.runner import FormatRunner
from importorder.work_queue import WorkerType

# Exit code for configuration errors, distinct from "files need formatting"
EXIT_CONFIG_ERROR = 2

# Initialize console for rich output
console = Console()

# Initialize the CLI app
app = typer.Typer(help="IMPORTORDER - regroup and sort import blocks")

logger = logging.getLogger("importorder")


def configure_app(debug: bool = False):
    """
    Configure the application with the specified settings.

    Args:
    ----
        debug: Whether to enable debug mode

    """
    config = init_app_config(debug=debug)
    config.configure_logging()
    return config


def version_callback(value: bool):
    """Print the version and exit, before any command is resolved."""
    if value:
        console.print(f"IMPORTORDER version: {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode with verbose logging"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the application version and exit",
    ),
):
    """
    IMPORTORDER - sorts the import block of formatted source files by configured groups.

    Use --debug to enable verbose logging.
    """
    try:
        configure_app(debug=debug)
    except (ValueError, ValidationError, OSError) as e:
        # Environment configuration is read here, before any command runs
        console.print(f"Error: invalid configuration: {e}", style="red", markup=False)
        raise typer.Exit(code=EXIT_CONFIG_ERROR)


def _build_formatter_config(
    import_order: list[str] | None = None,
    import_order_file: Path | None = None,
    strict: bool | None = None,
    workers: int | None = None,
    worker_type: WorkerType | None = None,
    suffix: str | None = None,
) -> FormatterConfig:
    """Merge command line options over the environment-based configuration."""
    if import_order and import_order_file:
        console.print("Error: use either --import-order or --import-order-file", style="red")
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    try:
        if import_order_file is not None:
            # May be empty: a "0=" file selects the keep-original-order fallback
            import_order = parse_import_order_file_content(import_order_file.read_text())
        elif not import_order:
            import_order = None
        overrides = {
            "import_order": import_order,
            "strict": strict,
            "max_workers": workers,
            "worker_type": worker_type,
            "file_suffix": suffix,
        }
        base = get_app_config().formatter.model_dump()
        base.update({key: value for key, value in overrides.items() if value is not None})
        return FormatterConfig(**base)
    except (OSError, InvalidOrderSpec, ValidationError) as e:
        console.print(f"Error: {e}", style="red", markup=False)
        raise typer.Exit(code=EXIT_CONFIG_ERROR)


def _create_runner(config: FormatterConfig) -> FormatRunner:
    try:
        runner = FormatRunner(config)
    except InvalidOrderSpec as e:
        console.print(f"Invalid import order: {e}", style="red", markup=False)
        raise typer.Exit(code=EXIT_CONFIG_ERROR)
    logger.debug(f"Using import order {runner.spec.descriptors}")
    return runner


def _print_failures(results: FormatResults, action: str) -> None:
    for file_name, reason in results.failed.items():
        console.print(f"Failed to {action} file {file_name} : {reason}", style="red", markup=False)


def show_check_results(results: FormatResults) -> None:
    """Print the report of a check run."""
    if not results.has_failures() and not results.has_changes():
        console.print("All files are pretty formatted!", style="green")
        return
    if results.has_changes():
        console.print(f"There are {len(results.succeed)} files not pretty formatted:")
        for file_name in results.succeed:
            console.print(file_name, markup=False, highlight=False, soft_wrap=True)
        console.print("\nRun 'importorder format' to format them")
    _print_failures(results, "check if formatted")


def show_format_results(results: FormatResults) -> None:
    """Print the report of a format run."""
    if not results.has_failures() and not results.has_changes():
        console.print("No files need to reformat.", style="green")
        return
    if results.has_changes():
        console.print(f"{len(results.succeed)} files formatted:")
        for file_name in results.succeed:
            console.print(file_name, markup=False, highlight=False, soft_wrap=True)
    _print_failures(results, "format")


def show_summary(results: FormatResults) -> None:
    """Print outcome counts as a table."""
    summary = results.get_summary()
    table = Table(title="Summary")
    table.add_column("Outcome", style="cyan")
    table.add_column("Files", justify="right")
    table.add_row("Unchanged", str(summary["unchanged"]))
    table.add_row("Changed", str(summary["succeed"]))
    table.add_row("Failed", str(summary["failed"]), style="red" if summary["failed"] else None)
    table.add_row("Total", str(summary["total"]))
    console.print(table)


def _default_project_dir(source_dir: Path) -> Path:
    # A single source file keeps its rules next to it, not inside it
    return source_dir.parent if source_dir.is_file() else source_dir


def _create_rules_file(runner: FormatRunner, project_dir: Path) -> Path | None:
    try:
        return runner.create_rules_file(project_dir)
    except OSError as e:
        console.print(f"Error: cannot write import order file: {e}", style="red", markup=False)
        raise typer.Exit(code=EXIT_CONFIG_ERROR)


def _run(
    source_dir: Path,
    project_dir: Path | None,
    dry_run: bool,
    config: FormatterConfig,
    summary: bool,
) -> FormatResults:
    runner = _create_runner(config)
    _create_rules_file(runner, project_dir or _default_project_dir(source_dir))
    results = runner.run(source_dir, dry_run=dry_run)
    if dry_run:
        show_check_results(results)
    else:
        show_format_results(results)
    if summary:
        show_summary(results)
    return results


SOURCE_DIR_ARGUMENT = typer.Argument(
    Path("."), exists=True, help="Source directory (or single file) to process"
)
PROJECT_DIR_OPTION = typer.Option(
    None, "--project-dir", help="Project root holding the QA rules directory (default: source dir, or the directory of a single source file)"
)
IMPORT_ORDER_OPTION = typer.Option(
    None,
    "--import-order",
    "-i",
    help="Group descriptor, repeatable; '' is other imports, '#' static imports",
)
IMPORT_ORDER_FILE_OPTION = typer.Option(
    None, "--import-order-file", exists=True, dir_okay=False, help="Read groups from a .importorder file"
)
STRICT_OPTION = typer.Option(
    None, "--strict/--no-strict", help="Reject empty orders and orders missing '' or '#'"
)
WORKERS_OPTION = typer.Option(None, "--workers", "-w", help="Number of concurrent workers")
WORKER_TYPE_OPTION = typer.Option(None, "--worker-type", help="Worker pool type")
SUFFIX_OPTION = typer.Option(None, "--suffix", help="Suffix of the source files to process")
SUMMARY_OPTION = typer.Option(False, "--summary", help="Print a summary table")


@app.command("check")
def check(
    source_dir: Path = SOURCE_DIR_ARGUMENT,
    project_dir: Path | None = PROJECT_DIR_OPTION,
    import_order: list[str] | None = IMPORT_ORDER_OPTION,
    import_order_file: Path | None = IMPORT_ORDER_FILE_OPTION,
    strict: bool | None = STRICT_OPTION,
    workers: int | None = WORKERS_OPTION,
    worker_type: WorkerType | None = WORKER_TYPE_OPTION,
    suffix: str | None = SUFFIX_OPTION,
    summary: bool = SUMMARY_OPTION,
):
    """
    Check source files and show the ones whose imports are not sorted.
    """
    config = _build_formatter_config(
        import_order, import_order_file, strict, workers, worker_type, suffix
    )
    results = _run(source_dir, project_dir, True, config, summary)
    if results.has_changes() or results.has_failures():
        raise typer.Exit(code=1)


@app.command("format")
def format_sources(
    source_dir: Path = SOURCE_DIR_ARGUMENT,
    project_dir: Path | None = PROJECT_DIR_OPTION,
    import_order: list[str] | None = IMPORT_ORDER_OPTION,
    import_order_file: Path | None = IMPORT_ORDER_FILE_OPTION,
    strict: bool | None = STRICT_OPTION,
    workers: int | None = WORKERS_OPTION,
    worker_type: WorkerType | None = WORKER_TYPE_OPTION,
    suffix: str | None = SUFFIX_OPTION,
    summary: bool = SUMMARY_OPTION,
):
    """
    Sort the imports of source files in place and show the changed files.
    """
    config = _build_formatter_config(
        import_order, import_order_file, strict, workers, worker_type, suffix
    )
    results = _run(source_dir, project_dir, False, config, summary)
    if results.has_failures():
        raise typer.Exit(code=1)


@app.command("create-rules-file")
def create_rules_file(
    project_dir: Path = typer.Argument(Path("."), help="Project root directory"),
    import_order: list[str] | None = IMPORT_ORDER_OPTION,
    strict: bool | None = STRICT_OPTION,
):
    """
    Generate the .importorder file under the QA directory, if it does not exist yet.
    """
    config = _build_formatter_config(import_order, strict=strict)
    runner = _create_runner(config)
    written = _create_rules_file(runner, project_dir)
    if written is None:
        rules_file = config.get_import_order_file_path(project_dir)
        console.print(f"Import order file already exists: {rules_file}", markup=False, soft_wrap=True)
    else:
        console.print(f"Created import order file: {written}", markup=False, soft_wrap=True)


@app.command("show-order")
def show_order(
    import_order: list[str] | None = IMPORT_ORDER_OPTION,
    import_order_file: Path | None = IMPORT_ORDER_FILE_OPTION,
    strict: bool | None = STRICT_OPTION,
):
    """
    Show the compiled import groups in output order.
    """
    config = _build_formatter_config(import_order, import_order_file, strict)
    spec = _create_runner(config).spec

    if spec.is_fallback:
        console.print("No groups configured, imports keep their original order")
        return

    table = Table(title="Import order")
    table.add_column("Index", justify="right")
    table.add_column("Group", style="cyan")
    table.add_column("Descriptor")
    for index, key in enumerate(spec.groups):
        table.add_row(str(index), key.kind.value, repr(key.descriptor))
    console.print(table)


if __name__ == "__main__":
    app()
