"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

"""
Batch formatting of a source tree.

Discovers the source files under a directory, formats them on a bounded worker
pool sharing one read-only OrderSpec, and aggregates every file's outcome. A
failing file is recorded with its error message and never stops the batch.
"""

import os
from functools import partial
from pathlib import Path

from importorder.core.config import FormatterConfig
from importorder.core.logging import ErrorTracker, get_logger, log_operation
from importorder.format_results import FileOutcome, FormatResults
from importorder.formatter import PrettyPrinter, SourceFormatter
from importorder.work_queue import WorkItem, run_in_pool

logger = get_logger("importorder.runner")


def discover_source_files(root: Path | str, suffix: str = ".java") -> list[Path]:
    """
    Find all files under root whose name ends with suffix.

    Args:
        root: Directory to walk, or a single file
        suffix: File name suffix to match

    Returns:
        Matching file paths, sorted

    Raises:
        FileNotFoundError: If root does not exist
    """
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"No such file or directory: {root}")
    if root.is_file():
        return [root] if root.name.endswith(suffix) else []

    source_files = []
    for dirpath, _, filenames in os.walk(root):
        for filename in filenames:
            if filename.endswith(suffix):
                source_files.append(Path(dirpath) / filename)
    return sorted(source_files)


class FormatRunner:
    """Formats every source file of a tree with one compiled import order."""

    def __init__(self, config: FormatterConfig, pretty_printer: PrettyPrinter | None = None):
        """
        Initialize the runner.

        Args:
            config: Formatter configuration
            pretty_printer: Optional pretty-printer applied before sorting imports

        Raises:
            InvalidOrderSpec: If the configured import order is invalid
        """
        self.config = config
        self.spec = config.compile_order_spec()
        self.formatter = SourceFormatter(self.spec, pretty_printer, encoding=config.encoding)

    def create_rules_file(self, project_dir: Path | str) -> Path | None:
        """
        Write the import order rules file under the QA directory if it is missing.

        Returns:
            The written path, or None when the file already existed
        """
        rules_file = self.config.get_import_order_file_path(project_dir)
        if rules_file.exists():
            logger.debug(f"Import order file {rules_file} already exists")
            return None
        if not rules_file.parent.exists():
            logger.info(f"The QA path {rules_file.parent} does not exist, creating it")
        return self.formatter.write_import_order_file(rules_file)

    def run(self, source_dir: Path | str, dry_run: bool = False) -> FormatResults:
        """
        Format (or, with dry_run, check) every source file under source_dir.

        Args:
            source_dir: Directory to process
            dry_run: Report files that would change without writing them

        Returns:
            Aggregated outcomes of all files
        """
        source_files = discover_source_files(source_dir, self.config.file_suffix)
        results = FormatResults()
        tracker = ErrorTracker(logger)
        mode = "check" if dry_run else "format"

        def record_failure(work_item: WorkItem[Path, FileOutcome]) -> None:
            # Only errors the formatter does not turn into outcomes land here
            file_name = str(work_item.input_data)
            results.add_failed(file_name, str(work_item.error))
            tracker.add_error(work_item.error, context={"file": file_name}, log=False)

        with log_operation(
            logger,
            f"{mode} of {len(source_files)} files",
            context={"source_dir": str(source_dir), "workers": self.config.max_workers},
        ):
            work_items = run_in_pool(
                partial(self.formatter.format_file, dry_run=dry_run),
                source_files,
                max_workers=self.config.max_workers,
                worker_type=self.config.worker_type,
                on_error=record_failure,
            )

        for work_item in work_items:
            if work_item.result is None:
                continue
            outcome = work_item.result
            results.add_outcome(outcome)
            if outcome.message is not None:
                tracker.add_error(outcome.message, context={"file": outcome.file_name}, log=False)

        if tracker.has_errors():
            summary = tracker.get_error_summary()
            logger.debug(
                f"{summary['total_errors']} files failed during {mode}",
                context={"error_types": summary["error_types"]},
            )

        return results
