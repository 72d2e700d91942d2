"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

"""
Source file formatting.

This module runs the pretty-printer over a source file, sorts the import block of
its output and, unless running dry, writes changed content back. It also writes
the .importorder rules file IDEs read to apply the same import order.
"""

from collections.abc import Callable
from pathlib import Path

from importorder.core.logging import correlation_id, get_logger
from importorder.errors import ImportOrderError
from importorder.format_results import FileOutcome
from importorder.imports_sorter import sort_imports
from importorder.order_spec import OrderSpec

logger = get_logger("importorder.formatter")

PrettyPrinter = Callable[[str], str | None]


def normalize_newlines(code: str) -> str:
    """Convert CRLF and CR line endings to LF, the only separator the sorter knows."""
    return code.replace("\r\n", "\n").replace("\r", "\n")


def passthrough_printer(code: str) -> str:
    """Default pretty-printer, only normalizes line endings."""
    return normalize_newlines(code)


class SourceFormatter:
    """
    Formats source files with a fixed import order policy.

    The formatter holds no per-file state, so one instance can be shared by
    every worker of a batch.
    """

    def __init__(
        self,
        spec: OrderSpec,
        pretty_printer: PrettyPrinter | None = None,
        encoding: str = "utf-8",
    ):
        """
        Initialize the formatter.

        Args:
            spec: Compiled import order policy
            pretty_printer: Callable producing pretty-formatted code, returning None
                when the code cannot be formatted
            encoding: Encoding used to read and write source files
        """
        self.spec = spec
        self.pretty_printer = pretty_printer or passthrough_printer
        self.encoding = encoding

    def format_code(self, code: str) -> str:
        """
        Pretty-print code and sort its imports.

        Args:
            code: Original source code

        Returns:
            The formatted source code

        Raises:
            ImportOrderError: If the pretty-printer rejects the code or the
                import block is malformed
        """
        formatted = self.pretty_printer(code)
        if formatted is None:
            raise ImportOrderError("Pretty-printer could not format the code")
        return sort_imports(normalize_newlines(formatted), self.spec)

    def format_file(self, path: Path | str, dry_run: bool = False) -> FileOutcome:
        """
        Format a single source file.

        Errors are returned as a failed outcome instead of raised, so that one
        bad file never stops the rest of a batch.

        Args:
            path: Source file path
            dry_run: Only compute the outcome, never write the file

        Returns:
            FileOutcome for the file
        """
        file_name = str(path)
        with correlation_id():
            try:
                return self._format_file(Path(path), dry_run)
            except (OSError, UnicodeError, ImportOrderError) as e:
                logger.debug(
                    f"Failed to format {file_name}",
                    context={"error_type": type(e).__name__, "error": str(e)},
                )
                return FileOutcome.failed(file_name, str(e))

    def _format_file(self, path: Path, dry_run: bool) -> FileOutcome:
        file_name = str(path)
        # newline="" keeps CRLF endings visible, so such files count as changed
        with open(path, encoding=self.encoding, newline="") as f:
            original_code = f.read()

        formatted_code = self.format_code(original_code)
        if formatted_code == original_code:
            logger.debug(f"{file_name} is already formatted")
            return FileOutcome.unchanged(file_name)

        if not dry_run:
            with open(path, "w", encoding=self.encoding, newline="") as f:
                f.write(formatted_code)
            logger.debug(f"Formatted {file_name}")
        return FileOutcome.succeed(file_name)

    def write_import_order_file(self, file_path: Path | str) -> Path:
        """
        Write the import order rules file.

        Args:
            file_path: Target path; missing parent directories are created

        Returns:
            The written path
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(self.spec.to_import_order_file_content(), encoding=self.encoding)
        logger.info(f"Wrote import order file {file_path}")
        return file_path
