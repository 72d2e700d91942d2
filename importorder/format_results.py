"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

"""
Per-file format outcomes and their batch aggregation.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any


class FormatResult(str, Enum):
    """Outcome of formatting a single file."""

    UNCHANGED = "unchanged"  # Already formatted, content left as is
    SUCCEED = "succeed"  # Content changed (written back unless dry run)
    FAILED = "failed"  # Formatting raised an error


@dataclass(frozen=True)
class FileOutcome:
    """
    Result of formatting one file.

    Attributes:
        file_name: Identifier of the file, usually its path
        result: The outcome kind
        message: Error message for failed files
    """

    file_name: str
    result: FormatResult
    message: str | None = None

    @classmethod
    def unchanged(cls, file_name: str) -> "FileOutcome":
        return cls(file_name, FormatResult.UNCHANGED)

    @classmethod
    def succeed(cls, file_name: str) -> "FileOutcome":
        return cls(file_name, FormatResult.SUCCEED)

    @classmethod
    def failed(cls, file_name: str, message: str) -> "FileOutcome":
        return cls(file_name, FormatResult.FAILED, message)


class FormatResults:
    """
    Collects a batch of file outcomes, grouped by FormatResult.

    Safe to add to from several worker threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._unchanged: set[str] = set()
        self._succeed: set[str] = set()
        self._failed: dict[str, str] = {}

    def add_unchanged_file(self, file_name: str) -> None:
        with self._lock:
            self._unchanged.add(file_name)

    def add_succeed(self, file_name: str) -> None:
        with self._lock:
            self._succeed.add(file_name)

    def add_failed(self, file_name: str, reason: str) -> None:
        with self._lock:
            self._failed[file_name] = reason

    def add_outcome(self, outcome: FileOutcome) -> None:
        """Record an outcome under the group its result kind belongs to."""
        if outcome.result == FormatResult.UNCHANGED:
            self.add_unchanged_file(outcome.file_name)
        elif outcome.result == FormatResult.SUCCEED:
            self.add_succeed(outcome.file_name)
        else:
            self.add_failed(outcome.file_name, outcome.message or "unknown error")

    @property
    def unchanged(self) -> list[str]:
        with self._lock:
            return sorted(self._unchanged)

    @property
    def succeed(self) -> list[str]:
        with self._lock:
            return sorted(self._succeed)

    @property
    def failed(self) -> dict[str, str]:
        with self._lock:
            return dict(sorted(self._failed.items()))

    @property
    def total(self) -> int:
        with self._lock:
            return len(self._unchanged) + len(self._succeed) + len(self._failed)

    def has_failures(self) -> bool:
        with self._lock:
            return bool(self._failed)

    def has_changes(self) -> bool:
        with self._lock:
            return bool(self._succeed)

    def get_summary(self) -> dict[str, Any]:
        """
        Get a summary of the batch.

        Returns
        -------
            Dictionary with the count of each outcome kind and the failure reasons

        """
        return {
            "total": self.total,
            "unchanged": len(self.unchanged),
            "succeed": len(self.succeed),
            "failed": len(self.failed),
            "failures": self.failed,
        }
