"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

"""
Unit tests for per-file outcomes and their aggregation.
"""

import threading

import pytest

from importorder.format_results import FileOutcome, FormatResult, FormatResults

pytestmark = pytest.mark.unit


class TestFileOutcome:
    """Tests for the FileOutcome constructors."""

    def test_constructors(self):
        assert FileOutcome.unchanged("A.java").result == FormatResult.UNCHANGED
        assert FileOutcome.succeed("A.java").result == FormatResult.SUCCEED
        failed = FileOutcome.failed("A.java", "boom")
        assert failed.result == FormatResult.FAILED
        assert failed.message == "boom"


class TestFormatResults:
    """Tests for FormatResults."""

    def test_empty(self):
        results = FormatResults()
        assert results.total == 0
        assert not results.has_changes()
        assert not results.has_failures()

    def test_groups_outcomes(self):
        results = FormatResults()
        results.add_outcome(FileOutcome.unchanged("B.java"))
        results.add_outcome(FileOutcome.succeed("C.java"))
        results.add_outcome(FileOutcome.succeed("A.java"))
        results.add_outcome(FileOutcome.failed("D.java", "Malformed"))

        assert results.unchanged == ["B.java"]
        assert results.succeed == ["A.java", "C.java"]
        assert results.failed == {"D.java": "Malformed"}
        assert results.total == 4
        assert results.has_changes()
        assert results.has_failures()

    def test_same_file_counted_once(self):
        results = FormatResults()
        results.add_succeed("A.java")
        results.add_succeed("A.java")
        assert results.total == 1

    def test_failed_outcome_without_message(self):
        results = FormatResults()
        results.add_outcome(FileOutcome("A.java", FormatResult.FAILED))
        assert results.failed == {"A.java": "unknown error"}

    def test_summary(self):
        results = FormatResults()
        results.add_unchanged_file("A.java")
        results.add_failed("B.java", "reason")

        assert results.get_summary() == {
            "total": 2,
            "unchanged": 1,
            "succeed": 0,
            "failed": 1,
            "failures": {"B.java": "reason"},
        }

    def test_concurrent_adds(self):
        results = FormatResults()

        def add_files(worker: int) -> None:
            for index in range(100):
                results.add_succeed(f"{worker}-{index}.java")

        threads = [threading.Thread(target=add_files, args=(worker,)) for worker in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.total == 800
