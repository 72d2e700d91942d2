"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

"""
Test fixtures package for importorder tests.

This package provides reusable fixtures and source samples for the unit and
integration test suites.
"""

from tests.fixtures.base import clean_env, java_spec, source_tree, temp_dir, write_source
from tests.fixtures.sources import MALFORMED_JAVA, NO_IMPORTS_JAVA, SORTED_JAVA, UNSORTED_JAVA

__all__ = [
    "clean_env",
    "java_spec",
    "source_tree",
    "temp_dir",
    "write_source",
    "MALFORMED_JAVA",
    "NO_IMPORTS_JAVA",
    "SORTED_JAVA",
    "UNSORTED_JAVA",
]
