"""
Test configuration and fixtures for the importorder project.

This file is the root pytest configuration file that sets up pytest
markers and imports fixtures from the fixtures modules to make them
available to all tests.
"""

# Import fixtures from the fixtures modules to make them available to all tests
from tests.fixtures.base import (
    clean_env,
    java_spec,
    source_tree,
    temp_dir,
    write_source,
)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark a test as a unit test")
    config.addinivalue_line("markers", "integration: mark a test as an integration test")
    config.addinivalue_line("markers", "cli: mark a test that tests CLI functionality")
    config.addinivalue_line("markers", "slow: mark a test that takes longer than average to run")
