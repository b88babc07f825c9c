"""Pytest configuration for integration tests."""

import pytest


def pytest_collection_modifyitems(items):
    """Mark everything under integration_tests/ so it can be deselected with -m."""
    for item in items:
        if item.path.parent.name == "integration_tests":
            item.add_marker(pytest.mark.integration)
