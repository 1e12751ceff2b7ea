# conftest.py
"""
Pytest configuration for the Sipsense wellness kernel tests.

Registers custom markers and resets process-wide caches between tests so
configuration loaded by one test never leaks into the next.
"""

import pytest


@pytest.fixture(autouse=True)
def reset_config():
    """Auto-run fixture clearing the cached kernel config around each test."""
    from sipsense.kernel.config import reset_config_cache

    reset_config_cache()
    yield
    reset_config_cache()


# pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: fast tests of a single module")
    config.addinivalue_line("markers", "smoke: import and wiring health checks")
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (may be slower)",
    )


def pytest_collection_modifyitems(config, items):
    """Add markers to tests based on their names."""
    for item in items:
        if "integration" in item.name.lower() or "session" in item.name.lower():
            item.add_marker(pytest.mark.integration)
