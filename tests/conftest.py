"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
For standard test utilities, see tests/__init__.py
"""

import pytest

from tests import build_test_database


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring database (deselect with '-m \"not db\"')"
    )


@pytest.fixture(scope="function")
def session_factory():
    """Fresh schema per test; yields a sessionmaker bound to it."""
    engine, factory = build_test_database()
    yield factory
    engine.dispose()
