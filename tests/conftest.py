"""Shared fixtures for unit tests."""

import pytest

from fakes import FakeTransport


@pytest.fixture
def transport():
    """Create a fake async subscriber transport."""
    return FakeTransport()
