# tests/conftest.py

"""Shared pytest fixtures for all trendbuy tests."""

from collections.abc import Generator
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def no_simulated_delay() -> Generator[None, None, None]:
    """Zero the simulated network delays so async tests run instantly."""
    with (
        patch.object(Settings, "METADATA_DELAY", 0.0),
        patch.object(Settings, "PRODUCT_SEARCH_DELAY", 0.0),
    ):
        yield
