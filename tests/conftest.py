"""Pytest configuration for all tests."""

import pytest

from collectionkit.core.config import get_settings
from collectionkit.infrastructure.persistence.collection import Collection
from collectionkit.infrastructure.persistence.drivers import get_default_driver
from collectionkit.infrastructure.persistence.index_builder import IndexBuilder


@pytest.fixture(autouse=True)
def _isolate_process_state():
    """Reset the name registry, cached settings and index worker.

    Collection names are process-wide, so every test starts with an empty
    registry and leaves one behind.
    """
    get_settings.cache_clear()
    get_default_driver.cache_clear()
    Collection._registry.clear()

    yield

    IndexBuilder.wait_for_pending(timeout=5)
    Collection._registry.clear()
    get_default_driver.cache_clear()
    get_settings.cache_clear()
