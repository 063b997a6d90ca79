"""Pytest configuration for unit tests."""

from typing import Generator
from unittest.mock import MagicMock, patch

import pytest


class FakeDriver:
    """Driver handing out MagicMock collections, one per name."""

    def __init__(self) -> None:
        self.opened: dict = {}
        self.database = MagicMock()

    def open(self, name):
        raw = MagicMock()
        raw.name = name
        raw.create_index.side_effect = lambda keys, **kwargs: "_".join(
            f"{field}_{direction}" for field, direction in keys
        )
        self.opened[name] = raw
        return raw


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def driver_factory() -> type[FakeDriver]:
    return FakeDriver


@pytest.fixture(autouse=True)
def default_driver(fake_driver: FakeDriver) -> Generator[FakeDriver, None, None]:
    """Keep named collections off the network."""
    with patch(
        "collectionkit.infrastructure.persistence.collection.get_default_driver",
        return_value=fake_driver,
    ):
        yield fake_driver


@pytest.fixture
def remote_driver_cls() -> Generator[MagicMock, None, None]:
    """Patch the driver class the server binds for mongo_url/oplog_url."""
    with patch("collectionkit.server.RemoteCollectionDriver") as driver_cls:
        driver_cls.return_value = FakeDriver()
        yield driver_cls
