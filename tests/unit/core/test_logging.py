"""Unit tests for logging configuration."""

import structlog

from collectionkit.core.config import Settings
from collectionkit.core.logging import (
    LoggingContext,
    add_logger_name,
    configure_logging,
    get_logger,
    rename_message_field,
)


class NamedLogger:
    name = "collectionkit.server"


def test_rename_message_field():
    event_dict = rename_message_field(None, "info", {"event": "Collection created"})
    assert event_dict == {"message": "Collection created"}


def test_add_logger_name_falls_back():
    assert add_logger_name(NamedLogger(), "info", {})["logger"] == "collectionkit.server"
    assert add_logger_name(object(), "info", {})["logger"] == "collectionkit"


def test_configure_logging_json(capsys):
    configure_logging(Settings(environment="production", log_format="json"))

    get_logger("collectionkit.test").info("hello", collection="posts")

    out = capsys.readouterr().out
    assert '"message": "hello"' in out
    assert '"collection": "posts"' in out

    structlog.reset_defaults()


def test_logging_context_binds_and_unbinds():
    with LoggingContext(collection="posts"):
        assert structlog.contextvars.get_contextvars()["collection"] == "posts"

    assert "collection" not in structlog.contextvars.get_contextvars()
