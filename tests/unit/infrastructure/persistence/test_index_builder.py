"""Unit tests for IndexBuilder."""
import threading
from unittest.mock import MagicMock, call, patch

from pymongo.errors import OperationFailure

from collectionkit.infrastructure.persistence.index_builder import IndexBuilder


def make_raw(name="posts"):
    raw = MagicMock()
    raw.name = name
    return raw


def test_build_index_keys_preserves_order():
    """Compound index keys keep the order they were given in."""
    assert IndexBuilder.build_index_keys({"field": 1}) == [("field", 1)]
    assert IndexBuilder.build_index_keys({"b": -1, "a": 1, "c.d": 1}) == [
        ("b", -1),
        ("a", 1),
        ("c.d", 1),
    ]


def test_provision_requests_one_background_build_per_spec():
    raw = make_raw()

    futures = IndexBuilder.provision(raw, [{"field": 1}, {"field.subfield": 1}])
    for future in futures:
        future.result(timeout=5)

    assert raw.create_index.call_args_list == [
        call([("field", 1)], background=True),
        call([("field.subfield", 1)], background=True),
    ]


def test_provision_with_no_indices():
    raw = make_raw()

    assert IndexBuilder.provision(raw, []) == []
    raw.create_index.assert_not_called()


def test_provision_does_not_wait_for_builds():
    """The call returns while the first build is still blocked."""
    release = threading.Event()
    raw = make_raw()
    raw.create_index.side_effect = lambda keys, **kwargs: release.wait(5)

    futures = IndexBuilder.provision(raw, [{"field": 1}])

    assert futures[0].done() is False
    release.set()
    futures[0].result(timeout=5)


def test_provision_failure_is_logged_not_raised():
    raw = make_raw()
    raw.create_index.side_effect = [
        OperationFailure("Index build failed"),
        "other_1",
    ]

    with patch("collectionkit.infrastructure.persistence.index_builder.logger") as logger:
        futures = IndexBuilder.provision(raw, [{"field": 1}, {"other": 1}])
        IndexBuilder.wait_for_pending(timeout=5)

    assert isinstance(futures[0].exception(), OperationFailure)
    assert futures[1].result() == "other_1"

    logger.error.assert_called_once()
    assert logger.error.call_args.kwargs["collection"] == "posts"
    assert logger.error.call_args.kwargs["keys"] == [("field", 1)]
    assert logger.error.call_args.kwargs["error_type"] == "OperationFailure"


def test_slow_build_does_not_hold_back_other_collections():
    """A blocked build on one collection leaves the next collection's requests flowing."""
    release = threading.Event()
    other_requested = threading.Event()
    slow = make_raw("slow")
    slow.create_index.side_effect = lambda keys, **kwargs: release.wait(5)
    fast = make_raw("fast")
    fast.create_index.side_effect = lambda keys, **kwargs: other_requested.set()

    slow_futures = IndexBuilder.provision(slow, [{"field": 1}])
    fast_futures = IndexBuilder.provision(fast, [{"field": 1}])

    assert other_requested.wait(5) is True
    fast_futures[0].result(timeout=5)
    assert slow_futures[0].done() is False

    release.set()
    slow_futures[0].result(timeout=5)


def test_wait_for_pending_drains_workers():
    raw = make_raw()

    IndexBuilder.provision(raw, [{"a": 1}, {"b": 1}, {"c": 1}])
    IndexBuilder.wait_for_pending(timeout=5)

    assert raw.create_index.call_count == 3
    assert IndexBuilder._workers == set()
