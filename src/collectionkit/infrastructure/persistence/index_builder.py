"""Background index builder for server-side collections.

Index specifications are mappings such as ``{"field": 1}`` or
``{"field.subfield": -1}``. Each one is turned into a single
``create_index(..., background=True)`` request. Every ``provision`` call gets
its own worker thread, which issues that collection's requests in list order,
so the caller never waits on an index build and one collection's builds
never wait on another's.
"""

import threading
from concurrent.futures import Future
from typing import Any, ClassVar, Mapping, Optional, Sequence

from collectionkit.core.logging import get_logger

logger = get_logger(__name__)


class IndexBuilder:
    """Issues index-creation requests for collection handles."""

    _workers: ClassVar[set[threading.Thread]] = set()
    _workers_lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def build_index_keys(cls, spec: Mapping[str, Any]) -> list[tuple[str, Any]]:
        """Convert an index specification into pymongo's key list.

        Key order is preserved; it matters for compound indexes.

        Args:
            spec: Mapping of field path to direction.

        Returns:
            List of (field, direction) pairs.
        """
        return list(spec.items())

    @classmethod
    def _log_outcome(cls, collection_name: str, keys: list[tuple[str, Any]], future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error(
                "Index creation failed",
                collection=collection_name,
                keys=keys,
                error=str(exc),
                error_type=type(exc).__name__,
            )
        else:
            logger.debug(
                "Index created",
                collection=collection_name,
                keys=keys,
                index_name=future.result(),
            )

    @classmethod
    def _build(
        cls,
        raw_collection: Any,
        jobs: list[tuple[list[tuple[str, Any]], Future]],
        started: threading.Event,
    ) -> None:
        try:
            for keys, future in jobs:
                future.set_running_or_notify_cancel()
                started.set()
                try:
                    index_name = raw_collection.create_index(keys, background=True)
                except Exception as exc:
                    # Reported through the future's done-callback.
                    future.set_exception(exc)
                else:
                    future.set_result(index_name)
        finally:
            started.set()
            with cls._workers_lock:
                cls._workers.discard(threading.current_thread())

    @classmethod
    def provision(
        cls, raw_collection: Any, indices: Sequence[Mapping[str, Any]]
    ) -> list[Future]:
        """Request one background index build per specification.

        Returns once the collection's worker has started issuing requests,
        without waiting for any build to finish. Failures are logged, never
        raised.

        Args:
            raw_collection: The pymongo collection to index.
            indices: Index specifications, created in list order.

        Returns:
            One future per specification, in the same order.
        """
        collection_name = getattr(raw_collection, "name", None)
        jobs = []

        for spec in indices:
            keys = cls.build_index_keys(spec)
            future: Future = Future()
            future.add_done_callback(
                lambda f, keys=keys: cls._log_outcome(collection_name, keys, f)
            )
            jobs.append((keys, future))

        if jobs:
            started = threading.Event()
            worker = threading.Thread(
                target=cls._build,
                args=(raw_collection, jobs, started),
                name=f"collectionkit-index-{collection_name}",
                daemon=True,
            )
            with cls._workers_lock:
                cls._workers.add(worker)
            worker.start()
            started.wait()

        logger.info(
            "Index creation requested",
            collection=collection_name,
            count=len(jobs),
        )
        return [future for _, future in jobs]

    @classmethod
    def wait_for_pending(cls, timeout: Optional[float] = None) -> None:
        """Block until every running worker has issued all its requests.

        Args:
            timeout: Seconds to wait for each worker, or None to wait forever.
        """
        with cls._workers_lock:
            workers = list(cls._workers)
        for worker in workers:
            worker.join(timeout)
