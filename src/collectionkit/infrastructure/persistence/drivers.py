"""Drivers that hand out the raw storage behind a collection handle.

A driver's only job is ``open(name)``, returning an object with the pymongo
collection surface the handle delegates to. Server-side handles talk to
MongoDB through ``RemoteCollectionDriver``; anonymous and client-local handles
keep their documents in memory through ``LocalCollectionDriver``.
"""

import copy
import threading
from functools import lru_cache
from typing import Any, Iterator, Optional

from pymongo import MongoClient
from pymongo.collection import Collection as PyMongoCollection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from collectionkit.core.config import get_settings
from collectionkit.core.exceptions import CollectionError
from collectionkit.core.logging import get_logger

logger = get_logger(__name__)

_MISSING = object()

# Update operators LocalStore.update_one understands.
UPDATE_OPERATORS = frozenset({"$set", "$unset"})


class RemoteCollectionDriver:
    """Driver bound to a MongoDB database and, optionally, its oplog.

    The client is created with ``connect=False`` so construction never blocks
    on the network; a malformed URL still fails immediately.

    Args:
        mongo_url: Connection string of the database.
        oplog_url: Connection string of the replication log, if any.
        **client_options: Passed through to ``MongoClient``.
    """

    def __init__(
        self, mongo_url: str, oplog_url: Optional[str] = None, **client_options: Any
    ) -> None:
        settings = get_settings()
        client_options.setdefault(
            "serverSelectionTimeoutMS", settings.mongo_server_selection_timeout_ms
        )
        client_options.setdefault("connect", False)

        self.mongo_url = mongo_url
        self.oplog_url = oplog_url
        self.client: MongoClient = MongoClient(mongo_url, **client_options)
        self.database: Database = self.client.get_default_database(
            default=settings.mongo_database
        )

        logger.info(
            "Remote collection driver created",
            database=self.database.name,
            has_oplog=oplog_url is not None,
        )

    def open(self, name: str) -> PyMongoCollection:
        """Return the pymongo collection called ``name``."""
        return self.database[name]

    def close(self) -> None:
        """Close the underlying client."""
        self.client.close()


def _lookup(document: dict[str, Any], path: str) -> Any:
    value: Any = document
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _assign(document: dict[str, Any], path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    target = document
    for part in parents:
        child = target.get(part)
        if not isinstance(child, dict):
            if child is not None:
                raise CollectionError(f"Cannot set '{path}': '{part}' is not a document")
            child = target[part] = {}
        target = child
    target[leaf] = value


def _discard(document: dict[str, Any], path: str) -> None:
    *parents, leaf = path.split(".")
    target: Any = document
    for part in parents:
        target = target.get(part) if isinstance(target, dict) else None
    if isinstance(target, dict):
        target.pop(leaf, None)


def _matches(document: dict[str, Any], selector: Optional[dict[str, Any]]) -> bool:
    if not selector:
        return True
    return all(_lookup(document, path) == expected for path, expected in selector.items())


class LocalStore:
    """In-memory document list with the subset of the pymongo surface a
    client-local cache needs. Selectors match by equality only.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name
        self._documents: dict[Any, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def insert_one(self, document: dict[str, Any]) -> InsertOneResult:
        with self._lock:
            if document["_id"] in self._documents:
                raise DuplicateKeyError(
                    f"E11000 duplicate key error, _id: {document['_id']!r}", code=11000
                )
            self._documents[document["_id"]] = copy.deepcopy(document)
        return InsertOneResult(document["_id"], acknowledged=True)

    def find(self, selector: Optional[dict[str, Any]] = None) -> Iterator[dict[str, Any]]:
        with self._lock:
            matched = [
                copy.deepcopy(doc)
                for doc in self._documents.values()
                if _matches(doc, selector)
            ]
        return iter(matched)

    def find_one(self, selector: Optional[dict[str, Any]] = None) -> Optional[dict[str, Any]]:
        return next(self.find(selector), None)

    def update_one(self, selector: dict[str, Any], modifier: dict[str, Any]) -> UpdateResult:
        unsupported = set(modifier) - UPDATE_OPERATORS
        if unsupported:
            raise CollectionError(
                f"Unsupported update operator(s) for a local collection: {sorted(unsupported)}"
            )

        with self._lock:
            for key, doc in self._documents.items():
                if not _matches(doc, selector):
                    continue
                updated = copy.deepcopy(doc)
                for path, value in modifier.get("$set", {}).items():
                    _assign(updated, path, copy.deepcopy(value))
                for path in modifier.get("$unset", {}):
                    _discard(updated, path)
                modified = int(updated != doc)
                self._documents[key] = updated
                return UpdateResult({"n": 1, "nModified": modified}, acknowledged=True)
        return UpdateResult({"n": 0, "nModified": 0}, acknowledged=True)

    def replace_one(self, selector: dict[str, Any], replacement: dict[str, Any]) -> UpdateResult:
        with self._lock:
            for key, doc in self._documents.items():
                if _matches(doc, selector):
                    self._documents[key] = {"_id": key, **copy.deepcopy(replacement)}
                    return UpdateResult({"n": 1, "nModified": 1}, acknowledged=True)
        return UpdateResult({"n": 0, "nModified": 0}, acknowledged=True)

    def delete_many(self, selector: Optional[dict[str, Any]] = None) -> DeleteResult:
        with self._lock:
            doomed = [k for k, doc in self._documents.items() if _matches(doc, selector)]
            for key in doomed:
                del self._documents[key]
        return DeleteResult({"n": len(doomed)}, acknowledged=True)

    def count_documents(self, selector: Optional[dict[str, Any]] = None) -> int:
        return sum(1 for _ in self.find(selector))


class LocalCollectionDriver:
    """Driver keeping every collection in process memory."""

    def open(self, name: Optional[str]) -> LocalStore:
        return LocalStore(name)


@lru_cache
def get_default_driver() -> RemoteCollectionDriver:
    """Get the process-wide driver built from settings."""
    settings = get_settings()
    return RemoteCollectionDriver(settings.mongo_url, oplog_url=settings.oplog_url)
