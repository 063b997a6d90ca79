"""The base collection construct.

``Collection`` is the class every handle is an instance of, directly or
through mixin subclasses. Its constructor contract, ``Collection(name,
options)``, is what mixins must preserve.
"""

import secrets
import threading
from typing import Any, Callable, ClassVar, Iterator, Optional

from bson import ObjectId

from collectionkit.core.exceptions import CollectionError, DuplicateCollectionError
from collectionkit.core.logging import get_logger
from collectionkit.domain.entities.collection_params import CollectionParams
from collectionkit.domain.services.options import IdGeneration, normalize_options
from collectionkit.infrastructure.persistence.drivers import (
    LocalCollectionDriver,
    get_default_driver,
)

logger = get_logger(__name__)

# No look-alikes: 0/O and 1/l/I are left out.
UNMISTAKABLE_CHARS = "23456789ABCDEFGHJKLMNPQRSTWXYZabcdefghijkmnopqrstuvwxyz"
STRING_ID_LENGTH = 17


def random_string_id() -> str:
    """Generate a 17-character id for the STRING strategy."""
    return "".join(secrets.choice(UNMISTAKABLE_CHARS) for _ in range(STRING_ID_LENGTH))


class Collection:
    """A named (or anonymous) set of documents.

    Named collections are registered process-wide and a name can only be
    registered once. Anonymous collections (``name=None``) live in memory and
    are never registered.

    Args:
        name: The collection name, or None for an anonymous local collection.
        options: Effective options. Recognized keys are ``id_generation``,
            ``local_only``, ``transform``, ``connection`` and ``_driver``;
            other keys are kept on ``self.options`` untouched.

    Raises:
        DuplicateCollectionError: If ``name`` is already registered.
        CollectionError: If ``id_generation`` is not a known strategy.
    """

    _registry: ClassVar[dict[str, "Collection"]] = {}
    _registry_lock: ClassVar[threading.Lock] = threading.Lock()

    params: Optional[CollectionParams] = None

    def __init__(self, name: Optional[str], options: Optional[dict[str, Any]] = None) -> None:
        self.options = normalize_options(options)
        self.name = name

        try:
            self.id_generation = IdGeneration(self.options["id_generation"])
        except ValueError:
            raise CollectionError(
                f"Invalid id_generation option: {self.options['id_generation']!r}"
            ) from None

        self.transform: Optional[Callable[[dict], Any]] = self.options.get("transform")
        self.local = name is None or bool(self.options.get("local_only"))

        if self.options.get("_driver") is not None:
            self._driver = self.options["_driver"]
        elif self.options.get("connection") is not None:
            self._driver = self.options["connection"]
        elif self.local:
            self._driver = LocalCollectionDriver()
        else:
            self._driver = get_default_driver()

        self._raw = self._driver.open(name)

        if name is not None:
            with self._registry_lock:
                if name in self._registry:
                    raise DuplicateCollectionError(name)
                self._registry[name] = self

        logger.debug(
            "Collection constructed",
            collection=name,
            local=self.local,
            id_generation=self.id_generation.value,
        )

    @classmethod
    def get(cls, name: str) -> Optional["Collection"]:
        """Return the collection registered under ``name``, if any."""
        return cls._registry.get(name)

    @classmethod
    def unregister(cls, name: str) -> bool:
        """Forget a registered name so it can be constructed again.

        Returns:
            True if the name was registered, False otherwise.
        """
        with cls._registry_lock:
            return cls._registry.pop(name, None) is not None

    def raw_collection(self) -> Any:
        """Return the driver-level collection object."""
        return self._raw

    def raw_database(self) -> Any:
        """Return the driver-level database, or None for local collections."""
        return getattr(self._driver, "database", None)

    def _new_id(self) -> Any:
        if self.id_generation is IdGeneration.STRING:
            return random_string_id()
        return ObjectId()

    def _transformed(self, document: Optional[dict]) -> Any:
        if document is None or self.transform is None:
            return document
        return self.transform(document)

    def insert(self, document: dict[str, Any]) -> Any:
        """Insert a document and return its _id.

        An _id is generated according to ``id_generation`` unless the
        document already carries one. The caller's dict is not modified.
        """
        document = dict(document)
        document.setdefault("_id", self._new_id())
        self._raw.insert_one(document)
        return document["_id"]

    def find(self, selector: Optional[dict[str, Any]] = None) -> Iterator[Any]:
        for document in self._raw.find(selector or {}):
            yield self._transformed(document)

    def find_one(self, selector: Optional[dict[str, Any]] = None) -> Any:
        return self._transformed(self._raw.find_one(selector or {}))

    def update(self, selector: dict[str, Any], modifier: dict[str, Any]) -> int:
        """Update the first matching document; return the number modified.

        A modifier without ``$`` operators replaces the document.
        """
        if any(key.startswith("$") for key in modifier):
            result = self._raw.update_one(selector, modifier)
        else:
            result = self._raw.replace_one(selector, modifier)
        return result.modified_count

    def remove(self, selector: dict[str, Any]) -> int:
        """Remove every matching document; return how many were removed."""
        return self._raw.delete_many(selector).deleted_count

    def count(self, selector: Optional[dict[str, Any]] = None) -> int:
        return self._raw.count_documents(selector or {})

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} local={self.local}>"
