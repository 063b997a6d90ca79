"""Server-side collection factory.

Server handles can live in a database other than the default one, given both
a ``mongo_url`` and an ``oplog_url``, and get their secondary indexes built in
the background as soon as they exist.
"""

from typing import Any, Mapping, Optional, Sequence

from collectionkit.core.logging import LoggingContext, get_logger
from collectionkit.core.mixins import Mixin, compose_mixins, instantiate
from collectionkit.domain.entities.collection_params import CollectionParams
from collectionkit.domain.services.options import normalize_options
from collectionkit.infrastructure.persistence.collection import Collection
from collectionkit.infrastructure.persistence.drivers import RemoteCollectionDriver
from collectionkit.infrastructure.persistence.index_builder import IndexBuilder

logger = get_logger(__name__)


def bind_remote_driver(options: dict[str, Any]) -> dict[str, Any]:
    """Point the collection at another database when both URLs are given.

    With both ``mongo_url`` and ``oplog_url`` set, a ``RemoteCollectionDriver``
    is stored under ``_driver``. With only one of them, nothing happens.

    Args:
        options: Effective options; updated in place.

    Returns:
        The same options dict.
    """
    mongo_url = options.get("mongo_url")
    oplog_url = options.get("oplog_url")

    if mongo_url and oplog_url:
        options["_driver"] = RemoteCollectionDriver(mongo_url, oplog_url=oplog_url)
    elif mongo_url or oplog_url:
        logger.debug(
            "Ignoring remote database settings, both mongo_url and oplog_url are needed",
            has_mongo_url=bool(mongo_url),
            has_oplog_url=bool(oplog_url),
        )
    return options


def create_collection(
    name: str,
    indices: Optional[Sequence[Mapping[str, Any]]] = None,
    mixins: Optional[Sequence[Mixin]] = None,
    options: Optional[dict[str, Any]] = None,
) -> Collection:
    """Create a collection handle and request its indexes.

    Args:
        name: The collection name. Must be unique.
        indices: Index specifications such as ``{"field": 1}`` or
            ``{"field.subfield": 1}``. The ``_id`` index exists already and
            should not be listed.
        mixins: Functions taking the collection class and returning its
            extension, applied in order.
        options: Collection options. ``mongo_url`` with ``oplog_url`` (or
            ``mongoUrl``/``oplogUrl``) selects another database;
            ``id_generation`` defaults to ``"MONGO"``.

    Returns:
        The collection handle, with ``params`` recording the arguments. Index
        builds have been requested but may not have finished.

    Example:
        >>> coll = create_collection(
        ...     "myColl",
        ...     indices=[{"field": 1}, {"field.subfield": 1}],
        ...     options={"id_generation": "STRING"},
        ... )
    """
    indices = list(indices or [])
    mixins = list(mixins or [])
    options = options if options is not None else {}

    effective = bind_remote_driver(normalize_options(options))

    construct = compose_mixins(Collection, mixins)
    collection = instantiate(
        construct,
        name,
        effective,
        CollectionParams(name=name, mixins=mixins, options=options, indices=indices),
    )

    with LoggingContext(collection=name):
        if indices:
            IndexBuilder.provision(collection.raw_collection(), indices)
        logger.info("Collection created", indices=len(indices), mixins=len(mixins))

    return collection
