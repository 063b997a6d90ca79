"""Client-side collection factory.

Client handles never create indexes and never bind a remote driver. A
``local_only`` collection is a private in-memory cache, so its underlying
collection is always anonymous.
"""

from typing import Any, Optional, Sequence

from collectionkit.core.logging import get_logger
from collectionkit.core.mixins import Mixin, compose_mixins, instantiate
from collectionkit.domain.entities.collection_params import CollectionParams
from collectionkit.domain.services.options import normalize_options
from collectionkit.infrastructure.persistence.collection import Collection

logger = get_logger(__name__)


def create_collection(
    name: str,
    mixins: Optional[Sequence[Mixin]] = None,
    options: Optional[dict[str, Any]] = None,
) -> Collection:
    """Create a collection handle.

    Args:
        name: The collection name. Must be unique unless ``local_only``.
        mixins: Functions taking the collection class and returning its
            extension, applied in order.
        options: Collection options. ``local_only=True`` (or ``localOnly``)
            makes an anonymous in-memory collection; ``id_generation``
            defaults to ``"MONGO"``.

    Returns:
        The collection handle, with ``params`` recording the arguments.

    Example:
        >>> coll = create_collection("myColl", options={"local_only": True})
        >>> coll.name is None, coll.params.name
        (True, 'myColl')
    """
    mixins = list(mixins or [])
    options = options if options is not None else {}

    effective = normalize_options(options)
    underlying_name = None if effective.get("local_only") else name

    construct = compose_mixins(Collection, mixins)
    collection = instantiate(
        construct,
        underlying_name,
        effective,
        CollectionParams(name=name, mixins=mixins, options=options),
    )

    logger.info(
        "Collection created",
        collection=name,
        local=collection.local,
        mixins=len(mixins),
    )
    return collection
