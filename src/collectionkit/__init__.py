"""collectionkit - Declarative MongoDB collections.

Build collection handles from a name, secondary indexes, mixins and driver
options. Use ``collectionkit.server.create_collection`` in server processes
and ``collectionkit.client.create_collection`` for client-side caches.
"""

__version__ = "0.0.1"

from collectionkit.core.exceptions import CollectionError, DuplicateCollectionError
from collectionkit.domain.entities.collection_params import CollectionParams
from collectionkit.infrastructure.persistence.collection import Collection

__all__ = [
    "Collection",
    "CollectionError",
    "CollectionParams",
    "DuplicateCollectionError",
    "__version__",
]
