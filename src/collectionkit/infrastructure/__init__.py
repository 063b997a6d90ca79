"""Infrastructure layer - the database driver side of collectionkit.

This layer contains:
- The Collection construct and its process-wide name registry
- Drivers (pymongo for MongoDB, in-memory for client-local caches)
- Background index builds
"""

from collectionkit.infrastructure.persistence.collection import Collection
from collectionkit.infrastructure.persistence.drivers import (
    LocalCollectionDriver,
    RemoteCollectionDriver,
    get_default_driver,
)
from collectionkit.infrastructure.persistence.index_builder import IndexBuilder

__all__ = [
    "Collection",
    "IndexBuilder",
    "LocalCollectionDriver",
    "RemoteCollectionDriver",
    "get_default_driver",
]
