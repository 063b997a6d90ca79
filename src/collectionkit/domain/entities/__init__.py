"""Domain entities for collectionkit."""

from collectionkit.domain.entities.collection_params import CollectionParams

__all__ = ["CollectionParams"]
