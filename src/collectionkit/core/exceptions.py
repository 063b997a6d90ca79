"""Exceptions raised by collection construction."""


class CollectionError(Exception):
    """Base class for all collection-related errors."""
    pass


class DuplicateCollectionError(CollectionError):
    """Raised when a collection name is already registered in this process."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"There is already a collection named '{name}'")
