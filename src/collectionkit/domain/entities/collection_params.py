"""Provenance record attached to every collection handle."""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class CollectionParams:
    """The arguments a collection handle was built from.

    Kept for debugging and introspection only; nothing in collectionkit reads
    it back.

    Attributes:
        name: The name passed by the caller, even when the underlying
            collection is anonymous.
        mixins: The mixins applied, in application order.
        options: The caller's options, before normalization.
        indices: The index specifications requested. None for client-side
            handles, which never create indexes.
    """

    name: Optional[str]
    mixins: list[Callable] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)
    indices: Optional[list[dict[str, Any]]] = None

    def as_dict(self) -> dict[str, Any]:
        """Render the record as a plain dict."""
        data: dict[str, Any] = {"name": self.name}
        if self.indices is not None:
            data["indices"] = self.indices
        data["mixins"] = self.mixins
        data["options"] = self.options
        return data
