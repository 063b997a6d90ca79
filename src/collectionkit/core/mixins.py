"""Mixin composition and handle instantiation.

A mixin is a callable that takes a class and returns a class honouring the
same ``(name, options)`` constructor contract, typically a subclass:

    def greeted(greeting):
        def mixin(base):
            class Greeted(base):
                def __init__(self, name, options=None):
                    print(f"{greeting} {name}!")
                    super().__init__(name, options)
            return Greeted
        return mixin

Mixins are applied left to right, so the last one listed is the outermost
subclass: its ``__init__`` runs first and returns last.
"""

from functools import reduce
from typing import Any, Callable, Optional, Sequence, TypeVar

from collectionkit.core.logging import get_logger
from collectionkit.domain.entities.collection_params import CollectionParams

logger = get_logger(__name__)

T = TypeVar("T")

Mixin = Callable[[type], type]


def compose_mixins(base: type, mixins: Sequence[Mixin]) -> type:
    """Fold ``mixins`` over ``base``.

    ``compose_mixins(Base, [m1, m2])`` is ``m2(m1(Base))``. With no mixins,
    ``base`` itself is returned.

    Args:
        base: The class to extend.
        mixins: Mixins in application order.

    Returns:
        The extended class.
    """
    extended = reduce(lambda acc, mixin: mixin(acc), mixins, base)
    if mixins:
        logger.debug(
            "Mixins applied",
            base=base.__name__,
            mixins=[getattr(m, "__name__", repr(m)) for m in mixins],
            result=extended.__name__,
        )
    return extended


def instantiate(
    construct: Callable[..., T],
    name: Optional[str],
    options: dict[str, Any],
    params: CollectionParams,
) -> T:
    """Build one handle and attach its provenance record.

    Args:
        construct: The (possibly extended) collection class.
        name: Name passed to the constructor; None for anonymous collections.
        options: Effective options passed to the constructor.
        params: The caller's original arguments.

    Returns:
        The new handle, with ``params`` set.
    """
    handle = construct(name, options)
    handle.params = params
    return handle
