"""Domain services for collectionkit."""

from collectionkit.domain.services.options import (
    IdGeneration,
    OPTION_ALIASES,
    canonical_key,
    default_options,
    normalize_options,
)

__all__ = [
    "IdGeneration",
    "OPTION_ALIASES",
    "canonical_key",
    "default_options",
    "normalize_options",
]
