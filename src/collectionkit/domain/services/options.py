"""Normalization of collection options.

Options are plain dicts. Callers coming from other collection frameworks tend
to spell keys in camelCase, so those spellings are folded into the snake_case
keys the rest of the package reads.
"""

from enum import Enum
from typing import Any, Mapping

from collectionkit.core.config import get_settings


class IdGeneration(str, Enum):
    """Strategies for generating the _id of new documents."""

    MONGO = "MONGO"  # bson ObjectId
    STRING = "STRING"  # random 17-character string


OPTION_ALIASES = {
    "idGeneration": "id_generation",
    "identifierGeneration": "id_generation",
    "identifier_generation": "id_generation",
    "localOnly": "local_only",
    "mongoUrl": "mongo_url",
    "oplogUrl": "oplog_url",
}


def canonical_key(key: str) -> str:
    """Return the snake_case key an option is stored under."""
    return OPTION_ALIASES.get(key, key)


def default_options() -> dict[str, Any]:
    """Options every collection starts from.

    ``id_generation`` comes from the ``default_id_generation`` setting,
    ``"MONGO"`` unless configured otherwise.
    """
    return {"id_generation": get_settings().default_id_generation}


def normalize_options(options: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Overlay caller options onto the defaults.

    Caller values win over the defaults. When an option is given under both
    its snake_case key and an alias, the snake_case key wins. The given
    mapping is copied, never mutated.

    Args:
        options: Caller-supplied options, or None.

    Returns:
        A new dict of effective options.
    """
    options = options or {}
    effective = default_options()
    for key, value in options.items():
        canonical = canonical_key(key)
        if canonical != key and canonical in options:
            continue
        effective[canonical] = value
    return effective
