"""Process-wide interning of TypeReference values by canonical signature."""

from __future__ import annotations

from rosetta.core.cache import MemoCache
from rosetta.core.models import TypeReference

_INTERNED: MemoCache[str, TypeReference] = MemoCache("interning")


def interning_cache() -> MemoCache[str, TypeReference]:
    """Return the interning cache (keys: input text and canonical strings)."""
    return _INTERNED


def intern_reference(reference: TypeReference) -> TypeReference:
    """Return the canonical instance structurally equal to reference.

    The first reference stored under a canonical string wins; later equal
    references are replaced by it.
    """
    from rosetta.core.config import get_config
    from rosetta.core.serializer import to_compact

    if not get_config().intern_types:
        return reference
    return _INTERNED.put_if_absent(to_compact(reference), reference)
