"""Best-effort classification of bare type names.

Decides whether a base name denotes a concrete type or an unresolved type
variable. Primitive names (and their array forms) are a closed set and are
never probed; everything else is answered by an injected probe supplied by the
host integration. A probe that says no, or that raises, classifies the name as
a type variable.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from rosetta.core.cache import MemoCache

logger = logging.getLogger(__name__)

TypeProbe = Callable[[str], bool]

PRIMITIVE_TYPES: frozenset[str] = frozenset(
    {"void", "boolean", "byte", "short", "char", "int", "long", "float", "double"}
)

ARRAY_SUFFIX = "[]"


def strip_array_suffix(base: str) -> tuple[str, int]:
    """Split a base name into its element name and array dimension count.

    Args:
        base: A base name such as "int[][]".

    Returns:
        Tuple of (element name, dimensions), e.g. ("int", 2).
    """
    dimensions = 0
    while base.endswith(ARRAY_SUFFIX):
        base = base[: -len(ARRAY_SUFFIX)]
        dimensions += 1
    return base, dimensions


def qualified_name_probe(name: str) -> bool:
    """Default probe for pure-text mode: package-qualified names are concrete."""
    return "." in name


class TypeClassifier:
    """Memoized concrete-type / type-variable classification.

    Decisions are cached per base name for the life of the process and are
    invalidated only by reset_caches() or by installing a new probe.
    """

    def __init__(self, probe: TypeProbe | None = None) -> None:
        """Initialize the classifier.

        Args:
            probe: Predicate answering "is this a concrete declared type?".
                Defaults to qualified_name_probe.
        """
        self._probe: TypeProbe = probe or qualified_name_probe
        self._decisions: MemoCache[str, bool] = MemoCache("classification")

    @property
    def probe(self) -> TypeProbe:
        return self._probe

    def set_probe(self, probe: TypeProbe | None) -> None:
        """Install a new probe and forget every cached decision.

        Waits for a probe that is already running, so its decision never
        outlives the swap.
        """

        def swap() -> None:
            self._probe = probe or qualified_name_probe

        self._decisions.clear(before=swap)

    def is_primitive(self, base: str) -> bool:
        """Check whether base is a bare primitive name.

        Arrays of primitives are reference types and return False.
        """
        return base in PRIMITIVE_TYPES

    def is_primitive_family(self, base: str) -> bool:
        """Check whether base is a primitive or an array of a primitive."""
        element, _ = strip_array_suffix(base)
        return element in PRIMITIVE_TYPES

    def is_concrete_type(self, base: str) -> bool:
        """Classify a base name, memoized per name.

        Args:
            base: Dotted base name, optionally with "[]" suffixes.

        Returns:
            True if the name denotes a concrete type, False if it is treated
            as a type variable.
        """
        if self.is_primitive_family(base):
            return True
        return self._decisions.get_or_compute(base, lambda: self._run_probe(base))

    def is_type_variable(self, base: str) -> bool:
        """Inverse of is_concrete_type."""
        return not self.is_concrete_type(base)

    def cache_info(self):
        return self._decisions.info()

    def _run_probe(self, base: str) -> bool:
        element, _ = strip_array_suffix(base)
        try:
            result = bool(self._probe(element))
        except Exception as e:
            logger.debug(f"Type probe failed for '{element}', treating as type variable: {e}")
            return False
        if not result:
            logger.debug(f"'{element}' is not a known type, treating as type variable")
        return result


_default_classifier = TypeClassifier()


def get_classifier() -> TypeClassifier:
    """Return the process-wide classifier."""
    return _default_classifier


def set_type_probe(probe: TypeProbe | None) -> None:
    """Install the host's concrete-type probe on the process-wide classifier.

    Args:
        probe: Predicate for concrete type names, or None for the default
            qualified-name probe.
    """
    _default_classifier.set_probe(probe)


def is_concrete_type(base: str) -> bool:
    """Classify base with the process-wide classifier."""
    return _default_classifier.is_concrete_type(base)


def is_primitive(base: str) -> bool:
    """Check base against the closed primitive set (arrays excluded)."""
    return base in PRIMITIVE_TYPES
