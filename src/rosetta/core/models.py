"""Type-reference value models.

A TypeReference is an immutable description of a type usage in a declared API
signature. It is one of two variants:

- SimpleTypeReference: a named type, optionally parameterized by other
  references. Array dimensions are folded into the base name as trailing "[]".
- BoundedTypeReference: a wildcard constrained by one or more upper
  ("extends") or lower ("super") bounds.

Both variants are frozen pydantic models: hashable, shareable across threads,
and equal exactly when their canonical compact strings are equal.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from rosetta.core.classify import (
    ARRAY_SUFFIX,
    PRIMITIVE_TYPES,
    get_classifier,
    strip_array_suffix,
)

BASE_PATTERN = r"^[A-Za-z_$][A-Za-z0-9_$]*(\.[A-Za-z_$][A-Za-z0-9_$]*)*(\[\])*$"
BASE_RE = re.compile(BASE_PATTERN)

WILDCARD_BASE = "?"


class BoundRelation(str, Enum):
    """Direction of a wildcard bound."""

    EXTENDS = "extends"
    SUPER = "super"


class TypeReference(BaseModel):
    """Base class for resolved or symbolic type usages."""

    model_config = ConfigDict(frozen=True)

    @property
    def is_wildcard(self) -> bool:
        return False

    def __str__(self) -> str:
        from rosetta.core.serializer import to_compact

        return to_compact(self)


class SimpleTypeReference(TypeReference):
    """A named type, optionally parameterized.

    Examples: ``int``, ``java.lang.String[]``, ``T``,
    ``java.util.Map<K, java.util.List<V>>``.
    """

    base: str = Field(..., pattern=BASE_PATTERN, description="Dotted name with array suffixes")
    type_arguments: tuple[SimpleTypeReference | BoundedTypeReference, ...] = Field(
        default=(), description="Generic type arguments"
    )

    @model_validator(mode="after")
    def check_arguments(self) -> SimpleTypeReference:
        if self.type_arguments and self.element_base in PRIMITIVE_TYPES:
            raise ValueError(f"Primitive type '{self.base}' cannot carry type arguments")
        return self

    @classmethod
    def of(
        cls, base: str, *type_arguments: SimpleTypeReference | BoundedTypeReference
    ) -> SimpleTypeReference:
        """Build a reference from a base name and type arguments."""
        return cls(base=base, type_arguments=tuple(type_arguments))

    @property
    def element_base(self) -> str:
        """Base name without array suffixes."""
        return strip_array_suffix(self.base)[0]

    @property
    def array_dimensions(self) -> int:
        return strip_array_suffix(self.base)[1]

    @property
    def is_array(self) -> bool:
        return self.base.endswith(ARRAY_SUFFIX)

    @property
    def is_primitive(self) -> bool:
        """True for bare primitive names only; ``int[]`` is a reference type."""
        return self.base in PRIMITIVE_TYPES

    @property
    def has_type_arguments(self) -> bool:
        return bool(self.type_arguments)

    @property
    def is_type_variable(self) -> bool:
        """True when the base is classified as an unresolved type variable."""
        return not self.type_arguments and get_classifier().is_type_variable(self.base)

    def with_array_dimension(self, count: int = 1) -> SimpleTypeReference:
        """Return a copy with count more array dimensions."""
        return SimpleTypeReference(
            base=self.base + ARRAY_SUFFIX * count, type_arguments=self.type_arguments
        )


class BoundedTypeReference(TypeReference):
    """A wildcard with upper or lower bounds.

    An unconstrained ``?`` carries a single implicit upper bound equal to the
    root object type. Bounds are never wildcards themselves.
    """

    relation: BoundRelation = BoundRelation.EXTENDS
    bounds: tuple[SimpleTypeReference, ...] = Field(
        ..., min_length=1, description="Declared bounds, in declaration order"
    )

    @property
    def base(self) -> str:
        return WILDCARD_BASE

    @property
    def is_wildcard(self) -> bool:
        return True

    @property
    def is_primitive(self) -> bool:
        return False

    @property
    def is_array(self) -> bool:
        return False

    @property
    def is_unbounded(self) -> bool:
        """True for ``?`` (an extends-bound equal to the root object type)."""
        return self.relation is BoundRelation.EXTENDS and self.bounds == (
            root_object_reference(),
        )


SimpleTypeReference.model_rebuild()
BoundedTypeReference.model_rebuild()

AnyTypeReference = SimpleTypeReference | BoundedTypeReference


def root_object_reference() -> SimpleTypeReference:
    """Reference to the host's root object type (configurable)."""
    from rosetta.core.config import get_config

    return SimpleTypeReference(base=get_config().root_object_type)


def unbounded_wildcard() -> BoundedTypeReference:
    """The ``?`` wildcard: extends the root object type."""
    return BoundedTypeReference(relation=BoundRelation.EXTENDS, bounds=(root_object_reference(),))
