"""Capability interface over a host's native type graph.

The resolver never inspects native nodes directly. It asks a TypeIntrospector
which of the five shapes a node has and reads its parts, so one resolver
serves any host runtime that implements this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from typing import Any

from rosetta.core.classify import ARRAY_SUFFIX
from rosetta.reflect.mirror import (
    ClassType,
    GenericArrayType,
    ParameterizedType,
    TypeParameter,
    TypeVariable,
    WildcardType,
)


class NativeShape(str, Enum):
    """The five native type shapes the resolver understands."""

    CLASS = "class"
    PARAMETERIZED = "parameterized"
    GENERIC_ARRAY = "generic_array"
    WILDCARD = "wildcard"
    TYPE_VARIABLE = "type_variable"


class TypeIntrospector(ABC):
    """Read-only view of native type nodes, implemented once per host."""

    @abstractmethod
    def shape(self, node: Any) -> NativeShape:
        """Classify a node into one of the five shapes.

        Raises:
            TypeError: If the node is not a supported native type.
        """
        ...

    @abstractmethod
    def class_name(self, node: Any) -> str:
        """Canonical dotted name of a CLASS node, with "[]" per dimension."""
        ...

    @abstractmethod
    def declared_parameters(self, node: Any) -> Sequence[TypeParameter]:
        """Type parameters of a raw generic CLASS node (empty if none)."""
        ...

    @abstractmethod
    def raw_type(self, node: Any) -> Any:
        """Raw class node of a PARAMETERIZED node."""
        ...

    @abstractmethod
    def type_arguments(self, node: Any) -> Sequence[Any]:
        """Argument nodes of a PARAMETERIZED node."""
        ...

    @abstractmethod
    def component_type(self, node: Any) -> Any:
        """Component node of a GENERIC_ARRAY node."""
        ...

    @abstractmethod
    def upper_bounds(self, node: Any) -> Sequence[Any]:
        """Declared upper bounds of a WILDCARD node."""
        ...

    @abstractmethod
    def lower_bounds(self, node: Any) -> Sequence[Any]:
        """Declared lower bounds of a WILDCARD node."""
        ...

    @abstractmethod
    def variable_name(self, node: Any) -> str:
        """Name of a TYPE_VARIABLE node."""
        ...


class MirrorIntrospector(TypeIntrospector):
    """Introspector over the mirror records in rosetta.reflect.mirror."""

    def shape(self, node: Any) -> NativeShape:
        if isinstance(node, ClassType):
            return NativeShape.CLASS
        if isinstance(node, ParameterizedType):
            return NativeShape.PARAMETERIZED
        if isinstance(node, GenericArrayType):
            return NativeShape.GENERIC_ARRAY
        if isinstance(node, WildcardType):
            return NativeShape.WILDCARD
        if isinstance(node, TypeVariable):
            return NativeShape.TYPE_VARIABLE
        raise TypeError(f"Unsupported native type node: {node!r}")

    def class_name(self, node: ClassType) -> str:
        return node.name + ARRAY_SUFFIX * node.dimensions

    def declared_parameters(self, node: ClassType) -> Sequence[TypeParameter]:
        return node.type_parameters

    def raw_type(self, node: ParameterizedType) -> ClassType:
        return node.raw

    def type_arguments(self, node: ParameterizedType) -> Sequence[Any]:
        return node.arguments

    def component_type(self, node: GenericArrayType) -> Any:
        return node.component

    def upper_bounds(self, node: WildcardType) -> Sequence[Any]:
        return node.upper_bounds

    def lower_bounds(self, node: WildcardType) -> Sequence[Any]:
        return node.lower_bounds

    def variable_name(self, node: TypeVariable) -> str:
        return node.name


MIRRORS = MirrorIntrospector()
