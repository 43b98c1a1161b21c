"""Declaring-context resolver.

Converts a host's native type graph into TypeReference trees. Type variables
are resolved against the member and class that declare them: by default they
stay symbolic (``T``); with erasure requested they are replaced by the erasure
of their first declared bound.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from rosetta.core.interning import intern_reference
from rosetta.core.models import (
    BoundedTypeReference,
    BoundRelation,
    SimpleTypeReference,
    TypeReference,
    root_object_reference,
)
from rosetta.reflect.context import ClassReference
from rosetta.reflect.introspect import MIRRORS, NativeShape, TypeIntrospector
from rosetta.reflect.mirror import ExecutableMirror, TypeParameter

logger = logging.getLogger(__name__)


def resolve(
    node: Any,
    context: ClassReference,
    member: ExecutableMirror | None = None,
    *,
    erase: bool = False,
    introspector: TypeIntrospector | None = None,
) -> TypeReference:
    """Resolve a native type node into an interned TypeReference.

    Args:
        node: Native type node (a mirror, or whatever introspector reads).
        context: Context of the class declaring the member being resolved.
        member: Method or constructor the node appears in, if any.
        erase: Substitute type variables with their erased bounds.
        introspector: Reader for node; defaults to the mirror introspector.

    Returns:
        The resolved reference.

    Raises:
        UnresolvedTypeVariable: If a type variable is declared nowhere in the
            member/class/enclosing/supertype chain.
    """
    return _Resolution(context, member, erase, introspector or MIRRORS).resolve(node)


class _Resolution:
    """One resolve() call: fixed context, member and erasure mode."""

    def __init__(
        self,
        context: ClassReference,
        member: ExecutableMirror | None,
        erase: bool,
        introspector: TypeIntrospector,
    ) -> None:
        self._context = context
        self._member = member
        self._erase = erase
        self._introspector = introspector

    def resolve(self, node: Any) -> TypeReference:
        shape = self._introspector.shape(node)
        if shape is NativeShape.CLASS:
            reference = self._resolve_class(node)
        elif shape is NativeShape.PARAMETERIZED:
            reference = self._resolve_parameterized(node)
        elif shape is NativeShape.GENERIC_ARRAY:
            reference = self._resolve_generic_array(node)
        elif shape is NativeShape.WILDCARD:
            reference = self._resolve_wildcard(node)
        else:
            reference = self._resolve_variable(node)
        return intern_reference(reference)

    def _resolve_class(self, node: Any) -> SimpleTypeReference:
        base = self._introspector.class_name(node)
        parameters = self._introspector.declared_parameters(node)
        if self._erase and parameters:
            arguments = tuple(
                self._erase_parameter(parameter, set(), parameters) for parameter in parameters
            )
            return SimpleTypeReference(base=base, type_arguments=arguments)
        return SimpleTypeReference(base=base)

    def _resolve_parameterized(self, node: Any) -> SimpleTypeReference:
        raw = self._introspector.raw_type(node)
        arguments = tuple(
            self.resolve(argument) for argument in self._introspector.type_arguments(node)
        )
        return SimpleTypeReference(
            base=self._introspector.class_name(raw), type_arguments=arguments
        )

    def _resolve_generic_array(self, node: Any) -> SimpleTypeReference:
        component = self.resolve(self._introspector.component_type(node))
        if not isinstance(component, SimpleTypeReference):
            raise TypeError(f"Array component cannot be a wildcard: {node!r}")
        return component.with_array_dimension()

    def _resolve_wildcard(self, node: Any) -> BoundedTypeReference:
        lower = self._introspector.lower_bounds(node)
        if lower:
            return BoundedTypeReference(
                relation=BoundRelation.SUPER, bounds=self._resolve_bounds(lower)
            )
        upper = self._introspector.upper_bounds(node)
        if not upper:
            return BoundedTypeReference(
                relation=BoundRelation.EXTENDS, bounds=(root_object_reference(),)
            )
        return BoundedTypeReference(
            relation=BoundRelation.EXTENDS, bounds=self._resolve_bounds(upper)
        )

    def _resolve_bounds(self, nodes: Any) -> tuple[SimpleTypeReference, ...]:
        bounds = []
        for node in nodes:
            bound = self.resolve(node)
            if not isinstance(bound, SimpleTypeReference):
                raise TypeError(f"Wildcard bound cannot be a wildcard: {node!r}")
            bounds.append(bound)
        return tuple(bounds)

    def _resolve_variable(self, node: Any) -> SimpleTypeReference:
        name = self._introspector.variable_name(node)
        parameter = self._context.require_variable(name, self._member)
        if not self._erase:
            return SimpleTypeReference(base=name)
        return self._erase_parameter(parameter, set())

    # Erasure

    def _erase_parameter(
        self,
        parameter: TypeParameter,
        seen: set[str],
        siblings: Sequence[TypeParameter] = (),
    ) -> SimpleTypeReference:
        if not parameter.bounds or parameter.name in seen:
            return root_object_reference()
        seen.add(parameter.name)
        erased = self._erasure(parameter.bounds[0], seen, siblings)
        logger.debug(f"Erased type variable {parameter.name} to {erased.base}")
        return erased

    def _erasure(
        self, node: Any, seen: set[str], siblings: Sequence[TypeParameter]
    ) -> SimpleTypeReference:
        """Erase a bound node to its raw type name.

        Variables are looked up among siblings (parameters declared together
        with the one being erased) before the resolution context.
        """
        shape = self._introspector.shape(node)
        if shape is NativeShape.CLASS:
            return SimpleTypeReference(base=self._introspector.class_name(node))
        if shape is NativeShape.PARAMETERIZED:
            return self._erasure(self._introspector.raw_type(node), seen, siblings)
        if shape is NativeShape.GENERIC_ARRAY:
            component = self._introspector.component_type(node)
            return self._erasure(component, seen, siblings).with_array_dimension()
        if shape is NativeShape.TYPE_VARIABLE:
            name = self._introspector.variable_name(node)
            parameter = next((p for p in siblings if p.name == name), None)
            if parameter is None:
                parameter = self._context.require_variable(name, self._member)
            return self._erase_parameter(parameter, seen, siblings)
        upper = self._introspector.upper_bounds(node)
        return self._erasure(upper[0], seen, siblings) if upper else root_object_reference()
