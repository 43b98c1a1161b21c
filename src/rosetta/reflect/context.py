"""Declaring-class contexts for type-variable scoping.

A ClassReference maps the type variables a class declares to their
declarations. It is built once per class on first use, registered in a
process-wide cache, and never mutated afterwards. The resolver uses it to
decide where an unqualified type-variable name is introduced.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from rosetta.core.cache import MemoCache
from rosetta.core.errors import UnresolvedTypeVariable
from rosetta.reflect.mirror import (
    ClassMirror,
    ClassType,
    ExecutableMirror,
    ParameterizedType,
    TypeMirror,
    TypeParameter,
)

logger = logging.getLogger(__name__)

_CLASS_REFERENCES: MemoCache[str, ClassReference] = MemoCache("class_references")


@dataclass(frozen=True, eq=False)
class ClassReference:
    """Immutable type-variable scope of one class declaration.

    Attributes:
        name: Qualified class name.
        declaration: The class mirror this context was built from.
        variables: Type parameters declared directly on the class, by name.
        enclosing: Enclosing class name when the class is an inner class
            (its enclosing class's variables are in scope).
        supertypes: Raw names of the declared superclass and interfaces.
    """

    name: str
    declaration: ClassMirror
    variables: Mapping[str, TypeParameter]
    enclosing: str | None
    supertypes: tuple[str, ...]

    @classmethod
    def of(cls, mirror: ClassMirror) -> ClassReference:
        """Return the context for a class, building it on first use.

        Args:
            mirror: The class declaration.

        Returns:
            The registered ClassReference (the first one built wins).
        """
        return _CLASS_REFERENCES.get_or_compute(mirror.name, lambda: cls._build(mirror))

    @staticmethod
    def lookup(name: str) -> ClassReference | None:
        """Fetch an already registered context by qualified class name."""
        return _CLASS_REFERENCES.get(name)

    @classmethod
    def _build(cls, mirror: ClassMirror) -> ClassReference:
        logger.debug(f"Building class reference for {mirror.name}")
        supertypes = [_raw_name(mirror.superclass)] if mirror.superclass is not None else []
        supertypes.extend(_raw_name(interface) for interface in mirror.interfaces)
        return cls(
            name=mirror.name,
            declaration=mirror,
            variables=MappingProxyType({p.name: p for p in mirror.type_parameters}),
            enclosing=mirror.enclosing if mirror.is_inner else None,
            supertypes=tuple(name for name in supertypes if name),
        )

    def find_variable(
        self, name: str, member: ExecutableMirror | None = None
    ) -> TypeParameter | None:
        """Find the declaration of a type variable visible from this class.

        Lookup order: the member's own type parameters, this class, then
        enclosing classes and declared supertypes (breadth-first, registered
        contexts only).

        Args:
            name: Type-variable name.
            member: Method or constructor the name appears in, if any.

        Returns:
            The declaring TypeParameter, or None if the name is not declared.
        """
        if member is not None:
            for parameter in member.type_parameters:
                if parameter.name == name:
                    return parameter

        visited: set[str] = set()
        pending: deque[ClassReference] = deque([self])
        while pending:
            current = pending.popleft()
            if current.name in visited:
                continue
            visited.add(current.name)

            parameter = current.variables.get(name)
            if parameter is not None:
                return parameter

            related = [current.enclosing] if current.enclosing else []
            related.extend(current.supertypes)
            for related_name in related:
                context = ClassReference.lookup(related_name)
                if context is not None and context.name not in visited:
                    pending.append(context)
        return None

    def declares(self, name: str, member: ExecutableMirror | None = None) -> bool:
        """Check whether a type variable is visible from this class (and member)."""
        return self.find_variable(name, member) is not None

    def require_variable(
        self, name: str, member: ExecutableMirror | None = None
    ) -> TypeParameter:
        """Like find_variable, but a missing declaration is fatal.

        Raises:
            UnresolvedTypeVariable: If no declaration is found.
        """
        parameter = self.find_variable(name, member)
        if parameter is None:
            where = f"{self.name}#{member.name}" if member is not None else self.name
            raise UnresolvedTypeVariable(name, where)
        return parameter

    def __repr__(self) -> str:
        return f"ClassReference({self.name!r}, variables={list(self.variables)})"


def _raw_name(node: TypeMirror) -> str | None:
    if isinstance(node, ClassType):
        return node.name
    if isinstance(node, ParameterizedType):
        return node.raw.name
    return None
