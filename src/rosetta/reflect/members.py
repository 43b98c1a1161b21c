"""Member references: resolved declared types of a class's API surface.

describe_class() runs the resolver over every declared type of a class
(type-parameter bounds, supertypes, fields, parameters and returns) and keeps
the results in immutable references that can be projected onto the class
document format.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rosetta.core.errors import MemberResolutionError, RosettaError
from rosetta.core.models import SimpleTypeReference, TypeReference
from rosetta.core.serializer import to_structured
from rosetta.reflect.context import ClassReference
from rosetta.reflect.introspect import TypeIntrospector
from rosetta.reflect.mirror import (
    ClassMirror,
    ExecutableKind,
    ExecutableMirror,
    TypeKind,
    TypeParameter,
    Visibility,
)
from rosetta.reflect.resolver import resolve

logger = logging.getLogger(__name__)

VOID = "void"


class _Reference(BaseModel):
    model_config = ConfigDict(frozen=True)


class TypeParameterReference(_Reference):
    """A declared type parameter with its resolved bounds."""

    name: str
    bounds: tuple[TypeReference, ...] = ()

    def to_structured(self, scope: Any) -> dict[str, Any]:
        raw: dict[str, Any] = {"name": self.name}
        if self.bounds:
            raw["bounds"] = [to_structured(bound, scope) for bound in self.bounds]
        return raw


class FieldReference(_Reference):
    name: str
    type: TypeReference
    modifiers: tuple[str, ...] = ()

    def to_structured(self, scope: Any) -> dict[str, Any]:
        raw: dict[str, Any] = {"type": to_structured(self.type, scope)}
        for flag in ("static", "final"):
            if flag in self.modifiers:
                raw[flag] = True
        return raw


class ParameterReference(_Reference):
    name: str
    type: TypeReference
    varargs: bool = False

    def to_structured(self, scope: Any) -> dict[str, Any]:
        raw: dict[str, Any] = {"name": self.name, "type": to_structured(self.type, scope)}
        if self.varargs:
            raw["varargs"] = True
        return raw


class ReturnReference(_Reference):
    """A method's return type.

    Attributes:
        type: Resolved return type (never ``void``).
        nullable: Whether the method may return null; reference types are
            nullable, bare primitives are not.
    """

    type: TypeReference
    nullable: bool

    @classmethod
    def of(cls, type: TypeReference) -> ReturnReference:
        return cls(type=type, nullable=not type.is_primitive)

    def to_structured(self, scope: Any) -> dict[str, Any]:
        return {"type": to_structured(self.type, scope), "nullable": self.nullable}


class ExecutableReference(_Reference):
    """A resolved method or constructor."""

    name: str
    kind: ExecutableKind = ExecutableKind.METHOD
    modifiers: tuple[str, ...] = ()
    type_parameters: tuple[TypeParameterReference, ...] = ()
    parameters: tuple[ParameterReference, ...] = ()
    returns: ReturnReference | None = None

    @property
    def signature(self) -> str:
        """Name and parameter types, e.g. ``put(K, V)``."""
        types = ", ".join(str(parameter.type) for parameter in self.parameters)
        return f"{self.name}({types})"

    def to_structured(self, context: ClassReference) -> dict[str, Any]:
        scope = _MemberScope(context, {parameter.name for parameter in self.type_parameters})
        raw: dict[str, Any] = {}
        if self.kind == ExecutableKind.METHOD:
            raw["name"] = self.name
            if "static" in self.modifiers:
                raw["static"] = True
        if self.type_parameters:
            raw["type_parameters"] = [p.to_structured(scope) for p in self.type_parameters]
        if self.parameters:
            raw["parameters"] = [p.to_structured(scope) for p in self.parameters]
        if self.returns is not None:
            raw["returns"] = self.returns.to_structured(scope)
        return raw


class ClassSignature(BaseModel):
    """The resolved API surface of one class declaration."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., description="Qualified class name")
    package: str = ""
    local_name: str = Field(..., description="Name relative to the package")
    kind: TypeKind = TypeKind.CLASS
    visibility: Visibility = Visibility.PACKAGE
    is_static: bool = False
    is_final: bool = False
    type_parameters: tuple[TypeParameterReference, ...] = ()
    extends: TypeReference | None = None
    implements: tuple[TypeReference, ...] = ()
    fields: tuple[FieldReference, ...] = ()
    constructors: tuple[ExecutableReference, ...] = ()
    methods: tuple[ExecutableReference, ...] = ()
    context: ClassReference = Field(..., exclude=True, repr=False)

    def to_structured(self) -> dict[str, Any]:
        """Project the class onto the class document format.

        Optional keys are written only when they carry information. Fields are
        keyed by name; constructors are sorted by signature; methods by name,
        then signature.
        """
        raw: dict[str, Any] = {"scope": self.visibility.value}
        if self.kind != TypeKind.CLASS:
            raw["kind"] = self.kind.value.lower()
        if self.is_static:
            raw["static"] = True
        if self.is_final:
            raw["final"] = True
        if self.type_parameters:
            raw["type_parameters"] = [
                parameter.to_structured(self.context) for parameter in self.type_parameters
            ]
        if self.extends is not None:
            raw["extends"] = to_structured(self.extends, self.context)
        if self.implements:
            raw["implements"] = [to_structured(t, self.context) for t in self.implements]
        if self.fields:
            raw["fields"] = {
                field.name: field.to_structured(self.context)
                for field in sorted(self.fields, key=lambda f: f.name)
            }
        if self.constructors:
            constructors = sorted(self.constructors, key=lambda c: c.signature)
            raw["constructors"] = [c.to_structured(self.context) for c in constructors]
        if self.methods:
            methods = sorted(self.methods, key=lambda m: (m.name, m.signature))
            raw["methods"] = [m.to_structured(self.context) for m in methods]
        return raw


class _MemberScope:
    """Declaration scope of a member: its own type parameters, then the class."""

    def __init__(self, context: ClassReference, names: set[str]) -> None:
        self._context = context
        self._names = names

    def declares(self, name: str, member: Any = None) -> bool:
        return name in self._names or self._context.declares(name, member)


def describe_class(
    mirror: ClassMirror,
    erase: bool = False,
    introspector: TypeIntrospector | None = None,
) -> ClassSignature:
    """Resolve every declared type of a class.

    Supertype and enclosing-class variables are only visible when those
    classes were registered with ClassReference.of() beforehand.

    Args:
        mirror: The class declaration.
        erase: Substitute type variables with their erased bounds.
        introspector: Reader for the native type nodes in mirror.

    Returns:
        The class signature.

    Raises:
        MemberResolutionError: If a declared type cannot be resolved; the
            original error is chained as the cause.
    """
    return _ClassDescriber(mirror, erase, introspector).describe()


class _ClassDescriber:
    def __init__(
        self,
        mirror: ClassMirror,
        erase: bool,
        introspector: TypeIntrospector | None,
    ) -> None:
        self._mirror = mirror
        self._context = ClassReference.of(mirror)
        self._erase = erase
        self._introspector = introspector

    def describe(self) -> ClassSignature:
        mirror = self._mirror
        logger.debug(f"Describing class {mirror.name}")
        superclass = None
        if mirror.superclass is not None:
            superclass = self._resolve("extends", mirror.superclass)
        return ClassSignature(
            name=mirror.name,
            package=mirror.package,
            local_name=mirror.local_name,
            kind=mirror.kind,
            visibility=_visibility(mirror.modifiers),
            is_static=mirror.is_static,
            is_final="final" in mirror.modifiers,
            type_parameters=self._type_parameters(mirror.type_parameters, "type parameter"),
            extends=superclass,
            implements=tuple(
                self._resolve(f"implements[{index}]", interface)
                for index, interface in enumerate(mirror.interfaces)
            ),
            fields=tuple(
                FieldReference(
                    name=field.name,
                    type=self._resolve(f"field '{field.name}'", field.type),
                    modifiers=field.modifiers,
                )
                for field in mirror.fields
            ),
            constructors=tuple(self._executable(c) for c in mirror.constructors),
            methods=tuple(self._executable(m) for m in mirror.methods),
            context=self._context,
        )

    def _executable(self, member: ExecutableMirror) -> ExecutableReference:
        label = "constructor" if member.kind == ExecutableKind.CONSTRUCTOR else "method"
        path = f"{label} '{member.name}'"
        parameters = tuple(
            ParameterReference(
                name=parameter.name,
                type=self._resolve(f"{path} parameter '{parameter.name}'", parameter.type, member),
                varargs=parameter.varargs,
            )
            for parameter in member.parameters
        )
        returns = None
        if member.return_type is not None:
            resolved = self._resolve(f"{path} return type", member.return_type, member)
            if not (isinstance(resolved, SimpleTypeReference) and resolved.base == VOID):
                returns = ReturnReference.of(resolved)
        return ExecutableReference(
            name=member.name,
            kind=member.kind,
            modifiers=member.modifiers,
            type_parameters=self._type_parameters(
                member.type_parameters, f"{path} type parameter", member
            ),
            parameters=parameters,
            returns=returns,
        )

    def _type_parameters(
        self,
        parameters: tuple[TypeParameter, ...],
        label: str,
        member: ExecutableMirror | None = None,
    ) -> tuple[TypeParameterReference, ...]:
        return tuple(
            TypeParameterReference(
                name=parameter.name,
                bounds=tuple(
                    self._resolve(f"{label} '{parameter.name}'", bound, member)
                    for bound in parameter.bounds
                ),
            )
            for parameter in parameters
        )

    def _resolve(
        self, path: str, node: Any, member: ExecutableMirror | None = None
    ) -> TypeReference:
        try:
            return resolve(
                node,
                self._context,
                member,
                erase=self._erase,
                introspector=self._introspector,
            )
        except RosettaError as e:
            raise MemberResolutionError(path, e, self._mirror.name) from e


def _visibility(modifiers: tuple[str, ...]) -> Visibility:
    for visibility in (Visibility.PUBLIC, Visibility.PROTECTED, Visibility.PRIVATE):
        if visibility.value in modifiers:
            return visibility
    return Visibility.PACKAGE
