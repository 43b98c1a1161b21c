"""Native type mirrors produced by host integrations.

A host adapter describes its reflective type graph with these five shapes:
ClassType, ParameterizedType, GenericArrayType, WildcardType and
TypeVariable. Declarations (classes, fields, methods, constructors) are
described with the *Mirror records. Mirrors are plain immutable records; the
resolver reads them only through a TypeIntrospector.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TypeKind(str, Enum):
    """Kind of type declaration."""

    CLASS = "CLASS"
    INTERFACE = "INTERFACE"
    ENUM = "ENUM"
    RECORD = "RECORD"


class ExecutableKind(str, Enum):
    """Kind of executable member."""

    METHOD = "METHOD"
    CONSTRUCTOR = "CONSTRUCTOR"


class Visibility(str, Enum):
    """Visibility/access modifier."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    PACKAGE = "package"  # Java default


class TypeMirror:
    """Marker base class of the five native type shapes."""

    __slots__ = ()


@dataclass(frozen=True)
class TypeParameter:
    """A type variable declared by a class, method or constructor."""

    name: str
    bounds: tuple[TypeMirror, ...] = ()


@dataclass(frozen=True)
class ClassType(TypeMirror):
    """A concrete class, primitive, or array of either.

    Attributes:
        name: Canonical dotted name without array suffixes.
        dimensions: Number of array dimensions.
        type_parameters: Type parameters of the class declaration, when the
            reference is to a raw generic class.
    """

    name: str
    dimensions: int = 0
    type_parameters: tuple[TypeParameter, ...] = ()


@dataclass(frozen=True)
class ParameterizedType(TypeMirror):
    """A generic class applied to type arguments."""

    raw: ClassType
    arguments: tuple[TypeMirror, ...]


@dataclass(frozen=True)
class GenericArrayType(TypeMirror):
    """An array whose component is parameterized or a type variable."""

    component: TypeMirror


@dataclass(frozen=True)
class WildcardType(TypeMirror):
    """A wildcard type argument."""

    upper_bounds: tuple[TypeMirror, ...] = ()
    lower_bounds: tuple[TypeMirror, ...] = ()


@dataclass(frozen=True)
class TypeVariable(TypeMirror):
    """A use of a type variable, by name."""

    name: str


@dataclass(frozen=True)
class FieldMirror:
    name: str
    type: TypeMirror
    modifiers: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParameterMirror:
    name: str
    type: TypeMirror
    varargs: bool = False


@dataclass(frozen=True)
class ExecutableMirror:
    """A method or constructor declaration.

    Methods and constructors are generic declarations: their type parameters
    are looked up before the declaring class's.
    """

    name: str
    kind: ExecutableKind = ExecutableKind.METHOD
    type_parameters: tuple[TypeParameter, ...] = ()
    parameters: tuple[ParameterMirror, ...] = ()
    return_type: TypeMirror | None = None
    modifiers: tuple[str, ...] = ()


@dataclass(frozen=True)
class ClassMirror:
    """A class, interface, enum or record declaration.

    Attributes:
        name: Qualified name (nested classes use dotted outer names).
        package: Package the declaration belongs to ("" for the default package).
        enclosing: Qualified name of the enclosing class for nested declarations.
    """

    name: str
    package: str = ""
    kind: TypeKind = TypeKind.CLASS
    modifiers: tuple[str, ...] = ()
    type_parameters: tuple[TypeParameter, ...] = ()
    superclass: TypeMirror | None = None
    interfaces: tuple[TypeMirror, ...] = ()
    fields: tuple[FieldMirror, ...] = ()
    constructors: tuple[ExecutableMirror, ...] = ()
    methods: tuple[ExecutableMirror, ...] = ()
    enclosing: str | None = None

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    @property
    def local_name(self) -> str:
        """Name relative to the package, e.g. ``Outer.Inner``."""
        if self.package and self.name.startswith(self.package + "."):
            return self.name[len(self.package) + 1 :]
        return self.name

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers

    @property
    def is_inner(self) -> bool:
        """True for a nested class that captures its enclosing instance."""
        return self.enclosing is not None and not self.is_static and self.kind == TypeKind.CLASS
