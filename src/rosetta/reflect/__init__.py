"""Reflection layer: native type mirrors, declaring contexts and the resolver."""

from rosetta.reflect.context import ClassReference
from rosetta.reflect.document import build_document
from rosetta.reflect.introspect import MIRRORS, MirrorIntrospector, NativeShape, TypeIntrospector
from rosetta.reflect.members import (
    ClassSignature,
    ExecutableReference,
    FieldReference,
    ParameterReference,
    ReturnReference,
    TypeParameterReference,
    describe_class,
)
from rosetta.reflect.mirror import (
    ClassMirror,
    ClassType,
    ExecutableKind,
    ExecutableMirror,
    FieldMirror,
    GenericArrayType,
    ParameterizedType,
    ParameterMirror,
    TypeKind,
    TypeParameter,
    TypeVariable,
    Visibility,
    WildcardType,
)
from rosetta.reflect.resolver import resolve

__all__ = [
    "MIRRORS",
    "ClassMirror",
    "ClassReference",
    "ClassSignature",
    "ClassType",
    "ExecutableKind",
    "ExecutableMirror",
    "ExecutableReference",
    "FieldMirror",
    "FieldReference",
    "GenericArrayType",
    "MirrorIntrospector",
    "NativeShape",
    "ParameterMirror",
    "ParameterReference",
    "ParameterizedType",
    "ReturnReference",
    "TypeIntrospector",
    "TypeKind",
    "TypeParameter",
    "TypeParameterReference",
    "TypeVariable",
    "Visibility",
    "WildcardType",
    "build_document",
    "describe_class",
    "resolve",
]
