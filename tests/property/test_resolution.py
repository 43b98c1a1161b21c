"""Property tests for declaring-context resolution.

**Feature: context-resolution**

Resolving a mirror tree must agree with parsing its source spelling, and
erasure must leave no type variable behind.
"""

from __future__ import annotations

from hypothesis import given, settings, strategies as st

from rosetta.core.models import BoundedTypeReference, SimpleTypeReference, TypeReference
from rosetta.core.parser import parse
from rosetta.reflect.context import ClassReference
from rosetta.reflect.mirror import (
    ClassMirror,
    ClassType,
    GenericArrayType,
    ParameterizedType,
    TypeMirror,
    TypeParameter,
    TypeVariable,
    WildcardType,
)
from rosetta.reflect.resolver import resolve

VARIABLES = ("K", "V", "E")
CLASSES = ("java.lang.String", "java.util.List", "java.util.Map", "com.acme.Widget")


def _holder() -> ClassMirror:
    """``Holder<K, V extends Number, E extends Comparable<E>>``."""
    comparable = ParameterizedType(ClassType("java.lang.Comparable"), (TypeVariable("E"),))
    return ClassMirror(
        name="com.acme.Holder",
        type_parameters=(
            TypeParameter("K"),
            TypeParameter("V", (ClassType("java.lang.Number"),)),
            TypeParameter("E", (comparable,)),
        ),
    )


leaves = st.one_of(
    st.builds(ClassType, st.sampled_from(CLASSES), st.integers(min_value=0, max_value=2)),
    st.builds(TypeVariable, st.sampled_from(VARIABLES)),
)


def _extend(children: st.SearchStrategy[TypeMirror]) -> st.SearchStrategy[TypeMirror]:
    arguments = st.one_of(
        children,
        st.builds(WildcardType),
        st.builds(WildcardType, upper_bounds=st.tuples(children)),
        st.builds(WildcardType, lower_bounds=st.tuples(children)),
    )
    parameterized = st.builds(
        ParameterizedType,
        st.builds(ClassType, st.sampled_from(CLASSES)),
        st.lists(arguments, min_size=1, max_size=3).map(tuple),
    )
    return st.one_of(parameterized, st.builds(GenericArrayType, parameterized))


mirror_trees = st.recursive(leaves, _extend, max_leaves=8)


def _spell(node: TypeMirror) -> str:
    """Write a mirror the way it would appear in source."""
    if isinstance(node, ClassType):
        return node.name + "[]" * node.dimensions
    if isinstance(node, TypeVariable):
        return node.name
    if isinstance(node, GenericArrayType):
        return _spell(node.component) + "[]"
    if isinstance(node, WildcardType):
        if node.lower_bounds:
            return "? super " + _spell(node.lower_bounds[0])
        if node.upper_bounds:
            return "? extends " + _spell(node.upper_bounds[0])
        return "?"
    arguments = ", ".join(_spell(argument) for argument in node.arguments)
    return f"{node.raw.name}<{arguments}>"


def _names(reference: TypeReference) -> set[str]:
    """Collect every element name in a reference tree."""
    if isinstance(reference, BoundedTypeReference):
        return set().union(*(_names(bound) for bound in reference.bounds))
    names = {reference.element_base}
    for argument in reference.type_arguments:
        names |= _names(argument)
    return names


@given(node=mirror_trees)
@settings(max_examples=100)
def test_resolution_matches_source_spelling(node: TypeMirror) -> None:
    """
    **Feature: context-resolution, Property 1: Resolution Determinism**

    For any mirror tree over declared variables, the symbolic resolution is
    the interned parse of its source spelling.
    """
    context = ClassReference.of(_holder())
    assert resolve(node, context) is parse(_spell(node))


@given(node=mirror_trees)
@settings(max_examples=100)
def test_erasure_removes_type_variables(node: TypeMirror) -> None:
    """
    **Feature: context-resolution, Property 2: Erasure Completeness**

    For any mirror tree, the erased resolution mentions no type variable and
    keeps the tree's array dimensions.
    """
    context = ClassReference.of(_holder())
    erased = resolve(node, context, erase=True)
    assert not _names(erased) & set(VARIABLES)
    symbolic = resolve(node, context)
    if isinstance(symbolic, SimpleTypeReference):
        assert erased.array_dimensions == symbolic.array_dimensions
