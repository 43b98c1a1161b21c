"""Property tests for type signature parsing and serialization.

**Feature: type-signatures**

Generated type trees must survive the compact and structured forms, and
arbitrary text must either parse or fail with a ParseError.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings, strategies as st

from rosetta.core.errors import ParseError
from rosetta.core.models import (
    BoundedTypeReference,
    BoundRelation,
    SimpleTypeReference,
    TypeReference,
)
from rosetta.core.parser import parse
from rosetta.core.serializer import from_structured, to_compact, to_structured

# Strategies for generating type trees
packages = st.lists(st.sampled_from(["java", "util", "com", "acme", "lang"]), max_size=3)
simple_names = st.from_regex(r"[A-Z][A-Za-z0-9_$]{0,6}", fullmatch=True)
primitives = st.sampled_from(["int", "long", "boolean", "double", "char"])


@st.composite
def class_bases(draw: st.DrawFn) -> str:
    """Generate a dotted class name such as ``com.acme.Widget``."""
    return ".".join([*draw(packages), draw(simple_names)])


@st.composite
def leaf_types(draw: st.DrawFn) -> SimpleTypeReference:
    """Generate a type without arguments: class, primitive, or array of either."""
    base = draw(st.one_of(class_bases(), primitives))
    dimensions = draw(st.integers(min_value=0, max_value=2))
    return SimpleTypeReference(base=base + "[]" * dimensions)


def _extend(children: st.SearchStrategy[SimpleTypeReference]) -> st.SearchStrategy:
    @st.composite
    def parameterized(draw: st.DrawFn) -> SimpleTypeReference:
        base = draw(class_bases())
        arguments = draw(st.lists(st.one_of(children, wildcards(children)), min_size=1, max_size=3))
        dimensions = draw(st.integers(min_value=0, max_value=1))
        return SimpleTypeReference(base=base + "[]" * dimensions, type_arguments=tuple(arguments))

    return parameterized()


@st.composite
def wildcards(
    draw: st.DrawFn, bounds: st.SearchStrategy[SimpleTypeReference]
) -> BoundedTypeReference:
    """Generate a wildcard over the given bound strategy."""
    relation = draw(st.sampled_from(list(BoundRelation)))
    return BoundedTypeReference(
        relation=relation,
        bounds=tuple(draw(st.lists(bounds, min_size=1, max_size=2))),
    )


simple_types = st.recursive(leaf_types(), _extend, max_leaves=8)
type_trees = st.one_of(simple_types, wildcards(simple_types))

# Text over the signature alphabet, mostly malformed
signature_tokens = st.sampled_from(
    list("?.<>,&[] ") + ["a", "T", "int", "extends", "super", "1", "#"]
)
signature_text = st.lists(signature_tokens, max_size=15).map("".join)


@given(ref=type_trees)
@settings(max_examples=100)
def test_compact_round_trip(ref: TypeReference) -> None:
    """
    **Feature: type-signatures, Property 1: Compact Round Trip**

    For any type tree, parsing its canonical string yields an equal tree whose
    canonical string is unchanged.
    """
    text = to_compact(ref)
    parsed = parse(text)
    assert parsed == ref
    assert to_compact(parsed) == text


@given(ref=type_trees)
@settings(max_examples=100)
def test_structured_round_trip(ref: TypeReference) -> None:
    """
    **Feature: type-signatures, Property 2: Structured Round Trip**

    For any type tree, reading back its structured projection yields the
    interned instance of the same tree.
    """
    assert from_structured(to_structured(ref)) is parse(to_compact(ref))


@given(ref=type_trees, data=st.data())
@settings(max_examples=50)
def test_whitespace_does_not_change_identity(ref: TypeReference, data: st.DataObject) -> None:
    """
    **Feature: type-signatures, Property 3: Interning Identity**

    Spacing variants of one signature parse to the identical instance.
    """
    text = to_compact(ref)
    padding = data.draw(st.sampled_from(["", " ", "  ", "\t"]))
    spaced = "".join(
        f"{padding}{char}{padding}" if char in "<>,&" else char for char in text
    )
    assert parse(spaced) is parse(text)


@given(text=signature_text)
@settings(max_examples=200)
def test_parse_fails_only_with_parse_error(text: str) -> None:
    """
    **Feature: type-signatures, Property 4: Parse Totality**

    For any input, parse either returns a reference whose canonical form
    parses back to it, or raises ParseError.
    """
    try:
        ref = parse(text)
    except ParseError as e:
        assert 0 <= e.position <= len(text)
        return
    assert parse(to_compact(ref)) is ref


@given(depth=st.integers(min_value=1, max_value=40))
@settings(max_examples=20)
def test_nested_map_generics(depth: int) -> None:
    """
    **Feature: type-signatures, Property 5: Deep Nesting**

    Nested ``Map<K, ...>`` signatures parse to trees of the same depth.
    """
    text = "V"
    for _ in range(depth):
        text = f"java.util.Map<K, {text}>"
    ref = parse(text)
    measured = 0
    while ref.type_arguments:
        measured += 1
        ref = ref.type_arguments[1]
    assert measured == depth
    assert ref.base == "V"


@pytest.mark.parametrize("ref_text", ["?", "? extends java.lang.Object"])
def test_unbounded_wildcard_spellings(ref_text: str) -> None:
    """Both spellings of the unbounded wildcard are the same instance."""
    assert parse(ref_text) is parse("?")
