"""Unit tests for the type-reference models."""

import pytest
from pydantic import ValidationError

from rosetta.core.models import (
    BoundedTypeReference,
    BoundRelation,
    SimpleTypeReference,
    root_object_reference,
    unbounded_wildcard,
)


class TestSimpleTypeReference:
    """Tests for SimpleTypeReference."""

    def test_of_builds_arguments(self) -> None:
        """of() takes the base and the arguments positionally."""
        ref = SimpleTypeReference.of("java.util.Map", SimpleTypeReference.of("K"))
        assert ref.base == "java.util.Map"
        assert ref.has_type_arguments
        assert str(ref) == "java.util.Map<K>"

    def test_is_frozen(self) -> None:
        """References cannot be mutated."""
        ref = SimpleTypeReference.of("T")
        with pytest.raises(ValidationError):
            ref.base = "U"  # type: ignore[misc]

    def test_structural_equality_and_hash(self) -> None:
        """Equal trees compare and hash equal."""
        a = SimpleTypeReference.of("java.util.List", SimpleTypeReference.of("T"))
        b = SimpleTypeReference.of("java.util.List", SimpleTypeReference.of("T"))
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    @pytest.mark.parametrize("base", ["", "1abc", "java..lang", "List<T>", "a[", "a.b.", "?"])
    def test_rejects_invalid_base(self, base: str) -> None:
        """The base must be a dotted name with optional array suffixes."""
        with pytest.raises(ValidationError):
            SimpleTypeReference(base=base)

    @pytest.mark.parametrize("base", ["_field", "$Proxy", "a.b.C$Inner", "int[][]"])
    def test_accepts_host_identifiers(self, base: str) -> None:
        """Underscores, dollars and array suffixes are accepted."""
        assert SimpleTypeReference(base=base).base == base

    def test_primitive_cannot_carry_arguments(self) -> None:
        """Type arguments on a primitive (or primitive array) are rejected."""
        with pytest.raises(ValidationError):
            SimpleTypeReference.of("int", SimpleTypeReference.of("T"))
        with pytest.raises(ValidationError):
            SimpleTypeReference.of("int[]", SimpleTypeReference.of("T"))

    def test_array_properties(self) -> None:
        """Array dimensions are derived from the base suffixes."""
        ref = SimpleTypeReference(base="java.lang.String[][]")
        assert ref.is_array
        assert ref.array_dimensions == 2
        assert ref.element_base == "java.lang.String"

    def test_with_array_dimension(self) -> None:
        """with_array_dimension appends suffixes and keeps arguments."""
        ref = SimpleTypeReference.of("java.util.List", SimpleTypeReference.of("T"))
        array = ref.with_array_dimension(2)
        assert array.base == "java.util.List[][]"
        assert array.type_arguments == ref.type_arguments

    def test_primitive_flag_excludes_arrays(self) -> None:
        """Only bare primitives are primitive."""
        assert SimpleTypeReference(base="boolean").is_primitive
        assert not SimpleTypeReference(base="boolean[]").is_primitive
        assert not SimpleTypeReference(base="java.lang.Boolean").is_primitive

    def test_type_variable_flag(self) -> None:
        """Bare unqualified names are type variables under the default probe."""
        assert SimpleTypeReference.of("T").is_type_variable
        assert not SimpleTypeReference.of("java.lang.String").is_type_variable
        assert not SimpleTypeReference.of("int").is_type_variable
        assert not SimpleTypeReference.of("a.List", SimpleTypeReference.of("T")).is_type_variable


class TestBoundedTypeReference:
    """Tests for BoundedTypeReference."""

    def test_base_is_wildcard(self) -> None:
        """A wildcard reports '?' as its base."""
        ref = unbounded_wildcard()
        assert ref.base == "?"
        assert ref.is_wildcard
        assert not ref.is_primitive
        assert not ref.is_array

    def test_unbounded(self) -> None:
        """'?' is an extends wildcard bounded by the root object type."""
        ref = unbounded_wildcard()
        assert ref.is_unbounded
        assert ref.bounds == (root_object_reference(),)
        assert str(ref) == "?"

    def test_super_is_never_unbounded(self) -> None:
        """A super wildcard is bounded even by the root object type."""
        ref = BoundedTypeReference(relation=BoundRelation.SUPER, bounds=(root_object_reference(),))
        assert not ref.is_unbounded
        assert str(ref) == "? super java.lang.Object"

    def test_requires_bounds(self) -> None:
        """A wildcard needs at least one bound."""
        with pytest.raises(ValidationError):
            BoundedTypeReference(relation=BoundRelation.EXTENDS, bounds=())

    def test_bounds_cannot_be_wildcards(self) -> None:
        """Wildcards are not valid bounds."""
        with pytest.raises(ValidationError):
            BoundedTypeReference(bounds=(unbounded_wildcard(),))

    def test_root_object_is_configurable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The implicit bound follows the configured root object type."""
        from rosetta.core.config import reload_config

        monkeypatch.setenv("ROSETTA_ROOT_OBJECT_TYPE", "kotlin.Any")
        reload_config()
        assert unbounded_wildcard().bounds[0].base == "kotlin.Any"
