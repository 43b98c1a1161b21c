"""Unit tests for type-name classification."""

import threading

import pytest

from rosetta.core.classify import (
    PRIMITIVE_TYPES,
    TypeClassifier,
    get_classifier,
    is_concrete_type,
    is_primitive,
    set_type_probe,
    strip_array_suffix,
)


class TestStripArraySuffix:
    """Tests for strip_array_suffix."""

    @pytest.mark.parametrize(
        ("base", "expected"),
        [("int", ("int", 0)), ("T[]", ("T", 1)), ("a.B[][][]", ("a.B", 3))],
    )
    def test_split(self, base: str, expected: tuple[str, int]) -> None:
        """Splits element name and dimension count."""
        assert strip_array_suffix(base) == expected


class TestPrimitives:
    """Tests for the closed primitive family."""

    @pytest.mark.parametrize("name", sorted(PRIMITIVE_TYPES))
    def test_primitives_are_concrete(self, name: str) -> None:
        """Every primitive and its array forms are concrete."""
        assert is_concrete_type(name)
        assert is_concrete_type(name + "[]")
        assert is_concrete_type(name + "[][]")

    def test_primitives_are_never_probed(self) -> None:
        """The probe is not consulted for primitive names."""
        calls: list[str] = []

        def probe(name: str) -> bool:
            calls.append(name)
            return False

        classifier = TypeClassifier(probe)
        assert classifier.is_concrete_type("int")
        assert classifier.is_concrete_type("double[]")
        assert calls == []

    def test_is_primitive_excludes_arrays(self) -> None:
        """Arrays of primitives are reference types."""
        assert is_primitive("int")
        assert not is_primitive("int[]")
        assert not get_classifier().is_primitive("long[][]")
        assert get_classifier().is_primitive_family("long[][]")


class TestProbe:
    """Tests for probe-backed classification."""

    def test_default_probe_uses_qualification(self) -> None:
        """Without a host probe, qualified names are concrete."""
        assert is_concrete_type("java.lang.String")
        assert not is_concrete_type("T")
        assert not is_concrete_type("T[]")

    def test_probe_sees_element_name(self) -> None:
        """Array suffixes are stripped before probing."""
        seen: list[str] = []

        def probe(name: str) -> bool:
            seen.append(name)
            return name == "Widget"

        classifier = TypeClassifier(probe)
        assert classifier.is_concrete_type("Widget[][]")
        assert seen == ["Widget"]

    def test_decisions_are_memoized(self) -> None:
        """The probe runs once per base name."""
        calls: list[str] = []

        def probe(name: str) -> bool:
            calls.append(name)
            return True

        classifier = TypeClassifier(probe)
        for _ in range(3):
            classifier.is_concrete_type("Widget")
        assert calls == ["Widget"]
        assert classifier.cache_info().hits == 2

    def test_raising_probe_means_type_variable(self) -> None:
        """A probe failure classifies the name as a type variable."""

        def probe(name: str) -> bool:
            raise LookupError(name)

        classifier = TypeClassifier(probe)
        assert classifier.is_type_variable("Widget")

    def test_set_type_probe_clears_memo(self) -> None:
        """Installing a new probe drops earlier decisions."""
        assert not is_concrete_type("Widget")
        set_type_probe(lambda name: name == "Widget")
        assert is_concrete_type("Widget")
        set_type_probe(None)
        assert not is_concrete_type("Widget")

    def test_probe_swap_waits_for_running_probe(self) -> None:
        """A decision computed with the old probe never survives the swap."""
        started = threading.Event()
        release = threading.Event()

        def slow_probe(name: str) -> bool:
            started.set()
            release.wait(timeout=5)
            return True

        classifier = TypeClassifier(slow_probe)
        worker = threading.Thread(target=classifier.is_concrete_type, args=("K",))
        worker.start()
        assert started.wait(timeout=5)

        swapper = threading.Thread(target=classifier.set_probe, args=(lambda name: False,))
        swapper.start()
        swapper.join(timeout=0.2)
        assert swapper.is_alive()

        release.set()
        worker.join(timeout=5)
        swapper.join(timeout=5)

        assert not classifier.is_concrete_type("K")
