"""TypeReference serialization.

Two independent inverse pairs:

- Compact: to_compact() renders the canonical signature string that parse()
  reads back.
- Structured: to_structured() projects a reference onto plain maps, lists,
  strings and booleans for a document codec; from_structured() reads it back.

The module also carries the JSON helpers used to write whole documents.
"""

from __future__ import annotations

import json
from typing import Any, Protocol

from rosetta.core.classify import PRIMITIVE_TYPES, get_classifier, strip_array_suffix
from rosetta.core.errors import (
    MissingKeyError,
    ParseError,
    SerializationError,
    ValueTypeError,
)
from rosetta.core.models import (
    BASE_RE,
    WILDCARD_BASE,
    BoundedTypeReference,
    BoundRelation,
    SimpleTypeReference,
    TypeReference,
    root_object_reference,
)

KEY_BASE = "base"
KEY_PARAMETERS = "parameters"
KEY_GENERIC = "generic"
KEY_BOUNDS_TYPE = "bounds_type"
KEY_BOUNDS = "bounds"


class DeclarationContext(Protocol):
    """Anything that can tell whether a type-variable name is declared."""

    def declares(self, name: str, member: Any = None) -> bool: ...


# Compact form


def to_compact(reference: TypeReference) -> str:
    """Render the canonical signature string of a reference.

    Args:
        reference: The reference to render.

    Returns:
        A string such as ``java.util.Map<K, java.util.List<V>>[]`` or
        ``? super java.lang.Integer``. Unbounded wildcards render as ``?``.
    """
    if isinstance(reference, BoundedTypeReference):
        if reference.is_unbounded:
            return WILDCARD_BASE
        bounds = " & ".join(to_compact(bound) for bound in reference.bounds)
        return f"{WILDCARD_BASE} {reference.relation.value} {bounds}"

    if not reference.type_arguments:
        return reference.base
    element, dimensions = strip_array_suffix(reference.base)
    arguments = ", ".join(to_compact(argument) for argument in reference.type_arguments)
    return f"{element}<{arguments}>" + "[]" * dimensions


# Structured form


def to_structured(
    reference: TypeReference,
    context: DeclarationContext | None = None,
    member: Any = None,
) -> Any:
    """Project a reference onto plain interchange values.

    When a declaration context is given, type variables that the context (and
    member, if any) does not declare are erased to the root object type.

    Args:
        reference: The reference to project.
        context: Optional declaring context (usually a ClassReference).
        member: Optional method or constructor declaration within context.

    Returns:
        A bare string for unparameterized simple types, otherwise a dict.
    """
    if isinstance(reference, BoundedTypeReference):
        return {
            KEY_BASE: WILDCARD_BASE,
            KEY_GENERIC: True,
            KEY_BOUNDS_TYPE: reference.relation.value,
            KEY_BOUNDS: [to_structured(bound, context, member) for bound in reference.bounds],
        }

    if not reference.type_arguments:
        return _erase_undeclared(reference, context, member).base

    return {
        KEY_BASE: reference.base,
        KEY_PARAMETERS: [
            to_structured(argument, context, member) for argument in reference.type_arguments
        ],
    }


def _erase_undeclared(
    reference: SimpleTypeReference,
    context: DeclarationContext | None,
    member: Any,
) -> SimpleTypeReference:
    if context is None:
        return reference
    element, dimensions = strip_array_suffix(reference.base)
    if not get_classifier().is_type_variable(element):
        return reference
    if context.declares(element, member):
        return reference
    return root_object_reference().with_array_dimension(dimensions)


def from_structured(node: Any, path: str = "type") -> TypeReference:
    """Read a reference back from its structured form.

    A bare string anywhere a node is expected is parsed with the compact
    grammar, and a dict holding only ``base`` is read the same way, so
    ``"java.util.List<T>"`` and ``{"base": "java.util.List<T>"}`` agree.

    Args:
        node: A string or a dict with the interchange keys.
        path: Key path used in error messages.

    Returns:
        The interned TypeReference.

    Raises:
        ParseError: If a string node is not a valid signature.
        MissingKeyError: If a dict node has no ``base``.
        ValueTypeError: If a key holds a value of the wrong shape.
    """
    from rosetta.core.interning import intern_reference
    from rosetta.core.parser import parse

    if isinstance(node, str):
        return parse(node)
    if not isinstance(node, dict):
        raise ValueTypeError(path, "str | dict", node)

    if KEY_BASE not in node:
        raise MissingKeyError(path, KEY_BASE)
    base = node[KEY_BASE]
    if not isinstance(base, str):
        raise ValueTypeError(f"{path}.{KEY_BASE}", "str", base)

    if KEY_GENERIC in node and not isinstance(node[KEY_GENERIC], bool):
        raise ValueTypeError(f"{path}.{KEY_GENERIC}", "bool", node[KEY_GENERIC])

    if node.keys() == {KEY_BASE}:
        try:
            return parse(base)
        except ParseError as exc:
            raise ValueTypeError(f"{path}.{KEY_BASE}", "type signature", base) from exc

    if base.strip() == WILDCARD_BASE:
        return intern_reference(_wildcard_from_structured(node, path))
    return intern_reference(_simple_from_structured(base, node, path))


def _wildcard_from_structured(node: dict[str, Any], path: str) -> BoundedTypeReference:
    if KEY_PARAMETERS in node:
        raise ValueTypeError(
            f"{path}.{KEY_PARAMETERS}", "absent for wildcards", node[KEY_PARAMETERS]
        )

    raw_relation = node.get(KEY_BOUNDS_TYPE, BoundRelation.EXTENDS.value)
    if not isinstance(raw_relation, str):
        raise ValueTypeError(f"{path}.{KEY_BOUNDS_TYPE}", "str", raw_relation)
    try:
        relation = BoundRelation(raw_relation)
    except ValueError:
        raise ValueTypeError(
            f"{path}.{KEY_BOUNDS_TYPE}", "'extends' | 'super'", raw_relation
        ) from None

    raw_bounds = node.get(KEY_BOUNDS)
    if raw_bounds is None:
        if relation is BoundRelation.SUPER:
            raise MissingKeyError(path, KEY_BOUNDS)
        return BoundedTypeReference(relation=relation, bounds=(root_object_reference(),))
    if not isinstance(raw_bounds, list) or not raw_bounds:
        raise ValueTypeError(f"{path}.{KEY_BOUNDS}", "non-empty list", raw_bounds)

    bounds: list[SimpleTypeReference] = []
    for index, raw_bound in enumerate(raw_bounds):
        bound_path = f"{path}.{KEY_BOUNDS}[{index}]"
        bound = from_structured(raw_bound, bound_path)
        if not isinstance(bound, SimpleTypeReference):
            raise ValueTypeError(bound_path, "non-wildcard type", raw_bound)
        bounds.append(bound)
    return BoundedTypeReference(relation=relation, bounds=tuple(bounds))


def _simple_from_structured(base: str, node: dict[str, Any], path: str) -> SimpleTypeReference:
    base = base.replace(" ", "")
    if not BASE_RE.fullmatch(base):
        raise ValueTypeError(f"{path}.{KEY_BASE}", "dotted type name", base)
    for key in (KEY_GENERIC, KEY_BOUNDS_TYPE, KEY_BOUNDS):
        if key in node:
            raise ValueTypeError(f"{path}.{key}", "absent for non-wildcard types", node[key])

    raw_parameters = node.get(KEY_PARAMETERS)
    if raw_parameters is None:
        return SimpleTypeReference(base=base)
    if not isinstance(raw_parameters, list):
        raise ValueTypeError(f"{path}.{KEY_PARAMETERS}", "list", raw_parameters)
    if raw_parameters and strip_array_suffix(base)[0] in PRIMITIVE_TYPES:
        raise ValueTypeError(
            f"{path}.{KEY_PARAMETERS}", "absent for primitive types", raw_parameters
        )

    arguments = tuple(
        from_structured(raw, f"{path}.{KEY_PARAMETERS}[{index}]")
        for index, raw in enumerate(raw_parameters)
    )
    return SimpleTypeReference(base=base, type_arguments=arguments)


# JSON documents


def serialize(document: dict[str, Any]) -> str:
    """Serialize a structured document to a JSON string.

    Args:
        document: Plain-value document (e.g. from build_document()).

    Returns:
        Indented JSON text.

    Raises:
        SerializationError: If the document holds non-JSON values.
    """
    try:
        return json.dumps(document, indent=2, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError) as e:
        raise SerializationError("Failed to serialize document", details=str(e)) from e


def deserialize(text: str) -> dict[str, Any]:
    """Deserialize a JSON document string.

    Raises:
        SerializationError: If the text is not valid JSON or not an object.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SerializationError(
            "Invalid JSON format",
            details=f"Line {e.lineno}, column {e.colno}: {e.msg}",
        ) from e
    if not isinstance(data, dict):
        raise SerializationError(
            "Invalid document", details=f"expected an object, got {type(data).__name__}"
        )
    return data
