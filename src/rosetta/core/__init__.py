"""Core module containing the type-reference model, parser and serializer."""

from rosetta.core.cache import CacheInfo, MemoCache, reset_caches
from rosetta.core.classify import (
    PRIMITIVE_TYPES,
    TypeClassifier,
    get_classifier,
    is_concrete_type,
    is_primitive,
    set_type_probe,
)
from rosetta.core.config import RosettaConfig, get_config, reload_config
from rosetta.core.errors import (
    MemberResolutionError,
    MissingKeyError,
    ParseError,
    RosettaError,
    SerializationError,
    UnresolvedTypeVariable,
    ValueTypeError,
)
from rosetta.core.interning import intern_reference
from rosetta.core.models import (
    BoundedTypeReference,
    BoundRelation,
    SimpleTypeReference,
    TypeReference,
    root_object_reference,
    unbounded_wildcard,
)
from rosetta.core.parser import parse, parse_cache_info
from rosetta.core.serializer import (
    deserialize,
    from_structured,
    serialize,
    to_compact,
    to_structured,
)

__all__ = [
    "PRIMITIVE_TYPES",
    "BoundRelation",
    "BoundedTypeReference",
    "CacheInfo",
    "MemberResolutionError",
    "MemoCache",
    "MissingKeyError",
    "ParseError",
    "RosettaConfig",
    "RosettaError",
    "SerializationError",
    "SimpleTypeReference",
    "TypeClassifier",
    "TypeReference",
    "UnresolvedTypeVariable",
    "ValueTypeError",
    "deserialize",
    "from_structured",
    "get_classifier",
    "get_config",
    "intern_reference",
    "is_concrete_type",
    "is_primitive",
    "parse",
    "parse_cache_info",
    "reload_config",
    "reset_caches",
    "root_object_reference",
    "serialize",
    "set_type_probe",
    "to_compact",
    "to_structured",
    "unbounded_wildcard",
]
