"""Error types raised by the type-reference core.

Every error derives from RosettaError so callers can catch the whole family,
while the metadata layer can still tell parse failures, resolution failures and
malformed interchange documents apart.
"""

from __future__ import annotations


class RosettaError(Exception):
    """Base class for all Rosetta errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ParseError(RosettaError):
    """A textual type signature is malformed.

    Attributes:
        text: The input that failed to parse.
        position: 0-based character offset where parsing stopped.
        reason: Short description of what was expected.
    """

    def __init__(self, text: str, position: int, reason: str) -> None:
        super().__init__(
            f"Invalid type signature at position {position}: {reason}",
            details=repr(text),
        )
        self.text = text
        self.position = position
        self.reason = reason


class UnresolvedTypeVariable(RosettaError):
    """A type variable has no declaration in the enclosing context chain."""

    def __init__(self, name: str, context_name: str) -> None:
        super().__init__(
            f"Type variable '{name}' is not declared in the context of '{context_name}'"
        )
        self.name = name
        self.context_name = context_name


class ValueTypeError(RosettaError):
    """A structured interchange node has the wrong shape for its key."""

    def __init__(self, path: str, expected: str, actual: object) -> None:
        super().__init__(
            f"The value of {path} is invalid",
            details=f"expected {expected}, got {type(actual).__name__} {actual!r}",
        )
        self.path = path
        self.expected = expected
        self.actual = actual


class MissingKeyError(RosettaError):
    """A required key is missing from a structured interchange node."""

    def __init__(self, path: str, key: str) -> None:
        super().__init__(f'The key is missing: {path}["{key}"]')
        self.path = path
        self.key = key


class MemberResolutionError(RosettaError):
    """Resolving the declared type of a class member failed.

    Wraps the underlying error with the member path, e.g. ``field 'count'``.
    """

    def __init__(self, path: str, cause: RosettaError, class_name: str | None = None) -> None:
        where = f"{class_name} {path}" if class_name else path
        super().__init__(f"{where}: invalid declared type", details=str(cause))
        self.path = path
        self.cause = cause
        self.class_name = class_name


class SerializationError(RosettaError):
    """Error during JSON serialization or deserialization of a document."""
