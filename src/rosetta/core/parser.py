"""Recursive-descent parser for textual generic type signatures.

Grammar::

    Type      := Wildcard | Qualified
    Wildcard  := "?" [ ("extends" | "super") BoundList ]
    BoundList := Type ("&" Type)*
    Qualified := Ident ("." Ident)* ["<" ArgList ">"] ("[" "]")*
    ArgList   := Type ("," Type)*

Array suffixes are folded into the base name, so ``int[][]`` is an ordinary
SimpleTypeReference. Results are interned by input text and canonical form.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rosetta.core.classify import ARRAY_SUFFIX, PRIMITIVE_TYPES
from rosetta.core.config import get_config
from rosetta.core.errors import ParseError
from rosetta.core.interning import intern_reference, interning_cache
from rosetta.core.models import (
    BoundedTypeReference,
    BoundRelation,
    SimpleTypeReference,
    TypeReference,
    root_object_reference,
)

logger = logging.getLogger(__name__)

_PUNCTUATION = frozenset("?.<>,&[]")
_BOUND_KEYWORDS = {"extends": BoundRelation.EXTENDS, "super": BoundRelation.SUPER}

IDENT = "IDENT"
EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token: punctuation character, identifier or end of input."""

    kind: str
    value: str
    position: int


def _is_ident_start(char: str) -> bool:
    return char.isascii() and (char.isalpha() or char in "_$")


def _is_ident_part(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char in "_$")


def tokenize(text: str) -> list[Token]:
    """Split a signature into tokens, skipping whitespace.

    Raises:
        ParseError: On a character that cannot start any token.
    """
    tokens: list[Token] = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char.isspace():
            index += 1
        elif char in _PUNCTUATION:
            tokens.append(Token(char, char, index))
            index += 1
        elif _is_ident_start(char):
            start = index
            while index < length and _is_ident_part(text[index]):
                index += 1
            tokens.append(Token(IDENT, text[start:index], start))
        else:
            raise ParseError(text, index, f"unexpected character {char!r}")
    tokens.append(Token(EOF, "", length))
    return tokens


class _TypeParser:
    """Single-use parser over one signature string."""

    def __init__(self, text: str, max_depth: int) -> None:
        self._text = text
        self._max_depth = max_depth
        self._tokens = tokenize(text)
        self._index = 0
        self._depth = 0

    def parse(self) -> TypeReference:
        if self._peek().kind == EOF:
            raise ParseError(self._text, 0, "empty type signature")
        result = self._parse_type()
        token = self._peek()
        if token.kind != EOF:
            raise ParseError(self._text, token.position, self._unexpected(token))
        return result

    # Token helpers

    def _peek(self) -> Token:
        return self._tokens[self._index]

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        if token.kind != EOF:
            self._index += 1
        return token

    def _expect(self, kind: str, reason: str) -> Token:
        token = self._peek()
        if token.kind != kind:
            raise ParseError(self._text, token.position, reason)
        return self._advance()

    @staticmethod
    def _unexpected(token: Token) -> str:
        if token.kind == ">":
            return "unbalanced '>'"
        if token.kind == "]":
            return "unbalanced ']'"
        return f"unexpected {token.value!r}"

    # Grammar rules

    def _parse_type(self) -> TypeReference:
        if self._peek().kind == "?":
            return self._parse_wildcard()
        return self._parse_qualified()

    def _parse_wildcard(self) -> BoundedTypeReference:
        self._advance()
        token = self._peek()
        if token.kind == IDENT:
            relation = _BOUND_KEYWORDS.get(token.value)
            if relation is None:
                raise ParseError(
                    self._text, token.position, f"unknown bounds keyword {token.value!r}"
                )
            self._advance()
            bounds = self._parse_bound_list()
        else:
            relation = BoundRelation.EXTENDS
            bounds = [root_object_reference()]

        if self._peek().kind == "[":
            raise ParseError(self._text, self._peek().position, "a wildcard cannot be an array")
        return BoundedTypeReference(relation=relation, bounds=tuple(bounds))

    def _parse_bound_list(self) -> list[SimpleTypeReference]:
        bounds: list[SimpleTypeReference] = []
        while True:
            token = self._peek()
            if token.kind == "?":
                raise ParseError(self._text, token.position, "a wildcard cannot be a bound")
            if token.kind != IDENT:
                raise ParseError(self._text, token.position, "expected a bound type")
            bounds.append(self._parse_qualified())
            if self._peek().kind != "&":
                return bounds
            self._advance()

    def _parse_qualified(self) -> SimpleTypeReference:
        segments = [self._expect(IDENT, "expected a type name").value]
        while self._peek().kind == ".":
            self._advance()
            segments.append(self._expect(IDENT, "empty identifier segment").value)
        base = ".".join(segments)

        arguments: list[TypeReference] = []
        if self._peek().kind == "<":
            open_token = self._advance()
            if base in PRIMITIVE_TYPES:
                raise ParseError(
                    self._text,
                    open_token.position,
                    f"primitive type '{base}' cannot have type arguments",
                )
            if self._peek().kind == ">":
                raise ParseError(self._text, self._peek().position, "empty type argument list")
            arguments = self._parse_argument_list(open_token)

        while self._peek().kind == "[":
            self._advance()
            self._expect("]", "unbalanced '['")
            base += ARRAY_SUFFIX

        return SimpleTypeReference(base=base, type_arguments=tuple(arguments))

    def _parse_argument_list(self, open_token: Token) -> list[TypeReference]:
        self._depth += 1
        if self._depth > self._max_depth:
            raise ParseError(
                self._text,
                open_token.position,
                f"type arguments nested deeper than {self._max_depth}",
            )
        arguments = [self._parse_type()]
        while self._peek().kind == ",":
            self._advance()
            arguments.append(self._parse_type())
        token = self._peek()
        if token.kind != ">":
            reason = "unbalanced '<'" if token.kind == EOF else self._unexpected(token)
            raise ParseError(self._text, token.position, reason)
        self._advance()
        self._depth -= 1
        return arguments


def parse(text: str) -> TypeReference:
    """Parse a textual type signature into a TypeReference.

    Identical inputs are served from the interning cache without re-running
    the grammar. A failed parse leaves the cache untouched.

    Args:
        text: Signature such as ``java.util.Map<K, java.util.List<V>>``.

    Returns:
        The interned TypeReference.

    Raises:
        ParseError: If the signature is malformed or nested too deeply for
            the interpreter stack.
    """
    if not isinstance(text, str):
        raise ParseError(repr(text), 0, f"expected a string, got {type(text).__name__}")

    config = get_config()
    try:
        if not config.intern_types:
            return _TypeParser(text, config.max_type_depth).parse()
        return interning_cache().get_or_compute(
            text, lambda: _parse_new(text, config.max_type_depth)
        )
    except RecursionError:
        raise ParseError(text, 0, "type nested too deeply") from None


def _parse_new(text: str, max_depth: int) -> TypeReference:
    logger.debug(f"Parsing type signature {text!r}")
    return intern_reference(_TypeParser(text, max_depth).parse())


def parse_cache_info():
    """Hit/miss statistics of the interning cache."""
    return interning_cache().info()


__all__ = ["Token", "parse", "parse_cache_info", "tokenize"]
