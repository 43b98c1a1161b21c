"""Assembly of class signatures into an API document."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from rosetta.reflect.members import ClassSignature

DOCUMENT_VERSION = "1.0"
LANGUAGE_ID = "java"
DEFAULT_PACKAGE = ""


def build_document(
    signatures: Iterable[ClassSignature], version: str = DOCUMENT_VERSION
) -> dict[str, Any]:
    """Group class signatures by package into one document.

    Args:
        signatures: Signatures to include (order does not matter).
        version: Document format version.

    Returns:
        ``{"version": ..., "languages": {"java": {"packages": {package:
        {"classes": {local_name: class_document}}}}}}``.
    """
    packages: dict[str, dict[str, Any]] = {}
    for signature in sorted(signatures, key=lambda s: s.name):
        classes = packages.setdefault(signature.package or DEFAULT_PACKAGE, {"classes": {}})
        classes["classes"][signature.local_name] = signature.to_structured()
    return {
        "version": version,
        "languages": {LANGUAGE_ID: {"packages": packages}},
    }
