"""Base classes for host adapters.

A host adapter turns a host's declarations into class mirrors and runs the
resolver over them. Adapters work in two phases:

- Phase 1 (declaration scanning): collect every declared type into a
  SymbolTable.
- Phase 2 (mirror building): build ClassMirrors, qualifying simple type names
  through the symbol table and the file's imports.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel, Field

from rosetta.core.classify import PRIMITIVE_TYPES, TypeProbe, strip_array_suffix
from rosetta.reflect.members import ClassSignature


class FileContext(BaseModel):
    """File-level context for qualifying simple type names.

    Contains information about the file being read, used to turn the short
    names written in source into qualified names.
    """

    package: str = Field(..., description="Current package name")
    imports: list[str] = Field(default_factory=list, description="Import statements")
    local_types: dict[str, str] = Field(
        default_factory=dict, description="Nested type aliases (short -> qualified)"
    )


class SymbolTable(BaseModel):
    """Symbol table for two-phase analysis.

    Stores the types declared in the analyzed sources, collected during
    Phase 1 for use in Phase 2.
    """

    type_map: dict[str, list[str]] = Field(
        default_factory=dict, description="short_name -> [qualified_names]"
    )

    def add_type(self, short_name: str, qualified_name: str) -> None:
        """Register a type in the symbol table."""
        if short_name not in self.type_map:
            self.type_map[short_name] = []
        if qualified_name not in self.type_map[short_name]:
            self.type_map[short_name].append(qualified_name)

    @property
    def qualified_names(self) -> set[str]:
        return {name for names in self.type_map.values() for name in names}

    def is_known_type(self, name: str) -> bool:
        """Check whether a (qualified) name is a declared type."""
        return name in self.qualified_names

    def resolve_type(self, short_name: str, context: FileContext) -> str | None:
        """Resolve a type's short name to its qualified name using file context.

        Resolution order:
        1. Check nested type aliases
        2. Check same-package types
        3. Check explicit imports
        4. Check wildcard imports

        Candidates are sorted so resolution does not depend on scan order.

        Args:
            short_name: The simple type name to resolve
            context: The file context containing package and imports

        Returns:
            The qualified name if resolved, None otherwise
        """
        if short_name in context.local_types:
            return context.local_types[short_name]

        candidates = sorted(self.type_map.get(short_name, []))
        if not candidates:
            return None

        same_package = f"{context.package}.{short_name}" if context.package else short_name
        if same_package in candidates:
            return same_package

        for imp in context.imports:
            if imp.endswith(f".{short_name}") and imp in candidates:
                return imp

        for imp in context.imports:
            if imp.endswith(".*"):
                prefix = imp[:-2]
                for candidate in candidates:
                    if candidate == f"{prefix}.{short_name}":
                        return candidate

        return candidates[0] if len(candidates) == 1 else None

    def type_probe(self) -> TypeProbe:
        """Build an "is concrete type" probe backed by this table.

        A name is concrete when it is a primitive, a declared type, or
        package-qualified.
        """
        known = frozenset(self.qualified_names)

        def probe(name: str) -> bool:
            element, _ = strip_array_suffix(name)
            return element in PRIMITIVE_TYPES or element in known or "." in element

        return probe


class HostAdapter(ABC):
    """Abstract base class for host adapters.

    Subclasses must implement the abstract methods for their host.
    """

    @property
    @abstractmethod
    def language_id(self) -> str:
        """Return the document language key (e.g. ``java``)."""
        ...

    @abstractmethod
    def analyze(self, source_path: Path, erase: bool = False) -> list[ClassSignature]:
        """Analyze a source tree and return the resolved class signatures.

        Args:
            source_path: Root directory (or single file) of source code
            erase: Substitute type variables with their erased bounds

        Returns:
            One signature per declared class, sorted by name
        """
        ...

    @abstractmethod
    def build_symbol_table(self, source_path: Path) -> SymbolTable:
        """Phase 1: Scan all files and build the symbol table.

        Args:
            source_path: Root directory of source code

        Returns:
            SymbolTable containing all declared types
        """
        ...
