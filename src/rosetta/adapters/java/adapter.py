"""Java host adapter using tree-sitter-java.

This module implements the HostAdapter interface for Java source code,
using tree-sitter for parsing and a two-phase approach for name qualification.
"""

from __future__ import annotations

import logging
from pathlib import Path

import tree_sitter_java as tsjava
from tree_sitter import Language, Parser

from rosetta.adapters.base import HostAdapter, SymbolTable
from rosetta.adapters.java.mirrors import JavaMirrorBuilder
from rosetta.adapters.java.scanner import JavaScanner
from rosetta.core.classify import TypeProbe, set_type_probe
from rosetta.reflect.context import ClassReference
from rosetta.reflect.members import ClassSignature, describe_class
from rosetta.reflect.mirror import ClassMirror

logger = logging.getLogger(__name__)


class JavaAdapter(HostAdapter):
    """Java host adapter using tree-sitter.

    Implements two-phase analysis:
    - Phase 1: Scan all files to build symbol table (declared types)
    - Phase 2: Build class mirrors and resolve their declared types
    """

    def __init__(self) -> None:
        """Initialize the Java adapter."""
        self._language = Language(tsjava.language())
        self._parser = Parser(self._language)
        self._scanner = JavaScanner(self._parser)
        self._symbol_table = SymbolTable()

    @property
    def language_id(self) -> str:
        """Return ``java`` as the document language key."""
        return "java"

    def analyze(
        self, source_path: Path, erase: bool = False, install_probe: bool = True
    ) -> list[ClassSignature]:
        """Analyze Java source code and return the resolved class signatures.

        Every class context is registered before any class is described, so
        variables of enclosing classes and supertypes declared in the same
        tree are visible.

        Args:
            source_path: Root directory of Java source code, or one file
            erase: Substitute type variables with their erased bounds
            install_probe: Install the symbol-table probe as the process-wide
                concrete-type probe

        Returns:
            One signature per declared class, sorted by name

        Raises:
            MemberResolutionError: If a declared type of any class cannot be
                resolved
        """
        symbol_table = self.build_symbol_table(source_path)
        if install_probe:
            set_type_probe(self.type_probe())

        mirrors = self.build_mirrors(source_path, symbol_table)
        for mirror in mirrors:
            ClassReference.of(mirror)

        signatures = [describe_class(mirror, erase=erase) for mirror in mirrors]

        logger.info(f"Analyzed {len(signatures)} classes under {source_path}")
        return sorted(signatures, key=lambda signature: signature.name)

    def build_symbol_table(self, source_path: Path) -> SymbolTable:
        """Phase 1: Scan all Java files and build symbol table.

        Args:
            source_path: Root directory of Java source code

        Returns:
            SymbolTable containing all declared types
        """
        self._symbol_table = self._scanner.scan_directory(source_path)
        return self._symbol_table

    def build_mirrors(self, source_path: Path, symbol_table: SymbolTable) -> list[ClassMirror]:
        """Phase 2: Build class mirrors using the symbol table.

        Args:
            source_path: Root directory of Java source code
            symbol_table: Symbol table from Phase 1

        Returns:
            Mirrors of every declared type, outer types first
        """
        return JavaMirrorBuilder(self._parser, symbol_table).build_directory(source_path)

    def type_probe(self) -> TypeProbe:
        """Return the "is concrete type" probe of the last scanned tree."""
        return self._symbol_table.type_probe()
