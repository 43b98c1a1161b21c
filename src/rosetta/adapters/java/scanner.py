"""Java scanner for Phase 1 symbol table construction.

This module scans Java source files to build a symbol table
containing all type declarations.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from tree_sitter import Node, Parser

from rosetta.adapters.base import SymbolTable
from rosetta.adapters.java.ast_utils import JavaAstUtils

logger = logging.getLogger(__name__)


def iter_java_files(source_path: Path) -> Iterator[Path]:
    """Yield the Java files under a directory (or the file itself), sorted."""
    if source_path.is_file():
        yield source_path
        return
    yield from sorted(source_path.rglob("*.java"))


class JavaScanner:
    """Phase 1: Scan Java files to build symbol table.

    Collects all type declarations, including nested ones, without looking at
    their members.
    """

    def __init__(self, parser: Parser) -> None:
        """Initialize the scanner.

        Args:
            parser: Configured tree-sitter parser for Java
        """
        self._parser = parser

    def scan_directory(self, source_path: Path) -> SymbolTable:
        """Scan all Java files and build symbol table.

        Args:
            source_path: Root directory of Java source code, or one file

        Returns:
            SymbolTable containing all declared types
        """
        symbol_table = SymbolTable()

        for java_file in iter_java_files(source_path):
            try:
                self._scan_file_definitions(java_file, symbol_table)
            except Exception as e:
                logger.warning(f"Failed to scan {java_file}: {e}")

        logger.debug(f"Scanned {len(symbol_table.qualified_names)} types under {source_path}")
        return symbol_table

    def _scan_file_definitions(self, file_path: Path, symbol_table: SymbolTable) -> None:
        """Scan a single Java file for type declarations.

        Args:
            file_path: Path to the Java file
            symbol_table: Symbol table to populate
        """
        content = file_path.read_bytes()
        tree = self._parser.parse(content)
        root = tree.root_node

        package_name = JavaAstUtils.extract_package(root, content)
        self._scan_type_declarations(root, content, package_name, symbol_table)

    def _scan_type_declarations(
        self,
        node: Node,
        content: bytes,
        package_name: str,
        symbol_table: SymbolTable,
        parent_type: str | None = None,
    ) -> None:
        """Recursively scan for type declarations.

        Args:
            node: Current AST node
            content: Source file content
            package_name: Current package name
            symbol_table: Symbol table to populate
            parent_type: Parent type's qualified name (for nested types)
        """
        for declaration in JavaAstUtils.iter_type_declarations(node):
            name_node = declaration.child_by_field_name("name")
            type_name = JavaAstUtils.get_node_text(name_node, content)

            if parent_type:
                qualified_name = f"{parent_type}.{type_name}"
            elif package_name:
                qualified_name = f"{package_name}.{type_name}"
            else:
                qualified_name = type_name

            symbol_table.add_type(type_name, qualified_name)

            body_node = declaration.child_by_field_name("body")
            if body_node:
                self._scan_type_declarations(
                    body_node, content, package_name, symbol_table, qualified_name
                )
