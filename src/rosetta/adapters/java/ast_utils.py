"""Java AST utility functions.

This module provides utility functions for extracting information
from tree-sitter AST nodes for Java source code.
"""

from __future__ import annotations

from collections.abc import Iterator

from tree_sitter import Node

from rosetta.reflect.mirror import TypeKind

TYPE_DECLARATIONS = (
    "class_declaration",
    "interface_declaration",
    "enum_declaration",
    "record_declaration",
)

TYPE_NODES = (
    "integral_type",
    "floating_point_type",
    "boolean_type",
    "void_type",
    "type_identifier",
    "scoped_type_identifier",
    "generic_type",
    "array_type",
    "annotated_type",
)

MODIFIER_KEYWORDS = (
    "public", "private", "protected", "static", "final", "abstract",
    "synchronized", "native", "default", "sealed", "non-sealed",
)


class JavaAstUtils:
    """Java AST utility functions for tree-sitter nodes."""

    @staticmethod
    def get_node_text(node: Node, content: bytes) -> str:
        """Get the text content of a node.

        Args:
            node: The AST node
            content: Source file content

        Returns:
            The text content of the node
        """
        return content[node.start_byte:node.end_byte].decode("utf-8")

    @staticmethod
    def extract_package(root: Node, content: bytes) -> str:
        """Extract package name from the AST.

        Args:
            root: Root node of the AST
            content: Source file content

        Returns:
            Package name or empty string if no package declaration
        """
        for child in root.children:
            if child.type == "package_declaration":
                for node in child.children:
                    if node.type in ("scoped_identifier", "identifier"):
                        return JavaAstUtils.get_node_text(node, content)
        return ""

    @staticmethod
    def extract_imports(root: Node, content: bytes) -> list[str]:
        """Extract type import statements from the AST.

        Static imports name members rather than types and are skipped.

        Args:
            root: Root node of the AST
            content: Source file content

        Returns:
            List of imports; on-demand imports end with ".*"
        """
        imports: list[str] = []
        for child in root.children:
            if child.type != "import_declaration":
                continue
            if any(c.type == "static" for c in child.children):
                continue
            for node in child.children:
                if node.type in ("scoped_identifier", "identifier"):
                    import_text = JavaAstUtils.get_node_text(node, content)
                    if any(c.type == "asterisk" for c in child.children):
                        import_text += ".*"
                    imports.append(import_text)
                    break
        return imports

    @staticmethod
    def extract_modifiers(node: Node, content: bytes) -> list[str]:
        """Extract modifiers from a declaration node.

        Args:
            node: The declaration AST node
            content: Source file content (unused but kept for consistency)

        Returns:
            List of modifier strings
        """
        modifiers: list[str] = []
        for child in node.children:
            if child.type == "modifiers":
                for mod in child.children:
                    if mod.type in MODIFIER_KEYWORDS:
                        modifiers.append(mod.type)
        return modifiers

    @staticmethod
    def get_type_kind(node_type: str) -> TypeKind:
        """Map AST node type to TypeKind.

        Args:
            node_type: The AST node type string

        Returns:
            Corresponding TypeKind enum value
        """
        mapping = {
            "class_declaration": TypeKind.CLASS,
            "interface_declaration": TypeKind.INTERFACE,
            "enum_declaration": TypeKind.ENUM,
            "record_declaration": TypeKind.RECORD,
        }
        return mapping.get(node_type, TypeKind.CLASS)

    @staticmethod
    def count_dimensions(node: Node | None, content: bytes) -> int:
        """Count the "[]" pairs of a dimensions node (0 for None)."""
        if node is None:
            return 0
        return JavaAstUtils.get_node_text(node, content).count("[")

    @staticmethod
    def find_child(node: Node, *types: str) -> Node | None:
        """Return the first direct child of one of the given node types."""
        for child in node.children:
            if child.type in types:
                return child
        return None

    @staticmethod
    def type_children(node: Node) -> list[Node]:
        """Return the direct children of a node that are type nodes."""
        return [child for child in node.named_children if child.type in TYPE_NODES]

    @staticmethod
    def iter_type_declarations(node: Node) -> Iterator[Node]:
        """Yield the named type declarations directly inside a node or body.

        Declarations nested in enum body declarations are included.
        """
        for child in node.children:
            if child.type in TYPE_DECLARATIONS:
                if child.child_by_field_name("name") is not None:
                    yield child
            elif child.type == "enum_body_declarations":
                yield from JavaAstUtils.iter_type_declarations(child)
