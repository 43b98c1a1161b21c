"""Java mirror builder for Phase 2.

Converts tree-sitter declaration and type nodes into the native mirrors read
by the resolver. Simple type names are qualified through the symbol table and
the file's imports; names of type parameters in scope become TypeVariables.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tree_sitter import Node, Parser

from rosetta.adapters.base import FileContext, SymbolTable
from rosetta.adapters.java.ast_utils import TYPE_DECLARATIONS, TYPE_NODES, JavaAstUtils
from rosetta.adapters.java.scanner import iter_java_files
from rosetta.reflect.mirror import (
    ClassMirror,
    ClassType,
    ExecutableKind,
    ExecutableMirror,
    FieldMirror,
    GenericArrayType,
    ParameterizedType,
    ParameterMirror,
    TypeKind,
    TypeMirror,
    TypeParameter,
    TypeVariable,
    WildcardType,
)

logger = logging.getLogger(__name__)

JAVA_LANG_TYPES = frozenset(
    {
        "Appendable", "AutoCloseable", "Boolean", "Byte", "CharSequence", "Character",
        "Class", "ClassLoader", "Cloneable", "Comparable", "Deprecated", "Double", "Enum",
        "Error", "Exception", "Float", "FunctionalInterface", "Integer", "Iterable", "Long",
        "Math", "Number", "Object", "Override", "Process", "Record", "Runnable",
        "RuntimeException", "SafeVarargs", "Short", "String", "StringBuilder",
        "SuppressWarnings", "System", "Thread", "ThreadLocal", "Throwable", "Void",
    }
)

PRIMITIVE_NODES = ("integral_type", "floating_point_type", "boolean_type", "void_type")

ENUM_CONSTANT_MODIFIERS = ("public", "static", "final")
INTERFACE_FIELD_MODIFIERS = ("public", "static", "final")
RECORD_COMPONENT_MODIFIERS = ("private", "final")


class JavaMirrorBuilder:
    """Phase 2: Build class mirrors from Java source using the symbol table."""

    def __init__(self, parser: Parser, symbol_table: SymbolTable) -> None:
        """Initialize the builder.

        Args:
            parser: Configured tree-sitter parser for Java
            symbol_table: Symbol table from Phase 1
        """
        self._parser = parser
        self._symbol_table = symbol_table

    def build_directory(self, source_path: Path) -> list[ClassMirror]:
        """Build mirrors for every type declared under a directory (or file)."""
        mirrors: list[ClassMirror] = []

        for java_file in iter_java_files(source_path):
            try:
                mirrors.extend(self.build_source(java_file.read_bytes()))
            except Exception as e:
                logger.warning(f"Failed to process {java_file}: {e}")

        return mirrors

    def build_source(self, content: bytes) -> list[ClassMirror]:
        """Build mirrors for every type declared in one compilation unit.

        Args:
            content: Java source bytes

        Returns:
            Mirrors of top-level and nested types, outer types first
        """
        root = self._parser.parse(content).root_node
        package_name = JavaAstUtils.extract_package(root, content)
        context = FileContext(
            package=package_name,
            imports=JavaAstUtils.extract_imports(root, content),
            local_types=self._collect_local_types(root, content, package_name),
        )
        return _FileBuilder(self, content, context).build(root)

    def _collect_local_types(
        self, root: Node, content: bytes, package_name: str
    ) -> dict[str, str]:
        """Map the simple names of types declared in the file to qualified names."""
        local_types: dict[str, str] = {}
        pending = [(root, package_name)]
        while pending:
            node, prefix = pending.pop(0)
            for declaration in JavaAstUtils.iter_type_declarations(node):
                name = JavaAstUtils.get_node_text(declaration.child_by_field_name("name"), content)
                qualified_name = f"{prefix}.{name}" if prefix else name
                local_types.setdefault(name, qualified_name)
                body = declaration.child_by_field_name("body")
                if body is not None:
                    pending.append((body, qualified_name))
        return local_types

    def qualify(self, simple_name: str, context: FileContext) -> str:
        """Qualify a simple type name written in a file.

        Order: types declared in the file or symbol table, explicit imports,
        on-demand imports of known types, well-known java.lang types, then the
        file's own package.
        """
        resolved = self.lookup(simple_name, context)
        if resolved is not None:
            return resolved
        return f"{context.package}.{simple_name}" if context.package else simple_name

    def lookup(self, simple_name: str, context: FileContext) -> str | None:
        """Like qualify, without the package fallback."""
        resolved = self._symbol_table.resolve_type(simple_name, context)
        if resolved is not None:
            return resolved
        for imp in context.imports:
            if imp.endswith(f".{simple_name}"):
                return imp
        if simple_name in JAVA_LANG_TYPES:
            return f"java.lang.{simple_name}"
        return None


class _FileBuilder:
    """Builds the mirrors of one compilation unit."""

    def __init__(self, owner: JavaMirrorBuilder, content: bytes, context: FileContext) -> None:
        self._owner = owner
        self._content = content
        self._context = context
        self._mirrors: list[ClassMirror] = []

    def build(self, root: Node) -> list[ClassMirror]:
        for declaration in JavaAstUtils.iter_type_declarations(root):
            self._build_class(declaration, enclosing=None, outer_scope=frozenset())
        return self._mirrors

    def _text(self, node: Node) -> str:
        return JavaAstUtils.get_node_text(node, self._content)

    # Declarations

    def _build_class(
        self,
        node: Node,
        enclosing: ClassMirror | None,
        outer_scope: frozenset[str],
        implicit_modifiers: tuple[str, ...] = (),
    ) -> None:
        simple_name = self._text(node.child_by_field_name("name"))
        package = self._context.package
        if enclosing is not None:
            name = f"{enclosing.name}.{simple_name}"
        else:
            name = f"{package}.{simple_name}" if package else simple_name

        kind = JavaAstUtils.get_type_kind(node.type)
        modifiers = _merge(JavaAstUtils.extract_modifiers(node, self._content), implicit_modifiers)
        if enclosing is not None and kind != TypeKind.CLASS:
            modifiers = _merge(modifiers, ("static",))

        inner = enclosing is not None and "static" not in modifiers
        own_names = self._parameter_names(node.child_by_field_name("type_parameters"))
        scope = (outer_scope if inner else frozenset()) | own_names
        type_parameters = self._type_parameters(node.child_by_field_name("type_parameters"), scope)

        superclass = None
        superclass_node = JavaAstUtils.find_child(node, "superclass")
        if superclass_node is not None:
            superclass = self._type(JavaAstUtils.type_children(superclass_node)[0], scope)

        interfaces: list[TypeMirror] = []
        interfaces_node = JavaAstUtils.find_child(node, "super_interfaces", "extends_interfaces")
        if interfaces_node is not None:
            type_list = JavaAstUtils.find_child(interfaces_node, "type_list")
            for type_node in JavaAstUtils.type_children(
                type_list if type_list is not None else interfaces_node
            ):
                interfaces.append(self._type(type_node, scope))

        fields: list[FieldMirror] = []
        constructors: list[ExecutableMirror] = []
        methods: list[ExecutableMirror] = []
        nested: list[tuple[Node, tuple[str, ...]]] = []

        if kind == TypeKind.RECORD:
            fields.extend(self._record_components(node, scope))

        body = node.child_by_field_name("body")
        if body is not None:
            self._read_body(
                body, kind, name, scope, fields, constructors, methods, nested
            )

        mirror = ClassMirror(
            name=name,
            package=package,
            kind=kind,
            modifiers=modifiers,
            type_parameters=type_parameters,
            superclass=superclass,
            interfaces=tuple(interfaces),
            fields=tuple(fields),
            constructors=tuple(constructors),
            methods=tuple(methods),
            enclosing=enclosing.name if enclosing is not None else None,
        )
        self._mirrors.append(mirror)
        for nested_node, nested_modifiers in nested:
            self._build_class(nested_node, mirror, scope, nested_modifiers)

    def _read_body(
        self,
        body: Node,
        kind: TypeKind,
        class_name: str,
        scope: frozenset[str],
        fields: list[FieldMirror],
        constructors: list[ExecutableMirror],
        methods: list[ExecutableMirror],
        nested: list[tuple[Node, tuple[str, ...]]],
    ) -> None:
        in_interface = kind == TypeKind.INTERFACE
        for child in body.children:
            if child.type == "enum_constant":
                name = self._text(child.child_by_field_name("name"))
                fields.append(
                    FieldMirror(name, ClassType(class_name), ENUM_CONSTANT_MODIFIERS)
                )
            elif child.type == "enum_body_declarations":
                self._read_body(
                    child, TypeKind.CLASS, class_name, scope,
                    fields, constructors, methods, nested,
                )
            elif child.type in ("field_declaration", "constant_declaration"):
                implicit = INTERFACE_FIELD_MODIFIERS if in_interface else ()
                fields.extend(self._fields(child, scope, implicit))
            elif child.type == "method_declaration":
                implicit = ("public",) if in_interface else ()
                methods.append(self._executable(child, scope, ExecutableKind.METHOD, implicit))
            elif child.type == "constructor_declaration":
                constructors.append(
                    self._executable(child, scope, ExecutableKind.CONSTRUCTOR)
                )
            elif child.type in TYPE_DECLARATIONS:
                if child.child_by_field_name("name") is not None:
                    nested.append((child, ("public", "static") if in_interface else ()))

    def _fields(
        self, node: Node, scope: frozenset[str], implicit: tuple[str, ...]
    ) -> list[FieldMirror]:
        modifiers = _merge(JavaAstUtils.extract_modifiers(node, self._content), implicit)
        declared = self._type(node.child_by_field_name("type"), scope)
        fields = []
        for declarator in node.children_by_field_name("declarator"):
            name = self._text(declarator.child_by_field_name("name"))
            extra = JavaAstUtils.count_dimensions(
                declarator.child_by_field_name("dimensions"), self._content
            )
            fields.append(FieldMirror(name, _with_dimensions(declared, extra), modifiers))
        return fields

    def _record_components(self, node: Node, scope: frozenset[str]) -> list[FieldMirror]:
        components = node.child_by_field_name("parameters")
        if components is None:
            return []
        return [
            FieldMirror(parameter.name, parameter.type, RECORD_COMPONENT_MODIFIERS)
            for parameter in self._parameters(components, scope)
        ]

    def _executable(
        self,
        node: Node,
        class_scope: frozenset[str],
        kind: ExecutableKind,
        implicit: tuple[str, ...] = (),
    ) -> ExecutableMirror:
        parameters_node = node.child_by_field_name("type_parameters")
        if parameters_node is None:
            parameters_node = JavaAstUtils.find_child(node, "type_parameters")
        scope = class_scope | self._parameter_names(parameters_node)

        return_type = None
        if kind == ExecutableKind.METHOD:
            return_type = self._type(node.child_by_field_name("type"), scope)
            extra = JavaAstUtils.count_dimensions(
                node.child_by_field_name("dimensions"), self._content
            )
            return_type = _with_dimensions(return_type, extra)

        formal = node.child_by_field_name("parameters")
        return ExecutableMirror(
            name=self._text(node.child_by_field_name("name")),
            kind=kind,
            type_parameters=self._type_parameters(parameters_node, scope),
            parameters=tuple(self._parameters(formal, scope)) if formal is not None else (),
            return_type=return_type,
            modifiers=_merge(JavaAstUtils.extract_modifiers(node, self._content), implicit),
        )

    def _parameters(self, node: Node, scope: frozenset[str]) -> list[ParameterMirror]:
        parameters = []
        for child in node.named_children:
            if child.type == "formal_parameter":
                declared = self._type(child.child_by_field_name("type"), scope)
                extra = JavaAstUtils.count_dimensions(
                    child.child_by_field_name("dimensions"), self._content
                )
                name = self._text(child.child_by_field_name("name"))
                parameters.append(ParameterMirror(name, _with_dimensions(declared, extra)))
            elif child.type == "spread_parameter":
                declared = self._type(JavaAstUtils.type_children(child)[0], scope)
                declarator = JavaAstUtils.find_child(child, "variable_declarator")
                name = self._text(declarator.child_by_field_name("name"))
                parameters.append(
                    ParameterMirror(name, _with_dimensions(declared, 1), varargs=True)
                )
        return parameters

    def _parameter_names(self, node: Node | None) -> frozenset[str]:
        if node is None:
            return frozenset()
        return frozenset(
            self._text(JavaAstUtils.find_child(child, "type_identifier", "identifier"))
            for child in node.named_children
            if child.type == "type_parameter"
        )

    def _type_parameters(
        self, node: Node | None, scope: frozenset[str]
    ) -> tuple[TypeParameter, ...]:
        if node is None:
            return ()
        parameters = []
        for child in node.named_children:
            if child.type != "type_parameter":
                continue
            name = self._text(JavaAstUtils.find_child(child, "type_identifier", "identifier"))
            bound_node = JavaAstUtils.find_child(child, "type_bound")
            bounds: tuple[TypeMirror, ...] = ()
            if bound_node is not None:
                bounds = tuple(
                    self._type(bound, scope) for bound in JavaAstUtils.type_children(bound_node)
                )
            parameters.append(TypeParameter(name, bounds))
        return tuple(parameters)

    # Types

    def _type(self, node: Node, scope: frozenset[str]) -> TypeMirror:
        """Convert a type node into a native mirror."""
        if node.type in PRIMITIVE_NODES:
            return ClassType(self._text(node))
        if node.type == "type_identifier":
            name = self._text(node)
            if name in scope:
                return TypeVariable(name)
            return ClassType(self._owner.qualify(name, self._context))
        if node.type == "scoped_type_identifier":
            return ClassType(self._scoped_name(node))
        if node.type == "generic_type":
            return self._generic(node, scope)
        if node.type == "array_type":
            element = self._type(node.child_by_field_name("element"), scope)
            dimensions = JavaAstUtils.count_dimensions(
                node.child_by_field_name("dimensions"), self._content
            )
            return _with_dimensions(element, dimensions)
        if node.type == "annotated_type":
            return self._type(JavaAstUtils.type_children(node)[-1], scope)
        raise ValueError(f"Unsupported type node '{node.type}': {self._text(node)}")

    def _generic(self, node: Node, scope: frozenset[str]) -> TypeMirror:
        raw_node = JavaAstUtils.find_child(node, "type_identifier", "scoped_type_identifier")
        if raw_node.type == "type_identifier":
            raw = ClassType(self._owner.qualify(self._text(raw_node), self._context))
        else:
            raw = ClassType(self._scoped_name(raw_node))

        arguments: list[TypeMirror] = []
        arguments_node = JavaAstUtils.find_child(node, "type_arguments")
        if arguments_node is not None:
            for child in arguments_node.named_children:
                if child.type == "wildcard":
                    arguments.append(self._wildcard(child, scope))
                elif child.type in TYPE_NODES:
                    arguments.append(self._type(child, scope))
        if not arguments:
            return raw
        return ParameterizedType(raw, tuple(arguments))

    def _wildcard(self, node: Node, scope: frozenset[str]) -> WildcardType:
        relation = None
        for child in node.children:
            if child.type in ("extends", "super"):
                relation = child.type
            elif relation is not None and child.type in TYPE_NODES:
                bound = self._type(child, scope)
                if relation == "super":
                    return WildcardType(lower_bounds=(bound,))
                return WildcardType(upper_bounds=(bound,))
        return WildcardType()

    def _scoped_name(self, node: Node) -> str:
        """Qualify a dotted type name such as ``Map.Entry`` or ``java.util.List``.

        Type arguments on outer segments are dropped.
        """
        segments = self._segments(node)
        head = self._owner.lookup(segments[0], self._context)
        if head is not None:
            segments[0] = head
        return ".".join(segments)

    def _segments(self, node: Node) -> list[str]:
        segments: list[str] = []
        for child in node.named_children:
            if child.type == "type_identifier":
                segments.append(self._text(child))
            elif child.type in ("scoped_type_identifier", "generic_type"):
                segments.extend(self._segments(child))
        return segments


def _with_dimensions(mirror: TypeMirror, dimensions: int) -> TypeMirror:
    """Add array dimensions to a mirror."""
    if dimensions == 0:
        return mirror
    if isinstance(mirror, ClassType):
        return ClassType(mirror.name, mirror.dimensions + dimensions, mirror.type_parameters)
    for _ in range(dimensions):
        mirror = GenericArrayType(mirror)
    return mirror


def _merge(modifiers: list[str] | tuple[str, ...], implicit: tuple[str, ...]) -> tuple[str, ...]:
    merged = list(modifiers)
    for modifier in implicit:
        if modifier == "public" and ("private" in merged or "protected" in merged):
            continue
        if modifier not in merged:
            merged.append(modifier)
    return tuple(merged)
