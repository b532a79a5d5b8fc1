"""
Plain declaration records read off a tree-sitter Java tree.

Extractors work on these records only, never on tree-sitter nodes, so the
classification rules can be exercised without a parser.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from tree_sitter import Node, Tree

from restscan.java.markers import AnnotationArg, Marker
from restscan.java.parser import JavaParser, get_parser

_TYPE_DECLARATIONS = ("class_declaration", "interface_declaration")
_FIELD_DECLARATIONS = ("field_declaration", "constant_declaration")
_COMMENT_TYPES = ("block_comment", "line_comment", "comment")
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "0": "\0"}


@dataclass(frozen=True)
class ParamDecl:
    name: str
    type: str
    markers: tuple[Marker, ...] = ()


@dataclass(frozen=True)
class MethodDecl:
    name: str
    return_type: str
    parameters: tuple[ParamDecl, ...] = ()
    throws: tuple[str, ...] = ()
    markers: tuple[Marker, ...] = ()
    line: int = 0


@dataclass(frozen=True)
class FieldDecl:
    names: tuple[str, ...]
    type: str  # element type: array brackets removed
    markers: tuple[Marker, ...] = ()
    doc: str = ""  # raw Javadoc comment preceding the field, if any


@dataclass(frozen=True)
class ClassDecl:
    name: str
    kind: str  # "class" | "interface"
    markers: tuple[Marker, ...] = ()
    methods: tuple[MethodDecl, ...] = ()
    fields: tuple[FieldDecl, ...] = ()
    line: int = 0


@dataclass(frozen=True)
class CompilationUnit:
    package: str
    classes: tuple[ClassDecl, ...]  # pre-order: outer before nested


def parse_compilation_unit(source: str | bytes, parser: Optional[JavaParser] = None) -> CompilationUnit:
    parser = parser or get_parser()
    data = source.encode("utf-8") if isinstance(source, str) else source
    return read_compilation_unit(parser.parse(data), data)


def read_compilation_unit(tree: Tree, source: bytes) -> CompilationUnit:
    reader = _Reader(source)
    root = tree.root_node
    return CompilationUnit(
        package=reader.package_name(root),
        classes=tuple(reader.class_decl(n) for n in _iter_type_declarations(root)),
    )


def _iter_type_declarations(node: Node) -> Iterator[Node]:
    # local and nested classes included, in source order
    if node.type in _TYPE_DECLARATIONS:
        yield node
    for child in node.named_children:
        yield from _iter_type_declarations(child)


def _find_child(node: Node, *types: str) -> Optional[Node]:
    for child in node.children:
        if child.type in types:
            return child
    return None


class _Reader:
    def __init__(self, source: bytes) -> None:
        self.source = source

    def text(self, node: Optional[Node]) -> str:
        if node is None:
            return ""
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def type_text(self, node: Optional[Node]) -> str:
        # collapse line breaks inside long generic signatures
        return " ".join(self.text(node).split())

    # ----------------------------
    # Declarations
    # ----------------------------

    def package_name(self, root: Node) -> str:
        pkg = _find_child(root, "package_declaration")
        if pkg is None:
            return ""
        return self.text(_find_child(pkg, "scoped_identifier", "identifier"))

    def class_decl(self, node: Node) -> ClassDecl:
        body = node.child_by_field_name("body")
        members = body.named_children if body is not None else []
        return ClassDecl(
            name=self.text(node.child_by_field_name("name")),
            kind="interface" if node.type == "interface_declaration" else "class",
            markers=self.markers(node),
            methods=tuple(self.method_decl(m) for m in members if m.type == "method_declaration"),
            fields=tuple(self.field_decl(f) for f in members if f.type in _FIELD_DECLARATIONS),
            line=node.start_point[0] + 1,
        )

    def method_decl(self, node: Node) -> MethodDecl:
        params = node.child_by_field_name("parameters")
        throws = _find_child(node, "throws")
        return MethodDecl(
            name=self.text(node.child_by_field_name("name")),
            return_type=self.type_text(node.child_by_field_name("type")),
            parameters=tuple(self.params(params)) if params is not None else (),
            throws=tuple(self.type_text(t) for t in throws.named_children) if throws is not None else (),
            markers=self.markers(node),
            line=node.start_point[0] + 1,
        )

    def params(self, node: Node) -> Iterable[ParamDecl]:
        for p in node.named_children:
            if p.type == "formal_parameter":
                type_text = self.type_text(p.child_by_field_name("type"))
                dims = p.child_by_field_name("dimensions")
                if dims is not None:
                    type_text += self.type_text(dims)
                yield ParamDecl(
                    name=self.text(p.child_by_field_name("name")),
                    type=type_text,
                    markers=self.markers(p),
                )
            elif p.type == "spread_parameter":
                # String... names
                declarator = _find_child(p, "variable_declarator")
                type_node = next(
                    (c for c in p.named_children if c.type not in ("modifiers", "variable_declarator")),
                    None,
                )
                yield ParamDecl(
                    name=self.text(declarator.child_by_field_name("name")) if declarator is not None else "",
                    type=self.type_text(type_node),
                    markers=self.markers(p),
                )

    def field_decl(self, node: Node) -> FieldDecl:
        type_node = node.child_by_field_name("type")
        if type_node is not None and type_node.type == "array_type":
            type_node = type_node.child_by_field_name("element")

        names = tuple(
            self.text(d.child_by_field_name("name"))
            for d in node.children_by_field_name("declarator")
        )
        return FieldDecl(
            names=names,
            type=self.type_text(type_node),
            markers=self.markers(node),
            doc=self.javadoc_before(node),
        )

    def javadoc_before(self, node: Node) -> str:
        prev = node.prev_named_sibling
        if prev is not None and prev.type in _COMMENT_TYPES:
            text = self.text(prev)
            if text.startswith("/**"):
                return text
        return ""

    # ----------------------------
    # Annotations
    # ----------------------------

    def markers(self, node: Node) -> tuple[Marker, ...]:
        modifiers = _find_child(node, "modifiers")
        if modifiers is None:
            return ()
        out: list[Marker] = []
        for child in modifiers.named_children:
            if child.type in ("marker_annotation", "annotation"):
                out.append(self.marker(child))
        return tuple(out)

    def marker(self, node: Node) -> Marker:
        # @org.springframework...GetMapping is classified by its simple name
        name = self.text(node.child_by_field_name("name")).rsplit(".", 1)[-1]
        arguments: dict[str, AnnotationArg] = {}

        arg_list = node.child_by_field_name("arguments")
        if arg_list is not None:
            for arg in arg_list.named_children:
                if arg.type == "element_value_pair":
                    key = self.text(arg.child_by_field_name("key"))
                    value = arg.child_by_field_name("value")
                    if key and value is not None:
                        arguments.setdefault(key, self.annotation_arg(value))
                elif arg.type not in _COMMENT_TYPES and "value" not in arguments:
                    arguments["value"] = self.annotation_arg(arg)

        return Marker.of(name, arguments)

    def annotation_arg(self, node: Node) -> AnnotationArg:
        text = self.text(node)
        if node.type == "string_literal":
            return AnnotationArg(text=text, string=self.string_value(node))
        if node.type == "element_value_array_initializer":
            items = tuple(
                self.annotation_arg(c) for c in node.named_children if c.type not in _COMMENT_TYPES
            )
            return AnnotationArg(text=text, items=items, is_array=True)
        return AnnotationArg(text=text)

    def string_value(self, node: Node) -> str:
        parts = [c for c in node.named_children if c.type in ("string_fragment", "escape_sequence", "multiline_string_fragment")]
        if not parts:
            text = self.text(node)
            quote = '"""' if text.startswith('"""') else '"'
            return text[len(quote):-len(quote)] if len(text) >= 2 * len(quote) else ""

        out: list[str] = []
        for part in parts:
            chunk = self.text(part)
            if part.type == "escape_sequence":
                chunk = _ESCAPES.get(chunk[1:], chunk[1:]) if len(chunk) == 2 else chunk
            out.append(chunk)
        return "".join(out)
