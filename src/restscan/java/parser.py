"""
Tree-sitter parser wrapper for Java sources.

Only syntax is needed: nothing is compiled, imported or executed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import tree_sitter_java
from tree_sitter import Language, Node, Parser, Tree

from restscan.exceptions import ParseFailure, SourceReadError
from restscan.logging_config import get_logger

logger = get_logger("java.parser")


class JavaParser:
    """Lazily builds one tree-sitter parser and reuses it for every file."""

    def __init__(self) -> None:
        self._parser: Optional[Parser] = None

    def _get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = Parser(Language(tree_sitter_java.language()))
        return self._parser

    def parse(self, source: str | bytes, origin: str = "<source>") -> Tree:
        """
        Parse Java source into a syntax tree.

        tree-sitter always returns a tree; one that contains ERROR or
        MISSING nodes is treated as a failed parse.
        """
        data = source.encode("utf-8") if isinstance(source, str) else source
        tree = self._get_parser().parse(data)

        if tree.root_node.has_error:
            line = _first_error_line(tree.root_node)
            raise ParseFailure(
                f"Syntax error in {origin}",
                details={"line": line} if line else None,
            )
        return tree

    def parse_file(self, path: Path) -> tuple[Tree, bytes]:
        try:
            data = path.read_bytes()
        except OSError as e:
            raise SourceReadError(f"Cannot read {path}: {e}") from e

        logger.debug(f"Parsing {path} ({len(data)} bytes)")
        return self.parse(data, origin=str(path)), data


def _first_error_line(node: Node) -> int:
    if node.type == "ERROR" or node.is_missing:
        return node.start_point[0] + 1
    for child in node.children:
        if child.has_error:
            line = _first_error_line(child)
            if line:
                return line
    return 0


_default_parser: Optional[JavaParser] = None


def get_parser() -> JavaParser:
    """Process-wide parser instance."""
    global _default_parser
    if _default_parser is None:
        _default_parser = JavaParser()
    return _default_parser
