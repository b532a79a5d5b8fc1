from __future__ import annotations

import os
from pathlib import Path
from typing import Container, Iterable, Optional

from restscan.domain.models import DataShape, Handler, RouteGroup
from restscan.extractors.classifier import is_shape_name
from restscan.java.typeexpr import ParseMode, class_name_of, parse_type
from restscan.logging_config import get_logger
from restscan.repo.scanner import index_files_by_name
from restscan.settings import ExtractorSettings

logger = get_logger("references")


def discover_shape_names(type_expr: str, suffixes: tuple[str, ...]) -> list[str]:
    """
    Payload class names mentioned anywhere in a type expression.

      ResponseEntity<List<UserDto>> -> ["UserDto"]
      Map<String, LoginRes>         -> ["LoginRes"]

    Depth-first, pre-order (an expression is tested before its arguments);
    each name appears once.
    """
    out: list[str] = []
    _collect(type_expr, suffixes, out)
    return out


def _collect(expr: str, suffixes: tuple[str, ...], out: list[str]) -> None:
    name = class_name_of(expr)
    if is_shape_name(name, suffixes) and name not in out:
        out.append(name)

    for arg in parse_type(expr, ParseMode.DTO_EXTRACTION).type_arguments:
        _collect(arg, suffixes, out)


def discover_references(type_expr: str, known_names: Container[str], suffixes: tuple[str, ...]) -> list[str]:
    return [n for n in discover_shape_names(type_expr, suffixes) if n not in known_names]


def handler_type_expressions(handler: Handler) -> list[str]:
    """Body parameter types first, then the return type."""
    out = [p.type for p in handler.parameters if p.location == "body"]
    if handler.return_type:
        out.append(handler.return_type)
    return out


class ShapeLocator:
    """
    Best-effort file path for a payload class that was referenced but not
    extracted from its own file:

      1. the first `<ClassName>.java` under the search root
      2. an estimated path under the configured dto directory, which may
         not exist on disk
    """

    def __init__(self, search_root: Optional[Path], settings: ExtractorSettings) -> None:
        self.search_root = search_root
        self.settings = settings
        self._index: Optional[dict[str, str]] = None

    def locate(self, class_name: str) -> str:
        filename = f"{class_name}{self.settings.source_extension}"

        found = self._files_by_name().get(filename)
        if found and os.path.isfile(found):
            return found

        estimated = self.settings.estimated_shape_path(class_name)
        logger.debug(f"{filename} not found under {self.search_root}; using {estimated}")
        return estimated

    def _files_by_name(self) -> dict[str, str]:
        if self._index is None:
            if self.search_root is not None and self.search_root.is_dir():
                self._index = index_files_by_name(self.search_root, self.settings.source_extension)
            else:
                self._index = {}
        return self._index


class ReferenceResolver:
    def __init__(self, locator: ShapeLocator) -> None:
        self.locator = locator

    @property
    def suffixes(self) -> tuple[str, ...]:
        return self.locator.settings.shape_suffixes

    def placeholders_for(self, group: RouteGroup, known_names: Container[str]) -> list[DataShape]:
        """
        Empty DataShape entries for payload classes the group's handlers use
        and that are not known yet. The caller folds them into its collection.
        """
        return self.placeholders_for_types(
            (expr for h in group.handlers for expr in handler_type_expressions(h)),
            known_names,
        )

    def placeholders_for_types(self, type_exprs: Iterable[str], known_names: Container[str]) -> list[DataShape]:
        out: list[DataShape] = []
        seen: set[str] = set()
        for expr in type_exprs:
            for name in discover_references(expr, known_names, self.suffixes):
                if name in seen:
                    continue
                seen.add(name)
                out.append(DataShape(class_name=name, fields=[], file_path=self.locator.locate(name)))
        return out
