from __future__ import annotations

from enum import Enum
from pathlib import Path

from restscan.java.markers import MarkerKind, has_kind
from restscan.java.syntax import ClassDecl
from restscan.settings import DEFAULT_SHAPE_SUFFIXES


class DeclarationKind(str, Enum):
    ROUTABLE = "routable"
    DATA_SHAPE = "data_shape"
    SKIP = "skip"


def is_shape_name(name: str, suffixes: tuple[str, ...] = DEFAULT_SHAPE_SUFFIXES) -> bool:
    """UserDto, CreateUserRequest, LoginRes, ... (case-sensitive suffix match)."""
    return name.endswith(suffixes)


def is_data_shape_file(path: str | Path, suffixes: tuple[str, ...] = DEFAULT_SHAPE_SUFFIXES) -> bool:
    # decided from the file name alone, before the body is looked at
    return is_shape_name(Path(path).stem, suffixes)


def classify_declaration(decl: ClassDecl, data_shape_source: bool) -> DeclarationKind:
    if data_shape_source:
        return DeclarationKind.DATA_SHAPE
    if has_kind(decl.markers, MarkerKind.CONTROLLER):
        return DeclarationKind.ROUTABLE
    return DeclarationKind.SKIP


def classify_file(
    path: str | Path,
    classes: tuple[ClassDecl, ...],
    suffixes: tuple[str, ...] = DEFAULT_SHAPE_SUFFIXES,
) -> list[tuple[DeclarationKind, ClassDecl]]:
    """Kind of every declaration in one file, skipped ones left out."""
    shape_source = is_data_shape_file(path, suffixes)
    out: list[tuple[DeclarationKind, ClassDecl]] = []
    for decl in classes:
        kind = classify_declaration(decl, shape_source)
        if kind is not DeclarationKind.SKIP:
            out.append((kind, decl))
    return out
