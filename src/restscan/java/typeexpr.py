from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum


class ParseMode(str, Enum):
    DTO_EXTRACTION = "dto_extraction"
    FIELD_NORMALIZATION = "field_normalization"
    CLASS_NAME_ONLY = "class_name_only"


@dataclass(frozen=True)
class TypeParseResult:
    base_type: str
    type_arguments: list[str] = field(default_factory=list)


_FALLBACK_TYPE = "Object"
_BUILTIN_PREFIXES = ("java.lang.", "java.util.")
# type-use annotations and wildcard bounds in front of a type: "@Valid X", "? extends X"
_TYPE_PREFIX = re.compile(r"^(?:@[\w.]+(?:\([^)]*\))?\s*|\?\s+(?:extends|super)\s+)+")


def parse_type(expr: str | None, mode: ParseMode = ParseMode.CLASS_NAME_ONLY) -> TypeParseResult:
    """
    Split a Java type expression into its base type and type arguments.

      "ResponseEntity<List<UserDto>>" -> ("ResponseEntity", ["List<UserDto>"])
      "com.acme.UserDto"              -> ("UserDto", [])

    Arguments are split on every comma between the outer brackets; nested
    generics are handled by callers recursing on each argument.
    """
    if not expr:
        return TypeParseResult(_FALLBACK_TYPE, [])

    if "<" in expr and ">" in expr:
        return _parse_generic(expr, mode)

    return _parse_simple(expr, mode)


def class_name_of(expr: str | None) -> str:
    return parse_type(expr, ParseMode.CLASS_NAME_ONLY).base_type


def normalize_type(expr: str | None) -> str:
    return parse_type(expr, ParseMode.FIELD_NORMALIZATION).base_type


def _parse_generic(expr: str, mode: ParseMode) -> TypeParseResult:
    open_at = expr.index("<")
    base = _bare(expr[:open_at])
    args = _split_arguments(expr[open_at + 1 : expr.rindex(">")])

    if mode is ParseMode.FIELD_NORMALIZATION:
        return _normalize_generic(base, args)
    if mode is ParseMode.CLASS_NAME_ONLY:
        return TypeParseResult(_strip_qualifier(base), args)
    return TypeParseResult(base, args)


def _parse_simple(expr: str, mode: ParseMode) -> TypeParseResult:
    expr = _bare(expr)
    if mode is ParseMode.FIELD_NORMALIZATION:
        return TypeParseResult(_normalize_simple(expr), [])
    return TypeParseResult(_strip_qualifier(expr), [])


def _normalize_generic(base: str, args: list[str]) -> TypeParseResult:
    normalized = _normalize_simple(base)

    if normalized in ("List", "Set", "Optional"):
        element = class_name_of(args[0]) if args else _FALLBACK_TYPE
        return TypeParseResult(f"{normalized}<{element}>", args)

    if normalized == "Map":
        # key/value types are not kept
        return TypeParseResult("Map<String, Object>", args)

    return TypeParseResult(normalized, args)


def _normalize_simple(name: str) -> str:
    for prefix in _BUILTIN_PREFIXES:
        if name.startswith(prefix):
            return name[len(prefix):]
    return _strip_qualifier(name)


def _bare(expr: str) -> str:
    return _TYPE_PREFIX.sub("", expr.strip())


def _strip_qualifier(name: str) -> str:
    if "." in name:
        return name[name.rindex(".") + 1 :]
    return name


def _split_arguments(content: str) -> list[str]:
    out: list[str] = []
    for part in content.split(","):
        part = part.strip()
        if part:
            out.append(part)
    return out
