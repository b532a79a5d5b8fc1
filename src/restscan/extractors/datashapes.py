from __future__ import annotations

from typing import Optional

from restscan.domain.models import DataShape, ShapeField
from restscan.java.markers import (
    REQUIRING_KINDS,
    VALIDATION_KINDS,
    MarkerKind,
    first_of,
    unrecognized_metadata,
)
from restscan.java.syntax import ClassDecl, FieldDecl
from restscan.java.typeexpr import normalize_type


def extract_data_shape(decl: ClassDecl, file_path: str) -> DataShape:
    return DataShape(
        class_name=decl.name,
        fields=extract_fields(decl),
        file_path=file_path,
        existing_annotations=unrecognized_metadata(decl.markers),
    )


def extract_fields(decl: ClassDecl) -> list[ShapeField]:
    out: list[ShapeField] = []
    for f in decl.fields:
        field = extract_field(f)
        if field is not None:
            out.append(field)
    return out


def extract_field(decl: FieldDecl) -> Optional[ShapeField]:
    """
    `private String a, b;` yields only `a`: the first declarator of a
    statement is the one that is described.
    """
    if not decl.names or not decl.names[0]:
        return None

    return ShapeField(
        name=decl.names[0],
        type=normalize_type(decl.type),
        validation_annotations=[m.name for m in decl.markers if m.kind in VALIDATION_KINDS],
        description=field_description(decl),
        required=any(m.kind in REQUIRING_KINDS for m in decl.markers),
    )


def field_description(decl: FieldDecl) -> str:
    schema = first_of(decl.markers, frozenset({MarkerKind.SCHEMA}))
    if schema is not None:
        text = schema.string_attr("description")
        if text:
            return text

    legacy = first_of(decl.markers, frozenset({MarkerKind.API_MODEL_PROPERTY}))
    if legacy is not None:
        text = legacy.string_attr("value")
        if text:
            return text

    return javadoc_summary(decl.doc)


def javadoc_summary(doc: str) -> str:
    """First non-empty description line of a /** ... */ comment."""
    if not doc:
        return ""

    body = doc.strip()
    if body.startswith("/**"):
        body = body[3:]
    if body.endswith("*/"):
        body = body[:-2]

    for line in body.splitlines():
        line = line.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        if line.startswith("@"):
            # block tags end the description
            break
        if line:
            return line
    return ""
