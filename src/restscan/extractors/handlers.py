from __future__ import annotations

from typing import Optional

from restscan.domain.models import Handler, Parameter, RouteGroup
from restscan.java.markers import (
    BINDING_KINDS,
    HANDLER_KINDS,
    VALIDATION_KINDS,
    Marker,
    MarkerKind,
    first_of,
    has_kind,
    unrecognized_metadata,
)
from restscan.java.syntax import ClassDecl, MethodDecl, ParamDecl

_DEFAULT_VERB = "GET"
_KNOWN_VERBS = {"GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD", "TRACE"}
_MAPPING_SUFFIX = "Mapping"

# body > path > header > query
_BINDING_PRIORITY = (
    (MarkerKind.REQUEST_BODY, "body"),
    (MarkerKind.PATH_VARIABLE, "path"),
    (MarkerKind.REQUEST_HEADER, "header"),
)
_REQUIRED_BINDINGS = frozenset({MarkerKind.REQUEST_BODY, MarkerKind.PATH_VARIABLE})


def extract_route_group(decl: ClassDecl, package_name: str = "") -> RouteGroup:
    prefix_marker = first_of(decl.markers, frozenset({MarkerKind.REQUEST_MAPPING}))
    return RouteGroup(
        name=decl.name,
        package_name=package_name,
        request_mapping=_marker_path(prefix_marker),
        handlers=extract_handlers(decl),
        existing_annotations=unrecognized_metadata(decl.markers),
    )


def extract_handlers(decl: ClassDecl) -> list[Handler]:
    return [extract_handler(m) for m in decl.methods if is_handler(m)]


def is_handler(method: MethodDecl) -> bool:
    return first_of(method.markers, HANDLER_KINDS) is not None


def extract_handler(method: MethodDecl) -> Handler:
    mapping = first_of(method.markers, HANDLER_KINDS)
    return Handler(
        method_name=method.name,
        http_method=http_verb(mapping),
        path=_marker_path(mapping),
        parameters=[extract_parameter(p) for p in method.parameters],
        return_type=method.return_type,
        exceptions=list(method.throws),
        line_number=method.line,
        existing_annotations=unrecognized_metadata(method.markers),
    )


def http_verb(mapping: Optional[Marker]) -> str:
    """
    @PostMapping -> POST. @RequestMapping reads its `method` attribute
    (RequestMethod.PUT, or the first entry of an array) and falls back to GET.
    """
    if mapping is None:
        return _DEFAULT_VERB

    if mapping.kind is MarkerKind.VERB_MAPPING:
        return mapping.name[: -len(_MAPPING_SUFFIX)].upper()

    arg = mapping.arguments.get("method")
    if arg is None:
        return _DEFAULT_VERB
    if arg.is_array:
        if not arg.items:
            return _DEFAULT_VERB
        arg = arg.items[0]

    verb = arg.text.rsplit(".", 1)[-1].strip().upper()
    return verb if verb in _KNOWN_VERBS else _DEFAULT_VERB


def extract_parameter(param: ParamDecl) -> Parameter:
    return Parameter(
        name=param.name,
        type=param.type,
        location=binding_location(param),
        required=any(m.kind in _REQUIRED_BINDINGS for m in param.markers),
        validation_annotations=[
            m.name for m in param.markers if m.kind in BINDING_KINDS or m.kind in VALIDATION_KINDS
        ],
    )


def binding_location(param: ParamDecl) -> str:
    for kind, location in _BINDING_PRIORITY:
        if has_kind(param.markers, kind):
            return location
    return "query"


def _marker_path(marker: Optional[Marker]) -> str:
    if marker is None:
        return ""
    return marker.string_attr("value", "path")
