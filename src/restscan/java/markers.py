from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class MarkerKind(str, Enum):
    """Every annotation the extractors care about, classified once by name."""

    CONTROLLER = "controller"            # @RestController, @Controller
    VERB_MAPPING = "verb_mapping"        # @GetMapping, @PostMapping, ...
    REQUEST_MAPPING = "request_mapping"  # @RequestMapping (any verb)
    REQUEST_BODY = "request_body"
    PATH_VARIABLE = "path_variable"
    REQUEST_HEADER = "request_header"
    REQUEST_PARAM = "request_param"
    VALID = "valid"
    REQUIRED_CONSTRAINT = "required_constraint"  # @NotNull, @NotBlank, @NotEmpty
    REQUIRED = "required"                        # @Required, not a validation marker
    CONSTRAINT = "constraint"                    # @Size, @Min, @Pattern, ...
    SCHEMA = "schema"                            # @Schema(description=...)
    API_MODEL_PROPERTY = "api_model_property"    # @ApiModelProperty("...")
    OTHER = "other"


_KINDS_BY_NAME: dict[str, MarkerKind] = {
    "RestController": MarkerKind.CONTROLLER,
    "Controller": MarkerKind.CONTROLLER,
    "GetMapping": MarkerKind.VERB_MAPPING,
    "PostMapping": MarkerKind.VERB_MAPPING,
    "PutMapping": MarkerKind.VERB_MAPPING,
    "DeleteMapping": MarkerKind.VERB_MAPPING,
    "PatchMapping": MarkerKind.VERB_MAPPING,
    "RequestMapping": MarkerKind.REQUEST_MAPPING,
    "RequestBody": MarkerKind.REQUEST_BODY,
    "PathVariable": MarkerKind.PATH_VARIABLE,
    "RequestHeader": MarkerKind.REQUEST_HEADER,
    "RequestParam": MarkerKind.REQUEST_PARAM,
    "Valid": MarkerKind.VALID,
    "NotNull": MarkerKind.REQUIRED_CONSTRAINT,
    "NotBlank": MarkerKind.REQUIRED_CONSTRAINT,
    "NotEmpty": MarkerKind.REQUIRED_CONSTRAINT,
    "Required": MarkerKind.REQUIRED,
    "Size": MarkerKind.CONSTRAINT,
    "Min": MarkerKind.CONSTRAINT,
    "Max": MarkerKind.CONSTRAINT,
    "Email": MarkerKind.CONSTRAINT,
    "Pattern": MarkerKind.CONSTRAINT,
    "DecimalMin": MarkerKind.CONSTRAINT,
    "DecimalMax": MarkerKind.CONSTRAINT,
    "Digits": MarkerKind.CONSTRAINT,
    "Future": MarkerKind.CONSTRAINT,
    "Past": MarkerKind.CONSTRAINT,
    "AssertTrue": MarkerKind.CONSTRAINT,
    "AssertFalse": MarkerKind.CONSTRAINT,
    "Schema": MarkerKind.SCHEMA,
    "ApiModelProperty": MarkerKind.API_MODEL_PROPERTY,
}

HANDLER_KINDS = frozenset({MarkerKind.VERB_MAPPING, MarkerKind.REQUEST_MAPPING})
BINDING_KINDS = frozenset(
    {
        MarkerKind.REQUEST_BODY,
        MarkerKind.PATH_VARIABLE,
        MarkerKind.REQUEST_HEADER,
        MarkerKind.REQUEST_PARAM,
    }
)
VALIDATION_KINDS = frozenset(
    {MarkerKind.VALID, MarkerKind.REQUIRED_CONSTRAINT, MarkerKind.CONSTRAINT}
)
REQUIRING_KINDS = frozenset({MarkerKind.REQUIRED_CONSTRAINT, MarkerKind.REQUIRED})


def classify_marker(name: str) -> MarkerKind:
    return _KINDS_BY_NAME.get(name, MarkerKind.OTHER)


@dataclass(frozen=True)
class AnnotationArg:
    """
    One annotation argument value.

    `text` is the source text as written. `string` is set only for string
    literals; `items` only for `{...}` array initializers.
    """

    text: str
    string: Optional[str] = None
    items: tuple["AnnotationArg", ...] = ()
    is_array: bool = False

    def first_string(self) -> Optional[str]:
        if self.is_array:
            for item in self.items:
                if item.string is not None:
                    return item.string
            return None
        return self.string

    def to_json(self) -> Any:
        if self.is_array:
            return [item.to_json() for item in self.items]
        if self.string is not None:
            return self.string
        return self.text


@dataclass(frozen=True)
class Marker:
    name: str
    kind: MarkerKind
    # A single unnamed argument is stored under "value", as Java defines it.
    arguments: dict[str, AnnotationArg] = field(default_factory=dict)

    @classmethod
    def of(cls, name: str, arguments: Optional[dict[str, AnnotationArg]] = None) -> "Marker":
        return cls(name=name, kind=classify_marker(name), arguments=dict(arguments or {}))

    def string_attr(self, *names: str) -> str:
        """First string-literal value among `names`, or "" when none is usable."""
        for name in names:
            arg = self.arguments.get(name)
            if arg is None:
                continue
            value = arg.first_string()
            if value is not None:
                return value
        return ""

    def metadata(self) -> dict[str, Any]:
        return {k: v.to_json() for k, v in self.arguments.items()}


def first_of(markers: tuple[Marker, ...] | list[Marker], kinds: frozenset[MarkerKind]) -> Optional[Marker]:
    for m in markers:
        if m.kind in kinds:
            return m
    return None


def has_kind(markers: tuple[Marker, ...] | list[Marker], kind: MarkerKind) -> bool:
    return any(m.kind is kind for m in markers)


def unrecognized_metadata(markers: tuple[Marker, ...] | list[Marker]) -> dict[str, Any]:
    """Annotations outside the recognised set, keyed by name (first one wins)."""
    out: dict[str, Any] = {}
    for m in markers:
        if m.kind is MarkerKind.OTHER and m.name not in out:
            out[m.name] = m.metadata()
    return out
