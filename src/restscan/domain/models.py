from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD", "TRACE"]
BindingLocation = Literal["body", "path", "header", "query"]


class _Model(BaseModel):
    # JSON uses camelCase, Python uses snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Parameter(_Model):
    name: str
    type: str
    location: BindingLocation = Field(default="query", alias="in")
    required: bool = False
    validation_annotations: list[str] = Field(default_factory=list)


class Handler(_Model):
    method_name: str
    http_method: HttpMethod = "GET"
    path: str = ""
    parameters: list[Parameter] = Field(default_factory=list)
    return_type: str = ""
    exceptions: list[str] = Field(default_factory=list)
    line_number: int = 0
    existing_annotations: dict[str, Any] = Field(default_factory=dict)


class RouteGroup(_Model):
    name: str = Field(alias="className")
    package_name: str = ""
    request_mapping: str = ""
    handlers: list[Handler] = Field(default_factory=list, alias="methods")
    existing_annotations: dict[str, Any] = Field(default_factory=dict)


class ShapeField(_Model):
    name: str
    type: str
    validation_annotations: list[str] = Field(default_factory=list)
    description: str = ""
    required: bool = False


class DataShape(_Model):
    class_name: str
    fields: list[ShapeField] = Field(default_factory=list)
    file_path: str = ""
    existing_annotations: dict[str, Any] = Field(default_factory=dict)


class ExtractionResult(_Model):
    controllers: list[RouteGroup] = Field(default_factory=list)
    data_shapes: list[DataShape] = Field(default_factory=list)
    extracted_at: str = ""
    total_methods: int = 0
    total_data_shapes: int = 0

    @classmethod
    def build(cls, controllers: Iterable[RouteGroup], data_shapes: Iterable[DataShape]) -> "ExtractionResult":
        controllers = list(controllers)
        data_shapes = list(data_shapes)
        return cls(
            controllers=controllers,
            data_shapes=data_shapes,
            extracted_at=datetime.now(timezone.utc).isoformat(),
            total_methods=sum(len(c.handlers) for c in controllers),
            total_data_shapes=len(data_shapes),
        )

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)
