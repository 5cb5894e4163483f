"""
Descriptors produced by the builders and consumed by the code emitter.

All descriptors are frozen and hold tuples, so a descriptor cannot change
between the moment it is built and the moment it is rendered.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, TypeAlias

FORM_DATA_TYPE: Final = "FormData"
VOID_TYPE: Final = "Void"
NEVER_TYPE: Final = "Never"


class WireHint(Enum):
    """How a mapped value is represented on the wire."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ENUM = "enum"
    ARRAY = "array"
    DICTIONARY = "dictionary"
    MODEL = "model"
    FILE = "file"


class BodyEncoding(Enum):
    JSON = "json"
    MULTIPART = "multipart"


class ParameterLocation(Enum):
    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    BODY = "body"
    FORM_DATA = "formData"


@dataclass(frozen=True)
class MappedType:
    """Result of mapping a schema to a Swift type."""

    base_type: str
    hint: WireHint
    required: bool = True
    item_hint: WireHint | None = None

    @property
    def type_name(self) -> str:
        """The Swift type, wrapped as optional when not required."""
        return self.base_type if self.required else f"{self.base_type}?"


@dataclass(frozen=True)
class Field:
    """A stored property of a generated model."""

    name: str
    type_name: str
    required: bool
    swift_name: str
    description: str | None = None


@dataclass(frozen=True)
class Enumeration:
    """A string-backed Swift enum."""

    service_name: str
    type_name: str
    values: tuple[str, ...]
    description: str | None = None


@dataclass(frozen=True)
class Model:
    """A Codable Swift struct."""

    type_name: str
    fields: tuple[Field, ...]
    description: str | None = None


ModelDefinition: TypeAlias = Enumeration | Model


@dataclass(frozen=True)
class FunctionParameter:
    """An argument of a generated network function.

    ``value_expr`` is only set for form fields that are not files: the
    Swift expression yielding the text sent as the part's content.
    """

    name: str
    type_name: str
    required: bool
    wire_name: str
    location: ParameterLocation
    description: str | None = None
    value_expr: str | None = None

    @property
    def is_file(self) -> bool:
        return self.type_name == FORM_DATA_TYPE


@dataclass(frozen=True)
class HeaderField:
    """A header attached to a request.

    ``model_field_name`` is the Swift identifier holding the value, while
    ``wire_name`` is the header as sent, e.g. ``xos`` and ``x-OS``.
    """

    required: bool
    model_field_name: str
    wire_name: str
    value_expr: str


@dataclass(frozen=True)
class QueryElement:
    field_name: str
    field_value_expr: str
    is_optional: bool
    parameter_name: str


@dataclass(frozen=True)
class ResponseType:
    status_code: int
    payload_type: str | None = None
    description: str | None = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class NetworkFunction:
    """Everything needed to render one network request function."""

    function_name: str
    parameters: tuple[FunctionParameter, ...]
    http_method: str
    service_path: str
    body_encoding: BodyEncoding
    queries: tuple[QueryElement, ...]
    headers: tuple[HeaderField, ...]
    response_types: tuple[ResponseType, ...]
    success_type: str = VOID_TYPE
    error_type: str = NEVER_TYPE
    throws_on_failure: bool = False
    is_internal_only: bool = False
    is_deprecated: bool = False
    description: str | None = None

    @property
    def body_parameter(self) -> FunctionParameter | None:
        return next((p for p in self.parameters if p.location is ParameterLocation.BODY), None)

    @property
    def form_data_parameters(self) -> tuple[FunctionParameter, ...]:
        """Parameters sent as multipart parts, in declaration order."""
        return tuple(p for p in self.parameters if p.location is ParameterLocation.FORM_DATA)

    @property
    def is_multipart(self) -> bool:
        return self.body_encoding is BodyEncoding.MULTIPART

    @property
    def success_payload_type(self) -> str:
        """Type decoded from a success payload, without the optional marker."""
        return self.success_type.removesuffix("?")

    @property
    def has_optional_success(self) -> bool:
        """Whether some documented success status carries no payload."""
        return self.success_type.endswith("?")

    @property
    def error_responses(self) -> tuple[ResponseType, ...]:
        return tuple(r for r in self.response_types if not r.is_success)


@dataclass(frozen=True)
class ServiceDefinition:
    """The generated client type of one document."""

    service_name: str
    type_name: str
    file_prefix: str
    global_headers: tuple[HeaderField, ...]
    functions: tuple[NetworkFunction, ...]
    models: tuple[ModelDefinition, ...]
    description: str | None = None
