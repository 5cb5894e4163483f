"""
Network function construction.

Turns every operation of a document into a ``NetworkFunction``
descriptor: the Swift parameters, the query and header plans, the body
encoding and the response dispatch table.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any, Final

from swift_oas_generator.errors import UnsupportedTypeError
from swift_oas_generator.gen_logging import get_logger
from swift_oas_generator.parser.descriptors import (
    NEVER_TYPE,
    VOID_TYPE,
    BodyEncoding,
    FunctionParameter,
    HeaderField,
    MappedType,
    NetworkFunction,
    ParameterLocation,
    QueryElement,
    ResponseType,
    WireHint,
)
from swift_oas_generator.parser.document import OperationEntry
from swift_oas_generator.parser.model_builder import ModelBuilder
from swift_oas_generator.parser.resolver import ReferenceResolver, is_reference
from swift_oas_generator.parser.type_mapper import TypeMapper, nested_type_name
from swift_oas_generator.utils.string_case import pascalcase, swift_header_field_name, swift_identifier

logger = get_logger(__name__)

BODY_PARAMETER_NAME: Final = "body"

# Identifiers the rendered function declares itself
RESERVED_PARAMETER_NAMES: Final = frozenset(
    {
        "boundary",
        "completionHandler",
        "endpointUrl",
        "globalHeaders",
        "queryItems",
        "request",
        "requestData",
        "task",
        "urlComponents",
    }
)

_PATH_PLACEHOLDER_PATTERN: Final = re.compile(r"\{([^}]+)\}")

# Swift closures turning one array element into its textual query value
_ARRAY_ITEM_EXPRESSIONS: Final = {
    WireHint.NUMBER: "String($0)",
    WireHint.BOOLEAN: '$0 ? "true" : "false"',
    WireHint.ENUM: "$0.rawValue",
    WireHint.DATE: "ISO8601DateFormatter().string(from: $0)",
}


def global_header_fields(names: Iterable[str]) -> tuple[HeaderField, ...]:
    """Header fields provided by the service's shared header provider."""
    fields = []
    for name in names:
        model_field_name = swift_header_field_name(name)
        fields.append(
            HeaderField(
                required=True,
                model_field_name=model_field_name,
                wire_name=name,
                value_expr=f"globalHeaders.{model_field_name}",
            )
        )
    return tuple(fields)


def is_json_consumption(media_types: Iterable[str]) -> bool:
    """Check whether a ``consumes`` list selects a JSON request body.

    An empty list means the Swagger default, JSON.
    """
    media_types = list(media_types)
    return not media_types or any("json" in media_type.lower() for media_type in media_types)


def _unique_name(name: str, location: ParameterLocation, used_names: set[str]) -> str:
    """Claim a Swift parameter name, suffixing the location and then a counter on clashes."""
    if name in used_names:
        base = f"{name.strip('`')}{pascalcase(location.value)}"
        name = base
        counter = 1
        while name in used_names:
            counter += 1
            name = f"{base}{counter}"
    used_names.add(name)
    return name


def _escape_pointer(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def _describe(operation: Mapping[str, Any]) -> str | None:
    parts = [text.strip() for text in (operation.get("summary"), operation.get("description")) if text]
    return "\n\n".join(parts) or None


class EndpointBuilder:
    """Builds the network functions of one service."""

    def __init__(
        self,
        resolver: ReferenceResolver,
        type_mapper: TypeMapper,
        model_builder: ModelBuilder,
        global_headers: Iterable[str] = (),
    ) -> None:
        self.resolver = resolver
        self.type_mapper = type_mapper
        self.model_builder = model_builder
        self.global_headers = tuple(global_headers)
        self._global_header_keys = frozenset(name.lower() for name in self.global_headers)

    @property
    def service_name(self) -> str:
        return self.resolver.service_name

    def build_all(self) -> tuple[NetworkFunction, ...]:
        """Build one network function per operation, in document order."""
        entries = list(self.resolver.document.operations())
        names = self._function_names(entries)
        return tuple(self.build(entry, name) for entry, name in zip(entries, names, strict=True))

    def build(self, entry: OperationEntry, function_name: str) -> NetworkFunction:
        """Build the network function of a single operation."""
        operation = entry.operation
        type_prefix = pascalcase(function_name)
        source = f"#/paths/{_escape_pointer(entry.path)}/{entry.method}"

        parameters: list[FunctionParameter] = []
        queries: list[QueryElement] = []
        headers: list[HeaderField] = []
        path_expressions: dict[str, str] = {}
        used_names = set(RESERVED_PARAMETER_NAMES)

        for parameter in self._merged_parameters(entry):
            wire_name = str(parameter.get("name", ""))
            location = self._location(parameter, source)

            if location is ParameterLocation.HEADER and wire_name.lower() in self._global_header_keys:
                continue

            required = location is ParameterLocation.PATH or bool(parameter.get("required", False))
            mapped = self._map_parameter(parameter, location, required, type_prefix, f"{source}/parameters/{wire_name}")

            match location:
                case ParameterLocation.BODY:
                    name = BODY_PARAMETER_NAME
                case ParameterLocation.HEADER:
                    name = swift_header_field_name(wire_name)
                case _:
                    name = swift_identifier(wire_name)
            name = _unique_name(name, location, used_names)

            value_expr = None
            if location is ParameterLocation.FORM_DATA and mapped.hint is not WireHint.FILE:
                value_expr = self._string_expression(name, mapped, query=False)

            parameters.append(
                FunctionParameter(
                    name=name,
                    type_name=mapped.base_type,
                    required=required,
                    wire_name=wire_name,
                    location=location,
                    description=parameter.get("description"),
                    value_expr=value_expr,
                )
            )

            match location:
                case ParameterLocation.QUERY:
                    queries.append(
                        QueryElement(
                            field_name=wire_name,
                            field_value_expr=self._string_expression(name, mapped, query=True),
                            is_optional=not required,
                            parameter_name=name,
                        )
                    )
                case ParameterLocation.HEADER:
                    headers.append(
                        HeaderField(
                            required=required,
                            model_field_name=name,
                            wire_name=wire_name,
                            value_expr=self._string_expression(name, mapped, query=False),
                        )
                    )
                case ParameterLocation.PATH:
                    path_expressions[wire_name] = self._string_expression(name, mapped, query=False)

        consumes = operation.get("consumes") or self.resolver.document.consumes
        body_encoding = BodyEncoding.JSON if is_json_consumption(consumes) else BodyEncoding.MULTIPART
        has_json_body = body_encoding is BodyEncoding.JSON and any(
            p.location is ParameterLocation.BODY for p in parameters
        )
        self._warn_unsent_parameters(entry, body_encoding, parameters)

        response_types = self._response_types(operation, type_prefix, source)
        success_type = next(
            (r.payload_type for r in response_types if r.is_success and r.payload_type is not None),
            VOID_TYPE,
        )
        if success_type != VOID_TYPE and any(r.is_success and r.payload_type is None for r in response_types):
            # A success status without a payload completes with nil
            success_type = f"{success_type}?"
        error_type = NEVER_TYPE
        if any(not r.is_success for r in response_types):
            error_type = f"{type_prefix}Error"
            self.model_builder.reserve(error_type, f"{source}/responses")

        function = NetworkFunction(
            function_name=function_name,
            parameters=tuple(parameters),
            http_method=entry.method.upper(),
            service_path=self._service_path(entry.path, path_expressions),
            body_encoding=body_encoding,
            queries=tuple(queries),
            headers=tuple(headers),
            response_types=response_types,
            success_type=success_type,
            error_type=error_type,
            throws_on_failure=has_json_body,
            is_internal_only=bool(operation.get("x-internal", False)),
            is_deprecated=bool(operation.get("deprecated", False)),
            description=_describe(operation),
        )
        logger.debug("Built %s %s %s", function.http_method, entry.path, function_name)
        return function

    def _warn_unsent_parameters(
        self,
        entry: OperationEntry,
        body_encoding: BodyEncoding,
        parameters: list[FunctionParameter],
    ) -> None:
        """Report parameters the selected body encoding leaves out of the request."""
        unsent_location = ParameterLocation.FORM_DATA if body_encoding is BodyEncoding.JSON else ParameterLocation.BODY
        unsent = [p.wire_name for p in parameters if p.location is unsent_location]
        if unsent:
            logger.warning(
                "%s %s: %s parameters %s are not sent with a %s body",
                entry.method.upper(),
                entry.path,
                unsent_location.value,
                ", ".join(unsent),
                body_encoding.value,
            )

    def _function_names(self, entries: list[OperationEntry]) -> list[str]:
        """Name every operation, keeping names unique within the service."""
        names = []
        for entry in entries:
            operation_id = entry.operation.get("operationId")
            if operation_id:
                names.append(swift_identifier(str(operation_id)))
            else:
                segments = [segment.strip("{}") for segment in entry.path.split("/") if segment]
                names.append(swift_identifier("_".join([entry.method, *segments])))

        # Append the method to repeated names, then a counter for what still collides
        counts: dict[str, int] = {}
        for name in names:
            counts[name] = counts.get(name, 0) + 1
        names = [
            f"{name}{pascalcase(entry.method)}" if counts[name] > 1 else name
            for name, entry in zip(names, entries, strict=True)
        ]

        seen: dict[str, int] = {}
        unique = []
        for name in names:
            if name in seen:
                seen[name] += 1
                unique.append(f"{name}{seen[name]}")
            else:
                seen[name] = 1
                unique.append(name)
        return unique

    def _merged_parameters(self, entry: OperationEntry) -> list[Mapping[str, Any]]:
        """Path-level parameters followed by the operation's, later ones replacing earlier ones."""
        merged: dict[tuple[str, str], Mapping[str, Any]] = {}
        for node in (*entry.path_parameters, *(entry.operation.get("parameters") or ())):
            parameter = self.resolver.resolve(node)
            merged[(str(parameter.get("name")), str(parameter.get("in")))] = parameter
        return list(merged.values())

    def _location(self, parameter: Mapping[str, Any], source: str) -> ParameterLocation:
        location = parameter.get("in")
        try:
            return ParameterLocation(location)
        except ValueError:
            raise UnsupportedTypeError(
                f"parameter location '{location}'",
                context=f"{source}/parameters/{parameter.get('name')}",
                service_name=self.service_name,
            ) from None

    def _map_parameter(
        self,
        parameter: Mapping[str, Any],
        location: ParameterLocation,
        required: bool,
        type_prefix: str,
        source: str,
    ) -> MappedType:
        if location is ParameterLocation.BODY:
            schema = parameter.get("schema")
            context_name = f"{type_prefix}Body"
        else:
            # Swagger 2 declares the type of non-body parameters on the parameter itself
            schema = parameter
            context_name = nested_type_name(type_prefix, str(parameter.get("name", "")))

        self.model_builder.discover(schema, context_name=context_name, source=source)
        return self.type_mapper.map_type(schema, required=required, context_name=context_name)

    def _response_types(
        self,
        operation: Mapping[str, Any],
        type_prefix: str,
        source: str,
    ) -> tuple[ResponseType, ...]:
        response_types = []
        for status, node in (operation.get("responses") or {}).items():
            status_text = str(status)
            if not status_text.isdigit():
                # "default" and friends fall through to the generic branch
                continue

            response = self.resolver.resolve_response(node)
            payload_type = None
            if response.get("schema") is not None:
                schema = node if is_reference(node) else response["schema"]
                context_name = f"{type_prefix}{status_text}Response"
                response_source = f"{source}/responses/{status_text}"
                self.model_builder.discover(schema, context_name=context_name, source=response_source)
                payload_type = self.type_mapper.map_type(schema, context_name=context_name).base_type

            response_types.append(
                ResponseType(
                    status_code=int(status_text),
                    payload_type=payload_type,
                    description=response.get("description"),
                )
            )
        return tuple(response_types)

    def _service_path(self, path: str, expressions: Mapping[str, str]) -> str:
        def replace_placeholder(match: re.Match[str]) -> str:
            name = match.group(1)
            return "{" + expressions.get(name, swift_identifier(name)) + "}"

        return self.resolver.document.base_path + _PATH_PLACEHOLDER_PATTERN.sub(replace_placeholder, path)

    def _string_expression(self, name: str, mapped: MappedType, *, query: bool) -> str:
        """Swift expression turning a parameter into its textual wire value.

        Booleans stay booleans in queries, where a dedicated ``URLQueryItem``
        initializer accepts them.
        """
        match mapped.hint:
            case WireHint.STRING:
                return name
            case WireHint.BOOLEAN:
                return name if query else f'({name} ? "true" : "false")'
            case WireHint.NUMBER:
                return f"String({name})"
            case WireHint.ENUM:
                return f"{name}.rawValue"
            case WireHint.DATE:
                return f"ISO8601DateFormatter().string(from: {name})"
            case WireHint.ARRAY if mapped.item_hint is WireHint.STRING:
                return f'{name}.joined(separator: ",")'
            case WireHint.ARRAY if mapped.item_hint in _ARRAY_ITEM_EXPRESSIONS:
                return f'{name}.map {{ {_ARRAY_ITEM_EXPRESSIONS[mapped.item_hint]} }}.joined(separator: ",")'
            case _:
                raise UnsupportedTypeError(
                    f"'{mapped.base_type}' as a textual parameter value",
                    context=name,
                    service_name=self.service_name,
                )
