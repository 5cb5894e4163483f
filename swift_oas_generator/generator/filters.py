"""
Jinja2 filters for Swift code generation.

This module provides custom Jinja2 filters for rendering Swift source
from the model and network function descriptors.
"""

from __future__ import annotations

from collections.abc import Iterable

from swift_oas_generator.parser.descriptors import (
    Field,
    FunctionParameter,
    HeaderField,
    NetworkFunction,
    ResponseType,
    ServiceDefinition,
)
from swift_oas_generator.utils.string_case import escape_swift_keyword, swift_identifier

# Documentation patterns for Swift
_DOC_BULLET_PREFIXES = frozenset({"* ", "- ", "+ "})
_DOC_INDENT_PREFIX = "///   "
_DOC_NORMAL_PREFIX = "/// "

_SWIFT_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def swift_doc_comment(text: str | None) -> str:
    """Convert text to Swift doc comment format.

    Bullet points are indented so Xcode keeps them inside the paragraph
    they belong to.

    Example:
        >>> swift_doc_comment("Find pets")
        '/// Find pets'
        >>> swift_doc_comment("Statuses:\\n* available\\n* sold")
        '/// Statuses:\\n///   * available\\n///   * sold'
    """
    if not text:
        return ""

    result: list[str] = []
    for line in text.strip().split("\n"):
        stripped_line = line.strip()
        if not stripped_line:
            result.append("///")
            continue
        is_bullet = any(stripped_line.startswith(p) for p in _DOC_BULLET_PREFIXES)
        prefix = _DOC_INDENT_PREFIX if is_bullet else _DOC_NORMAL_PREFIX
        result.append(f"{prefix}{stripped_line}")

    return "\n".join(result)


def swift_string_literal(text: str) -> str:
    """Format text as a Swift string literal.

    Example:
        >>> swift_string_literal('say "hi"')
        '"say \\\\"hi\\\\""'
    """
    escaped = "".join(_SWIFT_STRING_ESCAPES.get(char, char) for char in text)
    return f'"{escaped}"'


def swift_optional(type_name: str, required: bool = False) -> str:
    """Wrap a Swift type as optional unless the value is required."""
    if required or type_name.endswith("?"):
        return type_name
    return f"{type_name}?"


def _unescaped(identifier: str) -> str:
    return identifier.strip("`")


def swift_path_literal(service_path: str) -> str:
    """Turn a service path with ``{expression}`` placeholders into an interpolated Swift string.

    Example:
        >>> swift_path_literal("/pets/{petId}")
        '"/pets/\\\\(petId)"'
    """
    parts: list[str] = []
    literal: list[str] = []
    expression: list[str] = []
    depth = 0

    for char in service_path:
        if char == "{":
            if depth == 0:
                parts.append(swift_string_literal("".join(literal))[1:-1])
                literal = []
            else:
                expression.append(char)
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                parts.append(f"\\({''.join(expression)})")
                expression = []
            else:
                expression.append(char)
        elif depth > 0:
            expression.append(char)
        else:
            literal.append(char)

    parts.append(swift_string_literal("".join(literal))[1:-1])
    return f'"{"".join(parts)}"'


def _argument(name: str, type_name: str, required: bool) -> str:
    if required:
        return f"{name}: {type_name}"
    return f"{name}: {swift_optional(type_name)} = nil"


def swift_function_arguments(function: NetworkFunction) -> str:
    """Render the argument list of a network function, completion handler last."""
    arguments = [_argument(p.name, p.type_name, p.required) for p in function.parameters]
    arguments.append(
        "completionHandler: @escaping "
        f"(Swift.Result<{function.success_type}, ServiceError<{function.error_type}>>) -> Void"
    )
    return ", ".join(arguments)


def swift_task_type(function: NetworkFunction) -> str:
    return "URLSessionUploadTask" if function.is_multipart else "URLSessionDataTask"


def swift_function_doc(function: NetworkFunction) -> str:
    """Doc comment of a network function, with one line per documented parameter."""
    sections = [swift_doc_comment(function.description)] if function.description else []
    documented = [p for p in function.parameters if p.description]
    if documented:
        if sections:
            sections.append("///")
        sections.extend(
            f"/// - Parameter {_unescaped(p.name)}: {' '.join(p.description.split())}"  # type: ignore[union-attr]
            for p in documented
        )
    return "\n".join(sections)


def swift_field_type(field: Field) -> str:
    return swift_optional(field.type_name, field.required)


def needs_coding_keys(fields: Iterable[Field]) -> bool:
    """Check whether any field is stored under a different name than its JSON key."""
    return any(_unescaped(field.swift_name) != field.name for field in fields)


def swift_coding_key(field: Field) -> str:
    """Render the ``CodingKeys`` case of a field.

    Example:
        >>> swift_coding_key(Field("pet-id", "Int", True, "petId"))
        'case petId = "pet-id"'
    """
    if _unescaped(field.swift_name) == field.name:
        return f"case {field.swift_name}"
    return f"case {field.swift_name} = {swift_string_literal(field.name)}"


def swift_memberwise_arguments(fields: Iterable[Field]) -> str:
    return ", ".join(_argument(f.swift_name, f.type_name, f.required) for f in fields)


def swift_enum_cases(values: Iterable[str]) -> list[str]:
    """Render the cases of a string-backed enum, keeping case names unique.

    Example:
        >>> swift_enum_cases(["available", "in-stock"])
        ['case available', 'case inStock = "in-stock"']
    """
    cases: list[str] = []
    seen: dict[str, int] = {}
    for value in values:
        case_name = swift_identifier(value)
        if _unescaped(case_name) == "_":
            case_name = "empty"
        if case_name in seen:
            seen[case_name] += 1
            case_name = f"{_unescaped(case_name)}{seen[case_name]}"
        else:
            seen[case_name] = 1

        if _unescaped(case_name) == value:
            cases.append(f"case {case_name}")
        else:
            cases.append(f"case {case_name} = {swift_string_literal(value)}")
    return cases


def swift_error_case(response: ResponseType) -> str:
    """Render the typed error case of an error response.

    Example:
        >>> swift_error_case(ResponseType(404, "NotFound"))
        'case status404(NotFound)'
    """
    if response.payload_type:
        return f"case status{response.status_code}({response.payload_type})"
    return f"case status{response.status_code}"


def swift_form_part(parameter: FunctionParameter) -> str:
    """Expression producing the multipart data of one form field."""
    wire_name = swift_string_literal(parameter.wire_name)
    if parameter.is_file:
        return f"{parameter.name}.toRequestData(named: {wire_name}, using: boundary)"
    return f"FormData(string: {parameter.value_expr}).toRequestData(named: {wire_name}, using: boundary)"


def swift_header_statement(header: HeaderField) -> str:
    return f"request.addValue({header.value_expr}, forHTTPHeaderField: {swift_string_literal(header.wire_name)})"


def swift_service_init_arguments(service: ServiceDefinition) -> str:
    arguments = [
        "urlSession: @escaping () -> URLSession = { URLSession.shared }",
        "baseUrl: @escaping () -> URL",
    ]
    if service.global_headers:
        arguments.append(f"headerProvider: @escaping () -> {service.type_name}Headers")
    arguments.append("interceptor: NetworkInterceptor? = nil")
    return ", ".join(arguments)


def swift_headers_init_arguments(headers: Iterable[HeaderField]) -> str:
    return ", ".join(f"{header.model_field_name}: String" for header in headers)


# Register filters that will be available in Jinja templates
FILTERS = {
    "swift_doc_comment": swift_doc_comment,
    "swift_string_literal": swift_string_literal,
    "swift_optional": swift_optional,
    "swift_path_literal": swift_path_literal,
    "swift_function_arguments": swift_function_arguments,
    "swift_task_type": swift_task_type,
    "swift_function_doc": swift_function_doc,
    "swift_field_type": swift_field_type,
    "needs_coding_keys": needs_coding_keys,
    "swift_coding_key": swift_coding_key,
    "swift_memberwise_arguments": swift_memberwise_arguments,
    "swift_enum_cases": swift_enum_cases,
    "swift_error_case": swift_error_case,
    "swift_form_part": swift_form_part,
    "swift_header_statement": swift_header_statement,
    "swift_service_init_arguments": swift_service_init_arguments,
    "swift_headers_init_arguments": swift_headers_init_arguments,
    "unescaped": _unescaped,
}
