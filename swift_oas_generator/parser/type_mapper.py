"""
Swagger schema to Swift type mapping.

Primitives map through a type/format table, arrays become ``[T]``,
references and inline objects or enums become generated type names.
Inline objects and enums have no name of their own, so the caller passes
the name derived from the declaring context.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from swift_oas_generator.errors import UnsupportedTypeError
from swift_oas_generator.parser.descriptors import FORM_DATA_TYPE, MappedType, WireHint
from swift_oas_generator.parser.resolver import ReferenceResolver, is_reference, reference_key
from swift_oas_generator.utils.string_case import normalize_swift_identifier, pascalcase, swift_type_name

# Type mapping constants for Swagger to Swift conversion
_SWAGGER_TYPE_MAPPING: Final[dict[str, dict[str | None, tuple[str, WireHint]]]] = {
    "string": {
        None: ("String", WireHint.STRING),
        "date": ("Date", WireHint.DATE),
        "date-time": ("Date", WireHint.DATE),
    },
    "integer": {
        None: ("Int", WireHint.NUMBER),
        "int32": ("Int32", WireHint.NUMBER),
        "int64": ("Int64", WireHint.NUMBER),
    },
    "number": {
        None: ("Double", WireHint.NUMBER),
        "float": ("Float", WireHint.NUMBER),
        "double": ("Double", WireHint.NUMBER),
    },
    "boolean": {
        None: ("Bool", WireHint.BOOLEAN),
    },
    "file": {
        None: (FORM_DATA_TYPE, WireHint.FILE),
    },
}


def schema_type_of(schema: Mapping[str, Any]) -> str:
    """Return the declared type of a schema, inferring it when omitted."""
    declared = schema.get("type")
    if isinstance(declared, str):
        return declared
    if "properties" in schema or "allOf" in schema:
        return "object"
    if "items" in schema:
        return "array"
    return "string"


def is_enum_schema(schema: Mapping[str, Any]) -> bool:
    """Check if a schema is a string enumeration."""
    return isinstance(schema.get("enum"), list) and schema.get("type", "string") == "string"


def is_dictionary_schema(schema: Mapping[str, Any]) -> bool:
    """Check if a schema is a map of string keys to values of one schema."""
    return (
        schema_type_of(schema) == "object"
        and "properties" not in schema
        and "allOf" not in schema
        and isinstance(schema.get("additionalProperties"), Mapping)
    )


def is_object_schema(schema: Mapping[str, Any]) -> bool:
    """Check if a schema becomes a generated model."""
    return schema_type_of(schema) == "object" and not is_dictionary_schema(schema)


def reference_type_name(reference: str) -> str:
    """Generated type name of a referenced definition."""
    return swift_type_name(reference_key(reference))


def nested_type_name(parent: str, name: str) -> str:
    """Generated type name of an inline schema declared inside ``parent``.

    Examples:
        >>> nested_type_name("Pet", "status")
        'PetStatus'
    """
    return normalize_swift_identifier(f"{parent}{pascalcase(name)}")


class TypeMapper:
    """Maps schemas of one document to Swift types."""

    def __init__(self, resolver: ReferenceResolver) -> None:
        self.resolver = resolver

    def map_type(
        self,
        schema: Any,  # noqa: ANN401
        *,
        required: bool = True,
        context_name: str | None = None,
    ) -> MappedType:
        """Map a schema to a Swift type.

        Args:
            schema: The schema node, inline or reference.
            required: Whether the value is required; optional values are wrapped.
            context_name: Type name to use for an inline object or enum.

        Raises:
            UnsupportedTypeError: If the schema shape has no Swift mapping.
        """
        if not isinstance(schema, Mapping):
            raise self._unsupported(repr(schema), context_name)

        if is_reference(schema):
            return self._map_reference(schema, required=required)

        declared = schema.get("type")
        if declared is not None and not isinstance(declared, str):
            raise self._unsupported(repr(declared), context_name)

        if is_enum_schema(schema) or is_object_schema(schema):
            if not context_name:
                kind = "enum" if is_enum_schema(schema) else "object"
                raise self._unsupported(f"inline {kind} without a naming context", context_name)
            hint = WireHint.ENUM if is_enum_schema(schema) else WireHint.MODEL
            return MappedType(context_name, hint, required)

        schema_type = schema_type_of(schema)

        if schema_type == "array":
            items = schema.get("items")
            if items is None:
                raise self._unsupported("'array' without items", context_name)
            item = self.map_type(items, context_name=f"{context_name}Item" if context_name else None)
            return MappedType(f"[{item.base_type}]", WireHint.ARRAY, required, item_hint=item.hint)

        if is_dictionary_schema(schema):
            value = self.map_type(
                schema["additionalProperties"],
                context_name=f"{context_name}Value" if context_name else None,
            )
            return MappedType(f"[String: {value.base_type}]", WireHint.DICTIONARY, required, item_hint=value.hint)

        formats = _SWAGGER_TYPE_MAPPING.get(schema_type)
        if formats is None:
            raise self._unsupported(f"'{schema_type}'", context_name)
        base_type, hint = formats.get(schema.get("format"), formats[None])
        return MappedType(base_type, hint, required)

    def _map_reference(self, schema: Mapping[str, Any], *, required: bool) -> MappedType:
        resolved, origin = self.resolver.resolve_with_origin(schema)
        type_name = reference_type_name(origin or schema["$ref"])
        if is_enum_schema(resolved):
            return MappedType(type_name, WireHint.ENUM, required)
        if is_object_schema(resolved):
            return MappedType(type_name, WireHint.MODEL, required)
        # Named aliases of primitives and arrays map to the aliased type
        return self.map_type(resolved, required=required, context_name=type_name)

    def _unsupported(self, description: str, context_name: str | None) -> UnsupportedTypeError:
        return UnsupportedTypeError(description, context=context_name, service_name=self.resolver.service_name)
