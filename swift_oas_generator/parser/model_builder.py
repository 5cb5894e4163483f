"""
Model discovery for one service.

Walks every object and enum schema reachable from the document's
definitions and operations and builds one ``ModelDefinition`` per
distinct source. A definition's identity is the reference (or, for
inline schemas, the document location) it was declared at.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from swift_oas_generator.errors import CyclicReferenceError, DuplicateTypeNameError
from swift_oas_generator.gen_logging import get_logger
from swift_oas_generator.parser.descriptors import Enumeration, Field, Model, ModelDefinition
from swift_oas_generator.parser.resolver import DEFINITIONS_PREFIX, ReferenceResolver, is_reference
from swift_oas_generator.parser.type_mapper import (
    TypeMapper,
    is_dictionary_schema,
    is_enum_schema,
    is_object_schema,
    nested_type_name,
    reference_type_name,
    schema_type_of,
)
from swift_oas_generator.utils.string_case import swift_identifier

logger = get_logger(__name__)


def definition_reference(name: str) -> str:
    """Build the reference to a named definition."""
    return DEFINITIONS_PREFIX + name.replace("~", "~0").replace("/", "~1")


def _unique_field_name(swift_name: str, used_names: set[str]) -> str:
    """Claim a property name, numbering names that normalise to one already taken."""
    unique = swift_name
    counter = 1
    while unique in used_names:
        counter += 1
        unique = f"{swift_name.strip('`')}{counter}"
    used_names.add(unique)
    return unique


class ModelBuilder:
    """Collects the models and enumerations of one service."""

    def __init__(self, resolver: ReferenceResolver, type_mapper: TypeMapper) -> None:
        self.resolver = resolver
        self.type_mapper = type_mapper
        self._sources: dict[str, str] = {}
        self._definitions: dict[str, ModelDefinition | None] = {}

    @property
    def service_name(self) -> str:
        return self.resolver.service_name

    @property
    def definitions(self) -> tuple[ModelDefinition, ...]:
        """Discovered definitions, in discovery order."""
        return tuple(definition for definition in self._definitions.values() if definition is not None)

    def add_document_definitions(self) -> None:
        """Discover every entry of the document's ``definitions``."""
        for name in self.resolver.document.definitions:
            reference = definition_reference(name)
            self.discover({"$ref": reference}, context_name=None, source=reference)

    def discover(
        self,
        schema: Any,  # noqa: ANN401
        *,
        context_name: str | None,
        source: str,
        stack: tuple[str, ...] = (),
    ) -> None:
        """Discover the models reachable from ``schema``.

        Args:
            schema: Schema node, inline or reference.
            context_name: Type name given to the schema if it is an inline object or enum.
            source: Document location of the schema, used as its identity when inline.
            stack: Sources of the definitions currently being built.
        """
        if not isinstance(schema, Mapping):
            return

        if is_reference(schema):
            resolved, origin = self.resolver.resolve_with_origin(schema)
            origin = origin or schema["$ref"]
            type_name = reference_type_name(origin)
            if is_enum_schema(resolved) or is_object_schema(resolved):
                self._register(type_name, resolved, origin, stack)
            else:
                self.discover(resolved, context_name=type_name, source=origin, stack=stack)
            return

        if is_enum_schema(schema) or is_object_schema(schema):
            if context_name:
                self._register(context_name, schema, source, stack)
            return

        if schema_type_of(schema) == "array" and "items" in schema:
            self.discover(
                schema["items"],
                context_name=f"{context_name}Item" if context_name else None,
                source=f"{source}/items",
                stack=stack,
            )
        elif is_dictionary_schema(schema):
            self.discover(
                schema["additionalProperties"],
                context_name=f"{context_name}Value" if context_name else None,
                source=f"{source}/additionalProperties",
                stack=stack,
            )

    def reserve(self, type_name: str, source: str) -> bool:
        """Claim a type name in the service namespace for ``source``.

        Returns:
            True if the name was free, False if ``source`` already holds it.

        Raises:
            DuplicateTypeNameError: If a different source holds the name.
        """
        existing = self._sources.get(type_name)
        if existing is None:
            self._sources[type_name] = source
            return True
        if existing != source:
            raise DuplicateTypeNameError(
                type_name,
                first_source=existing,
                second_source=source,
                service_name=self.service_name,
            )
        return False

    def _register(self, type_name: str, schema: Mapping[str, Any], source: str, stack: tuple[str, ...]) -> None:
        if source in stack:
            raise CyclicReferenceError((*stack, source), service_name=self.service_name)

        if not self.reserve(type_name, source):
            return

        # Take the slot first so the definition keeps its discovery position
        self._definitions[type_name] = None

        description = schema.get("description")
        definition: ModelDefinition
        if is_enum_schema(schema):
            definition = Enumeration(
                service_name=self.service_name,
                type_name=type_name,
                values=tuple(str(value) for value in schema["enum"]),
                description=description,
            )
        else:
            definition = Model(
                type_name=type_name,
                fields=self._build_fields(type_name, schema, source, (*stack, source)),
                description=description,
            )

        self._definitions[type_name] = definition
        logger.debug("Discovered %s from %s", type_name, source)

    def _build_fields(
        self,
        type_name: str,
        schema: Mapping[str, Any],
        source: str,
        stack: tuple[str, ...],
    ) -> tuple[Field, ...]:
        properties, required_names = self._collect_properties(schema, stack)
        fields = []
        swift_names: set[str] = set()
        for name, property_schema in properties.items():
            field_context = nested_type_name(type_name, name)
            self.discover(
                property_schema,
                context_name=field_context,
                source=f"{source}/properties/{name}",
                stack=stack,
            )
            mapped = self.type_mapper.map_type(
                property_schema,
                required=name in required_names,
                context_name=field_context,
            )
            description = property_schema.get("description") if isinstance(property_schema, Mapping) else None
            fields.append(
                Field(
                    name=name,
                    type_name=mapped.base_type,
                    required=mapped.required,
                    swift_name=_unique_field_name(swift_identifier(name), swift_names),
                    description=description,
                )
            )
        return tuple(fields)

    def _collect_properties(
        self,
        schema: Mapping[str, Any],
        stack: tuple[str, ...],
    ) -> tuple[dict[str, Any], set[str]]:
        """Merge the properties of an object, following ``allOf`` parts in order."""
        properties: dict[str, Any] = {}
        required_names: set[str] = set()

        for part in schema.get("allOf") or ():
            resolved, origin = self.resolver.resolve_with_origin(part)
            if origin is not None and origin in stack:
                raise CyclicReferenceError((*stack, origin), service_name=self.service_name)
            part_stack = (*stack, origin) if origin is not None else stack
            part_properties, part_required = self._collect_properties(resolved, part_stack)
            properties.update(part_properties)
            required_names.update(part_required)

        properties.update(schema.get("properties") or {})
        required_names.update(schema.get("required") or ())
        return properties, required_names
