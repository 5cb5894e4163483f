"""Shared Swagger documents for the generator tests."""

import copy
import logging
from collections.abc import Callable, Iterator
from typing import Any

import pytest

from swift_oas_generator.generator.template_engine import SwiftCodeGenerator
from swift_oas_generator.parser.descriptors import ServiceDefinition
from swift_oas_generator.parser.document import SwaggerDocument
from swift_oas_generator.parser.model_builder import ModelBuilder
from swift_oas_generator.parser.resolver import ReferenceResolver
from swift_oas_generator.parser.type_mapper import TypeMapper

PETSTORE: dict[str, Any] = {
    "swagger": "2.0",
    "info": {"title": "Pet Store", "description": "A sample pet store"},
    "basePath": "/v1",
    "x-global-headers": ["x-OS"],
    "parameters": {
        "PetId": {"name": "petId", "in": "path", "required": True, "type": "integer", "format": "int64"},
    },
    "responses": {
        "NotFound": {"description": "Pet not found", "schema": {"$ref": "#/definitions/ErrorMessage"}},
    },
    "definitions": {
        "Pet": {
            "type": "object",
            "description": "A pet for sale",
            "required": ["id", "name"],
            "properties": {
                "id": {"type": "integer", "format": "int64"},
                "name": {"type": "string"},
                "pet-type": {"type": "string"},
                "status": {"type": "string", "enum": ["available", "in-stock"]},
                "tags": {"type": "array", "items": {"$ref": "#/definitions/Tag"}},
                "born": {"type": "string", "format": "date"},
            },
        },
        "Tag": {"type": "object", "properties": {"label": {"type": "string"}}},
        "ErrorMessage": {"type": "object", "properties": {"message": {"type": "string"}}},
        "Category": {"type": "string", "enum": ["dog", "cat"]},
    },
    "paths": {
        "/pets": {
            "get": {
                "operationId": "listPets",
                "summary": "List pets",
                "parameters": [
                    {"name": "id", "in": "query", "required": True, "type": "string"},
                    {"name": "filter", "in": "query", "type": "string"},
                    {"name": "X-os", "in": "header", "required": True, "type": "string"},
                    {"name": "x-Trace", "in": "header", "type": "string"},
                ],
                "responses": {
                    "200": {"description": "The pets", "schema": {"type": "array", "items": {"$ref": "#/definitions/Pet"}}},
                    "default": {"description": "Unexpected error"},
                },
            },
            "post": {
                "operationId": "addPet",
                "parameters": [
                    {"name": "pet", "in": "body", "required": True, "schema": {"$ref": "#/definitions/Pet"}},
                ],
                "responses": {
                    "201": {"description": "Created"},
                    "400": {"description": "Invalid pet"},
                },
            },
        },
        "/pets/{petId}": {
            "parameters": [{"$ref": "#/parameters/PetId"}],
            "get": {
                "operationId": "getPet",
                "responses": {
                    "200": {"description": "The pet", "schema": {"$ref": "#/definitions/Pet"}},
                    "404": {"$ref": "#/responses/NotFound"},
                },
            },
            "delete": {
                "operationId": "deletePet",
                "deprecated": True,
                "x-internal": True,
                "responses": {"204": {"description": "Deleted"}},
            },
        },
        "/pets/{petId}/photo": {
            "post": {
                "operationId": "uploadPhoto",
                "consumes": ["multipart/form-data"],
                "parameters": [
                    {"$ref": "#/parameters/PetId"},
                    {"name": "a", "in": "formData", "required": True, "type": "file"},
                    {"name": "b", "in": "formData", "required": True, "type": "file"},
                    {"name": "caption", "in": "formData", "type": "string"},
                ],
                "responses": {"200": {"description": "Uploaded"}},
            },
        },
    },
}


def _minimal_document(**sections: Any) -> dict[str, Any]:  # noqa: ANN401
    return {"swagger": "2.0", "info": {"title": "Test Service"}, "paths": {}, **sections}


@pytest.fixture
def minimal_document() -> Callable[..., dict[str, Any]]:
    """Factory of documents holding only a title plus the given top-level sections."""
    return _minimal_document


@pytest.fixture
def build_service() -> Callable[[dict[str, Any]], ServiceDefinition]:
    """Factory building the service descriptors of a document dict."""

    def _build(data: dict[str, Any]) -> ServiceDefinition:
        return SwiftCodeGenerator().build_service(SwaggerDocument.from_dict(data))

    return _build


@pytest.fixture
def petstore_data() -> dict[str, Any]:
    """A fresh copy of the pet store document, safe to mutate."""
    return copy.deepcopy(PETSTORE)


@pytest.fixture
def petstore_document(petstore_data: dict[str, Any]) -> SwaggerDocument:
    return SwaggerDocument.from_dict(petstore_data)


@pytest.fixture
def petstore_resolver(petstore_document: SwaggerDocument) -> ReferenceResolver:
    return ReferenceResolver(petstore_document)


@pytest.fixture
def petstore_type_mapper(petstore_resolver: ReferenceResolver) -> TypeMapper:
    return TypeMapper(petstore_resolver)


@pytest.fixture
def petstore_model_builder(petstore_resolver: ReferenceResolver, petstore_type_mapper: TypeMapper) -> ModelBuilder:
    return ModelBuilder(petstore_resolver, petstore_type_mapper)


@pytest.fixture
def petstore_service(petstore_document: SwaggerDocument) -> ServiceDefinition:
    return SwiftCodeGenerator().build_service(petstore_document)


@pytest.fixture
def generator_log(caplog: pytest.LogCaptureFixture) -> Iterator[pytest.LogCaptureFixture]:
    """Capture the generator's log records, which do not propagate once the CLI configured logging."""
    logger = logging.getLogger("swift_oas_gen")
    logger.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.DEBUG, logger="swift_oas_gen"):
            yield caplog
    finally:
        logger.removeHandler(caplog.handler)
