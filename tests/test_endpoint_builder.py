"""Tests for building network function descriptors."""

from collections.abc import Callable
from typing import Any

import pytest

from swift_oas_generator.errors import DuplicateTypeNameError, UnsupportedTypeError
from swift_oas_generator.parser.descriptors import (
    BodyEncoding,
    HeaderField,
    NetworkFunction,
    ParameterLocation,
    QueryElement,
    ResponseType,
    ServiceDefinition,
)
from swift_oas_generator.parser.endpoint_builder import global_header_fields, is_json_consumption


def _function(service: ServiceDefinition, name: str) -> NetworkFunction:
    return next(function for function in service.functions if function.function_name == name)


def _operation_document(
    minimal_document: Callable[..., dict[str, Any]],
    operation: dict[str, Any],
    path: str = "/items",
    method: str = "get",
) -> dict[str, Any]:
    return minimal_document(paths={path: {method: {"responses": {"200": {"description": "Ok"}}, **operation}}})


class TestEndpointBuilder:
    """Test class for deriving network functions from operations."""

    def test_one_function_per_operation_in_document_order(self, petstore_service: ServiceDefinition) -> None:
        assert [function.function_name for function in petstore_service.functions] == [
            "listPets",
            "addPet",
            "getPet",
            "deletePet",
            "uploadPhoto",
        ]

    def test_required_and_optional_queries(self, petstore_service: ServiceDefinition) -> None:
        list_pets = _function(petstore_service, "listPets")

        assert list_pets.queries == (
            QueryElement(field_name="id", field_value_expr="id", is_optional=False, parameter_name="id"),
            QueryElement(field_name="filter", field_value_expr="filter", is_optional=True, parameter_name="filter"),
        )

    def test_global_header_is_excluded_case_insensitively(self, petstore_service: ServiceDefinition) -> None:
        list_pets = _function(petstore_service, "listPets")

        assert list_pets.headers == (
            HeaderField(required=False, model_field_name="xtrace", wire_name="x-Trace", value_expr="xtrace"),
        )
        assert [parameter.name for parameter in list_pets.parameters] == ["id", "filter", "xtrace"]

    def test_parameter_ordering_and_optionality(self, petstore_service: ServiceDefinition) -> None:
        list_pets = _function(petstore_service, "listPets")

        assert [(p.name, p.type_name, p.required) for p in list_pets.parameters] == [
            ("id", "String", True),
            ("filter", "String", False),
            ("xtrace", "String", False),
        ]

    def test_success_type_from_first_success_payload(self, petstore_service: ServiceDefinition) -> None:
        list_pets = _function(petstore_service, "listPets")

        assert list_pets.success_type == "[Pet]"
        assert list_pets.error_type == "Never"
        assert list_pets.response_types == (ResponseType(status_code=200, payload_type="[Pet]", description="The pets"),)

    def test_json_body(self, petstore_service: ServiceDefinition) -> None:
        add_pet = _function(petstore_service, "addPet")

        assert add_pet.body_encoding is BodyEncoding.JSON
        assert add_pet.throws_on_failure
        assert add_pet.body_parameter is not None
        assert add_pet.body_parameter.name == "body"
        assert add_pet.body_parameter.wire_name == "pet"
        assert add_pet.body_parameter.type_name == "Pet"

    def test_error_responses_get_a_typed_error(self, petstore_service: ServiceDefinition) -> None:
        add_pet = _function(petstore_service, "addPet")

        assert add_pet.success_type == "Void"
        assert add_pet.error_type == "AddPetError"
        assert add_pet.error_responses == (ResponseType(status_code=400, description="Invalid pet"),)

    def test_named_response_payload(self, petstore_service: ServiceDefinition) -> None:
        get_pet = _function(petstore_service, "getPet")

        assert get_pet.response_types == (
            ResponseType(status_code=200, payload_type="Pet", description="The pet"),
            ResponseType(status_code=404, payload_type="ErrorMessage", description="Pet not found"),
        )

    def test_path_level_parameter_and_base_path(self, petstore_service: ServiceDefinition) -> None:
        get_pet = _function(petstore_service, "getPet")

        assert get_pet.http_method == "GET"
        assert get_pet.service_path == "/v1/pets/{String(petId)}"
        assert get_pet.parameters[0].location is ParameterLocation.PATH
        assert get_pet.parameters[0].type_name == "Int64"
        assert not get_pet.throws_on_failure

    def test_deprecated_and_internal_flags(self, petstore_service: ServiceDefinition) -> None:
        delete_pet = _function(petstore_service, "deletePet")

        assert delete_pet.is_deprecated
        assert delete_pet.is_internal_only
        assert delete_pet.success_type == "Void"

    def test_multipart_form_data(self, petstore_service: ServiceDefinition) -> None:
        upload = _function(petstore_service, "uploadPhoto")

        assert upload.body_encoding is BodyEncoding.MULTIPART
        assert not upload.throws_on_failure
        assert [(p.name, p.type_name, p.value_expr) for p in upload.form_data_parameters] == [
            ("a", "FormData", None),
            ("b", "FormData", None),
            ("caption", "String", "caption"),
        ]

    def test_document_consumes_is_the_fallback(
        self,
        minimal_document: Callable[..., dict[str, Any]],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
    ) -> None:
        data = _operation_document(minimal_document, {"operationId": "upload"}, method="post")
        data["consumes"] = ["multipart/form-data"]

        assert build_service(data).functions[0].body_encoding is BodyEncoding.MULTIPART

    def test_operation_parameter_overrides_path_parameter(
        self,
        minimal_document: Callable[..., dict[str, Any]],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
    ) -> None:
        data = minimal_document(
            paths={
                "/items/{id}": {
                    "parameters": [{"name": "id", "in": "path", "required": True, "type": "string"}],
                    "get": {
                        "operationId": "getItem",
                        "parameters": [{"name": "id", "in": "path", "required": True, "type": "integer"}],
                        "responses": {"200": {"description": "Ok"}},
                    },
                },
            },
        )
        function = build_service(data).functions[0]

        assert [(p.name, p.type_name) for p in function.parameters] == [("id", "Int")]
        assert function.service_path == "/items/{String(id)}"

    @pytest.mark.parametrize(
        ("parameter", "expression"),
        [
            ({"type": "integer"}, "String(q)"),
            ({"type": "boolean"}, "q"),
            ({"type": "string", "format": "date-time"}, "ISO8601DateFormatter().string(from: q)"),
            ({"type": "string", "enum": ["a", "b"]}, "q.rawValue"),
            ({"type": "array", "items": {"type": "string"}}, 'q.joined(separator: ",")'),
            ({"type": "array", "items": {"type": "integer"}}, 'q.map { String($0) }.joined(separator: ",")'),
        ],
    )
    def test_query_value_expressions(
        self,
        minimal_document: Callable[..., dict[str, Any]],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
        parameter: dict[str, Any],
        expression: str,
    ) -> None:
        operation = {"operationId": "search", "parameters": [{"name": "q", "in": "query", "required": True, **parameter}]}
        function = build_service(_operation_document(minimal_document, operation)).functions[0]

        assert function.queries[0].field_value_expr == expression

    def test_boolean_header_is_converted_to_text(
        self,
        minimal_document: Callable[..., dict[str, Any]],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
    ) -> None:
        operation = {
            "operationId": "search",
            "parameters": [{"name": "X-Dry-Run", "in": "header", "required": True, "type": "boolean"}],
        }
        function = build_service(_operation_document(minimal_document, operation)).functions[0]

        assert function.headers[0].value_expr == '(xdryrun ? "true" : "false")'

    def test_inline_enum_parameter_becomes_a_model(
        self,
        minimal_document: Callable[..., dict[str, Any]],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
    ) -> None:
        operation = {
            "operationId": "search",
            "parameters": [{"name": "sort", "in": "query", "type": "string", "enum": ["asc", "desc"]}],
        }
        service = build_service(_operation_document(minimal_document, operation))

        assert service.functions[0].parameters[0].type_name == "SearchSort"
        assert [model.type_name for model in service.models] == ["SearchSort"]

    def test_inline_response_object_becomes_a_model(
        self,
        minimal_document: Callable[..., dict[str, Any]],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
    ) -> None:
        operation = {
            "operationId": "stats",
            "responses": {
                "200": {"description": "Ok", "schema": {"type": "object", "properties": {"count": {"type": "integer"}}}},
            },
        }
        service = build_service(_operation_document(minimal_document, operation))

        assert service.functions[0].success_type == "Stats200Response"
        assert [model.type_name for model in service.models] == ["Stats200Response"]

    def test_success_without_payload_makes_success_optional(
        self,
        minimal_document: Callable[..., dict[str, Any]],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
    ) -> None:
        operation = {
            "operationId": "upsertItem",
            "responses": {
                "200": {"description": "Replaced", "schema": {"type": "string"}},
                "204": {"description": "Created without content"},
            },
        }
        function = build_service(_operation_document(minimal_document, operation, method="put")).functions[0]

        assert function.success_type == "String?"
        assert function.success_payload_type == "String"
        assert function.has_optional_success

    @pytest.mark.parametrize("wire_name", ["completionHandler", "request", "task", "boundary"])
    def test_parameter_names_avoid_generated_identifiers(
        self,
        minimal_document: Callable[..., dict[str, Any]],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
        wire_name: str,
    ) -> None:
        operation = {"parameters": [{"name": wire_name, "in": "query", "type": "string"}]}
        function = build_service(_operation_document(minimal_document, operation)).functions[0]

        assert function.parameters[0].name == f"{wire_name}Query"
        assert function.parameters[0].wire_name == wire_name
        assert function.queries[0].field_value_expr == f"{wire_name}Query"

    def test_parameter_name_clash_after_location_suffix(
        self,
        minimal_document: Callable[..., dict[str, Any]],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
    ) -> None:
        operation = {
            "parameters": [
                {"name": "taskQuery", "in": "query", "type": "string"},
                {"name": "task", "in": "query", "type": "string"},
            ],
        }
        function = build_service(_operation_document(minimal_document, operation)).functions[0]

        assert [p.name for p in function.parameters] == ["taskQuery", "taskQuery2"]

    @pytest.mark.parametrize(
        ("consumes", "parameter", "unsent"),
        [
            ([], {"name": "photo", "in": "formData", "type": "file"}, "formData parameters photo"),
            (
                ["multipart/form-data"],
                {"name": "item", "in": "body", "schema": {"type": "string"}},
                "body parameters item",
            ),
        ],
    )
    def test_parameters_left_out_by_body_encoding_are_reported(
        self,
        minimal_document: Callable[..., dict[str, Any]],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
        generator_log: pytest.LogCaptureFixture,
        consumes: list[str],
        parameter: dict[str, Any],
        unsent: str,
    ) -> None:
        operation = {"consumes": consumes, "parameters": [parameter]}

        build_service(_operation_document(minimal_document, operation, method="post"))

        assert f"POST /items: {unsent} are not sent" in generator_log.text

    def test_model_in_query_is_unsupported(
        self,
        petstore_data: dict[str, Any],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
    ) -> None:
        petstore_data["paths"]["/pets"]["get"]["parameters"].append(
            {"name": "tags", "in": "query", "type": "array", "items": {"$ref": "#/definitions/Tag"}},
        )

        with pytest.raises(UnsupportedTypeError):
            build_service(petstore_data)

    def test_unknown_parameter_location(
        self,
        minimal_document: Callable[..., dict[str, Any]],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
    ) -> None:
        operation = {"operationId": "search", "parameters": [{"name": "c", "in": "cookie", "type": "string"}]}

        with pytest.raises(UnsupportedTypeError):
            build_service(_operation_document(minimal_document, operation))

    def test_error_type_clashing_with_definition(
        self,
        petstore_data: dict[str, Any],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
    ) -> None:
        petstore_data["definitions"]["AddPetError"] = {"type": "object", "properties": {}}

        with pytest.raises(DuplicateTypeNameError):
            build_service(petstore_data)


class TestFunctionNames:
    def test_names_derived_from_method_and_path(
        self,
        minimal_document: Callable[..., dict[str, Any]],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
    ) -> None:
        data = minimal_document(paths={"/users/{user-id}/avatar": {"get": {"responses": {}}}})

        assert build_service(data).functions[0].function_name == "getUsersUserIdAvatar"

    def test_repeated_names_get_method_then_counter(
        self,
        minimal_document: Callable[..., dict[str, Any]],
        build_service: Callable[[dict[str, Any]], ServiceDefinition],
    ) -> None:
        data = minimal_document(
            paths={
                "/a": {"get": {"operationId": "fetch", "responses": {}}, "post": {"operationId": "fetch", "responses": {}}},
                "/b": {"get": {"operationId": "fetch", "responses": {}}},
            },
        )

        assert [function.function_name for function in build_service(data).functions] == [
            "fetchGet",
            "fetchPost",
            "fetchGet2",
        ]


class TestHelpers:
    def test_global_header_fields(self) -> None:
        assert global_header_fields(["x-OS"]) == (
            HeaderField(required=True, model_field_name="xos", wire_name="x-OS", value_expr="globalHeaders.xos"),
        )

    @pytest.mark.parametrize(
        ("media_types", "expected"),
        [
            ([], True),
            (["application/json"], True),
            (["application/vnd.api+json"], True),
            (["multipart/form-data"], False),
        ],
    )
    def test_is_json_consumption(self, media_types: list[str], expected: bool) -> None:
        assert is_json_consumption(media_types) is expected
