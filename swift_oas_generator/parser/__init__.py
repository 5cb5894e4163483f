"""
Swagger Parser Module for Swift Client Generation

This module loads Swagger documents, resolves their references and builds
the model and network function descriptors handed to the code emitter.
"""

from .descriptors import (
    BodyEncoding,
    Enumeration,
    Field,
    FunctionParameter,
    HeaderField,
    MappedType,
    Model,
    ModelDefinition,
    NetworkFunction,
    ParameterLocation,
    QueryElement,
    ResponseType,
    ServiceDefinition,
    WireHint,
)
from .document import SwaggerDocument, SwaggerFile, load_document, load_swagger_file
from .endpoint_builder import EndpointBuilder, global_header_fields
from .model_builder import ModelBuilder
from .resolver import ReferenceResolver
from .type_mapper import TypeMapper

__all__ = [
    "BodyEncoding",
    "EndpointBuilder",
    "Enumeration",
    "Field",
    "FunctionParameter",
    "HeaderField",
    "MappedType",
    "Model",
    "ModelBuilder",
    "ModelDefinition",
    "NetworkFunction",
    "ParameterLocation",
    "QueryElement",
    "ReferenceResolver",
    "ResponseType",
    "ServiceDefinition",
    "SwaggerDocument",
    "SwaggerFile",
    "TypeMapper",
    "WireHint",
    "global_header_fields",
    "load_document",
    "load_swagger_file",
]
