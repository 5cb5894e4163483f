"""
Swift Template Engine for Swagger Client Generation

This module uses Jinja2 templates to render Swift client code from the
descriptors built by the parser, and drives a whole generation run.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any, Final

from jinja2 import Environment, FileSystemLoader, select_autoescape

from swift_oas_generator.config import GeneratorConfig
from swift_oas_generator.errors import DuplicateTypeNameError
from swift_oas_generator.gen_logging import get_logger
from swift_oas_generator.generator.filters import FILTERS
from swift_oas_generator.parser.descriptors import (
    Enumeration,
    Model,
    ModelDefinition,
    NetworkFunction,
    ServiceDefinition,
)
from swift_oas_generator.parser.document import SwaggerDocument
from swift_oas_generator.parser.endpoint_builder import EndpointBuilder, global_header_fields
from swift_oas_generator.parser.model_builder import ModelBuilder
from swift_oas_generator.parser.resolver import ReferenceResolver
from swift_oas_generator.parser.type_mapper import TypeMapper
from swift_oas_generator.utils.string_case import (
    SWIFT_KEYWORDS,
    SWIFT_RESERVED_TYPE_NAMES,
    uppercase_prefix,
)

logger = get_logger(__name__)

GENERATED_NOTICE: Final = "Generated by swift-oas-generator. Do not edit."

# Support files rendered once per run, keyed by output file name
SUPPORT_FILES: Final = (
    "ServiceError.swift",
    "URLQueryExtension.swift",
    "ParsingError.swift",
    "NetworkInterceptor.swift",
    "FormData.swift",
)


def service_type_name(service_name: str) -> str:
    """Name of the generated client type of a service.

    Examples:
        >>> service_type_name("PetStore")
        'PetStore'
        >>> service_type_name("Data")
        'DataService'
    """
    if service_name in SWIFT_RESERVED_TYPE_NAMES or service_name in SWIFT_KEYWORDS:
        return f"{service_name}Service"
    return service_name


class SwiftTemplateEngine:
    """Template engine for generating Swift code."""

    def __init__(self, template_dir: Path | None = None) -> None:
        """Initialize the template engine."""
        if template_dir is None:
            current_dir = Path(__file__).parent
            template_dir = current_dir.parent / "templates"

        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

        self._register_filters()
        self._register_globals()

    def _register_filters(self) -> None:
        """Register custom Jinja2 filters for Swift code generation."""
        self.env.filters.update(FILTERS)

    def _register_globals(self) -> None:
        """Register global values available in templates."""
        self.env.globals.update({"generated_notice": GENERATED_NOTICE})

    def render_template(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a template with the given context."""
        template = self.env.get_template(template_name)
        return template.render(**context)

    def render_model(self, definition: ModelDefinition, service: ServiceDefinition) -> str:
        """Render the source file of one model or enumeration."""
        match definition:
            case Enumeration():
                return self.render_template(
                    "models/enumeration.swift.j2",
                    {"service": service, "enumeration": definition},
                )
            case Model():
                return self.render_template("models/model.swift.j2", {"service": service, "model": definition})
            case _:
                msg = f"Cannot render {type(definition).__name__}"
                raise TypeError(msg)

    def render_network_function(self, function: NetworkFunction, service: ServiceDefinition) -> str:
        """Render one network function, unindented and without a trailing newline."""
        text = self.render_template("service/function.swift.j2", {"service": service, "function": function})
        return text.rstrip("\n")

    def render_service(self, service: ServiceDefinition) -> str:
        """Render the client type of a service with all its network functions."""
        functions = [self.render_network_function(function, service) for function in service.functions]
        return self.render_template("service/service.swift.j2", {"service": service, "functions": functions})


class SwiftCodeGenerator:
    """Main code generator for Swift clients."""

    def __init__(self, template_engine: SwiftTemplateEngine | None = None) -> None:
        """Initialize the code generator."""
        self.template_engine = template_engine or SwiftTemplateEngine()

    def build_service(self, document: SwaggerDocument) -> ServiceDefinition:
        """Build the descriptors of one document.

        Raises:
            GenerationError: If any reference, type or name in the document cannot be handled.
        """
        resolver = ReferenceResolver(document)
        type_mapper = TypeMapper(resolver)
        model_builder = ModelBuilder(resolver, type_mapper)
        model_builder.add_document_definitions()

        endpoint_builder = EndpointBuilder(resolver, type_mapper, model_builder, document.global_headers)
        functions = endpoint_builder.build_all()

        return ServiceDefinition(
            service_name=document.service_name,
            type_name=service_type_name(document.service_name),
            file_prefix=uppercase_prefix(document.service_name),
            global_headers=global_header_fields(document.global_headers),
            functions=functions,
            # Models discovered while building functions are included
            models=model_builder.definitions,
            description=document.description,
        )

    def generate_client(
        self,
        documents: Iterable[SwaggerDocument],
        config: GeneratorConfig,
    ) -> dict[Path, str]:
        """Generate the Swift package for every document of a run.

        Nothing is written here: the returned mapping holds the content of
        every output file, and is only complete if every service succeeded.
        """
        files: dict[Path, str] = {}
        service_sources: dict[str, str] = {}

        for document in documents:
            merged_document = document.with_global_headers(config.global_headers)
            service = self.build_service(merged_document)

            source = str(document.source or document.title)
            existing = service_sources.get(service.type_name)
            if existing is not None:
                raise DuplicateTypeNameError(service.type_name, first_source=existing, second_source=source)
            service_sources[service.type_name] = source

            files.update(self._generate_service_files(service, config))
            logger.info(
                "Generated %s: %d functions, %d models",
                service.type_name,
                len(service.functions),
                len(service.models),
            )

        files.update(self._generate_support_files(config))
        files.update(self._generate_project_files(config))
        return files

    def _generate_service_files(self, service: ServiceDefinition, config: GeneratorConfig) -> dict[Path, str]:
        """Generate the client file and one file per model of a service."""
        service_dir = config.sources_dir / service.type_name
        models_dir = service_dir / "Models"

        files = {service_dir / f"{service.type_name}.swift": self.template_engine.render_service(service)}
        for definition in service.models:
            filename = f"{service.file_prefix}_{definition.type_name}.swift"
            files[models_dir / filename] = self.template_engine.render_model(definition, service)
        return files

    def _generate_support_files(self, config: GeneratorConfig) -> dict[Path, str]:
        """Generate the support files shared by every service."""
        return {
            config.sources_dir / filename: self.template_engine.render_template(f"support/{filename}.j2", {})
            for filename in SUPPORT_FILES
        }

    def _generate_project_files(self, config: GeneratorConfig) -> dict[Path, str]:
        """Generate the Swift package manifest."""
        return {
            config.output_dir / "Package.swift": self.template_engine.render_template(
                "base/Package.swift.j2",
                {"config": config},
            ),
        }
