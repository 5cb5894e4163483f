"""
Swift Swagger Client Generator

A Jinja2-based generator that produces Swift URLSession clients from
Swagger 2.0 documents.
"""

from .config import GeneratorConfig
from .errors import (
    CyclicReferenceError,
    DuplicateTypeNameError,
    GenerationError,
    OutputWriteError,
    UnresolvedReferenceError,
    UnsupportedTypeError,
)
from .generator import SwiftCodeGenerator, SwiftTemplateEngine
from .parser import SwaggerDocument, load_document, load_swagger_file

__version__ = "1.0.0"

__all__ = [
    "CyclicReferenceError",
    "DuplicateTypeNameError",
    "GenerationError",
    "GeneratorConfig",
    "OutputWriteError",
    "SwaggerDocument",
    "SwiftCodeGenerator",
    "SwiftTemplateEngine",
    "UnresolvedReferenceError",
    "UnsupportedTypeError",
    "load_document",
    "load_swagger_file",
]
