"""
Swift Code Generator Module

This module provides Jinja2-based code generation for Swift API clients
from Swagger documents.
"""

from .template_engine import SwiftCodeGenerator, SwiftTemplateEngine

__all__ = [
    "SwiftCodeGenerator",
    "SwiftTemplateEngine",
]
