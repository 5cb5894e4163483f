"""
String case conversion utilities for Swift client generation.

This module provides string case conversion utilities with
specific support for Swift naming conventions and keyword handling.

Based on https://github.com/okunishinishi/python-stringcase
with additional Swift-specific naming conventions.
"""

import re
from collections.abc import Callable
from typing import Final

# Regex patterns for case conversion
_SNAKE_CASE_DELIMITER_PATTERN: Final = re.compile(r"[\-\.\s/]")
_ACRONYM_PATTERN: Final = re.compile(r"([A-Z])([A-Z][a-z])")
_LOWER_UPPER_PATTERN: Final = re.compile(r"([a-z0-9])([A-Z])")
_NON_ALPHANUMERIC_PATTERN: Final = re.compile(r"[^a-zA-Z0-9_]")
_REPEATED_UNDERSCORE_PATTERN: Final = re.compile(r"_+")

# Reserved Swift keywords that need to be escaped with backticks
SWIFT_KEYWORDS: Final = frozenset(
    {
        # Keywords used in declarations
        "associatedtype",
        "class",
        "deinit",
        "enum",
        "extension",
        "fileprivate",
        "func",
        "import",
        "init",
        "inout",
        "internal",
        "let",
        "open",
        "operator",
        "private",
        "protocol",
        "public",
        "rethrows",
        "static",
        "struct",
        "subscript",
        "typealias",
        "var",
        # Keywords used in statements
        "break",
        "case",
        "continue",
        "default",
        "defer",
        "do",
        "else",
        "fallthrough",
        "for",
        "guard",
        "if",
        "in",
        "repeat",
        "return",
        "switch",
        "where",
        "while",
        # Keywords used in expressions and types
        "as",
        "Any",
        "catch",
        "false",
        "is",
        "nil",
        "self",
        "Self",
        "super",
        "throw",
        "throws",
        "true",
        "try",
    }
)

# Type names that would shadow Swift, Foundation or support types inside the service namespace
SWIFT_RESERVED_TYPE_NAMES: Final = frozenset(
    {
        "Any",
        "Bool",
        "Data",
        "Date",
        "Decoder",
        "Double",
        "Encoder",
        "Error",
        "Float",
        "FormData",
        "Int",
        "JSONParsingError",
        "Never",
        "NetworkInterceptor",
        "NetworkResult",
        "Protocol",
        "Result",
        "ServiceError",
        "Self",
        "String",
        "Type",
        "URL",
        "Void",
    }
)


def _convert_if_not_empty(string: str | None, conversion_func: Callable[[str], str]) -> str:
    """Apply ``conversion_func`` to a non-empty string; None and "" give ""."""
    return conversion_func(string) if string else ""


def snakecase(string: str | None) -> str:
    """Split a schema name into lowercase words joined by underscores.

    Dashes, dots, spaces and slashes separate words, as do case changes.
    Runs of capitals are kept together as one acronym word.

    Examples:
        >>> snakecase("PetStore")
        'pet_store'
        >>> snakecase("pet-type")
        'pet_type'
        >>> snakecase("/pets/{petId}")
        'pets_{pet_id}'
        >>> snakecase("getURLSession")
        'get_url_session'
    """

    def _snakecase(s: str) -> str:
        s = _SNAKE_CASE_DELIMITER_PATTERN.sub("_", s)
        s = _ACRONYM_PATTERN.sub(r"\1_\2", s)
        s = _LOWER_UPPER_PATTERN.sub(r"\1_\2", s)
        s = _REPEATED_UNDERSCORE_PATTERN.sub("_", s)
        return s.strip("_").lower()

    return _convert_if_not_empty(string, _snakecase)


def camelcase(string: str | None) -> str:
    """Join the words of a name as lowerCamelCase, the Swift member style.

    Examples:
        >>> camelcase("list_pets")
        'listPets'
        >>> camelcase("pet-id")
        'petId'
        >>> camelcase("getURLSession")
        'getUrlSession'
    """

    def _camelcase(s: str) -> str:
        words = [word for word in snakecase(s).split("_") if word]
        if not words:
            return ""
        return words[0] + "".join(word.capitalize() for word in words[1:])

    return _convert_if_not_empty(string, _camelcase)


def pascalcase(string: str | None) -> str:
    """Join the words of a name as UpperCamelCase, the Swift type style.

    Examples:
        >>> pascalcase("error_message")
        'ErrorMessage'
        >>> pascalcase("find-pets")
        'FindPets'
    """

    def _pascalcase(s: str) -> str:
        return "".join(word.capitalize() for word in snakecase(s).split("_"))

    return _convert_if_not_empty(string, _pascalcase)


def alphanumcase(string: str | None) -> str:
    """Keep only the ASCII letters and digits of a string.

    Examples:
        >>> alphanumcase("Pet Store - v2")
        'PetStorev2'
    """

    def _alphanumcase(s: str) -> str:
        return "".join(char for char in s if char.isascii() and char.isalnum())

    return _convert_if_not_empty(string, _alphanumcase)


def normalize_swift_identifier(name: str | None) -> str:
    """Normalize name to be a valid Swift identifier.

    Replaces invalid characters with underscores and prefixes names
    starting with a digit.

    Examples:
        >>> normalize_swift_identifier("123invalid")
        '_123invalid'
        >>> normalize_swift_identifier("valid@name")
        'valid_name'
    """

    def _normalize(s: str) -> str:
        normalized = _NON_ALPHANUMERIC_PATTERN.sub("_", s)
        if normalized and normalized[0].isdigit():
            normalized = f"_{normalized}"
        return normalized

    return _convert_if_not_empty(name, _normalize)


def escape_swift_keyword(name: str) -> str:
    """Escape Swift keywords with backticks if necessary.

    Examples:
        >>> escape_swift_keyword("default")
        '`default`'
        >>> escape_swift_keyword("name")
        'name'
    """
    return f"`{name}`" if name in SWIFT_KEYWORDS else name


def swift_identifier(name: str | None) -> str:
    """Build a camelCase Swift identifier for a parameter or property name.

    Examples:
        >>> swift_identifier("pet-id")
        'petId'
        >>> swift_identifier("default")
        '`default`'
        >>> swift_identifier("2fa_code")
        '_2faCode'
    """
    identifier = normalize_swift_identifier(camelcase(name))
    return escape_swift_keyword(identifier or "_")


def swift_type_name(name: str | None) -> str:
    """Build a PascalCase Swift type name that does not shadow a standard type.

    Examples:
        >>> swift_type_name("pet_category")
        'PetCategory'
        >>> swift_type_name("Error")
        'ErrorModel'
    """
    type_name = normalize_swift_identifier(pascalcase(name))
    if type_name in SWIFT_RESERVED_TYPE_NAMES:
        return f"{type_name}Model"
    return type_name


def swift_header_field_name(header_name: str) -> str:
    """Derive the Swift field name holding a header value.

    The header name is lowercased and stripped of every character that is
    not valid in an identifier.

    Examples:
        >>> swift_header_field_name("x-OS")
        'xos'
        >>> swift_header_field_name("X-Request-ID")
        'xrequestid'
    """
    field_name = alphanumcase(header_name).lower()
    if not field_name:
        return "_"
    if field_name[0].isdigit():
        field_name = f"_{field_name}"
    return escape_swift_keyword(field_name)


def service_name_from_title(title: str | None) -> str:
    """Derive the service namespace from a document title.

    Spaces and punctuation are removed, the original casing is kept.

    Examples:
        >>> service_name_from_title("Pet Store")
        'PetStore'
        >>> service_name_from_title("Swagger Petstore - 1.0")
        'SwaggerPetstore10'
    """
    name = alphanumcase(title)
    if not name:
        return "Service"
    return f"_{name}" if name[0].isdigit() else name


def uppercase_prefix(name: str) -> str:
    """Collect the uppercase letters of a name, used as a file name prefix.

    Examples:
        >>> uppercase_prefix("PetStore")
        'PS'
        >>> uppercase_prefix("petstore")
        'petstore'
    """
    prefix = "".join(char for char in name if char.isupper())
    return prefix or name
