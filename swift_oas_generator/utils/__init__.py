"""
Utilities Module for Swift Client Generation

This module provides file operations and the string case conversions used
to derive Swift identifiers.
"""

from .file_utils import backup_and_clean_output_dir, write_files_to_disk
from .string_case import (
    alphanumcase,
    camelcase,
    escape_swift_keyword,
    normalize_swift_identifier,
    pascalcase,
    service_name_from_title,
    snakecase,
    swift_header_field_name,
    swift_identifier,
    swift_type_name,
    uppercase_prefix,
)

__all__ = [
    "alphanumcase",
    "backup_and_clean_output_dir",
    "camelcase",
    "escape_swift_keyword",
    "normalize_swift_identifier",
    "pascalcase",
    "service_name_from_title",
    "snakecase",
    "swift_header_field_name",
    "swift_identifier",
    "swift_type_name",
    "uppercase_prefix",
    "write_files_to_disk",
]
