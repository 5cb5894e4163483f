"""
Fatal generation errors.

Every error raised by the generation pipeline derives from
``GenerationError``. None of them is recovered from: the run aborts and
no output is written.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class GenerationError(Exception):
    """Base class for every condition that aborts a generation run."""

    def __init__(self, message: str, *, service_name: str | None = None) -> None:
        self.service_name = service_name
        if service_name:
            message = f"[{service_name}] {message}"
        super().__init__(message)


class UnresolvedReferenceError(GenerationError):
    """A reference names an entity that does not exist in the document."""

    def __init__(self, reference: str, *, service_name: str | None = None) -> None:
        self.reference = reference
        msg = f"Failed to find definition named: {reference}"
        super().__init__(msg, service_name=service_name)


class UnsupportedTypeError(GenerationError):
    """A schema has a shape the type mapper has no Swift type for."""

    def __init__(self, description: str, *, context: str | None = None, service_name: str | None = None) -> None:
        self.description = description
        self.context = context
        msg = f"Unsupported schema type {description}"
        if context:
            msg = f"{msg} at {context}"
        super().__init__(msg, service_name=service_name)


class DuplicateTypeNameError(GenerationError):
    """Two distinct schema definitions generate the same type name."""

    def __init__(
        self,
        type_name: str,
        *,
        first_source: str,
        second_source: str,
        service_name: str | None = None,
    ) -> None:
        self.type_name = type_name
        self.first_source = first_source
        self.second_source = second_source
        msg = f"Type name {type_name} is generated by both {first_source} and {second_source}"
        super().__init__(msg, service_name=service_name)


class CyclicReferenceError(GenerationError):
    """A definition refers back to itself, directly or through other definitions."""

    def __init__(self, chain: Sequence[str], *, service_name: str | None = None) -> None:
        self.chain = tuple(chain)
        msg = f"Cyclic reference detected: {' -> '.join(self.chain)}"
        super().__init__(msg, service_name=service_name)


class OutputWriteError(GenerationError):
    """Generated output could not be written to disk."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        msg = f"Failed to write {path}: {reason}"
        super().__init__(msg)
