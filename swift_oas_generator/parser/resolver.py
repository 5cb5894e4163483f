"""
Reference resolution for Swagger documents.

A schema node is either a reference (``{"$ref": "#/definitions/Pet"}``)
or an inline definition. References are looked up in one of the three
reusable namespaces of the document. A named response owns a schema,
which is followed transparently.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from swift_oas_generator.errors import CyclicReferenceError, UnresolvedReferenceError
from swift_oas_generator.gen_logging import get_logger
from swift_oas_generator.parser.document import SwaggerDocument

logger = get_logger(__name__)

DEFINITIONS_PREFIX: Final = "#/definitions/"
PARAMETERS_PREFIX: Final = "#/parameters/"
RESPONSES_PREFIX: Final = "#/responses/"

_NAMESPACE_PREFIXES: Final = (DEFINITIONS_PREFIX, PARAMETERS_PREFIX, RESPONSES_PREFIX)


def reference_key(reference: str) -> str:
    """Return the entry name a reference points at.

    Examples:
        >>> reference_key("#/definitions/Pet")
        'Pet'
        >>> reference_key("#/definitions/a~1b")
        'a/b'
    """
    key = reference.rsplit("/", 1)[-1]
    for prefix in _NAMESPACE_PREFIXES:
        if reference.startswith(prefix):
            key = reference[len(prefix) :]
            break
    return key.replace("~1", "/").replace("~0", "~")


def is_reference(node: Any) -> bool:  # noqa: ANN401
    """Check whether a schema node is a reference."""
    return isinstance(node, Mapping) and isinstance(node.get("$ref"), str)


class ReferenceResolver:
    """Resolves references against one document."""

    def __init__(self, document: SwaggerDocument) -> None:
        self.document = document
        self._namespaces: dict[str, Mapping[str, Any]] = {
            DEFINITIONS_PREFIX: document.definitions,
            PARAMETERS_PREFIX: document.parameters,
            RESPONSES_PREFIX: document.responses,
        }

    @property
    def service_name(self) -> str:
        return self.document.service_name

    def resolve(self, node: Mapping[str, Any]) -> Mapping[str, Any]:
        """Resolve a schema node into the concrete node it designates.

        Inline nodes are returned unchanged. References to named responses
        resolve to the response's schema.

        Raises:
            UnresolvedReferenceError: If the reference names no entry.
            CyclicReferenceError: If the reference chain loops.
        """
        resolved, _ = self._follow(node, ())
        return resolved

    def origin(self, node: Mapping[str, Any]) -> str | None:
        """Return the last reference of the chain ending at the concrete node.

        This is the structural identity of a referenced definition. Inline
        nodes have no origin.
        """
        _, origin = self._follow(node, ())
        return origin

    def resolve_with_origin(self, node: Mapping[str, Any]) -> tuple[Mapping[str, Any], str | None]:
        """Resolve a node and report its origin in one pass."""
        return self._follow(node, ())

    def resolve_response(self, node: Mapping[str, Any]) -> Mapping[str, Any]:
        """Resolve an operation response entry into a response object.

        Unlike ``resolve``, a named response is returned as the response
        object itself so its description and optional schema stay available.
        """
        chain: tuple[str, ...] = ()
        while is_reference(node):
            reference = node["$ref"]
            if not reference.startswith(RESPONSES_PREFIX):
                # A response entry pointing straight at a schema
                return {"schema": node}
            if reference in chain:
                raise CyclicReferenceError((*chain, reference), service_name=self.service_name)
            chain = (*chain, reference)
            node = self._lookup(reference)
        return node

    def _follow(self, node: Mapping[str, Any], chain: tuple[str, ...]) -> tuple[Mapping[str, Any], str | None]:
        match node:
            case {"$ref": str(reference)}:
                if reference in chain:
                    raise CyclicReferenceError((*chain, reference), service_name=self.service_name)
                entry = self._lookup(reference)
                if reference.startswith(RESPONSES_PREFIX):
                    schema = entry.get("schema")
                    if schema is None:
                        raise UnresolvedReferenceError(f"{reference}/schema", service_name=self.service_name)
                    return self._follow(schema, (*chain, reference))
                return self._follow(entry, (*chain, reference))
            case _:
                return node, chain[-1] if chain else None

    def _lookup(self, reference: str) -> Mapping[str, Any]:
        for prefix, entries in self._namespaces.items():
            if reference.startswith(prefix):
                key = reference_key(reference)
                entry = entries.get(key)
                if isinstance(entry, Mapping):
                    logger.debug("Resolved %s", reference)
                    return entry
                break
        raise UnresolvedReferenceError(reference, service_name=self.service_name)
