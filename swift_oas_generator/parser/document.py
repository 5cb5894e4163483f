"""
Swagger document loading.

Parsing the document text is delegated to PyYAML (YAML) and the json
module (JSON). This module wraps the parsed data in a read-only view
exposing what the generator needs: the service title, the reusable
definitions, parameters and responses, and the operations.
"""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Final

import yaml

from swift_oas_generator.gen_logging import get_logger
from swift_oas_generator.utils.string_case import service_name_from_title

logger = get_logger(__name__)

HTTP_METHODS: Final = ("get", "put", "post", "delete", "patch", "options", "head")

GLOBAL_HEADERS_EXTENSION: Final = "x-global-headers"


def _empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class OperationEntry:
    """One operation of the document together with its location."""

    path: str
    method: str
    operation: Mapping[str, Any]
    path_parameters: tuple[Mapping[str, Any], ...] = ()


@dataclass(frozen=True)
class SwaggerDocument:
    """Read-only view over a parsed Swagger 2.0 document."""

    title: str
    service_name: str
    description: str | None = None
    definitions: Mapping[str, Any] = field(default_factory=_empty_mapping)
    parameters: Mapping[str, Any] = field(default_factory=_empty_mapping)
    responses: Mapping[str, Any] = field(default_factory=_empty_mapping)
    paths: Mapping[str, Any] = field(default_factory=_empty_mapping)
    consumes: tuple[str, ...] = ()
    base_path: str = ""
    global_headers: tuple[str, ...] = ()
    source: Path | None = field(default=None, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: Path | None = None) -> SwaggerDocument:
        """Build a document view from parsed document data."""
        if not isinstance(data, Mapping):
            msg = f"Document {source or '<memory>'} is not a mapping"
            raise ValueError(msg)

        info = data.get("info") or {}
        title = str(info.get("title", ""))
        base_path = str(data.get("basePath") or "")

        return cls(
            title=title,
            service_name=service_name_from_title(title),
            description=info.get("description"),
            definitions=MappingProxyType(dict(data.get("definitions") or {})),
            parameters=MappingProxyType(dict(data.get("parameters") or {})),
            responses=MappingProxyType(dict(data.get("responses") or {})),
            paths=MappingProxyType(dict(data.get("paths") or {})),
            consumes=tuple(data.get("consumes") or ()),
            base_path="" if base_path == "/" else base_path.rstrip("/"),
            global_headers=tuple(data.get(GLOBAL_HEADERS_EXTENSION) or ()),
            source=source,
        )

    def with_global_headers(self, headers: tuple[str, ...]) -> SwaggerDocument:
        """Return a copy whose global header list also holds ``headers``.

        Names already present (compared case-insensitively) are not repeated.
        """
        merged = list(self.global_headers)
        seen = {name.lower() for name in merged}
        for name in headers:
            if name.lower() not in seen:
                merged.append(name)
                seen.add(name.lower())
        return replace(self, global_headers=tuple(merged))

    def operations(self) -> Iterator[OperationEntry]:
        """Iterate operations in document order."""
        for path, path_item in self.paths.items():
            if not isinstance(path_item, Mapping):
                continue
            path_parameters = tuple(path_item.get("parameters") or ())
            for method, operation in path_item.items():
                if method.lower() in HTTP_METHODS and isinstance(operation, Mapping):
                    yield OperationEntry(
                        path=path,
                        method=method.lower(),
                        operation=operation,
                        path_parameters=path_parameters,
                    )


@dataclass(frozen=True)
class SwaggerFile:
    """A manifest listing documents and the headers shared by all of them."""

    documents: tuple[Path, ...]
    global_headers: tuple[str, ...] = ()


def _parse_text(path: Path) -> Any:  # noqa: ANN401
    content = path.read_text(encoding="utf-8")
    if path.suffix == ".json":
        return json.loads(content)
    # YAML is a superset of JSON, so anything else goes through the YAML parser
    return yaml.safe_load(content)


def load_document(path: str | Path) -> SwaggerDocument:
    """Load a Swagger document from a YAML or JSON file."""
    file_path = Path(path)
    document = SwaggerDocument.from_dict(_parse_text(file_path), source=file_path)
    logger.debug("Loaded %s (%d paths, %d definitions)", file_path, len(document.paths), len(document.definitions))
    return document


def load_swagger_file(path: str | Path) -> SwaggerFile:
    """Load a swagger manifest.

    The manifest holds ``services``, a list of document paths relative to
    the manifest, and an optional ``globalHeaders`` list.
    """
    file_path = Path(path)
    data = _parse_text(file_path)
    if not isinstance(data, Mapping):
        msg = f"Swagger file {file_path} is not a mapping"
        raise ValueError(msg)

    services = data.get("services") or []
    if not isinstance(services, list):
        msg = f"Swagger file {file_path}: 'services' must be a list of document paths"
        raise ValueError(msg)

    return SwaggerFile(
        documents=tuple(file_path.parent / str(service) for service in services),
        global_headers=tuple(str(header) for header in data.get("globalHeaders") or ()),
    )
