"""Run configuration for a generation pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_PROJECT_NAME = "Services"
DEFAULT_SWIFT_TOOLS_VERSION = "5.3"


@dataclass(frozen=True)
class GeneratorConfig:
    """Explicit configuration handed to the code generator.

    Attributes:
        output_dir: Root directory of the generated Swift package.
        project_name: Name of the Swift package and of its single target.
        global_headers: Header names attached to every operation of every service.
        swift_tools_version: Version written to the generated Package.swift.
    """

    output_dir: Path = Path("./generated")
    project_name: str = DEFAULT_PROJECT_NAME
    global_headers: tuple[str, ...] = field(default_factory=tuple)
    swift_tools_version: str = DEFAULT_SWIFT_TOOLS_VERSION

    @property
    def sources_dir(self) -> Path:
        """Directory holding the target's Swift sources."""
        return self.output_dir / "Sources" / self.project_name
