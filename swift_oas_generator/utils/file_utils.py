"""
File utilities for the OAS generator.

This module provides file and directory operations for the Swift OAS generator.
Every filesystem failure is surfaced as an ``OutputWriteError``.
"""

import contextlib
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

from swift_oas_generator.errors import OutputWriteError
from swift_oas_generator.gen_logging import get_logger

logger = get_logger(__name__)


def write_files_to_disk(files: dict[Path, str]) -> None:
    """Write generated files to disk.

    Args:
        files: Dictionary mapping file paths to their content.

    Raises:
        OutputWriteError: If a directory or file cannot be written.
    """
    for path, content in files.items():
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise OutputWriteError(path, str(exc)) from exc
        logger.debug("Wrote %s", path)


@contextlib.contextmanager
def backup_and_clean_output_dir(output_dir: Path) -> Generator[None, None, None]:
    """Back up and clean the output directory, restoring it if the body fails."""
    backup_dir = None
    try:
        if output_dir.exists() and any(output_dir.iterdir()):
            backup_dir = Path(tempfile.mkdtemp())
            shutil.copytree(output_dir, backup_dir, dirs_exist_ok=True)

        # Clean output directory before writing
        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputWriteError(output_dir, str(exc)) from exc

    try:
        yield
    except Exception:
        logger.warning("Generation failed. Restoring original content of %s", output_dir)
        shutil.rmtree(output_dir, ignore_errors=True)
        if backup_dir:
            shutil.copytree(backup_dir, output_dir, dirs_exist_ok=True)
        raise
    finally:
        if backup_dir:
            shutil.rmtree(backup_dir, ignore_errors=True)
