#!/usr/bin/env python3
"""Command-line interface for the Swift OAS Generator."""

import argparse
import json
import sys
import traceback
from pathlib import Path

import yaml
from jinja2 import TemplateError

from swift_oas_generator.config import DEFAULT_PROJECT_NAME, GeneratorConfig
from swift_oas_generator.errors import GenerationError, OutputWriteError
from swift_oas_generator.gen_logging import configure_logging
from swift_oas_generator.generator.template_engine import SwiftCodeGenerator, SwiftTemplateEngine
from swift_oas_generator.parser.document import SwaggerDocument, load_document, load_swagger_file
from swift_oas_generator.utils.file_utils import backup_and_clean_output_dir, write_files_to_disk

# Exit codes for better error reporting
EXIT_SUCCESS = 0
EXIT_FILE_NOT_FOUND = 1
EXIT_INVALID_DOCUMENT = 2
EXIT_GENERATION_ERROR = 3
EXIT_WRITE_ERROR = 4


def parse_command_line_args(args: list[str] | None = None) -> argparse.Namespace:
    """Create and configure the command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Generate a Swift client package from Swagger documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s petstore.yml
  %(prog)s petstore.yml users.json --output ./Client --project-name Services
  %(prog)s --swagger-file SwaggerFile.yml --global-header x-OS --verbose
        """,
    )
    parser.add_argument(
        "spec_files",
        type=Path,
        nargs="*",
        help="Paths to Swagger documents (JSON or YAML)",
        metavar="SPEC_FILE",
    )
    parser.add_argument(
        "--swagger-file",
        "-s",
        type=Path,
        help="Manifest listing the documents to generate and their shared global headers",
        dest="swagger_file",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path("./generated"),
        help="Output directory of the generated Swift package (default: %(default)s)",
        dest="output_dir",
    )
    parser.add_argument(
        "--project-name",
        "-p",
        default=DEFAULT_PROJECT_NAME,
        help="Name of the generated Swift package and target (default: %(default)s)",
        dest="project_name",
    )
    parser.add_argument(
        "--global-header",
        "-g",
        action="append",
        default=[],
        help="Header attached to every operation of every service (repeatable)",
        dest="global_headers",
        metavar="HEADER",
    )
    parser.add_argument(
        "--template-dir",
        "-t",
        type=Path,
        help="Custom template directory (optional)",
        dest="template_dir",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )
    verbosity.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only report warnings and errors",
    )

    parsed_args = parser.parse_args(args)

    if not parsed_args.spec_files and parsed_args.swagger_file is None:
        parser.error("at least one SPEC_FILE or --swagger-file is required")

    return parsed_args


def print_verbose_info(*, documents: list[SwaggerDocument]) -> None:
    """Print verbose information about the loaded documents."""
    for document in documents:
        operation_count = sum(1 for _ in document.operations())
        print(f"{document.service_name}: {operation_count} operations, {len(document.definitions)} definitions")


def print_generation_summary(*, file_count: int, files: dict[Path, str], output_dir: Path) -> None:
    """Print summary of generated files."""
    print(f"Generated {file_count} files:")
    for file_path in sorted(files.keys()):
        print(f"  {file_path}")
    print(f"\nSwift client generated successfully in {output_dir}")


def load_documents(parsed_args: argparse.Namespace) -> tuple[list[SwaggerDocument], tuple[str, ...]]:
    """Load every requested document and the global headers shared by all of them."""
    paths = list(parsed_args.spec_files)
    global_headers: list[str] = []

    if parsed_args.swagger_file is not None:
        swagger_file = load_swagger_file(parsed_args.swagger_file)
        paths.extend(swagger_file.documents)
        global_headers.extend(swagger_file.global_headers)

    global_headers.extend(parsed_args.global_headers)
    return [load_document(path) for path in paths], tuple(global_headers)


def generate_swift_client(
    *,
    documents: list[SwaggerDocument],
    config: GeneratorConfig,
    template_dir: Path | None = None,
) -> dict[Path, str]:
    """Generate the Swift package files of every document."""
    generator = SwiftCodeGenerator(SwiftTemplateEngine(template_dir))
    return generator.generate_client(documents, config)


def main(args: list[str] | None = None) -> int:
    """Generate a Swift client from Swagger documents."""
    parsed_args = parse_command_line_args(args)
    configure_logging(verbose=parsed_args.verbose, quiet=parsed_args.quiet)

    try:
        documents, global_headers = load_documents(parsed_args)

        if parsed_args.verbose:
            print_verbose_info(documents=documents)

        config = GeneratorConfig(
            output_dir=parsed_args.output_dir,
            project_name=parsed_args.project_name,
            global_headers=global_headers,
        )
        generated_files = generate_swift_client(
            documents=documents,
            config=config,
            template_dir=parsed_args.template_dir,
        )

        # Nothing touches the output directory until every service is generated
        with backup_and_clean_output_dir(parsed_args.output_dir):
            write_files_to_disk(generated_files)

        if parsed_args.verbose:
            print_generation_summary(
                file_count=len(generated_files),
                files=generated_files,
                output_dir=parsed_args.output_dir,
            )
        elif not parsed_args.quiet:
            print(f"Swift client generated successfully in {parsed_args.output_dir}")

        return EXIT_SUCCESS

    except FileNotFoundError as e:
        print(f"Error: Swagger document not found: {e.filename}", file=sys.stderr)
        return EXIT_FILE_NOT_FOUND
    except (json.JSONDecodeError, yaml.YAMLError, ValueError) as e:
        print(f"Error: Invalid Swagger document: {e}", file=sys.stderr)
        return EXIT_INVALID_DOCUMENT
    except OutputWriteError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_WRITE_ERROR
    except (GenerationError, TemplateError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if parsed_args.verbose:
            traceback.print_exc()
        return EXIT_GENERATION_ERROR


if __name__ == "__main__":
    sys.exit(main())
