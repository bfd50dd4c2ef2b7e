"""Command-line entry point.

Usage::

    python -m payload_scaffold.cli project.yaml
    python -m payload_scaffold.cli project.json --output ./sites/blog
    python -m payload_scaffold.cli project.yaml --check
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

import yaml

from .config import ScaffoldSettings
from .scaffolder.generator import ProjectScaffolder
from .utils import (
    console,
    format_duration,
    load_spec_file,
    print_error,
    print_scaffold_errors,
    print_success,
    print_summary_table,
    print_warning,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payload-scaffold",
        description="Payload Scaffold -- generate a Payload CMS project from a specification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  payload-scaffold project.yaml\n"
            "  payload-scaffold project.json -o ./sites/blog\n"
            "  payload-scaffold project.yaml --check\n"
            "  payload-scaffold project.yaml --plan\n"
        ),
    )
    parser.add_argument("spec", help="Path to the project specification (JSON or YAML)")
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Project directory (default: <output_dir>/<projectName>)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--check", action="store_true", help="Validate only; write nothing")
    mode.add_argument("--plan", action="store_true", help="Print the files that would be written")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print each file as it is written")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entry point for ``python -m payload_scaffold.cli``."""
    args = build_parser().parse_args(argv)

    spec_path = Path(args.spec)
    if not spec_path.exists():
        print_error(f"Error: Specification file not found: {spec_path}")
        sys.exit(1)

    try:
        options = load_spec_file(spec_path)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        print_error(f"Error: Could not parse {spec_path}: {exc}")
        sys.exit(1)

    if not isinstance(options, dict):
        print_error(f"Error: {spec_path} must contain an object at the top level")
        sys.exit(1)

    scaffolder = ProjectScaffolder(settings=ScaffoldSettings.from_env(), verbose=args.verbose)

    if args.check:
        errors = scaffolder.validate(options)
        if errors:
            print_scaffold_errors(errors)
            sys.exit(1)
        print_success("Specification is valid.")
        return

    if args.plan:
        result = scaffolder.plan(options, args.output)
        if not result.success:
            print_scaffold_errors(result.errors)
            sys.exit(1)
        print_summary_table(
            {path: f"{len(content)} chars" for path, content in result.files.items()},
            title=f"Plan: {result.plan.root if result.plan else ''}",
        )
        for warning in result.warnings:
            print_warning(warning)
        return

    started = time.monotonic()
    response = asyncio.run(scaffolder.scaffold(options, args.output))
    if response.errors:
        print_scaffold_errors(response.errors, title="Scaffold errors")
    for warning in response.warnings:
        print_warning(warning)
    if not response.success:
        print_error("Scaffold failed.")
        sys.exit(1)

    print_success(
        f"Created {len(response.files)} files in {response.project_path} "
        f"({format_duration(time.monotonic() - started)})"
    )
    console.print("[bold]Next steps:[/bold]")
    for step in response.next_steps:
        console.print(f"  {step}")


if __name__ == "__main__":
    main()
