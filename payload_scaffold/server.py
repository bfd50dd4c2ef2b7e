"""MCP tool server exposing the scaffolder.

Tools:
  scaffold_project          validate, render and write a project
  validate_scaffold_options validate a specification without rendering
  plan_scaffold             list the files a specification would produce
  generate_template         render one collection, field, hook, plugin, ... module

Transport: stdio by default.  Nothing here prints to stdout, since stdout
carries the protocol stream; results are returned as JSON-able dicts.
"""

from typing import Any, Optional

from fastmcp import FastMCP

from .config import ScaffoldSettings
from .generators import GeneratorOptionsError, generate_template as run_generator
from .scaffolder.generator import ProjectScaffolder


SERVER_NAME = "Payload Scaffold"


def _scaffolder() -> ProjectScaffolder:
    return ProjectScaffolder(settings=ScaffoldSettings.from_env())


async def scaffold_project(options: dict[str, Any], output_path: Optional[str] = None) -> dict[str, Any]:
    """Scaffold a complete Payload CMS project from a project specification.

    Returns ``{success, project_path, admin_url, files, directories, errors,
    warnings, next_steps}``.  When validation fails nothing is written and
    every error is listed with its breadcrumb and suggestion.
    """
    response = await _scaffolder().scaffold(options, output_path)
    return response.model_dump()


def validate_scaffold_options(options: dict[str, Any]) -> dict[str, Any]:
    """Validate a project specification and report all errors at once."""
    errors = _scaffolder().validate(options)
    return {"valid": not errors, "errors": [error.model_dump() for error in errors]}


def plan_scaffold(options: dict[str, Any]) -> dict[str, Any]:
    """Preview the files and directories a specification would produce."""
    result = _scaffolder().plan(options)
    return {
        "success": result.success,
        "root": result.plan.root if result.plan else None,
        "files": list(result.files),
        "directories": result.directories,
        "warnings": result.warnings,
        "errors": [error.model_dump() for error in result.errors],
    }


def generate_template(template_type: str, options: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Generate one Payload module for an existing project.

    Returns ``{success, code, file_name, language, additional_files,
    output_path}``, or ``{success: False, errors}`` when the options fail
    validation.  An unknown *template_type* raises.
    """
    try:
        result = run_generator(template_type, options, settings=ScaffoldSettings.from_env())
    except GeneratorOptionsError as exc:
        return {"success": False, "errors": [error.model_dump() for error in exc.errors]}
    return {"success": True, **result.model_dump()}


def create_server() -> FastMCP:
    """Build the FastMCP server with every scaffolder tool registered."""
    server = FastMCP(SERVER_NAME)
    server.tool(
        name="scaffold_project",
        description=(
            "Create a Payload CMS project (collections, globals, blocks, config, "
            "boilerplate) from a declarative specification."
        ),
    )(scaffold_project)
    server.tool(
        name="validate_scaffold_options",
        description="Validate a Payload project specification and list every problem found.",
    )(validate_scaffold_options)
    server.tool(
        name="plan_scaffold",
        description="List the files a Payload project specification would generate, without writing.",
    )(plan_scaffold)
    server.tool(
        name="generate_template",
        description=(
            "Generate a single Payload module (collection, field, config, access-control, hook, "
            "endpoint, plugin, block, migration or component) from generator options."
        ),
    )(generate_template)
    return server


def main() -> None:
    """Entry point for ``payload-scaffold-mcp``."""
    create_server().run()


if __name__ == "__main__":
    main()
