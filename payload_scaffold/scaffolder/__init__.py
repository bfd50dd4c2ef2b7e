"""Payload Scaffold scaffolder -- validates and renders Payload CMS projects.

This module takes a project specification (a JSON-shaped mapping describing
collections, globals, blocks and plugins), validates the whole tree, and
renders a ready-to-install Payload CMS project.

Quick usage::

    from payload_scaffold.scaffolder import ProjectScaffolder

    scaffolder = ProjectScaffolder()
    errors = scaffolder.validate(options)
    response = await scaffolder.scaffold(options, "/tmp/output/my-site")
"""

from payload_scaffold.scaffolder.generator import ProjectScaffolder
from payload_scaffold.scaffolder.models import (
    FilePlan,
    ProjectSpec,
    ScaffoldError,
    ScaffoldResponse,
    ScaffoldResult,
)
from payload_scaffold.scaffolder.plan import build_file_plan
from payload_scaffold.scaffolder.render import ScaffoldContractError, render_entity, render_field
from payload_scaffold.scaffolder.templates import TemplateRenderer
from payload_scaffold.scaffolder.validate import validate_project

__all__ = [
    "FilePlan",
    "ProjectScaffolder",
    "ProjectSpec",
    "ScaffoldContractError",
    "ScaffoldError",
    "ScaffoldResponse",
    "ScaffoldResult",
    "TemplateRenderer",
    "build_file_plan",
    "render_entity",
    "render_field",
    "validate_project",
]
