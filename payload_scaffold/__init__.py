"""Payload Scaffold -- generate Payload CMS projects from declarative specs."""

from payload_scaffold.config import ScaffoldSettings
from payload_scaffold.scaffolder import ProjectScaffolder, ScaffoldError, validate_project

__version__ = "0.1.0"

__all__ = [
    "ProjectScaffolder",
    "ScaffoldError",
    "ScaffoldSettings",
    "validate_project",
]
