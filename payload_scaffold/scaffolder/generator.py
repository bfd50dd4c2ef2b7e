"""Main scaffolding orchestrator.

Sequences validate -> parse -> render -> plan -> write for one project
specification.  Validation is all-or-nothing: when any error is found no
entity file is rendered and nothing touches the disk.  Once a plan exists,
writes proceed one by one; a failed write is recorded and the remaining
files are still attempted.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from ..config import ScaffoldSettings
from ..utils import console
from .filesystem import LocalFileSystem
from .models import ProjectSpec, ScaffoldError, ScaffoldResponse, ScaffoldResult
from .plan import build_file_plan
from .render import ScaffoldContractError
from .templates import TemplateRenderer
from .validate import parse_project, validate_project


ProjectInput = Union[Mapping[str, Any], ProjectSpec]


class ProjectScaffolder:
    """Scaffolds Payload CMS projects from declarative specifications.

    Instances hold no per-call state, so one scaffolder can serve any number
    of independent (or concurrent) requests.
    """

    def __init__(
        self,
        settings: Optional[ScaffoldSettings] = None,
        filesystem: Optional[LocalFileSystem] = None,
        renderer: Optional[TemplateRenderer] = None,
        verbose: bool = False,
    ) -> None:
        self.settings = settings or ScaffoldSettings()
        self.filesystem = filesystem or LocalFileSystem()
        self.renderer = renderer or TemplateRenderer()
        self.verbose = verbose

    # -- Public API --------------------------------------------------------

    def validate(self, options: ProjectInput) -> list[ScaffoldError]:
        """Return every structural error in *options* (empty when valid)."""
        raw = _as_raw(options)
        errors = validate_project(raw)
        if errors:
            return errors
        _, errors = parse_project(raw)
        return errors

    def plan(self, options: ProjectInput, output_path: str | Path | None = None) -> ScaffoldResult:
        """Validate and render *options* without writing anything.

        Args:
            options: Raw project specification (mapping) or a parsed
                :class:`ProjectSpec`.
            output_path: Project root override.  Defaults to
                ``settings.output_dir / projectName``.

        Raises:
            ScaffoldContractError: *options* is neither a mapping nor a
                ``ProjectSpec``.
        """
        result, _ = self._prepare(options, output_path)
        return result

    async def scaffold(
        self, options: ProjectInput, output_path: str | Path | None = None
    ) -> ScaffoldResponse:
        """Validate, render and write a project to disk.

        Returns:
            A :class:`ScaffoldResponse`.  ``success`` is ``False`` when
            validation failed (nothing written) or when any directory or
            file could not be written (partial output stays on disk).
        """
        result, spec = self._prepare(options, output_path)
        if not result.success or result.plan is None or spec is None:
            return ScaffoldResponse(success=False, errors=result.errors)

        plan = result.plan
        root = Path(plan.root)
        errors: list[ScaffoldError] = []

        # 1. Directories (root first, then parents before children)
        for directory in [root, *(root / rel for rel in plan.directories)]:
            error = await asyncio.to_thread(self.filesystem.create_directory, directory)
            if error:
                errors.append(error)

        # 2. Files, in plan order
        written: list[str] = []
        for rel_path, content in plan.files.items():
            error = await asyncio.to_thread(self.filesystem.write_file, root / rel_path, content)
            if error:
                errors.append(error)
                continue
            written.append(rel_path)
            if self.verbose:
                console.print(f"  [dim]wrote[/dim] {rel_path}")

        admin_url = self.admin_url(spec)
        return ScaffoldResponse(
            success=not errors,
            project_path=str(root),
            admin_url=admin_url,
            files=written,
            directories=list(plan.directories),
            errors=errors,
            warnings=list(result.warnings),
            next_steps=self.next_steps(spec, root, admin_url),
        )

    def admin_url(self, spec: ProjectSpec) -> str:
        """URL of the generated project's admin panel."""
        base = spec.server_url or self.settings.default_server_url
        return f"{base.rstrip('/')}/admin"

    def next_steps(self, spec: ProjectSpec, root: Path, admin_url: str) -> list[str]:
        """Shell commands and hints shown after a successful scaffold."""
        manager = self.settings.package_manager
        target = spec.project_name if root.name == spec.project_name else str(root)
        steps = [
            f"cd {target}",
            "Set PAYLOAD_SECRET and DATABASE_URI in .env",
            f"{manager} install",
            f"{manager} dev",
            f"Open {admin_url}",
        ]
        if spec.authentication:
            steps.append("Create the first admin user on the login screen")
            steps.append("Add fields or access rules to src/collections/users as needed")
        return steps

    # -- Internals ---------------------------------------------------------

    def _prepare(
        self, options: ProjectInput, output_path: str | Path | None
    ) -> tuple[ScaffoldResult, Optional[ProjectSpec]]:
        raw = _as_raw(options)
        errors = validate_project(raw)
        if errors:
            return ScaffoldResult(success=False, errors=errors), None

        spec, errors = parse_project(raw)
        if spec is None:
            return ScaffoldResult(success=False, errors=errors), None

        root = self.settings.project_root(spec.project_name, output_path)
        plan, warnings = build_file_plan(spec, root, self.settings, self.renderer)
        result = ScaffoldResult(
            success=True,
            files=dict(plan.files),
            directories=list(plan.directories),
            warnings=warnings,
            plan=plan,
        )
        return result, spec


def _as_raw(options: ProjectInput) -> Mapping[str, Any]:
    if isinstance(options, ProjectSpec):
        return options.model_dump(by_alias=True, exclude_unset=True, mode="json")
    if isinstance(options, Mapping):
        return options
    raise ScaffoldContractError(
        f"Project options must be a mapping or ProjectSpec, got {type(options).__name__}"
    )
