"""Standalone ``payload.config`` generation.

Generates:
- ``src/payload.config.ts`` -- the root config, importing collections and
  globals by slug from ``./collections`` and ``./globals``

Renders the same ``payload.config.j2`` template the project scaffolder
uses.  Root options are checked by the project validator; the slug lists
are checked here, including export-name collisions.
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import Field

from ..config import ScaffoldSettings
from ..scaffolder.identifiers import validate_global_slug, validate_slug
from ..scaffolder.js import js_property, js_value
from ..scaffolder.models import ProjectSpec, ScaffoldError
from ..scaffolder.naming import collection_export, global_export
from ..scaffolder.plan import template_context
from ..scaffolder.templates import TemplateRenderer
from ..scaffolder.validate import validate_export_names, validate_project
from .models import GeneratedCode, GeneratorOptions, option_error, parse_options, raise_for


# Option key -> config key, emitted after localization when present.
SECTION_KEYS: tuple[tuple[str, str], ...] = (
    ("graphql", "graphQL"),
    ("routes", "routes"),
    ("upload", "upload"),
)


class ConfigOptions(GeneratorOptions):
    project_name: str = Field(default="payload", alias="projectName")
    database: Literal["mongodb", "postgres"] = "mongodb"
    server_url: Optional[str] = Field(default=None, alias="serverUrl")
    authentication: bool = False
    typescript: bool = True
    collections: list[str] = Field(default_factory=list)
    globals: list[str] = Field(default_factory=list)
    plugins: list[Union[str, dict[str, Any]]] = Field(default_factory=list)
    admin: Optional[dict[str, Any]] = None
    cors: Union[list[str], bool, None] = None
    i18n: Optional[dict[str, Any]] = None
    graphql: Optional[dict[str, Any]] = Field(default=None, alias="graphQL")
    routes: Optional[dict[str, Any]] = None
    upload: Optional[dict[str, Any]] = None


class ConfigGenerator:
    """Generates a root Payload config for existing collection and global modules."""

    def __init__(self, renderer: TemplateRenderer, settings: Optional[ScaffoldSettings] = None) -> None:
        self.renderer = renderer
        self.settings = settings or ScaffoldSettings()

    def generate(self, options: Any) -> GeneratedCode:
        opts = parse_options(ConfigOptions, options)
        project = opts.model_dump(
            by_alias=True,
            include={"project_name", "database", "server_url", "typescript", "plugins", "admin", "cors", "i18n"},
            exclude_none=True,
        )
        raise_for(validate_project(project) + self._slug_errors(opts))

        spec = ProjectSpec.model_validate({**project, "authentication": opts.authentication})
        context = template_context(spec, self.settings, opts.typescript)
        collection_imports = [{"name": collection_export(slug), "path": slug} for slug in opts.collections]
        global_imports = [{"name": global_export(slug), "path": slug} for slug in opts.globals]
        context.update(
            collection_imports=collection_imports,
            global_imports=global_imports,
            collection_names=[item["name"] for item in collection_imports],
            global_names=[item["name"] for item in global_imports],
            config_lines=[
                js_property(key, js_value(getattr(opts, attribute), 1), 1)
                for attribute, key in SECTION_KEYS
                if getattr(opts, attribute)
            ],
        )

        ext = "ts" if opts.typescript else "js"
        return GeneratedCode(
            code=self.renderer.render("payload.config.j2", context),
            file_name=f"src/payload.config.{ext}",
            language="typescript" if opts.typescript else "javascript",
        )

    @staticmethod
    def _slug_errors(opts: ConfigOptions) -> list[ScaffoldError]:
        errors: list[ScaffoldError] = []
        exported: list[tuple[str, str, str]] = []
        seen: set[str] = set()
        for index, slug in enumerate(opts.collections):
            path = f"collections[{index}]"
            error = validate_slug(slug, "collection", path)
            if error is None and slug in seen:
                error = ScaffoldError(
                    code="DUPLICATE_COLLECTION_SLUG",
                    message=f"Duplicate collection slug '{slug}' found.",
                    field=f"{path}.slug",
                )
            if error:
                errors.append(error)
                continue
            seen.add(slug)
            exported.append((collection_export(slug), "collection", path))
        for index, slug in enumerate(opts.globals):
            path = f"globals[{index}]"
            error = validate_global_slug(slug, path)
            if error:
                errors.append(error)
                continue
            exported.append((global_export(slug), "global", path))
        errors.extend(validate_export_names(exported))

        if opts.authentication and "users" not in opts.collections:
            errors.append(
                option_error(
                    "collections",
                    "Authentication is enabled but 'users' is not among the collections.",
                    suggestion="Add 'users' to collections or set authentication to false.",
                )
            )
        return errors
