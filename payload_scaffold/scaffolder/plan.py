"""File-plan builder.

Turns a validated :class:`ProjectSpec` into a :class:`FilePlan`: every file
of the generated project keyed by its path relative to the project root,
plus the directories that must exist.  Building the plan performs no I/O;
the orchestrator writes it afterwards.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from ..config import ScaffoldSettings
from .js import js_property, js_value
from .models import FilePlan, PluginConfig, ProjectSpec
from .naming import collection_export, global_export, pascal_name
from .render import (
    render_block,
    render_block_component,
    render_blocks_index,
    render_collection,
    render_global,
)
from .templates import TemplateRenderer


# Directories created even when no planned file lives in them.
EXTRA_DIRECTORIES: tuple[str, ...] = ("src/hooks", "src/components", "media", "public/assets")

ACCESS_HELPERS: tuple[str, ...] = ("authenticated", "anyone", "authenticatedOrPublished")

# Admin keys the generated config always sets itself.
RESERVED_ADMIN_KEYS: tuple[str, ...] = ("user", "importMap")

MEDIA_WARNING = (
    "Authentication is enabled and no 'media' collection was declared; "
    "a default 'media' upload collection was added."
)

USERS_WARNING = (
    "Authentication defaults to on and no 'users' collection was declared; "
    "a default 'users' auth collection was added."
)


def resolve_typescript(spec: ProjectSpec, settings: ScaffoldSettings) -> bool:
    """The spec's ``typescript`` flag, falling back to the settings default."""
    return settings.typescript if spec.typescript is None else spec.typescript


def plugin_variable(package: str, index: int) -> str:
    """``@payloadcms/plugin-seo`` at index 0 -> ``payloadcmsPluginSeo0``."""
    name = pascal_name(package).lstrip("_")
    return f"{name[:1].lower()}{name[1:]}{index}"


def build_package_json(spec: ProjectSpec, settings: ScaffoldSettings, typescript: bool) -> str:
    """Render ``package.json`` for the project."""
    lexical_version = (
        spec.rich_text_editor.version if spec.rich_text_editor else settings.default_lexical_version
    )
    adapter = "@payloadcms/db-postgres" if spec.database.value == "postgres" else "@payloadcms/db-mongodb"

    dependencies: dict[str, str] = {
        "@payloadcms/next": settings.payload_version,
        "@payloadcms/richtext-lexical": lexical_version,
        adapter: settings.payload_version,
        "cross-env": "^7.0.3",
        "graphql": "^16.8.2",
        "next": settings.next_version,
        "payload": settings.payload_version,
        "react": settings.react_version,
        "react-dom": settings.react_version,
        "sharp": "0.32.6",
    }
    for plugin in spec.plugins:
        package = plugin.package if isinstance(plugin, PluginConfig) else plugin
        dependencies.setdefault(package, "latest")

    dev_dependencies: dict[str, str] = {
        "eslint": "^9.16.0",
        "eslint-config-next": settings.next_version,
        "prettier": "^3.4.2",
    }
    if typescript:
        dev_dependencies.update(
            {
                "@types/node": "^22.5.4",
                "@types/react": "^19.0.12",
                "@types/react-dom": "^19.0.4",
                "typescript": "^5.7.3",
            }
        )

    manifest: dict[str, Any] = {
        "name": spec.project_name,
        "version": "1.0.0",
        "description": spec.description or "A Payload CMS project",
        "license": "MIT",
        "type": "module",
        "scripts": {
            "build": "cross-env NODE_OPTIONS=--no-deprecation next build",
            "dev": "cross-env NODE_OPTIONS=--no-deprecation next dev",
            "generate:importmap": "cross-env NODE_OPTIONS=--no-deprecation payload generate:importmap",
            "generate:types": "cross-env NODE_OPTIONS=--no-deprecation payload generate:types",
            "lint": "cross-env NODE_OPTIONS=--no-deprecation next lint",
            "payload": "cross-env NODE_OPTIONS=--no-deprecation payload",
            "start": "cross-env NODE_OPTIONS=--no-deprecation next start",
        },
        "dependencies": dict(sorted(dependencies.items())),
        "devDependencies": dict(sorted(dev_dependencies.items())),
        "engines": {"node": "^18.20.2 || >=20.9.0"},
    }
    return json.dumps(manifest, indent=2) + "\n"


def plan_directories(paths: list[str]) -> list[str]:
    """Every parent directory of *paths* plus :data:`EXTRA_DIRECTORIES`, sorted."""
    directories: set[str] = set(EXTRA_DIRECTORIES)
    for path in [*paths, *EXTRA_DIRECTORIES]:
        parts = path.split("/")[:-1]
        for depth in range(1, len(parts) + 1):
            directories.add("/".join(parts[:depth]))
    return sorted(directories)


def build_file_plan(
    spec: ProjectSpec,
    root: str | Path,
    settings: Optional[ScaffoldSettings] = None,
    renderer: Optional[TemplateRenderer] = None,
) -> tuple[FilePlan, list[str]]:
    """Render every entity and boilerplate file of a validated project.

    Args:
        spec: A parsed project that passed validation.
        root: Project root recorded on the plan.
        settings: Versions and defaults; ``ScaffoldSettings()`` when omitted.
        renderer: Template renderer for boilerplate files.

    Returns:
        ``(plan, warnings)``.
    """
    settings = settings or ScaffoldSettings()
    renderer = renderer or TemplateRenderer()
    typescript = resolve_typescript(spec, settings)
    ext = "ts" if typescript else "js"
    warnings: list[str] = []

    # -- Entities ----------------------------------------------------------

    entity_files: dict[str, str] = {}
    collection_imports: list[dict[str, str]] = []
    for collection in spec.collections:
        force_auth = spec.authentication and collection.slug == "users"
        if force_auth and collection.auth is None:
            warnings.append("Enabled 'auth' on the 'users' collection because authentication is on.")
        generated = render_collection(collection, typescript=typescript, force_auth=force_auth)
        entity_files[generated.path] = generated.content
        collection_imports.append({"name": collection_export(collection.slug), "path": collection.slug})

    context = template_context(spec, settings, typescript)

    # Validation only lets this through when the flag was omitted.
    if spec.authentication and spec.collection("users") is None:
        entity_files[f"src/collections/users.{ext}"] = renderer.render("collections/users.j2", context)
        collection_imports.append({"name": "Users", "path": "users"})
        warnings.append(USERS_WARNING)

    if spec.authentication and spec.collection("media") is None:
        entity_files[f"src/collections/media.{ext}"] = renderer.render("collections/media.j2", context)
        collection_imports.append({"name": "Media", "path": "media"})
        warnings.append(MEDIA_WARNING)

    global_imports: list[dict[str, str]] = []
    for global_ in spec.globals:
        generated = render_global(global_, typescript=typescript)
        entity_files[generated.path] = generated.content
        global_imports.append({"name": global_export(global_.slug), "path": global_.slug})

    for block in spec.blocks:
        for generated in (
            render_block(block, typescript=typescript),
            render_block_component(block, typescript=typescript),
        ):
            entity_files[generated.path] = generated.content
    if spec.blocks:
        index = render_blocks_index(spec.blocks, typescript=typescript)
        entity_files[index.path] = index.content

    # -- Boilerplate -------------------------------------------------------

    context.update(
        collection_imports=collection_imports,
        global_imports=global_imports,
        collection_slugs=[item["path"] for item in collection_imports],
        collection_names=[item["name"] for item in collection_imports],
        global_names=[item["name"] for item in global_imports],
    )

    files: dict[str, str] = {
        ".env": renderer.render("env.j2", context),
        ".gitignore": renderer.render("gitignore.j2", context),
        "package.json": build_package_json(spec, settings, typescript),
        "README.md": renderer.render("README.md.j2", context),
    }
    if typescript:
        files["tsconfig.json"] = renderer.render("tsconfig.json.j2", context)
    files[f"src/payload.config.{ext}"] = renderer.render("payload.config.j2", context)
    files.update(entity_files)
    for helper in ACCESS_HELPERS:
        files[f"src/access/{helper}.{ext}"] = renderer.render(f"access/{helper}.j2", context)
    files["src/styles/admin.scss"] = renderer.render("styles/admin.scss.j2", context)

    plan = FilePlan(root=str(root), files=files, directories=plan_directories(list(files)))
    return plan, warnings


def template_context(spec: ProjectSpec, settings: ScaffoldSettings, typescript: bool) -> dict[str, Any]:
    """Variables shared by the boilerplate templates and ``payload.config``.

    The import lists start empty; :func:`build_file_plan` fills them once
    every entity module is known.
    """
    admin = spec.admin or {}
    plugins = []
    for index, plugin in enumerate(spec.plugins):
        package = plugin.package if isinstance(plugin, PluginConfig) else plugin
        options = plugin.options if isinstance(plugin, PluginConfig) else None
        plugins.append(
            {
                "var": plugin_variable(package, index),
                "package": package,
                "options": js_value(options, 2) if options is not None else "",
            }
        )

    return {
        "project_name": spec.project_name,
        "description": spec.description,
        "database": spec.database.value,
        "db_name": spec.project_name.replace(".", "-").replace("_", "-"),
        "server_url": spec.server_url or settings.default_server_url,
        "typescript": typescript,
        "ext": "ts" if typescript else "js",
        "auth": spec.authentication,
        "admin_user": "users" if spec.authentication else None,
        "admin_lines": [
            js_property(key, js_value(value, 2), 2)
            for key, value in admin.items()
            if key not in RESERVED_ADMIN_KEYS
        ],
        "default_meta": "meta" not in admin,
        "package_manager": settings.package_manager,
        "plugins": plugins,
        "cors": js_value(spec.cors, 1) if spec.cors is not None else None,
        "localization": js_value(spec.i18n, 1) if spec.i18n else None,
        "collection_slugs": [collection.slug for collection in spec.collections],
        "global_slugs": [global_.slug for global_ in spec.globals],
        "block_slugs": [block.slug for block in spec.blocks],
        "collection_imports": [],
        "global_imports": [],
        "collection_names": [],
        "global_names": [],
        "config_lines": [],
    }
