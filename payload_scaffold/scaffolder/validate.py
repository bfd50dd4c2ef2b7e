"""Recursive validation of a raw project specification.

:func:`validate_project` walks the caller's JSON-shaped tree depth-first and
returns every problem it finds as a :class:`ScaffoldError`, in discovery
order.  It never raises for malformed input: a non-mapping root, a field
that is a string, a ``blocks`` array full of ``None`` all become entries in
the returned list.  An empty list means the tree is safe to parse and render.

Uniqueness is scoped.  Field names must be unique among siblings only; block
slugs must be unique within one ``blocks`` field; collection slugs, global
slugs and top-level block slugs each form their own project-wide namespace.
Generated export names are checked too: distinct slugs such as ``post-2`` and
``post2`` both become ``Post2``.  All ``seen`` sets are local to a single call.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import ValidationError

from .fields import FIELD_KINDS, VALID_FIELD_TYPES
from .identifiers import (
    is_identifier,
    validate_global_slug,
    validate_identifier_name,
    validate_package_name,
    validate_project_name,
    validate_semver,
    validate_server_url,
    validate_slug,
)
from .models import ProjectSpec, ScaffoldError
from .naming import block_export, collection_export, global_export


SUPPORTED_DATABASES: tuple[str, ...] = ("mongodb", "postgres")
ENDPOINT_METHODS: tuple[str, ...] = ("get", "post", "put", "patch", "delete")

# Root flag -> error code reported for a non-boolean value.
BOOLEAN_FLAGS: dict[str, str] = {
    "authentication": "INVALID_AUTHENTICATION",
    "typescript": "INVALID_TYPESCRIPT_FLAG",
    "compoundIndexes": "INVALID_COMPOUND_INDEXES",
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_project(options: Any) -> list[ScaffoldError]:
    """Return all structural errors in a raw project specification.

    Args:
        options: Caller input, normally a dict decoded from JSON or YAML.

    Returns:
        A flat, order-stable list of errors.  Empty when the tree is valid.
    """
    if not isinstance(options, Mapping):
        return [
            ScaffoldError(
                code="INVALID_PROJECT_SPEC",
                message=f"Project specification must be an object, got {type(options).__name__}.",
                field="",
            )
        ]

    errors: list[ScaffoldError] = []

    # Root scalars
    _collect(errors, validate_project_name(options.get("projectName")))
    _collect(errors, _validate_database(options.get("database")))
    _collect(errors, validate_server_url(options.get("serverUrl")))
    errors.extend(_validate_rich_text_editor(options.get("richTextEditor")))
    errors.extend(_validate_flags(options))

    # Collections
    collection_slugs: set[str] = set()
    exported_entities: list[tuple[str, str, str]] = []
    for index, collection in _entity_entries(options, "collections", "collection", errors):
        path = f"collections[{index}]"
        slug = collection.get("slug")
        if validate_slug(slug, "collection", path) is None:
            if slug in collection_slugs:
                errors.append(
                    ScaffoldError(
                        code="DUPLICATE_COLLECTION_SLUG",
                        message=f"Duplicate collection slug '{slug}' found.",
                        field=f"{path}.slug",
                        suggestion="Collection slugs must be unique across the project.",
                    )
                )
            else:
                collection_slugs.add(slug)
                exported_entities.append((collection_export(slug), "collection", path))
        errors.extend(validate_collection(collection, path))

    # Globals
    global_slugs: set[str] = set()
    for index, global_ in _entity_entries(options, "globals", "global", errors):
        path = f"globals[{index}]"
        slug = global_.get("slug")
        if validate_global_slug(slug, path) is None:
            if slug in global_slugs:
                errors.append(
                    ScaffoldError(
                        code="DUPLICATE_GLOBAL_SLUG",
                        message=f"Duplicate global slug '{slug}' found.",
                        field=f"{path}.slug",
                    )
                )
            else:
                global_slugs.add(slug)
                exported_entities.append((global_export(slug), "global", path))
        errors.extend(validate_global(global_, path))

    # Top-level blocks
    block_slugs: set[str] = set()
    exported_blocks: list[tuple[str, str, str]] = []
    for index, block in _entity_entries(options, "blocks", "block", errors):
        path = f"blocks[{index}]"
        slug = block.get("slug")
        if validate_slug(slug, "block", path) is None:
            if slug in block_slugs:
                errors.append(
                    ScaffoldError(
                        code="DUPLICATE_BLOCK_SLUG",
                        message=f"Duplicate block slug '{slug}' defined in top-level blocks array.",
                        field=f"{path}.slug",
                    )
                )
            else:
                block_slugs.add(slug)
                exported_blocks.append((block_export(slug), "block", path))
        errors.extend(validate_block(block, path))

    # Collections and globals share the payload config's import scope;
    # blocks are re-exported together from blocks/index.
    errors.extend(validate_export_names(exported_entities))
    errors.extend(validate_export_names(exported_blocks))

    # Plugins
    errors.extend(_validate_plugins(options.get("plugins")))

    # Cross-references
    collections = options.get("collections")
    declared = [c for c in collections if isinstance(c, Mapping)] if isinstance(collections, list) else []

    if options.get("compoundIndexes") is True and not any(
        isinstance(c.get("indexes"), list) and c.get("indexes") for c in declared
    ):
        errors.append(
            ScaffoldError(
                code="COMPOUND_INDEXES_WITHOUT_INDEXES",
                message="Compound indexes are enabled but no collection defines indexes",
                field="compoundIndexes",
                suggestion="Define indexes in a collection or disable compoundIndexes.",
            )
        )

    # An omitted flag gets the built-in users collection instead.
    if options.get("authentication") is True and not any(c.get("slug") == "users" for c in declared):
        errors.append(
            ScaffoldError(
                code="MISSING_AUTH_COLLECTION",
                message="Authentication is enabled but no collection with slug 'users' was provided.",
                field="collections",
                suggestion="Add a 'users' collection, omit 'authentication' for the default one, or set it to false.",
            )
        )

    return errors


def validate_collection(collection: Mapping[str, Any], path: str) -> list[ScaffoldError]:
    """Check one collection in isolation: slug format, fields and code options.

    Project-wide slug uniqueness is left to :func:`validate_project`.
    """
    errors: list[ScaffoldError] = []
    slug = collection.get("slug")
    _collect(errors, validate_slug(slug, "collection", path))
    fields = collection.get("fields")
    if not isinstance(fields, list) or not fields:
        errors.append(
            ScaffoldError(
                code="MISSING_COLLECTION_FIELDS",
                message=f"Collection '{slug}' has no fields",
                field=f"{path}.fields",
                suggestion="Each collection needs at least one field.",
            )
        )
    else:
        errors.extend(validate_fields(fields, f"{path}.fields"))
    errors.extend(_validate_entity_options(collection, path))
    return errors


def validate_global(global_: Mapping[str, Any], path: str) -> list[ScaffoldError]:
    """Check one global in isolation."""
    errors: list[ScaffoldError] = []
    _collect(errors, validate_global_slug(global_.get("slug"), path))
    errors.extend(validate_fields(global_.get("fields"), f"{path}.fields"))
    errors.extend(_validate_entity_options(global_, path))
    return errors


def validate_block(block: Mapping[str, Any], path: str) -> list[ScaffoldError]:
    """Check one top-level block in isolation."""
    errors: list[ScaffoldError] = []
    _collect(errors, validate_slug(block.get("slug"), "block", path))
    errors.extend(validate_fields(block.get("fields"), f"{path}.fields"))
    return errors


def validate_fields(fields: Any, parent_path: str) -> list[ScaffoldError]:
    """Validate one sibling list of fields, recursing into nested structures.

    Field names are checked for uniqueness against this list only.  A field
    with an unknown ``type`` is reported and its structure is not inspected
    further; its siblings still are.
    """
    if fields is None:
        return []
    if not isinstance(fields, list):
        return [
            ScaffoldError(
                code="INVALID_FIELDS_FORMAT",
                message=f"'fields' at {parent_path} must be an array.",
                field=parent_path,
            )
        ]

    errors: list[ScaffoldError] = []
    seen_names: set[str] = set()
    for index, field in enumerate(fields):
        errors.extend(validate_field(field, f"{parent_path}[{index}]", seen_names))
    return errors


def validate_field(field: Any, path: str, seen_names: Optional[set[str]] = None) -> list[ScaffoldError]:
    """Validate one field definition and everything nested inside it.

    *seen_names* holds the names taken by earlier siblings.  The field's
    own name is added to it when it is valid and not yet taken.
    """
    if not isinstance(field, Mapping):
        return [
            ScaffoldError(
                code="INVALID_FIELD_DEFINITION",
                message=f"Field definition at path {path} must be an object.",
                field=path,
            )
        ]

    errors: list[ScaffoldError] = []
    name = field.get("name")
    name_error = validate_identifier_name(name, "field", path)
    if name_error:
        errors.append(name_error)
    elif seen_names is not None and name in seen_names:
        errors.append(
            ScaffoldError(
                code="DUPLICATE_FIELD_NAME",
                message=(
                    f"Duplicate field name '{name}' found within the same level "
                    f"at path: {path.rpartition('[')[0]}"
                ),
                field=f"{path}.name",
                suggestion=(
                    "Field names must be unique within their parent structure "
                    "(collection, global, group, array, block, tab)."
                ),
            )
        )
    elif seen_names is not None:
        seen_names.add(name)

    label = name if isinstance(name, str) and name else f"at {path}"
    field_type = field.get("type")
    if not field_type:
        errors.append(
            ScaffoldError(
                code="MISSING_FIELD_TYPE",
                message=f"Field type is required for field '{label}'",
                field=f"{path}.type",
                suggestion="Specify a valid field type.",
            )
        )
        return errors

    kind = FIELD_KINDS.get(field_type) if isinstance(field_type, str) else None
    if kind is None:
        errors.append(
            ScaffoldError(
                code="INVALID_FIELD_TYPE",
                message=f"Invalid field type {field_type!r} for field '{label}'",
                field=f"{path}.type",
                suggestion=f"Type must be one of: {', '.join(VALID_FIELD_TYPES)}",
            )
        )
        return errors

    errors.extend(kind.check(dict(field), path, label, validate_fields))
    errors.extend(_validate_field_code(field, path))
    return errors


def parse_project(options: Any) -> tuple[Optional[ProjectSpec], list[ScaffoldError]]:
    """Parse a raw tree into a :class:`ProjectSpec`.

    Pydantic errors are converted into ``INVALID_PROJECT_SPEC`` entries so the
    caller never has to handle an exception for bad data.
    """
    try:
        return ProjectSpec.model_validate(options), []
    except ValidationError as exc:
        return None, [
            ScaffoldError(
                code="INVALID_PROJECT_SPEC",
                message=error["msg"],
                field=format_location(error["loc"]),
            )
            for error in exc.errors()
        ]


def format_location(loc: tuple[Any, ...]) -> str:
    """Turn a pydantic error location into a breadcrumb path."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _collect(errors: list[ScaffoldError], error: Optional[ScaffoldError]) -> None:
    if error is not None:
        errors.append(error)


def _validate_database(database: Any) -> Optional[ScaffoldError]:
    if not database:
        return ScaffoldError(
            code="MISSING_DATABASE_TYPE",
            message="Database type is required",
            field="database",
            suggestion='Database must be either "mongodb" or "postgres".',
        )
    if database not in SUPPORTED_DATABASES:
        return ScaffoldError(
            code="INVALID_DATABASE_TYPE",
            message=f"Invalid database type: {database!r}",
            field="database",
            suggestion='Database must be either "mongodb" or "postgres".',
        )
    return None


def _validate_rich_text_editor(editor: Any) -> list[ScaffoldError]:
    if editor is None:
        return []
    if not isinstance(editor, Mapping):
        return [
            ScaffoldError(
                code="INVALID_RICH_TEXT_EDITOR",
                message="'richTextEditor' must be an object with a 'version'.",
                field="richTextEditor",
            )
        ]
    error = validate_semver(editor.get("version"), "richTextEditor.version")
    return [error] if error else []


def _validate_flags(options: Mapping[str, Any]) -> list[ScaffoldError]:
    errors: list[ScaffoldError] = []
    for key, code in BOOLEAN_FLAGS.items():
        value = options.get(key)
        if value is not None and not isinstance(value, bool):
            errors.append(
                ScaffoldError(
                    code=code,
                    message=f"'{key}' must be true or false, got {value!r}.",
                    field=key,
                    suggestion=f"Set '{key}' to a JSON boolean or omit it.",
                )
            )
    return errors


def validate_export_names(entries: list[tuple[str, str, str]]) -> list[ScaffoldError]:
    """Report entities whose generated export name is already taken in one scope."""
    errors: list[ScaffoldError] = []
    owners: dict[str, str] = {}
    for export, kind, path in entries:
        if export in owners:
            errors.append(
                ScaffoldError(
                    code="DUPLICATE_EXPORT_NAME",
                    message=f"The {kind} at {path} exports '{export}', already exported by {owners[export]}.",
                    field=f"{path}.slug",
                    suggestion="Rename one slug so the generated export names differ.",
                )
            )
        else:
            owners[export] = path
    return errors


def _entity_entries(
    options: Mapping[str, Any],
    key: str,
    kind: str,
    errors: list[ScaffoldError],
) -> list[tuple[int, Mapping[str, Any]]]:
    """Yield ``(index, mapping)`` pairs for an entity list, reporting bad shapes."""
    value = options.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        errors.append(
            ScaffoldError(
                code=f"INVALID_{key.upper()}_FORMAT",
                message=f"`{key}` must be an array.",
                field=key,
            )
        )
        return []

    entries = []
    for index, item in enumerate(value):
        if isinstance(item, Mapping):
            entries.append((index, item))
        else:
            errors.append(
                ScaffoldError(
                    code=f"INVALID_{kind.upper()}_DEFINITION",
                    message=f"{kind.capitalize()} definition at index {index} must be an object.",
                    field=f"{key}[{index}]",
                )
            )
    return entries


def _validate_plugins(plugins: Any) -> list[ScaffoldError]:
    if plugins is None:
        return []
    if not isinstance(plugins, list):
        return [
            ScaffoldError(
                code="INVALID_PLUGINS_FORMAT",
                message="`plugins` must be an array.",
                field="plugins",
            )
        ]

    errors: list[ScaffoldError] = []
    for index, plugin in enumerate(plugins):
        path = f"plugins[{index}]"
        if isinstance(plugin, str):
            _collect(errors, validate_package_name(plugin, path))
        elif isinstance(plugin, Mapping):
            package = plugin.get("package")
            if not isinstance(package, str) or not package:
                errors.append(
                    ScaffoldError(
                        code="MISSING_PLUGIN_PACKAGE",
                        message="Plugin object requires a non-empty string 'package' property.",
                        field=f"{path}.package",
                    )
                )
            options = plugin.get("options")
            if options is not None and not isinstance(options, Mapping):
                errors.append(
                    ScaffoldError(
                        code="INVALID_PLUGIN_OPTIONS",
                        message="Plugin 'options' must be an object.",
                        field=f"{path}.options",
                    )
                )
        else:
            errors.append(
                ScaffoldError(
                    code="INVALID_PLUGIN_TYPE",
                    message="Plugin entry must be a package name or an object ({package, options}).",
                    field=path,
                )
            )
    return errors


# -- Code-bearing values ------------------------------------------------------

def _is_code_ref(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, Mapping):
        kind = value.get("kind")
        if kind == "reference":
            return is_identifier(value.get("name"))
        if kind == "expression":
            source = value.get("source")
            return isinstance(source, str) and bool(source.strip())
    return False


def _is_access_rule(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, Mapping) and value.get("kind") == "boolean":
        return isinstance(value.get("value"), bool)
    return _is_code_ref(value)


def _validate_access(access: Any, path: str) -> list[ScaffoldError]:
    if access is None:
        return []
    if not isinstance(access, Mapping):
        return [
            ScaffoldError(
                code="INVALID_ACCESS_RULE",
                message="'access' must map operations to rules.",
                field=f"{path}.access",
            )
        ]
    return [
        ScaffoldError(
            code="INVALID_ACCESS_RULE",
            message=f"Invalid access rule for '{operation}'",
            field=f"{path}.access.{operation}",
            suggestion="Use true/false, a function name, or an inline expression string.",
        )
        for operation, rule in access.items()
        if not _is_access_rule(rule)
    ]


def _validate_hooks(hooks: Any, path: str) -> list[ScaffoldError]:
    if hooks is None:
        return []
    if not isinstance(hooks, Mapping):
        return [
            ScaffoldError(
                code="INVALID_HOOKS",
                message="'hooks' must map hook names to arrays of functions.",
                field=f"{path}.hooks",
            )
        ]

    errors: list[ScaffoldError] = []
    for hook_name, entries in hooks.items():
        if not isinstance(entries, list):
            errors.append(
                ScaffoldError(
                    code="INVALID_HOOKS",
                    message=f"Hook '{hook_name}' must be an array.",
                    field=f"{path}.hooks.{hook_name}",
                )
            )
            continue
        for position, entry in enumerate(entries):
            if not _is_code_ref(entry):
                errors.append(
                    ScaffoldError(
                        code="INVALID_HOOKS",
                        message=f"Invalid function in hook '{hook_name}'",
                        field=f"{path}.hooks.{hook_name}[{position}]",
                        suggestion="Use a function name or an inline expression string.",
                    )
                )
    return errors


def _validate_endpoints(endpoints: Any, path: str) -> list[ScaffoldError]:
    if endpoints is None or endpoints is False:
        return []
    if not isinstance(endpoints, list):
        return [
            ScaffoldError(
                code="INVALID_ENDPOINT",
                message="'endpoints' must be an array or false.",
                field=f"{path}.endpoints",
            )
        ]

    errors: list[ScaffoldError] = []
    for index, endpoint in enumerate(endpoints):
        endpoint_path = f"{path}.endpoints[{index}]"
        if (
            not isinstance(endpoint, Mapping)
            or not isinstance(endpoint.get("path"), str)
            or not endpoint["path"].startswith("/")
            or endpoint.get("method") not in ENDPOINT_METHODS
            or not _is_code_ref(endpoint.get("handler"))
        ):
            errors.append(
                ScaffoldError(
                    code="INVALID_ENDPOINT",
                    message=f"Invalid endpoint at {endpoint_path}",
                    field=endpoint_path,
                    suggestion=(
                        "Endpoints need a 'path' starting with '/', a 'method' "
                        f"({', '.join(ENDPOINT_METHODS)}) and a 'handler'."
                    ),
                )
            )
    return errors


def _validate_entity_options(entity: Mapping[str, Any], path: str) -> list[ScaffoldError]:
    return (
        _validate_access(entity.get("access"), path)
        + _validate_hooks(entity.get("hooks"), path)
        + _validate_endpoints(entity.get("endpoints"), path)
    )


def _validate_field_code(field: Mapping[str, Any], path: str) -> list[ScaffoldError]:
    errors = _validate_access(field.get("access"), path) + _validate_hooks(field.get("hooks"), path)
    if "validate" in field and not _is_code_ref(field["validate"]):
        errors.append(
            ScaffoldError(
                code="INVALID_VALIDATE_FUNCTION",
                message="'validate' must be a function name or an inline expression.",
                field=f"{path}.validate",
            )
        )
    default = field.get("defaultValue")
    if isinstance(default, Mapping) and default.get("kind") in ("reference", "expression"):
        if not _is_code_ref(default):
            errors.append(
                ScaffoldError(
                    code="INVALID_DEFAULT_VALUE",
                    message="Tagged 'defaultValue' is missing its name or source.",
                    field=f"{path}.defaultValue",
                )
            )
    return errors
