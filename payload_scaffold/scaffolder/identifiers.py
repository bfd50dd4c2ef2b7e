"""Identifier, slug and version checks used bottom-up by the tree validator.

Every function here is pure: it returns a :class:`ScaffoldError` describing
the first problem with the value, or ``None`` when the value is acceptable.
None of them raise.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from .models import ScaffoldError


SLUG_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
SEMVER_RE = re.compile(r"^\d+\.\d+\.\d+(-[\w.]+)?$")
PROJECT_NAME_RE = re.compile(r"^[a-z0-9][-a-z0-9._]*$")
PACKAGE_NAME_RE = re.compile(r"^(@[a-z0-9~-][a-z0-9._~-]*/)?[a-z0-9~-][a-z0-9._~-]*$")
SERVER_URL_RE = re.compile(r"^https?://")

# ECMAScript reserved words plus the strict-mode and module-only ones.
JS_RESERVED_WORDS = frozenset(
    {
        "await", "break", "case", "catch", "class", "const", "continue",
        "debugger", "default", "delete", "do", "else", "enum", "export",
        "extends", "false", "finally", "for", "function", "if", "implements",
        "import", "in", "instanceof", "interface", "let", "new", "null",
        "package", "private", "protected", "public", "return", "static",
        "super", "switch", "this", "throw", "true", "try", "typeof", "var",
        "void", "while", "with", "yield",
    }
)


def _title(kind: str) -> str:
    return kind[:1].upper() + kind[1:]


def is_identifier(value: Any) -> bool:
    """Return ``True`` for strings usable as JavaScript identifiers."""
    return isinstance(value, str) and bool(IDENTIFIER_RE.match(value))


def validate_slug(value: Any, entity_kind: str, path: str) -> Optional[ScaffoldError]:
    """Check that *value* is a non-empty kebab-case slug.

    Args:
        value: The candidate slug (any type; non-strings fail the format check).
        entity_kind: ``"collection"``, ``"block"``, ... used in the error code.
        path: Breadcrumb of the owning entity, e.g. ``"collections[0]"``.
    """
    kind = entity_kind.upper()
    if not value:
        return ScaffoldError(
            code=f"MISSING_{kind}_SLUG",
            message=f"{_title(entity_kind)} slug is required",
            field=f"{path}.slug",
            suggestion=f"Provide a unique kebab-case slug for the {entity_kind} at {path}.",
        )
    if not isinstance(value, str) or not SLUG_RE.match(value):
        return ScaffoldError(
            code=f"INVALID_{kind}_SLUG_FORMAT",
            message=f"Invalid {entity_kind} slug: {value!r}",
            field=f"{path}.slug",
            suggestion=(
                f"{_title(entity_kind)} slugs must be kebab-case (e.g. 'my-{entity_kind}') "
                "and contain only lowercase letters, numbers and hyphens."
            ),
        )
    return None


def validate_global_slug(value: Any, path: str) -> Optional[ScaffoldError]:
    """Global slugs are identifiers (``siteSettings``), not kebab-case."""
    if not value:
        return ScaffoldError(
            code="MISSING_GLOBAL_SLUG",
            message="Global slug is required",
            field=f"{path}.slug",
        )
    if not is_identifier(value):
        return ScaffoldError(
            code="INVALID_GLOBAL_SLUG_FORMAT",
            message=f"Invalid global slug {value!r}. Should be PascalCase or camelCase.",
            field=f"{path}.slug",
            suggestion="Use an identifier-style slug such as 'siteSettings'.",
        )
    return None


def validate_identifier_name(
    value: Any, entity_kind: str, path: str
) -> Optional[ScaffoldError]:
    """Check that *value* is a non-empty, identifier-safe name."""
    kind = entity_kind.upper()
    if not value:
        return ScaffoldError(
            code=f"MISSING_{kind}_NAME",
            message=f"{_title(entity_kind)} name is required",
            field=f"{path}.name",
            suggestion=f"Provide a name for the {entity_kind} at {path}.",
        )
    if not is_identifier(value):
        return ScaffoldError(
            code=f"INVALID_{kind}_NAME_FORMAT",
            message=f"Invalid {entity_kind} name: {value!r}",
            field=f"{path}.name",
            suggestion=(
                f"{_title(entity_kind)} name at {path} must be a valid JavaScript "
                "identifier (e.g. 'fieldName', 'myValue')."
            ),
        )
    if value in JS_RESERVED_WORDS:
        return ScaffoldError(
            code=f"RESERVED_{kind}_NAME",
            message=f"{_title(entity_kind)} name {value!r} is a reserved JavaScript word",
            field=f"{path}.name",
            suggestion=f"Rename the {entity_kind} at {path}, e.g. '{value}Value'.",
        )
    return None


def validate_semver(value: Any, path: str = "version") -> Optional[ScaffoldError]:
    """Check that *value* is a ``MAJOR.MINOR.PATCH[-pre]`` version string."""
    if not value:
        return ScaffoldError(
            code="MISSING_VERSION",
            message="Version is required",
            field=path,
            suggestion="Specify a semantic version such as '3.0.0'.",
        )
    if not isinstance(value, str) or not SEMVER_RE.match(value):
        return ScaffoldError(
            code="INVALID_VERSION_FORMAT",
            message=f"Invalid version: {value!r}",
            field=path,
            suggestion="Versions follow semantic versioning (e.g. '0.29.0', '3.1.0-beta.2').",
        )
    return None


def validate_project_name(value: Any) -> Optional[ScaffoldError]:
    """Check the root project name against npm naming rules."""
    if not value:
        return ScaffoldError(
            code="MISSING_PROJECT_NAME",
            message="Project name is required",
            field="projectName",
        )
    if not isinstance(value, str) or not PROJECT_NAME_RE.match(value):
        return ScaffoldError(
            code="INVALID_PROJECT_NAME_FORMAT",
            message=f"Project name contains invalid characters: {value!r}",
            field="projectName",
            suggestion=(
                "Project names follow npm package naming (lowercase, no special "
                "characters except '-', '_' and '.')."
            ),
        )
    return None


def validate_package_name(value: Any, path: str) -> Optional[ScaffoldError]:
    """Check a bare plugin entry against the npm package-name pattern."""
    if not isinstance(value, str) or not PACKAGE_NAME_RE.match(value):
        return ScaffoldError(
            code="INVALID_PLUGIN_NAME_FORMAT",
            message=f"Invalid plugin name format: {value!r}",
            field=path,
            suggestion=(
                "Plugin names must be valid npm package names "
                "(e.g. '@payloadcms/plugin-seo', 'my-plugin')."
            ),
        )
    return None


def validate_server_url(value: Any) -> Optional[ScaffoldError]:
    """Check that an optional server URL uses an http(s) scheme."""
    if value is None or value == "":
        return None
    if not isinstance(value, str) or not SERVER_URL_RE.match(value):
        return ScaffoldError(
            code="INVALID_SERVER_URL",
            message=f"Invalid server URL: {value!r}",
            field="serverUrl",
            suggestion="Server URL should start with http:// or https://",
        )
    return None
