"""Access-control function generation.

Generates:
- ``src/access/<name>.ts`` -- one exported ``Access`` (collections, globals)
  or ``FieldAccess`` (fields) function built from a named rule template

Templates: admin, authenticated, public, owner, published, role,
organization, locale and conditional.  Query-constraint templates (owner,
published, organization) return a ``where`` clause for collections and
compare against ``doc`` for fields, where constraints are not allowed.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import Field

from ..scaffolder.identifiers import is_identifier
from ..scaffolder.js import js_value
from ..scaffolder.naming import camel_name
from ..scaffolder.templates import TemplateRenderer
from .models import GeneratedCode, GeneratorOptions, option_error, parse_options, raise_for


AccessTarget = Literal["collection", "global", "field"]
AccessTemplate = Literal[
    "admin",
    "authenticated",
    "public",
    "owner",
    "published",
    "role",
    "organization",
    "locale",
    "conditional",
]

OPERATIONS: dict[str, tuple[str, ...]] = {
    "collection": ("create", "read", "update", "delete", "admin", "unlock", "readVersions"),
    "global": ("read", "update", "readVersions"),
    "field": ("create", "read", "update"),
}

# Globals hold a single document, so per-document ownership does not apply.
DOCUMENT_TEMPLATES: tuple[str, ...] = ("owner", "organization")


class AccessControlOptions(GeneratorOptions):
    template: AccessTemplate = "authenticated"
    target: AccessTarget = Field(default="collection", alias="type")
    operation: str = "read"
    name: Optional[str] = None
    collection: Optional[str] = None
    global_: Optional[str] = Field(default=None, alias="global")
    field: Optional[str] = None
    description: Optional[str] = None
    owner_field: str = Field(default="createdBy", alias="ownerField")
    status_field: str = Field(default="status", alias="statusField")
    roles: list[str] = Field(default_factory=lambda: ["admin"])
    org_field: str = Field(default="organization", alias="orgField")
    user_org_field: str = Field(default="organization", alias="userOrgField")
    locales: list[str] = Field(default_factory=lambda: ["en"])
    condition: str = "return Boolean(user)"

    @property
    def subject(self) -> Optional[str]:
        return {"collection": self.collection, "global": self.global_, "field": self.field}[self.target]


class AccessControlGenerator:
    """Generates one reusable access function from a rule template."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(self, options: Any) -> GeneratedCode:
        opts = parse_options(AccessControlOptions, options)
        name = opts.name or camel_name(f"can {opts.operation} {opts.subject or ''}")
        self._check(opts, name)

        subject = f"the {opts.subject} {opts.target}" if opts.subject else f"a {opts.target}"
        context = {
            "name": name,
            "template": opts.template,
            "access_type": "FieldAccess" if opts.target == "field" else "Access",
            "field_access": opts.target == "field",
            "summary": f"{opts.operation} access for {subject}: {opts.template} rule.",
            "description": opts.description,
            "owner_field": opts.owner_field,
            "status_field": opts.status_field,
            "roles": js_value(opts.roles),
            "org_field": opts.org_field,
            "user_org_field": opts.user_org_field,
            "locales": js_value(opts.locales),
            "condition": opts.condition.strip(),
        }
        return GeneratedCode(
            code=self.renderer.render("generators/access.ts.j2", context),
            file_name=f"src/access/{name}.ts",
        )

    @staticmethod
    def _check(opts: AccessControlOptions, name: str) -> None:
        errors = []
        if not is_identifier(name):
            errors.append(option_error("name", f"Access function name {name!r} is not a valid identifier."))
        allowed = OPERATIONS[opts.target]
        if opts.operation not in allowed:
            errors.append(
                option_error(
                    "operation",
                    f"Operation {opts.operation!r} does not apply to {opts.target} access.",
                    suggestion=f"Use one of: {', '.join(allowed)}",
                )
            )
        if opts.target == "global" and opts.template in DOCUMENT_TEMPLATES:
            errors.append(
                option_error(
                    "template",
                    f"The {opts.template!r} template needs per-document data and cannot guard a global.",
                )
            )
        for key in ("owner_field", "status_field", "org_field", "user_org_field"):
            value = getattr(opts, key)
            if not is_identifier(value):
                alias = AccessControlOptions.model_fields[key].alias
                errors.append(option_error(alias, f"{alias} {value!r} must be a plain field name."))
        raise_for(errors)
