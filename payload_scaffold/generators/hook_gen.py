"""Hook function generation.

Generates:
- ``src/hooks/<name>.ts`` -- one exported hook typed for its target
  (``CollectionBeforeChangeHook``, ``GlobalAfterReadHook``, ...)

The export name matches what collection and global configs reference by
name from ``src/hooks``.  Optional features add ready-made snippets to the
hook body.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import Field

from ..scaffolder.identifiers import is_identifier
from ..scaffolder.naming import camel_name
from ..scaffolder.templates import TemplateRenderer
from .models import GeneratedCode, GeneratorOptions, option_error, parse_options, raise_for


HookType = Literal["beforeValidate", "beforeChange", "afterChange", "beforeRead", "afterRead"]

FEATURES: dict[str, tuple[str, ...]] = {
    "beforeValidate": ("autoSlug", "formatData"),
    "beforeChange": ("timestamp", "setUser", "sanitize"),
    "afterChange": ("webhook", "purgeCache"),
    "beforeRead": ("accessAllLocales",),
    "afterRead": ("computedFields", "formatOutput"),
}

# Hook type -> (arguments, returned value)
SIGNATURES: dict[str, tuple[tuple[str, ...], str]] = {
    "beforeValidate": (("data", "req", "originalDoc"), "data"),
    "beforeChange": (("data", "req", "originalDoc"), "data"),
    "afterChange": (("doc", "previousDoc", "req"), "doc"),
    "beforeRead": (("doc", "req"), "doc"),
    "afterRead": (("doc", "req"), "doc"),
}


class HookOptions(GeneratorOptions):
    hook_type: HookType = Field(alias="type")
    collection: Optional[str] = None
    global_: Optional[str] = Field(default=None, alias="global")
    name: Optional[str] = None
    features: list[str] = Field(default_factory=list)
    description: Optional[str] = None


class HookGenerator:
    """Generates one collection or global hook."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(self, options: Any) -> GeneratedCode:
        opts = parse_options(HookOptions, options)
        target = "global" if opts.global_ else "collection"
        slug = opts.global_ or opts.collection
        name = opts.name or camel_name(f"{slug or ''} {opts.hook_type}")
        self._check(opts, name)

        prefix = "Global" if target == "global" else "Collection"
        arguments, returned = SIGNATURES[opts.hook_type]
        if target == "collection" and opts.hook_type not in ("beforeRead", "afterRead"):
            arguments = (*arguments, "operation")
        resource = f"the {slug} {target}" if slug else f"a {target}"
        context = {
            "name": name,
            "hook_type": opts.hook_type,
            "type_name": f"{prefix}{opts.hook_type[:1].upper()}{opts.hook_type[1:]}Hook",
            "target": target,
            "arguments": arguments,
            "returned": returned,
            "description": opts.description or f"Runs {opts.hook_type} for {resource}.",
            "features": opts.features,
        }
        return GeneratedCode(
            code=self.renderer.render("generators/hook.ts.j2", context),
            file_name=f"src/hooks/{name}.ts",
        )

    @staticmethod
    def _check(opts: HookOptions, name: str) -> None:
        errors = []
        if opts.collection and opts.global_:
            errors.append(option_error("global", "A hook targets either a collection or a global, not both."))
        if not is_identifier(name):
            errors.append(option_error("name", f"Hook name {name!r} is not a valid identifier."))
        allowed = FEATURES[opts.hook_type]
        for index, feature in enumerate(opts.features):
            if feature not in allowed:
                errors.append(
                    option_error(
                        f"features[{index}]",
                        f"Feature {feature!r} is not available for {opts.hook_type} hooks.",
                        suggestion=f"Use one of: {', '.join(allowed)}",
                    )
                )
        raise_for(errors)
