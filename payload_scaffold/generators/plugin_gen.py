"""Payload plugin package generation.

Generates (paths relative to the plugin root):
- ``src/index.ts``                  -- the plugin factory
- ``src/types.ts``                  -- the options interface and plugin type
- ``src/client.ts`` and ``src/components/<Name>.tsx`` -- admin components
- ``package.json``, ``README.md``, ``tsconfig.json`` -- standalone and npm
  targets only, plus ``docs/API.md`` with ``includeDocs``
- ``src/__tests__/plugin.spec.ts`` (and ``jest.config.js`` outside local
  targets) -- with ``includeTests``

A ``local`` plugin lives inside an existing project, so every path gains a
``src/plugins/<name>/`` prefix and no package files are written.
"""

from __future__ import annotations

import json
from typing import Any, Literal, Optional

from pydantic import Field

from ..config import ScaffoldSettings
from ..scaffolder.identifiers import JS_RESERVED_WORDS, is_identifier, validate_slug
from ..scaffolder.js import js_string, js_value, pad
from ..scaffolder.models import GeneratedFile, ScaffoldError
from ..scaffolder.naming import camel_name, kebab_name, pascal_name, title_words
from ..scaffolder.templates import TemplateRenderer
from .models import GeneratedCode, GeneratorOptions, option_error, parse_options, raise_for


PluginFeature = Literal["collections", "globals", "hooks", "endpoints", "components"]
PluginTarget = Literal["standalone", "npm", "local"]
PluginHookType = Literal[
    "beforeValidate", "beforeChange", "afterChange", "beforeRead", "afterRead", "beforeDelete", "afterDelete"
]
AdminSlot = Literal[
    "beforeDashboard", "afterDashboard", "beforeLogin", "afterLogin", "beforeNavLinks", "afterNavLinks"
]

# Hook type -> (destructured arguments, returned value)
HOOK_SIGNATURES: dict[str, tuple[str, Optional[str]]] = {
    "beforeValidate": ("data, req", "data"),
    "beforeChange": ("data, req", "data"),
    "afterChange": ("doc, req", "doc"),
    "beforeRead": ("doc, req", "doc"),
    "afterRead": ("doc, req", "doc"),
    "beforeDelete": ("req", None),
    "afterDelete": ("doc, req", "doc"),
}


class PluginProperty(GeneratorOptions):
    name: str
    prop_type: str = Field(default="string", alias="type")
    required: bool = False
    description: Optional[str] = None
    default_value: Optional[str] = Field(default=None, alias="defaultValue")


class PluginOptionsInterface(GeneratorOptions):
    properties: list[PluginProperty] = Field(default_factory=list)


class PluginEntity(GeneratorOptions):
    slug: str
    fields: list[str] = Field(default_factory=list)


class PluginHook(GeneratorOptions):
    hook_type: PluginHookType = Field(alias="type")


class PluginComponent(GeneratorOptions):
    name: str
    slot: AdminSlot = "beforeDashboard"


class PluginEndpoint(GeneratorOptions):
    path: str
    method: Literal["get", "post", "put", "patch", "delete"] = "get"
    description: Optional[str] = None


class PluginGeneratorOptions(GeneratorOptions):
    name: str
    description: Optional[str] = None
    target: PluginTarget = "standalone"
    features: list[PluginFeature] = Field(default_factory=list)
    options: PluginOptionsInterface = Field(default_factory=PluginOptionsInterface)
    collections: list[PluginEntity] = Field(default_factory=list)
    globals: list[PluginEntity] = Field(default_factory=list)
    hooks: list[PluginHook] = Field(default_factory=list)
    admin_components: list[PluginComponent] = Field(default_factory=list, alias="adminComponents")
    custom_endpoints: list[PluginEndpoint] = Field(default_factory=list, alias="customEndpoints")
    include_tests: bool = Field(default=False, alias="includeTests")
    include_docs: bool = Field(default=False, alias="includeDocs")

    @property
    def package(self) -> str:
        return self.name if self.target == "npm" else f"payload-plugin-{self.name}"

    @property
    def enabled_features(self) -> list[str]:
        """Declared features plus those implied by non-empty option lists."""
        implied = {
            "collections": self.collections,
            "globals": self.globals,
            "hooks": self.hooks,
            "endpoints": self.custom_endpoints,
            "components": self.admin_components,
        }
        return [feature for feature, items in implied.items() if feature in self.features or items]


class PluginGenerator:
    """Generates a plugin package (or an in-project plugin folder)."""

    def __init__(self, renderer: TemplateRenderer, settings: Optional[ScaffoldSettings] = None) -> None:
        self.renderer = renderer
        self.settings = settings or ScaffoldSettings()

    def generate(self, options: Any) -> GeneratedCode:
        opts = parse_options(PluginGeneratorOptions, options)
        raise_for(self._errors(opts))

        pascal = pascal_name(opts.name)
        context = {
            "plugin_name": f"{camel_name(opts.name)}Plugin",
            "plugin_type": f"{pascal}Plugin",
            "options_type": f"{pascal}PluginOptions",
            "package": opts.package,
            "title": f"{title_words(opts.name)} Plugin",
            "description": opts.description or f"{title_words(opts.name)} plugin for Payload CMS.",
            "properties": [
                {
                    "name": prop.name,
                    "type": prop.prop_type,
                    "required": prop.required,
                    "description": prop.description,
                    "default": prop.default_value,
                }
                for prop in opts.options.properties
            ],
        }
        index_context = {
            **context,
            "defaults": [prop for prop in context["properties"] if prop["default"] is not None],
            "features": opts.enabled_features,
            "collections": [self._entity(entity) for entity in opts.collections],
            "globals": [self._entity(entity) for entity in opts.globals],
            "hooks": self._hooks(opts),
            "endpoints": [
                {
                    "path": js_string(endpoint.path),
                    "method": js_string(endpoint.method),
                    "description": " ".join(endpoint.description.split()) if endpoint.description else None,
                }
                for endpoint in opts.custom_endpoints
            ],
            "component_slots": self._component_slots(opts),
        }

        files: list[GeneratedFile] = [
            GeneratedFile(path="src/types.ts", content=self.renderer.render("generators/plugin/types.ts.j2", context))
        ]
        if opts.admin_components:
            exports = [
                f"export {{ {component.name} }} from './components/{component.name}'"
                for component in opts.admin_components
            ]
            files.append(GeneratedFile(path="src/client.ts", content="\n".join(exports) + "\n"))
            for component in opts.admin_components:
                files.append(
                    GeneratedFile(
                        path=f"src/components/{component.name}.tsx",
                        content=self.renderer.render(
                            "generators/plugin/component.tsx.j2",
                            {
                                "name": component.name,
                                "label": title_words(component.name),
                            },
                        ),
                    )
                )
        if opts.target != "local":
            files.extend(
                [
                    GeneratedFile(path="package.json", content=self._package_json(opts)),
                    GeneratedFile(
                        path="README.md", content=self.renderer.render("generators/plugin/README.md.j2", context)
                    ),
                    GeneratedFile(path="tsconfig.json", content=self._tsconfig()),
                ]
            )
            if opts.include_docs:
                files.append(
                    GeneratedFile(
                        path="docs/API.md",
                        content=f"# {context['title']} API\n\nOptions are described by `{context['options_type']}` "
                        "in `src/types.ts`.\n",
                    )
                )
        if opts.include_tests:
            if opts.target != "local":
                files.append(GeneratedFile(path="jest.config.js", content=self._jest_config()))
            files.append(
                GeneratedFile(
                    path="src/__tests__/plugin.spec.ts",
                    content=self.renderer.render("generators/plugin/plugin.spec.ts.j2", context),
                )
            )

        prefix = f"src/plugins/{opts.name}/" if opts.target == "local" else ""
        if prefix:
            files = [GeneratedFile(path=prefix + f.path.removeprefix("src/"), content=f.content) for f in files]
        return GeneratedCode(
            code=self.renderer.render("generators/plugin/index.ts.j2", index_context),
            file_name=f"{prefix}index.ts" if prefix else "src/index.ts",
            additional_files=files,
            output_path=None if prefix else opts.package,
        )

    # ------------------------------------------------------------------
    # Context pieces
    # ------------------------------------------------------------------

    @staticmethod
    def _entity(entity: PluginEntity) -> str:
        value = {
            "slug": entity.slug,
            "fields": [{"name": field, "type": "text"} for field in entity.fields],
        }
        return f"{pad(3)}{js_value(value, 3)},"

    @staticmethod
    def _hooks(opts: PluginGeneratorOptions) -> list[dict[str, Any]]:
        seen: list[str] = []
        for hook in opts.hooks:
            if hook.hook_type not in seen:
                seen.append(hook.hook_type)
        if not seen:
            seen = ["beforeChange"]
        return [
            {"type": hook_type, "arguments": HOOK_SIGNATURES[hook_type][0], "returned": HOOK_SIGNATURES[hook_type][1]}
            for hook_type in seen
        ]

    @staticmethod
    def _component_slots(opts: PluginGeneratorOptions) -> list[dict[str, Any]]:
        base = f"/plugins/{opts.name}/client" if opts.target == "local" else f"{opts.package}/client"
        slots: dict[str, list[str]] = {}
        for component in opts.admin_components:
            slots.setdefault(component.slot, []).append(js_string(f"{base}#{component.name}"))
        return [{"name": slot, "paths": paths} for slot, paths in slots.items()]

    def _package_json(self, opts: PluginGeneratorOptions) -> str:
        manifest: dict[str, Any] = {
            "name": opts.package,
            "version": "0.1.0",
            "description": opts.description or f"{title_words(opts.name)} plugin for Payload CMS",
            "license": "MIT",
            "type": "module",
            "main": "dist/index.js",
            "types": "dist/index.d.ts",
            "keywords": ["payload", "payload-plugin", opts.name],
            "scripts": {"build": "tsc", "dev": "tsc --watch"},
            "peerDependencies": {"payload": self.settings.payload_version},
            "devDependencies": {"payload": self.settings.payload_version, "typescript": "^5.7.3"},
        }
        if opts.admin_components:
            manifest["exports"] = {
                ".": {"import": "./dist/index.js", "types": "./dist/index.d.ts"},
                "./client": {"import": "./dist/client.js", "types": "./dist/client.d.ts"},
            }
            manifest["peerDependencies"]["react"] = self.settings.react_version
        if opts.include_tests:
            manifest["scripts"]["test"] = "jest"
            manifest["devDependencies"].update({"@types/jest": "^29.5.14", "jest": "^29.7.0", "ts-jest": "^29.2.5"})
        if opts.target == "npm":
            manifest["repository"] = {"type": "git", "url": f"https://github.com/your-org/{opts.name}.git"}
            manifest["publishConfig"] = {"access": "public"}
        manifest["devDependencies"] = dict(sorted(manifest["devDependencies"].items()))
        return json.dumps(manifest, indent=2) + "\n"

    @staticmethod
    def _tsconfig() -> str:
        config = {
            "compilerOptions": {
                "target": "ES2022",
                "module": "NodeNext",
                "moduleResolution": "NodeNext",
                "jsx": "react-jsx",
                "declaration": True,
                "outDir": "dist",
                "rootDir": "src",
                "strict": True,
                "esModuleInterop": True,
                "skipLibCheck": True,
            },
            "include": ["src"],
            "exclude": ["node_modules", "dist", "src/__tests__"],
        }
        return json.dumps(config, indent=2) + "\n"

    @staticmethod
    def _jest_config() -> str:
        return (
            "module.exports = {\n"
            "  preset: 'ts-jest',\n"
            "  testEnvironment: 'node',\n"
            "  testMatch: ['**/__tests__/**/*.spec.ts'],\n"
            "}\n"
        )

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    @staticmethod
    def _errors(opts: PluginGeneratorOptions) -> list[ScaffoldError]:
        errors: list[ScaffoldError] = []
        if not opts.name or kebab_name(opts.name) != opts.name or opts.name[:1].isdigit():
            errors.append(
                option_error(
                    "name",
                    f"Plugin name {opts.name!r} must be kebab-case.",
                    suggestion="Use lowercase words joined by hyphens, e.g. 'my-plugin'.",
                )
            )

        for key, entities, kind in (("collections", opts.collections, "collection"), ("globals", opts.globals, "global")):
            seen: set[str] = set()
            for index, entity in enumerate(entities):
                path = f"{key}[{index}]"
                error = validate_slug(entity.slug, kind, path)
                if error:
                    errors.append(error)
                elif entity.slug in seen:
                    errors.append(option_error(f"{path}.slug", f"Duplicate {kind} slug {entity.slug!r}."))
                seen.add(entity.slug)
                for position, field in enumerate(entity.fields):
                    if not is_identifier(field) or field in JS_RESERVED_WORDS:
                        errors.append(
                            option_error(f"{path}.fields[{position}]", f"Field name {field!r} is not usable.")
                        )

        names: set[str] = set()
        for index, component in enumerate(opts.admin_components):
            path = f"adminComponents[{index}].name"
            if not is_identifier(component.name) or not component.name[:1].isupper():
                errors.append(option_error(path, f"Component name {component.name!r} must be a PascalCase identifier."))
            elif component.name in names:
                errors.append(option_error(path, f"Duplicate component name {component.name!r}."))
            names.add(component.name)

        for index, endpoint in enumerate(opts.custom_endpoints):
            if not endpoint.path.startswith("/"):
                errors.append(
                    option_error(f"customEndpoints[{index}].path", f"Endpoint path {endpoint.path!r} must start with '/'.")
                )

        for index, prop in enumerate(opts.options.properties):
            if not is_identifier(prop.name) or prop.name in JS_RESERVED_WORDS or prop.name == "enabled":
                errors.append(
                    option_error(f"options.properties[{index}].name", f"Option name {prop.name!r} is not usable.")
                )
        return errors
