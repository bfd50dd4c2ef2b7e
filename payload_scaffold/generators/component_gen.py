"""Admin panel React component generation.

Generates:
- ``<outputPath>/<Name>.tsx``   -- a root, collection, view or provider
  component (``outputPath`` defaults to ``src/components/<kebab-name>``)
- ``<outputPath>/styles.scss``  -- when ``includeStyles`` is set

Components are server components unless ``isClientComponent`` is set;
providers are always client components.  Payload's prop types are imported
for slots that have one, and custom props extend them.
"""

from __future__ import annotations

import re
from typing import Any, Literal, Optional

from pydantic import Field

from ..scaffolder.identifiers import JS_RESERVED_WORDS, is_identifier
from ..scaffolder.models import GeneratedFile, ScaffoldError
from ..scaffolder.naming import kebab_name, title_words
from ..scaffolder.templates import TemplateRenderer
from .models import GeneratedCode, GeneratorOptions, option_error, parse_options, raise_for


ComponentKind = Literal["root", "collection", "view", "provider"]
RootComponentType = Literal[
    "logo",
    "icon",
    "nav",
    "actions",
    "header",
    "logout",
    "beforeDashboard",
    "afterDashboard",
    "beforeLogin",
    "afterLogin",
    "beforeNavLinks",
    "afterNavLinks",
]
CollectionComponentType = Literal[
    "beforeList",
    "afterList",
    "beforeListTable",
    "afterListTable",
    "saveButton",
    "saveDraftButton",
    "publishButton",
    "previewButton",
    "description",
]
ViewType = Literal["dashboard", "account", "list", "edit", "custom"]

# Component kind -> (attribute, option key) of its required sub-type
SUBTYPES: dict[str, tuple[str, str]] = {
    "root": ("root_component_type", "rootComponentType"),
    "collection": ("collection_component_type", "collectionComponentType"),
    "view": ("view_type", "viewType"),
}

# Collection slot -> Payload props type stem (``<stem>ClientProps`` / ``<stem>ServerProps``)
COLLECTION_PROPS: dict[str, str] = {
    "beforeList": "BeforeList",
    "afterList": "BeforeList",
    "beforeListTable": "BeforeListTable",
    "afterListTable": "BeforeListTable",
    "saveButton": "SaveButton",
    "saveDraftButton": "SaveDraftButton",
    "publishButton": "PublishButton",
    "previewButton": "PreviewButton",
    "description": "ViewDescription",
}

VIEW_PROPS: dict[str, str] = {
    "dashboard": "AdminView",
    "account": "AdminView",
    "custom": "AdminView",
    "list": "ListView",
    "edit": "DocumentView",
}

BUTTONS: tuple[str, ...] = ("saveButton", "saveDraftButton", "publishButton", "previewButton")

JSX_UNSAFE_RE = re.compile(r"[<>{}\n]")


class ComponentProp(GeneratorOptions):
    name: str
    prop_type: str = Field(default="string", alias="type")
    required: bool = False
    description: Optional[str] = None
    default_value: Optional[str] = Field(default=None, alias="defaultValue")


class ComponentOptions(GeneratorOptions):
    kind: ComponentKind = Field(alias="type")
    name: str
    root_component_type: Optional[RootComponentType] = Field(default=None, alias="rootComponentType")
    collection_component_type: Optional[CollectionComponentType] = Field(
        default=None, alias="collectionComponentType"
    )
    collection: Optional[str] = None
    view_type: Optional[ViewType] = Field(default=None, alias="viewType")
    view_path: Optional[str] = Field(default=None, alias="viewPath")
    use_default_template: bool = Field(default=False, alias="useDefaultTemplate")
    entity: Optional[str] = None
    is_document_tab: bool = Field(default=False, alias="isDocumentTab")
    tab_label: Optional[str] = Field(default=None, alias="tabLabel")
    context_value_type: str = Field(default="Record<string, unknown>", alias="contextValueType")
    include_hook: bool = Field(default=True, alias="includeHook")
    props: list[ComponentProp] = Field(default_factory=list)
    is_client_component: bool = Field(default=False, alias="isClientComponent")
    imports: list[str] = Field(default_factory=list)
    include_styles: bool = Field(default=False, alias="includeStyles")
    custom_styles: Optional[str] = Field(default=None, alias="customStyles")
    output_path: Optional[str] = Field(default=None, alias="outputPath")


class ComponentGenerator:
    """Generates one admin component and, optionally, its stylesheet."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(self, options: Any) -> GeneratedCode:
        opts = parse_options(ComponentOptions, options)
        raise_for(self._errors(opts))

        output_path = (opts.output_path or f"src/components/{kebab_name(opts.name)}").rstrip("/")
        props = [
            {
                "name": prop.name,
                "type": prop.prop_type,
                "required": prop.required,
                "description": prop.description or title_words(prop.name),
                "default": prop.default_value,
            }
            for prop in opts.props
        ]
        destructure = [
            f"{prop['name']} = {prop['default']}" if prop["default"] else prop["name"] for prop in props
        ]
        imports = [line.strip() for line in opts.imports]

        if opts.kind == "provider":
            code = self.renderer.render(
                "generators/provider.tsx.j2",
                {
                    "name": opts.name,
                    "imports": imports,
                    "styles": opts.include_styles,
                    "value_type": opts.context_value_type,
                    "props": props,
                    "destructure": destructure,
                    "include_hook": opts.include_hook,
                },
            )
        else:
            code = self.renderer.render(
                "generators/component.tsx.j2",
                self._context(opts, props, destructure, imports),
            )

        additional = []
        if opts.include_styles:
            styles = opts.custom_styles or self.renderer.render(
                "generators/styles.scss.j2",
                {"name": opts.name, "layout": self._layout(opts)},
            )
            additional.append(GeneratedFile(path=f"{output_path}/styles.scss", content=styles))
        return GeneratedCode(
            code=code,
            file_name=f"{output_path}/{opts.name}.tsx",
            additional_files=additional,
            output_path=output_path,
        )

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def _context(
        self,
        opts: ComponentOptions,
        props: list[dict[str, Any]],
        destructure: list[str],
        imports: list[str],
    ) -> dict[str, Any]:
        client = opts.is_client_component
        suffix = "ClientProps" if client else "ServerProps"
        class_name = kebab_name(opts.name)
        ui_imports: list[str] = []
        type_imports: list[str] = []
        props_type = None
        note = None
        tab = None

        if opts.kind == "root":
            slot = opts.root_component_type
            note = f"Register under admin.components ({slot}) in payload.config."
            if slot in ("logo", "icon"):
                ui_imports.append("import Image from 'next/image'")
                size = 'width={150} height={40}' if slot == "logo" else 'width={25} height={25}'
                jsx = [f'<Image className="{class_name}" src="/{slot}.svg" alt="{title_words(slot)}" {size} />']
            elif slot == "nav":
                ui_imports.append("import Link from 'next/link'")
                jsx = [
                    f'<nav className="{class_name}">',
                    '  <Link href="/admin">Dashboard</Link>',
                    "</nav>",
                ]
            elif slot == "logout":
                ui_imports.append("import Link from 'next/link'")
                jsx = [f'<Link className="{class_name}" href="/admin/logout">Log out</Link>']
            else:
                jsx = self._placeholder(class_name, title_words(opts.name))

        elif opts.kind == "collection":
            slot = opts.collection_component_type
            props_type = f"{COLLECTION_PROPS[slot]}{suffix}"
            type_imports.append(props_type)
            subject = opts.collection or "this collection"
            note = f"Register under admin.components for {subject} ({slot})."
            if slot in BUTTONS:
                button = slot[:1].upper() + slot[1:]
                ui_imports.append(f"import {{ {button} }} from '@payloadcms/ui'")
                jsx = [f"<{button} />"]
            elif slot == "description":
                jsx = [f'<p className="{class_name}">Description for {subject}.</p>']
            else:
                jsx = self._placeholder(class_name, title_words(opts.name))

        else:
            view = opts.view_type
            props_type = f"{VIEW_PROPS[view]}{suffix}"
            type_imports.append(props_type)
            note = f"Register under admin.components.views ({view})"
            note += f" at path '{opts.view_path}'." if opts.view_path else "."
            heading = self._view_title(view, opts.entity)
            if opts.use_default_template:
                ui_imports.append("import { DefaultTemplate } from '@payloadcms/next/templates'")
            ui_imports.append("import { Gutter } from '@payloadcms/ui'")
            content = [f"  <h1>{heading}</h1>"]
            if opts.use_default_template:
                destructure = ["initPageResult", "params", "searchParams", *destructure]
                jsx = [
                    "<DefaultTemplate",
                    "  i18n={initPageResult.req.i18n}",
                    "  locale={initPageResult.locale}",
                    "  params={params}",
                    "  payload={initPageResult.req.payload}",
                    "  permissions={initPageResult.permissions}",
                    "  searchParams={searchParams}",
                    "  user={initPageResult.req.user || undefined}",
                    "  visibleEntities={initPageResult.visibleEntities}",
                    ">",
                    f'  <Gutter className="{class_name}">',
                    *(f"  {line}" for line in content),
                    "  </Gutter>",
                    "</DefaultTemplate>",
                ]
            else:
                jsx = [f'<Gutter className="{class_name}">', *content, "</Gutter>"]
            if opts.is_document_tab:
                tab_type = f"DocumentTab{suffix}"
                type_imports.append(tab_type)
                tab = {
                    "props_type": tab_type,
                    "class_name": f"{class_name}-tab",
                    "label": opts.tab_label or title_words(opts.name),
                }

        if props:
            signature = f"props: {opts.name}Props"
        elif props_type:
            signature = f"props: {props_type}"
        else:
            signature = ""
        return {
            "client": client,
            "name": opts.name,
            "imports": ui_imports + imports,
            "type_imports": type_imports,
            "styles": opts.include_styles,
            "props": props,
            "props_type": props_type,
            "note": note,
            "signature": signature,
            "destructure": destructure,
            "jsx": jsx,
            "tab": tab,
        }

    @staticmethod
    def _placeholder(class_name: str, heading: str) -> list[str]:
        return [f'<div className="{class_name}">', f"  <h3>{heading}</h3>", "</div>"]

    @staticmethod
    def _view_title(view: str, entity: Optional[str]) -> str:
        if view == "dashboard":
            return "Dashboard"
        if view == "account":
            return "Account"
        if view == "list":
            return f"{entity or 'Collection'} List"
        if view == "edit":
            return f"Edit {entity or 'Document'}"
        return entity or "Custom View"

    @staticmethod
    def _layout(opts: ComponentOptions) -> str:
        if opts.kind == "root" and opts.root_component_type in ("logo", "icon"):
            return "center"
        if opts.kind == "view":
            return "view"
        return "panel"

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    @staticmethod
    def _errors(opts: ComponentOptions) -> list[ScaffoldError]:
        errors: list[ScaffoldError] = []
        if not is_identifier(opts.name) or not opts.name[:1].isupper():
            errors.append(
                option_error(
                    "name",
                    f"Component name {opts.name!r} must be a PascalCase identifier.",
                    suggestion="React components need a capitalized name, e.g. 'StatusBadge'.",
                )
            )

        for kind, (attribute, key) in SUBTYPES.items():
            value = getattr(opts, attribute)
            if kind == opts.kind and value is None:
                errors.append(option_error(key, f"'{key}' is required for {kind} components."))
            elif kind != opts.kind and value is not None:
                errors.append(option_error(key, f"'{key}' only applies to {kind} components."))

        if opts.kind == "view" and opts.use_default_template and opts.is_client_component:
            errors.append(
                option_error(
                    "useDefaultTemplate",
                    "The default admin template is a server component and cannot wrap a client view.",
                )
            )

        seen: set[str] = set()
        for index, prop in enumerate(opts.props):
            path = f"props[{index}].name"
            if not is_identifier(prop.name) or prop.name in JS_RESERVED_WORDS:
                errors.append(option_error(path, f"Prop name {prop.name!r} is not a usable identifier."))
            elif prop.name in seen or (prop.name == "children" and opts.kind == "provider"):
                errors.append(option_error(path, f"Prop name {prop.name!r} is already taken."))
            seen.add(prop.name)
            if "\n" in prop.prop_type:
                errors.append(option_error(f"props[{index}].type", "Prop types must fit on one line."))

        for key in ("entity", "tab_label", "collection"):
            value = getattr(opts, key)
            if value and JSX_UNSAFE_RE.search(value):
                alias = ComponentOptions.model_fields[key].alias or key
                errors.append(option_error(alias, f"{alias} {value!r} may not contain '<', '>', braces or newlines."))

        for index, line in enumerate(opts.imports):
            if not line.strip().startswith("import "):
                errors.append(option_error(f"imports[{index}]", f"{line!r} is not an import statement."))

        if opts.output_path and (opts.output_path.startswith("/") or ".." in opts.output_path.split("/")):
            errors.append(option_error("outputPath", "outputPath must be relative to the project root."))
        return errors
