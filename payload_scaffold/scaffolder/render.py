"""Deterministic rendering of validated specs into Payload config modules.

Every function here is a pure function of its input: the same spec always
produces byte-identical text.  Fields, blocks and tabs are emitted in the
order supplied, optional keys are omitted rather than rendered as ``null``,
and code references become bare identifiers backed by a de-duplicated
import block.

Callers must only hand over trees that passed
:func:`payload_scaffold.scaffolder.validate.validate_project`; the
renderer does not re-check structural rules.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Optional, Union

from pydantic import ValidationError

from .fields import FIELD_KINDS, render_field_list
from .identifiers import JS_RESERVED_WORDS
from .js import code_value, js_property, js_string, js_value, pad
from .models import (
    BlockSpec,
    CodeRef,
    CollectionSpec,
    EndpointSpec,
    EntityKind,
    ExpressionRule,
    FieldSpec,
    GeneratedFile,
    GlobalSpec,
    ReferenceRule,
    coerce_code_value,
)
from .naming import block_export, collection_export, default_labels, global_export, title_words


class ScaffoldContractError(ValueError):
    """Raised when the renderer is called in a way no valid tree can produce."""


ACCESS_DIR = "access"
HOOKS_DIR = "hooks"

_FLAG_KEYS = ("required", "unique", "localized", "index")
_EXTRA_FLAG_KEYS = ("saveToJWT", "hidden", "virtual")
_TRAILING_KEYS = ("custom", "graphQL", "typescript")


# ---------------------------------------------------------------------------
# Code references
# ---------------------------------------------------------------------------

def _as_code(value: Any) -> Optional[Union[ReferenceRule, ExpressionRule]]:
    """Coerce a raw value into a code reference, or ``None`` if it is data."""
    if isinstance(value, (ReferenceRule, ExpressionRule)):
        return value
    candidate = coerce_code_value(value)
    if not isinstance(candidate, dict):
        return None
    try:
        if candidate.get("kind") == "reference":
            return ReferenceRule.model_validate(candidate)
        if candidate.get("kind") == "expression":
            return ExpressionRule.model_validate(candidate)
    except ValidationError:
        return None
    return None


def _tagged_default(value: Any) -> Optional[Union[ReferenceRule, ExpressionRule]]:
    # Only an explicitly tagged mapping turns a default into code.
    if isinstance(value, dict) and value.get("kind") in ("reference", "expression"):
        return _as_code(value)
    return None


def _admin_condition(admin: dict[str, Any]) -> Optional[Union[ReferenceRule, ExpressionRule]]:
    condition = admin.get("condition")
    if isinstance(condition, str) and condition.strip():
        return _as_code(condition)
    return _tagged_default(condition)


def _field_references(fields: Iterable[FieldSpec]) -> Iterator[tuple[str, str]]:
    """Yield ``(directory, name)`` for every reference in a field tree, in render order."""
    for field in fields:
        default = _tagged_default(field.default_value)
        if isinstance(default, ReferenceRule):
            yield HOOKS_DIR, default.name
        for block in field.blocks:
            yield from _field_references(block.fields)
        yield from _field_references(field.fields)
        for tab in field.tabs:
            yield from _field_references(tab.fields)
        if field.admin:
            condition = _admin_condition(field.admin)
            if isinstance(condition, ReferenceRule):
                yield HOOKS_DIR, condition.name
        yield from _rule_references(field.access, ACCESS_DIR)
        yield from _hook_references(field.hooks)
        if isinstance(field.validate_fn, ReferenceRule):
            yield HOOKS_DIR, field.validate_fn.name


def _rule_references(rules: Optional[dict[str, Any]], directory: str) -> Iterator[tuple[str, str]]:
    for rule in (rules or {}).values():
        if isinstance(rule, ReferenceRule):
            yield directory, rule.name


def _hook_references(hooks: Optional[dict[str, list[CodeRef]]]) -> Iterator[tuple[str, str]]:
    for entries in (hooks or {}).values():
        for entry in entries:
            if isinstance(entry, ReferenceRule):
                yield HOOKS_DIR, entry.name


def _endpoint_references(endpoints: Any) -> Iterator[tuple[str, str]]:
    if isinstance(endpoints, list):
        for endpoint in endpoints:
            if isinstance(endpoint.handler, ReferenceRule):
                yield HOOKS_DIR, endpoint.handler.name


def render_imports(references: Iterable[tuple[str, str]], root: str = "..") -> list[str]:
    """One named import per distinct reference, first-seen order kept.

    *root* is the relative path from the importing module to ``src``.
    """
    lines: list[str] = []
    seen: set[str] = set()
    for directory, name in references:
        if name in seen:
            continue
        seen.add(name)
        lines.append(f"import {{ {name} }} from '{root}/{directory}/{name}'")
    return lines


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------

def _render_code_map(key: str, rules: dict[str, Any], level: int) -> list[str]:
    lines = [f"{pad(level)}{key}: {{"]
    for name, rule in rules.items():
        lines.append(js_property(name, code_value(rule), level + 1))
    lines.append(f"{pad(level)}}},")
    return lines


def _render_hooks(hooks: dict[str, list[CodeRef]], level: int) -> list[str]:
    lines = [f"{pad(level)}hooks: {{"]
    for name, entries in hooks.items():
        rendered = ", ".join(code_value(entry) for entry in entries)
        lines.append(js_property(name, f"[{rendered}]", level + 1))
    lines.append(f"{pad(level)}}},")
    return lines


def _render_admin(admin: dict[str, Any], level: int) -> list[str]:
    lines = [f"{pad(level)}admin: {{"]
    condition = _admin_condition(admin)
    for key, value in admin.items():
        if key == "condition" and condition is not None:
            lines.append(js_property(key, code_value(condition), level + 1))
        else:
            lines.append(js_property(key, js_value(value, level + 1), level + 1))
    lines.append(f"{pad(level)}}},")
    return lines


def render_field(field: FieldSpec, level: int = 0) -> str:
    """Render one field as an object literal.

    The opening brace sits wherever the caller places it; properties are
    indented at ``level + 1`` and the closing brace at ``level``.

    Raises:
        ScaffoldContractError: ``field.type`` has no registry entry.
    """
    kind = FIELD_KINDS.get(field.type.value)
    if kind is None:
        raise ScaffoldContractError(f"No renderer registered for field type {field.type.value!r}")

    inner = level + 1
    lines = [
        "{",
        js_property("name", js_string(field.name), inner),
        js_property("type", js_string(field.type.value), inner),
    ]
    if field.label is not None:
        label = js_string(field.label) if isinstance(field.label, str) else js_value(field.label, inner)
        lines.append(js_property("label", label, inner))
    for flag in _FLAG_KEYS:
        if getattr(field, flag):
            lines.append(js_property(flag, "true", inner))
    for flag in _EXTRA_FLAG_KEYS:
        if field.extra(flag):
            lines.append(js_property(flag, "true", inner))
    if field.is_set("default_value"):
        code = _tagged_default(field.default_value)
        rendered = code_value(code) if code is not None else js_value(field.default_value, inner)
        lines.append(js_property("defaultValue", rendered, inner))

    lines.extend(kind.render(field, inner, render_field))

    if field.admin:
        lines.extend(_render_admin(field.admin, inner))
    if field.access:
        lines.extend(_render_code_map("access", field.access, inner))
    if field.hooks:
        lines.extend(_render_hooks(field.hooks, inner))
    if field.validate_fn is not None:
        lines.append(js_property("validate", code_value(field.validate_fn), inner))
    for key in _TRAILING_KEYS:
        value = field.extra(key)
        if value is not None:
            lines.append(js_property(key, js_value(value, inner), inner))

    lines.append(f"{pad(level)}}}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

def _render_endpoints(endpoints: Union[list[EndpointSpec], bool], level: int) -> list[str]:
    if endpoints is False:
        return [js_property("endpoints", "false", level)]
    lines = [f"{pad(level)}endpoints: ["]
    for endpoint in endpoints:
        lines.extend(
            [
                f"{pad(level + 1)}{{",
                js_property("path", js_string(endpoint.path), level + 2),
                js_property("method", js_string(endpoint.method), level + 2),
                js_property("handler", code_value(endpoint.handler), level + 2),
                f"{pad(level + 1)}}},",
            ]
        )
    lines.append(f"{pad(level)}],")
    return lines


def _optional_value(key: str, value: Any, level: int) -> list[str]:
    if value is None:
        return []
    return [js_property(key, js_value(value, level), level)]


def _module(
    header: list[str],
    references: Iterable[tuple[str, str]],
    declaration: str,
    body: list[str],
    root: str = "..",
) -> str:
    imports = header + render_imports(references, root)
    lines = imports + ([""] if imports else []) + [declaration] + body + ["}", ""]
    return "\n".join(lines)


def _ext(typescript: bool) -> str:
    return "ts" if typescript else "js"


def render_collection(
    collection: CollectionSpec,
    *,
    typescript: bool = True,
    force_auth: bool = False,
) -> GeneratedFile:
    """Render ``src/collections/<slug>`` for one collection.

    Args:
        collection: A validated collection.
        typescript: Emit ``.ts`` with a ``CollectionConfig`` annotation.
        force_auth: Emit ``auth: true`` when the collection declares none
            (used for the ``users`` collection of an authenticated project).
    """
    name = collection_export(collection.slug)
    body = [
        js_property("slug", js_string(collection.slug), 1),
        js_property("labels", js_value(collection.labels or default_labels(collection.slug), 1), 1),
    ]
    body.extend(_optional_value("admin", collection.admin, 1))
    if collection.access:
        body.extend(_render_code_map("access", collection.access, 1))
    body.extend(render_field_list("fields", collection.fields, 1, render_field))
    body.extend(_optional_value("timestamps", collection.timestamps, 1))
    body.extend(_optional_value("versions", collection.versions, 1))
    auth = True if collection.auth is None and force_auth else collection.auth
    body.extend(_optional_value("auth", auth, 1))
    body.extend(_optional_value("upload", collection.upload, 1))
    if collection.hooks:
        body.extend(_render_hooks(collection.hooks, 1))
    if collection.endpoints is not None:
        body.extend(_render_endpoints(collection.endpoints, 1))
    body.extend(_optional_value("indexes", collection.indexes, 1))

    references = [
        *_rule_references(collection.access, ACCESS_DIR),
        *_field_references(collection.fields),
        *_hook_references(collection.hooks),
        *_endpoint_references(collection.endpoints),
    ]
    header = ["import type { CollectionConfig } from 'payload'"] if typescript else []
    annotation = ": CollectionConfig" if typescript else ""
    content = _module(header, references, f"export const {name}{annotation} = {{", body)
    return GeneratedFile(path=f"src/collections/{collection.slug}.{_ext(typescript)}", content=content)


def render_global(global_: GlobalSpec, *, typescript: bool = True) -> GeneratedFile:
    """Render ``src/globals/<slug>`` for one global."""
    name = global_export(global_.slug)
    body = [js_property("slug", js_string(global_.slug), 1)]
    label = (global_.labels or {}).get("singular") or title_words(global_.slug)
    body.append(js_property("label", js_string(label), 1))
    body.extend(_optional_value("admin", global_.admin, 1))
    if global_.access:
        body.extend(_render_code_map("access", global_.access, 1))
    body.extend(render_field_list("fields", global_.fields, 1, render_field))
    body.extend(_optional_value("versions", global_.versions, 1))
    if global_.hooks:
        body.extend(_render_hooks(global_.hooks, 1))
    if global_.endpoints is not None:
        body.extend(_render_endpoints(global_.endpoints, 1))

    references = [
        *_rule_references(global_.access, ACCESS_DIR),
        *_field_references(global_.fields),
        *_hook_references(global_.hooks),
        *_endpoint_references(global_.endpoints),
    ]
    header = ["import type { GlobalConfig } from 'payload'"] if typescript else []
    annotation = ": GlobalConfig" if typescript else ""
    content = _module(header, references, f"export const {name}{annotation} = {{", body)
    return GeneratedFile(path=f"src/globals/{global_.slug}.{_ext(typescript)}", content=content)


def render_block(block: BlockSpec, *, typescript: bool = True) -> GeneratedFile:
    """Render ``src/blocks/<slug>/config`` for one top-level block."""
    name = block_export(block.slug)
    body = [js_property("slug", js_string(block.slug), 1)]
    if block.image_url:
        body.append(js_property("imageURL", js_string(block.image_url), 1))
    if block.image_alt_text:
        body.append(js_property("imageAltText", js_string(block.image_alt_text), 1))
    body.append(js_property("interfaceName", js_string(block.interface_name or name), 1))
    body.append(js_property("labels", js_value(block.labels or default_labels(block.slug), 1), 1))
    body.extend(_optional_value("admin", block.admin, 1))
    body.extend(render_field_list("fields", block.fields, 1, render_field))

    header = ["import type { Block } from 'payload'"] if typescript else []
    annotation = ": Block" if typescript else ""
    content = _module(
        header,
        _field_references(block.fields),
        f"export const {name}{annotation} = {{",
        body,
        root="../..",
    )
    return GeneratedFile(path=f"src/blocks/{block.slug}/config.{_ext(typescript)}", content=content)


def render_block_component(block: BlockSpec, *, typescript: bool = True) -> GeneratedFile:
    """Render the React component stub that displays one block."""
    name = block_export(block.slug)
    interface = block.interface_name or name
    heading = (block.labels or {}).get("singular") or title_words(block.slug)
    # Reserved words cannot be destructured into bindings.
    names = (field.name for field in block.fields if field.name not in JS_RESERVED_WORDS)
    props = ", ".join(dict.fromkeys(["id", "className", *names]))

    lines = ["import React from 'react'"]
    if typescript:
        lines.extend(
            [
                f"import type {{ {interface} }} from '@/payload-types'",
                "",
                f"type Props = {interface} & {{",
                "  id?: string",
                "  className?: string",
                "}",
                "",
                f"export const {name}Component: React.FC<Props> = (props) => {{",
            ]
        )
    else:
        lines.extend(["", f"export const {name}Component = (props) => {{"])
    lines.extend(
        [
            f"  const {{ {props} }} = props",
            "",
            "  return (",
            f"    <div className={{className}} id={{`block-${{id}}`}} data-block={js_string(block.slug)}>",
            f"      <h2>{heading}</h2>",
            "    </div>",
            "  )",
            "}",
            "",
        ]
    )
    extension = "tsx" if typescript else "jsx"
    return GeneratedFile(path=f"src/blocks/{block.slug}/Component.{extension}", content="\n".join(lines))


def render_field_module(field: FieldSpec, *, typescript: bool = True) -> GeneratedFile:
    """Render ``src/fields/<name>`` exporting one reusable field as ``<name>Field``."""
    header = ["import type { Field } from 'payload'"] if typescript else []
    imports = header + render_imports(_field_references([field]))
    annotation = ": Field" if typescript else ""
    lines = imports + ([""] if imports else [])
    lines.extend([f"export const {field.name}Field{annotation} = {render_field(field)}", ""])
    return GeneratedFile(path=f"src/fields/{field.name}.{_ext(typescript)}", content="\n".join(lines))


def render_blocks_index(blocks: list[BlockSpec], *, typescript: bool = True) -> GeneratedFile:
    """Re-export every top-level block config from ``src/blocks/index``."""
    lines = [f"export {{ {block_export(block.slug)} }} from './{block.slug}/config'" for block in blocks]
    lines.append("")
    return GeneratedFile(path=f"src/blocks/index.{_ext(typescript)}", content="\n".join(lines))


def render_entity(kind: Union[EntityKind, str], spec: Any, *, typescript: bool = True) -> GeneratedFile:
    """Dispatch to the renderer for *kind*.

    Raises:
        ScaffoldContractError: *kind* is not a known entity kind, or *spec*
            is not the model that kind expects.
    """
    try:
        entity = EntityKind(kind)
    except ValueError:
        raise ScaffoldContractError(f"Unknown entity kind: {kind!r}") from None

    expected = {
        EntityKind.COLLECTION: CollectionSpec,
        EntityKind.GLOBAL: GlobalSpec,
        EntityKind.BLOCK: BlockSpec,
    }[entity]
    if not isinstance(spec, expected):
        raise ScaffoldContractError(
            f"{entity.value} renderer expects {expected.__name__}, got {type(spec).__name__}"
        )

    if entity is EntityKind.COLLECTION:
        return render_collection(spec, typescript=typescript)
    if entity is EntityKind.GLOBAL:
        return render_global(spec, typescript=typescript)
    return render_block(spec, typescript=typescript)

