"""Closed registry of field kinds.

Each :class:`FieldKind` pairs the structural check run by the tree
validator with the renderer that emits the kind's type-specific keys.
Both sides recurse through callbacks supplied by their caller, so nested
fields, blocks and tabs are walked by the same code that walks the top
level.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from .identifiers import validate_slug
from .js import js_property, js_string, js_value, pad
from .models import BlockSpec, FieldSpec, FieldType, ScaffoldError, TabSpec


FieldWalker = Callable[[Any, str], list[ScaffoldError]]
FieldRenderer = Callable[[FieldSpec, int], str]
ShapeCheck = Callable[[dict[str, Any], str, str, FieldWalker], list[ScaffoldError]]
ExtrasRenderer = Callable[[FieldSpec, int, FieldRenderer], list[str]]


# ---------------------------------------------------------------------------
# Shape checks (validator side)
# ---------------------------------------------------------------------------

def _no_check(field: dict[str, Any], path: str, name: str, walk: FieldWalker) -> list[ScaffoldError]:
    return []


def _nested_fields_check(required: bool) -> ShapeCheck:
    def check(field: dict[str, Any], path: str, name: str, walk: FieldWalker) -> list[ScaffoldError]:
        sub_fields = field.get("fields")
        if isinstance(sub_fields, list) and (sub_fields or not required):
            return walk(sub_fields, f"{path}.fields")
        if sub_fields is None and not required:
            return []
        return [
            ScaffoldError(
                code="MISSING_SUBFIELDS",
                message=f"Field type '{field['type']}' requires a non-empty 'fields' array for field '{name}'",
                field=f"{path}.fields",
                suggestion="Add at least one sub-field.",
            )
        ]

    return check


def _blocks_check(field: dict[str, Any], path: str, name: str, walk: FieldWalker) -> list[ScaffoldError]:
    blocks = field.get("blocks")
    if not isinstance(blocks, list) or not blocks:
        return [
            ScaffoldError(
                code="MISSING_BLOCKS_ARRAY",
                message=f"Field type 'blocks' requires a non-empty 'blocks' array for field '{name}'",
                field=f"{path}.blocks",
                suggestion="Declare at least one block with a slug and fields.",
            )
        ]

    errors: list[ScaffoldError] = []
    seen_slugs: set[str] = set()
    for index, block in enumerate(blocks):
        block_path = f"{path}.blocks[{index}]"
        if not isinstance(block, Mapping):
            errors.append(
                ScaffoldError(
                    code="INVALID_BLOCK_DEFINITION",
                    message=f"Block definition at {block_path} must be an object.",
                    field=block_path,
                )
            )
            continue
        slug = block.get("slug")
        slug_error = validate_slug(slug, "block", block_path)
        if slug_error:
            errors.append(slug_error)
        elif slug in seen_slugs:
            errors.append(
                ScaffoldError(
                    code="DUPLICATE_BLOCK_SLUG",
                    message=f"Duplicate block slug '{slug}' in blocks field '{name}'",
                    field=f"{block_path}.slug",
                    suggestion="Block slugs must be unique within a single blocks field.",
                )
            )
        else:
            seen_slugs.add(slug)
        errors.extend(walk(block.get("fields"), f"{block_path}.fields"))
    return errors


def _tabs_check(field: dict[str, Any], path: str, name: str, walk: FieldWalker) -> list[ScaffoldError]:
    tabs = field.get("tabs")
    if not isinstance(tabs, list) or not tabs:
        return [
            ScaffoldError(
                code="MISSING_TABS_ARRAY",
                message=f"Field type 'tabs' requires a non-empty 'tabs' array for field '{name}'",
                field=f"{path}.tabs",
            )
        ]

    errors: list[ScaffoldError] = []
    for index, tab in enumerate(tabs):
        tab_path = f"{path}.tabs[{index}]"
        if not isinstance(tab, Mapping):
            errors.append(
                ScaffoldError(
                    code="INVALID_TAB_DEFINITION",
                    message=f"Tab definition at {tab_path} must be an object.",
                    field=tab_path,
                )
            )
            continue
        if not tab.get("label") and not tab.get("name"):
            errors.append(
                ScaffoldError(
                    code="MISSING_TAB_LABEL_OR_NAME",
                    message=f"Tab requires a 'label' or 'name' at path: {tab_path}",
                    field=tab_path,
                )
            )
        errors.extend(walk(tab.get("fields"), f"{tab_path}.fields"))
    return errors


def _options_check(field: dict[str, Any], path: str, name: str, walk: FieldWalker) -> list[ScaffoldError]:
    options = field.get("options")
    if not isinstance(options, list) or not options:
        return [
            ScaffoldError(
                code="MISSING_FIELD_OPTIONS",
                message=f"Field type '{field['type']}' requires a non-empty 'options' array for field '{name}'",
                field=f"{path}.options",
                suggestion="Add options such as [{\"label\": \"Draft\", \"value\": \"draft\"}].",
            )
        ]

    errors: list[ScaffoldError] = []
    for index, option in enumerate(options):
        if (
            not isinstance(option, Mapping)
            or not isinstance(option.get("label"), str)
            or not isinstance(option.get("value"), str)
        ):
            errors.append(
                ScaffoldError(
                    code="INVALID_FIELD_OPTION",
                    message=(
                        f"Invalid option at path: {path}.options[{index}]. "
                        "Options must be objects with 'label' and 'value' strings."
                    ),
                    field=f"{path}.options[{index}]",
                )
            )
    return errors


def _relation_check(field: dict[str, Any], path: str, name: str, walk: FieldWalker) -> list[ScaffoldError]:
    relation_to = field.get("relationTo")
    valid = (isinstance(relation_to, str) and relation_to != "") or (
        isinstance(relation_to, list)
        and bool(relation_to)
        and all(isinstance(item, str) and item for item in relation_to)
    )
    if valid:
        return []
    return [
        ScaffoldError(
            code="MISSING_OR_INVALID_RELATIONTO",
            message=(
                f"Field type '{field['type']}' requires 'relationTo' "
                f"(a collection slug or list of slugs) for field '{name}'"
            ),
            field=f"{path}.relationTo",
        )
    ]


# ---------------------------------------------------------------------------
# Type-specific renderers
# ---------------------------------------------------------------------------

def _no_extras(field: FieldSpec, level: int, render_field: FieldRenderer) -> list[str]:
    return []


def _extra_keys(field: FieldSpec, level: int, keys: tuple[str, ...]) -> list[str]:
    lines = []
    for key in keys:
        value = field.extra(key)
        if value is not None:
            lines.append(js_property(key, js_value(value, level), level))
    return lines


def _has_many_lines(field: FieldSpec, level: int) -> list[str]:
    if not field.has_many:
        return []
    return [js_property("hasMany", "true", level)] + _extra_keys(field, level, ("minRows", "maxRows"))


def render_field_list(
    key: str, fields: list[FieldSpec], level: int, render_field: FieldRenderer
) -> list[str]:
    """Emit ``key: [ ... ],`` with each field rendered at ``level + 1``."""
    if not fields:
        return [js_property(key, "[]", level)]
    lines = [f"{pad(level)}{key}: ["]
    for sub_field in fields:
        lines.append(f"{pad(level + 1)}{render_field(sub_field, level + 1)},")
    lines.append(f"{pad(level)}],")
    return lines


def render_inline_block(block: BlockSpec, level: int, render_field: FieldRenderer) -> str:
    """Render a block declared inside a ``blocks`` field as an object literal."""
    lines = ["{", js_property("slug", js_string(block.slug), level + 1)]
    if block.labels:
        lines.append(js_property("labels", js_value(block.labels, level + 1), level + 1))
    if block.interface_name:
        lines.append(js_property("interfaceName", js_string(block.interface_name), level + 1))
    lines.extend(render_field_list("fields", block.fields, level + 1, render_field))
    lines.append(f"{pad(level)}}}")
    return "\n".join(lines)


def _render_tab(tab: TabSpec, level: int, render_field: FieldRenderer) -> str:
    lines = ["{"]
    if tab.label:
        lines.append(js_property("label", js_string(tab.label), level + 1))
    if tab.name:
        lines.append(js_property("name", js_string(tab.name), level + 1))
    if tab.description:
        lines.append(js_property("description", js_string(tab.description), level + 1))
    lines.extend(render_field_list("fields", tab.fields, level + 1, render_field))
    lines.append(f"{pad(level)}}}")
    return "\n".join(lines)


def _text_extras(field: FieldSpec, level: int, render_field: FieldRenderer) -> list[str]:
    return _extra_keys(field, level, ("minLength", "maxLength")) + _has_many_lines(field, level)


def _number_extras(field: FieldSpec, level: int, render_field: FieldRenderer) -> list[str]:
    return _extra_keys(field, level, ("min", "max")) + _has_many_lines(field, level)


def _options_lines(field: FieldSpec, level: int) -> list[str]:
    return [js_property("options", js_value(field.options, level), level)]


def _select_extras(field: FieldSpec, level: int, render_field: FieldRenderer) -> list[str]:
    lines = _options_lines(field, level)
    if field.has_many:
        lines.append(js_property("hasMany", "true", level))
    return lines


def _multiselect_extras(field: FieldSpec, level: int, render_field: FieldRenderer) -> list[str]:
    return _options_lines(field, level) + [js_property("hasMany", "true", level)]


def _radio_extras(field: FieldSpec, level: int, render_field: FieldRenderer) -> list[str]:
    return _options_lines(field, level)


def _relation_extras(field: FieldSpec, level: int, render_field: FieldRenderer) -> list[str]:
    lines = [js_property("relationTo", js_value(field.relation_to, level), level)]
    lines.extend(_has_many_lines(field, level))
    lines.extend(_extra_keys(field, level, ("filterOptions", "maxDepth")))
    return lines


def _nested_extras(field: FieldSpec, level: int, render_field: FieldRenderer) -> list[str]:
    lines = render_field_list("fields", field.fields, level, render_field)
    lines.extend(_extra_keys(field, level, ("labels", "interfaceName", "dbName", "minRows", "maxRows")))
    return lines


def _blocks_extras(field: FieldSpec, level: int, render_field: FieldRenderer) -> list[str]:
    lines = [f"{pad(level)}blocks: ["]
    for block in field.blocks:
        lines.append(f"{pad(level + 1)}{render_inline_block(block, level + 1, render_field)},")
    lines.append(f"{pad(level)}],")
    lines.extend(_extra_keys(field, level, ("minRows", "maxRows", "labels")))
    return lines


def _tabs_extras(field: FieldSpec, level: int, render_field: FieldRenderer) -> list[str]:
    lines = [f"{pad(level)}tabs: ["]
    for tab in field.tabs:
        lines.append(f"{pad(level + 1)}{_render_tab(tab, level + 1, render_field)},")
    lines.append(f"{pad(level)}],")
    return lines


def _code_extras(field: FieldSpec, level: int, render_field: FieldRenderer) -> list[str]:
    return _extra_keys(field, level, ("language",))


def _json_extras(field: FieldSpec, level: int, render_field: FieldRenderer) -> list[str]:
    return _extra_keys(field, level, ("jsonSchema",))


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldKind:
    """Validation and rendering rules for one field type."""

    type: FieldType
    check: ShapeCheck = _no_check
    render: ExtrasRenderer = _no_extras


FIELD_KINDS: dict[str, FieldKind] = {
    kind.type.value: kind
    for kind in (
        FieldKind(FieldType.TEXT, render=_text_extras),
        FieldKind(FieldType.TEXTAREA, render=_text_extras),
        FieldKind(FieldType.EMAIL, render=_text_extras),
        FieldKind(FieldType.NUMBER, render=_number_extras),
        FieldKind(FieldType.CODE, render=_code_extras),
        FieldKind(FieldType.JSON, render=_json_extras),
        FieldKind(FieldType.DATE),
        FieldKind(FieldType.POINT),
        FieldKind(FieldType.RICH_TEXT),
        FieldKind(FieldType.CHECKBOX),
        FieldKind(FieldType.UI),
        FieldKind(FieldType.SELECT, check=_options_check, render=_select_extras),
        FieldKind(FieldType.MULTISELECT, check=_options_check, render=_multiselect_extras),
        FieldKind(FieldType.RADIO, check=_options_check, render=_radio_extras),
        FieldKind(FieldType.RELATIONSHIP, check=_relation_check, render=_relation_extras),
        FieldKind(FieldType.UPLOAD, check=_relation_check, render=_relation_extras),
        FieldKind(FieldType.ARRAY, check=_nested_fields_check(required=False), render=_nested_extras),
        FieldKind(FieldType.GROUP, check=_nested_fields_check(required=True), render=_nested_extras),
        FieldKind(FieldType.ROW, check=_nested_fields_check(required=True), render=_nested_extras),
        FieldKind(FieldType.COLLAPSIBLE, check=_nested_fields_check(required=True), render=_nested_extras),
        FieldKind(FieldType.BLOCKS, check=_blocks_check, render=_blocks_extras),
        FieldKind(FieldType.TABS, check=_tabs_check, render=_tabs_extras),
    )
}

VALID_FIELD_TYPES: tuple[str, ...] = tuple(FIELD_KINDS)
