"""Single-entity generation: collections, reusable fields and blocks.

Generates:
- ``src/collections/<slug>.ts``       -- one collection config
- ``src/fields/<name>.ts``            -- one exported field (``<name>Field``)
- ``src/blocks/<slug>/config.ts``     -- one block, plus its React component
- ``src/fields/<name>.ts``            -- a blocks field wired to block configs
- ``src/blocks/<slug>/register.ts``   -- config plugin registering a block
  for ``blockReferences``

Entity options use the same tree shape as a project specification and go
through the same validator and renderer, so a collection generated here is
byte-identical to the one a full scaffold would write.  The extra
``typescript`` key (default ``true``) picks the output language.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from ..scaffolder.identifiers import validate_identifier_name, validate_slug
from ..scaffolder.js import js_property, js_string, js_value, pad
from ..scaffolder.models import BlockSpec, CollectionSpec, FieldSpec, GeneratedFile, ScaffoldError
from ..scaffolder.naming import block_export, title_words
from ..scaffolder.render import (
    render_block,
    render_block_component,
    render_collection,
    render_field_module,
)
from ..scaffolder.templates import TemplateRenderer
from ..scaffolder.validate import format_location, validate_block, validate_collection, validate_field
from .models import GeneratedCode, GeneratorOptions, option_error, parse_options, raise_for


BlockMode = Literal["block", "blocksField", "globalBlockRegistration"]


def _language(typescript: bool) -> str:
    return "typescript" if typescript else "javascript"


def _split_typescript(options: Any) -> tuple[dict[str, Any], bool]:
    """Separate the ``typescript`` switch from an entity tree."""
    if not isinstance(options, Mapping):
        raise_for([option_error("", f"Generator options must be an object, got {type(options).__name__}.")])
    raw = dict(options)
    typescript = raw.pop("typescript", True)
    if not isinstance(typescript, bool):
        raise_for([option_error("typescript", "'typescript' must be true or false.")])
    return raw, typescript


def _parse_entity(model: type[BaseModel], raw: Mapping[str, Any], root: str) -> Any:
    """Parse a validated tree, reporting pydantic errors under *root*."""
    try:
        return model.model_validate(dict(raw))
    except ValidationError as exc:
        raise_for(
            [
                option_error(f"{root}.{format_location(error['loc'])}".rstrip("."), error["msg"])
                for error in exc.errors()
            ]
        )


# ---------------------------------------------------------------------------
# Collections and fields
# ---------------------------------------------------------------------------


class CollectionGenerator:
    """Generates one collection module."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(self, options: Any) -> GeneratedCode:
        raw, typescript = _split_typescript(options)
        raise_for(validate_collection(raw, "collection"))
        collection = _parse_entity(CollectionSpec, raw, "collection")
        generated = render_collection(collection, typescript=typescript)
        return GeneratedCode(code=generated.content, file_name=generated.path, language=_language(typescript))


class FieldGenerator:
    """Generates a reusable field module other entities can import."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(self, options: Any) -> GeneratedCode:
        raw, typescript = _split_typescript(options)
        raise_for(validate_field(raw, "field"))
        field = _parse_entity(FieldSpec, raw, "field")
        generated = render_field_module(field, typescript=typescript)
        return GeneratedCode(code=generated.content, file_name=generated.path, language=_language(typescript))


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


class BlocksFieldOptions(GeneratorOptions):
    name: str
    label: Optional[str] = None
    blocks: list[Any] = Field(default_factory=list)
    block_references: list[Any] = Field(default_factory=list, alias="blockReferences")
    min_rows: Optional[int] = Field(default=None, alias="minRows", ge=0)
    max_rows: Optional[int] = Field(default=None, alias="maxRows", ge=0)
    required: bool = False
    localized: bool = False
    admin: Optional[dict[str, Any]] = None


class BlockOptions(GeneratorOptions):
    mode: BlockMode = "block"
    block: Optional[dict[str, Any]] = None
    blocks_field: Optional[BlocksFieldOptions] = Field(default=None, alias="blocksField")
    include_component: bool = Field(default=True, alias="includeComponent")
    typescript: bool = True


class BlockGenerator:
    """Generates block configs in one of three modes.

    ``block`` renders one block config (and its component unless
    ``includeComponent`` is false).  ``blocksField`` renders a blocks field
    that embeds inline block configs or points at globally registered ones
    through ``blockReferences``.  ``globalBlockRegistration`` renders a
    config plugin adding one block to the config-level ``blocks`` array.
    """

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def generate(self, options: Any) -> GeneratedCode:
        opts = parse_options(BlockOptions, options)
        if opts.mode == "blocksField":
            if opts.blocks_field is None:
                raise_for([option_error("blocksField", "'blocksField' is required when mode is 'blocksField'.")])
            return self._blocks_field(opts.blocks_field, opts.typescript)

        if opts.block is None:
            raise_for([option_error("block", f"'block' is required when mode is '{opts.mode}'.")])
        raise_for(validate_block(opts.block, "block"))
        block = _parse_entity(BlockSpec, opts.block, "block")
        config = render_block(block, typescript=opts.typescript)

        if opts.mode == "globalBlockRegistration":
            return self._registration(block, config, opts.typescript)

        additional = []
        if opts.include_component:
            additional.append(render_block_component(block, typescript=opts.typescript))
        return GeneratedCode(
            code=config.content,
            file_name=config.path,
            language=_language(opts.typescript),
            additional_files=additional,
        )

    def _registration(self, block: BlockSpec, config: GeneratedFile, typescript: bool) -> GeneratedCode:
        name = block_export(block.slug)
        lines = ["import type { Config } from 'payload'", ""] if typescript else []
        lines.extend(
            [
                f"import {{ {name} }} from './config'",
                "",
                "/**",
                f" * Registers {name} on the Payload config so any blocks field can",
                f" * reference it with blockReferences: ['{block.slug}'].",
                " */",
            ]
        )
        signature = "(config: Config): Config" if typescript else "(config)"
        lines.extend(
            [
                f"export const register{name} = {signature} => ({{",
                "  ...config,",
                f"  blocks: [...(config.blocks || []), {name}],",
                "})",
                "",
            ]
        )
        ext = "ts" if typescript else "js"
        return GeneratedCode(
            code="\n".join(lines),
            file_name=f"src/blocks/{block.slug}/register.{ext}",
            language=_language(typescript),
            additional_files=[config],
        )

    def _blocks_field(self, field: BlocksFieldOptions, typescript: bool) -> GeneratedCode:
        errors: list[ScaffoldError] = []
        name_error = validate_identifier_name(field.name, "field", "blocksField")
        if name_error:
            errors.append(name_error)
        if not field.blocks and not field.block_references:
            errors.append(
                option_error(
                    "blocksField.blocks",
                    "A blocks field needs inline 'blocks' or 'blockReferences'.",
                    suggestion="Reference globally registered blocks by slug, or define them inline.",
                )
            )
        if field.blocks and field.block_references:
            errors.append(
                option_error("blocksField.blockReferences", "Use either 'blocks' or 'blockReferences', not both.")
            )

        seen: set[str] = set()
        for index, raw in enumerate(field.blocks):
            path = f"blocksField.blocks[{index}]"
            if not isinstance(raw, Mapping):
                errors.append(option_error(path, f"Block definition at {path} must be an object."))
                continue
            errors.extend(validate_block(raw, path))
            slug = raw.get("slug")
            if not isinstance(slug, str):
                continue
            if slug in seen:
                errors.append(
                    ScaffoldError(
                        code="DUPLICATE_BLOCK_SLUG",
                        message=f"Duplicate block slug '{slug}' in blocksField.",
                        field=f"{path}.slug",
                    )
                )
            seen.add(slug)
        for index, slug in enumerate(field.block_references):
            error = validate_slug(slug, "block", f"blocksField.blockReferences[{index}]")
            if error:
                errors.append(error)
        raise_for(errors)

        blocks = [_parse_entity(BlockSpec, raw, f"blocksField.blocks[{index}]") for index, raw in enumerate(field.blocks)]
        configs = [render_block(block, typescript=typescript) for block in blocks]

        lines = ["import type { Field } from 'payload'"] if typescript else []
        lines.extend(f"import {{ {block_export(block.slug)} }} from '../blocks/{block.slug}/config'" for block in blocks)
        if lines:
            lines.append("")
        annotation = ": Field" if typescript else ""
        lines.append(f"export const {field.name}Field{annotation} = {{")
        lines.append(js_property("name", js_string(field.name), 1))
        lines.append(js_property("type", js_string("blocks"), 1))
        lines.append(js_property("label", js_string(field.label or title_words(field.name)), 1))
        if field.required:
            lines.append(js_property("required", "true", 1))
        if field.localized:
            lines.append(js_property("localized", "true", 1))
        if field.min_rows is not None:
            lines.append(js_property("minRows", str(field.min_rows), 1))
        if field.max_rows is not None:
            lines.append(js_property("maxRows", str(field.max_rows), 1))
        if field.admin:
            lines.append(js_property("admin", js_value(field.admin, 1), 1))
        if field.block_references:
            lines.append(js_property("blockReferences", js_value(field.block_references, 1), 1))
            lines.append(f"{pad(1)}blocks: [],")
        else:
            exports = ", ".join(block_export(block.slug) for block in blocks)
            lines.append(js_property("blocks", f"[{exports}]", 1))
        lines.extend(["}", ""])

        ext = "ts" if typescript else "js"
        return GeneratedCode(
            code="\n".join(lines),
            file_name=f"src/fields/{field.name}.{ext}",
            language=_language(typescript),
            additional_files=configs,
        )
