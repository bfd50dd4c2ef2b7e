"""Tests for the collection / global / block renderers.

Covers:
- Exact field literal layout (flags, defaults, options, nesting)
- Collection module layout for TypeScript and JavaScript
- Code references: bare emission and de-duplicated imports
- Globals, top-level blocks, block components and the blocks index
- Determinism and contract errors
"""

from __future__ import annotations

import pytest

from payload_scaffold.scaffolder import render
from payload_scaffold.scaffolder.fields import FIELD_KINDS
from payload_scaffold.scaffolder.models import BlockSpec, CollectionSpec, FieldSpec, GlobalSpec
from payload_scaffold.scaffolder.render import (
    ScaffoldContractError,
    render_block,
    render_block_component,
    render_blocks_index,
    render_collection,
    render_entity,
    render_field,
    render_global,
    render_imports,
)


pytestmark = pytest.mark.unit


def _field(**data) -> FieldSpec:
    return FieldSpec.model_validate(data)


def _collection(**data) -> CollectionSpec:
    return CollectionSpec.model_validate(data)


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------


class TestRenderField:
    def test_text_field(self):
        assert render_field(_field(name="title", type="text", required=True)) == (
            "{\n"
            "  name: 'title',\n"
            "  type: 'text',\n"
            "  required: true,\n"
            "}"
        )

    def test_unset_flags_are_omitted(self):
        rendered = render_field(_field(name="body", type="richText"))
        assert "required" not in rendered
        assert "null" not in rendered
        assert "defaultValue" not in rendered

    def test_select_with_default(self):
        field = _field(
            name="status",
            type="select",
            defaultValue="draft",
            options=[{"label": "Draft", "value": "draft"}, {"label": "Published", "value": "published"}],
        )
        assert render_field(field) == (
            "{\n"
            "  name: 'status',\n"
            "  type: 'select',\n"
            "  defaultValue: 'draft',\n"
            "  options: [\n"
            "    {\n"
            "      label: 'Draft',\n"
            "      value: 'draft',\n"
            "    },\n"
            "    {\n"
            "      label: 'Published',\n"
            "      value: 'published',\n"
            "    },\n"
            "  ],\n"
            "}"
        )

    def test_falsy_default_is_rendered_when_supplied(self):
        rendered = render_field(_field(name="featured", type="checkbox", defaultValue=False))
        assert "  defaultValue: false," in rendered

    def test_multiselect_always_has_many(self):
        rendered = render_field(_field(name="tags", type="multiselect", options=["a", "b"]))
        assert "  options: ['a', 'b'],\n  hasMany: true," in rendered

    def test_relationship(self):
        rendered = render_field(_field(name="author", type="relationship", relationTo=["users", "teams"], hasMany=True))
        assert "  relationTo: ['users', 'teams'],\n  hasMany: true," in rendered

    def test_group_nests_one_level_deeper(self):
        field = _field(name="meta", type="group", fields=[{"name": "title", "type": "text"}])
        assert render_field(field) == (
            "{\n"
            "  name: 'meta',\n"
            "  type: 'group',\n"
            "  fields: [\n"
            "    {\n"
            "      name: 'title',\n"
            "      type: 'text',\n"
            "    },\n"
            "  ],\n"
            "}"
        )

    def test_blocks_field(self):
        field = _field(
            name="layout",
            type="blocks",
            blocks=[{"slug": "hero", "fields": [{"name": "heading", "type": "text"}]}],
        )
        assert render_field(field) == (
            "{\n"
            "  name: 'layout',\n"
            "  type: 'blocks',\n"
            "  blocks: [\n"
            "    {\n"
            "      slug: 'hero',\n"
            "      fields: [\n"
            "        {\n"
            "          name: 'heading',\n"
            "          type: 'text',\n"
            "        },\n"
            "      ],\n"
            "    },\n"
            "  ],\n"
            "}"
        )

    def test_tabs_field(self):
        field = _field(
            name="details",
            type="tabs",
            tabs=[{"label": "SEO", "fields": [{"name": "metaTitle", "type": "text"}]}],
        )
        rendered = render_field(field)
        assert "  tabs: [\n    {\n      label: 'SEO',\n      fields: [\n" in rendered
        assert "          name: 'metaTitle'," in rendered

    def test_code_values_render_bare(self):
        field = _field(
            name="slug",
            type="text",
            access={"update": False, "read": "isAdmin"},
            hooks={"beforeValidate": ["formatSlug", "(args) => args.value"]},
            validate="validateSlug",
        )
        rendered = render_field(field)
        assert "  access: {\n    update: false,\n    read: isAdmin,\n  }," in rendered
        assert "    beforeValidate: [formatSlug, (args) => args.value]," in rendered
        assert "  validate: validateSlug," in rendered

    def test_tagged_default_is_code(self):
        rendered = render_field(
            _field(name="publishedAt", type="date", defaultValue={"kind": "expression", "source": "() => new Date()"})
        )
        assert "  defaultValue: () => new Date()," in rendered

    def test_plain_string_default_is_data(self):
        rendered = render_field(_field(name="theme", type="text", defaultValue="dark"))
        assert "  defaultValue: 'dark'," in rendered

    def test_admin_condition_is_code(self):
        rendered = render_field(
            _field(name="cta", type="text", admin={"position": "sidebar", "condition": "(data) => data.showCta"})
        )
        assert "  admin: {\n    position: 'sidebar',\n    condition: (data) => data.showCta,\n  }," in rendered

    def test_unregistered_kind_is_contract_error(self, monkeypatch):
        monkeypatch.delitem(FIELD_KINDS, "point")
        with pytest.raises(ScaffoldContractError):
            render_field(_field(name="location", type="point"))

    def test_quotes_are_escaped(self):
        rendered = render_field(_field(name="title", type="text", label="Author's title"))
        assert "  label: 'Author\\'s title'," in rendered


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


MINIMAL_COLLECTION_TS = (
    "import type { CollectionConfig } from 'payload'\n"
    "\n"
    "export const Posts: CollectionConfig = {\n"
    "  slug: 'posts',\n"
    "  labels: {\n"
    "    singular: 'Post',\n"
    "    plural: 'Posts',\n"
    "  },\n"
    "  fields: [\n"
    "    {\n"
    "      name: 'title',\n"
    "      type: 'text',\n"
    "      required: true,\n"
    "    },\n"
    "  ],\n"
    "}\n"
)


class TestRenderCollection:
    def _posts(self, **extra) -> CollectionSpec:
        return _collection(slug="posts", fields=[{"name": "title", "type": "text", "required": True}], **extra)

    def test_typescript_module(self):
        generated = render_collection(self._posts())
        assert generated.path == "src/collections/posts.ts"
        assert generated.content == MINIMAL_COLLECTION_TS

    def test_javascript_module(self):
        generated = render_collection(self._posts(), typescript=False)
        assert generated.path == "src/collections/posts.js"
        assert generated.content.startswith("export const Posts = {\n  slug: 'posts',\n")
        assert "CollectionConfig" not in generated.content

    def test_rendering_is_deterministic(self):
        assert render_collection(self._posts()) == render_collection(self._posts())

    def test_explicit_labels_win(self):
        generated = render_collection(self._posts(labels={"singular": "Article", "plural": "Articles"}))
        assert "    singular: 'Article'," in generated.content

    def test_key_order(self):
        generated = render_collection(
            self._posts(
                indexes=[{"fields": ["title"]}],
                hooks={"afterChange": ["revalidate"]},
                timestamps=True,
                admin={"useAsTitle": "title"},
                access={"read": True},
                versions={"drafts": True},
            )
        )
        content = generated.content
        positions = [
            content.index(f"\n  {key}:")
            for key in ("slug", "labels", "admin", "access", "fields", "timestamps", "versions", "hooks", "indexes")
        ]
        assert positions == sorted(positions)

    def test_imports_are_deduplicated(self):
        collection = _collection(
            slug="posts",
            access={"read": "isAdmin", "update": "isAdmin"},
            hooks={"beforeChange": ["stamp"]},
            fields=[{"name": "title", "type": "text", "hooks": {"beforeChange": ["stamp"]}}],
        )
        content = render_collection(collection).content
        assert content.count("import { isAdmin } from '../access/isAdmin'") == 1
        assert content.count("import { stamp } from '../hooks/stamp'") == 1
        assert content.index("isAdmin }") < content.index("stamp }")

    def test_expressions_need_no_import(self):
        collection = self._posts(access={"delete": "({ req }) => Boolean(req.user)"})
        content = render_collection(collection).content
        assert "    delete: ({ req }) => Boolean(req.user)," in content
        assert "import {" not in content

    def test_nested_references_are_imported(self):
        collection = _collection(
            slug="pages",
            fields=[
                {
                    "name": "layout",
                    "type": "blocks",
                    "blocks": [{"slug": "hero", "fields": [{"name": "heading", "type": "text", "validate": "notEmpty"}]}],
                }
            ],
        )
        assert "import { notEmpty } from '../hooks/notEmpty'" in render_collection(collection).content

    def test_force_auth(self):
        users = _collection(slug="users", fields=[{"name": "name", "type": "text"}])
        assert "  auth: true," in render_collection(users, force_auth=True).content
        assert "auth:" not in render_collection(users).content

    def test_declared_auth_is_kept(self):
        users = _collection(slug="users", auth={"tokenExpiration": 7200}, fields=[{"name": "name", "type": "text"}])
        content = render_collection(users, force_auth=True).content
        assert "  auth: {\n    tokenExpiration: 7200,\n  }," in content

    def test_endpoints(self):
        collection = self._posts(endpoints=[{"path": "/feed", "method": "get", "handler": "feedHandler"}])
        content = render_collection(collection).content
        assert (
            "  endpoints: [\n"
            "    {\n"
            "      path: '/feed',\n"
            "      method: 'get',\n"
            "      handler: feedHandler,\n"
            "    },\n"
            "  ],"
        ) in content
        assert "import { feedHandler } from '../hooks/feedHandler'" in content

    def test_endpoints_disabled(self):
        assert "  endpoints: false," in render_collection(self._posts(endpoints=False)).content


# ---------------------------------------------------------------------------
# Globals and blocks
# ---------------------------------------------------------------------------


class TestRenderGlobal:
    def test_global_module(self):
        global_ = GlobalSpec.model_validate({"slug": "siteSettings", "fields": [{"name": "siteName", "type": "text"}]})
        generated = render_global(global_)
        assert generated.path == "src/globals/siteSettings.ts"
        assert generated.content.startswith(
            "import type { GlobalConfig } from 'payload'\n"
            "\n"
            "export const SiteSettingsGlobal: GlobalConfig = {\n"
            "  slug: 'siteSettings',\n"
            "  label: 'Site Settings',\n"
        )

    def test_label_from_labels(self):
        global_ = GlobalSpec.model_validate({"slug": "header", "labels": {"singular": "Site Header"}, "fields": []})
        assert "  label: 'Site Header'," in render_global(global_, typescript=False).content


class TestRenderBlock:
    def _block(self, **extra) -> BlockSpec:
        return BlockSpec.model_validate(
            {"slug": "call-to-action", "fields": [{"name": "label", "type": "text"}], **extra}
        )

    def test_block_config(self):
        generated = render_block(self._block())
        assert generated.path == "src/blocks/call-to-action/config.ts"
        assert generated.content == (
            "import type { Block } from 'payload'\n"
            "\n"
            "export const CallToActionBlock: Block = {\n"
            "  slug: 'call-to-action',\n"
            "  interfaceName: 'CallToActionBlock',\n"
            "  labels: {\n"
            "    singular: 'Call To Action',\n"
            "    plural: 'Call To Actions',\n"
            "  },\n"
            "  fields: [\n"
            "    {\n"
            "      name: 'label',\n"
            "      type: 'text',\n"
            "    },\n"
            "  ],\n"
            "}\n"
        )

    def test_block_imports_reach_src(self):
        block = BlockSpec.model_validate(
            {"slug": "hero", "fields": [{"name": "heading", "type": "text", "validate": "notEmpty"}]}
        )
        assert "import { notEmpty } from '../../hooks/notEmpty'" in render_block(block).content

    def test_block_image(self):
        content = render_block(self._block(imageURL="/blocks/cta.png", imageAltText="CTA")).content
        assert "  imageURL: '/blocks/cta.png',\n  imageAltText: 'CTA'," in content

    def test_component(self):
        generated = render_block_component(self._block())
        assert generated.path == "src/blocks/call-to-action/Component.tsx"
        assert "import type { CallToActionBlock } from '@/payload-types'" in generated.content
        assert "  const { id, className, label } = props" in generated.content
        assert "      <h2>Call To Action</h2>" in generated.content

    def test_component_props_are_unique(self):
        block = BlockSpec.model_validate({"slug": "card", "fields": [{"name": "id", "type": "text"}]})
        assert "  const { id, className } = props" in render_block_component(block, typescript=False).content

    def test_component_skips_reserved_words(self):
        block = BlockSpec.model_validate(
            {
                "slug": "card",
                "fields": [
                    {"name": "default", "type": "text"},
                    {"name": "class", "type": "text"},
                    {"name": "title", "type": "text"},
                ],
            }
        )
        assert "  const { id, className, title } = props" in render_block_component(block).content

    def test_javascript_component(self):
        generated = render_block_component(self._block(), typescript=False)
        assert generated.path == "src/blocks/call-to-action/Component.jsx"
        assert "payload-types" not in generated.content

    def test_index(self):
        blocks = [self._block(), BlockSpec.model_validate({"slug": "hero", "fields": []})]
        generated = render_blocks_index(blocks)
        assert generated.path == "src/blocks/index.ts"
        assert generated.content == (
            "export { CallToActionBlock } from './call-to-action/config'\n"
            "export { HeroBlock } from './hero/config'\n"
        )


# ---------------------------------------------------------------------------
# Dispatch and imports
# ---------------------------------------------------------------------------


class TestRenderEntity:
    def test_dispatch(self):
        collection = _collection(slug="posts", fields=[{"name": "title", "type": "text"}])
        assert render_entity("collection", collection) == render_collection(collection)

    def test_unknown_kind(self):
        with pytest.raises(ScaffoldContractError, match="Unknown entity kind"):
            render_entity("page", _collection(slug="posts"))

    def test_wrong_model(self):
        global_ = GlobalSpec.model_validate({"slug": "header"})
        with pytest.raises(ScaffoldContractError, match="expects CollectionSpec"):
            render_entity("collection", global_)


class TestRenderImports:
    def test_first_seen_order_and_root(self):
        references = [("access", "isAdmin"), ("hooks", "stamp"), ("access", "isAdmin")]
        assert render_imports(references, root="../..") == [
            "import { isAdmin } from '../../access/isAdmin'",
            "import { stamp } from '../../hooks/stamp'",
        ]

    def test_constants(self):
        assert render.ACCESS_DIR == "access"
        assert render.HOOKS_DIR == "hooks"
