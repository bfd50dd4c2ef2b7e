"""Shared pytest fixtures for the Payload Scaffold test suite.

Provides reusable fixtures for:
- Minimal and feature-rich project specifications (raw dicts)
- Settings pointed at a temporary output directory
- A scaffolder wired to those settings
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest

from payload_scaffold.config import ScaffoldSettings
from payload_scaffold.scaffolder.generator import ProjectScaffolder


# ---------------------------------------------------------------------------
# Specifications
# ---------------------------------------------------------------------------

MINIMAL_OPTIONS: dict[str, Any] = {
    "projectName": "my-blog",
    "database": "mongodb",
    "authentication": False,
    "collections": [
        {
            "slug": "posts",
            "fields": [{"name": "title", "type": "text", "required": True}],
        }
    ],
}


FULL_OPTIONS: dict[str, Any] = {
    "projectName": "acme-site",
    "description": "Marketing site for Acme.",
    "database": "postgres",
    "serverUrl": "https://cms.acme.test",
    "authentication": True,
    "collections": [
        {
            "slug": "users",
            "fields": [{"name": "name", "type": "text"}],
        },
        {
            "slug": "posts",
            "admin": {"useAsTitle": "title"},
            "access": {"read": True, "update": "authenticated", "delete": "({ req }) => Boolean(req.user)"},
            "hooks": {"beforeChange": ["populatePublishedAt"]},
            "versions": {"drafts": True},
            "fields": [
                {"name": "title", "type": "text", "required": True},
                {
                    "name": "status",
                    "type": "select",
                    "options": [
                        {"label": "Draft", "value": "draft"},
                        {"label": "Published", "value": "published"},
                    ],
                    "defaultValue": "draft",
                },
                {"name": "author", "type": "relationship", "relationTo": "users"},
                {
                    "name": "layout",
                    "type": "blocks",
                    "blocks": [
                        {"slug": "hero", "fields": [{"name": "heading", "type": "text"}]},
                        {"slug": "cta", "fields": [{"name": "link", "type": "text"}]},
                    ],
                },
                {
                    "name": "details",
                    "type": "tabs",
                    "tabs": [
                        {"label": "SEO", "fields": [{"name": "metaTitle", "type": "text"}]},
                    ],
                },
            ],
        },
    ],
    "globals": [
        {"slug": "siteSettings", "fields": [{"name": "siteName", "type": "text"}]},
    ],
    "blocks": [
        {"slug": "call-to-action", "fields": [{"name": "label", "type": "text"}]},
    ],
    "plugins": [
        "@payloadcms/plugin-seo",
        {"package": "@payloadcms/plugin-search", "options": {"collections": ["posts"]}},
    ],
}


@pytest.fixture
def minimal_options() -> dict[str, Any]:
    """Smallest valid project: one collection with one field, no authentication."""
    return copy.deepcopy(MINIMAL_OPTIONS)


@pytest.fixture
def full_options() -> dict[str, Any]:
    """Project exercising auth, nested fields, globals, blocks and plugins."""
    return copy.deepcopy(FULL_OPTIONS)


# ---------------------------------------------------------------------------
# Scaffolder
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path: Path) -> ScaffoldSettings:
    """Settings that write projects under a temporary directory."""
    return ScaffoldSettings(output_dir=tmp_path)


@pytest.fixture
def scaffolder(settings: ScaffoldSettings) -> ProjectScaffolder:
    return ProjectScaffolder(settings=settings)
