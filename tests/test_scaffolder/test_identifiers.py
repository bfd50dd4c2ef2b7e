"""Tests for slug, identifier, version and name checks."""

from __future__ import annotations

import pytest

from payload_scaffold.scaffolder.identifiers import (
    is_identifier,
    validate_identifier_name,
    validate_package_name,
    validate_project_name,
    validate_semver,
    validate_server_url,
    validate_slug,
)


pytestmark = pytest.mark.unit


class TestValidateSlug:
    @pytest.mark.parametrize("slug", ["posts", "blog-posts", "a1", "v2-api-keys"])
    def test_accepts_kebab_case(self, slug: str):
        assert validate_slug(slug, "collection", "collections[0]") is None

    def test_uppercase_and_underscore_rejected(self):
        error = validate_slug("My_Collection", "collection", "collections[0]")
        assert error is not None
        assert error.code == "INVALID_COLLECTION_SLUG_FORMAT"
        assert error.field == "collections[0].slug"
        assert error.suggestion

    @pytest.mark.parametrize("slug", ["-posts", "posts-", "blog--posts", "blog posts"])
    def test_malformed_hyphenation_rejected(self, slug: str):
        error = validate_slug(slug, "collection", "collections[0]")
        assert error is not None
        assert error.code == "INVALID_COLLECTION_SLUG_FORMAT"

    @pytest.mark.parametrize("slug", [None, ""])
    def test_missing_slug(self, slug):
        error = validate_slug(slug, "block", "blocks[3]")
        assert error is not None
        assert error.code == "MISSING_BLOCK_SLUG"
        assert error.field == "blocks[3].slug"

    def test_non_string_slug_is_a_format_error(self):
        error = validate_slug(42, "collection", "collections[0]")
        assert error is not None
        assert error.code == "INVALID_COLLECTION_SLUG_FORMAT"


class TestValidateIdentifierName:
    @pytest.mark.parametrize("name", ["title", "_private", "$ref", "metaTitle2"])
    def test_accepts_identifiers(self, name: str):
        assert validate_identifier_name(name, "field", "collections[0].fields[0]") is None

    @pytest.mark.parametrize("name", ["2fast", "meta-title", "has space", "é"])
    def test_rejects_non_identifiers(self, name: str):
        error = validate_identifier_name(name, "field", "collections[0].fields[1]")
        assert error is not None
        assert error.code == "INVALID_FIELD_NAME_FORMAT"
        assert error.field == "collections[0].fields[1].name"

    @pytest.mark.parametrize("name", ["default", "class", "new", "await"])
    def test_rejects_reserved_words(self, name: str):
        error = validate_identifier_name(name, "field", "blocks[0].fields[2]")
        assert error is not None
        assert error.code == "RESERVED_FIELD_NAME"
        assert error.field == "blocks[0].fields[2].name"

    def test_reserved_words_are_case_sensitive(self):
        assert validate_identifier_name("Default", "field", "blocks[0].fields[0]") is None

    def test_missing_name(self):
        error = validate_identifier_name("", "field", "globals[0].fields[0]")
        assert error is not None
        assert error.code == "MISSING_FIELD_NAME"

    def test_is_identifier_rejects_non_strings(self):
        assert is_identifier(None) is False
        assert is_identifier(["title"]) is False


class TestValidateSemver:
    @pytest.mark.parametrize("version", ["3.0.0", "0.29.10", "3.1.0-beta.2"])
    def test_accepts_versions(self, version: str):
        assert validate_semver(version) is None

    @pytest.mark.parametrize("version", ["3", "3.0", "v3.0.0", "latest"])
    def test_rejects_malformed(self, version: str):
        error = validate_semver(version, "richTextEditor.version")
        assert error is not None
        assert error.code == "INVALID_VERSION_FORMAT"
        assert error.field == "richTextEditor.version"

    def test_missing_version(self):
        error = validate_semver(None)
        assert error is not None
        assert error.code == "MISSING_VERSION"
        assert error.field == "version"


class TestValidateProjectName:
    def test_valid(self):
        assert validate_project_name("my-blog") is None
        assert validate_project_name("site.v2_beta") is None

    def test_missing(self):
        error = validate_project_name(None)
        assert error is not None
        assert error.code == "MISSING_PROJECT_NAME"
        assert error.field == "projectName"

    @pytest.mark.parametrize("name", ["My Blog", "-blog", "Blog", "blog!"])
    def test_invalid(self, name: str):
        error = validate_project_name(name)
        assert error is not None
        assert error.code == "INVALID_PROJECT_NAME_FORMAT"


class TestValidatePackageName:
    @pytest.mark.parametrize("name", ["@payloadcms/plugin-seo", "payload-plugin-x", "my.plugin"])
    def test_valid(self, name: str):
        assert validate_package_name(name, "plugins[0]") is None

    @pytest.mark.parametrize("name", ["Plugin", "@scope", "bad name", ""])
    def test_invalid(self, name: str):
        error = validate_package_name(name, "plugins[2]")
        assert error is not None
        assert error.code == "INVALID_PLUGIN_NAME_FORMAT"
        assert error.field == "plugins[2]"


class TestValidateServerUrl:
    @pytest.mark.parametrize("url", [None, "", "http://localhost:3000", "https://cms.example.com"])
    def test_valid_or_absent(self, url):
        assert validate_server_url(url) is None

    @pytest.mark.parametrize("url", ["localhost:3000", "ftp://host", 3000])
    def test_invalid(self, url):
        error = validate_server_url(url)
        assert error is not None
        assert error.code == "INVALID_SERVER_URL"
        assert error.field == "serverUrl"
