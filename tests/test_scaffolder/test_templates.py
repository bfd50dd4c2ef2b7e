"""Tests for the Jinja2 template renderer and its kebab_case filter."""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import UndefinedError

from payload_scaffold.scaffolder.templates import TemplateRenderer


pytestmark = pytest.mark.unit


class TestFilters:
    @pytest.fixture
    def renderer(self, tmp_path: Path) -> TemplateRenderer:
        (tmp_path / "names.j2").write_text(".{{ name | kebab_case }}", encoding="utf-8")
        return TemplateRenderer(tmp_path)

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("PostBanner", ".post-banner"), ("siteSettings", ".site-settings"), ("call_to_action", ".call-to-action")],
    )
    def test_kebab_case(self, renderer: TemplateRenderer, name: str, expected: str):
        assert renderer.render("names.j2", {"name": name}) == expected

    def test_styles_template_uses_filter(self):
        styles = TemplateRenderer().render("generators/styles.scss.j2", {"name": "AnalyticsView", "layout": "panel"})
        assert styles.startswith("@import '~@payloadcms/ui/scss';\n\n.analytics-view {\n")


class TestTemplateRenderer:
    def test_missing_variable_fails_loudly(self, tmp_path: Path):
        (tmp_path / "broken.j2").write_text("{{ missing }}", encoding="utf-8")
        with pytest.raises(UndefinedError):
            TemplateRenderer(tmp_path).render("broken.j2", {})

    def test_custom_template_dir(self, tmp_path: Path):
        (tmp_path / "hello.j2").write_text("Hello {{ project_name }}!\n", encoding="utf-8")
        renderer = TemplateRenderer(tmp_path)
        assert renderer.render("hello.j2", {"project_name": "acme"}) == "Hello acme!\n"

    @pytest.mark.parametrize("typescript", [True, False])
    def test_access_helper(self, typescript: bool):
        content = TemplateRenderer().render("access/anyone.j2", {"typescript": typescript})
        assert ("import type { Access } from 'payload'" in content) is typescript
        expected = "export const anyone: Access = () => true" if typescript else "export const anyone = () => true"
        assert expected in content
