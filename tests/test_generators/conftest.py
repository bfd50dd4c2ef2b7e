"""Fixtures shared by the generator tests."""

from __future__ import annotations

import pytest

from payload_scaffold.scaffolder.templates import TemplateRenderer


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()
