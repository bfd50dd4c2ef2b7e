"""Unit tests for ScaffoldSettings (payload_scaffold.config).

Tests cover:
- Defaults
- project_root derivation
- save/load round trip
- from_env parsing
- Validation of the package manager
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from payload_scaffold.config import ScaffoldSettings


class TestDefaults:
    @pytest.mark.unit
    def test_defaults(self):
        settings = ScaffoldSettings()
        assert settings.output_dir == Path(".")
        assert settings.default_server_url == "http://localhost:3000"
        assert settings.package_manager == "pnpm"
        assert settings.payload_version == "^3.0.0"
        assert settings.default_lexical_version == "3.0.0"
        assert settings.typescript is True

    @pytest.mark.unit
    def test_unknown_package_manager_rejected(self):
        with pytest.raises(ValidationError):
            ScaffoldSettings(package_manager="bun")


class TestProjectRoot:
    @pytest.mark.unit
    def test_under_output_dir(self, tmp_path: Path):
        settings = ScaffoldSettings(output_dir=tmp_path)
        assert settings.project_root("my-blog") == tmp_path / "my-blog"

    @pytest.mark.unit
    def test_explicit_path_wins(self, tmp_path: Path):
        settings = ScaffoldSettings(output_dir=tmp_path)
        assert settings.project_root("my-blog", "/srv/site") == Path("/srv/site")


class TestSaveLoad:
    @pytest.mark.unit
    def test_round_trip(self, tmp_path: Path):
        settings = ScaffoldSettings(output_dir=tmp_path, package_manager="npm", typescript=False)
        path = settings.save(tmp_path / "nested" / "settings.json")
        assert path.exists()
        assert ScaffoldSettings.load(path) == settings


class TestFromEnv:
    @pytest.mark.unit
    def test_no_env(self):
        with patch.dict("os.environ", {}, clear=True):
            assert ScaffoldSettings.from_env() == ScaffoldSettings()

    @pytest.mark.unit
    def test_env_overrides(self, tmp_path: Path):
        env = {
            "PAYLOAD_SCAFFOLD_OUTPUT_DIR": str(tmp_path),
            "PAYLOAD_SCAFFOLD_SERVER_URL": "https://cms.example.test",
            "PAYLOAD_SCAFFOLD_PACKAGE_MANAGER": "yarn",
            "PAYLOAD_SCAFFOLD_PAYLOAD_VERSION": "3.2.0",
            "PAYLOAD_SCAFFOLD_TYPESCRIPT": "no",
        }
        with patch.dict("os.environ", env, clear=True):
            settings = ScaffoldSettings.from_env()
        assert settings.output_dir == tmp_path
        assert settings.default_server_url == "https://cms.example.test"
        assert settings.package_manager == "yarn"
        assert settings.payload_version == "3.2.0"
        assert settings.typescript is False

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_typescript_truthy(self, value: str):
        with patch.dict("os.environ", {"PAYLOAD_SCAFFOLD_TYPESCRIPT": value}, clear=True):
            assert ScaffoldSettings.from_env().typescript is True
