"""Unit tests for the command-line entry point (payload_scaffold.cli)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
import yaml

from payload_scaffold.cli import build_parser, main


pytestmark = pytest.mark.unit


@pytest.fixture
def clean_env(tmp_path: Path):
    """Point generated projects at tmp_path and ignore the caller's environment."""
    with patch.dict("os.environ", {"PAYLOAD_SCAFFOLD_OUTPUT_DIR": str(tmp_path)}, clear=True):
        yield tmp_path


def _write(path: Path, options: Any) -> Path:
    if path.suffix in (".yaml", ".yml"):
        path.write_text(yaml.safe_dump(options), encoding="utf-8")
    else:
        path.write_text(json.dumps(options), encoding="utf-8")
    return path


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["project.yaml"])
        assert args.spec == "project.yaml"
        assert args.output is None
        assert args.check is False
        assert args.plan is False

    def test_check_and_plan_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["project.yaml", "--check", "--plan"])


class TestMain:
    def test_missing_file(self, clean_env: Path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([str(clean_env / "missing.json")])
        assert exc_info.value.code == 1
        assert "not found" in capsys.readouterr().out

    def test_unparseable_file(self, clean_env: Path, capsys):
        path = clean_env / "bad.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main([str(path)])
        assert exc_info.value.code == 1
        assert "Could not parse" in capsys.readouterr().out

    def test_non_object_file(self, clean_env: Path):
        path = _write(clean_env / "list.json", ["posts"])
        with pytest.raises(SystemExit) as exc_info:
            main([str(path)])
        assert exc_info.value.code == 1

    def test_check_valid(self, clean_env: Path, minimal_options, capsys):
        path = _write(clean_env / "project.yaml", minimal_options)
        main([str(path), "--check"])
        assert "Specification is valid." in capsys.readouterr().out
        assert not (clean_env / "my-blog").exists()

    def test_check_invalid(self, clean_env: Path, minimal_options, capsys):
        minimal_options["database"] = "sqlite"
        path = _write(clean_env / "project.json", minimal_options)
        with pytest.raises(SystemExit) as exc_info:
            main([str(path), "--check"])
        assert exc_info.value.code == 1
        assert "INVALID_DATABASE_TYPE" in capsys.readouterr().out

    def test_plan(self, clean_env: Path, minimal_options, capsys):
        path = _write(clean_env / "project.json", minimal_options)
        main([str(path), "--plan"])
        out = capsys.readouterr().out
        assert "package.json" in out
        assert not (clean_env / "my-blog").exists()

    def test_scaffold(self, clean_env: Path, minimal_options, capsys):
        path = _write(clean_env / "project.yaml", minimal_options)
        main([str(path)])
        assert (clean_env / "my-blog" / "src" / "collections" / "posts.ts").is_file()
        out = capsys.readouterr().out
        assert "Next steps" in out
        assert "cd my-blog" in out

    def test_scaffold_with_output(self, clean_env: Path, minimal_options):
        path = _write(clean_env / "project.json", minimal_options)
        main([str(path), "-o", str(clean_env / "elsewhere")])
        assert (clean_env / "elsewhere" / "package.json").is_file()

    def test_scaffold_invalid(self, clean_env: Path, minimal_options):
        minimal_options["authentication"] = True
        path = _write(clean_env / "project.json", minimal_options)
        with pytest.raises(SystemExit) as exc_info:
            main([str(path)])
        assert exc_info.value.code == 1
        assert not (clean_env / "my-blog").exists()
