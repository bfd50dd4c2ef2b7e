"""Payload Scaffold configuration.

Typed settings for the scaffolder. All settings use Pydantic v2 models so
they can be validated at construction time and serialised to/from JSON or
environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field


PackageManager = Literal["pnpm", "npm", "yarn"]


class ScaffoldSettings(BaseModel):
    """Tuneables shared by the CLI, the tool server and the orchestrator.

    Instances are typically created once by the entry point and passed to
    :class:`~payload_scaffold.scaffolder.generator.ProjectScaffolder`.
    """

    output_dir: Path = Field(
        default=Path("."), description="Parent directory for generated projects"
    )
    default_server_url: str = Field(default="http://localhost:3000")
    package_manager: PackageManager = Field(default="pnpm")
    payload_version: str = Field(default="^3.0.0")
    next_version: str = Field(default="^15.2.3")
    react_version: str = Field(default="^19.0.0")
    default_lexical_version: str = Field(
        default="3.0.0", description="@payloadcms/richtext-lexical pin when the spec names none"
    )
    typescript: bool = Field(
        default=True, description="Default when a project spec omits 'typescript'"
    )

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def project_root(self, project_name: str, output_path: str | Path | None = None) -> Path:
        """Directory a project is written to.

        An explicit *output_path* wins; otherwise the project lands in
        ``<output_dir>/<project_name>``.
        """
        if output_path:
            return Path(output_path)
        return self.output_dir / project_name

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the settings to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ScaffoldSettings":
        """Load previously-saved settings from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "ScaffoldSettings":
        """Build settings from environment variables.

        Recognised variables (all optional):
            PAYLOAD_SCAFFOLD_OUTPUT_DIR, PAYLOAD_SCAFFOLD_SERVER_URL,
            PAYLOAD_SCAFFOLD_PACKAGE_MANAGER, PAYLOAD_SCAFFOLD_PAYLOAD_VERSION,
            PAYLOAD_SCAFFOLD_TYPESCRIPT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("PAYLOAD_SCAFFOLD_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["PAYLOAD_SCAFFOLD_OUTPUT_DIR"])
        if os.environ.get("PAYLOAD_SCAFFOLD_SERVER_URL"):
            kwargs["default_server_url"] = os.environ["PAYLOAD_SCAFFOLD_SERVER_URL"]
        if os.environ.get("PAYLOAD_SCAFFOLD_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["PAYLOAD_SCAFFOLD_PACKAGE_MANAGER"]
        if os.environ.get("PAYLOAD_SCAFFOLD_PAYLOAD_VERSION"):
            kwargs["payload_version"] = os.environ["PAYLOAD_SCAFFOLD_PAYLOAD_VERSION"]
        if os.environ.get("PAYLOAD_SCAFFOLD_TYPESCRIPT"):
            kwargs["typescript"] = os.environ["PAYLOAD_SCAFFOLD_TYPESCRIPT"].strip().lower() in (
                "1",
                "true",
                "yes",
                "on",
            )
        return cls(**kwargs)
