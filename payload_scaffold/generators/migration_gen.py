"""Database migration generation.

Generates:
- ``src/migrations/<YYYYMMDD_HHMMSS>[_<name>].ts`` -- ``up`` / ``down``
  functions typed with the adapter's ``MigrateUpArgs`` / ``MigrateDownArgs``

File names carry a timestamp, so unlike every other generator the output
path depends on the clock.  Pass ``now`` to pin it.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Callable, Literal, Optional

from pydantic import Field

from ..scaffolder.templates import TemplateRenderer
from .models import GeneratedCode, GeneratorOptions, option_error, parse_options, raise_for


DatabaseAdapter = Literal["mongodb", "postgres", "sqlite"]
MigrationFeature = Literal["schema", "data", "transaction"]

# Adapter -> destructured migration arguments
ARGUMENTS: dict[str, str] = {
    "mongodb": "payload, req, session",
    "postgres": "db, payload, req",
    "sqlite": "db, payload, req",
}

IMPORT_RE = re.compile(r"^import\s")


class MigrationOptions(GeneratorOptions):
    db_adapter: DatabaseAdapter = Field(alias="dbAdapter")
    name: Optional[str] = None
    description: Optional[str] = None
    features: list[MigrationFeature] = Field(default_factory=list)
    custom_imports: list[str] = Field(default_factory=list, alias="customImports")


def migration_stem(timestamp: datetime, name: Optional[str]) -> str:
    """``2024-05-01 12:30:00`` + ``Add Status`` -> ``20240501_123000_add_status``."""
    stem = timestamp.strftime("%Y%m%d_%H%M%S")
    suffix = re.sub(r"[^a-z0-9]+", "_", (name or "").lower()).strip("_")
    return f"{stem}_{suffix}" if suffix else stem


class MigrationGenerator:
    """Generates one migration module for a database adapter."""

    def __init__(self, renderer: TemplateRenderer, now: Callable[[], datetime] = datetime.now) -> None:
        self.renderer = renderer
        self.now = now

    def generate(self, options: Any) -> GeneratedCode:
        opts = parse_options(MigrationOptions, options)
        errors = []
        for index, line in enumerate(opts.custom_imports):
            if not IMPORT_RE.match(line.strip()):
                errors.append(
                    option_error(f"customImports[{index}]", f"Custom import {line!r} must be an import statement.")
                )
        raise_for(errors)

        features = sorted(set(opts.features), key=("schema", "data", "transaction").index)
        context = {
            "adapter": opts.db_adapter,
            "sql": opts.db_adapter != "mongodb",
            "custom_imports": [line.strip() for line in opts.custom_imports],
            "description": opts.description or "Database migration.",
            "features": features,
            "arguments": ARGUMENTS[opts.db_adapter],
            "steps": [
                {"direction": "up", "args_type": "MigrateUpArgs"},
                {"direction": "down", "args_type": "MigrateDownArgs"},
            ],
        }
        return GeneratedCode(
            code=self.renderer.render("generators/migration.ts.j2", context),
            file_name=f"src/migrations/{migration_stem(self.now(), opts.name)}.ts",
        )
