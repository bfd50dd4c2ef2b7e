"""Filesystem collaborator used by the orchestrator.

Both operations report failure as a :class:`ScaffoldError` instead of
raising, so one unwritable path never stops the remaining writes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .models import ScaffoldError


class LocalFileSystem:
    """Creates directories and writes UTF-8 text files on the local disk."""

    def create_directory(self, path: str | Path) -> Optional[ScaffoldError]:
        """Create *path* and any missing parents."""
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            return ScaffoldError(
                code="FS_DIR_CREATE_ERROR",
                message=f"Failed to create directory: {exc}",
                field=str(path),
            )
        return None

    def write_file(self, path: str | Path, content: str) -> Optional[ScaffoldError]:
        """Write *content* to *path*, creating the parent directory if needed."""
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            return ScaffoldError(
                code="FS_FILE_WRITE_ERROR",
                message=f"Failed to write file: {exc}",
                field=str(path),
            )
        return None
