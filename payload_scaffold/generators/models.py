"""Options and results shared by the template generators.

Every generator parses its raw options into a :class:`GeneratorOptions`
subclass and returns a :class:`GeneratedCode`.  Bad options raise
:class:`GeneratorOptionsError` carrying every problem found, in the same
:class:`ScaffoldError` shape the project validator reports.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..scaffolder.models import GeneratedFile, ScaffoldError
from ..scaffolder.validate import format_location


OPTIONS_ERROR = "INVALID_GENERATOR_OPTIONS"


class GeneratorOptions(BaseModel):
    """Base for option models: camelCase aliases, unknown keys rejected."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


OptionsT = TypeVar("OptionsT", bound=GeneratorOptions)


class GeneratedCode(BaseModel):
    """One generated module plus any companion files.

    ``file_name`` and every additional file path are relative to the
    target project root.
    """

    code: str
    file_name: str
    language: str = "typescript"
    additional_files: list[GeneratedFile] = Field(default_factory=list)
    output_path: Optional[str] = None


class GeneratorOptionsError(ValueError):
    """Raised when generator options fail validation."""

    def __init__(self, errors: list[ScaffoldError]) -> None:
        self.errors = errors
        summary = "; ".join(f"{error.field or '<options>'}: {error.message}" for error in errors)
        super().__init__(f"Invalid generator options: {summary}")


def option_error(field: str, message: str, suggestion: Optional[str] = None) -> ScaffoldError:
    return ScaffoldError(code=OPTIONS_ERROR, message=message, field=field, suggestion=suggestion)


def parse_options(model: type[OptionsT], options: Any) -> OptionsT:
    """Validate raw *options* into *model*.

    Raises:
        GeneratorOptionsError: *options* is not a mapping or fails the model.
    """
    if not isinstance(options, Mapping):
        raise GeneratorOptionsError(
            [option_error("", f"Generator options must be an object, got {type(options).__name__}.")]
        )
    try:
        return model.model_validate(dict(options))
    except ValidationError as exc:
        raise GeneratorOptionsError(
            [option_error(format_location(error["loc"]), error["msg"]) for error in exc.errors()]
        ) from None


def raise_for(errors: list[ScaffoldError]) -> None:
    """Raise :class:`GeneratorOptionsError` when *errors* is not empty."""
    if errors:
        raise GeneratorOptionsError(errors)
