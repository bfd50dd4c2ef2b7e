"""Pydantic v2 models for the Payload CMS project scaffolder.

Defines the recursive project tree (collections, globals, blocks, fields,
tabs), the tagged code-reference variants used wherever the caller embeds
functions (access rules, hooks, endpoint handlers), and the result objects
produced by the validator, the file-plan builder, and the orchestrator.

The models are lenient on purpose: the tree validator in
:mod:`payload_scaffold.scaffolder.validate` inspects raw caller input first,
and only a tree that passed validation is parsed into these types.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class DatabaseType(str, Enum):
    """Supported database adapters."""
    MONGODB = "mongodb"
    POSTGRES = "postgres"


class FieldType(str, Enum):
    """The closed set of field kinds the scaffolder understands."""
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    EMAIL = "email"
    CODE = "code"
    JSON = "json"
    DATE = "date"
    POINT = "point"
    RICH_TEXT = "richText"
    SELECT = "select"
    MULTISELECT = "multiselect"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    RELATIONSHIP = "relationship"
    ARRAY = "array"
    BLOCKS = "blocks"
    GROUP = "group"
    ROW = "row"
    COLLAPSIBLE = "collapsible"
    TABS = "tabs"
    UPLOAD = "upload"
    UI = "ui"


class EntityKind(str, Enum):
    """Top-level entities that render to their own module."""
    COLLECTION = "collection"
    GLOBAL = "global"
    BLOCK = "block"


# ---------------------------------------------------------------------------
# Code references (functions embedded in a spec)
# ---------------------------------------------------------------------------

class BooleanRule(BaseModel):
    """A constant access rule, rendered as ``true`` / ``false``."""
    kind: Literal["boolean"] = "boolean"
    value: bool


class ReferenceRule(BaseModel):
    """A named function defined in another module of the generated project."""
    kind: Literal["reference"] = "reference"
    name: str


class ExpressionRule(BaseModel):
    """Inline source text emitted verbatim. Never evaluated."""
    kind: Literal["expression"] = "expression"
    source: str


def coerce_code_value(value: Any) -> Any:
    """Map shorthand caller input onto the tagged code-reference shapes.

    ``True``/``False`` become :class:`BooleanRule`, identifier-shaped strings
    become :class:`ReferenceRule`, any other string becomes
    :class:`ExpressionRule`.  Mappings and anything else pass through
    unchanged for pydantic to validate.
    """
    if isinstance(value, bool):
        return {"kind": "boolean", "value": value}
    if isinstance(value, str):
        if _IDENTIFIER_RE.match(value):
            return {"kind": "reference", "name": value}
        return {"kind": "expression", "source": value}
    return value


AccessRule = Annotated[
    Union[BooleanRule, ReferenceRule, ExpressionRule],
    BeforeValidator(coerce_code_value),
]

CodeRef = Annotated[
    Union[ReferenceRule, ExpressionRule],
    BeforeValidator(coerce_code_value),
]


# ---------------------------------------------------------------------------
# Field tree
# ---------------------------------------------------------------------------

class _SpecModel(BaseModel):
    """Base for caller-facing models: camelCase aliases, extra keys kept."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def extra(self, key: str, default: Any = None) -> Any:
        """Return a type-specific key the model does not declare explicitly."""
        return (self.model_extra or {}).get(key, default)

    def is_set(self, attr: str) -> bool:
        """Whether *attr* was supplied by the caller (as opposed to defaulted)."""
        return attr in self.model_fields_set


class SelectOption(BaseModel):
    """A ``{label, value}`` choice for select, multiselect and radio fields."""
    label: str
    value: str


class TabSpec(_SpecModel):
    """One tab inside a ``tabs`` field."""
    label: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    fields: list[FieldSpec] = Field(default_factory=list)


class BlockSpec(_SpecModel):
    """A block: a named, reusable group of fields."""
    slug: str
    fields: list[FieldSpec] = Field(default_factory=list)
    labels: Optional[dict[str, str]] = None
    admin: Optional[dict[str, Any]] = None
    interface_name: Optional[str] = Field(default=None, alias="interfaceName")
    image_url: Optional[str] = Field(default=None, alias="imageURL")
    image_alt_text: Optional[str] = Field(default=None, alias="imageAltText")


class FieldSpec(_SpecModel):
    """The atomic, recursive unit of a content schema."""

    name: str
    type: FieldType
    label: Union[str, bool, dict[str, str], None] = None
    required: bool = False
    unique: bool = False
    localized: bool = False
    index: bool = False
    admin: Optional[dict[str, Any]] = None
    access: Optional[dict[str, AccessRule]] = None
    hooks: Optional[dict[str, list[CodeRef]]] = None
    validate_fn: Optional[CodeRef] = Field(default=None, alias="validate")
    default_value: Any = Field(default=None, alias="defaultValue")
    has_many: bool = Field(default=False, alias="hasMany")

    fields: list[FieldSpec] = Field(default_factory=list)
    blocks: list[BlockSpec] = Field(default_factory=list)
    tabs: list[TabSpec] = Field(default_factory=list)
    options: list[Union[SelectOption, str]] = Field(default_factory=list)
    relation_to: Union[str, list[str], None] = Field(default=None, alias="relationTo")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

class EndpointSpec(_SpecModel):
    """A custom REST endpoint attached to a collection or global."""
    path: str
    method: Literal["get", "post", "put", "patch", "delete"]
    handler: CodeRef


class CollectionSpec(_SpecModel):
    """A collection: a kebab-case slug plus its field tree and options."""

    slug: str
    fields: list[FieldSpec] = Field(default_factory=list)
    labels: Optional[dict[str, str]] = None
    admin: Optional[dict[str, Any]] = None
    access: Optional[dict[str, AccessRule]] = None
    auth: Union[bool, dict[str, Any], None] = None
    timestamps: Optional[bool] = None
    versions: Union[bool, dict[str, Any], None] = None
    upload: Union[bool, dict[str, Any], None] = None
    hooks: Optional[dict[str, list[CodeRef]]] = None
    endpoints: Union[list[EndpointSpec], Literal[False], None] = None
    indexes: Optional[list[dict[str, Any]]] = None


class GlobalSpec(_SpecModel):
    """A global: a singleton document with an identifier-style slug."""

    slug: str
    fields: list[FieldSpec] = Field(default_factory=list)
    labels: Optional[dict[str, str]] = None
    admin: Optional[dict[str, Any]] = None
    access: Optional[dict[str, AccessRule]] = None
    versions: Union[bool, dict[str, Any], None] = None
    hooks: Optional[dict[str, list[CodeRef]]] = None
    endpoints: Union[list[EndpointSpec], Literal[False], None] = None


class PluginConfig(BaseModel):
    """Object form of a plugin entry."""
    package: str
    options: Optional[dict[str, Any]] = None


PluginEntry = Union[str, PluginConfig]


class RichTextEditorConfig(_SpecModel):
    """Rich text editor package pin and enabled features."""
    version: str
    features: list[str] = Field(default_factory=list)


class ProjectSpec(_SpecModel):
    """Root of the scaffold tree."""

    project_name: str = Field(..., alias="projectName")
    database: DatabaseType
    description: Optional[str] = None
    server_url: Optional[str] = Field(default=None, alias="serverUrl")
    authentication: bool = True
    typescript: Optional[bool] = None
    collections: list[CollectionSpec] = Field(default_factory=list)
    globals: list[GlobalSpec] = Field(default_factory=list)
    blocks: list[BlockSpec] = Field(default_factory=list)
    plugins: list[PluginEntry] = Field(default_factory=list)
    admin: Optional[dict[str, Any]] = None
    rich_text_editor: Optional[RichTextEditorConfig] = Field(
        default=None, alias="richTextEditor"
    )
    compound_indexes: bool = Field(default=False, alias="compoundIndexes")
    i18n: Optional[dict[str, Any]] = None
    cors: Union[list[str], bool, None] = None

    def collection(self, slug: str) -> Optional[CollectionSpec]:
        """Return the collection declared with *slug*, if any."""
        for candidate in self.collections:
            if candidate.slug == slug:
                return candidate
        return None


TabSpec.model_rebuild()
BlockSpec.model_rebuild()
FieldSpec.model_rebuild()


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class ScaffoldError(BaseModel):
    """A structured, user-facing problem with a breadcrumb path."""

    code: str = Field(..., description="Stable machine-readable error code")
    message: str = Field(..., description="Human-readable description")
    field: Optional[str] = Field(
        default=None, description="Breadcrumb path, e.g. 'collections[0].fields[2].blocks'"
    )
    suggestion: Optional[str] = Field(default=None, description="How to fix it")


class GeneratedFile(BaseModel):
    """One rendered artifact, addressed relative to the project root."""
    path: str
    content: str


class FilePlan(BaseModel):
    """Everything the orchestrator will write, computed before any I/O."""

    model_config = ConfigDict(frozen=True)

    root: str
    files: dict[str, str] = Field(default_factory=dict)
    directories: list[str] = Field(default_factory=list)


class ScaffoldResult(BaseModel):
    """Outcome of the pure validate -> render -> plan pipeline."""

    success: bool
    files: dict[str, str] = Field(default_factory=dict)
    errors: list[ScaffoldError] = Field(default_factory=list)
    directories: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    plan: Optional[FilePlan] = None


class ScaffoldResponse(BaseModel):
    """Outcome of a full scaffold run, including filesystem writes."""

    success: bool
    project_path: Optional[str] = None
    admin_url: Optional[str] = None
    files: list[str] = Field(default_factory=list)
    directories: list[str] = Field(default_factory=list)
    errors: list[ScaffoldError] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)
