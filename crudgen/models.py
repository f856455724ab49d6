# File: crudgen/models.py
"""
NexaFlow CrudGen - Core Data Models
=====================================
Pydantic V2 models for the normalized, language-agnostic schema that every
generator consumes, plus the resolved per-run options and the immutable
project configuration.

Pipeline position::

    Field spec / Table introspection / Config document
        -> SchemaBuilder -> Schema (frozen)
        -> Artifact generators -> GeneratedArtifact

A ``Schema`` is built once per model through the mutable ``SchemaBuilder``
(which enforces column uniqueness and relationship de-duplication) and is
frozen from then on, so generators can share it read-only.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from crudgen.utils import (
    strip_foreign_key_suffix,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_plural,
    to_snake_case,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.models")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class SemanticType(str, Enum):
    """Closed set of storage-independent column types."""

    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    BIG_INTEGER = "bigInteger"
    DECIMAL = "decimal"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    DATE_TIME = "dateTime"
    DATE_TIME_TZ = "dateTimeTz"
    TIME = "time"
    JSON = "json"
    UUID = "uuid"
    BINARY = "binary"

    @classmethod
    def lookup(cls, token: str) -> Optional["SemanticType"]:
        """Case-insensitive lookup by value; ``None`` when unknown."""
        return _SEMANTIC_TYPE_BY_LOWER.get(token.lower())


_SEMANTIC_TYPE_BY_LOWER: Dict[str, SemanticType] = {
    member.value.lower(): member for member in SemanticType
}

INTEGER_TYPES: FrozenSet[SemanticType] = frozenset({
    SemanticType.INTEGER,
    SemanticType.BIG_INTEGER,
})
NUMERIC_TYPES: FrozenSet[SemanticType] = INTEGER_TYPES | frozenset({
    SemanticType.DECIMAL,
    SemanticType.FLOAT,
})
DATE_TYPES: FrozenSet[SemanticType] = frozenset({
    SemanticType.DATE,
    SemanticType.DATE_TIME,
    SemanticType.DATE_TIME_TZ,
    SemanticType.TIME,
})
TEXTUAL_TYPES: FrozenSet[SemanticType] = frozenset({
    SemanticType.STRING,
    SemanticType.TEXT,
})


class RelationshipKind(str, Enum):
    """Eloquent association kinds."""

    BELONGS_TO = "belongsTo"
    HAS_MANY = "hasMany"
    HAS_ONE = "hasOne"
    BELONGS_TO_MANY = "belongsToMany"
    MORPH_MANY = "morphMany"
    MORPH_TO = "morphTo"


# Accessors returning a collection get a plural name.
PLURAL_ACCESSOR_KINDS: FrozenSet[RelationshipKind] = frozenset({
    RelationshipKind.HAS_MANY,
    RelationshipKind.BELONGS_TO_MANY,
    RelationshipKind.MORPH_MANY,
})


class OutputProfile(str, Enum):
    """Which artifact families a run produces."""

    API = "api"
    WEB = "web"
    BOTH = "both"
    LIVEWIRE = "livewire"


class CssFramework(str, Enum):
    """Markup dialect for views and components."""

    TAILWIND = "tailwind"
    BOOTSTRAP = "bootstrap"


# ---------------------------------------------------------------------------
# Conventional column names
# ---------------------------------------------------------------------------

IDENTIFIER_COLUMN: str = "id"
TIMESTAMP_COLUMNS: Tuple[str, ...] = ("created_at", "updated_at")
SOFT_DELETE_COLUMN: str = "deleted_at"
SENSITIVE_COLUMNS: Tuple[str, ...] = ("password", "remember_token")

_BOOKKEEPING_COLUMNS: FrozenSet[str] = frozenset(
    (IDENTIFIER_COLUMN, SOFT_DELETE_COLUMN) + TIMESTAMP_COLUMNS
)

_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_PASCAL_CASE_RE: re.Pattern[str] = re.compile(r"^[A-Z][A-Za-z0-9]*$")

# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_FROZEN_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="forbid",
    protected_namespaces=(),
)


# ---------------------------------------------------------------------------
# Column / Relationship
# ---------------------------------------------------------------------------


class Column(BaseModel):
    """One attribute of a generated model."""

    model_config = _FROZEN_CONFIG

    name: str = Field(..., min_length=1, description="Column identifier.")
    semantic_type: SemanticType = Field(
        default=SemanticType.STRING, description="Storage-independent type."
    )
    length: Optional[int] = Field(
        default=None, ge=1, description="Maximum length (string columns only)."
    )
    nullable: bool = Field(default=False, description="Column accepts NULL.")
    default: Optional[Any] = Field(default=None, description="Literal default value.")
    unsigned: bool = Field(default=False, description="Unsigned numeric column.")
    is_foreign_key: bool = Field(default=False, description="References another table.")
    is_unique: bool = Field(default=False, description="Carries a uniqueness rule.")
    autoincrement: bool = Field(
        default=False, description="Catalog-reported auto-increment column."
    )
    declared_type: Optional[str] = Field(
        default=None, description="Raw type token as written by the user."
    )

    @model_validator(mode="before")
    @classmethod
    def _default_string_length(cls, data: Any) -> Any:
        if isinstance(data, dict):
            semantic_type: Any = data.get("semantic_type", SemanticType.STRING)
            if semantic_type == SemanticType.STRING and data.get("length") is None:
                data = {**data, "length": 255}
        return data

    @property
    def is_primary(self) -> bool:
        """Primary key by convention: only a column literally named ``id``."""
        return self.name == IDENTIFIER_COLUMN

    @property
    def stem(self) -> str:
        """Name without the ``_id`` suffix (``author_id`` -> ``author``)."""
        return strip_foreign_key_suffix(self.name)

    @property
    def related_model(self) -> str:
        """Model referenced by a foreign-key column, by naming convention."""
        return to_pascal_case(self.stem)

    @property
    def related_table(self) -> str:
        """Pluralized table referenced by a foreign-key column."""
        return to_plural(self.stem)

    def __repr__(self) -> str:
        flags: List[str] = []
        if self.nullable:
            flags.append("nullable")
        if self.is_unique:
            flags.append("unique")
        if self.is_foreign_key:
            flags.append("fk")
        suffix: str = f" [{', '.join(flags)}]" if flags else ""
        return f"<Column {self.name}:{self.semantic_type.value}{suffix}>"


class Relationship(BaseModel):
    """
    Association from the subject model to another model.

    A tagged variant: ``kind`` decides which of the optional fields are
    legal.  ``foreign_key_column`` exists only for ``belongsTo`` (where it is
    required) and ``pivot_table`` only for ``belongsToMany``.
    """

    model_config = _FROZEN_CONFIG

    kind: RelationshipKind = Field(..., description="Association kind.")
    related_model: str = Field(..., description="PascalCase related model name.")
    accessor_name: str = Field(..., description="Generated accessor method name.")
    foreign_key_column: Optional[str] = Field(
        default=None, description="Owning FK column (belongsTo only)."
    )
    pivot_table: Optional[str] = Field(
        default=None, description="Pivot table (belongsToMany only)."
    )
    nullable: bool = Field(
        default=False, description="FK column may be NULL (belongsTo only)."
    )

    @field_validator("related_model")
    @classmethod
    def _check_related_model(cls, v: str) -> str:
        if not _PASCAL_CASE_RE.match(v):
            raise ValueError(f"Related model '{v}' must be a PascalCase identifier.")
        return v

    @field_validator("accessor_name")
    @classmethod
    def _check_accessor(cls, v: str) -> str:
        if not _IDENTIFIER_RE.match(v):
            raise ValueError(f"Accessor name '{v}' is not a valid identifier.")
        return v

    @model_validator(mode="after")
    def _check_kind_fields(self) -> "Relationship":
        if self.kind is RelationshipKind.BELONGS_TO:
            if not self.foreign_key_column:
                raise ValueError(
                    f"belongsTo {self.related_model} requires a foreign-key column."
                )
        elif self.foreign_key_column is not None:
            raise ValueError(
                f"foreign_key_column is only valid for belongsTo, not {self.kind.value}."
            )
        if self.pivot_table is not None and self.kind is not RelationshipKind.BELONGS_TO_MANY:
            raise ValueError(
                f"pivot_table is only valid for belongsToMany, not {self.kind.value}."
            )
        return self

    @classmethod
    def declare(
        cls,
        kind: RelationshipKind,
        related: str,
        accessor: Optional[str] = None,
        foreign_key: Optional[str] = None,
        pivot: Optional[str] = None,
        nullable: bool = False,
    ) -> "Relationship":
        """
        Build a relationship with conventional defaults.

        - belongsTo: FK ``snake(related)_id``, accessor ``camel(related)``
        - hasMany / belongsToMany / morphMany: accessor ``camel(plural(related))``
        - hasOne / morphTo: accessor ``camel(related)``
        """
        related_model: str = to_pascal_case(related)
        if accessor is None:
            if kind in PLURAL_ACCESSOR_KINDS:
                accessor = to_camel_case(to_plural(related_model))
            else:
                accessor = to_camel_case(related_model)
        fk: Optional[str] = None
        if kind is RelationshipKind.BELONGS_TO:
            fk = foreign_key or f"{to_snake_case(related_model)}_id"
        return cls(
            kind=kind,
            related_model=related_model,
            accessor_name=accessor,
            foreign_key_column=fk,
            pivot_table=pivot if kind is RelationshipKind.BELONGS_TO_MANY else None,
            nullable=nullable if kind is RelationshipKind.BELONGS_TO else False,
        )

    @classmethod
    def for_foreign_key(cls, column: Column) -> "Relationship":
        """Synthetic belongsTo inferred from a foreign-key column."""
        return cls(
            kind=RelationshipKind.BELONGS_TO,
            related_model=column.related_model,
            accessor_name=to_camel_case(column.stem),
            foreign_key_column=column.name,
            nullable=column.nullable,
        )

    def __repr__(self) -> str:
        return f"<Relationship {self.kind.value} {self.related_model} as {self.accessor_name}>"


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------


class Schema(BaseModel):
    """
    Normalized unit of generation input for one model.

    ``columns`` keeps insertion order, which drives field ordering in every
    generated file.  All derived names come from ``model_name`` through the
    deterministic converters in ``crudgen.utils``.
    """

    model_config = _FROZEN_CONFIG

    model_name: str = Field(..., description="PascalCase model name.")
    columns: Dict[str, Column] = Field(default_factory=dict)
    relationships: Tuple[Relationship, ...] = Field(default=())

    @field_validator("model_name")
    @classmethod
    def _check_model_name(cls, v: str) -> str:
        if not _PASCAL_CASE_RE.match(v):
            raise ValueError(f"Model name '{v}' must be a PascalCase identifier.")
        return v

    @model_validator(mode="after")
    def _check_invariants(self) -> "Schema":
        for key, column in self.columns.items():
            if key != column.name:
                raise ValueError(f"Column key '{key}' does not match name '{column.name}'.")
        seen: Dict[str, Relationship] = {}
        for rel in self.relationships:
            if rel.kind is not RelationshipKind.BELONGS_TO:
                continue
            if rel.related_model in seen:
                raise ValueError(
                    f"Duplicate belongsTo relationship to '{rel.related_model}'."
                )
            seen[rel.related_model] = rel
        return self

    # -- Derived naming -----------------------------------------------------

    @property
    def model_variable(self) -> str:
        return to_camel_case(self.model_name)

    @property
    def model_plural(self) -> str:
        return to_plural(self.model_name)

    @property
    def model_variable_plural(self) -> str:
        return to_camel_case(self.model_plural)

    @property
    def model_plural_lower(self) -> str:
        return self.model_plural.lower()

    @property
    def model_kebab(self) -> str:
        return to_kebab_case(self.model_name)

    @property
    def table_name(self) -> str:
        return to_snake_case(self.model_plural)

    @property
    def route_name(self) -> str:
        return to_kebab_case(self.model_plural)

    @property
    def route_parameter(self) -> str:
        """Implicit-binding parameter of a resource route (``blog_post``)."""
        return to_snake_case(self.model_name)

    @property
    def view_path(self) -> str:
        return to_kebab_case(self.model_plural)

    # -- Column selections --------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return not self.columns

    @property
    def data_columns(self) -> List[Column]:
        """Columns carrying user data: everything but id/timestamps/deleted_at."""
        return [c for c in self.columns.values() if c.name not in _BOOKKEEPING_COLUMNS]

    @property
    def fillable_columns(self) -> List[Column]:
        return [c for c in self.data_columns if not c.autoincrement]

    @property
    def display_columns(self) -> List[Column]:
        hidden: FrozenSet[str] = frozenset(SENSITIVE_COLUMNS + (SOFT_DELETE_COLUMN,))
        return [c for c in self.columns.values() if c.name not in hidden]

    @property
    def form_columns(self) -> List[Column]:
        return [c for c in self.data_columns if c.name != "remember_token"]

    @property
    def serializable_columns(self) -> List[Column]:
        return [c for c in self.data_columns if c.name not in SENSITIVE_COLUMNS]

    @property
    def required_columns(self) -> List[Column]:
        """Non-nullable data columns without a default."""
        return [c for c in self.data_columns if not c.nullable and c.default is None]

    @property
    def has_soft_delete_column(self) -> bool:
        return SOFT_DELETE_COLUMN in self.columns

    @property
    def has_timestamp_columns(self) -> bool:
        return all(name in self.columns for name in TIMESTAMP_COLUMNS)

    def relationships_of(self, kind: RelationshipKind) -> List[Relationship]:
        return [r for r in self.relationships if r.kind is kind]

    def __repr__(self) -> str:
        return (
            f"<Schema {self.model_name}: {len(self.columns)} column(s), "
            f"{len(self.relationships)} relationship(s)>"
        )


class SchemaBuilder:
    """
    Mutable accumulator that produces a frozen ``Schema``.

    De-duplication rules:
        - a column name is only added once (first declaration wins);
        - at most one ``belongsTo`` per related model, keyed by
          ``(related_model, kind)``;
        - any other relationship is dropped when an identical
          ``(kind, related_model, accessor_name)`` already exists.
    """

    __slots__ = ("model_name", "_columns", "_relationships")

    def __init__(self, model_name: str) -> None:
        self.model_name: str = model_name
        self._columns: Dict[str, Column] = {}
        self._relationships: List[Relationship] = []

    def has_column(self, name: str) -> bool:
        return name in self._columns

    @property
    def column_count(self) -> int:
        return len(self._columns)

    def add_column(self, column: Column) -> bool:
        if column.name in self._columns:
            logger.debug("Column '%s' already declared; keeping the first.", column.name)
            return False
        self._columns[column.name] = column
        return True

    def add_relationship(self, relationship: Relationship) -> bool:
        for existing in self._relationships:
            if existing.kind is not relationship.kind:
                continue
            if existing.related_model != relationship.related_model:
                continue
            if relationship.kind is RelationshipKind.BELONGS_TO:
                if existing.foreign_key_column != relationship.foreign_key_column:
                    logger.warning(
                        "%s: belongsTo %s via '%s' merged into existing relationship "
                        "via '%s'; only one belongsTo per related model is kept.",
                        self.model_name,
                        relationship.related_model,
                        relationship.foreign_key_column,
                        existing.foreign_key_column,
                    )
                return False
            if existing.accessor_name == relationship.accessor_name:
                return False
        self._relationships.append(relationship)
        return True

    def ensure_foreign_key_column(self, relationship: Relationship) -> bool:
        """Add the unsigned bigInteger FK column a belongsTo needs, if absent."""
        fk: Optional[str] = relationship.foreign_key_column
        if relationship.kind is not RelationshipKind.BELONGS_TO or fk is None:
            return False
        if fk in self._columns:
            return False
        return self.add_column(
            Column(
                name=fk,
                semantic_type=SemanticType.BIG_INTEGER,
                unsigned=True,
                is_foreign_key=True,
                nullable=relationship.nullable,
            )
        )

    def build(self) -> Schema:
        return Schema(
            model_name=self.model_name,
            columns=dict(self._columns),
            relationships=tuple(self._relationships),
        )


# ---------------------------------------------------------------------------
# Generation options
# ---------------------------------------------------------------------------


class GenerationOptions(BaseModel):
    """Resolved, immutable options for one model's run."""

    model_config = _FROZEN_CONFIG

    profile: OutputProfile = Field(default=OutputProfile.BOTH)
    css: CssFramework = Field(default=CssFramework.TAILWIND)
    force: bool = Field(default=False, description="Overwrite existing files.")
    soft_deletes: bool = Field(default=False)
    generate_all: bool = Field(
        default=False, description="Also emit migration, factory, seeder and tests."
    )
    no_policy: bool = Field(default=False)
    no_requests: bool = Field(default=False)
    api_resource: bool = Field(default=False)
    tests: bool = Field(default=False)
    add_to_nav: bool = Field(default=False)
    seeder_count: int = Field(default=10, ge=1)
    table: Optional[str] = Field(
        default=None, description="Table to introspect instead of the conventional name."
    )

    @property
    def wants_api(self) -> bool:
        return self.profile in (OutputProfile.API, OutputProfile.BOTH)

    @property
    def wants_web(self) -> bool:
        return self.profile in (OutputProfile.WEB, OutputProfile.BOTH)

    @property
    def is_livewire(self) -> bool:
        return self.profile is OutputProfile.LIVEWIRE

    @property
    def wants_resource(self) -> bool:
        return self.api_resource or self.wants_api

    def merged(self, overrides: Dict[str, Any]) -> "GenerationOptions":
        """Return a validated copy with *overrides* applied."""
        return GenerationOptions.model_validate({**self.model_dump(), **overrides})


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------


class Namespaces(BaseModel):
    """PHP namespaces per artifact kind."""

    model_config = _FROZEN_CONFIG

    models: str = "App\\Models"
    controllers: str = "App\\Http\\Controllers"
    api_controllers: str = "App\\Http\\Controllers\\Api"
    requests: str = "App\\Http\\Requests"
    policies: str = "App\\Policies"
    resources: str = "App\\Http\\Resources"
    livewire: str = "App\\Livewire"
    factories: str = "Database\\Factories"
    seeders: str = "Database\\Seeders"


class Paths(BaseModel):
    """Target directories per artifact kind, relative to ``base_path``."""

    model_config = _FROZEN_CONFIG

    models: str = "app/Models"
    controllers: str = "app/Http/Controllers"
    api_controllers: str = "app/Http/Controllers/Api"
    requests: str = "app/Http/Requests"
    policies: str = "app/Policies"
    resources: str = "app/Http/Resources"
    views: str = "resources/views"
    livewire: str = "app/Livewire"
    livewire_views: str = "resources/views/livewire"
    migrations: str = "database/migrations"
    factories: str = "database/factories"
    seeders: str = "database/seeders"
    tests: str = "tests"
    routes: str = "routes"
    layout: str = "resources/views/components/app-layout.blade.php"


class CrudConfig(BaseModel):
    """
    Immutable project configuration handed to the orchestrator.

    Generators read namespaces, paths and defaults from here and never look
    anything up on their own.
    """

    model_config = _FROZEN_CONFIG

    base_path: Path = Field(default=Path("."), description="Application root.")
    namespaces: Namespaces = Field(default_factory=Namespaces)
    paths: Paths = Field(default_factory=Paths)
    stub_path: str = Field(
        default="stubs/crudgen", description="Custom template directory (relative)."
    )
    default_profile: OutputProfile = Field(default=OutputProfile.BOTH)
    default_css: CssFramework = Field(default=CssFramework.TAILWIND)
    per_page: int = Field(default=15, ge=1, le=1000)
    timestamps: bool = Field(default=True)
    database_url: Optional[str] = Field(default=None)

    def path(self, kind: str, *parts: str) -> Path:
        """Absolute-ish target path: ``base_path / paths.<kind> / parts``."""
        root: str = getattr(self.paths, kind)
        return self.base_path.joinpath(root, *parts)

    @property
    def stub_directory(self) -> Path:
        return self.base_path / self.stub_path

    def default_options(self) -> GenerationOptions:
        return GenerationOptions(profile=self.default_profile, css=self.default_css)


# ---------------------------------------------------------------------------
# Generated artifact
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GeneratedArtifact:
    """
    One rendered file and its outcome.

    ``created`` is false when the target existed and overwrite was not
    requested (or when an append-style update found nothing to add).
    ``updated`` marks content appended to a pre-existing file.
    """

    path: Path
    content: str
    created: bool
    kind: str = ""
    updated: bool = False

    @property
    def skipped(self) -> bool:
        return not self.created


__all__: List[str] = [
    "SemanticType",
    "INTEGER_TYPES",
    "NUMERIC_TYPES",
    "DATE_TYPES",
    "TEXTUAL_TYPES",
    "RelationshipKind",
    "PLURAL_ACCESSOR_KINDS",
    "OutputProfile",
    "CssFramework",
    "IDENTIFIER_COLUMN",
    "TIMESTAMP_COLUMNS",
    "SOFT_DELETE_COLUMN",
    "SENSITIVE_COLUMNS",
    "Column",
    "Relationship",
    "Schema",
    "SchemaBuilder",
    "GenerationOptions",
    "Namespaces",
    "Paths",
    "CrudConfig",
    "GeneratedArtifact",
]

logger.debug("crudgen.models loaded.")
