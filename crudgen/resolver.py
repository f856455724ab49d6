# File: crudgen/resolver.py
"""
NexaFlow CrudGen - Configuration Resolution
=============================================
Turns the three input shapes into ``(Schema, GenerationOptions)`` pairs:

1. **Inline**: a model name, an optional field spec and repeated
   relationship declarations (the CLI flags).
2. **Introspection**: when the inline input yields no columns and a
   storage catalog is configured, the model's table is read instead.
3. **Structured document**: a JSON or YAML file describing one model
   (``{name, fields[], relationships[], options{}}``) or a batch
   (``{options{}, models[...]}``).

Option precedence, lowest to highest::

    CLI options  <  batch ``options``  <  per-model ``options``

Option keys are accepted in camelCase, kebab-case or snake_case.  Two
legacy keys are mapped: ``all`` -> ``generate_all`` and ``livewire: true``
-> ``profile: livewire`` (``type`` is an alias of ``profile``).

The project-level ``CrudConfig`` is loaded from the same kind of file by
``load_crud_config``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from crudgen.exceptions import MalformedConfiguration, TableNotFound
from crudgen.introspector import IntrospectedTable, SchemaIntrospector, StorageCatalog
from crudgen.models import (
    Column,
    CrudConfig,
    GenerationOptions,
    OutputProfile,
    Relationship,
    RelationshipKind,
    Schema,
    SchemaBuilder,
)
from crudgen.parser import FOREIGN_KEY_TYPE_TOKENS, ParsedFields, parse_fields, resolve_type_token
from crudgen.utils import to_pascal_case, to_plural, to_snake_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.resolver")

# Document option keys that are not GenerationOptions field names.
_OPTION_KEY_ALIASES: Dict[str, str] = {
    "all": "generate_all",
    "type": "profile",
}

# ---------------------------------------------------------------------------
# Key normalization
# ---------------------------------------------------------------------------


def normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """``softDeletes`` / ``soft-deletes`` / ``soft_deletes`` -> ``soft_deletes``."""
    return {to_snake_case(str(key)): value for key, value in data.items()}


def normalize_options(raw: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Map a document's ``options`` mapping onto ``GenerationOptions`` field
    names.  Unknown keys are kept so that validation rejects them.
    """
    if not raw:
        return {}
    options: Dict[str, Any] = {}
    for key, value in normalize_keys(raw).items():
        if key == "livewire":
            if value:
                options["profile"] = OutputProfile.LIVEWIRE.value
            continue
        options[_OPTION_KEY_ALIASES.get(key, key)] = value
    return options


def apply_options(base: GenerationOptions, *layers: Optional[Mapping[str, Any]]) -> GenerationOptions:
    """
    Apply option layers over *base*, later layers winning.

    Raises:
        MalformedConfiguration: a layer has an unknown key or a bad value.
    """
    merged: Dict[str, Any] = {}
    for layer in layers:
        merged.update(normalize_options(layer))
    if not merged:
        return base
    try:
        return base.merged(merged)
    except ValidationError as exc:
        raise MalformedConfiguration(f"Invalid options: {exc}") from exc


# ---------------------------------------------------------------------------
# Document models
# ---------------------------------------------------------------------------

_DOCUMENT_CONFIG: ConfigDict = ConfigDict(
    extra="forbid",
    populate_by_name=True,
    protected_namespaces=(),
)


class _NormalizedDocument(BaseModel):
    """Accepts camelCase and kebab-case keys for snake_case fields."""

    model_config = _DOCUMENT_CONFIG

    @classmethod
    def from_mapping(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return cls.model_validate(normalize_keys(data))
        return cls.model_validate(data)


class FieldDocument(_NormalizedDocument):
    """One ``fields[]`` entry."""

    name: str = Field(..., min_length=1)
    type: str = Field(default="string")
    nullable: bool = False
    unique: bool = False
    length: Optional[int] = Field(default=None, ge=1)
    default: Optional[Any] = None

    def to_column(self) -> Column:
        semantic_type, recognized = resolve_type_token(self.type)
        if not recognized:
            logger.warning(
                "Unknown type '%s' for field '%s'; treating it as string.",
                self.type,
                self.name,
            )
        is_foreign: bool = (
            self.name.endswith("_id") or self.type.lower() in FOREIGN_KEY_TYPE_TOKENS
        )
        return Column(
            name=self.name,
            semantic_type=semantic_type,
            length=self.length,
            nullable=self.nullable,
            default=self.default,
            unsigned=is_foreign,
            is_foreign_key=is_foreign,
            is_unique=self.unique,
            declared_type=self.type,
        )


class RelationshipDocument(_NormalizedDocument):
    """One ``relationships[]`` entry."""

    type: RelationshipKind
    model: str = Field(..., min_length=1)
    method: Optional[str] = None
    foreign_key: Optional[str] = None
    nullable: bool = False
    pivot: Optional[str] = None

    def to_relationship(self) -> Relationship:
        return relationship_from_declaration(
            self.type,
            self.model,
            accessor=self.method,
            foreign_key=self.foreign_key,
            pivot=self.pivot,
            nullable=self.nullable,
        )


class ModelDocument(_NormalizedDocument):
    """A single-model document, or one entry of a batch's ``models``."""

    name: str = Field(..., min_length=1)
    fields: Union[str, List[FieldDocument]] = Field(default_factory=list)
    relationships: List[RelationshipDocument] = Field(default_factory=list)
    options: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("fields", mode="before")
    @classmethod
    def _normalize_fields(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [normalize_keys(item) if isinstance(item, Mapping) else item for item in v]
        return v

    @field_validator("relationships", mode="before")
    @classmethod
    def _normalize_relationships(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [normalize_keys(item) if isinstance(item, Mapping) else item for item in v]
        return v

    @property
    def model_name(self) -> str:
        return to_pascal_case(self.name)


class BatchDocument(_NormalizedDocument):
    """``{options{}, models[...]}``."""

    options: Dict[str, Any] = Field(default_factory=dict)
    models: List[ModelDocument] = Field(..., min_length=1)

    @field_validator("models", mode="before")
    @classmethod
    def _normalize_models(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [normalize_keys(item) if isinstance(item, Mapping) else item for item in v]
        return v


# ---------------------------------------------------------------------------
# Relationship declarations
# ---------------------------------------------------------------------------


def relationship_from_declaration(
    kind: Union[RelationshipKind, str],
    related: str,
    accessor: Optional[str] = None,
    foreign_key: Optional[str] = None,
    pivot: Optional[str] = None,
    nullable: bool = False,
) -> Relationship:
    """
    Build a relationship from a ``--belongs-to Category`` style
    declaration or a document entry, using conventional names for
    anything not given.

    Raises:
        MalformedConfiguration: unknown kind or invalid names.
    """
    try:
        resolved_kind: RelationshipKind = RelationshipKind(kind)
    except ValueError as exc:
        known: str = ", ".join(k.value for k in RelationshipKind)
        raise MalformedConfiguration(
            f"Unknown relationship type '{kind}' (expected one of: {known})."
        ) from exc
    try:
        return Relationship.declare(
            resolved_kind,
            related,
            accessor=accessor,
            foreign_key=foreign_key,
            pivot=pivot,
            nullable=nullable,
        )
    except ValidationError as exc:
        raise MalformedConfiguration(
            f"Invalid {resolved_kind.value} relationship to '{related}': {exc}"
        ) from exc


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ResolvedModel:
    """A fully resolved unit of generation."""

    schema: Schema
    options: GenerationOptions
    introspected: bool = False

    @property
    def model_name(self) -> str:
        return self.schema.model_name


def _add_relationships(builder: SchemaBuilder, relationships: Sequence[Relationship]) -> None:
    for relationship in relationships:
        if builder.add_relationship(relationship):
            builder.ensure_foreign_key_column(relationship)


def _finish(
    builder: SchemaBuilder,
    options: GenerationOptions,
    catalog: Optional[StorageCatalog],
) -> ResolvedModel:
    """
    Introspect when nothing declared a column, then apply the soft-delete
    detection.  A missing table falls back to an empty schema.
    """
    introspected: bool = False
    if builder.column_count == 0 and catalog is not None:
        table: str = options.table or to_snake_case(to_plural(builder.model_name))
        try:
            found: IntrospectedTable = SchemaIntrospector(catalog).introspect(table)
        except TableNotFound:
            logger.warning(
                "Table '%s' not found; generating %s with default scaffolding.",
                table,
                builder.model_name,
            )
        else:
            introspected = True
            for column in found.columns:
                builder.add_column(column)
            _add_relationships(builder, found.relationships)

    try:
        schema: Schema = builder.build()
    except ValidationError as exc:
        raise MalformedConfiguration(f"Invalid schema for '{builder.model_name}': {exc}") from exc

    if schema.has_soft_delete_column and not options.soft_deletes:
        logger.info("%s has a deleted_at column; enabling soft deletes.", schema.model_name)
        options = options.merged({"soft_deletes": True})

    logger.debug(
        "Resolved %s: %d column(s), %d relationship(s), introspected=%s.",
        schema.model_name,
        len(schema.columns),
        len(schema.relationships),
        introspected,
    )
    return ResolvedModel(schema=schema, options=options, introspected=introspected)


def resolve_inline(
    model_name: str,
    options: GenerationOptions,
    fields: Optional[str] = None,
    belongs_to: Sequence[str] = (),
    has_many: Sequence[str] = (),
    belongs_to_many: Sequence[str] = (),
    catalog: Optional[StorageCatalog] = None,
) -> ResolvedModel:
    """
    Resolve the inline (CLI) input shape.

    Raises:
        MalformedFieldSpec: the field spec has an entry with no name.
        MalformedConfiguration: a relationship declaration is invalid.
    """
    builder: SchemaBuilder = SchemaBuilder(to_pascal_case(model_name))

    parsed: ParsedFields = parse_fields(fields)
    for column in parsed.columns:
        builder.add_column(column)
    _add_relationships(builder, parsed.relationships)

    declared: List[Relationship] = (
        [relationship_from_declaration(RelationshipKind.BELONGS_TO, r) for r in belongs_to]
        + [relationship_from_declaration(RelationshipKind.HAS_MANY, r) for r in has_many]
        + [relationship_from_declaration(RelationshipKind.BELONGS_TO_MANY, r) for r in belongs_to_many]
    )
    _add_relationships(builder, declared)

    return _finish(builder, options, catalog)


def resolve_model_document(
    document: ModelDocument,
    options: GenerationOptions,
    catalog: Optional[StorageCatalog] = None,
) -> ResolvedModel:
    """Resolve one model entry whose options have already been merged."""
    builder: SchemaBuilder = SchemaBuilder(document.model_name)

    if isinstance(document.fields, str):
        parsed: ParsedFields = parse_fields(document.fields)
        for column in parsed.columns:
            builder.add_column(column)
        _add_relationships(builder, parsed.relationships)
    else:
        for entry in document.fields:
            try:
                column: Column = entry.to_column()
                implied: List[Relationship] = (
                    [Relationship.for_foreign_key(column)] if column.is_foreign_key else []
                )
            except ValidationError as exc:
                raise MalformedConfiguration(
                    f"Invalid field '{entry.name}' in model '{document.name}': {exc}"
                ) from exc
            builder.add_column(column)
            _add_relationships(builder, implied)

    _add_relationships(builder, [entry.to_relationship() for entry in document.relationships])

    return _finish(builder, options, catalog)


# ---------------------------------------------------------------------------
# Generation requests
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GenerationRequest:
    """
    Unresolved input for one model.

    Requests are cheap to build and carry no schema yet; the orchestrator
    resolves them in its Parsing state so resolution failures are reported
    against the model they belong to.
    """

    model_name: str
    options: GenerationOptions = field(default_factory=GenerationOptions)
    fields: Optional[str] = None
    belongs_to: Tuple[str, ...] = ()
    has_many: Tuple[str, ...] = ()
    belongs_to_many: Tuple[str, ...] = ()
    document: Optional[ModelDocument] = None

    @classmethod
    def from_document(cls, document: ModelDocument, options: GenerationOptions) -> "GenerationRequest":
        return cls(model_name=document.model_name, options=options, document=document)

    def resolve(self, catalog: Optional[StorageCatalog] = None) -> ResolvedModel:
        if self.document is not None:
            return resolve_model_document(self.document, self.options, catalog)
        return resolve_inline(
            self.model_name,
            self.options,
            fields=self.fields,
            belongs_to=self.belongs_to,
            has_many=self.has_many,
            belongs_to_many=self.belongs_to_many,
            catalog=catalog,
        )


def requests_from_document(
    data: Mapping[str, Any],
    base_options: Optional[GenerationOptions] = None,
) -> List[GenerationRequest]:
    """
    Validate a structured document and return one request per model, with
    options merged (CLI < batch < model).

    Raises:
        MalformedConfiguration: structural errors or invalid options.
    """
    base: GenerationOptions = base_options if base_options is not None else GenerationOptions()
    try:
        if "models" in data:
            batch: BatchDocument = BatchDocument.from_mapping(data)
            models: List[ModelDocument] = batch.models
            batch_options: Dict[str, Any] = batch.options
        else:
            models = [ModelDocument.from_mapping(data)]
            batch_options = {}
    except ValidationError as exc:
        raise MalformedConfiguration(f"Invalid configuration document: {exc}") from exc

    requests: List[GenerationRequest] = [
        GenerationRequest.from_document(model, apply_options(base, batch_options, model.options))
        for model in models
    ]
    logger.info("Configuration document describes %d model(s).", len(requests))
    return requests


def resolve_document(
    data: Mapping[str, Any],
    base_options: Optional[GenerationOptions] = None,
    catalog: Optional[StorageCatalog] = None,
) -> List[ResolvedModel]:
    """Validate and resolve every model of a structured document."""
    return [request.resolve(catalog) for request in requests_from_document(data, base_options)]


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------


def _parse_json(text: str, path: Path) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedConfiguration(f"Invalid JSON in {path}: {exc}", source=str(path)) from exc


def _parse_yaml(text: str, path: Path) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise MalformedConfiguration(f"Invalid YAML in {path}: {exc}", source=str(path)) from exc


def load_config_document(path: Path) -> Dict[str, Any]:
    """
    Load a JSON or YAML document, dispatching on the file extension.

    Unknown extensions are tried as JSON first, then as YAML.

    Raises:
        MalformedConfiguration: missing or unreadable file, parse error, or a
            top level that is not a mapping.
    """
    if not path.is_file():
        raise MalformedConfiguration(f"Configuration file not found: {path}", source=str(path))
    try:
        text: str = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MalformedConfiguration(f"Cannot read {path}: {exc}", source=str(path)) from exc

    suffix: str = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data: Any = _parse_yaml(text, path)
    elif suffix == ".json":
        data = _parse_json(text, path)
    else:
        logger.info("Unknown extension '%s'; trying JSON then YAML.", suffix)
        try:
            data = _parse_json(text, path)
        except MalformedConfiguration:
            data = _parse_yaml(text, path)

    if not isinstance(data, dict):
        raise MalformedConfiguration(
            f"Expected a mapping at the top level of {path}, got {type(data).__name__}.",
            source=str(path),
        )
    logger.debug("Loaded %s (%d top-level key(s)).", path, len(data))
    return data


def load_crud_config(
    path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> CrudConfig:
    """
    Build the project ``CrudConfig`` from an optional file plus overrides
    (e.g. ``base_path`` from the CLI).  Top-level keys may use any case
    convention; nested ``namespaces``/``paths`` keys are snake_case.

    Raises:
        MalformedConfiguration: unreadable file or invalid values.
    """
    data: Dict[str, Any] = normalize_keys(load_config_document(path)) if path is not None else {}
    for key in ("namespaces", "paths"):
        if isinstance(data.get(key), Mapping):
            data[key] = normalize_keys(data[key])
    data.update({k: v for k, v in (overrides or {}).items() if v is not None})
    try:
        config: CrudConfig = CrudConfig.model_validate(data)
    except ValidationError as exc:
        source: str = str(path) if path is not None else ""
        raise MalformedConfiguration(f"Invalid project configuration: {exc}", source=source) from exc
    logger.debug("Project configuration: base_path=%s", config.base_path)
    return config


__all__: List[str] = [
    "normalize_keys",
    "normalize_options",
    "apply_options",
    "FieldDocument",
    "RelationshipDocument",
    "ModelDocument",
    "BatchDocument",
    "relationship_from_declaration",
    "ResolvedModel",
    "resolve_inline",
    "resolve_model_document",
    "GenerationRequest",
    "requests_from_document",
    "resolve_document",
    "load_config_document",
    "load_crud_config",
]
