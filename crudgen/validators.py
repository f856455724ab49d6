# File: crudgen/validators.py
"""
NexaFlow CrudGen - Schema & Options Validators
================================================
A pure-function validation pipeline over a resolved ``Schema`` and its
``GenerationOptions``.

Pydantic already guarantees structural correctness (PascalCase model
names, kind-specific relationship fields, one belongsTo per related
model).  This module adds the **semantic** checks that only make sense
once a schema is complete: names that would produce invalid PHP, accessors
that shadow attributes, foreign keys without a column, and option
combinations that silently do nothing.

Errors stop generation before anything is written; warnings and info
items are logged and reported but never block a run.

Usage by downstream modules:
    from crudgen.validators import validate_full
    result = validate_full(schema, options)
    if result.has_errors:
        raise SchemaValidationError(...)
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, FrozenSet, List, Optional, Set

from crudgen.models import (
    NUMERIC_TYPES,
    GenerationOptions,
    OutputProfile,
    RelationshipKind,
    Schema,
    SemanticType,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """Lightweight error descriptor (no Pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning" | "info"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class ValidationResult:
    """Accumulates ``ValidationError`` items produced by the pipeline."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    # -- Mutation -----------------------------------------------------------

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    def add_info(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("info", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def all_items(self) -> List[ValidationError]:
        return list(self._items)

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    @property
    def has_errors(self) -> bool:
        return any(e.is_error for e in self._items)

    @property
    def has_warnings(self) -> bool:
        return any(e.is_warning for e in self._items)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self._items if e.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for e in self._items if e.is_warning)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def summary(self) -> str:
        return (
            f"Validation: {self.error_count} error(s), "
            f"{self.warning_count} warning(s), "
            f"{len(self._items)} total item(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self, include_info: bool = False) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary(), ""]
        for item in self._items:
            if not include_info and item.level == "info":
                continue
            prefix: str = {
                "error": "❌",
                "warning": "⚠️",
                "info": "ℹ️",
            }.get(item.level, "•")
            lines.append(f"  {prefix} [{item.code}] {item.message}")
            if item.context:
                for k, v in item.context.items():
                    lines.append(f"       {k}: {v}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Patterns and reserved names
# ---------------------------------------------------------------------------

_SNAKE_CASE_RE: re.Pattern[str] = re.compile(r"^[a-z][a-z0-9]*(_[a-z0-9]+)*$")
_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# PHP keywords and reserved class names; a class may not be called any of these.
_PHP_RESERVED_WORDS: FrozenSet[str] = frozenset(
    {
        "abstract", "and", "array", "as", "break", "callable", "case",
        "catch", "class", "clone", "const", "continue", "declare",
        "default", "do", "echo", "else", "elseif", "empty", "enddeclare",
        "endfor", "endforeach", "endif", "endswitch", "endwhile", "enum",
        "eval", "exit", "extends", "final", "finally", "fn", "for",
        "foreach", "function", "global", "goto", "if", "implements",
        "include", "instanceof", "insteadof", "interface", "isset", "list",
        "match", "namespace", "new", "or", "print", "private", "protected",
        "public", "readonly", "require", "return", "static", "switch",
        "throw", "trait", "try", "unset", "use", "var", "while", "xor",
        "yield", "bool", "false", "float", "int", "iterable", "mixed",
        "never", "null", "object", "parent", "self", "string", "true",
        "void",
    }
)

# Class names that collide with framework classes imported by the
# generated controllers, requests and tests.
_FRAMEWORK_CLASS_NAMES: FrozenSet[str] = frozenset(
    {"controller", "request", "response", "model", "factory", "seeder", "gate", "route"}
)

# Eloquent model members a column or accessor would shadow.
_ELOQUENT_MEMBERS: FrozenSet[str] = frozenset(
    {
        "attributes", "original", "changes", "casts", "relations",
        "connection", "table", "exists", "incrementing", "timestamps",
        "fillable", "guarded", "hidden", "visible", "appends", "with",
        "query", "save", "delete", "update", "fill", "push", "touch",
        "fresh", "refresh", "replicate", "load", "getkey", "toarray",
        "tojson",
    }
)

# Column types MySQL cannot put a plain unique index on.
_UNINDEXABLE_TYPES: FrozenSet[SemanticType] = frozenset(
    {SemanticType.TEXT, SemanticType.JSON, SemanticType.BINARY}
)

_SEEDER_COUNT_WARNING: int = 10_000
_COLUMN_COUNT_WARNING: int = 60


# ---------------------------------------------------------------------------
# Individual validation functions
# ---------------------------------------------------------------------------


def validate_model_name(schema: Schema) -> ValidationResult:
    """
    Check that the model name yields usable PHP class names.

    - Not a PHP keyword or reserved type name
    - Not a framework class the generated files import
    - A plural distinct from the singular (``index`` and ``show`` views and
      variables would otherwise collide)
    """
    result: ValidationResult = ValidationResult()
    name: str = schema.model_name
    ctx: Dict[str, Any] = {"model": name}

    if name.lower() in _PHP_RESERVED_WORDS:
        result.add_error(
            "MODEL_NAME_PHP_RESERVED",
            f"Model name '{name}' is a PHP reserved word and cannot name a class.",
            ctx,
        )
    if name.lower() in _FRAMEWORK_CLASS_NAMES:
        result.add_error(
            "MODEL_NAME_FRAMEWORK_CLASH",
            f"Model name '{name}' clashes with a framework class imported by "
            f"the generated code.",
            ctx,
        )
    if schema.model_variable_plural == schema.model_variable:
        result.add_warning(
            "MODEL_PLURAL_SAME_AS_SINGULAR",
            f"'{name}' has the same singular and plural form; collection and "
            f"record variables will share the name '${schema.model_variable}'.",
            ctx,
        )
    return result


def validate_column_names(schema: Schema) -> ValidationResult:
    """
    Validate column identifiers.

    Invalid identifiers are errors.  Non-snake_case names and names that
    shadow Eloquent model members are warnings.
    """
    result: ValidationResult = ValidationResult()

    for column in schema.columns.values():
        name: str = column.name
        ctx: Dict[str, Any] = {"model": schema.model_name, "column": name}

        if not _IDENTIFIER_RE.match(name):
            result.add_error(
                "INVALID_COLUMN_NAME",
                f"Column name '{name}' is not a valid identifier.",
                ctx,
            )
            continue

        if not _SNAKE_CASE_RE.match(name):
            result.add_warning(
                "COLUMN_NAME_NOT_SNAKE_CASE",
                f"Column name '{name}' is not snake_case; generated labels "
                f"and form field names may look odd.",
                ctx,
            )

        if name.lower() in _ELOQUENT_MEMBERS:
            result.add_warning(
                "COLUMN_SHADOWS_ELOQUENT_MEMBER",
                f"Column '{name}' shares its name with an Eloquent model member "
                f"and will only be reachable through getAttribute().",
                ctx,
            )

    logger.debug("validate_column_names: %d column(s) checked.", len(schema.columns))
    return result


def validate_relationships(schema: Schema) -> ValidationResult:
    """
    Check relationship accessors and foreign keys.

    - Accessor names are unique within the model
    - An accessor does not share its name with a column (the attribute
      would hide the relation)
    - Every belongsTo has its foreign-key column in the schema
    - A pivot table, when given, is snake_case
    """
    result: ValidationResult = ValidationResult()
    seen_accessors: Set[str] = set()

    for rel in schema.relationships:
        ctx: Dict[str, Any] = {
            "model": schema.model_name,
            "relationship": f"{rel.kind.value} {rel.related_model}",
        }

        if rel.accessor_name in seen_accessors:
            result.add_error(
                "DUPLICATE_ACCESSOR",
                f"Accessor '{rel.accessor_name}()' is declared by more than "
                f"one relationship.",
                ctx,
            )
        seen_accessors.add(rel.accessor_name)

        if rel.accessor_name in schema.columns:
            result.add_error(
                "ACCESSOR_COLUMN_COLLISION",
                f"Accessor '{rel.accessor_name}()' has the same name as a column; "
                f"the attribute would hide the relationship.",
                ctx,
            )

        if rel.accessor_name.lower() in _ELOQUENT_MEMBERS:
            result.add_error(
                "ACCESSOR_SHADOWS_ELOQUENT_MEMBER",
                f"Accessor '{rel.accessor_name}()' would override an Eloquent "
                f"model method.",
                ctx,
            )

        if rel.kind is RelationshipKind.BELONGS_TO:
            fk: Optional[str] = rel.foreign_key_column
            if fk is not None and fk not in schema.columns:
                result.add_error(
                    "MISSING_FOREIGN_KEY_COLUMN",
                    f"belongsTo {rel.related_model} uses '{fk}', which is not a "
                    f"column of {schema.model_name}.",
                    ctx,
                )

        if rel.pivot_table is not None and not _SNAKE_CASE_RE.match(rel.pivot_table):
            result.add_warning(
                "PIVOT_TABLE_NOT_SNAKE_CASE",
                f"Pivot table '{rel.pivot_table}' is not snake_case.",
                ctx,
            )

    return result


def validate_column_constraints(schema: Schema) -> ValidationResult:
    """
    Flag constraint combinations that produce a broken or surprising
    migration.

    - unique on text/json/binary (no plain index on MySQL)
    - unsigned on a non-numeric column (ignored)
    - a length on a non-string column (ignored)
    """
    result: ValidationResult = ValidationResult()

    for column in schema.columns.values():
        ctx: Dict[str, Any] = {
            "model": schema.model_name,
            "column": column.name,
            "type": column.semantic_type.value,
        }

        if column.is_unique and column.semantic_type in _UNINDEXABLE_TYPES:
            result.add_warning(
                "UNIQUE_ON_UNINDEXABLE_TYPE",
                f"Column '{column.name}' is unique but of type "
                f"{column.semantic_type.value}; MySQL cannot index it without "
                f"a prefix length.",
                ctx,
            )

        if (
            column.unsigned
            and not column.is_foreign_key
            and column.semantic_type not in NUMERIC_TYPES
        ):
            result.add_warning(
                "UNSIGNED_NON_NUMERIC",
                f"Column '{column.name}' is marked unsigned but is not numeric.",
                ctx,
            )

        if (
            column.length is not None
            and column.semantic_type is not SemanticType.STRING
        ):
            result.add_info(
                "LENGTH_IGNORED",
                f"Length {column.length} on '{column.name}' is ignored for "
                f"{column.semantic_type.value} columns.",
                ctx,
            )

    return result


def validate_schema_size(schema: Schema) -> ValidationResult:
    """Informational checks on the overall shape of the schema."""
    result: ValidationResult = ValidationResult()
    ctx: Dict[str, Any] = {"model": schema.model_name}

    if schema.is_empty:
        result.add_info(
            "EMPTY_SCHEMA",
            f"{schema.model_name} has no columns; artifacts will use a default "
            f"'name' column.",
            ctx,
        )
    elif not schema.fillable_columns:
        result.add_warning(
            "NO_FILLABLE_COLUMNS",
            f"{schema.model_name} has no fillable columns; forms and requests "
            f"will be empty.",
            ctx,
        )

    if len(schema.columns) > _COLUMN_COUNT_WARNING:
        result.add_warning(
            "LARGE_SCHEMA",
            f"{schema.model_name} has {len(schema.columns)} columns; generated "
            f"forms will be long.",
            {**ctx, "columns": len(schema.columns)},
        )
    return result


def validate_options(schema: Schema, options: GenerationOptions) -> ValidationResult:
    """
    Option combinations that are legal but do nothing, or that leave the
    generated code inconsistent.
    """
    result: ValidationResult = ValidationResult()
    ctx: Dict[str, Any] = {"model": schema.model_name, "profile": options.profile.value}

    if options.add_to_nav and not options.wants_web:
        result.add_warning(
            "NAV_WITHOUT_WEB_ROUTES",
            f"--add-to-nav links to the index page, but the {options.profile.value} "
            "profile registers no web routes; the navigation is left unchanged.",
            ctx,
        )

    if options.api_resource and options.profile in (OutputProfile.API, OutputProfile.BOTH):
        result.add_info(
            "API_RESOURCE_IMPLIED",
            "The API resource is always generated for api output; "
            "--api-resource is redundant.",
            ctx,
        )

    if options.tests and options.generate_all:
        result.add_info(
            "TESTS_IMPLIED",
            "--all already generates tests; --tests is redundant.",
            ctx,
        )

    if options.soft_deletes and schema.columns and not schema.has_soft_delete_column:
        result.add_info(
            "SOFT_DELETE_COLUMN_ADDED",
            "Soft deletes are on but the schema has no deleted_at column; "
            "the migration adds it.",
            ctx,
        )

    if options.seeder_count > _SEEDER_COUNT_WARNING:
        result.add_warning(
            "LARGE_SEEDER_COUNT",
            f"Seeder will create {options.seeder_count} records per run.",
            {**ctx, "seeder_count": options.seeder_count},
        )

    return result


# ---------------------------------------------------------------------------
# Aggregators
# ---------------------------------------------------------------------------


def validate_schema(schema: Schema) -> ValidationResult:
    """Run all schema-only validators."""
    result: ValidationResult = ValidationResult()
    result.merge(validate_model_name(schema))
    result.merge(validate_column_names(schema))
    result.merge(validate_relationships(schema))
    result.merge(validate_column_constraints(schema))
    result.merge(validate_schema_size(schema))
    logger.debug("Schema validation complete: %s", result.summary())
    return result


def validate_full(schema: Schema, options: GenerationOptions) -> ValidationResult:
    """
    **Master validation entry point.**

    Called by the orchestrator between resolution and generation.  Nothing
    has been written when this runs, so errors abort cleanly.
    """
    logger.info(
        "Validating %s: %d column(s), %d relationship(s), profile=%s",
        schema.model_name,
        len(schema.columns),
        len(schema.relationships),
        options.profile.value,
    )

    result: ValidationResult = ValidationResult()
    result.merge(validate_schema(schema))
    result.merge(validate_options(schema, options))

    for item in result.warnings:
        logger.warning("%s: %s", item.code, item.message)

    if result.has_errors:
        logger.error(
            "Validation FAILED with %d error(s). %s",
            result.error_count,
            result.summary(),
        )
    else:
        logger.info("Validation PASSED. %s", result.summary())

    return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_model_name",
    "validate_column_names",
    "validate_relationships",
    "validate_column_constraints",
    "validate_schema_size",
    "validate_options",
    "validate_schema",
    "validate_full",
]

logger.debug("crudgen.validators loaded.")
