# File: crudgen/inference.py
"""
NexaFlow CrudGen - Type Inference Rules
=========================================
Pure functions mapping a ``Column`` (semantic type + name heuristics) to the
secondary facts every generator needs:

    - validation rule sets (form requests, Livewire forms);
    - fake-data expressions (factories);
    - storage column definitions (migrations);
    - HTML input widgets (views, components);
    - Eloquent casts, PHP property types, resource serialization and
      sample values for generated tests.

This module is the single rule table for all of the above.  Generators must
call into it rather than re-deriving anything from column names.

Name heuristics are substring matches on the lower-cased column name,
evaluated in the order the tables list them.  The extra validation patterns
(postal code, slug, file, color) match whole ``_``-separated words instead,
so ``profile_url`` is not treated as a file upload.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from crudgen.models import (
    INTEGER_TYPES,
    NUMERIC_TYPES,
    SOFT_DELETE_COLUMN,
    TEXTUAL_TYPES,
    TIMESTAMP_COLUMNS,
    Column,
    SemanticType,
)
from crudgen.utils import php_literal, php_string, to_title_human

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.inference")


def _contains_any(name: str, needles: Tuple[str, ...]) -> bool:
    return any(needle in name for needle in needles)


def _has_word(name: str, words: Tuple[str, ...]) -> bool:
    parts: List[str] = name.split("_")
    return any(word in parts for word in words)


# ---------------------------------------------------------------------------
# Validation rules
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ValidationRule:
    """
    One Laravel validation rule.

    ``suffix_expression`` is a PHP expression concatenated onto the quoted
    token at runtime (used by the update-mode uniqueness rule to exclude the
    record being edited).
    """

    token: str
    suffix_expression: Optional[str] = None

    def php(self) -> str:
        if self.suffix_expression:
            return f"{php_string(self.token)} . {self.suffix_expression}"
        return php_string(self.token)

    def __str__(self) -> str:
        return self.token


_TYPE_RULES: Dict[SemanticType, Tuple[str, ...]] = {
    SemanticType.STRING: ("string",),
    SemanticType.TEXT: ("string",),
    SemanticType.INTEGER: ("integer",),
    SemanticType.BIG_INTEGER: ("integer",),
    SemanticType.DECIMAL: ("numeric",),
    SemanticType.FLOAT: ("numeric",),
    SemanticType.BOOLEAN: ("boolean",),
    SemanticType.DATE: ("date",),
    SemanticType.DATE_TIME: ("date",),
    SemanticType.DATE_TIME_TZ: ("date",),
    SemanticType.TIME: ("date_format:H:i:s",),
    SemanticType.JSON: ("array",),
    SemanticType.UUID: ("uuid",),
    SemanticType.BINARY: ("string",),
}

_PHONE_REGEX: str = r"regex:/^[\+]?[(]?[0-9]{3}[)]?[-\s\.]?[0-9]{3}[-\s\.]?[0-9]{4,6}$/"
_POSTAL_REGEX: str = r"regex:/^[A-Za-z0-9][A-Za-z0-9\s\-]{1,8}[A-Za-z0-9]$/"
_HEX_COLOR_REGEX: str = r"regex:/^#[0-9A-Fa-f]{6}$/"

# (matcher, needles, rules).  Every matching entry contributes its rules.
_PatternTable = Tuple[Tuple[Callable[[str, Tuple[str, ...]], bool], Tuple[str, ...], Tuple[str, ...]], ...]

# Format checks, applied to string and text columns only.
_TEXT_PATTERN_RULES: _PatternTable = (
    (_contains_any, ("email",), ("email",)),
    (_contains_any, ("url", "link", "website"), ("url",)),
)

# Layered on top of the type rules whatever the column type.
_NAME_PATTERN_RULES: _PatternTable = (
    (_contains_any, ("phone",), (_PHONE_REGEX,)),
    (_contains_any, ("image", "avatar", "photo"), ("image", "max:2048")),
    (_contains_any, ("password",), ("min:8",)),
    (_has_word, ("zip", "postal", "postcode"), (_POSTAL_REGEX,)),
    (_has_word, ("slug",), ("alpha_dash",)),
    (_has_word, ("file", "document", "attachment"), ("file", "max:10240")),
    (_has_word, ("color", "colour"), (_HEX_COLOR_REGEX,)),
)


def validation_rules(
    column: Column,
    table: str,
    model_variable: str,
    update: bool = False,
    ignore_expression: Optional[str] = None,
) -> List[ValidationRule]:
    """
    Derive the validation rules for one column.

    Args:
        column: The column to validate.
        table: Table the uniqueness rule is scoped to.
        model_variable: Route parameter holding the record being updated.
        update: Emit the update variant (``sometimes`` instead of
            ``required``, and a uniqueness rule that ignores the current
            record).
        ignore_expression: PHP expression for the id the uniqueness rule
            ignores.  Defaults to the bound route parameter; setting it also
            makes a non-update rule set exclude that record.
    """
    rules: List[ValidationRule] = []

    if column.nullable or column.default is not None:
        rules.append(ValidationRule("nullable"))
    else:
        rules.append(ValidationRule("sometimes" if update else "required"))

    for token in _TYPE_RULES[column.semantic_type]:
        rules.append(ValidationRule(token))
    if column.semantic_type is SemanticType.STRING and column.length:
        rules.append(ValidationRule(f"max:{column.length}"))
    if column.semantic_type in NUMERIC_TYPES and column.unsigned:
        rules.append(ValidationRule("min:0"))

    if column.is_foreign_key:
        rules.append(ValidationRule(f"exists:{column.related_table},id"))
    else:
        name: str = column.name.lower()
        patterns: _PatternTable = _NAME_PATTERN_RULES
        if column.semantic_type in TEXTUAL_TYPES:
            patterns = _TEXT_PATTERN_RULES + patterns
        for matcher, needles, pattern_rules in patterns:
            if matcher(name, needles):
                rules.extend(ValidationRule(token) for token in pattern_rules)

    if column.is_unique:
        if update or ignore_expression:
            rules.append(
                ValidationRule(
                    f"unique:{table},{column.name},",
                    suffix_expression=ignore_expression
                    or f"$this->route('{model_variable}')?->id",
                )
            )
        else:
            rules.append(ValidationRule(f"unique:{table},{column.name}"))

    return rules


def rules_php_array(rules: List[ValidationRule]) -> str:
    """``['required', 'string', 'max:255']``"""
    return "[" + ", ".join(rule.php() for rule in rules) + "]"


# ---------------------------------------------------------------------------
# Fake data
# ---------------------------------------------------------------------------

_FAKER_NAME_VARIANTS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("first", "given"), "fake()->firstName()"),
    (("last", "family", "surname"), "fake()->lastName()"),
    (("full", "display"), "fake()->name()"),
    (("user", "nick"), "fake()->userName()"),
    (("company",), "fake()->company()"),
)

_FAKER_NAME_PATTERNS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("phone",), "fake()->phoneNumber()"),
    (("address",), "fake()->address()"),
    (("city",), "fake()->city()"),
    (("country",), "fake()->country()"),
    (("zip", "postal"), "fake()->postcode()"),
    (("url", "website", "link"), "fake()->url()"),
    (("slug",), "fake()->slug()"),
    (("title",), "fake()->sentence(3)"),
    (("description", "body", "content", "bio"), "fake()->paragraphs(3, true)"),
    (("password",), "bcrypt('password')"),
    (("token",), "Str::random(60)"),
    (("uuid",), "fake()->uuid()"),
    (("color",), "fake()->hexColor()"),
    (("image", "avatar", "photo"), "fake()->imageUrl()"),
    (("amount", "price", "cost", "total"), "fake()->randomFloat(2, 0, 1000)"),
    (("quantity", "count", "number"), "fake()->numberBetween(1, 100)"),
)

_FAKER_BY_TYPE: Dict[SemanticType, str] = {
    SemanticType.TEXT: "fake()->paragraphs(3, true)",
    SemanticType.DECIMAL: "fake()->randomFloat(2, 0, 1000)",
    SemanticType.FLOAT: "fake()->randomFloat(2, 0, 1000)",
    SemanticType.BOOLEAN: "fake()->boolean()",
    SemanticType.DATE: "fake()->date()",
    SemanticType.DATE_TIME: "fake()->dateTime()",
    SemanticType.DATE_TIME_TZ: "fake()->dateTime()",
    SemanticType.TIME: "fake()->time()",
    SemanticType.JSON: "[]",
    SemanticType.UUID: "fake()->uuid()",
}

SHORT_STRING_LENGTH: int = 50


def faker_expression(column: Column, models_namespace: str = "App\\Models") -> str:
    """PHP expression producing a fake value for *column* in a factory."""
    if column.is_foreign_key:
        return f"\\{models_namespace}\\{column.related_model}::factory()"

    name: str = column.name.lower()
    if "email" in name:
        return "fake()->unique()->safeEmail()"
    if "name" in name:
        for needles, expression in _FAKER_NAME_VARIANTS:
            if _contains_any(name, needles):
                return expression
        return "fake()->name()"
    for needles, expression in _FAKER_NAME_PATTERNS:
        if _contains_any(name, needles):
            return expression

    semantic_type: SemanticType = column.semantic_type
    if semantic_type is SemanticType.STRING:
        if (column.length or 255) <= SHORT_STRING_LENGTH:
            return "fake()->words(3, true)"
        return "fake()->sentence()"
    if semantic_type in INTEGER_TYPES:
        if column.unsigned:
            return "fake()->numberBetween(1, 1000)"
        return "fake()->numberBetween(-1000, 1000)"
    return _FAKER_BY_TYPE.get(semantic_type, "fake()->word()")


# ---------------------------------------------------------------------------
# Storage column definitions
# ---------------------------------------------------------------------------


def migration_column(column: Column) -> str:
    """
    Schema-builder line for one column.

    Foreign keys always become a constrained ``foreignId`` with cascading
    deletes against the pluralized related table.
    """
    if column.is_foreign_key:
        nullable: str = "->nullable()" if column.nullable else ""
        return (
            f"$table->foreignId('{column.name}'){nullable}"
            f"->constrained('{column.related_table}')->cascadeOnDelete();"
        )

    semantic_type: SemanticType = column.semantic_type
    if semantic_type is SemanticType.STRING and column.length:
        line: str = f"$table->string('{column.name}', {column.length})"
    elif semantic_type is SemanticType.DECIMAL:
        line = f"$table->decimal('{column.name}', 10, 2)"
    elif semantic_type in INTEGER_TYPES and column.unsigned:
        prefix: str = "unsignedBigInteger" if semantic_type is SemanticType.BIG_INTEGER else "unsignedInteger"
        line = f"$table->{prefix}('{column.name}')"
    else:
        line = f"$table->{semantic_type.value}('{column.name}')"

    if column.nullable:
        line += "->nullable()"
    if column.default is not None:
        line += f"->default({php_literal(column.default)})"
    if column.is_unique:
        line += "->unique()"
    return line + ";"


# ---------------------------------------------------------------------------
# Input widgets
# ---------------------------------------------------------------------------


class InputWidget(str, Enum):
    """HTML form control chosen for a column."""

    SELECT = "select"
    EMAIL = "email"
    PASSWORD = "password"
    URL = "url"
    TEL = "tel"
    COLOR = "color"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    DATE = "date"
    DATETIME = "datetime-local"
    TIME = "time"
    NUMBER = "number"
    TEXT = "text"


_WIDGET_NAME_PATTERNS: Tuple[Tuple[Tuple[str, ...], InputWidget], ...] = (
    (("email",), InputWidget.EMAIL),
    (("password",), InputWidget.PASSWORD),
    (("url", "link", "website"), InputWidget.URL),
    (("phone",), InputWidget.TEL),
    (("color",), InputWidget.COLOR),
)

_WIDGET_BY_TYPE: Dict[SemanticType, InputWidget] = {
    SemanticType.TEXT: InputWidget.TEXTAREA,
    SemanticType.BOOLEAN: InputWidget.CHECKBOX,
    SemanticType.DATE: InputWidget.DATE,
    SemanticType.DATE_TIME: InputWidget.DATETIME,
    SemanticType.DATE_TIME_TZ: InputWidget.DATETIME,
    SemanticType.TIME: InputWidget.TIME,
    SemanticType.INTEGER: InputWidget.NUMBER,
    SemanticType.BIG_INTEGER: InputWidget.NUMBER,
    SemanticType.DECIMAL: InputWidget.NUMBER,
    SemanticType.FLOAT: InputWidget.NUMBER,
}


def input_widget(column: Column) -> InputWidget:
    if column.is_foreign_key:
        return InputWidget.SELECT
    name: str = column.name.lower()
    for needles, widget in _WIDGET_NAME_PATTERNS:
        if _contains_any(name, needles):
            return widget
    return _WIDGET_BY_TYPE.get(column.semantic_type, InputWidget.TEXT)


def field_label(column: Column) -> str:
    """Human label: ``first_name`` -> ``First Name``."""
    return to_title_human(column.name)


# ---------------------------------------------------------------------------
# Casts, PHP types and serialization
# ---------------------------------------------------------------------------

_CAST_TYPES: Dict[SemanticType, str] = {
    SemanticType.BOOLEAN: "boolean",
    SemanticType.JSON: "array",
    SemanticType.DATE: "date",
    SemanticType.DATE_TIME: "datetime",
    SemanticType.DATE_TIME_TZ: "datetime",
    SemanticType.DECIMAL: "decimal:2",
    SemanticType.FLOAT: "float",
    SemanticType.INTEGER: "integer",
    SemanticType.BIG_INTEGER: "integer",
}

_UNCAST_COLUMNS: Tuple[str, ...] = TIMESTAMP_COLUMNS + (SOFT_DELETE_COLUMN,)


def cast_type(column: Column) -> Optional[str]:
    """Eloquent cast for *column*; ``None`` when no cast is needed."""
    if column.name in _UNCAST_COLUMNS:
        return None
    return _CAST_TYPES.get(column.semantic_type)


def php_type(column: Column) -> str:
    """Declared type of a component property bound to *column*."""
    semantic_type: SemanticType = column.semantic_type
    if semantic_type is SemanticType.BOOLEAN:
        return "bool"
    if semantic_type is SemanticType.JSON:
        return "array"
    if semantic_type in INTEGER_TYPES:
        return "?int"
    if semantic_type in (SemanticType.DECIMAL, SemanticType.FLOAT):
        return "?float"
    return "string"


def php_default(column: Column) -> str:
    """Initial value literal matching ``php_type``."""
    semantic_type: SemanticType = column.semantic_type
    if semantic_type is SemanticType.BOOLEAN:
        if column.default is None:
            return "false"
        return "true" if str(column.default).lower() in ("1", "true") else "false"
    if semantic_type is SemanticType.JSON:
        return "[]"
    if column.default is not None:
        if semantic_type in INTEGER_TYPES or semantic_type in (SemanticType.DECIMAL, SemanticType.FLOAT):
            return php_literal(column.default)
        return php_string(str(column.default))
    if php_type(column).startswith("?"):
        return "null"
    return "''"


def serialized_value(column: Column) -> str:
    """Right-hand side of an API resource entry for *column*."""
    attribute: str = f"$this->{column.name}"
    semantic_type: SemanticType = column.semantic_type
    if semantic_type is SemanticType.DATE:
        return f"{attribute}?->toDateString()"
    if semantic_type in (SemanticType.DATE_TIME, SemanticType.DATE_TIME_TZ):
        return f"{attribute}?->toIso8601String()"
    if semantic_type is SemanticType.BOOLEAN:
        return f"(bool) {attribute}"
    return attribute


# ---------------------------------------------------------------------------
# Sample values for generated tests
# ---------------------------------------------------------------------------

_TEST_VALUE_PATTERNS: Tuple[Tuple[Tuple[str, ...], str, str], ...] = (
    (("email",), "'test@example.com'", "'updated@example.com'"),
    (("url", "link", "website"), "'https://example.com'", "'https://example.org'"),
    (("phone",), "'555-123-4567'", "'555-987-6543'"),
    (("password",), "'password123'", "'updated-password123'"),
    (("slug",), "'test-slug'", "'updated-slug'"),
    (("color",), "'#336699'", "'#993366'"),
)

_TEST_VALUES_BY_TYPE: Dict[SemanticType, Tuple[str, str]] = {
    SemanticType.INTEGER: ("1", "2"),
    SemanticType.BIG_INTEGER: ("1", "2"),
    SemanticType.DECIMAL: ("99.99", "199.99"),
    SemanticType.FLOAT: ("99.99", "199.99"),
    SemanticType.BOOLEAN: ("true", "false"),
    SemanticType.DATE: ("now()->format('Y-m-d')", "now()->addDay()->format('Y-m-d')"),
    SemanticType.DATE_TIME: (
        "now()->format('Y-m-d H:i:s')",
        "now()->addDay()->format('Y-m-d H:i:s')",
    ),
    SemanticType.DATE_TIME_TZ: (
        "now()->format('Y-m-d H:i:s')",
        "now()->addDay()->format('Y-m-d H:i:s')",
    ),
    SemanticType.TIME: ("'09:00:00'", "'17:30:00'"),
    SemanticType.JSON: ("['key' => 'value']", "['updated' => 'data']"),
    SemanticType.UUID: ("(string) Str::uuid()", "(string) Str::uuid()"),
}


def _sample_literal(column: Column, updated: bool) -> str:
    index: int = 1 if updated else 0
    if column.semantic_type in TEXTUAL_TYPES:
        name: str = column.name.lower()
        for needles, first, second in _TEST_VALUE_PATTERNS:
            if _contains_any(name, needles):
                return second if updated else first
        if column.semantic_type is SemanticType.TEXT:
            word: str = "updated" if updated else "test"
            return php_string(f"This is {word} content for {column.name}.")
        prefix: str = "Updated" if updated else "Test"
        value: str = f"{prefix} {to_title_human(column.name)}"
        if column.length:
            value = value[: column.length]
        return php_string(value)
    pair: Optional[Tuple[str, str]] = _TEST_VALUES_BY_TYPE.get(column.semantic_type)
    if pair is None:
        return "'updated'" if updated else "'test'"
    return pair[index]


def sample_value(column: Column, models_namespace: str = "App\\Models") -> str:
    """Value used when storing a record in a generated test."""
    if column.is_foreign_key:
        return f"\\{models_namespace}\\{column.related_model}::factory()->create()->id"
    return _sample_literal(column, updated=False)


def updated_sample_value(column: Column, model_variable: str) -> str:
    """
    Value used when updating a record in a generated test.

    Foreign keys keep the existing record's reference.
    """
    if column.is_foreign_key:
        return f"${model_variable}->{column.name}"
    return _sample_literal(column, updated=True)


__all__: List[str] = [
    "ValidationRule",
    "validation_rules",
    "rules_php_array",
    "SHORT_STRING_LENGTH",
    "faker_expression",
    "migration_column",
    "InputWidget",
    "input_widget",
    "field_label",
    "cast_type",
    "php_type",
    "php_default",
    "serialized_value",
    "sample_value",
    "updated_sample_value",
]

logger.debug("crudgen.inference loaded.")
