# File: crudgen/introspector.py
"""
NexaFlow CrudGen - Schema Introspector
========================================
Builds ``Column``/``Relationship`` entries from an existing database table.

The storage catalog is an interface (``StorageCatalog``); the shipped
implementation, ``SqlAlchemyCatalog``, reads column metadata through
SQLAlchemy's runtime inspector, so any dialect SQLAlchemy can reflect
(SQLite, MySQL, PostgreSQL, ...) works.

Convention-only heuristics
--------------------------
The metadata below is inferred from names, not read from catalog
constraints.  These are deliberate approximations and stay that way:

- **foreign key**: the column name ends in ``_id``.  Real FK constraints
  are not consulted, so a constrained column with another name is missed.
- **unique**: the column name is one of ``email``, ``slug`` or ``uuid``.
  Real unique indexes on other columns are missed, and these names are
  flagged even when the table has no unique index on them.
- **primary key**: the column is literally named ``id``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Protocol, Tuple, Type

from pydantic import ValidationError
from sqlalchemy import create_engine, inspect
from sqlalchemy import types as sqltypes
from sqlalchemy.engine import Engine

from crudgen.exceptions import TableNotFound
from crudgen.models import (
    SOFT_DELETE_COLUMN,
    TIMESTAMP_COLUMNS,
    Column,
    Relationship,
    SemanticType,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.introspector")

# ---------------------------------------------------------------------------
# Fixed mapping tables
# ---------------------------------------------------------------------------

STORAGE_TYPE_MAP: Dict[str, SemanticType] = {
    "smallint": SemanticType.INTEGER,
    "integer": SemanticType.INTEGER,
    "bigint": SemanticType.BIG_INTEGER,
    "decimal": SemanticType.DECIMAL,
    "float": SemanticType.FLOAT,
    "string": SemanticType.STRING,
    "text": SemanticType.TEXT,
    "guid": SemanticType.UUID,
    "binary": SemanticType.BINARY,
    "blob": SemanticType.BINARY,
    "boolean": SemanticType.BOOLEAN,
    "date": SemanticType.DATE,
    "datetime": SemanticType.DATE_TIME,
    "datetimetz": SemanticType.DATE_TIME_TZ,
    "time": SemanticType.TIME,
    "array": SemanticType.JSON,
    "simple_array": SemanticType.JSON,
    "json_array": SemanticType.JSON,
    "json": SemanticType.JSON,
    "object": SemanticType.JSON,
}

UNIQUE_NAME_HEURISTIC: FrozenSet[str] = frozenset({"email", "slug", "uuid"})

# Order matters: subclasses before their bases (Text < String, Float < Numeric,
# BigInteger < Integer).
_SQLALCHEMY_STORAGE_TYPES: Tuple[Tuple[Type[sqltypes.TypeEngine], str], ...] = (
    (sqltypes.Boolean, "boolean"),
    (sqltypes.BigInteger, "bigint"),
    (sqltypes.SmallInteger, "smallint"),
    (sqltypes.Integer, "integer"),
    (sqltypes.Float, "float"),
    (sqltypes.Numeric, "decimal"),
    (sqltypes.DateTime, "datetime"),
    (sqltypes.Date, "date"),
    (sqltypes.Time, "time"),
    (sqltypes.JSON, "json"),
    (sqltypes.ARRAY, "array"),
    (sqltypes.Uuid, "guid"),
    (sqltypes.Text, "text"),
    (sqltypes.String, "string"),
    (sqltypes.LargeBinary, "blob"),
    (sqltypes.BINARY, "binary"),
    (sqltypes.VARBINARY, "binary"),
)

_QUOTED_DEFAULT_RE: re.Pattern[str] = re.compile(r"^'(.*)'$", re.DOTALL)
_INTEGER_DEFAULT_RE: re.Pattern[str] = re.compile(r"^-?\d+$")
_FLOAT_DEFAULT_RE: re.Pattern[str] = re.compile(r"^-?\d+\.\d+$")


# ---------------------------------------------------------------------------
# Catalog interface
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CatalogColumn:
    """Physical column metadata as reported by a storage catalog."""

    name: str
    type_name: str
    nullable: bool = True
    default: Optional[Any] = None
    length: Optional[int] = None
    unsigned: bool = False
    autoincrement: bool = False


class StorageCatalog(Protocol):
    """Anything that can list a table's columns."""

    def has_table(self, table: str) -> bool: ...

    def get_columns(self, table: str) -> List[CatalogColumn]: ...


def storage_type_name(column_type: sqltypes.TypeEngine) -> str:
    """Map a reflected SQLAlchemy type onto a storage type name."""
    for type_class, name in _SQLALCHEMY_STORAGE_TYPES:
        if isinstance(column_type, type_class):
            if name == "datetime" and getattr(column_type, "timezone", False):
                return "datetimetz"
            return name
    return type(column_type).__name__.lower()


def _normalize_default(raw: Any) -> Optional[Any]:
    """
    Turn a reflected server default into a literal.

    Quoted strings lose their quotes, numerals become numbers, and
    expressions (``CURRENT_TIMESTAMP``, function calls) are dropped.
    """
    if raw is None:
        return None
    if not isinstance(raw, str):
        return raw
    text: str = raw.strip()
    while text.startswith("(") and text.endswith(")"):
        text = text[1:-1].strip()
    quoted: Optional[re.Match[str]] = _QUOTED_DEFAULT_RE.match(text)
    if quoted:
        return quoted.group(1).replace("''", "'")
    if _INTEGER_DEFAULT_RE.match(text):
        return int(text)
    if _FLOAT_DEFAULT_RE.match(text):
        return float(text)
    if text.lower() in ("true", "false"):
        return text.lower() == "true"
    logger.debug("Dropping non-literal server default %r.", raw)
    return None


class SqlAlchemyCatalog:
    """``StorageCatalog`` backed by ``sqlalchemy.inspect(engine)``."""

    def __init__(self, engine: Engine, schema: Optional[str] = None) -> None:
        self._engine: Engine = engine
        self._schema: Optional[str] = schema

    @classmethod
    def from_url(cls, url: str, schema: Optional[str] = None) -> "SqlAlchemyCatalog":
        logger.info("Connecting storage catalog: %s", url)
        return cls(create_engine(url), schema=schema)

    def has_table(self, table: str) -> bool:
        return inspect(self._engine).has_table(table, schema=self._schema)

    def get_columns(self, table: str) -> List[CatalogColumn]:
        reflected: List[Dict[str, Any]] = inspect(self._engine).get_columns(
            table, schema=self._schema
        )
        columns: List[CatalogColumn] = []
        for raw in reflected:
            column_type: sqltypes.TypeEngine = raw["type"]
            length: Optional[int] = getattr(column_type, "length", None)
            columns.append(
                CatalogColumn(
                    name=raw["name"],
                    type_name=storage_type_name(column_type),
                    nullable=bool(raw.get("nullable", True)),
                    default=_normalize_default(raw.get("default")),
                    length=length if isinstance(length, int) else None,
                    unsigned=bool(getattr(column_type, "unsigned", False)),
                    autoincrement=raw.get("autoincrement") is True,
                )
            )
        return columns


# ---------------------------------------------------------------------------
# Introspector
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class IntrospectedTable:
    """Columns and convention-detected relationships of one table."""

    table: str
    columns: List[Column] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    @property
    def has_soft_delete_column(self) -> bool:
        return SOFT_DELETE_COLUMN in self.column_names

    @property
    def has_timestamp_columns(self) -> bool:
        names: List[str] = self.column_names
        return all(name in names for name in TIMESTAMP_COLUMNS)


class SchemaIntrospector:
    """Reads a table through a ``StorageCatalog`` and normalizes it."""

    def __init__(self, catalog: StorageCatalog) -> None:
        self._catalog: StorageCatalog = catalog

    def introspect(self, table: str) -> IntrospectedTable:
        """
        Raises:
            TableNotFound: the catalog has no such table.  Callers are
                expected to fall back to default scaffolding.
        """
        if not self._catalog.has_table(table):
            raise TableNotFound(table)

        result: IntrospectedTable = IntrospectedTable(table=table)
        for catalog_column in self._catalog.get_columns(table):
            column: Column = self.to_column(catalog_column)
            if column.is_foreign_key:
                try:
                    result.relationships.append(Relationship.for_foreign_key(column))
                except ValidationError:
                    logger.warning(
                        "Column '%s.%s' ends in _id but '%s' is not a model name; "
                        "treating it as a plain column.",
                        table,
                        column.name,
                        column.related_model,
                    )
                    column = column.model_copy(
                        update={"is_foreign_key": False, "unsigned": catalog_column.unsigned}
                    )
            result.columns.append(column)

        logger.info(
            "Introspected table '%s': %d column(s), %d relationship(s).",
            table,
            len(result.columns),
            len(result.relationships),
        )
        return result

    def has_soft_delete_column(self, table: str) -> bool:
        return self.introspect(table).has_soft_delete_column

    def has_timestamp_columns(self, table: str) -> bool:
        return self.introspect(table).has_timestamp_columns

    @staticmethod
    def to_column(catalog_column: CatalogColumn) -> Column:
        name: str = catalog_column.name
        semantic_type: SemanticType = STORAGE_TYPE_MAP.get(
            catalog_column.type_name.lower(), SemanticType.STRING
        )
        is_foreign: bool = name.endswith("_id")
        return Column(
            name=name,
            semantic_type=semantic_type,
            length=catalog_column.length if semantic_type is SemanticType.STRING else None,
            nullable=catalog_column.nullable,
            default=catalog_column.default,
            unsigned=catalog_column.unsigned or is_foreign,
            is_foreign_key=is_foreign,
            is_unique=name in UNIQUE_NAME_HEURISTIC,
            autoincrement=catalog_column.autoincrement,
            declared_type=catalog_column.type_name,
        )


__all__: List[str] = [
    "STORAGE_TYPE_MAP",
    "UNIQUE_NAME_HEURISTIC",
    "CatalogColumn",
    "StorageCatalog",
    "storage_type_name",
    "SqlAlchemyCatalog",
    "IntrospectedTable",
    "SchemaIntrospector",
]
