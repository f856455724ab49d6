"""
tests/test_introspector.py
Unit tests for crudgen.introspector.

The catalog tests run against a real SQLite file; the normalisation tests
use a small in-memory catalog so every storage type can be exercised.
"""

from __future__ import annotations

import logging
from typing import Dict, List

import pytest
from sqlalchemy import types as sqltypes

from crudgen.exceptions import TableNotFound
from crudgen.introspector import (
    CatalogColumn,
    SchemaIntrospector,
    SqlAlchemyCatalog,
    storage_type_name,
)
from crudgen.models import RelationshipKind, SemanticType


class DictCatalog:
    """StorageCatalog over a plain mapping of table name -> columns."""

    def __init__(self, tables: Dict[str, List[CatalogColumn]]) -> None:
        self.tables = tables

    def has_table(self, table: str) -> bool:
        return table in self.tables

    def get_columns(self, table: str) -> List[CatalogColumn]:
        return self.tables[table]


# ===========================================================================
# Storage type names
# ===========================================================================


class TestStorageTypeName:
    @pytest.mark.parametrize(
        "column_type, expected",
        [
            (sqltypes.Integer(), "integer"),
            (sqltypes.BigInteger(), "bigint"),
            (sqltypes.SmallInteger(), "smallint"),
            (sqltypes.String(50), "string"),
            (sqltypes.Text(), "text"),
            (sqltypes.Boolean(), "boolean"),
            (sqltypes.Numeric(10, 2), "decimal"),
            (sqltypes.Float(), "float"),
            (sqltypes.Date(), "date"),
            (sqltypes.DateTime(), "datetime"),
            (sqltypes.DateTime(timezone=True), "datetimetz"),
            (sqltypes.Time(), "time"),
            (sqltypes.JSON(), "json"),
            (sqltypes.LargeBinary(), "blob"),
        ],
    )
    def test_mapping(self, column_type: sqltypes.TypeEngine, expected: str) -> None:
        assert storage_type_name(column_type) == expected


# ===========================================================================
# Normalisation
# ===========================================================================


class TestSchemaIntrospector:
    """Catalog columns become semantic columns plus convention relationships."""

    def test_missing_table_raises(self) -> None:
        introspector = SchemaIntrospector(DictCatalog({}))
        with pytest.raises(TableNotFound) as exc_info:
            introspector.introspect("ghosts")
        assert exc_info.value.table == "ghosts"

    def test_types_and_heuristics(self) -> None:
        catalog = DictCatalog({
            "users": [
                CatalogColumn("id", "bigint", nullable=False, autoincrement=True),
                CatalogColumn("email", "string", nullable=False, length=191),
                CatalogColumn("slug", "string", nullable=False),
                CatalogColumn("team_id", "integer", nullable=True),
                CatalogColumn("tags", "simple_array"),
                CatalogColumn("location", "geometry"),
                CatalogColumn("score", "integer", default=0),
            ]
        })
        table = SchemaIntrospector(catalog).introspect("users")
        columns = {c.name: c for c in table.columns}

        assert columns["id"].autoincrement is True
        assert columns["id"].semantic_type is SemanticType.BIG_INTEGER
        assert columns["email"].is_unique is True
        assert columns["email"].length == 191
        assert columns["slug"].is_unique is True
        assert columns["tags"].semantic_type is SemanticType.JSON
        assert columns["location"].semantic_type is SemanticType.STRING
        assert columns["score"].default == 0
        assert columns["score"].is_unique is False

        team = columns["team_id"]
        assert team.is_foreign_key is True
        assert team.unsigned is True
        assert team.nullable is True

        assert len(table.relationships) == 1
        rel = table.relationships[0]
        assert rel.kind is RelationshipKind.BELONGS_TO
        assert rel.related_model == "Team"
        assert rel.nullable is True

    def test_unmodelable_id_column_stays_plain(self, caplog: pytest.LogCaptureFixture) -> None:
        catalog = DictCatalog({
            "accounts": [
                CatalogColumn("name", "string"),
                CatalogColumn("2fa_id", "string"),
                CatalogColumn("owner_id", "bigint"),
            ]
        })
        with caplog.at_level(logging.WARNING, logger="crudgen.introspector"):
            table = SchemaIntrospector(catalog).introspect("accounts")
        columns = {c.name: c for c in table.columns}

        assert list(columns) == ["name", "2fa_id", "owner_id"]
        assert columns["2fa_id"].is_foreign_key is False
        assert columns["2fa_id"].unsigned is False
        assert [r.related_model for r in table.relationships] == ["Owner"]
        assert any("2fa_id" in r.getMessage() for r in caplog.records)

    def test_length_only_kept_for_strings(self) -> None:
        column = SchemaIntrospector.to_column(CatalogColumn("amount", "decimal", length=10))
        assert column.length is None

    def test_bookkeeping_detection(self) -> None:
        catalog = DictCatalog({
            "notes": [
                CatalogColumn("id", "integer"),
                CatalogColumn("created_at", "datetime"),
                CatalogColumn("updated_at", "datetime"),
                CatalogColumn("deleted_at", "datetime"),
            ]
        })
        introspector = SchemaIntrospector(catalog)
        assert introspector.has_soft_delete_column("notes") is True
        assert introspector.has_timestamp_columns("notes") is True


# ===========================================================================
# SQLAlchemy-backed catalog
# ===========================================================================


class TestSqlAlchemyCatalog:
    """Reflection against a real SQLite database."""

    def test_has_table(self, sqlite_catalog: SqlAlchemyCatalog) -> None:
        assert sqlite_catalog.has_table("posts") is True
        assert sqlite_catalog.has_table("comments") is False

    def test_reflected_columns(self, sqlite_catalog: SqlAlchemyCatalog) -> None:
        columns = {c.name: c for c in sqlite_catalog.get_columns("posts")}
        assert list(columns) == [
            "id", "title", "body", "email", "user_id",
            "is_published", "created_at", "updated_at", "deleted_at",
        ]
        assert columns["title"].type_name == "string"
        assert columns["title"].length == 200
        assert columns["title"].nullable is False
        assert columns["body"].type_name == "text"
        assert columns["is_published"].type_name == "boolean"
        assert columns["deleted_at"].type_name == "datetime"

    def test_introspect_posts(self, sqlite_catalog: SqlAlchemyCatalog) -> None:
        table = SchemaIntrospector(sqlite_catalog).introspect("posts")
        columns = {c.name: c for c in table.columns}
        assert columns["body"].semantic_type is SemanticType.TEXT
        assert columns["email"].is_unique is True
        assert columns["user_id"].is_foreign_key is True
        assert columns["is_published"].semantic_type is SemanticType.BOOLEAN
        assert table.has_soft_delete_column is True
        assert table.has_timestamp_columns is True
        assert [r.related_model for r in table.relationships] == ["User"]

    def test_from_url(self, tmp_path) -> None:
        catalog = SqlAlchemyCatalog.from_url(f"sqlite:///{tmp_path / 'empty.sqlite'}")
        assert catalog.has_table("posts") is False
