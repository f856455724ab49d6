"""
tests/conftest.py
Shared fixtures for the crudgen test suite.

No external mocking libraries are used; every test that writes files works
inside a throwaway Laravel-shaped directory tree under pytest's tmp_path,
and table introspection runs against a real SQLite database.
"""

from __future__ import annotations

import json
import logging
import pathlib
import textwrap
from typing import Any, Callable, Dict, Iterator

import pytest
import yaml
from sqlalchemy import (
    Boolean,
    Column as SqlColumn,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
)
from sqlalchemy.engine import Engine

from crudgen.exporters import ArtifactWriter
from crudgen.generators import GenerationContext
from crudgen.introspector import SqlAlchemyCatalog
from crudgen.models import (
    Column,
    CrudConfig,
    GenerationOptions,
    Relationship,
    RelationshipKind,
    Schema,
    SchemaBuilder,
    SemanticType,
)
from crudgen.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_crudgen_logger() -> Iterator[None]:
    """The CLI reconfigures the ``crudgen`` logger; undo that after each test."""
    crudgen_logger = logging.getLogger("crudgen")
    handlers = list(crudgen_logger.handlers)
    level = crudgen_logger.level
    propagate = crudgen_logger.propagate
    yield
    crudgen_logger.handlers[:] = handlers
    crudgen_logger.setLevel(level)
    crudgen_logger.propagate = propagate


# ---------------------------------------------------------------------------
# Laravel project tree
# ---------------------------------------------------------------------------

ROUTES_WEB: str = textwrap.dedent(
    """\
    <?php

    use Illuminate\\Support\\Facades\\Route;

    Route::get('/', function () {
        return view('welcome');
    });
    """
)

ROUTES_API: str = textwrap.dedent(
    """\
    <?php

    use Illuminate\\Http\\Request;
    use Illuminate\\Support\\Facades\\Route;

    Route::get('/user', function (Request $request) {
        return $request->user();
    })->middleware('auth:sanctum');
    """
)

LAYOUT: str = textwrap.dedent(
    """\
    <nav>
        <div class="hidden space-x-8 sm:flex">
            <x-nav-link :href="route('dashboard')" :active="request()->routeIs('dashboard')">{{ __('Dashboard') }}</x-nav-link>
        </div>
    </nav>
    <main>
        {{ $slot }}
    </main>
    """
)


def _write_composer(root: pathlib.Path, require_dev: Dict[str, str]) -> None:
    document: Dict[str, Any] = {
        "name": "laravel/laravel",
        "require": {"php": "^8.2", "laravel/framework": "^11.0"},
        "require-dev": require_dev,
    }
    (root / "composer.json").write_text(json.dumps(document, indent=4), encoding="utf-8")


@pytest.fixture()
def laravel_app(tmp_path: pathlib.Path) -> pathlib.Path:
    """A minimal application: route files, a layout with a Dashboard link, PHPUnit."""
    root = tmp_path / "app"
    (root / "routes").mkdir(parents=True)
    (root / "routes" / "web.php").write_text(ROUTES_WEB, encoding="utf-8")
    (root / "routes" / "api.php").write_text(ROUTES_API, encoding="utf-8")
    layout = root / "resources" / "views" / "components" / "app-layout.blade.php"
    layout.parent.mkdir(parents=True)
    layout.write_text(LAYOUT, encoding="utf-8")
    _write_composer(root, {"phpunit/phpunit": "^11.0"})
    return root


@pytest.fixture()
def pest_app(laravel_app: pathlib.Path) -> pathlib.Path:
    """Same application, with Pest as the test framework."""
    _write_composer(laravel_app, {"pestphp/pest": "^3.0", "phpunit/phpunit": "^11.0"})
    return laravel_app


@pytest.fixture()
def crud_config(laravel_app: pathlib.Path) -> CrudConfig:
    return CrudConfig(base_path=laravel_app)


@pytest.fixture()
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


@pytest.fixture()
def post_schema() -> Schema:
    """Post with typical columns, a belongsTo and a hasMany."""
    builder = SchemaBuilder("Post")
    builder.add_column(Column(name="title", semantic_type=SemanticType.STRING, length=150))
    builder.add_column(Column(name="body", semantic_type=SemanticType.TEXT, nullable=True))
    builder.add_column(Column(name="slug", is_unique=True))
    builder.add_column(
        Column(name="published_at", semantic_type=SemanticType.DATE_TIME, nullable=True)
    )
    builder.add_column(Column(name="is_featured", semantic_type=SemanticType.BOOLEAN))
    category = Relationship.declare(RelationshipKind.BELONGS_TO, "Category")
    builder.add_relationship(category)
    builder.ensure_foreign_key_column(category)
    builder.add_relationship(Relationship.declare(RelationshipKind.HAS_MANY, "Comment"))
    return builder.build()


@pytest.fixture()
def empty_schema() -> Schema:
    return Schema(model_name="Widget")


# ---------------------------------------------------------------------------
# Generation context factory
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_context(
    crud_config: CrudConfig, renderer: TemplateRenderer
) -> Callable[..., GenerationContext]:
    """Build a GenerationContext with a fresh writer; keyword args become options."""

    def _make(schema: Schema, config: CrudConfig | None = None, **options: Any) -> GenerationContext:
        return GenerationContext(
            schema=schema,
            options=GenerationOptions(**options),
            config=config or crud_config,
            renderer=renderer,
            writer=ArtifactWriter(),
        )

    return _make


# ---------------------------------------------------------------------------
# Storage catalog
# ---------------------------------------------------------------------------


@pytest.fixture()
def sqlite_engine(tmp_path: pathlib.Path) -> Iterator[Engine]:
    """SQLite database with a soft-deleting ``posts`` table."""
    engine = create_engine(f"sqlite:///{tmp_path / 'database.sqlite'}")
    metadata = MetaData()
    Table(
        "posts",
        metadata,
        SqlColumn("id", Integer, primary_key=True),
        SqlColumn("title", String(200), nullable=False),
        SqlColumn("body", Text, nullable=True),
        SqlColumn("email", String(255), nullable=True),
        SqlColumn("user_id", Integer, nullable=False),
        SqlColumn("is_published", Boolean, nullable=False, server_default="0"),
        SqlColumn("created_at", DateTime, nullable=True),
        SqlColumn("updated_at", DateTime, nullable=True),
        SqlColumn("deleted_at", DateTime, nullable=True),
    )
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def sqlite_catalog(sqlite_engine: Engine) -> SqlAlchemyCatalog:
    return SqlAlchemyCatalog(sqlite_engine)


# ---------------------------------------------------------------------------
# Configuration documents
# ---------------------------------------------------------------------------


@pytest.fixture()
def batch_document() -> Dict[str, Any]:
    return {
        "options": {"type": "both", "softDeletes": True},
        "models": [
            {
                "name": "Category",
                "fields": [{"name": "name", "type": "string", "unique": True}],
            },
            {
                "name": "Post",
                "fields": [
                    {"name": "title", "type": "string", "length": 150},
                    {"name": "body", "type": "text", "nullable": True},
                ],
                "relationships": [
                    {"type": "belongsTo", "model": "Category"},
                    {"type": "belongsToMany", "model": "Tag", "pivot": "post_tag"},
                ],
                "options": {"all": True, "soft-deletes": False},
            },
        ],
    }


@pytest.fixture()
def batch_yaml_path(batch_document: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "crud.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(batch_document, fh, default_flow_style=False, sort_keys=False)
    return path
