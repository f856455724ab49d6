# File: crudgen/__init__.py
"""
NexaFlow CrudGen - CRUD Scaffolding Generator
===============================================

Builds a normalized model schema from inline field strings, an existing
database table or a JSON/YAML document, and writes a coherent set of
Laravel CRUD artifacts (model, controllers, form requests, policy, API
resource, migration, factory, seeder, Blade views or Livewire components,
routes, tests) in one all-or-nothing run.

Architecture overview::

    ┌──────────────┐     ┌────────────────┐     ┌───────────────────┐
    │  CLI / Entry │────▶│  CrudGenerator │────▶│ Artifact          │
    │   (cli.py)   │     │ (generator.py) │     │ generators        │
    └──────────────┘     └───────┬────────┘     │ (generators.py,   │
                                 │              │  views, routes)   │
                  ┌──────────────┼───────────┐  └─────────┬─────────┘
                  ▼              ▼           ▼            ▼
            ┌──────────┐  ┌───────────┐ ┌──────────┐ ┌───────────┐
            │ resolver │  │validators │ │exporters │ │ templates │
            │ parser   │  │  (.py)    │ │ (.py)    │ │ inference │
            │introspect│  └───────────┘ └──────────┘ └───────────┘
            └──────────┘

Usage::

    # As a library
    from crudgen import CrudGenerator, GenerationRequest, load_crud_config
    generator = CrudGenerator(load_crud_config(overrides={"base_path": "."}))
    report = generator.generate(GenerationRequest("Post", fields="title,body:text"))

    # From the command line
    crudgen Post --fields "title,body:text" --all -v

Public API:
    - CrudGenerator       - Orchestrator with rollback
    - LayoutPublisher     - Application layout and welcome page
    - GenerationRequest   - Unresolved input for one model
    - CrudConfig          - Project configuration
    - GenerationOptions   - Per-run options
    - Schema / Column / Relationship - Normalized schema model
    - validate_full       - Semantic validation entry point
"""

from __future__ import annotations

__version__: str = "1.0.0"
__author__: str = "NexaFlow Team"
__license__: str = "MIT"

from crudgen.exceptions import (
    CrudGenError,
    GenerationFailure,
    MalformedConfiguration,
    MalformedFieldSpec,
    SchemaValidationError,
    TableNotFound,
    TemplateKeyError,
    TemplateNotFound,
)
from crudgen.models import (
    Column,
    CrudConfig,
    CssFramework,
    GeneratedArtifact,
    GenerationOptions,
    OutputProfile,
    Relationship,
    RelationshipKind,
    Schema,
    SchemaBuilder,
    SemanticType,
)
from crudgen.parser import parse_fields
from crudgen.introspector import SchemaIntrospector, SqlAlchemyCatalog
from crudgen.validators import ValidationResult, validate_full
from crudgen.templates import TemplateRenderer
from crudgen.resolver import (
    GenerationRequest,
    load_config_document,
    load_crud_config,
    requests_from_document,
    resolve_document,
    resolve_inline,
)
from crudgen.generator import BatchReport, CrudGenerator, GenerationReport, GenerationState
from crudgen.layout import LayoutPublisher, LayoutReport

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Orchestrator
    "CrudGenerator",
    "GenerationReport",
    "BatchReport",
    "GenerationState",
    # Layout publishing
    "LayoutPublisher",
    "LayoutReport",
    # Resolution
    "GenerationRequest",
    "resolve_inline",
    "resolve_document",
    "requests_from_document",
    "load_config_document",
    "load_crud_config",
    "parse_fields",
    "SchemaIntrospector",
    "SqlAlchemyCatalog",
    # Models
    "Column",
    "CrudConfig",
    "CssFramework",
    "GeneratedArtifact",
    "GenerationOptions",
    "OutputProfile",
    "Relationship",
    "RelationshipKind",
    "Schema",
    "SchemaBuilder",
    "SemanticType",
    # Validation
    "validate_full",
    "ValidationResult",
    # Templates
    "TemplateRenderer",
    # Errors
    "CrudGenError",
    "GenerationFailure",
    "MalformedConfiguration",
    "MalformedFieldSpec",
    "SchemaValidationError",
    "TableNotFound",
    "TemplateKeyError",
    "TemplateNotFound",
]
