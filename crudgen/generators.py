# File: crudgen/generators.py
"""
NexaFlow CrudGen - Artifact Generators
========================================
One generator per artifact kind.  Each generator:

    1. resolves its target path(s) from ``CrudConfig.paths`` and the model
       name;
    2. fills a typed ``ReplacementRecord`` from the frozen ``Schema``, the
       run's ``GenerationOptions`` and the shared rule table in
       ``crudgen.inference``;
    3. renders a named template and hands the text to the run's
       ``ArtifactWriter``, which never overwrites without ``force``.

Generators are constructed per run with a ``GenerationContext`` and hold no
other state.  Views, Livewire components and route/navigation updates live
in ``crudgen.views`` and ``crudgen.routes`` on top of the same base class.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from crudgen.exporters import ArtifactWriter
from crudgen.inference import (
    cast_type,
    faker_expression,
    field_label,
    migration_column,
    rules_php_array,
    sample_value,
    serialized_value,
    updated_sample_value,
    validation_rules,
)
from crudgen.models import (
    Column,
    CrudConfig,
    GeneratedArtifact,
    GenerationOptions,
    Relationship,
    RelationshipKind,
    Schema,
    SemanticType,
)
from crudgen.templates import RecordLike, ReplacementRecord, TemplateRenderer
from crudgen.utils import (
    indent_lines,
    next_migration_timestamp,
    php_list,
    php_string,
    to_camel_case,
    to_plural,
    to_snake_case,
    to_title_human,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.generators")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PEST_PACKAGES: Tuple[str, ...] = ("pestphp/pest", "pestphp/pest-plugin-laravel")

_NON_FILTERABLE_TYPES: Tuple[SemanticType, ...] = (
    SemanticType.TEXT,
    SemanticType.JSON,
    SemanticType.BINARY,
)

_RELATIONS_NAMESPACE: str = "\\Illuminate\\Database\\Eloquent\\Relations"


# ---------------------------------------------------------------------------
# Context and shared records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GenerationContext:
    """Everything a generator may read during one model's run."""

    schema: Schema
    options: GenerationOptions
    config: CrudConfig
    renderer: TemplateRenderer
    writer: ArtifactWriter

    @property
    def table_name(self) -> str:
        """Table override from the options, else the conventional name."""
        return self.options.table or self.schema.table_name


class ModelNames(ReplacementRecord):
    """Naming keys every template may reference."""

    model_name: str
    model_variable: str
    model_variable_plural: str
    model_title: str
    model_title_plural: str
    model_title_lower: str
    model_title_plural_lower: str
    model_kebab: str
    route_name: str
    view_path: str
    table_name: str

    @classmethod
    def naming(cls, context: GenerationContext) -> Dict[str, str]:
        schema: Schema = context.schema
        title: str = to_title_human(schema.model_name)
        title_plural: str = to_title_human(schema.model_plural)
        return {
            "model_name": schema.model_name,
            "model_variable": schema.model_variable,
            "model_variable_plural": schema.model_variable_plural,
            "model_title": title,
            "model_title_plural": title_plural,
            "model_title_lower": title.lower(),
            "model_title_plural_lower": title_plural.lower(),
            "model_kebab": schema.model_kebab,
            "route_name": schema.route_name,
            "view_path": schema.view_path,
            "table_name": context.table_name,
        }


def block(lines: List[str], level: int) -> str:
    """Join *lines* indented by *level* steps; empty input yields ``""``."""
    return "\n".join(indent_lines(lines, level))


def quoted_names(names: List[str]) -> str:
    """``'title', 'body'``"""
    return ", ".join(php_string(name) for name in names)


def quoted_list(names: List[str]) -> str:
    """``['user', 'category']``"""
    return php_list(names)


def input_columns(schema: Schema) -> List[Column]:
    """Columns a user submits through a form or API payload."""
    return [c for c in schema.fillable_columns if c.name != "remember_token"]


def related_variable(relationship: Relationship) -> str:
    """Collection variable for a related model (``User`` -> ``users``)."""
    return to_camel_case(to_plural(relationship.related_model))


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------


class ArtifactGenerator:
    """Base class: path resolution, rendering and writing."""

    kind: str = "artifact"

    def __init__(self, context: GenerationContext) -> None:
        self.context: GenerationContext = context

    @property
    def schema(self) -> Schema:
        return self.context.schema

    @property
    def options(self) -> GenerationOptions:
        return self.context.options

    @property
    def config(self) -> CrudConfig:
        return self.context.config

    def naming(self) -> Dict[str, str]:
        return ModelNames.naming(self.context)

    def render(self, template: str, record: RecordLike) -> str:
        return self.context.renderer.render(template, record)

    def emit(
        self,
        path: Path,
        template: str,
        record: RecordLike,
        kind: Optional[str] = None,
    ) -> GeneratedArtifact:
        content: str = self.render(template, record)
        return self.context.writer.write(
            path, content, force=self.options.force, kind=kind or self.kind
        )

    def generate(self) -> List[GeneratedArtifact]:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------


class ModelRecord(ModelNames):
    namespace: str
    soft_deletes_import: str
    soft_deletes_trait: str
    fillable: str
    filterable: str
    sortable: str
    casts: str
    relationships: str


class RelationshipRecord(ReplacementRecord):
    accessor: str
    return_type: str
    body: str
    description: str


# kind -> (relation class, body builder, description builder)
RelationBody = Callable[[Relationship], str]
RELATIONSHIP_RENDERERS: Dict[RelationshipKind, Tuple[str, RelationBody, RelationBody]] = {
    RelationshipKind.BELONGS_TO: (
        "BelongsTo",
        lambda r: f"$this->belongsTo({r.related_model}::class, '{r.foreign_key_column}')",
        lambda r: f"Get the {to_title_human(r.related_model).lower()} that owns this record.",
    ),
    RelationshipKind.HAS_MANY: (
        "HasMany",
        lambda r: f"$this->hasMany({r.related_model}::class)",
        lambda r: f"Get the {to_title_human(to_plural(r.related_model)).lower()} for this record.",
    ),
    RelationshipKind.HAS_ONE: (
        "HasOne",
        lambda r: f"$this->hasOne({r.related_model}::class)",
        lambda r: f"Get the {to_title_human(r.related_model).lower()} associated with this record.",
    ),
    RelationshipKind.BELONGS_TO_MANY: (
        "BelongsToMany",
        lambda r: (
            f"$this->belongsToMany({r.related_model}::class, '{r.pivot_table}')"
            if r.pivot_table
            else f"$this->belongsToMany({r.related_model}::class)"
        ),
        lambda r: f"The {to_title_human(to_plural(r.related_model)).lower()} that belong to this record.",
    ),
    RelationshipKind.MORPH_MANY: (
        "MorphMany",
        lambda r: f"$this->morphMany({r.related_model}::class, '{to_camel_case(r.related_model)}able')",
        lambda r: f"Get all of the {to_title_human(to_plural(r.related_model)).lower()} for this record.",
    ),
    RelationshipKind.MORPH_TO: (
        "MorphTo",
        lambda r: "$this->morphTo()",
        lambda r: "Get the parent model this record belongs to.",
    ),
}


def relation_class(kind: RelationshipKind) -> str:
    """Fully-qualified Eloquent relation class for *kind*."""
    return f"{_RELATIONS_NAMESPACE}\\{_relationship_renderer(kind)[0]}"


def _relationship_renderer(kind: RelationshipKind) -> Tuple[str, RelationBody, RelationBody]:
    try:
        return RELATIONSHIP_RENDERERS[kind]
    except KeyError as exc:
        raise NotImplementedError(f"No accessor renderer for relationship kind '{kind}'.") from exc


class ModelGenerator(ArtifactGenerator):
    kind = "model"

    def relationship_methods(self) -> str:
        methods: List[str] = []
        for relationship in self.schema.relationships:
            return_type, body, description = _relationship_renderer(relationship.kind)
            methods.append(
                self.render(
                    "model.relationship.stub",
                    RelationshipRecord(
                        accessor=relationship.accessor_name,
                        return_type=return_type,
                        body=body(relationship),
                        description=description(relationship),
                    ),
                )
            )
        return "".join(methods)

    def generate(self) -> List[GeneratedArtifact]:
        fillable: List[Column] = self.schema.fillable_columns
        filterable: List[str] = [
            c.name
            for c in fillable
            if c.semantic_type not in _NON_FILTERABLE_TYPES and c.name != "password"
        ]
        sortable: List[str] = ["id"] + filterable
        if self.config.timestamps:
            sortable += ["created_at", "updated_at"]

        casts: List[str] = []
        for column in self.schema.data_columns:
            cast: Optional[str] = cast_type(column)
            if cast:
                casts.append(f"'{column.name}' => '{cast}',")

        soft: bool = self.options.soft_deletes
        record: ModelRecord = ModelRecord(
            **self.naming(),
            namespace=self.config.namespaces.models,
            soft_deletes_import="use Illuminate\\Database\\Eloquent\\SoftDeletes;" if soft else "",
            soft_deletes_trait=", SoftDeletes" if soft else "",
            fillable=block([f"'{c.name}'," for c in fillable], 2),
            filterable=block([f"'{name}'," for name in filterable], 2),
            sortable=block([f"'{name}'," for name in sortable], 2),
            casts=block(casts, 3),
            relationships=self.relationship_methods(),
        )
        path: Path = self.config.path("models", f"{self.schema.model_name}.php")
        return [self.emit(path, "model.stub", record)]


# ---------------------------------------------------------------------------
# Controllers
# ---------------------------------------------------------------------------


class ControllerRecord(ModelNames):
    namespace: str
    imports: str
    eager_load: str
    load_statement: str
    trashed_query: str
    per_page: int
    store_request: str
    update_request: str
    store_data: str
    update_data: str
    authorize_view_any: str
    authorize_view: str
    authorize_create: str
    authorize_update: str
    authorize_delete: str
    authorize_restore: str
    authorize_force_delete: str
    related_loads: str
    create_view_data: str
    edit_compact_names: str
    soft_delete_actions: str = ""


_TRASHED_QUERY: List[str] = [
    "if ($request->input('trashed') === 'only') {",
    "    $query->onlyTrashed();",
    "} elseif ($request->filled('trashed')) {",
    "    $query->withTrashed();",
    "}",
]


class ControllerGenerator(ArtifactGenerator):
    """API and/or web resource controllers; nothing for the Livewire profile."""

    kind = "controller"

    def _belongs_to(self) -> List[Relationship]:
        return self.schema.relationships_of(RelationshipKind.BELONGS_TO)

    def _authorize(self, ability: str, subject: str) -> str:
        if self.options.no_policy:
            return ""
        return f"        Gate::authorize('{ability}', {subject});"

    def _inline_validation(self, update: bool) -> str:
        entries: List[str] = []
        for column in input_columns(self.schema):
            rules = validation_rules(
                column,
                self.context.table_name,
                self.schema.model_variable,
                update=update,
                ignore_expression=f"${self.schema.model_variable}->id" if update else None,
            )
            entries.append(f"    '{column.name}' => {rules_php_array(rules)},")
        if not entries:
            return "$request->validate([])"
        return "$request->validate([\n" + block(entries, 2) + "\n        ])"

    def _imports(self, web: bool) -> List[str]:
        namespaces = self.config.namespaces
        model: str = self.schema.model_name
        imports: List[str] = [f"use {namespaces.models}\\{model};"]
        if not self.options.no_requests:
            imports.append(f"use {namespaces.requests}\\{model}\\Store{model}Request;")
            imports.append(f"use {namespaces.requests}\\{model}\\Update{model}Request;")
        if not self.options.no_policy:
            imports.append("use Illuminate\\Support\\Facades\\Gate;")
        imports.append("use Illuminate\\Http\\Request;")
        if web:
            for relationship in self._belongs_to():
                if relationship.related_model != model:
                    imports.append(f"use {namespaces.models}\\{relationship.related_model};")
            imports.append("use Illuminate\\Http\\RedirectResponse;")
            imports.append("use Illuminate\\View\\View;")
        else:
            if namespaces.api_controllers != namespaces.controllers:
                imports.append(f"use {namespaces.controllers}\\Controller;")
            imports.append(f"use {namespaces.resources}\\{model}Resource;")
            imports.append("use Illuminate\\Http\\JsonResponse;")
            imports.append("use Illuminate\\Http\\Resources\\Json\\AnonymousResourceCollection;")
        return sorted(set(imports))

    def record(self, web: bool) -> ControllerRecord:
        schema: Schema = self.schema
        variable: str = f"${schema.model_variable}"
        model_class: str = f"{schema.model_name}::class"
        accessors: List[str] = [r.accessor_name for r in self._belongs_to()]
        related: List[str] = [related_variable(r) for r in self._belongs_to()]

        if self.options.no_requests:
            store_request = update_request = "Request"
            store_data: str = self._inline_validation(update=False)
            update_data: str = self._inline_validation(update=True)
        else:
            store_request = f"Store{schema.model_name}Request"
            update_request = f"Update{schema.model_name}Request"
            store_data = update_data = "$request->validated()"

        return ControllerRecord(
            **self.naming(),
            namespace=(
                self.config.namespaces.controllers if web else self.config.namespaces.api_controllers
            ),
            imports="\n".join(self._imports(web)),
            eager_load=f"->with({quoted_list(accessors)})" if accessors else "",
            load_statement=(
                f"        {variable}->load({quoted_list(accessors)});" if accessors else ""
            ),
            trashed_query=block(_TRASHED_QUERY, 2) if self.options.soft_deletes else "",
            per_page=self.config.per_page,
            store_request=store_request,
            update_request=update_request,
            store_data=store_data,
            update_data=update_data,
            authorize_view_any=self._authorize("viewAny", model_class),
            authorize_view=self._authorize("view", variable),
            authorize_create=self._authorize("create", model_class),
            authorize_update=self._authorize("update", variable),
            authorize_delete=self._authorize("delete", variable),
            authorize_restore=self._authorize("restore", variable),
            authorize_force_delete=self._authorize("forceDelete", variable),
            related_loads=block(
                [f"${name} = {r.related_model}::all();" for name, r in zip(related, self._belongs_to())],
                2,
            ),
            create_view_data=f", compact({quoted_names(related)})" if related else "",
            edit_compact_names=quoted_names([schema.model_variable] + related),
        )

    def _controller(self, web: bool) -> GeneratedArtifact:
        flavour: str = "web" if web else "api"
        record: ControllerRecord = self.record(web)
        if self.options.soft_deletes:
            actions: str = self.render(f"controller.{flavour}.soft-deletes.stub", record)
            record = record.model_copy(update={"soft_delete_actions": actions})
        path_kind: str = "controllers" if web else "api_controllers"
        path: Path = self.config.path(path_kind, f"{self.schema.model_name}Controller.php")
        return self.emit(path, f"controller.{flavour}.stub", record, kind=f"{flavour} controller")

    def generate(self) -> List[GeneratedArtifact]:
        if self.options.is_livewire:
            logger.debug("Livewire profile: no controllers.")
            return []
        artifacts: List[GeneratedArtifact] = []
        if self.options.wants_api:
            artifacts.append(self._controller(web=False))
        if self.options.wants_web:
            artifacts.append(self._controller(web=True))
        return artifacts


# ---------------------------------------------------------------------------
# Form requests
# ---------------------------------------------------------------------------


class RequestRecord(ModelNames):
    namespace: str
    class_name: str
    rules: str
    attributes: str


class RequestGenerator(ArtifactGenerator):
    kind = "request"

    def record(self, update: bool) -> RequestRecord:
        prefix: str = "Update" if update else "Store"
        rules: List[str] = []
        attributes: List[str] = []
        for column in input_columns(self.schema):
            column_rules = validation_rules(
                column,
                self.context.table_name,
                self.schema.route_parameter,
                update=update,
            )
            rules.append(f"'{column.name}' => {rules_php_array(column_rules)},")
            attributes.append(f"'{column.name}' => {php_string(field_label(column))},")
        return RequestRecord(
            **self.naming(),
            namespace=f"{self.config.namespaces.requests}\\{self.schema.model_name}",
            class_name=f"{prefix}{self.schema.model_name}Request",
            rules=block(rules, 3),
            attributes=block(attributes, 3),
        )

    def generate(self) -> List[GeneratedArtifact]:
        artifacts: List[GeneratedArtifact] = []
        for update in (False, True):
            record: RequestRecord = self.record(update)
            path: Path = self.config.path(
                "requests", self.schema.model_name, f"{record.class_name}.php"
            )
            artifacts.append(self.emit(path, "request.stub", record))
        return artifacts


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------


class PolicyRecord(ModelNames):
    namespace: str
    imports: str
    subject_variable: str
    soft_delete_abilities: str = ""


class PolicyGenerator(ArtifactGenerator):
    kind = "policy"

    def generate(self) -> List[GeneratedArtifact]:
        models: str = self.config.namespaces.models
        imports: List[str] = [f"use {models}\\{self.schema.model_name};"]
        if self.schema.model_name != "User":
            imports.append(f"use {models}\\User;")

        # The policy's first parameter is already $user.
        subject: str = self.schema.model_variable
        if subject == "user":
            subject = "model"

        record: PolicyRecord = PolicyRecord(
            **self.naming(),
            namespace=self.config.namespaces.policies,
            imports="\n".join(sorted(imports)),
            subject_variable=subject,
        )
        if self.options.soft_deletes:
            record = record.model_copy(
                update={"soft_delete_abilities": self.render("policy.soft-deletes.stub", record)}
            )
        path: Path = self.config.path("policies", f"{self.schema.model_name}Policy.php")
        return [self.emit(path, "policy.stub", record)]


# ---------------------------------------------------------------------------
# API resource
# ---------------------------------------------------------------------------


class ResourceRecord(ModelNames):
    namespace: str
    fields: str
    relationships: str
    timestamp_fields: str


class ResourceGenerator(ArtifactGenerator):
    kind = "resource"

    def generate(self) -> List[GeneratedArtifact]:
        fields: List[str] = [
            f"'{c.name}' => {serialized_value(c)},"
            for c in self.schema.serializable_columns
        ]
        relationships: List[str] = [
            f"'{r.accessor_name}' => $this->whenLoaded('{r.accessor_name}'),"
            for r in self.schema.relationships
        ]
        timestamps: List[str] = []
        if self.config.timestamps:
            timestamps += [
                "'created_at' => $this->created_at?->toIso8601String(),",
                "'updated_at' => $this->updated_at?->toIso8601String(),",
            ]
        if self.options.soft_deletes:
            timestamps.append("'deleted_at' => $this->deleted_at?->toIso8601String(),")

        record: ResourceRecord = ResourceRecord(
            **self.naming(),
            namespace=self.config.namespaces.resources,
            fields=block(fields, 3),
            relationships=block(relationships, 3),
            timestamp_fields=block(timestamps, 3),
        )
        path: Path = self.config.path("resources", f"{self.schema.model_name}Resource.php")
        return [self.emit(path, "resource.stub", record)]


# ---------------------------------------------------------------------------
# Migration
# ---------------------------------------------------------------------------


class MigrationRecord(ModelNames):
    columns: str
    timestamps: str
    soft_deletes: str


class MigrationGenerator(ArtifactGenerator):
    """
    ``create_{table}`` migration.

    A migration already present for the table is reused (and only replaced
    with ``force``) instead of adding a second one under a new timestamp.
    """

    kind = "migration"

    def existing_migration(self) -> Optional[Path]:
        directory: Path = self.config.path("migrations")
        if not directory.is_dir():
            return None
        matches: List[Path] = sorted(
            directory.glob(f"*_create_{self.context.table_name}_table.php")
        )
        return matches[-1] if matches else None

    def target_path(self) -> Path:
        existing: Optional[Path] = self.existing_migration()
        if existing is not None:
            logger.debug("Reusing migration %s.", existing.name)
            return existing
        stamp: str = next_migration_timestamp()
        return self.config.path(
            "migrations", f"{stamp}_create_{self.context.table_name}_table.php"
        )

    def generate(self) -> List[GeneratedArtifact]:
        columns: List[str] = [migration_column(c) for c in self.schema.data_columns]
        if not columns:
            columns = ["$table->string('name');"]

        record: MigrationRecord = MigrationRecord(
            **self.naming(),
            columns=block(columns, 3),
            timestamps=block(["$table->timestamps();"], 3) if self.config.timestamps else "",
            soft_deletes=block(["$table->softDeletes();"], 3) if self.options.soft_deletes else "",
        )
        return [self.emit(self.target_path(), "migration.stub", record)]


# ---------------------------------------------------------------------------
# Factory / Seeder
# ---------------------------------------------------------------------------


class FactoryRecord(ModelNames):
    namespace: str
    model_namespace: str
    definitions: str
    trashed_state: str = ""


class FactoryGenerator(ArtifactGenerator):
    kind = "factory"

    def generate(self) -> List[GeneratedArtifact]:
        models: str = self.config.namespaces.models
        definitions: List[str] = [
            f"'{c.name}' => {faker_expression(c, models)},"
            for c in self.schema.fillable_columns
        ]
        record: FactoryRecord = FactoryRecord(
            **self.naming(),
            namespace=self.config.namespaces.factories,
            model_namespace=models,
            definitions=block(definitions, 3),
        )
        if self.options.soft_deletes:
            record = record.model_copy(
                update={"trashed_state": self.render("factory.trashed.stub", record)}
            )
        path: Path = self.config.path("factories", f"{self.schema.model_name}Factory.php")
        return [self.emit(path, "factory.stub", record)]


class SeederRecord(ModelNames):
    namespace: str
    model_namespace: str
    count: int


class SeederGenerator(ArtifactGenerator):
    kind = "seeder"

    def generate(self) -> List[GeneratedArtifact]:
        record: SeederRecord = SeederRecord(
            **self.naming(),
            namespace=self.config.namespaces.seeders,
            model_namespace=self.config.namespaces.models,
            count=self.options.seeder_count,
        )
        path: Path = self.config.path("seeders", f"{self.schema.model_name}Seeder.php")
        return [self.emit(path, "seeder.stub", record)]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class SuiteRecord(ModelNames):
    model_namespace: str
    snake_name: str
    store_data: str
    update_data: str
    delete_assertion: str
    required_fields: str
    fillable: str
    relationship_assertions: str
    validation_test: str = ""
    soft_delete_tests: str = ""
    relationship_test: str = ""


def uses_pest(base_path: Path) -> bool:
    """True when ``composer.json`` lists Pest under ``require-dev``."""
    composer: Path = base_path / "composer.json"
    if not composer.is_file():
        return False
    try:
        document: Any = json.loads(composer.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read %s (%s); assuming PHPUnit.", composer, exc)
        return False
    require_dev: Any = document.get("require-dev", {}) if isinstance(document, dict) else {}
    return isinstance(require_dev, dict) and any(pkg in require_dev for pkg in PEST_PACKAGES)


class TestGenerator(ArtifactGenerator):
    """
    Feature (web), API and unit tests in the project's test framework.

    Pest is used when the project depends on it; PHPUnit otherwise.
    """

    __test__ = False
    kind = "test"

    def framework(self) -> str:
        return "pest" if uses_pest(self.config.base_path) else "phpunit"

    def record(self, framework: str) -> SuiteRecord:
        schema: Schema = self.schema
        columns: List[Column] = input_columns(schema)
        models: str = self.config.namespaces.models
        pest: bool = framework == "pest"
        data_level: int = 2 if pest else 3

        store: List[str] = [f"'{c.name}' => {sample_value(c, models)}," for c in columns]
        update: List[str] = [
            f"'{c.name}' => {updated_sample_value(c, schema.model_variable)},"
            for c in columns
        ]
        required: List[str] = [c.name for c in schema.required_columns if c in columns]

        assertions: List[str] = []
        for relationship in schema.relationships:
            relation: str = relation_class(relationship.kind)
            accessor: str = f"$model->{relationship.accessor_name}()"
            if pest:
                assertions.append(f"expect({accessor})->toBeInstanceOf({relation}::class);")
            else:
                assertions.append(f"$this->assertInstanceOf({relation}::class, {accessor});")

        return SuiteRecord(
            **self.naming(),
            model_namespace=models,
            snake_name=to_snake_case(schema.model_name),
            store_data=block(store, data_level),
            update_data=block(update, data_level),
            delete_assertion=(
                "assertSoftDeleted" if self.options.soft_deletes else "assertDatabaseMissing"
            ),
            required_fields=quoted_names(required),
            fillable=quoted_names([c.name for c in schema.fillable_columns]),
            relationship_assertions=block(assertions, 1 if pest else 2),
        )

    def _test(self, flavour: str, framework: str, path: Path) -> GeneratedArtifact:
        record: SuiteRecord = self.record(framework)
        updates: Dict[str, str] = {}
        if flavour in ("feature", "api"):
            if record.required_fields:
                updates["validation_test"] = self.render(
                    f"test.{flavour}.validation.{framework}.stub", record
                )
            if self.options.soft_deletes:
                updates["soft_delete_tests"] = self.render(
                    f"test.{flavour}.soft-deletes.{framework}.stub", record
                )
        elif self.schema.relationships:
            updates["relationship_test"] = self.render(
                f"test.unit.relationships.{framework}.stub", record
            )
        if updates:
            record = record.model_copy(update=updates)
        return self.emit(path, f"test.{flavour}.{framework}.stub", record, kind=f"{flavour} test")

    def generate(self) -> List[GeneratedArtifact]:
        framework: str = self.framework()
        logger.info("Generating %s tests for %s.", framework, self.schema.model_name)
        model: str = self.schema.model_name
        artifacts: List[GeneratedArtifact] = []
        if self.options.wants_web:
            artifacts.append(
                self._test("feature", framework, self.config.path("tests", "Feature", f"{model}Test.php"))
            )
        if self.options.wants_api:
            artifacts.append(
                self._test(
                    "api", framework, self.config.path("tests", "Feature", "Api", f"{model}ApiTest.php")
                )
            )
        artifacts.append(
            self._test("unit", framework, self.config.path("tests", "Unit", f"{model}Test.php"))
        )
        return artifacts


__all__: List[str] = [
    "PEST_PACKAGES",
    "GenerationContext",
    "ModelNames",
    "block",
    "quoted_names",
    "quoted_list",
    "input_columns",
    "related_variable",
    "ArtifactGenerator",
    "RELATIONSHIP_RENDERERS",
    "relation_class",
    "ModelGenerator",
    "ControllerGenerator",
    "RequestGenerator",
    "PolicyGenerator",
    "ResourceGenerator",
    "MigrationGenerator",
    "FactoryGenerator",
    "SeederGenerator",
    "uses_pest",
    "TestGenerator",
]
