# File: crudgen/views.py
"""
NexaFlow CrudGen - Blade Views & Livewire Components
======================================================
``ViewGenerator`` emits the four resource views (index, create, edit, show)
for the web profiles; ``ComponentGenerator`` emits the table and form
components plus their views for the Livewire profile.

The page skeletons are templates.  The repeated fragments inside them
(table headers and cells, form controls, action buttons, the trashed
filter) are assembled here from a per-dialect ``Markup`` description, so a
single fragment builder serves both CSS frameworks.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from crudgen.generators import (
    ArtifactGenerator,
    ModelNames,
    block,
    input_columns,
    quoted_names,
    related_variable,
)
from crudgen.inference import (
    InputWidget,
    field_label,
    input_widget,
    php_default,
    php_type,
    rules_php_array,
    validation_rules,
)
from crudgen.models import (
    Column,
    CssFramework,
    GeneratedArtifact,
    Relationship,
    RelationshipKind,
    Schema,
    SemanticType,
    PLURAL_ACCESSOR_KINDS,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.views")

VIEW_NAMES: List[str] = ["index", "create", "edit", "show"]

# Shown for a schema without any columns, matching the default migration.
_PLACEHOLDER_COLUMNS: List[Column] = [
    Column(name="id", semantic_type=SemanticType.BIG_INTEGER),
    Column(name="name"),
    Column(name="created_at", semantic_type=SemanticType.DATE_TIME),
]

_TEXT_PREVIEW_LENGTH: int = 50


# ---------------------------------------------------------------------------
# Markup dialects
# ---------------------------------------------------------------------------


class Markup:
    """CSS classes and small element builders for one framework."""

    field_wrapper: str = ""
    label: str = ""
    control: str = ""
    select: str = ""
    checkbox_wrapper: str = ""
    checkbox: str = ""
    checkbox_label: str = ""
    error: str = ""
    header_cell: str = ""
    body_cell: str = ""
    inline_form: str = ""
    link: str = ""
    button_primary: str = ""
    button_success: str = ""
    button_danger: str = ""
    trashed_select: str = ""
    trashed_row: str = ""

    def invalid(self, name: str) -> str:
        return ""

    def error_block(self, name: str) -> List[str]:
        return [f"@error('{name}')", f"    {self.error}", "@enderror"]

    def detail(self, label: str, expression: str) -> List[str]:
        raise NotImplementedError

    def wrap_trashed_filter(self, select: List[str]) -> List[str]:
        return select

    def soft_delete_notice(self, variable: str) -> List[str]:
        raise NotImplementedError

    def relationship_panel(self, title: str, expression: str) -> List[str]:
        raise NotImplementedError


class TailwindMarkup(Markup):
    field_wrapper = "mb-4"
    label = "block text-sm font-medium text-gray-700 dark:text-gray-300"
    control = (
        "mt-1 block w-full rounded-md border-gray-300 dark:border-gray-700 dark:bg-gray-900 "
        "dark:text-gray-300 shadow-sm focus:border-blue-500 focus:ring-blue-500"
    )
    select = control
    checkbox_wrapper = "mb-4 flex items-center gap-2"
    checkbox = "rounded border-gray-300 text-blue-600 shadow-sm focus:ring-blue-500"
    checkbox_label = "text-sm text-gray-700 dark:text-gray-300"
    error = '<p class="mt-1 text-sm text-red-600">{{ $message }}</p>'
    header_cell = (
        'scope="col" class="px-6 py-3 text-left text-xs font-medium text-gray-500 '
        'dark:text-gray-300 uppercase tracking-wider"'
    )
    body_cell = 'class="px-6 py-4 whitespace-nowrap text-sm text-gray-500 dark:text-gray-400"'
    inline_form = "inline"
    link = "text-blue-600 hover:text-blue-900 dark:text-blue-400 dark:hover:text-blue-300"
    button_primary = "text-indigo-600 hover:text-indigo-900 dark:text-indigo-400 dark:hover:text-indigo-300"
    button_success = "text-green-600 hover:text-green-900 dark:text-green-400 dark:hover:text-green-300"
    button_danger = "text-red-600 hover:text-red-900 dark:text-red-400 dark:hover:text-red-300"
    trashed_select = (
        "rounded-md border-gray-300 dark:border-gray-700 dark:bg-gray-900 dark:text-gray-300 "
        "focus:border-blue-500 focus:ring-blue-500"
    )
    trashed_row = "opacity-50"

    def detail(self, label: str, expression: str) -> List[str]:
        return [
            '<div class="sm:col-span-1">',
            f'    <dt class="text-sm font-medium text-gray-500 dark:text-gray-400">{label}</dt>',
            f'    <dd class="mt-1 text-sm text-gray-900 dark:text-gray-100">{{{{ {expression} }}}}</dd>',
            "</div>",
        ]

    def soft_delete_notice(self, variable: str) -> List[str]:
        return [
            f"@if (${variable}->trashed())",
            '    <div class="mb-4 rounded-md bg-yellow-100 dark:bg-yellow-900 p-4">',
            '        <p class="text-sm text-yellow-800 dark:text-yellow-200">',
            f"            This record was deleted on {{{{ ${variable}->deleted_at->format('Y-m-d H:i') }}}}.",
            "        </p>",
            "    </div>",
            "@endif",
        ]

    def relationship_panel(self, title: str, expression: str) -> List[str]:
        return [
            '<div class="mt-6 bg-white dark:bg-gray-800 shadow-sm sm:rounded-lg p-6">',
            f'    <h3 class="text-lg font-medium text-gray-900 dark:text-gray-100">{title}</h3>',
            f'    <p class="mt-1 text-sm text-gray-500 dark:text-gray-400">{{{{ {expression} }}}} record(s)</p>',
            "</div>",
        ]


class BootstrapMarkup(Markup):
    field_wrapper = "mb-3"
    label = "form-label"
    control = "form-control"
    select = "form-select"
    checkbox_wrapper = "mb-3 form-check"
    checkbox = "form-check-input"
    checkbox_label = "form-check-label"
    error = '<div class="invalid-feedback">{{ $message }}</div>'
    header_cell = ""
    body_cell = ""
    inline_form = "d-inline"
    link = "btn btn-outline-secondary btn-sm"
    button_primary = "btn btn-primary btn-sm"
    button_success = "btn btn-success btn-sm"
    button_danger = "btn btn-danger btn-sm"
    trashed_select = "form-select"
    trashed_row = "table-secondary"

    def invalid(self, name: str) -> str:
        return f" @error('{name}') is-invalid @enderror"

    def detail(self, label: str, expression: str) -> List[str]:
        return [
            f'<dt class="col-sm-3">{label}</dt>',
            f'<dd class="col-sm-9">{{{{ {expression} }}}}</dd>',
        ]

    def wrap_trashed_filter(self, select: List[str]) -> List[str]:
        return ['<div class="col-md-4">'] + ["    " + line for line in select] + ["</div>"]

    def soft_delete_notice(self, variable: str) -> List[str]:
        return [
            f"@if (${variable}->trashed())",
            '    <div class="alert alert-warning">',
            f"        This record was deleted on {{{{ ${variable}->deleted_at->format('Y-m-d H:i') }}}}.",
            "    </div>",
            "@endif",
        ]

    def relationship_panel(self, title: str, expression: str) -> List[str]:
        return [
            '<div class="card mt-3">',
            '    <div class="card-body">',
            f'        <h2 class="h5 card-title">{title}</h2>',
            f'        <p class="card-text text-muted">{{{{ {expression} }}}} record(s)</p>',
            "    </div>",
            "</div>",
        ]


MARKUP: Dict[CssFramework, Markup] = {
    CssFramework.TAILWIND: TailwindMarkup(),
    CssFramework.BOOTSTRAP: BootstrapMarkup(),
}


# ---------------------------------------------------------------------------
# Fragment builders
# ---------------------------------------------------------------------------


def display_columns(schema: Schema) -> List[Column]:
    return _PLACEHOLDER_COLUMNS if schema.is_empty else schema.display_columns


def display_expression(column: Column, variable: str, preview: bool = False) -> str:
    """Blade expression rendering *column* of ``$variable`` for reading."""
    attribute: str = f"${variable}->{column.name}"
    semantic_type: SemanticType = column.semantic_type
    if semantic_type is SemanticType.BOOLEAN:
        return f"{attribute} ? 'Yes' : 'No'"
    if semantic_type is SemanticType.DATE:
        return f"{attribute}?->format('Y-m-d')"
    if semantic_type in (SemanticType.DATE_TIME, SemanticType.DATE_TIME_TZ):
        return f"{attribute}?->format('Y-m-d H:i')"
    if semantic_type is SemanticType.JSON:
        return f"json_encode({attribute})"
    if semantic_type is SemanticType.TEXT and preview:
        return f"Str::limit({attribute}, {_TEXT_PREVIEW_LENGTH})"
    return attribute


def edit_value(column: Column, variable: Optional[str]) -> str:
    """``old()`` expression for a control; *variable* is None on create forms."""
    if variable is None:
        return f"old('{column.name}')"
    attribute: str = f"${variable}->{column.name}"
    widget: InputWidget = input_widget(column)
    if widget is InputWidget.DATE:
        attribute += "?->format('Y-m-d')"
    elif widget is InputWidget.DATETIME:
        attribute += "?->format('Y-m-d\\TH:i')"
    elif column.semantic_type is SemanticType.JSON:
        attribute = f"json_encode({attribute})"
    return f"old('{column.name}', {attribute})"


def table_headers(schema: Schema, markup: Markup) -> List[str]:
    attributes: str = f" {markup.header_cell}" if markup.header_cell else ""
    return [f"<th{attributes}>{field_label(c)}</th>" for c in display_columns(schema)]


def table_cells(schema: Schema, markup: Markup) -> List[str]:
    attributes: str = f" {markup.body_cell}" if markup.body_cell else ""
    variable: str = schema.model_variable
    return [
        f"<td{attributes}>{{{{ {display_expression(c, variable, preview=True)} }}}}</td>"
        for c in display_columns(schema)
    ]


def detail_fields(schema: Schema, markup: Markup) -> List[str]:
    lines: List[str] = []
    for column in display_columns(schema):
        lines.extend(markup.detail(field_label(column), display_expression(column, schema.model_variable)))
    return lines


def form_field(
    column: Column,
    markup: Markup,
    variable: Optional[str] = None,
    livewire: bool = False,
    required: bool = False,
) -> List[str]:
    """Label, control and error message for one column."""
    name: str = column.name
    label: str = field_label(column)
    widget: InputWidget = input_widget(column)
    binding: str = f'wire:model="{name}"' if livewire else f'name="{name}"'
    required_attr: str = " required" if required and widget is not InputWidget.CHECKBOX else ""
    value: str = edit_value(column, variable)

    if widget is InputWidget.CHECKBOX:
        lines: List[str] = [f'<div class="{markup.checkbox_wrapper}">']
        if livewire:
            lines.append(f'    <input type="checkbox" id="{name}" {binding} class="{markup.checkbox}">')
        else:
            lines.append(f'    <input type="hidden" name="{name}" value="0">')
            lines.append(
                f'    <input type="checkbox" id="{name}" {binding} value="1" '
                f'class="{markup.checkbox}" @checked({value})>'
            )
        lines.append(f'    <label for="{name}" class="{markup.checkbox_label}">{label}</label>')
        lines.extend("    " + line for line in markup.error_block(name))
        lines.append("</div>")
        return lines

    lines = [
        f'<div class="{markup.field_wrapper}">',
        f'    <label for="{name}" class="{markup.label}">{label}</label>',
    ]
    invalid: str = markup.invalid(name)
    if widget is InputWidget.SELECT:
        options: str = to_related_variable(column)
        lines.append(
            f'    <select id="{name}" {binding} class="{markup.select}{invalid}"{required_attr}>'
        )
        lines.append(f'        <option value="">Select {to_related_label(column)}</option>')
        lines.append(f"        @foreach (${options} as $option)")
        if livewire:
            lines.append(
                '            <option value="{{ $option->id }}">{{ $option->name ?? $option->id }}</option>'
            )
        else:
            lines.append(
                f'            <option value="{{{{ $option->id }}}}" @selected({value} == $option->id)>'
                "{{ $option->name ?? $option->id }}</option>"
            )
        lines.append("        @endforeach")
        lines.append("    </select>")
    elif widget is InputWidget.TEXTAREA:
        content: str = "" if livewire else f"{{{{ {value} }}}}"
        lines.append(
            f'    <textarea id="{name}" {binding} rows="4" class="{markup.control}{invalid}"'
            f"{required_attr}>{content}</textarea>"
        )
    else:
        extra: str = ""
        if widget is InputWidget.NUMBER and column.semantic_type in (
            SemanticType.DECIMAL,
            SemanticType.FLOAT,
        ):
            extra = ' step="any"'
        if column.semantic_type is SemanticType.STRING and column.length:
            extra += f' maxlength="{column.length}"'
        shown: str = ""
        if not livewire and widget is not InputWidget.PASSWORD:
            shown = f' value="{{{{ {value} }}}}"'
        lines.append(
            f'    <input type="{widget.value}" id="{name}" {binding}{shown}{extra} '
            f'class="{markup.control}{invalid}"{required_attr}>'
        )
    lines.extend("    " + line for line in markup.error_block(name))
    lines.append("</div>")
    return lines


def to_related_variable(column: Column) -> str:
    return related_variable(Relationship.for_foreign_key(column))


def to_related_label(column: Column) -> str:
    return field_label(Column(name=column.stem))


def form_fields(
    schema: Schema,
    markup: Markup,
    variable: Optional[str] = None,
    livewire: bool = False,
) -> List[str]:
    required: List[str] = [c.name for c in schema.required_columns]
    lines: List[str] = []
    for column in input_columns(schema):
        if lines:
            lines.append("")
        lines.extend(
            form_field(column, markup, variable, livewire, required=column.name in required)
        )
    return lines


def delete_form(markup: Markup, action: str, label: str, confirm: str, css: str) -> List[str]:
    return [
        f'<form action="{{{{ {action} }}}}" method="POST" class="{markup.inline_form}" '
        f"onsubmit=\"return confirm('{confirm}')\">",
        "    @csrf",
        "    @method('DELETE')",
        f'    <button type="submit" class="{css}">{label}</button>',
        "</form>",
    ]


def post_form(markup: Markup, action: str, label: str, css: str) -> List[str]:
    return [
        f'<form action="{{{{ {action} }}}}" method="POST" class="{markup.inline_form}">',
        "    @csrf",
        f'    <button type="submit" class="{css}">{label}</button>',
        "</form>",
    ]


def trashed_filter(markup: Markup, livewire: bool = False) -> List[str]:
    if livewire:
        select: List[str] = [f'<select wire:model.live="trashed" class="{markup.trashed_select}">']
        options: List[str] = [
            '    <option value="">Active records</option>',
            '    <option value="with">Including deleted</option>',
            '    <option value="only">Only deleted</option>',
        ]
        return markup.wrap_trashed_filter(select + options + ["</select>"])
    select = [
        '<form method="GET" class="mb-4">',
        f'    <select name="trashed" class="{markup.trashed_select}" onchange="this.form.submit()">',
        '        <option value="">Active records</option>',
        "        <option value=\"with\" @selected(request('trashed') === 'with')>Including deleted</option>",
        "        <option value=\"only\" @selected(request('trashed') === 'only')>Only deleted</option>",
        "    </select>",
        "</form>",
    ]
    return markup.wrap_trashed_filter(select)


def trashed_row_class(schema: Schema, markup: Markup) -> str:
    return (
        f" class=\"{{{{ ${schema.model_variable}->trashed() ? '{markup.trashed_row}' : '' }}}}\""
    )


# ---------------------------------------------------------------------------
# Blade views
# ---------------------------------------------------------------------------


class ViewRecord(ModelNames):
    trashed_filter: str = ""
    trashed_row_class: str = ""
    table_headers: str = ""
    table_columns: str = ""
    column_count: int = 1
    action_buttons: str = ""
    form_fields: str = ""
    detail_fields: str = ""
    soft_delete_info: str = ""
    relationships: str = ""


# Indentation (in four-space steps) of each fragment inside the page skeletons.
_VIEW_LEVELS: Dict[CssFramework, Dict[str, int]] = {
    CssFramework.TAILWIND: {
        "trashed_filter": 3,
        "table_headers": 7,
        "table_columns": 8,
        "index_actions": 9,
        "form_fields": 5,
        "show_actions": 4,
        "detail_fields": 5,
        "soft_delete_info": 3,
        "relationships": 3,
    },
    CssFramework.BOOTSTRAP: {
        "trashed_filter": 2,
        "table_headers": 7,
        "table_columns": 8,
        "index_actions": 9,
        "form_fields": 5,
        "show_actions": 4,
        "detail_fields": 5,
        "soft_delete_info": 2,
        "relationships": 2,
    },
}


class ViewGenerator(ArtifactGenerator):
    """index/create/edit/show Blade views in the selected CSS dialect."""

    kind = "view"

    @property
    def markup(self) -> Markup:
        return MARKUP[self.options.css]

    def _route(self, action: str, argument: str = "") -> str:
        route: str = f"route('{self.schema.route_name}.{action}'"
        return route + (f", {argument})" if argument else ")")

    def index_actions(self) -> List[str]:
        markup: Markup = self.markup
        variable: str = f"${self.schema.model_variable}"
        regular: List[str] = [
            f'<a href="{{{{ {self._route("show", variable)} }}}}" class="{markup.link}">View</a>',
            f'<a href="{{{{ {self._route("edit", variable)} }}}}" class="{markup.button_primary}">Edit</a>',
        ] + delete_form(
            markup,
            self._route("destroy", variable),
            "Delete",
            "Are you sure you want to delete this record?",
            markup.button_danger,
        )
        if not self.options.soft_deletes:
            return regular
        trashed: List[str] = post_form(
            markup, self._route("restore", f"{variable}->id"), "Restore", markup.button_success
        ) + delete_form(
            markup,
            self._route("force-delete", f"{variable}->id"),
            "Delete permanently",
            "This cannot be undone. Delete permanently?",
            markup.button_danger,
        )
        return (
            [f"@if ({variable}->trashed())"]
            + ["    " + line for line in trashed]
            + ["@else"]
            + ["    " + line for line in regular]
            + ["@endif"]
        )

    def show_actions(self) -> List[str]:
        markup: Markup = self.markup
        variable: str = f"${self.schema.model_variable}"
        regular: List[str] = [
            f'<a href="{{{{ {self._route("edit", variable)} }}}}" class="{markup.button_primary}">Edit</a>',
        ] + delete_form(
            markup,
            self._route("destroy", variable),
            "Delete",
            "Are you sure you want to delete this record?",
            markup.button_danger,
        )
        if not self.options.soft_deletes:
            return regular
        restore: List[str] = post_form(
            markup, self._route("restore", f"{variable}->id"), "Restore", markup.button_success
        )
        return (
            [f"@if ({variable}->trashed())"]
            + ["    " + line for line in restore]
            + ["@else"]
            + ["    " + line for line in regular]
            + ["@endif"]
        )

    def relationship_panels(self) -> List[str]:
        lines: List[str] = []
        for relationship in self.schema.relationships:
            if relationship.kind not in PLURAL_ACCESSOR_KINDS:
                continue
            lines.append("")
            lines.extend(
                self.markup.relationship_panel(
                    field_label(Column(name=relationship.accessor_name)),
                    f"${self.schema.model_variable}->{relationship.accessor_name}()->count()",
                )
            )
        return lines

    def record(self, view: str) -> ViewRecord:
        markup: Markup = self.markup
        levels: Dict[str, int] = _VIEW_LEVELS[self.options.css]
        soft: bool = self.options.soft_deletes
        schema: Schema = self.schema
        values: Dict[str, object] = {}
        if view == "index":
            values = {
                "trashed_filter": block(trashed_filter(markup), levels["trashed_filter"]) if soft else "",
                "trashed_row_class": trashed_row_class(schema, markup) if soft else "",
                "table_headers": block(table_headers(schema, markup), levels["table_headers"]),
                "table_columns": block(table_cells(schema, markup), levels["table_columns"]),
                "column_count": len(display_columns(schema)) + 1,
                "action_buttons": block(self.index_actions(), levels["index_actions"]),
            }
        elif view in ("create", "edit"):
            variable: Optional[str] = schema.model_variable if view == "edit" else None
            values = {
                "form_fields": block(form_fields(schema, markup, variable), levels["form_fields"]),
            }
        else:
            values = {
                "action_buttons": block(self.show_actions(), levels["show_actions"]),
                "detail_fields": block(detail_fields(schema, markup), levels["detail_fields"]),
                "soft_delete_info": (
                    block(markup.soft_delete_notice(schema.model_variable), levels["soft_delete_info"])
                    if soft
                    else ""
                ),
                "relationships": block(self.relationship_panels(), levels["relationships"]),
            }
        return ViewRecord(**self.naming(), **values)

    def generate(self) -> List[GeneratedArtifact]:
        css: str = self.options.css.value
        artifacts: List[GeneratedArtifact] = []
        for view in VIEW_NAMES:
            path: Path = self.config.path("views", self.schema.view_path, f"{view}.blade.php")
            artifacts.append(
                self.emit(path, f"views/{css}/{view}.blade.stub", self.record(view), kind=f"{view} view")
            )
        return artifacts


# ---------------------------------------------------------------------------
# Livewire components
# ---------------------------------------------------------------------------


class TableComponentRecord(ModelNames):
    namespace: str
    model_namespace: str
    trashed_property: str
    sortable: str
    eager_load: str
    trashed_query: str
    search_conditions: str
    per_page: int
    soft_delete_methods: str = ""


class FormComponentRecord(ModelNames):
    namespace: str
    imports: str
    properties: str
    fill_from_model: str
    rules: str
    reset_fields: str
    view_data: str


class ComponentViewRecord(ModelNames):
    trashed_filter: str = ""
    trashed_row_class: str = ""
    table_headers: str = ""
    table_columns: str = ""
    column_count: int = 1
    action_buttons: str = ""
    form_fields: str = ""


_LIVEWIRE_TRASHED_QUERY: List[str] = [
    "if ($this->trashed === 'only') {",
    "    $query->onlyTrashed();",
    "} elseif ($this->trashed !== '') {",
    "    $query->withTrashed();",
    "}",
]

_SEARCHABLE_TYPES = (SemanticType.STRING, SemanticType.TEXT)


def fill_statement(column: Column, variable: str) -> Optional[str]:
    """Assignment copying a model attribute into its typed component property."""
    if column.name == "password":
        return None
    attribute: str = f"${variable}->{column.name}"
    widget: InputWidget = input_widget(column)
    if widget is InputWidget.DATE:
        value: str = f"{attribute}?->format('Y-m-d') ?? ''"
    elif widget is InputWidget.DATETIME:
        value = f"{attribute}?->format('Y-m-d\\TH:i') ?? ''"
    elif column.semantic_type is SemanticType.BOOLEAN:
        value = f"(bool) {attribute}"
    elif column.semantic_type is SemanticType.JSON:
        value = f"{attribute} ?? []"
    elif php_type(column) == "string":
        value = f"(string) ({attribute} ?? '')"
    else:
        value = attribute
    return f"$this->{column.name} = {value};"


class ComponentGenerator(ArtifactGenerator):
    """``{Model}Table`` and ``{Model}Form`` components with their views."""

    kind = "component"

    @property
    def markup(self) -> Markup:
        return MARKUP[self.options.css]

    @property
    def namespace(self) -> str:
        return f"{self.config.namespaces.livewire}\\{self.schema.model_plural}"

    def table_record(self) -> TableComponentRecord:
        schema: Schema = self.schema
        soft: bool = self.options.soft_deletes
        searchable: List[Column] = [
            c for c in schema.serializable_columns if c.semantic_type in _SEARCHABLE_TYPES
        ]
        conditions: List[str] = []
        for index, column in enumerate(searchable):
            method: str = "where" if index == 0 else "orWhere"
            conditions.append(f"$query->{method}('{column.name}', 'like', '%' . $this->search . '%');")
        if not conditions:
            conditions.append("$query->where('id', $this->search);")

        sortable: List[str] = [
            c.name for c in display_columns(schema)
            if c.semantic_type not in (SemanticType.TEXT, SemanticType.JSON, SemanticType.BINARY)
        ]
        accessors: List[str] = [r.accessor_name for r in schema.relationships_of(RelationshipKind.BELONGS_TO)]
        record: TableComponentRecord = TableComponentRecord(
            **self.naming(),
            namespace=self.namespace,
            model_namespace=self.config.namespaces.models,
            trashed_property="\n    public string $trashed = '';" if soft else "",
            sortable=quoted_names(sortable),
            eager_load=f"->with([{quoted_names(accessors)}])" if accessors else "",
            trashed_query=block(_LIVEWIRE_TRASHED_QUERY, 2) if soft else "",
            search_conditions=block(conditions, 4),
            per_page=self.config.per_page,
        )
        if soft:
            record = record.model_copy(
                update={"soft_delete_methods": self.render("livewire/table.soft-deletes.stub", record)}
            )
        return record

    def form_record(self) -> FormComponentRecord:
        schema: Schema = self.schema
        models: str = self.config.namespaces.models
        columns: List[Column] = input_columns(schema)
        belongs_to: List[Relationship] = schema.relationships_of(RelationshipKind.BELONGS_TO)

        imports: List[str] = [f"use {models}\\{schema.model_name};", "use Livewire\\Component;"]
        for relationship in belongs_to:
            imports.append(f"use {models}\\{relationship.related_model};")

        rules: List[str] = []
        for column in columns:
            column_rules = validation_rules(
                column,
                self.context.table_name,
                schema.model_variable,
                ignore_expression="$this->record?->id",
            )
            rules.append(f"'{column.name}' => {rules_php_array(column_rules)},")

        fills: List[str] = []
        for column in columns:
            statement: Optional[str] = fill_statement(column, schema.model_variable)
            if statement:
                fills.append(statement)

        view_data: str = ""
        if belongs_to:
            entries: str = ", ".join(
                f"'{related_variable(r)}' => {r.related_model}::all()" for r in belongs_to
            )
            view_data = f", [{entries}]"

        return FormComponentRecord(
            **self.naming(),
            namespace=self.namespace,
            imports="\n".join(sorted(set(imports))),
            properties=block(
                [f"public {php_type(c)} ${c.name} = {php_default(c)};" for c in columns], 1
            ),
            fill_from_model=block(fills, 3),
            rules=block(rules, 3),
            reset_fields=quoted_names([c.name for c in columns]),
            view_data=view_data,
        )

    def component_actions(self) -> List[str]:
        markup: Markup = self.markup
        variable: str = f"${self.schema.model_variable}"
        delete: List[str] = [
            f'<button type="button" wire:click="delete({{{{ {variable}->id }}}})" '
            f'wire:confirm="Are you sure you want to delete this record?" class="{markup.button_danger}">Delete</button>',
        ]
        if not self.options.soft_deletes:
            return delete
        trashed: List[str] = [
            f'<button type="button" wire:click="restore({{{{ {variable}->id }}}})" class="{markup.button_success}">Restore</button>',
            f'<button type="button" wire:click="forceDelete({{{{ {variable}->id }}}})" '
            f'wire:confirm="This cannot be undone. Delete permanently?" class="{markup.button_danger}">Delete permanently</button>',
        ]
        return (
            [f"@if ({variable}->trashed())"]
            + ["    " + line for line in trashed]
            + ["@else"]
            + ["    " + line for line in delete]
            + ["@endif"]
        )

    def table_view_record(self) -> ComponentViewRecord:
        markup: Markup = self.markup
        soft: bool = self.options.soft_deletes
        schema: Schema = self.schema
        return ComponentViewRecord(
            **self.naming(),
            trashed_filter=block(trashed_filter(markup, livewire=True), 2) if soft else "",
            trashed_row_class=trashed_row_class(schema, markup) if soft else "",
            table_headers=block(table_headers(schema, markup), 5),
            table_columns=block(table_cells(schema, markup), 6),
            column_count=len(display_columns(schema)) + 1,
            action_buttons=block(self.component_actions(), 7),
        )

    def form_view_record(self) -> ComponentViewRecord:
        return ComponentViewRecord(
            **self.naming(),
            form_fields=block(form_fields(self.schema, self.markup, livewire=True), 2),
        )

    def generate(self) -> List[GeneratedArtifact]:
        schema: Schema = self.schema
        css: str = self.options.css.value
        classes: Path = self.config.path("livewire", schema.model_plural)
        views: Path = self.config.path("livewire_views", schema.view_path)
        return [
            self.emit(
                classes / f"{schema.model_name}Table.php",
                "livewire/table.stub",
                self.table_record(),
                kind="table component",
            ),
            self.emit(
                classes / f"{schema.model_name}Form.php",
                "livewire/form.stub",
                self.form_record(),
                kind="form component",
            ),
            self.emit(
                views / f"{schema.model_kebab}-table.blade.php",
                f"livewire/views/{css}/table.blade.stub",
                self.table_view_record(),
                kind="table component view",
            ),
            self.emit(
                views / f"{schema.model_kebab}-form.blade.php",
                f"livewire/views/{css}/form.blade.stub",
                self.form_view_record(),
                kind="form component view",
            ),
        ]


__all__: List[str] = [
    "VIEW_NAMES",
    "Markup",
    "TailwindMarkup",
    "BootstrapMarkup",
    "MARKUP",
    "display_columns",
    "display_expression",
    "edit_value",
    "form_field",
    "form_fields",
    "trashed_filter",
    "ViewGenerator",
    "ComponentGenerator",
]
