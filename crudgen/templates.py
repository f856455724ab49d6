# File: crudgen/templates.py
"""
NexaFlow CrudGen - Template Renderer
======================================
Named templates plus a literal ``{{ key }}`` substitution engine.

Templates
---------
Every artifact kind renders one or more named templates (``model.stub``,
``controller.api.stub``, ``views/tailwind/index.blade.stub`` ...).  The
built-in set lives in ``BUILTIN_TEMPLATES``.  A file with the same relative
name under the project's override directory (``CrudConfig.stub_directory``)
takes precedence, so a project can restyle any artifact without touching
the engine.

Substitution rules
------------------
1. A placeholder is ``{{ key }}`` where ``key`` is a bare identifier.  Blade
   echoes such as ``{{ $post->title }}`` or ``{{ route('x') }}`` are not
   placeholders and pass through untouched.
2. Replacement values come from a typed ``ReplacementRecord``; field names
   are exposed under their camelCase alias (``model_variable`` ->
   ``modelVariable``).
3. A template referencing a key the record does not define raises
   ``TemplateKeyError`` before anything is substituted.
4. A placeholder standing alone on its line is a *block* placeholder: the
   value replaces the whole line (values carry their own indentation), and
   an empty value removes the line.
5. Substitution is a single left-to-right pass, so values are never
   re-scanned for placeholders.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Union

from pydantic import BaseModel, ConfigDict

from crudgen.exceptions import TemplateKeyError, TemplateNotFound
from crudgen.utils import to_camel_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.templates")

# ---------------------------------------------------------------------------
# Placeholder syntax
# ---------------------------------------------------------------------------

_KEY: str = r"[A-Za-z_][A-Za-z0-9_]*"
_PLACEHOLDER_RE: re.Pattern[str] = re.compile(r"\{\{ (" + _KEY + r") \}\}")
_SUBSTITUTION_RE: re.Pattern[str] = re.compile(
    r"(?P<block>^[ \t]*\{\{ (?P<block_key>" + _KEY + r") \}\}[ \t]*(?:\n|\Z))"
    r"|\{\{ (?P<inline_key>" + _KEY + r") \}\}",
    re.MULTILINE,
)


# ---------------------------------------------------------------------------
# Replacement records
# ---------------------------------------------------------------------------


class ReplacementRecord(BaseModel):
    """
    Base class of the typed substitution records each generator supplies.

    Subclasses declare snake_case fields; templates reference them in
    camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel_case,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
        protected_namespaces=(),
    )

    def as_replacements(self) -> Dict[str, str]:
        replacements: Dict[str, str] = {}
        for key, value in self.model_dump(by_alias=True).items():
            if isinstance(value, bool):
                replacements[key] = "true" if value else "false"
            else:
                replacements[key] = "" if value is None else str(value)
        return replacements


RecordLike = Union[ReplacementRecord, Mapping[str, Any]]


def template_keys(text: str) -> Set[str]:
    """All placeholder keys referenced by *text*."""
    return set(_PLACEHOLDER_RE.findall(text))


def substitute(text: str, replacements: Mapping[str, str]) -> str:
    """Apply the substitution rules to *text*; every key must be present."""

    def _replace(match: re.Match[str]) -> str:
        if match.group("block") is not None:
            value: str = replacements[match.group("block_key")]
            if not value:
                return ""
            ending: str = "\n" if match.group("block").endswith("\n") else ""
            return value.rstrip("\n") + ending
        return replacements[match.group("inline_key")]

    return _SUBSTITUTION_RE.sub(_replace, text)


class TemplateRenderer:
    """
    Resolves template names and renders them against replacement records.

    Usage::

        renderer = TemplateRenderer(config.stub_directory)
        text = renderer.render("seeder.stub", record)
    """

    def __init__(
        self,
        override_directory: Optional[Path] = None,
        templates: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._override_directory: Optional[Path] = override_directory
        self._templates: Dict[str, str] = dict(
            BUILTIN_TEMPLATES if templates is None else templates
        )

    @property
    def override_directory(self) -> Optional[Path]:
        return self._override_directory

    def names(self) -> List[str]:
        return sorted(self._templates)

    def override_path(self, name: str) -> Optional[Path]:
        if self._override_directory is None:
            return None
        candidate: Path = self._override_directory / name
        return candidate if candidate.is_file() else None

    def load(self, name: str) -> str:
        override: Optional[Path] = self.override_path(name)
        if override is not None:
            logger.debug("Using custom template %s.", override)
            return override.read_text(encoding="utf-8")
        try:
            return self._templates[name]
        except KeyError as exc:
            raise TemplateNotFound(name) from exc

    def render(self, name: str, record: RecordLike) -> str:
        """
        Render template *name*.

        Raises:
            TemplateNotFound: unknown template name.
            TemplateKeyError: the template uses keys the record lacks.
        """
        text: str = self.load(name)
        if isinstance(record, ReplacementRecord):
            replacements: Dict[str, str] = record.as_replacements()
        else:
            replacements = {key: str(value) for key, value in record.items()}

        missing: Set[str] = template_keys(text) - set(replacements)
        if missing:
            raise TemplateKeyError(name, list(missing))

        return substitute(text, replacements)


# ===========================================================================
# Built-in templates
# ===========================================================================

# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------

MODEL_STUB: str = r"""<?php

namespace {{ namespace }};

use Illuminate\Database\Eloquent\Factories\HasFactory;
use Illuminate\Database\Eloquent\Model;
{{ softDeletesImport }}

class {{ modelName }} extends Model
{
    use HasFactory{{ softDeletesTrait }};

    /**
     * The attributes that are mass assignable.
     *
     * @var list<string>
     */
    protected $fillable = [
{{ fillable }}
    ];

    /**
     * Attributes that may be used in index filters.
     *
     * @var list<string>
     */
    public array $filterable = [
{{ filterable }}
    ];

    /**
     * Attributes that may be used for sorting.
     *
     * @var list<string>
     */
    public array $sortable = [
{{ sortable }}
    ];

    /**
     * Get the attributes that should be cast.
     *
     * @return array<string, string>
     */
    protected function casts(): array
    {
        return [
{{ casts }}
        ];
    }
{{ relationships }}
}
"""

RELATIONSHIP_METHOD_STUB: str = r"""
    /**
     * {{ description }}
     */
    public function {{ accessor }}(): \Illuminate\Database\Eloquent\Relations\{{ returnType }}
    {
        return {{ body }};
    }
"""

# ---------------------------------------------------------------------------
# Controllers
# ---------------------------------------------------------------------------

API_CONTROLLER_STUB: str = r"""<?php

namespace {{ namespace }};

{{ imports }}

class {{ modelName }}Controller extends Controller
{
    /**
     * Display a listing of the resource.
     */
    public function index(Request $request): AnonymousResourceCollection
    {
{{ authorizeViewAny }}
        $query = {{ modelName }}::query(){{ eagerLoad }};
{{ trashedQuery }}

        return {{ modelName }}Resource::collection($query->latest()->paginate({{ perPage }}));
    }

    /**
     * Store a newly created resource in storage.
     */
    public function store({{ storeRequest }} $request): JsonResponse
    {
{{ authorizeCreate }}
        ${{ modelVariable }} = {{ modelName }}::create({{ storeData }});
{{ loadStatement }}

        return (new {{ modelName }}Resource(${{ modelVariable }}))
            ->response()
            ->setStatusCode(201);
    }

    /**
     * Display the specified resource.
     */
    public function show({{ modelName }} ${{ modelVariable }}): {{ modelName }}Resource
    {
{{ authorizeView }}
{{ loadStatement }}

        return new {{ modelName }}Resource(${{ modelVariable }});
    }

    /**
     * Update the specified resource in storage.
     */
    public function update({{ updateRequest }} $request, {{ modelName }} ${{ modelVariable }}): {{ modelName }}Resource
    {
{{ authorizeUpdate }}
        ${{ modelVariable }}->update({{ updateData }});
{{ loadStatement }}

        return new {{ modelName }}Resource(${{ modelVariable }});
    }

    /**
     * Remove the specified resource from storage.
     */
    public function destroy({{ modelName }} ${{ modelVariable }}): JsonResponse
    {
{{ authorizeDelete }}
        ${{ modelVariable }}->delete();

        return response()->json(null, 204);
    }
{{ softDeleteActions }}
}
"""

API_CONTROLLER_SOFT_DELETES_STUB: str = r"""
    /**
     * Restore the specified soft-deleted resource.
     */
    public function restore(int $id): JsonResponse
    {
        ${{ modelVariable }} = {{ modelName }}::onlyTrashed()->findOrFail($id);
{{ authorizeRestore }}
        ${{ modelVariable }}->restore();

        return response()->json(['message' => '{{ modelTitle }} restored successfully.']);
    }

    /**
     * Permanently remove the specified soft-deleted resource.
     */
    public function forceDelete(int $id): JsonResponse
    {
        ${{ modelVariable }} = {{ modelName }}::onlyTrashed()->findOrFail($id);
{{ authorizeForceDelete }}
        ${{ modelVariable }}->forceDelete();

        return response()->json(['message' => '{{ modelTitle }} permanently deleted.']);
    }
"""

WEB_CONTROLLER_STUB: str = r"""<?php

namespace {{ namespace }};

{{ imports }}

class {{ modelName }}Controller extends Controller
{
    /**
     * Display a listing of the resource.
     */
    public function index(Request $request): View
    {
{{ authorizeViewAny }}
        $query = {{ modelName }}::query(){{ eagerLoad }};
{{ trashedQuery }}

        ${{ modelVariablePlural }} = $query->latest()->paginate({{ perPage }})->withQueryString();

        return view('{{ viewPath }}.index', compact('{{ modelVariablePlural }}'));
    }

    /**
     * Show the form for creating a new resource.
     */
    public function create(): View
    {
{{ authorizeCreate }}
{{ relatedLoads }}
        return view('{{ viewPath }}.create'{{ createViewData }});
    }

    /**
     * Store a newly created resource in storage.
     */
    public function store({{ storeRequest }} $request): RedirectResponse
    {
{{ authorizeCreate }}
        ${{ modelVariable }} = {{ modelName }}::create({{ storeData }});

        return redirect()
            ->route('{{ routeName }}.show', ${{ modelVariable }})
            ->with('success', '{{ modelTitle }} created successfully.');
    }

    /**
     * Display the specified resource.
     */
    public function show({{ modelName }} ${{ modelVariable }}): View
    {
{{ authorizeView }}
{{ loadStatement }}

        return view('{{ viewPath }}.show', compact('{{ modelVariable }}'));
    }

    /**
     * Show the form for editing the specified resource.
     */
    public function edit({{ modelName }} ${{ modelVariable }}): View
    {
{{ authorizeUpdate }}
{{ relatedLoads }}
        return view('{{ viewPath }}.edit', compact({{ editCompactNames }}));
    }

    /**
     * Update the specified resource in storage.
     */
    public function update({{ updateRequest }} $request, {{ modelName }} ${{ modelVariable }}): RedirectResponse
    {
{{ authorizeUpdate }}
        ${{ modelVariable }}->update({{ updateData }});

        return redirect()
            ->route('{{ routeName }}.show', ${{ modelVariable }})
            ->with('success', '{{ modelTitle }} updated successfully.');
    }

    /**
     * Remove the specified resource from storage.
     */
    public function destroy({{ modelName }} ${{ modelVariable }}): RedirectResponse
    {
{{ authorizeDelete }}
        ${{ modelVariable }}->delete();

        return redirect()
            ->route('{{ routeName }}.index')
            ->with('success', '{{ modelTitle }} deleted successfully.');
    }
{{ softDeleteActions }}
}
"""

WEB_CONTROLLER_SOFT_DELETES_STUB: str = r"""
    /**
     * Restore the specified soft-deleted resource.
     */
    public function restore(int $id): RedirectResponse
    {
        ${{ modelVariable }} = {{ modelName }}::onlyTrashed()->findOrFail($id);
{{ authorizeRestore }}
        ${{ modelVariable }}->restore();

        return redirect()
            ->route('{{ routeName }}.index')
            ->with('success', '{{ modelTitle }} restored successfully.');
    }

    /**
     * Permanently remove the specified soft-deleted resource.
     */
    public function forceDelete(int $id): RedirectResponse
    {
        ${{ modelVariable }} = {{ modelName }}::onlyTrashed()->findOrFail($id);
{{ authorizeForceDelete }}
        ${{ modelVariable }}->forceDelete();

        return redirect()
            ->route('{{ routeName }}.index')
            ->with('success', '{{ modelTitle }} permanently deleted.');
    }
"""

# ---------------------------------------------------------------------------
# Form request, policy, resource
# ---------------------------------------------------------------------------

REQUEST_STUB: str = r"""<?php

namespace {{ namespace }};

use Illuminate\Foundation\Http\FormRequest;

class {{ className }} extends FormRequest
{
    /**
     * Determine if the user is authorized to make this request.
     */
    public function authorize(): bool
    {
        return true;
    }

    /**
     * Get the validation rules that apply to the request.
     *
     * @return array<string, \Illuminate\Contracts\Validation\ValidationRule|array<mixed>|string>
     */
    public function rules(): array
    {
        return [
{{ rules }}
        ];
    }

    /**
     * Get custom attributes for validator errors.
     *
     * @return array<string, string>
     */
    public function attributes(): array
    {
        return [
{{ attributes }}
        ];
    }
}
"""

POLICY_STUB: str = r"""<?php

namespace {{ namespace }};

{{ imports }}

class {{ modelName }}Policy
{
    /**
     * Determine whether the user can view any models.
     */
    public function viewAny(User $user): bool
    {
        return true;
    }

    /**
     * Determine whether the user can view the model.
     */
    public function view(User $user, {{ modelName }} ${{ subjectVariable }}): bool
    {
        return true;
    }

    /**
     * Determine whether the user can create models.
     */
    public function create(User $user): bool
    {
        return true;
    }

    /**
     * Determine whether the user can update the model.
     */
    public function update(User $user, {{ modelName }} ${{ subjectVariable }}): bool
    {
        return true;
    }

    /**
     * Determine whether the user can delete the model.
     */
    public function delete(User $user, {{ modelName }} ${{ subjectVariable }}): bool
    {
        return true;
    }
{{ softDeleteAbilities }}
}
"""

POLICY_SOFT_DELETES_STUB: str = r"""
    /**
     * Determine whether the user can restore the model.
     */
    public function restore(User $user, {{ modelName }} ${{ subjectVariable }}): bool
    {
        return true;
    }

    /**
     * Determine whether the user can permanently delete the model.
     */
    public function forceDelete(User $user, {{ modelName }} ${{ subjectVariable }}): bool
    {
        return true;
    }
"""

RESOURCE_STUB: str = r"""<?php

namespace {{ namespace }};

use Illuminate\Http\Request;
use Illuminate\Http\Resources\Json\JsonResource;

class {{ modelName }}Resource extends JsonResource
{
    /**
     * Transform the resource into an array.
     *
     * @return array<string, mixed>
     */
    public function toArray(Request $request): array
    {
        return [
            'id' => $this->id,
{{ fields }}
{{ relationships }}
{{ timestampFields }}
        ];
    }
}
"""

# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

MIGRATION_STUB: str = r"""<?php

use Illuminate\Database\Migrations\Migration;
use Illuminate\Database\Schema\Blueprint;
use Illuminate\Support\Facades\Schema;

return new class extends Migration
{
    /**
     * Run the migrations.
     */
    public function up(): void
    {
        Schema::create('{{ tableName }}', function (Blueprint $table) {
            $table->id();
{{ columns }}
{{ timestamps }}
{{ softDeletes }}
        });
    }

    /**
     * Reverse the migrations.
     */
    public function down(): void
    {
        Schema::dropIfExists('{{ tableName }}');
    }
};
"""

FACTORY_STUB: str = r"""<?php

namespace {{ namespace }};

use {{ modelNamespace }}\{{ modelName }};
use Illuminate\Database\Eloquent\Factories\Factory;
use Illuminate\Support\Str;

/**
 * @extends Factory<{{ modelName }}>
 */
class {{ modelName }}Factory extends Factory
{
    /**
     * The name of the factory's corresponding model.
     *
     * @var class-string<{{ modelName }}>
     */
    protected $model = {{ modelName }}::class;

    /**
     * Define the model's default state.
     *
     * @return array<string, mixed>
     */
    public function definition(): array
    {
        return [
{{ definitions }}
        ];
    }
{{ trashedState }}
}
"""

FACTORY_TRASHED_STATE_STUB: str = r"""
    /**
     * Indicate that the model is soft deleted.
     */
    public function trashed(): static
    {
        return $this->state(fn (array $attributes) => [
            'deleted_at' => now(),
        ]);
    }
"""

SEEDER_STUB: str = r"""<?php

namespace {{ namespace }};

use {{ modelNamespace }}\{{ modelName }};
use Illuminate\Database\Seeder;

class {{ modelName }}Seeder extends Seeder
{
    /**
     * Run the database seeds.
     */
    public function run(): void
    {
        {{ modelName }}::factory()->count({{ count }})->create();
    }
}
"""

# ---------------------------------------------------------------------------
# Tests: Pest
# ---------------------------------------------------------------------------

PEST_FEATURE_STUB: str = r"""<?php

use {{ modelNamespace }}\{{ modelName }};
use Illuminate\Foundation\Testing\RefreshDatabase;
use Illuminate\Support\Str;

uses(RefreshDatabase::class);

it('displays the {{ modelTitleLower }} index page', function () {
    {{ modelName }}::factory()->count(3)->create();

    $this->get(route('{{ routeName }}.index'))
        ->assertOk()
        ->assertViewIs('{{ viewPath }}.index');
});

it('displays the create {{ modelTitleLower }} page', function () {
    $this->get(route('{{ routeName }}.create'))->assertOk();
});

it('stores a new {{ modelTitleLower }}', function () {
    $data = [
{{ storeData }}
    ];

    $this->post(route('{{ routeName }}.store'), $data)
        ->assertSessionHasNoErrors()
        ->assertRedirect();

    $this->assertDatabaseCount('{{ tableName }}', 1);
});

it('shows a {{ modelTitleLower }}', function () {
    ${{ modelVariable }} = {{ modelName }}::factory()->create();

    $this->get(route('{{ routeName }}.show', ${{ modelVariable }}))->assertOk();
});

it('updates a {{ modelTitleLower }}', function () {
    ${{ modelVariable }} = {{ modelName }}::factory()->create();

    $data = [
{{ updateData }}
    ];

    $this->put(route('{{ routeName }}.update', ${{ modelVariable }}), $data)
        ->assertSessionHasNoErrors()
        ->assertRedirect();
});

it('deletes a {{ modelTitleLower }}', function () {
    ${{ modelVariable }} = {{ modelName }}::factory()->create();

    $this->delete(route('{{ routeName }}.destroy', ${{ modelVariable }}))
        ->assertRedirect(route('{{ routeName }}.index'));

    $this->{{ deleteAssertion }}('{{ tableName }}', ['id' => ${{ modelVariable }}->id]);
});
{{ validationTest }}
{{ softDeleteTests }}
"""

PEST_FEATURE_VALIDATION_STUB: str = r"""
it('validates required {{ modelTitleLower }} fields', function () {
    $this->post(route('{{ routeName }}.store'), [])
        ->assertSessionHasErrors([{{ requiredFields }}]);
});
"""

PEST_FEATURE_SOFT_DELETES_STUB: str = r"""
it('restores a soft deleted {{ modelTitleLower }}', function () {
    ${{ modelVariable }} = {{ modelName }}::factory()->create();
    ${{ modelVariable }}->delete();

    $this->post(route('{{ routeName }}.restore', ${{ modelVariable }}->id))
        ->assertRedirect(route('{{ routeName }}.index'));

    $this->assertNotSoftDeleted('{{ tableName }}', ['id' => ${{ modelVariable }}->id]);
});

it('force deletes a soft deleted {{ modelTitleLower }}', function () {
    ${{ modelVariable }} = {{ modelName }}::factory()->create();
    ${{ modelVariable }}->delete();

    $this->delete(route('{{ routeName }}.force-delete', ${{ modelVariable }}->id))
        ->assertRedirect(route('{{ routeName }}.index'));

    $this->assertDatabaseMissing('{{ tableName }}', ['id' => ${{ modelVariable }}->id]);
});
"""

PEST_API_STUB: str = r"""<?php

use {{ modelNamespace }}\{{ modelName }};
use Illuminate\Foundation\Testing\RefreshDatabase;
use Illuminate\Support\Str;

uses(RefreshDatabase::class);

it('lists {{ modelTitlePluralLower }}', function () {
    {{ modelName }}::factory()->count(3)->create();

    $this->getJson('/api/{{ routeName }}')
        ->assertOk()
        ->assertJsonCount(3, 'data');
});

it('creates a {{ modelTitleLower }}', function () {
    $data = [
{{ storeData }}
    ];

    $this->postJson('/api/{{ routeName }}', $data)
        ->assertCreated();

    $this->assertDatabaseCount('{{ tableName }}', 1);
});

it('shows a {{ modelTitleLower }}', function () {
    ${{ modelVariable }} = {{ modelName }}::factory()->create();

    $this->getJson('/api/{{ routeName }}/' . ${{ modelVariable }}->id)
        ->assertOk()
        ->assertJsonPath('data.id', ${{ modelVariable }}->id);
});

it('updates a {{ modelTitleLower }}', function () {
    ${{ modelVariable }} = {{ modelName }}::factory()->create();

    $data = [
{{ updateData }}
    ];

    $this->putJson('/api/{{ routeName }}/' . ${{ modelVariable }}->id, $data)
        ->assertOk();
});

it('deletes a {{ modelTitleLower }}', function () {
    ${{ modelVariable }} = {{ modelName }}::factory()->create();

    $this->deleteJson('/api/{{ routeName }}/' . ${{ modelVariable }}->id)
        ->assertNoContent();

    $this->{{ deleteAssertion }}('{{ tableName }}', ['id' => ${{ modelVariable }}->id]);
});
{{ validationTest }}
{{ softDeleteTests }}
"""

PEST_API_VALIDATION_STUB: str = r"""
it('rejects an invalid {{ modelTitleLower }} payload', function () {
    $this->postJson('/api/{{ routeName }}', [])
        ->assertUnprocessable()
        ->assertJsonValidationErrors([{{ requiredFields }}]);
});
"""

PEST_API_SOFT_DELETES_STUB: str = r"""
it('restores a soft deleted {{ modelTitleLower }}', function () {
    ${{ modelVariable }} = {{ modelName }}::factory()->create();
    ${{ modelVariable }}->delete();

    $this->postJson('/api/{{ routeName }}/' . ${{ modelVariable }}->id . '/restore')
        ->assertOk();

    $this->assertNotSoftDeleted('{{ tableName }}', ['id' => ${{ modelVariable }}->id]);
});

it('force deletes a soft deleted {{ modelTitleLower }}', function () {
    ${{ modelVariable }} = {{ modelName }}::factory()->create();
    ${{ modelVariable }}->delete();

    $this->deleteJson('/api/{{ routeName }}/' . ${{ modelVariable }}->id . '/force-delete')
        ->assertOk();

    $this->assertDatabaseMissing('{{ tableName }}', ['id' => ${{ modelVariable }}->id]);
});
"""

PEST_UNIT_STUB: str = r"""<?php

use {{ modelNamespace }}\{{ modelName }};
use Illuminate\Foundation\Testing\RefreshDatabase;

uses(Tests\TestCase::class, RefreshDatabase::class);

it('creates a {{ modelTitleLower }} from the factory', function () {
    ${{ modelVariable }} = {{ modelName }}::factory()->create();

    expect(${{ modelVariable }})->toBeInstanceOf({{ modelName }}::class)
        ->and(${{ modelVariable }}->exists)->toBeTrue();
});

it('declares the fillable attributes', function () {
    expect((new {{ modelName }}())->getFillable())->toBe([{{ fillable }}]);
});
{{ relationshipTest }}
"""

PEST_UNIT_RELATIONSHIPS_STUB: str = r"""
it('declares its relationships', function () {
    $model = new {{ modelName }}();

{{ relationshipAssertions }}
});
"""

# ---------------------------------------------------------------------------
# Tests: PHPUnit
# ---------------------------------------------------------------------------

PHPUNIT_FEATURE_STUB: str = r"""<?php

namespace Tests\Feature;

use {{ modelNamespace }}\{{ modelName }};
use Illuminate\Foundation\Testing\RefreshDatabase;
use Illuminate\Support\Str;
use Tests\TestCase;

class {{ modelName }}Test extends TestCase
{
    use RefreshDatabase;

    public function test_index_page_is_displayed(): void
    {
        {{ modelName }}::factory()->count(3)->create();

        $this->get(route('{{ routeName }}.index'))
            ->assertOk()
            ->assertViewIs('{{ viewPath }}.index');
    }

    public function test_create_page_is_displayed(): void
    {
        $this->get(route('{{ routeName }}.create'))->assertOk();
    }

    public function test_{{ snakeName }}_can_be_stored(): void
    {
        $data = [
{{ storeData }}
        ];

        $this->post(route('{{ routeName }}.store'), $data)
            ->assertSessionHasNoErrors()
            ->assertRedirect();

        $this->assertDatabaseCount('{{ tableName }}', 1);
    }

    public function test_{{ snakeName }}_can_be_shown(): void
    {
        ${{ modelVariable }} = {{ modelName }}::factory()->create();

        $this->get(route('{{ routeName }}.show', ${{ modelVariable }}))->assertOk();
    }

    public function test_{{ snakeName }}_can_be_updated(): void
    {
        ${{ modelVariable }} = {{ modelName }}::factory()->create();

        $data = [
{{ updateData }}
        ];

        $this->put(route('{{ routeName }}.update', ${{ modelVariable }}), $data)
            ->assertSessionHasNoErrors()
            ->assertRedirect();
    }

    public function test_{{ snakeName }}_can_be_deleted(): void
    {
        ${{ modelVariable }} = {{ modelName }}::factory()->create();

        $this->delete(route('{{ routeName }}.destroy', ${{ modelVariable }}))
            ->assertRedirect(route('{{ routeName }}.index'));

        $this->{{ deleteAssertion }}('{{ tableName }}', ['id' => ${{ modelVariable }}->id]);
    }
{{ validationTest }}
{{ softDeleteTests }}
}
"""

PHPUNIT_FEATURE_VALIDATION_STUB: str = r"""
    public function test_required_fields_are_validated(): void
    {
        $this->post(route('{{ routeName }}.store'), [])
            ->assertSessionHasErrors([{{ requiredFields }}]);
    }
"""

PHPUNIT_FEATURE_SOFT_DELETES_STUB: str = r"""
    public function test_soft_deleted_{{ snakeName }}_can_be_restored(): void
    {
        ${{ modelVariable }} = {{ modelName }}::factory()->create();
        ${{ modelVariable }}->delete();

        $this->post(route('{{ routeName }}.restore', ${{ modelVariable }}->id))
            ->assertRedirect(route('{{ routeName }}.index'));

        $this->assertNotSoftDeleted('{{ tableName }}', ['id' => ${{ modelVariable }}->id]);
    }

    public function test_soft_deleted_{{ snakeName }}_can_be_force_deleted(): void
    {
        ${{ modelVariable }} = {{ modelName }}::factory()->create();
        ${{ modelVariable }}->delete();

        $this->delete(route('{{ routeName }}.force-delete', ${{ modelVariable }}->id))
            ->assertRedirect(route('{{ routeName }}.index'));

        $this->assertDatabaseMissing('{{ tableName }}', ['id' => ${{ modelVariable }}->id]);
    }
"""

PHPUNIT_API_STUB: str = r"""<?php

namespace Tests\Feature\Api;

use {{ modelNamespace }}\{{ modelName }};
use Illuminate\Foundation\Testing\RefreshDatabase;
use Illuminate\Support\Str;
use Tests\TestCase;

class {{ modelName }}ApiTest extends TestCase
{
    use RefreshDatabase;

    public function test_{{ snakeName }}_index_is_listed(): void
    {
        {{ modelName }}::factory()->count(3)->create();

        $this->getJson('/api/{{ routeName }}')
            ->assertOk()
            ->assertJsonCount(3, 'data');
    }

    public function test_{{ snakeName }}_can_be_created(): void
    {
        $data = [
{{ storeData }}
        ];

        $this->postJson('/api/{{ routeName }}', $data)
            ->assertCreated();

        $this->assertDatabaseCount('{{ tableName }}', 1);
    }

    public function test_{{ snakeName }}_can_be_shown(): void
    {
        ${{ modelVariable }} = {{ modelName }}::factory()->create();

        $this->getJson('/api/{{ routeName }}/' . ${{ modelVariable }}->id)
            ->assertOk()
            ->assertJsonPath('data.id', ${{ modelVariable }}->id);
    }

    public function test_{{ snakeName }}_can_be_updated(): void
    {
        ${{ modelVariable }} = {{ modelName }}::factory()->create();

        $data = [
{{ updateData }}
        ];

        $this->putJson('/api/{{ routeName }}/' . ${{ modelVariable }}->id, $data)
            ->assertOk();
    }

    public function test_{{ snakeName }}_can_be_deleted(): void
    {
        ${{ modelVariable }} = {{ modelName }}::factory()->create();

        $this->deleteJson('/api/{{ routeName }}/' . ${{ modelVariable }}->id)
            ->assertNoContent();

        $this->{{ deleteAssertion }}('{{ tableName }}', ['id' => ${{ modelVariable }}->id]);
    }
{{ validationTest }}
{{ softDeleteTests }}
}
"""

PHPUNIT_API_VALIDATION_STUB: str = r"""
    public function test_invalid_payload_is_rejected(): void
    {
        $this->postJson('/api/{{ routeName }}', [])
            ->assertUnprocessable()
            ->assertJsonValidationErrors([{{ requiredFields }}]);
    }
"""

PHPUNIT_API_SOFT_DELETES_STUB: str = r"""
    public function test_soft_deleted_{{ snakeName }}_can_be_restored(): void
    {
        ${{ modelVariable }} = {{ modelName }}::factory()->create();
        ${{ modelVariable }}->delete();

        $this->postJson('/api/{{ routeName }}/' . ${{ modelVariable }}->id . '/restore')
            ->assertOk();

        $this->assertNotSoftDeleted('{{ tableName }}', ['id' => ${{ modelVariable }}->id]);
    }

    public function test_soft_deleted_{{ snakeName }}_can_be_force_deleted(): void
    {
        ${{ modelVariable }} = {{ modelName }}::factory()->create();
        ${{ modelVariable }}->delete();

        $this->deleteJson('/api/{{ routeName }}/' . ${{ modelVariable }}->id . '/force-delete')
            ->assertOk();

        $this->assertDatabaseMissing('{{ tableName }}', ['id' => ${{ modelVariable }}->id]);
    }
"""

PHPUNIT_UNIT_STUB: str = r"""<?php

namespace Tests\Unit;

use {{ modelNamespace }}\{{ modelName }};
use Illuminate\Foundation\Testing\RefreshDatabase;
use Tests\TestCase;

class {{ modelName }}Test extends TestCase
{
    use RefreshDatabase;

    public function test_factory_creates_a_{{ snakeName }}(): void
    {
        ${{ modelVariable }} = {{ modelName }}::factory()->create();

        $this->assertInstanceOf({{ modelName }}::class, ${{ modelVariable }});
        $this->assertTrue(${{ modelVariable }}->exists);
    }

    public function test_fillable_attributes_are_declared(): void
    {
        $this->assertSame([{{ fillable }}], (new {{ modelName }}())->getFillable());
    }
{{ relationshipTest }}
}
"""

PHPUNIT_UNIT_RELATIONSHIPS_STUB: str = r"""
    public function test_relationships_are_declared(): void
    {
        $model = new {{ modelName }}();

{{ relationshipAssertions }}
    }
"""

# ---------------------------------------------------------------------------
# Views: Tailwind
# ---------------------------------------------------------------------------

TAILWIND_INDEX_STUB: str = r"""<x-app-layout>
    <x-slot name="header">
        <div class="flex items-center justify-between">
            <h2 class="font-semibold text-xl text-gray-800 dark:text-gray-200 leading-tight">
                {{ modelTitlePlural }}
            </h2>
            <a href="{{ route('{{ routeName }}.create') }}" class="inline-flex items-center rounded-md bg-blue-600 px-4 py-2 text-sm font-semibold text-white hover:bg-blue-500">
                New {{ modelTitle }}
            </a>
        </div>
    </x-slot>

    <div class="py-12">
        <div class="max-w-7xl mx-auto sm:px-6 lg:px-8">
            @if (session('success'))
                <div class="mb-4 rounded-md bg-green-50 p-4 text-sm text-green-700">
                    {{ session('success') }}
                </div>
            @endif
{{ trashedFilter }}

            <div class="bg-white dark:bg-gray-800 overflow-hidden shadow-sm sm:rounded-lg">
                <table class="min-w-full divide-y divide-gray-200 dark:divide-gray-700">
                    <thead class="bg-gray-50 dark:bg-gray-700">
                        <tr>
{{ tableHeaders }}
                            <th scope="col" class="px-6 py-3 text-right text-xs font-medium text-gray-500 dark:text-gray-300 uppercase tracking-wider">
                                Actions
                            </th>
                        </tr>
                    </thead>
                    <tbody class="bg-white dark:bg-gray-800 divide-y divide-gray-200 dark:divide-gray-700">
                        @forelse (${{ modelVariablePlural }} as ${{ modelVariable }})
                            <tr{{ trashedRowClass }}>
{{ tableColumns }}
                                <td class="px-6 py-4 whitespace-nowrap text-right text-sm font-medium space-x-2">
{{ actionButtons }}
                                </td>
                            </tr>
                        @empty
                            <tr>
                                <td colspan="{{ columnCount }}" class="px-6 py-4 text-center text-sm text-gray-500 dark:text-gray-400">
                                    No {{ modelTitlePluralLower }} found.
                                </td>
                            </tr>
                        @endforelse
                    </tbody>
                </table>
            </div>

            <div class="mt-4">
                {{ ${{ modelVariablePlural }}->links() }}
            </div>
        </div>
    </div>
</x-app-layout>
"""

TAILWIND_CREATE_STUB: str = r"""<x-app-layout>
    <x-slot name="header">
        <h2 class="font-semibold text-xl text-gray-800 dark:text-gray-200 leading-tight">
            New {{ modelTitle }}
        </h2>
    </x-slot>

    <div class="py-12">
        <div class="max-w-3xl mx-auto sm:px-6 lg:px-8">
            <div class="bg-white dark:bg-gray-800 shadow-sm sm:rounded-lg p-6">
                <form method="POST" action="{{ route('{{ routeName }}.store') }}">
                    @csrf

{{ formFields }}

                    <div class="flex items-center justify-end gap-4">
                        <a href="{{ route('{{ routeName }}.index') }}" class="text-sm text-gray-600 dark:text-gray-400 hover:underline">Cancel</a>
                        <button type="submit" class="rounded-md bg-blue-600 px-4 py-2 text-sm font-semibold text-white hover:bg-blue-500">
                            Save
                        </button>
                    </div>
                </form>
            </div>
        </div>
    </div>
</x-app-layout>
"""

TAILWIND_EDIT_STUB: str = r"""<x-app-layout>
    <x-slot name="header">
        <h2 class="font-semibold text-xl text-gray-800 dark:text-gray-200 leading-tight">
            Edit {{ modelTitle }}
        </h2>
    </x-slot>

    <div class="py-12">
        <div class="max-w-3xl mx-auto sm:px-6 lg:px-8">
            <div class="bg-white dark:bg-gray-800 shadow-sm sm:rounded-lg p-6">
                <form method="POST" action="{{ route('{{ routeName }}.update', ${{ modelVariable }}) }}">
                    @csrf
                    @method('PUT')

{{ formFields }}

                    <div class="flex items-center justify-end gap-4">
                        <a href="{{ route('{{ routeName }}.show', ${{ modelVariable }}) }}" class="text-sm text-gray-600 dark:text-gray-400 hover:underline">Cancel</a>
                        <button type="submit" class="rounded-md bg-blue-600 px-4 py-2 text-sm font-semibold text-white hover:bg-blue-500">
                            Update
                        </button>
                    </div>
                </form>
            </div>
        </div>
    </div>
</x-app-layout>
"""

TAILWIND_SHOW_STUB: str = r"""<x-app-layout>
    <x-slot name="header">
        <div class="flex items-center justify-between">
            <h2 class="font-semibold text-xl text-gray-800 dark:text-gray-200 leading-tight">
                {{ modelTitle }} #{{ ${{ modelVariable }}->id }}
            </h2>
            <div class="flex items-center gap-2">
{{ actionButtons }}
            </div>
        </div>
    </x-slot>

    <div class="py-12">
        <div class="max-w-3xl mx-auto sm:px-6 lg:px-8">
            @if (session('success'))
                <div class="mb-4 rounded-md bg-green-50 p-4 text-sm text-green-700">
                    {{ session('success') }}
                </div>
            @endif
{{ softDeleteInfo }}

            <div class="bg-white dark:bg-gray-800 shadow-sm sm:rounded-lg p-6">
                <dl class="grid grid-cols-1 gap-x-4 gap-y-6 sm:grid-cols-2">
{{ detailFields }}
                </dl>
            </div>
{{ relationships }}

            <div class="mt-4">
                <a href="{{ route('{{ routeName }}.index') }}" class="text-sm text-gray-600 dark:text-gray-400 hover:underline">&larr; Back to {{ modelTitlePluralLower }}</a>
            </div>
        </div>
    </div>
</x-app-layout>
"""

# ---------------------------------------------------------------------------
# Views: Bootstrap
# ---------------------------------------------------------------------------

BOOTSTRAP_INDEX_STUB: str = r"""<x-app-layout>
    <div class="container py-4">
        <div class="d-flex justify-content-between align-items-center mb-3">
            <h1 class="h3 mb-0">{{ modelTitlePlural }}</h1>
            <a href="{{ route('{{ routeName }}.create') }}" class="btn btn-primary">New {{ modelTitle }}</a>
        </div>

        @if (session('success'))
            <div class="alert alert-success">{{ session('success') }}</div>
        @endif
{{ trashedFilter }}

        <div class="card">
            <div class="table-responsive">
                <table class="table table-striped table-hover mb-0">
                    <thead>
                        <tr>
{{ tableHeaders }}
                            <th class="text-end">Actions</th>
                        </tr>
                    </thead>
                    <tbody>
                        @forelse (${{ modelVariablePlural }} as ${{ modelVariable }})
                            <tr{{ trashedRowClass }}>
{{ tableColumns }}
                                <td class="text-end">
{{ actionButtons }}
                                </td>
                            </tr>
                        @empty
                            <tr>
                                <td colspan="{{ columnCount }}" class="text-center text-muted">No {{ modelTitlePluralLower }} found.</td>
                            </tr>
                        @endforelse
                    </tbody>
                </table>
            </div>
        </div>

        <div class="mt-3">
            {{ ${{ modelVariablePlural }}->links() }}
        </div>
    </div>
</x-app-layout>
"""

BOOTSTRAP_CREATE_STUB: str = r"""<x-app-layout>
    <div class="container py-4">
        <h1 class="h3 mb-3">New {{ modelTitle }}</h1>

        <div class="card">
            <div class="card-body">
                <form method="POST" action="{{ route('{{ routeName }}.store') }}">
                    @csrf

{{ formFields }}

                    <div class="d-flex justify-content-end gap-2">
                        <a href="{{ route('{{ routeName }}.index') }}" class="btn btn-outline-secondary">Cancel</a>
                        <button type="submit" class="btn btn-primary">Save</button>
                    </div>
                </form>
            </div>
        </div>
    </div>
</x-app-layout>
"""

BOOTSTRAP_EDIT_STUB: str = r"""<x-app-layout>
    <div class="container py-4">
        <h1 class="h3 mb-3">Edit {{ modelTitle }}</h1>

        <div class="card">
            <div class="card-body">
                <form method="POST" action="{{ route('{{ routeName }}.update', ${{ modelVariable }}) }}">
                    @csrf
                    @method('PUT')

{{ formFields }}

                    <div class="d-flex justify-content-end gap-2">
                        <a href="{{ route('{{ routeName }}.show', ${{ modelVariable }}) }}" class="btn btn-outline-secondary">Cancel</a>
                        <button type="submit" class="btn btn-primary">Update</button>
                    </div>
                </form>
            </div>
        </div>
    </div>
</x-app-layout>
"""

BOOTSTRAP_SHOW_STUB: str = r"""<x-app-layout>
    <div class="container py-4">
        <div class="d-flex justify-content-between align-items-center mb-3">
            <h1 class="h3 mb-0">{{ modelTitle }} #{{ ${{ modelVariable }}->id }}</h1>
            <div class="d-flex gap-2">
{{ actionButtons }}
            </div>
        </div>

        @if (session('success'))
            <div class="alert alert-success">{{ session('success') }}</div>
        @endif
{{ softDeleteInfo }}

        <div class="card">
            <div class="card-body">
                <dl class="row mb-0">
{{ detailFields }}
                </dl>
            </div>
        </div>
{{ relationships }}

        <a href="{{ route('{{ routeName }}.index') }}" class="btn btn-link mt-3 px-0">&larr; Back to {{ modelTitlePluralLower }}</a>
    </div>
</x-app-layout>
"""

# ---------------------------------------------------------------------------
# Livewire components
# ---------------------------------------------------------------------------

LIVEWIRE_TABLE_STUB: str = r"""<?php

namespace {{ namespace }};

use {{ modelNamespace }}\{{ modelName }};
use Livewire\Attributes\On;
use Livewire\Component;
use Livewire\WithPagination;

class {{ modelName }}Table extends Component
{
    use WithPagination;

    public string $search = '';

    public string $sortField = 'id';

    public string $sortDirection = 'desc';
{{ trashedProperty }}

    /** @var list<string> */
    protected array $sortable = [{{ sortable }}];

    public function updatingSearch(): void
    {
        $this->resetPage();
    }

    public function sortBy(string $field): void
    {
        if (! in_array($field, $this->sortable, true)) {
            return;
        }

        if ($this->sortField === $field) {
            $this->sortDirection = $this->sortDirection === 'asc' ? 'desc' : 'asc';
        } else {
            $this->sortField = $field;
            $this->sortDirection = 'asc';
        }
    }

    #[On('{{ modelKebab }}-saved')]
    public function refreshList(): void
    {
        $this->resetPage();
    }

    public function delete(int $id): void
    {
        {{ modelName }}::findOrFail($id)->delete();

        session()->flash('success', '{{ modelTitle }} deleted successfully.');
    }
{{ softDeleteMethods }}

    public function render()
    {
        $query = {{ modelName }}::query(){{ eagerLoad }};
{{ trashedQuery }}

        if ($this->search !== '') {
            $query->where(function ($query) {
{{ searchConditions }}
            });
        }

        return view('livewire.{{ viewPath }}.{{ modelKebab }}-table', [
            '{{ modelVariablePlural }}' => $query->orderBy($this->sortField, $this->sortDirection)->paginate({{ perPage }}),
        ]);
    }
}
"""

LIVEWIRE_TABLE_SOFT_DELETES_STUB: str = r"""
    public function restore(int $id): void
    {
        {{ modelName }}::onlyTrashed()->findOrFail($id)->restore();

        session()->flash('success', '{{ modelTitle }} restored successfully.');
    }

    public function forceDelete(int $id): void
    {
        {{ modelName }}::onlyTrashed()->findOrFail($id)->forceDelete();

        session()->flash('success', '{{ modelTitle }} permanently deleted.');
    }
"""

LIVEWIRE_FORM_STUB: str = r"""<?php

namespace {{ namespace }};

{{ imports }}

class {{ modelName }}Form extends Component
{
    public ?{{ modelName }} $record = null;

{{ properties }}

    public function mount(?{{ modelName }} ${{ modelVariable }} = null): void
    {
        if (${{ modelVariable }} !== null && ${{ modelVariable }}->exists) {
            $this->record = ${{ modelVariable }};
{{ fillFromModel }}
        }
    }

    /**
     * @return array<string, array<int, string>>
     */
    protected function rules(): array
    {
        return [
{{ rules }}
        ];
    }

    public function save(): void
    {
        $validated = $this->validate();

        if ($this->record !== null) {
            $this->record->update($validated);
            session()->flash('success', '{{ modelTitle }} updated successfully.');
        } else {
            {{ modelName }}::create($validated);
            session()->flash('success', '{{ modelTitle }} created successfully.');
            $this->reset({{ resetFields }});
        }

        $this->dispatch('{{ modelKebab }}-saved');
    }

    public function render()
    {
        return view('livewire.{{ viewPath }}.{{ modelKebab }}-form'{{ viewData }});
    }
}
"""

LIVEWIRE_TAILWIND_TABLE_VIEW_STUB: str = r"""<div>
    @if (session('success'))
        <div class="mb-4 rounded-md bg-green-50 p-4 text-sm text-green-700">
            {{ session('success') }}
        </div>
    @endif

    <div class="mb-4 flex items-center gap-4">
        <input type="search" wire:model.live.debounce.300ms="search" placeholder="Search {{ modelTitlePluralLower }}..." class="w-full max-w-sm rounded-md border-gray-300 dark:border-gray-700 dark:bg-gray-900 dark:text-gray-300 focus:border-blue-500 focus:ring-blue-500">
{{ trashedFilter }}
    </div>

    <div class="bg-white dark:bg-gray-800 overflow-hidden shadow-sm sm:rounded-lg">
        <table class="min-w-full divide-y divide-gray-200 dark:divide-gray-700">
            <thead class="bg-gray-50 dark:bg-gray-700">
                <tr>
{{ tableHeaders }}
                    <th scope="col" class="px-6 py-3 text-right text-xs font-medium text-gray-500 dark:text-gray-300 uppercase tracking-wider">Actions</th>
                </tr>
            </thead>
            <tbody class="divide-y divide-gray-200 dark:divide-gray-700">
                @forelse (${{ modelVariablePlural }} as ${{ modelVariable }})
                    <tr wire:key="{{ modelKebab }}-{{ ${{ modelVariable }}->id }}"{{ trashedRowClass }}>
{{ tableColumns }}
                        <td class="px-6 py-4 whitespace-nowrap text-right text-sm font-medium space-x-2">
{{ actionButtons }}
                        </td>
                    </tr>
                @empty
                    <tr>
                        <td colspan="{{ columnCount }}" class="px-6 py-4 text-center text-sm text-gray-500">No {{ modelTitlePluralLower }} found.</td>
                    </tr>
                @endforelse
            </tbody>
        </table>
    </div>

    <div class="mt-4">
        {{ ${{ modelVariablePlural }}->links() }}
    </div>
</div>
"""

LIVEWIRE_BOOTSTRAP_TABLE_VIEW_STUB: str = r"""<div>
    @if (session('success'))
        <div class="alert alert-success">{{ session('success') }}</div>
    @endif

    <div class="row g-2 mb-3">
        <div class="col-md-6">
            <input type="search" wire:model.live.debounce.300ms="search" placeholder="Search {{ modelTitlePluralLower }}..." class="form-control">
        </div>
{{ trashedFilter }}
    </div>

    <div class="table-responsive">
        <table class="table table-striped table-hover">
            <thead>
                <tr>
{{ tableHeaders }}
                    <th class="text-end">Actions</th>
                </tr>
            </thead>
            <tbody>
                @forelse (${{ modelVariablePlural }} as ${{ modelVariable }})
                    <tr wire:key="{{ modelKebab }}-{{ ${{ modelVariable }}->id }}"{{ trashedRowClass }}>
{{ tableColumns }}
                        <td class="text-end">
{{ actionButtons }}
                        </td>
                    </tr>
                @empty
                    <tr>
                        <td colspan="{{ columnCount }}" class="text-center text-muted">No {{ modelTitlePluralLower }} found.</td>
                    </tr>
                @endforelse
            </tbody>
        </table>
    </div>

    {{ ${{ modelVariablePlural }}->links() }}
</div>
"""

LIVEWIRE_TAILWIND_FORM_VIEW_STUB: str = r"""<div>
    @if (session('success'))
        <div class="mb-4 rounded-md bg-green-50 p-4 text-sm text-green-700">
            {{ session('success') }}
        </div>
    @endif

    <form wire:submit="save" class="space-y-4">
{{ formFields }}

        <div class="flex justify-end">
            <button type="submit" class="rounded-md bg-blue-600 px-4 py-2 text-sm font-semibold text-white hover:bg-blue-500">
                Save {{ modelTitle }}
            </button>
        </div>
    </form>
</div>
"""

LIVEWIRE_BOOTSTRAP_FORM_VIEW_STUB: str = r"""<div>
    @if (session('success'))
        <div class="alert alert-success">{{ session('success') }}</div>
    @endif

    <form wire:submit="save">
{{ formFields }}

        <div class="d-flex justify-content-end">
            <button type="submit" class="btn btn-primary">Save {{ modelTitle }}</button>
        </div>
    </form>
</div>
"""

# ---------------------------------------------------------------------------
# Application layout and welcome page
# ---------------------------------------------------------------------------

TAILWIND_LAYOUT_STUB: str = r"""<!DOCTYPE html>
<html lang="{{ str_replace('_', '-', app()->getLocale()) }}">
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1">
        <meta name="csrf-token" content="{{ csrf_token() }}">

        <title>{{ config('app.name', 'Laravel') }}</title>

        @vite(['resources/css/app.css', 'resources/js/app.js'])
    </head>
    <body class="font-sans antialiased">
        <div class="min-h-screen bg-gray-100" x-data="{ open: false }">
            <nav class="bg-white border-b border-gray-100">
                <div class="max-w-7xl mx-auto px-4 sm:px-6 lg:px-8">
                    <div class="flex justify-between h-16">
                        <div class="flex items-center space-x-8">
                            <a href="{{ url('/') }}" class="text-lg font-semibold text-gray-800">{{ config('app.name', 'Laravel') }}</a>
                            <div class="hidden sm:flex sm:items-center sm:space-x-6">
                                <a href="{{ route('dashboard') }}" class="text-sm font-medium {{ request()->routeIs('dashboard') ? 'text-blue-600' : 'text-gray-500 hover:text-gray-700' }}">Dashboard</a>
{{ navItems }}
                            </div>
                        </div>
                        <div class="flex items-center sm:hidden">
                            <button type="button" @click="open = ! open" class="p-2 rounded-md text-gray-400 hover:text-gray-500 hover:bg-gray-100">
                                <span class="sr-only">Toggle navigation</span>
                                <svg class="h-6 w-6" stroke="currentColor" fill="none" viewBox="0 0 24 24">
                                    <path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" d="M4 6h16M4 12h16M4 18h16" />
                                </svg>
                            </button>
                        </div>
                    </div>
                </div>

                <div class="sm:hidden" x-show="open" x-cloak>
                    <div class="pt-2 pb-3 space-y-1">
                        <a href="{{ route('dashboard') }}" class="block px-4 py-2 text-base font-medium {{ request()->routeIs('dashboard') ? 'bg-blue-50 text-blue-700' : 'text-gray-600 hover:bg-gray-50' }}">Dashboard</a>
{{ navItemsMobile }}
                    </div>
                </div>
            </nav>

            @isset($header)
                <header class="bg-white shadow">
                    <div class="max-w-7xl mx-auto py-6 px-4 sm:px-6 lg:px-8">
                        {{ $header }}
                    </div>
                </header>
            @endisset

            <main>
                {{ $slot }}
            </main>
        </div>
    </body>
</html>
"""

TAILWIND_NAV_ITEM_STUB: str = r"""<a href="{{ route('{{ routeName }}.index') }}" class="text-sm font-medium {{ request()->routeIs('{{ routeName }}.*') ? 'text-blue-600' : 'text-gray-500 hover:text-gray-700' }}">{{ label }}</a>
"""

TAILWIND_NAV_ITEM_MOBILE_STUB: str = r"""<a href="{{ route('{{ routeName }}.index') }}" class="block px-4 py-2 text-base font-medium {{ request()->routeIs('{{ routeName }}.*') ? 'bg-blue-50 text-blue-700' : 'text-gray-600 hover:bg-gray-50' }}">{{ label }}</a>
"""

BOOTSTRAP_LAYOUT_STUB: str = r"""<!DOCTYPE html>
<html lang="{{ str_replace('_', '-', app()->getLocale()) }}">
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1">
        <meta name="csrf-token" content="{{ csrf_token() }}">

        <title>{{ config('app.name', 'Laravel') }}</title>

        <link href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css" rel="stylesheet">
    </head>
    <body class="bg-light">
        <nav class="navbar navbar-expand-md navbar-light bg-white border-bottom">
            <div class="container">
                <a class="navbar-brand" href="{{ url('/') }}">{{ config('app.name', 'Laravel') }}</a>
                <button class="navbar-toggler" type="button" data-bs-toggle="collapse" data-bs-target="#main-navigation" aria-controls="main-navigation" aria-expanded="false" aria-label="Toggle navigation">
                    <span class="navbar-toggler-icon"></span>
                </button>
                <div class="collapse navbar-collapse" id="main-navigation">
                    <ul class="navbar-nav me-auto">
                        <li class="nav-item"><a href="{{ route('dashboard') }}" class="nav-link {{ request()->routeIs('dashboard') ? 'active' : '' }}">Dashboard</a></li>
{{ navItems }}
                    </ul>
                </div>
            </div>
        </nav>

        @isset($header)
            <header class="bg-white border-bottom">
                <div class="container py-3">
                    {{ $header }}
                </div>
            </header>
        @endisset

        <main>
            {{ $slot }}
        </main>

        <script src="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/js/bootstrap.bundle.min.js"></script>
    </body>
</html>
"""

BOOTSTRAP_NAV_ITEM_STUB: str = r"""<li class="nav-item"><a href="{{ route('{{ routeName }}.index') }}" class="nav-link {{ request()->routeIs('{{ routeName }}.*') ? 'active' : '' }}">{{ label }}</a></li>
"""

TAILWIND_WELCOME_STUB: str = r"""<x-app-layout>
    <x-slot name="header">
        <h2 class="font-semibold text-xl text-gray-800 leading-tight">
            {{ config('app.name', 'Laravel') }}
        </h2>
    </x-slot>

    <div class="py-12">
        <div class="max-w-7xl mx-auto sm:px-6 lg:px-8">
            <div class="grid grid-cols-1 gap-6 sm:grid-cols-2 lg:grid-cols-3">
{{ quickLinks }}
            </div>
        </div>
    </div>
</x-app-layout>
"""

TAILWIND_WELCOME_LINK_STUB: str = r"""<a href="{{ route('{{ routeName }}.index') }}" class="block rounded-lg bg-white p-6 shadow-sm hover:shadow-md">
    <h3 class="text-lg font-semibold text-gray-800">{{ label }}</h3>
    <p class="mt-1 text-sm text-gray-500">Manage {{ label }}</p>
</a>
"""

TAILWIND_WELCOME_EMPTY_STUB: str = r"""<p class="col-span-full text-gray-500">No CRUD modules yet. Run <code>crudgen Product</code> to create the first one.</p>
"""

BOOTSTRAP_WELCOME_STUB: str = r"""<x-app-layout>
    <div class="container py-4">
        <h1 class="h3 mb-4">{{ config('app.name', 'Laravel') }}</h1>

        <div class="row g-4">
{{ quickLinks }}
        </div>
    </div>
</x-app-layout>
"""

BOOTSTRAP_WELCOME_LINK_STUB: str = r"""<div class="col-sm-6 col-lg-4">
    <a href="{{ route('{{ routeName }}.index') }}" class="card h-100 text-decoration-none">
        <div class="card-body">
            <h2 class="h5 card-title">{{ label }}</h2>
            <p class="card-text text-muted">Manage {{ label }}</p>
        </div>
    </a>
</div>
"""

BOOTSTRAP_WELCOME_EMPTY_STUB: str = r"""<p class="text-muted">No CRUD modules yet. Run <code>crudgen Product</code> to create the first one.</p>
"""

# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

BUILTIN_TEMPLATES: Dict[str, str] = {
    "model.stub": MODEL_STUB,
    "model.relationship.stub": RELATIONSHIP_METHOD_STUB,
    "controller.api.stub": API_CONTROLLER_STUB,
    "controller.api.soft-deletes.stub": API_CONTROLLER_SOFT_DELETES_STUB,
    "controller.web.stub": WEB_CONTROLLER_STUB,
    "controller.web.soft-deletes.stub": WEB_CONTROLLER_SOFT_DELETES_STUB,
    "request.stub": REQUEST_STUB,
    "policy.stub": POLICY_STUB,
    "policy.soft-deletes.stub": POLICY_SOFT_DELETES_STUB,
    "resource.stub": RESOURCE_STUB,
    "migration.stub": MIGRATION_STUB,
    "factory.stub": FACTORY_STUB,
    "factory.trashed.stub": FACTORY_TRASHED_STATE_STUB,
    "seeder.stub": SEEDER_STUB,
    "test.feature.pest.stub": PEST_FEATURE_STUB,
    "test.feature.validation.pest.stub": PEST_FEATURE_VALIDATION_STUB,
    "test.feature.soft-deletes.pest.stub": PEST_FEATURE_SOFT_DELETES_STUB,
    "test.api.pest.stub": PEST_API_STUB,
    "test.api.validation.pest.stub": PEST_API_VALIDATION_STUB,
    "test.api.soft-deletes.pest.stub": PEST_API_SOFT_DELETES_STUB,
    "test.unit.pest.stub": PEST_UNIT_STUB,
    "test.unit.relationships.pest.stub": PEST_UNIT_RELATIONSHIPS_STUB,
    "test.feature.phpunit.stub": PHPUNIT_FEATURE_STUB,
    "test.feature.validation.phpunit.stub": PHPUNIT_FEATURE_VALIDATION_STUB,
    "test.feature.soft-deletes.phpunit.stub": PHPUNIT_FEATURE_SOFT_DELETES_STUB,
    "test.api.phpunit.stub": PHPUNIT_API_STUB,
    "test.api.validation.phpunit.stub": PHPUNIT_API_VALIDATION_STUB,
    "test.api.soft-deletes.phpunit.stub": PHPUNIT_API_SOFT_DELETES_STUB,
    "test.unit.phpunit.stub": PHPUNIT_UNIT_STUB,
    "test.unit.relationships.phpunit.stub": PHPUNIT_UNIT_RELATIONSHIPS_STUB,
    "views/tailwind/index.blade.stub": TAILWIND_INDEX_STUB,
    "views/tailwind/create.blade.stub": TAILWIND_CREATE_STUB,
    "views/tailwind/edit.blade.stub": TAILWIND_EDIT_STUB,
    "views/tailwind/show.blade.stub": TAILWIND_SHOW_STUB,
    "views/bootstrap/index.blade.stub": BOOTSTRAP_INDEX_STUB,
    "views/bootstrap/create.blade.stub": BOOTSTRAP_CREATE_STUB,
    "views/bootstrap/edit.blade.stub": BOOTSTRAP_EDIT_STUB,
    "views/bootstrap/show.blade.stub": BOOTSTRAP_SHOW_STUB,
    "livewire/table.stub": LIVEWIRE_TABLE_STUB,
    "livewire/table.soft-deletes.stub": LIVEWIRE_TABLE_SOFT_DELETES_STUB,
    "livewire/form.stub": LIVEWIRE_FORM_STUB,
    "livewire/views/tailwind/table.blade.stub": LIVEWIRE_TAILWIND_TABLE_VIEW_STUB,
    "livewire/views/tailwind/form.blade.stub": LIVEWIRE_TAILWIND_FORM_VIEW_STUB,
    "livewire/views/bootstrap/table.blade.stub": LIVEWIRE_BOOTSTRAP_TABLE_VIEW_STUB,
    "livewire/views/bootstrap/form.blade.stub": LIVEWIRE_BOOTSTRAP_FORM_VIEW_STUB,
    "layouts/tailwind/app.blade.stub": TAILWIND_LAYOUT_STUB,
    "layouts/tailwind/nav-item.blade.stub": TAILWIND_NAV_ITEM_STUB,
    "layouts/tailwind/nav-item-mobile.blade.stub": TAILWIND_NAV_ITEM_MOBILE_STUB,
    "layouts/bootstrap/app.blade.stub": BOOTSTRAP_LAYOUT_STUB,
    "layouts/bootstrap/nav-item.blade.stub": BOOTSTRAP_NAV_ITEM_STUB,
    "views/tailwind/welcome.blade.stub": TAILWIND_WELCOME_STUB,
    "views/tailwind/welcome.link.blade.stub": TAILWIND_WELCOME_LINK_STUB,
    "views/tailwind/welcome.empty.blade.stub": TAILWIND_WELCOME_EMPTY_STUB,
    "views/bootstrap/welcome.blade.stub": BOOTSTRAP_WELCOME_STUB,
    "views/bootstrap/welcome.link.blade.stub": BOOTSTRAP_WELCOME_LINK_STUB,
    "views/bootstrap/welcome.empty.blade.stub": BOOTSTRAP_WELCOME_EMPTY_STUB,
}


__all__: List[str] = [
    "ReplacementRecord",
    "RecordLike",
    "template_keys",
    "substitute",
    "TemplateRenderer",
    "BUILTIN_TEMPLATES",
]

logger.debug("crudgen.templates loaded, %d built-in templates.", len(BUILTIN_TEMPLATES))
