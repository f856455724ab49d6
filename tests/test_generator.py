"""
tests/test_generator.py
Integration tests for crudgen.generator: the CrudGenerator orchestrator.

Tests cover:
- Step plan per option combination
- End-to-end generation into a Laravel-shaped tree
- Skip-existing behaviour on a second run
- Introspection through an injected catalog and through database_url
- Validation and resolution failures (nothing written)
- Rollback on a failing step, including restored route files and
  force-overwritten artifacts
- A failure in the middle of the plan: later steps never run
- Batch generation and partial-batch failure reporting
"""

from __future__ import annotations

import pathlib
from typing import List

import pytest
from sqlalchemy.engine import Engine

from crudgen.exceptions import GenerationFailure, MalformedFieldSpec, SchemaValidationError
from crudgen.generator import CrudGenerator, GenerationState, Step
from crudgen.generators import ArtifactGenerator
from crudgen.introspector import SqlAlchemyCatalog
from crudgen.models import CrudConfig, GeneratedArtifact, GenerationOptions
from crudgen.resolver import GenerationRequest

from conftest import ROUTES_API, ROUTES_WEB


# ===========================================================================
# Helpers
# ===========================================================================


class ExplodingGenerator(ArtifactGenerator):
    """Fails for one model, after every regular step has written its files."""

    kind = "explosion"
    victim = "Post"

    def generate(self) -> List[GeneratedArtifact]:
        if self.schema.model_name == self.victim:
            raise RuntimeError("disk full")
        return []


class FailingCrudGenerator(CrudGenerator):
    @staticmethod
    def plan(options: GenerationOptions) -> List[Step]:
        return CrudGenerator.plan(options) + [("explode", ExplodingGenerator)]


class HalfWrittenGenerator(ArtifactGenerator):
    """Writes one file, then fails before finishing its step."""

    kind = "partial"

    def generate(self) -> List[GeneratedArtifact]:
        self.context.writer.write(
            self.config.base_path / "app" / "Partial" / "PostPartial.php",
            "<?php // half done\n",
            kind=self.kind,
        )
        raise RuntimeError("template engine crashed")


class RecordingGenerator(ArtifactGenerator):
    """Records every model it runs for."""

    kind = "recording"
    calls: List[str] = []

    def generate(self) -> List[GeneratedArtifact]:
        RecordingGenerator.calls.append(self.schema.model_name)
        return []


class MidPlanFailingCrudGenerator(CrudGenerator):
    @staticmethod
    def plan(options: GenerationOptions) -> List[Step]:
        steps = CrudGenerator.plan(options)
        return steps[:2] + [("partial", HalfWrittenGenerator), ("recording", RecordingGenerator)] + steps[2:]


def _request(name: str = "Post", **options: object) -> GenerationRequest:
    return GenerationRequest(
        model_name=name,
        options=GenerationOptions(**options),
        fields="title:string:150, body:text:nullable",
        belongs_to=("Category",),
    )


def _names(steps: List[Step]) -> List[str]:
    return [name for name, _ in steps]


# ===========================================================================
# Plan
# ===========================================================================


class TestPlan:
    def test_default_plan(self) -> None:
        assert _names(CrudGenerator.plan(GenerationOptions())) == [
            "model", "controllers", "requests", "policy", "views", "resource", "routes",
        ]

    def test_livewire_plan(self) -> None:
        assert _names(CrudGenerator.plan(GenerationOptions(profile="livewire"))) == [
            "model", "controllers", "requests", "policy", "components", "routes",
        ]

    def test_api_plan_with_everything(self) -> None:
        options = GenerationOptions(profile="api", generate_all=True, no_policy=True, add_to_nav=True)
        assert _names(CrudGenerator.plan(options)) == [
            "model", "controllers", "requests", "resource",
            "migration", "factory", "seeder", "tests",
            "routes",
        ]

    @pytest.mark.parametrize("profile, linked", [("web", True), ("both", True), ("api", False), ("livewire", False)])
    def test_navigation_only_with_web_routes(self, profile: str, linked: bool) -> None:
        options = GenerationOptions(profile=profile, add_to_nav=True)
        assert ("navigation" in _names(CrudGenerator.plan(options))) is linked

    def test_tests_flag_alone(self) -> None:
        options = GenerationOptions(profile="web", tests=True, no_requests=True)
        assert _names(CrudGenerator.plan(options)) == [
            "model", "controllers", "policy", "views", "tests", "routes",
        ]

    def test_api_resource_on_web_profile(self) -> None:
        options = GenerationOptions(profile="web", api_resource=True)
        assert "resource" in _names(CrudGenerator.plan(options))


# ===========================================================================
# Generate
# ===========================================================================


class TestGenerate:
    def test_full_run(self, crud_config: CrudConfig, laravel_app: pathlib.Path) -> None:
        generator = CrudGenerator(crud_config)
        report = generator.generate(_request())

        assert report.success
        assert generator.state is GenerationState.COMPLETED
        assert report.model_name == "Post"
        assert not report.introspected
        assert [m.step_name for m in report.step_metrics] == [
            "resolve", "validate",
            "model", "controllers", "requests", "policy", "views", "resource", "routes",
        ]
        assert (laravel_app / "app" / "Models" / "Post.php").is_file()
        assert (laravel_app / "resources" / "views" / "posts" / "index.blade.php").is_file()
        assert (laravel_app / "app" / "Http" / "Resources" / "PostResource.php").is_file()
        assert "Route::resource('posts', PostController::class);" in (
            laravel_app / "routes" / "web.php"
        ).read_text(encoding="utf-8")
        assert [a.kind for a in report.updated] == ["web routes", "api routes"]
        assert report.skipped == []
        assert report.total_lines > 0

        summary = report.summary()
        assert "NexaFlow CrudGen: Post" in summary
        assert "SUCCESS" in summary
        assert "both (tailwind)" in summary

    def test_second_run_skips_everything(self, crud_config: CrudConfig) -> None:
        generator = CrudGenerator(crud_config)
        first = generator.generate(_request())
        second = generator.generate(_request())

        assert second.success
        assert second.written_count == 0
        assert len(second.skipped) == len(first.artifacts)
        assert "Skipped (already present):" in second.summary()

    def test_generate_all_writes_migration(self, crud_config: CrudConfig, laravel_app: pathlib.Path) -> None:
        CrudGenerator(crud_config).generate(_request(generate_all=True))
        migrations = list((laravel_app / "database" / "migrations").glob("*_create_posts_table.php"))
        assert len(migrations) == 1
        assert (laravel_app / "database" / "seeders" / "PostSeeder.php").is_file()

    def test_introspection_through_catalog(
        self, crud_config: CrudConfig, sqlite_catalog: SqlAlchemyCatalog, laravel_app: pathlib.Path
    ) -> None:
        report = CrudGenerator(crud_config, catalog=sqlite_catalog).generate(GenerationRequest("Post"))
        assert report.introspected
        assert report.options is not None and report.options.soft_deletes
        assert "(introspected)" in report.step_metrics[0].detail
        model = (laravel_app / "app" / "Models" / "Post.php").read_text(encoding="utf-8")
        assert "use Illuminate\\Database\\Eloquent\\SoftDeletes;" in model

    def test_introspection_through_database_url(
        self, sqlite_engine: Engine, laravel_app: pathlib.Path, tmp_path: pathlib.Path
    ) -> None:
        config = CrudConfig(
            base_path=laravel_app, database_url=f"sqlite:///{tmp_path / 'database.sqlite'}"
        )
        report = CrudGenerator(config).generate(GenerationRequest("Post", GenerationOptions(profile="api")))
        assert report.introspected

    def test_validation_errors_write_nothing(self, crud_config: CrudConfig, laravel_app: pathlib.Path) -> None:
        generator = CrudGenerator(crud_config)
        with pytest.raises(SchemaValidationError) as exc_info:
            generator.generate(GenerationRequest("Class", fields="title"))

        assert "MODEL_NAME_PHP_RESERVED" in exc_info.value.result.codes
        assert generator.state is GenerationState.FAILED
        assert not (laravel_app / "app").exists()
        assert (laravel_app / "routes" / "web.php").read_text(encoding="utf-8") == ROUTES_WEB

    def test_resolution_errors_propagate(self, crud_config: CrudConfig) -> None:
        generator = CrudGenerator(crud_config)
        with pytest.raises(MalformedFieldSpec):
            generator.generate(GenerationRequest("Post", fields="title,,body"))
        assert generator.state is GenerationState.FAILED

    def test_unmodelable_foreign_key_fails_cleanly(self, crud_config: CrudConfig) -> None:
        generator = CrudGenerator(crud_config)
        with pytest.raises(MalformedFieldSpec, match="2fa_id"):
            generator.generate(GenerationRequest("Post", fields="title,2fa_id"))
        assert generator.state is GenerationState.FAILED

    def test_validation_warnings_are_reported(self, crud_config: CrudConfig) -> None:
        report = CrudGenerator(crud_config).generate(GenerationRequest("News", fields="headline"))
        assert report.success
        assert any("MODEL_PLURAL_SAME_AS_SINGULAR" in w for w in report.validation_warnings)


# ===========================================================================
# Rollback
# ===========================================================================


class TestRollback:
    def test_failed_step_rolls_back_the_model(self, crud_config: CrudConfig, laravel_app: pathlib.Path) -> None:
        generator = FailingCrudGenerator(crud_config)
        with pytest.raises(GenerationFailure) as exc_info:
            generator.generate(_request())

        failure = exc_info.value
        assert failure.model_name == "Post"
        assert isinstance(failure.__cause__, RuntimeError)
        assert "'explode'" in str(failure)
        assert failure.rolled_back_files
        assert sorted(failure.restored_files) == sorted(
            [str(laravel_app / "routes" / "api.php"), str(laravel_app / "routes" / "web.php")]
        )
        assert failure.rollback_errors == []
        assert generator.state is GenerationState.FAILED

        assert not (laravel_app / "app").exists()
        assert not (laravel_app / "resources" / "views" / "posts").exists()
        assert (laravel_app / "routes" / "web.php").read_text(encoding="utf-8") == ROUTES_WEB
        assert (laravel_app / "routes" / "api.php").read_text(encoding="utf-8") == ROUTES_API

    def test_failure_mid_plan_stops_later_steps(
        self, crud_config: CrudConfig, laravel_app: pathlib.Path
    ) -> None:
        RecordingGenerator.calls.clear()
        generator = MidPlanFailingCrudGenerator(crud_config)
        with pytest.raises(GenerationFailure) as exc_info:
            generator.generate(_request())

        failure = exc_info.value
        assert "'partial'" in str(failure)
        assert str(laravel_app / "app" / "Partial" / "PostPartial.php") in failure.rolled_back_files
        assert str(laravel_app / "app" / "Models" / "Post.php") in failure.rolled_back_files
        assert failure.restored_files == []
        assert generator.state is GenerationState.FAILED
        assert RecordingGenerator.calls == []

        assert not (laravel_app / "app").exists()
        assert not (laravel_app / "resources" / "views" / "posts").exists()
        assert (laravel_app / "routes" / "web.php").read_text(encoding="utf-8") == ROUTES_WEB
        assert (laravel_app / "routes" / "api.php").read_text(encoding="utf-8") == ROUTES_API

    def test_overwritten_files_are_restored(self, crud_config: CrudConfig, laravel_app: pathlib.Path) -> None:
        model = laravel_app / "app" / "Models" / "Post.php"
        model.parent.mkdir(parents=True)
        model.write_text("<?php // hand-written\n", encoding="utf-8")

        with pytest.raises(GenerationFailure) as exc_info:
            FailingCrudGenerator(crud_config).generate(_request(force=True))

        assert str(model) in exc_info.value.restored_files
        assert model.read_text(encoding="utf-8") == "<?php // hand-written\n"
        assert not (laravel_app / "app" / "Http").exists()


# ===========================================================================
# Batches
# ===========================================================================


class TestBatch:
    def test_batch_generates_in_order(self, crud_config: CrudConfig, laravel_app: pathlib.Path) -> None:
        batch = CrudGenerator(crud_config).generate_batch(
            [GenerationRequest("Category", fields="name:string:unique"), _request()]
        )
        assert batch.success
        assert batch.model_names == ["Category", "Post"]
        assert batch.written_count == sum(r.written_count for r in batch.reports)
        assert "2 model(s) generated" in batch.summary()
        web = (laravel_app / "routes" / "web.php").read_text(encoding="utf-8")
        assert web.index("'categories'") < web.index("'posts'")

    def test_failure_keeps_completed_models(self, crud_config: CrudConfig, laravel_app: pathlib.Path) -> None:
        generator = FailingCrudGenerator(crud_config)
        with pytest.raises(GenerationFailure) as exc_info:
            generator.generate_batch(
                [GenerationRequest("Category", fields="name"), _request(), GenerationRequest("Tag")]
            )

        completed = exc_info.value.completed_reports
        assert [r.model_name for r in completed] == ["Category"]
        assert (laravel_app / "app" / "Models" / "Category.php").is_file()
        assert not (laravel_app / "app" / "Models" / "Post.php").exists()
        assert not (laravel_app / "app" / "Models" / "Tag.php").exists()
        web = (laravel_app / "routes" / "web.php").read_text(encoding="utf-8")
        assert "'categories'" in web
        assert "'posts'" not in web

    def test_validation_failure_stops_batch(self, crud_config: CrudConfig, laravel_app: pathlib.Path) -> None:
        with pytest.raises(SchemaValidationError):
            CrudGenerator(crud_config).generate_batch(
                [GenerationRequest("Category", fields="name"), GenerationRequest("Class", fields="title")]
            )
        assert (laravel_app / "app" / "Models" / "Category.php").is_file()
