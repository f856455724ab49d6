"""
tests/test_cli.py
End-to-end tests for the crudgen command line: argument handling, exit
codes and what lands on disk.

Tests cover:
- Successful inline, batch and introspected runs (exit 0)
- Schema validation errors (exit 1)
- Generation failures after rollback (exit 2)
- Configuration errors (exit 3)
- Missing input and malformed field specs (exit 4)
- The publish-layout command
- Logging setup
"""

from __future__ import annotations

import json
import logging
import pathlib

import pytest
from sqlalchemy.engine import Engine

from crudgen.cli import (
    EXIT_CONFIG_ERROR,
    EXIT_GENERATION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
    _setup_logging,
    cli_main,
)

from conftest import LAYOUT, ROUTES_WEB


def _run(*argv: str) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli_main(list(argv))
    return exc_info.value.code


# ===========================================================================
# Success
# ===========================================================================


class TestSuccess:
    def test_inline_model(self, laravel_app: pathlib.Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run(
            "Post",
            "--fields", "title:string:150,body:text:nullable",
            "--belongs-to", "Category",
            "--base-path", str(laravel_app),
        )

        assert code == EXIT_SUCCESS
        assert "NexaFlow CrudGen: Post" in capsys.readouterr().out
        model = (laravel_app / "app" / "Models" / "Post.php").read_text(encoding="utf-8")
        assert "public function category(): \\Illuminate\\Database\\Eloquent\\Relations\\BelongsTo" in model

    def test_quiet_prints_nothing(self, laravel_app: pathlib.Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run("Post", "--fields", "title", "-q", "--base-path", str(laravel_app)) == EXIT_SUCCESS
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_flags_reach_the_options(self, laravel_app: pathlib.Path) -> None:
        code = _run(
            "Invoice",
            "--fields", "number:string:unique,total:decimal",
            "--type", "api",
            "--all",
            "--soft-deletes",
            "--seeder-count", "25",
            "--base-path", str(laravel_app),
        )

        assert code == EXIT_SUCCESS
        assert not (laravel_app / "resources" / "views" / "invoices").exists()
        assert (laravel_app / "routes" / "web.php").read_text(encoding="utf-8") == ROUTES_WEB
        seeder = (laravel_app / "database" / "seeders" / "InvoiceSeeder.php").read_text(encoding="utf-8")
        assert "count(25)" in seeder
        [migration] = (laravel_app / "database" / "migrations").glob("*_create_invoices_table.php")
        assert "$table->softDeletes();" in migration.read_text(encoding="utf-8")

    def test_livewire_shortcut(self, laravel_app: pathlib.Path) -> None:
        assert _run("Product", "--fields", "name", "--livewire", "--base-path", str(laravel_app)) == EXIT_SUCCESS
        assert (laravel_app / "app" / "Livewire" / "Products" / "ProductTable.php").is_file()
        assert (laravel_app / "routes" / "web.php").read_text(encoding="utf-8") == ROUTES_WEB

    def test_batch_document(self, laravel_app: pathlib.Path, batch_yaml_path: pathlib.Path) -> None:
        code = _run("--json", str(batch_yaml_path), "--css", "bootstrap", "--base-path", str(laravel_app))

        assert code == EXIT_SUCCESS
        assert (laravel_app / "app" / "Models" / "Category.php").is_file()
        assert (laravel_app / "app" / "Models" / "Post.php").is_file()
        create = (laravel_app / "resources" / "views" / "posts" / "create.blade.php").read_text(encoding="utf-8")
        assert 'class="form-control' in create
        assert list((laravel_app / "database" / "migrations").glob("*_create_posts_table.php"))
        assert not list((laravel_app / "database").glob("migrations/*_create_categories_table.php"))

    def test_introspection(
        self,
        sqlite_engine: Engine,
        laravel_app: pathlib.Path,
        tmp_path: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run(
            "Post",
            "--database-url", f"sqlite:///{tmp_path / 'database.sqlite'}",
            "--base-path", str(laravel_app),
        )

        assert code == EXIT_SUCCESS
        assert "(introspected)" in capsys.readouterr().out
        model = (laravel_app / "app" / "Models" / "Post.php").read_text(encoding="utf-8")
        assert "'title'" in model

    def test_project_configuration(self, laravel_app: pathlib.Path, tmp_path: pathlib.Path) -> None:
        config = tmp_path / "crudgen.json"
        config.write_text(
            json.dumps({"defaultProfile": "api", "paths": {"models": "src/Models"}}),
            encoding="utf-8",
        )

        code = _run("Post", "--fields", "title", "--config", str(config), "--base-path", str(laravel_app))

        assert code == EXIT_SUCCESS
        assert (laravel_app / "src" / "Models" / "Post.php").is_file()
        assert not (laravel_app / "resources" / "views" / "posts").exists()


# ===========================================================================
# Failures
# ===========================================================================


class TestFailures:
    def test_missing_model_name(self, laravel_app: pathlib.Path) -> None:
        assert _run("--base-path", str(laravel_app)) == EXIT_INPUT_ERROR

    def test_malformed_field_spec(self, laravel_app: pathlib.Path) -> None:
        assert _run("Post", "--fields", "title,,body", "--base-path", str(laravel_app)) == EXIT_INPUT_ERROR
        assert not (laravel_app / "app").exists()

    def test_foreign_key_without_a_model_name(self, laravel_app: pathlib.Path) -> None:
        assert _run("Post", "--fields", "title,2fa_id", "--base-path", str(laravel_app)) == EXIT_INPUT_ERROR
        assert not (laravel_app / "app").exists()

    def test_validation_error(self, laravel_app: pathlib.Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run("Class", "--fields", "title", "--base-path", str(laravel_app)) == EXIT_VALIDATION_ERROR
        assert "MODEL_NAME_PHP_RESERVED" in capsys.readouterr().err
        assert not (laravel_app / "app").exists()

    def test_generation_failure(self, laravel_app: pathlib.Path) -> None:
        # A directory where the model file should go makes the first write fail.
        blocker = laravel_app / "app" / "Models" / "Post.php"
        blocker.mkdir(parents=True)

        code = _run("Post", "--fields", "title", "--force", "--base-path", str(laravel_app))

        assert code == EXIT_GENERATION_ERROR
        assert blocker.is_dir()
        assert not (laravel_app / "app" / "Http").exists()
        assert (laravel_app / "routes" / "web.php").read_text(encoding="utf-8") == ROUTES_WEB

    def test_missing_document(self, laravel_app: pathlib.Path, tmp_path: pathlib.Path) -> None:
        code = _run("--json", str(tmp_path / "missing.yaml"), "--base-path", str(laravel_app))
        assert code == EXIT_CONFIG_ERROR

    def test_invalid_project_configuration(self, laravel_app: pathlib.Path, tmp_path: pathlib.Path) -> None:
        config = tmp_path / "crudgen.yaml"
        config.write_text("perPage: 0\n", encoding="utf-8")
        assert _run("Post", "--config", str(config), "--base-path", str(laravel_app)) == EXIT_CONFIG_ERROR

    def test_invalid_model_name(self, laravel_app: pathlib.Path) -> None:
        assert _run("123", "--fields", "title", "--base-path", str(laravel_app)) == EXIT_CONFIG_ERROR

    def test_unknown_relationship_in_document(self, laravel_app: pathlib.Path, tmp_path: pathlib.Path) -> None:
        document = tmp_path / "crud.json"
        document.write_text(
            json.dumps({"name": "Post", "relationships": [{"type": "hasThrough", "model": "Country"}]}),
            encoding="utf-8",
        )
        assert _run("--json", str(document), "--base-path", str(laravel_app)) == EXIT_CONFIG_ERROR


# ===========================================================================
# publish-layout
# ===========================================================================


class TestPublishLayout:
    def _layout(self, app: pathlib.Path) -> pathlib.Path:
        return app / "resources" / "views" / "components" / "app-layout.blade.php"

    def test_publishes_layout_and_welcome(self, laravel_app: pathlib.Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run(
            "publish-layout",
            "--base-path", str(laravel_app),
            "--force",
            "--welcome",
            "--models", "Post", "Tag",
        )

        assert code == EXIT_SUCCESS
        assert "NexaFlow CrudGen: application layout" in capsys.readouterr().out
        layout = self._layout(laravel_app).read_text(encoding="utf-8")
        assert "route('tags.index')" in layout
        welcome = (laravel_app / "resources" / "views" / "welcome.blade.php").read_text(encoding="utf-8")
        assert "Manage Posts" in welcome

    def test_existing_layout_needs_force(self, laravel_app: pathlib.Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run("publish-layout", "--base-path", str(laravel_app)) == EXIT_SUCCESS
        assert "Skipped" in capsys.readouterr().out
        assert self._layout(laravel_app).read_text(encoding="utf-8") == LAYOUT

    def test_bootstrap_from_command_line(self, laravel_app: pathlib.Path) -> None:
        code = _run("publish-layout", "--css", "bootstrap", "--force", "-q", "--base-path", str(laravel_app))
        assert code == EXIT_SUCCESS
        assert "navbar-nav" in self._layout(laravel_app).read_text(encoding="utf-8")

    def test_invalid_model_name(self, laravel_app: pathlib.Path) -> None:
        code = _run("publish-layout", "--force", "--models", "2fa", "--base-path", str(laravel_app))
        assert code == EXIT_CONFIG_ERROR
        assert self._layout(laravel_app).read_text(encoding="utf-8") == LAYOUT

    def test_generation_extends_published_layout(self, laravel_app: pathlib.Path) -> None:
        assert _run("publish-layout", "--force", "-q", "--base-path", str(laravel_app)) == EXIT_SUCCESS
        code = _run(
            "Post",
            "--fields", "title:string",
            "--type", "web",
            "--add-to-nav",
            "-q",
            "--base-path", str(laravel_app),
        )

        assert code == EXIT_SUCCESS
        assert self._layout(laravel_app).read_text(encoding="utf-8").count("route('posts.index')") == 2


# ===========================================================================
# Logging
# ===========================================================================


class TestLogging:
    @pytest.mark.parametrize(
        "verbosity, level",
        [(-1, logging.CRITICAL + 1), (0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG)],
    )
    def test_levels(self, verbosity: int, level: int) -> None:
        _setup_logging(verbosity)
        crudgen_logger = logging.getLogger("crudgen")
        assert crudgen_logger.level == level
        assert len(crudgen_logger.handlers) == 1
        assert crudgen_logger.propagate is False

    def test_repeated_setup_does_not_duplicate_handlers(self) -> None:
        _setup_logging(1)
        _setup_logging(1)
        assert len(logging.getLogger("crudgen").handlers) == 1
