"""
tests/test_routes.py
Unit tests for crudgen.routes: route registration and navigation links,
the two generators that edit files the application already owns.
"""

from __future__ import annotations

import pathlib
import textwrap
from typing import Callable

import pytest

from crudgen.generators import GenerationContext
from crudgen.models import Schema
from crudgen.routes import NavigationUpdater, RouteGenerator, insert_use_statement

from conftest import LAYOUT, ROUTES_WEB

ContextFactory = Callable[..., GenerationContext]


# ===========================================================================
# insert_use_statement
# ===========================================================================


class TestInsertUseStatement:
    USE = "use App\\Http\\Controllers\\PostController;"

    def test_after_last_use(self) -> None:
        result = insert_use_statement(ROUTES_WEB, self.USE)
        assert "use Illuminate\\Support\\Facades\\Route;\n" + self.USE + "\n" in result

    def test_after_open_tag_without_uses(self) -> None:
        result = insert_use_statement("<?php\n\nRoute::get('/', fn () => 'ok');\n", self.USE)
        assert result == "<?php\n\n" + self.USE + "\n\nRoute::get('/', fn () => 'ok');\n"

    def test_without_open_tag(self) -> None:
        result = insert_use_statement("Route::get('/', fn () => 'ok');\n", self.USE)
        assert result.startswith("<?php\n\n" + self.USE + "\n\n")

    def test_existing_import_is_kept_once(self) -> None:
        content = insert_use_statement(ROUTES_WEB, self.USE)
        assert insert_use_statement(content, self.USE) == content


# ===========================================================================
# RouteGenerator
# ===========================================================================


class TestRouteGenerator:
    def test_registers_web_and_api_routes(self, make_context: ContextFactory, post_schema: Schema, laravel_app: pathlib.Path) -> None:
        web, api = RouteGenerator(make_context(post_schema)).generate()
        assert web.updated and api.updated

        web_routes = (laravel_app / "routes" / "web.php").read_text(encoding="utf-8")
        assert "use App\\Http\\Controllers\\PostController;" in web_routes
        assert web_routes.endswith("\nRoute::resource('posts', PostController::class);\n")

        api_routes = (laravel_app / "routes" / "api.php").read_text(encoding="utf-8")
        assert "use App\\Http\\Controllers\\Api\\PostController;" in api_routes
        assert "Route::apiResource('posts', PostController::class)->names('api.posts');" in api_routes

    def test_soft_delete_routes(self, make_context: ContextFactory, post_schema: Schema, laravel_app: pathlib.Path) -> None:
        RouteGenerator(make_context(post_schema, soft_deletes=True)).generate()
        web_routes = (laravel_app / "routes" / "web.php").read_text(encoding="utf-8")
        api_routes = (laravel_app / "routes" / "api.php").read_text(encoding="utf-8")
        assert (
            "Route::post('posts/{id}/restore', [PostController::class, 'restore'])"
            "->name('posts.restore');"
        ) in web_routes
        assert (
            "Route::delete('posts/{id}/force-delete', [PostController::class, 'forceDelete'])"
            "->name('api.posts.force-delete');"
        ) in api_routes

    def test_second_run_is_a_no_op(self, make_context: ContextFactory, post_schema: Schema, laravel_app: pathlib.Path) -> None:
        RouteGenerator(make_context(post_schema, profile="web")).generate()
        before = (laravel_app / "routes" / "web.php").read_text(encoding="utf-8")

        [again] = RouteGenerator(make_context(post_schema, profile="web")).generate()

        assert again.skipped
        assert (laravel_app / "routes" / "web.php").read_text(encoding="utf-8") == before
        assert before.count("Route::resource('posts'") == 1

    def test_missing_route_file_is_reported(self, make_context: ContextFactory, post_schema: Schema, laravel_app: pathlib.Path) -> None:
        (laravel_app / "routes" / "api.php").unlink()
        [api] = RouteGenerator(make_context(post_schema, profile="api")).generate()
        assert api.skipped
        assert api.content == ""
        assert not (laravel_app / "routes" / "api.php").exists()

    def test_livewire_registers_nothing(self, make_context: ContextFactory, post_schema: Schema) -> None:
        assert RouteGenerator(make_context(post_schema, profile="livewire")).generate() == []

    def test_rollback_restores_route_file(self, make_context: ContextFactory, post_schema: Schema, laravel_app: pathlib.Path) -> None:
        context = make_context(post_schema, profile="web")
        RouteGenerator(context).generate()
        context.writer.tracker.rollback()
        assert (laravel_app / "routes" / "web.php").read_text(encoding="utf-8") == ROUTES_WEB


# ===========================================================================
# NavigationUpdater
# ===========================================================================


class TestNavigationUpdater:
    def _layout(self, app: pathlib.Path) -> pathlib.Path:
        return app / "resources" / "views" / "components" / "app-layout.blade.php"

    def test_clones_nav_link_component(self, make_context: ContextFactory, post_schema: Schema, laravel_app: pathlib.Path) -> None:
        [artifact] = NavigationUpdater(make_context(post_schema)).generate()
        assert artifact.updated
        content = self._layout(laravel_app).read_text(encoding="utf-8")
        dashboard_line = (
            "        <x-nav-link :href=\"route('dashboard')\" "
            ":active=\"request()->routeIs('dashboard')\">{{ __('Dashboard') }}</x-nav-link>"
        )
        posts_line = (
            "        <x-nav-link :href=\"route('posts.index')\" "
            ":active=\"request()->routeIs('posts.*')\">{{ __('Posts') }}</x-nav-link>"
        )
        assert dashboard_line + "\n" + posts_line + "\n" in content

    def test_second_run_is_a_no_op(self, make_context: ContextFactory, post_schema: Schema, laravel_app: pathlib.Path) -> None:
        NavigationUpdater(make_context(post_schema)).generate()
        [again] = NavigationUpdater(make_context(post_schema)).generate()
        assert again.skipped
        assert self._layout(laravel_app).read_text(encoding="utf-8").count("posts.index") == 1

    def test_plain_bootstrap_link(self, make_context: ContextFactory, laravel_app: pathlib.Path) -> None:
        self._layout(laravel_app).write_text(
            textwrap.dedent(
                """\
                <ul class="navbar-nav">
                    <li class="nav-item"><a class="nav-link" href="{{ route('dashboard') }}">Dashboard</a></li>
                </ul>
                """
            ),
            encoding="utf-8",
        )
        schema = Schema(model_name="BlogPost")
        NavigationUpdater(make_context(schema)).generate()
        content = self._layout(laravel_app).read_text(encoding="utf-8")
        assert (
            '    <li class="nav-item"><a class="nav-link" '
            "href=\"{{ route('blog-posts.index') }}\">Blog Posts</a></li>"
        ) in content

    @pytest.mark.parametrize("layout", ["<nav></nav>\n", LAYOUT.replace("dashboard", "home").replace("Dashboard", "Home")])
    def test_layout_without_dashboard_link(
        self, layout: str, make_context: ContextFactory, post_schema: Schema, laravel_app: pathlib.Path
    ) -> None:
        self._layout(laravel_app).write_text(layout, encoding="utf-8")
        [artifact] = NavigationUpdater(make_context(post_schema)).generate()
        assert artifact.skipped
        assert self._layout(laravel_app).read_text(encoding="utf-8") == layout

    def test_missing_layout(self, make_context: ContextFactory, post_schema: Schema, laravel_app: pathlib.Path) -> None:
        self._layout(laravel_app).unlink()
        [artifact] = NavigationUpdater(make_context(post_schema)).generate()
        assert artifact.skipped
