"""
tests/test_layout.py
Unit tests for crudgen.layout.

Tests cover:
- Module links derived from model names
- Detection of CRUD modules from models and web controllers
- The Tailwind and Bootstrap layouts, and NavigationUpdater extending them
- The welcome page with and without modules
- Skip/force behaviour, template overrides and rollback on failure
"""

from __future__ import annotations

import pathlib
from typing import Callable

import pytest

from crudgen.exceptions import GenerationFailure, MalformedConfiguration
from crudgen.generators import GenerationContext
from crudgen.layout import LayoutPublisher, ModuleLink
from crudgen.models import CrudConfig, CssFramework, Schema
from crudgen.routes import NavigationUpdater
from crudgen.templates import BUILTIN_TEMPLATES, TemplateRenderer, template_keys

from conftest import LAYOUT

ContextFactory = Callable[..., GenerationContext]


def _layout(app: pathlib.Path) -> pathlib.Path:
    return app / "resources" / "views" / "components" / "app-layout.blade.php"


def _welcome(app: pathlib.Path) -> pathlib.Path:
    return app / "resources" / "views" / "welcome.blade.php"


def _touch(path: pathlib.Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("<?php\n", encoding="utf-8")


@pytest.fixture()
def fresh_app(laravel_app: pathlib.Path) -> pathlib.Path:
    """The application without a layout component."""
    _layout(laravel_app).unlink()
    return laravel_app


# ===========================================================================
# Module links
# ===========================================================================


class TestModuleLink:
    def test_names_follow_the_resource_routes(self) -> None:
        link = ModuleLink.for_model("blog_post")
        assert link.model_name == "BlogPost"
        assert link.route_name == "blog-posts"
        assert link.label == "Blog Posts"

    def test_invalid_model_name(self) -> None:
        with pytest.raises(MalformedConfiguration, match="not a valid model name"):
            ModuleLink.for_model("9lives")

    def test_duplicates_collapse(self) -> None:
        links = LayoutPublisher.links_for(["Post", "post", "Category"])
        assert [link.model_name for link in links] == ["Post", "Category"]


# ===========================================================================
# Module detection
# ===========================================================================


class TestDetectModels:
    def test_models_with_web_controllers(self, crud_config: CrudConfig, laravel_app: pathlib.Path) -> None:
        for name in ("User", "Post", "Tag", "Category", "Invoice"):
            _touch(laravel_app / "app" / "Models" / f"{name}.php")
        for name in ("User", "Post", "Category"):
            _touch(laravel_app / "app" / "Http" / "Controllers" / f"{name}Controller.php")
        _touch(laravel_app / "app" / "Http" / "Controllers" / "Api" / "InvoiceController.php")

        assert LayoutPublisher(crud_config).detect_models() == ["Category", "Post"]

    def test_no_models_directory(self, crud_config: CrudConfig) -> None:
        assert LayoutPublisher(crud_config).detect_models() == []

    def test_detected_models_are_linked(self, crud_config: CrudConfig, fresh_app: pathlib.Path) -> None:
        _touch(fresh_app / "app" / "Models" / "Post.php")
        _touch(fresh_app / "app" / "Http" / "Controllers" / "PostController.php")

        report = LayoutPublisher(crud_config).publish()

        assert report.models == ["Post"]
        assert "route('posts.index')" in _layout(fresh_app).read_text(encoding="utf-8")


# ===========================================================================
# Layout
# ===========================================================================


class TestLayout:
    def test_tailwind_links_desktop_and_mobile(self, crud_config: CrudConfig, fresh_app: pathlib.Path) -> None:
        report = LayoutPublisher(crud_config).publish(models=["Post", "BlogPost"])

        [artifact] = report.written
        assert artifact.kind == "layout"
        content = _layout(fresh_app).read_text(encoding="utf-8")
        desktop = (
            " " * 32
            + "<a href=\"{{ route('blog-posts.index') }}\" class=\"text-sm font-medium "
            "{{ request()->routeIs('blog-posts.*') ? 'text-blue-600' : 'text-gray-500 hover:text-gray-700' }}\">"
            "Blog Posts</a>\n"
        )
        assert desktop in content
        assert content.count("route('posts.index')") == 2
        assert content.count("route('blog-posts.index')") == 2
        assert content.index("route('posts.index')") < content.index("route('blog-posts.index')")

    def test_layout_renders_header_and_slot(self, crud_config: CrudConfig, fresh_app: pathlib.Path) -> None:
        LayoutPublisher(crud_config).publish(models=["Post"])
        content = _layout(fresh_app).read_text(encoding="utf-8")
        assert "@isset($header)" in content
        assert "{{ $header }}" in content
        assert "{{ $slot }}" in content
        assert template_keys(content) == set()

    def test_without_modules_only_dashboard(self, crud_config: CrudConfig, fresh_app: pathlib.Path) -> None:
        report = LayoutPublisher(crud_config).publish()
        content = _layout(fresh_app).read_text(encoding="utf-8")
        assert report.models == []
        assert content.count("route('dashboard')") == 2
        assert ".index')" not in content
        assert template_keys(content) == set()

    def test_bootstrap(self, crud_config: CrudConfig, fresh_app: pathlib.Path) -> None:
        LayoutPublisher(crud_config).publish(css=CssFramework.BOOTSTRAP, models=["Post"])
        content = _layout(fresh_app).read_text(encoding="utf-8")
        assert "navbar-nav" in content
        assert "bootstrap.min.css" in content
        assert (
            " " * 24
            + "<li class=\"nav-item\"><a href=\"{{ route('posts.index') }}\" class=\"nav-link "
            "{{ request()->routeIs('posts.*') ? 'active' : '' }}\">Posts</a></li>\n"
        ) in content

    def test_css_defaults_to_project_config(self, fresh_app: pathlib.Path) -> None:
        config = CrudConfig(base_path=fresh_app, default_css=CssFramework.BOOTSTRAP)
        report = LayoutPublisher(config).publish()
        assert report.css is CssFramework.BOOTSTRAP
        assert "navbar" in _layout(fresh_app).read_text(encoding="utf-8")

    @pytest.mark.parametrize("css", [CssFramework.TAILWIND, CssFramework.BOOTSTRAP])
    def test_navigation_updater_extends_published_layout(
        self,
        css: CssFramework,
        crud_config: CrudConfig,
        fresh_app: pathlib.Path,
        make_context: ContextFactory,
        post_schema: Schema,
    ) -> None:
        publisher = LayoutPublisher(crud_config)
        publisher.publish(css=css, models=["Post"])
        expected = _layout(fresh_app).read_text(encoding="utf-8")

        publisher.publish(css=css, force=True)
        [artifact] = NavigationUpdater(make_context(post_schema)).generate()

        assert artifact.updated
        assert _layout(fresh_app).read_text(encoding="utf-8") == expected

    def test_existing_layout_is_kept(self, crud_config: CrudConfig, laravel_app: pathlib.Path) -> None:
        report = LayoutPublisher(crud_config).publish(models=["Post"])
        assert [a.kind for a in report.skipped] == ["layout"]
        assert report.written == []
        assert _layout(laravel_app).read_text(encoding="utf-8") == LAYOUT
        assert "Skipped" in report.summary()

    def test_force_overwrites(self, crud_config: CrudConfig, laravel_app: pathlib.Path) -> None:
        report = LayoutPublisher(crud_config).publish(force=True, models=["Post"])
        assert len(report.written) == 1
        assert "route('posts.index')" in _layout(laravel_app).read_text(encoding="utf-8")

    def test_project_override_template(self, crud_config: CrudConfig, fresh_app: pathlib.Path) -> None:
        override = crud_config.stub_directory / "layouts" / "tailwind" / "app.blade.stub"
        override.parent.mkdir(parents=True)
        override.write_text("<nav>\n{{ navItems }}\n</nav>\n", encoding="utf-8")

        LayoutPublisher(crud_config).publish(models=["Tag"])

        content = _layout(fresh_app).read_text(encoding="utf-8")
        assert content.startswith("<nav>\n" + " " * 32 + "<a href=\"{{ route('tags.index') }}\"")
        assert content.endswith("</a>\n</nav>\n")

    def test_invalid_model_writes_nothing(self, crud_config: CrudConfig, fresh_app: pathlib.Path) -> None:
        with pytest.raises(MalformedConfiguration):
            LayoutPublisher(crud_config).publish(models=["Post", "2fa"])
        assert not _layout(fresh_app).exists()


# ===========================================================================
# Welcome page
# ===========================================================================


class TestWelcome:
    def test_quick_links(self, crud_config: CrudConfig, fresh_app: pathlib.Path) -> None:
        report = LayoutPublisher(crud_config).publish(welcome=True, models=["Post", "Category"])

        assert [a.kind for a in report.written] == ["layout", "welcome"]
        content = _welcome(fresh_app).read_text(encoding="utf-8")
        assert content.startswith("<x-app-layout>")
        assert "                <a href=\"{{ route('posts.index') }}\"" in content
        assert "Manage Categories" in content
        assert "No CRUD modules yet" not in content
        assert template_keys(content) == set()

    @pytest.mark.parametrize("css", [CssFramework.TAILWIND, CssFramework.BOOTSTRAP])
    def test_empty_state(self, css: CssFramework, crud_config: CrudConfig, fresh_app: pathlib.Path) -> None:
        LayoutPublisher(crud_config).publish(css=css, welcome=True)
        content = _welcome(fresh_app).read_text(encoding="utf-8")
        assert "No CRUD modules yet" in content
        assert ".index')" not in content

    def test_bootstrap_cards(self, crud_config: CrudConfig, fresh_app: pathlib.Path) -> None:
        LayoutPublisher(crud_config).publish(css=CssFramework.BOOTSTRAP, welcome=True, models=["Post"])
        content = _welcome(fresh_app).read_text(encoding="utf-8")
        assert '            <div class="col-sm-6 col-lg-4">\n' in content
        assert "class=\"card h-100 text-decoration-none\"" in content

    def test_welcome_only_on_request(self, crud_config: CrudConfig, fresh_app: pathlib.Path) -> None:
        LayoutPublisher(crud_config).publish(models=["Post"])
        assert not _welcome(fresh_app).exists()


# ===========================================================================
# Rollback
# ===========================================================================


class TestRollback:
    """A failing page undoes every write of the run."""

    @pytest.fixture()
    def broken_renderer(self) -> TemplateRenderer:
        templates = dict(BUILTIN_TEMPLATES)
        templates["views/tailwind/welcome.blade.stub"] = "{{ undefinedKey }}\n"
        return TemplateRenderer(templates=templates)

    def test_created_layout_is_removed(
        self, crud_config: CrudConfig, fresh_app: pathlib.Path, broken_renderer: TemplateRenderer
    ) -> None:
        with pytest.raises(GenerationFailure, match="'welcome'") as exc_info:
            LayoutPublisher(crud_config, renderer=broken_renderer).publish(welcome=True, models=["Post"])

        assert str(_layout(fresh_app)) in exc_info.value.rolled_back_files
        assert not _layout(fresh_app).exists()
        assert not _welcome(fresh_app).exists()

    def test_overwritten_layout_is_restored(
        self, crud_config: CrudConfig, laravel_app: pathlib.Path, broken_renderer: TemplateRenderer
    ) -> None:
        with pytest.raises(GenerationFailure) as exc_info:
            LayoutPublisher(crud_config, renderer=broken_renderer).publish(
                force=True, welcome=True, models=["Post"]
            )

        assert exc_info.value.restored_files == [str(_layout(laravel_app))]
        assert _layout(laravel_app).read_text(encoding="utf-8") == LAYOUT
