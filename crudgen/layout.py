# File: crudgen/layout.py
"""
NexaFlow CrudGen - Application Layout Publishing
==================================================
Writes the ``<x-app-layout>`` component every generated view renders
inside, and optionally a welcome page linking to each CRUD module.

Workflow::

    1. Models:   the names given on the command line, or every model under
                 ``app/Models`` (except ``User``) that has a web controller.
    2. Layout:   ``layouts/<css>/app.blade.stub`` with one navigation link
                 per model after the Dashboard link, desktop and mobile.
    3. Welcome:  ``views/<css>/welcome.blade.stub`` with a card per model,
                 or an empty-state hint when there are none (``--welcome``).

The layout keeps a Dashboard link in the shape ``NavigationUpdater``
recognises, so later ``--add-to-nav`` runs extend it.  Existing files are
skipped unless ``force`` is set, and a failure rolls back every write of
the run exactly like a model generation does.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple, Type

from pydantic import ValidationError

from crudgen.exceptions import GenerationFailure, MalformedConfiguration
from crudgen.exporters import ArtifactTracker, ArtifactWriter, RollbackResult
from crudgen.generators import block
from crudgen.models import CrudConfig, CssFramework, GeneratedArtifact, Schema
from crudgen.templates import ReplacementRecord, TemplateRenderer
from crudgen.utils import Timer, to_pascal_case, to_title_human

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.layout")

# Models that never get a CRUD link of their own.
EXCLUDED_MODELS: FrozenSet[str] = frozenset({"User"})


# ---------------------------------------------------------------------------
# Replacement records
# ---------------------------------------------------------------------------


class LinkRecord(ReplacementRecord):
    route_name: str
    label: str


class LayoutRecord(ReplacementRecord):
    nav_items: str = ""
    nav_items_mobile: str = ""


class WelcomeRecord(ReplacementRecord):
    quick_links: str = ""


@dataclass(frozen=True, slots=True)
class ModuleLink:
    """One CRUD module as it appears in the navigation and on the welcome page."""

    model_name: str
    route_name: str
    label: str

    @classmethod
    def for_model(cls, name: str) -> "ModuleLink":
        try:
            schema: Schema = Schema(model_name=to_pascal_case(name))
        except ValidationError as exc:
            raise MalformedConfiguration(f"'{name}' is not a valid model name.") from exc
        return cls(
            model_name=schema.model_name,
            route_name=schema.route_name,
            label=to_title_human(schema.model_plural),
        )

    def record(self) -> LinkRecord:
        return LinkRecord(route_name=self.route_name, label=self.label)


# ---------------------------------------------------------------------------
# Page generators
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LinkSlot:
    """A block placeholder filled with one rendered template per module."""

    field_name: str
    template: str
    level: int


class PageGenerator:
    """Renders one Blade page from a skeleton plus per-module link fragments."""

    kind: str = ""

    def __init__(
        self,
        config: CrudConfig,
        renderer: TemplateRenderer,
        writer: ArtifactWriter,
        css: CssFramework,
        force: bool = False,
    ) -> None:
        self.config: CrudConfig = config
        self.renderer: TemplateRenderer = renderer
        self.writer: ArtifactWriter = writer
        self.css: CssFramework = css
        self.force: bool = force

    @property
    def target(self) -> Path:
        raise NotImplementedError

    def render_links(self, links: Sequence[ModuleLink], template: str, level: int) -> str:
        lines: List[str] = []
        for link in links:
            lines.extend(self.renderer.render(template, link.record()).rstrip("\n").split("\n"))
        return block(lines, level)

    def render(self, links: Sequence[ModuleLink]) -> str:
        raise NotImplementedError

    def generate(self, links: Sequence[ModuleLink]) -> GeneratedArtifact:
        return self.writer.write(self.target, self.render(links), force=self.force, kind=self.kind)


_LAYOUT_SLOTS: Dict[CssFramework, Tuple[LinkSlot, ...]] = {
    CssFramework.TAILWIND: (
        LinkSlot("nav_items", "layouts/tailwind/nav-item.blade.stub", 8),
        LinkSlot("nav_items_mobile", "layouts/tailwind/nav-item-mobile.blade.stub", 6),
    ),
    CssFramework.BOOTSTRAP: (
        LinkSlot("nav_items", "layouts/bootstrap/nav-item.blade.stub", 6),
    ),
}

_WELCOME_LINK_LEVEL: Dict[CssFramework, int] = {
    CssFramework.TAILWIND: 4,
    CssFramework.BOOTSTRAP: 3,
}


class LayoutGenerator(PageGenerator):
    """The ``<x-app-layout>`` component with a navigation link per module."""

    kind = "layout"

    @property
    def target(self) -> Path:
        return self.config.path("layout")

    def render(self, links: Sequence[ModuleLink]) -> str:
        slots: Dict[str, str] = {
            slot.field_name: self.render_links(links, slot.template, slot.level)
            for slot in _LAYOUT_SLOTS[self.css]
        }
        return self.renderer.render(
            f"layouts/{self.css.value}/app.blade.stub", LayoutRecord(**slots)
        )


class WelcomeGenerator(PageGenerator):
    """``welcome.blade.php``: a quick-link card per module."""

    kind = "welcome"

    @property
    def target(self) -> Path:
        return self.config.path("views", "welcome.blade.php")

    def render(self, links: Sequence[ModuleLink]) -> str:
        prefix: str = f"views/{self.css.value}/welcome"
        level: int = _WELCOME_LINK_LEVEL[self.css]
        if links:
            quick_links: str = self.render_links(links, f"{prefix}.link.blade.stub", level)
        else:
            empty: str = self.renderer.render(f"{prefix}.empty.blade.stub", {})
            quick_links = block(empty.rstrip("\n").split("\n"), level)
        return self.renderer.render(f"{prefix}.blade.stub", WelcomeRecord(quick_links=quick_links))


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


@dataclass
class LayoutReport:
    """Outcome of one layout publishing run."""

    css: CssFramework
    models: List[str] = field(default_factory=list)
    artifacts: List[GeneratedArtifact] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def written(self) -> List[GeneratedArtifact]:
        return [a for a in self.artifacts if a.created]

    @property
    def skipped(self) -> List[GeneratedArtifact]:
        return [a for a in self.artifacts if a.skipped]

    def summary(self) -> str:
        lines: List[str] = []
        lines.append(f"{'=' * 60}")
        lines.append("  NexaFlow CrudGen: application layout")
        lines.append(f"{'=' * 60}")
        lines.append(f"  CSS framework:    {self.css.value}")
        lines.append(f"  Linked modules:   {', '.join(self.models) or '(none)'}")
        lines.append(f"  Files written:    {len(self.written)}")
        lines.append(f"  Files skipped:    {len(self.skipped)}")
        lines.append(f"  Total time:       {self.elapsed_seconds:.3f}s")
        if self.written:
            lines.append(f"{'─' * 60}")
            lines.append("  Written:")
            for artifact in self.written:
                lines.append(f"    + {artifact.path}")
        if self.skipped:
            lines.append(f"{'─' * 60}")
            lines.append("  Skipped (already exist, use --force):")
            for artifact in self.skipped:
                lines.append(f"    - {artifact.path}")
        lines.append(f"{'=' * 60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Publisher
# ---------------------------------------------------------------------------


class LayoutPublisher:
    """
    Publishes the application layout (and optionally the welcome page).

    Usage::

        publisher = LayoutPublisher(config)
        report = publisher.publish(css=CssFramework.BOOTSTRAP, welcome=True)
    """

    def __init__(self, config: CrudConfig, renderer: Optional[TemplateRenderer] = None) -> None:
        self._config: CrudConfig = config
        self._renderer: TemplateRenderer = (
            renderer if renderer is not None else TemplateRenderer(config.stub_directory)
        )

    def detect_models(self) -> List[str]:
        """Models with a web controller, in name order; ``User`` is left out."""
        models_dir: Path = self._config.path("models")
        if not models_dir.is_dir():
            logger.info("No models directory at %s.", models_dir)
            return []

        found: List[str] = []
        for path in sorted(models_dir.glob("*.php")):
            name: str = path.stem
            if name in EXCLUDED_MODELS:
                continue
            if not self._config.path("controllers", f"{name}Controller.php").is_file():
                logger.debug("Model %s has no web controller; not linked.", name)
                continue
            found.append(name)
        logger.info("Detected %d CRUD module(s): %s", len(found), ", ".join(found) or "none")
        return found

    @staticmethod
    def links_for(models: Sequence[str]) -> List[ModuleLink]:
        """One link per distinct route, in the given order."""
        links: List[ModuleLink] = []
        seen: Set[str] = set()
        for name in models:
            link: ModuleLink = ModuleLink.for_model(name)
            if link.route_name in seen:
                continue
            seen.add(link.route_name)
            links.append(link)
        return links

    def plan(self, welcome: bool) -> List[Type[PageGenerator]]:
        steps: List[Type[PageGenerator]] = [LayoutGenerator]
        if welcome:
            steps.append(WelcomeGenerator)
        return steps

    def publish(
        self,
        css: Optional[CssFramework] = None,
        force: bool = False,
        welcome: bool = False,
        models: Optional[Sequence[str]] = None,
    ) -> LayoutReport:
        """
        Write the layout and, with *welcome*, the welcome page.

        Raises:
            MalformedConfiguration: a given model name is not a valid class name.
            GenerationFailure: a write failed; everything written was rolled back.
        """
        framework: CssFramework = css if css is not None else self._config.default_css
        links: List[ModuleLink] = self.links_for(models if models else self.detect_models())
        report: LayoutReport = LayoutReport(
            css=framework, models=[link.model_name for link in links]
        )

        tracker: ArtifactTracker = ArtifactTracker()
        writer: ArtifactWriter = ArtifactWriter(tracker)
        kind: str = ""
        with Timer("publish-layout") as t:
            try:
                for generator_class in self.plan(welcome):
                    generator: PageGenerator = generator_class(
                        self._config, self._renderer, writer, framework, force
                    )
                    kind = generator.kind
                    report.artifacts.append(generator.generate(links))
            except Exception as exc:
                logger.error(
                    "Publishing the %s failed (%s: %s); rolling back %d file(s).",
                    kind,
                    type(exc).__name__,
                    exc,
                    len(tracker),
                )
                rollback: RollbackResult = tracker.rollback()
                raise GenerationFailure(
                    f"Publishing the application layout failed during '{kind}': {exc}",
                    model_name="layout",
                    rolled_back_files=rollback.rolled_back_files,
                    restored_files=rollback.restored_files,
                    removed_directories=rollback.removed_directories,
                    rollback_errors=rollback.errors,
                ) from exc
        report.elapsed_seconds = t.elapsed

        logger.info(
            "Layout published: %d written, %d skipped.", len(report.written), len(report.skipped)
        )
        return report


__all__: List[str] = [
    "EXCLUDED_MODELS",
    "ModuleLink",
    "LayoutGenerator",
    "WelcomeGenerator",
    "LayoutReport",
    "LayoutPublisher",
]
