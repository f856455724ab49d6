# File: crudgen/routes.py
"""
NexaFlow CrudGen - Route & Navigation Updates
===============================================
The two generators that edit files the application already owns:

- ``RouteGenerator`` appends resource routes (and the restore/force-delete
  routes for soft-deleting models) to ``routes/web.php`` and
  ``routes/api.php``, importing the controller when needed;
- ``NavigationUpdater`` clones the Dashboard link of the layout into a link
  to the model's index page.

Both are idempotent: a file that already mentions the model's routes is
left alone and reported with ``created=False``.  A missing target file is
not an error either; it is logged and reported the same way.  Every edit
goes through ``ArtifactWriter.update`` so rollback can restore the original.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional

from crudgen.generators import ArtifactGenerator
from crudgen.models import GeneratedArtifact
from crudgen.utils import to_title_human

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.routes")

_USE_STATEMENT_RE: re.Pattern[str] = re.compile(r"^use\s+[^;]+;[ \t]*$", re.MULTILINE)
_PHP_OPEN_TAG_RE: re.Pattern[str] = re.compile(r"^<\?php[ \t]*$", re.MULTILINE)


def insert_use_statement(content: str, use_line: str) -> str:
    """
    Add *use_line* after the last top-level ``use`` statement, or after the
    opening tag when there is none.  Existing imports are left alone.
    """
    if re.search(r"^" + re.escape(use_line) + r"[ \t]*$", content, re.MULTILINE):
        return content

    uses: List[re.Match[str]] = list(_USE_STATEMENT_RE.finditer(content))
    if uses:
        position: int = uses[-1].end()
        return content[:position] + "\n" + use_line + content[position:]

    open_tag: Optional[re.Match[str]] = _PHP_OPEN_TAG_RE.search(content)
    if open_tag is not None:
        position = open_tag.end()
        return content[:position] + "\n\n" + use_line + content[position:]
    return f"<?php\n\n{use_line}\n\n{content}"


class RouteGenerator(ArtifactGenerator):
    """Registers the model's controller routes."""

    kind = "routes"

    def is_registered(self, content: str) -> bool:
        route: str = self.schema.route_name
        return f"'{route}'" in content or f'"{route}"' in content

    def route_lines(self, api: bool) -> List[str]:
        route: str = self.schema.route_name
        controller: str = f"{self.schema.model_name}Controller"
        name_prefix: str = "api." if api else ""
        if api:
            lines: List[str] = [
                f"Route::apiResource('{route}', {controller}::class)->names('api.{route}');"
            ]
        else:
            lines = [f"Route::resource('{route}', {controller}::class);"]
        if self.options.soft_deletes:
            lines.append(
                f"Route::post('{route}/{{id}}/restore', [{controller}::class, 'restore'])"
                f"->name('{name_prefix}{route}.restore');"
            )
            lines.append(
                f"Route::delete('{route}/{{id}}/force-delete', [{controller}::class, 'forceDelete'])"
                f"->name('{name_prefix}{route}.force-delete');"
            )
        return lines

    def use_line(self, api: bool) -> str:
        namespace: str = (
            self.config.namespaces.api_controllers if api else self.config.namespaces.controllers
        )
        return f"use {namespace}\\{self.schema.model_name}Controller;"

    def register(self, path: Path, api: bool) -> GeneratedArtifact:
        kind: str = "api routes" if api else "web routes"
        if not path.is_file():
            logger.warning("Route file %s not found; add the %s routes manually.", path, kind)
            return GeneratedArtifact(path=path, content="", created=False, kind=kind)

        content: str = path.read_text(encoding="utf-8")
        if self.is_registered(content):
            logger.info("Routes for '%s' already present in %s.", self.schema.route_name, path)
            return GeneratedArtifact(path=path, content=content, created=False, kind=kind)

        updated: str = insert_use_statement(content, self.use_line(api))
        updated = updated.rstrip("\n") + "\n\n" + "\n".join(self.route_lines(api)) + "\n"
        return self.context.writer.update(path, updated, kind=kind)

    def generate(self) -> List[GeneratedArtifact]:
        if self.options.is_livewire:
            logger.debug("Livewire profile: no routes registered.")
            return []
        artifacts: List[GeneratedArtifact] = []
        if self.options.wants_web:
            artifacts.append(self.register(self.config.path("routes", "web.php"), api=False))
        if self.options.wants_api:
            artifacts.append(self.register(self.config.path("routes", "api.php"), api=True))
        return artifacts


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

_ATTRIBUTES: str = r"(?:->|[^>])*"
_LABEL: str = r"\s*(?:\{\{\s*__\(\s*'Dashboard'\s*\)\s*\}\}|Dashboard)\s*"

# A Dashboard link: <li><a ...>Dashboard</a></li>, <a ...>Dashboard</a>, or a
# <x-nav-link>/<x-responsive-nav-link> component.  The attributes must mention
# "dashboard" (route name or URL).
DASHBOARD_LINK_RE: re.Pattern[str] = re.compile(
    r"^(?P<indent>[ \t]*)(?P<element>"
    r"<li\b[^>]*>\s*<a\b" + _ATTRIBUTES + r"dashboard" + _ATTRIBUTES + r">" + _LABEL + r"</a>\s*</li>"
    r"|<a\b" + _ATTRIBUTES + r"dashboard" + _ATTRIBUTES + r">" + _LABEL + r"</a>"
    r"|<x-(?P<tag>[\w.-]*nav-link)\b" + _ATTRIBUTES + r"dashboard" + _ATTRIBUTES + r">"
    + _LABEL + r"</x-(?P=tag)>"
    r")",
    re.MULTILINE | re.IGNORECASE,
)

_PLAIN_LABEL_RE: re.Pattern[str] = re.compile(r"(>\s*)Dashboard(\s*<)")


class NavigationUpdater(ArtifactGenerator):
    """Adds a link to the model's index page next to every Dashboard link."""

    kind = "navigation"

    @property
    def title(self) -> str:
        return to_title_human(self.schema.model_plural)

    def is_linked(self, content: str) -> bool:
        route: str = self.schema.route_name
        return f"route('{route}.index')" in content or f'href="/{route}"' in content

    def clone_link(self, element: str) -> str:
        route: str = self.schema.route_name
        clone: str = element.replace("route('dashboard')", f"route('{route}.index')")
        clone = clone.replace("routeIs('dashboard')", f"routeIs('{route}.*')")
        clone = re.sub(r"__\(\s*'Dashboard'\s*\)", f"__('{self.title}')", clone)
        clone = _PLAIN_LABEL_RE.sub(lambda m: f"{m.group(1)}{self.title}{m.group(2)}", clone)
        clone = clone.replace('href="/dashboard"', f'href="/{route}"')
        return clone

    def add_links(self, content: str) -> Optional[str]:
        """New layout content, or ``None`` when no Dashboard link was found."""
        matches: List[re.Match[str]] = list(DASHBOARD_LINK_RE.finditer(content))
        if not matches:
            return None
        updated: str = content
        for match in reversed(matches):
            link: str = "\n" + match.group("indent") + self.clone_link(match.group("element"))
            updated = updated[: match.end()] + link + updated[match.end():]
        return updated

    def generate(self) -> List[GeneratedArtifact]:
        path: Path = self.config.path("layout")
        if not path.is_file():
            logger.warning("Layout %s not found; navigation not updated.", path)
            return [GeneratedArtifact(path=path, content="", created=False, kind=self.kind)]

        content: str = path.read_text(encoding="utf-8")
        if self.is_linked(content):
            logger.info("Navigation already links to '%s'.", self.schema.route_name)
            return [GeneratedArtifact(path=path, content=content, created=False, kind=self.kind)]

        updated: Optional[str] = self.add_links(content)
        if updated is None:
            logger.warning("No Dashboard link found in %s; navigation not updated.", path)
            return [GeneratedArtifact(path=path, content=content, created=False, kind=self.kind)]
        return [self.context.writer.update(path, updated, kind=self.kind)]


__all__: List[str] = [
    "insert_use_statement",
    "RouteGenerator",
    "DASHBOARD_LINK_RE",
    "NavigationUpdater",
]
