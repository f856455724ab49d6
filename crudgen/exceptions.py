# File: crudgen/exceptions.py
"""
NexaFlow CrudGen - Exception Taxonomy
=======================================
Every failure the engine can surface to a caller derives from
``CrudGenError``.  The classes also inherit from the matching builtin
(``ValueError``, ``LookupError``, ``KeyError``) so callers that only know
the standard hierarchy keep working.

Propagation policy:
    - ``MalformedFieldSpec`` / ``MalformedConfiguration`` /
      ``SchemaValidationError`` are raised before anything is written,
      so no rollback is involved.
    - ``TableNotFound`` is recoverable; resolution falls back to an empty
      schema.
    - ``GenerationFailure`` is raised after the failed model's artifacts
      have been rolled back.  The original exception is chained as
      ``__cause__``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from crudgen.validators import ValidationResult

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.exceptions")


class CrudGenError(Exception):
    """Base class for all CrudGen errors."""


class MalformedFieldSpec(CrudGenError, ValueError):
    """An inline field-spec string could not be parsed."""

    def __init__(self, message: str, entry: Optional[str] = None) -> None:
        super().__init__(message)
        self.entry: Optional[str] = entry


class MalformedConfiguration(CrudGenError, ValueError):
    """A structured configuration document (or settings file) is invalid."""

    def __init__(self, message: str, source: Optional[str] = None) -> None:
        super().__init__(message)
        self.source: Optional[str] = source


class TableNotFound(CrudGenError, LookupError):
    """The storage catalog has no table of the requested name."""

    def __init__(self, table: str) -> None:
        super().__init__(f"Table '{table}' does not exist in the storage catalog.")
        self.table: str = table


class TemplateNotFound(CrudGenError, LookupError):
    """Neither the override directory nor the built-in set has the template."""

    def __init__(self, template: str) -> None:
        super().__init__(f"Template '{template}' is not defined.")
        self.template: str = template


class TemplateKeyError(CrudGenError, KeyError):
    """A template references placeholders the replacement record does not define."""

    def __init__(self, template: str, missing: List[str]) -> None:
        self.template: str = template
        self.missing: List[str] = sorted(missing)
        super().__init__(
            f"Template '{template}' references undefined key(s): "
            + ", ".join(self.missing)
        )

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message.
        return self.args[0]


class SchemaValidationError(CrudGenError, ValueError):
    """Semantic validation of a resolved schema reported errors."""

    def __init__(self, message: str, result: "ValidationResult") -> None:
        super().__init__(message)
        self.result: "ValidationResult" = result


class GenerationFailure(CrudGenError):
    """
    Fatal failure while emitting one model's artifacts.

    Raised only after rollback has run.  ``completed_reports`` is filled by
    batch runs with the reports of models committed before the failure.
    """

    def __init__(
        self,
        message: str,
        model_name: str = "",
        rolled_back_files: Optional[List[str]] = None,
        restored_files: Optional[List[str]] = None,
        removed_directories: Optional[List[str]] = None,
        rollback_errors: Optional[List[str]] = None,
    ) -> None:
        super().__init__(message)
        self.model_name: str = model_name
        self.rolled_back_files: List[str] = list(rolled_back_files or [])
        self.restored_files: List[str] = list(restored_files or [])
        self.removed_directories: List[str] = list(removed_directories or [])
        self.rollback_errors: List[str] = list(rollback_errors or [])
        self.completed_reports: List[Any] = []

    def rollback_summary(self) -> str:
        """One-line description of what rollback undid."""
        return (
            f"rolled back {len(self.rolled_back_files)} file(s), "
            f"restored {len(self.restored_files)} file(s), "
            f"removed {len(self.removed_directories)} empty directories"
        )


__all__: List[str] = [
    "CrudGenError",
    "MalformedFieldSpec",
    "MalformedConfiguration",
    "TableNotFound",
    "TemplateNotFound",
    "TemplateKeyError",
    "SchemaValidationError",
    "GenerationFailure",
]
