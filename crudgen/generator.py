# File: crudgen/generator.py
"""
NexaFlow CrudGen - Generation Orchestrator
============================================
Connects every phase for one model, and for batches of models:

    Request -> Resolution -> Validation -> Artifact steps -> Report

Workflow per model::

    1. Parsing:     resolve the request into (Schema, GenerationOptions),
                    introspecting the table when nothing was declared.
    2. Validation:  semantic checks (validators.py); errors abort before
                    anything is written.
    3. Generating:  run the artifact steps in a fixed order, every write
                    going through one ArtifactWriter/ArtifactTracker pair.
    4. Completed:   return a GenerationReport.

Error handling strategy:
    - Resolution and validation errors propagate unchanged; nothing has
      been written yet.
    - Any exception while Generating triggers a rollback of this model's
      writes (restore modified files, delete created files, delete created
      directories that are now empty) and is re-raised as
      ``GenerationFailure`` chained to the original.
    - A batch runs models sequentially with fresh tracking each.  The first
      failure stops the batch; models already generated stay on disk and
      their reports travel on the exception.

Step order::

    model -> controllers -> requests -> policy -> views | components
          -> resource -> migration, factory, seeder, tests (--all)
          -> tests (--tests) -> routes -> navigation
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Type

from crudgen.exceptions import CrudGenError, GenerationFailure, SchemaValidationError
from crudgen.exporters import ArtifactTracker, ArtifactWriter, RollbackResult
from crudgen.generators import (
    ArtifactGenerator,
    ControllerGenerator,
    FactoryGenerator,
    GenerationContext,
    MigrationGenerator,
    ModelGenerator,
    PolicyGenerator,
    RequestGenerator,
    ResourceGenerator,
    SeederGenerator,
    TestGenerator,
)
from crudgen.introspector import SqlAlchemyCatalog, StorageCatalog
from crudgen.models import CrudConfig, GeneratedArtifact, GenerationOptions
from crudgen.resolver import GenerationRequest, ResolvedModel
from crudgen.routes import NavigationUpdater, RouteGenerator
from crudgen.templates import TemplateRenderer
from crudgen.utils import Timer, count_lines
from crudgen.validators import ValidationResult, validate_full
from crudgen.views import ComponentGenerator, ViewGenerator

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.generator")

Step = Tuple[str, Type[ArtifactGenerator]]


class GenerationState(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    GENERATING = "generating"
    ROLLING_BACK = "rolling_back"
    COMPLETED = "completed"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """Outcome of one model's run."""

    model_name: str = ""
    success: bool = False
    options: Optional[GenerationOptions] = None
    introspected: bool = False
    artifacts: List[GeneratedArtifact] = field(default_factory=list)
    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    validation_warnings: List[str] = field(default_factory=list)
    total_elapsed_seconds: float = 0.0

    @property
    def written(self) -> List[GeneratedArtifact]:
        return [a for a in self.artifacts if a.created]

    @property
    def skipped(self) -> List[GeneratedArtifact]:
        return [a for a in self.artifacts if a.skipped]

    @property
    def updated(self) -> List[GeneratedArtifact]:
        return [a for a in self.artifacts if a.updated]

    @property
    def written_count(self) -> int:
        return len(self.written)

    @property
    def total_lines(self) -> int:
        return sum(count_lines(a.content) for a in self.written)

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        lines.append(f"{'=' * 60}")
        lines.append(f"  NexaFlow CrudGen: {self.model_name}")
        lines.append(f"{'=' * 60}")
        lines.append(f"  Status:           {status}")
        if self.options is not None:
            lines.append(f"  Profile:          {self.options.profile.value} ({self.options.css.value})")
        lines.append(f"  Files written:    {self.written_count}")
        lines.append(f"  Files skipped:    {len(self.skipped)}")
        lines.append(f"  Total lines:      {self.total_lines:,}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")
        lines.append(f"{'─' * 60}")

        if self.step_metrics:
            lines.append("  Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<16s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        if self.written:
            lines.append(f"{'─' * 60}")
            lines.append("  Written:")
            for artifact in self.written:
                marker: str = "~" if artifact.updated else "+"
                lines.append(f"    {marker} {artifact.path}")

        if self.skipped:
            lines.append(f"{'─' * 60}")
            lines.append("  Skipped (already present):")
            for artifact in self.skipped:
                lines.append(f"    ⊘ {artifact.path}")

        if self.validation_warnings:
            lines.append(f"{'─' * 60}")
            lines.append(f"  Warnings ({len(self.validation_warnings)}):")
            for warning in self.validation_warnings:
                lines.append(f"    ⚠ {warning}")

        lines.append(f"{'=' * 60}")
        return "\n".join(lines)


@dataclass(frozen=False, slots=True)
class BatchReport:
    """Reports of every model of a batch, in order."""

    reports: List[GenerationReport] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(r.success for r in self.reports)

    @property
    def written_count(self) -> int:
        return sum(r.written_count for r in self.reports)

    @property
    def model_names(self) -> List[str]:
        return [r.model_name for r in self.reports]

    def summary(self) -> str:
        parts: List[str] = [r.summary() for r in self.reports]
        parts.append(
            f"{len(self.reports)} model(s) generated, {self.written_count} file(s) written."
        )
        return "\n".join(parts)


# ---------------------------------------------------------------------------
# CrudGenerator: orchestrator
# ---------------------------------------------------------------------------


class CrudGenerator:
    """
    Runs generation requests against one project configuration.

    Usage::

        generator = CrudGenerator(load_crud_config(base_path=...))
        report = generator.generate(GenerationRequest("Post", options, fields="title,body:text"))
        print(report.summary())

    The generator is reusable; tracking state is per model run.
    """

    def __init__(
        self,
        config: CrudConfig,
        catalog: Optional[StorageCatalog] = None,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        self._config: CrudConfig = config
        if catalog is None and config.database_url:
            catalog = SqlAlchemyCatalog.from_url(config.database_url)
        self._catalog: Optional[StorageCatalog] = catalog
        self._renderer: TemplateRenderer = (
            renderer if renderer is not None else TemplateRenderer(config.stub_directory)
        )
        self._state: GenerationState = GenerationState.IDLE

        logger.debug(
            "CrudGenerator initialised: base_path=%s, catalog=%s, templates=%s.",
            config.base_path,
            type(catalog).__name__ if catalog is not None else None,
            self._renderer.override_directory,
        )

    @property
    def config(self) -> CrudConfig:
        return self._config

    @property
    def state(self) -> GenerationState:
        return self._state

    def _transition(self, state: GenerationState) -> None:
        logger.debug("State %s -> %s", self._state.value, state.value)
        self._state = state

    # -----------------------------------------------------------------
    # Step plan
    # -----------------------------------------------------------------

    @staticmethod
    def plan(options: GenerationOptions) -> List[Step]:
        """The steps a run with *options* executes, in order."""
        steps: List[Step] = [
            ("model", ModelGenerator),
            ("controllers", ControllerGenerator),
        ]
        if not options.no_requests:
            steps.append(("requests", RequestGenerator))
        if not options.no_policy:
            steps.append(("policy", PolicyGenerator))
        if options.is_livewire:
            steps.append(("components", ComponentGenerator))
        elif options.wants_web:
            steps.append(("views", ViewGenerator))
        if options.wants_resource:
            steps.append(("resource", ResourceGenerator))
        if options.generate_all:
            steps.extend([
                ("migration", MigrationGenerator),
                ("factory", FactoryGenerator),
                ("seeder", SeederGenerator),
                ("tests", TestGenerator),
            ])
        elif options.tests:
            steps.append(("tests", TestGenerator))
        steps.append(("routes", RouteGenerator))
        if options.add_to_nav and options.wants_web:
            steps.append(("navigation", NavigationUpdater))
        return steps

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def generate(self, request: GenerationRequest) -> GenerationReport:
        """
        Resolve, validate and emit one model.

        Raises:
            MalformedFieldSpec / MalformedConfiguration: resolution failed.
            SchemaValidationError: semantic validation reported errors.
            GenerationFailure: a step failed; this model's writes were
                rolled back.
        """
        start: float = time.perf_counter()
        report: GenerationReport = GenerationReport(model_name=request.model_name)

        self._transition(GenerationState.PARSING)
        try:
            with Timer("resolve") as t_resolve:
                resolved: ResolvedModel = request.resolve(self._catalog)
        except CrudGenError:
            self._transition(GenerationState.FAILED)
            raise

        report.model_name = resolved.model_name
        report.options = resolved.options
        report.introspected = resolved.introspected
        report.step_metrics.append(GenerationStepMetric(
            step_name="resolve",
            elapsed_seconds=t_resolve.elapsed,
            detail=(
                f"{len(resolved.schema.columns)} column(s), "
                f"{len(resolved.schema.relationships)} relationship(s)"
                + (" (introspected)" if resolved.introspected else "")
            ),
        ))

        self._step_validate(resolved, report)
        self._run_steps(resolved, report)

        report.success = True
        report.total_elapsed_seconds = time.perf_counter() - start
        self._transition(GenerationState.COMPLETED)
        logger.info(
            "%s: %d file(s) written, %d skipped in %.3fs.",
            report.model_name,
            report.written_count,
            len(report.skipped),
            report.total_elapsed_seconds,
        )
        return report

    def generate_batch(self, requests: Iterable[GenerationRequest]) -> BatchReport:
        """
        Generate models one after another.

        Raises:
            GenerationFailure: carries ``completed_reports`` for the models
                generated before the failing one.
            CrudGenError: any other failure of a later model, raised as is.
        """
        batch: BatchReport = BatchReport()
        for request in requests:
            try:
                batch.reports.append(self.generate(request))
            except GenerationFailure as exc:
                exc.completed_reports = list(batch.reports)
                logger.error(
                    "Batch aborted at %s; %d model(s) already generated: %s",
                    exc.model_name,
                    len(batch.reports),
                    ", ".join(batch.model_names) or "none",
                )
                raise
            except CrudGenError:
                logger.error(
                    "Batch aborted at %s; %d model(s) already generated: %s",
                    request.model_name,
                    len(batch.reports),
                    ", ".join(batch.model_names) or "none",
                )
                raise
        logger.info(
            "Batch complete: %d model(s), %d file(s) written.",
            len(batch.reports),
            batch.written_count,
        )
        return batch

    # -----------------------------------------------------------------
    # Pipeline step: Validation
    # -----------------------------------------------------------------

    def _step_validate(self, resolved: ResolvedModel, report: GenerationReport) -> None:
        with Timer("validation") as t:
            result: ValidationResult = validate_full(resolved.schema, resolved.options)

        report.validation_warnings.extend(str(w) for w in result.warnings)
        if result.has_errors:
            detail: str = f"{result.error_count} error(s)"
        elif result.has_warnings:
            detail = f"{result.warning_count} warning(s)"
        else:
            detail = "all checks passed"
        report.step_metrics.append(GenerationStepMetric(
            step_name="validate",
            success=result.is_valid,
            elapsed_seconds=t.elapsed,
            detail=detail,
        ))

        if result.has_errors:
            self._transition(GenerationState.FAILED)
            for error in result.errors:
                logger.error("  ✗ %s", error)
            raise SchemaValidationError(
                f"{resolved.model_name}: schema validation failed with "
                f"{result.error_count} error(s).",
                result,
            )

    # -----------------------------------------------------------------
    # Pipeline step: Artifact generation
    # -----------------------------------------------------------------

    def _run_steps(self, resolved: ResolvedModel, report: GenerationReport) -> None:
        tracker: ArtifactTracker = ArtifactTracker()
        context: GenerationContext = GenerationContext(
            schema=resolved.schema,
            options=resolved.options,
            config=self._config,
            renderer=self._renderer,
            writer=ArtifactWriter(tracker),
        )

        self._transition(GenerationState.GENERATING)
        step_name: str = ""
        try:
            for step_name, generator_class in self.plan(resolved.options):
                with Timer(step_name) as t:
                    artifacts: List[GeneratedArtifact] = generator_class(context).generate()
                report.artifacts.extend(artifacts)
                written: int = sum(1 for a in artifacts if a.created)
                report.step_metrics.append(GenerationStepMetric(
                    step_name=step_name,
                    elapsed_seconds=t.elapsed,
                    detail=f"{written} written, {len(artifacts) - written} skipped",
                ))
                logger.debug("Step '%s' done: %d artifact(s).", step_name, len(artifacts))
        except Exception as exc:
            report.step_metrics.append(GenerationStepMetric(
                step_name=step_name, success=False, detail=f"{type(exc).__name__}: {exc}"
            ))
            self._transition(GenerationState.ROLLING_BACK)
            logger.error(
                "%s: step '%s' failed (%s: %s); rolling back %d file(s).",
                resolved.model_name,
                step_name,
                type(exc).__name__,
                exc,
                len(tracker),
            )
            rollback: RollbackResult = tracker.rollback()
            self._transition(GenerationState.FAILED)
            failure: GenerationFailure = GenerationFailure(
                f"Generation of {resolved.model_name} failed during '{step_name}': {exc}",
                model_name=resolved.model_name,
                rolled_back_files=rollback.rolled_back_files,
                restored_files=rollback.restored_files,
                removed_directories=rollback.removed_directories,
                rollback_errors=rollback.errors,
            )
            logger.warning("%s: %s.", resolved.model_name, failure.rollback_summary())
            raise failure from exc


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "GenerationState",
    "GenerationStepMetric",
    "GenerationReport",
    "BatchReport",
    "CrudGenerator",
]

logger.debug("crudgen.generator loaded.")
