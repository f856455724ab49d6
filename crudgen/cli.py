# File: crudgen/cli.py
"""
NexaFlow CrudGen - Command-Line Interface
===========================================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # Model with inline fields and a relationship
    crudgen Post --fields "title:string:100,body:text,published_at:dateTime:nullable" \\
        --belongs-to Category

    # API only, with migration, factory, seeder and tests
    crudgen Invoice --type api --all --soft-deletes

    # Livewire components with Bootstrap markup
    crudgen Product --livewire --css bootstrap

    # Columns read from an existing table
    crudgen Customer --database-url sqlite:///database/database.sqlite

    # One or many models from a JSON/YAML document
    crudgen --json crud.yaml --base-path ../shop

    # Application layout (and welcome page) linking every CRUD module
    crudgen publish-layout --css bootstrap --welcome

Exit codes:
    0 - success (including "nothing written, everything already existed")
    1 - schema validation error
    2 - generation error (after rollback)
    3 - malformed configuration
    4 - missing input or malformed field spec
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_CONFIG_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the ``crudgen`` logger.

    Args:
        verbosity: -1 = silent, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.CRITICAL + 1

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("crudgen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from crudgen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="crudgen",
        description=(
            "NexaFlow CrudGen: CRUD scaffolding generator for Laravel applications.\n\n"
            "Builds a model schema from inline fields, an existing table or a "
            "JSON/YAML document and writes the model, controllers, requests, "
            "policy, views, routes and tests in one all-or-nothing run."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s Post --fields \"title:string:100,body:text\" --belongs-to Category\n"
            "  %(prog)s Invoice --type api --all --soft-deletes\n"
            "  %(prog)s Product --livewire --css bootstrap\n"
            "  %(prog)s --json crud.yaml --base-path ../shop\n"
            "  %(prog)s publish-layout --css bootstrap --welcome\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"NexaFlow CrudGen v{__version__}",
    )

    parser.add_argument(
        "model",
        nargs="?",
        default=None,
        metavar="MODEL",
        help="Model name (optional when using --json).",
    )

    # --- Input ---
    input_group = parser.add_argument_group("schema input")
    input_group.add_argument(
        "--fields",
        type=str,
        default=None,
        metavar="SPEC",
        help='Inline fields, e.g. "title:string:100,body:text:nullable,user_id:foreignId".',
    )
    input_group.add_argument(
        "--belongs-to",
        action="append",
        default=[],
        metavar="MODEL",
        help="Add a belongsTo relationship (repeatable).",
    )
    input_group.add_argument(
        "--has-many",
        action="append",
        default=[],
        metavar="MODEL",
        help="Add a hasMany relationship (repeatable).",
    )
    input_group.add_argument(
        "--belongs-to-many",
        action="append",
        default=[],
        metavar="MODEL",
        help="Add a belongsToMany relationship (repeatable).",
    )
    input_group.add_argument(
        "--table",
        type=str,
        default=None,
        metavar="NAME",
        help="Table to introspect when no fields are given.",
    )
    input_group.add_argument(
        "--json",
        type=str,
        default=None,
        metavar="PATH",
        help="JSON/YAML document describing one model or a batch of models.",
    )

    # --- Output profile ---
    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "--type",
        type=str,
        default=None,
        choices=["api", "web", "both", "livewire"],
        help="Which artifacts to generate (default: from config, else both).",
    )
    output_group.add_argument(
        "--livewire",
        action="store_true",
        default=False,
        help="Shortcut for --type livewire.",
    )
    output_group.add_argument(
        "--css",
        type=str,
        default=None,
        choices=["tailwind", "bootstrap"],
        help="Markup dialect for views and components.",
    )

    # --- Behaviour flags ---
    behaviour_group = parser.add_argument_group("behaviour flags")
    behaviour_group.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Overwrite files that already exist.",
    )
    behaviour_group.add_argument(
        "--soft-deletes",
        action="store_true",
        default=False,
        help="Add soft deletes (restore and force-delete actions).",
    )
    behaviour_group.add_argument(
        "--all",
        dest="generate_all",
        action="store_true",
        default=False,
        help="Also generate migration, factory, seeder and tests.",
    )
    behaviour_group.add_argument(
        "--no-policy",
        action="store_true",
        default=False,
        help="Skip the policy.",
    )
    behaviour_group.add_argument(
        "--no-requests",
        action="store_true",
        default=False,
        help="Skip form requests and validate inline in the controller.",
    )
    behaviour_group.add_argument(
        "--api-resource",
        action="store_true",
        default=False,
        help="Generate the API resource even for web-only output.",
    )
    behaviour_group.add_argument(
        "--tests",
        action="store_true",
        default=False,
        help="Generate feature and unit tests.",
    )
    behaviour_group.add_argument(
        "--add-to-nav",
        action="store_true",
        default=False,
        help="Add a navigation link next to the Dashboard link.",
    )
    behaviour_group.add_argument(
        "--seeder-count",
        type=int,
        default=None,
        metavar="N",
        help="Records created by the seeder (default: 10).",
    )

    # --- Project configuration ---
    config_group = parser.add_argument_group("project configuration")
    config_group.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="JSON/YAML project configuration (namespaces, paths, defaults).",
    )
    config_group.add_argument(
        "--base-path",
        type=str,
        default=None,
        metavar="DIR",
        help="Application root (default: current directory).",
    )
    config_group.add_argument(
        "--database-url",
        type=str,
        default=None,
        metavar="URL",
        help="SQLAlchemy database URL used for table introspection.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output.",
    )

    return parser


PUBLISH_LAYOUT_COMMAND: str = "publish-layout"


def _build_layout_parser() -> argparse.ArgumentParser:
    """Parser of ``crudgen publish-layout``."""
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog=f"crudgen {PUBLISH_LAYOUT_COMMAND}",
        description=(
            "Publish the <x-app-layout> component the generated views render "
            "inside, with a navigation link per CRUD module, and optionally a "
            "welcome page linking to each module."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Without --models, every model in app/Models that has a web "
            "controller is linked (User excepted).\n\n"
            "Examples:\n"
            "  %(prog)s\n"
            "  %(prog)s --css bootstrap --welcome\n"
            "  %(prog)s --models Post Category --force\n"
        ),
    )
    parser.add_argument(
        "--css",
        type=str,
        default=None,
        choices=["tailwind", "bootstrap"],
        help="Markup dialect (default: from config, else tailwind).",
    )
    parser.add_argument(
        "--models",
        nargs="+",
        action="extend",
        default=[],
        metavar="MODEL",
        help="Models to link (default: detected from app/Models).",
    )
    parser.add_argument(
        "--welcome",
        action="store_true",
        default=False,
        help="Also publish resources/views/welcome.blade.php.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Overwrite files that already exist.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="JSON/YAML project configuration (namespaces, paths, defaults).",
    )
    parser.add_argument(
        "--base-path",
        type=str,
        default=None,
        metavar="DIR",
        help="Application root (default: current directory).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output.",
    )
    return parser


# ---------------------------------------------------------------------------
# Option builders
# ---------------------------------------------------------------------------

_FLAG_OPTIONS: List[str] = [
    "force",
    "soft_deletes",
    "generate_all",
    "no_policy",
    "no_requests",
    "api_resource",
    "tests",
    "add_to_nav",
]


def _build_option_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Options explicitly set on the command line."""
    overrides: Dict[str, Any] = {name: True for name in _FLAG_OPTIONS if getattr(args, name)}

    if args.livewire:
        overrides["profile"] = "livewire"
    elif args.type is not None:
        overrides["profile"] = args.type

    if args.css is not None:
        overrides["css"] = args.css
    if args.seeder_count is not None:
        overrides["seeder_count"] = args.seeder_count
    if args.table is not None:
        overrides["table"] = args.table

    return overrides


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.base_path is not None:
        overrides["base_path"] = Path(args.base_path).resolve()
    if getattr(args, "database_url", None) is not None:
        overrides["database_url"] = args.database_url
    return overrides


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _run_generation(args: argparse.Namespace, quiet: bool) -> int:
    """
    Build the requests, run them and map failures to exit codes.

    Returns the appropriate exit code.
    """
    from crudgen.exceptions import (
        GenerationFailure,
        MalformedConfiguration,
        MalformedFieldSpec,
        SchemaValidationError,
    )
    from crudgen.generator import BatchReport, CrudGenerator, GenerationReport
    from crudgen.models import CrudConfig, GenerationOptions
    from crudgen.resolver import (
        GenerationRequest,
        apply_options,
        load_config_document,
        load_crud_config,
        requests_from_document,
    )

    try:
        config: CrudConfig = load_crud_config(
            Path(args.config) if args.config else None,
            overrides=_build_config_overrides(args),
        )
        options: GenerationOptions = apply_options(
            config.default_options(), _build_option_overrides(args)
        )
        if args.json:
            if args.model:
                logger.warning("Model name '%s' ignored; using --json %s.", args.model, args.json)
            requests: List[GenerationRequest] = requests_from_document(
                load_config_document(Path(args.json)), options
            )
        else:
            requests = [
                GenerationRequest(
                    model_name=args.model,
                    options=options,
                    fields=args.fields,
                    belongs_to=tuple(args.belongs_to),
                    has_many=tuple(args.has_many),
                    belongs_to_many=tuple(args.belongs_to_many),
                )
            ]
        generator: CrudGenerator = CrudGenerator(config)
    except MalformedConfiguration as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR
    except SQLAlchemyError as exc:
        logger.error("Database configuration error: %s", exc)
        return EXIT_CONFIG_ERROR

    logger.info("Base path: %s", config.base_path)
    logger.info("Models:    %s", ", ".join(r.model_name for r in requests))

    try:
        if len(requests) == 1:
            report: GenerationReport = generator.generate(requests[0])
            summary: str = report.summary()
        else:
            batch: BatchReport = generator.generate_batch(requests)
            summary = batch.summary()
    except MalformedFieldSpec as exc:
        logger.error("Invalid field spec: %s", exc)
        return EXIT_INPUT_ERROR
    except MalformedConfiguration as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR
    except SchemaValidationError as exc:
        logger.error("%s", exc)
        if not quiet:
            print(exc.result.format_report(), file=sys.stderr)
        return EXIT_VALIDATION_ERROR
    except GenerationFailure as exc:
        logger.error("%s", exc)
        logger.error("Rollback: %s.", exc.rollback_summary())
        for problem in exc.rollback_errors:
            logger.error("  ✗ %s", problem)
        if exc.completed_reports:
            logger.warning(
                "Models generated before the failure were kept: %s",
                ", ".join(r.model_name for r in exc.completed_reports),
            )
        return EXIT_GENERATION_ERROR
    except SQLAlchemyError as exc:
        logger.error("Table introspection failed: %s", exc)
        return EXIT_CONFIG_ERROR

    if not quiet:
        print(summary)
    return EXIT_SUCCESS


def _run_publish_layout(args: argparse.Namespace, quiet: bool) -> int:
    """Publish the layout (and welcome page); returns the exit code."""
    from crudgen.exceptions import GenerationFailure, MalformedConfiguration
    from crudgen.layout import LayoutPublisher, LayoutReport
    from crudgen.models import CrudConfig, CssFramework
    from crudgen.resolver import load_crud_config

    try:
        config: CrudConfig = load_crud_config(
            Path(args.config) if args.config else None,
            overrides=_build_config_overrides(args),
        )
        report: LayoutReport = LayoutPublisher(config).publish(
            css=CssFramework(args.css) if args.css else None,
            force=args.force,
            welcome=args.welcome,
            models=args.models,
        )
    except MalformedConfiguration as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIG_ERROR
    except GenerationFailure as exc:
        logger.error("%s", exc)
        logger.error("Rollback: %s.", exc.rollback_summary())
        for problem in exc.rollback_errors:
            logger.error("  ✗ %s", problem)
        return EXIT_GENERATION_ERROR

    if not quiet:
        print(report.summary())
    return EXIT_SUCCESS


def _publish_layout_main(argv: Sequence[str]) -> NoReturn:
    args: argparse.Namespace = _build_layout_parser().parse_args(argv)
    _setup_logging(-1 if args.quiet else args.verbose)

    exit_code: int = _run_publish_layout(args, quiet=args.quiet)
    if exit_code == EXIT_SUCCESS:
        logger.info("Layout published successfully.")
    else:
        logger.error("Publishing the layout failed with exit code %d.", exit_code)
    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    arguments: List[str] = list(sys.argv[1:] if argv is None else argv)
    if arguments[:1] == [PUBLISH_LAYOUT_COMMAND]:
        _publish_layout_main(arguments[1:])

    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(arguments)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    if not args.model and not args.json:
        logger.error("A model name is required unless --json is given.")
        if not args.quiet:
            parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    exit_code: int = _run_generation(args, quiet=args.quiet)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


def main() -> None:
    """Console-script entry point."""
    cli_main()


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_CONFIG_ERROR",
    "EXIT_INPUT_ERROR",
    "PUBLISH_LAYOUT_COMMAND",
]

logger.debug("crudgen.cli loaded.")
