"""Command line entry point.

Usage::

    scaffoldgen path/to/template --name my-project
    scaffoldgen path/to/template -n demo -d ./out --define author=Ada --silent
    python -m scaffoldgen path/to/template --init
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from scaffoldgen import __version__
from scaffoldgen.config import GenerateOptions
from scaffoldgen.errors import ScaffoldError
from scaffoldgen.generator import ProjectGenerator
from scaffoldgen.prompts import TemplateSlot, prompt_and_check_variable
from scaffoldgen.template.walker import EntryStatus
from scaffoldgen.utils import (
    configure_logging,
    create_progress,
    print_error,
    print_success,
    print_summary_table,
)

logger = logging.getLogger(__name__)


def parse_define(raw: str) -> tuple[str, str]:
    """Split ``KEY=VALUE``; used as an argparse ``type``."""
    key, sep, value = raw.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {raw!r}")
    return key.strip(), value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scaffoldgen",
        description="Generate a project from a template directory.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  scaffoldgen ./templates/service --name billing-api\n"
            "  scaffoldgen ./templates/lib -n demo -d ./out --define author=Ada --silent\n"
        ),
    )
    parser.add_argument("template", help="Path to the template directory")
    parser.add_argument("--name", "-n", default=None, help="Project name")
    parser.add_argument(
        "--destination", "-d",
        default=None,
        help="Directory the project is created in (default: current directory)",
    )
    parser.add_argument(
        "--define",
        action="append",
        type=parse_define,
        default=[],
        metavar="KEY=VALUE",
        help="Set a template variable (repeatable)",
    )
    parser.add_argument("--silent", action="store_true", help="Never prompt; use defaults")
    parser.add_argument(
        "--init", action="store_true", help="Generate into the destination directory itself"
    )
    parser.add_argument(
        "--force", action="store_true", help="Do not kebab-case the project directory name"
    )
    parser.add_argument(
        "--overwrite", action="store_true", help="Allow writing into an existing directory"
    )
    parser.add_argument("--lib", action="store_true", help="Set package_type to 'lib'")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every entry")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def options_from_args(args: argparse.Namespace) -> GenerateOptions:
    overrides: dict = {
        "defines": dict(args.define),
        "init": args.init,
        "force": args.force,
        "overwrite": args.overwrite,
        "package_type": "lib" if args.lib else "app",
    }
    if args.name:
        overrides["name"] = args.name
    if args.destination:
        overrides["destination"] = Path(args.destination)
    if args.silent:
        overrides["silent"] = True
    return GenerateOptions.from_env(Path(args.template), **overrides)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``scaffoldgen`` and ``python -m scaffoldgen``."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    progress = create_progress()
    task = progress.add_task("Generating project...", total=None)

    def prompter(slot: TemplateSlot, provided: str | None = None, *, silent: bool = False) -> str:
        # Filter scripts may prompt mid-walk; the spinner must not redraw over the question.
        running = progress.live.is_started
        if running:
            progress.stop()
        try:
            return prompt_and_check_variable(slot, provided, silent=silent)
        finally:
            if running:
                progress.start()

    try:
        options = options_from_args(args)
        generator = ProjectGenerator(
            options,
            prompter=prompter,
            on_entry=lambda result: progress.update(
                task, description=f"Processing {result.entry.relative_path.as_posix()}"
            ),
            walk_context=lambda: progress,
        )
        project_dir = generator.generate()
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    report = generator.report
    summary = {"Project": str(project_dir), "Template": str(options.template_path)}
    if report is not None:
        summary["Rendered"] = str(report.count(EntryStatus.DONE))
        summary["Copied verbatim"] = str(report.count(EntryStatus.COPIED))
        summary["Ignored"] = str(report.count(EntryStatus.IGNORED))
    print_summary_table(summary, title="scaffoldgen")
    print_success("Done! New project created")
