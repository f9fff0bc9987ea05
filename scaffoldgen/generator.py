"""Generation run orchestrator.

Takes ``GenerateOptions`` and turns a template directory into a project
directory: hooks compute variables, the tree walk substitutes them into file
contents and names, and the result is copied to its destination.
"""

from __future__ import annotations

import contextlib
import logging
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

from scaffoldgen.config import GenerateOptions, TemplateConfig
from scaffoldgen.context import VariableContext, create_context, set_project_name_variables
from scaffoldgen.errors import ConfigError
from scaffoldgen.hooks.bridge import Prompter
from scaffoldgen.hooks.engine import ScriptEngine, run_hooks
from scaffoldgen.project_name import resolve_project_name
from scaffoldgen.prompts import prompt_and_check_variable
from scaffoldgen.template.filters import kebab_case, snake_case
from scaffoldgen.template.matcher import GlobMatcher, Verdict
from scaffoldgen.template.renderer import TemplateRenderer
from scaffoldgen.template.walker import EntryResult, WalkReport, walk_dir

logger = logging.getLogger(__name__)


class ProjectGenerator:
    """Generates one project from a template.

    The template is never modified: it is copied to a staging directory,
    substituted there, and only a fully successful walk is copied to the
    destination.
    """

    def __init__(
        self,
        options: GenerateOptions,
        *,
        prompter: Prompter = prompt_and_check_variable,
        on_entry: Callable[[EntryResult], None] | None = None,
        walk_context: Callable[[], contextlib.AbstractContextManager[Any]] = contextlib.nullcontext,
    ) -> None:
        self.options = options
        self.prompter = prompter
        self.on_entry = on_entry
        # Entered around the tree walk only, e.g. to show a progress display.
        self.walk_context = walk_context
        self.context: VariableContext | None = None
        self.report: WalkReport | None = None

    # -- Public API --------------------------------------------------------

    def generate(self) -> Path:
        """Run the generation and return the project directory.

        Raises:
            ConfigError: bad template path, config file or destination.
            HookError: a hook is missing or failed.
            PromptError: a required value could not be obtained.
            GenerationError: some files had invalid template syntax.
        """
        template_dir = Path(self.options.template_path).resolve()
        if not template_dir.is_dir():
            raise ConfigError(f"Template directory not found: {template_dir}")

        config = TemplateConfig.load(template_dir)
        context = create_context(self.options)
        self.context = context

        # 1. Init hooks see the pristine template and may set the project name
        init_engine = self._engine(context, template_dir)
        run_hooks(init_engine, template_dir, config.hooks.init, "init")

        # 2. Resolve the project name and where the project goes
        project_name = resolve_project_name(
            context, self.options.name, silent=self.options.silent, prompter=self.prompter
        )
        project_dir = self._project_dir(project_name)
        set_project_name_variables(context, project_dir, project_name, snake_case(project_name))
        self._check_destination(project_dir)

        matcher = GlobMatcher.from_config(config)

        with tempfile.TemporaryDirectory(prefix="scaffoldgen-") as tmp:
            staging_dir = Path(tmp) / "template"
            shutil.copytree(template_dir, staging_dir, ignore=shutil.ignore_patterns(".git"))

            # 3. Pre hooks run inside the staging copy
            run_hooks(self._engine(context, staging_dir), staging_dir, config.hooks.pre, "pre")

            # 4. Substitute variables throughout the tree
            renderer = TemplateRenderer(
                context,
                staging_dir,
                silent=self.options.silent,
                preserve_whitespace=config.preserve_whitespace,
                prompter=self.prompter,
            )
            with self.walk_context():
                self.report = walk_dir(staging_dir, renderer, matcher, on_entry=self.on_entry)

            # 5. Copy everything not ignored to the destination
            self._copy_output(staging_dir, project_dir, matcher)

            # 6. Post hooks run from the staging copy against the destination
            post_engine = self._engine(context, project_dir)
            run_hooks(post_engine, staging_dir, config.hooks.post, "post")

        logger.info("Generated %s", project_dir)
        return project_dir

    # -- Helpers -------------------------------------------------------------

    def _engine(self, context: VariableContext, working_dir: Path) -> ScriptEngine:
        return ScriptEngine(
            context,
            silent=self.options.silent,
            working_dir=working_dir,
            prompter=self.prompter,
        )

    def _project_dir(self, project_name: str) -> Path:
        destination = Path(self.options.destination).resolve()
        if self.options.init:
            return destination
        dir_name = project_name if self.options.force else kebab_case(project_name)
        if not dir_name:
            raise ConfigError(f"Project name {project_name!r} gives an empty directory name")
        return destination / dir_name

    def _check_destination(self, project_dir: Path) -> None:
        if self.options.init or self.options.overwrite:
            return
        if project_dir.exists():
            raise ConfigError(
                f"Target directory {project_dir} already exists, aborting "
                "(use --overwrite to write into it)"
            )

    @staticmethod
    def _copy_output(staging_dir: Path, project_dir: Path, matcher: GlobMatcher) -> None:
        def ignore(directory: str, names: list[str]) -> list[str]:
            base = Path(directory).relative_to(staging_dir)
            return [
                name for name in names if matcher.should_include(base / name) is Verdict.IGNORE
            ]

        shutil.copytree(staging_dir, project_dir, ignore=ignore, dirs_exist_ok=True)


def generate(options: GenerateOptions, **kwargs) -> Path:
    """Convenience wrapper around ``ProjectGenerator(options).generate()``."""
    return ProjectGenerator(options, **kwargs).generate()
