"""Jinja2 rendering against the shared variable context.

``TemplateRenderer.render`` never aborts generation because of a malformed
template.  In ``RenderMode.FALLBACK`` any failure returns the input text
unchanged; in ``RenderMode.COLLECT`` (whole-file content) syntax errors are
raised as ``TemplateContentError`` so the tree walker can record them,
while runtime failures such as undefined variables still fall back.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError

from scaffoldgen.context import VariableContext
from scaffoldgen.errors import ContextPoisonedError, TemplateContentError
from scaffoldgen.hooks.bridge import Prompter
from scaffoldgen.prompts import prompt_and_check_variable
from scaffoldgen.template.filters import build_filters

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIX = ".j2"


class RenderMode(str, Enum):
    """What ``render`` does when a template cannot be rendered."""

    FALLBACK = "fallback"
    COLLECT = "collect"


class TemplateRenderer:
    """Renders template strings with the variables of one generation run.

    Args:
        context: The run's variable context, shared with hook scripts.
        template_dir: Root that filter scripts are resolved against.
        silent: Filter scripts may not prompt.
        preserve_whitespace: Keep the newline after a block tag and the
            indentation before it instead of trimming them.
        prompter: Interactive-input collaborator handed to filter scripts.
    """

    def __init__(
        self,
        context: VariableContext,
        template_dir: str | Path,
        *,
        silent: bool = False,
        preserve_whitespace: bool = False,
        prompter: Prompter = prompt_and_check_variable,
    ) -> None:
        self.context = context
        self.template_dir = Path(template_dir)
        self.silent = silent
        self.preserve_whitespace = preserve_whitespace
        self.prompter = prompter
        # Relative paths of scripts already used by the ``script`` filter.
        self.filter_files: list[Path] = []

    def create_environment(self) -> Environment:
        """Build an isolated environment with a fresh filter table."""
        env = Environment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=not self.preserve_whitespace,
            lstrip_blocks=not self.preserve_whitespace,
        )
        env.filters.update(
            build_filters(
                self.context,
                self.template_dir,
                self.filter_files,
                silent=self.silent,
                prompter=self.prompter,
            )
        )
        return env

    def render(self, text: str, mode: RenderMode = RenderMode.FALLBACK) -> str:
        """Render *text*; see the module docstring for the failure policy.

        Raises:
            TemplateContentError: only in ``COLLECT`` mode, on a syntax error.
            ContextPoisonedError: always propagated, it is fatal to the run.
        """
        env = self.create_environment()
        try:
            template = env.from_string(text)
        except TemplateSyntaxError as exc:
            if mode is RenderMode.COLLECT:
                raise TemplateContentError(f"line {exc.lineno}: {exc.message}") from exc
            logger.debug("Template syntax error, keeping text unchanged: %s", exc)
            return text

        try:
            return template.render(self.context.snapshot())
        except ContextPoisonedError:
            raise
        except Exception as exc:
            logger.debug("Rendering failed, keeping text unchanged: %s", exc)
            return text


def substitute_filename(
    path: Path, root: Path, renderer: TemplateRenderer, *, is_file: bool = True
) -> Path:
    """Return the destination of *path* after templating its relative path.

    Every component is rendered on its own.  A component that renders empty,
    to ``.``/``..`` or to something containing a path separator keeps its
    original text.  A trailing ``.j2`` is stripped from file names.
    """
    relative = Path(path).relative_to(root)
    parts: list[str] = []
    for part in relative.parts:
        rendered = renderer.render(part, RenderMode.FALLBACK).strip()
        if rendered in ("", ".", "..") or "/" in rendered or "\\" in rendered:
            rendered = part
        parts.append(rendered)

    if is_file and parts and parts[-1].endswith(TEMPLATE_SUFFIX) and parts[-1] != TEMPLATE_SUFFIX:
        parts[-1] = parts[-1][: -len(TEMPLATE_SUFFIX)]
    return Path(root).joinpath(*parts)
