"""Execution of embedded scripts and hook lists.

Scripts are plain Python files run in a fresh namespace that holds the
``variable`` module (see :mod:`scaffoldgen.hooks.bridge`).  Like a REPL, a
script whose last statement is a bare expression evaluates to that
expression's value; this is how filter scripts return their output.
"""

from __future__ import annotations

import ast
import contextlib
import logging
from pathlib import Path
from typing import Any

from scaffoldgen.context import VariableContext
from scaffoldgen.errors import ContextPoisonedError, HookError, ScriptError
from scaffoldgen.hooks.bridge import MODULE_NAME, Prompter, create_variable_module
from scaffoldgen.prompts import prompt_and_check_variable

logger = logging.getLogger(__name__)


class ScriptEngine:
    """Runs scripts against one shared ``VariableContext``.

    Args:
        context: The run's variable context.
        silent: Scripts may not prompt; defaults are used instead.
        working_dir: Working directory while a script runs (restored after).
        prompter: Interactive-input collaborator used by ``variable.prompt``.
    """

    def __init__(
        self,
        context: VariableContext,
        *,
        silent: bool = False,
        working_dir: str | Path | None = None,
        prompter: Prompter = prompt_and_check_variable,
    ) -> None:
        self.context = context
        self.silent = silent
        self.working_dir = Path(working_dir) if working_dir is not None else None
        self.prompter = prompter

    def _namespace(self, filename: str) -> dict[str, Any]:
        return {
            "__name__": "__script__",
            "__file__": filename,
            MODULE_NAME: create_variable_module(
                self.context, silent=self.silent, prompter=self.prompter
            ),
        }

    def run_source(self, source: str, filename: str = "<script>") -> Any:
        """Execute *source* and return the value of its trailing expression.

        Raises:
            ScriptError: if the script does not compile or raises.
            ContextPoisonedError: unchanged, it is fatal to the run.
        """
        try:
            tree = ast.parse(source, filename=filename)
        except SyntaxError as exc:
            raise ScriptError(filename, f"syntax error at line {exc.lineno}: {exc.msg}") from exc

        result_expr: ast.Expression | None = None
        if tree.body and isinstance(tree.body[-1], ast.Expr):
            result_expr = ast.Expression(tree.body.pop().value)

        namespace = self._namespace(filename)
        chdir = (
            contextlib.chdir(self.working_dir)
            if self.working_dir is not None
            else contextlib.nullcontext()
        )
        try:
            with chdir:
                exec(compile(tree, filename, "exec"), namespace)
                if result_expr is None:
                    return None
                return eval(compile(result_expr, filename, "eval"), namespace)
        except ContextPoisonedError:
            raise
        except Exception as exc:
            raise ScriptError(filename, f"{type(exc).__name__}: {exc}") from exc

    def run_file(self, path: str | Path) -> Any:
        """Execute the script at *path*; see :meth:`run_source`."""
        path = Path(path)
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ScriptError(str(path), f"cannot read script: {exc}") from exc
        return self.run_source(source, filename=str(path))


def run_hooks(engine: ScriptEngine, root: Path, hooks: list[str], stage: str) -> None:
    """Run each hook script under *root*, in order.

    Raises:
        HookError: when a hook is missing or fails.
    """
    for hook in hooks:
        path = Path(root) / hook
        if not path.is_file():
            raise HookError(hook, f"{stage} hook not found at {path}")
        logger.info("Running %s hook %s", stage, hook)
        try:
            engine.run_file(path)
        except ScriptError as exc:
            raise HookError(hook, exc.message) from exc
