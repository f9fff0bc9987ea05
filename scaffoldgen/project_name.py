"""Resolution of the project name."""

from __future__ import annotations

import logging

from scaffoldgen.context import VariableContext
from scaffoldgen.errors import PromptError
from scaffoldgen.hooks.bridge import Prompter
from scaffoldgen.prompts import StringVar, TemplateSlot, env_override, prompt_and_check_variable

logger = logging.getLogger(__name__)

PROJECT_NAME_VAR = "project_name"


def resolve_project_name(
    context: VariableContext,
    name: str | None,
    *,
    silent: bool = False,
    prompter: Prompter = prompt_and_check_variable,
) -> str:
    """Work out the project name for this run.

    Sources, in order: ``project_name`` then ``project-name`` in the context
    (init hooks may have set them), the *name* given by the user, the
    ``SCAFFOLDGEN_VALUE_PROJECT_NAME`` environment variable, and a prompt.

    Raises:
        PromptError: in silent mode when no source provides a name.
    """
    from_context = None
    for key in (PROJECT_NAME_VAR, "project-name"):
        value = context.get_raw(key)
        if isinstance(value, str) and value:
            from_context = value
            break

    if from_context is not None:
        if name and name != from_context:
            logger.warning("Project name changed by template, from %r to %r", name, from_context)
        return from_context
    if name:
        return name

    from_env = env_override(PROJECT_NAME_VAR)
    if from_env:
        return from_env
    if silent:
        raise PromptError(
            "Project Name Error: `--silent` was given but the project name was not set. "
            "Please use `--name`."
        )
    slot = TemplateSlot(prompt="Project Name", var_name=PROJECT_NAME_VAR, var_info=StringVar())
    answer = prompter(slot, silent=silent).strip()
    if not answer:
        raise PromptError("Project name must not be empty")
    return answer
