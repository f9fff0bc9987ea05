"""The ``variable`` module exposed to embedded scripts.

Scripts read and write the run's ``VariableContext`` through four functions::

    if not variable.is_set("license"):
        variable.set("license", variable.prompt("License?", "MIT", choices=["MIT", "Apache-2.0"]))
    variable.set("regions", ["east", "west"])

Every write goes through the context's typed setters, so a kind-mismatched
write raises ``TypeMismatchError`` inside the script.
"""

from __future__ import annotations

import re
import types
from collections.abc import Callable
from typing import Any

from scaffoldgen.context import Value, VariableContext
from scaffoldgen.errors import PromptError, UnsupportedTypeError
from scaffoldgen.prompts import (
    BoolVar,
    StringVar,
    TemplateSlot,
    parse_bool,
    prompt_and_check_variable,
)

Prompter = Callable[..., str]

MODULE_NAME = "variable"


def to_context_value(value: Any) -> Value:
    """Convert a script value to a context value.

    ``bool`` and ``str`` map to themselves, ``list`` and ``tuple`` map to
    lists converted element by element.

    Raises:
        UnsupportedTypeError: for any other type, naming it.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return [to_context_value(item) for item in value]
    raise UnsupportedTypeError(type(value).__name__)


def create_variable_module(
    context: VariableContext,
    *,
    silent: bool = False,
    prompter: Prompter = prompt_and_check_variable,
) -> types.ModuleType:
    """Build a fresh ``variable`` module bound to *context*."""
    module = types.ModuleType(MODULE_NAME, "Read and write template variables.")

    def is_set(name: str) -> bool:
        """Return ``True`` if *name* has a value."""
        return name in context

    def get(name: str) -> bool | str:
        """Return the value of *name*, or ``""`` if it is not set."""
        value = context.get(name)
        return "" if value is None else value

    def set_(name: str, value: Any) -> None:
        """Set *name* to a string, a bool or a list of those."""
        if isinstance(value, bool):
            context.set_bool(name, value)
        elif isinstance(value, str):
            context.set_string(name, value)
        elif isinstance(value, (list, tuple)):
            context.set_list(name, to_context_value(value))
        else:
            raise UnsupportedTypeError(type(value).__name__)

    def prompt(
        message: str,
        default: bool | str | None = None,
        regex: str | None = None,
        choices: list[str] | None = None,
    ) -> bool | str:
        """Ask the user for a value.

        A boolean *default* asks a yes/no question and returns a ``bool``;
        anything else asks for text, optionally validated by *regex* or
        restricted to *choices*.
        """
        if isinstance(default, bool):
            if regex is not None or choices is not None:
                raise PromptError("A boolean prompt takes neither a regex nor choices")
            slot = TemplateSlot(prompt=message, var_info=BoolVar(default=default))
            return parse_bool(prompter(slot, silent=silent))

        if regex is not None and choices is not None:
            raise PromptError("A prompt takes either a regex or choices, not both")
        if regex is not None:
            try:
                re.compile(regex)
            except re.error as exc:
                raise PromptError(f"Invalid regex {regex!r}: {exc}") from exc
        if choices is not None:
            choices = [str(choice) for choice in choices]

        slot = TemplateSlot(
            prompt=message,
            var_info=StringVar(default=default, regex=regex, choices=choices),
        )
        return prompter(slot, silent=silent)

    module.is_set = is_set
    module.get = get
    module.set = set_
    module.prompt = prompt
    module.__all__ = ["is_set", "get", "set", "prompt"]
    return module
