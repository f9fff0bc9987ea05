"""Interactive input for template variables.

A ``TemplateSlot`` describes one value to ask for: the prompt text, the
variable it fills (empty for ad-hoc prompts from scripts) and whether it is a
boolean or a string with an optional default, validation regex or fixed
choice list.

Values are taken, in order, from an explicitly provided value, from the
``SCAFFOLDGEN_VALUE_<NAME>`` environment variable, and finally from the user
through Rich prompts.  Silent or non-interactive runs fall back to the slot's
default and fail when there is none.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal, Union

from pydantic import BaseModel, Field
from rich.prompt import Confirm, Prompt

from scaffoldgen.errors import PromptError
from scaffoldgen.utils import console, print_warning

ENV_PREFIX = "SCAFFOLDGEN_VALUE_"

_TRUE_VALUES = ("true", "yes", "y", "1")
_FALSE_VALUES = ("false", "no", "n", "0")


class BoolVar(BaseModel):
    """A yes/no value."""

    kind: Literal["bool"] = "bool"
    default: bool | None = None


class StringVar(BaseModel):
    """A free-text value, optionally validated by a regex or restricted to choices."""

    kind: Literal["string"] = "string"
    default: str | None = None
    regex: str | None = Field(default=None, description="Pattern the whole answer must match")
    choices: list[str] | None = None


class TemplateSlot(BaseModel):
    """Everything needed to obtain one variable's value."""

    prompt: str
    var_name: str = ""
    var_info: Union[BoolVar, StringVar] = Field(discriminator="kind")


def env_override(var_name: str) -> str | None:
    """Return the environment override for *var_name*, if any."""
    if not var_name:
        return None
    key = ENV_PREFIX + re.sub(r"[^A-Za-z0-9]", "_", var_name).upper()
    return os.environ.get(key)


def parse_bool(value: str) -> bool:
    """Parse a yes/no answer.

    Raises:
        PromptError: if *value* is not a recognised boolean.
    """
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise PromptError(f"Unable to parse {value!r} as a boolean")


def _check_value(slot: TemplateSlot, value: str) -> str:
    info = slot.var_info
    if isinstance(info, BoolVar):
        return "true" if parse_bool(value) else "false"
    if info.choices is not None and value not in info.choices:
        raise PromptError(
            f"{value!r} is not a valid choice for {slot.var_name or slot.prompt!r}; "
            f"expected one of {', '.join(info.choices)}"
        )
    if info.regex is not None and re.fullmatch(info.regex, value) is None:
        raise PromptError(
            f"{value!r} does not match the pattern {info.regex!r} "
            f"required by {slot.var_name or slot.prompt!r}"
        )
    return value


def _is_interactive() -> bool:
    return sys.stdin is not None and sys.stdin.isatty()


def _ask(slot: TemplateSlot) -> str:
    info = slot.var_info
    if isinstance(info, BoolVar):
        answer = Confirm.ask(slot.prompt, default=bool(info.default), console=console)
        return "true" if answer else "false"

    if info.choices is not None:
        return Prompt.ask(
            slot.prompt, choices=info.choices, default=info.default, console=console
        )

    while True:
        answer = Prompt.ask(slot.prompt, default=info.default, console=console)
        if answer is None:
            answer = ""
        if info.regex is None or re.fullmatch(info.regex, answer) is not None:
            return answer
        print_warning(f"Sorry, {answer!r} is not a valid value (expected {info.regex!r})")


def prompt_and_check_variable(
    slot: TemplateSlot,
    provided: str | None = None,
    *,
    silent: bool = False,
) -> str:
    """Obtain and validate the value for *slot*.

    Args:
        slot: What to ask for.
        provided: A value supplied up front (e.g. from the command line).
        silent: Never prompt; use the default or fail.

    Returns:
        The value as text (``"true"``/``"false"`` for booleans).

    Raises:
        PromptError: when the value is invalid or cannot be obtained.
    """
    value = provided if provided is not None else env_override(slot.var_name)
    if value is not None:
        return _check_value(slot, value)

    if silent or not _is_interactive():
        default = slot.var_info.default
        if default is None:
            raise PromptError(
                f"No value for {slot.var_name or slot.prompt!r}: "
                "prompting is disabled and the variable has no default"
            )
        if isinstance(default, bool):
            return "true" if default else "false"
        return default

    try:
        return _ask(slot)
    except (EOFError, KeyboardInterrupt) as exc:
        raise PromptError(f"Prompt for {slot.var_name or slot.prompt!r} was aborted") from exc
