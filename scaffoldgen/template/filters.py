"""Jinja2 filters available to every template.

* Case conversion: ``kebab_case``, ``lower_camel_case``, ``pascal_case``,
  ``shouty_kebab_case``, ``shouty_snake_case``, ``snake_case``,
  ``title_case``, ``upper_camel_case``.
* ``date``: pull the year, month or day out of an ISO date string.
* ``script``: run a filter script from the template and use its result.

``build_filters`` returns a fresh table for every render so no state leaks
between unrelated render calls.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from pathlib import Path

from scaffoldgen.context import VariableContext
from scaffoldgen.errors import FilterScriptError, ScriptError
from scaffoldgen.hooks.bridge import Prompter
from scaffoldgen.hooks.engine import ScriptEngine
from scaffoldgen.prompts import prompt_and_check_variable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Case conversion
# ---------------------------------------------------------------------------

_SEPARATOR_RE = re.compile(r"[\W_]+")


def _starts_word(chunk: str, index: int) -> bool:
    current = chunk[index]
    if not current.isupper():
        return False
    previous = chunk[index - 1]
    following = chunk[index + 1] if index + 1 < len(chunk) else ""
    return previous.islower() or following.islower()


def split_words(value: str) -> list[str]:
    """Split ``"MyCool-thing_HTTPServer"`` into ``["My", "Cool", "thing", "HTTP", "Server"]``.

    Any Unicode letter or digit belongs to a word; a new word starts at a
    lower-to-upper transition or where an uppercase run meets a capitalised
    word.  Uncased scripts (CJK and the like) are kept as whole words.
    """
    words: list[str] = []
    for chunk in _SEPARATOR_RE.split(str(value)):
        start = 0
        for index in range(1, len(chunk)):
            if _starts_word(chunk, index):
                words.append(chunk[start:index])
                start = index
        if chunk:
            words.append(chunk[start:])
    return words


def kebab_case(value: str) -> str:
    return "-".join(word.lower() for word in split_words(value))


def snake_case(value: str) -> str:
    return "_".join(word.lower() for word in split_words(value))


def shouty_kebab_case(value: str) -> str:
    return "-".join(word.upper() for word in split_words(value))


def shouty_snake_case(value: str) -> str:
    return "_".join(word.upper() for word in split_words(value))


def pascal_case(value: str) -> str:
    return "".join(word.capitalize() for word in split_words(value))


upper_camel_case = pascal_case


def lower_camel_case(value: str) -> str:
    words = split_words(value)
    if not words:
        return ""
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


def title_case(value: str) -> str:
    return " ".join(word.capitalize() for word in split_words(value))


CASE_FILTERS: dict[str, Callable[[str], str]] = {
    "kebab_case": kebab_case,
    "lower_camel_case": lower_camel_case,
    "pascal_case": pascal_case,
    "shouty_kebab_case": shouty_kebab_case,
    "shouty_snake_case": shouty_snake_case,
    "snake_case": snake_case,
    "title_case": title_case,
    "upper_camel_case": upper_camel_case,
}


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

# Character offsets into ``YYYY-MM-DD...``.
_DATE_PARTS: dict[str, slice] = {
    "%Y": slice(0, 4),
    "%m": slice(5, 7),
    "%d": slice(8, 10),
}


def date_part(value: str, fmt: str) -> str:
    """Return the year (``%Y``), month (``%m``) or day (``%d``) of an ISO date.

    Unknown specifiers, and values too short to hold the requested part, are
    returned unchanged.
    """
    value = str(value)
    part = _DATE_PARTS.get(fmt)
    if part is None or len(value) < part.stop:
        return value
    return value[part]


# ---------------------------------------------------------------------------
# Script filter
# ---------------------------------------------------------------------------


def run_filter_script(
    script_path: str,
    *,
    context: VariableContext,
    template_dir: Path,
    filter_files: list[Path],
    silent: bool = False,
    prompter: Prompter = prompt_and_check_variable,
) -> str:
    """Run the filter script at *script_path* (relative to *template_dir*).

    The script's path is recorded in *filter_files* before it runs so the
    tree walker leaves the script file itself alone.

    Raises:
        FilterScriptError: if the script is missing, fails, or does not
            evaluate to a string or boolean.
    """
    relative = Path(script_path)
    path = relative if relative.is_absolute() else template_dir / relative
    if not path.is_file():
        raise FilterScriptError(f"Filter script {script_path} not found")

    if relative.is_absolute():
        try:
            relative = relative.relative_to(template_dir)
        except ValueError:
            pass
    if relative not in filter_files:
        filter_files.append(relative)

    engine = ScriptEngine(context, silent=silent, working_dir=template_dir, prompter=prompter)
    try:
        result = engine.run_file(path)
    except ScriptError as exc:
        raise FilterScriptError(f"Filter script {script_path} contained error: {exc.message}") from exc

    if isinstance(result, bool):
        return "true" if result else "false"
    if not isinstance(result, str):
        raise FilterScriptError(
            f"Filter script {script_path} evaluated to a {type(result).__name__}, expected a string"
        )
    return result


# ---------------------------------------------------------------------------
# Filter table
# ---------------------------------------------------------------------------


def build_filters(
    context: VariableContext,
    template_dir: Path,
    filter_files: list[Path],
    *,
    silent: bool = False,
    prompter: Prompter = prompt_and_check_variable,
) -> dict[str, Callable[..., str]]:
    """Return a fresh filter table bound to the given capability handles."""

    def script(value: str) -> str:
        try:
            return run_filter_script(
                str(value),
                context=context,
                template_dir=Path(template_dir),
                filter_files=filter_files,
                silent=silent,
                prompter=prompter,
            )
        except FilterScriptError as exc:
            logger.warning("%s", exc)
            return value

    filters: dict[str, Callable[..., str]] = dict(CASE_FILTERS)
    filters["date"] = date_part
    filters["script"] = script
    return filters
