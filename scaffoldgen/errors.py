"""Exception hierarchy for scaffoldgen.

Content-level problems (a single file with bad template syntax, a broken
filter script) are collected or downgraded to warnings by the callers that
raise them.  Everything else propagates and aborts the generation run.
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for every error raised by scaffoldgen."""


# ---------------------------------------------------------------------------
# Variable context
# ---------------------------------------------------------------------------


class TypeMismatchError(ScaffoldError):
    """A variable write whose value kind conflicts with the stored kind."""

    def __init__(self, name: str, expected: str, actual: str) -> None:
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(f"Variable {name!r} is a {actual}, cannot set it as a {expected}")


class UnsupportedTypeError(ScaffoldError):
    """A value of a kind the variable context cannot represent."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(
            f"expecting type to be string, bool or list but found a {type_name!r} instead"
        )


class ContextPoisonedError(ScaffoldError):
    """The variable context could not be acquired; fatal to the run."""

    def __init__(self, reason: str = "variable context is poisoned") -> None:
        super().__init__(reason)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TemplateContentError(ScaffoldError):
    """A file's content could not be compiled as a template."""


class FilterScriptError(ScaffoldError):
    """A script filter is missing or failed to execute."""


# ---------------------------------------------------------------------------
# Scripts, prompts, configuration
# ---------------------------------------------------------------------------


class ScriptError(ScaffoldError):
    """An embedded script failed to compile or raised while running."""

    def __init__(self, script: str, message: str) -> None:
        self.script = script
        self.message = message
        super().__init__(f"Script {script} failed: {message}")


class HookError(ScriptError):
    """An init/pre/post hook is missing or failed."""


class PromptError(ScaffoldError):
    """A value could not be obtained from the user or the environment."""


class ConfigError(ScaffoldError):
    """Template configuration or run options are invalid."""


class GenerationError(ScaffoldError):
    """The tree walk finished but one or more files had content errors."""

    def __init__(self, files_with_errors: list[tuple[str, str]]) -> None:
        self.files_with_errors = list(files_with_errors)
        super().__init__(format_files_with_errors(self.files_with_errors))


def format_files_with_errors(files_with_errors: list[tuple[str, str]]) -> str:
    """Build the end-of-run report listing every file with invalid syntax."""
    lines = ["Substitution skipped, found invalid syntax in"]
    for path, message in files_with_errors:
        lines.append(f"\t{path}: {message}")
    lines.append("")
    lines.append(
        "Consider adding these files to the `exclude` list of the template's "
        "`scaffoldgen.toml` to skip substitution on them."
    )
    return "\n".join(lines)
