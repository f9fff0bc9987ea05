"""Shared variable context for a generation run.

The ``VariableContext`` holds every generation-time variable (project name,
author, values computed by hook scripts, ...).  It is shared by reference
between the tree walker, the renderer and every script invocation, so all
access goes through a single exclusive-access entry point that fails fast
instead of deadlocking when re-entered.

Values are restricted to three kinds: ``bool``, ``str`` and (possibly
nested) ``list`` of those kinds.  ``get`` reports lists as JSON text;
``get_raw`` is the read that returns a stored list itself.
"""

from __future__ import annotations

import copy
import getpass
import json
import os
import platform
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from scaffoldgen.errors import (
    ContextPoisonedError,
    ScaffoldError,
    TypeMismatchError,
    UnsupportedTypeError,
)

if TYPE_CHECKING:
    from scaffoldgen.config import GenerateOptions

Value = Union[bool, str, list["Value"]]


def kind_of(value: Any) -> str:
    """Return the kind name of a context value (``bool``, ``string`` or ``list``)."""
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "list"
    return type(value).__name__


def validate_value(value: Any) -> Value:
    """Check that *value* is representable, recursing into lists.

    Tuples are accepted and stored as lists.

    Raises:
        UnsupportedTypeError: naming the first offending type.
    """
    if isinstance(value, (bool, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [validate_value(item) for item in value]
    raise UnsupportedTypeError(type(value).__name__)


# ---------------------------------------------------------------------------
# VariableContext
# ---------------------------------------------------------------------------


class VariableContext:
    """Lock-guarded mapping of variable name to ``bool | str | list``."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._lock = threading.Lock()
        self._poisoned = False
        self._variables: dict[str, Value] = {}
        for name, value in (initial or {}).items():
            self._variables[name] = validate_value(value)

    @contextmanager
    def _access(self) -> Iterator[dict[str, Value]]:
        """Hold the context exclusively for the duration of the block.

        Unexpected exceptions raised while the lock is held poison the
        context; every later access then fails with ``ContextPoisonedError``.
        """
        if self._poisoned:
            raise ContextPoisonedError()
        if not self._lock.acquire(blocking=False):
            raise ContextPoisonedError("variable context is already locked (re-entrant access)")
        try:
            yield self._variables
        except ScaffoldError:
            raise
        except BaseException:
            self._poisoned = True
            raise
        finally:
            self._lock.release()

    # -- Reads -------------------------------------------------------------

    def get(self, name: str) -> bool | str | None:
        """Return the variable as ``bool`` or ``str``, or ``None`` if absent.

        Lists are returned as their JSON text so callers probing for
        existence or type never have to special-case composite values.
        """
        with self._access() as variables:
            if name not in variables:
                return None
            value = variables[name]
            if isinstance(value, (bool, str)):
                return value
            return json.dumps(value)

    def get_raw(self, name: str) -> Value | None:
        """Return a deep copy of the stored value, lists included."""
        with self._access() as variables:
            return copy.deepcopy(variables.get(name))

    def snapshot(self) -> dict[str, Value]:
        """Return a deep copy of every variable, suitable for rendering."""
        with self._access() as variables:
            return copy.deepcopy(variables)

    def __contains__(self, name: object) -> bool:
        with self._access() as variables:
            return name in variables

    # -- Typed writes --------------------------------------------------------

    def set_string(self, name: str, value: str) -> None:
        """Set a string variable; it must be absent or already a string."""
        self._set_same_kind(name, value, str, "string")

    def set_bool(self, name: str, value: bool) -> None:
        """Set a boolean variable; it must be absent or already a boolean."""
        self._set_same_kind(name, value, bool, "bool")

    def set_list(self, name: str, value: list[Any] | tuple[Any, ...]) -> None:
        """Set a list variable.  Lists can only be written once."""
        if not isinstance(value, (list, tuple)):
            raise UnsupportedTypeError(type(value).__name__)
        validated = validate_value(value)
        with self._access() as variables:
            if name in variables:
                raise TypeMismatchError(name, "list", kind_of(variables[name]))
            variables[name] = validated

    def _set_same_kind(self, name: str, value: Any, expected_type: type, expected: str) -> None:
        if not isinstance(value, expected_type):
            raise UnsupportedTypeError(type(value).__name__)
        with self._access() as variables:
            current = variables.get(name)
            if current is not None and not isinstance(current, expected_type):
                raise TypeMismatchError(name, expected, kind_of(current))
            variables[name] = value

    def insert(self, name: str, value: Any) -> None:
        """Write a variable regardless of its current kind.

        Used for internal well-known variables (project name, OS/arch) whose
        values are owned by the generator rather than by template scripts.
        """
        validated = validate_value(value)
        with self._access() as variables:
            variables[name] = validated


# ---------------------------------------------------------------------------
# Environment facts
# ---------------------------------------------------------------------------


@dataclass
class Authors:
    author: str
    username: str


def get_authors() -> Authors:
    """Discover the author name and login from the environment."""
    username = os.environ.get("SCAFFOLDGEN_USERNAME") or getpass.getuser()
    author = os.environ.get("SCAFFOLDGEN_AUTHOR") or username
    email = os.environ.get("SCAFFOLDGEN_EMAIL")
    if email:
        author = f"{author} <{email}>"
    return Authors(author=author, username=username)


def get_os_arch() -> str:
    """Return ``<os>-<arch>``, e.g. ``linux-x86_64``."""
    return f"{platform.system().lower()}-{platform.machine().lower()}"


def create_context(options: GenerateOptions) -> VariableContext:
    """Create the run's context, pre-filled with every known variable."""
    authors = get_authors()
    os_arch = get_os_arch()

    context = VariableContext()
    if options.name:
        context.insert("project-name", options.name)
        context.insert("project_name", options.name)
    context.insert("package_type", options.package_type)
    context.insert("authors", authors.author)
    context.insert("username", authors.username)
    context.insert("os-arch", os_arch)
    context.insert("os_arch", os_arch)
    context.insert("is_init", options.init)

    for name, value in options.defines.items():
        context.set_string(name, value)
    return context


def set_project_name_variables(
    context: VariableContext,
    project_dir: Path,
    project_name: str,
    package_name: str,
) -> None:
    """Record the resolved project name under both naming conventions."""
    context.insert("project-name", project_name)
    context.insert("project_name", project_name)
    context.insert("package_name", package_name)
    context.insert("within_python_project", is_within_python_project(project_dir))


def is_within_python_project(project_dir: Path) -> bool:
    """Return ``True`` if any ancestor of *project_dir* holds a ``pyproject.toml``."""
    project_dir = Path(project_dir).resolve()
    return any(
        (folder / "pyproject.toml").exists() for folder in (project_dir, *project_dir.parents)
    )
