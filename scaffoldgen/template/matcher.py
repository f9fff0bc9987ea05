"""Inclusion rules: which template entries get substituted, copied or dropped."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Protocol

from scaffoldgen.config import CONFIG_FILE_NAME, TemplateConfig


class Verdict(str, Enum):
    """Classification of a template entry."""

    INCLUDE = "include"  # substitute content and name
    EXCLUDE = "exclude"  # copy content verbatim, still move with templated parents
    IGNORE = "ignore"  # leave untouched, never reaches the destination


class InclusionMatcher(Protocol):
    def should_include(self, relative_path: Path) -> Verdict: ...


def _candidates(relative_path: Path) -> list[str]:
    posix = PurePosixPath(Path(relative_path).as_posix())
    return [str(posix), posix.name, *(str(parent) for parent in posix.parents if str(parent) != ".")]


def matches_any(relative_path: Path, patterns: Iterable[str]) -> bool:
    """Return ``True`` if a glob matches the path, its name, or any ancestor."""
    candidates = _candidates(relative_path)
    for pattern in patterns:
        pattern = pattern.strip("/")
        if any(fnmatchcase(candidate, pattern) for candidate in candidates):
            return True
    return False


class GlobMatcher:
    """``fnmatch``-based implementation of ``InclusionMatcher``.

    Ignore globs, hook scripts, the template config file and ``.git`` are
    ignored.  With an include list only matching paths are substituted;
    otherwise everything is substituted except paths matching an exclude
    glob.
    """

    def __init__(
        self,
        include: list[str] | None = None,
        exclude: list[str] | None = None,
        ignore: list[str] | None = None,
        hook_files: Iterable[str] = (),
    ) -> None:
        self.include = include
        self.exclude = exclude or []
        self.ignore = [*(ignore or []), CONFIG_FILE_NAME, ".git"]
        self.hook_files = {PurePosixPath(Path(hook).as_posix()) for hook in hook_files}

    @classmethod
    def from_config(cls, config: TemplateConfig) -> "GlobMatcher":
        return cls(
            include=config.include,
            exclude=config.exclude,
            ignore=config.ignore,
            hook_files=config.hook_files,
        )

    def should_include(self, relative_path: Path) -> Verdict:
        posix = PurePosixPath(Path(relative_path).as_posix())
        if posix in self.hook_files or matches_any(relative_path, self.ignore):
            return Verdict.IGNORE
        if self.include is not None:
            if matches_any(relative_path, self.include):
                return Verdict.INCLUDE
            return Verdict.EXCLUDE
        if matches_any(relative_path, self.exclude):
            return Verdict.EXCLUDE
        return Verdict.INCLUDE
