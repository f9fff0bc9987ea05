"""Depth-first substitution walk over a generated project tree.

Entries are visited contents-first (a directory after everything inside
it), in file-name order within each directory, skipping ``.git``.  Each
entry is classified by the inclusion matcher and then rendered, moved,
copied or left alone.  Files whose content has invalid template syntax are
recorded and left untouched; once the walk completes they are reported
together in a single ``GenerationError``.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from scaffoldgen.errors import GenerationError, TemplateContentError
from scaffoldgen.template.matcher import InclusionMatcher, Verdict
from scaffoldgen.template.renderer import RenderMode, TemplateRenderer, substitute_filename

logger = logging.getLogger(__name__)

VCS_DIRS = (".git",)


class EntryStatus(str, Enum):
    """Outcome of processing one entry."""

    DONE = "done"
    COPIED = "copied"
    SKIPPED = "skipped"
    IGNORED = "ignored"
    USED_AS_FILTER = "used-as-filter"
    FAILED = "failed"


@dataclass
class WalkEntry:
    """A path found under the walk root."""

    path: Path
    relative_path: Path
    is_dir: bool


@dataclass
class EntryResult:
    entry: WalkEntry
    status: EntryStatus
    destination: Path | None = None
    message: str = ""


@dataclass
class WalkReport:
    """Everything that happened during a walk."""

    results: list[EntryResult] = field(default_factory=list)
    files_with_errors: list[tuple[str, str]] = field(default_factory=list)

    def count(self, status: EntryStatus) -> int:
        return sum(1 for result in self.results if result.status is status)


# ---------------------------------------------------------------------------
# Enumeration
# ---------------------------------------------------------------------------


def _walk(directory: Path, root: Path) -> Iterator[WalkEntry]:
    for child in sorted(directory.iterdir(), key=lambda p: p.name):
        if child.name in VCS_DIRS:
            continue
        is_dir = child.is_dir() and not child.is_symlink()
        if is_dir:
            yield from _walk(child, root)
        yield WalkEntry(path=child, relative_path=child.relative_to(root), is_dir=is_dir)


def collect_entries(root: Path) -> list[WalkEntry]:
    """List every entry under *root*, contents-first, sorted by name.

    The list is built up front because processing renames and deletes
    entries as it goes.
    """
    return list(_walk(Path(root), Path(root)))


# ---------------------------------------------------------------------------
# Processing
# ---------------------------------------------------------------------------


def _read_text(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as fh:
        return fh.read()


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(content)


def _process_file(entry: WalkEntry, root: Path, renderer: TemplateRenderer) -> EntryResult:
    try:
        content = _read_text(entry.path)
        new_content = renderer.render(content, RenderMode.COLLECT)
    except UnicodeDecodeError as exc:
        return EntryResult(entry, EntryStatus.FAILED, message=f"not valid UTF-8 text ({exc.reason})")
    except TemplateContentError as exc:
        return EntryResult(entry, EntryStatus.FAILED, message=str(exc))

    destination = substitute_filename(entry.path, root, renderer, is_file=True)
    _write_text(destination, new_content)
    if destination != entry.path:
        shutil.copymode(entry.path, destination)
        entry.path.unlink()
    return EntryResult(entry, EntryStatus.DONE, destination=destination)


def _process_dir(
    entry: WalkEntry,
    root: Path,
    renderer: TemplateRenderer,
    failed: Iterable[Path] = (),
) -> EntryResult:
    destination = substitute_filename(entry.path, root, renderer, is_file=False)
    if destination != entry.path:
        destination.mkdir(parents=True, exist_ok=True)
        if any(path.is_relative_to(entry.path) for path in failed):
            logger.warning(
                "Directory %s was renamed to %s but holds files with content errors; "
                "leaving it in place",
                entry.relative_path,
                destination.relative_to(root),
            )
        else:
            # Ignored entries and used filter scripts never leave a renamed directory.
            shutil.rmtree(entry.path)
    return EntryResult(entry, EntryStatus.DONE, destination=destination)


def _copy_excluded(entry: WalkEntry, root: Path, renderer: TemplateRenderer) -> EntryResult:
    destination = substitute_filename(entry.path, root, renderer, is_file=True)
    if destination == entry.path:
        return EntryResult(entry, EntryStatus.SKIPPED, destination=destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(entry.path, destination)
    entry.path.unlink()
    return EntryResult(entry, EntryStatus.COPIED, destination=destination)


def process_entry(
    entry: WalkEntry,
    root: Path,
    renderer: TemplateRenderer,
    matcher: InclusionMatcher,
    failed: Iterable[Path] = (),
) -> EntryResult:
    """Process a single entry; I/O errors propagate.

    *failed* holds the paths of files that already failed with a content
    error; a renamed directory containing one of them is kept.
    """
    if entry.relative_path in renderer.filter_files:
        return EntryResult(entry, EntryStatus.USED_AS_FILTER)

    verdict = matcher.should_include(entry.relative_path)
    if verdict is Verdict.IGNORE:
        return EntryResult(entry, EntryStatus.IGNORED)
    if entry.is_dir:
        return _process_dir(entry, root, renderer, failed)
    if verdict is Verdict.INCLUDE:
        return _process_file(entry, root, renderer)
    return _copy_excluded(entry, root, renderer)


def walk_dir(
    root: Path,
    renderer: TemplateRenderer,
    matcher: InclusionMatcher,
    *,
    on_entry: Callable[[EntryResult], None] | None = None,
) -> WalkReport:
    """Substitute variables throughout the tree at *root*.

    Args:
        root: Directory to transform in place.
        renderer: Renderer bound to the run's variable context.
        matcher: Decides how each entry is handled.
        on_entry: Called with each entry's result, e.g. to drive a progress bar.

    Returns:
        The walk report when no file had a content error.

    Raises:
        GenerationError: listing every file with a content error.
        OSError: on any read/write/copy/delete failure.
    """
    root = Path(root)
    report = WalkReport()
    entries = collect_entries(root)
    total = len(entries)
    failed: list[Path] = []

    for index, entry in enumerate(entries, start=1):
        result = process_entry(entry, root, renderer, matcher, failed)
        report.results.append(result)
        if result.status is EntryStatus.FAILED:
            failed.append(entry.path)
            report.files_with_errors.append((entry.relative_path.as_posix(), result.message))

        logger.debug(
            "[%d/%d] %s: %s", index, total, result.status.value, entry.relative_path.as_posix()
        )
        if on_entry is not None:
            on_entry(result)

    if report.files_with_errors:
        raise GenerationError(report.files_with_errors)
    return report
