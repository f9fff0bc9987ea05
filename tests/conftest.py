"""Shared pytest fixtures for the scaffoldgen test suite.

Provides reusable fixtures for:
- Variable contexts pre-filled with typical values
- Writing template trees into temporary directories
- Renderers bound to a temporary template root
- A scripted stand-in for the interactive prompt collaborator
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from scaffoldgen.context import VariableContext
from scaffoldgen.template.renderer import TemplateRenderer


# ---------------------------------------------------------------------------
# Variable context
# ---------------------------------------------------------------------------

@pytest.fixture
def context() -> VariableContext:
    """A context holding the variables most templates reference."""
    return VariableContext(
        {
            "project-name": "demo",
            "project_name": "demo",
            "author": "Ada",
            "is_init": False,
        }
    )


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------

def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    """Create *files* (relative path -> content) under *root*."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_tree(tmp_path: Path):
    """Factory fixture: ``make_tree({"a.txt": "..."})`` returns the tree root."""

    def _make(files: dict[str, str | bytes], name: str = "template") -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        return write_tree(root, files)

    return _make


@pytest.fixture
def renderer(context: VariableContext, tmp_path: Path) -> TemplateRenderer:
    """A renderer whose template root is ``tmp_path``."""
    return TemplateRenderer(context, tmp_path)


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_prompter() -> MagicMock:
    """Stand-in for ``prompt_and_check_variable``; set ``return_value`` per test."""
    prompter = MagicMock(name="prompter")
    prompter.return_value = ""
    return prompter
