"""Tests for the command line entry point (scaffoldgen.cli)."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pytest

from scaffoldgen.cli import build_parser, main, options_from_args, parse_define
from scaffoldgen.utils import create_progress

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.setenv("SCAFFOLDGEN_USERNAME", "tester")
    for var in ("SCAFFOLDGEN_NAME", "SCAFFOLDGEN_DESTINATION", "SCAFFOLDGEN_SILENT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("SCAFFOLDGEN_VALUE_PROJECT_NAME", raising=False)
    package_logger = logging.getLogger("scaffoldgen")
    handlers, level = list(package_logger.handlers), package_logger.level
    yield
    package_logger.handlers = handlers
    package_logger.setLevel(level)


class TestParseDefine:
    def test_key_value(self):
        assert parse_define("author=Ada") == ("author", "Ada")

    def test_value_may_contain_equals(self):
        assert parse_define("expr=a=b") == ("expr", "a=b")

    def test_empty_value_allowed(self):
        assert parse_define("blank=") == ("blank", "")

    @pytest.mark.parametrize("raw", ["novalue", "=x", " =x"])
    def test_invalid(self, raw):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_define(raw)


class TestOptionsFromArgs:
    def test_flags_mapped(self):
        args = build_parser().parse_args(
            ["tmpl", "-n", "demo", "-d", "out", "--define", "a=1", "--define", "b=2",
             "--silent", "--force", "--lib"]
        )
        options = options_from_args(args)
        assert options.template_path == Path("tmpl")
        assert options.name == "demo"
        assert options.destination == Path("out")
        assert options.defines == {"a": "1", "b": "2"}
        assert options.silent is True
        assert options.force is True
        assert options.package_type == "lib"

    def test_environment_fills_gaps(self, monkeypatch):
        monkeypatch.setenv("SCAFFOLDGEN_NAME", "from-env")
        monkeypatch.setenv("SCAFFOLDGEN_SILENT", "yes")
        options = options_from_args(build_parser().parse_args(["tmpl"]))
        assert options.name == "from-env"
        assert options.silent is True
        assert options.package_type == "app"

    def test_flag_beats_environment(self, monkeypatch):
        monkeypatch.setenv("SCAFFOLDGEN_NAME", "from-env")
        options = options_from_args(build_parser().parse_args(["tmpl", "--name", "flag"]))
        assert options.name == "flag"


class TestMain:
    def test_generates_project(self, make_tree, tmp_path, capsys):
        template = make_tree({"{{project_name}}.txt": "by {{ author }}"})
        out = tmp_path / "out"

        main([str(template), "-n", "demo", "-d", str(out), "--define", "author=Ada", "--silent"])

        assert (out / "demo" / "demo.txt").read_text(encoding="utf-8") == "by Ada"
        assert "Done! New project created" in capsys.readouterr().out

    def test_error_exits_nonzero(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "missing"), "-n", "demo", "--silent"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "scaffoldgen" in capsys.readouterr().out

    def test_spinner_stopped_while_prompting(self, make_tree, tmp_path, monkeypatch):
        template = make_tree(
            {"a.txt": "{{ 'ask.py' | script }}", "ask.py": "variable.prompt('Color', 'red')\n"}
        )
        progress = create_progress()
        monkeypatch.setattr("scaffoldgen.cli.create_progress", lambda: progress)

        spinner_running: list[bool] = []

        def fake_prompt(slot, provided=None, *, silent=False):
            spinner_running.append(progress.live.is_started)
            return "demo" if slot.var_name == "project_name" else "blue"

        monkeypatch.setattr("scaffoldgen.cli.prompt_and_check_variable", fake_prompt)
        out = tmp_path / "out"

        main([str(template), "-d", str(out)])

        assert spinner_running == [False, False]
        assert (out / "demo" / "a.txt").read_text(encoding="utf-8") == "blue"
