"""Tests for the template filters (scaffoldgen.template.filters)."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from scaffoldgen.context import VariableContext
from scaffoldgen.errors import FilterScriptError
from scaffoldgen.template.filters import (
    CASE_FILTERS,
    build_filters,
    date_part,
    kebab_case,
    lower_camel_case,
    pascal_case,
    run_filter_script,
    shouty_kebab_case,
    shouty_snake_case,
    snake_case,
    split_words,
    title_case,
    upper_camel_case,
)

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Case conversion
# ---------------------------------------------------------------------------


class TestCaseConversion:
    def test_split_words(self):
        assert split_words("MyCool-thing_HTTPServer") == ["My", "Cool", "thing", "HTTP", "Server"]

    def test_kebab(self):
        assert kebab_case("My Cool Thing") == "my-cool-thing"

    def test_shouty_snake(self):
        assert shouty_snake_case("My Cool Thing") == "MY_COOL_THING"

    def test_snake(self):
        assert snake_case("myCoolThing") == "my_cool_thing"

    def test_shouty_kebab(self):
        assert shouty_kebab_case("my_cool_thing") == "MY-COOL-THING"

    def test_pascal_and_upper_camel(self):
        assert pascal_case("my-cool thing") == "MyCoolThing"
        assert upper_camel_case("my-cool thing") == "MyCoolThing"

    def test_lower_camel(self):
        assert lower_camel_case("My Cool Thing") == "myCoolThing"

    def test_title(self):
        assert title_case("my_cool-thing") == "My Cool Thing"

    def test_digits_stay_with_words(self):
        assert kebab_case("version2Beta") == "version2-beta"

    def test_accented_letters_kept(self):
        assert kebab_case("Über Tool") == "über-tool"
        assert snake_case("Café Crème") == "café_crème"
        assert pascal_case("élan vital") == "ÉlanVital"

    def test_case_transition_in_non_ascii(self):
        assert split_words("straßeÜberweg") == ["straße", "Überweg"]

    def test_uncased_script_is_one_word(self):
        assert kebab_case("日本") == "日本"
        assert snake_case("日本 tool") == "日本_tool"

    def test_empty(self):
        assert kebab_case("") == ""
        assert lower_camel_case("--") == ""

    def test_all_case_filters_registered(self):
        assert set(CASE_FILTERS) == {
            "kebab_case",
            "lower_camel_case",
            "pascal_case",
            "shouty_kebab_case",
            "shouty_snake_case",
            "snake_case",
            "title_case",
            "upper_camel_case",
        }


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


class TestDatePart:
    @pytest.mark.parametrize(
        ("fmt", "expected"),
        [("%Y", "2024"), ("%m", "03"), ("%d", "07"), ("%H", "2024-03-07"), ("year", "2024-03-07")],
    )
    def test_parts(self, fmt, expected):
        assert date_part("2024-03-07", fmt) == expected

    def test_timestamp_input(self):
        assert date_part("2024-03-07T10:11:12Z", "%d") == "07"

    def test_too_short_returned_unchanged(self):
        assert date_part("2024", "%m") == "2024"


# ---------------------------------------------------------------------------
# Script filter
# ---------------------------------------------------------------------------


class TestScriptFilter:
    def test_runs_script_and_records_path(self, context: VariableContext, tmp_path: Path):
        (tmp_path / "filters").mkdir()
        (tmp_path / "filters" / "shout.py").write_text(
            'variable.get("author").upper() + "!"\n', encoding="utf-8"
        )
        filter_files: list[Path] = []
        result = run_filter_script(
            "filters/shout.py", context=context, template_dir=tmp_path, filter_files=filter_files
        )
        assert result == "ADA!"
        assert filter_files == [Path("filters/shout.py")]

    def test_script_can_set_variables(self, context: VariableContext, tmp_path: Path):
        (tmp_path / "compute.py").write_text(
            'variable.set("computed", "yes")\n"ok"\n', encoding="utf-8"
        )
        run_filter_script("compute.py", context=context, template_dir=tmp_path, filter_files=[])
        assert context.get("computed") == "yes"

    def test_missing_script(self, context: VariableContext, tmp_path: Path):
        with pytest.raises(FilterScriptError, match="not found"):
            run_filter_script("nope.py", context=context, template_dir=tmp_path, filter_files=[])

    def test_non_string_result(self, context: VariableContext, tmp_path: Path):
        (tmp_path / "num.py").write_text("41 + 1\n", encoding="utf-8")
        with pytest.raises(FilterScriptError, match="int"):
            run_filter_script("num.py", context=context, template_dir=tmp_path, filter_files=[])

    def test_filter_falls_back_and_warns(self, context: VariableContext, tmp_path: Path, caplog):
        (tmp_path / "broken.py").write_text("raise RuntimeError('nope')\n", encoding="utf-8")
        filters = build_filters(context, tmp_path, [])
        with caplog.at_level(logging.WARNING, logger="scaffoldgen"):
            assert filters["script"]("broken.py") == "broken.py"
            assert filters["script"]("missing.py") == "missing.py"
        messages = [record.getMessage() for record in caplog.records]
        assert any("broken.py contained error" in m for m in messages)
        assert any("missing.py not found" in m for m in messages)

    def test_tables_are_fresh(self, context: VariableContext, tmp_path: Path):
        first = build_filters(context, tmp_path, [])
        second = build_filters(context, tmp_path, [])
        assert first is not second
        assert first["script"] is not second["script"]
        assert first["kebab_case"] is second["kebab_case"]
