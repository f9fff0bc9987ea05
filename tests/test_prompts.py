"""Unit tests for the interactive prompt collaborator (scaffoldgen.prompts)."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from scaffoldgen.errors import PromptError
from scaffoldgen.prompts import (
    BoolVar,
    StringVar,
    TemplateSlot,
    env_override,
    parse_bool,
    prompt_and_check_variable,
)

pytestmark = pytest.mark.unit


def _slot(var_info, var_name: str = "license") -> TemplateSlot:
    return TemplateSlot(prompt="Which license?", var_name=var_name, var_info=var_info)


class TestEnvOverride:
    def test_env_value_used(self, monkeypatch):
        monkeypatch.setenv("SCAFFOLDGEN_VALUE_LICENSE", "MIT")
        assert prompt_and_check_variable(_slot(StringVar())) == "MIT"

    def test_hyphenated_name_maps_to_underscore(self, monkeypatch):
        monkeypatch.setenv("SCAFFOLDGEN_VALUE_PROJECT_NAME", "demo")
        assert env_override("project-name") == "demo"

    def test_unnamed_slot_has_no_override(self, monkeypatch):
        monkeypatch.setenv("SCAFFOLDGEN_VALUE_", "x")
        assert env_override("") is None

    def test_env_value_checked_against_choices(self, monkeypatch):
        monkeypatch.setenv("SCAFFOLDGEN_VALUE_LICENSE", "GPL")
        with pytest.raises(PromptError):
            prompt_and_check_variable(_slot(StringVar(choices=["MIT", "Apache-2.0"])))

    def test_env_value_checked_against_regex(self, monkeypatch):
        monkeypatch.setenv("SCAFFOLDGEN_VALUE_LICENSE", "mit")
        with pytest.raises(PromptError):
            prompt_and_check_variable(_slot(StringVar(regex=r"[A-Z]+")))

    def test_env_bool_normalised(self, monkeypatch):
        monkeypatch.setenv("SCAFFOLDGEN_VALUE_DOCKER", "yes")
        slot = _slot(BoolVar(default=False), var_name="docker")
        assert prompt_and_check_variable(slot) == "true"


class TestNonInteractive:
    def test_provided_value_wins(self):
        assert prompt_and_check_variable(_slot(StringVar(default="MIT")), "BSD") == "BSD"

    def test_silent_uses_default(self):
        slot = _slot(StringVar(default="MIT"))
        assert prompt_and_check_variable(slot, silent=True) == "MIT"

    def test_silent_bool_default(self):
        slot = _slot(BoolVar(default=True), var_name="docker")
        assert prompt_and_check_variable(slot, silent=True) == "true"

    def test_silent_without_default_fails(self):
        with pytest.raises(PromptError):
            prompt_and_check_variable(_slot(StringVar()), silent=True)

    def test_non_tty_without_default_fails(self):
        with patch("scaffoldgen.prompts._is_interactive", return_value=False):
            with pytest.raises(PromptError):
                prompt_and_check_variable(_slot(StringVar()))


class TestInteractive:
    def test_string_prompt(self):
        with patch("scaffoldgen.prompts._is_interactive", return_value=True), patch(
            "scaffoldgen.prompts.Prompt.ask", return_value="Apache-2.0"
        ) as ask:
            assert prompt_and_check_variable(_slot(StringVar(default="MIT"))) == "Apache-2.0"
        ask.assert_called_once()

    def test_regex_reasks_until_valid(self):
        with patch("scaffoldgen.prompts._is_interactive", return_value=True), patch(
            "scaffoldgen.prompts.Prompt.ask", side_effect=["bad name", "good_name"]
        ) as ask:
            result = prompt_and_check_variable(_slot(StringVar(regex=r"\w+")))
        assert result == "good_name"
        assert ask.call_count == 2

    def test_bool_prompt(self):
        with patch("scaffoldgen.prompts._is_interactive", return_value=True), patch(
            "scaffoldgen.prompts.Confirm.ask", return_value=False
        ):
            slot = _slot(BoolVar(default=True), var_name="docker")
            assert prompt_and_check_variable(slot) == "false"

    def test_choices_passed_to_prompt(self):
        with patch("scaffoldgen.prompts._is_interactive", return_value=True), patch(
            "scaffoldgen.prompts.Prompt.ask", return_value="MIT"
        ) as ask:
            prompt_and_check_variable(_slot(StringVar(choices=["MIT", "BSD"])))
        assert ask.call_args.kwargs["choices"] == ["MIT", "BSD"]

    def test_eof_becomes_prompt_error(self):
        with patch("scaffoldgen.prompts._is_interactive", return_value=True), patch(
            "scaffoldgen.prompts.Prompt.ask", side_effect=EOFError
        ):
            with pytest.raises(PromptError):
                prompt_and_check_variable(_slot(StringVar()))


class TestParseBool:
    @pytest.mark.parametrize("raw", ["true", "Yes", "y", "1"])
    def test_truthy(self, raw):
        assert parse_bool(raw) is True

    @pytest.mark.parametrize("raw", ["false", "NO", "n", "0"])
    def test_falsy(self, raw):
        assert parse_bool(raw) is False

    def test_garbage(self):
        with pytest.raises(PromptError):
            parse_bool("maybe")
