"""scaffoldgen configuration.

Two typed configuration layers, both Pydantic v2 models:

* ``TemplateConfig`` -- per template, read from ``scaffoldgen.toml`` at the
  template root.  Declares inclusion rules, whitespace handling and hooks.
* ``GenerateOptions`` -- per run, built by the CLI (or from environment
  variables) and passed through the rest of the system.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, model_validator

from scaffoldgen.errors import ConfigError

CONFIG_FILE_NAME = "scaffoldgen.toml"


class HooksConfig(BaseModel):
    """Ordered lists of hook scripts, relative to the template root."""

    init: list[str] = Field(
        default_factory=list,
        description="Run against the template before the project name is resolved",
    )
    pre: list[str] = Field(
        default_factory=list, description="Run in the staging copy before substitution"
    )
    post: list[str] = Field(
        default_factory=list, description="Run in the destination after generation"
    )


class TemplateConfig(BaseModel):
    """Per-template settings.

    ``include`` and ``exclude`` are mutually exclusive: a template either
    lists the files that get substituted or the ones that don't.
    """

    include: list[str] | None = Field(default=None, description="Globs to substitute")
    exclude: list[str] | None = Field(default=None, description="Globs to copy verbatim")
    ignore: list[str] = Field(
        default_factory=list, description="Globs left out of the generated project"
    )
    preserve_whitespace: bool = Field(
        default=False,
        description="Keep newlines and indentation around block tags instead of trimming them",
    )
    hooks: HooksConfig = Field(default_factory=HooksConfig)

    @model_validator(mode="after")
    def _include_xor_exclude(self) -> "TemplateConfig":
        if self.include is not None and self.exclude is not None:
            raise ValueError("only one of `include` or `exclude` may be set")
        return self

    @property
    def hook_files(self) -> list[str]:
        """Every hook script, in init/pre/post order."""
        return [*self.hooks.init, *self.hooks.pre, *self.hooks.post]

    @classmethod
    def from_toml(cls, raw: str) -> "TemplateConfig":
        """Parse the TOML text of a ``scaffoldgen.toml`` file."""
        try:
            data = tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid {CONFIG_FILE_NAME}: {exc}") from exc

        payload: dict[str, Any] = dict(data.get("template", {}))
        payload["hooks"] = data.get("hooks", {})
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise ConfigError(f"Invalid {CONFIG_FILE_NAME}: {exc}") from exc

    @classmethod
    def load(cls, template_dir: Path) -> "TemplateConfig":
        """Load the template's config file, or defaults if it has none."""
        path = Path(template_dir) / CONFIG_FILE_NAME
        if not path.is_file():
            return cls()
        return cls.from_toml(path.read_text(encoding="utf-8"))


class GenerateOptions(BaseModel):
    """Options for a single generation run."""

    template_path: Path = Field(..., description="Template directory to generate from")
    destination: Path = Field(default=Path("."), description="Parent of the generated project")
    name: str | None = Field(default=None, description="Project name; prompted for if absent")
    defines: dict[str, str] = Field(
        default_factory=dict, description="Extra string variables for the template"
    )
    silent: bool = Field(default=False, description="Never prompt; use defaults or fail")
    init: bool = Field(default=False, description="Generate into the destination itself")
    force: bool = Field(default=False, description="Keep the project name verbatim for the directory")
    overwrite: bool = Field(default=False, description="Allow writing into an existing directory")
    package_type: Literal["app", "lib"] = Field(default="app")

    @classmethod
    def from_env(cls, template_path: Path, **overrides: Any) -> "GenerateOptions":
        """Build options from environment variables.

        Recognised variables (all optional):
            SCAFFOLDGEN_NAME, SCAFFOLDGEN_DESTINATION, SCAFFOLDGEN_SILENT.

        Keyword *overrides* win over the environment.
        """
        kwargs: dict[str, Any] = {"template_path": Path(template_path)}
        if os.environ.get("SCAFFOLDGEN_NAME"):
            kwargs["name"] = os.environ["SCAFFOLDGEN_NAME"]
        if os.environ.get("SCAFFOLDGEN_DESTINATION"):
            kwargs["destination"] = Path(os.environ["SCAFFOLDGEN_DESTINATION"])
        if os.environ.get("SCAFFOLDGEN_SILENT"):
            kwargs["silent"] = os.environ["SCAFFOLDGEN_SILENT"].strip().lower() in (
                "1",
                "true",
                "yes",
            )
        kwargs.update(overrides)
        return cls(**kwargs)
