"""scaffoldgen - generate projects from template directories.

A template is a directory tree whose file contents and file/directory names
contain Jinja2 expressions.  Variables come from the command line, from the
environment, from interactive prompts and from Python hook scripts that read
and write the shared variable context.

Quick usage::

    from scaffoldgen import GenerateOptions, ProjectGenerator

    options = GenerateOptions(template_path="templates/service", name="billing-api")
    project_dir = ProjectGenerator(options).generate()
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from scaffoldgen.config import GenerateOptions, TemplateConfig  # noqa: E402
from scaffoldgen.context import VariableContext  # noqa: E402
from scaffoldgen.generator import ProjectGenerator, generate  # noqa: E402

__all__ = [
    "GenerateOptions",
    "ProjectGenerator",
    "TemplateConfig",
    "VariableContext",
    "generate",
]
