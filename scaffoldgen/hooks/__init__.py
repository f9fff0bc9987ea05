"""Embedded scripting for templates.

Hook and filter scripts are Python files that see a ``variable`` module bound
to the run's variable context::

    from scaffoldgen.hooks import ScriptEngine

    engine = ScriptEngine(context, working_dir=project_dir)
    engine.run_file(project_dir / "hooks" / "pre.py")
"""

from scaffoldgen.hooks.bridge import create_variable_module, to_context_value
from scaffoldgen.hooks.engine import ScriptEngine, run_hooks

__all__ = [
    "ScriptEngine",
    "create_variable_module",
    "run_hooks",
    "to_context_value",
]
