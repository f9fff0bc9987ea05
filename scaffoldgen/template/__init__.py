"""Template substitution: filters, rendering, inclusion rules and the tree walk.

Quick usage::

    from scaffoldgen.template import GlobMatcher, TemplateRenderer, walk_dir

    renderer = TemplateRenderer(context, project_dir)
    report = walk_dir(project_dir, renderer, GlobMatcher(exclude=["*.png"]))
"""

from scaffoldgen.template.matcher import GlobMatcher, InclusionMatcher, Verdict
from scaffoldgen.template.renderer import RenderMode, TemplateRenderer, substitute_filename
from scaffoldgen.template.walker import EntryStatus, WalkReport, collect_entries, walk_dir

__all__ = [
    "EntryStatus",
    "GlobMatcher",
    "InclusionMatcher",
    "RenderMode",
    "TemplateRenderer",
    "Verdict",
    "WalkReport",
    "collect_entries",
    "substitute_filename",
    "walk_dir",
]
