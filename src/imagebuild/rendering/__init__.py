# topmark:header:start
#
#   project      : ImageBuild
#   file         : __init__.py
#   file_relpath : src/imagebuild/rendering/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Build plan renderers.

Public modules:
    - imagebuild.rendering.api
    - imagebuild.rendering.cloudbuild
    - imagebuild.rendering.summary
"""

from __future__ import annotations

from imagebuild.rendering.api import PlanRenderer, get_renderer, register_renderer, render_plan

__all__: list[str] = [
    "PlanRenderer",
    "get_renderer",
    "register_renderer",
    "render_plan",
]
