# topmark:header:start
#
#   project      : ImageBuild
#   file         : api.py
#   file_relpath : src/imagebuild/rendering/api.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""API for rendering build plans.

Renderers are small objects implementing the `PlanRenderer` protocol, kept in
a registry keyed by `OutputFormat`. Every renderer is deterministic: equal
plans render to identical strings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from imagebuild.config.logging import get_logger
from imagebuild.core.formats import OutputFormat
from imagebuild.rendering.cloudbuild import CloudBuildJsonRenderer, CloudBuildYamlRenderer
from imagebuild.rendering.summary import MarkdownSummaryRenderer, TextSummaryRenderer

if TYPE_CHECKING:
    from imagebuild.config.logging import ImagebuildLogger
    from imagebuild.planner.model import BuildPlan

logger: ImagebuildLogger = get_logger(__name__)


class PlanRenderer(Protocol):
    """Turns a `BuildPlan` into text."""

    def render(self, plan: BuildPlan) -> str:
        """Render ``plan``."""
        ...


_RENDERERS: dict[OutputFormat, PlanRenderer] = {
    OutputFormat.YAML: CloudBuildYamlRenderer(),
    OutputFormat.JSON: CloudBuildJsonRenderer(),
    OutputFormat.TEXT: TextSummaryRenderer(),
    OutputFormat.MARKDOWN: MarkdownSummaryRenderer(),
}


def register_renderer(fmt: OutputFormat, renderer: PlanRenderer) -> None:
    """Register (or replace) the renderer used for ``fmt``."""
    logger.debug("Registering renderer %s for %s", type(renderer).__name__, fmt.value)
    _RENDERERS[fmt] = renderer


def get_renderer(fmt: OutputFormat) -> PlanRenderer:
    """Return the renderer registered for ``fmt``.

    Raises:
        KeyError: If no renderer is registered for ``fmt``.
    """
    return _RENDERERS[fmt]


def render_plan(plan: BuildPlan, fmt: OutputFormat = OutputFormat.YAML) -> str:
    """Render ``plan`` in the requested format.

    Args:
        plan (BuildPlan): The plan to render.
        fmt (OutputFormat): Output format; Cloud Build YAML by default.

    Returns:
        str: The rendered plan, ending with a newline.
    """
    return get_renderer(fmt).render(plan)
