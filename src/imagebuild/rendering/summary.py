# topmark:header:start
#
#   project      : ImageBuild
#   file         : summary.py
#   file_relpath : src/imagebuild/rendering/summary.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Human-readable plan summaries (TEXT and MARKDOWN).

Both renderers work from the same prepared rows (`summarize_steps`) so the two
formats stay equivalent. Rendering is pure: functions return a string and
perform no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from imagebuild.core.formats import OutputFormat

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from imagebuild.planner.model import BuildPlan, BuildStep


@dataclass(frozen=True)
class StepSummary:
    """Click-free summary row of one build step."""

    tag: str
    directory: str
    built_by: str
    n_structure: int
    n_functional: int
    aliases: tuple[str, ...]
    builder_only: bool


def summarize_steps(plan: BuildPlan) -> tuple[StepSummary, ...]:
    """Prepare one summary row per build step."""

    def _row(step: BuildStep) -> StepSummary:
        return StepSummary(
            tag=step.tag,
            directory=step.directory,
            built_by=step.builder_image or "docker",
            n_structure=len(step.structure_tests),
            n_functional=len(step.functional_tests),
            aliases=step.aliases,
            builder_only=step.builder,
        )

    return tuple(_row(s) for s in plan.steps)


def _options_line(plan: BuildPlan) -> str:
    mode: str = "parallel" if plan.parallel else "sequential"
    timeout: str = f"{plan.timeout_seconds}s" if plan.timeout_seconds is not None else "default"
    machine: str = plan.machine_type or "default"
    return f"mode={mode}, timeout={timeout}, machine type={machine}"


def render_markdown_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    *,
    align: Mapping[int, str] | None = None,
) -> str:
    """Render a GitHub-flavoured Markdown table with padded columns.

    Args:
        headers: Column headers.
        rows: Table rows. Each row must have the same number of columns as ``headers``.
        align: Optional mapping of column index to alignment: ``"left"`` (default)
            or ``"right"``.

    Returns:
        The Markdown table as a single string, ending with a newline.

    Raises:
        ValueError: If any row has a different number of columns than ``headers``.
    """
    ncols: int = len(headers)
    if any(len(r) != ncols for r in rows):
        raise ValueError("All rows must have the same number of columns as headers")

    widths: list[int] = [len(h) for h in headers]
    for r in rows:
        for i, cell in enumerate(r):
            widths[i] = max(widths[i], len(cell))

    def _sep(i: int) -> str:
        if (align or {}).get(i, "left") == "right":
            return "-" * (widths[i] - 1) + ":"
        return "-" * widths[i]

    def _line(cells: Sequence[str]) -> str:
        return "| " + " | ".join(f"{c:<{widths[i]}}" for i, c in enumerate(cells)) + " |"

    lines: list[str] = [_line(headers), _line([_sep(i) for i in range(ncols)])]
    lines.extend(_line(r) for r in rows)
    return "\n".join(lines) + "\n"


class TextSummaryRenderer:
    """Render a plain-text plan summary."""

    format: OutputFormat = OutputFormat.TEXT

    def render(self, plan: BuildPlan) -> str:
        """Render ``plan`` as indented text."""
        lines: list[str] = [f"Build plan: {len(plan.steps)} build step(s), {len(plan.actions)} action(s)"]
        lines.append(f"  {_options_line(plan)}")
        for row in summarize_steps(plan):
            suffix: str = " [builder]" if row.builder_only else ""
            lines.append(f"- {row.tag} ({row.directory}, built by {row.built_by}){suffix}")
            lines.append(f"    tests: {row.n_structure} structure, {row.n_functional} functional")
            for alias in row.aliases:
                lines.append(f"    alias: {alias}")
        if plan.tag_checks:
            lines.append(f"Tag checks: {len(plan.tag_checks)}")
        lines.append("Images:")
        lines.extend(f"  {image}" for image in plan.images)
        for d in plan.diagnostics:
            lines.append(f"{d.level.value}: {d.message}")
        return "\n".join(lines) + "\n"


class MarkdownSummaryRenderer:
    """Render a Markdown plan summary."""

    format: OutputFormat = OutputFormat.MARKDOWN

    def render(self, plan: BuildPlan) -> str:
        """Render ``plan`` as a Markdown document."""
        lines: list[str] = ["# Build plan", ""]
        lines.append(f"- {_options_line(plan)}")
        lines.append(f"- tag checks: {len(plan.tag_checks)}")
        lines.append("")

        headers: list[str] = ["Image", "Directory", "Built by", "Structure", "Functional", "Aliases"]
        rows: list[list[str]] = [
            [
                f"`{r.tag}`" + (" (builder)" if r.builder_only else ""),
                r.directory,
                r.built_by,
                str(r.n_structure),
                str(r.n_functional),
                ", ".join(f"`{a}`" for a in r.aliases),
            ]
            for r in summarize_steps(plan)
        ]
        lines.append("## Steps")
        lines.append("")
        lines.append(render_markdown_table(headers, rows, align={3: "right", 4: "right"}))

        lines.append("## Images")
        lines.append("")
        lines.extend(f"- `{image}`" for image in plan.images)

        if plan.diagnostics:
            lines.append("")
            lines.append("## Diagnostics")
            lines.append("")
            lines.extend(f"- **{d.level.value}**: {d.message}" for d in plan.diagnostics)
        return "\n".join(lines).rstrip() + "\n"
