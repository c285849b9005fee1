# topmark:header:start
#
#   project      : ImageBuild
#   file         : outcomes.py
#   file_relpath : src/imagebuild/planner/outcomes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Typed outcome of a plan compilation.

`CompileResult` holds either a `BuildPlan` or the `PlanError` that aborted the
compilation, never both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from imagebuild.core.errors import PlanError
    from imagebuild.planner.model import BuildPlan


@dataclass(frozen=True)
class CompileResult:
    """Result of `imagebuild.planner.compile_build_plan`.

    Attributes:
        plan (BuildPlan | None): The compiled plan on success.
        error (PlanError | None): The error that aborted compilation on failure.
    """

    plan: BuildPlan | None = None
    error: PlanError | None = None

    def __post_init__(self) -> None:
        if (self.plan is None) == (self.error is None):
            raise ValueError("CompileResult needs exactly one of 'plan' or 'error'")

    @property
    def ok(self) -> bool:
        """Whether compilation succeeded."""
        return self.plan is not None

    def unwrap(self) -> BuildPlan:
        """Return the plan, or raise the compilation error.

        Returns:
            BuildPlan: The compiled plan.

        Raises:
            PlanError: The error that aborted compilation.
        """
        if self.error is not None:
            raise self.error
        assert self.plan is not None
        return self.plan
