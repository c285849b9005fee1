# topmark:header:start
#
#   project      : ImageBuild
#   file         : __init__.py
#   file_relpath : src/imagebuild/planner/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Build planner: manifest, test catalog and options to a `BuildPlan`."""

from __future__ import annotations

from imagebuild.planner.api import compile_build_plan
from imagebuild.planner.model import ActionKind, BuildPlan, BuildStep, PlanAction
from imagebuild.planner.outcomes import CompileResult

__all__: list[str] = [
    "ActionKind",
    "BuildPlan",
    "BuildStep",
    "CompileResult",
    "PlanAction",
    "compile_build_plan",
]
