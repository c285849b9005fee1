# topmark:header:start
#
#   project      : ImageBuild
#   file         : model.py
#   file_relpath : src/imagebuild/planner/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Build plan data model.

All types here are frozen: a `BuildPlan` is a one-shot value produced by a
single compilation and exclusively owns its steps and actions.

Two views of the same plan are provided:

- `BuildPlan.steps`: one `BuildStep` per selected image definition, carrying
  the resolved tests and alias tags of that image.
- `BuildPlan.actions`: the flattened, ordered list of everything a build host
  runs (tag checks, builds, tests, alias tags), each with its statically
  computed scheduling identifier and wait-conditions. Renderers emit one
  pipeline step per action, in this order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from imagebuild.catalog import TestDescriptor
    from imagebuild.core.diagnostics import Diagnostic


@dataclass(frozen=True, slots=True)
class BuildStep:
    """One compiled image build.

    Attributes:
        tag (str): Canonical image name the step produces.
        directory (str): Source directory.
        repo (str): Repository name from the manifest.
        builder (bool): Whether the image is builder-only (built, never shipped).
        builder_image (str | None): Fully-qualified builder image when the
            step runs through a builder rather than a plain docker build.
        builder_args (tuple[str, ...]): Arguments for the builder image.
        depends_on (str | None): Scheduling identifier of the builder's build
            step, or ``None`` when the step may start immediately.
        structure_tests (tuple[TestDescriptor, ...]): Resolved structure tests.
        functional_tests (tuple[TestDescriptor, ...]): Resolved functional tests.
        aliases (tuple[str, ...]): Alias names pointing at ``tag``.
        step_id (str | None): Scheduling identifier (parallel plans only).
        wait_for (tuple[str, ...]): Explicit wait-conditions (parallel plans only).
    """

    tag: str
    directory: str
    repo: str
    builder: bool = False
    builder_image: str | None = None
    builder_args: tuple[str, ...] = ()
    depends_on: str | None = None
    structure_tests: tuple[TestDescriptor, ...] = ()
    functional_tests: tuple[TestDescriptor, ...] = ()
    aliases: tuple[str, ...] = ()
    step_id: str | None = None
    wait_for: tuple[str, ...] = ()


class ActionKind(str, Enum):
    """Kind of a plan action."""

    CHECK_TAG = "check_tag"
    BUILD = "build"
    STRUCTURE_TEST = "structure_test"
    FUNCTIONAL_TEST = "functional_test"
    ALIAS = "alias"


@dataclass(frozen=True, slots=True)
class PlanAction:
    """One renderable unit of work, in plan order.

    Only the fields relevant to ``kind`` are set.

    Attributes:
        kind (ActionKind): What the action does.
        image (str): Image the action concerns (checked, built, tested or aliased).
        directory (str | None): Build context directory (``BUILD``).
        builder_image (str | None): Builder image to run (``BUILD`` via builder).
        builder_args (tuple[str, ...]): Builder arguments (``BUILD`` via builder).
        test (str | None): Test descriptor path (``*_TEST``).
        unique (str | None): Unique ``<image index>-<test index>`` token (``FUNCTIONAL_TEST``).
        alias (str | None): Alias name to create (``ALIAS``).
        step_id (str | None): Scheduling identifier, if other actions refer to it.
        wait_for (tuple[str, ...]): Identifiers this action waits for; empty in
            sequential plans, where plan order is the dependency.
    """

    kind: ActionKind
    image: str
    directory: str | None = None
    builder_image: str | None = None
    builder_args: tuple[str, ...] = ()
    test: str | None = None
    unique: str | None = None
    alias: str | None = None
    step_id: str | None = None
    wait_for: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class BuildPlan:
    """The compiled, immutable build plan.

    Attributes:
        steps (tuple[BuildStep, ...]): Build steps in manifest order.
        images (tuple[str, ...]): Shippable image names; never includes
            builder-only images.
        tag_checks (tuple[str, ...]): Image names that must not exist in the
            registry yet; verified before any build runs.
        timeout_seconds (int | None): Build timeout, ``None`` for the host default.
        machine_type (str | None): Machine type hint, ``None`` for the host default.
        parallel (bool): Whether the plan is scheduled in parallel.
        actions (tuple[PlanAction, ...]): Flattened actions in execution order.
        diagnostics (tuple[Diagnostic, ...]): Non-fatal findings of the compilation.
    """

    steps: tuple[BuildStep, ...]
    images: tuple[str, ...]
    tag_checks: tuple[str, ...] = ()
    timeout_seconds: int | None = None
    machine_type: str | None = None
    parallel: bool = False
    actions: tuple[PlanAction, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def require_new_tags(self) -> bool:
        """Whether the plan carries preflight tag checks."""
        return bool(self.tag_checks)

    def actions_of(self, kind: ActionKind) -> tuple[PlanAction, ...]:
        """Return the actions of one kind, in plan order."""
        return tuple(a for a in self.actions if a.kind == kind)

    def step_for(self, tag: str) -> BuildStep | None:
        """Return the build step producing ``tag``, if any."""
        return next((s for s in self.steps if s.tag == tag), None)
