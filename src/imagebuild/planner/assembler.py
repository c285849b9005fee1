# topmark:header:start
#
#   project      : ImageBuild
#   file         : assembler.py
#   file_relpath : src/imagebuild/planner/assembler.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Plan assembler: compiled steps plus global options to a `BuildPlan`.

The assembler flattens the compiled steps into the ordered action list a build
host executes:

1. one tag check per shippable image (when new tags are required),
2. builds, in manifest order,
3. structure tests, in image order then catalog order,
4. functional tests, in the same order,
5. alias tags.

In a parallel plan, tag checks get ``check-<image>`` identifiers and every build
that would otherwise start immediately waits for all of them. Test actions get
``structure-<tag>-<i>`` and ``test-<tag>-<i>`` identifiers and wait for their
image's build; alias actions wait for the build and every test of their image.
Parallel plans always run on the `PARALLEL_MACHINE_TYPE` machine class.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from imagebuild.config.logging import get_logger
from imagebuild.constants import (
    FUNCTIONAL_TEST_STEP_PREFIX,
    PARALLEL_MACHINE_TYPE,
    START_IMMEDIATELY,
    STRUCTURE_TEST_STEP_PREFIX,
    TAG_CHECK_STEP_PREFIX,
)
from imagebuild.planner.compiler import image_step_id
from imagebuild.planner.model import ActionKind, BuildPlan, PlanAction

if TYPE_CHECKING:
    from collections.abc import Iterator

    from imagebuild.config import BuildOptions
    from imagebuild.config.logging import ImagebuildLogger
    from imagebuild.planner.compiler import CompiledGraph
    from imagebuild.planner.model import BuildStep

logger: ImagebuildLogger = get_logger(__name__)


def structure_test_id(tag: str, index: int) -> str:
    """Return the scheduling identifier of the ``index``-th structure test of ``tag``."""
    return f"{STRUCTURE_TEST_STEP_PREFIX}{tag}-{index}"


def functional_test_id(tag: str, index: int) -> str:
    """Return the scheduling identifier of the ``index``-th functional test of ``tag``."""
    return f"{FUNCTIONAL_TEST_STEP_PREFIX}{tag}-{index}"


def tag_check_id(image: str) -> str:
    """Return the scheduling identifier of the tag check of ``image``."""
    return f"{TAG_CHECK_STEP_PREFIX}{image}"


def _test_ids(step: BuildStep) -> tuple[str, ...]:
    return (
        *(structure_test_id(step.tag, i) for i in range(len(step.structure_tests))),
        *(functional_test_id(step.tag, i) for i in range(len(step.functional_tests))),
    )


def _tag_check_actions(tag_checks: tuple[str, ...], parallel: bool) -> Iterator[PlanAction]:
    for image in tag_checks:
        yield PlanAction(
            kind=ActionKind.CHECK_TAG,
            image=image,
            step_id=tag_check_id(image) if parallel else None,
            wait_for=(START_IMMEDIATELY,) if parallel else (),
        )


def _after_tag_checks(
    steps: tuple[BuildStep, ...], check_ids: tuple[str, ...]
) -> Iterator[BuildStep]:
    # Builds waiting on a builder image reach the checks through that builder.
    for step in steps:
        if step.wait_for == (START_IMMEDIATELY,):
            yield replace(step, wait_for=check_ids)
        else:
            yield step


def _build_actions(steps: tuple[BuildStep, ...]) -> Iterator[PlanAction]:
    for step in steps:
        yield PlanAction(
            kind=ActionKind.BUILD,
            image=step.tag,
            directory=step.directory,
            builder_image=step.builder_image,
            builder_args=step.builder_args,
            step_id=step.step_id,
            wait_for=step.wait_for,
        )


def _structure_test_actions(steps: tuple[BuildStep, ...], parallel: bool) -> Iterator[PlanAction]:
    for step in steps:
        for i, test in enumerate(step.structure_tests):
            yield PlanAction(
                kind=ActionKind.STRUCTURE_TEST,
                image=step.tag,
                test=test.path,
                step_id=structure_test_id(step.tag, i) if parallel else None,
                wait_for=(image_step_id(step.tag),) if parallel else (),
            )


def _functional_test_actions(steps: tuple[BuildStep, ...], parallel: bool) -> Iterator[PlanAction]:
    for image_index, step in enumerate(steps):
        for i, test in enumerate(step.functional_tests):
            yield PlanAction(
                kind=ActionKind.FUNCTIONAL_TEST,
                image=step.tag,
                test=test.path,
                unique=f"{image_index}-{i}",
                step_id=functional_test_id(step.tag, i) if parallel else None,
                wait_for=(image_step_id(step.tag),) if parallel else (),
            )


def _alias_actions(steps: tuple[BuildStep, ...], parallel: bool) -> Iterator[PlanAction]:
    for step in steps:
        wait_for: tuple[str, ...] = (image_step_id(step.tag), *_test_ids(step)) if parallel else ()
        for alias in step.aliases:
            yield PlanAction(
                kind=ActionKind.ALIAS,
                image=step.tag,
                alias=alias,
                wait_for=wait_for,
            )


def assemble_plan(graph: CompiledGraph, options: BuildOptions) -> BuildPlan:
    """Assemble the final build plan.

    Args:
        graph (CompiledGraph): Output of the build graph compiler.
        options (BuildOptions): The build options.

    Returns:
        BuildPlan: The complete, immutable plan.
    """
    tag_checks: tuple[str, ...] = graph.images if options.require_new_tags else ()

    machine_type: str | None = options.machine_type
    if graph.parallel:
        if machine_type not in (None, PARALLEL_MACHINE_TYPE):
            logger.info(
                "Parallel plan: overriding machine type %s with %s",
                machine_type,
                PARALLEL_MACHINE_TYPE,
            )
        machine_type = PARALLEL_MACHINE_TYPE

    timeout: int | None = options.timeout_seconds or None

    steps: tuple[BuildStep, ...] = graph.steps
    if graph.parallel and tag_checks:
        steps = tuple(_after_tag_checks(steps, tuple(tag_check_id(i) for i in tag_checks)))

    actions: tuple[PlanAction, ...] = (
        *_tag_check_actions(tag_checks, graph.parallel),
        *_build_actions(steps),
        *_structure_test_actions(steps, graph.parallel),
        *_functional_test_actions(steps, graph.parallel),
        *_alias_actions(steps, graph.parallel),
    )
    logger.debug(
        "Assembled plan: %d step(s), %d action(s), %d image(s)",
        len(steps),
        len(actions),
        len(graph.images),
    )

    return BuildPlan(
        steps=steps,
        images=graph.images,
        tag_checks=tag_checks,
        timeout_seconds=timeout,
        machine_type=machine_type,
        parallel=graph.parallel,
        actions=actions,
        diagnostics=graph.diagnostics,
    )
