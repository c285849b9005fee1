# topmark:header:start
#
#   project      : ImageBuild
#   file         : cloudbuild.py
#   file_relpath : src/imagebuild/rendering/cloudbuild.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Cloud Build pipeline rendering.

A `BuildPlan` maps onto a Cloud Build configuration one action per pipeline
step, in plan order:

- ``CHECK_TAG``: ``check_if_tag_exists`` with ``--image=<image>``,
- ``BUILD``: ``docker build --tag=<image> <dir>``, or the builder image with
  its arguments,
- ``STRUCTURE_TEST``: ``structure_test --image <image> --config <test>``,
- ``FUNCTIONAL_TEST``: the project's ``functional_test`` runner with the
  ``IMAGE`` and ``UNIQUE`` variables,
- ``ALIAS``: ``docker tag <image> <alias>``.

followed by ``images``, ``timeout`` (when set) and ``options.machineType``
(when set). The document is built as plain dicts and lists and serialized
in insertion key order, so equal plans render to identical bytes.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Final

import yaml

from imagebuild.core.formats import OutputFormat
from imagebuild.planner.model import ActionKind

if TYPE_CHECKING:
    from imagebuild.planner.model import BuildPlan, PlanAction

CHECK_TAG_STEP_IMAGE: Final[str] = "gcr.io/gcp-runtimes/check_if_tag_exists"
DOCKER_STEP_IMAGE: Final[str] = "gcr.io/cloud-builders/docker"
STRUCTURE_TEST_STEP_IMAGE: Final[str] = "gcr.io/gcp-runtimes/structure_test"
FUNCTIONAL_TEST_STEP_IMAGE: Final[str] = "gcr.io/$PROJECT_ID/functional_test"


def _step_args(action: PlanAction) -> tuple[str, list[str]]:
    """Return the step image and arguments of ``action``."""
    if action.kind == ActionKind.CHECK_TAG:
        return CHECK_TAG_STEP_IMAGE, ["python", "/main.py", f"--image={action.image}"]
    if action.kind == ActionKind.BUILD:
        if action.builder_image is not None:
            return action.builder_image, list(action.builder_args)
        return DOCKER_STEP_IMAGE, ["build", f"--tag={action.image}", action.directory or "."]
    if action.kind == ActionKind.STRUCTURE_TEST:
        return STRUCTURE_TEST_STEP_IMAGE, [
            "--image",
            action.image,
            "--config",
            action.test or "",
        ]
    if action.kind == ActionKind.FUNCTIONAL_TEST:
        return FUNCTIONAL_TEST_STEP_IMAGE, [
            "--verbose",
            "--vars",
            f"IMAGE={action.image}",
            "--vars",
            f"UNIQUE={action.unique}",
            "--test_spec",
            action.test or "",
        ]
    return DOCKER_STEP_IMAGE, ["tag", action.image, action.alias or ""]


def build_step_payload(action: PlanAction) -> dict[str, Any]:
    """Return the Cloud Build step mapping of one plan action."""
    name, args = _step_args(action)
    step: dict[str, Any] = {"name": name, "args": args}
    if action.wait_for:
        step["waitFor"] = list(action.wait_for)
    if action.step_id is not None:
        step["id"] = action.step_id
    return step


def build_cloudbuild_payload(plan: BuildPlan) -> dict[str, Any]:
    """Return the Cloud Build configuration of ``plan`` as plain data.

    Args:
        plan (BuildPlan): The plan to render.

    Returns:
        dict[str, Any]: The configuration, ready for serialization.
    """
    payload: dict[str, Any] = {
        "steps": [build_step_payload(a) for a in plan.actions],
        "images": list(plan.images),
    }
    if plan.timeout_seconds is not None:
        payload["timeout"] = f"{plan.timeout_seconds}s"
    if plan.machine_type is not None:
        payload["options"] = {"machineType": plan.machine_type}
    return payload


class CloudBuildYamlRenderer:
    """Render a plan as a Cloud Build YAML document."""

    format: OutputFormat = OutputFormat.YAML

    def render(self, plan: BuildPlan) -> str:
        """Serialize ``plan`` to YAML (ends with a newline)."""
        return yaml.safe_dump(
            build_cloudbuild_payload(plan),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )


class CloudBuildJsonRenderer:
    """Render a plan as a Cloud Build JSON document."""

    format: OutputFormat = OutputFormat.JSON

    def render(self, plan: BuildPlan) -> str:
        """Serialize ``plan`` to pretty-printed JSON (ends with a newline)."""
        # json.dumps() doesn't append a trailing newline
        return json.dumps(build_cloudbuild_payload(plan), indent=2) + "\n"
