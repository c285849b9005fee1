# topmark:header:start
#
#   project      : ImageBuild
#   file         : test_api.py
#   file_relpath : tests/planner/test_api.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the planner entry point and its result type."""

from __future__ import annotations

import pytest

from imagebuild.catalog import TestCatalog
from imagebuild.core.errors import ManifestInconsistencyError
from imagebuild.planner import ActionKind, BuildPlan, CompileResult, compile_build_plan
from tests.conftest import make_manifest, make_options, mark_planner


@mark_planner
def test_compile_success_example() -> None:
    """One definition with two tags and tests off: two images, one build, no tests."""
    result: CompileResult = compile_build_plan(
        make_manifest({"dir": "a", "repo": "foo", "tags": ["1.0", "latest"]}),
        TestCatalog(),
        make_options(run_tests=False),
    )

    assert result.ok
    plan: BuildPlan = result.unwrap()
    assert plan.images == ("gcr.io/proj/foo:1.0", "gcr.io/proj/foo:latest")
    assert len(plan.actions_of(ActionKind.BUILD)) == 1
    assert plan.actions_of(ActionKind.STRUCTURE_TEST) == ()
    assert plan.actions_of(ActionKind.FUNCTIONAL_TEST) == ()


@mark_planner
def test_compile_failure_is_reported_not_raised() -> None:
    """Inconsistencies come back as the result's error."""
    result: CompileResult = compile_build_plan(
        make_manifest({"dir": "a", "repo": "foo", "tags": ["1"], "excludeTests": ["tests/x_test.json"]}),
        TestCatalog(),
        make_options(),
    )

    assert not result.ok
    assert result.plan is None
    assert isinstance(result.error, ManifestInconsistencyError)
    with pytest.raises(ManifestInconsistencyError):
        result.unwrap()


@mark_planner
def test_empty_manifest_compiles_to_empty_plan() -> None:
    """No definitions: an empty, valid plan."""
    plan: BuildPlan = compile_build_plan(make_manifest(), TestCatalog(), make_options()).unwrap()

    assert plan.steps == ()
    assert plan.images == ()
    assert plan.actions == ()


def test_compile_result_requires_exactly_one_outcome() -> None:
    """A result is either a plan or an error."""
    with pytest.raises(ValueError):
        CompileResult()
