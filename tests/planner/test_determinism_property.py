# topmark:header:start
#
#   project      : ImageBuild
#   file         : test_determinism_property.py
#   file_relpath : tests/planner/test_determinism_property.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Property tests: compilation is deterministic and plans are self-consistent."""

from __future__ import annotations

from typing import Any

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from imagebuild.catalog import TestCatalog
from imagebuild.planner import ActionKind, BuildPlan, compile_build_plan
from imagebuild.planner.assembler import tag_check_id
from imagebuild.planner.compiler import image_step_id
from tests.conftest import make_manifest, make_options

pytestmark = pytest.mark.hypothesis_slow

_name = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=1, max_size=6)

_entries = st.lists(
    st.fixed_dictionaries(
        {
            "tags": st.lists(_name, min_size=1, max_size=3, unique=True),
            "builder": st.booleans(),
        }
    ),
    max_size=5,
)

_catalogs = st.builds(
    lambda s, f: TestCatalog.from_paths(
        structure=[f"tests/structure_tests/{n}_test.json" for n in s],
        functional=[f"tests/functional_tests/{n}_test.yaml" for n in f],
    ),
    st.lists(_name, max_size=3, unique=True),
    st.lists(_name, max_size=3, unique=True),
)


def _manifest(entries: list[dict[str, Any]]) -> Any:
    return make_manifest(
        *({"dir": f"d{i}", "repo": f"r{i}", **e} for i, e in enumerate(entries))
    )


@settings(max_examples=150, suppress_health_check=[HealthCheck.too_slow])
@given(
    entries=_entries,
    catalog=_catalogs,
    run_tests=st.booleans(),
    parallel=st.booleans(),
    require_new_tags=st.booleans(),
)
def test_compilation_is_deterministic(
    entries: list[dict[str, Any]],
    catalog: TestCatalog,
    run_tests: bool,
    parallel: bool,
    require_new_tags: bool,
) -> None:
    """Identical inputs always yield identical plans."""
    options = make_options(
        run_tests=run_tests, enable_parallel=parallel, require_new_tags=require_new_tags
    )

    first: BuildPlan = compile_build_plan(_manifest(entries), catalog, options).unwrap()
    second: BuildPlan = compile_build_plan(_manifest(entries), catalog, options).unwrap()

    assert first == second


@settings(max_examples=150, suppress_health_check=[HealthCheck.too_slow])
@given(entries=_entries, catalog=_catalogs, force=st.booleans())
def test_plan_invariants(entries: list[dict[str, Any]], catalog: TestCatalog, force: bool) -> None:
    """Shipped images exclude builders, waits name earlier actions, checks precede builds."""
    plan: BuildPlan = compile_build_plan(
        _manifest(entries), catalog, make_options(force_parallel=force, require_new_tags=True)
    ).unwrap()

    builder_tags: set[str] = {s.tag for s in plan.steps if s.builder}
    assert not builder_tags & set(plan.images)
    assert plan.tag_checks == plan.images
    assert len(plan.actions_of(ActionKind.BUILD)) == len(entries)

    # Maps each scheduled id to every id it transitively waits for.
    check_ids: set[str] = {tag_check_id(image) for image in plan.tag_checks}
    upstream: dict[str, set[str]] = {"-": set()}
    for action in plan.actions:
        assert set(action.wait_for) <= upstream.keys()
        reached: set[str] = set()
        for dependency in action.wait_for:
            reached |= upstream[dependency] | {dependency}
        if plan.parallel and action.kind is ActionKind.BUILD:
            assert check_ids <= reached, f"{action.image} does not wait for tag checks"
        if action.step_id is not None:
            assert action.step_id not in upstream
            upstream[action.step_id] = reached

    if not plan.parallel:
        kinds: list[ActionKind] = [a.kind for a in plan.actions]
        first_build: int = kinds.index(ActionKind.BUILD) if plan.steps else len(kinds)
        assert kinds[:first_build] == [ActionKind.CHECK_TAG] * len(plan.tag_checks)

    for step in plan.steps:
        if plan.parallel:
            assert step.step_id == image_step_id(step.tag)
        else:
            assert step.step_id is None
