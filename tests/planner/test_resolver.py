# topmark:header:start
#
#   project      : ImageBuild
#   file         : test_resolver.py
#   file_relpath : tests/planner/test_resolver.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for per-image test resolution."""

from __future__ import annotations

import pytest

from imagebuild.catalog import TestCatalog
from imagebuild.core.errors import ManifestInconsistencyError
from imagebuild.manifest import ImageDefinition
from imagebuild.planner.resolver import ResolvedTests, resolve_tests
from tests.conftest import mark_planner

CATALOG: TestCatalog = TestCatalog.from_paths(
    structure=["tests/a_test.json", "tests/structure_tests/b_test.yaml"],
    functional=["tests/functional_tests/c_test.yaml", "tests/functional_tests/d_test.yaml"],
)


@mark_planner
def test_all_tests_apply_without_exclusions() -> None:
    """Every discovered test applies by default."""
    resolved: ResolvedTests = resolve_tests(CATALOG, ImageDefinition(directory="x", repo="r"))

    assert resolved.structure == CATALOG.structure
    assert resolved.functional == CATALOG.functional


@mark_planner
def test_exclusions_keep_catalog_order() -> None:
    """Excluded tests are removed; the rest keep catalog order."""
    image = ImageDefinition(
        directory="x",
        repo="r",
        exclude_tests=("tests/functional_tests/c_test.yaml", "tests/a_test.json"),
    )

    resolved: ResolvedTests = resolve_tests(CATALOG, image)

    assert [t.name for t in resolved.structure] == ["tests/structure_tests/b_test.yaml"]
    assert [t.name for t in resolved.functional] == ["tests/functional_tests/d_test.yaml"]


@mark_planner
def test_unknown_exclusion_is_fatal() -> None:
    """An exclusion naming no discovered test aborts resolution."""
    image = ImageDefinition(directory="x", repo="r", exclude_tests=("tests/gone_test.json",))

    with pytest.raises(ManifestInconsistencyError) as excinfo:
        resolve_tests(CATALOG, image)

    assert excinfo.value.context == {"test": "tests/gone_test.json", "directory": "x"}


@mark_planner
def test_exclusions_on_empty_catalog_are_fatal() -> None:
    """Without any discovered test, every exclusion is stale."""
    image = ImageDefinition(directory="x", repo="r", exclude_tests=("tests/a_test.json",))

    with pytest.raises(ManifestInconsistencyError):
        resolve_tests(TestCatalog(), image)
