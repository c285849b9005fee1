# topmark:header:start
#
#   project      : ImageBuild
#   file         : test_discovery.py
#   file_relpath : tests/catalog/test_discovery.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for test catalog discovery in a workspace."""

from __future__ import annotations

import pathlib
from typing import TYPE_CHECKING

import pytest

from imagebuild.catalog import (
    TestCatalog,
    TestKind,
    discover_test_catalog,
    read_tests,
    workspace_path,
    workspace_relative,
)
from tests.conftest import write_tests

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


def test_missing_roots_yield_empty_catalog(tmp_path: Path) -> None:
    """A workspace without tests/ directories has no tests, and that is not an error."""
    catalog: TestCatalog = discover_test_catalog(tmp_path)

    assert catalog.is_empty
    assert len(catalog) == 0
    assert catalog.paths == ()


def test_discovers_all_roots_in_order(tmp_path: Path) -> None:
    """Legacy structure tests come first, then tests/structure_tests, then functional tests."""
    write_tests(
        tmp_path,
        [
            "tests/functional_tests/npm_test.yaml",
            "tests/structure_tests/b_test.yaml",
            "tests/legacy_test.json",
            "tests/structure_tests/a_test.json",
        ],
    )

    catalog: TestCatalog = discover_test_catalog(tmp_path)

    assert [t.path for t in catalog.structure] == [
        "/workspace/tests/legacy_test.json",
        "/workspace/tests/structure_tests/a_test.json",
        "/workspace/tests/structure_tests/b_test.yaml",
    ]
    assert [t.path for t in catalog.functional] == ["/workspace/tests/functional_tests/npm_test.yaml"]
    assert all(t.kind is TestKind.STRUCTURE for t in catalog.structure)
    assert all(t.kind is TestKind.FUNCTIONAL for t in catalog.functional)


def test_only_matching_suffixes_are_tests(tmp_path: Path) -> None:
    """Files must end in _test.json or _test.yaml; other files are ignored."""
    write_tests(
        tmp_path,
        [
            "tests/structure_tests/ok_test.yaml",
            "tests/structure_tests/README.md",
            "tests/structure_tests/not_a_test.yml",
            "tests/structure_tests/test.json",
        ],
    )

    assert read_tests(tmp_path, "tests/structure_tests") == [
        "/workspace/tests/structure_tests/ok_test.yaml"
    ]


def test_subdirectories_are_skipped(tmp_path: Path) -> None:
    """A directory whose name looks like a test is not a test."""
    (tmp_path / "tests" / "fake_test.json").mkdir(parents=True)
    write_tests(tmp_path, ["tests/real_test.json"])

    assert read_tests(tmp_path, "tests") == ["/workspace/tests/real_test.json"]


def test_legacy_root_does_not_descend_into_subroots(tmp_path: Path) -> None:
    """Tests under tests/structure_tests are not also listed as legacy tests."""
    write_tests(tmp_path, ["tests/structure_tests/a_test.json"])

    catalog: TestCatalog = discover_test_catalog(tmp_path)

    assert catalog.paths == ("/workspace/tests/structure_tests/a_test.json",)


def test_workspace_path_helpers() -> None:
    """Workspace paths and workspace-relative names convert back and forth."""
    assert workspace_path("tests/a_test.json") == "/workspace/tests/a_test.json"
    assert workspace_relative("/workspace/tests/a_test.json") == "tests/a_test.json"


def test_catalog_from_paths_and_membership() -> None:
    """`TestCatalog.from_paths` addresses tests by workspace path."""
    catalog = TestCatalog.from_paths(
        structure=["tests/structure_tests/a_test.json"],
        functional=["tests/functional_tests/b_test.yaml"],
    )

    assert "/workspace/tests/structure_tests/a_test.json" in catalog
    assert "tests/structure_tests/a_test.json" not in catalog
    assert catalog.functional[0].name == "tests/functional_tests/b_test.yaml"
    assert len(catalog) == 2


def test_unreadable_root_propagates_os_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A catalog root that exists but cannot be listed is an I/O failure, not an empty root."""
    write_tests(tmp_path, ["tests/functional_tests/a_test.yaml"])

    def deny(self: Path) -> Iterator[Path]:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(pathlib.Path, "iterdir", deny)

    with pytest.raises(PermissionError):
        discover_test_catalog(tmp_path)
