# topmark:header:start
#
#   project      : ImageBuild
#   file         : catalog.py
#   file_relpath : src/imagebuild/catalog.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Test catalog discovery.

The catalog lists the test descriptors available in a workspace. Tests live in
three fixed roots, relative to the workspace:

- ``tests`` (legacy structure tests),
- ``tests/structure_tests``,
- ``tests/functional_tests``.

Only regular files whose name ends in ``_test.json`` or ``_test.yaml`` are
tests. Descriptors are addressed by the path the build host sees
(``/workspace/<root>/<name>``) and listed in file name order so that the
catalog, and every plan built from it, is deterministic.

A missing root is not an error (it simply holds no tests); any other I/O
error while listing a root propagates.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from imagebuild.config.logging import get_logger
from imagebuild.constants import (
    FUNCTIONAL_TESTS_DIR,
    LEGACY_TESTS_DIR,
    STRUCTURE_TESTS_DIR,
    TEST_FILE_SUFFIXES,
    WORKSPACE_PREFIX,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from imagebuild.config.logging import ImagebuildLogger

logger: ImagebuildLogger = get_logger(__name__)


class TestKind(str, Enum):
    """Kind of a test descriptor."""

    __test__ = False  # not a pytest test class

    STRUCTURE = "structure"
    FUNCTIONAL = "functional"


@dataclass(frozen=True, slots=True)
class TestDescriptor:
    """A test file, addressed by its workspace path.

    Attributes:
        path (str): Path as seen by the build host (``/workspace/...``).
        kind (TestKind): Whether this is a structure or a functional test.
    """

    __test__ = False  # not a pytest test class

    path: str
    kind: TestKind

    @property
    def name(self) -> str:
        """Workspace-relative path, the form used by manifest exclusions."""
        return workspace_relative(self.path)


def workspace_path(relpath: str) -> str:
    """Return the build host path of a workspace-relative path."""
    return f"{WORKSPACE_PREFIX}{relpath}"


def workspace_relative(path: str) -> str:
    """Return ``path`` without the workspace prefix."""
    return path.removeprefix(WORKSPACE_PREFIX)


@dataclass(frozen=True, slots=True)
class TestCatalog:
    """Discovered tests, partitioned by kind, in discovery order.

    Attributes:
        structure (tuple[TestDescriptor, ...]): Structure tests (legacy root first).
        functional (tuple[TestDescriptor, ...]): Functional tests.
    """

    __test__ = False  # not a pytest test class

    structure: tuple[TestDescriptor, ...] = ()
    functional: tuple[TestDescriptor, ...] = ()

    @classmethod
    def from_paths(
        cls,
        *,
        structure: Iterable[str] = (),
        functional: Iterable[str] = (),
    ) -> TestCatalog:
        """Build a catalog from workspace-relative paths (handy for tests and the API)."""
        return cls(
            structure=tuple(
                TestDescriptor(workspace_path(p), TestKind.STRUCTURE) for p in structure
            ),
            functional=tuple(
                TestDescriptor(workspace_path(p), TestKind.FUNCTIONAL) for p in functional
            ),
        )

    @property
    def paths(self) -> tuple[str, ...]:
        """All test paths, structure tests first."""
        return tuple(t.path for t in (*self.structure, *self.functional))

    @property
    def is_empty(self) -> bool:
        """Whether the catalog holds no tests at all."""
        return not self.structure and not self.functional

    def __contains__(self, path: object) -> bool:
        return path in self.paths

    def __len__(self) -> int:
        return len(self.structure) + len(self.functional)


def read_tests(workspace: Path, root: str) -> list[str]:
    """List the test files of one catalog root.

    Args:
        workspace (Path): Workspace directory.
        root (str): Workspace-relative catalog root (e.g. ``"tests/functional_tests"``).

    Returns:
        list[str]: Build host paths of the tests, sorted by file name. Empty
            when the root does not exist or is not a directory.

    Raises:
        OSError: If the root exists but cannot be listed.
    """
    directory: Path = workspace / root
    if not directory.is_dir():
        logger.debug("No test directory %s", directory)
        return []

    tests: list[str] = []
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            continue
        if entry.name.endswith(TEST_FILE_SUFFIXES):
            tests.append(workspace_path(f"{root}/{entry.name}"))
    logger.trace("Found %d test(s) in %s", len(tests), directory)
    return tests


def discover_test_catalog(workspace: Path | str = ".") -> TestCatalog:
    """Discover the test catalog of ``workspace``.

    Args:
        workspace (Path | str): Workspace directory (defaults to the current directory).

    Returns:
        TestCatalog: The discovered tests.

    Raises:
        OSError: If a catalog root exists but cannot be listed.
    """
    ws = Path(workspace)
    structure: list[str] = read_tests(ws, LEGACY_TESTS_DIR) + read_tests(ws, STRUCTURE_TESTS_DIR)
    functional: list[str] = read_tests(ws, FUNCTIONAL_TESTS_DIR)

    catalog = TestCatalog(
        structure=tuple(TestDescriptor(p, TestKind.STRUCTURE) for p in structure),
        functional=tuple(TestDescriptor(p, TestKind.FUNCTIONAL) for p in functional),
    )
    logger.info(
        "Discovered %d structure and %d functional test(s) in %s",
        len(catalog.structure),
        len(catalog.functional),
        ws,
    )
    return catalog
