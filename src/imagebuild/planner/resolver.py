# topmark:header:start
#
#   project      : ImageBuild
#   file         : resolver.py
#   file_relpath : src/imagebuild/planner/resolver.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Test resolver: which catalog tests apply to an image definition.

Every discovered test applies to every image unless the image excludes it.
Exclusions name tests by their workspace-relative path (the form used in the
manifest, e.g. ``tests/functional_tests/npm_test.yaml``). An exclusion that
matches no discovered test aborts the compilation: a stale exclusion usually
means a test was renamed or removed, and the operator must notice.

Resolved tests keep catalog order, regardless of the order of the exclusion
list, so test execution order is deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from imagebuild.catalog import workspace_path
from imagebuild.config.logging import get_logger
from imagebuild.core.errors import ManifestInconsistencyError

if TYPE_CHECKING:
    from imagebuild.catalog import TestCatalog, TestDescriptor
    from imagebuild.config.logging import ImagebuildLogger
    from imagebuild.manifest.model import ImageDefinition

logger: ImagebuildLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedTests:
    """Tests applying to one image, in catalog order."""

    structure: tuple[TestDescriptor, ...] = ()
    functional: tuple[TestDescriptor, ...] = ()


def resolve_tests(catalog: TestCatalog, image: ImageDefinition) -> ResolvedTests:
    """Resolve the catalog tests that apply to ``image``.

    Args:
        catalog (TestCatalog): The discovered tests.
        image (ImageDefinition): The image definition and its exclusions.

    Returns:
        ResolvedTests: The applicable structure and functional tests.

    Raises:
        ManifestInconsistencyError: If an exclusion names a test that is not
            in the catalog.
    """
    included: dict[str, bool] = dict.fromkeys(catalog.paths, True)

    for excluded in image.exclude_tests:
        path: str = workspace_path(excluded)
        if path not in catalog:
            raise ManifestInconsistencyError(
                f"No such test to exclude: {excluded}",
                {"test": excluded, "directory": image.directory},
            )
        included[path] = False
        logger.debug("Excluding %s for %s", excluded, image.directory)

    return ResolvedTests(
        structure=tuple(t for t in catalog.structure if included[t.path]),
        functional=tuple(t for t in catalog.functional if included[t.path]),
    )
