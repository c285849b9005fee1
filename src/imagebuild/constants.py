# topmark:header:start
#
#   project      : ImageBuild
#   file         : constants.py
#   file_relpath : src/imagebuild/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImageBuild Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version
from typing import Final

IMAGEBUILD_VERSION: str = get_version("imagebuild")

# Default manifest and config file names, resolved against the working directory:
DEFAULT_MANIFEST_NAME: Final[str] = "versions.yaml"
DEFAULT_TOML_CONFIG_NAME: Final[str] = "imagebuild.toml"
PYPROJECT_TOML_NAME: Final[str] = "pyproject.toml"

# Test catalog roots, relative to the workspace. Legacy structure tests reside
# in the root tests/ directory.
LEGACY_TESTS_DIR: Final[str] = "tests"
STRUCTURE_TESTS_DIR: Final[str] = "tests/structure_tests"
FUNCTIONAL_TESTS_DIR: Final[str] = "tests/functional_tests"
TEST_FILE_SUFFIXES: Final[tuple[str, ...]] = ("_test.json", "_test.yaml")

# Path under which the build host mounts the workspace.
WORKSPACE_PREFIX: Final[str] = "/workspace/"

# Machine types accepted by the build host.
MACHINE_TYPES: Final[tuple[str, ...]] = (
    "N1_HIGHCPU_8",
    "N1_HIGHCPU_32",
    "E2_HIGHCPU_8",
    "E2_HIGHCPU_32",
)
PARALLEL_MACHINE_TYPE: Final[str] = "E2_HIGHCPU_8"

# Scheduling identifiers.
IMAGE_STEP_PREFIX: Final[str] = "image-"
STRUCTURE_TEST_STEP_PREFIX: Final[str] = "structure-"
FUNCTIONAL_TEST_STEP_PREFIX: Final[str] = "test-"
TAG_CHECK_STEP_PREFIX: Final[str] = "check-"
START_IMMEDIATELY: Final[str] = "-"
