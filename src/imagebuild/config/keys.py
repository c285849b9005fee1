# topmark:header:start
#
#   project      : ImageBuild
#   file         : keys.py
#   file_relpath : src/imagebuild/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML section and key names for ImageBuild configuration.

This module defines the authoritative string constants used when reading
ImageBuild configuration from TOML sources (``imagebuild.toml`` and
``[tool.imagebuild]`` in ``pyproject.toml``).

Design notes:
    - Keys defined here represent *external configuration API*.
    - Renaming or removing keys is a breaking change.
    - CLI option names are defined on the Click commands and kept separate.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by ImageBuild configuration.

    The build options live in a single flat table: the top-level table of
    ``imagebuild.toml``, or ``[tool.imagebuild]`` inside ``pyproject.toml``.
    """

    # pyproject.toml nesting
    SECTION_TOOL: Final[str] = "tool"
    SECTION_IMAGEBUILD: Final[str] = "imagebuild"

    # Inputs
    KEY_MANIFEST: Final[str] = "manifest"
    KEY_REGISTRY: Final[str] = "registry"
    KEY_DIRECTORIES: Final[str] = "directories"

    # Tests and tags
    KEY_RUN_TESTS: Final[str] = "run_tests"
    KEY_REQUIRE_NEW_TAGS: Final[str] = "require_new_tags"
    KEY_FIRST_TAG_ONLY: Final[str] = "first_tag_only"

    # Build host
    KEY_TIMEOUT: Final[str] = "timeout"
    KEY_MACHINE_TYPE: Final[str] = "machine_type"
    KEY_ENABLE_PARALLEL: Final[str] = "enable_parallel"
    KEY_FORCE_PARALLEL: Final[str] = "force_parallel"

    @classmethod
    def known_keys(cls) -> frozenset[str]:
        """Return every option key accepted in the build options table."""
        return frozenset(
            {
                cls.KEY_MANIFEST,
                cls.KEY_REGISTRY,
                cls.KEY_DIRECTORIES,
                cls.KEY_RUN_TESTS,
                cls.KEY_REQUIRE_NEW_TAGS,
                cls.KEY_FIRST_TAG_ONLY,
                cls.KEY_TIMEOUT,
                cls.KEY_MACHINE_TYPE,
                cls.KEY_ENABLE_PARALLEL,
                cls.KEY_FORCE_PARALLEL,
            }
        )
