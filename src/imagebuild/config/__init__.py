# topmark:header:start
#
#   project      : ImageBuild
#   file         : __init__.py
#   file_relpath : src/imagebuild/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration layer for ImageBuild.

Public surface:
    - `BuildOptions`: immutable, validated options handed to the planner.
    - `MutableBuildOptions`: layered builder (defaults < config file < CLI).
    - `normalize_registry` / `split_directories`: option normalization helpers.
"""

from __future__ import annotations

from imagebuild.config.model import (
    ArgsLike,
    BuildOptions,
    MutableBuildOptions,
    normalize_registry,
    split_directories,
)

__all__: list[str] = [
    "ArgsLike",
    "BuildOptions",
    "MutableBuildOptions",
    "normalize_registry",
    "split_directories",
]
