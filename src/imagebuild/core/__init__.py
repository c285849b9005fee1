# topmark:header:start
#
#   project      : ImageBuild
#   file         : __init__.py
#   file_relpath : src/imagebuild/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core, frontend-independent building blocks shared across ImageBuild.

This package holds the error taxonomy and the output format vocabulary. It has
no Click or console dependencies so the planner, the renderers and the CLI can
all import it.
"""

from __future__ import annotations

from imagebuild.core.errors import (
    ConfigurationError,
    ManifestInconsistencyError,
    ManifestLoadError,
    PlanError,
)
from imagebuild.core.formats import OutputFormat

__all__: list[str] = [
    "ConfigurationError",
    "ManifestInconsistencyError",
    "ManifestLoadError",
    "OutputFormat",
    "PlanError",
]
