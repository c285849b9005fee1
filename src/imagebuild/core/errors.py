# topmark:header:start
#
#   project      : ImageBuild
#   file         : errors.py
#   file_relpath : src/imagebuild/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Error taxonomy for plan compilation.

These exceptions are raised by the config, manifest and planner layers and are
framework-agnostic: they carry no exit code and no styling. The CLI maps them
onto its own Click exceptions (see `imagebuild.cli.errors`).

Every error is fatal: the compilation is aborted and no partial plan is
produced. Errors carry a ``context`` mapping naming the offending option, test
or image so the operator can fix the manifest or the invocation and re-run.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType


class PlanError(Exception):
    """Base class for all plan compilation errors.

    Args:
        message (str): Human-readable description of the problem.
        context (Mapping[str, str] | None): Optional key/value details
            (e.g. ``{"option": "registry"}``).

    Attributes:
        message (str): Human-readable description of the problem.
        context (Mapping[str, str]): Read-only key/value details.
    """

    message: str
    context: Mapping[str, str]

    def __init__(self, message: str, context: Mapping[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = MappingProxyType(dict(context or {}))

    def __str__(self) -> str:
        """Return the message followed by the sorted context details, if any."""
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v}" for k, v in sorted(self.context.items()))
        return f"{self.message} ({details})"


class ConfigurationError(PlanError):
    """A required option is missing or malformed (e.g. an empty registry)."""


class ManifestLoadError(ConfigurationError):
    """The version manifest could not be read or is not a valid manifest document."""


class ManifestInconsistencyError(PlanError):
    """The manifest contradicts itself or the discovered test catalog.

    Raised, for instance, when an exclusion names a test that does not exist.
    A stale exclusion usually points at a renamed or removed test, so it is
    never silently dropped.
    """
