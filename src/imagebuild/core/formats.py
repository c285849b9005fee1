# topmark:header:start
#
#   project      : ImageBuild
#   file         : formats.py
#   file_relpath : src/imagebuild/core/formats.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared output format definitions used across ImageBuild frontends.

This module centralizes the `OutputFormat` enum so CLI commands and renderers
can agree on the same format vocabulary without introducing `Click` or console
dependencies.

Machine formats (YAML, JSON) are stable and colorless: they are the pipeline
descriptions handed to the build host.
"""

from __future__ import annotations

from enum import Enum


class OutputFormat(str, Enum):
    """Output format for rendering a build plan.

    Attributes:
        YAML: Cloud Build pipeline description as YAML (machine-readable).
        JSON: Cloud Build pipeline description as JSON (machine-readable).
        TEXT: Human-friendly plan summary; may include ANSI color if enabled.
        MARKDOWN: Human-friendly plan summary as a Markdown document.

    Notes:
        - Use with [`imagebuild.cli.cli_types.EnumChoiceParam`][] to parse
          ``--format`` from Click.
    """

    # Machine formats:
    YAML = "yaml"
    JSON = "json"

    # Human formats:
    TEXT = "text"
    MARKDOWN = "markdown"
