# topmark:header:start
#
#   project      : ImageBuild
#   file         : version.py
#   file_relpath : src/imagebuild/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImageBuild `version` command.

Prints the current ImageBuild version as installed in the active Python environment.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click
import yaml

from imagebuild.cli.cli_types import EnumChoiceParam
from imagebuild.constants import IMAGEBUILD_VERSION
from imagebuild.core.formats import OutputFormat

if TYPE_CHECKING:
    from imagebuild.cli.console_api import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of ImageBuild.",
)
@click.option(
    "--format",
    "output_format",
    type=EnumChoiceParam(OutputFormat),
    default=None,
    help=f"Output format ({', '.join(v.value for v in OutputFormat)}).",
)
def version_command(*, output_format: OutputFormat | None = None) -> None:
    """Show the current version of ImageBuild.

    Args:
        output_format (OutputFormat | None): Optional output format (plain text by default).
    """
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    vlevel: int = int(ctx.obj.get("verbosity_level", 0))

    fmt: OutputFormat = output_format or OutputFormat.TEXT
    if fmt == OutputFormat.JSON:
        console.print(json.dumps({"version": IMAGEBUILD_VERSION}))
    elif fmt == OutputFormat.YAML:
        console.print(yaml.safe_dump({"version": IMAGEBUILD_VERSION}), nl=False)
    elif fmt == OutputFormat.MARKDOWN:
        console.print("# ImageBuild Version\n")
        console.print(f"**ImageBuild version: {IMAGEBUILD_VERSION}**")
    else:  # Plain text (default)
        if vlevel > 0:
            console.print(console.styled("ImageBuild version:\n", bold=True, underline=True))
            console.print(f"    {console.styled(IMAGEBUILD_VERSION, bold=True)}")
        else:
            console.print(console.styled(IMAGEBUILD_VERSION, bold=True))
