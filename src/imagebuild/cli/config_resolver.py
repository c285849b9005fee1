# topmark:header:start
#
#   project      : ImageBuild
#   file         : config_resolver.py
#   file_relpath : src/imagebuild/cli/config_resolver.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Resolve build options from Click parameters.

This module bridges CLI parsing and the configuration layer: it builds an
`ArgsNamespace` and merges it over the discovered and explicit config files.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from imagebuild.config import MutableBuildOptions
from imagebuild.config.io import discover_config_file
from imagebuild.config.logging import get_logger

if TYPE_CHECKING:
    from imagebuild.cli.cli_types import ArgsNamespace
    from imagebuild.config.logging import ImagebuildLogger

logger: ImagebuildLogger = get_logger(__name__)


def resolve_options(args: ArgsNamespace, *, anchor: Path | None = None) -> MutableBuildOptions:
    """Merge all option layers into one draft.

    Resolution order (lowest to highest precedence):
      1. **Defaults** (applied by `MutableBuildOptions.freeze`).
      2. **Discovered config** in ``anchor`` (the working directory by
         default), unless ``no_config`` is set: ``imagebuild.toml``, else
         ``[tool.imagebuild]`` in ``pyproject.toml``.
      3. **Explicit config files** (``--config``), merged in order.
      4. **CLI overrides**, applied last.

    Args:
        args (ArgsNamespace): Parsed command-line arguments.
        anchor (Path | None): Directory searched for a config file.

    Returns:
        MutableBuildOptions: The merged draft. Call `.freeze()` to validate it.

    Raises:
        ConfigurationError: If a config file cannot be read or parsed.
    """
    logger.trace("ArgsNamespace: %s", args)
    draft = MutableBuildOptions()

    if not args.get("no_config"):
        directory: Path = (anchor or Path.cwd()).resolve()
        discovered: Path | None = discover_config_file(directory)
        if discovered is not None:
            logger.info("Loading discovered config: %s", discovered)
            draft.merge_with(MutableBuildOptions.from_config_file(discovered))
        else:
            logger.debug("No config file in %s", directory)

    for entry in args.get("config_files") or []:
        p = Path(entry)
        if not p.is_file():
            logger.warning("Config file not found: %s", p)
            draft.diagnostics.add_warning(f"Config file not found: {p}")
            continue
        logger.info("Loading explicit config: %s", p)
        draft.merge_with(MutableBuildOptions.from_config_file(p))

    draft.merge_with(MutableBuildOptions.from_args(args))
    logger.debug("Resolved options draft: %r", draft)
    return draft
