# topmark:header:start
#
#   project      : ImageBuild
#   file         : loaders.py
#   file_relpath : src/imagebuild/config/io/loaders.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load TOML configuration sources.

This module provides I/O helpers for reading ImageBuild configuration from
on-disk TOML files (``imagebuild.toml`` / ``pyproject.toml``).

Parsing is done with `tomlkit` and returned as plain `dict` structures.
A config file that was found but cannot be parsed is a `ConfigurationError`:
the build options it carries (e.g. the registry) are not optional.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from imagebuild.config.keys import Toml
from imagebuild.config.logging import get_logger
from imagebuild.constants import DEFAULT_TOML_CONFIG_NAME, PYPROJECT_TOML_NAME
from imagebuild.core.errors import ConfigurationError

from .guards import is_toml_table

if TYPE_CHECKING:
    from pathlib import Path

    from imagebuild.config.logging import ImagebuildLogger

    from .types import TomlTable

logger: ImagebuildLogger = get_logger(__name__)


def load_toml_dict(path: Path) -> TomlTable:
    """Load and parse a TOML file from the filesystem.

    Args:
        path: Path to a TOML document (e.g., ``imagebuild.toml`` or ``pyproject.toml``).

    Returns:
        The parsed TOML content.

    Raises:
        ConfigurationError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
    except OSError as e:
        logger.error("Error loading TOML from %s: %s", path, e)
        raise ConfigurationError(
            f"Cannot read config file: {e.strerror or e}", {"file": str(path)}
        ) from e
    except TomlkitParseError as e:
        logger.error("Error decoding TOML from %s: %s", path, e)
        raise ConfigurationError(f"Invalid TOML: {e}", {"file": str(path)}) from e

    data_any: Any = doc.unwrap()
    return cast("TomlTable", data_any) if is_toml_table(data_any) else {}


def load_options_table(path: Path) -> TomlTable | None:
    """Return the build options table from a config file.

    For ``pyproject.toml`` the options live in ``[tool.imagebuild]``; any other
    file is read as a flat table.

    Args:
        path: Path to the config file.

    Returns:
        The options table, or ``None`` when a ``pyproject.toml`` carries no
        ``[tool.imagebuild]`` section.
    """
    data: TomlTable = load_toml_dict(path)
    if path.name != PYPROJECT_TOML_NAME:
        return data

    tool: Any = data.get(Toml.SECTION_TOOL)
    section: Any = tool.get(Toml.SECTION_IMAGEBUILD) if is_toml_table(tool) else None
    if section is None:
        logger.debug("No [tool.%s] section in %s", Toml.SECTION_IMAGEBUILD, path)
        return None
    if not is_toml_table(section):
        raise ConfigurationError(
            f"[tool.{Toml.SECTION_IMAGEBUILD}] must be a table", {"file": str(path)}
        )
    return section


def discover_config_file(directory: Path) -> Path | None:
    """Return the config file to use in ``directory``, if any.

    ``imagebuild.toml`` takes precedence over ``pyproject.toml``; a
    ``pyproject.toml`` only counts when it has a ``[tool.imagebuild]`` section.

    Args:
        directory: Directory to search (usually the current working directory).

    Returns:
        The config file path, or ``None`` when nothing applies.
    """
    candidate: Path = directory / DEFAULT_TOML_CONFIG_NAME
    if candidate.is_file():
        logger.debug("Discovered config file %s", candidate)
        return candidate

    pyproject: Path = directory / PYPROJECT_TOML_NAME
    if pyproject.is_file() and load_options_table(pyproject) is not None:
        logger.debug("Discovered [tool.%s] in %s", Toml.SECTION_IMAGEBUILD, pyproject)
        return pyproject

    return None
