# topmark:header:start
#
#   project      : ImageBuild
#   file         : __init__.py
#   file_relpath : src/imagebuild/config/io/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TOML I/O helpers for ImageBuild configuration.

This package centralizes **pure** helpers for reading and validating the TOML
used by ImageBuild's configuration layer. Keeping these utilities separate
keeps the options model small and import-light.

TOML parsing:
    ImageBuild uses `tomlkit` for parsing. `load_toml_dict()` parses on-disk
    TOML and returns plain dicts; `load_options_table()` extracts the build
    options table from ``imagebuild.toml`` or ``pyproject.toml``.

Typical flow:
    1. Discover or receive a config file path.
    2. Load the options table (``load_options_table``).
    3. Read values with the checked getters, which record a warning in a
       `DiagnosticLog` for every mistyped value instead of failing.
"""

from __future__ import annotations

from .getters import (
    get_bool_value_or_none_checked,
    get_int_value_or_none_checked,
    get_string_list_value_or_none_checked,
    get_string_value_or_none_checked,
)
from .guards import is_any_list, is_toml_table
from .loaders import discover_config_file, load_options_table, load_toml_dict
from .types import TomlTable

__all__: list[str] = [
    "TomlTable",
    "discover_config_file",
    "get_bool_value_or_none_checked",
    "get_int_value_or_none_checked",
    "get_string_list_value_or_none_checked",
    "get_string_value_or_none_checked",
    "is_any_list",
    "is_toml_table",
    "load_options_table",
    "load_toml_dict",
]
