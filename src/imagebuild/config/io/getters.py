# topmark:header:start
#
#   project      : ImageBuild
#   file         : getters.py
#   file_relpath : src/imagebuild/config/io/getters.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Checked value getters for TOML config tables.

Each getter validates the expected shape of one option and records a
**warning** in a `DiagnosticLog` (and also logs a warning) when the value is
present but mistyped. Missing keys yield ``None`` so the caller keeps the
lower-precedence value. User mistakes are surfaced without crashing or
changing defaulting behavior.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from .guards import is_any_list

if TYPE_CHECKING:
    from imagebuild.config.logging import ImagebuildLogger
    from imagebuild.core.diagnostics import DiagnosticLog

    from .types import TomlTable


def _warn_type(
    expected: str,
    loc: str,
    value: Any,
    *,
    diagnostics: DiagnosticLog,
    logger: ImagebuildLogger,
) -> None:
    logger.warning("Expected %s in %s, got %s: %r", expected, loc, type(value).__name__, value)
    diagnostics.add_warning(f"Expected {expected} in {loc}, got {type(value).__name__}: {value!r}")


def get_string_value_or_none_checked(
    table: TomlTable,
    key: str,
    *,
    where: str,
    diagnostics: DiagnosticLog,
    logger: ImagebuildLogger,
) -> str | None:
    """Return an optional string value, warning when present but not `str`."""
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value

    _warn_type("string", f"{where}.{key}", value, diagnostics=diagnostics, logger=logger)
    return None


def get_bool_value_or_none_checked(
    table: TomlTable,
    key: str,
    *,
    where: str,
    diagnostics: DiagnosticLog,
    logger: ImagebuildLogger,
) -> bool | None:
    """Return an optional boolean value, warning when present but not `bool`.

    Integers are **not** coerced.
    """
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        return value

    _warn_type("bool", f"{where}.{key}", value, diagnostics=diagnostics, logger=logger)
    return None


def get_int_value_or_none_checked(
    table: TomlTable,
    key: str,
    *,
    where: str,
    diagnostics: DiagnosticLog,
    logger: ImagebuildLogger,
) -> int | None:
    """Return an optional int value, warning when present but not `int`.

    Notes:
        - Missing key / None -> None
        - `bool` is rejected (since `bool` is a subclass of `int`).
    """
    value: Any | None = table.get(key)
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value

    _warn_type("int", f"{where}.{key}", value, diagnostics=diagnostics, logger=logger)
    return None


def get_string_list_value_or_none_checked(
    table: TomlTable,
    key: str,
    *,
    where: str,
    diagnostics: DiagnosticLog,
    logger: ImagebuildLogger,
) -> list[str] | None:
    """Extract an optional list of strings from a TOML table.

    Behavior:
        - If the key is missing, returns None.
        - If the value is not a list, warns and returns None.
        - Non-string items are dropped, each with a warning and a diagnostic.

    Args:
        table (TomlTable): TOML table to query.
        key (str): Key to extract.
        where (str): TOML location prefix (e.g. "[tool.imagebuild]").
        diagnostics (DiagnosticLog): DiagnosticLog to record warnings.
        logger (ImagebuildLogger): Logger for emitting warnings.

    Returns:
        list[str] | None: Filtered list containing only string entries, or None.
    """
    value: Any | None = table.get(key)
    if value is None:
        return None

    loc: Final[str] = f"{where}.{key}"

    if not is_any_list(value):
        _warn_type("list", loc, value, diagnostics=diagnostics, logger=logger)
        return None

    out: list[str] = []
    for v in value:
        if isinstance(v, str):
            out.append(v)
        else:
            logger.warning("Ignoring non-string entry in %s: %r", loc, v)
            diagnostics.add_warning(f"Ignoring non-string entry in {loc}: {v!r}")
    return out
