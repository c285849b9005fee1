# topmark:header:start
#
#   project      : ImageBuild
#   file         : cli_types.py
#   file_relpath : src/imagebuild/cli/cli_types.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared CLI parameter types and argument namespace for ImageBuild.

`ArgsNamespace` is the typed mapping handed from Click commands to the config
layer (`imagebuild.config.MutableBuildOptions.from_args`); `EnumChoiceParam`
parses enum-valued options such as ``--format``.
"""

from __future__ import annotations

from enum import Enum
from typing import (
    TYPE_CHECKING,
    Generic,
    Iterable,
    NoReturn,
    Protocol,
    TypedDict,
    TypeVar,
    cast,
)

import click

if TYPE_CHECKING:
    from click.shell_completion import CompletionItem as ClickCompletionItem

    class ParamTypeBase(Protocol):
        """Typed base to avoid subclassing Any when Click lacks stubs."""

        name: str

else:
    # At runtime, subclass the real Click type
    ParamTypeBase = click.ParamType  # type: ignore[assignment]

# Type variable bounded to Enum for generic EnumParam
E = TypeVar("E", bound=Enum)


class ArgsNamespace(TypedDict, total=False):
    """Parsed CLI arguments of the ``render`` command.

    ``None`` means "not given on the command line" so lower-precedence layers
    (config files, defaults) apply.

    Attributes:
        manifest (str | None): Path of the version manifest.
        registry (str | None): Registry prefix.
        directories (list[str] | None): Directory selection (may be comma-separated).
        run_tests (bool | None): Whether to schedule tests.
        require_new_tags (bool | None): Whether to add preflight tag checks.
        first_tag_only (bool | None): Whether to keep only the first tag.
        timeout_seconds (int | None): Build timeout in seconds.
        machine_type (str | None): Machine type hint.
        enable_parallel (bool | None): Allow parallel scheduling.
        force_parallel (bool | None): Force parallel scheduling.
        no_config (bool | None): Whether to skip config file discovery.
        config_files (list[str] | None): Explicit config files, merged in order.
    """

    manifest: str | None
    registry: str | None
    directories: list[str] | None
    run_tests: bool | None
    require_new_tags: bool | None
    first_tag_only: bool | None
    timeout_seconds: int | None
    machine_type: str | None
    enable_parallel: bool | None
    force_parallel: bool | None
    no_config: bool | None
    config_files: list[str] | None


def build_args_namespace(
    *,
    manifest: str | None = None,
    registry: str | None = None,
    directories: list[str] | None = None,
    run_tests: bool | None = None,
    require_new_tags: bool | None = None,
    first_tag_only: bool | None = None,
    timeout_seconds: int | None = None,
    machine_type: str | None = None,
    enable_parallel: bool | None = None,
    force_parallel: bool | None = None,
    no_config: bool | None = None,
    config_files: list[str] | None = None,
) -> ArgsNamespace:
    """Build an ArgsNamespace dictionary for CLI argument passing.

    Returns:
        ArgsNamespace: Dictionary of CLI argument values (see `ArgsNamespace`).
    """
    return {
        "manifest": manifest,
        "registry": registry,
        "directories": directories or None,
        "run_tests": run_tests,
        "require_new_tags": require_new_tags,
        "first_tag_only": first_tag_only,
        "timeout_seconds": timeout_seconds,
        "machine_type": machine_type,
        "enable_parallel": enable_parallel,
        "force_parallel": force_parallel,
        "no_config": no_config,
        "config_files": config_files,
    }


class EnumChoiceParam(ParamTypeBase, Generic[E]):
    """A Click parameter type that converts a string to a member of a given Enum."""

    enum_cls: type[E]
    name: str
    choices: list[str]

    def __init__(self, enum_cls: type[E], *, only: Iterable[E] | None = None) -> None:
        self.enum_cls = enum_cls
        self.name = self.enum_cls.__name__.lower()
        members: Iterable[E] = only if only is not None else cast("Iterable[E]", enum_cls)
        self.members: list[E] = list(members)
        # Assume the enum exposes string-valued members (e.g., OutputFormat)
        self.choices = [cast("str", getattr(e, "value", str(e))) for e in self.members]

    def _fail_noreturn(
        self,
        message: str,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> NoReturn:
        """Raise a BadParameter with a NoReturn signature (clear to type checkers)."""
        raise click.BadParameter(message, param=param, ctx=ctx)

    def convert(
        self,
        value: str | E | None,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> E | None:
        """Converts a string to a member of the Enum."""
        if value is None:
            return None
        if isinstance(value, self.enum_cls):
            return value

        # Case-insensitive lookup by the enum's string value
        lookup: dict[str, E] = {
            cast("str", getattr(choice, "value", str(choice))).lower(): choice
            for choice in self.members
        }

        key: str = str(value).lower()
        if key in lookup:
            return lookup[key]

        self._fail_noreturn(
            f"Invalid value '{value}'. Must be one of: {', '.join(self.choices)}",
            param,
            ctx,
        )

    def shell_complete(
        self,
        ctx: click.Context,  # pylint: disable=unused-argument
        param: click.Parameter,  # pylint: disable=unused-argument
        incomplete: str,
    ) -> list[ClickCompletionItem]:
        """Tab completion for Click.

        Bash: `eval "$(_IMAGEBUILD_COMPLETE=bash_source imagebuild)"`
        """
        from click.shell_completion import CompletionItem as RuntimeCompletionItem

        prefix: str = (incomplete or "").lower()
        return [RuntimeCompletionItem(c) for c in self.choices if c.lower().startswith(prefix)]

    def __repr__(self) -> str:
        """Return a string representation."""
        return f"EnumParam({self.enum_cls.__name__})"
