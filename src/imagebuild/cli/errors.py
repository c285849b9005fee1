# topmark:header:start
#
#   project      : ImageBuild
#   file         : errors.py
#   file_relpath : src/imagebuild/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the ImageBuild CLI.

Usage:
    Commands convert planner and I/O failures with `cli_error_from` and raise
    the result; Click prints the message and exits with the matching
    `ExitCode`.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no console
    is present in the Click context, they fall back to Click's default styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from imagebuild.cli.exit_codes import ExitCode
from imagebuild.core.errors import ConfigurationError, ManifestInconsistencyError, ManifestLoadError


class ImagebuildError(click.ClickException):
    """Base class for all ImageBuild CLI errors."""

    exit_code = ExitCode.UNEXPECTED_ERROR

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text.

        Notes:
            - Unlike Click's default, this method does not add color.
            - Colorization is applied in `show()` when a project console is present.
        """
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available.

        Falls back to Click's default error display when no console is present.
        """
        ctx: click.Context | None = click.get_current_context(silent=True)
        if ctx is not None and isinstance(ctx.obj, dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(console.styled(f"Error: {self.format_message()}", fg="bright_red"))
                return
        super().show(file)


class ImagebuildUsageError(ImagebuildError):
    """Error for command-line invocation errors (invalid flags/args)."""

    exit_code = ExitCode.USAGE_ERROR


class ImagebuildManifestError(ImagebuildError):
    """Error for malformed or inconsistent manifests."""

    exit_code = ExitCode.MANIFEST_ERROR


class ImagebuildFileNotFoundError(ImagebuildError):
    """Error when the manifest does not exist."""

    exit_code = ExitCode.FILE_NOT_FOUND


class ImagebuildIOError(ImagebuildError):
    """Error for I/O errors reading the workspace or writing output."""

    exit_code = ExitCode.IO_ERROR


class ImagebuildConfigError(ImagebuildError):
    """Error for missing or invalid build options and config files."""

    exit_code = ExitCode.CONFIG_ERROR


class ImagebuildUnexpectedError(ImagebuildError):
    """Error for unhandled/unknown errors (last-resort)."""

    exit_code = ExitCode.UNEXPECTED_ERROR


def cli_error_from(exc: Exception) -> ImagebuildError:
    """Map a planner or I/O exception to the CLI error carrying its exit code.

    Args:
        exc (Exception): The exception to translate.

    Returns:
        ImagebuildError: The CLI error to raise.
    """
    if isinstance(exc, (ManifestLoadError, ManifestInconsistencyError)):
        return ImagebuildManifestError(str(exc))
    if isinstance(exc, ConfigurationError):
        return ImagebuildConfigError(str(exc))
    if isinstance(exc, FileNotFoundError):
        return ImagebuildFileNotFoundError(f"No such file: {exc.filename}")
    if isinstance(exc, OSError):
        target: str = f" ({exc.filename})" if exc.filename else ""
        return ImagebuildIOError(f"{exc.strerror or exc}{target}")
    return ImagebuildUnexpectedError(f"{type(exc).__name__}: {exc}")
