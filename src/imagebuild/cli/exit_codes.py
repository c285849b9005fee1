# topmark:header:start
#
#   project      : ImageBuild
#   file         : exit_codes.py
#   file_relpath : src/imagebuild/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exit codes for the ImageBuild CLI.

ImageBuild aligns with the BSD `sysexits` convention so that CI tooling can
tell a bad invocation, a broken manifest and an unreadable file apart.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the ImageBuild CLI.

    Attributes:
        SUCCESS: The plan was rendered.
        USAGE_ERROR: Command-line invocation error (invalid flags/args). Mirrors
            BSD ``EX_USAGE (64)``.
        MANIFEST_ERROR: The manifest is malformed or inconsistent (unknown test
            exclusion, tagless image, ...). Mirrors BSD ``EX_DATAERR (65)``.
        FILE_NOT_FOUND: The manifest does not exist. Mirrors BSD ``EX_NOINPUT (66)``.
        IO_ERROR: I/O error reading the workspace or writing the output. Mirrors
            BSD ``EX_IOERR (74)``.
        CONFIG_ERROR: Missing or invalid build option or config file. Mirrors
            BSD ``EX_CONFIG (78)``.
        UNEXPECTED_ERROR: Unhandled/unknown error (last-resort).
    """

    SUCCESS = 0

    # sysexits-aligned values for better interoperability
    USAGE_ERROR = 64  # EX_USAGE
    MANIFEST_ERROR = 65  # EX_DATAERR
    FILE_NOT_FOUND = 66  # EX_NOINPUT
    IO_ERROR = 74  # EX_IOERR
    CONFIG_ERROR = 78  # EX_CONFIG

    UNEXPECTED_ERROR = 255
