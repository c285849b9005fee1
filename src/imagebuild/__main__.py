# topmark:header:start
#
#   project      : ImageBuild
#   file         : __main__.py
#   file_relpath : src/imagebuild/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running ImageBuild via ``python -m imagebuild``.

It delegates directly to :func:`imagebuild.cli.main.cli`, ensuring a single,
authoritative CLI entry point regardless of how ImageBuild is launched.

Examples:
    Render the Cloud Build pipeline for the manifest in the current directory::

        python -m imagebuild render --registry gcr.io/my-project
"""

from __future__ import annotations

from imagebuild.cli.main import cli

if __name__ == "__main__":
    # We call the Click group directly
    cli()
