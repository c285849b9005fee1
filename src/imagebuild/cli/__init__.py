# topmark:header:start
#
#   project      : ImageBuild
#   file         : __init__.py
#   file_relpath : src/imagebuild/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Command-line interface for ImageBuild (Click based)."""
