# topmark:header:start
#
#   project      : ImageBuild
#   file         : __init__.py
#   file_relpath : src/imagebuild/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImageBuild CLI subcommands."""
