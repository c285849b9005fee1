# topmark:header:start
#
#   project      : ImageBuild
#   file         : __init__.py
#   file_relpath : src/imagebuild/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImageBuild package.

ImageBuild compiles a version manifest (``versions.yaml``) into a multi-image
build plan: which images to build, in which order or parallel grouping, which
tests to run against each of them and how to tag the results. The plan is an
abstract value; renderers turn it into concrete pipeline descriptions such as
Cloud Build YAML.
"""

from __future__ import annotations
