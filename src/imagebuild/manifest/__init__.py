# topmark:header:start
#
#   project      : ImageBuild
#   file         : __init__.py
#   file_relpath : src/imagebuild/manifest/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Version manifest model and loader."""

from __future__ import annotations

from imagebuild.manifest.loader import load_manifest, parse_manifest
from imagebuild.manifest.model import ImageDefinition, Manifest

__all__: list[str] = [
    "ImageDefinition",
    "Manifest",
    "load_manifest",
    "parse_manifest",
]
