# topmark:header:start
#
#   project      : ImageBuild
#   file         : model.py
#   file_relpath : src/imagebuild/manifest/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Immutable version manifest model.

A manifest is loaded once and never mutated afterwards; sequences are stored
as tuples so definitions can be shared freely between the planner stages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True, slots=True)
class ImageDefinition:
    """One buildable unit of the manifest.

    Attributes:
        directory (str): Source directory holding the Dockerfile.
        repo (str): Repository name inside the registry (e.g. ``"nodejs"``).
        tags (tuple[str, ...]): Ordered tags; the first one is the primary tag.
        builder (bool): Whether this is a pure builder image (built, never shipped).
        builder_image (str | None): Registry-relative reference of the builder
            image this definition is built with, if any.
        builder_args (tuple[str, ...]): Arguments passed to the builder image.
        image_name_from_builder (str | None): Name of the image produced by
            the builder; becomes the canonical name of the build step.
        exclude_tests (tuple[str, ...]): Workspace-relative test paths that do
            not apply to this image.
    """

    directory: str
    repo: str
    tags: tuple[str, ...] = ()
    builder: bool = False
    builder_image: str | None = None
    builder_args: tuple[str, ...] = ()
    image_name_from_builder: str | None = None
    exclude_tests: tuple[str, ...] = ()

    @property
    def alias_eligible(self) -> bool:
        """Whether non-primary tags become alias tags (builder-only images never do)."""
        return not self.builder

    def image_names(self, registry: str) -> tuple[str, ...]:
        """Return the fully-qualified image name for every tag, in tag order."""
        return tuple(f"{registry}/{self.repo}:{tag}" for tag in self.tags)


@dataclass(frozen=True, slots=True)
class Manifest:
    """Ordered collection of image definitions.

    Attributes:
        images (tuple[ImageDefinition, ...]): Definitions in manifest order.
        source (str | None): Where the manifest was read from, for diagnostics.
    """

    images: tuple[ImageDefinition, ...] = ()
    source: str | None = None

    def __iter__(self) -> Iterator[ImageDefinition]:
        return iter(self.images)

    def __len__(self) -> int:
        return len(self.images)

    @property
    def directories(self) -> tuple[str, ...]:
        """Directories of all definitions, in manifest order."""
        return tuple(image.directory for image in self.images)
