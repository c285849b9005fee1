# topmark:header:start
#
#   project      : ImageBuild
#   file         : loader.py
#   file_relpath : src/imagebuild/manifest/loader.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load the version manifest (``versions.yaml``).

The manifest is a YAML document with a top-level ``versions`` list::

    versions:
      - dir: '8/debian9/8.11'
        repo: 'nodejs'
        tags: ['8.11', '8', 'latest']
        excludeTests: ['tests/functional_tests/npm_test.yaml']

Recognized keys per entry: ``dir``, ``repo``, ``tags``, ``builder``,
``builderImage``, ``builderArgs``, ``imageNameFromBuilder`` and
``excludeTests``. Keys consumed by other tools (``from``, ``templateArgs``,
``packages``, ...) are ignored.

Numeric-looking scalars are kept as strings: a tag written as ``8.10`` must
not turn into the float ``8.1``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml

from imagebuild.config.logging import get_logger
from imagebuild.core.errors import ManifestLoadError
from imagebuild.manifest.model import ImageDefinition, Manifest

if TYPE_CHECKING:
    from pathlib import Path

    from imagebuild.config.logging import ImagebuildLogger

logger: ImagebuildLogger = get_logger(__name__)

_NUMERIC_TAGS = frozenset({"tag:yaml.org,2002:int", "tag:yaml.org,2002:float"})


class _ManifestLoader(yaml.SafeLoader):
    """SafeLoader that keeps numeric-looking scalars as strings."""


_ManifestLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

KNOWN_KEYS = frozenset(
    {
        "dir",
        "repo",
        "tags",
        "builder",
        "builderImage",
        "builderArgs",
        "imageNameFromBuilder",
        "excludeTests",
    }
)


def _require_str(entry: dict[str, Any], key: str, where: str) -> str:
    value: Any = entry.get(key)
    if not isinstance(value, str) or not value:
        raise ManifestLoadError(f"{where}: '{key}' must be a non-empty string", {"key": key})
    return value


def _optional_str(entry: dict[str, Any], key: str, where: str) -> str | None:
    value: Any = entry.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ManifestLoadError(f"{where}: '{key}' must be a string", {"key": key})
    return value


def _str_list(entry: dict[str, Any], key: str, where: str) -> tuple[str, ...]:
    value: Any = entry.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ManifestLoadError(f"{where}: '{key}' must be a list of strings", {"key": key})
    return tuple(value)


def _parse_entry(entry: Any, index: int) -> ImageDefinition:
    where: str = f"versions[{index}]"
    if not isinstance(entry, dict):
        raise ManifestLoadError(f"{where}: expected a mapping, got {type(entry).__name__}")

    ignored: list[str] = sorted(str(k) for k in entry if k not in KNOWN_KEYS)
    if ignored:
        logger.debug("%s: ignoring keys %s", where, ", ".join(ignored))

    builder: Any = entry.get("builder", False)
    if not isinstance(builder, bool):
        raise ManifestLoadError(f"{where}: 'builder' must be a boolean", {"key": "builder"})

    return ImageDefinition(
        directory=_require_str(entry, "dir", where),
        repo=_require_str(entry, "repo", where),
        tags=_str_list(entry, "tags", where),
        builder=builder,
        builder_image=_optional_str(entry, "builderImage", where),
        builder_args=_str_list(entry, "builderArgs", where),
        image_name_from_builder=_optional_str(entry, "imageNameFromBuilder", where),
        exclude_tests=_str_list(entry, "excludeTests", where),
    )


def parse_manifest(data: Any, *, source: str | None = None) -> Manifest:
    """Build a `Manifest` from an already-parsed YAML document.

    Args:
        data (Any): The parsed document (a mapping with a ``versions`` list).
        source (str | None): Where the document came from, for diagnostics.

    Returns:
        Manifest: The manifest, in document order.

    Raises:
        ManifestLoadError: If the document does not have the expected shape.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ManifestLoadError(
            f"Manifest must be a mapping with a 'versions' list, got {type(data).__name__}",
            {"file": source or "<memory>"},
        )
    versions: Any = data.get("versions") or []
    if not isinstance(versions, list):
        raise ManifestLoadError("'versions' must be a list", {"file": source or "<memory>"})

    images: tuple[ImageDefinition, ...] = tuple(
        _parse_entry(entry, i) for i, entry in enumerate(versions)
    )
    logger.debug("Parsed %d image definition(s) from %s", len(images), source or "<memory>")
    return Manifest(images=images, source=source)


def load_manifest(path: Path) -> Manifest:
    """Read and parse the manifest at ``path``.

    Args:
        path (Path): Path of the YAML manifest.

    Returns:
        Manifest: The parsed manifest.

    Raises:
        ManifestLoadError: If the file is not valid YAML or not a valid manifest.
        OSError: If the file cannot be read (propagated unchanged, so callers
            can tell a missing manifest apart from a malformed one).
    """
    with path.open(encoding="utf-8") as fh:
        try:
            data: Any = yaml.load(fh, Loader=_ManifestLoader)
        except yaml.YAMLError as e:
            logger.error("Error decoding YAML from %s: %s", path, e)
            raise ManifestLoadError(f"Invalid YAML: {e}", {"file": str(path)}) from e
    return parse_manifest(data, source=str(path))
