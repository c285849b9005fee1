# topmark:header:start
#
#   project      : ImageBuild
#   file         : test_loader.py
#   file_relpath : tests/manifest/test_loader.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for loading and validating the version manifest."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from imagebuild.core.errors import ConfigurationError, ManifestLoadError
from imagebuild.manifest import ImageDefinition, Manifest, load_manifest, parse_manifest
from tests.conftest import parametrize, write_text

if TYPE_CHECKING:
    from pathlib import Path


def test_load_full_entry(tmp_path: Path) -> None:
    """Every recognized key maps onto `ImageDefinition`; unknown keys are ignored."""
    path: Path = write_text(
        tmp_path / "versions.yaml",
        """
        versions:
          - dir: '8/debian9/8.11'
            repo: 'nodejs'
            tags: ['8.11', '8', 'latest']
            from: 'gcr.io/base/debian9'
            templateArgs:
              nodeVersion: '8.11.4'
            excludeTests: ['tests/functional_tests/npm_test.yaml']
          - dir: 'builder/app'
            repo: 'app'
            tags: ['1']
            builderImage: 'builder:base'
            builderArgs: ['--flag', 'value']
            imageNameFromBuilder: 'gcr.io/proj/app:built'
          - dir: 'builder/base'
            repo: 'builder'
            tags: ['base']
            builder: true
        """,
    )

    manifest: Manifest = load_manifest(path)

    assert len(manifest) == 3
    assert manifest.source == str(path)
    assert manifest.directories == ("8/debian9/8.11", "builder/app", "builder/base")

    node: ImageDefinition = manifest.images[0]
    assert node.repo == "nodejs"
    assert node.tags == ("8.11", "8", "latest")
    assert node.exclude_tests == ("tests/functional_tests/npm_test.yaml",)
    assert not node.builder
    assert node.alias_eligible

    app: ImageDefinition = manifest.images[1]
    assert app.builder_image == "builder:base"
    assert app.builder_args == ("--flag", "value")
    assert app.image_name_from_builder == "gcr.io/proj/app:built"

    base: ImageDefinition = manifest.images[2]
    assert base.builder
    assert not base.alias_eligible


def test_numeric_tags_stay_strings(tmp_path: Path) -> None:
    """Unquoted numeric tags keep their exact spelling (8.10 is not 8.1)."""
    path: Path = write_text(
        tmp_path / "versions.yaml",
        """
        versions:
          - dir: node/8
            repo: nodejs
            tags: [8.10, 8, latest]
        """,
    )

    manifest: Manifest = load_manifest(path)

    assert manifest.images[0].tags == ("8.10", "8", "latest")


def test_empty_document_is_empty_manifest(tmp_path: Path) -> None:
    """An empty file holds no image definitions."""
    path: Path = write_text(tmp_path / "versions.yaml", "")

    assert len(load_manifest(path)) == 0


def test_invalid_yaml_raises_manifest_load_error(tmp_path: Path) -> None:
    """Malformed YAML is reported as a `ManifestLoadError` naming the file."""
    path: Path = write_text(tmp_path / "versions.yaml", "versions: [unclosed\n")

    with pytest.raises(ManifestLoadError) as excinfo:
        load_manifest(path)

    assert excinfo.value.context["file"] == str(path)
    assert isinstance(excinfo.value, ConfigurationError)


def test_missing_file_propagates_os_error(tmp_path: Path) -> None:
    """A missing manifest surfaces as `FileNotFoundError`, not as a load error."""
    with pytest.raises(FileNotFoundError):
        load_manifest(tmp_path / "nope.yaml")


@parametrize(
    "data",
    [
        ["not", "a", "mapping"],
        {"versions": {"dir": "a"}},
        {"versions": ["just a string"]},
        {"versions": [{"repo": "foo", "tags": ["1"]}]},
        {"versions": [{"dir": "a", "tags": ["1"]}]},
        {"versions": [{"dir": "a", "repo": "foo", "tags": "1"}]},
        {"versions": [{"dir": "a", "repo": "foo", "builder": "yes"}]},
        {"versions": [{"dir": "a", "repo": "foo", "excludeTests": [1]}]},
    ],
)
def test_malformed_documents_are_rejected(data: Any) -> None:
    """Documents with the wrong shape raise `ManifestLoadError`."""
    with pytest.raises(ManifestLoadError):
        parse_manifest(data, source="<test>")


def test_image_names_expand_registry_repo_and_tag() -> None:
    """Each tag expands to <registry>/<repo>:<tag>, in tag order."""
    image = ImageDefinition(directory="a", repo="foo", tags=("1.0", "latest"))

    assert image.image_names("gcr.io/proj") == ("gcr.io/proj/foo:1.0", "gcr.io/proj/foo:latest")
