# topmark:header:start
#
#   project      : ImageBuild
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the ImageBuild test suite.

This file sets up global fixtures and typed helpers shared by the test
packages, and customizes logging so internal diagnostics are captured.

Notes:
    Tests should respect the immutable/mutable options split:

    - Build options with `imagebuild.config.MutableBuildOptions`, then
      `freeze()` them into `imagebuild.config.BuildOptions` (see `make_options`).
    - Do **not** mutate frozen options. To tweak them, call
      `BuildOptions.thaw()`, edit the draft, then `freeze()` again.
"""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from imagebuild.config import MutableBuildOptions, logging
from imagebuild.manifest import parse_manifest

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from imagebuild.config import BuildOptions
    from imagebuild.manifest import Manifest

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]

REGISTRY = "gcr.io/proj"


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type."""

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)
mark_planner: DecoratorType[Any] = as_typed_mark(pytest.mark.planner)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`."""
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_imagebuild_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure the runtime log level is not forced via env during tests.

    This avoids accidental DEBUG/TRACE noise when the developer has exported
    IMAGEBUILD_LOG_LEVEL in their shell.
    """
    monkeypatch.delenv(logging.LOG_LEVEL_ENV_VAR, raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Set the internal log level to TRACE so every code path logs during tests."""
    logging.setup_logging(level=logging.TRACE_LEVEL)


@pytest.fixture
def isolation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test in an isolated, empty project directory.

    Config discovery and relative manifest paths depend on the working
    directory; this keeps them away from the repository's own files.

    Returns:
        Path: The isolated working directory.
    """
    cwd: Path = tmp_path / "proj"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


def write_text(path: Path, content: str) -> Path:
    """Write dedented ``content`` to ``path``, creating parents."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
    return path


def write_tests(workspace: Path, relpaths: Iterable[str]) -> None:
    """Create empty test descriptor files under ``workspace``."""
    for rel in relpaths:
        target: Path = workspace / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("{}\n", encoding="utf-8")


def make_options(registry: str = REGISTRY, **overrides: Any) -> BuildOptions:
    """Return frozen `BuildOptions` built from defaults and overrides.

    Args:
        registry (str): Registry prefix.
        **overrides (Any): Field values for `MutableBuildOptions`.

    Returns:
        BuildOptions: The frozen options.
    """
    draft = MutableBuildOptions(registry=registry)
    for key, value in overrides.items():
        if not hasattr(draft, key):
            raise AttributeError(f"Unknown option: {key}")
        setattr(draft, key, value)
    return draft.freeze()


def make_manifest(*entries: Mapping[str, Any]) -> Manifest:
    """Return a `Manifest` from raw ``versions`` entries (YAML key names)."""
    return parse_manifest({"versions": [dict(e) for e in entries]}, source="<test>")
