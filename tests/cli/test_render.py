# topmark:header:start
#
#   project      : ImageBuild
#   file         : test_render.py
#   file_relpath : tests/cli/test_render.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI tests: `render` command output and option layering."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import yaml

from tests.cli.conftest import assert_SUCCESS, run_cli, run_cli_in
from tests.conftest import mark_cli, write_tests, write_text

if TYPE_CHECKING:
    from pathlib import Path

    from click.testing import Result

MANIFEST = """
versions:
  - dir: node/8
    repo: nodejs
    tags: [8.10, latest]
  - dir: node/10
    repo: nodejs
    tags: ['10']
    excludeTests: ['tests/functional_tests/npm_test.yaml']
"""


def _project(root: Path, *, tests: bool = True) -> Path:
    write_text(root / "versions.yaml", MANIFEST)
    if tests:
        write_tests(
            root,
            ["tests/structure_tests/base_test.yaml", "tests/functional_tests/npm_test.yaml"],
        )
    return root


def _steps(result: Result) -> list[dict[str, Any]]:
    return yaml.safe_load(result.stdout)["steps"]


@mark_cli
def test_render_default_yaml(tmp_path: Path) -> None:
    """`render` prints a Cloud Build YAML document on stdout."""
    _project(tmp_path)

    result: Result = run_cli_in(tmp_path, ["render", "--registry", "gcr.io/proj"])

    assert_SUCCESS(result)
    doc: dict[str, Any] = yaml.safe_load(result.stdout)
    assert doc["images"] == [
        "gcr.io/proj/nodejs:8.10",
        "gcr.io/proj/nodejs:latest",
        "gcr.io/proj/nodejs:10",
    ]
    args: list[list[str]] = [s["args"] for s in doc["steps"]]
    assert args[0] == ["build", "--tag=gcr.io/proj/nodejs:8.10", "node/8"]
    assert args[1] == ["build", "--tag=gcr.io/proj/nodejs:10", "node/10"]
    assert len(doc["steps"]) == 2 + 2 + 1 + 1
    assert "timeout" not in doc
    assert "options" not in doc


@mark_cli
def test_render_flags(tmp_path: Path) -> None:
    """Selection, tag and host flags shape the plan."""
    _project(tmp_path)

    result: Result = run_cli_in(
        tmp_path,
        [
            "render",
            "--registry",
            "gcr.io:proj",
            "--dirs",
            "node/10",
            "--no-tests",
            "--new-tags",
            "--timeout",
            "900",
            "--machine-type",
            "N1_HIGHCPU_32",
        ],
    )

    assert_SUCCESS(result)
    doc: dict[str, Any] = yaml.safe_load(result.stdout)
    assert doc["images"] == ["gcr.io/proj/nodejs:10"]
    assert [s["name"] for s in doc["steps"]] == [
        "gcr.io/gcp-runtimes/check_if_tag_exists",
        "gcr.io/cloud-builders/docker",
    ]
    assert doc["timeout"] == "900s"
    assert doc["options"] == {"machineType": "N1_HIGHCPU_32"}


@mark_cli
def test_render_parallel(tmp_path: Path) -> None:
    """`--enable-parallel` with two definitions yields ids and waits."""
    _project(tmp_path)

    result: Result = run_cli_in(
        tmp_path, ["render", "--registry", "gcr.io/proj", "--enable-parallel", "--first-tag"]
    )

    assert_SUCCESS(result)
    doc: dict[str, Any] = yaml.safe_load(result.stdout)
    assert doc["steps"][0]["id"] == "image-gcr.io/proj/nodejs:8.10"
    assert doc["steps"][0]["waitFor"] == ["-"]
    assert doc["options"] == {"machineType": "E2_HIGHCPU_8"}
    assert doc["images"] == ["gcr.io/proj/nodejs:8.10", "gcr.io/proj/nodejs:10"]


@mark_cli
def test_render_json(tmp_path: Path) -> None:
    """`--format json` emits the same document as JSON."""
    _project(tmp_path, tests=False)

    result: Result = run_cli_in(
        tmp_path, ["render", "--registry", "gcr.io/proj", "--format", "json"]
    )

    assert_SUCCESS(result)
    assert json.loads(result.stdout)["images"][0] == "gcr.io/proj/nodejs:8.10"


@mark_cli
def test_render_markdown_summary(tmp_path: Path) -> None:
    """`--format markdown` prints a human summary."""
    _project(tmp_path)

    result: Result = run_cli_in(
        tmp_path, ["render", "--registry", "gcr.io/proj", "--format", "markdown"]
    )

    assert_SUCCESS(result)
    assert result.stdout.startswith("# Build plan")


@mark_cli
def test_registry_from_config_file(tmp_path: Path) -> None:
    """The registry and other options can come from ``imagebuild.toml``."""
    _project(tmp_path)
    write_text(tmp_path / "imagebuild.toml", 'registry = "gcr.io/cfg"\nrun_tests = false\n')

    result: Result = run_cli_in(tmp_path, ["render"])

    assert_SUCCESS(result)
    steps: list[dict[str, Any]] = _steps(result)
    assert steps[0]["args"][1] == "--tag=gcr.io/cfg/nodejs:8.10"
    assert not any("structure_test" in s["name"] for s in steps)


@mark_cli
def test_command_line_overrides_config_file(tmp_path: Path) -> None:
    """Flags typed by the user win over the config file; defaults do not."""
    _project(tmp_path)
    write_text(
        tmp_path / "pyproject.toml",
        '[tool.imagebuild]\nregistry = "gcr.io/cfg"\nrun_tests = false\n',
    )

    result: Result = run_cli_in(tmp_path, ["render", "--registry", "gcr.io/cli", "--tests"])

    assert_SUCCESS(result)
    steps: list[dict[str, Any]] = _steps(result)
    assert steps[0]["args"][1] == "--tag=gcr.io/cli/nodejs:8.10"
    assert any("structure_test" in s["name"] for s in steps)


@mark_cli
def test_explicit_config_file(tmp_path: Path) -> None:
    """``--config`` files are merged after the discovered one."""
    _project(tmp_path)
    write_text(tmp_path / "imagebuild.toml", 'registry = "gcr.io/discovered"\n')
    write_text(tmp_path / "ci.toml", 'registry = "gcr.io/explicit"\n')

    result: Result = run_cli_in(tmp_path, ["render", "--config", "ci.toml"])

    assert_SUCCESS(result)
    assert _steps(result)[0]["args"][1] == "--tag=gcr.io/explicit/nodejs:8.10"


@mark_cli
def test_diagnostics_go_to_stderr(tmp_path: Path) -> None:
    """Warnings never pollute the rendered document; `-q` silences them."""
    _project(tmp_path)
    argv: list[str] = ["render", "--registry", "gcr.io/proj", "--dirs", "node/8,nowhere"]

    result: Result = run_cli_in(tmp_path, argv)
    assert_SUCCESS(result)
    assert "nowhere" in result.stderr
    assert "nowhere" not in result.stdout
    assert len(_steps(result)) > 0

    quiet: Result = run_cli_in(tmp_path, ["-q", *argv])
    assert_SUCCESS(quiet)
    assert quiet.stderr == ""


@mark_cli
def test_render_to_output_file(tmp_path: Path) -> None:
    """`--output` writes the document and reports it; `-v` adds details."""
    _project(tmp_path)

    result: Result = run_cli_in(
        tmp_path, ["-v", "render", "--registry", "gcr.io/proj", "--output", "cloudbuild.yaml"]
    )

    assert_SUCCESS(result)
    written: dict[str, Any] = yaml.safe_load((tmp_path / "cloudbuild.yaml").read_text("utf-8"))
    assert written["images"][0] == "gcr.io/proj/nodejs:8.10"
    assert "Wrote yaml plan" in result.stdout
    assert "parallel: no" in result.stdout


@mark_cli
def test_group_without_command_prints_help() -> None:
    """Invoking the group alone prints a hint and the help text."""
    result: Result = run_cli(["--no-color"])

    assert_SUCCESS(result)
    assert "imagebuild render" in result.output
    assert "render" in result.output
