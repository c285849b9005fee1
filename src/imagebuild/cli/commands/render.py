# topmark:header:start
#
#   project      : ImageBuild
#   file         : render.py
#   file_relpath : src/imagebuild/cli/commands/render.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ImageBuild `render` command.

Reads the version manifest, discovers the workspace test catalog, compiles the
build plan and renders it (Cloud Build YAML by default) to stdout or a file.

Nothing is written when any stage fails: the command exits with the code of
the first error (see `imagebuild.cli.exit_codes.ExitCode`).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from imagebuild.catalog import discover_test_catalog
from imagebuild.cli.cli_types import EnumChoiceParam, build_args_namespace
from imagebuild.cli.config_resolver import resolve_options
from imagebuild.cli.errors import ImagebuildIOError, cli_error_from
from imagebuild.cli.options import given_on_command_line
from imagebuild.config.logging import get_logger
from imagebuild.constants import DEFAULT_MANIFEST_NAME
from imagebuild.core.errors import PlanError
from imagebuild.core.formats import OutputFormat
from imagebuild.manifest import load_manifest
from imagebuild.planner import compile_build_plan
from imagebuild.rendering import render_plan

if TYPE_CHECKING:
    from imagebuild.catalog import TestCatalog
    from imagebuild.cli.cli_types import ArgsNamespace
    from imagebuild.cli.console_api import ConsoleLike
    from imagebuild.config import BuildOptions, MutableBuildOptions
    from imagebuild.config.logging import ImagebuildLogger
    from imagebuild.core.diagnostics import Diagnostic
    from imagebuild.manifest import Manifest
    from imagebuild.planner import BuildPlan, CompileResult

logger: ImagebuildLogger = get_logger(__name__)


@click.command(
    name="render",
    help="Render the build pipeline for the images declared in the manifest.",
)
@click.option(
    "--manifest",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Version manifest (default: {DEFAULT_MANIFEST_NAME}).",
)
@click.option(
    "--workspace",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Workspace holding the tests/ directories.",
)
@click.option("--registry", default=None, help="Registry prefix, e.g. gcr.io/my-project.")
@click.option(
    "--dirs",
    "directories",
    multiple=True,
    help="Only build these manifest directories (comma separated, repeatable).",
)
@click.option("--tests/--no-tests", "run_tests", default=True, help="Run structure and functional tests.")
@click.option("--new-tags", "require_new_tags", is_flag=True, help="Fail if any image tag already exists.")
@click.option("--first-tag", "first_tag_only", is_flag=True, help="Only use the first tag of each image.")
@click.option("--timeout", "timeout_seconds", type=int, default=None, help="Build timeout in seconds.")
@click.option("--machine-type", default=None, help="Build host machine type, e.g. E2_HIGHCPU_32.")
@click.option(
    "--enable-parallel",
    is_flag=True,
    help="Build and test in parallel when there is more than one image or functional test.",
)
@click.option("--force-parallel", is_flag=True, help="Always build and test in parallel.")
@click.option(
    "--config",
    "config_paths",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Config file to merge (repeatable, in order).",
)
@click.option("--no-config", is_flag=True, help="Do not discover imagebuild.toml or pyproject.toml.")
@click.option(
    "--format",
    "output_format",
    type=EnumChoiceParam(OutputFormat),
    default=OutputFormat.YAML.value,
    show_default=True,
    help=f"Output format ({', '.join(v.value for v in OutputFormat)}).",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the rendered plan to this file instead of stdout.",
)
def render_command(
    *,
    manifest: Path | None,
    workspace: Path,
    registry: str | None,
    directories: tuple[str, ...],
    run_tests: bool,
    require_new_tags: bool,
    first_tag_only: bool,
    timeout_seconds: int | None,
    machine_type: str | None,
    enable_parallel: bool,
    force_parallel: bool,
    config_paths: tuple[str, ...],
    no_config: bool,
    output_format: OutputFormat,
    output: Path | None,
) -> None:
    """Render the build plan.

    Raises:
        ImagebuildError: On any configuration, manifest or I/O failure.
    """
    ctx: click.Context = click.get_current_context()
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    vlevel: int = int(ctx.obj.get("verbosity_level", 0))
    color: bool = bool(ctx.obj.get("color_enabled", False))

    args: ArgsNamespace = build_args_namespace(
        manifest=str(manifest) if manifest is not None else None,
        registry=registry,
        directories=list(directories),
        run_tests=given_on_command_line(ctx, "run_tests", run_tests),
        require_new_tags=given_on_command_line(ctx, "require_new_tags", require_new_tags),
        first_tag_only=given_on_command_line(ctx, "first_tag_only", first_tag_only),
        timeout_seconds=timeout_seconds,
        machine_type=machine_type,
        enable_parallel=given_on_command_line(ctx, "enable_parallel", enable_parallel),
        force_parallel=given_on_command_line(ctx, "force_parallel", force_parallel),
        no_config=no_config,
        config_files=list(config_paths),
    )

    try:
        draft: MutableBuildOptions = resolve_options(args)
        options: BuildOptions = draft.freeze()

        manifest_path = Path(draft.manifest or DEFAULT_MANIFEST_NAME)
        logger.info("Reading manifest %s", manifest_path)
        versions: Manifest = load_manifest(manifest_path)
        catalog: TestCatalog = discover_test_catalog(workspace)
    except (PlanError, OSError) as e:
        raise cli_error_from(e) from e

    result: CompileResult = compile_build_plan(versions, catalog, options)
    if result.error is not None:
        raise cli_error_from(result.error) from result.error
    plan: BuildPlan = result.unwrap()

    text: str = render_plan(plan, output_format)

    if vlevel >= 0:
        diagnostics: tuple[Diagnostic, ...] = (*options.diagnostics, *plan.diagnostics)
        for d in diagnostics:
            label: str = d.level.color(d.level.value) if color else d.level.value
            console.warn(f"{label}: {d.message}")

    if output is None:
        console.print(text, nl=False)
        return

    try:
        output.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ImagebuildIOError(f"Cannot write {output}: {e.strerror or e}") from e

    if vlevel >= 0:
        console.print(
            f"Wrote {output_format.value} plan ({len(plan.steps)} build step(s), "
            f"{len(plan.actions)} action(s)) to {output}"
        )
    if vlevel > 0:
        for source in draft.config_files:
            console.print(f"  config: {source}")
        console.print(f"  parallel: {'yes' if plan.parallel else 'no'}")
