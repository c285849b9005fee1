# topmark:header:start
#
#   project      : ImageBuild
#   file         : compiler.py
#   file_relpath : src/imagebuild/planner/compiler.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Build graph compiler: image definitions to ordered build steps.

Rules, applied per image definition in manifest order:

1. **Directory selection**: definitions outside the directory filter are
   skipped entirely (an empty filter selects everything).
2. **Tag expansion**: each tag yields ``<registry>/<repo>:<tag>``. With
   ``first_tag_only`` only the first name is kept.
3. **Builder resolution**: a definition with a builder image is built by
   running ``<registry>/<builder_image>``; its canonical name is
   ``image_name_from_builder`` and every expanded tag name becomes an alias of
   it. The step depends on the builder image's own build step. Definitions
   without a builder image are plain docker builds of their first name, with
   no dependency.
4. **Builder-only images** are built but never shipped: they are left out of
   the shippable image list and get no alias tags.

Scheduling is decided once for the whole plan by `should_parallelize`. In a
parallel plan every build step has a scheduling identifier
(``image-<tag>``) and explicit wait-conditions; sequential plans carry neither,
manifest order being the dependency.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from imagebuild.config.logging import get_logger
from imagebuild.constants import IMAGE_STEP_PREFIX, START_IMMEDIATELY
from imagebuild.core.diagnostics import DiagnosticLog
from imagebuild.core.errors import ManifestInconsistencyError
from imagebuild.planner.model import BuildStep
from imagebuild.planner.resolver import ResolvedTests, resolve_tests

if TYPE_CHECKING:
    from imagebuild.catalog import TestCatalog
    from imagebuild.config import BuildOptions
    from imagebuild.config.logging import ImagebuildLogger
    from imagebuild.core.diagnostics import Diagnostic
    from imagebuild.manifest.model import ImageDefinition, Manifest

logger: ImagebuildLogger = get_logger(__name__)


def image_step_id(image: str) -> str:
    """Return the scheduling identifier of the build step producing ``image``."""
    return f"{IMAGE_STEP_PREFIX}{image}"


def should_parallelize(options: BuildOptions, number_of_versions: int, number_of_tests: int) -> bool:
    """Decide whether the plan is scheduled in parallel.

    ``force_parallel`` always wins. Otherwise parallelism must be enabled and
    worth its overhead: more than one image definition or more than one
    functional test.

    Args:
        options (BuildOptions): The build options.
        number_of_versions (int): Number of image definitions in the manifest.
        number_of_tests (int): Number of functional tests that will run.

    Returns:
        bool: True for a parallel plan.
    """
    if options.force_parallel:
        return True
    if not options.enable_parallel:
        return False
    return number_of_versions > 1 or number_of_tests > 1


@dataclass(frozen=True, slots=True)
class CompiledGraph:
    """Output of the build graph compiler.

    Attributes:
        steps (tuple[BuildStep, ...]): Build steps in manifest order.
        images (tuple[str, ...]): Shippable image names, in manifest and tag order.
        parallel (bool): Scheduling mode of the whole plan.
        diagnostics (tuple[Diagnostic, ...]): Non-fatal findings.
    """

    steps: tuple[BuildStep, ...]
    images: tuple[str, ...]
    parallel: bool
    diagnostics: tuple[Diagnostic, ...] = ()


def build_step(
    image: ImageDefinition,
    names: tuple[str, ...],
    tests: ResolvedTests,
    *,
    registry: str,
    parallel: bool,
) -> BuildStep:
    """Construct the build step of one image definition.

    Args:
        image (ImageDefinition): The image definition.
        names (tuple[str, ...]): Its expanded image names (after ``first_tag_only``).
        tests (ResolvedTests): Tests applying to the image.
        registry (str): Normalized registry prefix.
        parallel (bool): Whether the plan is scheduled in parallel.

    Returns:
        BuildStep: The compiled step.

    Raises:
        ManifestInconsistencyError: If the definition has a builder image but
            no ``image_name_from_builder``, or neither a builder image nor tags.
    """
    builder_image: str | None = None
    depends_on: str | None = None

    if image.builder_image is not None:
        if not image.image_name_from_builder:
            raise ManifestInconsistencyError(
                "An image built with a builder image must declare imageNameFromBuilder",
                {"directory": image.directory, "builder_image": image.builder_image},
            )
        tag: str = image.image_name_from_builder
        aliases: tuple[str, ...] = names
        builder_image = f"{registry}/{image.builder_image}"
        depends_on = image_step_id(builder_image)
    else:
        if not names:
            raise ManifestInconsistencyError(
                "Image definition declares no tags", {"directory": image.directory}
            )
        tag, aliases = names[0], names[1:]

    if not image.alias_eligible:
        aliases = ()

    return BuildStep(
        tag=tag,
        directory=image.directory,
        repo=image.repo,
        builder=image.builder,
        builder_image=builder_image,
        builder_args=image.builder_args if builder_image is not None else (),
        depends_on=depends_on,
        structure_tests=tests.structure,
        functional_tests=tests.functional,
        aliases=aliases,
        step_id=image_step_id(tag) if parallel else None,
        wait_for=(depends_on or START_IMMEDIATELY,) if parallel else (),
    )


def _check_directory_filter(manifest: Manifest, options: BuildOptions, diags: DiagnosticLog) -> None:
    known: set[str] = set(manifest.directories)
    for directory in sorted(options.directories - known):
        logger.warning("Directory %s is not declared in the manifest", directory)
        diags.add_warning(f"Directory filter {directory!r} matches no image definition")


def _check_builder_references(steps: tuple[BuildStep, ...], diags: DiagnosticLog) -> None:
    position: dict[str, int] = {s.tag: i for i, s in enumerate(steps)}
    for i, step in enumerate(steps):
        if step.builder_image is None:
            continue
        builder_at: int | None = position.get(step.builder_image)
        if builder_at is None:
            logger.warning("Builder image %s is not built by this plan", step.builder_image)
            diags.add_warning(
                f"Builder image {step.builder_image} of {step.directory} is not built by this plan"
            )
        elif builder_at > i:
            logger.warning("Builder image %s is built after %s", step.builder_image, step.tag)
            diags.add_warning(
                f"Builder image {step.builder_image} is declared after {step.directory}; "
                "sequential plans build it too late"
            )


def compile_build_graph(
    manifest: Manifest,
    catalog: TestCatalog,
    options: BuildOptions,
) -> CompiledGraph:
    """Compile the selected image definitions into build steps.

    Exclusions are validated against the full ``catalog`` even when tests are
    disabled, so a stale exclusion is always reported. A build host that skips
    test discovery when tests are disabled rejects every exclusion instead;
    here valid exclusions stay accepted.

    Args:
        manifest (Manifest): The version manifest.
        catalog (TestCatalog): The discovered tests.
        options (BuildOptions): The build options.

    Returns:
        CompiledGraph: Steps, shippable images and scheduling mode.

    Raises:
        ManifestInconsistencyError: On an unknown test exclusion or an
            incomplete image definition.
    """
    diags = DiagnosticLog()
    _check_directory_filter(manifest, options, diags)

    number_of_tests: int = len(catalog.functional) if options.run_tests else 0
    parallel: bool = should_parallelize(options, len(manifest), number_of_tests)
    logger.debug(
        "Scheduling: parallel=%s (versions=%d, functional tests=%d)",
        parallel,
        len(manifest),
        number_of_tests,
    )

    steps: list[BuildStep] = []
    images: list[str] = []
    for image in manifest:
        if not options.selects(image.directory):
            logger.trace("Skipping unselected directory %s", image.directory)
            continue

        names: tuple[str, ...] = image.image_names(options.registry)
        if options.first_tag_only:
            names = names[:1]

        # Builder images are never shipped.
        if not image.builder:
            images.extend(names)

        tests: ResolvedTests = resolve_tests(catalog, image)
        if not options.run_tests:
            tests = ResolvedTests()

        step: BuildStep = build_step(
            image, names, tests, registry=options.registry, parallel=parallel
        )
        logger.debug("Compiled step %s from %s", step.tag, step.directory)
        steps.append(step)

    compiled_steps: tuple[BuildStep, ...] = tuple(steps)
    _check_builder_references(compiled_steps, diags)

    return CompiledGraph(
        steps=compiled_steps,
        images=tuple(images),
        parallel=parallel,
        diagnostics=diags.freeze(),
    )


__all__: list[str] = [
    "CompiledGraph",
    "build_step",
    "compile_build_graph",
    "image_step_id",
    "should_parallelize",
]
