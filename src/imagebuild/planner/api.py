# topmark:header:start
#
#   project      : ImageBuild
#   file         : api.py
#   file_relpath : src/imagebuild/planner/api.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pure entry point of the planner.

`compile_build_plan` runs the whole pipeline (test resolution, graph
compilation, plan assembly) on in-memory inputs. It performs no I/O besides
logging and reports failures through the returned `CompileResult`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from imagebuild.config.logging import get_logger
from imagebuild.core.errors import PlanError
from imagebuild.planner.assembler import assemble_plan
from imagebuild.planner.compiler import compile_build_graph
from imagebuild.planner.outcomes import CompileResult

if TYPE_CHECKING:
    from imagebuild.catalog import TestCatalog
    from imagebuild.config import BuildOptions
    from imagebuild.config.logging import ImagebuildLogger
    from imagebuild.manifest import Manifest
    from imagebuild.planner.compiler import CompiledGraph

logger: ImagebuildLogger = get_logger(__name__)


def compile_build_plan(
    manifest: Manifest,
    catalog: TestCatalog,
    options: BuildOptions,
) -> CompileResult:
    """Compile a build plan.

    Args:
        manifest (Manifest): The version manifest.
        catalog (TestCatalog): The discovered test catalog.
        options (BuildOptions): Frozen, validated build options.

    Returns:
        CompileResult: The plan, or the `PlanError` that aborted compilation.
    """
    try:
        graph: CompiledGraph = compile_build_graph(manifest, catalog, options)
    except PlanError as e:
        logger.error("Plan compilation failed: %s", e)
        return CompileResult(error=e)
    return CompileResult(plan=assemble_plan(graph, options))
