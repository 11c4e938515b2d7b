"""Risk core: run the graph analyses in order over one graph snapshot.

Terms used throughout:

- **root crates**: crates that live in the workspace, as opposed to
  third-party crates from a registry or a git repository.
- **main dependencies**: third-party crates imported directly by an
  analyzed root crate (dev-dependencies excluded).
- **transitive dependencies**: crates that end up being imported at some
  point; if A imports B and B imports C, C is a transitive dependency of A.
"""

import logging
from collections.abc import Collection
from typing import Callable, Optional

from dep_inspector.analysis.closure import compute_closures
from dep_inspector.analysis.collector import collect_dependencies
from dep_inspector.analysis.exclusive import attribute_exclusive_deps
from dep_inspector.analysis.importers import attribute_root_importers
from dep_inspector.analysis.roots import resolve_roots
from dep_inspector.graph import PackageGraph
from dep_inspector.models import AnalysisResult

logger = logging.getLogger(__name__)


def compute_package_risks(
    graph: PackageGraph,
    packages: Optional[Collection[str]] = None,
    ignore: Optional[Collection[str]] = None,
    max_workers: Optional[int] = None,
    on_status: Optional[Callable[[str], None]] = None,
) -> AnalysisResult:
    """Produce the risk registry for the selected root crates of ``graph``."""
    status = on_status or (lambda _: None)

    status("Resolving root crates …")
    roots = resolve_roots(graph, packages=packages, ignore=ignore)
    logger.info("analyzing %d root crate(s): %s", len(roots), ", ".join(sorted(r.name for r in roots)))

    status("Collecting dependencies …")
    registry, main_dependencies = collect_dependencies(graph, roots)

    status("Computing transitive dependencies …")
    closures = compute_closures(graph, registry)
    for pkg_id, risk in registry.items():
        risk.transitive_dependencies = set(closures[pkg_id])

    status("Attributing root importers …")
    attribute_root_importers(graph, roots, registry, closures, max_workers)

    status("Computing exclusive introductions …")
    attribute_exclusive_deps(registry, main_dependencies, closures, max_workers)

    return AnalysisResult(
        root_crates={r.name for r in roots},
        main_dependencies=main_dependencies,
        analysis_result=registry,
    )
