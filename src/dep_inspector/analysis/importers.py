"""Root importers: which analyzed root crates pull in each package."""

from typing import Optional

from dep_inspector.analysis._pool import map_ordered
from dep_inspector.analysis.closure import Closures
from dep_inspector.analysis.collector import RiskRegistry, risk_children
from dep_inspector.errors import InconsistentRegistry
from dep_inspector.graph import PackageGraph
from dep_inspector.models import PackageId


def imported_by_root(
    graph: PackageGraph, root: PackageId, closures: Closures
) -> set[PackageId]:
    """Every package a single root crate depends on, directly or not."""
    imported: set[PackageId] = set()
    for target in risk_children(graph, root, graph.workspace_members()):
        imported.add(target)
        imported |= closures[target]
    return imported


def attribute_root_importers(
    graph: PackageGraph,
    roots: frozenset[PackageId],
    registry: RiskRegistry,
    closures: Closures,
    max_workers: Optional[int] = None,
) -> None:
    """Fill ``root_importers`` of every registry entry."""
    ordered_roots = sorted(roots)
    per_root = map_ordered(
        lambda root: imported_by_root(graph, root, closures),
        ordered_roots,
        max_workers,
    )
    for root, imported in zip(ordered_roots, per_root):
        for pkg_id in imported:
            registry[pkg_id].root_importers.append(root)

    orphans = sorted(pkg_id for pkg_id, risk in registry.items() if not risk.root_importers)
    if orphans:
        raise InconsistentRegistry(
            f"{len(orphans)} package(s) not imported by any root crate, "
            f"e.g. {orphans[0]}"
        )
