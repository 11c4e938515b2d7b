"""Exclusive introductions: what would go away with one direct dependency.

A package is exclusively introduced by a main dependency when it is in that
dependency's closure and reachable through no other main dependency.
Shared reachability always wins: there is no partial credit.
"""

from collections import defaultdict
from typing import Optional

from dep_inspector.analysis._pool import map_ordered
from dep_inspector.analysis.closure import Closures
from dep_inspector.analysis.collector import RiskRegistry
from dep_inspector.models import PackageId


def build_owner_index(
    main_dependencies: set[PackageId],
    closures: Closures,
    max_workers: Optional[int] = None,
) -> dict[PackageId, set[PackageId]]:
    """Map every reachable package to the main dependencies that reach it.

    A main dependency also owns itself, so a main dependency reachable from
    another one is never exclusive to it.
    """
    ordered = sorted(main_dependencies)
    partials = map_ordered(
        lambda dep: closures[dep] | {dep},
        ordered,
        max_workers,
    )
    owners: dict[PackageId, set[PackageId]] = defaultdict(set)
    for dep, reached in zip(ordered, partials):
        for pkg_id in reached:
            owners[pkg_id].add(dep)
    return dict(owners)


def compute_exclusive_deps(
    main_dependencies: set[PackageId],
    closures: Closures,
    max_workers: Optional[int] = None,
) -> dict[PackageId, list[PackageId]]:
    """Exclusively introduced packages for every main dependency."""
    owners = build_owner_index(main_dependencies, closures, max_workers)
    exclusive: dict[PackageId, list[PackageId]] = {dep: [] for dep in main_dependencies}
    for pkg_id, owned_by in owners.items():
        if len(owned_by) != 1:
            continue
        owner = next(iter(owned_by))
        if owner != pkg_id:
            exclusive[owner].append(pkg_id)
    for deps in exclusive.values():
        deps.sort()
    return exclusive


def attribute_exclusive_deps(
    registry: RiskRegistry,
    main_dependencies: set[PackageId],
    closures: Closures,
    max_workers: Optional[int] = None,
) -> None:
    """Fill ``exclusive_deps_introduced`` of every main dependency."""
    for dep, introduced in compute_exclusive_deps(
        main_dependencies, closures, max_workers
    ).items():
        registry[dep].exclusive_deps_introduced = introduced
