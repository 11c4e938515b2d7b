"""Dependency collection: seed the risk registry from the analyzed roots."""

import logging
from collections import deque

from dep_inspector.graph import PackageGraph
from dep_inspector.models import DependencyEdge, PackageId, PackageRisk

logger = logging.getLogger(__name__)

RiskRegistry = dict[PackageId, PackageRisk]


def is_risk_link(link: DependencyEdge, workspace: frozenset[PackageId]) -> bool:
    """True for links that count as third-party dependencies.

    Dev-only links never end up in a build of the crate, and links into
    other workspace crates are first-party code.
    """
    return not link.dev_only and link.target not in workspace


def risk_children(
    graph: PackageGraph, pkg_id: PackageId, workspace: frozenset[PackageId]
) -> list[PackageId]:
    return [link.target for link in graph.dep_links(pkg_id) if is_risk_link(link, workspace)]


def create_or_update_dependency(
    registry: RiskRegistry, graph: PackageGraph, pkg_id: PackageId
) -> PackageRisk:
    """Insert a record on first sight, otherwise only record the version."""
    risk = registry.get(pkg_id)
    if risk is None:
        node = graph.metadata(pkg_id)
        risk = PackageRisk(
            name=node.name,
            repo=node.repository,
            description=node.description,
            manifest_path=node.manifest_path,
        )
        registry[pkg_id] = risk
    risk.versions.add(pkg_id.version)
    return risk


def collect_dependencies(
    graph: PackageGraph,
    roots: frozenset[PackageId],
) -> tuple[RiskRegistry, set[PackageId]]:
    """Walk the graph from ``roots`` and return (registry, main dependencies)."""
    workspace = graph.workspace_members()
    registry: RiskRegistry = {}
    main_dependencies: set[PackageId] = set()

    # root crate > direct dependency
    for root in sorted(roots):
        for target in risk_children(graph, root, workspace):
            main_dependencies.add(target)
            create_or_update_dependency(registry, graph, target)

    # root crate > direct dependency > transitive dependencies
    seen = set(main_dependencies)
    queue = deque(sorted(main_dependencies))
    while queue:
        pkg_id = queue.popleft()
        for target in risk_children(graph, pkg_id, workspace):
            create_or_update_dependency(registry, graph, target)
            if target not in seen:
                seen.add(target)
                queue.append(target)

    logger.info(
        "collected %d main dependencies, %d packages in total",
        len(main_dependencies), len(registry),
    )
    return registry, main_dependencies
