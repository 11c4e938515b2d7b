"""Transitive closure of every registry package.

Closures are computed once per package in reverse topological order, so a
package's closure is the union of its children and their (already known)
closures.
"""

import networkx as nx

from dep_inspector.analysis.collector import RiskRegistry, risk_children
from dep_inspector.errors import CycleDetected
from dep_inspector.graph import PackageGraph
from dep_inspector.models import PackageId

Closures = dict[PackageId, frozenset[PackageId]]


def risk_subgraph(graph: PackageGraph, registry: RiskRegistry) -> nx.DiGraph:
    """Registry packages linked by their non-dev, non-workspace links."""
    workspace = graph.workspace_members()
    G = nx.DiGraph()
    G.add_nodes_from(registry)
    for pkg_id in registry:
        for child in risk_children(graph, pkg_id, workspace):
            G.add_edge(pkg_id, child)
    return G


def topological_order(G: nx.DiGraph) -> list[PackageId]:
    """Dependents before dependencies; raises CycleDetected on a cycle."""
    try:
        return list(nx.topological_sort(G))
    except nx.NetworkXUnfeasible:
        raise CycleDetected(nx.find_cycle(G)) from None


def compute_closures(graph: PackageGraph, registry: RiskRegistry) -> Closures:
    """Map every registry package to its transitive dependencies."""
    G = risk_subgraph(graph, registry)
    closures: Closures = {}
    for pkg_id in reversed(topological_order(G)):
        deps: set[PackageId] = set()
        for child in G.successors(pkg_id):
            deps.add(child)
            deps |= closures[child]
        closures[pkg_id] = frozenset(deps)
    return closures
