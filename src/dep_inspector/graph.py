"""Immutable package graph backed by NetworkX.

Nodes are :class:`PackageId` values carrying their :class:`PackageNode`;
edges carry the :class:`DependencyEdge` they were built from. The graph is
frozen once constructed so that every analysis step reads one snapshot.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Optional

import networkx as nx

from dep_inspector.errors import GraphResolutionFailure
from dep_inspector.models import DependencyEdge, DependencyKind, PackageId, PackageNode

logger = logging.getLogger(__name__)


class PackageGraph:
    """Resolved dependency graph of a Cargo workspace."""

    def __init__(
        self,
        packages: Iterable[PackageNode],
        edges: Iterable[DependencyEdge],
        workspace_members: Iterable[PackageId],
    ) -> None:
        G = nx.DiGraph()
        for pkg in packages:
            G.add_node(pkg.id, package=pkg)

        members = frozenset(workspace_members)
        for member in members:
            if member not in G:
                raise GraphResolutionFailure(f"unknown workspace member: {member}")

        for edge in edges:
            for end in (edge.source, edge.target):
                if end not in G:
                    raise GraphResolutionFailure(
                        f"dependency link {edge.source} -> {edge.target} "
                        f"references unknown package {end}"
                    )
            # the flag is derived from the member set, never trusted from input
            link = edge.model_copy(
                update={"target_is_workspace": edge.target in members}
            )
            if G.has_edge(edge.source, edge.target):
                previous: DependencyEdge = G.edges[edge.source, edge.target]["link"]
                link = link.model_copy(update={"kinds": previous.kinds | link.kinds})
            G.add_edge(edge.source, edge.target, link=link)

        self._graph = nx.freeze(G)
        self._members = members
        logger.debug(
            "package graph: %d packages, %d links, %d workspace members",
            G.number_of_nodes(), G.number_of_edges(), len(members),
        )

    # ── Queries ───────────────────────────────────────────────────────────

    def __contains__(self, pkg_id: object) -> bool:
        return pkg_id in self._graph

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def workspace_members(self) -> frozenset[PackageId]:
        return self._members

    def packages(self) -> list[PackageNode]:
        return [self._graph.nodes[n]["package"] for n in sorted(self._graph.nodes)]

    def metadata(self, pkg_id: PackageId) -> PackageNode:
        """Return the package metadata for ``pkg_id``."""
        try:
            return self._graph.nodes[pkg_id]["package"]
        except KeyError:
            raise GraphResolutionFailure(f"unknown package: {pkg_id}") from None

    def dep_links(self, pkg_id: PackageId) -> list[DependencyEdge]:
        """Outgoing dependency links of ``pkg_id``, ordered by target."""
        if pkg_id not in self._graph:
            raise GraphResolutionFailure(f"unknown package: {pkg_id}")
        links = [data["link"] for _, _, data in self._graph.out_edges(pkg_id, data=True)]
        return sorted(links, key=lambda link: link.target)

    # ── Construction from cargo metadata ──────────────────────────────────

    @classmethod
    def from_metadata(cls, data: dict[str, Any]) -> PackageGraph:
        """Build the graph from ``cargo metadata --format-version 1`` output."""
        try:
            raw_packages = data["packages"]
            raw_members = data["workspace_members"]
        except (KeyError, TypeError) as e:
            raise GraphResolutionFailure(f"malformed cargo metadata: missing {e}") from e

        ids: dict[str, PackageId] = {}
        nodes: list[PackageNode] = []
        for pkg in raw_packages:
            try:
                pkg_id = PackageId(
                    name=pkg["name"],
                    version=pkg["version"],
                    source=pkg.get("source"),
                )
                ids[pkg["id"]] = pkg_id
            except KeyError as e:
                raise GraphResolutionFailure(
                    f"malformed cargo metadata: package without {e}"
                ) from e
            nodes.append(
                PackageNode(
                    id=pkg_id,
                    repository=pkg.get("repository"),
                    description=pkg.get("description"),
                    manifest_path=Path(pkg.get("manifest_path", "")),
                )
            )

        def lookup(raw_id: str) -> PackageId:
            try:
                return ids[raw_id]
            except KeyError:
                raise GraphResolutionFailure(
                    f"cargo metadata references unknown package id {raw_id!r}"
                ) from None

        members = [lookup(m) for m in raw_members]

        resolve: Optional[dict[str, Any]] = data.get("resolve")
        if resolve is None:
            raise GraphResolutionFailure(
                "cargo metadata has no dependency resolution (was --no-deps used?)"
            )

        edges: list[DependencyEdge] = []
        try:
            for node in resolve.get("nodes", []):
                source = lookup(node["id"])
                for dep in node.get("deps", []):
                    edges.append(
                        DependencyEdge(
                            source=source,
                            target=lookup(dep["pkg"]),
                            kinds=_parse_dep_kinds(dep.get("dep_kinds")),
                        )
                    )
        except (KeyError, TypeError, AttributeError) as e:
            raise GraphResolutionFailure(
                f"malformed cargo metadata resolve entry: {e!r}"
            ) from e

        return cls(nodes, edges, members)

    @classmethod
    def from_manifest(cls, manifest_path: str | Path, cargo: str = "cargo") -> PackageGraph:
        """Run ``cargo metadata`` on ``manifest_path`` and build the graph."""
        from dep_inspector.metadata import MetadataCommand

        return cls.from_metadata(MetadataCommand(manifest_path, cargo=cargo).exec())


def _parse_dep_kinds(raw: Optional[list[dict[str, Any]]]) -> frozenset[DependencyKind]:
    # Cargo < 1.41 does not report dep_kinds: every link is a normal one
    if not raw:
        return frozenset({DependencyKind.normal})
    kinds: set[DependencyKind] = set()
    for entry in raw:
        kind = entry.get("kind")
        try:
            kinds.add(DependencyKind(kind) if kind else DependencyKind.normal)
        except ValueError:
            raise GraphResolutionFailure(
                f"malformed cargo metadata: unknown dependency kind {kind!r}"
            ) from None
    return frozenset(kinds)
