"""Tests for root importer attribution."""

import pytest

from dep_inspector.analysis.closure import compute_closures
from dep_inspector.analysis.collector import collect_dependencies
from dep_inspector.analysis.importers import attribute_root_importers, imported_by_root
from dep_inspector.analysis.roots import resolve_roots
from dep_inspector.errors import InconsistentRegistry
from dep_inspector.models import PackageRisk


def _prepare(graph, **kwargs):
    roots = resolve_roots(graph, **kwargs)
    registry, _ = collect_dependencies(graph, roots)
    return roots, registry, compute_closures(graph, registry)


class TestImportedByRoot:
    def test_includes_direct_and_transitive(self, workspace_graph, pid):
        _, _, closures = _prepare(workspace_graph)
        imported = imported_by_root(workspace_graph, pid("cli", True), closures)
        assert imported == {pid("clap"), pid("log"), pid("bitflags")}

    def test_workspace_dependency_not_followed(self, workspace_graph, pid):
        _, _, closures = _prepare(workspace_graph)
        imported = imported_by_root(workspace_graph, pid("app", True), closures)
        # rand comes in through core, which is analyzed on its own
        assert pid("rand") not in imported


class TestAttributeRootImporters:
    def test_workspace_graph(self, workspace_graph, pid):
        roots, registry, closures = _prepare(workspace_graph)
        attribute_root_importers(workspace_graph, roots, registry, closures)

        app, cli, core = pid("app", True), pid("cli", True), pid("core", True)
        expected = {
            "serde": [app, core],
            "serde_derive": [app, core],
            "clap": [app, cli],
            "bitflags": [app, cli],
            "log": [app, cli],
            "rand": [core],
            "libc": [core],
        }
        for name, importers in expected.items():
            assert registry[pid(name)].root_importers == importers, name

    def test_each_root_recorded_once(self, make_graph, pid):
        # b is both a direct and a transitive dependency of app
        graph = make_graph({"app": ["a", "b"], "a": ["b"]}, workspace=["app"])
        roots, registry, closures = _prepare(graph)
        attribute_root_importers(graph, roots, registry, closures)
        assert registry[pid("b")].root_importers == [pid("app", True)]

    def test_parallel_matches_inline(self, workspace_graph):
        roots, inline_registry, closures = _prepare(workspace_graph)
        attribute_root_importers(workspace_graph, roots, inline_registry, closures)
        _, pooled_registry, _ = _prepare(workspace_graph)
        attribute_root_importers(
            workspace_graph, roots, pooled_registry, closures, max_workers=4
        )
        for pkg_id, risk in inline_registry.items():
            assert pooled_registry[pkg_id].root_importers == risk.root_importers

    def test_orphan_entry_rejected(self, workspace_graph, pid):
        roots, registry, closures = _prepare(workspace_graph)
        registry[pid("regex")] = PackageRisk(name="regex", versions={"1.0.0"})
        closures = {**closures, pid("regex"): frozenset()}
        with pytest.raises(InconsistentRegistry, match="regex"):
            attribute_root_importers(workspace_graph, roots, registry, closures)
