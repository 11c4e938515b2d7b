"""Tests for exclusive introduction attribution."""

from dep_inspector.analysis.closure import compute_closures
from dep_inspector.analysis.collector import collect_dependencies
from dep_inspector.analysis.exclusive import (
    attribute_exclusive_deps,
    build_owner_index,
    compute_exclusive_deps,
)
from dep_inspector.analysis.roots import resolve_roots


def _prepare(graph, **kwargs):
    registry, main = collect_dependencies(graph, resolve_roots(graph, **kwargs))
    return registry, main, compute_closures(graph, registry)


class TestOwnerIndex:
    def test_main_dependency_owns_itself(self, workspace_graph, pid):
        _, main, closures = _prepare(workspace_graph)
        owners = build_owner_index(main, closures)
        assert owners[pid("serde")] == {pid("serde")}
        assert owners[pid("log")] == {pid("log"), pid("clap")}

    def test_non_main_owners(self, workspace_graph, pid):
        _, main, closures = _prepare(workspace_graph)
        owners = build_owner_index(main, closures)
        assert owners[pid("bitflags")] == {pid("clap")}
        assert owners[pid("libc")] == {pid("rand")}


class TestComputeExclusiveDeps:
    def test_workspace_graph(self, workspace_graph, pid):
        _, main, closures = _prepare(workspace_graph)
        exclusive = compute_exclusive_deps(main, closures)
        assert exclusive == {
            pid("serde"): [pid("serde_derive")],
            pid("clap"): [pid("bitflags")],
            pid("log"): [],
            pid("rand"): [pid("libc")],
        }

    def test_single_root(self, workspace_graph, pid):
        _, main, closures = _prepare(workspace_graph, packages=["app"])
        exclusive = compute_exclusive_deps(main, closures)
        assert exclusive[pid("clap")] == [pid("bitflags"), pid("log")]
        assert exclusive[pid("serde")] == [pid("serde_derive")]

    def test_main_reached_through_other_main(self, make_graph, pid):
        graph = make_graph({"app": ["a", "b"], "a": ["b", "c"]}, workspace=["app"])
        _, main, closures = _prepare(graph)
        exclusive = compute_exclusive_deps(main, closures)
        assert exclusive[pid("a")] == [pid("c")]
        assert exclusive[pid("b")] == []

    def test_exclusive_subset_of_closure(self, workspace_graph):
        _, main, closures = _prepare(workspace_graph)
        for dep, introduced in compute_exclusive_deps(main, closures).items():
            assert set(introduced) <= closures[dep]
            assert dep not in introduced

    def test_exclusive_lists_disjoint(self, workspace_graph):
        _, main, closures = _prepare(workspace_graph)
        seen = set()
        for introduced in compute_exclusive_deps(main, closures).values():
            assert seen.isdisjoint(introduced)
            seen.update(introduced)

    def test_parallel_matches_inline(self, workspace_graph):
        _, main, closures = _prepare(workspace_graph)
        assert compute_exclusive_deps(main, closures, max_workers=4) == compute_exclusive_deps(
            main, closures
        )


class TestAttributeExclusiveDeps:
    def test_only_main_dependencies_filled(self, workspace_graph, pid):
        registry, main, closures = _prepare(workspace_graph)
        attribute_exclusive_deps(registry, main, closures)
        assert registry[pid("clap")].exclusive_deps_introduced == [pid("bitflags")]
        for pkg_id, risk in registry.items():
            if pkg_id not in main:
                assert risk.exclusive_deps_introduced == []
