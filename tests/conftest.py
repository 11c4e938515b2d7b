"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from dep_inspector.graph import PackageGraph
from dep_inspector.models import DependencyEdge, DependencyKind, PackageId, PackageNode

REGISTRY = "registry+https://github.com/rust-lang/crates.io-index"


def _pid(name: str, workspace: bool = False) -> PackageId:
    if workspace:
        return PackageId(name=name, version="0.1.0")
    return PackageId(name=name, version="1.0.0", source=REGISTRY)


@pytest.fixture
def pid():
    """Package id for a name: workspace crates have no source."""
    return _pid


@pytest.fixture
def make_graph():
    """Build a PackageGraph from ``{name: [dependency names]}``.

    ``dev`` lists (source, target) dev-only links, ``build_deps`` lists
    build-dependency links.
    """

    def build(links, workspace=(), dev=(), build_deps=()):
        names = set(workspace) | set(links)
        names |= {t for targets in links.values() for t in targets}
        for a, b in list(dev) + list(build_deps):
            names |= {a, b}
        ids = {n: _pid(n, n in workspace) for n in names}
        nodes = [
            PackageNode(
                id=ids[n],
                repository=f"https://github.com/example/{n}",
                description=f"the {n} crate",
                manifest_path=Path(f"/src/{n}/Cargo.toml"),
            )
            for n in sorted(names)
        ]
        edges = [
            DependencyEdge(source=ids[a], target=ids[b])
            for a, targets in links.items()
            for b in targets
        ]
        edges += [
            DependencyEdge(source=ids[a], target=ids[b], kinds=frozenset({DependencyKind.dev}))
            for a, b in dev
        ]
        edges += [
            DependencyEdge(source=ids[a], target=ids[b], kinds=frozenset({DependencyKind.build}))
            for a, b in build_deps
        ]
        return PackageGraph(nodes, edges, [ids[w] for w in workspace])

    return build


@pytest.fixture
def workspace_graph(make_graph):
    """Two root crates sharing part of their dependency tree.

    app -> serde, clap, core(ws)      core -> serde, rand
    cli -> clap, log                  clap -> bitflags, log
    serde -> serde_derive             rand -> libc
    app -dev-> proptest -> regex
    """
    return make_graph(
        {
            "app": ["serde", "clap", "core"],
            "cli": ["clap", "log"],
            "core": ["serde", "rand"],
            "clap": ["bitflags", "log"],
            "serde": ["serde_derive"],
            "rand": ["libc"],
            "proptest": ["regex"],
        },
        workspace=["app", "cli", "core"],
        dev=[("app", "proptest")],
    )


@pytest.fixture
def sample_metadata():
    """Trimmed ``cargo metadata --format-version 1`` output."""
    return {
        "packages": [
            {
                "name": "app",
                "version": "0.1.0",
                "id": "path+file:///ws/app#0.1.0",
                "source": None,
                "description": None,
                "repository": None,
                "manifest_path": "/ws/app/Cargo.toml",
            },
            {
                "name": "serde",
                "version": "1.0.190",
                "id": f"{REGISTRY}#serde@1.0.190",
                "source": REGISTRY,
                "description": "A serialization framework",
                "repository": "https://github.com/serde-rs/serde",
                "manifest_path": "/registry/serde-1.0.190/Cargo.toml",
            },
            {
                "name": "cc",
                "version": "1.0.83",
                "id": f"{REGISTRY}#cc@1.0.83",
                "source": REGISTRY,
                "description": "Compile C code",
                "repository": "https://github.com/rust-lang/cc-rs",
                "manifest_path": "/registry/cc-1.0.83/Cargo.toml",
            },
            {
                "name": "tempfile",
                "version": "3.8.0",
                "id": f"{REGISTRY}#tempfile@3.8.0",
                "source": REGISTRY,
                "description": None,
                "repository": None,
                "manifest_path": "/registry/tempfile-3.8.0/Cargo.toml",
            },
        ],
        "workspace_members": ["path+file:///ws/app#0.1.0"],
        "resolve": {
            "nodes": [
                {
                    "id": "path+file:///ws/app#0.1.0",
                    "deps": [
                        {
                            "name": "serde",
                            "pkg": f"{REGISTRY}#serde@1.0.190",
                            "dep_kinds": [{"kind": None, "target": None}],
                        },
                        {
                            "name": "cc",
                            "pkg": f"{REGISTRY}#cc@1.0.83",
                            "dep_kinds": [{"kind": "build", "target": None}],
                        },
                        {
                            "name": "tempfile",
                            "pkg": f"{REGISTRY}#tempfile@3.8.0",
                            "dep_kinds": [{"kind": "dev", "target": None}],
                        },
                    ],
                },
                {"id": f"{REGISTRY}#serde@1.0.190", "deps": []},
                {"id": f"{REGISTRY}#cc@1.0.83", "deps": []},
                {"id": f"{REGISTRY}#tempfile@3.8.0", "deps": []},
            ],
            "root": "path+file:///ws/app#0.1.0",
        },
    }
