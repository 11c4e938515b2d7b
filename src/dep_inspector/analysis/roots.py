"""Root set resolution: which workspace crates to analyze."""

from collections.abc import Collection
from typing import Optional

from dep_inspector.errors import ConfigurationError, EmptyRootSet
from dep_inspector.graph import PackageGraph
from dep_inspector.models import PackageId


def resolve_roots(
    graph: PackageGraph,
    packages: Optional[Collection[str]] = None,
    ignore: Optional[Collection[str]] = None,
) -> frozenset[PackageId]:
    """Narrow the workspace members down to the crates to analyze.

    ``packages`` keeps only the named crates, ``ignore`` drops the named
    crates; the two are mutually exclusive. ``None`` means "not given".
    """
    if packages is not None and ignore is not None:
        raise ConfigurationError("--package and --ignore-workspace cannot be combined")

    members = graph.workspace_members()
    if packages is not None:
        wanted = set(packages)
        roots = frozenset(m for m in members if m.name in wanted)
    elif ignore is not None:
        ignored = set(ignore)
        roots = frozenset(m for m in members if m.name not in ignored)
    else:
        roots = members

    if not roots:
        raise EmptyRootSet("no package to analyze was found")
    return roots
