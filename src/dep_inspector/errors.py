"""Error taxonomy for dep-inspector.

Every error is terminal for a run: the analysis either produces the whole
registry or nothing. ``stage`` names the pipeline step that failed and is
what the CLI shows to the user.
"""


class DepInspectorError(Exception):
    """Base class for all dep-inspector failures."""

    stage = "analysis"


class ConfigurationError(DepInspectorError):
    """Invalid or contradictory configuration."""

    stage = "configure"


class GraphResolutionFailure(DepInspectorError):
    """The package graph could not be obtained from Cargo."""

    stage = "resolve graph"


class EmptyRootSet(DepInspectorError):
    """No workspace package is left to analyze after filtering."""

    stage = "resolve roots"


class CycleDetected(DepInspectorError):
    """The dependency graph contains a cycle."""

    stage = "compute closures"

    def __init__(self, cycle: list[tuple[object, object]]) -> None:
        self.cycle = cycle
        path = " -> ".join(str(src) for src, _ in cycle)
        if cycle:
            path += f" -> {cycle[-1][1]}"
        super().__init__(f"dependency cycle detected: {path}")


class InconsistentRegistry(DepInspectorError):
    """A registry entry is not imported by any analyzed root."""

    stage = "attribute importers"


class BuildFailure(DepInspectorError):
    """``cargo build`` could not be started."""

    stage = "build"
