"""Data models for dep-inspector."""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


# ── Package graph ─────────────────────────────────────────────────────────

class PackageId(BaseModel):
    """Unique identity of a package in the resolved graph."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    source: Optional[str] = None  # None for path (workspace) packages

    def __str__(self) -> str:
        if self.source:
            return f"{self.name} {self.version} ({self.source})"
        return f"{self.name} {self.version}"

    def __lt__(self, other: "PackageId") -> bool:
        return self._key() < other._key()

    def _key(self) -> tuple[str, str, str]:
        return (self.name, self.version, self.source or "")


class PackageNode(BaseModel):
    """Metadata of a single package, as resolved by Cargo."""

    model_config = ConfigDict(frozen=True)

    id: PackageId
    repository: Optional[str] = None
    description: Optional[str] = None
    manifest_path: Path = Path()

    @property
    def name(self) -> str:
        return self.id.name

    @property
    def version(self) -> str:
        return self.id.version


class DependencyKind(str, Enum):
    """Kind of a dependency link."""

    normal = "normal"
    build = "build"
    dev = "dev"


class DependencyEdge(BaseModel):
    """A directed dependency link ``source -> target``."""

    model_config = ConfigDict(frozen=True)

    source: PackageId
    target: PackageId
    kinds: frozenset[DependencyKind] = frozenset({DependencyKind.normal})
    target_is_workspace: bool = False

    @property
    def dev_only(self) -> bool:
        """True if the link only matters for tests, examples and benches."""
        return bool(self.kinds) and self.kinds == {DependencyKind.dev}


# ── Analysis result ───────────────────────────────────────────────────────

def _sorted_ids(ids: "set[PackageId] | list[PackageId]") -> list[str]:
    return [str(i) for i in sorted(ids)]


class PackageRisk(BaseModel):
    """Everything known about one third-party package after analysis."""

    # metadata
    name: str
    versions: set[str] = Field(default_factory=set)  # more than one is bad
    repo: Optional[str] = None
    description: Optional[str] = None
    manifest_path: Path = Field(default=Path(), exclude=True)

    # graph analysis
    used: bool = False  # built for the host target and features
    transitive_dependencies: set[PackageId] = Field(default_factory=set)
    root_importers: list[PackageId] = Field(default_factory=list)
    exclusive_deps_introduced: list[PackageId] = Field(default_factory=list)

    # filled in by later stages
    loc: int = 0  # non-rust lines of code
    rust_loc: int = 0
    unsafe_loc: int = 0
    stargazers_count: Optional[int] = None
    crates_io_dependent: Optional[int] = None

    @field_serializer("versions")
    def _serialize_versions(self, versions: set[str]) -> list[str]:
        return sorted(versions)

    @field_serializer(
        "transitive_dependencies", "root_importers", "exclusive_deps_introduced"
    )
    def _serialize_ids(self, ids: "set[PackageId] | list[PackageId]") -> list[str]:
        return _sorted_ids(ids)


class AnalysisResult(BaseModel):
    """Output of the risk core: analyzed roots, main dependencies, registry."""

    root_crates: set[str] = Field(default_factory=set)
    main_dependencies: set[PackageId] = Field(default_factory=set)
    analysis_result: dict[PackageId, PackageRisk] = Field(default_factory=dict)

    def duplicate_versions(self) -> dict[str, list[str]]:
        """Package names pulled in under more than one version."""
        by_name: dict[str, set[str]] = {}
        for risk in self.analysis_result.values():
            by_name.setdefault(risk.name, set()).update(risk.versions)
        return {
            name: sorted(versions)
            for name, versions in sorted(by_name.items())
            if len(versions) > 1
        }
