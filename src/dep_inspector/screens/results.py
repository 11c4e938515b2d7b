"""Results screen: tabbed view of the dependency risk registry."""

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.widgets import (
    DataTable,
    Footer,
    Header,
    Label,
    Markdown,
    Static,
    TabbedContent,
    TabPane,
)

from dep_inspector.models import AnalysisResult, PackageId


def _fmt_optional(value: int | None) -> str:
    return "—" if value is None else str(value)


class ResultsScreen(Screen):
    """Main results display."""

    CSS = """
    ResultsScreen {
        layout: vertical;
    }
    #results-header {
        height: 3;
        background: $primary;
        color: $text;
        text-align: center;
        padding: 1 2;
        text-style: bold;
    }
    .section-title {
        text-style: bold;
        margin: 1 0;
        color: $secondary;
    }
    DataTable {
        height: auto;
        margin: 1 0;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("b", "go_back", "Back"),
    ]

    def __init__(self, result: AnalysisResult, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(**kwargs)
        self.result = result

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        roots = ", ".join(sorted(self.result.root_crates))
        yield Static(f"  📦  {roots}  ", id="results-header")

        with TabbedContent("📋 Dependencies", "🌳 Main Dependencies", "⚠ Duplicates"):
            with TabPane("📋 Dependencies"):
                yield from self._compose_dependencies()
            with TabPane("🌳 Main Dependencies"):
                yield from self._compose_main_dependencies()
            with TabPane("⚠ Duplicates"):
                yield from self._compose_duplicates()

        yield Footer()

    # ── Dependencies tab ──────────────────────────────────────────────────

    def _compose_dependencies(self) -> ComposeResult:
        registry = self.result.analysis_result
        with VerticalScroll():
            yield Static("ALL THIRD-PARTY PACKAGES", classes="section-title")
            yield Label(
                f"Root crates: {len(self.result.root_crates)}  ·  "
                f"Main dependencies: {len(self.result.main_dependencies)}  ·  "
                f"Packages: {len(registry)}"
            )
            table = DataTable(id="deps-table")
            table.add_columns(
                "Package", "Version", "Transitive", "Exclusive", "Importers",
                "Used", "Rust LOC", "Unsafe", "Stars", "Dependents",
            )
            ranked = sorted(
                registry.items(),
                key=lambda item: (-len(item[1].transitive_dependencies), item[0]),
            )
            for pkg_id, risk in ranked:
                table.add_row(
                    ("★ " if pkg_id in self.result.main_dependencies else "") + risk.name,
                    ", ".join(sorted(risk.versions)),
                    str(len(risk.transitive_dependencies)),
                    str(len(risk.exclusive_deps_introduced)),
                    str(len(risk.root_importers)),
                    "yes" if risk.used else "no",
                    str(risk.rust_loc),
                    str(risk.unsafe_loc),
                    _fmt_optional(risk.stargazers_count),
                    _fmt_optional(risk.crates_io_dependent),
                )
            yield table

    # ── Main dependencies tab ─────────────────────────────────────────────

    def _compose_main_dependencies(self) -> ComposeResult:
        registry = self.result.analysis_result
        with VerticalScroll():
            yield Static("WHAT EACH DIRECT DEPENDENCY BRINGS IN", classes="section-title")
            if not self.result.main_dependencies:
                yield Markdown("> _The analyzed crates have no third-party dependencies._")
                return
            ranked: list[PackageId] = sorted(
                self.result.main_dependencies,
                key=lambda d: (-len(registry[d].exclusive_deps_introduced), d),
            )
            for dep in ranked:
                risk = registry[dep]
                md = (
                    f"### {risk.name} {dep.version}\n\n"
                    f"{risk.description or ''}\n\n"
                    f"Imported by: {', '.join(r.name for r in risk.root_importers)}  ·  "
                    f"{len(risk.transitive_dependencies)} transitive dependencies"
                )
                if risk.exclusive_deps_introduced:
                    md += "\n\n**Removing it would also remove:** " + ", ".join(
                        f"`{d.name} {d.version}`" for d in risk.exclusive_deps_introduced
                    )
                yield Markdown(md)

    # ── Duplicates tab ────────────────────────────────────────────────────

    def _compose_duplicates(self) -> ComposeResult:
        duplicates = self.result.duplicate_versions()
        with VerticalScroll():
            yield Static("PACKAGES PULLED IN UNDER SEVERAL VERSIONS", classes="section-title")
            if not duplicates:
                yield Markdown("> _Every package is pulled in under a single version._")
                return
            table = DataTable(id="duplicates-table")
            table.add_columns("Package", "Versions")
            for name, versions in duplicates.items():
                table.add_row(name, ", ".join(versions))
            yield table

    def action_go_back(self) -> None:
        """Return to the home screen."""
        self.app.pop_screen()
