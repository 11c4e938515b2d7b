"""Home screen: workspace selection and root crate filters."""

from pathlib import Path

from textual import on
from textual.app import ComposeResult
from textual.containers import Center, Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Checkbox, Footer, Header, Input, Label, Static

from dep_inspector.config import AnalysisConfig
from dep_inspector.errors import ConfigurationError


def split_names(raw: str) -> list[str] | None:
    """Comma / space separated crate names, None when empty."""
    names = [n for n in raw.replace(",", " ").split() if n]
    return names or None


class HomeScreen(Screen):
    """Initial screen to pick the workspace to analyze."""

    CSS = """
    HomeScreen {
        align: center middle;
    }
    #home-container {
        width: 76;
        height: auto;
        padding: 1 4;
        border: round $primary;
        background: $surface;
    }
    #title {
        text-align: center;
        text-style: bold;
        color: $accent;
    }
    #subtitle {
        text-align: center;
        color: $text-muted;
        margin-bottom: 1;
    }
    .field-label {
        margin-top: 1;
    }
    #options-row {
        height: auto;
        margin-top: 1;
    }
    #start-btn {
        margin-top: 1;
        width: 100%;
    }
    #error-label {
        color: $error;
        text-align: center;
        margin-top: 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Center():
            with Vertical(id="home-container"):
                yield Static("📦  DEP INSPECTOR", id="title")
                yield Static(
                    "Risk management for third-party Cargo dependencies",
                    id="subtitle",
                )
                yield Label("Cargo.toml path or GitHub owner/repo:", classes="field-label")
                yield Input(
                    value=str(Path.cwd() / "Cargo.toml"),
                    id="target-input",
                )
                yield Label("Only these workspace crates (optional):", classes="field-label")
                yield Input(placeholder="e.g. core, cli", id="packages-input")
                yield Label("Ignore these workspace crates (optional):", classes="field-label")
                yield Input(placeholder="e.g. xtask", id="ignore-input")
                with Horizontal(id="options-row"):
                    yield Checkbox("Skip build", id="skip-build")
                    yield Checkbox("Offline", id="offline")
                yield Button("▶  Analyze", id="start-btn", variant="primary")
                yield Label("", id="error-label")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#target-input", Input).focus()

    def build_config(self) -> AnalysisConfig:
        """Turn the form into an AnalysisConfig (raises ConfigurationError)."""
        target = self.query_one("#target-input", Input).value.strip()
        if not target:
            raise ConfigurationError("enter a Cargo.toml path or an owner/repo")

        options: dict = {
            "packages": split_names(self.query_one("#packages-input", Input).value),
            "ignore": split_names(self.query_one("#ignore-input", Input).value),
            "skip_build": self.query_one("#skip-build", Checkbox).value,
            "offline": self.query_one("#offline", Checkbox).value,
        }
        path = Path(target).expanduser()
        if path.exists() or target.endswith(".toml"):
            options["manifest_path"] = path
        elif target.count("/") == 1:
            options["repo"] = target
        else:
            raise ConfigurationError(f"{target!r} is neither a manifest nor owner/repo")
        return AnalysisConfig.from_options(**options)

    @on(Button.Pressed, "#start-btn")
    def start_analysis(self) -> None:
        error_label = self.query_one("#error-label", Label)
        try:
            config = self.build_config()
        except ConfigurationError as e:
            error_label.update(f"⚠  {e}")
            return
        error_label.update("")
        self.app.run_analysis(config)  # type: ignore[attr-defined]

    @on(Input.Submitted)
    def submit_on_enter(self) -> None:
        self.start_analysis()
