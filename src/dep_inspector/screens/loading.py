"""Loading screen: pipeline progress while the analysis runs."""

from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Footer, Header, Label, Log, ProgressBar, Static


class LoadingScreen(Screen):
    """Step log and progress bar fed by the analyzer's status callback."""

    BINDINGS = [
        ("b", "go_back", "Back"),
    ]

    CSS = """
    LoadingScreen {
        align: center middle;
    }
    #pipeline {
        width: 80;
        height: 22;
        padding: 1 3;
        border: heavy $accent;
    }
    #pipeline-title {
        text-style: bold;
        width: 100%;
        content-align: center middle;
    }
    #current-step {
        margin-top: 1;
        text-style: italic;
    }
    #step-log {
        height: 10;
        border: blank;
    }
    #hint {
        color: $warning;
    }
    """

    def __init__(self, **kwargs) -> None:  # type: ignore[no-untyped-def]
        super().__init__(**kwargs)
        self._steps: list[str] = []

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="pipeline"):
            yield Static("📦  Analyzing dependencies", id="pipeline-title")
            yield Log(id="step-log", auto_scroll=True)
            yield Label("Starting …", id="current-step")
            yield ProgressBar(total=100, show_eta=False, id="progress")
            yield Label("", id="hint")
        yield Footer()

    def update_status(self, message: str, progress: int | None = None) -> None:
        """Log the previous step as done and show ``message`` as current."""
        if self._steps:
            self.query_one("#step-log", Log).write_line(f"✔ {self._steps[-1]}")
        self._steps.append(message)
        self.query_one("#current-step", Label).update(message)
        if progress is not None:
            self.query_one("#progress", ProgressBar).update(progress=progress)

    def set_phase(self, phase: str) -> None:
        self.query_one("#hint", Label).update(phase)

    def action_go_back(self) -> None:
        self.app.pop_screen()
