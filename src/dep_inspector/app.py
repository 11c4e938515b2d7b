"""Textual TUI for dep-inspector."""

from textual.app import App

from dep_inspector.analyzer import Analyzer
from dep_inspector.config import AnalysisConfig
from dep_inspector.errors import DepInspectorError
from dep_inspector.models import AnalysisResult
from dep_inspector.screens.home import HomeScreen
from dep_inspector.screens.loading import LoadingScreen
from dep_inspector.screens.results import ResultsScreen

# status messages emitted by a full (built, online) run
EXPECTED_STEPS = 10


class DepInspectorApp(App):
    """Home -> loading -> results, one analysis at a time."""

    TITLE = "Dep Inspector"
    SUB_TITLE = "Root importers · Transitive deps · Exclusive introductions"

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def on_mount(self) -> None:
        self.push_screen(HomeScreen())

    def run_analysis(self, config: AnalysisConfig) -> None:
        """Show the loading screen and analyze in a worker thread."""
        loading = LoadingScreen()
        self.push_screen(loading)
        self.run_worker(self._analyze(config, loading), thread=True, exclusive=True)

    async def _analyze(self, config: AnalysisConfig, loading: LoadingScreen) -> None:
        received = 0

        def on_status(message: str) -> None:
            nonlocal received
            received += 1
            progress = min(received * 100 // EXPECTED_STEPS, 95)
            self.call_from_thread(loading.update_status, message, progress)

        analyzer = Analyzer(config, on_status=on_status)
        try:
            result = await analyzer.analyze()
        except DepInspectorError as e:
            self.call_from_thread(self._report_failure, loading, f"❌ {e.stage} failed: {e}")
        except Exception as e:
            self.call_from_thread(self._report_failure, loading, f"❌ Unexpected error: {e}")
        else:
            self.call_from_thread(loading.update_status, "Complete!", 100)
            self.call_from_thread(self._show_results, result)
        finally:
            await analyzer.close()

    def _show_results(self, result: AnalysisResult) -> None:
        self.pop_screen()
        self.push_screen(ResultsScreen(result))

    def _report_failure(self, loading: LoadingScreen, message: str) -> None:
        loading.update_status(message)
        loading.set_phase("Press [b]  b  [/b] to go back and try again.")
