"""CLI entry point for dep-inspector."""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer

from dep_inspector import __version__
from dep_inspector.config import AnalysisConfig
from dep_inspector.errors import DepInspectorError
from dep_inspector.models import AnalysisResult

app = typer.Typer(
    help="Risk management for third-party Cargo dependencies.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"dep-inspector v{__version__}")
        raise typer.Exit()


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def log_level_callback(value: str) -> str:
    """Normalize and validate the --log-level value."""
    level = value.upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"expected one of: {', '.join(LOG_LEVELS)}")
    return level


@app.callback()
def callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Dep Inspector: who pulls in what, and what would go away with it."""


async def _run(config: AnalysisConfig) -> AnalysisResult:
    from dep_inspector.analyzer import Analyzer

    analyzer = Analyzer(config)
    try:
        return await analyzer.analyze()
    finally:
        await analyzer.close()


@app.command("analyze")
def analyze(
    manifest_path: Optional[Path] = typer.Option(
        None, "--manifest-path", "-m", metavar="PATH",
        help="Path to the Cargo.toml to analyze (default: ./Cargo.toml).",
    ),
    package: Optional[List[str]] = typer.Option(
        None, "--package", "-p", metavar="PACKAGE",
        help="Only analyze this workspace crate (repeatable).",
    ),
    ignore_workspace: Optional[List[str]] = typer.Option(
        None, "--ignore-workspace", "-i", metavar="CRATE_NAME",
        help="Workspace crate to ignore (repeatable).",
    ),
    html_output: Optional[Path] = typer.Option(
        None, "--html-output", "-o", help="Write an HTML report instead of printing JSON.",
    ),
    github_token: Optional[str] = typer.Option(
        None, "--github-token", metavar="USER:TOKEN",
        help="GitHub credentials used to retrieve repository stats.",
    ),
    proxy: Optional[str] = typer.Option(
        None, "--proxy", metavar="PROTOCOL://IP:PORT",
        help="Proxy used for external requests.",
    ),
    repo: Optional[str] = typer.Option(
        None, "--repo", metavar="OWNER/REPO",
        help="Clone and analyze a GitHub repository instead of a local manifest.",
    ),
    skip_build: bool = typer.Option(
        False, "--skip-build", help="Do not build; count every file of each dependency.",
    ),
    offline: bool = typer.Option(
        False, "--offline", help="Skip GitHub and crates.io lookups.",
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", help="Worker threads for the graph analysis.",
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress any output to stdout."),
    log_level: str = typer.Option(
        "WARNING", "--log-level", callback=log_level_callback, help="Logging level."
    ),
) -> None:
    """Analyze the third-party dependencies of a Cargo workspace."""
    from dep_inspector.report import render_html, report_name, to_json

    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    quiet = quiet or html_output is None

    options: dict = {
        "packages": package or None,
        "ignore": ignore_workspace or None,
        "repo": repo,
        "github_token": github_token,
        "proxy": proxy,
        "max_workers": workers,
        "skip_build": skip_build,
        "offline": offline,
    }
    if manifest_path is not None:
        options["manifest_path"] = manifest_path

    if not quiet:
        typer.echo("=========================")
        typer.echo("   ~~ DEP INSPECTOR ~~")
        typer.echo("=========================\n")
        typer.echo("  please wait, this can take a while...\n")

    try:
        config = AnalysisConfig.from_options(**options)
        result = asyncio.run(_run(config))
    except DepInspectorError as e:
        typer.echo(f"error ({e.stage}): {e}", err=True)
        raise typer.Exit(code=1)

    if html_output is None:
        typer.echo(to_json(result))
        return

    name = repo.split("/")[-1] if repo else report_name(config.manifest_path)
    try:
        html_output.write_text(render_html(result, name))
    except OSError as e:
        typer.echo(f"error (write report): {e}", err=True)
        raise typer.Exit(code=1)
    if not quiet:
        typer.echo(f"\n=> html output saved at {html_output}")


@app.command("tui")
def tui() -> None:
    """Launch the interactive Dep Inspector TUI."""
    from dep_inspector.app import DepInspectorApp

    DepInspectorApp().run()


def main() -> None:
    """Console script entry point."""
    from dotenv import load_dotenv

    load_dotenv()  # Load .env file (e.g. GITHUB_TOKEN)

    app()


if __name__ == "__main__":
    main()
