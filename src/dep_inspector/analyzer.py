"""End-to-end dependency analysis.

Orchestrates graph resolution, the risk core, the build step and the
popularity lookups to produce a complete AnalysisResult.
"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

import httpx

from dep_inspector.analysis.code import count_loc, dependency_files, package_files
from dep_inspector.analysis.risk import compute_package_risks
from dep_inspector.builder import CrateBuilder
from dep_inspector.cloner import RepoCloner, split_repo_slug
from dep_inspector.config import AnalysisConfig
from dep_inspector.fetcher import PopularityFetcher
from dep_inspector.graph import PackageGraph
from dep_inspector.models import AnalysisResult, PackageRisk

logger = logging.getLogger(__name__)


class Analyzer:
    """Runs a full dep-inspector analysis for one configuration."""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        on_status: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.config = config or AnalysisConfig()
        self._on_status = on_status or (lambda _: None)
        token = self.config.api_token
        self._fetcher = PopularityFetcher(token=token, proxy=self.config.proxy)
        self._cloner = RepoCloner(token=token)
        self._builder = CrateBuilder()

    # ── Status helper ─────────────────────────────────────────────────────

    def _status(self, msg: str) -> None:
        self._on_status(msg)

    async def close(self) -> None:
        """Tear down resources."""
        await self._fetcher.close()
        self._builder.cleanup()
        self._cloner.cleanup()

    # ── Full analysis ─────────────────────────────────────────────────────

    def _manifest_path(self) -> Path:
        if self.config.repo:
            owner, repo = split_repo_slug(self.config.repo)
            self._status(f"Cloning {owner}/{repo} …")
            self._cloner.clone(owner, repo)
            return self._cloner.find_manifest()
        return self.config.manifest_path

    async def analyze(self) -> AnalysisResult:
        """Run the entire analysis pipeline."""
        manifest_path = self._manifest_path()

        self._status("Resolving package graph …")
        graph = PackageGraph.from_manifest(manifest_path)

        result = compute_package_risks(
            graph,
            packages=self.config.packages,
            ignore=self.config.ignore,
            max_workers=self.config.max_workers,
            on_status=self._status,
        )

        self._measure_code(result, manifest_path)

        if self.config.offline:
            logger.info("offline mode, skipping popularity metrics")
        else:
            self._status("Fetching popularity metrics …")
            await self._fetch_popularity(result)

        self._status("Done.")
        return result

    # ── Code metrics ──────────────────────────────────────────────────────

    def _measure_code(self, result: AnalysisResult, manifest_path: Path) -> None:
        if self.config.skip_build:
            self._status("Counting lines of code …")
            for risk in result.analysis_result.values():
                risk.used = True
                files = package_files(risk.manifest_path)
                self._apply_metrics(risk, files)
            return

        self._status("Building workspace …")
        built = self._builder.build(manifest_path)

        self._status("Counting lines of code …")
        for risk in result.analysis_result.values():
            files = dependency_files(risk.manifest_path, built)
            risk.used = bool(files)
            self._apply_metrics(risk, files)

    @staticmethod
    def _apply_metrics(risk: PackageRisk, files: list[Path]) -> None:
        metrics = count_loc(files)
        risk.loc = metrics.loc
        risk.rust_loc = metrics.rust_loc
        risk.unsafe_loc = metrics.unsafe_loc

    # ── Popularity ────────────────────────────────────────────────────────

    async def _fetch_popularity(self, result: AnalysisResult) -> None:
        semaphore = asyncio.Semaphore(self.config.concurrency)

        async def enrich(risk: PackageRisk) -> None:
            async with semaphore:
                if risk.repo:
                    try:
                        risk.stargazers_count = await self._fetcher.fetch_github_stars(risk.repo)
                    except httpx.HTTPError as e:
                        logger.warning("could not fetch stars for %s: %s", risk.name, e)
                try:
                    risk.crates_io_dependent = await self._fetcher.fetch_crates_io_dependents(
                        risk.name
                    )
                except httpx.HTTPError as e:
                    logger.warning("could not fetch dependents of %s: %s", risk.name, e)

        await asyncio.gather(*(enrich(r) for r in result.analysis_result.values()))
