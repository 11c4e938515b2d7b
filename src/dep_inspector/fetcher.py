"""Popularity metrics via the GitHub and crates.io REST APIs."""

import logging
import re
from typing import Optional

import httpx

from dep_inspector import __version__

logger = logging.getLogger(__name__)

USER_AGENT = f"dep-inspector/{__version__}"

_GITHUB_REPO = re.compile(
    r"github\.com[/:](?P<owner>[A-Za-z0-9_.-]+)/(?P<repo>[A-Za-z0-9_.-]+)"
)


def parse_github_repo(url: str) -> Optional[tuple[str, str]]:
    """Extract ``(owner, repo)`` from a GitHub repository URL."""
    match = _GITHUB_REPO.search(url or "")
    if not match:
        return None
    repo = match.group("repo")
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not repo:
        return None
    return match.group("owner"), repo


class PopularityFetcher:
    """Fetches GitHub stars and crates.io reverse dependency counts."""

    def __init__(
        self,
        token: Optional[str] = None,
        proxy: Optional[str] = None,
        github_url: str = "https://api.github.com",
        crates_io_url: str = "https://crates.io/api/v1",
    ) -> None:
        self.token = token
        self.proxy = proxy
        self.github_url = github_url
        self.crates_io_url = crates_io_url
        self._client: Optional[httpx.AsyncClient] = None

    # ── HTTP plumbing ─────────────────────────────────────────────────────

    @property
    def github_headers(self) -> dict[str, str]:
        h: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            h["Authorization"] = f"Bearer {self.token}"
        return h

    async def _client_instance(self) -> httpx.AsyncClient:
        if self._client is None:
            # crates.io rejects requests without a user agent
            self._client = httpx.AsyncClient(
                headers={"User-Agent": USER_AGENT},
                proxy=self.proxy,
                timeout=30.0,
                follow_redirects=True,
            )
        return self._client

    async def _get(self, url: str, **kwargs) -> httpx.Response:  # type: ignore[no-untyped-def]
        """GET with rate-limit awareness."""
        client = await self._client_instance()
        resp = await client.get(url, **kwargs)
        if resp.status_code in (403, 429) and "rate limit" in resp.text.lower():
            if self.token:
                hint = "Authenticated rate limit hit. Wait a few minutes and retry."
            else:
                hint = (
                    "Running unauthenticated (60 req/hour). "
                    "Pass --github-token or set GITHUB_TOKEN to get 5 000 req/hour."
                )
            raise httpx.HTTPStatusError(
                f"API rate limit exceeded. {hint}",
                request=resp.request,
                response=resp,
            )
        return resp

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ── GitHub ────────────────────────────────────────────────────────────

    async def fetch_github_stars(self, repo_url: str) -> Optional[int]:
        """Number of stargazers of a GitHub repository, None if not on GitHub."""
        parsed = parse_github_repo(repo_url)
        if parsed is None:
            return None
        owner, repo = parsed
        resp = await self._get(
            f"{self.github_url}/repos/{owner}/{repo}",
            headers=self.github_headers,
        )
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json().get("stargazers_count")

    # ── crates.io ─────────────────────────────────────────────────────────

    async def fetch_crates_io_dependents(self, name: str) -> Optional[int]:
        """Number of crates.io crates depending on ``name``."""
        resp = await self._get(
            f"{self.crates_io_url}/crates/{name}/reverse_dependencies",
            params={"per_page": "1"},
        )
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json().get("meta", {}).get("total")
