"""Run configuration for an analysis."""

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, model_validator

from dep_inspector.errors import ConfigurationError


class AnalysisConfig(BaseModel):
    """Options of a single dep-inspector run."""

    manifest_path: Path = Field(default_factory=lambda: Path.cwd() / "Cargo.toml")
    packages: Optional[list[str]] = None  # workspace crates to analyze
    ignore: Optional[list[str]] = None  # workspace crates to skip
    repo: Optional[str] = None  # owner/repo to clone instead of a local manifest
    github_token: Optional[str] = None  # "username:token" or a bare token
    proxy: Optional[str] = None
    max_workers: Optional[int] = Field(default=None, ge=1)
    concurrency: int = Field(default=8, ge=1)  # parallel HTTP requests
    skip_build: bool = False
    offline: bool = False

    @model_validator(mode="after")
    def _check_root_filters(self) -> "AnalysisConfig":
        if self.packages is not None and self.ignore is not None:
            raise ConfigurationError("--package and --ignore-workspace cannot be combined")
        return self

    @model_validator(mode="after")
    def _check_github_token(self) -> "AnalysisConfig":
        # "username:token" or a bare token
        if self.github_token is not None:
            parts = self.github_token.split(":")
            if len(parts) > 2 or not all(parts):
                raise ConfigurationError("--github-token must be USERNAME:TOKEN or a bare token")
        return self

    @classmethod
    def from_options(cls, **options: Any) -> "AnalysisConfig":
        """Build a config, reporting invalid values as ConfigurationError."""
        try:
            return cls(**options)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigurationError(problems) from e

    @property
    def api_token(self) -> Optional[str]:
        """Token used for the GitHub API, falling back to the environment."""
        if self.github_token:
            _, _, token = self.github_token.rpartition(":")
            return token
        return os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN") or None
