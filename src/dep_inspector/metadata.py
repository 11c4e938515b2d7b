"""Invoke ``cargo metadata`` to obtain the resolved package graph."""

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from dep_inspector.errors import GraphResolutionFailure

logger = logging.getLogger(__name__)


class MetadataCommand:
    """Runs ``cargo metadata --format-version 1`` for one manifest."""

    def __init__(self, manifest_path: str | Path, cargo: str = "cargo") -> None:
        self.manifest_path = Path(manifest_path)
        self.cargo = cargo

    @property
    def args(self) -> list[str]:
        return [
            self.cargo,
            "metadata",
            "--format-version",
            "1",
            "--manifest-path",
            str(self.manifest_path),
        ]

    def exec(self) -> dict[str, Any]:
        """Run cargo and return the decoded metadata."""
        if not self.manifest_path.is_file():
            raise GraphResolutionFailure(f"manifest not found: {self.manifest_path}")

        logger.info("running %s", " ".join(self.args))
        try:
            proc = subprocess.run(
                self.args,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise GraphResolutionFailure(f"could not run {self.cargo}: {e}") from e

        if proc.returncode != 0:
            stderr = proc.stderr.strip()
            raise GraphResolutionFailure(
                f"cargo metadata failed (exit {proc.returncode}): {stderr}"
            )

        try:
            return json.loads(proc.stdout)
        except json.JSONDecodeError as e:
            raise GraphResolutionFailure(f"cargo metadata returned invalid JSON: {e}") from e
