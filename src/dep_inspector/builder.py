"""Build the workspace to learn which dependency files actually get compiled."""

import logging
import re
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from dep_inspector.errors import BuildFailure

logger = logging.getLogger(__name__)

# "output: input input ..." where spaces inside paths are escaped as "\ "
_RULE = re.compile(r"^(?P<target>(?:[^\\:]|\\.|:(?!\s|$))+):(?:\s+(?P<deps>.*))?$")
_UNESCAPED_SPACE = re.compile(r"(?<!\\)\s+")


def parse_dep_info(text: str) -> set[Path]:
    """Return every input file listed in a Makefile-style dep-info file."""
    files: set[Path] = set()
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        match = _RULE.match(line)
        if not match or not match.group("deps"):
            continue
        for dep in _UNESCAPED_SPACE.split(match.group("deps").strip()):
            if dep:
                files.add(Path(dep.replace("\\ ", " ")))
    return files


class CrateBuilder:
    """Runs ``cargo build`` into a throw-away target directory."""

    def __init__(self, cargo: str = "cargo") -> None:
        self.cargo = cargo
        self._target_dir: Optional[Path] = None

    @property
    def target_dir(self) -> Optional[Path]:
        return self._target_dir

    def build(self, manifest_path: Path) -> set[Path]:
        """Build the workspace and return the source files the build read."""
        self._target_dir = Path(tempfile.mkdtemp(prefix="depinspect-target-"))
        args = [
            self.cargo,
            "build",
            "--manifest-path",
            str(manifest_path),
            "--target-dir",
            str(self._target_dir),
            "-q",
        ]
        logger.info("running %s", " ".join(args))
        try:
            proc = subprocess.run(args, capture_output=True, text=True, check=False)
        except OSError as e:
            raise BuildFailure(f"failed to build crate: {e}") from e
        if proc.returncode != 0:
            logger.warning(
                "cargo build exited with %d, dependency files may be incomplete: %s",
                proc.returncode, proc.stderr.strip(),
            )
        return self.collect_dep_info()

    def collect_dep_info(self) -> set[Path]:
        """Union of all inputs listed by the dep-info files in the target dir."""
        if not self._target_dir:
            return set()
        files: set[Path] = set()
        for dep_file in self._target_dir.rglob("*.d"):
            try:
                files |= parse_dep_info(dep_file.read_text(errors="replace"))
            except OSError:
                continue
        return {f.resolve() for f in files}

    def cleanup(self) -> None:
        """Remove the temporary target directory."""
        if self._target_dir and self._target_dir.exists():
            shutil.rmtree(self._target_dir, ignore_errors=True)
        self._target_dir = None
