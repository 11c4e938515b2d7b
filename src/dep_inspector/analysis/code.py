"""Code metrics: lines of code and unsafe usage of a dependency."""

import re
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel

_SKIP_DIRS = {".git", "target", "node_modules", "__pycache__"}
_UNSAFE = re.compile(r"\bunsafe\b")


class CodeMetrics(BaseModel):
    """Line counts for one package."""

    loc: int = 0
    rust_loc: int = 0
    unsafe_loc: int = 0


def package_dir(manifest_path: Path) -> Path:
    """Directory holding a package's sources."""
    return manifest_path.parent


def list_source_files(root: Path) -> list[Path]:
    """All regular files under ``root``, hidden and build dirs excluded."""
    if not root.is_dir():
        return []
    files: list[Path] = []
    for p in root.rglob("*"):
        if not p.is_file() or p.name.startswith("."):
            continue
        rel = p.relative_to(root)
        if any(part in _SKIP_DIRS or part.startswith(".") for part in rel.parts[:-1]):
            continue
        files.append(p)
    return sorted(files)


def package_files(manifest_path: Path) -> list[Path]:
    """Every source file of the package at ``manifest_path``."""
    if not manifest_path.name:
        return []
    return list_source_files(package_dir(manifest_path))


def dependency_files(manifest_path: Path, built_files: Iterable[Path]) -> list[Path]:
    """Files of the package at ``manifest_path`` that the build used."""
    if not manifest_path.name:
        return []
    root = package_dir(manifest_path).resolve()
    return sorted(f for f in built_files if f.is_relative_to(root))


def count_unsafe(lines: Iterable[str]) -> int:
    """Lines using the ``unsafe`` keyword, ignoring line comments."""
    count = 0
    for line in lines:
        code = line.split("//", 1)[0]
        if _UNSAFE.search(code):
            count += 1
    return count


def count_loc(files: Iterable[Path]) -> CodeMetrics:
    """Count rust / non-rust lines and unsafe lines over ``files``."""
    metrics = CodeMetrics()
    for f in files:
        try:
            lines = f.read_text(errors="replace").splitlines()
        except OSError:
            continue
        if f.suffix == ".rs":
            metrics.rust_loc += len(lines)
            metrics.unsafe_loc += count_unsafe(lines)
        else:
            metrics.loc += len(lines)
    return metrics
