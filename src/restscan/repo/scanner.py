from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from restscan.repo.ignore import should_ignore_dir


@dataclass(frozen=True)
class Admission:
    """Verdict on one explicitly listed file: `reason` is set when it is skipped."""

    path: str
    reason: Optional[str] = None

    @property
    def admitted(self) -> bool:
        return self.reason is None


def scan_source_files(root: Path, extension: str = ".java", path_marker: str = "controller") -> list[str]:
    """
    Source files under `root` whose path contains `path_marker`.

    The marker test is case-sensitive and runs on the path as joined from
    `root`, so .../controller/... and .../UserController.java both match.
    Ordering is deterministic (sorted walk).
    """
    out: list[str] = []
    for path in _iter_files(root):
        if path.endswith(extension) and path_marker in path:
            out.append(path)
    return out


def admit_files(paths: Iterable[str | Path], extension: str = ".java") -> list[Admission]:
    out: list[Admission] = []
    for p in paths:
        p = str(p)
        if not p.endswith(extension):
            out.append(Admission(p, f"not a {extension} file"))
        elif not os.path.isfile(p):
            out.append(Admission(p, "file does not exist"))
        else:
            out.append(Admission(p))
    return out


def index_files_by_name(root: Path, extension: str = ".java") -> dict[str, str]:
    """file name -> first path in walk order; built once per run."""
    out: dict[str, str] = {}
    for path in _iter_files(root):
        if path.endswith(extension):
            out.setdefault(os.path.basename(path), path)
    return out


def _iter_files(root: Path) -> Iterator[str]:
    for current, dirs, files in os.walk(root):
        current_p = Path(current)

        # prune ignored dirs; sort for a stable walk order
        dirs[:] = sorted(d for d in dirs if not should_ignore_dir(current_p / d))

        for f in sorted(files):
            yield os.path.join(current, f)