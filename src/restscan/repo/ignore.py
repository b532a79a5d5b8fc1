from __future__ import annotations

from pathlib import Path

# build output and tool state of Maven/Gradle/IDE projects
IGNORED_DIRS = frozenset({
    "build",
    "out",
    "target",
    "bin",
    "node_modules",
    "generated-sources",
})


def should_ignore_dir(dir_path: Path) -> bool:
    """Hidden directories (.git, .gradle, .idea, ...) and build output are never walked."""
    name = dir_path.name
    return name.startswith(".") or name in IGNORED_DIRS
