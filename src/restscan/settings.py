from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional

DEFAULT_SOURCE_EXTENSION = ".java"
DEFAULT_PATH_MARKER = "controller"
DEFAULT_ESTIMATED_DTO_DIR = "src/main/java/com/example/dto"
DEFAULT_SHAPE_SUFFIXES = ("Dto", "DTO", "Req", "Res", "Request", "Response")


@dataclass(frozen=True)
class ExtractorSettings:
    """
    Knobs for one extraction run.

    search_root: where the reference resolver looks for `<ClassName>.java`.
      None means "the scanned source root" in directory mode and the
      current directory in explicit-file mode.
    """

    source_extension: str = DEFAULT_SOURCE_EXTENSION
    path_marker: str = DEFAULT_PATH_MARKER
    estimated_dto_dir: str = DEFAULT_ESTIMATED_DTO_DIR
    shape_suffixes: tuple[str, ...] = DEFAULT_SHAPE_SUFFIXES
    search_root: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ExtractorSettings":
        return cls(
            path_marker=os.environ.get("RESTSCAN_PATH_MARKER") or DEFAULT_PATH_MARKER,
            estimated_dto_dir=os.environ.get("RESTSCAN_ESTIMATED_DTO_DIR") or DEFAULT_ESTIMATED_DTO_DIR,
        )

    def with_overrides(self, **changes: object) -> "ExtractorSettings":
        # None means "not given on the command line"
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def estimated_shape_path(self, class_name: str) -> str:
        return f"{self.estimated_dto_dir.rstrip('/')}/{class_name}{self.source_extension}"
