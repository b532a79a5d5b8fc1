from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Literal, Optional

from restscan.domain.models import DataShape, ExtractionResult, RouteGroup
from restscan.exceptions import ConfigurationError, RestscanError
from restscan.extractors.classifier import DeclarationKind, classify_file
from restscan.extractors.datashapes import extract_data_shape
from restscan.extractors.handlers import extract_route_group
from restscan.extractors.references import ReferenceResolver, ShapeLocator
from restscan.java.parser import JavaParser, get_parser
from restscan.java.syntax import read_compilation_unit
from restscan.logging_config import get_logger
from restscan.repo.scanner import admit_files, scan_source_files
from restscan.settings import ExtractorSettings

logger = get_logger("pipeline")

FileStatus = Literal["processed", "skipped", "failed"]


@dataclass(frozen=True)
class FileOutcome:
    path: str
    status: FileStatus
    controllers: int = 0
    data_shapes: int = 0
    message: str = ""


@dataclass(frozen=True)
class ExtractRun:
    result: ExtractionResult
    outcomes: list[FileOutcome]
    mode: str  # "directory" | "files"

    @property
    def files_processed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "processed")

    @property
    def files_skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "skipped")

    @property
    def files_failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "failed")


@dataclass
class ExtractionAccumulator:
    """
    The only mutable state of a run, owned by the pipeline.

    Data shapes are keyed by class name: the first entry for a name wins and
    later ones (even richer ones) are dropped.
    """

    route_groups: list[RouteGroup] = field(default_factory=list)
    data_shapes: dict[str, DataShape] = field(default_factory=dict)

    def add_route_group(self, group: RouteGroup) -> None:
        self.route_groups.append(group)

    def add_data_shape(self, shape: DataShape) -> bool:
        if shape.class_name in self.data_shapes:
            return False
        self.data_shapes[shape.class_name] = shape
        return True

    def to_result(self) -> ExtractionResult:
        return ExtractionResult.build(self.route_groups, self.data_shapes.values())


@dataclass(frozen=True)
class _FileExtraction:
    route_groups: list[RouteGroup]
    data_shapes: list[DataShape]


def run_extract(
    source_root: Optional[Path] = None,
    files: Optional[Iterable[str | Path]] = None,
    settings: Optional[ExtractorSettings] = None,
    parser: Optional[JavaParser] = None,
) -> ExtractRun:
    """
    Extract controllers and data shapes from a directory tree or an explicit
    file list (exactly one of the two).

    A file that cannot be read or parsed is dropped with a warning; nothing
    raised while handling one file stops the run.
    """
    if (source_root is None) == (files is None):
        raise ConfigurationError("Give either a source root or a list of files, not both")

    settings = settings or ExtractorSettings()
    parser = parser or get_parser()
    outcomes: list[FileOutcome] = []

    if source_root is not None:
        mode = "directory"
        to_process = scan_source_files(source_root, settings.source_extension, settings.path_marker)
        default_search_root = source_root
        logger.info(f"Found {len(to_process)} candidate files under {source_root}")
    else:
        mode = "files"
        to_process = []
        for admission in admit_files(files or [], settings.source_extension):
            if admission.admitted:
                to_process.append(admission.path)
            else:
                logger.warning(f"Skipping {admission.path}: {admission.reason}")
                outcomes.append(FileOutcome(admission.path, "skipped", message=admission.reason or ""))
        default_search_root = Path(os.getcwd())

    search_root = Path(settings.search_root) if settings.search_root else default_search_root
    resolver = ReferenceResolver(ShapeLocator(search_root, settings))
    acc = ExtractionAccumulator()

    for p in to_process:
        outcomes.append(_process_file(Path(p), acc, resolver, parser, settings))

    result = acc.to_result()
    run = ExtractRun(result=result, outcomes=outcomes, mode=mode)

    if run.files_processed == 0:
        logger.warning("No files were processed; the result is empty")
    logger.info(
        f"Extracted {result.total_methods} methods in {len(result.controllers)} controllers, "
        f"{result.total_data_shapes} data shapes "
        f"(processed={run.files_processed}, skipped={run.files_skipped}, failed={run.files_failed})"
    )
    return run


def _process_file(
    path: Path,
    acc: ExtractionAccumulator,
    resolver: ReferenceResolver,
    parser: JavaParser,
    settings: ExtractorSettings,
) -> FileOutcome:
    try:
        extracted = _extract_file(path, acc, resolver, parser, settings)
    except RestscanError as e:
        logger.warning(f"Skipping {path}: {e}")
        return FileOutcome(str(path), "failed", message=str(e))
    except Exception as e:
        # one broken file must not end the run
        logger.exception(f"Unexpected error while extracting {path}")
        return FileOutcome(str(path), "failed", message=f"{type(e).__name__}: {e}")

    # folded in only once the whole file succeeded
    for group in extracted.route_groups:
        acc.add_route_group(group)
    added = sum(1 for shape in extracted.data_shapes if acc.add_data_shape(shape))

    return FileOutcome(
        str(path),
        "processed",
        controllers=len(extracted.route_groups),
        data_shapes=added,
    )


def _extract_file(
    path: Path,
    acc: ExtractionAccumulator,
    resolver: ReferenceResolver,
    parser: JavaParser,
    settings: ExtractorSettings,
) -> _FileExtraction:
    tree, source = parser.parse_file(path)
    unit = read_compilation_unit(tree, source)

    groups: list[RouteGroup] = []
    shapes: list[DataShape] = []

    for kind, decl in classify_file(path, unit.classes, settings.shape_suffixes):
        if kind is DeclarationKind.DATA_SHAPE:
            shapes.append(extract_data_shape(decl, str(path)))
        elif kind is DeclarationKind.ROUTABLE:
            group = extract_route_group(decl, unit.package)
            groups.append(group)
            known = set(acc.data_shapes) | {s.class_name for s in shapes}
            shapes.extend(resolver.placeholders_for(group, known))

    return _FileExtraction(route_groups=groups, data_shapes=shapes)
