from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from restscan.logging_config import setup_logging
from restscan.orchestrator.pipeline import ExtractRun, run_extract
from restscan.settings import ExtractorSettings


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()
err_console = Console(stderr=True)


def _run(
    src: Optional[str],
    files: Optional[List[str]],
    search_root: Optional[str],
    path_marker: Optional[str],
    debug: bool,
) -> ExtractRun:
    setup_logging(debug=debug or None)

    if (src is None) == (not files):
        raise typer.BadParameter("Pass either --src or one or more --file options")

    source_root = None
    if src is not None:
        source_root = Path(src).expanduser()
        if not source_root.is_dir():
            raise typer.BadParameter(f"Source path is not a directory: {source_root}")

    settings = ExtractorSettings.from_env().with_overrides(
        search_root=search_root,
        path_marker=path_marker,
    )
    run = run_extract(
        source_root=source_root,
        files=files if source_root is None else None,
        settings=settings,
    )

    if run.files_processed == 0:
        err_console.print("[bold yellow]warning[/bold yellow]: no files were processed, the result is empty")
    return run


_SRC = typer.Option(None, "--src", help="Directory to scan recursively")
_FILES = typer.Option(None, "--file", "-f", help="Explicit source file (repeatable)")
_SEARCH_ROOT = typer.Option(None, help="Where referenced DTO files are searched")
_PATH_MARKER = typer.Option(None, help="Path substring that admits a file in --src mode")
_DEBUG = typer.Option(False, "--debug", help="Verbose diagnostics on stderr")


@app.command()
def extract(
    src: Optional[str] = _SRC,
    files: Optional[List[str]] = _FILES,
    out: Optional[str] = typer.Option(None, help="Output JSON path (default: print to stdout)"),
    search_root: Optional[str] = _SEARCH_ROOT,
    path_marker: Optional[str] = _PATH_MARKER,
    debug: bool = _DEBUG,
) -> None:
    """Extract controllers, handlers and data shapes as a JSON document."""
    run = _run(src, files, search_root, path_marker, debug)
    result = run.result
    text = result.to_json()

    if not out:
        # plain stdout so the document stays valid JSON
        typer.echo(text)
        return

    out_path = Path(out).expanduser()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(text, encoding="utf-8")

    console.print("[bold green]Extraction completed[/bold green]")
    console.print(
        f"Found {result.total_methods} methods in {len(result.controllers)} controllers, "
        f"{result.total_data_shapes} data shapes"
    )
    console.print(
        f"Files: processed={run.files_processed}, skipped={run.files_skipped}, failed={run.files_failed}"
    )
    console.print(f"Output written to: {out_path}")


@app.command()
def endpoints(
    src: Optional[str] = _SRC,
    files: Optional[List[str]] = _FILES,
    search_root: Optional[str] = _SEARCH_ROOT,
    path_marker: Optional[str] = _PATH_MARKER,
    debug: bool = _DEBUG,
) -> None:
    """List every handler as METHOD / PATH / HANDLER."""
    run = _run(src, files, search_root, path_marker, debug)

    table = Table(show_header=True, header_style="bold")
    table.add_column("METHOD", no_wrap=True)
    table.add_column("PATH")
    table.add_column("HANDLER")
    table.add_column("LINE", no_wrap=True, justify="right")

    for group in run.result.controllers:
        for h in group.handlers:
            table.add_row(
                h.http_method,
                _join_path(group.request_mapping, h.path),
                f"{group.name}.{h.method_name}",
                str(h.line_number),
            )

    console.print(f"[bold]Routes:[/bold] {run.result.total_methods}")
    console.print(table)


@app.command()
def shapes(
    src: Optional[str] = _SRC,
    files: Optional[List[str]] = _FILES,
    search_root: Optional[str] = _SEARCH_ROOT,
    path_marker: Optional[str] = _PATH_MARKER,
    debug: bool = _DEBUG,
) -> None:
    """List the data shapes (DTOs) found or referenced."""
    run = _run(src, files, search_root, path_marker, debug)

    table = Table(show_header=True, header_style="bold")
    table.add_column("CLASS", no_wrap=True)
    table.add_column("FIELDS", justify="right")
    table.add_column("FILE")

    for shape in sorted(run.result.data_shapes, key=lambda s: s.class_name):
        table.add_row(shape.class_name, str(len(shape.fields)), shape.file_path)

    console.print(f"[bold]Data shapes:[/bold] {run.result.total_data_shapes}")
    console.print(table)


def _join_path(prefix: str, path: str) -> str:
    if not prefix:
        return path or "/"
    if not path:
        return prefix
    return prefix.rstrip("/") + "/" + path.lstrip("/")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
