"""Shared CLI plumbing: workspace loading and output rendering."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from fusion_index.config import Settings, load_settings
from fusion_index.index.workspace import WorkspaceIndex
from fusion_index.models import Diagnostic

console = Console()

RootOption = Annotated[
    Path | None,
    typer.Option("--root", "-r", help="Workspace root (defaults to $FUSION_INDEX_ROOT or the current directory)."),
]
PatternOption = Annotated[str | None, typer.Option(help="Glob for Fusion files below the root.")]


def _get_settings(root: Path | None, pattern: str | None) -> Settings:
    try:
        return load_settings(root=root, pattern=pattern)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from None


def _get_workspace(root: Path | None = None, pattern: str | None = None) -> WorkspaceIndex:
    return _open_workspace(_get_settings(root, pattern))


def _open_workspace(settings: Settings) -> WorkspaceIndex:
    workspace = WorkspaceIndex(settings.root, settings.pattern, neutralize=settings.neutralize)
    try:
        workspace.initialize()
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from None
    return workspace


def render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def render_diagnostics(workspace: WorkspaceIndex, diagnostics: dict[str, list[Diagnostic]]) -> int:
    """Print warnings as ``file:line:column: message`` and return how many there were."""
    count = 0
    for file_id, diags in sorted(diagnostics.items()):
        for diag in diags:
            console.print(
                f"{display_path(workspace, file_id)}:{diag.start.line + 1}:{diag.start.column + 1}: "
                f"[yellow]{diag.severity.value}[/yellow] {diag.message}",
                highlight=False,
                soft_wrap=True,
            )
            count += 1
    return count


def display_path(workspace: WorkspaceIndex, file_id: str) -> str:
    """Show ``file_id`` relative to the workspace root when it lives below it."""
    if workspace.root is None:
        return file_id
    try:
        return Path(file_id).relative_to(workspace.root).as_posix()
    except ValueError:
        return file_id
