from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path
from typing import Annotated

import typer

from fusion_index.cli.workspace import (
    PatternOption,
    RootOption,
    _get_settings,
    _open_workspace,
    console,
    display_path,
    render_diagnostics,
)
from fusion_index.core.ports.watcher import ChangeCallback
from fusion_index.index.workspace import WorkspaceIndex
from fusion_index.watcher.watchfiles_adapter import WatchfilesWatcher


def make_change_handler(workspace: WorkspaceIndex) -> ChangeCallback:
    """Build the watcher callback that re-indexes changed files and prints their diagnostics."""

    async def _on_change(paths: set[Path]) -> None:
        results = await asyncio.to_thread(workspace.apply_changes, paths)
        for file_id, ok in results.items():
            label = "[green]Re-indexed[/green]" if ok else "[red]Failed[/red]"
            console.print(f"{label} {display_path(workspace, file_id)}", highlight=False, soft_wrap=True)
            render_diagnostics(workspace, {file_id: workspace.get_diagnostics(file_id)})

    return _on_change


def watch(
    root: RootOption = None,
    pattern: PatternOption = None,
    debounce_ms: Annotated[int | None, typer.Option(help="Milliseconds to batch file changes.")] = None,
) -> None:
    """Index the workspace and keep it current while Fusion files change."""
    settings = _get_settings(root, pattern)
    workspace = _open_workspace(settings)
    console.print(f"[green]Indexed[/green] {len(workspace.files)} file(s); watching {settings.root}")
    render_diagnostics(workspace, workspace.all_diagnostics())

    watcher = WatchfilesWatcher(
        settings.root,
        make_change_handler(workspace),
        debounce_ms=debounce_ms if debounce_ms is not None else settings.debounce_ms,
    )

    async def _run() -> None:
        await watcher.start()
        try:
            await asyncio.Event().wait()
        finally:
            await watcher.stop()

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run())
