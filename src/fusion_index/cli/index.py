from __future__ import annotations

import typer

from fusion_index.cli.workspace import PatternOption, RootOption, _get_workspace, console, render_diagnostics
from fusion_index.core.query import file_diagnostics


def index(
    root: RootOption = None,
    pattern: PatternOption = None,
) -> None:
    """Index every Fusion file in the workspace and report a summary."""
    workspace = _get_workspace(root, pattern)
    props = sum(len(workspace.prop_index.get_props(name)) for name in workspace.prop_index.get_prototype_names())
    console.print(f"[green]Indexed[/green] {len(workspace.files)} file(s)")
    console.print(f"[green]Prototypes[/green] {len(workspace.prototype_index)}")
    console.print(f"[green]Props[/green] {props}")
    render_diagnostics(workspace, file_diagnostics(workspace))


def check(
    root: RootOption = None,
    pattern: PatternOption = None,
) -> None:
    """Report styleguide warnings; exits with code 1 when there are any."""
    workspace = _get_workspace(root, pattern)
    count = render_diagnostics(workspace, file_diagnostics(workspace))
    if count:
        console.print(f"[red]{count} warning(s)[/red]")
        raise typer.Exit(code=1)
    console.print("[green]No warnings[/green]")
