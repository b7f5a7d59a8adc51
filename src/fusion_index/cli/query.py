from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from fusion_index.cli.workspace import (
    PatternOption,
    RootOption,
    _get_workspace,
    console,
    display_path,
    render_table,
)
from fusion_index.core.query import (
    completions_at,
    definition_at,
    find_prototype,
    list_prototypes,
    prop_children,
    props_of,
    resolve_prop,
)
from fusion_index.index.workspace import read_source

query_app = typer.Typer(help="Query the prototype and prop indexes.")

PrototypeArgument = Annotated[str, typer.Argument(help="Fully qualified prototype name, e.g. Vendor.Site:Card.")]


@query_app.command("prototypes")
def prototypes(
    root: RootOption = None,
    pattern: PatternOption = None,
    file: Annotated[Path | None, typer.Option(help="Only prototypes mentioned in this file.")] = None,
) -> None:
    """List indexed prototype names."""
    workspace = _get_workspace(root, pattern)
    entries = list_prototypes(workspace, str(file) if file else None)
    render_table(
        ["name", "file", "line"],
        [(e.name, display_path(workspace, e.file_id), e.start_position.line + 1) for e in entries],
    )


@query_app.command("prototype")
def prototype(
    name: PrototypeArgument,
    root: RootOption = None,
    pattern: PatternOption = None,
) -> None:
    """Show where a prototype was last seen."""
    workspace = _get_workspace(root, pattern)
    entry = find_prototype(workspace, name)
    if entry is None:
        console.print(f"[red]Prototype not found:[/red] {name}")
        raise typer.Exit(code=1)
    console.print(
        f"{display_path(workspace, entry.file_id)}:{entry.start_position.line + 1}:{entry.start_position.column + 1}",
        highlight=False,
        soft_wrap=True,
    )


@query_app.command("props")
def props(
    name: PrototypeArgument,
    root: RootOption = None,
    pattern: PatternOption = None,
) -> None:
    """List the props indexed for a prototype."""
    workspace = _get_workspace(root, pattern)
    render_table(
        ["path", "source", "file", "start"],
        [
            (p.dotted_path, p.source.value, display_path(workspace, p.file_id), p.start)
            for p in props_of(workspace, name)
        ],
    )


@query_app.command("resolve")
def resolve(
    name: PrototypeArgument,
    path: Annotated[str, typer.Argument(help="Dotted usage path, e.g. props.foo.bar.")],
    root: RootOption = None,
    pattern: PatternOption = None,
) -> None:
    """Resolve a prop usage path to its definition."""
    workspace = _get_workspace(root, pattern)
    match = resolve_prop(workspace, name, path)
    if match is None:
        console.print(f"[red]No definition for[/red] {path} [red]in[/red] {name}")
        raise typer.Exit(code=1)
    render_table(
        ["path", "source", "file", "start", "end"],
        [(match.dotted_path, match.source.value, display_path(workspace, match.file_id), match.start, match.end)],
    )


@query_app.command("children")
def children(
    name: PrototypeArgument,
    path: Annotated[str | None, typer.Argument(help="Dotted prefix path; omit for top-level props.")] = None,
    root: RootOption = None,
    pattern: PatternOption = None,
) -> None:
    """List the prop names that can follow a path."""
    workspace = _get_workspace(root, pattern)
    render_table(["child"], [(child,) for child in prop_children(workspace, name, path)])


@query_app.command("definition")
def definition(
    file: Annotated[Path, typer.Argument(help="Fusion file containing the usage.")],
    offset: Annotated[int, typer.Argument(help="Zero-based character offset of the cursor.")],
    root: RootOption = None,
    pattern: PatternOption = None,
    complete: Annotated[bool, typer.Option(help="List completions instead of the definition.")] = False,
) -> None:
    """Resolve the ``props.`` expression at a file offset."""
    workspace = _get_workspace(root, pattern)
    try:
        source = read_source(str(file))
    except OSError as exc:
        console.print(f"[red]Cannot read {file}:[/red] {exc}")
        raise typer.Exit(code=1) from None

    if complete:
        render_table(["completion"], [(name,) for name in completions_at(workspace, source, offset)])
        return

    match = definition_at(workspace, source, offset)
    if match is None:
        console.print("[red]No definition found[/red]")
        raise typer.Exit(code=1)
    render_table(
        ["path", "source", "file", "start", "end"],
        [(match.dotted_path, match.source.value, display_path(workspace, match.file_id), match.start, match.end)],
    )
