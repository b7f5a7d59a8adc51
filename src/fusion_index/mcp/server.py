"""FastMCP server exposing fusion-index lookups."""

from __future__ import annotations

import asyncio
from typing import Any

from fastmcp import FastMCP

from fusion_index.core.query import (
    file_diagnostics as _file_diagnostics,
)
from fusion_index.core.query import (
    find_prototype as _find_prototype,
)
from fusion_index.core.query import (
    list_prototypes as _list_prototypes,
)
from fusion_index.core.query import (
    prop_children as _prop_children,
)
from fusion_index.core.query import (
    resolve_prop as _resolve_prop,
)
from fusion_index.index.workspace import WorkspaceIndex


def create_mcp_server(workspace: WorkspaceIndex) -> FastMCP:
    """Create a FastMCP server wired to the given workspace index."""

    mcp = FastMCP("fusion-index", instructions="Look up Fusion prototypes, their props and styleguide warnings.")

    @mcp.tool()
    async def list_prototypes(file: str | None = None) -> list[str]:
        """List indexed prototype names, optionally only those mentioned in one file."""
        return [entry.name for entry in _list_prototypes(workspace, file)]

    @mcp.tool()
    async def find_prototype(name: str) -> dict[str, Any] | None:
        """Return the file and position where a prototype was last seen."""
        entry = _find_prototype(workspace, name)
        if entry is None:
            return None
        return {
            "name": entry.name,
            "file": entry.file_id,
            "line": entry.start_position.line,
            "column": entry.start_position.column,
            "start": entry.start,
            "end": entry.end,
        }

    @mcp.tool()
    async def resolve_prop(prototype: str, path: str) -> dict[str, Any] | None:
        """Resolve a dotted prop usage path (e.g. props.foo.bar) inside a prototype."""
        match = _resolve_prop(workspace, prototype, path)
        if match is None:
            return None
        return {
            "path": list(match.prop_path),
            "source": match.source.value,
            "file": match.file_id,
            "start": match.start,
            "end": match.end,
        }

    @mcp.tool()
    async def prop_children(prototype: str, path: str | None = None) -> list[str]:
        """List the prop names that can follow a dotted path inside a prototype."""
        return _prop_children(workspace, prototype, path)

    @mcp.tool()
    async def diagnostics(file: str | None = None) -> dict[str, list[dict[str, Any]]]:
        """Return styleguide warnings, for one file or the whole workspace."""
        return {
            file_id: [diag.model_dump(mode="json") for diag in diags]
            for file_id, diags in _file_diagnostics(workspace, file).items()
        }

    @mcp.tool()
    async def reindex_file(file: str, source: str | None = None, live_edit: bool = False) -> str:
        """Re-index one file, from disk or from the given unsaved source."""
        if await asyncio.to_thread(workspace.index_file, file, source, live_edit=live_edit):
            return f"Indexed {file}"
        return f"Not indexed {file}; previous state kept"

    return mcp
