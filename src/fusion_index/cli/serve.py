import typer
from rich.console import Console

from fusion_index.cli.workspace import PatternOption, RootOption, _get_workspace

serve_app = typer.Typer(help="Start servers.")
# stdout belongs to the stdio transport
err_console = Console(stderr=True)


@serve_app.command("mcp")
def mcp(
    root: RootOption = None,
    pattern: PatternOption = None,
    transport: str = "stdio",
) -> None:
    """Start the MCP server over an indexed workspace."""
    from fusion_index.mcp.server import create_mcp_server

    workspace = _get_workspace(root, pattern)
    server = create_mcp_server(workspace)
    err_console.print(f"[green]Starting MCP server (transport: {transport})[/green]")
    server.run(transport=transport)  # type: ignore[arg-type]
