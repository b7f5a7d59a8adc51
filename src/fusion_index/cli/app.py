import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from fusion_index.cli.index import check, index
from fusion_index.cli.query import query_app
from fusion_index.cli.serve import serve_app
from fusion_index.cli.watch import watch
from fusion_index.config import load_settings

app = typer.Typer(
    name="fusion-index",
    help="Find Fusion prototypes, their props and styleguide warnings.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def configure_logging(level: str) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output.")] = False,
    log_level: Annotated[str | None, typer.Option(help="Log level (default $FUSION_INDEX_LOG_LEVEL or WARNING).")] = None,
) -> None:
    try:
        settings = load_settings(log_level=log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from None
    configure_logging("DEBUG" if verbose else settings.log_level)


app.command("index")(index)
app.command("check")(check)
app.command("watch")(watch)
app.add_typer(query_app, name="query")
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
