from typing import Annotated

import typer
from rich.console import Console

serve_app = typer.Typer(help="Run the page API.")
console = Console()


@serve_app.command("api")
def api(
    host: str = "127.0.0.1",
    port: int = 8000,
    log_level: Annotated[str, typer.Option(help="Uvicorn log level.")] = "info",
) -> None:
    """Start the page tree REST API with uvicorn."""
    import uvicorn

    from pagetree.api.app import create_app

    console.print(f"[green]Serving page API on http://{host}:{port}[/green] (docs at /docs)")
    uvicorn.run(create_app(), host=host, port=port, log_level=log_level)
