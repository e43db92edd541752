import typer

from pagetree.cli.db import db_app
from pagetree.cli.pages import pages_app
from pagetree.cli.serve import serve_app

app = typer.Typer(
    name="pagetree",
    help="Pagetree CLI: manage CMS pages and their materialized paths.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.add_typer(db_app, name="db")
app.add_typer(pages_app, name="pages")
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
