"""Main CLI application module."""

import typer
from rich.console import Console

from src.splicer.runtime.context import get_config

from .user_commands import users_app

console = Console()

app = typer.Typer(
    help="Splicer group-buying API - administration tool",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(users_app, name="users")


@app.command("init-db")
def init_db_command() -> None:
    """Create all database tables."""
    from src.splicer.runtime.init_db import init_db

    init_db()
    console.print(
        f"[green]✅ Database ready at {get_config().database.url}[/green]"
    )


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    cfg = get_config().app
    uvicorn.run(
        "src.splicer.api.http.app:create_app",
        factory=True,
        host=host or cfg.host,
        port=port or cfg.port,
        reload=reload,
        access_log=False,  # request logs come from our middleware
    )


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
