"""User and token CLI commands."""

import typer
from rich.console import Console
from rich.table import Table

from src.splicer.core.services import DbSessionService, JwtGeneratorService
from src.splicer.entities.core.user import User, UserRepository, UserRole
from src.splicer.runtime.context import get_config

console = Console()

users_app = typer.Typer(help="Manage users and issue bearer tokens")


@users_app.command("list")
def list_users() -> None:
    """List every provisioned user."""
    db = DbSessionService()
    with db.session_scope() as session:
        users = UserRepository(session).list_all()

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Email", style="blue")
    table.add_column("Role", style="magenta")
    table.add_column("Subject", style="yellow")
    for user in users:
        table.add_row(user.id, user.name, user.email or "", user.role, user.subject)

    console.print(table)
    console.print(f"\n[green]Found {len(users)} users[/green]")


@users_app.command("create-admin")
def create_admin(
    name: str = typer.Argument(..., help="Display name of the administrator"),
    email: str = typer.Option(..., "--email", "-e", help="Email address"),
    subject: str | None = typer.Option(
        None, "--subject", "-s", help="Token subject (defaults to the email)"
    ),
) -> None:
    """Create (or promote) an administrator and print a bearer token for them."""
    issuer = get_config().jwt.gen_issuer
    subject = subject or email
    db = DbSessionService()

    with db.session_scope() as session:
        repo = UserRepository(session)
        user = repo.get_by_issuer_subject(issuer, subject)
        if user is None:
            user = repo.create(
                User(
                    name=name,
                    email=email,
                    role=UserRole.ADMIN,
                    issuer=issuer,
                    subject=subject,
                )
            )
            console.print(f"[green]✅ Created administrator {user.id}[/green]")
        else:
            user = repo.update(user.model_copy(update={"role": UserRole.ADMIN}))
            console.print(f"[yellow]Promoted existing user {user.id}[/yellow]")

    token = JwtGeneratorService().generate_access_token(
        subject=subject, roles=[UserRole.ADMIN.value], email=email, name=name
    )
    console.print(token)


@users_app.command("token")
def issue_token(
    subject: str = typer.Argument(..., help="Subject claim of the token"),
    role: UserRole = typer.Option(UserRole.USER, "--role", "-r", help="Role claim"),
    name: str | None = typer.Option(None, "--name", "-n", help="Display name claim"),
    email: str | None = typer.Option(None, "--email", "-e", help="Email claim"),
    expires_in: int = typer.Option(
        3600, "--expires-in", help="Token lifetime in seconds"
    ),
) -> None:
    """Print a signed bearer token for local testing."""
    token = JwtGeneratorService().generate_access_token(
        subject=subject,
        roles=[role.value],
        email=email,
        name=name,
        expires_in_seconds=expires_in,
    )
    console.print(token)
