"""
Burrow CLI - Declarative RabbitMQ user management.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .client import BrokerAdminClient
from .models import ManagedUser, UserDiff
from .settings import get_settings
from .users import UserResource

# Setup
app = typer.Typer(
    name="burrow",
    help="Declarative RabbitMQ user management",
    add_completion=False,
)
user_app = typer.Typer(help="Manage broker users", add_completion=False)
app.add_typer(user_app, name="user")
console = Console()


def configure_logging():
    """Configure logging based on settings."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# Configure logging on module import
configure_logging()


@contextmanager
def _user_resource() -> Iterator[UserResource]:
    """Yield a UserResource bound to a client built from settings."""
    settings = get_settings()
    with BrokerAdminClient.from_settings(settings) as client:
        yield UserResource.from_settings(client, settings)


def _create_command_panel(title: str, color: str) -> Panel:
    """Create a Rich Panel for command display.

    Args:
        title: Command title (e.g., "Burrow Apply")
        color: Border color (e.g., "blue", "cyan", "red")

    Returns:
        Formatted Rich Panel
    """
    settings = get_settings()
    return Panel.fit(
        f"[bold {color}]{title}[/bold {color}]\n"
        f"Endpoint: {settings.endpoint}",
        border_style=color,
    )


def _user_table(user: ManagedUser) -> Table:
    table = Table(show_header=False, box=None)
    table.add_column(style="dim")
    table.add_column()
    table.add_row("id", user.id or "-")
    table.add_row("name", user.name)
    table.add_row("tags", ", ".join(user.tags) or "-")
    return table


def _handle_command_error(e: Exception, command_type: str) -> None:
    """Print a command failure and exit.

    Args:
        e: Exception that occurred
        command_type: Type of command (for error message context)

    Raises:
        SystemExit: Always exits with code 1
    """
    console.print(
        f"\n[bold red]✗ {command_type.capitalize()} failed:[/bold red] {e}"
    )
    raise typer.Exit(code=1)


@user_app.command()
def apply(
    name: str = typer.Argument(..., help="Username"),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, help="User password"
    ),
    tags: list[str] = typer.Option(
        [], "--tag", "-t", help="Permission tag (repeatable)"
    ),
):
    """Create the user, or bring an existing one in line with the given values."""
    console.print(_create_command_panel("Burrow Apply", "blue"))

    try:
        with _user_resource() as resource:
            observed = resource.read(resource.import_state(name))
            declared = ManagedUser(name=name, password=password, tags=tags)

            if observed.id is None:
                user = resource.create(declared)
                console.print(f"\n[bold green]✓ Created user {user.name}[/bold green]")
            else:
                # The broker never returns passwords, so the password is always pushed
                diff = UserDiff(before=observed, after=declared)
                user = resource.update(diff)
                console.print(
                    f"\n[bold green]✓ Updated user {user.name}[/bold green] "
                    f"[dim]({', '.join(diff.changed_fields) or 'no changes'})[/dim]"
                )
            console.print(_user_table(user))
    except Exception as e:
        _handle_command_error(e, "apply")


@user_app.command()
def show(name: str = typer.Argument(..., help="Username")):
    """Show a user as the broker reports it."""
    try:
        with _user_resource() as resource:
            user = resource.read(resource.import_state(name))
    except Exception as e:
        _handle_command_error(e, "show")

    if user.id is None:
        console.print(f"[yellow]⚠ User {name} does not exist[/yellow]")
        raise typer.Exit(code=1)
    console.print(_user_table(user))


@user_app.command()
def delete(name: str = typer.Argument(..., help="Username")):
    """Delete a user. Deleting a missing user succeeds."""
    console.print(_create_command_panel("Burrow Delete", "red"))

    try:
        with _user_resource() as resource:
            resource.delete(resource.import_state(name))
    except Exception as e:
        _handle_command_error(e, "delete")

    console.print(f"\n[bold green]✓ Deleted user {name}[/bold green]")


@user_app.command(name="import")
def import_cmd(name: str = typer.Argument(..., help="Username")):
    """Show the state an import of this user would record."""
    try:
        with _user_resource() as resource:
            user = resource.read(resource.import_state(name))
    except Exception as e:
        _handle_command_error(e, "import")

    if user.id is None:
        console.print(f"[bold red]✗ Import failed:[/bold red] user {name} does not exist")
        raise typer.Exit(code=1)
    console.print_json(data=user.to_state())


@app.command()
def version():
    """Show Burrow version."""
    from . import __version__

    console.print(f"Burrow version: [bold]{__version__}[/bold]")


if __name__ == "__main__":
    app()
