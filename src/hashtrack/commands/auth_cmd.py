"""CLI commands for session management."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from hashtrack.auth import SessionManager
from hashtrack.client import HashtrackClient
from hashtrack.context import AppContext
from hashtrack.exceptions import HashtrackError
from hashtrack.services.users import UserService
from hashtrack.utils.errors import handle_error
from hashtrack.utils.output import OutputFormat, print_output, to_rows

console = Console(stderr=True)


def _build_manager(ctx: typer.Context) -> tuple[HashtrackClient, SessionManager]:
    app_ctx: AppContext = ctx.obj
    client = app_ctx.client()
    return client, SessionManager(client, app_ctx.store)


def login(
    ctx: typer.Context,
    email: Annotated[str, typer.Option("--email", prompt="Email", help="Account email")],
    password: Annotated[str, typer.Option("--password", prompt="Password", hide_input=True, help="Account password")],
) -> None:
    """Create a session for the CLI."""
    app_ctx: AppContext = ctx.obj
    client, manager = _build_manager(ctx)
    try:
        session = manager.login(email, password)
        app_ctx.store.save(session.token)
        console.print("Login succeeded!", style="green")
    except HashtrackError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


def logout(ctx: typer.Context) -> None:
    """Delete the current session."""
    app_ctx: AppContext = ctx.obj
    manager = SessionManager(None, app_ctx.store)
    try:
        manager.logout()
        console.print("Logged out.", style="yellow")
    except HashtrackError as e:
        handle_error(e)
        raise typer.Exit(1)


def status(
    ctx: typer.Context,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Show the user the current session belongs to."""
    app_ctx: AppContext = ctx.obj
    client = app_ctx.client()
    try:
        user = UserService(client).current()
        print_output(to_rows(user), output, columns=["name", "email", "id"], title="Current User")
    except HashtrackError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()
