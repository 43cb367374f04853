"""CLI commands for tracked hashtags."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from hashtrack.client import HashtrackClient
from hashtrack.context import AppContext
from hashtrack.exceptions import HashtrackError
from hashtrack.services.tracks import TrackService, normalize_hashtag
from hashtrack.utils.errors import handle_error
from hashtrack.utils.output import OutputFormat, print_json, print_output, to_rows

console = Console(stderr=True)


def _build_service(ctx: typer.Context) -> tuple[HashtrackClient, TrackService]:
    app_ctx: AppContext = ctx.obj
    client = app_ctx.client()
    return client, TrackService(client)


def list_tracks(
    ctx: typer.Context,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """List current tracks."""
    client, service = _build_service(ctx)
    try:
        tracks = service.list()
        print_output(to_rows(tracks), output, columns=["prettyName", "hashtag", "id"], title="Tracks")
    except HashtrackError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


def create_track(
    ctx: typer.Context,
    hashtag: Annotated[str, typer.Argument(help="Hashtag to start tracking")],
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Track a new hashtag."""
    if not normalize_hashtag(hashtag):
        raise typer.BadParameter("Expected hashtag name to start tracking", param_hint="HASHTAG")
    client, service = _build_service(ctx)
    try:
        track = service.create(hashtag)
        console.print(f"Now tracking [bold]{track.pretty_name}[/bold]...")
        if output == OutputFormat.JSON:
            print_json(to_rows(track)[0])
    except HashtrackError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


def remove_track(
    ctx: typer.Context,
    hashtag: Annotated[str, typer.Argument(help="Hashtag to untrack")],
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Untrack a hashtag."""
    if not normalize_hashtag(hashtag):
        raise typer.BadParameter("Expected hashtag name to untrack", param_hint="HASHTAG")
    client, service = _build_service(ctx)
    try:
        track = service.remove(hashtag)
        console.print(f"Stopped tracking [bold]{track.pretty_name}[/bold]")
        if output == OutputFormat.JSON:
            print_json(to_rows(track)[0])
    except HashtrackError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()
