"""CLI commands for reading tweets."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.console import Console

from hashtrack.client import HashtrackClient
from hashtrack.context import AppContext
from hashtrack.exceptions import HashtrackError
from hashtrack.services.tweets import TweetService
from hashtrack.utils.errors import handle_error
from hashtrack.utils.output import OutputFormat, print_output, to_rows

console = Console(stderr=True)


def _build_service(ctx: typer.Context) -> tuple[HashtrackClient, TweetService]:
    app_ctx: AppContext = ctx.obj
    client = app_ctx.client()
    return client, TweetService(client)


def list_tweets(
    ctx: typer.Context,
    filter: Annotated[str, typer.Argument(help="Only tweets matching this text")] = "",
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """List the latest tweets."""
    client, service = _build_service(ctx)
    try:
        tweets = service.latest(filter)
        console.print(f"[dim]Found {len(tweets)} tweets[/dim]")
        print_output(to_rows(tweets), output, columns=["publishedAt", "author", "text"], title="Latest Tweets")
    except HashtrackError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


def watch_tweets(
    ctx: typer.Context,
    filter: Annotated[str, typer.Argument(help="Only tweets matching this text")] = "",
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="table prints one line per tweet, json one object per line")] = OutputFormat.TABLE,
) -> None:
    """Watch for tweets via a subscription."""
    client, service = _build_service(ctx)
    try:
        feed = service.stream(filter)
    except HashtrackError as e:
        client.close()
        handle_error(e)
        raise typer.Exit(1)

    console.print("[dim]Watching for tweets (Ctrl-C to stop)...[/dim]")
    try:
        for tweet in feed:
            if output == OutputFormat.JSON:
                typer.echo(json.dumps(tweet.model_dump(mode="json", by_alias=True)))
            else:
                typer.echo(str(tweet))
    except KeyboardInterrupt:
        console.print("[dim]Stopped.[/dim]")
    finally:
        feed.close()
        client.close()

    if feed.error is not None:
        handle_error(feed.error)
        raise typer.Exit(1)
